"""Minimal HTML samples for extraction tests, based on Baseball Savant leaderboards."""

# --- Statcast hitting leaderboard ---

# Two hitters; the second has a null barrel_ct and no pos field.
STATCAST_PAGE = """
<!DOCTYPE html>
<html>
<head>
<script src="/js/vendor.js"></script>
<script type="text/javascript">
    window.dataLayer = window.dataLayer || [];
</script>
</head>
<body>
<div id="leaderboard_statcast"></div>
<script type="text/javascript">
    var year = 2025;
    var leaderboard_data = [{"entity_id": 660271, "entity_name": "Ohtani, Shohei", "entity_team_name": "LAD", "pos": "10", "g": 158, "pa": 727, "ab": 611, "h": 172, "r": 146, "rbi": 102, "hr": 55, "doubles": 25, "triples": 9, "sb": 20, "bb": 109, "k": 187, "barrel_ct": 89, "est_woba": "0.421", "est_ba": "0.279", "est_slg": "0.615", "hard_hit_percent": 59.7, "exit_velocity_max": 120.0, "exit_velocity_avg": 95.8, "distance_max": 476, "launch_angle_avg": 17.1, "sweet_spot_percent": 34.9}, {"entity_id": 665742, "entity_name": "Soto, Juan", "entity_team_name": "NYM", "g": 160, "pa": 715, "ab": 577, "h": 151, "r": 120, "rbi": 105, "hr": 43, "doubles": 20, "triples": 1, "sb": 38, "bb": 127, "k": 137, "barrel_ct": null, "est_woba": "0.405", "est_ba": null, "est_slg": "0.548", "hard_hit_percent": 55.1, "exit_velocity_max": 116.8, "exit_velocity_avg": 94.2, "distance_max": 444, "launch_angle_avg": 12.4, "sweet_spot_percent": null}];
    renderLeaderboard(leaderboard_data);
</script>
</body>
</html>
"""

# --- Batted-ball leaderboard ---

# Matches Ohtani; 999999 has no hitting line.
BATTED_BALL_PAGE = """
<html>
<body>
<script>
var leaderboard_data = [
  {"savant_batter_id": 660271, "gb_rate": 0.382, "fb_rate": 0.271, "ld_rate": 0.246, "pull_rate": 0.445, "oppo_rate": 0.226},
  {"savant_batter_id": 999999, "gb_rate": 0.5, "fb_rate": 0.2, "ld_rate": 0.2, "pull_rate": 0.4, "oppo_rate": 0.2}
];
</script>
</body>
</html>
"""

# --- Layout variants ---

# No trailing semicolon after the array.
NO_SEMICOLON_PAGE = """
<script>
var leaderboard_data = [{"entity_id": 1, "entity_name": "Player, One"}]
buildTable()
</script>
"""

# Records holding arrays, no trailing semicolon.
NESTED_ARRAY_PAGE = """
<script>
var leaderboard_data = [{"entity_id": "1", "entity_name": "A", "tags": ["x"]}, {"entity_id": "2", "entity_name": "B", "tags": ["y", "z"]}]
renderLeaderboard(leaderboard_data)
</script>
"""

# Square brackets inside a string value.
BRACKET_IN_NAME_PAGE = """
<script>
var leaderboard_data = [{"entity_id": 11, "entity_name": "Smith [Jr]"}, {"entity_id": 12, "entity_name": "Jones, Ed"}];
</script>
"""

# Data embedded as an object key instead of a variable.
OBJECT_KEY_PAGE = """
<script>
window.__INITIAL_STATE__ = {"year": 2025, "leaderboard_data": [{"entity_id": 2, "entity_name": "Player, Two"}]}
</script>
"""

# Marker appears only inside a comment-like string with no array assignment.
MARKER_WITHOUT_ARRAY_PAGE = """
<script>
// leaderboard_data is loaded lazily
fetch('/api/leaderboard_data');
</script>
"""

NO_MARKER_PAGE = """
<html>
<body>
<script>var other_data = [{"a": 1}];</script>
<table><tr><td>Judge, Aaron</td></tr></table>
</body>
</html>
"""

# Marker in a non-script element only.
MARKER_OUTSIDE_SCRIPT_PAGE = """
<div data-source="leaderboard_data">var leaderboard_data = [{"entity_id": 3}];</div>
"""

BAD_JSON_PAGE = """
<script>
var leaderboard_data = [{entity_id: 1, 'entity_name': undefined}];
</script>
"""

NOT_OBJECTS_PAGE = """
<script>
var leaderboard_data = [1, 2, 3];
</script>
"""

EMPTY_ARRAY_PAGE = """
<script>
var leaderboard_data = [];
</script>
"""
