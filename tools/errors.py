"""Exception types shared by the scrape pipeline and the API."""


class StatsError(Exception):
    """Base class for all pipeline and query failures."""


class FetchError(StatsError):
    """Network or HTTP failure while fetching a source page."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ExtractionError(StatsError):
    """The page was fetched but its embedded data could not be used."""


class NotFoundError(ExtractionError):
    """No script block or pattern matched the embedded data."""


class ParseError(ExtractionError):
    """The embedded data was located but is not a JSON array of records."""


class RecordWriteError(StatsError):
    """A single record could not be written to the store."""


class QueryError(StatsError):
    """A read against the store failed."""
