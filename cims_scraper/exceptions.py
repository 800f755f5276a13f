"""
Error types raised by the scraper.

Every failure that aborts a run derives from ScraperError so the
orchestrator and the CLI can handle them in one place.
"""


class ScraperError(Exception):
    """Base class for all scraper failures."""


class NetworkError(ScraperError):
    """A request failed or the server answered with a non-success status."""

    def __init__(self, url: str, message: str, status_code: int = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message} ({url})")


class TokenNotFoundError(ScraperError):
    """The bootstrap page does not carry the expected security token."""


class ParseError(ScraperError):
    """Expected markup structure is missing or malformed."""


class PersistenceError(ScraperError):
    """The output document could not be written."""
