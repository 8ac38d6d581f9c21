"""
Error taxonomy for the job scraper.

Only the page fetcher and URL validation raise; the scraper service is the
single place that turns any of these into a structured failure response.
"""
from typing import Optional


class ScraperError(Exception):
    """Base class for all scraper errors."""


class InvalidURL(ScraperError):
    """URL has no scheme/host or cannot be parsed."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class FetchFailed(ScraperError):
    """Page could not be retrieved (network, DNS, timeout, bad status)."""

    def __init__(self, url: str, hint: str, status_code: Optional[int] = None):
        super().__init__(hint)
        self.url = url
        self.hint = hint
        self.status_code = status_code


class ExtractionEmpty(ScraperError):
    """An extractor ran but produced no title."""

    def __init__(self, extractor: str):
        super().__init__(f"{extractor} extractor found no job title")
        self.extractor = extractor


class ScrapeTimeout(ScraperError):
    """The global per-call deadline was exceeded."""

    def __init__(self, seconds: float):
        super().__init__("Scraping timeout: Request took too long")
        self.seconds = seconds


class PersistenceFailure(ScraperError):
    """Learning store could not be read or written."""
