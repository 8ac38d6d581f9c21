"""
Page fetcher for job postings.

One GET per call with a rotated browser user agent, a hard timeout and a
redirect limit. No retries: the caller decides what to do with a failure.
"""
import time
import random
import logging
from typing import Optional, Dict, List

import httpx

from core.errors import FetchFailed
from core.scraper_config import get_scraper_config

logger = logging.getLogger(__name__)

USER_AGENTS: List[str] = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:121.0) Gecko/20100101 Firefox/121.0",
]


class RawPage:
    """Fetched HTML; treat as immutable."""

    def __init__(self, url: str, final_url: str, status_code: int, html: str):
        self.url = url
        self.final_url = final_url
        self.status_code = status_code
        self.html = html

    def __repr__(self):
        return f"RawPage(url={self.url}, status={self.status_code}, chars={len(self.html)})"


def describe_fetch_error(e: Exception) -> str:
    """Map an httpx exception to a human-readable hint."""
    if isinstance(e, httpx.TimeoutException):
        return "Request timed out - the site may be slow or blocking automated requests"
    if isinstance(e, httpx.TooManyRedirects):
        return "Too many redirects - the posting may have moved or require login"
    if isinstance(e, httpx.ConnectError):
        return "Could not connect to the site - check the URL or try again later"
    if isinstance(e, httpx.HTTPStatusError):
        return describe_status(e.response.status_code)
    return f"Failed to fetch page: {type(e).__name__}"


def describe_status(status_code: int) -> str:
    if status_code in (401, 403):
        return "Access denied - the site may be blocking automated requests"
    if status_code == 404:
        return "Job posting not found - it may have been removed"
    if status_code == 429:
        return "Rate limited by the site - try again later"
    if status_code >= 500:
        return "The site is temporarily unavailable"
    return f"HTTP error: {status_code}"


class PageFetcher:
    """Fetches a single job page over HTTP."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        max_size_kb: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = get_scraper_config()
        self.timeout = httpx.Timeout(timeout if timeout is not None else config.fetch_timeout)
        self.max_redirects = max_redirects if max_redirects is not None else config.max_redirects
        self.max_size_kb = max_size_kb if max_size_kb is not None else config.max_page_kb
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        """Browser-like headers with a randomly chosen user agent."""
        return {
            "User-Agent": random.choice(USER_AGENTS),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }

    async def fetch(self, url: str) -> RawPage:
        """
        GET a page and return its HTML.

        Redirects are followed (up to max_redirects) and the final status is
        validated: 2xx and 3xx are accepted.

        Raises:
            FetchFailed: on timeout, DNS/connection errors, too many redirects
                or a 4xx/5xx final status
        """
        client_kwargs = {
            "timeout": self.timeout,
            "follow_redirects": True,
            "max_redirects": self.max_redirects,
        }
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        async with httpx.AsyncClient(**client_kwargs) as client:
            start_time = time.time()
            try:
                response = await client.get(url, headers=self._get_headers())
            except httpx.HTTPError as e:
                hint = describe_fetch_error(e)
                logger.error(f"[net] GET failed {url}: {hint} ({e})")
                raise FetchFailed(url, hint) from e
            except (httpx.InvalidURL, ValueError) as e:
                # httpx.InvalidURL and IDNA errors are not HTTPError subclasses
                hint = f"Invalid URL - the address could not be requested ({type(e).__name__})"
                logger.error(f"[net] GET failed {url}: {hint} ({e})")
                raise FetchFailed(url, hint) from e

            elapsed_ms = int((time.time() - start_time) * 1000)
            content_length = len(response.content)
            logger.info(f"[net] GET {response.status_code} {url} ({content_length} bytes, {elapsed_ms}ms)")

            if not 200 <= response.status_code < 400:
                hint = describe_status(response.status_code)
                logger.error(f"[net] Rejected status {response.status_code} for {url}: {hint}")
                raise FetchFailed(url, hint, status_code=response.status_code)

            html = response.text
            limit = self.max_size_kb * 1024
            if self.max_size_kb and len(html) > limit:
                logger.warning(f"[net] Content too large: {len(html)} chars (limit: {self.max_size_kb}KB) - {url}")
                html = html[:limit]

            return RawPage(
                url=url,
                final_url=str(response.url),
                status_code=response.status_code,
                html=html,
            )
