"""
Amazon Jobs plugin.

amazon.jobs pages are frequently rendered client-side or refuse automated
clients, so this plugin never fails: if the page is missing or cannot be
parsed, the record is rebuilt from the URL.
"""
import logging
from typing import Optional

from .base import ExtractionPlugin, PluginResult
from .url_fallback import FALLBACK_SKILLS, infer_level, lookup_location, title_from_last_segment
from core.site_classifier import SiteId
from core.url_analyzer import analyze_url
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)

AMAZON_FALLBACK_DESCRIPTION = (
    "Amazon job posting. Please visit the original link for complete details and to apply."
)

AMAZON_LOCATIONS = {
    'chennai': 'Chennai, TN',
    'bangalore': 'Bangalore, KA',
    'hyderabad': 'Hyderabad, TG',
    'mumbai': 'Mumbai, MH',
    'delhi': 'Delhi, DL',
    'pune': 'Pune, MH',
    'gurgaon': 'Gurgaon, HR',
    'noida': 'Noida, UP',
    'remote': 'Remote',
    'hybrid': 'Hybrid',
}


class AmazonPlugin(ExtractionPlugin):
    """Plugin for amazon.jobs postings with URL fallback"""

    tolerates_missing_page = True

    TITLE_SELECTORS = ['.job-title', 'h1', '[data-testid="job-title"]', '.job-details-title']
    LOCATION_SELECTORS = ['.job-location', '.location', '[data-testid="job-location"]']
    DESCRIPTION_SELECTORS = ['.job-description', '.description', '.job-details-description']

    def __init__(self):
        super().__init__(name="amazon", site_id=SiteId.AMAZON)

    def extract(self, html: Optional[str], url: str) -> PluginResult:
        if not html:
            self.logger.warning(f"[plugin:amazon] No page for {url}, using URL fallback")
            return self.fallback(url)

        try:
            return self._extract_page(html, url)
        except Exception as e:
            self.logger.warning(f"[plugin:amazon] Page extraction failed for {url}: {e}, using URL fallback")
            return self.fallback(url)

    def _extract_page(self, html: str, url: str) -> PluginResult:
        soup = self.get_soup(html)
        record = JobRecord(company='Amazon', apply_link=url)
        record.title = self.select_text(soup, self.TITLE_SELECTORS)
        record.location = self.select_text(soup, self.LOCATION_SELECTORS)
        record.description = self.select_text(soup, self.DESCRIPTION_SELECTORS)
        record.skills = self.skills_from(record.description)

        if not record.title or not record.description:
            hints = analyze_url(url)
            if not record.title and hints.title:
                record.title = hints.title
            if not record.location and hints.location:
                record.location = hints.location

        if not record.title:
            self.logger.info("[plugin:amazon] No title on page or in URL hints, using URL fallback")
            return self.fallback(url)

        return PluginResult(record, metadata={'fallback': False})

    def fallback(self, url: str) -> PluginResult:
        """Record built from the URL alone."""
        job_type, experience = infer_level(url)
        record = JobRecord(
            title=title_from_last_segment(url),
            company='Amazon',
            location=lookup_location(url, AMAZON_LOCATIONS),
            description=AMAZON_FALLBACK_DESCRIPTION,
            skills=list(FALLBACK_SKILLS),
            job_type=job_type or '',
            experience=experience or '',
            apply_link=url,
        )
        return PluginResult(record, metadata={'fallback': True})
