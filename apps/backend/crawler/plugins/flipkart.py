"""
Flipkart Careers plugin.

Flipkart career pages are JavaScript-heavy, so the record is built from the
URL first ("software-development-engineer-iii" -> "Software Development
Engineer III") and only enriched from the page when it can be fetched.
Never fails.
"""
import logging
from typing import Optional

from .base import ExtractionPlugin, PluginResult
from .url_fallback import FALLBACK_SKILLS, lookup_location, title_from_last_segment
from core.site_classifier import SiteId
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)

FLIPKART_FALLBACK_DESCRIPTION = (
    "Flipkart job posting. Please visit the original link for complete details and to apply."
)
FLIPKART_SKILLS = FALLBACK_SKILLS + ['E-commerce']
PAGE_TITLE_SUFFIXES = (' - Flipkart Careers', ' | Flipkart Careers')
MIN_PAGE_DESCRIPTION = 100

FLIPKART_LOCATIONS = {
    'bangalore': 'Bangalore, Karnataka',
    'karnataka': 'Bangalore, Karnataka',
    'mumbai': 'Mumbai, Maharashtra',
    'delhi': 'Delhi, Delhi',
    'gurgaon': 'Gurgaon, Haryana',
    'noida': 'Noida, Uttar Pradesh',
    'hyderabad': 'Hyderabad, Telangana',
    'chennai': 'Chennai, Tamil Nadu',
    'pune': 'Pune, Maharashtra',
    'remote': 'Remote',
    'hybrid': 'Hybrid',
}


def experience_from_title(title: str) -> str:
    """Seniority from title words; roman grade suffixes count (III+ senior, II mid, I entry)."""
    words = title.lower().split()
    if 'senior' in words or any(w in ('iii', 'iv', 'v') for w in words):
        return 'Senior'
    if 'junior' in words or 'i' in words or 'intern' in words:
        return 'Entry'
    if 'mid' in words or 'ii' in words:
        return 'Mid'
    return ''


def strip_page_title(page_title: str) -> str:
    for suffix in PAGE_TITLE_SUFFIXES:
        page_title = page_title.replace(suffix, '')
    return page_title.strip()


class FlipkartPlugin(ExtractionPlugin):
    """Plugin for flipkartcareers.com with URL-first extraction"""

    tolerates_missing_page = True

    DESCRIPTION_SELECTORS = ['.job-description', '.description', '[class*="description"]']

    def __init__(self):
        super().__init__(name="flipkart", site_id=SiteId.FLIPKART)

    def from_url(self, url: str) -> JobRecord:
        title = title_from_last_segment(url)
        return JobRecord(
            title=title,
            company='Flipkart',
            location=lookup_location(url, FLIPKART_LOCATIONS),
            description=FLIPKART_FALLBACK_DESCRIPTION,
            skills=list(FLIPKART_SKILLS),
            experience=experience_from_title(title),
            apply_link=url,
        )

    def extract(self, html: Optional[str], url: str) -> PluginResult:
        record = self.from_url(url)
        if not html:
            self.logger.warning(f"[plugin:flipkart] No page for {url}, using URL-based data only")
            return PluginResult(record, metadata={'enriched': False})

        try:
            soup = self.get_soup(html)
            if not record.title:
                title_tag = soup.find('title')
                page_title = strip_page_title(title_tag.get_text(strip=True)) if title_tag else ''
                if page_title:
                    record.title = page_title
                    record.experience = experience_from_title(page_title)

            description = self.select_text(soup, self.DESCRIPTION_SELECTORS)
            if len(description) > MIN_PAGE_DESCRIPTION:
                record.description = description
                record.skills = self.skills_from(description)
        except Exception as e:
            self.logger.warning(f"[plugin:flipkart] Page enrichment failed for {url}: {e}, using URL-based data only")
            return PluginResult(self.from_url(url), metadata={'enriched': False})

        return PluginResult(record, metadata={'enriched': True})
