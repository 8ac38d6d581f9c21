"""
Generic extraction plugins.

Provide fallback extraction using common job posting patterns. These are
the default when no site-specific plugin matches or when one fails:

- GenericPlugin: short list of broad selectors
- AdvancedGenericPlugin: JSON-LD first, then a larger attribute-substring
  selector ladder filtered by content-shape heuristics
"""
import logging
from typing import Callable, Optional, Sequence

from bs4 import BeautifulSoup

from .base import ExtractionPlugin, PluginResult
from core.rules import Rule, RuleTable
from core.site_classifier import SiteId
from pipeline.jsonld import JSONLDExtractor
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)

SALARY_RULES = RuleTable('salary', [
    Rule(
        'amount_per_period',
        r'\$[\d,]+(?:\.\d+)?k?(?:\s*-\s*\$?[\d,]+(?:\.\d+)?k?)?\s*(?:per\s+|/\s*|an?\s+)?(?:year|month|hour|week)',
    ),
    Rule(
        'labelled_amount',
        r'(?:salary|compensation|pay)\s*:\s*\$[\d,]+(?:\s*-\s*\$?[\d,]+)?',
    ),
    Rule(
        'currency_code',
        r'(?:USD|CAD|EUR|GBP|INR)\s*[\d,]+(?:\s*-\s*[\d,]+)?',
    ),
])

# Text that shows up in title-ish elements but is navigation, not a job
NAV_TEXT = ('Home', 'About')


def find_salary(text: Optional[str]) -> str:
    """First salary-looking phrase in text, or ''."""
    return SALARY_RULES.first(text) or ''


def length_between(low: int, high: int) -> Callable[[str], bool]:
    """Exclusive length bounds, as used by the shape filters."""
    return lambda text: low < len(text) < high


def longer_than(minimum: int) -> Callable[[str], bool]:
    return lambda text: len(text) > minimum


def looks_like_title(text: str) -> bool:
    return 5 < len(text) < 100 and not any(nav in text for nav in NAV_TEXT)


class GenericPlugin(ExtractionPlugin):
    """Generic fallback plugin for job extraction"""

    TITLE_SELECTORS = ['h1', '.job-title', '.title', '[class*="title"]', '[id*="title"]', 'h2', 'h3']
    COMPANY_SELECTORS = [
        '.company', '.company-name', '.employer', '.employer-name',
        '[class*="company"]', '[id*="company"]',
    ]
    LOCATION_SELECTORS = ['.location', '.job-location', '[class*="location"]', '[id*="location"]']
    DESCRIPTION_SELECTORS = [
        '.description', '.job-description', '.content', '.details',
        '[class*="description"]', '[id*="description"]', 'article', '.job-content',
    ]

    def __init__(self, name: str = "generic"):
        super().__init__(name=name, site_id=SiteId.GENERIC)

    def select_matching(
        self,
        soup: BeautifulSoup,
        selectors: Sequence[str],
        accept: Callable[[str], bool],
    ) -> str:
        """First selector whose first element's text passes the shape filter."""
        for selector in selectors:
            text = self.element_text(soup.select_one(selector))
            if text and accept(text):
                return text
        return ''

    def finish(self, record: JobRecord) -> PluginResult:
        if not record.skills:
            record.skills = self.skills_from(record.description)
        if not record.salary:
            record.salary = find_salary(record.description)
        self.logger.debug(f"[plugin:{self.name}] fields={record.present_fields()}")
        return PluginResult(record)

    def extract(self, html: Optional[str], url: str) -> PluginResult:
        """
        Extract a job using broad selectors.

        Returns:
            PluginResult; ok is False when no title was found
        """
        if not html:
            return PluginResult(JobRecord(apply_link=url), ok=False, message="No page content")

        soup = self.get_soup(html)
        record = JobRecord(
            title=self.select_matching(soup, self.TITLE_SELECTORS, length_between(5, 100)),
            company=self.select_matching(soup, self.COMPANY_SELECTORS, length_between(2, 50)),
            location=self.select_matching(soup, self.LOCATION_SELECTORS, length_between(3, 50)),
            description=self.select_matching(soup, self.DESCRIPTION_SELECTORS, longer_than(100)),
            apply_link=url,
        )
        return self.finish(record)


class AdvancedGenericPlugin(GenericPlugin):
    """Last-resort plugin: structured data, then an attribute-based selector ladder"""

    TITLE_SELECTORS = [
        'h1',
        '[class*="title"]', '[id*="title"]',
        '[class*="job-title"]', '[id*="job-title"]',
        '[class*="position"]', '[id*="position"]',
        '[class*="role"]', '[id*="role"]',
        'meta[property="og:title"]', 'meta[name="title"]',
        '[itemprop="title"]',
        '[data-testid*="title"]', '[data-test*="title"]',
    ]
    COMPANY_SELECTORS = [
        '[class*="company"]', '[id*="company"]',
        '[class*="employer"]', '[id*="employer"]',
        '[class*="organization"]', '[id*="organization"]',
        '[itemprop="hiringOrganization"]', '[itemprop="name"]',
        'meta[property="og:site_name"]',
        '[data-testid*="company"]', '[data-test*="company"]',
    ]
    LOCATION_SELECTORS = [
        '[class*="location"]', '[id*="location"]',
        '[class*="address"]', '[id*="address"]',
        '[itemprop="jobLocation"]', '[itemprop="address"]',
        '[data-testid*="location"]', '[data-test*="location"]',
    ]
    DESCRIPTION_SELECTORS = [
        '[class*="description"]', '[id*="description"]',
        '[class*="content"]', '[id*="content"]',
        '[class*="details"]', '[id*="details"]',
        '[itemprop="description"]',
        'article', '.job-content', '.posting-content', '.job-details',
        '[data-testid*="description"]', '[data-test*="description"]',
    ]

    def __init__(self):
        super().__init__(name="advanced_generic")
        self.jsonld = JSONLDExtractor()

    def extract(self, html: Optional[str], url: str) -> PluginResult:
        if not html:
            return PluginResult(JobRecord(apply_link=url), ok=False, message="No page content")

        soup = self.get_soup(html)
        structured = self.jsonld.extract(soup)
        if structured:
            self.logger.info(f"[plugin:{self.name}] JSON-LD JobPosting found: {sorted(structured)}")

        record = JobRecord(apply_link=url, **structured)
        if not record.title:
            record.title = self.select_matching(soup, self.TITLE_SELECTORS, looks_like_title)
        if not record.company:
            record.company = self.select_matching(soup, self.COMPANY_SELECTORS, length_between(2, 50))
        if not record.location:
            record.location = self.select_matching(soup, self.LOCATION_SELECTORS, length_between(3, 100))
        if not record.description:
            record.description = self.select_matching(soup, self.DESCRIPTION_SELECTORS, longer_than(200))

        result = self.finish(record)
        result.metadata['jsonld'] = bool(structured)
        return result
