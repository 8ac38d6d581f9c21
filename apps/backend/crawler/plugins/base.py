"""
Base plugin interface for job page extraction.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
from bs4 import BeautifulSoup

from core.site_classifier import SiteId
from core.skills import skill_extractor
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)


class PluginResult:
    """Result from plugin extraction"""
    def __init__(
        self,
        record: JobRecord,
        ok: Optional[bool] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict] = None
    ):
        self.record = record
        # A result counts as successful once it has a title
        self.ok = record.has('title') if ok is None else ok
        self.message = message
        self.metadata = metadata or {}

    def is_success(self) -> bool:
        """Check if extraction was successful"""
        return self.ok

    def __repr__(self):
        return f"PluginResult(ok={self.ok}, fields={self.record.present_fields()})"


class ExtractionPlugin(ABC):
    """
    Base class for extraction plugins.

    A plugin turns the HTML of a single job posting into a JobRecord.
    Each plugin:
    1. Declares which job board it serves (site_id)
    2. Extracts fields from the page with ordered selector candidates
    3. Optionally works without a page (tolerates_missing_page), building
       the record from the URL alone
    """

    # Set by plugins that can produce a record when the fetch failed
    tolerates_missing_page = False

    def __init__(self, name: str, site_id: SiteId = SiteId.GENERIC):
        """
        Initialize plugin.

        Args:
            name: Plugin name (e.g., 'linkedin', 'generic')
            site_id: Job board this plugin is registered for
        """
        self.name = name
        self.site_id = site_id
        self.logger = logging.getLogger(f"{__name__}.{name}")

    @abstractmethod
    def extract(self, html: Optional[str], url: str) -> PluginResult:
        """
        Extract a job record from a posting page.

        Args:
            html: Page HTML, or None when the fetch failed (only passed to
                plugins with tolerates_missing_page)
            url: Job posting URL

        Returns:
            PluginResult with the extracted record
        """
        pass

    def get_soup(self, html: str) -> BeautifulSoup:
        """Helper to create BeautifulSoup instance"""
        return BeautifulSoup(html, 'lxml')

    @staticmethod
    def element_text(element) -> str:
        """Visible text of an element; meta tags contribute their content."""
        if element is None:
            return ''
        text = element.get_text(' ', strip=True)
        if not text:
            text = (element.get('content') or element.get('value') or '').strip()
        return text

    def select_text(self, soup: BeautifulSoup, selectors: Sequence[str]) -> str:
        """First non-empty text among the selector candidates, in order."""
        for selector in selectors:
            text = self.element_text(soup.select_one(selector))
            if text:
                return text
        return ''

    def select_all_text(self, soup: BeautifulSoup, selector: str) -> List[str]:
        """Text of every element matching selector (empty ones dropped)."""
        return [text for text in (self.element_text(el) for el in soup.select(selector)) if text]

    def skills_from(self, description: str) -> List[str]:
        return skill_extractor.extract(description)

    def __repr__(self):
        return f"<{self.__class__.__name__}(name={self.name}, site={self.site_id.value})>"


class SelectorPlugin(ExtractionPlugin):
    """
    Plugin driven by per-field selector lists.

    Subclasses set SELECTORS (field -> ordered candidates) and optionally
    TAG_SELECTOR, whose matches are used verbatim as the skill list.
    """

    SELECTORS: Dict[str, List[str]] = {}
    TAG_SELECTOR: Optional[str] = None
    COMPANY: str = ''

    def extract(self, html: Optional[str], url: str) -> PluginResult:
        if not html:
            return PluginResult(JobRecord(apply_link=url), ok=False, message="No page content")

        soup = self.get_soup(html)
        record = JobRecord(apply_link=url, company=self.COMPANY)
        for field_name in ('title', 'company', 'location', 'description', 'salary'):
            selectors = self.SELECTORS.get(field_name)
            if not selectors:
                continue
            value = self.select_text(soup, selectors)
            if value:
                setattr(record, field_name, value)

        tags = self.select_all_text(soup, self.TAG_SELECTOR) if self.TAG_SELECTOR else []
        record.skills = tags if tags else self.skills_from(record.description)

        self.logger.debug(f"[plugin:{self.name}] fields={record.present_fields()}")
        return PluginResult(record, metadata={'tags': bool(tags)})
