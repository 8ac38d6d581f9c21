"""
Indeed job posting plugin.

Indeed marks its job header with ``data-testid="jobsearch-JobInfoHeader-*"``
attributes, with same-named classes on older layouts. Salary is read from
the header when present.
"""
import logging
from .base import SelectorPlugin
from core.site_classifier import SiteId

logger = logging.getLogger(__name__)


class IndeedPlugin(SelectorPlugin):
    """Plugin for Indeed job pages"""

    SELECTORS = {
        'title': [
            'h1[data-testid="jobsearch-JobInfoHeader-title"]',
            '.jobsearch-JobInfoHeader-title',
            'h1',
        ],
        'company': [
            '[data-testid="jobsearch-JobInfoHeader-companyName"]',
            '.jobsearch-JobInfoHeader-companyName',
        ],
        'location': [
            '[data-testid="jobsearch-JobInfoHeader-locationText"]',
            '.jobsearch-JobInfoHeader-locationText',
        ],
        'description': [
            '[data-testid="jobsearch-JobComponent-description"]',
            '.jobsearch-JobComponent-description',
            '#jobDescriptionText',
        ],
        'salary': [
            '[data-testid="jobsearch-JobInfoHeader-salaryText"]',
            '.jobsearch-JobInfoHeader-salaryText',
        ],
    }

    def __init__(self):
        super().__init__(name="indeed", site_id=SiteId.INDEED)
