"""
Glassdoor job posting plugin.
"""
import logging
from .base import SelectorPlugin
from core.site_classifier import SiteId

logger = logging.getLogger(__name__)


class GlassdoorPlugin(SelectorPlugin):
    """Plugin for Glassdoor job pages (includes salary estimate)"""

    SELECTORS = {
        'title': ['.job-title', 'h1'],
        'company': ['.employer-name', '.company-name'],
        'location': ['.location', '.job-location'],
        'description': ['.jobDescriptionContent', '.desc'],
        'salary': ['.salary-estimate', '.salary'],
    }

    def __init__(self):
        super().__init__(name="glassdoor", site_id=SiteId.GLASSDOOR)
