"""
LinkedIn job posting plugin.

LinkedIn renders the top card (title, company, location) with
``job-details-jobs-unified-top-card__*`` classes; logged-out pages fall back
to ``data-test-id`` attributes.
"""
import logging
from .base import SelectorPlugin
from core.site_classifier import SiteId

logger = logging.getLogger(__name__)


class LinkedInPlugin(SelectorPlugin):
    """Plugin for LinkedIn job pages"""

    SELECTORS = {
        'title': [
            '.job-details-jobs-unified-top-card__job-title',
            'h1',
            '[data-test-id="job-details-job-title"]',
        ],
        'company': [
            '.job-details-jobs-unified-top-card__company-name',
            '[data-test-id="job-details-company-name"]',
            '.jobs-unified-top-card__company-name',
        ],
        'location': [
            '.job-details-jobs-unified-top-card__bullet',
            '[data-test-id="job-details-location"]',
            '.jobs-unified-top-card__location',
        ],
        'description': [
            '.jobs-description__content',
            '.jobs-box__html-content',
            '[data-test-id="job-details-description"]',
        ],
    }

    def __init__(self):
        super().__init__(name="linkedin", site_id=SiteId.LINKEDIN)
