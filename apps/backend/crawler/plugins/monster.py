"""
Monster job posting plugin.
"""
from .base import SelectorPlugin
from core.site_classifier import SiteId


class MonsterPlugin(SelectorPlugin):
    """Plugin for Monster job pages"""

    SELECTORS = {
        'title': ['.job-title', 'h1'],
        'company': ['.company-name', '.employer-name'],
        'location': ['.location', '.job-location'],
        'description': ['.job-description', '.description'],
    }

    def __init__(self):
        super().__init__(name="monster", site_id=SiteId.MONSTER)
