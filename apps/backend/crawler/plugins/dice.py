"""
Dice job posting plugin.
"""
from .base import SelectorPlugin
from core.site_classifier import SiteId


class DicePlugin(SelectorPlugin):
    """Plugin for Dice job pages"""

    SELECTORS = {
        'title': ['.job-title', 'h1'],
        'company': ['.company-name', '.employer-name'],
        'location': ['.location', '.job-location'],
        'description': ['.job-description', '.description'],
    }

    def __init__(self):
        super().__init__(name="dice", site_id=SiteId.DICE)
