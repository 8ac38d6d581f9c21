"""
GitHub Jobs plugin (tag-based skills, like Stack Overflow).
"""
from .base import SelectorPlugin
from core.site_classifier import SiteId


class GitHubPlugin(SelectorPlugin):
    """Plugin for GitHub job pages"""

    SELECTORS = {
        'title': ['.job-title', 'h1'],
        'company': ['.company-name', '.employer-name'],
        'location': ['.location', '.job-location'],
        'description': ['.job-description', '.description'],
    }
    TAG_SELECTOR = '.job-tags .tag'

    def __init__(self):
        super().__init__(name="github", site_id=SiteId.GITHUB)
