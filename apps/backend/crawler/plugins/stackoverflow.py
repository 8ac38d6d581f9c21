"""
Stack Overflow Jobs plugin.

Postings carry explicit technology tags; when present they are used
verbatim as the skill list instead of mining the description.
"""
from .base import SelectorPlugin
from core.site_classifier import SiteId


class StackOverflowPlugin(SelectorPlugin):
    """Plugin for Stack Overflow job pages"""

    SELECTORS = {
        'title': ['.job-details--title', 'h1'],
        'company': ['.job-details--company-name', '.company-name'],
        'location': ['.job-details--location', '.location'],
        'description': ['.job-details--description', '.description'],
    }
    TAG_SELECTOR = '.job-details--tags .tag'

    def __init__(self):
        super().__init__(name="stackoverflow", site_id=SiteId.STACKOVERFLOW)
