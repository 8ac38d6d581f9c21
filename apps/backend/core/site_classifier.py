"""
Job board classification by domain.
"""
from enum import Enum
from typing import Dict, List, Tuple
from urllib.parse import urlparse


class SiteId(str, Enum):
    """Known job boards; GENERIC covers everything else."""
    LINKEDIN = "linkedin"
    INDEED = "indeed"
    GLASSDOOR = "glassdoor"
    MONSTER = "monster"
    ZIPRECRUITER = "ziprecruiter"
    DICE = "dice"
    STACKOVERFLOW = "stackoverflow"
    GITHUB = "github"
    AMAZON = "amazon"
    FLIPKART = "flipkart"
    GENERIC = "generic"


# Checked in order, substring containment on the host
SITE_PATTERNS: List[Tuple[str, SiteId]] = [
    ('linkedin.com', SiteId.LINKEDIN),
    ('indeed.com', SiteId.INDEED),
    ('glassdoor.com', SiteId.GLASSDOOR),
    ('monster.com', SiteId.MONSTER),
    ('ziprecruiter.com', SiteId.ZIPRECRUITER),
    ('dice.com', SiteId.DICE),
    ('stackoverflow.com', SiteId.STACKOVERFLOW),
    ('github.com', SiteId.GITHUB),
    ('amazon.jobs', SiteId.AMAZON),
    ('flipkartcareers.com', SiteId.FLIPKART),
]


def _host_of(value: str) -> str:
    value = (value or '').strip().lower()
    if '://' in value:
        try:
            return (urlparse(value).hostname or '').lower()
        except ValueError:
            return ''
    return value.split('/')[0]


def detect_job_site(domain_or_url: str) -> SiteId:
    """
    Classify a domain (or full URL) into a known job board.

    Pure and idempotent; unknown or empty input maps to GENERIC.
    """
    host = _host_of(domain_or_url)
    if not host:
        return SiteId.GENERIC
    for needle, site in SITE_PATTERNS:
        if needle in host:
            return site
    return SiteId.GENERIC


# Display metadata for the supported-sites listing
SITE_INFO: Dict[SiteId, Dict] = {
    SiteId.LINKEDIN: {
        'name': 'LinkedIn', 'domain': 'linkedin.com',
        'description': 'Professional networking and job platform',
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Skills extraction'],
    },
    SiteId.INDEED: {
        'name': 'Indeed', 'domain': 'indeed.com',
        'description': "World's largest job site",
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Salary information', 'Skills extraction'],
    },
    SiteId.GLASSDOOR: {
        'name': 'Glassdoor', 'domain': 'glassdoor.com',
        'description': 'Job and company review platform',
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Salary estimates', 'Skills extraction'],
    },
    SiteId.AMAZON: {
        'name': 'Amazon Jobs', 'domain': 'amazon.jobs',
        'description': "Amazon's official job platform",
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Skills extraction', 'URL-based extraction'],
    },
    SiteId.MONSTER: {
        'name': 'Monster', 'domain': 'monster.com',
        'description': 'Global job search platform',
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Skills extraction'],
    },
    SiteId.ZIPRECRUITER: {
        'name': 'ZipRecruiter', 'domain': 'ziprecruiter.com',
        'description': 'AI-powered job matching platform',
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Skills extraction'],
    },
    SiteId.DICE: {
        'name': 'Dice', 'domain': 'dice.com',
        'description': 'Technology job board',
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Skills extraction'],
    },
    SiteId.STACKOVERFLOW: {
        'name': 'Stack Overflow', 'domain': 'stackoverflow.com',
        'description': 'Developer job platform',
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Technology tags', 'Skills extraction'],
    },
    SiteId.GITHUB: {
        'name': 'GitHub', 'domain': 'github.com',
        'description': 'Developer job board',
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Technology tags', 'Skills extraction'],
    },
    SiteId.FLIPKART: {
        'name': 'Flipkart Careers', 'domain': 'flipkartcareers.com',
        'description': "Flipkart's official career portal",
        'features': ['Job titles', 'Company names', 'Locations', 'Descriptions', 'Skills extraction', 'URL-based extraction'],
    },
    SiteId.GENERIC: {
        'name': 'Other Job Sites', 'domain': 'generic',
        'description': 'Any other job posting website',
        'features': ['Generic scraping with fallback selectors', 'Job titles', 'Company names', 'Locations', 'Descriptions', 'Skills extraction'],
    },
}


def supported_sites() -> List[Dict]:
    """Listing of every site with a dedicated extractor, plus the generic entry."""
    return [dict(info, siteId=site.value) for site, info in SITE_INFO.items()]


def describe_site(domain_or_url: str) -> Dict:
    """Name and support status of a URL's site."""
    site = detect_job_site(domain_or_url)
    host = _host_of(domain_or_url)
    if site == SiteId.GENERIC:
        return {
            'name': 'Unknown',
            'domain': host,
            'siteId': site.value,
            'supported': False,
            'message': 'No dedicated extractor for this site; generic extraction will be used',
        }
    return {
        'name': SITE_INFO[site]['name'],
        'domain': host,
        'siteId': site.value,
        'supported': True,
    }
