"""
Normalization for scraped job records.

- merge_with_hints: fill gaps in an extracted record from URL hints and a
  static domain -> company table
- validate_and_clean: collapse whitespace, bound field sizes, dedupe skills
  and apply defaults

Both are total and deterministic; neither raises.
"""

import re
import logging
from typing import Dict, List, Optional

from core.skills import dedupe_skills, is_valid_skill
from core.url_analyzer import URLHints
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)

# Career sites whose host alone names the employer
DOMAIN_COMPANIES: Dict[str, str] = {
    'amazon.jobs': 'Amazon',
    'jobs.apple.com': 'Apple',
    'careers.google.com': 'Google',
    'jobs.microsoft.com': 'Microsoft',
    'careers.facebook.com': 'Meta',
    'jobs.netflix.com': 'Netflix',
    'careers.twitter.com': 'Twitter',
    'jobs.spotify.com': 'Spotify',
    'careers.uber.com': 'Uber',
    'jobs.airbnb.com': 'Airbnb',
    'careers.lyft.com': 'Lyft',
    'jobs.salesforce.com': 'Salesforce',
    'careers.adobe.com': 'Adobe',
    'jobs.oracle.com': 'Oracle',
    'careers.ibm.com': 'IBM',
    'jobs.intel.com': 'Intel',
    'careers.nvidia.com': 'NVIDIA',
    'jobs.amd.com': 'AMD',
    'careers.cisco.com': 'Cisco',
    'jobs.dell.com': 'Dell',
}

# Length caps; the trailing ellipsis counts toward the cap
FIELD_LIMITS: Dict[str, int] = {
    'title': 100,
    'company': 50,
    'location': 50,
    'description': 2000,
}

MAX_CLEAN_SKILLS = 10
ELLIPSIS = '...'

DEFAULT_JOB_TYPE = 'Full-time'
DEFAULT_EXPERIENCE = 'Entry'

_WHITESPACE = re.compile(r'\s+')


def company_for_domain(domain: Optional[str]) -> Optional[str]:
    """Look up the employer for a career-site host (``www.`` is ignored)."""
    if not domain:
        return None
    host = domain.strip().lower()
    if host.startswith('www.'):
        host = host[4:]
    return DOMAIN_COMPANIES.get(host)


def merge_with_hints(record: JobRecord, hints: URLHints) -> JobRecord:
    """
    Backfill empty fields of an extracted record.

    Extractor values always win; empty fields fall back to the matching URL
    hint, and company finally falls back to the domain table.
    """
    merged = record.copy()
    backfilled = []

    for attr in ('title', 'company', 'location', 'job_type', 'experience'):
        if not merged.has(attr):
            hint = getattr(hints, attr, '')
            if hint:
                setattr(merged, attr, hint)
                backfilled.append(attr)

    if not merged.has('company'):
        domain_company = company_for_domain(hints.domain)
        if domain_company:
            merged.company = domain_company
            backfilled.append('company(domain)')

    if backfilled:
        logger.debug(f"[normalize] Backfilled from URL: {', '.join(backfilled)}")
    return merged


def collapse_whitespace(value: Optional[str]) -> str:
    if not value:
        return ''
    return _WHITESPACE.sub(' ', str(value)).strip()


def truncate(value: str, limit: int) -> str:
    """Cut to ``limit`` characters, ending with an ellipsis when cut."""
    if len(value) <= limit:
        return value
    return value[:limit - len(ELLIPSIS)] + ELLIPSIS


def clean_skills(skills: Optional[List[str]]) -> List[str]:
    """Trim, drop out-of-range entries, dedupe case-insensitively, cap at 10."""
    if not skills:
        return []
    trimmed = [collapse_whitespace(skill) for skill in skills if isinstance(skill, str)]
    valid = [skill for skill in trimmed if is_valid_skill(skill)]
    return dedupe_skills(valid)[:MAX_CLEAN_SKILLS]


def validate_and_clean(record: JobRecord, url: str) -> JobRecord:
    """
    Produce the externally visible record.

    Args:
        record: Merged job record
        url: Original job URL (default apply link)

    Returns:
        New JobRecord with bounded fields and defaults applied
    """
    cleaned = record.copy()

    for attr in ('title', 'company', 'location', 'description', 'salary', 'job_type', 'experience'):
        setattr(cleaned, attr, collapse_whitespace(getattr(cleaned, attr)))

    for attr, limit in FIELD_LIMITS.items():
        value = getattr(cleaned, attr)
        if len(value) > limit:
            logger.debug(f"[normalize] Truncating {attr} from {len(value)} to {limit} chars")
            setattr(cleaned, attr, truncate(value, limit))

    cleaned.skills = clean_skills(cleaned.skills)

    if not cleaned.job_type:
        cleaned.job_type = DEFAULT_JOB_TYPE
    if not cleaned.experience:
        cleaned.experience = DEFAULT_EXPERIENCE
    cleaned.apply_link = collapse_whitespace(cleaned.apply_link) or url

    return cleaned
