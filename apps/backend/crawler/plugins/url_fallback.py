"""
URL-only record building for career sites that often cannot be fetched.

Shared by the Amazon and Flipkart plugins: title from the last path segment,
location from a city lookup table, seniority from keywords.
"""
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

from core.url_analyzer import humanize_slug

FALLBACK_SKILLS = ['Software Development', 'Engineering', 'Problem Solving', 'Team Collaboration']


def title_from_last_segment(url: str) -> str:
    """'.../12345-software-development-engineer-ii' -> 'Software Development Engineer II'"""
    try:
        path = urlparse(url).path or ''
    except ValueError:
        return ''
    segments = [seg for seg in path.split('/') if seg]
    if not segments or len(segments[-1]) <= 3:
        return ''
    return humanize_slug(segments[-1])


def lookup_location(url: str, table: Dict[str, str]) -> str:
    """First table entry whose key occurs in the URL (table order)."""
    lowered = url.lower()
    for key, location in table.items():
        if key in lowered:
            return location
    return ''


def infer_level(text: str) -> Tuple[Optional[str], Optional[str]]:
    """
    (job_type, experience) from seniority keywords, checked in order:
    intern, senior/lead, junior, mid/intermediate.
    """
    lowered = text.lower()
    if 'intern' in lowered:
        return 'Internship', 'Entry'
    if 'senior' in lowered or 'lead' in lowered:
        return None, 'Senior'
    if 'junior' in lowered:
        return None, 'Entry'
    if 'mid' in lowered or 'intermediate' in lowered:
        return None, 'Mid'
    return None, None
