"""
URL analysis: low-confidence job hints recovered from the URL alone.

Used to backfill fields the page extractors miss, and as the only source of
data when the page cannot be fetched.
"""
import re
import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional
from urllib.parse import urlparse, parse_qsl, unquote_plus

from core.errors import InvalidURL
from core.rules import Rule, RuleTable, constant

logger = logging.getLogger(__name__)

ROMAN_NUMERALS = {'i', 'ii', 'iii', 'iv', 'v', 'vi', 'vii', 'viii', 'ix', 'x'}

# Boards whose own name in the URL is not the hiring company
JOB_BOARD_NAMES = {
    'linkedin', 'indeed', 'glassdoor', 'monster', 'ziprecruiter',
    'dice', 'stackoverflow', 'github', 'www', 'careers', 'jobs',
}

_SEGMENT = r'([^/?&#]+)'


def _board_filtered(match: "re.Match") -> Optional[str]:
    name = match.group(1)
    if not name or name.lower() in JOB_BOARD_NAMES:
        return None
    return name


TITLE_RULES = RuleTable('url_title', [
    Rule('job_title', r'job[-_]?title[-_=/]' + _SEGMENT),
    Rule('position', r'(?:^|[/?&])position[-_=/]' + _SEGMENT),
    Rule('role', r'(?:^|[/?&])role[-_=/]' + _SEGMENT),
    Rule(
        'role_slug',
        r'([^/?&#]*(?:developer|engineer|specialist|manager)[^/?&#]*)',
    ),
])

COMPANY_RULES = RuleTable('url_company', [
    Rule('jobs_subdomain', r'(?:^|\.)jobs\.([^./]+)\.com', _board_filtered),
    Rule('dot_jobs', r'([^./]+)\.jobs(?:$|/)', _board_filtered),
    Rule('com_jobs_path', r'([^./]+)\.com/jobs', _board_filtered),
])

LOCATION_RULES = RuleTable('url_location', [
    Rule('location', r'location[-_=/]' + _SEGMENT),
    Rule('city', r'(?:^|[/?&])city[-_=/]' + _SEGMENT),
    Rule('remote', r'remote', constant('Remote')),
    Rule('hybrid', r'hybrid', constant('Hybrid')),
])

# Literal substring checks, highest priority first
JOB_TYPE_ORDER = [
    (('remote',), 'Remote'),
    (('hybrid',), 'Hybrid'),
    (('part-time',), 'Part-time'),
    (('contract',), 'Contract'),
    (('intern',), 'Internship'),
]

EXPERIENCE_ORDER = [
    (('senior', 'lead'), 'Senior'),
    (('junior', 'entry'), 'Entry'),
    (('mid', 'intermediate'), 'Mid'),
]


@dataclass
class URLHints:
    """Weak, regex-derived signals about a job posting."""
    domain: str = ''
    path_segments: List[str] = field(default_factory=list)
    query_params: Dict[str, str] = field(default_factory=dict)
    title: str = ''
    company: str = ''
    location: str = ''
    job_type: str = ''
    experience: str = ''

    def to_dict(self) -> Dict:
        data = asdict(self)
        return {
            'domain': data['domain'],
            'pathSegments': data['path_segments'],
            'queryParams': data['query_params'],
            'title': data['title'],
            'company': data['company'],
            'location': data['location'],
            'jobType': data['job_type'],
            'experience': data['experience'],
        }


def validate_url(url: Optional[str]):
    """
    Parse an absolute http(s) URL.

    Raises:
        InvalidURL: if the value has no scheme/host or cannot be parsed
    """
    if not url or not isinstance(url, str):
        raise InvalidURL(str(url), "URL is required")
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidURL(url, f"Invalid URL format ({e})")
    if parsed.scheme.lower() not in ('http', 'https') or not hostname:
        raise InvalidURL(url)
    return parsed


def humanize_slug(raw: str) -> str:
    """
    Turn a URL slug into display text.

    Decodes percent-encoding, treats ``-``/``_``/``+`` as spaces, drops
    purely numeric tokens (posting ids) and title-cases the rest, keeping
    roman numerals upper-case ("engineer-ii" -> "Engineer II").
    """
    text = unquote_plus(raw or '')
    text = re.sub(r'[-_+]+', ' ', text)
    words = []
    for token in text.split():
        if token.isdigit():
            continue
        if token.lower() in ROMAN_NUMERALS and len(token) > 1:
            words.append(token.upper())
        else:
            words.append(token[:1].upper() + token[1:].lower())
    return ' '.join(words)


def _first_in_order(haystack: str, order) -> str:
    for needles, label in order:
        if any(needle in haystack for needle in needles):
            return label
    return ''


def analyze_url(url: str) -> URLHints:
    """
    Derive hints from a job URL.

    Never raises: a malformed URL yields an all-empty URLHints.
    """
    try:
        parsed = validate_url(url)
    except InvalidURL as e:
        logger.debug(f"[url] {e}")
        return URLHints()

    host = (parsed.hostname or '').lower()
    # Raw path; humanize_slug decodes each captured slug once
    path = parsed.path or ''
    query = parsed.query or ''
    path_and_query = f"{path}?{query}" if query else path

    hints = URLHints(
        domain=host,
        path_segments=[unquote_plus(seg) for seg in path.split('/') if seg],
        query_params=dict(parse_qsl(query)),
    )

    title_raw = TITLE_RULES.first(path_and_query.lower())
    if title_raw:
        hints.title = humanize_slug(title_raw)

    company_raw = COMPANY_RULES.first(f"{host}{parsed.path or ''}".lower())
    if company_raw:
        hints.company = humanize_slug(company_raw)

    location_raw = LOCATION_RULES.first(path_and_query.lower())
    if location_raw:
        hints.location = location_raw if location_raw in ('Remote', 'Hybrid') else humanize_slug(location_raw)

    lowered = url.lower()
    hints.job_type = _first_in_order(lowered, JOB_TYPE_ORDER)
    hints.experience = _first_in_order(lowered, EXPERIENCE_ORDER)

    logger.debug(
        f"[url] {host}: title={hints.title!r} company={hints.company!r} "
        f"location={hints.location!r} type={hints.job_type!r} exp={hints.experience!r}"
    )
    return hints
