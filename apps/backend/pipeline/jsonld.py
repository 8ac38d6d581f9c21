"""
JSON-LD extractor.

Extracts job information from structured JSON-LD data (Schema.org JobPosting).
"""

import json
import logging
from typing import Any, Dict, List, Optional
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

EMPLOYMENT_TYPES = {
    'FULL_TIME': 'Full-time',
    'PART_TIME': 'Part-time',
    'CONTRACTOR': 'Contract',
    'TEMPORARY': 'Contract',
    'INTERN': 'Internship',
}


class JSONLDExtractor:
    """Extracts job data from JSON-LD structured data."""

    def extract(self, soup: BeautifulSoup) -> Dict[str, Any]:
        """
        Extract job fields from the first JobPosting block on the page.

        Returns:
            Dictionary of JobRecord attribute names to values (only fields
            that were found)
        """
        scripts = soup.find_all('script', type='application/ld+json')

        for script in scripts:
            try:
                data = json.loads(script.string or '')
            except (json.JSONDecodeError, TypeError) as e:
                logger.debug(f"Failed to parse JSON-LD: {e}")
                continue

            for item in self._flatten_jsonld(data):
                if self._is_job_posting(item):
                    fields = self._extract_job_posting(item)
                    if fields:
                        return fields

        return {}

    def _flatten_jsonld(self, data: Any) -> List[Dict]:
        """Flatten JSON-LD structure to list of items."""
        items = []

        if isinstance(data, dict):
            # Check if it's a JobPosting directly
            if self._is_job_posting(data):
                items.append(data)
            # Check for @graph
            elif '@graph' in data and isinstance(data['@graph'], list):
                items.extend([item for item in data['@graph'] if isinstance(item, dict)])
        elif isinstance(data, list):
            items.extend([item for item in data if isinstance(item, dict)])

        return items

    def _is_job_posting(self, item: Dict) -> bool:
        """Check if JSON-LD item is a JobPosting."""
        item_type = item.get('@type', '')
        if isinstance(item_type, str):
            return 'JobPosting' in item_type
        elif isinstance(item_type, list):
            return any('JobPosting' in str(t) for t in item_type)
        return False

    def _extract_job_posting(self, job_data: Dict) -> Dict[str, Any]:
        """Extract fields from JobPosting JSON-LD."""
        fields = {}

        if job_data.get('title'):
            fields['title'] = str(job_data['title']).strip()

        org = job_data.get('hiringOrganization')
        employer = None
        if isinstance(org, dict):
            employer = org.get('name', org.get('legalName'))
        elif isinstance(org, str):
            employer = org
        if employer:
            fields['company'] = str(employer).strip()

        location = self._location(job_data.get('jobLocation'))
        if not location and str(job_data.get('jobLocationType', '')).upper() == 'TELECOMMUTE':
            location = 'Remote'
        if location:
            fields['location'] = location

        if job_data.get('description'):
            # Descriptions are usually HTML fragments
            desc = BeautifulSoup(str(job_data['description']), 'lxml').get_text(' ', strip=True)
            if desc:
                fields['description'] = desc

        salary = self._salary(job_data.get('baseSalary'))
        if salary:
            fields['salary'] = salary

        employment = job_data.get('employmentType')
        if isinstance(employment, list):
            employment = employment[0] if employment else None
        if isinstance(employment, str):
            job_type = EMPLOYMENT_TYPES.get(employment.strip().upper().replace('-', '_'))
            if job_type:
                fields['job_type'] = job_type

        return fields

    def _location(self, loc: Any) -> Optional[str]:
        if isinstance(loc, list):
            loc = loc[0] if loc else None
        if isinstance(loc, str):
            return loc.strip() or None
        if not isinstance(loc, dict):
            return None

        addr = loc.get('address')
        if isinstance(addr, dict):
            parts = [
                str(addr[key]).strip() for key in ('addressLocality', 'addressRegion', 'addressCountry')
                if isinstance(addr.get(key), (str, int)) and str(addr[key]).strip()
            ]
            return ', '.join(parts) if parts else None
        if isinstance(addr, str):
            return addr.strip() or None
        if loc.get('name'):
            return str(loc['name']).strip()
        return None

    def _salary(self, base_salary: Any) -> Optional[str]:
        """'USD 120000-150000 per YEAR' from a MonetaryAmount."""
        if isinstance(base_salary, (int, float, str)) and str(base_salary).strip():
            return str(base_salary).strip()
        if not isinstance(base_salary, dict):
            return None

        currency = base_salary.get('currency', '')
        value = base_salary.get('value')
        unit = ''
        if isinstance(value, dict):
            unit = value.get('unitText', '')
            low = value.get('minValue')
            high = value.get('maxValue')
            amount = value.get('value')
            if low is not None and high is not None:
                amount = f"{low}-{high}"
            elif amount is None:
                amount = low if low is not None else high
        else:
            amount = value

        if amount is None or str(amount).strip() == '':
            return None

        salary = f"{currency} {amount}".strip()
        if unit:
            salary += f" per {str(unit).lower()}"
        return salary
