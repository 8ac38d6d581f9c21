"""
Job record passed between extraction stages.

The same shape is used for the raw extractor output, the merged record and
the cleaned record; each stage returns a new instance.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

# Python attribute -> serialized (camelCase) name
FIELD_NAMES = {
    'title': 'title',
    'company': 'company',
    'location': 'location',
    'description': 'description',
    'skills': 'skills',
    'salary': 'salary',
    'job_type': 'jobType',
    'experience': 'experience',
    'apply_link': 'applyLink',
    'source': 'source',
}

TEXT_FIELDS = ('title', 'company', 'location', 'description', 'salary', 'job_type', 'experience', 'apply_link')


@dataclass
class JobRecord:
    """Normalized job posting."""
    title: str = ''
    company: str = ''
    location: str = ''
    description: str = ''
    skills: List[str] = field(default_factory=list)
    salary: str = ''
    job_type: str = ''
    experience: str = ''
    apply_link: str = ''
    source: str = ''
    status: Optional[str] = None

    def has(self, name: str) -> bool:
        """True when the field holds a non-empty value."""
        value = getattr(self, name, None)
        if isinstance(value, str):
            return bool(value.strip())
        return bool(value)

    def present_fields(self) -> List[str]:
        return [name for name in FIELD_NAMES if name != 'source' and self.has(name)]

    def copy(self, **changes) -> 'JobRecord':
        changes.setdefault('skills', list(changes.get('skills', self.skills)))
        return replace(self, **changes)

    def to_dict(self) -> Dict:
        data = {FIELD_NAMES[name]: getattr(self, name) for name in FIELD_NAMES}
        data['skills'] = list(self.skills)
        if self.status:
            data['status'] = self.status
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'JobRecord':
        """Build from camelCase or snake_case keys; unknown keys are ignored."""
        kwargs = {}
        for attr, key in FIELD_NAMES.items():
            if key in data:
                kwargs[attr] = data[key]
            elif attr in data:
                kwargs[attr] = data[attr]
        if 'skills' in kwargs:
            kwargs['skills'] = [str(s) for s in (kwargs['skills'] or [])]
        for attr in TEXT_FIELDS + ('source',):
            if attr in kwargs and kwargs[attr] is None:
                kwargs[attr] = ''
        if data.get('status'):
            kwargs['status'] = data['status']
        return cls(**kwargs)
