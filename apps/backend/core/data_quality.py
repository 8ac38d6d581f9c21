"""
Extraction quality scoring.
Scores a cleaned job record 0-100 on field completeness.
"""

import logging
from typing import Dict, List, Optional

from pipeline.records import JobRecord

logger = logging.getLogger(__name__)

MIN_SCORED_DESCRIPTION = 200


class ExtractionQualityScorer:
    """
    Completeness score for a scraped job record.

    Each present field adds its weight; the total is capped at 100.
    The description only counts when it is longer than 200 characters.
    """

    # Field weights for scoring (points out of 100)
    FIELD_WEIGHTS = {
        'title': 20,
        'company': 15,
        'location': 15,
        'description': 25,
        'skills': 15,
        'salary': 10,
    }

    MAX_SCORE = 100

    def _present(self, record: JobRecord, field_name: str) -> bool:
        if field_name == 'description':
            return len(record.description or '') > MIN_SCORED_DESCRIPTION
        return record.has(field_name)

    def score(self, record: JobRecord) -> int:
        """Integer score in [0, 100]."""
        total = sum(
            weight for field_name, weight in self.FIELD_WEIGHTS.items()
            if self._present(record, field_name)
        )
        return min(total, self.MAX_SCORE)

    def missing_fields(self, record: JobRecord) -> List[str]:
        return [name for name in self.FIELD_WEIGHTS if not self._present(record, name)]

    def explain(self, record: JobRecord) -> Dict:
        """
        Score with a per-field breakdown.

        Returns:
            Dict with:
            - score: int (0 to 100)
            - factors: field -> points awarded
            - missing_fields: fields that earned nothing
        """
        factors = {
            name: (weight if self._present(record, name) else 0)
            for name, weight in self.FIELD_WEIGHTS.items()
        }
        return {
            'score': min(sum(factors.values()), self.MAX_SCORE),
            'factors': factors,
            'missing_fields': [name for name, points in factors.items() if not points],
        }


# Global instance
_quality_scorer: Optional[ExtractionQualityScorer] = None


def get_quality_scorer() -> ExtractionQualityScorer:
    """Get or create the global quality scorer instance"""
    global _quality_scorer

    if _quality_scorer is None:
        _quality_scorer = ExtractionQualityScorer()

    return _quality_scorer
