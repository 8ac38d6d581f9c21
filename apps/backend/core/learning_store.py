"""
Per-domain learning store.

Tracks how well extraction works for each domain (attempt count, running
mean of the success samples, which fields were found) and persists the whole
store as one JSON document after every update.

Document layout:
    {
      "sites": {
        "<domain>": {
          "domain": ..., "attempts": int, "successRate": float,
          "firstSeen": iso8601, "lastSeen": iso8601,
          "fieldHits": {"title": int, ...}
        }
      },
      "lastUpdated": iso8601
    }

The confidence tier is derived on read and never stored.
"""
import os
import copy
import json
import asyncio
import logging
import tempfile
from pathlib import Path
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from core.errors import PersistenceFailure
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE_ATTEMPTS = 10
HIGH_CONFIDENCE_RATE = 0.8
MEDIUM_CONFIDENCE_ATTEMPTS = 5
MEDIUM_CONFIDENCE_RATE = 0.6


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def confidence_tier(attempts: int, success_rate: float) -> str:
    """low / medium / high label for a domain's track record."""
    if attempts >= HIGH_CONFIDENCE_ATTEMPTS and success_rate > HIGH_CONFIDENCE_RATE:
        return 'high'
    if attempts >= MEDIUM_CONFIDENCE_ATTEMPTS and success_rate > MEDIUM_CONFIDENCE_RATE:
        return 'medium'
    return 'low'


def _empty_document() -> Dict:
    return {'sites': {}, 'lastUpdated': _now_iso()}


def _coerce_profile(domain: str, raw: Dict) -> Dict:
    """Normalize a loaded profile; tolerate missing keys from older files."""
    attempts = int(raw.get('attempts', 0) or 0)
    success_rate = float(raw.get('successRate', 0.0) or 0.0)
    field_hits = raw.get('fieldHits') or {}
    return {
        'domain': raw.get('domain') or domain,
        'attempts': max(attempts, 0),
        'successRate': min(max(success_rate, 0.0), 1.0),
        'firstSeen': raw.get('firstSeen') or raw.get('lastSeen') or _now_iso(),
        'lastSeen': raw.get('lastSeen') or raw.get('firstSeen') or _now_iso(),
        'fieldHits': {str(k): int(v) for k, v in field_hits.items() if isinstance(v, (int, float))},
    }


class LearningStore:
    """
    JSON-file backed domain statistics.

    All mutations are serialized by a single asyncio.Lock; readers get
    copies, never the live document.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self._document = self._load()

    def _load(self) -> Dict:
        """Load the store; a missing file yields an empty store."""
        if not self.path.exists():
            logger.info(f"[learning] No learning file at {self.path}, starting empty")
            return _empty_document()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._quarantine(f"invalid JSON ({e})")
            return _empty_document()
        except OSError as e:
            logger.error(f"[learning] Could not read {self.path}: {e}, starting empty")
            return _empty_document()

        if not isinstance(data, dict) or not isinstance(data.get('sites', {}), dict):
            self._quarantine("unexpected document structure")
            return _empty_document()

        sites = {}
        for domain, raw in data.get('sites', {}).items():
            if not isinstance(raw, dict):
                logger.warning(f"[learning] Skipping malformed profile for {domain}")
                continue
            try:
                sites[domain] = _coerce_profile(domain, raw)
            except (TypeError, ValueError) as e:
                logger.warning(f"[learning] Skipping malformed profile for {domain}: {e}")

        logger.info(f"[learning] Loaded {len(sites)} domain profiles from {self.path}")
        return {'sites': sites, 'lastUpdated': data.get('lastUpdated') or _now_iso()}

    def _quarantine(self, reason: str):
        """Move a corrupt store aside so it can be inspected later."""
        stamp = datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%S')
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, backup)
            logger.error(f"[learning] Corrupt learning file ({reason}); moved to {backup}, starting empty")
        except OSError as e:
            logger.error(f"[learning] Corrupt learning file ({reason}) and backup failed: {e}; starting empty")

    def _save(self):
        """
        Atomically rewrite the store file.

        Raises:
            PersistenceFailure: if the file cannot be written
        """
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=str(self.path.parent),
                prefix=f".{self.path.name}.", suffix='.tmp', delete=False
            ) as tmp:
                tmp_name = tmp.name
                json.dump(self._document, tmp, indent=2)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug(f"[learning] Could not remove temp file {tmp_name}")
            raise PersistenceFailure(f"Could not write {self.path}: {e}") from e

    async def record_outcome(
        self,
        domain: str,
        record: Optional[JobRecord],
        success_sample: float,
    ) -> Dict:
        """
        Record one scrape outcome for a domain and persist the store.

        Args:
            domain: Host the URL belonged to
            record: Cleaned record on success, None on failure
            success_sample: Outcome in [0, 1] (quality / 100, or 0 on failure)

        Returns:
            Copy of the updated profile
        """
        sample = min(max(float(success_sample), 0.0), 1.0)

        async with self._lock:
            now = _now_iso()
            sites = self._document['sites']
            profile = sites.get(domain)
            if profile is None:
                profile = {
                    'domain': domain,
                    'attempts': 0,
                    'successRate': 0.0,
                    'firstSeen': now,
                    'lastSeen': now,
                    'fieldHits': {},
                }
                sites[domain] = profile
                logger.info(f"[learning] First sighting of {domain}")

            profile['attempts'] += 1
            profile['successRate'] += (sample - profile['successRate']) / profile['attempts']
            profile['lastSeen'] = now

            if record is not None:
                for field_name in record.present_fields():
                    profile['fieldHits'][field_name] = profile['fieldHits'].get(field_name, 0) + 1

            self._document['lastUpdated'] = now

            try:
                await asyncio.to_thread(self._save)
            except PersistenceFailure as e:
                logger.error(f"[learning] {e}; keeping in-memory state")

            logger.info(
                f"[learning] {domain}: attempts={profile['attempts']} "
                f"successRate={profile['successRate']:.3f} (sample={sample:.2f})"
            )
            return copy.deepcopy(profile)

    def get_stats(self, domain: str) -> Dict:
        """
        Summary for one domain, with the confidence tier derived on read.
        """
        profile = self._document['sites'].get(domain)
        if profile is None:
            return {
                'isNewSite': True,
                'attempts': 0,
                'successRate': 0,
                'confidence': 'low',
            }

        return {
            'isNewSite': False,
            'attempts': profile['attempts'],
            'successRate': profile['successRate'],
            'confidence': confidence_tier(profile['attempts'], profile['successRate']),
            'firstSeen': profile['firstSeen'],
            'lastSeen': profile['lastSeen'],
            'fieldHits': dict(profile['fieldHits']),
        }

    def get_profile(self, domain: str) -> Optional[Dict]:
        profile = self._document['sites'].get(domain)
        return copy.deepcopy(profile) if profile is not None else None

    def snapshot(self) -> Dict:
        """Deep copy of the whole document, for administrative inspection."""
        return copy.deepcopy(self._document)

    def __len__(self):
        return len(self._document['sites'])
