"""
Job scraper service.

Entry point for turning a job URL into a normalized job record:
URL hints -> extraction chain (raced against a deadline) -> merge with hints
-> clean -> score -> record the outcome in the learning store.

Every failure (timeout, fetch error, anything unexpected) becomes a
structured failure response with a best-effort fallback record; callers
never see an exception.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from core.data_quality import ExtractionQualityScorer, get_quality_scorer
from core.errors import InvalidURL, ScrapeTimeout, ScraperError
from core.learning_store import LearningStore
from core.normalize import merge_with_hints, validate_and_clean
from core.scraper_config import ScraperConfig, get_scraper_config
from core.url_analyzer import URLHints, analyze_url
from pipeline.extractor import JobExtractor
from pipeline.records import JobRecord

logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "Job description could not be extracted. Please manually review the job posting."


def create_fallback_record(url: str, hints: Optional[URLHints] = None) -> JobRecord:
    """Best-effort draft record from URL structure alone."""
    hints = hints or analyze_url(url)
    return JobRecord(
        title=hints.title or 'Job Title Not Found',
        company=hints.company or 'Company Not Found',
        location=hints.location or 'Location Not Specified',
        description=FALLBACK_DESCRIPTION,
        skills=[],
        salary='',
        job_type=hints.job_type or 'Full-time',
        experience=hints.experience or 'Entry',
        apply_link=url,
        status='draft',
    )


class JobScraperService:
    """Scrapes job postings and learns per-domain extraction reliability."""

    def __init__(
        self,
        store: Optional[LearningStore] = None,
        extractor: Optional[JobExtractor] = None,
        config: Optional[ScraperConfig] = None,
        scorer: Optional[ExtractionQualityScorer] = None,
    ):
        config = config or get_scraper_config()
        self.timeout = config.scrape_timeout
        self.store = store or LearningStore(config.learning_path)
        self.extractor = extractor or JobExtractor()
        self.scorer = scorer or get_quality_scorer()

    async def scrape_job(self, url: str) -> Dict:
        """
        Scrape a job posting.

        Returns:
            On success: {success, data, source, url, extractionQuality, learningStats}
            On failure: {success, error, url, fallbackData, learningStats}
        """
        logger.info(f"[scraper] Starting job scraping from: {url}")
        hints = analyze_url(url)
        domain = hints.domain
        learning_stats = self.store.get_stats(domain)

        try:
            if not domain:
                raise InvalidURL(str(url))
            try:
                outcome = await asyncio.wait_for(self.extractor.extract(url), timeout=self.timeout)
            except asyncio.TimeoutError:
                raise ScrapeTimeout(self.timeout)

            merged = merge_with_hints(outcome.record, hints)
            cleaned = validate_and_clean(merged, url)
            quality = self.scorer.score(cleaned)
        except ScraperError as e:
            logger.error(f"[scraper] Scraping failed for {url}: {e}")
            return await self._failure(url, hints, str(e))
        except Exception as e:
            logger.error(f"[scraper] Unexpected error scraping {url}: {e}", exc_info=True)
            return await self._failure(url, hints, str(e) or type(e).__name__)

        await self.store.record_outcome(domain, cleaned, quality / 100)
        missing = self.scorer.missing_fields(cleaned)
        logger.info(f"[scraper] {url} scraped via {outcome.plugin} (quality={quality}, missing={missing})")

        return {
            'success': True,
            'data': cleaned.to_dict(),
            'source': outcome.site.value,
            'url': url,
            'extractionQuality': quality,
            'learningStats': learning_stats,
        }

    async def _failure(self, url: str, hints: URLHints, error: str) -> Dict:
        if hints.domain:
            await self.store.record_outcome(hints.domain, None, 0)
        else:
            logger.warning(f"[scraper] No domain for {url!r}; outcome not recorded")

        return {
            'success': False,
            'error': error,
            'url': url,
            'fallbackData': create_fallback_record(url, hints).to_dict(),
            'learningStats': self.store.get_stats(hints.domain),
        }

    async def test_scraping(self, url: str) -> Dict:
        """Diagnostic wrapper around scrape_job with a timestamp."""
        timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        try:
            result = await self.scrape_job(url)
        except Exception as e:
            logger.error(f"[scraper] Test scraping error for {url}: {e}", exc_info=True)
            return {'success': False, 'error': str(e), 'url': url, 'timestamp': timestamp}

        response = {
            'success': result['success'],
            'data': result.get('data'),
            'source': result.get('source'),
            'url': url,
            'timestamp': timestamp,
        }
        if result['success']:
            response['qualityBreakdown'] = self.scorer.explain(JobRecord.from_dict(result['data']))
        else:
            response['error'] = result.get('error')
            response['fallbackData'] = result.get('fallbackData')
        return response

    def get_learning_stats(self, domain: str) -> Dict:
        """Learning profile view for a domain (confidence derived on read)."""
        return self.store.get_stats((domain or '').strip().lower())

    def get_learning_data(self) -> Dict:
        """Raw learning document, for administrative inspection."""
        return self.store.snapshot()


# Global service instance
_scraper_service: Optional[JobScraperService] = None


def get_scraper_service() -> JobScraperService:
    """Get or create the global scraper service (learning store loaded once)"""
    global _scraper_service
    if _scraper_service is None:
        _scraper_service = JobScraperService()
    return _scraper_service
