"""
Unit tests for the scraper service (end-to-end over mocked fetches).
"""

import asyncio
import pytest
from unittest.mock import AsyncMock

from core.errors import FetchFailed
from core.learning_store import LearningStore
from core.net import RawPage
from core.site_classifier import SiteId
from pipeline.extractor import ExtractionOutcome, JobExtractor
from pipeline.records import JobRecord
from pipeline.service import FALLBACK_DESCRIPTION, JobScraperService

LINKEDIN_URL = "https://www.linkedin.com/jobs/view/3791234567"
LINKEDIN_HTML = """
<html><body>
  <h1 class="job-details-jobs-unified-top-card__job-title">Senior Backend Engineer</h1>
  <a class="job-details-jobs-unified-top-card__company-name">Acme</a>
  <span class="job-details-jobs-unified-top-card__bullet">Remote</span>
  <div class="jobs-description__content">
    We are hiring a backend engineer to own our payments platform end to end.
    You will design APIs, run services in production and mentor other engineers on the team.
    Experience with Python, PostgreSQL and Kubernetes is required for this position.
  </div>
</body></html>
"""


def fetcher_returning(html=None, error=None):
    fetcher = AsyncMock()
    if error is not None:
        fetcher.fetch.side_effect = error
    else:
        fetcher.fetch.side_effect = lambda url: RawPage(url, url, 200, html)
    return fetcher


@pytest.fixture
def store(tmp_path):
    return LearningStore(tmp_path / "learning.json")


def make_service(store, fetcher=None, extractor=None):
    extractor = extractor or JobExtractor(fetcher=fetcher)
    return JobScraperService(store=store, extractor=extractor)


class TestScrapeJob:
    """Test the full scrape flow and its failure modes."""

    @pytest.mark.asyncio
    async def test_success(self, store):
        service = make_service(store, fetcher_returning(LINKEDIN_HTML))
        result = await service.scrape_job(LINKEDIN_URL)

        assert result['success'] is True
        assert result['source'] == 'linkedin'
        assert result['url'] == LINKEDIN_URL
        data = result['data']
        assert data['title'] == "Senior Backend Engineer"
        assert data['company'] == "Acme"
        assert data['location'] == "Remote"
        assert data['applyLink'] == LINKEDIN_URL
        assert data['jobType'] == "Full-time"
        assert {"Python", "PostgreSQL", "Kubernetes"} <= set(data['skills'])
        # title, company, location, description, skills
        assert result['extractionQuality'] == 90

        # Stats are captured before this run
        assert result['learningStats']['isNewSite'] is True
        stats = service.get_learning_stats("www.linkedin.com")
        assert stats['attempts'] == 1
        assert stats['successRate'] == pytest.approx(0.9)

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_fallback(self, store):
        error = FetchFailed("u", "Job posting not found - it may have been removed", status_code=404)
        service = make_service(store, fetcher_returning(error=error))
        result = await service.scrape_job("https://careers.acme.com/jobs/senior-data-engineer")

        assert result['success'] is False
        assert "Job posting not found" in result['error']
        fallback = result['fallbackData']
        assert fallback['status'] == 'draft'
        assert fallback['title'] == "Senior Data Engineer"
        assert fallback['company'] == "Acme"
        assert fallback['description'] == FALLBACK_DESCRIPTION
        assert fallback['experience'] == "Senior"
        assert result['learningStats']['attempts'] == 1
        assert result['learningStats']['successRate'] == 0

    @pytest.mark.asyncio
    async def test_fallback_placeholders(self, store):
        service = make_service(store, fetcher_returning(error=FetchFailed("u", "Could not connect")))
        result = await service.scrape_job("https://example.org/p/1")

        fallback = result['fallbackData']
        assert fallback['title'] == "Job Title Not Found"
        assert fallback['company'] == "Company Not Found"
        assert fallback['location'] == "Location Not Specified"
        assert fallback['jobType'] == "Full-time"
        assert fallback['experience'] == "Entry"
        assert fallback['applyLink'] == "https://example.org/p/1"

    @pytest.mark.asyncio
    async def test_timeout_cancels_extraction(self, store):
        cancelled = asyncio.Event()

        async def slow_extract(url):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        extractor = AsyncMock()
        extractor.extract.side_effect = slow_extract
        service = make_service(store, extractor=extractor)
        service.timeout = 0.05

        result = await service.scrape_job(LINKEDIN_URL)

        assert result['success'] is False
        assert result['error'] == "Scraping timeout: Request took too long"
        assert cancelled.is_set()
        assert store.get_stats("www.linkedin.com")['attempts'] == 1

    @pytest.mark.asyncio
    async def test_invalid_url_is_not_recorded(self, store):
        extractor = AsyncMock()
        service = make_service(store, extractor=extractor)
        result = await service.scrape_job("not a url")

        assert result['success'] is False
        assert result['fallbackData']['title'] == "Job Title Not Found"
        assert len(store) == 0
        extractor.extract.assert_not_called()

    @pytest.mark.asyncio
    async def test_amazon_url_fallback_end_to_end(self, store):
        url = "https://www.amazon.jobs/en/jobs/2345678/software-development-engineer"
        service = make_service(store, fetcher_returning(error=FetchFailed(url, "Access denied", status_code=403)))
        result = await service.scrape_job(url)

        assert result['success'] is True
        assert result['source'] == 'amazon'
        data = result['data']
        assert data['title'] == "Software Development Engineer"
        assert data['company'] == "Amazon"
        assert len(data['skills']) == 4
        # title + company + skills; fallback description is too short to count
        assert result['extractionQuality'] == 50
        assert service.get_learning_stats("www.amazon.jobs")['successRate'] == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_output_is_bounded(self, store):
        record = JobRecord(
            title="T" * 300,
            company="C" * 300,
            location="L" * 300,
            description="D" * 5000,
            skills=[f"Skill{i}" for i in range(30)],
        )
        extractor = AsyncMock()
        extractor.extract.return_value = ExtractionOutcome(record, SiteId.GENERIC, "generic", ["generic"])
        service = make_service(store, extractor=extractor)

        data = (await service.scrape_job("https://acme.example/jobs/1"))['data']
        assert len(data['title']) == 100
        assert len(data['company']) == 50
        assert len(data['location']) == 50
        assert len(data['description']) == 2000
        assert len(data['skills']) == 10

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, store):
        extractor = AsyncMock()
        extractor.extract.side_effect = ValueError("kaboom")
        service = make_service(store, extractor=extractor)
        result = await service.scrape_job("https://acme.example/jobs/1")

        assert result['success'] is False
        assert result['error'] == "kaboom"
        assert store.get_stats("acme.example")['attempts'] == 1

    @pytest.mark.asyncio
    async def test_learning_stats_reflect_previous_runs(self, store):
        service = make_service(store, fetcher_returning(LINKEDIN_HTML))
        await service.scrape_job(LINKEDIN_URL)
        second = await service.scrape_job(LINKEDIN_URL)
        assert second['learningStats']['isNewSite'] is False
        assert second['learningStats']['attempts'] == 1


class TestDiagnostics:
    """Test the diagnostic and read-only operations."""

    @pytest.mark.asyncio
    async def test_test_scraping_success(self, store):
        service = make_service(store, fetcher_returning(LINKEDIN_HTML))
        result = await service.test_scraping(LINKEDIN_URL)
        assert result['success'] is True
        assert result['source'] == 'linkedin'
        assert result['timestamp'].endswith('Z')
        assert 'fallbackData' not in result
        breakdown = result['qualityBreakdown']
        assert breakdown['score'] == 90
        assert sum(breakdown['factors'].values()) == 90
        assert breakdown['missing_fields'] == ['salary']

    @pytest.mark.asyncio
    async def test_test_scraping_failure(self, store):
        service = make_service(store, fetcher_returning(error=FetchFailed("u", "Could not connect")))
        result = await service.test_scraping("https://acme.example/jobs/1")
        assert result['success'] is False
        assert result['error'] == "Could not connect"
        assert result['fallbackData']['status'] == 'draft'

    @pytest.mark.asyncio
    async def test_learning_stats_lookup_is_normalized(self, store):
        service = make_service(store, fetcher_returning(LINKEDIN_HTML))
        await service.scrape_job(LINKEDIN_URL)
        assert service.get_learning_stats("  WWW.LinkedIn.com ")['attempts'] == 1
        assert "www.linkedin.com" in service.get_learning_data()['sites']
