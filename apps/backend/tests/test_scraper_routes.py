"""
API tests for the job scraper endpoints.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.scraper_routes import router
from pipeline.service import get_scraper_service

SUCCESS = {
    'success': True,
    'data': {'title': 'Engineer', 'company': 'Acme'},
    'source': 'generic',
    'url': 'https://acme.example/jobs/1',
    'extractionQuality': 35,
    'learningStats': {'isNewSite': True, 'attempts': 0, 'successRate': 0, 'confidence': 'low'},
}

FAILURE = {
    'success': False,
    'error': 'Job posting not found - it may have been removed',
    'url': 'https://acme.example/jobs/1',
    'fallbackData': {'title': 'Job Title Not Found', 'status': 'draft'},
    'learningStats': {'isNewSite': False, 'attempts': 1, 'successRate': 0, 'confidence': 'low'},
}


@pytest.fixture
def service():
    service = MagicMock()
    service.scrape_job = AsyncMock(return_value=SUCCESS)
    service.test_scraping = AsyncMock(return_value={'success': True, 'timestamp': '2026-01-01T00:00:00Z'})
    service.get_learning_stats.return_value = {'isNewSite': True, 'attempts': 0, 'successRate': 0, 'confidence': 'low'}
    service.get_learning_data.return_value = {'sites': {}, 'lastUpdated': '2026-01-01T00:00:00Z'}
    return service


@pytest.fixture
def client(service):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_scraper_service] = lambda: service
    return TestClient(app)


class TestScrapeEndpoint:
    """Test POST /api/job-scraper/scrape."""

    def test_success(self, client, service):
        response = client.post("/api/job-scraper/scrape", json={"url": "https://acme.example/jobs/1"})
        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['message'] == "Job data scraped successfully"
        assert body['data']['title'] == "Engineer"
        assert body['extractionQuality'] == 35
        service.scrape_job.assert_awaited_once_with("https://acme.example/jobs/1")

    def test_missing_url(self, client, service):
        response = client.post("/api/job-scraper/scrape", json={})
        assert response.status_code == 400
        assert response.json() == {"message": "URL is required", "error": "MISSING_URL"}
        service.scrape_job.assert_not_called()

    def test_invalid_url(self, client, service):
        response = client.post("/api/job-scraper/scrape", json={"url": "not-a-url"})
        assert response.status_code == 400
        assert response.json()['error'] == "INVALID_URL"
        service.scrape_job.assert_not_called()

    def test_scrape_failure(self, client, service):
        service.scrape_job.return_value = FAILURE
        response = client.post("/api/job-scraper/scrape", json={"url": "https://acme.example/jobs/1"})
        assert response.status_code == 500
        body = response.json()
        assert body['error'] == "SCRAPING_FAILED"
        assert body['details'] == FAILURE['error']
        assert body['fallbackData']['status'] == 'draft'
        assert body['learningStats']['attempts'] == 1


class TestReadEndpoints:
    """Test diagnostic and learning endpoints."""

    def test_test_endpoint(self, client, service):
        response = client.get("/api/job-scraper/test", params={"url": "https://acme.example/jobs/1"})
        assert response.status_code == 200
        assert response.json()['timestamp'] == '2026-01-01T00:00:00Z'

    def test_test_endpoint_requires_url(self, client):
        response = client.get("/api/job-scraper/test")
        assert response.status_code == 400
        assert response.json()['error'] == "MISSING_URL"

    def test_learning_stats(self, client, service):
        response = client.get("/api/job-scraper/learning-stats", params={"domain": "example.com"})
        assert response.status_code == 200
        assert response.json()['stats']['confidence'] == 'low'
        service.get_learning_stats.assert_called_once_with("example.com")

    def test_learning_stats_requires_domain(self, client):
        response = client.get("/api/job-scraper/learning-stats")
        assert response.status_code == 400
        assert response.json()['error'] == "MISSING_DOMAIN"

    def test_supported_sites(self, client):
        body = client.get("/api/job-scraper/supported-sites").json()
        assert body['success'] is True
        assert body['totalSites'] == len(body['supportedSites'])
        assert 'amazon' in {site['siteId'] for site in body['supportedSites']}

    def test_validate_url(self, client):
        body = client.post("/api/job-scraper/validate-url", json={"url": "https://www.dice.com/job-detail/1"}).json()
        assert body['valid'] is True
        assert body['site']['supported'] is True
        assert body['site']['siteId'] == 'dice'

    def test_validate_url_rejects_garbage(self, client):
        response = client.post("/api/job-scraper/validate-url", json={"url": "ftp://files.example.com"})
        assert response.status_code == 400


class TestLearningDataAuth:
    """Test the internal API key on the raw learning document."""

    def test_not_configured(self, client):
        with patch('app.scraper_routes.get_scraper_config', return_value=SimpleNamespace(internal_api_key='')):
            response = client.get("/api/job-scraper/learning-data")
        assert response.status_code == 503

    def test_wrong_key(self, client):
        with patch('app.scraper_routes.get_scraper_config', return_value=SimpleNamespace(internal_api_key='s3cret')):
            response = client.get("/api/job-scraper/learning-data", headers={"X-Internal-Api-Key": "nope"})
        assert response.status_code == 401

    def test_valid_key(self, client):
        with patch('app.scraper_routes.get_scraper_config', return_value=SimpleNamespace(internal_api_key='s3cret')):
            response = client.get("/api/job-scraper/learning-data", headers={"X-Internal-Api-Key": "s3cret"})
        assert response.status_code == 200
        assert response.json()['data']['sites'] == {}


class TestHealth:
    """Test the application health endpoint."""

    def test_healthz(self):
        from main import app
        from pipeline import __version__

        response = TestClient(app).get("/api/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}
