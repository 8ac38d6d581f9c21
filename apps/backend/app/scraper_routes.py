"""
Job scraper API endpoints.

Thin plumbing over JobScraperService. The raw learning document is protected
by the INTERNAL_API_KEY header token.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.errors import InvalidURL
from core.scraper_config import get_scraper_config
from core.site_classifier import describe_site, supported_sites
from core.url_analyzer import validate_url
from pipeline.service import JobScraperService, get_scraper_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/job-scraper", tags=["job_scraper"])


class ScrapeRequest(BaseModel):
    url: Optional[str] = None


def verify_internal_api_key(x_internal_api_key: Optional[str] = Header(None)):
    """Verify internal API key."""
    expected = get_scraper_config().internal_api_key
    if not expected:
        raise HTTPException(
            status_code=503,
            detail="Internal API not configured (INTERNAL_API_KEY not set)"
        )

    if not x_internal_api_key or x_internal_api_key != expected:
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing internal API key"
        )

    return True


def _bad_request(message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": message, "error": code})


def _check_url(url: Optional[str]) -> Optional[JSONResponse]:
    if not url:
        return _bad_request("URL is required", "MISSING_URL")
    try:
        validate_url(url)
    except InvalidURL:
        return _bad_request("Invalid URL format", "INVALID_URL")
    return None


@router.post("/scrape")
async def scrape_job_from_url(
    request: ScrapeRequest,
    service: JobScraperService = Depends(get_scraper_service),
):
    """Scrape a job posting URL into a normalized job record."""
    invalid = _check_url(request.url)
    if invalid:
        return invalid

    result = await service.scrape_job(request.url)

    if not result['success']:
        return JSONResponse(
            status_code=500,
            content={
                "message": "Failed to scrape job data",
                "error": "SCRAPING_FAILED",
                "details": result['error'],
                "fallbackData": result['fallbackData'],
                "learningStats": result['learningStats'],
            }
        )

    return {
        "success": True,
        "message": "Job data scraped successfully",
        "data": result['data'],
        "source": result['source'],
        "url": request.url,
        "extractionQuality": result.get('extractionQuality') or 0,
        "learningStats": result.get('learningStats'),
    }


@router.get("/test")
async def test_job_scraping(
    url: Optional[str] = Query(None),
    service: JobScraperService = Depends(get_scraper_service),
):
    """Diagnostic scrape with timestamp."""
    if not url:
        return _bad_request("URL parameter is required", "MISSING_URL")
    return await service.test_scraping(url)


@router.get("/learning-stats")
async def get_learning_stats(
    domain: Optional[str] = Query(None),
    service: JobScraperService = Depends(get_scraper_service),
):
    """Learning statistics for one domain."""
    if not domain:
        return _bad_request("Domain parameter is required", "MISSING_DOMAIN")
    return {"success": True, "stats": service.get_learning_stats(domain)}


@router.get("/learning-data")
async def get_all_learning_data(
    service: JobScraperService = Depends(get_scraper_service),
    _: bool = Depends(verify_internal_api_key),
):
    """Raw learning document (admin only)."""
    return {"success": True, "data": service.get_learning_data()}


@router.get("/supported-sites")
async def get_supported_sites():
    """Job boards with dedicated extractors."""
    sites = supported_sites()
    return {"success": True, "supportedSites": sites, "totalSites": len(sites)}


@router.post("/validate-url")
async def validate_scraping_url(request: ScrapeRequest):
    """Check a URL's format and whether its site has a dedicated extractor."""
    invalid = _check_url(request.url)
    if invalid:
        return invalid
    return {"success": True, "valid": True, "site": describe_site(request.url)}
