from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from contextlib import asynccontextmanager
import os
import logging
import traceback

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from app.scraper_routes import router as scraper_router
from crawler.plugins import get_plugin_registry
from pipeline import __version__
from pipeline.service import get_scraper_service


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application lifecycle events."""
    app_env = os.getenv("SCRAPER_ENV", "production").lower()
    logger.info(f"[scraper] env: SCRAPER_ENV={app_env}")

    # Load the learning store and plugins once at startup
    service = get_scraper_service()
    registry = get_plugin_registry()
    logger.info(
        f"[scraper] Ready: {len(service.store)} known domains, "
        f"{len(registry.list_plugins())} plugins, timeout={service.timeout}s"
    )

    yield


app = FastAPI(title="Job Scraper API", version=__version__, lifespan=lifespan)


# Error masking middleware
@app.middleware("http")
async def error_masking_middleware(request: Request, call_next):
    """Mask detailed errors in production; show full errors in dev."""
    try:
        response = await call_next(request)
        return response
    except HTTPException:
        raise
    except Exception as e:
        is_dev = os.getenv("SCRAPER_ENV", "").lower() == "dev"

        logger.error(f"Unhandled error: {str(e)}")
        if is_dev:
            logger.error(traceback.format_exc())
            return JSONResponse(
                status_code=500,
                content={
                    "status": "error",
                    "error": str(e),
                    "traceback": traceback.format_exc()
                }
            )
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "error": "An internal error occurred. Please try again later."
            }
        )


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(scraper_router)


@app.get("/api/healthz")
async def healthz():
    return {"status": "ok", "version": __version__}
