from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

import httpx

from app.config import settings
from app.api import routes
from app.models.search_model import ErrorResponse, RootResponse
from app.services.search import SearchService, UpstreamSearchFailure
from app.services.soundcloud import SoundCloudClient
from app.utils.params import BadRequest


# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """

    if settings.allow_all_origins:
        logger.warning("CORS_ORIGINS is not set, allowing requests from any origin")

    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.REQUEST_TIMEOUT_SECONDS),
        headers={"User-Agent": settings.USER_AGENT},
        follow_redirects=True,
    )
    routes.soundcloud_client = SoundCloudClient(
        http_client=http_client,
        client_id=settings.SOUNDCLOUD_CLIENT_ID,
    )
    routes.search_service = SearchService(client=routes.soundcloud_client)
    logger.info("=" * 60)
    logger.info("SoundCloud Search API started successfully!")
    logger.info(f"Port: {settings.PORT}")
    logger.info(f"CORS origins: {', '.join(settings.cors_origins)}")
    logger.info(f"Limits: default {settings.DEFAULT_LIMIT}, max {settings.MAX_LIMIT}")
    logger.info(f"Client id configured: {routes.soundcloud_client.has_client_id}")
    logger.info("=" * 60)

    try:
        yield
    finally:
        await routes.soundcloud_client.close()
        routes.search_service = None
        routes.soundcloud_client = None
        logger.info("SoundCloud client closed")


# Create FastAPI app
app = FastAPI(
    title="SoundCloud Search API",
    description="Search SoundCloud tracks with per-track details",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=not settings.allow_all_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(routes.router)


@app.exception_handler(BadRequest)
async def bad_request_handler(request: Request, exc: BadRequest):
    logger.info(f"Rejected {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content=ErrorResponse(error=exc.message).model_dump(exclude_none=True))


@app.exception_handler(UpstreamSearchFailure)
async def upstream_failure_handler(request: Request, exc: UpstreamSearchFailure):
    # Details stay in the server log
    logger.error(f"Search request failed: {str(exc)}", exc_info=exc)
    body = ErrorResponse(
        error="Internal server error while searching SoundCloud.",
        message="The search could not be completed. Please try again later.",
    )
    return JSONResponse(status_code=500, content=body.model_dump())


# Root endpoint
@app.get("/", response_model=RootResponse)
async def root():
    return RootResponse(
        message="Welcome to the SoundCloud Search API.",
        status="running",
        developer=settings.DEVELOPER,
        usage="/search?q={query}&limit={number_of_results}",
        warning="This API relies on an unofficial SoundCloud scraper and may break without notice.",
    )


if __name__ == "__main__":
    import uvicorn

    # Run with uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level="info"
    )
