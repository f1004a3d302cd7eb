"""
Placement Advisor - Main FastAPI Application
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from contextlib import asynccontextmanager

from .config import settings
from .api import auth_router, chat_router
from .core import RedirectRequired, Route
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    setup_logging(settings)

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Auth API: {settings.auth_api_base_url}")
    logger.info(f"LLM provider: {settings.llm_provider}")
    logger.info(f"Log level: {settings.log_level.upper()}")
    logger.info(f"Debug mode: {settings.debug}")
    if not (settings.llm_api_key or settings.google_api_key):
        logger.warning("No LLM API key configured; chat replies will fall back to the error message")
    yield
    logger.info(f"Shutting down {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Placement advisor chat for college students",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware (after CORS)
if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(auth_router)
app.include_router(chat_router)


@app.exception_handler(RedirectRequired)
async def redirect_required_handler(request: Request, exc: RedirectRequired):
    """Turn route guard redirects into 303 responses."""
    logger.info(f"Redirecting {request.url.path} -> {exc.location}")
    return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)


@app.get("/")
async def root():
    """Entry point; the auth view decides where to go next."""
    return RedirectResponse(Route.AUTH.value, status_code=status.HTTP_303_SEE_OTHER)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "app": settings.app_name,
        "status": "healthy",
        "version": settings.app_version,
        "llm_provider": settings.llm_provider,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "placement_advisor.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
