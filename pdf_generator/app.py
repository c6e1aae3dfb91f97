"""
PDF Generator - FastAPI application.

Provides POST /pdf, which renders a URL to PDF through a remote Chromium,
and GET /health, which reports whether that Chromium can be reached.
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from pydantic import BaseModel, Field

from . import __version__
from .config import get_settings, validate_config_on_startup
from .errors import DiscoveryError
from .pdf_helpers import content_disposition, is_absolute_url
from .renderer import PDFRenderer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="PDF Generator",
    version=__version__,
    description="Renders URLs to PDF using a remote headless Chromium"
)


@lru_cache()
def get_renderer() -> PDFRenderer:
    """Process-wide renderer; its endpoint cache is shared by all requests."""
    return PDFRenderer(get_settings())


# ============================================================================
# Startup Event - Validate config and warm the endpoint cache
# ============================================================================

@app.on_event("startup")
async def warm_up_on_startup():
    """
    Validate configuration and resolve the browser endpoint once.

    An unreachable browser is logged but does not stop the service; the
    endpoint is resolved again on the first request.
    """
    settings = validate_config_on_startup()
    logging.getLogger().setLevel(settings.log_level)

    logger.info("PDF Generator starting - resolving Chromium endpoint...")
    try:
        endpoint = await get_renderer().resolve_endpoint()
        logger.info(f"Chromium reachable at {endpoint}")
    except DiscoveryError as e:
        logger.warning(f"Chromium not reachable on startup: {e}")


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    timestamp: datetime
    discovery_url: str
    browser_endpoint: str


class PDFRequest(BaseModel):
    """URL to PDF request."""
    url: Optional[str] = Field(None, description="Absolute URL of the page to render")
    filename: Optional[str] = Field(None, description="Download name for the resulting PDF")


# ============================================================================
# Health Check Endpoint
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check(renderer: PDFRenderer = Depends(get_renderer)) -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns HTTP 503 if no live Chromium endpoint can be resolved.
    """
    discovery_url = renderer.settings.chromium_version_url
    try:
        endpoint = await renderer.resolve_endpoint()
    except DiscoveryError as e:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "timestamp": datetime.utcnow().isoformat(),
                "discovery_url": discovery_url,
                "error": e.reason,
            }
        )

    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        discovery_url=discovery_url,
        browser_endpoint=endpoint,
    )


# ============================================================================
# PDF Generation Endpoint
# ============================================================================

PDF_PATHS = {"/pdf", "/PDF"}


@app.exception_handler(RequestValidationError)
async def pdf_validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    """Unparseable PDF requests fail like any other PDF failure: a bare 500."""
    if request.url.path in PDF_PATHS:
        logger.error(f"Rejected malformed PDF request: {exc.errors()}")
        return Response(status_code=500)
    return await request_validation_exception_handler(request, exc)


@app.post("/pdf")
@app.post("/PDF", include_in_schema=False)
async def generate_pdf(
    request: PDFRequest,
    renderer: PDFRenderer = Depends(get_renderer),
) -> Response:
    """
    Render a URL to PDF.

    Returns:
        The PDF as an attachment named after request.filename

    Any failure is returned as a bare HTTP 500.
    """
    try:
        if request.url is None or request.filename is None:
            raise ValueError("Both url and filename are required")
        if not is_absolute_url(request.url):
            raise ValueError(f"Not an absolute URL: {request.url!r}")
        disposition = content_disposition(request.filename)

        logger.info(f"Starting PDF generation for {request.url}")
        pdf_bytes = await renderer.generate_pdf(request.url)
    except Exception as e:
        logger.error(f"PDF generation failed for {request.url}: {e}")
        return Response(status_code=500)

    logger.info(f"PDF generation completed: {len(pdf_bytes)} bytes")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"content-disposition": disposition},
    )
