"""
SVG extraction API routes.

This module provides the endpoint for extracting SVG graphics from a web page.
"""

import logging
from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictStr, ValidationError

from svg_extraction.browser import chromium_available
from svg_extraction.core import ExtractionConfig, SvgExtractor, validate_url
from svg_extraction.errors import InvalidUrlError, SvgExtractionError
from svg_extraction.models import SOURCE_KINDS

logger = logging.getLogger(__name__)

router = APIRouter()


class ExtractionRequest(BaseModel):
    """Request model for SVG extraction."""

    url: StrictStr = Field(..., description="Absolute http(s) URL of the page to scan")


class SvgPartModel(BaseModel):
    """One decomposed child of an inline SVG."""

    id: str
    content: str
    tag: str
    label: str


class SvgModel(BaseModel):
    """A single extracted SVG graphic."""

    id: str
    content: str
    sourceKind: str
    label: str
    width: Optional[Union[int, float]] = None
    height: Optional[Union[int, float]] = None
    parts: List[SvgPartModel] = Field(default_factory=list)
    filename: str


class ExtractionResponse(BaseModel):
    """Response model for SVG extraction results."""

    url: str = Field(..., description="Normalized URL that was scanned")
    count: int = Field(..., description="Number of SVGs returned")
    svgs: List[SvgModel] = Field(default_factory=list, description="Extracted SVG graphics")


class ErrorResponse(BaseModel):
    """Error body for failed requests."""

    error: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/extract",
    response_model=ExtractionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def extract_svgs(request: Request):
    """
    Extract every SVG graphic from a web page.

    The page is loaded in a headless browser; inline SVGs, SVG images,
    sprite symbols, embedded objects and SVG backgrounds are collected and
    returned as standalone documents.

    Args:
        request: Request whose JSON body is ``{"url": "..."}``

    Returns:
        ExtractionResponse, or an ``{"error": ...}`` body with status 400/500
    """
    try:
        payload = await request.json()
        body = ExtractionRequest(**payload)
    except (ValueError, TypeError, ValidationError):
        return _error(400, "URL is required")

    try:
        page_url = validate_url(body.url)
    except InvalidUrlError as e:
        return _error(400, str(e))

    try:
        extractor = SvgExtractor(ExtractionConfig())

        logger.info(f"Starting SVG extraction from {page_url}")
        svgs = await extractor.extract_from_url(page_url)

        logger.info(f"Successfully extracted {len(svgs)} SVGs from {page_url}")

        return ExtractionResponse(
            url=page_url,
            count=len(svgs),
            svgs=[SvgModel(**svg.to_dict()) for svg in svgs],
        )

    except SvgExtractionError as e:
        logger.error(f"SVG extraction failed: {str(e)}")
        return _error(500, str(e))

    except Exception as e:
        logger.error(f"Unexpected error during SVG extraction: {str(e)}")
        return _error(500, str(e) or "Failed to extract SVGs")


@router.get("/config/defaults")
async def get_default_config() -> Dict:
    """
    Get the default extraction configuration parameters.

    Returns:
        Dictionary containing default configuration values and descriptions
    """
    config = ExtractionConfig()

    return {
        "config": {
            "navigation_timeout_ms": {
                "value": config.navigation_timeout_ms,
                "description": "Maximum time for the page to load and go network-idle",
                "type": "integer",
            },
            "settle_delay_ms": {
                "value": config.settle_delay_ms,
                "description": "Extra wait after load for lazily inserted content",
                "type": "integer",
            },
            "request_timeout_seconds": {
                "value": config.request_timeout_seconds,
                "description": "Wall-clock budget for the whole extraction",
                "type": "float",
            },
            "min_content_length": {
                "value": config.min_content_length,
                "description": "Serialized inline SVGs shorter than this are skipped",
                "type": "integer",
            },
            "fallback_color": {
                "value": config.fallback_color,
                "description": "Replacement for color values that only resolve inside the page",
                "type": "string",
            },
        },
        "source_kinds": list(SOURCE_KINDS),
    }


@router.get("/health")
async def health_check() -> Dict:
    """
    Check if the headless browser is available.

    Returns:
        Health status and available features
    """
    try:
        browser_available = await chromium_available()
        message = (
            "SVG extraction service is ready"
            if browser_available
            else "Chromium is not installed. Run: playwright install chromium"
        )
    except Exception as e:
        browser_available = False
        message = str(e)

    return {
        "status": "healthy" if browser_available else "unhealthy",
        "message": message,
        "dependencies": {
            "chromium": browser_available,
        },
    }
