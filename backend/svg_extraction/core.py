"""
SVG extraction core functionality.

This module ties discovery and fetching together for a single page: one
snapshot is scanned for graphics, referenced SVG files are fetched, and
every graphic that ended up with content is returned.
"""

import asyncio
import logging
from typing import List, Optional
from urllib.parse import urlparse, urlunparse

from config import (
    MIN_CONTENT_LENGTH,
    NAVIGATION_TIMEOUT_MS,
    REQUEST_TIMEOUT_SECONDS,
    SETTLE_DELAY_MS,
    USER_AGENT,
)

from .browser import open_page
from .colors import FALLBACK_COLOR
from .discovery import DiscoveryScanner
from .dom import PageSession
from .errors import InvalidUrlError, SvgExtractionError
from .fetcher import ExternalContentFetcher
from .models import ExtractedSvg, IdAllocator

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


class ExtractionConfig:
    """Configuration for SVG extraction."""

    def __init__(
        self,
        navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
        settle_delay_ms: int = SETTLE_DELAY_MS,
        request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
        user_agent: str = USER_AGENT,
        min_content_length: int = MIN_CONTENT_LENGTH,
        fallback_color: str = FALLBACK_COLOR,  # Replaces non-portable color tokens
        default_paint: str = FALLBACK_COLOR,   # Used when computed fill/stroke is unusable
        decompose_parts: bool = True,
    ):
        self.navigation_timeout_ms = navigation_timeout_ms
        self.settle_delay_ms = settle_delay_ms
        self.request_timeout_seconds = request_timeout_seconds
        self.user_agent = user_agent
        self.min_content_length = min_content_length
        self.fallback_color = fallback_color
        self.default_paint = default_paint
        self.decompose_parts = decompose_parts


def validate_url(url) -> str:
    """
    Check that ``url`` is an absolute http(s) URL.

    Args:
        url: Value supplied by the caller

    Returns:
        Normalized URL string

    Raises:
        InvalidUrlError: If the value is missing, not a string or not http(s)
    """
    if not url or not isinstance(url, str):
        raise InvalidUrlError("URL is required")
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        raise InvalidUrlError("Invalid URL format")
    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
        raise InvalidUrlError("Invalid URL format")
    return urlunparse(parsed._replace(scheme=parsed.scheme.lower(), path=parsed.path or "/"))


class SvgExtractor:
    """Main SVG extraction class."""

    def __init__(self, config: Optional[ExtractionConfig] = None, page_opener=open_page):
        self.config = config or ExtractionConfig()
        self.page_opener = page_opener

    async def extract_from_url(self, url: str) -> List[ExtractedSvg]:
        """
        Load a page and extract every SVG graphic from it.

        The whole operation, navigation included, runs under
        ``config.request_timeout_seconds``.

        Args:
            url: Absolute http(s) URL of the page

        Returns:
            Extracted graphics in discovery order

        Raises:
            InvalidUrlError: If the URL is not acceptable
            NavigationError: If the page fails to load
            SvgExtractionError: If the time budget runs out
        """
        page_url = validate_url(url)
        try:
            return await asyncio.wait_for(
                self._extract_from_page(page_url),
                timeout=self.config.request_timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise SvgExtractionError(
                f"Extraction timed out after {self.config.request_timeout_seconds:g} seconds"
            )

    async def _extract_from_page(self, page_url: str) -> List[ExtractedSvg]:
        async with self.page_opener(page_url, self.config) as session:
            return await self.extract_from_session(session)

    async def extract_from_session(self, session: PageSession) -> List[ExtractedSvg]:
        """
        Extract graphics from an already loaded page.

        Args:
            session: Loaded page capabilities

        Returns:
            Graphics with non-empty content, in discovery order
        """
        document = await session.snapshot()

        scanner = DiscoveryScanner(
            min_content_length=self.config.min_content_length,
            fallback_color=self.config.fallback_color,
            default_paint=self.config.default_paint,
            decompose_parts=self.config.decompose_parts,
        )
        candidates = scanner.scan(document, IdAllocator())

        fetcher = ExternalContentFetcher(session, fallback_color=self.config.fallback_color)
        filled = await fetcher.fill(candidates, document.base_url)

        svgs = [candidate for candidate in candidates if candidate.content]
        logger.info(
            f"Discovered {len(candidates)} candidates, fetched {filled}, "
            f"returning {len(svgs)} SVGs"
        )
        return svgs
