"""
Retrieval of SVG content referenced by URL (images, objects, backgrounds).
"""

import logging
from typing import List
from urllib.parse import urljoin

from .assembler import normalize_external_document
from .colors import FALLBACK_COLOR
from .dom import PageSession
from .models import ExtractedSvg

logger = logging.getLogger(__name__)

GRAPHIC_ROOT_MARKER = "<svg"


def resolve_reference(base_url: str, reference: str) -> str:
    """Resolve a reference as written in the page against the document base URL."""
    return urljoin(base_url, reference.strip())


def looks_like_svg(text: str) -> bool:
    return bool(text) and GRAPHIC_ROOT_MARKER in text


class ExternalContentFetcher:
    """Fills in content for candidates discovered by reference only."""

    def __init__(self, session: PageSession, fallback_color: str = FALLBACK_COLOR):
        self.session = session
        self.fallback_color = fallback_color

    async def fill(self, candidates: List[ExtractedSvg], base_url: str) -> int:
        """
        Fetch content for every candidate that has none yet.

        Candidates are fetched one at a time, in order, with a single attempt
        each. A failed fetch leaves the candidate's content empty.

        Args:
            candidates: Discovery results (updated in place)
            base_url: Document base URL used to resolve references

        Returns:
            Number of candidates whose content was filled
        """
        filled = 0
        for candidate in candidates:
            if candidate.content or not candidate.reference:
                continue

            url = resolve_reference(base_url, candidate.reference)
            try:
                text = await self.session.fetch_text(url)
            except Exception as e:
                logger.debug(f"Fetching {url} for {candidate.id} failed: {e}")
                continue

            if not looks_like_svg(text):
                logger.debug(f"Skipping {url} for {candidate.id}: response is not SVG")
                continue

            candidate.content = normalize_external_document(text, self.fallback_color)
            filled += 1
        return filled
