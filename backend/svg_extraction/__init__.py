"""
SVG extraction module.

This module provides functionality to harvest SVG graphics from a rendered
web page and turn each one into a standalone, portable SVG document.
"""

from .core import ExtractionConfig, SvgExtractor, validate_url
from .errors import InvalidUrlError, NavigationError, SvgExtractionError
from .models import ExtractedSvg, SvgPart

__all__ = [
    "ExtractedSvg",
    "ExtractionConfig",
    "InvalidUrlError",
    "NavigationError",
    "SvgExtractionError",
    "SvgExtractor",
    "SvgPart",
    "validate_url",
]
