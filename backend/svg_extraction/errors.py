"""
Exceptions raised by the SVG extraction pipeline.
"""


class SvgExtractionError(Exception):
    """Raised when SVG extraction fails."""
    pass


class InvalidUrlError(SvgExtractionError):
    """Raised when the requested URL is missing, malformed or not http(s)."""
    pass


class NavigationError(SvgExtractionError):
    """Raised when the page cannot be loaded."""
    pass
