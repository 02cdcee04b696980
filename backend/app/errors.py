"""
Error taxonomy for the ad rendering core.

Fatal errors (ResourceFetchError, EncodeError) abort a render. Non-fatal ones
(PaletteExtractionError, FontUnavailableError) are logged by the code that
catches them and replaced with a documented fallback.
"""

from typing import Optional


class AdRenderError(Exception):
    """Base class for every error raised by the rendering core."""

    stage: str = "unknown"
    fatal: bool = True

    def __init__(self, message: str = "", stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        return self.message or self.__class__.__name__


class ResourceFetchError(AdRenderError):
    """Background or logo image could not be fetched or decoded."""

    stage = "loading"


class PaletteExtractionError(AdRenderError):
    stage = "extracting_palette"
    fatal = False


class FontUnavailableError(AdRenderError):
    stage = "startup"
    fatal = False


class EncodeError(AdRenderError):
    stage = "encoding"


class InvalidStyleError(AdRenderError):
    """Unknown style id. Raised at the request boundary, before the core runs."""

    stage = "validation"

    def __init__(self, style_id: str, available: list[str]):
        super().__init__(f"Invalid style selected: {style_id!r}")
        self.style_id = style_id
        self.available = available
