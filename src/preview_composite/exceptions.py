"""
Exceptions raised while compositing preview screenshots.

Only :py:class:`BaseLoadFailure` escapes
:py:func:`~preview_composite.api.preview.composite_preview_screenshots`; the
other failures are recovered locally and degrade the output instead.
"""

from typing import Optional


class Error(Exception):
    """Base class of preview_composite errors."""


class BaseLoadFailure(Error):
    """The base raster cannot be loaded or decoded."""


class RegionCaptureFailure(Error):
    """
    The live content of one region could not be captured.

    :param region_id: id of the capturable region.
    :param reason: short description of the failure.
    """

    def __init__(self, region_id: str, reason: str) -> None:
        super().__init__("Capture failed for %s: %s" % (region_id, reason))
        self.region_id = region_id
        self.reason = reason


class OverlayAcquisitionFailure(Error):
    """The transparent overlay of non-capturable shapes could not be rendered."""

    def __init__(self, reason: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.cause = cause
