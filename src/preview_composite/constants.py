"""
Various constants for preview_composite
"""

from enum import Enum


class ShapeKind(str, Enum):
    """
    Shape kind in a selection.

    Only :py:attr:`PREVIEW` shapes are capturable; their live content is
    snapshotted and drawn into the placeholder left in the base raster.
    """

    PREVIEW = "preview"
    GEO = "geo"
    ARROW = "arrow"
    TEXT = "text"
    DRAW = "draw"
    NOTE = "note"
    FRAME = "frame"
    IMAGE = "image"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value):  # type: ignore[no-untyped-def]
        return cls.OTHER

    @property
    def capturable(self) -> bool:
        return self is ShapeKind.PREVIEW


class ImageFormat(str, Enum):
    """
    Output encoding.
    """

    JPEG = "JPEG"
    PNG = "PNG"
    WEBP = "WEBP"

    @property
    def mime_type(self) -> str:
        return "image/" + self.value.lower()

    @property
    def lossy(self) -> bool:
        return self is not ImageFormat.PNG

    @property
    def has_alpha(self) -> bool:
        return self is not ImageFormat.JPEG


#: Element id template of the isolated rendering surface of a preview shape.
SURFACE_ID_TEMPLATE = "iframe-1-{id}"

#: Default encoder quality in the [0, 1] range.
DEFAULT_QUALITY = 0.85

#: Device pixel ratio requested from the snapshot provider.
DEFAULT_CAPTURE_DPR = 1.0

#: Backdrop color used when flattening alpha for formats without it.
DEFAULT_BACKGROUND = (255, 255, 255)
