"""
Mapping from document space into the pixel grid of the base raster.

The scale used to produce the base raster is never assumed: exporters apply
their own export scale and device pixel ratio, so the scale is derived from
the raster's actual width.
"""

import logging
from typing import Iterable

from preview_composite.api.shapes import CanvasBounds, CapturableRegion, PixelRect

logger = logging.getLogger(__name__)


def scale_factor(bounds: CanvasBounds, padding: float, raster_width: int) -> float:
    """
    Pixels per document unit of a raster exported from ``bounds``.

    :param bounds: Bounds of the exported selection.
    :param padding: Margin in document units around ``bounds``.
    :param raster_width: Width of the exported raster in pixels.
    :raises ValueError: if ``padding`` is negative or the derived scale is not
        positive.
    """
    scale = raster_width / bounds.padded(padding).width
    if not scale > 0:
        raise ValueError("Degenerate scale factor %r for width %r" % (scale, raster_width))
    return scale


def map_region(
    region: CapturableRegion, bounds: CanvasBounds, padding: float, scale: float
) -> PixelRect:
    """
    Map a document-space region to a pixel rectangle.

    Out of bounds or zero-area results are returned as is; clipping is left
    to the compositor.
    """
    return PixelRect(
        x=(region.x - bounds.x + padding) * scale,
        y=(region.y - bounds.y + padding) * scale,
        w=region.w * scale,
        h=region.h * scale,
    )


def map_regions(
    regions: Iterable[CapturableRegion],
    bounds: CanvasBounds,
    padding: float,
    scale: float,
) -> list[PixelRect]:
    rects = [map_region(region, bounds, padding, scale) for region in regions]
    logger.debug("Mapped %d regions at scale %g" % (len(rects), scale))
    return rects
