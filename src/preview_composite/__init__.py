"""
preview-composite: flatten canvas screenshots with live preview content.

A canvas exporter renders every shape of a selection but leaves preview
shapes, whose content lives in isolated rendering surfaces, blank. This
package captures those surfaces, draws them into the placeholders at the
right scale and restores the remaining shapes on top.

Basic usage::

    import asyncio

    from preview_composite import CanvasBounds, Shape, composite_preview_screenshots

    selection = [
        Shape("shape:page", "preview", x=50, y=20, w=30, h=30),
        Shape("shape:arrow", "arrow"),
    ]
    data_url = asyncio.run(
        composite_preview_screenshots(
            "canvas.png",
            selection,
            CanvasBounds(0, 0, 200, 100),
            padding=10,
            snapshot_provider=provider,
            scene_exporter=exporter,
        )
    )

Architecture:

- :py:mod:`preview_composite.api`: Collaborator protocols, capture, IO and encoding
- :py:mod:`preview_composite.composite`: Coordinate mapping and layer compositing
"""

from preview_composite.api.preview import composite_preview_screenshots
from preview_composite.api.shapes import CanvasBounds, CapturableRegion, Shape
from preview_composite.config import CompositeOptions
from preview_composite.constants import ImageFormat, ShapeKind
from preview_composite.exceptions import (
    BaseLoadFailure,
    Error,
    OverlayAcquisitionFailure,
    RegionCaptureFailure,
)
from preview_composite.version import __version__

__all__ = [
    "BaseLoadFailure",
    "CanvasBounds",
    "CapturableRegion",
    "CompositeOptions",
    "Error",
    "ImageFormat",
    "OverlayAcquisitionFailure",
    "RegionCaptureFailure",
    "Shape",
    "ShapeKind",
    "composite_preview_screenshots",
    "__version__",
]
