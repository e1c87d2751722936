"""
Preview screenshot compositing.

A canvas export renders every shape but leaves preview shapes blank, because
their live content sits in isolated rendering surfaces the exporter cannot
see. :py:func:`composite_preview_screenshots` fills those placeholders with
live snapshots and restores annotations on top.

Layers (bottom to top):

1. Base image (background and blank preview placeholders)
2. Snapshots of the preview surfaces
3. Transparent overlay of the non-preview shapes

Example usage::

    import asyncio

    from preview_composite import CanvasBounds, Shape, composite_preview_screenshots

    payload = asyncio.run(
        composite_preview_screenshots(
            base_image_url,
            selection,
            CanvasBounds(0, 0, 200, 100),
            padding=10,
            snapshot_provider=provider,
            scene_exporter=exporter,
        )
    )
"""

import logging
from typing import Any, Optional, Sequence

import httpx
from PIL import Image

from preview_composite.api import capture, pil_io
from preview_composite.api.encoder import encode_payload
from preview_composite.api.protocols import SceneExporter, SnapshotProvider
from preview_composite.api.shapes import (
    CanvasBounds,
    Shape,
    capturable_regions,
    non_capturable,
    validate_padding,
)
from preview_composite.composite import composite_layers, map_region, scale_factor
from preview_composite.config import CompositeOptions
from preview_composite.exceptions import BaseLoadFailure, OverlayAcquisitionFailure

logger = logging.getLogger(__name__)


async def composite_preview_screenshots(
    base_source: Any,
    selection: Sequence[Shape],
    bounds: CanvasBounds,
    padding: float,
    snapshot_provider: SnapshotProvider,
    scene_exporter: Optional[SceneExporter] = None,
    options: Optional[CompositeOptions] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """
    Composite preview snapshots onto a canvas screenshot.

    Args:
        base_source: Raster source of the base export, see
            :py:mod:`preview_composite.api.pil_io`.
        selection: Exported shapes; preview shapes are captured, the others
            are rendered into the overlay.
        bounds: Bounds of the selection in document units.
        padding: Export padding in document units.
        snapshot_provider: Live content capture, see
            :py:class:`~preview_composite.api.protocols.SnapshotProvider`.
        scene_exporter: Overlay renderer. Without one the overlay is skipped.
        options: Compositing options.
        client: Optional ``httpx.AsyncClient`` for HTTP raster sources.

    Returns:
        ``base_source`` itself when ``selection`` has no preview shape,
        otherwise the encoded composite: a data URL string, or bytes when
        ``options.as_data_url`` is false.

    Raises:
        BaseLoadFailure: if the base raster cannot be loaded or decoded.
        ValueError: on invalid padding or duplicate preview ids.
    """
    padding = validate_padding(padding)
    regions = capturable_regions(selection)
    if not regions:
        logger.debug("No preview shapes, returning the base raster")
        return base_source

    options = options or CompositeOptions()
    base = await load_base(base_source, options, client)
    scale = scale_factor(bounds, padding, base.width)
    logger.debug("Base raster %dx%d, scale %g" % (base.width, base.height, scale))

    outcomes = await capture.capture_regions(regions, snapshot_provider, options)
    captures = [
        (map_region(region, bounds, padding, scale), snapshot)
        for region, snapshot in capture.successful(outcomes)
    ]

    overlay = None
    if scene_exporter is not None:
        try:
            overlay = await acquire_overlay(
                scene_exporter, non_capturable(selection), bounds, padding, options, client
            )
        except OverlayAcquisitionFailure as e:
            logger.warning("Skipping annotation overlay: %s" % e)

    image = composite_layers(base, captures, overlay)
    return encode_payload(image, options)


async def load_base(
    source: Any,
    options: Optional[CompositeOptions] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Image.Image:
    """
    Load the base raster.

    :raises BaseLoadFailure: if the source cannot be loaded or decoded.
    """
    try:
        base = await pil_io.load_raster(source, options, client)
    except (OSError, ValueError, httpx.HTTPError, Image.DecompressionBombError) as e:
        raise BaseLoadFailure("Cannot load base raster: %s" % e) from e
    if base.width == 0 or base.height == 0:
        raise BaseLoadFailure("Base raster is empty")
    return base


async def acquire_overlay(
    exporter: SceneExporter,
    shapes: Sequence[Shape],
    bounds: CanvasBounds,
    padding: float,
    options: Optional[CompositeOptions] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Image.Image]:
    """
    Render the non-preview shapes over a transparent background.

    Returns ``None`` when there is nothing to render.

    :raises OverlayAcquisitionFailure: if rendering or decoding fails.
    """
    if not shapes:
        return None
    try:
        raster = await exporter.render(
            shapes, bounds, padding, transparent_background=True
        )
        if raster is None:
            return None
        return await pil_io.load_raster(raster, options, client)
    except Exception as e:
        raise OverlayAcquisitionFailure("%s: %s" % (type(e).__name__, e), e) from e

