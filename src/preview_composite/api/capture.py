"""
Failure-isolated capture of the live content of preview regions.

Every region is captured independently against the snapshot provider. A
failed capture never raises out of this module: it is reported as a
:py:class:`CaptureOutcome` carrying a
:py:class:`~preview_composite.exceptions.RegionCaptureFailure`, and the
region's placeholder stays blank in the output.

Example::

    outcomes = await capture_regions(regions, provider, options)
    for region, snapshot in successful(outcomes):
        ...
"""

import asyncio
import logging
from typing import Iterable, Optional, Sequence

from attrs import define
from PIL import Image

from preview_composite.api import pil_io
from preview_composite.api.protocols import SnapshotProvider
from preview_composite.api.shapes import CapturableRegion
from preview_composite.config import CompositeOptions
from preview_composite.constants import SURFACE_ID_TEMPLATE
from preview_composite.exceptions import RegionCaptureFailure

logger = logging.getLogger(__name__)


@define(frozen=True)
class CaptureOutcome:
    """
    Result of capturing one region: either a snapshot or a failure.
    """

    region: CapturableRegion
    snapshot: Optional[Image.Image] = None
    error: Optional[RegionCaptureFailure] = None

    @property
    def ok(self) -> bool:
        return self.snapshot is not None


def surface_id(region_id: str, template: str = SURFACE_ID_TEMPLATE) -> str:
    """Id of the rendering surface holding the live content of a region."""
    return template.format(id=region_id)


async def capture_region(
    region: CapturableRegion,
    provider: SnapshotProvider,
    options: Optional[CompositeOptions] = None,
) -> CaptureOutcome:
    """
    Capture one region.

    The rendering surface is located by
    :py:func:`surface_id`. Missing or unloaded surfaces, provider errors and
    empty or undecodable snapshots all end in a failed outcome.
    """
    options = options or CompositeOptions()
    key = surface_id(region.id, options.surface_id_template)

    def _failed(reason: str) -> CaptureOutcome:
        error = RegionCaptureFailure(region.id, reason)
        logger.warning(str(error))
        return CaptureOutcome(region, error=error)

    try:
        surface = provider.resolve(key)
        if surface is None:
            return _failed("surface %s not found" % key)
        if not surface.is_loaded():
            return _failed("surface %s is not loaded" % key)

        raster = await provider.capture(surface, dpr=options.capture_dpr)
        if raster is None:
            return _failed("provider returned no snapshot")
        snapshot = await pil_io.load_raster(raster, options)
    except Exception as e:
        return _failed("%s: %s" % (type(e).__name__, e))

    if snapshot.width == 0 or snapshot.height == 0:
        return _failed("empty snapshot")
    logger.debug("Captured %s as %dx%d" % (region.id, snapshot.width, snapshot.height))
    return CaptureOutcome(region, snapshot=snapshot)


async def capture_regions(
    regions: Sequence[CapturableRegion],
    provider: SnapshotProvider,
    options: Optional[CompositeOptions] = None,
) -> list[CaptureOutcome]:
    """
    Capture all regions concurrently.

    Returns one outcome per region, in input order, once every capture has
    either succeeded or failed.
    """
    outcomes = await asyncio.gather(
        *(capture_region(region, provider, options) for region in regions)
    )
    logger.debug(
        "Captured %d of %d regions" % (sum(o.ok for o in outcomes), len(outcomes))
    )
    return list(outcomes)


def successful(
    outcomes: Iterable[CaptureOutcome],
) -> list[tuple[CapturableRegion, Image.Image]]:
    """(region, snapshot) pairs of the successful outcomes, in order."""
    return [(o.region, o.snapshot) for o in outcomes if o.snapshot is not None]
