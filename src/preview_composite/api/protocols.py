"""
Protocol definitions of the external collaborators.

The compositor never produces rasters on its own: the base raster, the live
snapshots and the annotation overlay all come from the host application. These
protocols specify the interfaces the host implements.
"""

import os
from typing import Optional, Protocol, Sequence, Union, runtime_checkable

from PIL import Image

from preview_composite.api.shapes import CanvasBounds, Shape

#: Anything :py:func:`~preview_composite.api.pil_io.load_raster` accepts.
RasterSource = Union[Image.Image, bytes, str, "os.PathLike[str]"]


@runtime_checkable
class RenderSurface(Protocol):
    """
    Isolated rendering context holding the live content of one region.
    """

    def is_loaded(self) -> bool:
        """True once the surface has a document body to snapshot."""
        ...


@runtime_checkable
class SnapshotProvider(Protocol):
    """
    Protocol of the live-content snapshot capability.

    ``resolve`` locates the rendering surface by its id and returns ``None``
    when there is none; ``capture`` rasterizes a surface.
    """

    def resolve(self, surface_id: str) -> Optional[RenderSurface]: ...

    async def capture(self, surface: RenderSurface, *, dpr: float) -> RasterSource: ...


@runtime_checkable
class SceneExporter(Protocol):
    """
    Protocol of the scene exporter, restricted to a subset of shapes.

    Returns ``None`` when nothing was rendered.
    """

    async def render(
        self,
        shapes: Sequence[Shape],
        bounds: CanvasBounds,
        padding: float,
        *,
        transparent_background: bool,
    ) -> Optional[RasterSource]: ...
