"""
File-backed collaborators.

Used by the command line, where the live snapshots and the overlay were
rendered ahead of time and saved as image files.

Example::

    provider = FileSnapshotProvider({"shape:abc": "abc.png"})
    exporter = PrerenderedSceneExporter("overlay.png")
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from attrs import define

from preview_composite.api.shapes import CanvasBounds, Shape
from preview_composite.constants import SURFACE_ID_TEMPLATE

logger = logging.getLogger(__name__)

PathType = Union[str, "os.PathLike[str]"]


@define(frozen=True)
class FileSurface:
    """A rendering surface backed by an image file."""

    path: Path

    def is_loaded(self) -> bool:
        return self.path.is_file() and self.path.stat().st_size > 0


class FileSnapshotProvider:
    """
    Snapshot provider returning pre-rendered files, keyed by region id.

    :param paths: Mapping of region id to image file.
    :param template: Surface id template, see
        :py:attr:`~preview_composite.config.CompositeOptions.surface_id_template`.
    """

    def __init__(
        self, paths: Mapping[str, PathType], template: str = SURFACE_ID_TEMPLATE
    ) -> None:
        self._surfaces = {
            template.format(id=region_id): FileSurface(Path(path))
            for region_id, path in paths.items()
        }

    def resolve(self, surface_id: str) -> Optional[FileSurface]:
        return self._surfaces.get(surface_id)

    async def capture(self, surface: FileSurface, *, dpr: float) -> bytes:
        if dpr != 1.0:
            logger.debug("Ignoring dpr %g for pre-rendered %s" % (dpr, surface.path))
        return await asyncio.to_thread(surface.path.read_bytes)


class PrerenderedSceneExporter:
    """Scene exporter returning one pre-rendered transparent image."""

    def __init__(self, path: PathType) -> None:
        self.path = Path(path)

    async def render(
        self,
        shapes: Sequence[Shape],
        bounds: CanvasBounds,
        padding: float,
        *,
        transparent_background: bool,
    ) -> bytes:
        logger.debug("Using pre-rendered overlay %s for %d shapes" % (self.path, len(shapes)))
        return await asyncio.to_thread(self.path.read_bytes)
