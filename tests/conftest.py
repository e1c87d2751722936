"""Pytest configuration for preview_composite tests."""

import asyncio
import io
import logging
from typing import Any, Callable, Optional

import pytest
from PIL import Image

from preview_composite.constants import SURFACE_ID_TEMPLATE

logging.basicConfig(level=logging.DEBUG)


def solid(
    size: tuple[int, int], color: tuple[int, ...], mode: Optional[str] = None
) -> Image.Image:
    mode = mode or ("RGBA" if len(color) == 4 else "RGB")
    return Image.new(mode, size, color)


def png_bytes(image: Image.Image) -> bytes:
    with io.BytesIO() as f:
        image.save(f, format="PNG")
        return f.getvalue()


def pixel(data: Any, xy: tuple[int, int]) -> tuple[int, ...]:
    """RGB value at ``xy`` of an image, encoded bytes or path."""
    if isinstance(data, Image.Image):
        image = data
    elif isinstance(data, (bytes, bytearray)):
        image = Image.open(io.BytesIO(data))
    else:
        image = Image.open(data)
    return image.convert("RGB").getpixel(xy)


class FakeSurface:
    def __init__(self, surface_id: str, loaded: bool = True) -> None:
        self.surface_id = surface_id
        self.loaded = loaded

    def is_loaded(self) -> bool:
        return self.loaded


class FakeProvider:
    """
    Snapshot provider serving prepared rasters by region id.

    ``errors`` maps region ids to exceptions raised by ``capture``, ``delays``
    to seconds slept before returning, ``unloaded`` lists surfaces that exist
    but are not loaded.
    """

    def __init__(
        self,
        snapshots: Optional[dict] = None,
        *,
        errors: Optional[dict] = None,
        delays: Optional[dict] = None,
        unloaded: tuple = (),
        template: str = SURFACE_ID_TEMPLATE,
    ) -> None:
        self.template = template
        self.snapshots = dict(snapshots or {})
        self.errors = dict(errors or {})
        self.delays = dict(delays or {})
        self.surfaces = {}
        self.region_ids = {}
        for region_id in list(self.snapshots) + list(self.errors):
            key = template.format(id=region_id)
            self.surfaces[key] = FakeSurface(key, region_id not in unloaded)
            self.region_ids[key] = region_id
        self.resolved: list[str] = []
        self.captured: list[str] = []
        self.dprs: list[float] = []

    def resolve(self, surface_id: str) -> Optional[FakeSurface]:
        self.resolved.append(surface_id)
        return self.surfaces.get(surface_id)

    async def capture(self, surface: FakeSurface, *, dpr: float) -> Any:
        region_id = self.region_ids[surface.surface_id]
        self.dprs.append(dpr)
        await asyncio.sleep(self.delays.get(region_id, 0))
        if region_id in self.errors:
            raise self.errors[region_id]
        self.captured.append(region_id)
        return self.snapshots[region_id]


class FakeExporter:
    def __init__(self, raster: Any = None, error: Optional[Exception] = None) -> None:
        self.raster = raster
        self.error = error
        self.calls: list[dict] = []

    async def render(self, shapes, bounds, padding, *, transparent_background):  # type: ignore[no-untyped-def]
        self.calls.append(
            dict(
                shapes=list(shapes),
                bounds=bounds,
                padding=padding,
                transparent_background=transparent_background,
            )
        )
        if self.error is not None:
            raise self.error
        return self.raster


@pytest.fixture
def make_solid() -> Callable[..., Image.Image]:
    return solid


@pytest.fixture
def make_png() -> Callable[[Image.Image], bytes]:
    return png_bytes


@pytest.fixture
def get_pixel() -> Callable[..., tuple[int, ...]]:
    return pixel


@pytest.fixture
def provider_cls() -> type:
    return FakeProvider


@pytest.fixture
def exporter_cls() -> type:
    return FakeExporter
