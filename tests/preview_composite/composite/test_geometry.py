import logging

import pytest

from preview_composite.api.shapes import CanvasBounds, CapturableRegion, PixelRect
from preview_composite.composite.geometry import map_region, map_regions, scale_factor

logger = logging.getLogger(__name__)

BOUNDS = CanvasBounds(0, 0, 200, 100)
REGION = CapturableRegion("shape:a", 50, 20, 30, 30)


@pytest.mark.parametrize(
    "raster_width, expected_scale, expected_rect",
    [
        (220, 1.0, PixelRect(60, 30, 30, 30)),
        (440, 2.0, PixelRect(120, 60, 60, 60)),
        (110, 0.5, PixelRect(30, 15, 15, 15)),
    ],
)
def test_map_region(raster_width, expected_scale, expected_rect):
    scale = scale_factor(BOUNDS, 10, raster_width)
    assert scale == pytest.approx(expected_scale)
    rect = map_region(REGION, BOUNDS, 10, scale)
    assert rect.x == pytest.approx(expected_rect.x)
    assert rect.y == pytest.approx(expected_rect.y)
    assert rect.w == pytest.approx(expected_rect.w)
    assert rect.h == pytest.approx(expected_rect.h)


@pytest.mark.parametrize(
    "bounds, padding, raster_width",
    [
        (CanvasBounds(0, 0, 200, 100), 10, 220),
        (CanvasBounds(-35.5, 12.25, 640, 480), 16, 1345),
        (CanvasBounds(1000, 1000, 0.5, 0.5), 0, 1),
        (CanvasBounds(0, 0, 3, 7), 2.5, 4096),
    ],
)
def test_scale_factor_identity(bounds, padding, raster_width):
    scale = scale_factor(bounds, padding, raster_width)
    assert scale > 0
    assert scale * (bounds.width + 2 * padding) == pytest.approx(raster_width)


def test_scale_factor_degenerate():
    with pytest.raises(ValueError):
        scale_factor(BOUNDS, 10, 0)


@pytest.mark.parametrize("padding", [-1, float("nan")])
def test_scale_factor_invalid_padding(padding):
    with pytest.raises(ValueError):
        scale_factor(BOUNDS, padding, 220)


def test_map_region_idempotent():
    scale = scale_factor(BOUNDS, 10, 333)
    assert map_region(REGION, BOUNDS, 10, scale) == map_region(REGION, BOUNDS, 10, scale)


def test_map_region_offset_bounds():
    bounds = CanvasBounds(100, -50, 200, 100)
    region = CapturableRegion("shape:b", 150, -30, 30, 30)
    rect = map_region(region, bounds, 10, 1.0)
    assert rect == PixelRect(60, 30, 30, 30)


def test_map_region_out_of_bounds():
    region = CapturableRegion("shape:c", -100, 500, 0, 30)
    rect = map_region(region, BOUNDS, 10, 2.0)
    assert rect == PixelRect(-180, 1020, 0, 60)
    assert rect.empty


def test_map_regions_order():
    regions = [
        CapturableRegion("shape:b", 0, 0, 10, 10),
        CapturableRegion("shape:a", 50, 20, 30, 30),
    ]
    rects = map_regions(regions, BOUNDS, 10, 1.0)
    assert rects == [PixelRect(10, 10, 10, 10), PixelRect(60, 30, 30, 30)]
