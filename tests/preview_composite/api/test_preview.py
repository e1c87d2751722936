import asyncio
import base64
import io
import logging

import pytest
from PIL import Image

from preview_composite import (
    BaseLoadFailure,
    CanvasBounds,
    CompositeOptions,
    ImageFormat,
    Shape,
    composite_preview_screenshots,
)
from preview_composite.api.preview import acquire_overlay, load_base
from preview_composite.exceptions import OverlayAcquisitionFailure

logger = logging.getLogger(__name__)

BOUNDS = CanvasBounds(0, 0, 200, 100)
PADDING = 10
GRAY = (200, 200, 200)
WHITE = (255, 255, 255)
BLUE = (0, 0, 255)
RED = (255, 0, 0)
PNG = CompositeOptions(image_format=ImageFormat.PNG, as_data_url=False)

PREVIEW = Shape("shape:p1", "preview", x=50, y=20, w=30, h=30)
ARROW = Shape("shape:arrow", "arrow", props={"start": (0, 0)})


def _base(scale=1):
    """Gray canvas with a blank placeholder where the preview shape is."""
    image = Image.new("RGB", (220 * scale, 120 * scale), GRAY)
    image.paste(WHITE, (60 * scale, 30 * scale, 90 * scale, 60 * scale))
    return image


def _overlay(scale=1):
    """Red annotation overlapping the right half of the preview."""
    image = Image.new("RGBA", (220 * scale, 120 * scale), (0, 0, 0, 0))
    image.paste(RED + (255,), (80 * scale, 40 * scale, 100 * scale, 50 * scale))
    return image


def _run(*args, **kwargs):
    return asyncio.run(composite_preview_screenshots(*args, **kwargs))


@pytest.fixture
def provider(provider_cls, make_solid):
    # Snapshots come back at their own resolution, here half the target.
    return provider_cls({"shape:p1": make_solid((15, 15), BLUE)})


@pytest.fixture
def exporter(exporter_cls, make_png):
    return exporter_cls(make_png(_overlay()))


def test_no_preview_shapes_passthrough(provider, exporter, make_png):
    base = make_png(_base())
    result = _run(base, [ARROW], BOUNDS, PADDING, provider, exporter, PNG)
    assert result is base
    assert provider.resolved == []
    assert exporter.calls == []


def test_no_preview_shapes_passthrough_url(provider):
    assert _run("not even loaded", [], BOUNDS, PADDING, provider) == "not even loaded"


def test_layer_order(provider, exporter, make_png, get_pixel):
    result = _run(
        make_png(_base()), [PREVIEW, ARROW], BOUNDS, PADDING, provider, exporter, PNG
    )
    assert isinstance(result, bytes)
    assert Image.open(io.BytesIO(result)).size == (220, 120)
    # Snapshot fills the mapped rectangle (60, 30, 30, 30).
    assert get_pixel(result, (60, 30)) == BLUE
    assert get_pixel(result, (70, 55)) == BLUE
    assert get_pixel(result, (89, 59)) == BLUE
    # Overlay is drawn on top of the snapshot and of the base.
    assert get_pixel(result, (85, 45)) == RED
    assert get_pixel(result, (95, 45)) == RED
    assert get_pixel(result, (59, 30)) == GRAY
    assert get_pixel(result, (90, 30)) == GRAY
    assert get_pixel(result, (10, 10)) == GRAY


def test_derived_scale(provider_cls, exporter_cls, make_solid, make_png, get_pixel):
    provider = provider_cls({"shape:p1": make_solid((15, 15), BLUE)})
    exporter = exporter_cls(make_png(_overlay(2)))
    result = _run(
        make_png(_base(2)), [PREVIEW, ARROW], BOUNDS, PADDING, provider, exporter, PNG
    )
    assert Image.open(io.BytesIO(result)).size == (440, 240)
    # Mapped rectangle is (120, 60, 60, 60).
    assert get_pixel(result, (120, 60)) == BLUE
    assert get_pixel(result, (150, 110)) == BLUE
    assert get_pixel(result, (119, 90)) == GRAY
    assert get_pixel(result, (170, 90)) == RED


def test_all_captures_fail(provider_cls, exporter, make_png, get_pixel):
    provider = provider_cls(errors={"shape:p1": RuntimeError("detached")})
    result = _run(
        make_png(_base()), [PREVIEW, ARROW], BOUNDS, PADDING, provider, exporter, PNG
    )
    assert get_pixel(result, (65, 35)) == WHITE
    assert get_pixel(result, (85, 45)) == RED
    assert get_pixel(result, (10, 10)) == GRAY


def test_missing_surface(provider_cls, make_png, get_pixel):
    result = _run(make_png(_base()), [PREVIEW], BOUNDS, PADDING, provider_cls(), None, PNG)
    assert get_pixel(result, (65, 35)) == WHITE


def test_overlay_failure(provider, exporter_cls, make_png, get_pixel, caplog):
    exporter = exporter_cls(error=RuntimeError("export failed"))
    with caplog.at_level(logging.WARNING):
        result = _run(
            make_png(_base()), [PREVIEW, ARROW], BOUNDS, PADDING, provider, exporter, PNG
        )
    assert get_pixel(result, (85, 45)) == BLUE
    assert get_pixel(result, (95, 45)) == GRAY
    assert "Skipping annotation overlay" in caplog.text


@pytest.mark.parametrize("raster", [None, b"not an image"])
def test_overlay_missing_or_invalid(provider, exporter_cls, make_png, get_pixel, raster):
    exporter = exporter_cls(raster)
    result = _run(
        make_png(_base()), [PREVIEW, ARROW], BOUNDS, PADDING, provider, exporter, PNG
    )
    assert get_pixel(result, (85, 45)) == BLUE


def test_overlay_request(provider, exporter, make_png):
    other = Shape("shape:note", "note")
    _run(make_png(_base()), [ARROW, PREVIEW, other], BOUNDS, PADDING, provider, exporter, PNG)
    assert len(exporter.calls) == 1
    call = exporter.calls[0]
    assert call["shapes"] == [ARROW, other]
    assert call["bounds"] == BOUNDS
    assert call["padding"] == PADDING
    assert call["transparent_background"] is True


def test_overlay_skipped_without_annotations(provider, exporter, make_png, get_pixel):
    result = _run(make_png(_base()), [PREVIEW], BOUNDS, PADDING, provider, exporter, PNG)
    assert exporter.calls == []
    assert get_pixel(result, (85, 45)) == BLUE


def test_default_data_url(provider, exporter, make_png):
    result = _run(make_png(_base()), [PREVIEW, ARROW], BOUNDS, PADDING, provider, exporter)
    assert result.startswith("data:image/jpeg;base64,")
    image = Image.open(io.BytesIO(base64.b64decode(result.split(",", 1)[1])))
    assert image.format == "JPEG"
    assert image.size == (220, 120)
    r, g, b = image.getpixel((68, 38))
    assert r < 40 and g < 40 and b > 215


def test_base_sources(provider, make_png, tmp_path):
    path = tmp_path / "base.png"
    path.write_bytes(make_png(_base()))
    data_url = "data:image/png;base64," + base64.b64encode(path.read_bytes()).decode()
    results = [
        _run(source, [PREVIEW], BOUNDS, PADDING, provider, None, PNG)
        for source in (_base(), path, str(path), data_url)
    ]
    assert all(result == results[0] for result in results)


@pytest.mark.parametrize("source", [b"garbage", "data:,", "/nonexistent/base.png"])
def test_base_load_failure(provider, source):
    with pytest.raises(BaseLoadFailure) as exc_info:
        _run(source, [PREVIEW], BOUNDS, PADDING, provider)
    assert exc_info.value.__cause__ is not None
    assert provider.resolved == []


def test_invalid_selection(provider, make_png):
    with pytest.raises(ValueError):
        _run(make_png(_base()), [PREVIEW], BOUNDS, -1, provider)
    with pytest.raises(ValueError):
        _run(make_png(_base()), [PREVIEW, PREVIEW], BOUNDS, PADDING, provider)


def test_load_base_empty():
    with pytest.raises(BaseLoadFailure):
        asyncio.run(load_base(Image.new("RGB", (0, 0))))


def test_acquire_overlay(exporter_cls, make_png):
    overlay = _overlay()
    exporter = exporter_cls(make_png(overlay))
    assert asyncio.run(acquire_overlay(exporter, [], BOUNDS, PADDING)) is None
    image = asyncio.run(acquire_overlay(exporter, [ARROW], BOUNDS, PADDING))
    assert image.size == overlay.size

    with pytest.raises(OverlayAcquisitionFailure) as exc_info:
        asyncio.run(
            acquire_overlay(exporter_cls(error=KeyError("x")), [ARROW], BOUNDS, PADDING)
        )
    assert isinstance(exc_info.value.cause, KeyError)
