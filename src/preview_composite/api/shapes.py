"""
Shape and geometry records of a compositing pass.

All coordinates are in document units unless noted otherwise. The records are
plain attrs values; nothing here holds pixels.

Example::

    from preview_composite.api.shapes import CanvasBounds, Shape, capturable_regions

    bounds = CanvasBounds(0, 0, 200, 100)
    selection = [
        Shape("shape:preview1", "preview", x=50, y=20, w=30, h=30),
        Shape("shape:arrow1", "arrow"),
    ]
    regions = capturable_regions(selection)
"""

import logging
from typing import Any, Iterable, Optional

from attrs import define, field

from preview_composite.constants import ShapeKind
from preview_composite.validators import positive

logger = logging.getLogger(__name__)


@define(frozen=True)
class CanvasBounds:
    """
    Bounding box of the whole exported selection.

    .. py:attribute:: x
    .. py:attribute:: y
    .. py:attribute:: width

        Must be positive.

    .. py:attribute:: height

        Must be positive.
    """

    x: float = field(converter=float)
    y: float = field(converter=float)
    width: float = field(converter=float, validator=positive)
    height: float = field(converter=float, validator=positive)

    def padded(self, padding: float) -> "CanvasBounds":
        """Bounds grown by ``padding`` on every side."""
        padding = validate_padding(padding)
        return CanvasBounds(
            self.x - padding,
            self.y - padding,
            self.width + 2 * padding,
            self.height + 2 * padding,
        )


@define(frozen=True)
class CapturableRegion:
    """Document-space rectangle of a shape whose live content is captured."""

    id: str
    x: float = field(converter=float)
    y: float = field(converter=float)
    w: float = field(converter=float)
    h: float = field(converter=float)


@define(frozen=True)
class PixelRect:
    """
    Rectangle in the pixel grid of the base raster.

    Coordinates are kept as floats; :py:attr:`bbox` snaps the edges to whole
    pixels.
    """

    x: float
    y: float
    w: float
    h: float

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) rounded to the pixel grid."""
        left, top = int(round(self.x)), int(round(self.y))
        right, bottom = int(round(self.x + self.w)), int(round(self.y + self.h))
        return (left, top, right, bottom)

    @property
    def empty(self) -> bool:
        left, top, right, bottom = self.bbox
        return right <= left or bottom <= top


@define(frozen=True)
class Shape:
    """
    One entry of the exported selection.

    ``kind`` accepts a :py:class:`~preview_composite.constants.ShapeKind` or
    its string value; unknown strings become ``ShapeKind.OTHER``. Geometry is
    only required for preview shapes. ``props`` is handed untouched to the
    scene exporter.
    """

    id: str
    kind: ShapeKind = field(converter=ShapeKind)
    x: float = field(default=0.0, converter=float)
    y: float = field(default=0.0, converter=float)
    w: float = field(default=0.0, converter=float)
    h: float = field(default=0.0, converter=float)
    props: dict = field(factory=dict, eq=False, hash=False)

    @property
    def capturable(self) -> bool:
        return self.kind.capturable

    @property
    def region(self) -> Optional[CapturableRegion]:
        if not self.capturable:
            return None
        return CapturableRegion(self.id, self.x, self.y, self.w, self.h)


def validate_padding(padding: Any) -> float:
    """Return ``padding`` as a float, raising :exc:`ValueError` if negative."""
    value = float(padding)
    if not value >= 0.0:
        raise ValueError("'padding' must be non-negative: %r" % (padding,))
    return value


def capturable_regions(selection: Iterable[Shape]) -> list[CapturableRegion]:
    """
    Regions of the preview shapes in ``selection``, in selection order.

    :raises ValueError: if two preview shapes share an id.
    """
    regions = []
    seen = set()
    for shape in selection:
        region = shape.region
        if region is None:
            continue
        if region.id in seen:
            raise ValueError("Duplicate capturable region id: %s" % region.id)
        seen.add(region.id)
        regions.append(region)
    return regions


def non_capturable(selection: Iterable[Shape]) -> list[Shape]:
    """Shapes of ``selection`` that are rendered by the scene exporter."""
    return [shape for shape in selection if not shape.capturable]
