"""Composite implementation for layer rendering and blending."""

import logging
from typing import Optional, Sequence, Union

import numpy as np
from PIL import Image

from preview_composite.api.shapes import PixelRect
from preview_composite.composite import utils

logger = logging.getLogger(__name__)


def composite_layers(
    base: Image.Image,
    captures: Sequence[tuple[PixelRect, Image.Image]] = (),
    overlay: Optional[Image.Image] = None,
) -> Image.Image:
    """
    Flatten the three layers of a preview screenshot.

    Layers are drawn bottom to top:

    1. ``base`` at the origin, unscaled,
    2. every captured snapshot scaled into its pixel rectangle; later
       entries win where rectangles overlap,
    3. ``overlay`` stretched over the whole surface.

    The overlay puts every non-capturable shape in front of every captured
    region, including shapes that were originally stacked behind one.

    Args:
        base: Base raster with blank placeholders.
        captures: Pairs of (pixel rectangle, snapshot).
        overlay: Transparent raster of the non-capturable shapes, or None.

    Returns:
        RGBA image the size of ``base``, or ``base`` itself when there is
        nothing to draw on top of it.
    """
    if not captures and overlay is None:
        logger.debug("Nothing to composite over the base raster")
        return base

    compositor = Compositor(base.size)
    compositor.apply(base)
    for rect, snapshot in captures:
        compositor.apply(snapshot, rect.bbox)
    if overlay is not None:
        compositor.apply(overlay, compositor.viewport)
    return compositor.finish()


def paste(
    viewport: tuple[int, int, int, int],
    bbox: tuple[int, int, int, int],
    values: np.ndarray,
) -> np.ndarray:
    """Change to the specified viewport, leaving the rest transparent."""
    shape = (viewport[3] - viewport[1], viewport[2] - viewport[0], values.shape[2])
    view = np.zeros(shape, dtype=np.float32)
    inter = utils.intersect(viewport, bbox)
    if inter == (0, 0, 0, 0):
        return view

    v = (
        inter[0] - viewport[0],
        inter[1] - viewport[1],
        inter[2] - viewport[0],
        inter[3] - viewport[1],
    )
    b = (inter[0] - bbox[0], inter[1] - bbox[1], inter[2] - bbox[0], inter[3] - bbox[1])
    view[v[1] : v[3], v[0] : v[2], :] = values[b[1] : b[3], b[0] : b[2], :]
    return view


class Compositor(object):
    """Composite context.

    Owns one RGB color surface and its alpha, both float32 in [0, 1]. Every
    :py:meth:`apply` draws an image with the normal blend mode.

    Example::

        compositor = Compositor(base.size)
        compositor.apply(base)
        compositor.apply(snapshot, (60, 30, 90, 60))
        image = compositor.finish()
    """

    def __init__(
        self,
        size: tuple[int, int],
        color: Union[float, tuple[float, float, float]] = 1.0,
        alpha: float = 0.0,
    ):
        self._viewport = (0, 0, size[0], size[1])
        if isinstance(color, (int, float)):
            color = (float(color),) * 3
        self._color = np.full((self.height, self.width, 3), color, dtype=np.float32)
        self._alpha = np.full((self.height, self.width, 1), alpha, dtype=np.float32)

    def apply(
        self, image: Image.Image, bbox: Optional[tuple[int, int, int, int]] = None
    ) -> None:
        """
        Draw ``image`` scaled into ``bbox`` (left, top, right, bottom).

        ``bbox`` defaults to the image's native size at the origin. Parts
        outside the surface are clipped.
        """
        if bbox is None:
            bbox = (0, 0, image.width, image.height)
        logger.debug("Compositing %s at %s" % (image.size, bbox))

        width, height = bbox[2] - bbox[0], bbox[3] - bbox[1]
        if width <= 0 or height <= 0:
            logger.debug("Ignore empty bbox %s" % (bbox,))
            return
        if utils.intersect(self._viewport, bbox) == (0, 0, 0, 0):
            logger.debug("Out of viewport %s" % (bbox,))
            return

        image = image.convert("RGBA")
        if image.size != (width, height):
            image = image.resize((width, height), Image.Resampling.BILINEAR)
        color, alpha = utils.to_array(image)
        self._apply_source(
            paste(self._viewport, bbox, color), paste(self._viewport, bbox, alpha)
        )

    def _apply_source(self, color: np.ndarray, alpha: np.ndarray) -> None:
        alpha_previous = self._alpha
        self._alpha = utils.union(alpha_previous, alpha)
        self._color = utils.clip(
            utils.divide(
                (1.0 - alpha) * alpha_previous * self._color + alpha * color,
                self._alpha,
            )
        )

    def finish(self) -> Image.Image:
        """Return the surface as an RGBA image."""
        pixels = np.concatenate((self._color, self._alpha), axis=2)
        return Image.fromarray(np.round(255 * pixels).astype(np.uint8))

    @property
    def viewport(self) -> tuple[int, int, int, int]:
        return self._viewport

    @property
    def width(self) -> int:
        return self._viewport[2] - self._viewport[0]

    @property
    def height(self) -> int:
        return self._viewport[3] - self._viewport[1]

    @property
    def color(self) -> np.ndarray:
        return self._color

    @property
    def alpha(self) -> np.ndarray:
        return self._alpha
