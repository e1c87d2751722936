"""
Compositing options.

Example::

    from preview_composite.config import CompositeOptions
    from preview_composite.constants import ImageFormat

    options = CompositeOptions(image_format=ImageFormat.PNG, as_data_url=False)
    smaller = options.evolve(quality=0.6)
"""

import logging
from typing import Any

from attrs import define, evolve, field

from preview_composite.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_CAPTURE_DPR,
    DEFAULT_QUALITY,
    SURFACE_ID_TEMPLATE,
    ImageFormat,
)
from preview_composite.validators import in_, positive, range_

logger = logging.getLogger(__name__)


def _to_format(value: Any) -> ImageFormat:
    if isinstance(value, str):
        return ImageFormat(value.upper())
    return ImageFormat(value)


@define(frozen=True)
class CompositeOptions:
    """
    Options of one compositing pass.

    .. py:attribute:: image_format

        Output encoding, see :py:class:`~preview_composite.constants.ImageFormat`.
        JPEG by default.

    .. py:attribute:: quality

        Lossy encoder quality in the [0, 1] range. Ignored by PNG.

    .. py:attribute:: capture_dpr

        Device pixel ratio requested from the snapshot provider.

    .. py:attribute:: surface_id_template

        Template resolving a region id to its rendering surface id. Must
        contain ``{id}``.

    .. py:attribute:: as_data_url

        Return a ``data:`` URL string instead of raw bytes.

    .. py:attribute:: background

        RGB backdrop used when the output format has no alpha channel.

    .. py:attribute:: timeout

        Timeout in seconds for fetching ``http(s)`` raster sources.
    """

    image_format: ImageFormat = field(
        default=ImageFormat.JPEG, converter=_to_format, validator=in_(ImageFormat)
    )
    quality: float = field(default=DEFAULT_QUALITY, converter=float, validator=range_(0.0, 1.0))
    capture_dpr: float = field(default=DEFAULT_CAPTURE_DPR, converter=float, validator=positive)
    surface_id_template: str = field(default=SURFACE_ID_TEMPLATE)
    as_data_url: bool = field(default=True)
    background: tuple[int, int, int] = field(default=DEFAULT_BACKGROUND, converter=tuple)
    timeout: float = field(default=30.0, converter=float, validator=positive)

    @surface_id_template.validator
    def _validate_template(self, attribute: Any, value: str) -> None:
        if "{id}" not in value:
            raise ValueError("surface_id_template must contain '{id}': %r" % value)

    @background.validator
    def _validate_background(self, attribute: Any, value: tuple) -> None:
        if len(value) != 3 or not all(0 <= c <= 255 for c in value):
            raise ValueError("background must be an RGB triple: %r" % (value,))

    @property
    def pil_quality(self) -> int:
        """Quality on Pillow's integer scale."""
        return max(1, min(95, int(round(self.quality * 100))))

    def evolve(self, **changes: Any) -> "CompositeOptions":
        return evolve(self, **changes)
