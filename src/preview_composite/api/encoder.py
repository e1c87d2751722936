"""
Serialization of the flattened surface.

JPEG at quality 0.85 is the default: the base raster is opaque, so the
output needs no alpha channel. Formats without alpha get any remaining
transparency flattened onto ``options.background``.
"""

import base64
import io
import logging
from typing import Optional, Union

from PIL import Image

from preview_composite.config import CompositeOptions
from preview_composite.constants import ImageFormat

logger = logging.getLogger(__name__)


def flatten(image: Image.Image, background: tuple[int, int, int]) -> Image.Image:
    """Drop the alpha channel by compositing onto an opaque backdrop."""
    if image.mode == "RGB":
        return image
    if "A" not in image.getbands() and "transparency" not in image.info:
        return image.convert("RGB")
    rgba = image.convert("RGBA")
    backdrop = Image.new("RGBA", rgba.size, background + (255,))
    return Image.alpha_composite(backdrop, rgba).convert("RGB")


def encode(image: Image.Image, options: Optional[CompositeOptions] = None) -> bytes:
    """
    Encode ``image`` with the configured format and quality.

    :return: Encoded bytes.
    """
    options = options or CompositeOptions()
    image_format = options.image_format
    if image_format.has_alpha:
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")
    else:
        image = flatten(image, options.background)

    params: dict = {}
    if image_format.lossy:
        params["quality"] = options.pil_quality
    else:
        params["optimize"] = True

    with io.BytesIO() as f:
        image.save(f, format=image_format.value, **params)
        data = f.getvalue()
    logger.debug(
        "Encoded %dx%d %s as %s (%d bytes)"
        % (image.width, image.height, image.mode, image_format.value, len(data))
    )
    return data


def to_data_url(data: bytes, image_format: Union[ImageFormat, str] = ImageFormat.JPEG) -> str:
    """Wrap encoded bytes in a self-contained ``data:`` URL."""
    mime_type = ImageFormat(image_format).mime_type
    return "data:%s;base64,%s" % (mime_type, base64.b64encode(data).decode("ascii"))


def encode_payload(
    image: Image.Image, options: Optional[CompositeOptions] = None
) -> Union[str, bytes]:
    """Encode ``image`` as a data URL or raw bytes, per ``options.as_data_url``."""
    options = options or CompositeOptions()
    data = encode(image, options)
    if options.as_data_url:
        return to_data_url(data, options.image_format)
    return data
