"""
PIL IO module.

Loads the rasters handed to the compositor. A raster source is one of:

- a :py:class:`PIL.Image.Image`, used as is,
- raw encoded ``bytes``,
- a ``data:`` URL,
- an ``http://`` or ``https://`` URL,
- a ``file://`` URL or a filesystem path.

URL loaders are registered per scheme in :py:data:`LOADERS`.
"""

import asyncio
import base64
import io
import logging
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import unquote_to_bytes, urlsplit
from urllib.request import url2pathname

import httpx
from PIL import Image

from preview_composite.config import CompositeOptions
from preview_composite.registry import new_registry

logger = logging.getLogger(__name__)

Loader = Callable[[str, CompositeOptions, Optional[httpx.AsyncClient]], Awaitable[bytes]]

LOADERS, register = new_registry(attribute="scheme")


def decode_image(data: bytes) -> Image.Image:
    """Decode encoded image bytes, forcing the pixel data to load."""
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


async def load_raster(
    source: Any,
    options: Optional[CompositeOptions] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Image.Image:
    """
    Load and decode a raster source.

    :param source: Raster source, see the module documentation.
    :param options: Compositing options; only ``timeout`` is used here.
    :param client: Optional ``httpx.AsyncClient`` reused for HTTP sources.
    :return: Decoded PIL Image.
    :raises ValueError: for unsupported sources.
    :raises OSError: when a file cannot be read or the bytes are not an image.
    :raises httpx.HTTPError: when an HTTP source cannot be fetched.
    """
    if isinstance(source, Image.Image):
        return source
    options = options or CompositeOptions()
    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
    elif isinstance(source, (str, os.PathLike)):
        text = os.fspath(source)
        data = await get_loader(text)(text, options, client)
    else:
        raise ValueError("Unsupported raster source: %s" % type(source).__name__)

    if not data:
        raise ValueError("Empty raster source")
    return await asyncio.to_thread(decode_image, data)


def get_loader(text: str) -> Loader:
    """Look up the loader of a URL or path."""
    scheme = urlsplit(text).scheme.lower()
    # Single letter schemes are Windows drive letters.
    if len(scheme) <= 1:
        return load_path
    if scheme not in LOADERS:
        raise ValueError("Unsupported raster source scheme: %s" % scheme)
    return LOADERS[scheme]


@register("data")
async def load_data_url(
    url: str, options: CompositeOptions, client: Optional[httpx.AsyncClient]
) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise ValueError("Malformed data URL")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=False)
    return unquote_to_bytes(payload)


@register("http", "https")
async def load_http(
    url: str, options: CompositeOptions, client: Optional[httpx.AsyncClient]
) -> bytes:
    logger.debug("Fetching raster from %s" % (urlsplit(url).netloc or "url"))
    if client is not None:
        response = await client.get(url, timeout=options.timeout)
    else:
        async with httpx.AsyncClient(timeout=options.timeout) as session:
            response = await session.get(url)
    response.raise_for_status()
    return response.content


@register("file")
async def load_file_url(
    url: str, options: CompositeOptions, client: Optional[httpx.AsyncClient]
) -> bytes:
    return await load_path(url2pathname(urlsplit(url).path), options, client)


async def load_path(
    path: str, options: CompositeOptions, client: Optional[httpx.AsyncClient]
) -> bytes:
    return await asyncio.to_thread(Path(path).read_bytes)
