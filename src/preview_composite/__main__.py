import argparse
import asyncio
import base64
import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from preview_composite import __version__
from preview_composite.api.encoder import to_data_url
from preview_composite.api.preview import composite_preview_screenshots
from preview_composite.api.providers import FileSnapshotProvider, PrerenderedSceneExporter
from preview_composite.api.shapes import CanvasBounds, Shape, capturable_regions
from preview_composite.composite import map_regions, scale_factor
from preview_composite.config import CompositeOptions
from preview_composite.constants import DEFAULT_QUALITY, ImageFormat, ShapeKind
from preview_composite.exceptions import BaseLoadFailure

logger = logging.getLogger("preview_composite")

OVERLAY_SHAPE_ID = "shape:overlay"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Composite live preview snapshots onto a canvas screenshot."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    compose_parser = subparsers.add_parser(
        "compose", help="Composite snapshots and overlay onto a base image"
    )
    _add_geometry_arguments(compose_parser)
    compose_parser.add_argument(
        "--region",
        nargs=6,
        action="append",
        default=[],
        metavar=("ID", "X", "Y", "W", "H", "SNAPSHOT"),
        help="Preview region in document units and its snapshot image",
    )
    compose_parser.add_argument(
        "--overlay", help="Transparent image of the non-preview shapes"
    )
    compose_parser.add_argument(
        "--format",
        default=ImageFormat.JPEG.value,
        type=str.upper,
        choices=[f.value for f in ImageFormat],
        help="Output format (default: %(default)s)",
    )
    compose_parser.add_argument(
        "--quality",
        default=DEFAULT_QUALITY,
        type=_quality,
        help="Lossy quality in [0, 1] (default: %(default)s)",
    )
    compose_parser.add_argument(
        "-o", "--output", help="Output image file. Prints a data URL if omitted."
    )

    map_parser = subparsers.add_parser(
        "map", help="Show the pixel rectangles of regions in a base image"
    )
    _add_geometry_arguments(map_parser)
    map_parser.add_argument(
        "--region",
        nargs=5,
        action="append",
        default=[],
        metavar=("ID", "X", "Y", "W", "H"),
        help="Preview region in document units",
    )

    return parser.parse_args(argv)


def _add_geometry_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("base_file", help="Base canvas image")
    parser.add_argument(
        "--bounds",
        nargs=4,
        type=float,
        required=True,
        metavar=("X", "Y", "W", "H"),
        help="Selection bounds in document units",
    )
    parser.add_argument(
        "--padding", type=float, default=0.0, help="Export padding in document units"
    )


def _region_shapes(regions: list[list[str]]) -> list[Shape]:
    return [
        Shape(r[0], ShapeKind.PREVIEW, *(float(v) for v in r[1:5])) for r in regions
    ]


def _quality(value: str) -> float:
    quality = float(value)
    if not 0.0 <= quality <= 1.0:
        raise argparse.ArgumentTypeError("quality must be in [0, 1]: %s" % value)
    return quality


def _source_data_url(data: bytes) -> str:
    """Data URL of an untouched base image, typed by its own format."""
    with Image.open(io.BytesIO(data)) as image:
        mime_type = Image.MIME.get(image.format or "", "application/octet-stream")
    return "data:%s;base64,%s" % (mime_type, base64.b64encode(data).decode("ascii"))


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    bounds = CanvasBounds(*args.bounds)
    selection = _region_shapes(args.region)

    if args.command == "compose":
        exporter = None
        if args.overlay:
            selection.append(Shape(OVERLAY_SHAPE_ID, ShapeKind.OTHER))
            exporter = PrerenderedSceneExporter(args.overlay)
        provider = FileSnapshotProvider({r[0]: r[5] for r in args.region})
        options = CompositeOptions(
            image_format=args.format,
            quality=args.quality,
            as_data_url=False,
        )
        try:
            base = Path(args.base_file).read_bytes()
            payload = asyncio.run(
                composite_preview_screenshots(
                    base,
                    selection,
                    bounds,
                    args.padding,
                    provider,
                    exporter,
                    options,
                )
            )
        except (OSError, BaseLoadFailure) as e:
            logger.error(str(e))
            return 1

        if args.output:
            Path(args.output).write_bytes(payload)
        elif payload is base:
            print(_source_data_url(payload))
        else:
            print(to_data_url(payload, options.image_format))

    elif args.command == "map":
        with Image.open(args.base_file) as image:
            width = image.width
        scale = scale_factor(bounds, args.padding, width)
        regions = capturable_regions(selection)
        print("scale %g" % scale)
        for region, rect in zip(regions, map_regions(regions, bounds, args.padding, scale)):
            print("%s %g %g %g %g" % (region.id, rect.x, rect.y, rect.w, rect.h))

    return None


if __name__ == "__main__":
    main()
