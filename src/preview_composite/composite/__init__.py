"""
Composite module for layer rendering and blending.

This subpackage flattens a preview screenshot: the base raster, the captured
live snapshots and the annotation overlay are drawn in that order onto one
NumPy surface.

Key modules:

- :py:mod:`preview_composite.composite.geometry`: Document to pixel mapping
- :py:mod:`preview_composite.composite.composite`: Layer compositing

Example usage::

    from preview_composite.composite import composite_layers, map_region, scale_factor

    scale = scale_factor(bounds, padding, base.width)
    rect = map_region(region, bounds, padding, scale)
    image = composite_layers(base, [(rect, snapshot)], overlay)
"""

from preview_composite.composite.composite import Compositor, composite_layers
from preview_composite.composite.geometry import map_region, map_regions, scale_factor

__all__ = [
    "Compositor",
    "composite_layers",
    "map_region",
    "map_regions",
    "scale_factor",
]
