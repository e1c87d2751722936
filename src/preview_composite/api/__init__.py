"""
High-level API of preview_composite.

Key modules:

- :py:mod:`preview_composite.api.preview`: Entry point, runs one compositing pass
- :py:mod:`preview_composite.api.shapes`: Selection and geometry records
- :py:mod:`preview_composite.api.protocols`: Snapshot provider and scene exporter interfaces
- :py:mod:`preview_composite.api.capture`: Failure-isolated region capture
- :py:mod:`preview_composite.api.pil_io`: Raster source loading
- :py:mod:`preview_composite.api.encoder`: Output encoding
- :py:mod:`preview_composite.api.providers`: File-backed collaborators
"""
