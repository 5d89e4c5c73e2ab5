# -*- coding: utf-8 -*-
"""bioio implementation of the format reader boundary.

Wraps a :class:`bioio.BioImage` so plane bytes are fetched one raster index at
a time through lazy dask selection; the full image is never loaded.
"""

import importlib
from pathlib import Path
from typing import List, Optional, Union

import bioio
from loguru import logger

from bioplanes.config import get_reader_plugin
from bioplanes.exceptions import FormatError, OpenError
from bioplanes.readers.layout import LayoutReader, layout_from_dims


class BioioFormatReader(LayoutReader):
    """Format reader backed by bioio and its installed reader plugins.

    Only one scene is exposed per reader; multi-scene files are opened at
    ``scene`` (default 0).

    :param image: Path to bioimage file, fsspec URI, or array-like object
    :param scene: Scene index to expose
    :param reader: bioio reader class or plugin module name (e.g.
        ``"bioio_ome_tiff"``). Defaults to ``BIOPLANES_READER``, else bioio
        picks the plugin.
    """

    def __init__(self, image, scene=0, reader=None):
        # type: (bioio.types.ImageLike, int, Union[type, str, None]) -> None
        self.dataset_name = str(image) if isinstance(image, (str, Path)) else "array"
        if reader is None:
            reader = get_reader_plugin()
        if isinstance(reader, str):
            reader = resolve_reader(reader)
        try:
            self._image = bioio.BioImage(image, reader=reader)
            if scene:
                self._image.set_scene(scene)
            dims = self._image.dims
            order, shape = dims.order, dims.shape
        except Exception as e:
            raise OpenError(f"Failed to open {self.dataset_name}: {e}") from e

        plugin = getattr(self._image, "_plugin", None)
        if plugin is not None:
            self.format_name = plugin.entrypoint.name
        else:
            self.format_name = type(self._image.reader).__name__

        try:
            self._layout = layout_from_dims(order, shape, self._calibration())
        except FormatError as e:
            raise OpenError(f"Unsupported layout in {self.dataset_name}: {e}") from e

        logger.debug(f"{Path(self.dataset_name).name} - using {self.format_name} reader")
        logger.debug(
            f"{Path(self.dataset_name).name} - scene {scene}: {dict(zip(order, shape))}"
        )

    def _calibration(self):
        sizes = self._image.physical_pixel_sizes
        calibration = {}
        for dim, value in (("Z", sizes.Z), ("Y", sizes.Y), ("X", sizes.X)):
            if value is not None:
                calibration[dim] = float(value)
        return calibration

    def channel_names(self):
        # type: () -> Optional[List[str]]
        if self._layout.interleave > 1:
            return None
        try:
            return [str(name) for name in self._image.channel_names]
        except (KeyError, AttributeError, NotImplementedError):
            return None

    def _read_plane(self, selection):
        lazy_plane = self._image.get_image_dask_data(self._plane_order, **selection)
        # Compute only this plane
        return lazy_plane.compute()

    def close(self):
        self._image = None


def resolve_reader(plugin):
    # type: (str) -> type
    """Import the ``Reader`` class of a bioio plugin module.

    :param plugin: Plugin module name, e.g. ``"bioio_ome_tiff"``
    :raises OpenError: If the plugin is not installed or has no reader
    """
    try:
        return importlib.import_module(plugin).Reader
    except (ImportError, AttributeError) as e:
        raise OpenError(f"bioio reader plugin {plugin!r} is not available: {e}") from e
