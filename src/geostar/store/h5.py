# src/geostar/store/h5.py

"""
This module implements the raster store on top of HDF5 (h5py).

Each store is bound to one group (an "image") of an HDF5 file; every raster
is a chunked 2D dataset inside that group. Partial reads and writes use
hyperslab selections so only the requested block is transferred.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import h5py
import numpy as np

from geostar.exceptions import (
    RasterDoesNotExistError,
    RasterExistsError,
    RasterIOError,
    RasterOpenError
)
from .base import RasterStore

log = logging.getLogger(__name__)

__all__ = [
    "StoreConfig",
    "H5Store"
]

DEFAULT_IMAGE = "image"

@dataclass(frozen=True)
class StoreConfig:
    """
    Layout options applied to every array created by an H5Store.

    Args:
        chunks: Chunk shape as (rows, cols). None lets HDF5 choose.
            Chunk sides larger than the array are clipped to the array.
        compression: Optional HDF5 filter ('gzip', 'lzf').
        compression_opts: Filter level (e.g. 0-9 for gzip).
        fill_value: Value of samples never written.
    """
    chunks: Optional[Tuple[int, int]] = None
    compression: Optional[str] = None
    compression_opts: Optional[int] = None
    fill_value: float = 0

    def chunk_shape(self, nx: int, ny: int) -> Union[bool, Tuple[int, int]]:
        if self.chunks is None:
            return True
        rows, cols = self.chunks
        return (max(1, min(rows, ny)), max(1, min(cols, nx)))

class H5Store(RasterStore):
    """
    HDF5-backed raster store bound to one group of a file.

    Args:
        group: The h5py group holding the raster datasets.
        config: Layout options for created arrays.
        owns_file: If True, close() also closes the group's file.
    """

    def __init__(
        self,
        group: h5py.Group,
        config: Optional[StoreConfig] = None,
        owns_file: bool = False
    ):
        if not isinstance(group, h5py.Group):
            raise TypeError(f"Expected h5py.Group, got {type(group)}")
        self._group = group
        self._name = group.name
        self.config = config or StoreConfig()
        self._owns_file = owns_file
        self._closed = False

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        image: str = DEFAULT_IMAGE,
        mode: str = "a",
        config: Optional[StoreConfig] = None
    ) -> 'H5Store':
        """
        Open (or create) an HDF5 file and bind to one of its image groups.

        Args:
            path: HDF5 file path.
            image: Name of the group holding the rasters. Created if missing and the mode allows it.
            mode: h5py file mode ('r', 'r+', 'a', 'w', 'w-').
            config: Layout options for created arrays.

        Returns:
            H5Store: A store that owns (and closes) the file.
        """
        path = Path(path)
        try:
            f = h5py.File(path, mode)
        except OSError as e:
            raise RasterIOError(f"Failed to open HDF5 file {path}: {e}") from e

        try:
            if mode == "r":
                if image not in f:
                    raise RasterDoesNotExistError(f"Image group '{image}' not found in {path.name}")
                group = f[image]
            else:
                group = f.require_group(image)
        except Exception:
            f.close()
            raise

        log.debug(f"Opened store {path.name}:/{image} (mode={mode})")
        return cls(group, config=config, owns_file=True)

    @classmethod
    def in_memory(
        cls,
        image: str = DEFAULT_IMAGE,
        config: Optional[StoreConfig] = None
    ) -> 'H5Store':
        """Create a store backed by an HDF5 file that lives only in RAM."""
        name = f"geostar-{uuid.uuid4().hex}.h5"
        f = h5py.File(name, "w", driver="core", backing_store=False)
        return cls(f.require_group(image), config=config, owns_file=True)

    @property
    def group(self) -> h5py.Group:
        return self._group

    @property
    def closed(self) -> bool:
        return self._closed

    def exists(self, name: str) -> bool:
        return name in self._group

    def names(self) -> List[str]:
        return [k for k, v in self._group.items() if isinstance(v, h5py.Dataset)]

    def create_array(self, name: str, dtype: np.dtype, nx: int, ny: int) -> h5py.Dataset:
        if self.exists(name):
            raise RasterExistsError(f"Array '{name}' already exists in {self._name}")

        try:
            dset = self._group.create_dataset(
                name,
                shape=(ny, nx),
                dtype=np.dtype(dtype),
                chunks=self.config.chunk_shape(nx, ny),
                compression=self.config.compression,
                compression_opts=self.config.compression_opts,
                fillvalue=self.config.fill_value
            )
        except (ValueError, TypeError, OSError) as e:
            raise RasterIOError(f"Failed to create array '{name}': {e}") from e

        log.debug(f"Created array {dset.name} {ny}x{nx} {np.dtype(dtype).name} chunks={dset.chunks}")
        return dset

    def open_array(self, name: str) -> h5py.Dataset:
        if not self.exists(name):
            raise RasterDoesNotExistError(f"Array '{name}' not found in {self._name}")
        obj = self._group[name]
        if not isinstance(obj, h5py.Dataset) or obj.ndim != 2:
            raise RasterOpenError(f"'{name}' is not a 2D array")
        return obj

    def delete(self, name: str) -> None:
        if not self.exists(name):
            raise RasterDoesNotExistError(f"Array '{name}' not found in {self._name}")
        del self._group[name]
        log.info(f"Deleted array {self._name}/{name}")

    def read_hyperslab(
        self,
        handle: h5py.Dataset,
        x0: int,
        y0: int,
        width: int,
        height: int,
        dtype: Optional[np.dtype] = None
    ) -> np.ndarray:
        out = np.empty((height, width), dtype=np.dtype(dtype) if dtype is not None else handle.dtype)
        try:
            # HDF5 converts from the stored type to the buffer type during the read
            handle.read_direct(out, source_sel=np.s_[y0:y0 + height, x0:x0 + width])
        except (ValueError, TypeError, OSError) as e:
            raise RasterIOError(f"Failed to read {handle.name} at {(x0, y0, width, height)}: {e}") from e
        return out

    def write_hyperslab(
        self,
        handle: h5py.Dataset,
        x0: int,
        y0: int,
        width: int,
        height: int,
        buffer: np.ndarray
    ) -> None:
        try:
            handle[y0:y0 + height, x0:x0 + width] = np.ascontiguousarray(buffer).reshape(height, width)
        except (ValueError, TypeError, OSError) as e:
            raise RasterIOError(f"Failed to write {handle.name} at {(x0, y0, width, height)}: {e}") from e

    def get_dimensions(self, handle: h5py.Dataset) -> Tuple[int, int]:
        ny, nx = handle.shape
        return nx, ny

    def get_dtype(self, handle: h5py.Dataset) -> np.dtype:
        return handle.dtype

    def get_attribute(self, handle: h5py.Dataset, key: str) -> Optional[str]:
        value = handle.attrs.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set_attribute(self, handle: h5py.Dataset, key: str, value: str) -> None:
        handle.attrs[key] = value

    def close(self) -> None:
        if self._closed:
            return
        if self._owns_file:
            self._group.file.close()
        self._closed = True

    def __repr__(self):
        state = "closed" if self._closed else f"{len(self.names())} arrays"
        return f"<H5Store {self._name} {state}>"
