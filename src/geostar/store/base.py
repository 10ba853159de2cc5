# src/geostar/store/base.py

"""
This module defines the interface a raster store must provide.

A store is a key-value container of named 2D typed arrays supporting partial
(hyperslab) reads and writes, plus string attributes on each array. Rasters
only ever talk to their store through this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

import numpy as np

__all__ = [
    "RasterStore"
]

class RasterStore(ABC):
    """
    Abstract named-array storage with hyperslab I/O.

    Handles returned by create_array/open_array are opaque to callers and are
    passed back into the hyperslab and attribute methods.
    """

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Return True if an array called 'name' exists."""

    @abstractmethod
    def names(self) -> List[str]:
        """Return the names of every array in the store."""

    @abstractmethod
    def create_array(self, name: str, dtype: np.dtype, nx: int, ny: int) -> Any:
        """
        Create a new (ny, nx) array and return its handle.

        Raises:
            RasterExistsError: If 'name' is already taken.
        """

    @abstractmethod
    def open_array(self, name: str) -> Any:
        """
        Return the handle of an existing array.

        Raises:
            RasterDoesNotExistError: If 'name' does not exist.
        """

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the array called 'name'."""

    @abstractmethod
    def read_hyperslab(
        self,
        handle: Any,
        x0: int,
        y0: int,
        width: int,
        height: int,
        dtype: Optional[np.dtype] = None
    ) -> np.ndarray:
        """Read a (height, width) block starting at column x0, row y0, converted to 'dtype'."""

    @abstractmethod
    def write_hyperslab(
        self,
        handle: Any,
        x0: int,
        y0: int,
        width: int,
        height: int,
        buffer: np.ndarray
    ) -> None:
        """Write a (height, width) block starting at column x0, row y0."""

    @abstractmethod
    def get_dimensions(self, handle: Any) -> Tuple[int, int]:
        """Return (nx, ny) of the array behind 'handle'."""

    @abstractmethod
    def get_dtype(self, handle: Any) -> np.dtype:
        """Return the element type of the array behind 'handle'."""

    @abstractmethod
    def get_attribute(self, handle: Any, key: str) -> Optional[str]:
        """Return a string attribute of the array, or None if it is not set."""

    @abstractmethod
    def set_attribute(self, handle: Any, key: str, value: str) -> None:
        """Set a string attribute on the array."""

    def release(self, handle: Any) -> None:
        """Release a handle obtained from create_array/open_array."""

    def close(self) -> None:
        """Release any resources held by the store."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
