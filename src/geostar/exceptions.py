# src/geostar/exceptions.py

"""
This module defines the exception hierarchy shared by the store and raster subpackages.

Every error raised by geostar derives from RasterError, so callers can catch
a single type. Contract violations (sizes, slices, parameters) derive from
RasterValidationError and are raised before any store I/O takes place.
"""

__all__ = [
    "RasterError",
    "RasterIOError",
    "RasterValidationError",
    "RasterOpenError",
    "RasterCreationError",
    "RasterExistsError",
    "RasterDoesNotExistError",
    "RasterClosedError",
    "RasterSizeError",
    "SliceSizeError",
    "SliceOutOfBoundsError",
    "ParameterError",
    "IntegerParameterError",
    "PartitionError",
    "BitError",
    "ProbabilityError",
    "RadiusSizeError",
    "DivideByZeroError"
]

class RasterError(Exception):
    """Base class for every geostar error."""

class RasterIOError(RasterError):
    """The underlying store failed to read, write or create an array."""

class RasterValidationError(RasterError):
    """Base class for contract violations detected before touching the store."""

class RasterOpenError(RasterValidationError):
    """The named array exists but does not carry the raster object type tag."""

class RasterCreationError(RasterValidationError):
    """A raster was requested with an unsupported element type or shape."""

class RasterExistsError(RasterError):
    """An array with the requested name already exists in the store."""

class RasterDoesNotExistError(RasterError):
    """No array with the requested name exists in the store."""

class RasterClosedError(RasterError):
    """The raster handle was released and can no longer be used."""

class RasterSizeError(RasterValidationError):
    """Two rasters expected to share (or derive) dimensions do not match."""

class SliceSizeError(RasterValidationError):
    """A slice is malformed, or a buffer is smaller than the slice area."""

class SliceOutOfBoundsError(SliceSizeError):
    """A slice extends past the raster dimensions."""

class ParameterError(RasterValidationError, ValueError):
    """A numeric parameter is outside its allowed range."""

class IntegerParameterError(ParameterError):
    """Window size, mask id or level count is invalid."""

class PartitionError(ParameterError):
    """Partition count for local thresholding is outside [1, 150]."""

class BitError(ParameterError):
    """Negative bit count passed to a bit shift."""

class ProbabilityError(ParameterError):
    """Noise probability is outside [0, 0.5]."""

class RadiusSizeError(ParameterError):
    """Drawing radius is negative or larger than the shape it outlines."""

class DivideByZeroError(RasterError, ZeroDivisionError):
    """A raster was divided by the exact scalar zero."""
