"""
Exceptions raised by the TGA codec.

Every error derives from TGAError and from the closest builtin exception,
so callers catching OSError, ValueError or EOFError keep working.
"""


class TGAError(Exception):
    """Base class for all codec errors."""


class OpenFailedError(TGAError, OSError):
    """The stream could not be opened."""


class ReadFailedError(TGAError, OSError):
    """The underlying stream failed while reading."""


class WriteFailedError(TGAError, OSError):
    """The underlying stream failed or wrote fewer bytes than requested."""


class InvalidFormatError(TGAError, ValueError):
    """Malformed header, no-image type or corrupted packet stream."""


class UnsupportedVariantError(TGAError, ValueError):
    """Image type or bit depth outside the supported table."""


class TruncatedStreamError(TGAError, EOFError):
    """Palette or pixel data is shorter than the header declares."""


class PaletteOverflowError(TGAError, ValueError):
    """More than 256 distinct colors requested for indexed output."""


class AllocationFailedError(TGAError, MemoryError):
    """Pixel buffer could not be allocated."""
