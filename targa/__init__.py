"""
targa - TGA (Truevision) image codec.
"""

from targa.codec import (
    TGACodec,
    load_tga,
    load_tga_bytes,
    read_header,
    save_tga,
    save_tga_bytes,
)
from targa.errors import (
    AllocationFailedError,
    InvalidFormatError,
    OpenFailedError,
    PaletteOverflowError,
    ReadFailedError,
    TGAError,
    TruncatedStreamError,
    UnsupportedVariantError,
    WriteFailedError,
)
from targa.header import PixelFormat, TGAHeader, TGAType
from targa.image import TGAImage
from targa.orientation import flip_horizontally, flip_vertically
from targa.stream_ABC import FileStreamFunctions, MemoryStreamFunctions, StreamFunctions

__version__ = "1.0.0"
