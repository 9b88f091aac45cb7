"""
Conversions between native TGA pixel encodings and canonical R,G,B[,A] bytes.

All transforms operate on whole buffers at once with numpy. Native buffers
are what sits in the file (or inside RLE packets), canonical buffers are
interleaved 8-bit R,G,B[,A].
"""

from typing import Optional, Tuple

import numpy as np

from targa.errors import InvalidFormatError, UnsupportedVariantError
from targa.header import PixelFormat, TGAType

ALPHA_BIT = 0x8000


class PixelFormatConverter:
    """Stateless native <-> canonical pixel transforms"""

    @staticmethod
    def swap_red_blue(data: bytes, stride: int) -> bytes:
        """
        Swap byte 0 and byte 2 of every pixel (B,G,R[,A] <-> R,G,B[,A]).

        Args:
            data: Pixel bytes
            stride: Bytes per pixel, 3 or 4

        Returns:
            Pixel bytes with red and blue exchanged
        """
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(-1, stride).copy()
        pixels[:, [0, 2]] = pixels[:, [2, 0]]
        return pixels.tobytes()

    @staticmethod
    def unpack_packed(data: bytes, channels: int, expand_5bit: bool = False) -> bytes:
        """
        Unpack little-endian 1-5-5-5 words (A,R,G,B) into canonical bytes.

        Args:
            data: Native 16-bit words
            channels: 3 to ignore the top bit, 4 to turn it into alpha 255/0
            expand_5bit: Replicate the top 3 bits of each 5-bit value into the low bits

        Returns:
            Canonical pixel bytes
        """
        words = np.frombuffer(data, dtype="<u2")
        out = np.empty((words.size, channels), dtype=np.uint8)

        for i, shift in enumerate((10, 5, 0)):
            value = ((words >> shift) & 0x1F) << 3
            if expand_5bit:
                value |= value >> 5
            out[:, i] = value

        if channels == 4:
            out[:, 3] = np.where(words & ALPHA_BIT, 255, 0)

        return out.tobytes()

    @staticmethod
    def pack_packed(data: bytes, channels: int) -> bytes:
        """
        Pack canonical pixels into little-endian 1-5-5-5 words.

        Without an alpha channel the top bit is always set.
        """
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(-1, channels).astype(np.uint16)
        words = ((pixels[:, 0] >> 3) << 10) | ((pixels[:, 1] >> 3) << 5) | (pixels[:, 2] >> 3)

        if channels == 4:
            words |= np.where(pixels[:, 3] != 0, ALPHA_BIT, 0).astype(np.uint16)
        else:
            words |= ALPHA_BIT

        return words.astype("<u2").tobytes()

    @staticmethod
    def luminance(data: bytes, channels: int) -> np.ndarray:
        """
        Truncated (R + G + B) // 3 for every pixel.
        """
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(-1, channels).astype(np.uint16)
        return (pixels[:, 0] + pixels[:, 1] + pixels[:, 2]) // 3

    @staticmethod
    def pack_bw16(data: bytes, channels: int) -> bytes:
        """
        Canonical pixels -> little-endian words, luminance low byte, alpha high byte.

        Images without alpha store 255.
        """
        lum = PixelFormatConverter.luminance(data, channels)
        if channels == 4:
            alpha = np.frombuffer(data, dtype=np.uint8).reshape(-1, 4)[:, 3].astype(np.uint16)
        else:
            alpha = np.full(lum.shape, 255, dtype=np.uint16)
        return (lum | (alpha << 8)).astype("<u2").tobytes()

    @staticmethod
    def pack_bw8(data: bytes, channels: int) -> bytes:
        # Alpha has nowhere to go in this variant and is dropped.
        return PixelFormatConverter.luminance(data, channels).astype(np.uint8).tobytes()

    @staticmethod
    def unpack_bw16(data: bytes) -> bytes:
        words = np.frombuffer(data, dtype="<u2")
        out = np.empty((words.size, 4), dtype=np.uint8)
        out[:, :3] = (words & 0xFF).astype(np.uint8)[:, None]
        out[:, 3] = words >> 8
        return out.tobytes()

    @staticmethod
    def unpack_bw8(data: bytes) -> bytes:
        lum = np.frombuffer(data, dtype=np.uint8)
        return np.repeat(lum[:, None], 3, axis=1).tobytes()

    @staticmethod
    def read_palette(data: bytes, entry_size: int, expand_5bit: bool = False) -> np.ndarray:
        """
        Convert a native color map into a (entries, channels) canonical array.

        Args:
            data: Raw color map bytes
            entry_size: Bits per entry (15, 16, 24 or 32)
            expand_5bit: Bit replication for 15/16-bit entries

        Returns:
            Palette array in R,G,B[,A] order

        Raises:
            UnsupportedVariantError: For any other entry size
        """
        if entry_size in (24, 32):
            channels = entry_size // 8
            swapped = PixelFormatConverter.swap_red_blue(data, channels)
        elif entry_size in (15, 16):
            channels = 4 if entry_size == 16 else 3
            swapped = PixelFormatConverter.unpack_packed(data, channels, expand_5bit)
        else:
            raise UnsupportedVariantError(f"Unsupported color map entry size: {entry_size} bits")
        return np.frombuffer(swapped, dtype=np.uint8).reshape(-1, channels)

    @staticmethod
    def lookup_indexed(data: bytes, palette: np.ndarray, first_entry_index: int = 0) -> bytes:
        """
        Replace every index with its palette color.

        Raises:
            InvalidFormatError: If an index points outside the color map
        """
        indices = np.frombuffer(data, dtype=np.uint8).astype(np.intp) - first_entry_index
        if indices.size and (indices.min() < 0 or indices.max() >= len(palette)):
            raise InvalidFormatError(
                f"Color index outside color map of {len(palette)} entries"
                f" starting at {first_entry_index}"
            )
        return palette[indices].tobytes()

    @staticmethod
    def to_canonical(
        fmt: PixelFormat,
        data: bytes,
        palette: Optional[np.ndarray] = None,
        first_entry_index: int = 0,
        expand_5bit: bool = False,
    ) -> Tuple[bytes, int]:
        """
        Decode native pixel bytes of the given format.

        Args:
            fmt: Native pixel format from the header
            data: Native pixel bytes (len == pixels * fmt.stride)
            palette: Canonical palette array, mapped formats only
            first_entry_index: Index of the first color map entry
            expand_5bit: Bit replication for packed formats

        Returns:
            Tuple (canonical bytes, channel count)
        """
        if fmt is PixelFormat.MAPPED8:
            if palette is None:
                raise InvalidFormatError("Color-mapped image without a color map")
            channels = palette.shape[1]
            return PixelFormatConverter.lookup_indexed(data, palette, first_entry_index), channels
        if fmt in (PixelFormat.RGB24, PixelFormat.RGB32):
            return PixelFormatConverter.swap_red_blue(data, fmt.stride), fmt.stride
        if fmt in (PixelFormat.RGB15, PixelFormat.RGB16):
            channels = 4 if fmt is PixelFormat.RGB16 else 3
            return PixelFormatConverter.unpack_packed(data, channels, expand_5bit), channels
        if fmt is PixelFormat.BW16:
            return PixelFormatConverter.unpack_bw16(data), 4
        return PixelFormatConverter.unpack_bw8(data), 3

    @staticmethod
    def from_canonical(tga_type: TGAType, data: bytes, channels: int) -> Tuple[bytes, int]:
        """
        Encode canonical pixels for a non-mapped output variant.

        Returns:
            Tuple (native bytes, stride)
        """
        family = tga_type.family
        if family == "rgb":
            return PixelFormatConverter.swap_red_blue(data, channels), channels
        if family == "rgb16":
            return PixelFormatConverter.pack_packed(data, channels), 2
        if family == "bw":
            return PixelFormatConverter.pack_bw16(data, channels), 2
        if family == "bw8":
            return PixelFormatConverter.pack_bw8(data, channels), 1
        raise UnsupportedVariantError(f"{tga_type.name} output needs a palette")
