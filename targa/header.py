"""
TGA header parsing and serialization.

Fixed 18-byte header, all multi-byte fields little-endian:
    id length (1), color map type (1), image type (1),
    color map spec: first entry index (2), length (2), entry size (1),
    image spec: x origin (2), y origin (2), width (2), height (2),
                bits per pixel (1), image descriptor (1)
"""

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from targa.errors import InvalidFormatError, UnsupportedVariantError

HEADER_SIZE = 18
HEADER_FMT = "<BBBHHBHHHHBB"

# Image type codes
TGA_TYPE_NO_IMAGE = 0
TGA_TYPE_MAPPED = 1
TGA_TYPE_RGB = 2
TGA_TYPE_BW = 3
TGA_TYPE_MAPPED_RLE = 9
TGA_TYPE_RGB_RLE = 10
TGA_TYPE_BW_RLE = 11

RLE_FLAG = 8


class TGAType(Enum):
    """
    Output variant requested by the caller when saving an image.

    Value is (image type code, bits-per-pixel family name).
    """

    MAPPED = (TGA_TYPE_MAPPED, "mapped")
    RGB = (TGA_TYPE_RGB, "rgb")
    RGB16 = (TGA_TYPE_RGB, "rgb16")
    BW = (TGA_TYPE_BW, "bw")
    BW8 = (TGA_TYPE_BW, "bw8")
    MAPPED_RLE = (TGA_TYPE_MAPPED_RLE, "mapped")
    RGB_RLE = (TGA_TYPE_RGB_RLE, "rgb")
    RGB16_RLE = (TGA_TYPE_RGB_RLE, "rgb16")
    BW_RLE = (TGA_TYPE_BW_RLE, "bw")
    BW8_RLE = (TGA_TYPE_BW_RLE, "bw8")

    @property
    def image_type(self) -> int:
        return self.value[0]

    @property
    def family(self) -> str:
        return self.value[1]

    @property
    def is_rle(self) -> bool:
        return bool(self.image_type & RLE_FLAG)

    @property
    def is_mapped(self) -> bool:
        return self.family == "mapped"

    def bits_per_pixel(self, channels: int) -> int:
        """
        Bits per pixel written for an image with the given channel count.
        """
        if self.family == "mapped":
            return 8
        if self.family == "rgb":
            return channels * 8
        if self.family == "rgb16":
            return 16 if channels == 4 else 15
        if self.family == "bw":
            return 16
        return 8

    def alpha_bits(self, channels: int) -> int:
        """
        Attribute bits stored in the low nibble of the image descriptor.
        """
        if self.family == "bw":
            return 8
        if channels != 4 or self.family == "bw8":
            return 0
        return 1 if self.family == "rgb16" else 8

    @classmethod
    def from_name(cls, name: str) -> "TGAType":
        try:
            return cls[name.upper()]
        except KeyError:
            raise UnsupportedVariantError(f"Unknown TGA type: {name}") from None


class PixelFormat(Enum):
    """
    Native pixel layout of a file, resolved from (base image type, bits per pixel).

    Value is (base image type, bits per pixel, stride in bytes).
    """

    MAPPED8 = (TGA_TYPE_MAPPED, 8, 1)
    RGB15 = (TGA_TYPE_RGB, 15, 2)
    RGB16 = (TGA_TYPE_RGB, 16, 2)
    RGB24 = (TGA_TYPE_RGB, 24, 3)
    RGB32 = (TGA_TYPE_RGB, 32, 4)
    BW8 = (TGA_TYPE_BW, 8, 1)
    BW16 = (TGA_TYPE_BW, 16, 2)

    @property
    def stride(self) -> int:
        return self.value[2]

    @classmethod
    def resolve(cls, base_type: int, bits_per_pixel: int) -> "PixelFormat":
        for fmt in cls:
            if fmt.value[0] == base_type and fmt.value[1] == bits_per_pixel:
                return fmt
        raise UnsupportedVariantError(
            f"Unsupported TGA variant: image type {base_type}, {bits_per_pixel} bits per pixel"
        )


@dataclass
class TGAHeader:
    id_length: int = 0
    color_map_type: int = 0
    image_type: int = TGA_TYPE_RGB
    first_entry_index: int = 0
    color_map_length: int = 0
    color_map_entry_size: int = 0
    x_origin: int = 0
    y_origin: int = 0
    width: int = 0
    height: int = 0
    bits_per_pixel: int = 0
    image_descriptor: int = 0

    @property
    def is_rle(self) -> bool:
        return bool(self.image_type & RLE_FLAG)

    @property
    def base_type(self) -> int:
        return self.image_type & ~RLE_FLAG

    @property
    def color_channels(self) -> int:
        return self.color_map_entry_size // 8

    @property
    def alpha_bits(self) -> int:
        return self.image_descriptor & 0x0F

    @property
    def pixel_format(self) -> PixelFormat:
        if self.image_type not in (
            TGA_TYPE_MAPPED,
            TGA_TYPE_RGB,
            TGA_TYPE_BW,
            TGA_TYPE_MAPPED_RLE,
            TGA_TYPE_RGB_RLE,
            TGA_TYPE_BW_RLE,
        ):
            raise UnsupportedVariantError(f"Unsupported TGA image type: {self.image_type}")
        return PixelFormat.resolve(self.base_type, self.bits_per_pixel)

    @property
    def tga_type(self) -> TGAType:
        """
        Saving variant that reproduces this file's pixel format.
        """
        family = {
            PixelFormat.MAPPED8: "MAPPED",
            PixelFormat.RGB15: "RGB16",
            PixelFormat.RGB16: "RGB16",
            PixelFormat.RGB24: "RGB",
            PixelFormat.RGB32: "RGB",
            PixelFormat.BW8: "BW8",
            PixelFormat.BW16: "BW",
        }[self.pixel_format]
        return TGAType[family + "_RLE" if self.is_rle else family]

    @classmethod
    def from_bytes(cls, data: bytes) -> "TGAHeader":
        """
        Parse the fixed header.

        Args:
            data: At least the first 18 bytes of a TGA file

        Returns:
            Parsed header

        Raises:
            InvalidFormatError: If the header is incomplete or describes no image
        """
        if len(data) < HEADER_SIZE:
            raise InvalidFormatError(
                f"Incomplete TGA header: got {len(data)} bytes, expected {HEADER_SIZE}"
            )
        header = cls(*struct.unpack(HEADER_FMT, bytes(data[:HEADER_SIZE])))
        if header.image_type == TGA_TYPE_NO_IMAGE:
            raise InvalidFormatError("TGA file contains no image data")
        return header

    def to_bytes(self) -> bytes:
        return struct.pack(
            HEADER_FMT,
            self.id_length,
            self.color_map_type,
            self.image_type,
            self.first_entry_index,
            self.color_map_length,
            self.color_map_entry_size,
            self.x_origin,
            self.y_origin,
            self.width,
            self.height,
            self.bits_per_pixel,
            self.image_descriptor,
        )

    @classmethod
    def for_image(
        cls,
        width: int,
        height: int,
        channels: int,
        tga_type: TGAType,
        palette_length: Optional[int] = None,
    ) -> "TGAHeader":
        """
        Build the header written in front of an encoded image.

        Args:
            width: Image width, 0..65535
            height: Image height, 0..65535
            channels: Canonical channel count of the image
            tga_type: Requested output variant
            palette_length: Number of palette entries for mapped output

        Returns:
            Header ready to serialize
        """
        if width > 0xFFFF or height > 0xFFFF:
            raise UnsupportedVariantError(
                f"Image {width}x{height} exceeds the 65535 pixel TGA limit"
            )
        header = cls(
            image_type=tga_type.image_type,
            width=width,
            height=height,
            bits_per_pixel=tga_type.bits_per_pixel(channels),
            image_descriptor=tga_type.alpha_bits(channels),
        )
        if tga_type.is_mapped:
            header.color_map_type = 1
            header.color_map_length = palette_length or 0
            header.color_map_entry_size = channels * 8
        return header

    def describe(self) -> dict:
        """Header fields in a printable form."""
        info = {
            "Image Type": self.image_type,
            "RLE": "yes" if self.is_rle else "no",
            "Image Dimensions": f"{self.width} x {self.height}",
            "Bits per Pixel": self.bits_per_pixel,
            "Origin": f"({self.x_origin}, {self.y_origin})",
            "Alpha Bits": self.alpha_bits,
            "ID Length": self.id_length,
        }
        if self.color_map_type:
            info["Color Map"] = (
                f"{self.color_map_length} entries x {self.color_map_entry_size} bits"
                f" from index {self.first_entry_index}"
            )
        return info
