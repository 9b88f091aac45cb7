import struct

import pytest

from targa.errors import InvalidFormatError, UnsupportedVariantError
from targa.header import HEADER_SIZE, PixelFormat, TGAHeader, TGAType


def raw_header(**fields) -> bytes:
    values = dict(
        id_length=0, color_map_type=0, image_type=2, first_entry_index=0,
        color_map_length=0, color_map_entry_size=0, x_origin=0, y_origin=0,
        width=0, height=0, bits_per_pixel=24, image_descriptor=0,
    )
    values.update(fields)
    return TGAHeader(**values).to_bytes()


class TestHeaderParsing:
    def test_field_offsets_are_little_endian(self):
        data = bytes([
            5, 1, 9,
            0x02, 0x01, 0x10, 0x00, 24,
            0x03, 0x00, 0x04, 0x00,
            0x34, 0x12, 0x78, 0x56,
            8, 0x28,
        ])
        header = TGAHeader.from_bytes(data)

        assert header.id_length == 5
        assert header.color_map_type == 1
        assert header.image_type == 9
        assert header.first_entry_index == 0x0102
        assert header.color_map_length == 16
        assert header.color_map_entry_size == 24
        assert header.x_origin == 3
        assert header.y_origin == 4
        assert header.width == 0x1234
        assert header.height == 0x5678
        assert header.bits_per_pixel == 8
        assert header.image_descriptor == 0x28
        assert header.alpha_bits == 8
        assert header.color_channels == 3
        assert header.is_rle
        assert header.base_type == 1

    def test_serialization_matches_parsed_bytes(self):
        data = raw_header(width=300, height=2, x_origin=1, bits_per_pixel=32)
        assert len(data) == HEADER_SIZE
        assert data[12:14] == bytes([300 % 256, 300 // 256])
        assert TGAHeader.from_bytes(data).to_bytes() == data

    def test_no_image_type_is_rejected(self):
        with pytest.raises(InvalidFormatError):
            TGAHeader.from_bytes(raw_header(image_type=0))

    def test_short_header_is_rejected(self):
        with pytest.raises(InvalidFormatError):
            TGAHeader.from_bytes(b"\x00\x00\x02")

    def test_extra_bytes_are_ignored(self):
        data = raw_header(width=2, height=2) + b"\xff" * 10
        assert TGAHeader.from_bytes(data).width == 2


class TestPixelFormat:
    @pytest.mark.parametrize("image_type,bits,expected", [
        (1, 8, PixelFormat.MAPPED8),
        (9, 8, PixelFormat.MAPPED8),
        (2, 15, PixelFormat.RGB15),
        (2, 16, PixelFormat.RGB16),
        (10, 24, PixelFormat.RGB24),
        (2, 32, PixelFormat.RGB32),
        (3, 8, PixelFormat.BW8),
        (11, 16, PixelFormat.BW16),
    ])
    def test_supported_pairs(self, image_type, bits, expected):
        header = TGAHeader(image_type=image_type, bits_per_pixel=bits)
        assert header.pixel_format is expected

    @pytest.mark.parametrize("image_type,bits", [
        (1, 16), (2, 8), (3, 24), (4, 8), (32, 8), (33, 8), (10, 12),
    ])
    def test_unsupported_pairs(self, image_type, bits):
        header = TGAHeader(image_type=image_type, bits_per_pixel=bits)
        with pytest.raises(UnsupportedVariantError):
            header.pixel_format

    def test_strides(self):
        assert PixelFormat.MAPPED8.stride == 1
        assert PixelFormat.RGB16.stride == 2
        assert PixelFormat.RGB24.stride == 3
        assert PixelFormat.RGB32.stride == 4


class TestTGAType:
    def test_image_type_codes(self):
        assert TGAType.MAPPED.image_type == 1
        assert TGAType.RGB16.image_type == 2
        assert TGAType.BW8.image_type == 3
        assert TGAType.MAPPED_RLE.image_type == 9
        assert TGAType.RGB16_RLE.image_type == 10
        assert TGAType.BW_RLE.image_type == 11
        assert len(TGAType) == 10

    def test_rle_flag(self):
        assert TGAType.RGB_RLE.is_rle
        assert not TGAType.RGB.is_rle

    @pytest.mark.parametrize("tga_type,channels,bits", [
        (TGAType.MAPPED, 4, 8),
        (TGAType.RGB, 3, 24),
        (TGAType.RGB_RLE, 4, 32),
        (TGAType.RGB16, 3, 15),
        (TGAType.RGB16, 4, 16),
        (TGAType.BW, 3, 16),
        (TGAType.BW8_RLE, 4, 8),
    ])
    def test_bits_per_pixel(self, tga_type, channels, bits):
        assert tga_type.bits_per_pixel(channels) == bits

    def test_from_name(self):
        assert TGAType.from_name("rgb16_rle") is TGAType.RGB16_RLE
        with pytest.raises(UnsupportedVariantError):
            TGAType.from_name("jpeg")

    def test_header_for_mapped_image(self):
        header = TGAHeader.for_image(4, 2, 4, TGAType.MAPPED_RLE, palette_length=7)
        data = header.to_bytes()
        assert struct.unpack("<BBBHHB", data[:8]) == (0, 1, 9, 0, 7, 32)
        assert header.bits_per_pixel == 8

    def test_header_descriptor_alpha_bits(self):
        assert TGAHeader.for_image(1, 1, 4, TGAType.RGB).image_descriptor == 8
        assert TGAHeader.for_image(1, 1, 4, TGAType.RGB16).image_descriptor == 1
        assert TGAHeader.for_image(1, 1, 3, TGAType.RGB).image_descriptor == 0
        assert TGAHeader.for_image(1, 1, 3, TGAType.BW).image_descriptor == 8

    def test_oversized_image(self):
        with pytest.raises(UnsupportedVariantError):
            TGAHeader.for_image(70000, 1, 3, TGAType.RGB)


class TestSourceVariant:
    @pytest.mark.parametrize("image_type, bits, expected", [
        (1, 8, TGAType.MAPPED),
        (9, 8, TGAType.MAPPED_RLE),
        (2, 15, TGAType.RGB16),
        (10, 16, TGAType.RGB16_RLE),
        (2, 24, TGAType.RGB),
        (10, 32, TGAType.RGB_RLE),
        (3, 8, TGAType.BW8),
        (11, 16, TGAType.BW_RLE),
    ])
    def test_tga_type_matches_file(self, image_type, bits, expected):
        header = TGAHeader(image_type=image_type, bits_per_pixel=bits, width=1, height=1)
        assert header.tga_type is expected

    def test_tga_type_unsupported(self):
        with pytest.raises(UnsupportedVariantError):
            TGAHeader(image_type=3, bits_per_pixel=24).tga_type
