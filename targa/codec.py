"""
TGA decoder and encoder.

Decoding: header -> (color map) -> pixel data (raw or RLE) -> canonical
pixels -> orientation fix. Encoding: (palette) -> native pixels -> (RLE)
-> header + color map + pixel data written in one pass.
"""

import io
import os
from typing import BinaryIO, List, Optional, Tuple, Union

from targa.RLE import RLECompressor
from targa.errors import (
    AllocationFailedError,
    OpenFailedError,
    ReadFailedError,
    TGAError,
    TruncatedStreamError,
    WriteFailedError,
)
from targa.header import HEADER_SIZE, PixelFormat, TGAHeader, TGAType
from targa.image import TGAImage
from targa.orientation import normalize_orientation
from targa.palette import PaletteBuilder
from targa.pixel_formats import PixelFormatConverter
from targa.stream_ABC import FileStreamFunctions, StreamFunctions

Source = Union[str, os.PathLike, BinaryIO]


class TGACodec:
    """
    Reads and writes TGA images through a StreamFunctions implementation.
    """

    def __init__(
        self,
        func_def: Optional[StreamFunctions] = None,
        verbose: bool = False,
        expand_5bit: bool = False,
    ):
        """
        Args:
            func_def: Stream functions used to open paths (local files by default)
            verbose: Print log lines as they are produced
            expand_5bit: Fill the low 3 bits of 5-bit channels by bit replication
        """
        self.func_def = func_def or FileStreamFunctions()
        self.verbose = verbose
        self.expand_5bit = expand_5bit
        self.log: List[str] = []

    def _note(self, message: str) -> None:
        self.log.append(message)
        if self.verbose:
            print(message)

    def _note_header(self, header: TGAHeader) -> None:
        self._note(
            f"Header: type {header.image_type}, {header.width}x{header.height}, "
            f"{header.bits_per_pixel} bits per pixel"
        )

    def _open(self, target: Source, mode: str) -> Tuple[BinaryIO, bool]:
        """
        Returns the handle and whether the codec opened it (and must close it).
        """
        if not isinstance(target, (str, os.PathLike)):
            return target, False

        filename = os.fspath(target)
        try:
            handle = self.func_def.open_file(filename, mode)
        except OSError as err:
            raise OpenFailedError(f"Cannot open {filename}: {err}") from err
        if handle is None:
            raise OpenFailedError(f"Cannot open {filename}")
        return handle, True

    def _read(self, handle: BinaryIO, size: int) -> bytes:
        try:
            return self.func_def.read_file(handle, size)
        except (OSError, ValueError) as err:
            raise ReadFailedError(f"Read of {size} bytes failed: {err}") from err

    def _read_exact(self, handle: BinaryIO, size: int, what: str) -> bytes:
        data = self._read(handle, size)
        if len(data) != size:
            raise TruncatedStreamError(f"{what} truncated: got {len(data)} bytes, expected {size}")
        return data

    def _write(self, handle: BinaryIO, data: bytes) -> None:
        try:
            written = self.func_def.write_file(handle, data)
        except (OSError, ValueError) as err:
            raise WriteFailedError(f"Write of {len(data)} bytes failed: {err}") from err
        if written != len(data):
            raise WriteFailedError(f"Short write: {written} of {len(data)} bytes")

    def read_header(self, source: Source) -> TGAHeader:
        """
        Read and parse only the 18-byte header.

        Raises:
            InvalidFormatError: If the header is incomplete or of type 0
        """
        self.log.clear()
        handle, owned = self._open(source, "rb")
        try:
            header = TGAHeader.from_bytes(self._read(handle, HEADER_SIZE))
            self._note_header(header)
            return header
        finally:
            if owned:
                self.func_def.close_file(handle)

    def load(self, source: Source) -> TGAImage:
        """
        Decode a TGA image.

        Args:
            source: Path opened through func_def, or an open binary file
                    (read from its current position and left open)

        Returns:
            Canonical image, top-to-bottom, R,G,B[,A]

        Raises:
            TGAError: Any open, read or format failure
        """
        self.log.clear()
        handle, owned = self._open(source, "rb")
        try:
            return self._load(handle)
        except TGAError:
            raise
        except MemoryError as err:
            raise AllocationFailedError("Not enough memory for the pixel buffer") from err
        finally:
            if owned:
                self.func_def.close_file(handle)

    def _load(self, handle: BinaryIO) -> TGAImage:
        header = TGAHeader.from_bytes(self._read(handle, HEADER_SIZE))
        fmt = header.pixel_format
        self._note_header(header)

        if header.id_length:
            try:
                self.func_def.seek_file(handle, header.id_length, os.SEEK_CUR)
            except (OSError, ValueError) as err:
                raise ReadFailedError(f"Cannot skip image ID field: {err}") from err

        palette = None
        if header.color_map_type:
            entry_bytes = (header.color_map_entry_size + 7) // 8
            color_map = self._read_exact(
                handle, header.color_map_length * entry_bytes, "Color map"
            )
            # Color maps attached to non-mapped images are skipped.
            if fmt is PixelFormat.MAPPED8:
                palette = PixelFormatConverter.read_palette(
                    color_map, header.color_map_entry_size, self.expand_5bit
                )
                self._note(f"Color map: {len(palette)} entries")

        pixel_count = header.width * header.height
        if header.is_rle:
            native, packets = RLECompressor.decompress(
                lambda size: self._read(handle, size), pixel_count, fmt.stride
            )
            self._note(f"Decoded {packets} RLE packets")
        else:
            native = self._read_exact(handle, pixel_count * fmt.stride, "Pixel data")

        data, channels = PixelFormatConverter.to_canonical(
            fmt, native, palette, header.first_entry_index, self.expand_5bit
        )
        image = TGAImage(header.width, header.height, channels, bytearray(data))
        normalize_orientation(image, header.x_origin, header.y_origin)
        self._note(f"Loaded {image.width}x{image.height} image with {channels} channels")
        return image

    def save(self, image: TGAImage, target: Source, tga_type: Union[TGAType, str]) -> None:
        """
        Encode an image.

        Everything is encoded in memory before the target is opened, so a
        failed encode (e.g. palette overflow) leaves no file behind.

        Args:
            image: Canonical image to write
            target: Path opened through func_def, or an open binary file
            tga_type: Output variant (TGAType member or its name, e.g. "rgb_rle")

        Raises:
            TGAError: Any encoding or write failure
        """
        self.log.clear()
        if isinstance(tga_type, str):
            tga_type = TGAType.from_name(tga_type)

        expected = image.width * image.height * image.channels
        if image.channels not in (3, 4) or len(image.data) != expected:
            raise ValueError(
                f"Inconsistent image: {image.width}x{image.height}x{image.channels}"
                f" with {len(image.data)} bytes"
            )

        try:
            payload = self._encode(image, tga_type)
        except TGAError:
            raise
        except MemoryError as err:
            raise AllocationFailedError("Not enough memory to encode the image") from err

        handle, owned = self._open(target, "wb")
        try:
            self._write(handle, payload)
        finally:
            if owned:
                self.func_def.close_file(handle)
        self._note(f"Wrote {len(payload)} bytes as {tga_type.name}")

    def _encode(self, image: TGAImage, tga_type: TGAType) -> bytes:
        palette = b""
        colors = None

        if tga_type.is_mapped:
            palette, native, colors = PaletteBuilder.build(image.data, image.channels)
            stride = 1
            self._note(f"Palette: {colors} colors")
        else:
            native, stride = PixelFormatConverter.from_canonical(
                tga_type, image.data, image.channels
            )

        header = TGAHeader.for_image(
            image.width, image.height, image.channels, tga_type, palette_length=colors
        )

        if tga_type.is_rle:
            packets = RLECompressor.compress(native, stride, image.width)
            self._note(f"Encoded {len(packets)} RLE packets")
            native = RLECompressor.to_bytes(packets)

        return header.to_bytes() + palette + native


def load_tga(source: Source, func_def: Optional[StreamFunctions] = None) -> TGAImage:
    return TGACodec(func_def).load(source)


def save_tga(
    image: TGAImage,
    target: Source,
    tga_type: Union[TGAType, str],
    func_def: Optional[StreamFunctions] = None,
) -> None:
    TGACodec(func_def).save(image, target, tga_type)


def read_header(source: Source, func_def: Optional[StreamFunctions] = None) -> TGAHeader:
    return TGACodec(func_def).read_header(source)


def load_tga_bytes(data: bytes) -> TGAImage:
    """Decode a TGA image held in memory."""
    return TGACodec().load(io.BytesIO(data))


def save_tga_bytes(image: TGAImage, tga_type: Union[TGAType, str]) -> bytes:
    """Encode an image and return the file contents."""
    buffer = io.BytesIO()
    TGACodec().save(image, buffer, tga_type)
    return buffer.getvalue()
