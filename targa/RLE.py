"""
Run-Length Encoding (RLE) packets used by TGA image types 9, 10 and 11.

Each packet starts with one header byte:
    high bit set   - run packet, one pixel value repeated (h & 0x7F) + 1 times
    high bit clear - raw packet, (h & 0x7F) + 1 literal pixel values follow
Pixel values are `stride` bytes wide and already in the file's native layout.
"""

import io
from typing import Callable, List, Tuple

from targa.errors import InvalidFormatError, TruncatedStreamError

MAX_PACKET_PIXELS = 128
RUN_FLAG = 0x80
COUNT_MASK = 0x7F

# (pixel count, is run packet, payload bytes)
Packet = Tuple[int, bool, bytes]


class RLECompressor:
    """Class for TGA RLE compression and decompression"""

    @staticmethod
    def compress(data: bytes, stride: int, row_length: int) -> List[Packet]:
        """
        Split native pixel data into run and raw packets.

        Packets never cross a scanline boundary.

        Args:
            data: Native pixel bytes
            stride: Bytes per pixel
            row_length: Pixels per scanline

        Returns:
            List of (count, is_run, payload) packets
        """
        if not data:
            return []

        packets = []
        row_bytes = row_length * stride

        for start in range(0, len(data), row_bytes):
            row = data[start : start + row_bytes]
            pixels = [row[k : k + stride] for k in range(0, len(row), stride)]
            packets.extend(RLECompressor._compress_row(pixels))

        return packets

    @staticmethod
    def _compress_row(pixels: List[bytes]) -> List[Packet]:
        packets = []
        width = len(pixels)
        i = 0

        while i < width:
            run = 1
            while i + run < width and run < MAX_PACKET_PIXELS and pixels[i + run] == pixels[i]:
                run += 1

            if run > 1:
                packets.append((run, True, bytes(pixels[i])))
                i += run
                continue

            # Raw packet stops right before two equal neighbours so they
            # can start the next run.
            j = i + 1
            while j < width and j - i < MAX_PACKET_PIXELS:
                if j + 1 < width and pixels[j] == pixels[j + 1]:
                    break
                j += 1

            packets.append((j - i, False, b"".join(pixels[i:j])))
            i = j

        return packets

    @staticmethod
    def to_bytes(packets: List[Packet]) -> bytes:
        """
        Serialize packets into the TGA packet stream.
        """
        result = bytearray()
        for count, is_run, payload in packets:
            header = count - 1
            if is_run:
                header |= RUN_FLAG
            result.append(header)
            result.extend(payload)
        return bytes(result)

    @staticmethod
    def encode(data: bytes, stride: int, row_length: int) -> bytes:
        return RLECompressor.to_bytes(RLECompressor.compress(data, stride, row_length))

    @staticmethod
    def decompress(read: Callable[[int], bytes], pixel_count: int, stride: int) -> Tuple[bytes, int]:
        """
        Read packets until pixel_count pixels are decoded.

        Only the bytes each packet declares are requested from `read`,
        nothing past the last packet is consumed.

        Args:
            read: Function returning up to n bytes from the source
            pixel_count: Number of pixels in the image
            stride: Bytes per native pixel

        Returns:
            Tuple (native pixel bytes, number of packets read)

        Raises:
            TruncatedStreamError: If the source ends inside a packet
            InvalidFormatError: If a packet runs past the end of the image
        """
        result = bytearray()
        decoded = 0
        packets = 0

        while decoded < pixel_count:
            header = read(1)
            if len(header) != 1:
                raise TruncatedStreamError(
                    f"RLE stream ended after {decoded} of {pixel_count} pixels"
                )

            count = (header[0] & COUNT_MASK) + 1
            if decoded + count > pixel_count:
                raise InvalidFormatError(
                    f"RLE packet of {count} pixels overruns image at pixel {decoded}"
                )

            size = stride if header[0] & RUN_FLAG else count * stride
            payload = read(size)
            if len(payload) != size:
                raise TruncatedStreamError(
                    f"RLE packet truncated: got {len(payload)} bytes, expected {size}"
                )

            if header[0] & RUN_FLAG:
                result.extend(payload * count)
            else:
                result.extend(payload)

            decoded += count
            packets += 1

        return bytes(result), packets

    @staticmethod
    def decode(blob: bytes, pixel_count: int, stride: int) -> bytes:
        """
        Decompress an in-memory packet stream.
        """
        data, _ = RLECompressor.decompress(io.BytesIO(blob).read, pixel_count, stride)
        return data
