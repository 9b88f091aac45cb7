import io

import pytest

from targa.RLE import MAX_PACKET_PIXELS, RLECompressor
from targa.errors import InvalidFormatError, TruncatedStreamError


def px(*values):
    return bytes(values)


class TestCompress:
    def test_run_of_two(self):
        packets = RLECompressor.compress(px(1, 1), 1, 2)
        assert packets == [(2, True, px(1))]
        assert RLECompressor.to_bytes(packets) == bytes([0x81, 1])

    def test_all_different_is_one_raw_packet(self):
        assert RLECompressor.compress(px(1, 2, 3), 1, 3) == [(3, False, px(1, 2, 3))]

    def test_raw_stops_before_equal_pair(self):
        packets = RLECompressor.compress(px(1, 2, 3, 3, 3), 1, 5)
        assert packets == [(2, False, px(1, 2)), (3, True, px(3))]

    def test_single_pixel(self):
        assert RLECompressor.encode(px(9), 1, 1) == bytes([0x00, 9])

    def test_multi_byte_stride(self):
        data = px(0, 0, 255, 0, 0, 255, 1, 2, 3)
        packets = RLECompressor.compress(data, 3, 3)
        assert packets == [(2, True, px(0, 0, 255)), (1, False, px(1, 2, 3))]

    def test_run_capped_at_128(self):
        packets = RLECompressor.compress(bytes(300), 1, 300)
        assert [count for count, _, _ in packets] == [128, 128, 44]
        assert all(is_run for _, is_run, _ in packets)

    def test_raw_capped_at_128(self):
        data = bytes(i % 2 for i in range(200))
        packets = RLECompressor.compress(data, 1, 200)
        assert [count for count, _, _ in packets] == [128, 72]
        assert not any(is_run for _, is_run, _ in packets)

    def test_packets_do_not_cross_scanlines(self):
        packets = RLECompressor.compress(bytes(6), 1, 3)
        assert packets == [(3, True, px(0)), (3, True, px(0))]

    def test_packet_bound(self):
        data = bytes((i // 5) % 3 for i in range(4000))
        for count, _, _ in RLECompressor.compress(data, 2, 200):
            assert 1 <= count <= MAX_PACKET_PIXELS

    def test_empty(self):
        assert RLECompressor.compress(b"", 3, 0) == []


class TestDecompress:
    def test_run_and_raw(self):
        stream = bytes([0x82, 7, 0x01, 8, 9])
        assert RLECompressor.decode(stream, 5, 1) == px(7, 7, 7, 8, 9)

    def test_packets_may_cross_scanlines(self):
        stream = bytes([0x85, 4, 4])
        assert RLECompressor.decode(stream, 6, 2) == bytes([4, 4] * 6)

    def test_does_not_read_past_last_packet(self):
        source = io.BytesIO(bytes([0x81, 5, 0xEE, 0xEE]))
        data, packets = RLECompressor.decompress(source.read, 2, 1)
        assert data == px(5, 5)
        assert packets == 1
        assert source.tell() == 2

    def test_truncated_header(self):
        with pytest.raises(TruncatedStreamError):
            RLECompressor.decode(bytes([0x80, 1]), 2, 1)

    def test_truncated_raw_payload(self):
        with pytest.raises(TruncatedStreamError):
            RLECompressor.decode(bytes([0x03, 1, 2]), 4, 1)

    def test_truncated_run_value(self):
        with pytest.raises(TruncatedStreamError):
            RLECompressor.decode(bytes([0x80, 1]), 1, 3)

    def test_packet_overrunning_image(self):
        with pytest.raises(InvalidFormatError):
            RLECompressor.decode(bytes([0x83, 1]), 2, 1)

    def test_zero_pixels_reads_nothing(self):
        assert RLECompressor.decode(b"", 0, 4) == b""

    def test_encode_decode_mixed_rows(self):
        data = bytes([1, 1, 2, 3, 3, 3, 4, 5, 6, 6, 6, 6] * 3)
        encoded = RLECompressor.encode(data, 2, 3)
        assert RLECompressor.decode(encoded, len(data) // 2, 2) == data
