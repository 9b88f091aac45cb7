import pytest

from targa.errors import PaletteOverflowError
from targa.palette import PaletteBuilder


class TestPaletteBuilder:
    def test_first_occurrence_order(self):
        data = bytes([
            10, 20, 30,
            1, 2, 3,
            10, 20, 30,
            4, 5, 6,
        ])
        palette, indices, colors = PaletteBuilder.build(data, 3)

        assert colors == 3
        assert indices == bytes([0, 1, 0, 2])
        # stored as B,G,R
        assert palette == bytes([30, 20, 10, 3, 2, 1, 6, 5, 4])

    def test_alpha_is_part_of_the_color(self):
        data = bytes([1, 2, 3, 0, 1, 2, 3, 255])
        palette, indices, colors = PaletteBuilder.build(data, 4)

        assert colors == 2
        assert indices == bytes([0, 1])
        assert palette == bytes([3, 2, 1, 0, 3, 2, 1, 255])

    def test_deterministic(self):
        data = bytes((i * 7) % 251 for i in range(3 * 500))
        assert PaletteBuilder.build(data, 3) == PaletteBuilder.build(data, 3)

    def test_exactly_256_colors(self):
        data = b"".join(bytes([i, 0, 0]) for i in range(256))
        palette, indices, colors = PaletteBuilder.build(data, 3)
        assert colors == 256
        assert indices == bytes(range(256))
        assert len(palette) == 256 * 3

    def test_257_colors_overflow(self):
        data = b"".join(bytes([i % 256, i // 256, 0]) for i in range(257))
        with pytest.raises(PaletteOverflowError):
            PaletteBuilder.build(data, 3)

    def test_empty_image(self):
        assert PaletteBuilder.build(b"", 3) == (b"", b"", 0)
