"""
Palette construction for color-mapped (indexed) output.
"""

from typing import Dict, Tuple

from targa.errors import PaletteOverflowError

MAX_PALETTE_SIZE = 256


class PaletteBuilder:
    """Deduplicates canonical pixels into a color map of at most 256 entries"""

    @staticmethod
    def build(data: bytes, channels: int) -> Tuple[bytes, bytes, int]:
        """
        Assign every distinct pixel a palette slot in order of first appearance.

        Args:
            data: Canonical R,G,B[,A] pixel bytes
            channels: 3 or 4

        Returns:
            Tuple of (palette bytes in native B,G,R[,A] order,
                      index bytes with one entry per pixel,
                      number of palette entries)

        Raises:
            PaletteOverflowError: When a 257th distinct color is found
        """
        slots: Dict[bytes, int] = {}
        indices = bytearray(len(data) // channels)

        for pixel, pos in enumerate(range(0, len(data), channels)):
            color = bytes(data[pos : pos + channels])
            slot = slots.get(color)
            if slot is None:
                slot = len(slots)
                if slot >= MAX_PALETTE_SIZE:
                    raise PaletteOverflowError(
                        f"Image has more than {MAX_PALETTE_SIZE} distinct colors"
                    )
                slots[color] = slot
            indices[pixel] = slot

        palette = bytearray()
        for color in slots:
            # R,G,B[,A] -> B,G,R[,A]
            palette.extend((color[2], color[1], color[0]))
            palette.extend(color[3:])

        return bytes(palette), bytes(indices), len(slots)
