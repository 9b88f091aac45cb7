"""
Canonical in-memory image used by the codec.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class TGAImage:
    """
    Row-major, top-to-bottom pixel buffer with interleaved R,G,B[,A] bytes.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        channels: 3 (RGB) or 4 (RGBA)
        data: Pixel bytes, exactly width * height * channels long
    """

    width: int
    height: int
    channels: int
    data: bytearray = field(repr=False)

    def __post_init__(self):
        if self.channels not in (3, 4):
            raise ValueError(f"Channel count must be 3 or 4, got {self.channels}")
        if self.width < 0 or self.height < 0:
            raise ValueError("Image dimensions cannot be negative")
        self.data = bytearray(self.data)
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel buffer size mismatch: got {len(self.data)} bytes, expected {expected}"
            )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def as_array(self) -> np.ndarray:
        """
        Writable (height, width, channels) uint8 view over the pixel buffer.
        """
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, self.channels
        )

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "TGAImage":
        """
        Build an image from a (height, width, channels) array.

        Args:
            pixels: Array with 3 or 4 channels, values 0..255

        Returns:
            New TGAImage owning a copy of the pixels
        """
        if pixels.ndim != 3:
            raise ValueError(f"Expected a (height, width, channels) array, got shape {pixels.shape}")
        height, width, channels = pixels.shape
        data = np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()
        return cls(width, height, channels, bytearray(data))

    def copy(self) -> "TGAImage":
        return TGAImage(self.width, self.height, self.channels, bytearray(self.data))
