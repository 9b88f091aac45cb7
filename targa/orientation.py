"""
In-place mirroring of canonical images.
"""

from targa.image import TGAImage


def flip_horizontally(image: TGAImage) -> None:
    """Mirror every scanline left to right."""
    pixels = image.as_array()
    pixels[:] = pixels[:, ::-1].copy()


def flip_vertically(image: TGAImage) -> None:
    """Reverse the order of scanlines."""
    pixels = image.as_array()
    pixels[:] = pixels[::-1].copy()


def normalize_orientation(image: TGAImage, x_origin: int, y_origin: int) -> None:
    """
    Bring a decoded image into top-to-bottom, left-to-right order.

    Non-zero origin coordinates in the header trigger the flips; the
    descriptor's origin bits are not consulted.
    """
    if x_origin:
        flip_horizontally(image)
    if y_origin:
        flip_vertically(image)
