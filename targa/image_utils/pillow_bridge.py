"""
Conversion between TGAImage and Pillow images.

Lets TGA data be written to (or read from) any format Pillow supports.
"""

from typing import Optional

from PIL import Image

from targa.image import TGAImage

MODES = {3: "RGB", 4: "RGBA"}


class PillowBridge:
    """Class for moving pixels between TGAImage and PIL.Image"""

    @staticmethod
    def to_pil(image: TGAImage) -> Image.Image:
        """
        Build a Pillow image sharing no memory with the TGA image.

        Args:
            image: Canonical image

        Returns:
            PIL image in RGB or RGBA mode
        """
        return Image.frombytes(
            MODES[image.channels], (image.width, image.height), bytes(image.data)
        )

    @staticmethod
    def from_pil(img: Image.Image, alpha: Optional[bool] = None) -> TGAImage:
        """
        Convert a Pillow image of any mode into a canonical image.

        Args:
            img: Source image
            alpha: Force (True) or drop (False) the alpha channel.
                   By default alpha is kept when the source has one.

        Returns:
            TGAImage with 3 or 4 channels
        """
        if alpha is None:
            alpha = img.mode in ("RGBA", "LA", "PA") or (
                img.mode == "P" and "transparency" in img.info
            )
        mode = "RGBA" if alpha else "RGB"

        # Convert to RGB(A) if needed
        if img.mode != mode:
            img = img.convert(mode)

        width, height = img.size
        return TGAImage(width, height, len(mode), bytearray(img.tobytes()))

    @staticmethod
    def load_image(input_file: str, alpha: Optional[bool] = None) -> TGAImage:
        """
        Read any Pillow-supported file as a canonical image.
        """
        with Image.open(input_file) as img:
            return PillowBridge.from_pil(img, alpha)

    @staticmethod
    def save_image(image: TGAImage, output_file: str, image_format: Optional[str] = None) -> None:
        """
        Write a canonical image with Pillow; format follows the file extension
        unless given.
        """
        PillowBridge.to_pil(image).save(output_file, image_format)
