from pathlib import Path
from typing import Union
import os
import numpy as np
from dotenv import load_dotenv
from models.image import Image
from models.image_adjustments import ImageAdjustments
from repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()


class ImageService:
    """I/O helpers and pixel adjustments.  No drawing logic."""
    def __init__(self, image_repository: ImageRepository = None):
        self.BRIGHTNESS_GAIN = float(os.getenv("BRIGHTNESS_GAIN", "1.2"))
        self.image_repository = image_repository or ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def decode(self, data: bytes) -> Image:
        """Decode uploaded bytes into an Image object."""
        return self.image_repository.decode(data)

    def from_frame(self, frame: np.ndarray) -> Image:
        return self.image_repository.from_bgr_frame(frame)

    def is_allowed_upload(self, filename: str, mimetype: str | None) -> bool:
        return self.image_repository.is_allowed(filename, mimetype)

    def encode_jpeg(self, image: Image) -> bytes:
        return self.image_repository.encode(image, "JPEG")

    def to_data_url(self, image: Image) -> str:
        return self.image_repository.to_data_url(image)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path.
        """
        self.image_repository.save(image)

    def save_jpeg(self, image: Image) -> None:
        self.image_repository.save_jpeg(image)

    def preserve_original_state(self, image: Image) -> None:
        """
        Preserve the current image state before processing pipeline.
        """
        self.image_repository.save_original_pixels(image)

    def apply_brightness(self, img: Image, adjustments: ImageAdjustments = None) -> Image:
        """
        Apply the per-channel brightness gain and return a *new* Image.
        The source pixels are kept as ``original_pixels`` of the result.
        """
        adjustments = adjustments or ImageAdjustments(gain=self.BRIGHTNESS_GAIN)
        new_path = (
            img.path.with_stem(img.path.stem + "_enhanced") if img.path else None
        )
        edited = self.create_image(adjustments.apply(img.pixels), new_path)
        edited.original_pixels = (
            img.original_pixels if img.original_pixels is not None else img.pixels.copy()
        )
        return edited
