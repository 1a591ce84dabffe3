from pathlib import Path
from typing import Union
from io import BytesIO
import base64
import os
import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv
from models.image import Image
from models.errors import InvalidImageError

# Load environment variables
load_dotenv()


class ImageRepository:
    """
    Handles decoding, encoding and file I/O for Image entities.
    """
    def __init__(self):
        self.VALID_EXTS = {
            ext.strip().lower().lstrip(".")
            for ext in os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,gif,bmp,webp").split(",")
            if ext.strip()
        }
        self.JPEG_QUALITY = int(os.getenv("JPEG_QUALITY", "95"))

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    @staticmethod
    def load(path: Union[str, Path], rgb: bool = True) -> Image:
        path = Path(path)
        arr_bgr = cv2.imread(str(path))
        if arr_bgr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        arr = arr_bgr[:, :, ::-1] if rgb else arr_bgr
        return Image(pixels=np.ascontiguousarray(arr), path=path)

    @staticmethod
    def decode(data: bytes) -> Image:
        """Decode an encoded image buffer (JPEG, PNG, ...) into an RGB Image."""
        if not data:
            raise InvalidImageError("Empty image buffer")
        arr_bgr = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise InvalidImageError("Buffer is not a decodable image")
        return Image(pixels=np.ascontiguousarray(arr_bgr[:, :, ::-1]))

    @staticmethod
    def from_bgr_frame(frame: np.ndarray) -> Image:
        """Wrap a BGR video frame as an RGB Image."""
        return Image(pixels=np.ascontiguousarray(frame[:, :, ::-1]))

    def encode(self, image: Image, fmt: str = "JPEG") -> bytes:
        pil_image = PILImage.fromarray(np.ascontiguousarray(image.pixels))
        buffer = BytesIO()
        if fmt.upper() in ("JPEG", "JPG"):
            pil_image.save(buffer, format="JPEG", quality=self.JPEG_QUALITY)
        else:
            pil_image.save(buffer, format=fmt)
        return buffer.getvalue()

    def to_data_url(self, image: Image) -> str:
        base64_string = base64.b64encode(self.encode(image)).decode("utf-8")
        return f"data:image/jpeg;base64,{base64_string}"

    def save_jpeg(self, image: Image) -> None:
        """Write JPEG bytes to image.path whatever its extension."""
        if image.path is None:
            raise ValueError("Image has no path to save to")
        Path(image.path).parent.mkdir(parents=True, exist_ok=True)
        Path(image.path).write_bytes(self.encode(image, "JPEG"))

    def save(self, image: Image) -> None:
        if image.path is None:
            raise ValueError("Image has no path to save to")
        Path(image.path).parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(image.path)

    def is_allowed(self, filename: str, mimetype: str | None) -> bool:
        """Accept only image/* uploads with an allowed extension."""
        if not mimetype or not mimetype.startswith("image/"):
            return False
        return '.' in filename and filename.rsplit('.', 1)[1].lower() in self.VALID_EXTS

    @staticmethod
    def save_original_pixels(image: Image) -> None:
        """Save current pixels as original for before/after comparison"""
        if image.original_pixels is None:
            image.original_pixels = image.pixels.copy()
