import os
import logging
from dotenv import load_dotenv
from models.image import Image
from repositories.camera_repository import CameraRepository
from services.image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class CameraService:
    """
    Live detection: owns one camera stream between start() and stop().
    Any path that ends live capture releases the device.
    """

    def __init__(self, camera_repository: CameraRepository = None,
                 image_service: ImageService = None):
        self.camera_repository = camera_repository or CameraRepository(
            index=int(os.getenv("CAMERA_INDEX", "0")),
            width=int(os.getenv("CAMERA_WIDTH", "640")),
            height=int(os.getenv("CAMERA_HEIGHT", "480")),
        )
        self.image_service = image_service or ImageService()

    @property
    def live(self) -> bool:
        return self.camera_repository.is_open

    def start(self) -> None:
        """Request camera access. Raises CameraAccessError when denied."""
        try:
            self.camera_repository.open()
        except Exception:
            self.camera_repository.release()
            raise

    def read_frame(self) -> Image:
        return self.image_service.from_frame(self.camera_repository.read())

    def capture_frame(self) -> Image:
        """Freeze the current frame as a still image and release the camera."""
        try:
            image = self.read_frame()
        finally:
            self.stop()
        logger.info(f"Captured frame {image.width}x{image.height}")
        return image

    def stop(self) -> None:
        self.camera_repository.release()
