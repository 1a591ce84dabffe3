from typing import Callable, Optional
import logging
import numpy as np
import cv2
from models.errors import CameraAccessError

logger = logging.getLogger(__name__)


class CameraRepository:
    """
    Thin wrapper around cv2.VideoCapture that owns the device handle.
    """

    def __init__(self, index: int = 0, width: int = 640, height: int = 480,
                 capture_factory: Callable = cv2.VideoCapture):
        self.index = index
        self.width = width
        self.height = height
        self._capture_factory = capture_factory
        self._capture = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        if self._capture is not None:
            return
        capture = self._capture_factory(self.index)
        if capture is None or not capture.isOpened():
            if capture is not None:
                capture.release()
            raise CameraAccessError()
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._capture = capture
        logger.info(f"Camera {self.index} opened at {self.width}x{self.height}")

    def read(self) -> np.ndarray:
        """Return the current BGR frame."""
        if self._capture is None:
            raise CameraAccessError("Camera is not open")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraAccessError("Camera returned no frame")
        return frame

    def release(self) -> None:
        capture: Optional[object] = self._capture
        self._capture = None
        if capture is not None:
            capture.release()
            logger.info(f"Camera {self.index} released")
