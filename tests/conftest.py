import os

# No waiting between stages under test
os.environ["STAGE_DELAY_SCALE"] = "0"

import cv2
import numpy as np
import pytest

from repositories.camera_repository import CameraRepository
from services.camera_service import CameraService


class FakeCapture:
    """Stands in for cv2.VideoCapture."""

    def __init__(self, opened=True, frame=None):
        self.opened = opened
        self.frame = frame if frame is not None else np.full((480, 640, 3), (10, 20, 30), dtype=np.uint8)
        self.released = False
        self.props = {}

    def isOpened(self):
        return self.opened and not self.released

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def read(self):
        if self.released:
            return False, None
        return True, self.frame.copy()

    def release(self):
        self.released = True


@pytest.fixture
def rgb_pixels():
    rng = np.random.default_rng(0)
    return rng.integers(0, 200, size=(400, 500, 3), dtype=np.uint8)


@pytest.fixture
def png_bytes(rgb_pixels):
    ok, buf = cv2.imencode(".png", np.ascontiguousarray(rgb_pixels[:, :, ::-1]))
    assert ok
    return buf.tobytes()


@pytest.fixture
def fake_capture():
    return FakeCapture()


@pytest.fixture
def camera_service(fake_capture):
    repo = CameraRepository(capture_factory=lambda index: fake_capture)
    return CameraService(camera_repository=repo)


@pytest.fixture
def denied_camera_service():
    denied = FakeCapture(opened=False)
    repo = CameraRepository(capture_factory=lambda index: denied)
    service = CameraService(camera_repository=repo)
    service.fake_capture = denied
    return service
