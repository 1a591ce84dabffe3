import cv2
import pytest

from models.errors import CameraAccessError


def test_start_requests_fixed_resolution(camera_service, fake_capture):
    camera_service.start()
    assert camera_service.live
    assert fake_capture.props[cv2.CAP_PROP_FRAME_WIDTH] == 640
    assert fake_capture.props[cv2.CAP_PROP_FRAME_HEIGHT] == 480


def test_denied_camera_raises_and_leaves_nothing_open(denied_camera_service):
    with pytest.raises(CameraAccessError, match="Camera access denied"):
        denied_camera_service.start()
    assert not denied_camera_service.live
    assert denied_camera_service.fake_capture.released


def test_read_frame_converts_to_rgb(camera_service):
    camera_service.start()
    frame = camera_service.read_frame()
    assert frame.pixels.shape == (480, 640, 3)
    assert frame.pixels[0, 0].tolist() == [30, 20, 10]
    assert camera_service.live


def test_capture_frame_releases_camera(camera_service, fake_capture):
    camera_service.start()
    image = camera_service.capture_frame()
    assert image.pixels.shape == (480, 640, 3)
    assert fake_capture.released
    assert not camera_service.live


def test_capture_failure_still_releases(camera_service, fake_capture):
    camera_service.start()
    fake_capture.read = lambda: (False, None)
    with pytest.raises(CameraAccessError):
        camera_service.capture_frame()
    assert fake_capture.released
    assert not camera_service.live


def test_stop_releases_and_is_idempotent(camera_service, fake_capture):
    camera_service.start()
    camera_service.stop()
    camera_service.stop()
    assert fake_capture.released
    assert not camera_service.live


def test_read_without_start_raises(camera_service):
    with pytest.raises(CameraAccessError):
        camera_service.read_frame()
