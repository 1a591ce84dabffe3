class ForensicError(Exception):
    """Base class for errors raised by the reconstruction services."""


class CameraAccessError(ForensicError):
    """The capture device could not be opened or stopped delivering frames."""

    def __init__(self, message: str = "Camera access denied"):
        super().__init__(message)


class InvalidImageError(ForensicError):
    """An uploaded buffer is not a decodable image."""
