from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class ImageAdjustments:
    """
    Value-object holding a multiplicative per-channel brightness gain
    (1.2 ~ +20 %).
    """
    gain: float = 1.2

    def apply(self, pixels: np.ndarray) -> np.ndarray:
        """
        Scale every colour channel by ``gain`` and return a new uint8 array.
        Values are rounded half-to-even and clamped to [0, 255].
        """
        scaled = np.rint(pixels.astype(np.float64) * self.gain)
        return np.clip(scaled, 0, 255).astype(np.uint8)
