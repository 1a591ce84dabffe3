from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

# Relative landmark layout: five points across the box at 30% of its height.
LANDMARK_COUNT = 5
LANDMARK_X_STEP = 0.2
LANDMARK_X_OFFSET = 0.2
LANDMARK_Y_OFFSET = 0.3


@dataclass
class FaceBox:
    """
    Decorative "detection" rectangle. Coordinates are floats and may be
    negative when the image is smaller than the box range.
    """
    x: float
    y: float
    width: float
    height: float

    def landmarks(self) -> List[Tuple[float, float]]:
        y = self.y + self.height * LANDMARK_Y_OFFSET
        return [
            (self.x + self.width * (j * LANDMARK_X_STEP + LANDMARK_X_OFFSET), y)
            for j in range(LANDMARK_COUNT)
        ]

    def corners(self) -> Tuple[int, int, int, int]:
        """(x1, y1, x2, y2) rounded to integer pixels."""
        return (
            round(self.x),
            round(self.y),
            round(self.x + self.width),
            round(self.y + self.height),
        )
