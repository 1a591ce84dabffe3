from __future__ import annotations

import random
import logging
from typing import List, Tuple

import cv2

from models.face_box import FaceBox
from models.image import Image
from services.image_service import ImageService

logger = logging.getLogger(__name__)

BOX_COLOR = (0, 255, 0)  # RGB green
BOX_THICKNESS = 3
LANDMARK_RADIUS = 3

# Box placement ranges (pixels)
MARGIN_X, MARGIN_Y = 200, 250
MIN_W, SPAN_W = 150, 100
MIN_H, SPAN_H = 180, 120


class OverlayService:
    """
    Renders the "enhanced" view: brightness gain plus decorative face boxes.
    Box positions are random and uncorrelated with image content.
    """

    def __init__(self, image_service: ImageService = None, rng: random.Random = None):
        self.image_service = image_service or ImageService()
        self.rng = rng or random.Random()

    def random_boxes(self, count: int, width: int, height: int) -> List[FaceBox]:
        boxes = []
        for _ in range(count):
            x = self.rng.random() * (width - MARGIN_X)
            y = self.rng.random() * (height - MARGIN_Y)
            w = MIN_W + self.rng.random() * SPAN_W
            h = MIN_H + self.rng.random() * SPAN_H
            boxes.append(FaceBox(x, y, w, h))
        return boxes

    @staticmethod
    def draw_boxes(img: Image, boxes: List[FaceBox]) -> None:
        """Draw outlines and landmark dots in place. OpenCV clips off-canvas shapes."""
        pixels = img.pixels
        for box in boxes:
            x1, y1, x2, y2 = box.corners()
            cv2.rectangle(pixels, (x1, y1), (x2, y2), BOX_COLOR, BOX_THICKNESS)
            for px, py in box.landmarks():
                cv2.circle(pixels, (round(px), round(py)), LANDMARK_RADIUS, BOX_COLOR, -1)

    def render(self, img: Image, face_count: int) -> Tuple[Image, List[FaceBox]]:
        enhanced = self.image_service.apply_brightness(img)
        boxes = self.random_boxes(face_count, enhanced.width, enhanced.height)
        self.draw_boxes(enhanced, boxes)
        logger.info(f"Rendered {len(boxes)} face boxes on {enhanced.width}x{enhanced.height} image")
        return enhanced, boxes
