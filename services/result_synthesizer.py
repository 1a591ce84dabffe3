import math
import random
from typing import Optional

from models.analysis_result import AnalysisResult, FaceData

ENHANCEMENTS = [
    "Gaussian deblurring applied",
    "Contrast enhancement: +25%",
    "Edge sharpening applied",
    "Noise reduction: 40%",
    "Deep learning reconstruction",
    "Feature point detection: 68 landmarks",
]
EMOTIONS = ["Neutral", "Happy", "Focused", "Serious"]

CONFIDENCE_MIN, CONFIDENCE_SPAN = 65, 30
AGE_MIN, AGE_SPAN = 25, 30


class ResultSynthesizer:
    """
    Fabricates the analysis shown next to the enhanced image.
    Only the face count is shared with the rendered overlay.
    """

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def _face_data(self) -> FaceData:
        return FaceData(
            age=math.floor(AGE_MIN + self.rng.random() * AGE_SPAN),
            gender="Male" if self.rng.random() > 0.5 else "Female",
            emotion=EMOTIONS[math.floor(self.rng.random() * len(EMOTIONS))],
        )

    def synthesize(self, face_count: int) -> AnalysisResult:
        face_data: Optional[FaceData] = self._face_data() if face_count > 0 else None
        return AnalysisResult(
            detections=face_count,
            quality="Medium-High" if face_count > 0 else "Low",
            confidence=math.floor(CONFIDENCE_MIN + self.rng.random() * CONFIDENCE_SPAN),
            enhancements=list(ENHANCEMENTS),
            face_data=face_data,
        )
