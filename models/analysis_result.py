from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class FaceData:
    """Demographic guess attached to a synthesized result."""
    age: Optional[int] = None
    gender: Optional[str] = None
    emotion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"age": self.age, "gender": self.gender, "emotion": self.emotion}


@dataclass
class AnalysisResult:
    """
    Data object holding the outcome of one reconstruction run.
    Produced in one piece and replaced wholesale by the next run.
    """
    detections: int                  # 1-3
    quality: str
    confidence: int                  # percent, 65-94
    enhancements: List[str] = field(default_factory=list)
    face_data: Optional[FaceData] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly shape used by the API and the CLI."""
        data = {
            "detections": self.detections,
            "quality": self.quality,
            "confidence": self.confidence,
            "enhancements": list(self.enhancements),
        }
        if self.face_data is not None:
            data["faceData"] = self.face_data.to_dict()
        return data
