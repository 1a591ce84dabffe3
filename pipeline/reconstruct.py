"""
Analyze & Reconstruct pipeline
Runs the stage sequence, renders the enhanced view and synthesizes the analysis.
"""

import random
import logging
from typing import Callable, Optional, Tuple

from models.analysis_result import AnalysisResult
from models.image import Image
from pipeline.stages import run_stages
from services.image_service import ImageService
from services.overlay_service import OverlayService
from services.result_synthesizer import ResultSynthesizer

logger = logging.getLogger(__name__)

MIN_FACES, MAX_FACES = 1, 3


def analyze_and_reconstruct(
    image: Image,
    on_stage: Optional[Callable[[str], None]] = None,
    *,
    rng: random.Random = None,
    image_service: ImageService = None,
    overlay_service: OverlayService = None,
    synthesizer: ResultSynthesizer = None,
    sleep: Callable[[float], None] = None,
    delay_scale: float | None = None,
) -> Tuple[Image, AnalysisResult]:
    """
    Run one full reconstruction pass over ``image``.

    The face count is drawn once and shared by the overlay and the result;
    every other value is independent.

    Returns:
        (enhanced image, analysis result)
    """
    rng = rng or random.Random()
    image_service = image_service or ImageService()
    overlay_service = overlay_service or OverlayService(image_service=image_service, rng=rng)
    synthesizer = synthesizer or ResultSynthesizer(rng=rng)

    stage_kwargs = {"delay_scale": delay_scale}
    if sleep is not None:
        stage_kwargs["sleep"] = sleep
    run_stages(on_stage, **stage_kwargs)

    image_service.preserve_original_state(image)
    face_count = rng.randint(MIN_FACES, MAX_FACES)

    enhanced, _ = overlay_service.render(image, face_count)
    analysis = synthesizer.synthesize(face_count)

    logger.info(f"Reconstruction complete: {analysis.detections} faces, {analysis.confidence}% confidence")
    return enhanced, analysis
