"""
Stage sequencing for the reconstruction pipeline.
Each stage is a label plus a delay; nothing is computed between stages.
"""

import os
import time
import logging
from typing import Callable, List, Optional, Tuple
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

STAGES: List[Tuple[str, float]] = [
    ("Detecting faces...", 0.8),
    ("Analyzing quality...", 0.6),
    ("Applying deblurring...", 0.9),
    ("Enhancing features...", 0.7),
    ("Reconstructing details...", 0.8),
]


def stage_labels() -> List[str]:
    return [label for label, _ in STAGES]


def run_stages(
    on_stage: Optional[Callable[[str], None]] = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
    delay_scale: float | None = None,
) -> None:
    """
    Advance through STAGES in order, reporting each label before its delay.

    Args:
        on_stage: Called with the stage label when the stage begins
        sleep: Blocking wait, injectable for tests
        delay_scale: Multiplier for every delay (defaults to STAGE_DELAY_SCALE, 0 disables waiting)
    """
    if delay_scale is None:
        delay_scale = float(os.getenv("STAGE_DELAY_SCALE", "1.0"))

    for label, delay in STAGES:
        logger.info(label)
        if on_stage is not None:
            on_stage(label)
        if delay_scale > 0:
            sleep(delay * delay_scale)
