#!/usr/bin/env python3
"""
Command-line front end: reconstruct one image from disk or from the camera.
"""

import os
import sys
import json
import logging
import random
import argparse
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from tqdm import tqdm

from models.errors import CameraAccessError
from models.analysis_result import AnalysisResult
from pipeline.reconstruct import analyze_and_reconstruct
from pipeline.stages import STAGES
from services.camera_service import CameraService
from services.image_service import ImageService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Simulated forensic face reconstruction")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("image", nargs="?", help="path of the image to reconstruct")
    src.add_argument("--camera", action="store_true", help="capture one frame from the camera")
    ap.add_argument("-o", "--output", help="where to write the enhanced JPEG")
    ap.add_argument("--json", action="store_true", help="print the analysis as JSON")
    ap.add_argument("--seed", type=int, default=None,
                    help="random seed (defaults to RANDOM_SEED)")
    return ap


def print_report(analysis: AnalysisResult, output: Path) -> None:
    print(f"{'='*60}")
    print(f"🎯 Faces Detected: {analysis.detections}")
    print(f"📊 Confidence:     {analysis.confidence}%")
    if analysis.face_data is not None:
        fd = analysis.face_data
        print(f"🔬 Age: {fd.age} | Gender: {fd.gender} | Emotion: {fd.emotion}")
    print("✨ Applied Enhancements:")
    for enhancement in analysis.enhancements:
        print(f"   ✓ {enhancement}")
    print(f"🖼  Image Quality:  {analysis.quality}")
    print(f"📁 Enhanced image: {output}")
    print(f"{'='*60}")


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    args = build_parser().parse_args(argv)

    seed = args.seed
    if seed is None and os.getenv("RANDOM_SEED"):
        seed = int(os.getenv("RANDOM_SEED"))
    rng = random.Random(seed)

    image_service = ImageService()

    if args.camera:
        camera = CameraService(image_service=image_service)
        try:
            camera.start()
            image = camera.capture_frame()
        except CameraAccessError as e:
            camera.stop()
            print(f"❌ {e}", file=sys.stderr)
            return 1
        default_output = Path("capture_enhanced.jpg")
    else:
        try:
            image = image_service.load(args.image)
        except FileNotFoundError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
        default_output = image.path.with_name(f"{image.path.stem}_enhanced.jpg")

    with tqdm(total=len(STAGES), ncols=70, leave=False) as bar:
        def on_stage(label: str):
            bar.set_description(label)
            bar.update(1)

        enhanced, analysis = analyze_and_reconstruct(image, on_stage, rng=rng,
                                                     image_service=image_service)

    output = Path(args.output) if args.output else default_output
    enhanced.path = output
    image_service.save_jpeg(enhanced)

    if args.json:
        print(json.dumps({"output": str(output), "analysis": analysis.to_dict()}, indent=2))
    else:
        print_report(analysis, output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
