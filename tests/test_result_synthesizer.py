import random

import pytest

from services.result_synthesizer import EMOTIONS, ENHANCEMENTS, ResultSynthesizer


@pytest.mark.parametrize("seed", range(50))
def test_synthesized_values_within_ranges(seed):
    result = ResultSynthesizer(rng=random.Random(seed)).synthesize(2)
    assert result.detections == 2
    assert result.quality == "Medium-High"
    assert isinstance(result.confidence, int)
    assert 65 <= result.confidence < 95
    assert 25 <= result.face_data.age < 55
    assert result.face_data.gender in ("Male", "Female")
    assert result.face_data.emotion in EMOTIONS


def test_enhancement_list_is_fixed_and_copied():
    synth = ResultSynthesizer(rng=random.Random(1))
    first = synth.synthesize(1)
    first.enhancements.append("tampered")
    assert synth.synthesize(1).enhancements == ENHANCEMENTS
    assert len(ENHANCEMENTS) == 6


def test_no_faces_means_low_quality_and_no_face_data():
    result = ResultSynthesizer(rng=random.Random(0)).synthesize(0)
    assert result.quality == "Low"
    assert result.face_data is None


def test_extreme_random_values():
    class Fixed(random.Random):
        def __init__(self, value):
            super().__init__()
            self.value = value

        def random(self):
            return self.value

    high = ResultSynthesizer(rng=Fixed(0.9999999)).synthesize(1)
    assert high.confidence == 94
    assert high.face_data.gender == "Male"
    assert high.face_data.emotion == "Serious"

    low = ResultSynthesizer(rng=Fixed(0.0)).synthesize(1)
    assert low.confidence == 65
    assert low.face_data.age == 25
    assert low.face_data.gender == "Female"
    assert low.face_data.emotion == "Neutral"
