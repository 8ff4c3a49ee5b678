import pytest

from swingsense.domain import AnalysisConfig, Keypoint
from swingsense.services import estimate_pixels_per_cm


def test_pixels_per_cm_from_hip_to_ankle(make_frame):
    # Hip center (320, 260), ankle center (320, 400)
    assert estimate_pixels_per_cm(make_frame()) == pytest.approx(140 / 102)


def test_pixels_per_cm_uses_configured_leg_length(make_frame):
    config = AnalysisConfig(assumed_hip_to_ankle_cm=70.0)
    assert estimate_pixels_per_cm(make_frame(), config) == pytest.approx(2.0)


@pytest.mark.parametrize("missing", [
    Keypoint.LEFT_HIP, Keypoint.RIGHT_HIP, Keypoint.LEFT_ANKLE, Keypoint.RIGHT_ANKLE,
])
def test_missing_landmark_gives_none(make_frame, missing):
    assert estimate_pixels_per_cm(make_frame(drop=(missing,))) is None


def test_calibration_threshold_is_stricter_than_metrics(make_frame):
    # 0.35 passes the metric filter but not the calibration filter
    frame = make_frame(confidences={Keypoint.LEFT_ANKLE: 0.35})
    assert estimate_pixels_per_cm(frame) is None


def test_zero_length_gives_none(make_frame):
    frame = make_frame(overrides={
        Keypoint.LEFT_ANKLE: (300.0, 260.0),
        Keypoint.RIGHT_ANKLE: (340.0, 260.0),
    })
    assert estimate_pixels_per_cm(frame) is None
