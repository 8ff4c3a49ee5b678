import math

import pytest
from fastapi.testclient import TestClient

from swingsense.domain import Frame, Keypoint, Landmark

K = Keypoint

# Right-handed batter, side view, pixel coordinates.
# Hip line is horizontal; shoulder line is rotated 30 degrees from it and its
# center sits 50px ahead of the hip center (torso tilt ~24.4 degrees).
_SEP = math.radians(30)
_HALF_SHOULDER = 30.0

BASE_POSE = {
    K.NOSE: (370.0, 100.0),
    K.LEFT_EYE: (365.0, 95.0),
    K.RIGHT_EYE: (375.0, 95.0),
    K.LEFT_EAR: (360.0, 100.0),
    K.RIGHT_EAR: (380.0, 100.0),
    K.LEFT_SHOULDER: (370.0 - _HALF_SHOULDER * math.cos(_SEP), 150.0 - _HALF_SHOULDER * math.sin(_SEP)),
    K.RIGHT_SHOULDER: (370.0 + _HALF_SHOULDER * math.cos(_SEP), 150.0 + _HALF_SHOULDER * math.sin(_SEP)),
    K.LEFT_ELBOW: (330.0, 200.0),
    K.RIGHT_ELBOW: (400.0, 200.0),
    K.LEFT_WRIST: (350.0, 240.0),
    K.RIGHT_WRIST: (390.0, 240.0),
    K.LEFT_HIP: (300.0, 260.0),
    K.RIGHT_HIP: (340.0, 260.0),
    K.LEFT_KNEE: (295.0, 330.0),
    K.RIGHT_KNEE: (345.0, 330.0),
    K.LEFT_ANKLE: (290.0, 400.0),
    K.RIGHT_ANKLE: (350.0, 400.0),
}

FPS = 30.0


def build_frame(timestamp_ms=0.0, confidence=0.9, overrides=None, drop=(), confidences=None):
    points = dict(BASE_POSE)
    points.update(overrides or {})
    confidences = confidences or {}
    return Frame.from_landmarks(timestamp_ms, [
        Landmark(name=kp, x=x, y=y, confidence=confidences.get(kp, confidence))
        for kp, (x, y) in points.items()
        if kp not in drop
    ])


def build_swing(count=90, fps=FPS):
    """Wrists travel forward 4px and up 1px per frame; everything else holds still."""
    frames = []
    for i in range(count):
        frames.append(build_frame(
            timestamp_ms=i * 1000 / fps,
            overrides={
                K.LEFT_WRIST: (350.0 + 4 * i, 240.0 - i),
                K.RIGHT_WRIST: (390.0 + 4 * i, 240.0 - i),
            },
        ))
    return frames


@pytest.fixture
def make_frame():
    return build_frame


@pytest.fixture
def swing_frames():
    return build_swing()


@pytest.fixture
def frame_payload():
    """Convert a domain frame to the JSON body the API accepts."""
    def convert(frame):
        return {
            "timestamp_ms": frame.timestamp_ms,
            "landmarks": [
                {"name": lm.name.value, "x": lm.x, "y": lm.y, "confidence": lm.confidence}
                for lm in frame.landmarks.values()
            ],
        }
    return convert


@pytest.fixture(scope="function")
def client():
    from main import app
    with TestClient(app) as test_client:
        yield test_client
