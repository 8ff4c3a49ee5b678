import pytest

from swingsense.domain import (
    CameraView,
    Frame,
    Handedness,
    Keypoint,
    Landmark,
    ReferencePhase,
    ReferencePose,
    closest_frame,
    get_reference_pose,
    phase_for_progress,
)

K = Keypoint


def test_every_phase_has_a_full_skeleton():
    for phase in ReferencePhase:
        pose = get_reference_pose(phase)
        assert len(pose.landmarks) == 13
        assert pose.handedness == Handedness.RIGHT
        assert pose.view == CameraView.SIDE
        assert all(0 <= x <= 1 and 0 <= y <= 1 for x, y in pose.landmarks.values())


def test_left_handed_pose_is_mirrored():
    right = get_reference_pose(ReferencePhase.CONTACT)
    left = get_reference_pose(ReferencePhase.CONTACT, Handedness.LEFT)

    assert left.handedness == Handedness.LEFT
    rx, ry = right.landmarks[K.LEFT_WRIST]
    assert left.landmarks[K.RIGHT_WRIST] == pytest.approx((1 - rx, ry))
    nx, ny = right.landmarks[K.NOSE]
    assert left.landmarks[K.NOSE] == pytest.approx((1 - nx, ny))


def test_mirroring_twice_restores_pose():
    pose = get_reference_pose(ReferencePhase.LOAD)
    restored = pose.mirrored().mirrored()
    assert restored.handedness == Handedness.RIGHT
    for kp, point in pose.landmarks.items():
        assert restored.landmarks[kp] == pytest.approx(point)


def test_keypoint_mirrored_names():
    assert K.LEFT_KNEE.mirrored == K.RIGHT_KNEE
    assert K.RIGHT_EAR.mirrored == K.LEFT_EAR
    assert K.NOSE.mirrored == K.NOSE


@pytest.mark.parametrize("progress,phase", [
    (0.0, ReferencePhase.SETUP),
    (0.2, ReferencePhase.LOAD),
    (0.5, ReferencePhase.CONTACT),
    (0.99, ReferencePhase.FINISH),
    (1.0, ReferencePhase.FINISH),
    (-0.3, ReferencePhase.SETUP),
    (7.0, ReferencePhase.FINISH),
])
def test_phase_for_progress(progress, phase):
    assert phase_for_progress(progress) == phase


def test_phase_description():
    assert ReferencePhase.CONTACT.description == "Bat meets ball at contact point"


def test_closest_frame():
    frames = [Frame(timestamp_ms=t) for t in (0, 100, 200)]
    assert closest_frame(frames, 140).timestamp_ms == 100
    assert closest_frame(frames, 150).timestamp_ms == 100
    assert closest_frame(frames, 5000).timestamp_ms == 200
    assert closest_frame([], 10) is None


def test_reference_from_frame_keeps_visible_landmarks():
    frame = Frame.from_landmarks(0, [
        Landmark(K.NOSE, 0.5, 0.2, 0.9),
        Landmark(K.LEFT_HIP, 0.4, 0.5, 0.2),
    ])
    pose = ReferencePose.from_frame(frame, ReferencePhase.SETUP, min_confidence=0.5)
    assert pose.phase == ReferencePhase.SETUP
    assert pose.landmarks == {K.NOSE: (0.5, 0.2)}
