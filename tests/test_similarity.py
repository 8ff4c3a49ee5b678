import pytest

from swingsense.domain import (
    AnalysisConfig,
    BodyRegion,
    Frame,
    Keypoint,
    Landmark,
    ReferencePhase,
    get_reference_pose,
)
from swingsense.services import PoseSimilarityEngine

K = Keypoint


@pytest.fixture
def engine():
    return PoseSimilarityEngine()


@pytest.fixture
def contact_pose():
    return get_reference_pose(ReferencePhase.CONTACT)


def frame_from_points(points, confidence=0.9):
    return Frame.from_landmarks(0, [Landmark(kp, x, y, confidence) for kp, (x, y) in points.items()])


def test_pose_against_itself_is_100_everywhere(engine, contact_pose):
    result = engine.compare(frame_from_points(contact_pose.landmarks), contact_pose)
    assert result.overall == 100
    assert all(pct == 100 for pct in result.regions.values())
    assert set(result.regions) == set(BodyRegion)
    assert result.landmarks_compared == len(contact_pose.landmarks)


def test_landmark_similarity_falloff(engine):
    assert engine.landmark_similarity((0.5, 0.5), (0.5, 0.5)) == 1.0
    assert engine.landmark_similarity((0.5, 0.5), (0.65, 0.5)) == pytest.approx(0.5)
    assert engine.landmark_similarity((0.0, 0.0), (1.0, 1.0)) == 0.0


def test_uniform_offset_lowers_every_region(engine, contact_pose):
    shifted = {kp: (x + 0.15, y) for kp, (x, y) in contact_pose.landmarks.items()}
    result = engine.compare(frame_from_points(shifted), contact_pose)
    assert result.overall == 50
    assert all(pct == 50 for pct in result.regions.values())


def test_low_confidence_landmarks_are_ignored(engine, contact_pose):
    points = dict(contact_pose.landmarks)
    landmarks = [Landmark(kp, x, y, 0.9) for kp, (x, y) in points.items() if kp != K.NOSE]
    landmarks.append(Landmark(K.NOSE, 0.99, 0.99, 0.1))

    result = engine.compare(Frame.from_landmarks(0, landmarks), contact_pose)
    assert result.overall == 100
    assert result.regions[BodyRegion.HEAD] == 0
    assert result.landmarks_compared == len(points) - 1


def test_no_qualifying_landmarks_is_zero(engine, contact_pose):
    result = engine.compare(Frame(timestamp_ms=0), contact_pose)
    assert result.overall == 0
    assert all(pct == 0 for pct in result.regions.values())


def test_alignment_fits_scaled_pose(engine, contact_pose):
    # Same shape, stretched differently on each axis and moved
    stretched = {kp: (0.1 + x * 0.5, 0.05 + y * 1.1) for kp, (x, y) in contact_pose.landmarks.items()}
    frame = frame_from_points(stretched)

    assert engine.compare(frame, contact_pose).overall < 100
    assert engine.compare(frame, contact_pose, align=True).overall == 100


def test_align_reference_is_anisotropic():
    reference = {K.LEFT_HIP: (0.0, 0.0), K.RIGHT_HIP: (1.0, 1.0)}
    detected = {K.LEFT_HIP: (10.0, 20.0), K.RIGHT_HIP: (14.0, 30.0)}
    aligned = PoseSimilarityEngine.align_reference(reference, detected)
    assert aligned[K.LEFT_HIP] == pytest.approx((10.0, 20.0))
    assert aligned[K.RIGHT_HIP] == pytest.approx((14.0, 30.0))


def test_align_reference_flat_axis_only_recenters():
    reference = {K.LEFT_HIP: (0.0, 0.5), K.RIGHT_HIP: (1.0, 0.5)}
    detected = {K.LEFT_HIP: (0.0, 0.7), K.RIGHT_HIP: (2.0, 0.9)}
    aligned = PoseSimilarityEngine.align_reference(reference, detected)
    assert aligned[K.LEFT_HIP] == pytest.approx((0.0, 0.8))
    assert aligned[K.RIGHT_HIP] == pytest.approx((2.0, 0.8))


def test_pixel_landmarks_are_normalized_by_frame_size(engine, contact_pose):
    pixels = {kp: (x * 640, y * 480) for kp, (x, y) in contact_pose.landmarks.items()}
    result = engine.compare(frame_from_points(pixels), contact_pose, frame_size=(640, 480))
    assert result.overall == 100


def test_max_distance_is_configurable(contact_pose):
    shifted = {kp: (x + 0.15, y) for kp, (x, y) in contact_pose.landmarks.items()}
    engine = PoseSimilarityEngine(AnalysisConfig(similarity_max_distance=0.6))
    assert engine.compare(frame_from_points(shifted), contact_pose).overall == 75
