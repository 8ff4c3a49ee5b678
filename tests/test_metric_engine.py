import math

import pytest

from swingsense.domain import (
    DEFAULT_CONFIG,
    DEFAULT_METRIC_SPECS,
    Frame,
    Handedness,
    Keypoint,
    Landmark,
    MetricName,
    MetricSpec,
    MetricStatus,
    SwingEvents,
)
from swingsense.services import MetricEngine, ScoringEngine

from conftest import BASE_POSE, FPS, build_frame

K = Keypoint
EVENTS = SwingEvents(launch=36, contact=45, finish=81)


@pytest.fixture
def engine():
    return MetricEngine()


def test_end_to_end_known_angles(engine, swing_frames):
    result = engine.compute(swing_frames, EVENTS, FPS)
    values = result.values

    assert values[MetricName.HIP_SHOULDER_SEP] == pytest.approx(30.0, abs=0.5)
    assert values[MetricName.TORSO_TILT] == pytest.approx(math.degrees(math.atan2(50, 110)))
    assert values[MetricName.HEAD_DRIFT] == pytest.approx(0.0)
    assert values[MetricName.CONTACT_TIMING] == 6  # 45 - (36 + 3)
    assert values[MetricName.FINISH_BALANCE] == pytest.approx(0.0)
    assert result.pixels_per_cm == pytest.approx(140 / 102)
    assert not result.quality_flags.low_confidence
    assert result.quality_flags.missing_events == ()

    specs = dict(DEFAULT_METRIC_SPECS)
    specs[MetricName.TORSO_TILT] = MetricSpec(target=(20.0, 35.0), weight=15)
    score = ScoringEngine(specs).score(result)
    assert score.sub_score(MetricName.TORSO_TILT) == 100


def test_attack_angle_averages_confident_wrists(engine, swing_frames):
    # Wrists move 24px forward and 6px up across the window around contact - 2
    result = engine.compute(swing_frames, EVENTS, FPS)
    expected = math.degrees(math.atan2(6, 24))
    assert result.values[MetricName.ATTACK_ANGLE] == pytest.approx(expected)


def test_attack_angle_is_non_negative(engine):
    frames = [
        build_frame(i * 1000 / FPS, overrides={
            K.LEFT_WRIST: (350.0 + 4 * i, 240.0 + i),
            K.RIGHT_WRIST: (390.0 + 4 * i, 240.0 + i),
        })
        for i in range(20)
    ]
    value = engine.attack_angle(frames, 10).value
    assert value == pytest.approx(math.degrees(math.atan2(6, 24)))


def test_attack_angle_uses_more_confident_wrist(engine):
    frames = [
        build_frame(
            i * 1000 / FPS,
            overrides={
                K.LEFT_WRIST: (350.0 + 4 * i, 240.0 - i),      # ~14 degrees
                K.RIGHT_WRIST: (390.0 + 4 * i, 240.0 - 4 * i),  # 45 degrees
            },
            confidences={K.LEFT_WRIST: 0.5, K.RIGHT_WRIST: 0.9},
        )
        for i in range(20)
    ]
    assert engine.attack_angle(frames, 10).value == pytest.approx(45.0)


def test_attack_angle_needs_room_before_contact(engine, swing_frames):
    mv = engine.attack_angle(swing_frames, 4)
    assert mv.status == MetricStatus.UNAVAILABLE
    assert engine.attack_angle(swing_frames, 5).is_available


def test_all_landmarks_missing_at_launch(engine, swing_frames):
    frames = list(swing_frames)
    frames[36] = Frame(timestamp_ms=frames[36].timestamp_ms)

    result = engine.compute(frames, EVENTS, FPS)
    values = result.values

    for metric in (
        MetricName.HIP_SHOULDER_SEP,
        MetricName.HEAD_DRIFT,
        MetricName.BAT_LAG,
        MetricName.TORSO_TILT,
    ):
        assert values[metric] is None
    assert result.pixels_per_cm is None
    assert "launch" not in result.quality_flags.missing_events
    assert result.quality_flags.low_confidence


def test_short_stride_history_is_zero_by_policy(engine, swing_frames):
    events = SwingEvents(stride_plant=27, launch=36, contact=45, finish=81)
    frames = list(swing_frames)
    frames[27] = build_frame(frames[27].timestamp_ms, overrides={K.LEFT_ANKLE: (200.0, 400.0)})

    mv = engine.compute(frames, events, FPS, recent_stride_lengths=[40.0, 60.0]).metrics[MetricName.STRIDE_VAR]
    assert mv.value == 0
    assert mv.status == MetricStatus.POLICY_DEFAULT


def test_stride_variance_against_recent_mean(engine, swing_frames):
    events = SwingEvents(stride_plant=27, launch=36, contact=45, finish=81)
    frames = list(swing_frames)
    # Lead ankle travels 120px between stride plant and launch
    frames[27] = build_frame(frames[27].timestamp_ms, overrides={K.LEFT_ANKLE: (170.0, 400.0)})

    result = engine.compute(frames, events, FPS, recent_stride_lengths=[500.0, 90.0, 100.0, 110.0])
    # Last three strides average 100
    assert result.values[MetricName.STRIDE_VAR] == pytest.approx(20.0)


def test_stride_variance_uses_trailing_ankle_for_left_handed(engine, swing_frames):
    events = SwingEvents(stride_plant=27, launch=36, contact=45, finish=81)
    frames = list(swing_frames)
    frames[27] = build_frame(frames[27].timestamp_ms, overrides={K.RIGHT_ANKLE: (400.0, 400.0)})

    result = engine.compute(
        frames, events, FPS,
        recent_stride_lengths=[50.0, 50.0, 50.0],
        handedness=Handedness.LEFT,
    )
    assert result.values[MetricName.STRIDE_VAR] == pytest.approx(0.0)


def test_contact_timing_rounds_ideal_delay(engine):
    # 100ms at 25fps is 2.5 frames, rounded to 3
    assert engine.contact_timing(10, 13, 25.0).value == 0
    assert engine.contact_timing(10, 12, 60.0).value == -4


def test_contact_timing_unknown_frame_rate(engine):
    assert engine.contact_timing(10, 13, 0).status == MetricStatus.UNAVAILABLE


def test_bat_lag_angle(engine):
    frame = Frame.from_landmarks(0, [
        Landmark(K.LEFT_ELBOW, 0, 0, 0.9),
        Landmark(K.LEFT_WRIST, 10, 0, 0.9),
        Landmark(K.RIGHT_ELBOW, 0, 10, 0.9),
        Landmark(K.RIGHT_WRIST, 0, 20, 0.9),
    ])
    # Forearm (10, 0); barrel (0, 5) -> (5, 10) = (5, 5)
    assert engine.bat_lag(frame, "left").value == pytest.approx(45.0)


def test_finish_balance_offset(engine, make_frame):
    # Feet at 290 and 350; hips shifted 15px toward the front foot
    frame = make_frame(overrides={K.LEFT_HIP: (285.0, 260.0), K.RIGHT_HIP: (325.0, 260.0)})
    assert engine.finish_balance(frame).value == pytest.approx(0.5)


def test_finish_balance_is_clamped(engine, make_frame):
    frame = make_frame(overrides={K.LEFT_HIP: (500.0, 260.0), K.RIGHT_HIP: (540.0, 260.0)})
    assert engine.finish_balance(frame).value == 1.0


def test_finish_balance_stacked_feet(engine, make_frame):
    frame = make_frame(overrides={K.LEFT_ANKLE: (320.0, 400.0), K.RIGHT_ANKLE: (320.0, 400.0)})
    assert engine.finish_balance(frame).status == MetricStatus.UNAVAILABLE


def test_head_drift_in_centimeters(engine, swing_frames):
    frames = list(swing_frames)
    shifted = {
        kp: (BASE_POSE[kp][0] + 14.0, BASE_POSE[kp][1])
        for kp in (K.NOSE, K.LEFT_EYE, K.RIGHT_EYE)
    }
    frames[45] = build_frame(frames[45].timestamp_ms, overrides=shifted)

    result = engine.compute(frames, EVENTS, FPS)
    # 14px at 140/102 px per cm
    assert result.values[MetricName.HEAD_DRIFT] == pytest.approx(14 / (140 / 102))


def test_out_of_range_events_are_absent(engine, swing_frames):
    result = engine.compute(swing_frames, SwingEvents(launch=36, contact=400, finish=-1), FPS)
    assert set(result.quality_flags.missing_events) == {"contact", "finish"}
    assert result.values[MetricName.ATTACK_ANGLE] is None
    assert result.quality_flags.low_confidence


def test_event_at_index_zero_is_present(engine, swing_frames):
    result = engine.compute(swing_frames, SwingEvents(launch=0, contact=45, finish=81), FPS)
    assert result.values[MetricName.HIP_SHOULDER_SEP] == pytest.approx(30.0, abs=0.5)


def test_no_events_flags_low_confidence(engine, swing_frames):
    result = engine.compute(swing_frames, SwingEvents(), FPS)
    assert result.quality_flags.missing_events == ("launch", "contact", "finish")
    assert result.quality_flags.low_confidence
    assert result.metrics[MetricName.STRIDE_VAR].value == 0


def test_low_confidence_landmark_coordinates_do_not_matter(engine, swing_frames):
    def with_weak_wrist(x_shift):
        return [
            build_frame(
                f.timestamp_ms,
                overrides={
                    K.LEFT_WRIST: (f.landmarks[K.LEFT_WRIST].x + x_shift, f.landmarks[K.LEFT_WRIST].y * 0.5),
                    K.RIGHT_WRIST: f.landmarks[K.RIGHT_WRIST].point,
                },
                confidences={K.LEFT_WRIST: DEFAULT_CONFIG.metric_min_confidence - 0.01},
            )
            for f in swing_frames
        ]

    first = engine.compute(with_weak_wrist(0.0), EVENTS, FPS)
    second = engine.compute(with_weak_wrist(-250.0), EVENTS, FPS)
    assert first.values == second.values
