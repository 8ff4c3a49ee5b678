import math

import pytest

from swingsense.domain import (
    DEFAULT_METRIC_SPECS,
    MetricName,
    MetricSpec,
    MetricSpecError,
    MetricsResult,
    MetricValue,
    QualityFlags,
)
from swingsense.services import ScoringEngine, load_metric_specs


@pytest.fixture
def engine():
    return ScoringEngine()


def test_all_midpoints_score_100(engine):
    values = {name: spec.midpoint for name, spec in DEFAULT_METRIC_SPECS.items()}
    result = engine.score(values)
    assert result.score == 100
    assert result.grade == "A"


def test_sub_score_inside_band():
    spec = MetricSpec(target=(40.0, 60.0), weight=25)
    assert ScoringEngine.sub_score(40.0, spec) == 100
    assert ScoringEngine.sub_score(60.0, spec) == 100


def test_sub_score_linear_falloff():
    spec = MetricSpec(target=(40.0, 60.0), weight=25)
    assert ScoringEngine.sub_score(30.0, spec) == pytest.approx(50.0)
    assert ScoringEngine.sub_score(75.0, spec) == pytest.approx(25.0)
    assert ScoringEngine.sub_score(0.0, spec) == 0.0
    assert ScoringEngine.sub_score(200.0, spec) == 0.0


def test_sub_score_invert_rewards_low_values():
    spec = MetricSpec(target=(0.0, 5.0), weight=15, invert=True)
    assert ScoringEngine.sub_score(-3.0, spec) == 100
    assert ScoringEngine.sub_score(7.5, spec) == pytest.approx(50.0)


def test_sub_score_abs_window_is_symmetric():
    spec = MetricSpec(target=(-3.0, 3.0), weight=12, abs_window=True)
    assert ScoringEngine.sub_score(-3.0, spec) == 100
    assert ScoringEngine.sub_score(6.0, spec) == pytest.approx(50.0)
    assert ScoringEngine.sub_score(-6.0, spec) == pytest.approx(50.0)


def test_missing_metrics_are_renormalized(engine):
    # hip-shoulder separation 30 -> 50 (weight 25); attack angle 12 -> 100 (weight 20)
    result = engine.score({
        MetricName.HIP_SHOULDER_SEP: 30.0,
        MetricName.ATTACK_ANGLE: 12.0,
        MetricName.HEAD_DRIFT: None,
    })
    assert result.score == round((50 * 25 + 100 * 20) / 45)
    assert MetricName.HEAD_DRIFT not in result.weakest_metrics


def test_nan_is_treated_as_missing(engine):
    result = engine.score({MetricName.ATTACK_ANGLE: 12.0, MetricName.BAT_LAG: math.nan})
    assert result.score == 100
    assert result.weakest_metrics == (MetricName.ATTACK_ANGLE,)


def test_unknown_metric_is_skipped(engine):
    result = engine.score({"swing_vibes": 3.0, MetricName.ATTACK_ANGLE: 12.0})
    assert result.score == 100
    assert "swing_vibes" not in result.weakest_metrics


def test_no_metrics_scores_zero(engine):
    result = engine.score({})
    assert result.score == 0
    assert result.weakest_metrics == ()


def test_weakest_first_with_weight_tiebreak(engine):
    result = engine.score({
        MetricName.BAT_LAG: 0.0,            # 0, weight 10
        MetricName.HIP_SHOULDER_SEP: 0.0,   # 0, weight 25
        MetricName.TORSO_TILT: 30.0,        # 66.7, weight 15
        MetricName.ATTACK_ANGLE: 12.0,      # 100, weight 20
    })
    assert result.weakest_metrics == (
        MetricName.HIP_SHOULDER_SEP,
        MetricName.BAT_LAG,
        MetricName.TORSO_TILT,
        MetricName.ATTACK_ANGLE,
    )


def test_omitting_a_metric_keeps_remaining_order(engine):
    values = {
        MetricName.HIP_SHOULDER_SEP: 35.0,
        MetricName.ATTACK_ANGLE: 25.0,
        MetricName.HEAD_DRIFT: 9.0,
        MetricName.TORSO_TILT: 30.0,
        MetricName.BAT_LAG: 45.0,
    }
    full = engine.score(values).weakest_metrics
    del values[MetricName.HEAD_DRIFT]
    partial = engine.score(values).weakest_metrics
    assert partial == tuple(m for m in full if m != MetricName.HEAD_DRIFT)


def test_scoring_is_deterministic(engine):
    values = {MetricName.HIP_SHOULDER_SEP: 33.3, MetricName.CONTACT_TIMING: -5.0}
    assert engine.score(values) == engine.score(values)


def test_low_confidence_does_not_change_score(engine):
    metrics = {MetricName.ATTACK_ANGLE: MetricValue.computed(30.0)}
    shaky = engine.score(MetricsResult(metrics, None, QualityFlags(low_confidence=True)))
    solid = engine.score(MetricsResult(metrics, None, QualityFlags()))
    assert shaky.low_confidence and not solid.low_confidence
    assert shaky.score == solid.score


def test_load_metric_specs(tmp_path):
    path = tmp_path / "specs.yaml"
    path.write_text(
        "torso_tilt_deg:\n"
        "  target: [20, 35]\n"
        "  weight: 15\n"
        "head_drift_cm:\n"
        "  target: [0, 5]\n"
        "  weight: 10\n"
        "  invert: true\n"
    )
    specs = load_metric_specs(path)
    assert specs[MetricName.TORSO_TILT].target == (20.0, 35.0)
    assert specs[MetricName.HEAD_DRIFT].invert
    assert ScoringEngine(specs).score({MetricName.TORSO_TILT: 30.0}).score == 100


@pytest.mark.parametrize("content", [
    "",
    "- just\n- a list\n",
    "torso_tilt_deg:\n  target: [35, 20]\n  weight: 15\n",
    "torso_tilt_deg:\n  target: [20, 35]\n  weight: 0\n",
    "torso_tilt_deg:\n  weight: 15\n",
    "torso_tilt_deg: [20, 35]\n",
    "torso_tilt_deg: {target: [20, 35\n",
])
def test_invalid_spec_tables_are_rejected(tmp_path, content):
    path = tmp_path / "specs.yaml"
    path.write_text(content)
    with pytest.raises(MetricSpecError):
        load_metric_specs(path)
