from swingsense.domain import MetricName, ScoreResult
from swingsense.services import build_coaching_tips
from swingsense.services.coaching import CUE_MAP


def scored(*metrics, low_confidence=False):
    return ScoreResult(score=50, weakest_metrics=tuple(metrics), low_confidence=low_confidence)


def test_tips_follow_weakest_order():
    tips = build_coaching_tips(scored(MetricName.HEAD_DRIFT, MetricName.BAT_LAG, MetricName.TORSO_TILT))

    assert [t.metric for t in tips] == [MetricName.HEAD_DRIFT, MetricName.BAT_LAG]
    assert [t.priority for t in tips] == [1, 2]
    assert tips[0].cue == "Quiet eyes; brace the front side."
    assert tips[0].drill == "Wall Head Check"
    assert not tips[0].tentative


def test_limit_is_respected():
    metrics = list(CUE_MAP)
    assert len(build_coaching_tips(scored(*metrics), limit=5)) == 5
    assert build_coaching_tips(scored(*metrics), limit=0) == []


def test_metrics_without_cue_are_skipped():
    tips = build_coaching_tips(scored("swing_vibes", MetricName.ATTACK_ANGLE))
    assert [t.metric for t in tips] == [MetricName.ATTACK_ANGLE]
    assert tips[0].priority == 1


def test_low_confidence_tips_are_tentative():
    tips = build_coaching_tips(scored(MetricName.HEAD_DRIFT, low_confidence=True))
    assert tips[0].tentative
    assert tips[0].cue == "Early read: quiet eyes; brace the front side."


def test_no_weak_metrics_no_tips():
    assert build_coaching_tips(scored()) == []


def test_every_metric_has_a_cue():
    assert set(CUE_MAP) == set(MetricName.ALL)
    assert all(len(cfg["alt_drills"]) == 2 for cfg in CUE_MAP.values())
