import pytest

from swingsense.domain import (
    MetricContribution,
    MetricName,
    ScoreResult,
    SwingEvents,
)
from swingsense.services import SwingAnalyzer, SwingSegmenter

EVENTS = SwingEvents(launch=36, contact=45, finish=81)


class FixedSegmenter(SwingSegmenter):
    name = "fixed"

    def __init__(self):
        self.calls = 0

    def segment(self, frames):
        self.calls += 1
        return EVENTS


@pytest.fixture
def analyzer():
    return SwingAnalyzer()


def test_empty_stream_is_rejected(analyzer):
    with pytest.raises(ValueError):
        analyzer.analyze_frames([])


def test_full_analysis_with_supplied_events(analyzer, swing_frames):
    result = analyzer.analyze_frames(swing_frames, fps=30.0, events=EVENTS)

    assert result.total_frames == 90
    assert result.fps == 30.0
    assert result.events is EVENTS
    assert 0 <= result.score.score <= 100
    assert result.score.weakest_metrics
    assert 1 <= len(result.tips) <= 2
    assert result.tips[0].metric == result.score.weakest_metrics[0]
    assert result.bat_speed is not None
    assert result.bat_speed.peak_speed_mph > 0
    assert result.summary.startswith(f"Your swing scored {result.score.score}/100")
    assert result.id


def test_default_segmentation_is_fractional(analyzer, swing_frames):
    result = analyzer.analyze_frames(swing_frames)
    assert (result.events.launch, result.events.contact, result.events.finish) == (36, 45, 81)


def test_custom_segmenter_is_used(swing_frames):
    segmenter = FixedSegmenter()
    result = SwingAnalyzer(segmenter=segmenter).analyze_frames(swing_frames)
    assert segmenter.calls == 1
    assert result.events == EVENTS


def test_supplied_events_skip_segmentation(swing_frames):
    segmenter = FixedSegmenter()
    SwingAnalyzer(segmenter=segmenter).analyze_frames(swing_frames, events=SwingEvents())
    assert segmenter.calls == 0


def test_tip_limit(analyzer, swing_frames):
    result = analyzer.analyze_frames(swing_frames, events=EVENTS, tip_limit=1)
    assert len(result.tips) == 1


def test_summary_without_measurements(analyzer):
    assert analyzer._generate_summary(ScoreResult(score=0)) == (
        "Not enough landmarks were visible to measure this swing."
    )


def test_summary_names_weak_metrics(analyzer):
    score = ScoreResult(
        score=62,
        weakest_metrics=(MetricName.HEAD_DRIFT, MetricName.BAT_LAG),
        contributions=(
            MetricContribution(MetricName.HEAD_DRIFT, 20.0, 10),
            MetricContribution(MetricName.BAT_LAG, 90.0, 10),
        ),
        low_confidence=True,
    )
    summary = analyzer._generate_summary(score)
    assert summary.startswith("Your swing scored 62/100 - developing. ")
    assert "Focus on improving: Head Drift." in summary
    assert summary.endswith("treat this as an early read.")


def test_summary_all_in_range(analyzer):
    score = ScoreResult(
        score=100,
        weakest_metrics=(MetricName.TORSO_TILT,),
        contributions=(MetricContribution(MetricName.TORSO_TILT, 100.0, 15),),
    )
    summary = analyzer._generate_summary(score)
    assert "Every measured part of your swing is in range." in summary
    assert summary.endswith("Keep practicing to build consistency!")
