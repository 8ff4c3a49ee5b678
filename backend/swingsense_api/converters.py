"""
Schema Converters

Translate between API schemas and domain models, shared by the REST
routes and the WebSocket handler.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from swingsense.domain import (
    BatSpeedResult,
    CameraView,
    CoachingTip,
    Frame,
    Handedness,
    Keypoint,
    Landmark,
    METRIC_DISPLAY_NAMES,
    METRIC_UNITS,
    MetricsResult,
    ReferencePose,
    ScoreResult,
    SimilarityResult,
    SwingAnalysis,
)
from swingsense.services import BatSpeedEstimator

from .schemas import (
    BatSpeedSchema,
    CoachingTipSchema,
    FrameSchema,
    LandmarkSchema,
    MetricContributionSchema,
    MetricsSchema,
    MetricValueSchema,
    ReferenceLandmarkSchema,
    ReferencePoseResponse,
    ScoreSchema,
    SimilarityResponse,
    SwingAnalysisResponse,
    WristVelocitySchema,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Requests -> domain
# =============================================================================

def to_frame(timestamp_ms: float, landmarks: Iterable[LandmarkSchema]) -> Frame:
    """Build a domain frame, dropping names outside the keypoint vocabulary."""
    parsed = []
    for lm in landmarks:
        keypoint = Keypoint.parse(lm.name)
        if keypoint is None:
            logger.debug(f"Ignoring unknown landmark {lm.name!r}")
            continue
        parsed.append(Landmark(name=keypoint, x=lm.x, y=lm.y, confidence=lm.confidence))
    return Frame.from_landmarks(timestamp_ms, parsed)


def to_frames(frames: Iterable[FrameSchema]) -> List[Frame]:
    return [to_frame(f.timestamp_ms, f.landmarks) for f in frames]


def to_camera_view(view: str) -> CameraView:
    try:
        return CameraView(view.lower())
    except ValueError:
        logger.debug(f"No reference drawn for view {view!r}, using side view")
        return CameraView.SIDE


def to_handedness(value: str) -> Handedness:
    return Handedness(value.lower())


def to_frame_size(width: Optional[float], height: Optional[float]) -> Optional[Tuple[float, float]]:
    if width and height:
        return (width, height)
    return None


# =============================================================================
# Domain -> responses
# =============================================================================

def metrics_to_schema(result: MetricsResult) -> MetricsSchema:
    return MetricsSchema(
        metrics={
            name: MetricValueSchema(
                value=mv.value,
                status=mv.status.value,
                reason=mv.reason,
                unit=METRIC_UNITS.get(name, ""),
                display_name=METRIC_DISPLAY_NAMES.get(name, name),
            )
            for name, mv in result.metrics.items()
        },
        pixels_per_cm=result.pixels_per_cm,
        low_confidence=result.quality_flags.low_confidence,
        missing_events=list(result.quality_flags.missing_events),
    )


def score_to_schema(score: ScoreResult) -> ScoreSchema:
    return ScoreSchema(
        score=score.score,
        grade=score.grade,
        weakest_metrics=list(score.weakest_metrics),
        contributions=[
            MetricContributionSchema(metric=c.metric, sub_score=c.sub_score, weight=c.weight)
            for c in score.contributions
        ],
        low_confidence=score.low_confidence,
    )


def tips_to_schema(tips: Iterable[CoachingTip]) -> List[CoachingTipSchema]:
    return [
        CoachingTipSchema(
            metric=tip.metric,
            priority=tip.priority,
            cue=tip.cue,
            why=tip.why,
            drill=tip.drill,
            alt_drills=list(tip.alt_drills),
            tentative=tip.tentative,
        )
        for tip in tips
    ]


def bat_speed_to_schema(result: Optional[BatSpeedResult]) -> Optional[BatSpeedSchema]:
    if result is None:
        return None
    return BatSpeedSchema(
        peak_speed_mph=result.peak_speed_mph,
        avg_speed_mph=result.avg_speed_mph,
        peak_wrist_speed_mph=result.peak_wrist_speed_mph,
        avg_wrist_speed_mph=result.avg_wrist_speed_mph,
        swing_duration_ms=result.swing_duration_ms,
        acceleration_phase_ms=result.acceleration_phase_ms,
        level=result.level.value,
        level_description=result.level_description,
        pixels_per_foot=result.pixels_per_foot,
        improvement_tips=BatSpeedEstimator.improvement_tips(result.level),
        wrist_velocities=[
            WristVelocitySchema(frame_index=v.frame_index, mph=v.mph, timestamp_ms=v.timestamp_ms)
            for v in result.wrist_velocities
        ],
    )


def analysis_to_response(result: SwingAnalysis) -> SwingAnalysisResponse:
    """Convert domain SwingAnalysis to API response schema."""
    return SwingAnalysisResponse(
        id=result.id,
        timestamp=result.timestamp,
        total_frames=result.total_frames,
        fps=result.fps,
        events=result.events.as_dict(),
        metrics=metrics_to_schema(result.metrics),
        score=score_to_schema(result.score),
        tips=tips_to_schema(result.tips),
        bat_speed=bat_speed_to_schema(result.bat_speed),
        summary=result.summary,
    )


def similarity_to_response(result: SimilarityResult, phase: str) -> SimilarityResponse:
    return SimilarityResponse(
        phase=phase,
        overall=result.overall,
        regions={region.value: pct for region, pct in result.regions.items()},
        landmarks_compared=result.landmarks_compared,
    )


def reference_to_response(pose: ReferencePose) -> ReferencePoseResponse:
    return ReferencePoseResponse(
        phase=pose.phase.value,
        description=pose.phase.description,
        handedness=pose.handedness.value,
        view=pose.view.value,
        landmarks=[
            ReferenceLandmarkSchema(name=kp.value, x=x, y=y)
            for kp, (x, y) in pose.landmarks.items()
        ],
    )
