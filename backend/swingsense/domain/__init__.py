"""
Domain Models

Pure data structures representing baseball swing analysis concepts.
No external dependencies - just Python dataclasses and enums.
"""

from .pose import Keypoint, Landmark, Frame, BodyRegion, Point
from .config import AnalysisConfig, DEFAULT_CONFIG
from .specs import (
    MetricName,
    MetricSpec,
    MetricSpecError,
    MetricSpecs,
    DEFAULT_METRIC_SPECS,
    METRIC_UNITS,
    METRIC_DISPLAY_NAMES,
)
from .analysis import (
    SwingEvent,
    SwingEvents,
    MetricStatus,
    MetricValue,
    QualityFlags,
    MetricsResult,
    MetricContribution,
    ScoreResult,
    CoachingTip,
    SimilarityResult,
    SkillLevel,
    WristVelocity,
    BatSpeedResult,
    SwingAnalysis,
)
from .reference import (
    ReferencePhase,
    ReferencePose,
    Handedness,
    CameraView,
    get_reference_pose,
    phase_for_progress,
    closest_frame,
)

__all__ = [
    "Keypoint",
    "Landmark",
    "Frame",
    "BodyRegion",
    "Point",
    "AnalysisConfig",
    "DEFAULT_CONFIG",
    "MetricName",
    "MetricSpec",
    "MetricSpecError",
    "MetricSpecs",
    "DEFAULT_METRIC_SPECS",
    "METRIC_UNITS",
    "METRIC_DISPLAY_NAMES",
    "SwingEvent",
    "SwingEvents",
    "MetricStatus",
    "MetricValue",
    "QualityFlags",
    "MetricsResult",
    "MetricContribution",
    "ScoreResult",
    "CoachingTip",
    "SimilarityResult",
    "SkillLevel",
    "WristVelocity",
    "BatSpeedResult",
    "SwingAnalysis",
    "ReferencePhase",
    "ReferencePose",
    "Handedness",
    "CameraView",
    "get_reference_pose",
    "phase_for_progress",
    "closest_frame",
]
