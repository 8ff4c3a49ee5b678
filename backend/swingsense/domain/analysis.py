"""
Swing Analysis Domain Models

Data structures for representing baseball swing analysis results,
including phase events, metrics, scores, and coaching feedback.

Every record is created fresh for one swing and never mutated.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional, Tuple

from .pose import BodyRegion


class SwingEvent(str, Enum):
    """
    Phase boundaries of a baseball swing.

    - LOAD_START: Weight shifts back, hands load
    - STRIDE_PLANT: Lead foot makes contact with the ground
    - LAUNCH: Peak hip rotation - explosive power transfer begins
    - CONTACT: Bat meets ball
    - EXTENSION: Arms extend through the contact zone
    - FINISH: Follow through with full rotation
    """
    LOAD_START = "load_start"
    STRIDE_PLANT = "stride_plant"
    LAUNCH = "launch"
    CONTACT = "contact"
    EXTENSION = "extension"
    FINISH = "finish"


REQUIRED_EVENTS = (SwingEvent.LAUNCH, SwingEvent.CONTACT, SwingEvent.FINISH)


@dataclass(frozen=True)
class SwingEvents:
    """
    Sparse mapping of swing events to frame indices.

    None means the segmenter did not find the event.
    """
    load_start: Optional[int] = None
    stride_plant: Optional[int] = None
    launch: Optional[int] = None
    contact: Optional[int] = None
    extension: Optional[int] = None
    finish: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Optional[int]]) -> "SwingEvents":
        """Build from a name -> index mapping, ignoring unknown names."""
        known = {event.value for event in SwingEvent}
        return cls(**{k: v for k, v in data.items() if k in known})

    def get(self, event: SwingEvent) -> Optional[int]:
        return getattr(self, event.value)

    def resolve(self, event: SwingEvent, frame_count: int) -> Optional[int]:
        """Get an event index, treating one outside [0, frame_count) as absent."""
        index = self.get(event)
        if index is None or not 0 <= index < frame_count:
            return None
        return index

    def as_dict(self) -> dict[str, int]:
        """Present events only, in swing order."""
        return {e.value: self.get(e) for e in SwingEvent if self.get(e) is not None}


# =============================================================================
# Metrics
# =============================================================================

class MetricStatus(str, Enum):
    """Why a metric has the value it has."""
    COMPUTED = "computed"              # Measured from landmarks
    UNAVAILABLE = "unavailable"        # Inputs missing - no value
    POLICY_DEFAULT = "policy_default"  # Not measured, value fixed by policy


@dataclass(frozen=True)
class MetricValue:
    """
    A metric outcome that keeps "not computed" distinct from "computed as zero".
    """
    value: Optional[float]
    status: MetricStatus
    reason: Optional[str] = None

    @classmethod
    def computed(cls, value: float) -> "MetricValue":
        return cls(value=float(value), status=MetricStatus.COMPUTED)

    @classmethod
    def unavailable(cls, reason: str) -> "MetricValue":
        return cls(value=None, status=MetricStatus.UNAVAILABLE, reason=reason)

    @classmethod
    def policy_default(cls, value: float, reason: str) -> "MetricValue":
        return cls(value=float(value), status=MetricStatus.POLICY_DEFAULT, reason=reason)

    @property
    def is_available(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class QualityFlags:
    """Signals that the measurement is shaky - soften the coaching, keep the score."""
    low_confidence: bool = False
    missing_events: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MetricsResult:
    """Output of the Metric Engine for one swing."""
    metrics: Mapping[str, MetricValue]
    pixels_per_cm: Optional[float]
    quality_flags: QualityFlags = field(default_factory=QualityFlags)

    @property
    def values(self) -> dict[str, Optional[float]]:
        """Plain name -> value mapping (None for unavailable metrics)."""
        return {name: mv.value for name, mv in self.metrics.items()}

    @property
    def null_count(self) -> int:
        return sum(1 for mv in self.metrics.values() if not mv.is_available)


# =============================================================================
# Scoring
# =============================================================================

@dataclass(frozen=True)
class MetricContribution:
    """One metric's share of the composite score."""
    metric: str
    sub_score: float
    weight: float


@dataclass(frozen=True)
class ScoreResult:
    """
    Composite score and coaching priority.

    Attributes:
        score: 0-100 weighted composite
        weakest_metrics: Metric names, weakest first
        contributions: Per-metric sub-scores in the same order
        low_confidence: Carried over from the metrics quality flags
    """
    score: int
    weakest_metrics: Tuple[str, ...] = ()
    contributions: Tuple[MetricContribution, ...] = ()
    low_confidence: bool = False

    @property
    def grade(self) -> str:
        """Convert score to letter grade."""
        if self.score >= 90:
            return "A"
        elif self.score >= 80:
            return "B"
        elif self.score >= 70:
            return "C"
        elif self.score >= 60:
            return "D"
        else:
            return "F"

    def sub_score(self, metric: str) -> Optional[float]:
        for c in self.contributions:
            if c.metric == metric:
                return c.sub_score
        return None


@dataclass(frozen=True)
class CoachingTip:
    """
    A specific piece of coaching advice for a weak metric.

    Attributes:
        metric: Metric this tip addresses
        priority: 1 (highest) upward, in weakest-first order
        cue: One-line, game-ready instruction
        why: Short reason a coach can read out loud
        drill: Name of the drill to practice
        alt_drills: Fallback drill names
        tentative: The measurement was low confidence - cue is softened
    """
    metric: str
    priority: int
    cue: str
    why: str
    drill: str
    alt_drills: Tuple[str, ...] = ()
    tentative: bool = False


# =============================================================================
# Pose similarity
# =============================================================================

@dataclass(frozen=True)
class SimilarityResult:
    """Closeness of a detected pose to a reference pose, as percentages."""
    overall: int
    regions: Mapping[BodyRegion, int] = field(default_factory=dict)
    landmarks_compared: int = 0


# =============================================================================
# Bat speed
# =============================================================================

class SkillLevel(str, Enum):
    """Bat speed categories, slowest first."""
    YOUTH = "Youth"
    DEVELOPING = "Developing"
    HIGH_SCHOOL = "High School"
    COLLEGE = "College"
    PROFESSIONAL = "Professional"

    @property
    def description(self) -> str:
        return SKILL_LEVEL_DESCRIPTIONS[self]


SKILL_LEVEL_DESCRIPTIONS = {
    SkillLevel.YOUTH: "Youth level (8-12 years)",
    SkillLevel.DEVELOPING: "Developing player (13-15 years)",
    SkillLevel.HIGH_SCHOOL: "High school varsity level",
    SkillLevel.COLLEGE: "College/elite amateur level",
    SkillLevel.PROFESSIONAL: "Professional/elite level",
}


@dataclass(frozen=True)
class WristVelocity:
    """Wrist speed between frame_index - 1 and frame_index."""
    frame_index: int
    mph: float
    timestamp_ms: float


@dataclass(frozen=True)
class BatSpeedResult:
    """Bat speed estimate for one swing."""
    peak_speed_mph: float
    avg_speed_mph: float
    peak_wrist_speed_mph: float
    avg_wrist_speed_mph: float
    swing_duration_ms: float
    acceleration_phase_ms: float
    level: SkillLevel
    pixels_per_foot: float
    wrist_velocities: Tuple[WristVelocity, ...] = ()

    @property
    def level_description(self) -> str:
        return self.level.description


# =============================================================================
# Complete analysis
# =============================================================================

@dataclass(frozen=True)
class SwingAnalysis:
    """
    Complete analysis of a baseball swing.

    This is the main result object returned after analyzing a keypoint stream.
    """
    # Identification
    id: str
    timestamp: datetime

    # Stream info
    total_frames: int
    fps: float

    events: SwingEvents
    metrics: MetricsResult
    score: ScoreResult
    tips: Tuple[CoachingTip, ...] = ()
    bat_speed: Optional[BatSpeedResult] = None
    summary: str = ""

    @property
    def low_confidence(self) -> bool:
        return self.metrics.quality_flags.low_confidence
