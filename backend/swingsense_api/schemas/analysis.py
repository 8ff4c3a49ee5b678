"""
Analysis API Schemas

Pydantic models for swing analysis, scoring, bat speed, similarity and
reference pose requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum
from datetime import datetime

from .pose import FrameSchema, SwingEventsSchema


class HandednessEnum(str, Enum):
    """Batter handedness for API."""
    RIGHT = "right"
    LEFT = "left"


class ReferencePhaseEnum(str, Enum):
    """Phases with a reference skeleton."""
    SETUP = "setup"
    LOAD = "load"
    STRIDE = "stride"
    CONTACT = "contact"
    EXTENSION = "extension"
    FINISH = "finish"


class SegmenterEnum(str, Enum):
    """Event segmentation strategies."""
    FRACTIONAL = "fractional"
    KINEMATIC = "kinematic"


# =============================================================================
# Metrics and scoring
# =============================================================================

class MetricValueSchema(BaseModel):
    """
    One metric outcome. value is null when it could not be computed.
    """
    value: Optional[float] = Field(None, description="Metric value in its unit")
    status: str = Field(..., description="computed, unavailable or policy_default")
    reason: Optional[str] = Field(None, description="Why the value is missing or defaulted")
    unit: str = Field("", description="Unit of the value")
    display_name: str = Field(..., description="Human readable name")

    class Config:
        json_schema_extra = {
            "example": {
                "value": 42.5,
                "status": "computed",
                "reason": None,
                "unit": "deg",
                "display_name": "Hip-Shoulder Separation"
            }
        }


class MetricsSchema(BaseModel):
    metrics: dict[str, MetricValueSchema] = Field(default_factory=dict)
    pixels_per_cm: Optional[float] = Field(None, description="Scale at launch")
    low_confidence: bool = Field(False, description="Measurement is shaky")
    missing_events: List[str] = Field(default_factory=list, description="Required events not found")


class MetricContributionSchema(BaseModel):
    metric: str
    sub_score: float = Field(..., ge=0, le=100)
    weight: float


class CoachingTipSchema(BaseModel):
    """
    Actionable coaching advice.
    """
    metric: str = Field(..., description="Metric the tip addresses")
    priority: int = Field(..., ge=1, description="Priority (1=highest)")
    cue: str = Field(..., description="One-line instruction")
    why: str = Field(..., description="Short explanation")
    drill: str = Field(..., description="Practice drill to fix the issue")
    alt_drills: List[str] = Field(default_factory=list, description="Fallback drills")
    tentative: bool = Field(False, description="Based on a low confidence measurement")

    class Config:
        json_schema_extra = {
            "example": {
                "metric": "head_drift_cm",
                "priority": 1,
                "cue": "Quiet eyes; brace the front side.",
                "why": "Too much head travel hurts tracking & barrel control.",
                "drill": "Wall Head Check",
                "alt_drills": ["Head Still Wall Drill"],
                "tentative": False
            }
        }


class ScoreSchema(BaseModel):
    """
    Composite score for one swing.
    """
    score: int = Field(..., ge=0, le=100, description="Score out of 100")
    grade: str = Field(..., description="Letter grade (A-F)")
    weakest_metrics: List[str] = Field(default_factory=list, description="Weakest first")
    contributions: List[MetricContributionSchema] = Field(default_factory=list)
    low_confidence: bool = Field(False)


class ScoreRequest(BaseModel):
    """
    Request to score raw metric values.

    Missing or null metrics are left out of the score.
    """
    metrics: dict[str, Optional[float]] = Field(..., description="Metric name -> value")
    low_confidence: bool = Field(False, description="Soften the coaching tips")
    tip_limit: int = Field(2, ge=0, le=8, description="Maximum number of tips")

    class Config:
        json_schema_extra = {
            "example": {
                "metrics": {
                    "hip_shoulder_sep_deg": 30.0,
                    "attack_angle_deg": 12.0,
                    "head_drift_cm": 8.0,
                },
                "low_confidence": False,
                "tip_limit": 2
            }
        }


class ScoreResponse(BaseModel):
    score: ScoreSchema
    tips: List[CoachingTipSchema] = Field(default_factory=list)


# =============================================================================
# Bat speed
# =============================================================================

class WristVelocitySchema(BaseModel):
    frame_index: int
    mph: float
    timestamp_ms: float


class BatSpeedSchema(BaseModel):
    """
    Bat speed estimate for one swing.
    """
    peak_speed_mph: float = Field(..., description="Peak bat-tip speed")
    avg_speed_mph: float = Field(..., description="Average bat-tip speed")
    peak_wrist_speed_mph: float
    avg_wrist_speed_mph: float
    swing_duration_ms: float
    acceleration_phase_ms: float = Field(..., description="Time to reach 80% of peak")
    level: str = Field(..., description="Skill level for the peak speed")
    level_description: str
    pixels_per_foot: float
    improvement_tips: List[str] = Field(default_factory=list)
    wrist_velocities: List[WristVelocitySchema] = Field(default_factory=list)


class BatSpeedRequest(BaseModel):
    frames: List[FrameSchema] = Field(..., description="Keypoint frames in time order")
    fps: Optional[float] = Field(None, description="Frame rate (service default when omitted)")


# =============================================================================
# Complete analysis
# =============================================================================

class AnalyzeSwingRequest(BaseModel):
    """
    Request to analyze a keypoint stream.

    Used when the frontend has already done pose detection.
    """
    frames: List[FrameSchema] = Field(..., min_length=1, description="Keypoint frames in time order")
    fps: Optional[float] = Field(None, description="Frame rate (service default when omitted)")
    events: Optional[SwingEventsSchema] = Field(None, description="Known event frames; segmented when omitted")
    segmenter: SegmenterEnum = Field(SegmenterEnum.FRACTIONAL, description="Strategy when events are omitted")
    recent_stride_lengths: List[float] = Field(default_factory=list, description="Previous strides, oldest first")
    handedness: HandednessEnum = Field(HandednessEnum.RIGHT, description="Batter handedness")
    tip_limit: int = Field(2, ge=0, le=8, description="Maximum number of tips")


class SwingAnalysisResponse(BaseModel):
    """
    Complete swing analysis result.

    This is the main response from the analyze endpoint.
    """
    # Identification
    id: str = Field(..., description="Unique analysis ID")
    timestamp: datetime = Field(..., description="When analysis was performed")

    # Stream info
    total_frames: int = Field(..., description="Total frames analyzed")
    fps: float = Field(..., description="Frame rate")

    events: dict[str, int] = Field(default_factory=dict, description="Event -> frame index")
    metrics: MetricsSchema
    score: ScoreSchema
    tips: List[CoachingTipSchema] = Field(default_factory=list, description="Improvement tips")
    bat_speed: Optional[BatSpeedSchema] = Field(None, description="Null when it could not be estimated")
    summary: str = Field(..., description="Text summary of analysis")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "timestamp": "2024-01-15T10:30:00Z",
                "total_frames": 90,
                "fps": 30.0,
                "events": {"launch": 36, "contact": 45, "finish": 81},
                "summary": "Your swing scored 78/100 - good."
            }
        }


# =============================================================================
# Pose similarity and reference poses
# =============================================================================

class SimilarityRequest(BaseModel):
    """
    Request to compare one detected pose with a reference phase.
    """
    frame: FrameSchema
    phase: ReferencePhaseEnum = Field(ReferencePhaseEnum.CONTACT)
    handedness: HandednessEnum = Field(HandednessEnum.RIGHT)
    view: str = Field("side", description="Camera view (only side is drawn)")
    align: bool = Field(False, description="Fit the reference onto the detected pose")
    frame_width: Optional[float] = Field(None, gt=0, description="Video width for pixel landmarks")
    frame_height: Optional[float] = Field(None, gt=0, description="Video height for pixel landmarks")


class SimilarityResponse(BaseModel):
    phase: str
    overall: int = Field(..., ge=0, le=100, description="Overall match percentage")
    regions: dict[str, int] = Field(default_factory=dict, description="Per-region match percentage")
    landmarks_compared: int = 0


class ReferenceLandmarkSchema(BaseModel):
    name: str
    x: float
    y: float


class ReferencePoseResponse(BaseModel):
    """
    Idealized skeleton for one phase.
    """
    phase: str
    description: str
    handedness: str
    view: str
    landmarks: List[ReferenceLandmarkSchema] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """
    Health check response.
    """
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    segmenters: List[str] = Field(default_factory=list, description="Available segmentation strategies")
    metrics: List[str] = Field(default_factory=list, description="Metrics in the active spec table")
