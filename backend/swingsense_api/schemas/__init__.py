"""
API Schemas

Pydantic models for request/response validation.
"""

from .pose import (
    LandmarkSchema,
    FrameSchema,
    SwingEventsSchema,
    WebSocketMessageType,
    WebSocketMessage,
    SessionConfigMessage,
    FrameMessage,
    SimilarityResultMessage,
)

from .analysis import (
    HandednessEnum,
    ReferencePhaseEnum,
    SegmenterEnum,
    MetricValueSchema,
    MetricsSchema,
    MetricContributionSchema,
    CoachingTipSchema,
    ScoreSchema,
    ScoreRequest,
    ScoreResponse,
    WristVelocitySchema,
    BatSpeedSchema,
    BatSpeedRequest,
    AnalyzeSwingRequest,
    SwingAnalysisResponse,
    SimilarityRequest,
    SimilarityResponse,
    ReferenceLandmarkSchema,
    ReferencePoseResponse,
    HealthResponse,
)

__all__ = [
    # Pose schemas
    "LandmarkSchema",
    "FrameSchema",
    "SwingEventsSchema",
    "WebSocketMessageType",
    "WebSocketMessage",
    "SessionConfigMessage",
    "FrameMessage",
    "SimilarityResultMessage",
    # Analysis schemas
    "HandednessEnum",
    "ReferencePhaseEnum",
    "SegmenterEnum",
    "MetricValueSchema",
    "MetricsSchema",
    "MetricContributionSchema",
    "CoachingTipSchema",
    "ScoreSchema",
    "ScoreRequest",
    "ScoreResponse",
    "WristVelocitySchema",
    "BatSpeedSchema",
    "BatSpeedRequest",
    "AnalyzeSwingRequest",
    "SwingAnalysisResponse",
    "SimilarityRequest",
    "SimilarityResponse",
    "ReferenceLandmarkSchema",
    "ReferencePoseResponse",
    "HealthResponse",
]
