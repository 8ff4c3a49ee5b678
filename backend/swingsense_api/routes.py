"""
REST API Routes

FastAPI routes for baseball swing analysis.
Handles HTTP requests for analysis, scoring, bat speed and pose similarity.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from .schemas import (
    AnalyzeSwingRequest,
    BatSpeedRequest,
    BatSpeedSchema,
    HandednessEnum,
    HealthResponse,
    ReferencePhaseEnum,
    ReferencePoseResponse,
    ScoreRequest,
    ScoreResponse,
    SimilarityRequest,
    SimilarityResponse,
    SwingAnalysisResponse,
)
from .converters import (
    analysis_to_response,
    bat_speed_to_schema,
    reference_to_response,
    score_to_schema,
    similarity_to_response,
    tips_to_schema,
    to_camera_view,
    to_frame,
    to_frame_size,
    to_frames,
    to_handedness,
)
from .settings import Settings, get_analysis_config, get_metric_specs, get_settings
from swingsense.domain import (
    AnalysisConfig,
    MetricSpecs,
    ReferencePhase,
    SwingEvents,
    get_reference_pose,
)
from swingsense.services import (
    BatSpeedEstimator,
    PoseSimilarityEngine,
    ScoringEngine,
    SwingAnalyzer,
    build_coaching_tips,
    get_segmenter,
)
from swingsense.services.segmentation import available_segmenters

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

# =============================================================================
# Health Check
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check(
    settings: Settings = Depends(get_settings),
    specs: MetricSpecs = Depends(get_metric_specs),
) -> HealthResponse:
    """
    Check if the API is running and report what it can do.

    Returns:
        Health status, version and the active analysis options
    """
    return HealthResponse(
        status="healthy",
        version=settings.version,
        segmenters=available_segmenters(),
        metrics=sorted(specs),
    )


# =============================================================================
# Swing Analysis
# =============================================================================

@router.post(
    "/analysis/swing",
    response_model=SwingAnalysisResponse,
    tags=["Swing Analysis"],
    summary="Analyze a swing from pre-detected keypoints"
)
async def analyze_swing(
    request: AnalyzeSwingRequest,
    settings: Settings = Depends(get_settings),
    specs: MetricSpecs = Depends(get_metric_specs),
    config: AnalysisConfig = Depends(get_analysis_config),
) -> SwingAnalysisResponse:
    """
    Analyze a baseball swing from a keypoint stream.

    The stream will be:
    1. Segmented into events (unless events are given)
    2. Measured at the event frames
    3. Scored and given coaching tips
    4. Checked for bat speed

    Returns:
        Complete swing analysis with score and tips
    """
    try:
        handedness = to_handedness(request.handedness.value)
        lead_side = "left" if request.handedness == HandednessEnum.RIGHT else "right"
        analyzer = SwingAnalyzer(
            config=config,
            specs=specs,
            segmenter=get_segmenter(request.segmenter.value, lead_side=lead_side),
        )
        events = (
            SwingEvents(**request.events.model_dump())
            if request.events is not None else None
        )

        result = analyzer.analyze_frames(
            to_frames(request.frames),
            fps=request.fps if request.fps is not None else settings.default_fps,
            events=events,
            recent_stride_lengths=request.recent_stride_lengths,
            handedness=handedness,
            tip_limit=request.tip_limit,
        )

        # Convert domain model to API response
        return analysis_to_response(result)

    except ValueError as e:
        logger.warning(f"Swing analysis rejected: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Swing analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/analysis/score",
    response_model=ScoreResponse,
    tags=["Swing Analysis"],
    summary="Score raw metric values"
)
async def score_metrics(
    request: ScoreRequest,
    specs: MetricSpecs = Depends(get_metric_specs),
) -> ScoreResponse:
    """
    Score metric values measured elsewhere and pick coaching tips.
    """
    try:
        score = ScoringEngine(specs).score(request.metrics, low_confidence=request.low_confidence)
        tips = build_coaching_tips(score, limit=request.tip_limit)
        return ScoreResponse(score=score_to_schema(score), tips=tips_to_schema(tips))
    except Exception as e:
        logger.error(f"Scoring failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/analysis/bat-speed",
    response_model=Optional[BatSpeedSchema],
    tags=["Swing Analysis"],
    summary="Estimate bat speed"
)
async def estimate_bat_speed(
    request: BatSpeedRequest,
    settings: Settings = Depends(get_settings),
    config: AnalysisConfig = Depends(get_analysis_config),
) -> Optional[BatSpeedSchema]:
    """
    Estimate bat speed from wrist travel.

    Returns null when there are too few frames or the scale cannot be
    calibrated from the batter's body.
    """
    try:
        fps = request.fps if request.fps is not None else settings.default_fps
        result = BatSpeedEstimator(config).estimate(to_frames(request.frames), fps)
        return bat_speed_to_schema(result)
    except Exception as e:
        logger.error(f"Bat speed estimation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# Pose Similarity
# =============================================================================

@router.post(
    "/similarity",
    response_model=SimilarityResponse,
    tags=["Pose Similarity"],
    summary="Compare a detected pose with a reference phase"
)
async def compare_pose(
    request: SimilarityRequest,
    config: AnalysisConfig = Depends(get_analysis_config),
) -> SimilarityResponse:
    """
    Compare one detected pose with the ideal pose for a phase.

    For a live stream, use the WebSocket endpoint instead.
    """
    try:
        reference = get_reference_pose(
            ReferencePhase(request.phase.value),
            handedness=to_handedness(request.handedness.value),
            view=to_camera_view(request.view),
        )
        result = PoseSimilarityEngine(config).compare(
            to_frame(request.frame.timestamp_ms, request.frame.landmarks),
            reference,
            align=request.align,
            frame_size=to_frame_size(request.frame_width, request.frame_height),
        )
        return similarity_to_response(result, reference.phase.value)
    except Exception as e:
        logger.error(f"Pose comparison failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "/reference/{phase}",
    response_model=ReferencePoseResponse,
    tags=["Pose Similarity"],
    summary="Get the reference pose for a phase"
)
async def reference_pose(
    phase: ReferencePhaseEnum,
    handedness: HandednessEnum = Query(HandednessEnum.RIGHT, description="Batter handedness"),
    view: str = Query("side", description="Camera view"),
) -> ReferencePoseResponse:
    """
    Idealized skeleton for a phase, mirrored for left-handed batters.
    """
    pose = get_reference_pose(
        ReferencePhase(phase.value),
        handedness=to_handedness(handedness.value),
        view=to_camera_view(view),
    )
    return reference_to_response(pose)
