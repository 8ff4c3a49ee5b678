"""
Swing Analyzer Service

High-level service that chains segmentation, metrics, scoring, coaching
and bat speed to provide complete baseball swing analysis.

This is the main entry point for analyzing a keypoint stream.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..domain.analysis import SwingAnalysis, SwingEvents, ScoreResult
from ..domain.config import AnalysisConfig, DEFAULT_CONFIG
from ..domain.pose import Frame
from ..domain.reference import Handedness
from ..domain.specs import DEFAULT_METRIC_SPECS, METRIC_DISPLAY_NAMES, MetricSpecs
from .bat_speed import BatSpeedEstimator
from .coaching import build_coaching_tips
from .metric_engine import MetricEngine
from .scoring import ScoringEngine
from .segmentation import FractionalSegmenter, SwingSegmenter

logger = logging.getLogger(__name__)


class SwingAnalyzer:
    """
    Analyzes baseball swings from keypoint streams.

    This service:
    1. Finds swing events (or takes them from the caller)
    2. Computes the biomechanical metrics at those events
    3. Scores the swing against the metric spec table
    4. Generates coaching tips for the weakest metrics
    5. Estimates bat speed

    Usage:
        analyzer = SwingAnalyzer()
        result = analyzer.analyze_frames(frames, fps=30.0)
        print(f"Score: {result.score.score} ({result.score.grade})")

        # With events from an external segmenter
        result = analyzer.analyze_frames(frames, fps=60.0, events=events)
    """

    def __init__(
        self,
        config: AnalysisConfig = DEFAULT_CONFIG,
        specs: MetricSpecs = DEFAULT_METRIC_SPECS,
        segmenter: Optional[SwingSegmenter] = None,
    ):
        self.config = config
        self.segmenter = segmenter or FractionalSegmenter()
        self.metric_engine = MetricEngine(config)
        self.scoring_engine = ScoringEngine(specs)
        self.bat_speed_estimator = BatSpeedEstimator(config)

    # -------------------------------------------------------------------------
    # Main Analysis Methods
    # -------------------------------------------------------------------------

    def analyze_frames(
        self,
        frames: Sequence[Frame],
        fps: float = 30.0,
        events: Optional[SwingEvents] = None,
        recent_stride_lengths: Sequence[float] = (),
        handedness: Handedness = Handedness.RIGHT,
        tip_limit: int = 2,
    ) -> SwingAnalysis:
        """
        Analyze a swing from pre-detected keypoint frames.

        Args:
            frames: Keypoint frames in time order
            fps: Frame rate of the stream
            events: Event frame indices; found with the configured
                segmenter when not given
            recent_stride_lengths: Stride lengths of previous swings, oldest first
            handedness: Batter handedness
            tip_limit: Maximum number of coaching tips

        Returns:
            Complete SwingAnalysis

        Raises:
            ValueError: If there are no frames
        """
        if not frames:
            raise ValueError("No frames to analyze")

        if events is None:
            events = self.segmenter.segment(frames)
            logger.debug(f"Segmented with {self.segmenter.name}: {events.as_dict()}")

        metrics = self.metric_engine.compute(
            frames,
            events,
            fps,
            recent_stride_lengths=recent_stride_lengths,
            handedness=handedness,
        )
        score = self.scoring_engine.score(metrics)
        tips = build_coaching_tips(score, limit=tip_limit)
        bat_speed = self.bat_speed_estimator.estimate(frames, fps)

        logger.info(
            f"Analyzed {len(frames)} frames: score {score.score}, "
            f"{metrics.null_count} metrics unavailable"
        )

        return SwingAnalysis(
            id=str(uuid.uuid4()),
            timestamp=datetime.now(),
            total_frames=len(frames),
            fps=fps,
            events=events,
            metrics=metrics,
            score=score,
            tips=tuple(tips),
            bat_speed=bat_speed,
            summary=self._generate_summary(score),
        )

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def _generate_summary(self, score: ScoreResult) -> str:
        """Generate a text summary of the analysis."""
        if not score.contributions:
            return "Not enough landmarks were visible to measure this swing."

        if score.score >= 85:
            quality = "excellent"
        elif score.score >= 70:
            quality = "good"
        elif score.score >= 55:
            quality = "developing"
        else:
            quality = "needs work"

        summary = f"Your swing scored {score.score}/100 - {quality}. "

        weak = [c for c in score.contributions if c.sub_score < 70][:2]
        if weak:
            names = [METRIC_DISPLAY_NAMES.get(c.metric, c.metric) for c in weak]
            summary += f"Focus on improving: {', '.join(names)}. "
        else:
            summary += "Every measured part of your swing is in range. "

        if score.low_confidence:
            summary += "Some landmarks were hard to see, so treat this as an early read."
        else:
            summary += "Keep practicing to build consistency!"

        return summary
