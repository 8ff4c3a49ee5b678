"""
Services Layer

Business logic services for baseball swing analysis.
These services orchestrate the domain models.
"""

from .angle_calculator import AngleCalculator
from .calibration import estimate_pixels_per_cm
from .metric_engine import MetricEngine
from .scoring import ScoringEngine, load_metric_specs
from .coaching import build_coaching_tips
from .similarity import PoseSimilarityEngine
from .bat_speed import BatSpeedEstimator
from .segmentation import (
    SwingSegmenter,
    FractionalSegmenter,
    KinematicSegmenter,
    get_segmenter,
)
from .swing_analyzer import SwingAnalyzer

__all__ = [
    "AngleCalculator",
    "estimate_pixels_per_cm",
    "MetricEngine",
    "ScoringEngine",
    "load_metric_specs",
    "build_coaching_tips",
    "PoseSimilarityEngine",
    "BatSpeedEstimator",
    "SwingSegmenter",
    "FractionalSegmenter",
    "KinematicSegmenter",
    "get_segmenter",
    "SwingAnalyzer",
]
