"""
Analysis Configuration

Calibration assumptions, confidence thresholds and conversion factors
shared by every analysis component. One instance is built at process
start and passed into each component; tests build their own with
``replace`` instead of patching module constants.
"""

from dataclasses import dataclass, replace as dataclass_replace


@dataclass(frozen=True)
class AnalysisConfig:
    """Injectable constants for the swing analysis pipeline."""

    # Confidence thresholds
    metric_min_confidence: float = 0.3          # Metric Engine landmark filter
    calibration_min_confidence: float = 0.4     # Scale calibration landmark filter
    similarity_min_confidence: float = 0.3      # Pose similarity landmark filter
    wrist_min_confidence: float = 0.3           # Bat speed wrist filter

    # Metric Engine
    assumed_hip_to_ankle_cm: float = 102.0      # ~60% of a 170cm adult
    ideal_contact_delay_ms: float = 100.0       # launch -> ideal contact
    trajectory_window_frames: int = 3
    attack_angle_offset_frames: int = 2         # measure before impact deceleration
    attack_angle_limit_deg: float = 45.0
    dual_wrist_confidence: float = 0.6          # both wrists above this are averaged
    low_confidence_null_fraction: float = 0.4
    stride_history_size: int = 3

    # Pose similarity
    similarity_max_distance: float = 0.3        # 30% of unit space = no match

    # Bat speed
    nose_to_ankle_height_ratio: float = 0.85
    average_body_height_ft: float = 5.5
    fps_to_mph: float = 0.681818                # feet/second -> miles/hour
    bat_tip_multiplier: float = 1.4
    acceleration_peak_fraction: float = 0.8

    def replace(self, **overrides) -> "AnalysisConfig":
        """Return a copy with some values substituted."""
        return dataclass_replace(self, **overrides)


DEFAULT_CONFIG = AnalysisConfig()
