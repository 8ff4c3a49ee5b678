"""
Scale Calibration Service

Converts pixel distances into centimeters for the Metric Engine using
the batter's own hip-to-ankle length as a ruler.

The Bat Speed Estimator has its own nose-to-ankle calibration in feet
(see bat_speed.py). The two use different anthropometric ratios and
units and are kept apart on purpose.
"""

import logging
from typing import Optional

from ..domain.config import AnalysisConfig, DEFAULT_CONFIG
from ..domain.pose import Frame, Keypoint
from .angle_calculator import AngleCalculator

logger = logging.getLogger(__name__)


def estimate_pixels_per_cm(
    frame: Frame,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> Optional[float]:
    """
    Estimate pixels per centimeter from one frame.

    Measures hip-center to ankle-center and divides by the assumed
    hip-to-ankle length (about 60% of a 170cm adult = 102cm).

    Returns:
        Scale factor, or None if any hip/ankle landmark is missing or
        the measured length is zero
    """
    threshold = config.calibration_min_confidence
    left_hip = frame.get_point(Keypoint.LEFT_HIP, threshold)
    right_hip = frame.get_point(Keypoint.RIGHT_HIP, threshold)
    left_ankle = frame.get_point(Keypoint.LEFT_ANKLE, threshold)
    right_ankle = frame.get_point(Keypoint.RIGHT_ANKLE, threshold)

    if None in (left_hip, right_hip, left_ankle, right_ankle):
        logger.debug("Scale calibration skipped: hip/ankle landmarks missing")
        return None

    hip_center = AngleCalculator.midpoint(left_hip, right_hip)
    ankle_center = AngleCalculator.midpoint(left_ankle, right_ankle)
    hip_to_ankle_pixels = AngleCalculator.distance(hip_center, ankle_center)

    if hip_to_ankle_pixels <= 0:
        return None
    return hip_to_ankle_pixels / config.assumed_hip_to_ankle_cm
