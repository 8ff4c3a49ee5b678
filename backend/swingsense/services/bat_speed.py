"""
Bat Speed Estimator

Estimates bat speed from wrist travel between consecutive frames,
independent of swing events.

Scale comes from the batter's own height: nose-to-ankle pixels across
the swing, divided by the share of body height it covers and by an
assumed average body height in feet.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..domain.analysis import BatSpeedResult, SkillLevel, WristVelocity
from ..domain.config import AnalysisConfig, DEFAULT_CONFIG
from ..domain.pose import Frame, Keypoint, Landmark
from .angle_calculator import AngleCalculator

logger = logging.getLogger(__name__)


# Upper speed bound (mph, exclusive) for each level, slowest first
SKILL_LEVEL_THRESHOLDS = (
    (40.0, SkillLevel.YOUTH),
    (55.0, SkillLevel.DEVELOPING),
    (70.0, SkillLevel.HIGH_SCHOOL),
    (80.0, SkillLevel.COLLEGE),
    (float("inf"), SkillLevel.PROFESSIONAL),
)

IMPROVEMENT_TIPS = {
    SkillLevel.YOUTH: (
        "Focus on proper swing mechanics before worrying about speed",
        "Build core strength with age-appropriate exercises",
        "Practice dry swings with a lighter bat to develop muscle memory",
        "Work on hip rotation and weight transfer",
    ),
    SkillLevel.DEVELOPING: (
        "Incorporate resistance training with bands or weighted bats",
        "Focus on explosive hip rotation drills",
        "Practice bat speed drills 3-4 times per week",
        "Work on lower body strength and flexibility",
    ),
    SkillLevel.HIGH_SCHOOL: (
        "Add plyometric exercises to build explosive power",
        "Use overload/underload training (heavier and lighter bats)",
        "Focus on bat path efficiency and minimizing wasted movement",
        "Strengthen your core and rotational power",
    ),
    SkillLevel.COLLEGE: (
        "Fine-tune your swing path for maximum efficiency",
        "Incorporate advanced strength training with Olympic lifts",
        "Work on bat speed maintenance throughout the season",
        "Study video to eliminate any unnecessary movements",
    ),
    SkillLevel.PROFESSIONAL: (
        "Continue optimizing swing mechanics for consistency",
        "Maintain peak physical condition year-round",
        "Focus on bat-to-ball skills while preserving speed",
        "Use technology to track and maintain your metrics",
    ),
}


class BatSpeedEstimator:
    """
    Estimates peak and average bat-tip speed for one swing.

    Usage:
        estimator = BatSpeedEstimator()
        result = estimator.estimate(frames, fps=30.0)
        if result:
            print(f"{result.peak_speed_mph:.1f} mph ({result.level.value})")
    """

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG):
        self.config = config

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------

    def estimate(self, frames: Sequence[Frame], fps: float) -> Optional[BatSpeedResult]:
        """
        Calculate bat speed from a swing's frames.

        Returns:
            BatSpeedResult, or None if there are fewer than 2 frames, the
            frame rate is unknown, the scale cannot be calibrated, or no
            frame pair has a confident wrist
        """
        cfg = self.config
        if len(frames) < 2:
            logger.warning("Not enough frames to calculate bat speed")
            return None
        if fps <= 0:
            logger.warning(f"Cannot calculate bat speed at {fps} fps")
            return None

        pixels_per_foot = self.calibrate_scale(frames)
        if not pixels_per_foot:
            logger.warning("Could not calibrate scale from body height")
            return None

        velocities = self.wrist_velocities(frames, fps, pixels_per_foot)
        if not velocities:
            logger.warning("No valid wrist velocities calculated")
            return None

        speeds = np.array([v.mph for v in velocities])
        peak_wrist = float(speeds.max())
        avg_wrist = float(speeds.mean())
        peak_bat = peak_wrist * cfg.bat_tip_multiplier
        avg_bat = avg_wrist * cfg.bat_tip_multiplier

        # Time from the first measured sample to the first reaching 80% of peak
        threshold = peak_wrist * cfg.acceleration_peak_fraction
        first_fast = next(v for v in velocities if v.mph >= threshold)
        acceleration_ms = (first_fast.frame_index - velocities[0].frame_index) / fps * 1000

        level = self.categorize_level(peak_bat)
        logger.info(
            f"Bat speed: peak {peak_bat:.1f} mph, avg {avg_bat:.1f} mph ({level.value})"
        )

        return BatSpeedResult(
            peak_speed_mph=peak_bat,
            avg_speed_mph=avg_bat,
            peak_wrist_speed_mph=peak_wrist,
            avg_wrist_speed_mph=avg_wrist,
            swing_duration_ms=(len(frames) - 1) / fps * 1000,
            acceleration_phase_ms=acceleration_ms,
            level=level,
            pixels_per_foot=pixels_per_foot,
            wrist_velocities=tuple(velocities),
        )

    # -------------------------------------------------------------------------
    # Calibration
    # -------------------------------------------------------------------------

    def calibrate_scale(self, frames: Sequence[Frame]) -> Optional[float]:
        """
        Pixels per foot from the median body height across frames.

        Nose-to-ankle is about 85% of total body height; the body is
        assumed to be 5.5 feet tall. The more confident ankle is used.
        """
        cfg = self.config
        threshold = cfg.calibration_min_confidence
        heights = []

        for frame in frames:
            nose = frame.get_landmark(Keypoint.NOSE, threshold)
            if nose is None:
                continue
            ankle = self._more_confident(
                frame.get_landmark(Keypoint.LEFT_ANKLE, threshold),
                frame.get_landmark(Keypoint.RIGHT_ANKLE, threshold),
            )
            if ankle is None:
                continue

            pixel_height = AngleCalculator.distance(nose.point, ankle.point)
            if pixel_height > 0:
                heights.append(pixel_height / cfg.nose_to_ankle_height_ratio)

        if not heights:
            return None

        median_height = float(np.median(heights))
        pixels_per_foot = median_height / cfg.average_body_height_ft
        logger.debug(
            f"Calibrated: {pixels_per_foot:.2f} pixels per foot "
            f"({median_height:.0f}px body height, {len(heights)} frames)"
        )
        return pixels_per_foot

    @staticmethod
    def _more_confident(left: Optional[Landmark], right: Optional[Landmark]) -> Optional[Landmark]:
        if left is None or right is None:
            return left or right
        return left if left.confidence > right.confidence else right

    # -------------------------------------------------------------------------
    # Velocities
    # -------------------------------------------------------------------------

    def wrist_velocities(
        self,
        frames: Sequence[Frame],
        fps: float,
        pixels_per_foot: float,
    ) -> List[WristVelocity]:
        """
        Wrist speed (mph) for every consecutive frame pair with a confident wrist.

        The wrist confident in both frames with the higher confidence is
        tracked; on a tie the right wrist is used.
        """
        cfg = self.config
        time_per_frame = 1.0 / fps
        velocities = []

        for i in range(1, len(frames)):
            prev, curr = frames[i - 1], frames[i]
            pair = self._wrist_pair(prev, curr)
            if pair is None:
                continue

            pixel_distance = AngleCalculator.distance(pair[0].point, pair[1].point)
            feet_per_second = (pixel_distance / pixels_per_foot) / time_per_frame
            velocities.append(WristVelocity(
                frame_index=i,
                mph=feet_per_second * cfg.fps_to_mph,
                timestamp_ms=curr.timestamp_ms,
            ))

        return velocities

    def _wrist_pair(self, prev: Frame, curr: Frame) -> Optional[tuple[Landmark, Landmark]]:
        threshold = self.config.wrist_min_confidence
        best = None
        best_confidence = -1.0
        for wrist in (Keypoint.RIGHT_WRIST, Keypoint.LEFT_WRIST):
            a = prev.get_landmark(wrist, threshold)
            b = curr.get_landmark(wrist, threshold)
            if a is None or b is None:
                continue
            confidence = min(a.confidence, b.confidence)
            if confidence > best_confidence:
                best, best_confidence = (a, b), confidence
        return best

    # -------------------------------------------------------------------------
    # Levels
    # -------------------------------------------------------------------------

    @staticmethod
    def categorize_level(speed_mph: float) -> SkillLevel:
        """Skill level for a bat-tip speed."""
        for upper_bound, level in SKILL_LEVEL_THRESHOLDS:
            if speed_mph < upper_bound:
                return level
        return SkillLevel.PROFESSIONAL

    @staticmethod
    def improvement_tips(level: SkillLevel) -> List[str]:
        """Training suggestions for the next level up."""
        return list(IMPROVEMENT_TIPS[level])
