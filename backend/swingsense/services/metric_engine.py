"""
Metric Engine

Computes the eight biomechanical swing metrics at the swing's event
frames.

Each metric degrades on its own: missing events or landmarks make that
one metric unavailable, never the whole computation.
"""

import logging
import math
from typing import Optional, Sequence

from ..domain.analysis import (
    REQUIRED_EVENTS,
    MetricsResult,
    MetricValue,
    QualityFlags,
    SwingEvent,
    SwingEvents,
)
from ..domain.config import AnalysisConfig, DEFAULT_CONFIG
from ..domain.pose import Frame, Keypoint, Point
from ..domain.reference import Handedness
from ..domain.specs import MetricName
from .angle_calculator import AngleCalculator
from .calibration import estimate_pixels_per_cm

logger = logging.getLogger(__name__)

HEAD_KEYPOINTS = (Keypoint.NOSE, Keypoint.LEFT_EYE, Keypoint.RIGHT_EYE)


class MetricEngine:
    """
    Measures a swing from its keypoint stream and event frames.

    Usage:
        engine = MetricEngine()
        result = engine.compute(frames, events, fps=30.0)
        print(result.values["hip_shoulder_sep_deg"])
    """

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG):
        self.config = config
        self.calc = AngleCalculator()

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------

    def compute(
        self,
        frames: Sequence[Frame],
        events: SwingEvents,
        fps: float,
        recent_stride_lengths: Sequence[float] = (),
        handedness: Handedness = Handedness.RIGHT,
    ) -> MetricsResult:
        """
        Compute all metrics for one swing.

        Args:
            frames: Keypoint stream for the swing
            events: Event frame indices (missing entries are allowed)
            fps: Frame rate of the stream
            recent_stride_lengths: Stride lengths of previous swings, oldest first,
                in the same pixel units as the frames
            handedness: Batter handedness - decides which side is the lead side

        Returns:
            MetricsResult with one entry per metric and quality flags
        """
        n = len(frames)
        launch = events.resolve(SwingEvent.LAUNCH, n)
        contact = events.resolve(SwingEvent.CONTACT, n)
        finish = events.resolve(SwingEvent.FINISH, n)
        stride_plant = events.resolve(SwingEvent.STRIDE_PLANT, n)

        launch_frame = frames[launch] if launch is not None else None
        lead = "left" if handedness == Handedness.RIGHT else "right"

        pixels_per_cm = (
            estimate_pixels_per_cm(launch_frame, self.config)
            if launch_frame is not None else None
        )

        metrics = {
            MetricName.HIP_SHOULDER_SEP: self.hip_shoulder_separation(launch_frame),
            MetricName.ATTACK_ANGLE: self.attack_angle(frames, contact),
            MetricName.HEAD_DRIFT: self.head_drift(
                launch_frame,
                frames[contact] if contact is not None else None,
                pixels_per_cm,
            ),
            MetricName.CONTACT_TIMING: self.contact_timing(launch, contact, fps),
            MetricName.BAT_LAG: self.bat_lag(launch_frame, lead),
            MetricName.TORSO_TILT: self.torso_tilt(launch_frame),
            MetricName.STRIDE_VAR: self.stride_variance(
                frames[stride_plant] if stride_plant is not None else None,
                launch_frame,
                recent_stride_lengths,
                lead,
            ),
            MetricName.FINISH_BALANCE: self.finish_balance(
                frames[finish] if finish is not None else None
            ),
        }

        missing_events = tuple(
            e.value for e in REQUIRED_EVENTS if events.resolve(e, n) is None
        )
        null_count = sum(1 for mv in metrics.values() if not mv.is_available)
        low_confidence = (
            null_count / len(metrics) > self.config.low_confidence_null_fraction
            or len(missing_events) > 1
        )

        for name, mv in metrics.items():
            if not mv.is_available:
                logger.debug(f"Metric {name} unavailable: {mv.reason}")
        if low_confidence:
            logger.info(
                f"Low confidence swing: {null_count}/{len(metrics)} metrics unavailable, "
                f"missing events: {list(missing_events)}"
            )

        return MetricsResult(
            metrics=metrics,
            pixels_per_cm=pixels_per_cm,
            quality_flags=QualityFlags(
                low_confidence=low_confidence,
                missing_events=missing_events,
            ),
        )

    # -------------------------------------------------------------------------
    # Landmark helpers
    # -------------------------------------------------------------------------

    def _point(self, frame: Optional[Frame], keypoint: Keypoint) -> Optional[Point]:
        if frame is None:
            return None
        return frame.get_point(keypoint, self.config.metric_min_confidence)

    def _pair(self, frame: Optional[Frame], part: str) -> tuple[Optional[Point], Optional[Point]]:
        """Left and right landmark of a bilateral body part (e.g. "hip")."""
        return (
            self._point(frame, Keypoint(f"left_{part}")),
            self._point(frame, Keypoint(f"right_{part}")),
        )

    def head_center(self, frame: Optional[Frame]) -> Optional[Point]:
        """Mean of the visible nose and eye landmarks."""
        points = [p for p in (self._point(frame, kp) for kp in HEAD_KEYPOINTS) if p]
        return self.calc.centroid(points)

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def hip_shoulder_separation(self, frame: Optional[Frame]) -> MetricValue:
        """Angle between the shoulder line and the hip line at launch."""
        if frame is None:
            return MetricValue.unavailable("launch event missing")
        left_shoulder, right_shoulder = self._pair(frame, "shoulder")
        left_hip, right_hip = self._pair(frame, "hip")
        if None in (left_shoulder, right_shoulder, left_hip, right_hip):
            return MetricValue.unavailable("shoulder/hip landmarks missing at launch")

        shoulder_line = self.calc.vector(left_shoulder, right_shoulder)
        hip_line = self.calc.vector(left_hip, right_hip)
        return MetricValue.computed(self.calc.angle_between_vectors(shoulder_line, hip_line))

    def attack_angle(self, frames: Sequence[Frame], contact: Optional[int]) -> MetricValue:
        """
        Upward path of the hands just before contact.

        Measured a few frames before contact to avoid the deceleration at
        impact. Both wrists are tracked: if both are confident the angles
        are averaged, otherwise the more confident one is used. A downward
        reading is a sign artifact, so the magnitude is reported.
        """
        cfg = self.config
        if contact is None:
            return MetricValue.unavailable("contact event missing")

        center = contact - cfg.attack_angle_offset_frames
        if center - cfg.trajectory_window_frames < 0:
            return MetricValue.unavailable("contact too early for trajectory window")

        readings = []
        for wrist in (Keypoint.LEFT_WRIST, Keypoint.RIGHT_WRIST):
            angle = self.calc.trajectory_angle(
                frames,
                center,
                cfg.trajectory_window_frames,
                wrist,
                min_confidence=cfg.metric_min_confidence,
                limit_deg=cfg.attack_angle_limit_deg,
            )
            if angle is not None:
                readings.append((self._trajectory_confidence(frames, center, wrist), angle))

        if not readings:
            return MetricValue.unavailable("wrist landmarks missing around contact")

        confident = [angle for conf, angle in readings if conf >= cfg.dual_wrist_confidence]
        if len(confident) == 2:
            angle = sum(confident) / 2
        else:
            angle = max(readings, key=lambda r: r[0])[1]
        return MetricValue.computed(abs(angle))

    def _trajectory_confidence(self, frames: Sequence[Frame], center: int, keypoint: Keypoint) -> float:
        """Mean confidence of a landmark at both ends of the trajectory window."""
        w = self.config.trajectory_window_frames
        ends = (max(0, center - w), min(len(frames) - 1, center + w))
        confidences = [
            lm.confidence for lm in (frames[i].get_landmark(keypoint) for i in ends) if lm
        ]
        return sum(confidences) / len(confidences) if confidences else 0.0

    def head_drift(
        self,
        launch_frame: Optional[Frame],
        contact_frame: Optional[Frame],
        pixels_per_cm: Optional[float],
    ) -> MetricValue:
        """Head-center travel from launch to contact, in centimeters."""
        if launch_frame is None or contact_frame is None:
            return MetricValue.unavailable("launch or contact event missing")
        if not pixels_per_cm:
            return MetricValue.unavailable("scale calibration failed at launch")

        launch_head = self.head_center(launch_frame)
        contact_head = self.head_center(contact_frame)
        if launch_head is None or contact_head is None:
            return MetricValue.unavailable("head landmarks missing")

        drift_pixels = self.calc.distance(launch_head, contact_head)
        return MetricValue.computed(drift_pixels / pixels_per_cm)

    def contact_timing(self, launch: Optional[int], contact: Optional[int], fps: float) -> MetricValue:
        """Frames between actual contact and ideal contact (launch + 100ms)."""
        if launch is None or contact is None:
            return MetricValue.unavailable("launch or contact event missing")
        if fps <= 0:
            return MetricValue.unavailable("frame rate unknown")

        ideal_frames = math.floor(self.config.ideal_contact_delay_ms / 1000 * fps + 0.5)
        return MetricValue.computed(contact - (launch + ideal_frames))

    def bat_lag(self, frame: Optional[Frame], lead: str) -> MetricValue:
        """
        Angle between the lead forearm and a barrel proxy at launch.

        The barrel proxy runs from the elbows' midpoint to the wrists' midpoint.
        """
        if frame is None:
            return MetricValue.unavailable("launch event missing")
        left_elbow, right_elbow = self._pair(frame, "elbow")
        left_wrist, right_wrist = self._pair(frame, "wrist")
        if None in (left_elbow, right_elbow, left_wrist, right_wrist):
            return MetricValue.unavailable("elbow/wrist landmarks missing at launch")

        if lead == "left":
            forearm = self.calc.vector(left_elbow, left_wrist)
        else:
            forearm = self.calc.vector(right_elbow, right_wrist)
        barrel = self.calc.vector(
            self.calc.midpoint(left_elbow, right_elbow),
            self.calc.midpoint(left_wrist, right_wrist),
        )
        return MetricValue.computed(self.calc.angle_between_vectors(forearm, barrel))

    def torso_tilt(self, frame: Optional[Frame]) -> MetricValue:
        """Lean of the hip-center -> shoulder-center line away from vertical at launch."""
        if frame is None:
            return MetricValue.unavailable("launch event missing")
        left_shoulder, right_shoulder = self._pair(frame, "shoulder")
        left_hip, right_hip = self._pair(frame, "hip")
        if None in (left_shoulder, right_shoulder, left_hip, right_hip):
            return MetricValue.unavailable("shoulder/hip landmarks missing at launch")

        tilt = self.calc.angle_from_vertical(
            self.calc.midpoint(left_hip, right_hip),
            self.calc.midpoint(left_shoulder, right_shoulder),
        )
        return MetricValue.computed(tilt)

    def stride_length(self, stride_frame: Optional[Frame], launch_frame: Optional[Frame], lead: str) -> Optional[float]:
        """Lead-ankle travel between stride plant and launch, in pixels."""
        ankle = Keypoint(f"{lead}_ankle")
        start = self._point(stride_frame, ankle)
        end = self._point(launch_frame, ankle)
        if start is None or end is None:
            return None
        return self.calc.distance(start, end)

    def stride_variance(
        self,
        stride_frame: Optional[Frame],
        launch_frame: Optional[Frame],
        recent_stride_lengths: Sequence[float],
        lead: str,
    ) -> MetricValue:
        """
        Percentage deviation of this stride from the mean of recent strides.

        Without enough history there is nothing to compare against, and the
        metric is 0 by policy rather than unavailable.
        """
        history_size = self.config.stride_history_size
        if len(recent_stride_lengths) < history_size:
            return MetricValue.policy_default(
                0.0, f"fewer than {history_size} previous strides"
            )
        if stride_frame is None or launch_frame is None:
            return MetricValue.unavailable("stride_plant or launch event missing")

        current = self.stride_length(stride_frame, launch_frame, lead)
        if current is None:
            return MetricValue.unavailable("lead ankle missing at stride plant or launch")

        recent = list(recent_stride_lengths)[-history_size:]
        recent_mean = sum(recent) / len(recent)
        if recent_mean <= 0:
            return MetricValue.unavailable("recent stride lengths are zero")

        return MetricValue.computed(abs(current - recent_mean) / recent_mean * 100)

    def finish_balance(self, frame: Optional[Frame]) -> MetricValue:
        """
        Horizontal offset of the hips from the middle of the feet at finish.

        Normalized by half the foot span and clamped to [0, 1];
        0 = perfectly balanced.
        """
        if frame is None:
            return MetricValue.unavailable("finish event missing")
        left_hip, right_hip = self._pair(frame, "hip")
        left_ankle, right_ankle = self._pair(frame, "ankle")
        if None in (left_hip, right_hip, left_ankle, right_ankle):
            return MetricValue.unavailable("hip/ankle landmarks missing at finish")

        foot_span = abs(right_ankle[0] - left_ankle[0])
        if foot_span == 0:
            return MetricValue.unavailable("feet are stacked - no foot span")

        center_of_mass = self.calc.midpoint(left_hip, right_hip)
        foot_center = (left_ankle[0] + right_ankle[0]) / 2
        offset = abs(center_of_mass[0] - foot_center)
        return MetricValue.computed(min(1.0, offset / (foot_span / 2)))
