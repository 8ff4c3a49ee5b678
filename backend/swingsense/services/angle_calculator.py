"""
Angle Calculator Service

Vector, angle and distance primitives used by every swing metric.
All angles are in degrees.

This is pure mathematics - no external dependencies except numpy.
Screen coordinates grow downward, so "up" is negative y throughout.
"""

import math
from typing import Optional, Sequence

import numpy as np

from ..domain.pose import Frame, Keypoint, Point


class AngleCalculator:
    """
    Geometry kernel for swing analysis.

    None inputs stand for missing landmarks: distances become 0, angles
    become None (or 0 where a defined value is required). Nothing here
    raises for degenerate geometry.

    All methods are static - no state needed.
    """

    # -------------------------------------------------------------------------
    # Points and vectors
    # -------------------------------------------------------------------------

    @staticmethod
    def distance(p1: Optional[Point], p2: Optional[Point]) -> float:
        """Euclidean distance between two points, 0 if either is absent."""
        if p1 is None or p2 is None:
            return 0.0
        return math.hypot(p2[0] - p1[0], p2[1] - p1[1])

    @staticmethod
    def midpoint(p1: Optional[Point], p2: Optional[Point]) -> Optional[Point]:
        """Midpoint between two points."""
        if p1 is None or p2 is None:
            return None
        return ((p1[0] + p2[0]) / 2, (p1[1] + p2[1]) / 2)

    @staticmethod
    def centroid(points: Sequence[Point]) -> Optional[Point]:
        """Mean position of a set of points."""
        if not points:
            return None
        arr = np.asarray(points, dtype=float)
        cx, cy = arr.mean(axis=0)
        return (float(cx), float(cy))

    @staticmethod
    def vector(start: Point, end: Point) -> Point:
        return (end[0] - start[0], end[1] - start[1])

    # -------------------------------------------------------------------------
    # Angles
    # -------------------------------------------------------------------------

    @staticmethod
    def angle_between_vectors(v1: Point, v2: Point) -> float:
        """
        Unsigned angle between two 2D vectors.

        Returns:
            Angle in degrees (0-180), 0 if either vector has zero length
        """
        a = np.asarray(v1, dtype=float)
        b = np.asarray(v2, dtype=float)
        norm_a = np.linalg.norm(a)
        norm_b = np.linalg.norm(b)
        if norm_a == 0 or norm_b == 0:
            return 0.0

        cos_angle = np.dot(a, b) / (norm_a * norm_b)

        # Clamp to valid range (handles floating point errors)
        cos_angle = np.clip(cos_angle, -1.0, 1.0)

        return float(np.degrees(np.arccos(cos_angle)))

    @staticmethod
    def angle_from_vertical(p1: Optional[Point], p2: Optional[Point]) -> Optional[float]:
        """
        Tilt of the segment p1 -> p2 away from straight up.

        Only the size of the tilt matters, so a segment leaning left and
        its mirror image leaning right give the same value, and a segment
        pointing down is reflected back into range.

        Returns:
            Angle in degrees (0 = vertical, 90 = horizontal)
        """
        if p1 is None or p2 is None:
            return None
        dx = p2[0] - p1[0]
        dy = p2[1] - p1[1]
        if dx == 0 and dy == 0:
            return 0.0

        angle = abs(math.degrees(math.atan2(dx, -dy)))
        if angle > 90:
            angle = 180 - angle
        return angle

    @staticmethod
    def trajectory_angle(
        frames: Sequence[Frame],
        center_index: int,
        window_size: int,
        keypoint: Keypoint,
        min_confidence: float = 0.0,
        limit_deg: Optional[float] = None,
    ) -> Optional[float]:
        """
        Direction of travel of one landmark around a frame.

        Measures the displacement of the landmark from window_size frames
        before center_index to window_size frames after it (clipped to the
        sequence).

        Args:
            frames: Frame sequence
            center_index: Frame at the middle of the window
            window_size: Frames on each side of the center
            keypoint: Landmark to track
            min_confidence: Landmarks below this are missing
            limit_deg: Clamp result to +/- this bound (rejects measurement spikes)

        Returns:
            Signed angle in degrees (positive = upward path), or None if
            the landmark is missing at either end of the window
        """
        if not frames or not 0 <= center_index < len(frames):
            return None

        start_idx = max(0, center_index - window_size)
        end_idx = min(len(frames) - 1, center_index + window_size)

        start = frames[start_idx].get_point(keypoint, min_confidence)
        end = frames[end_idx].get_point(keypoint, min_confidence)
        if start is None or end is None:
            return None

        dx = end[0] - start[0]
        dy = end[1] - start[1]
        angle = math.degrees(math.atan2(-dy, dx))

        if limit_deg is not None:
            angle = max(-limit_deg, min(limit_deg, angle))
        return angle
