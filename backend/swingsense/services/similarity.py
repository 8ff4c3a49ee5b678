"""
Pose Similarity Engine

Compares a detected pose with a reference pose and reports how close
they are as a percentage, overall and per body region.

Cheap enough to run for every displayed frame.
"""

import logging
import math
from typing import Mapping, Optional, Tuple

import numpy as np

from ..domain.analysis import SimilarityResult
from ..domain.config import AnalysisConfig, DEFAULT_CONFIG
from ..domain.pose import BodyRegion, Frame, Keypoint, Point
from ..domain.reference import ReferencePose

logger = logging.getLogger(__name__)

BoundingBox = Tuple[float, float, float, float]  # min_x, min_y, max_x, max_y


def _percent(fraction: float) -> int:
    return int(math.floor(fraction * 100 + 0.5))


class PoseSimilarityEngine:
    """
    Inverse-distance similarity between a detected and a reference pose.

    Per landmark: max(0, 1 - distance / max_distance). Only landmarks
    present in both poses, and confident in the detected one, count.

    Usage:
        engine = PoseSimilarityEngine()
        reference = get_reference_pose(ReferencePhase.CONTACT)
        result = engine.compare(frame, reference, align=True)
        print(f"{result.overall}% match")
    """

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG):
        self.config = config

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------

    def compare(
        self,
        detected: Frame,
        reference: ReferencePose,
        align: bool = False,
        frame_size: Optional[Tuple[float, float]] = None,
    ) -> SimilarityResult:
        """
        Compare a detected pose with a reference pose.

        Args:
            detected: Detected landmarks for one frame
            reference: Target pose for the phase being shown
            align: Fit the reference's bounding box onto the detected pose's
                bounding box (each axis scaled on its own) before comparing
            frame_size: (width, height) of the video when the detected
                landmarks are in pixels - they are normalized to unit space first

        Returns:
            SimilarityResult with the overall and per-region percentages;
            0 wherever no landmark qualifies
        """
        points = self._detected_points(detected, frame_size)
        ref_points = dict(reference.landmarks)

        if align and points and ref_points:
            ref_points = self.align_reference(ref_points, points)

        overall = self._mean_similarity(points, ref_points, points.keys())
        regions = {
            region: _percent(self._mean_similarity(points, ref_points, region.keypoints) or 0.0)
            for region in BodyRegion
        }
        compared = sum(1 for kp in points if kp in ref_points)

        return SimilarityResult(
            overall=_percent(overall or 0.0),
            regions=regions,
            landmarks_compared=compared,
        )

    def landmark_similarity(self, p1: Point, p2: Point) -> float:
        """Similarity of two positions, 1 when identical, 0 beyond max_distance."""
        distance = math.hypot(p1[0] - p2[0], p1[1] - p2[1])
        return max(0.0, 1.0 - distance / self.config.similarity_max_distance)

    # -------------------------------------------------------------------------
    # Alignment
    # -------------------------------------------------------------------------

    @staticmethod
    def bounding_box(points: Mapping[Keypoint, Point]) -> BoundingBox:
        arr = np.asarray(list(points.values()), dtype=float)
        min_x, min_y = arr.min(axis=0)
        max_x, max_y = arr.max(axis=0)
        return float(min_x), float(min_y), float(max_x), float(max_y)

    @classmethod
    def align_reference(
        cls,
        reference: Mapping[Keypoint, Point],
        detected: Mapping[Keypoint, Point],
    ) -> dict[Keypoint, Point]:
        """
        Rescale and re-center the reference onto the detected pose.

        X and Y are scaled independently because camera perspective can
        change the aspect ratio of the body. An axis with no extent in the
        reference is only re-centered.
        """
        ref_box = cls.bounding_box(reference)
        det_box = cls.bounding_box(detected)

        aligned_axes = []
        for axis in (0, 1):
            ref_min, ref_max = ref_box[axis], ref_box[axis + 2]
            det_min, det_max = det_box[axis], det_box[axis + 2]
            ref_extent = ref_max - ref_min
            if ref_extent > 0:
                scale = (det_max - det_min) / ref_extent
            else:
                scale = 1.0
            ref_center = (ref_min + ref_max) / 2
            det_center = (det_min + det_max) / 2
            aligned_axes.append((ref_center, det_center, scale))

        (rcx, dcx, sx), (rcy, dcy, sy) = aligned_axes
        return {
            kp: ((x - rcx) * sx + dcx, (y - rcy) * sy + dcy)
            for kp, (x, y) in reference.items()
        }

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _detected_points(
        self,
        detected: Frame,
        frame_size: Optional[Tuple[float, float]],
    ) -> dict[Keypoint, Point]:
        width, height = frame_size if frame_size else (1.0, 1.0)
        if width <= 0 or height <= 0:
            logger.warning(f"Ignoring invalid frame size {frame_size}")
            width, height = 1.0, 1.0
        return {
            lm.name: (lm.x / width, lm.y / height)
            for lm in detected.get_visible_landmarks(self.config.similarity_min_confidence)
        }

    def _mean_similarity(
        self,
        points: Mapping[Keypoint, Point],
        reference: Mapping[Keypoint, Point],
        keypoints,
    ) -> Optional[float]:
        scores = [
            self.landmark_similarity(points[kp], reference[kp])
            for kp in keypoints
            if kp in points and kp in reference
        ]
        if not scores:
            return None
        return sum(scores) / len(scores)
