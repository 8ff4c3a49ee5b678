"""
Pose Domain Models

Data structures for representing the 2D body landmarks produced by the
upstream pose detector for each processed video frame.

The detector emits a fixed 17-point vocabulary (MoveNet / COCO order):
nose, eyes, ears, shoulders, elbows, wrists, hips, knees, ankles.
Landmarks are keyed by name, never by position, so a change in the
detector's emission order cannot silently misalign a calculation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional, Tuple


Point = Tuple[float, float]


class Keypoint(str, Enum):
    """The closed landmark vocabulary accepted from the pose detector."""
    # Face
    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"

    # Upper body
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"

    # Lower body
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"

    @classmethod
    def parse(cls, name: str) -> Optional["Keypoint"]:
        """Look up a keypoint by detector name, None if it is not in the vocabulary."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None

    @property
    def mirrored(self) -> "Keypoint":
        """The same landmark on the opposite side of the body (nose maps to itself)."""
        if self.value.startswith("left_"):
            return Keypoint("right_" + self.value[len("left_"):])
        if self.value.startswith("right_"):
            return Keypoint("left_" + self.value[len("right_"):])
        return self


class BodyRegion(str, Enum):
    """Body regions used for the per-region similarity breakdown."""
    HEAD = "head"
    TORSO = "torso"
    LEFT_ARM = "left_arm"
    RIGHT_ARM = "right_arm"
    LEFT_LEG = "left_leg"
    RIGHT_LEG = "right_leg"

    @property
    def keypoints(self) -> Tuple[Keypoint, ...]:
        return REGION_KEYPOINTS[self]


REGION_KEYPOINTS = {
    BodyRegion.HEAD: (
        Keypoint.NOSE, Keypoint.LEFT_EYE, Keypoint.RIGHT_EYE,
        Keypoint.LEFT_EAR, Keypoint.RIGHT_EAR,
    ),
    BodyRegion.TORSO: (
        Keypoint.LEFT_SHOULDER, Keypoint.RIGHT_SHOULDER,
        Keypoint.LEFT_HIP, Keypoint.RIGHT_HIP,
    ),
    BodyRegion.LEFT_ARM: (Keypoint.LEFT_SHOULDER, Keypoint.LEFT_ELBOW, Keypoint.LEFT_WRIST),
    BodyRegion.RIGHT_ARM: (Keypoint.RIGHT_SHOULDER, Keypoint.RIGHT_ELBOW, Keypoint.RIGHT_WRIST),
    BodyRegion.LEFT_LEG: (Keypoint.LEFT_HIP, Keypoint.LEFT_KNEE, Keypoint.LEFT_ANKLE),
    BodyRegion.RIGHT_LEG: (Keypoint.RIGHT_HIP, Keypoint.RIGHT_KNEE, Keypoint.RIGHT_ANKLE),
}


@dataclass(frozen=True)
class Landmark:
    """
    A single named body landmark.

    Attributes:
        name: Which keypoint this landmark represents
        x: Horizontal position (normalized 0-1 or pixels, depending on producer)
        y: Vertical position, increasing downward
        confidence: Detection confidence (0.0 to 1.0)
    """
    name: Keypoint
    x: float
    y: float
    confidence: float = 1.0

    def is_visible(self, threshold: float) -> bool:
        """Check if landmark is at or above the confidence threshold."""
        return self.confidence >= threshold

    @property
    def point(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class Frame:
    """
    Pose detection result for one processed video frame.

    Attributes:
        timestamp_ms: Video timestamp in milliseconds
        landmarks: Landmarks keyed by keypoint; absent keys were not detected
    """
    timestamp_ms: float
    landmarks: Mapping[Keypoint, Landmark] = field(default_factory=dict)

    @classmethod
    def from_landmarks(cls, timestamp_ms: float, landmarks: Iterable[Landmark]) -> "Frame":
        """Build a frame from a landmark list. A later duplicate replaces an earlier one."""
        return cls(timestamp_ms=timestamp_ms, landmarks={lm.name: lm for lm in landmarks})

    def get_landmark(
        self,
        keypoint: Keypoint,
        min_confidence: float = 0.0,
    ) -> Optional[Landmark]:
        """Get a landmark, treating one below min_confidence as missing."""
        landmark = self.landmarks.get(keypoint)
        if landmark is None or not landmark.is_visible(min_confidence):
            return None
        return landmark

    def get_point(self, keypoint: Keypoint, min_confidence: float = 0.0) -> Optional[Point]:
        landmark = self.get_landmark(keypoint, min_confidence)
        return landmark.point if landmark else None

    def get_visible_landmarks(self, threshold: float) -> list[Landmark]:
        """Get all landmarks at or above the confidence threshold."""
        return [lm for lm in self.landmarks.values() if lm.is_visible(threshold)]
