"""
Reference Poses

Idealized landmark positions for each phase of a baseball swing, used
as the target skeleton for pose similarity.

Coordinates are normalized (0-1) and describe a right-handed batter
filmed from the side. Left-handed references are produced by mirroring.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Sequence

from .pose import Frame, Keypoint, Point

K = Keypoint


class ReferencePhase(str, Enum):
    """Phases with a reference skeleton, in swing order."""
    SETUP = "setup"
    LOAD = "load"
    STRIDE = "stride"
    CONTACT = "contact"
    EXTENSION = "extension"
    FINISH = "finish"

    @property
    def description(self) -> str:
        return PHASE_DESCRIPTIONS[self]


class Handedness(str, Enum):
    RIGHT = "right"
    LEFT = "left"


class CameraView(str, Enum):
    SIDE = "side"


PHASE_DESCRIPTIONS = {
    ReferencePhase.SETUP: "Athletic stance with weight balanced",
    ReferencePhase.LOAD: "Weight shifts back, hands load",
    ReferencePhase.STRIDE: "Front foot strides forward",
    ReferencePhase.CONTACT: "Bat meets ball at contact point",
    ReferencePhase.EXTENSION: "Arms extend through contact zone",
    ReferencePhase.FINISH: "Follow through with full rotation",
}


@dataclass(frozen=True)
class ReferencePose:
    """
    An idealized skeleton for one phase.

    Attributes:
        phase: Swing phase this pose represents
        landmarks: Keypoint -> (x, y); reference points carry no confidence
        handedness: Batter handedness the pose is drawn for
        view: Camera view the pose is drawn for
    """
    phase: ReferencePhase
    landmarks: Mapping[Keypoint, Point] = field(default_factory=dict)
    handedness: Handedness = Handedness.RIGHT
    view: CameraView = CameraView.SIDE

    def mirrored(self) -> "ReferencePose":
        """Flip horizontally (x -> 1 - x) and swap left/right names."""
        other = Handedness.LEFT if self.handedness == Handedness.RIGHT else Handedness.RIGHT
        return ReferencePose(
            phase=self.phase,
            landmarks={kp.mirrored: (1.0 - x, y) for kp, (x, y) in self.landmarks.items()},
            handedness=other,
            view=self.view,
        )

    @classmethod
    def from_frame(
        cls,
        frame: Frame,
        phase: ReferencePhase,
        min_confidence: float = 0.0,
    ) -> "ReferencePose":
        """Snapshot a detected frame as a reference (e.g. a coach's own swing)."""
        return cls(
            phase=phase,
            landmarks={lm.name: lm.point for lm in frame.get_visible_landmarks(min_confidence)},
        )


IDEAL_SWING_KEYPOINTS = {
    ReferencePhase.SETUP: {
        K.NOSE: (0.50, 0.25),
        K.LEFT_SHOULDER: (0.48, 0.35), K.RIGHT_SHOULDER: (0.52, 0.35),
        K.LEFT_ELBOW: (0.42, 0.45), K.RIGHT_ELBOW: (0.58, 0.45),
        K.LEFT_WRIST: (0.40, 0.50), K.RIGHT_WRIST: (0.60, 0.50),
        K.LEFT_HIP: (0.48, 0.55), K.RIGHT_HIP: (0.52, 0.55),
        K.LEFT_KNEE: (0.46, 0.72), K.RIGHT_KNEE: (0.54, 0.72),
        K.LEFT_ANKLE: (0.45, 0.90), K.RIGHT_ANKLE: (0.55, 0.90),
    },
    ReferencePhase.LOAD: {
        K.NOSE: (0.52, 0.25),
        K.LEFT_SHOULDER: (0.50, 0.35), K.RIGHT_SHOULDER: (0.54, 0.36),
        K.LEFT_ELBOW: (0.44, 0.46), K.RIGHT_ELBOW: (0.62, 0.44),
        K.LEFT_WRIST: (0.42, 0.52), K.RIGHT_WRIST: (0.66, 0.48),
        K.LEFT_HIP: (0.50, 0.56), K.RIGHT_HIP: (0.54, 0.55),
        K.LEFT_KNEE: (0.48, 0.73), K.RIGHT_KNEE: (0.56, 0.72),
        K.LEFT_ANKLE: (0.47, 0.90), K.RIGHT_ANKLE: (0.57, 0.90),
    },
    ReferencePhase.STRIDE: {
        K.NOSE: (0.50, 0.24),
        K.LEFT_SHOULDER: (0.48, 0.34), K.RIGHT_SHOULDER: (0.52, 0.35),
        K.LEFT_ELBOW: (0.40, 0.44), K.RIGHT_ELBOW: (0.60, 0.42),
        K.LEFT_WRIST: (0.36, 0.50), K.RIGHT_WRIST: (0.64, 0.46),
        K.LEFT_HIP: (0.48, 0.54), K.RIGHT_HIP: (0.52, 0.54),
        K.LEFT_KNEE: (0.42, 0.72), K.RIGHT_KNEE: (0.54, 0.71),
        K.LEFT_ANKLE: (0.38, 0.90), K.RIGHT_ANKLE: (0.56, 0.90),
    },
    ReferencePhase.CONTACT: {
        K.NOSE: (0.48, 0.24),
        K.LEFT_SHOULDER: (0.45, 0.34), K.RIGHT_SHOULDER: (0.51, 0.35),
        K.LEFT_ELBOW: (0.36, 0.42), K.RIGHT_ELBOW: (0.58, 0.40),
        K.LEFT_WRIST: (0.30, 0.46), K.RIGHT_WRIST: (0.62, 0.44),
        K.LEFT_HIP: (0.46, 0.54), K.RIGHT_HIP: (0.50, 0.53),
        K.LEFT_KNEE: (0.40, 0.72), K.RIGHT_KNEE: (0.52, 0.70),
        K.LEFT_ANKLE: (0.38, 0.90), K.RIGHT_ANKLE: (0.54, 0.90),
    },
    ReferencePhase.EXTENSION: {
        K.NOSE: (0.46, 0.26),
        K.LEFT_SHOULDER: (0.42, 0.36), K.RIGHT_SHOULDER: (0.48, 0.36),
        K.LEFT_ELBOW: (0.32, 0.38), K.RIGHT_ELBOW: (0.54, 0.38),
        K.LEFT_WRIST: (0.26, 0.40), K.RIGHT_WRIST: (0.58, 0.40),
        K.LEFT_HIP: (0.44, 0.55), K.RIGHT_HIP: (0.48, 0.54),
        K.LEFT_KNEE: (0.38, 0.72), K.RIGHT_KNEE: (0.50, 0.70),
        K.LEFT_ANKLE: (0.36, 0.90), K.RIGHT_ANKLE: (0.52, 0.90),
    },
    ReferencePhase.FINISH: {
        K.NOSE: (0.42, 0.28),
        K.LEFT_SHOULDER: (0.38, 0.38), K.RIGHT_SHOULDER: (0.44, 0.38),
        K.LEFT_ELBOW: (0.28, 0.42), K.RIGHT_ELBOW: (0.48, 0.36),
        K.LEFT_WRIST: (0.24, 0.46), K.RIGHT_WRIST: (0.52, 0.32),
        K.LEFT_HIP: (0.40, 0.56), K.RIGHT_HIP: (0.44, 0.55),
        K.LEFT_KNEE: (0.36, 0.73), K.RIGHT_KNEE: (0.46, 0.71),
        K.LEFT_ANKLE: (0.34, 0.90), K.RIGHT_ANKLE: (0.48, 0.90),
    },
}


def get_reference_pose(
    phase: ReferencePhase,
    handedness: Handedness = Handedness.RIGHT,
    view: CameraView = CameraView.SIDE,
) -> ReferencePose:
    """
    Get the ideal pose for a phase.

    Only the side view is drawn; other views fall back to it.
    """
    pose = ReferencePose(
        phase=phase,
        landmarks=IDEAL_SWING_KEYPOINTS[phase],
        handedness=Handedness.RIGHT,
        view=CameraView.SIDE,
    )
    if handedness == Handedness.LEFT:
        return pose.mirrored()
    return pose


def phase_for_progress(progress: float) -> ReferencePhase:
    """Map playback progress (0-1) to a phase by dividing the swing into equal parts."""
    phases = list(ReferencePhase)
    progress = min(max(progress, 0.0), 1.0)
    index = min(int(progress * len(phases)), len(phases) - 1)
    return phases[index]


def closest_frame(frames: Sequence[Frame], time_ms: float) -> Optional[Frame]:
    """Frame whose timestamp is nearest to time_ms (first one wins ties)."""
    if not frames:
        return None
    return min(frames, key=lambda f: abs(f.timestamp_ms - time_ms))
