"""
Swing Segmentation

Strategies that find swing event frames in a keypoint stream.

The Metric Engine only sees the resulting SwingEvents, so a strategy
can be swapped without touching metric code. Events a strategy cannot
find are left absent.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import numpy as np

from ..domain.analysis import SwingEvents
from ..domain.pose import Frame, Keypoint
from .angle_calculator import AngleCalculator

logger = logging.getLogger(__name__)


class SwingSegmenter(ABC):
    """Base class for swing segmentation strategies."""

    name: str = "base"

    @abstractmethod
    def segment(self, frames: Sequence[Frame]) -> SwingEvents:
        """Find event frame indices in a swing."""


class FractionalSegmenter(SwingSegmenter):
    """
    Places each event at a fixed fraction of the clip.

    A placeholder, not a kinematic detector: it assumes the clip is
    trimmed tightly around one swing.
    """

    name = "fractional"

    FRACTIONS = {
        "load_start": 0.1,
        "stride_plant": 0.3,
        "launch": 0.4,
        "contact": 0.5,
        "extension": 0.7,
        "finish": 0.9,
    }

    def segment(self, frames: Sequence[Frame]) -> SwingEvents:
        total = len(frames)
        if total == 0:
            return SwingEvents()
        return SwingEvents(**{
            event: int(math.floor(total * fraction))
            for event, fraction in self.FRACTIONS.items()
        })


class KinematicSegmenter(SwingSegmenter):
    """
    Finds events from body motion.

    Per frame pair it tracks pelvis angular speed (hip line), lead ankle
    vertical velocity, lead wrist speed and lead arm extension, smooths
    each series, then walks through the swing in order:

    1. Load start: pelvis rotation starts rising
    2. Stride plant: lead ankle stops moving down
    3. Launch: peak pelvis rotation speed
    4. Contact: hands start decelerating near their peak speed
    5. Extension: lead arm most extended
    6. Finish: body settles for several frames
    """

    name = "kinematic"

    MIN_FRAMES = 10
    SMOOTHING_WINDOW = 5
    LOAD_PELVIS_THRESHOLD = 0.1      # rad/s
    SETTLE_PELVIS_THRESHOLD = 0.05   # rad/s
    SETTLE_HAND_SPEED = 10.0         # coordinate units/s
    SETTLE_FRAMES = 8
    CONTACT_PEAK_FRACTION = 0.8

    def __init__(self, lead_side: str = "left"):
        self.lead_side = lead_side

    # -------------------------------------------------------------------------
    # Signals
    # -------------------------------------------------------------------------

    @staticmethod
    def smooth(series: Sequence[float], window: int = 5) -> np.ndarray:
        """Centered moving average, shrinking the window at the edges."""
        values = np.asarray(series, dtype=float)
        half = window // 2
        out = np.empty_like(values)
        for i in range(len(values)):
            start = max(0, i - half)
            end = min(len(values), i + half + 1)
            out[i] = values[start:end].mean()
        return out

    @staticmethod
    def _angular_speed(frame: Frame, prev: Frame, dt: float) -> float:
        lh, rh = frame.get_point(Keypoint.LEFT_HIP), frame.get_point(Keypoint.RIGHT_HIP)
        plh, prh = prev.get_point(Keypoint.LEFT_HIP), prev.get_point(Keypoint.RIGHT_HIP)
        if None in (lh, rh, plh, prh) or dt <= 0:
            return 0.0
        angle = math.atan2(rh[1] - lh[1], rh[0] - lh[0])
        prev_angle = math.atan2(prh[1] - plh[1], prh[0] - plh[0])
        diff = (angle - prev_angle + math.pi) % (2 * math.pi) - math.pi
        return abs(diff / dt)

    def _signals(self, frames: Sequence[Frame]) -> dict[str, np.ndarray]:
        lead = self.lead_side
        ankle = Keypoint(f"{lead}_ankle")
        wrist = Keypoint(f"{lead}_wrist")
        shoulder = Keypoint(f"{lead}_shoulder")
        elbow = Keypoint(f"{lead}_elbow")

        pelvis, ankle_vel, hand, extension = [], [], [], []
        for i in range(1, len(frames)):
            curr, prev = frames[i], frames[i - 1]
            dt = (curr.timestamp_ms - prev.timestamp_ms) / 1000

            pelvis.append(self._angular_speed(curr, prev, dt))

            a, pa = curr.get_point(ankle), prev.get_point(ankle)
            ankle_vel.append((a[1] - pa[1]) / dt if a and pa and dt > 0 else 0.0)

            w, pw = curr.get_point(wrist), prev.get_point(wrist)
            hand.append(AngleCalculator.distance(w, pw) / dt if w and pw and dt > 0 else 0.0)

            s, e = curr.get_point(shoulder), curr.get_point(elbow)
            if s and e and w:
                arm_length = AngleCalculator.distance(s, e) + AngleCalculator.distance(e, w)
                extension.append(AngleCalculator.distance(s, w) / arm_length if arm_length > 0 else 0.0)
            else:
                extension.append(0.0)

        window = self.SMOOTHING_WINDOW
        return {
            "pelvis": self.smooth(pelvis, window),
            "ankle": self.smooth(ankle_vel, window),
            "hand": self.smooth(hand, window),
            "extension": self.smooth(extension, window),
        }

    # -------------------------------------------------------------------------
    # Segmentation
    # -------------------------------------------------------------------------

    def segment(self, frames: Sequence[Frame]) -> SwingEvents:
        if len(frames) < self.MIN_FRAMES:
            logger.debug(f"Too few frames ({len(frames)}) for kinematic segmentation")
            return SwingEvents()

        s = self._signals(frames)
        pelvis, ankle, hand, extension = s["pelvis"], s["ankle"], s["hand"], s["extension"]
        n = len(pelvis)

        # Signal index i describes frames i -> i + 1, so events land on i + 1
        load = self._first(
            range(5, n - 5),
            lambda i: pelvis[i] > pelvis[i - 1] and pelvis[i] > self.LOAD_PELVIS_THRESHOLD,
        )

        stride = self._first(
            range((load or 0) + 3, n),
            lambda i: ankle[i - 1] > 0 and ankle[i] <= 0,
        )

        launch = self._argmax(pelvis, stride or 0)

        contact = None
        running_peak = 0.0
        for i in range(launch or 0, n - 3):
            running_peak = max(running_peak, hand[i])
            if (hand[i] > running_peak * self.CONTACT_PEAK_FRACTION
                    and hand[i] > hand[i + 1] > hand[i + 2]):
                contact = i if i > 0 else None
                break

        extension_idx = self._argmax(extension, contact or 0)

        finish = None
        settled = 0
        for i in range(extension_idx or 0, n):
            if pelvis[i] < self.SETTLE_PELVIS_THRESHOLD and hand[i] < self.SETTLE_HAND_SPEED:
                settled += 1
                if settled >= self.SETTLE_FRAMES:
                    finish = i - (self.SETTLE_FRAMES - 1)
                    break
            else:
                settled = 0

        def frame_of(i: Optional[int]) -> Optional[int]:
            return i + 1 if i is not None else None

        return SwingEvents(
            load_start=frame_of(load),
            stride_plant=frame_of(stride),
            launch=frame_of(launch),
            contact=frame_of(contact),
            extension=frame_of(extension_idx),
            finish=finish,
        )

    @staticmethod
    def _first(indices, predicate) -> Optional[int]:
        for i in indices:
            if predicate(i):
                return i
        return None

    @staticmethod
    def _argmax(series: np.ndarray, start: int) -> Optional[int]:
        """Index of the strictly positive maximum at or after start (None at index 0)."""
        if start >= len(series):
            return None
        tail = series[start:]
        if tail.max() <= 0:
            return None
        index = start + int(np.argmax(tail))
        return index if index > 0 else None


SEGMENTERS = {
    FractionalSegmenter.name: FractionalSegmenter,
    KinematicSegmenter.name: KinematicSegmenter,
}


def get_segmenter(name: str, lead_side: str = "left") -> SwingSegmenter:
    """Build a segmentation strategy by name."""
    if name == KinematicSegmenter.name:
        return KinematicSegmenter(lead_side=lead_side)
    if name == FractionalSegmenter.name:
        return FractionalSegmenter()
    raise ValueError(f"Unknown segmentation strategy {name!r}; choose from {sorted(SEGMENTERS)}")


def available_segmenters() -> List[str]:
    return sorted(SEGMENTERS)
