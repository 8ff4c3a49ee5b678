"""
Metric Specifications

Target ranges and weights for the eight swing metrics, based on MLB
biomechanics research (Driveline Baseball, Rockland Peak Performance,
professional swing analysis). The table is process-wide, read-only
configuration shared by every scoring call.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Tuple


class MetricName:
    """Names of the metrics produced by the Metric Engine."""
    HIP_SHOULDER_SEP = "hip_shoulder_sep_deg"
    ATTACK_ANGLE = "attack_angle_deg"
    HEAD_DRIFT = "head_drift_cm"
    CONTACT_TIMING = "contact_timing_frames"
    BAT_LAG = "bat_lag_deg"
    TORSO_TILT = "torso_tilt_deg"
    STRIDE_VAR = "stride_var_pct"
    FINISH_BALANCE = "finish_balance_idx"

    ALL = (
        HIP_SHOULDER_SEP,
        ATTACK_ANGLE,
        HEAD_DRIFT,
        CONTACT_TIMING,
        BAT_LAG,
        TORSO_TILT,
        STRIDE_VAR,
        FINISH_BALANCE,
    )


class MetricSpecError(ValueError):
    """Raised when a metric specification table is malformed."""


@dataclass(frozen=True)
class MetricSpec:
    """
    Scoring rule for one metric.

    Attributes:
        target: (min, max) band that earns a perfect sub-score
        weight: Relative importance in the composite score
        invert: Lower is better - values below min are never penalized
        abs_window: Band is symmetric around zero - |value| is compared to |bound|
    """
    target: Tuple[float, float]
    weight: float
    invert: bool = False
    abs_window: bool = False

    def __post_init__(self):
        low, high = self.target
        if high <= low:
            raise MetricSpecError(f"target max must exceed min, got {self.target}")
        if self.weight <= 0:
            raise MetricSpecError(f"weight must be positive, got {self.weight}")

    @property
    def width(self) -> float:
        return self.target[1] - self.target[0]

    @property
    def midpoint(self) -> float:
        return (self.target[0] + self.target[1]) / 2

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MetricSpec":
        """Build a spec from a plain mapping (e.g. one entry of a YAML table)."""
        try:
            low, high = data["target"]
            target = (float(low), float(high))
            weight = float(data["weight"])
        except (KeyError, TypeError, ValueError) as e:
            raise MetricSpecError(f"Invalid metric spec {data!r}: {e}") from e

        return cls(
            target=target,
            weight=weight,
            invert=bool(data.get("invert", False)),
            abs_window=bool(data.get("abs_window", False)),
        )


MetricSpecs = Mapping[str, MetricSpec]


DEFAULT_METRIC_SPECS: MetricSpecs = MappingProxyType({
    # Critical for power generation via kinematic sequence
    MetricName.HIP_SHOULDER_SEP: MetricSpec(target=(40, 60), weight=25),
    # Upward bat path through the contact zone
    MetricName.ATTACK_ANGLE: MetricSpec(target=(5, 20), weight=20),
    # Pros keep under 5cm from launch to contact
    MetricName.HEAD_DRIFT: MetricSpec(target=(0, 5), weight=15, invert=True),
    # Within +/-3 frames (~50ms) of the ideal 100ms delay
    MetricName.CONTACT_TIMING: MetricSpec(target=(-3, 3), weight=12, abs_window=True),
    # Forearm-to-bat angle at launch creates the whip
    MetricName.BAT_LAG: MetricSpec(target=(50, 70), weight=10),
    MetricName.TORSO_TILT: MetricSpec(target=(10, 25), weight=15),
    # Swing-to-swing consistency, less critical than rotation
    MetricName.STRIDE_VAR: MetricSpec(target=(0, 10), weight=3, invert=True),
    # 0.0-0.3 = weight transferred onto the front leg
    MetricName.FINISH_BALANCE: MetricSpec(target=(0.0, 0.3), weight=10, invert=True),
})


METRIC_UNITS = MappingProxyType({
    MetricName.HIP_SHOULDER_SEP: "deg",
    MetricName.ATTACK_ANGLE: "deg",
    MetricName.HEAD_DRIFT: "cm",
    MetricName.CONTACT_TIMING: "frames",
    MetricName.BAT_LAG: "deg",
    MetricName.TORSO_TILT: "deg",
    MetricName.STRIDE_VAR: "%",
    MetricName.FINISH_BALANCE: "index",
})


METRIC_DISPLAY_NAMES = MappingProxyType({
    MetricName.HIP_SHOULDER_SEP: "Hip-Shoulder Separation",
    MetricName.ATTACK_ANGLE: "Attack Angle",
    MetricName.HEAD_DRIFT: "Head Drift",
    MetricName.CONTACT_TIMING: "Contact Timing",
    MetricName.BAT_LAG: "Bat Lag",
    MetricName.TORSO_TILT: "Torso Tilt",
    MetricName.STRIDE_VAR: "Stride Variance",
    MetricName.FINISH_BALANCE: "Finish Balance",
})
