"""
Scoring Engine

Turns metric values into a 0-100 composite score and a weakest-first
ranking for coaching, using a static table of target ranges and weights.

Scoring is deterministic and side-effect free: the same values and the
same spec table always give the same score and ranking.
"""

import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

import yaml

from ..domain.analysis import MetricContribution, MetricsResult, ScoreResult
from ..domain.specs import DEFAULT_METRIC_SPECS, MetricSpec, MetricSpecError, MetricSpecs

logger = logging.getLogger(__name__)


def load_metric_specs(path: Union[str, Path]) -> MetricSpecs:
    """
    Load a metric spec table from a YAML file.

    Expected format:

        hip_shoulder_sep_deg:
          target: [40, 60]
          weight: 25
        head_drift_cm:
          target: [0, 5]
          weight: 15
          invert: true

    Raises:
        MetricSpecError: If the file does not hold a valid table
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MetricSpecError(f"Could not parse spec table {path}: {e}") from e

    if not isinstance(data, dict) or not data:
        raise MetricSpecError(f"Spec table {path} must be a non-empty mapping")

    specs = {}
    for name, entry in data.items():
        if not isinstance(entry, dict):
            raise MetricSpecError(f"Spec for {name!r} must be a mapping")
        specs[str(name)] = MetricSpec.from_dict(entry)

    logger.info(f"Loaded {len(specs)} metric specs from {path}")
    return MappingProxyType(specs)


class ScoringEngine:
    """
    Scores metric values against target ranges.

    Usage:
        engine = ScoringEngine()
        result = engine.score(metrics_result)
        print(result.score, result.weakest_metrics[:2])
    """

    def __init__(self, specs: MetricSpecs = DEFAULT_METRIC_SPECS):
        self.specs = specs

    # -------------------------------------------------------------------------
    # Sub-scores
    # -------------------------------------------------------------------------

    @staticmethod
    def sub_score(value: float, spec: MetricSpec) -> float:
        """
        Score one value against its target band.

        Inside the band scores 100. Outside, the score drops linearly and
        reaches 0 one band-width away from the nearest bound.

        - abs_window: |value| is compared with the largest |bound|
        - invert: lower is better, so falling below the band costs nothing
        """
        low, high = spec.target

        if spec.abs_window:
            bound = max(abs(low), abs(high))
            deviation = max(0.0, abs(value) - bound)
        elif value < low:
            deviation = 0.0 if spec.invert else low - value
        elif value > high:
            deviation = value - high
        else:
            deviation = 0.0

        return max(0.0, 100.0 * (1.0 - deviation / spec.width))

    # -------------------------------------------------------------------------
    # Composite score
    # -------------------------------------------------------------------------

    def score(
        self,
        values: Union[MetricsResult, Mapping[str, Optional[float]]],
        low_confidence: Optional[bool] = None,
    ) -> ScoreResult:
        """
        Compute the composite score and weakest-metric ranking.

        Metrics that are missing, None or NaN are left out of both the
        weighted sum and the total weight. Names with no spec are skipped.

        Args:
            values: A MetricsResult or a plain name -> value mapping
            low_confidence: Override for the low-confidence flag (taken
                from the MetricsResult when not given)

        Returns:
            ScoreResult with weakest metrics ordered worst first; ties go
            to the heavier metric
        """
        if isinstance(values, MetricsResult):
            if low_confidence is None:
                low_confidence = values.quality_flags.low_confidence
            values = values.values

        contributions = []
        for metric, raw in values.items():
            if raw is None or (isinstance(raw, float) and math.isnan(raw)):
                continue
            spec = self.specs.get(metric)
            if spec is None:
                logger.debug(f"No spec for metric {metric!r}, skipping")
                continue
            contributions.append(MetricContribution(
                metric=metric,
                sub_score=self.sub_score(float(raw), spec),
                weight=spec.weight,
            ))

        total_weight = sum(c.weight for c in contributions)
        if total_weight > 0:
            weighted = sum(c.sub_score * c.weight for c in contributions) / total_weight
            final_score = int(math.floor(weighted + 0.5))
        else:
            final_score = 0

        contributions.sort(key=lambda c: (c.sub_score, -c.weight, c.metric))

        return ScoreResult(
            score=final_score,
            weakest_metrics=tuple(c.metric for c in contributions),
            contributions=tuple(contributions),
            low_confidence=bool(low_confidence),
        )
