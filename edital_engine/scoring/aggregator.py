"""
Weighted aggregation of the six sub-scores into the final viability score.
"""
import logging
import math
from dataclasses import asdict, dataclass
from typing import Mapping, Optional

from edital_engine.config.settings import settings
from edital_engine.exceptions import WeightConfigurationError
from edital_engine.models.results import ScoreSet
from edital_engine.utils.terms import clamp, round_half_up

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class ScoreWeights:
    """Weight vector over the six sub-scores. Must sum to exactly 1.0."""
    financial: float = 0.25
    technical: float = 0.20
    documentary: float = 0.15
    timeline: float = 0.15
    risk: float = 0.15
    competition: float = 0.10

    def __post_init__(self):
        values = asdict(self)
        for name, weight in values.items():
            numeric = isinstance(weight, (int, float)) and not isinstance(weight, bool)
            if not numeric or not math.isfinite(weight) or weight < 0:
                raise WeightConfigurationError(f"Invalid weight for {name}: {weight!r}")
        total = sum(values.values())
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise WeightConfigurationError(f"Weights must sum to 1.0, got {total}")

    @classmethod
    def from_mapping(cls, weights: Mapping[str, float]) -> "ScoreWeights":
        """Build from a mapping; every sub-score must be present and no other key."""
        expected = set(ScoreSet.sub_score_names())
        provided = set(weights)
        if provided != expected:
            missing = sorted(expected - provided)
            unknown = sorted(provided - expected)
            raise WeightConfigurationError(
                f"Weight vector must name exactly {sorted(expected)} "
                f"(missing: {missing}, unknown: {unknown})"
            )
        return cls(**{name: weights[name] for name in expected})

    @classmethod
    def from_settings(cls) -> "ScoreWeights":
        return cls.from_mapping(settings.scoring.weights())

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


class ScoreAggregator:
    """Combines sub-scores with a validated weight vector."""

    def __init__(self, weights: Optional[ScoreWeights | Mapping[str, float]] = None):
        if weights is None:
            weights = ScoreWeights.from_settings()
        elif not isinstance(weights, ScoreWeights):
            weights = ScoreWeights.from_mapping(weights)
        self.weights = weights

    def aggregate(self, sub_scores: Mapping[str, int]) -> int:
        """final = round(sum(weight_i * score_i)), half rounded up."""
        total = sum(
            weight * sub_scores[name]
            for name, weight in self.weights.as_dict().items()
        )
        return clamp(round_half_up(total))

    def build(
        self,
        financial: int,
        technical: int,
        documentary: int,
        timeline: int,
        risk: int,
        competition: int,
    ) -> ScoreSet:
        sub_scores = {
            "financial": clamp(financial),
            "technical": clamp(technical),
            "documentary": clamp(documentary),
            "timeline": clamp(timeline),
            "risk": clamp(risk),
            "competition": clamp(competition),
        }
        final = self.aggregate(sub_scores)
        logger.debug(f"Aggregated scores {sub_scores} -> {final}")
        return ScoreSet(final=final, **sub_scores)
