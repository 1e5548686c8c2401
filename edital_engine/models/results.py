"""
Result records produced by one evaluation: scores, decision and strategic
recommendation. All of them are frozen dataclasses computed once per
evaluation; to_dict() gives the JSON-compatible form handed to persistence
and presentation collaborators.
"""
from dataclasses import asdict, dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any


class DecisionOutcome(str, Enum):
    PARTICIPATE = "participate"
    ANALYZE_FURTHER = "analyze_further"
    DECLINE = "decline"


class FactorPolarity(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class StrategyType(str, Enum):
    PRICE_COMPETITIVENESS = "price_competitiveness"
    TECHNICAL_DIFFERENTIATION = "technical_differentiation"
    EXEMPLARY_COMPLIANCE = "exemplary_compliance"
    DELIVERY_AGILITY = "delivery_agility"
    UNIQUE_POSITIONING = "unique_positioning"
    BALANCED = "balanced"


class PricingStrategyType(str, Enum):
    COMPETITIVE = "competitive"
    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class ScoreSet:
    """Six sub-scores and the weighted final score, all ints in [0, 100]."""
    financial: int
    technical: int
    documentary: int
    timeline: int
    risk: int
    competition: int
    final: int

    @staticmethod
    def sub_score_names() -> tuple[str, ...]:
        return tuple(f.name for f in fields(ScoreSet) if f.name != "final")

    def as_dict(self) -> dict[str, int]:
        """Sub-scores only, in field order."""
        return {name: getattr(self, name) for name in self.sub_score_names()}

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class DecisiveFactor:
    name: str
    polarity: FactorPolarity
    score: int
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class Decision:
    outcome: DecisionOutcome
    confidence: int
    justification: str
    decisive_factors: tuple[DecisiveFactor, ...] = ()

    @property
    def negative_factors(self) -> tuple[DecisiveFactor, ...]:
        return tuple(f for f in self.decisive_factors if f.polarity == FactorPolarity.NEGATIVE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "confidence": self.confidence,
            "justification": self.justification,
            "decisive_factors": [f.to_dict() for f in self.decisive_factors],
        }


@dataclass(frozen=True)
class StrategyDescriptor:
    strategy: StrategyType
    title: str
    alternative: str | None = None


@dataclass(frozen=True)
class ActionPlan:
    immediate: tuple[str, ...] = ()
    preparation: tuple[str, ...] = ()
    post_decision: tuple[str, ...] = ()


@dataclass(frozen=True)
class PricingRecommendation:
    strategy: PricingStrategyType
    margin_percent: float
    suggested_price: int
    factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class PartnershipRecommendation:
    required: bool
    types: tuple[str, ...] = ()
    criteria: tuple[str, ...] = ()


@dataclass(frozen=True)
class Milestone:
    activity: str
    start_date: date
    end_date: date
    duration_days: int


@dataclass(frozen=True)
class ROIEstimate:
    roi_percent: float
    absolute_return: int
    payback_months: int
    breakdown: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StrategicRecommendation:
    """Complete output of one evaluation."""
    decision: Decision
    scores: ScoreSet
    strategy: StrategyDescriptor
    alternative_strategies: tuple[str, ...]
    competitive_advantages: tuple[str, ...]
    action_plan: ActionPlan
    pricing: PricingRecommendation
    partnership: PartnershipRecommendation
    timeline: tuple[Milestone, ...]
    roi: ROIEstimate
    priority: Priority
    reference_date: date
    engine_version: str

    def to_dict(self) -> dict[str, Any]:
        data = _jsonable(asdict(self))
        data["decision"] = self.decision.to_dict()
        return data
