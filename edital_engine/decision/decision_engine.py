"""
Decision engine for bid participation.
Maps the final viability score to participate / analyze further / decline,
with a confidence level and the sub-scores that weighed most on the decision.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from edital_engine.config.settings import DecisionSettings, settings
from edital_engine.models.results import (
    Decision,
    DecisionOutcome,
    DecisiveFactor,
    FactorPolarity,
    ScoreSet,
)
from edital_engine.utils.terms import clamp

logger = logging.getLogger(__name__)


FACTOR_DESCRIPTIONS: dict[str, dict[FactorPolarity, str]] = {
    "financial": {
        FactorPolarity.POSITIVE: "Excellent financial viability and contract value fit",
        FactorPolarity.NEGATIVE: "Financial issues may compromise viability",
    },
    "technical": {
        FactorPolarity.POSITIVE: "Strong technical fit with the company's capabilities",
        FactorPolarity.NEGATIVE: "Technical complexity above current capabilities",
    },
    "documentary": {
        FactorPolarity.POSITIVE: "Required documentation is easy to provide",
        FactorPolarity.NEGATIVE: "Required documentation presents significant difficulties",
    },
    "timeline": {
        FactorPolarity.POSITIVE: "Adequate and well distributed deadlines",
        FactorPolarity.NEGATIVE: "Tight or inadequate deadlines for execution",
    },
    "risk": {
        FactorPolarity.POSITIVE: "Low level of risk identified",
        FactorPolarity.NEGATIVE: "High level of risk may compromise the project",
    },
    "competition": {
        FactorPolarity.POSITIVE: "Low expected competition, good chance of success",
        FactorPolarity.NEGATIVE: "High competition may reduce chances of success",
    },
}

JUSTIFICATIONS = {
    DecisionOutcome.PARTICIPATE: "Bid shows high viability and fits the company profile",
    DecisionOutcome.ANALYZE_FURTHER: "Bid requires more detailed analysis before a final decision",
    DecisionOutcome.DECLINE: "Bid does not show adequate viability for participation",
}


def describe_factor(name: str, polarity: FactorPolarity) -> str:
    return FACTOR_DESCRIPTIONS.get(name, {}).get(polarity, "Relevant factor for the decision")


@dataclass(frozen=True)
class DecisionThresholds:
    """Score thresholds; participate >= participate, analyze further >= analyze."""
    participate: int = 75
    analyze: int = 60

    @classmethod
    def from_settings(cls, decision_settings: DecisionSettings) -> "DecisionThresholds":
        return cls(
            participate=decision_settings.participate_threshold,
            analyze=decision_settings.analyze_threshold,
        )


class DecisionEngine:
    """
    Participation decision for one evaluated bid.

    A single call is a single evaluation; the engine keeps no state between calls.
    """

    def __init__(self, decision_settings: Optional[DecisionSettings] = None):
        self.config = decision_settings or settings.decision
        self.thresholds = DecisionThresholds.from_settings(self.config)

    def classify(self, final_score: int) -> DecisionOutcome:
        if final_score >= self.thresholds.participate:
            return DecisionOutcome.PARTICIPATE
        if final_score >= self.thresholds.analyze:
            return DecisionOutcome.ANALYZE_FURTHER
        return DecisionOutcome.DECLINE

    def base_confidence(self, outcome: DecisionOutcome, final_score: int) -> int:
        cfg = self.config
        if outcome == DecisionOutcome.PARTICIPATE:
            return min(
                cfg.participate_max_confidence,
                cfg.participate_base_confidence + (final_score - self.thresholds.participate),
            )
        if outcome == DecisionOutcome.ANALYZE_FURTHER:
            return cfg.analyze_base_confidence + (final_score - self.thresholds.analyze)
        return cfg.decline_base_confidence + (self.thresholds.analyze - final_score)

    def extract_decisive_factors(self, scores: ScoreSet) -> tuple[DecisiveFactor, ...]:
        """Sub-scores >= 80 count as positive and <= 40 as negative, in ScoreSet order."""
        factors = []
        for name, score in scores.as_dict().items():
            if score >= self.config.positive_factor_min:
                polarity = FactorPolarity.POSITIVE
            elif score <= self.config.negative_factor_max:
                polarity = FactorPolarity.NEGATIVE
            else:
                continue
            factors.append(DecisiveFactor(
                name=name,
                polarity=polarity,
                score=score,
                description=describe_factor(name, polarity),
            ))
        return tuple(factors)

    def decide(self, scores: ScoreSet) -> Decision:
        cfg = self.config
        outcome = self.classify(scores.final)
        confidence = clamp(self.base_confidence(outcome, scores.final))

        factors = self.extract_decisive_factors(scores)
        negatives = [f for f in factors if f.polarity == FactorPolarity.NEGATIVE]
        if len(negatives) > cfg.negative_factor_limit:
            confidence = max(cfg.confidence_floor, confidence - cfg.negative_factor_penalty)

        decision = Decision(
            outcome=outcome,
            confidence=clamp(confidence),
            justification=JUSTIFICATIONS[outcome],
            decisive_factors=factors,
        )
        logger.debug(
            f"Decision for final score {scores.final}: {outcome.value} "
            f"({decision.confidence}% confidence, {len(negatives)} negative factors)"
        )
        return decision
