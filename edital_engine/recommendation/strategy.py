"""
Participation strategy lookup.

The dominant sub-score selects the main strategy; each strategy carries a
title and an alternative course of action.
"""
from edital_engine.models.results import ScoreSet, StrategyDescriptor, StrategyType

STRATEGIES: dict[StrategyType, StrategyDescriptor] = {
    StrategyType.PRICE_COMPETITIVENESS: StrategyDescriptor(
        strategy=StrategyType.PRICE_COMPETITIVENESS,
        title="Price Competitiveness Strategy",
        alternative="Highlight experience in similar projects with a good cost-benefit ratio",
    ),
    StrategyType.TECHNICAL_DIFFERENTIATION: StrategyDescriptor(
        strategy=StrategyType.TECHNICAL_DIFFERENTIATION,
        title="Technical Differentiation Strategy",
        alternative="Propose innovative solutions that add value beyond what is requested",
    ),
    StrategyType.EXEMPLARY_COMPLIANCE: StrategyDescriptor(
        strategy=StrategyType.EXEMPLARY_COMPLIANCE,
        title="Exemplary Compliance Strategy",
        alternative="Prepare flawless documentation to score in the qualification phase",
    ),
    StrategyType.DELIVERY_AGILITY: StrategyDescriptor(
        strategy=StrategyType.DELIVERY_AGILITY,
        title="Delivery Agility Strategy",
        alternative="Propose an optimised schedule with early deliveries",
    ),
    StrategyType.UNIQUE_POSITIONING: StrategyDescriptor(
        strategy=StrategyType.UNIQUE_POSITIONING,
        title="Unique Positioning Strategy",
        alternative="Explore specific niches with less competition",
    ),
    StrategyType.BALANCED: StrategyDescriptor(
        strategy=StrategyType.BALANCED,
        title="Balanced Strategy",
    ),
}

# risk has no dedicated strategy
FACTOR_STRATEGIES: dict[str, StrategyType] = {
    "financial": StrategyType.PRICE_COMPETITIVENESS,
    "technical": StrategyType.TECHNICAL_DIFFERENTIATION,
    "documentary": StrategyType.EXEMPLARY_COMPLIANCE,
    "timeline": StrategyType.DELIVERY_AGILITY,
    "competition": StrategyType.UNIQUE_POSITIONING,
}


def dominant_factors(scores: ScoreSet, count: int = 2) -> list[str]:
    """Sub-score names sorted by score descending; ties keep ScoreSet field order."""
    ranked = sorted(scores.as_dict().items(), key=lambda item: item[1], reverse=True)
    return [name for name, _ in ranked[:count]]


def strategy_for_factor(factor: str) -> StrategyDescriptor:
    return STRATEGIES[FACTOR_STRATEGIES.get(factor, StrategyType.BALANCED)]


def select_strategy(scores: ScoreSet) -> tuple[StrategyDescriptor, tuple[str, ...]]:
    """
    Pick the main strategy from the best sub-score.

    Returns:
        The main strategy descriptor and the alternatives: the alternative of
        the top factor plus, when it maps to a different strategy, that of
        the runner-up.
    """
    top_factors = dominant_factors(scores)
    main = strategy_for_factor(top_factors[0])

    alternatives = []
    seen = set()
    for factor in top_factors:
        descriptor = strategy_for_factor(factor)
        if descriptor.alternative and descriptor.strategy not in seen:
            alternatives.append(descriptor.alternative)
        seen.add(descriptor.strategy)
    return main, tuple(alternatives)
