"""
Strategic recommendation: strategy, action plan, pricing, partnerships, timeline and ROI.
"""
from .recommendation_engine import MILESTONES, MilestoneTemplate, RecommendationComposer
from .strategy import STRATEGIES, dominant_factors, select_strategy, strategy_for_factor

__all__ = [
    "MILESTONES",
    "MilestoneTemplate",
    "RecommendationComposer",
    "STRATEGIES",
    "dominant_factors",
    "select_strategy",
    "strategy_for_factor",
]
