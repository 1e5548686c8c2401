"""
Scoring module: viability sub-scores and weighted aggregation.
"""
from .aggregator import ScoreAggregator, ScoreWeights
from .score_calculator import (
    ScoreCalculator,
    classify_documents,
    competition_score,
    documentary_score,
    financial_score,
    required_technologies,
    risk_score,
    technical_score,
    timeline_score,
)

__all__ = [
    "ScoreAggregator",
    "ScoreCalculator",
    "ScoreWeights",
    "classify_documents",
    "competition_score",
    "documentary_score",
    "financial_score",
    "required_technologies",
    "risk_score",
    "technical_score",
    "timeline_score",
]
