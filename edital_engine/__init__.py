"""
Edital viability engine.

Scores public procurement bids (editais) against a company profile, decides
whether to participate and composes a strategic recommendation.
"""
from .decision import DecisionEngine
from .exceptions import (
    BatchLimitExceededError,
    BidNotFoundError,
    CompanyNotFoundError,
    EditalEngineError,
    WeightConfigurationError,
)
from .models import BidDescriptor, CompanyProfile, StrategicRecommendation
from .recommendation import RecommendationComposer
from .scoring import ScoreAggregator, ScoreCalculator, ScoreWeights
from .services import BatchItemResult, EvaluationService, batch_summary
from .version import ENGINE_VERSION, __version__

__all__ = [
    "BatchItemResult",
    "BatchLimitExceededError",
    "BidDescriptor",
    "BidNotFoundError",
    "CompanyNotFoundError",
    "CompanyProfile",
    "DecisionEngine",
    "ENGINE_VERSION",
    "EditalEngineError",
    "EvaluationService",
    "RecommendationComposer",
    "ScoreAggregator",
    "ScoreCalculator",
    "ScoreWeights",
    "StrategicRecommendation",
    "WeightConfigurationError",
    "__version__",
    "batch_summary",
]
