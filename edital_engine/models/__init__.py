"""
Input records (pydantic) and result records (dataclasses) of the engine.
"""
from .bid import BidDescriptor, CompanyProfile, CompanySize, QualificationRequirements, TaxRegime
from .results import (
    ActionPlan,
    Decision,
    DecisionOutcome,
    DecisiveFactor,
    FactorPolarity,
    Milestone,
    PartnershipRecommendation,
    PricingRecommendation,
    PricingStrategyType,
    Priority,
    ROIEstimate,
    ScoreSet,
    StrategicRecommendation,
    StrategyDescriptor,
    StrategyType,
)

__all__ = [
    "ActionPlan",
    "BidDescriptor",
    "CompanyProfile",
    "CompanySize",
    "Decision",
    "DecisionOutcome",
    "DecisiveFactor",
    "FactorPolarity",
    "Milestone",
    "PartnershipRecommendation",
    "PricingRecommendation",
    "PricingStrategyType",
    "Priority",
    "QualificationRequirements",
    "ROIEstimate",
    "ScoreSet",
    "StrategicRecommendation",
    "StrategyDescriptor",
    "StrategyType",
    "TaxRegime",
]
