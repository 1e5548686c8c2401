"""
Decision module for participate / analyze further / decline recommendations.
"""
from .decision_engine import DecisionEngine, DecisionThresholds, describe_factor

__all__ = ["DecisionEngine", "DecisionThresholds", "describe_factor"]
