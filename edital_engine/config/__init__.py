"""
Configuration module for engine settings and logging.
"""

from .logging_config import get_logger, reset_logging, setup_logging
from .settings import (
    BatchSettings,
    DecisionSettings,
    LoggingSettings,
    PersistenceSettings,
    RecommendationSettings,
    ScoringSettings,
    Settings,
    settings,
)

__all__ = [
    "settings",
    "Settings",
    "ScoringSettings",
    "DecisionSettings",
    "RecommendationSettings",
    "PersistenceSettings",
    "BatchSettings",
    "LoggingSettings",
    "setup_logging",
    "get_logger",
    "reset_logging",
]
