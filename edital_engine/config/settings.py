import math
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScoringSettings(BaseSettings):
    """Settings for the sub-score calculator and aggregator."""
    model_config = SettingsConfigDict(env_prefix="EDITAL_SCORING_")

    financial_weight: float = 0.25
    technical_weight: float = 0.20
    documentary_weight: float = 0.15
    timeline_weight: float = 0.15
    risk_weight: float = 0.15
    competition_weight: float = 0.10

    # Ideal contract value band, as a share of annual revenue
    ideal_band_min_ratio: float = 0.05
    ideal_band_max_ratio: float = 0.30
    default_band_min: float = 50_000.0
    default_band_max: float = 500_000.0

    # Payment terms (days)
    payment_term_fast: int = 30
    payment_term_acceptable: int = 60

    @model_validator(mode="after")
    def _weights_sum_to_one(self) -> "ScoringSettings":
        weights = self.weights()
        if any(not math.isfinite(w) or w < 0 for w in weights.values()):
            raise ValueError(f"Scoring weights must be finite and non-negative: {weights}")
        total = sum(weights.values())
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
        return self

    def weights(self) -> dict[str, float]:
        return {
            "financial": self.financial_weight,
            "technical": self.technical_weight,
            "documentary": self.documentary_weight,
            "timeline": self.timeline_weight,
            "risk": self.risk_weight,
            "competition": self.competition_weight,
        }


class DecisionSettings(BaseSettings):
    """Settings for the participate/analyze/decline decision."""
    model_config = SettingsConfigDict(env_prefix="EDITAL_DECISION_")

    participate_threshold: int = 75
    analyze_threshold: int = 60

    participate_base_confidence: int = 60
    participate_max_confidence: int = 95
    analyze_base_confidence: int = 40
    decline_base_confidence: int = 60

    positive_factor_min: int = 80
    negative_factor_max: int = 40
    negative_factor_limit: int = 2
    negative_factor_penalty: int = 20
    confidence_floor: int = 30


class RecommendationSettings(BaseSettings):
    """Settings for pricing, ROI and priority composition."""
    model_config = SettingsConfigDict(env_prefix="EDITAL_RECOMMENDATION_")

    cost_ratio: float = 0.75
    technical_cost_inflation: float = 0.10
    timeline_cost_inflation: float = 0.05

    competitive_margin: float = 10.0
    aggressive_margin: float = 8.0
    balanced_margin: float = 12.0
    technical_margin_bonus: float = 3.0
    large_contract_margin_cut: float = 2.0
    large_contract_value: float = 500_000.0
    financial_partner_value: float = 300_000.0

    urgent_opening_days: int = 10

    roi_high: float = 25.0
    roi_low: float = 10.0
    priority_high: int = 80
    priority_medium: int = 60


class PersistenceSettings(BaseSettings):
    """Settings for the analysis store."""
    model_config = SettingsConfigDict(env_prefix="EDITAL_PERSISTENCE_")

    database_url: str = "sqlite:///./edital_engine.db"
    echo: bool = False
    history_limit: int = 10


class BatchSettings(BaseSettings):
    """Settings for batch evaluation."""
    model_config = SettingsConfigDict(env_prefix="EDITAL_BATCH_")

    max_items: int = 10
    max_workers: int = 3


class LoggingSettings(BaseSettings):
    """Settings for log output."""
    model_config = SettingsConfigDict(env_prefix="EDITAL_LOGGING_")

    level: str = "INFO"
    log_file: Optional[str] = None
    sql_level: str = "WARNING"


class Settings(BaseSettings):
    """Global Application Settings."""
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    decision: DecisionSettings = Field(default_factory=DecisionSettings)
    recommendation: RecommendationSettings = Field(default_factory=RecommendationSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="EDITAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )


settings = Settings()
