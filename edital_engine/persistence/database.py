"""
Database models for stored bid analyses.
"""
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text, event
from sqlalchemy.orm import declarative_base

from edital_engine.utils.terms import round_half_up

Base = declarative_base()

SUB_SCORE_COLUMNS = (
    "score_financial",
    "score_technical",
    "score_documentary",
    "score_timeline",
    "score_risk",
    "score_competition",
)


class AnalysisType(str, PyEnum):
    """Analysis type enumeration."""

    QUICK = "quick"
    FULL = "full"
    REVIEW = "review"


class StoredRecommendation(str, PyEnum):
    """Recommendation derived from a stored final score."""

    PARTICIPATE = "participate"
    ANALYZE_FURTHER = "analyze_further"
    DECLINE = "decline"


class AnalysisRecord(Base):
    """One persisted evaluation of a bid."""

    __tablename__ = "bid_analyses"

    id = Column(String, primary_key=True, index=True)
    bid_id = Column(String, index=True, nullable=False)
    user_id = Column(String, index=True, nullable=True)
    version = Column(Integer, default=1)
    analysis_type = Column(String(20), default=AnalysisType.FULL.value, index=True)

    # Scores (0-100)
    score_financial = Column(Integer)
    score_technical = Column(Integer)
    score_documentary = Column(Integer)
    score_timeline = Column(Integer)
    score_risk = Column(Integer)
    score_competition = Column(Integer)
    score_final = Column(Integer, index=True)

    # Decision
    decision = Column(String(20))
    confidence = Column(Integer)
    priority = Column(String(10))

    # Financials
    margin_percent = Column(Float, nullable=True)
    suggested_price = Column(Float, nullable=True)
    roi_percent = Column(Float, nullable=True)

    narrative = Column(JSON, nullable=True)
    strengths = Column(JSON, default=lambda: [])
    weaknesses = Column(JSON, default=lambda: [])
    recommendation_data = Column("recommendation", JSON, default=lambda: {})
    observations = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def sub_scores(self) -> list[int]:
        return [getattr(self, name) or 0 for name in SUB_SCORE_COLUMNS]

    def recommendation(self) -> StoredRecommendation:
        score = self.score_final or 0
        if score >= 80:
            return StoredRecommendation.PARTICIPATE
        if score >= 60:
            return StoredRecommendation.ANALYZE_FURTHER
        return StoredRecommendation.DECLINE

    def score_classification(self) -> str:
        score = self.score_final or 0
        if score >= 90:
            return "excellent"
        if score >= 80:
            return "very_good"
        if score >= 70:
            return "good"
        if score >= 60:
            return "fair"
        if score >= 40:
            return "poor"
        return "very_poor"

    def has_high_risk(self) -> bool:
        return (self.score_risk or 0) < 50

    def is_profitable(self, min_margin: float = 15) -> bool:
        return (self.margin_percent or 0) >= min_margin

    def to_dict(self):
        return {
            "id": self.id,
            "bid_id": self.bid_id,
            "user_id": self.user_id,
            "version": self.version,
            "analysis_type": self.analysis_type,
            "scores": {
                "financial": self.score_financial,
                "technical": self.score_technical,
                "documentary": self.score_documentary,
                "timeline": self.score_timeline,
                "risk": self.score_risk,
                "competition": self.score_competition,
                "final": self.score_final,
            },
            "decision": self.decision,
            "confidence": self.confidence,
            "priority": self.priority,
            "margin_percent": self.margin_percent,
            "suggested_price": self.suggested_price,
            "roi_percent": self.roi_percent,
            "narrative": self.narrative,
            "strengths": self.strengths,
            "weaknesses": self.weaknesses,
            "recommendation": self.recommendation_data,
            "observations": self.observations,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@event.listens_for(AnalysisRecord, "before_insert")
def derive_final_score(mapper, connection, target: AnalysisRecord):
    """Fill score_final with the rounded mean of the non-zero sub-scores when absent."""
    if target.score_final is not None:
        return
    valid = [score for score in target.sub_scores() if score > 0]
    if valid:
        target.score_final = round_half_up(sum(valid) / len(valid))
