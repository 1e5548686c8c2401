"""
Analysis repository: write-side sink and read-side queries over stored analyses.
"""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from edital_engine.config.settings import settings
from edital_engine.models.results import StrategicRecommendation
from edital_engine.utils.terms import round_half_up

from .database import AnalysisRecord, AnalysisType

logger = logging.getLogger(__name__)

POSITIVE_SCORE = 70


class AnalysisRepository:
    """
    Stores evaluation results as AnalysisRecord rows.

    store() is idempotent per analysis id: storing the same id twice updates
    the existing row instead of adding a new one.
    """

    def __init__(self, session: Session):
        self.session = session

    def _apply_result(self, record: AnalysisRecord, result: StrategicRecommendation):
        scores = result.scores
        record.score_financial = scores.financial
        record.score_technical = scores.technical
        record.score_documentary = scores.documentary
        record.score_timeline = scores.timeline
        record.score_risk = scores.risk
        record.score_competition = scores.competition
        record.score_final = scores.final

        record.decision = result.decision.outcome.value
        record.confidence = result.decision.confidence
        record.priority = result.priority.value
        record.margin_percent = result.pricing.margin_percent
        record.suggested_price = result.pricing.suggested_price
        record.roi_percent = result.roi.roi_percent

        record.strengths = list(result.competitive_advantages)
        record.weaknesses = [factor.description for factor in result.decision.negative_factors]
        record.recommendation_data = result.to_dict()

    def store(
        self,
        analysis_id: str,
        bid_id: str,
        result: StrategicRecommendation,
        narrative: Optional[dict[str, Any]] = None,
        user_id: Optional[str] = None,
        analysis_type: AnalysisType = AnalysisType.FULL,
    ) -> AnalysisRecord:
        record = self.session.get(AnalysisRecord, analysis_id)
        if record is None:
            previous = (
                self.session.query(func.count(AnalysisRecord.id))
                .filter(AnalysisRecord.bid_id == bid_id)
                .scalar()
            )
            record = AnalysisRecord(id=analysis_id, bid_id=bid_id, version=previous + 1)
            self.session.add(record)
            logger.debug(f"Creating analysis {analysis_id} for bid {bid_id} (version {previous + 1})")
        else:
            logger.debug(f"Updating analysis {analysis_id} for bid {bid_id}")

        record.user_id = user_id
        record.analysis_type = AnalysisType(analysis_type).value
        record.narrative = narrative
        self._apply_result(record, result)

        self.session.commit()
        self.session.refresh(record)
        return record

    def get(self, analysis_id: str) -> Optional[AnalysisRecord]:
        return self.session.get(AnalysisRecord, analysis_id)

    def latest_for_bid(self, bid_id: str) -> Optional[AnalysisRecord]:
        return (
            self.session.query(AnalysisRecord)
            .filter(AnalysisRecord.bid_id == bid_id)
            .order_by(AnalysisRecord.version.desc(), AnalysisRecord.created_at.desc())
            .first()
        )

    def history(self, bid_id: str, limit: Optional[int] = None) -> list[AnalysisRecord]:
        """Most recent analyses of a bid first."""
        return (
            self.session.query(AnalysisRecord)
            .filter(AnalysisRecord.bid_id == bid_id)
            .order_by(AnalysisRecord.created_at.desc(), AnalysisRecord.version.desc())
            .limit(limit or settings.persistence.history_limit)
            .all()
        )

    def compare(self, bid_ids: list[str]) -> list[dict[str, Any]]:
        """Latest analysis of each bid, best final score first."""
        latest = [self.latest_for_bid(bid_id) for bid_id in dict.fromkeys(bid_ids)]
        records = sorted(
            (record for record in latest if record is not None),
            key=lambda record: record.score_final or 0,
            reverse=True,
        )
        return [
            {
                "bid_id": record.bid_id,
                "analysis_id": record.id,
                "score_final": record.score_final,
                "decision": record.decision,
                "recommendation": record.recommendation().value,
                "margin_percent": record.margin_percent,
                "suggested_price": record.suggested_price,
                "roi_percent": record.roi_percent,
            }
            for record in records
        ]

    def statistics(self, since: Optional[datetime] = None) -> dict[str, Any]:
        query = self.session.query(
            func.count(AnalysisRecord.id),
            func.avg(AnalysisRecord.score_final),
            func.max(AnalysisRecord.score_final),
            func.min(AnalysisRecord.score_final),
            func.avg(AnalysisRecord.margin_percent),
            func.sum(case((AnalysisRecord.score_final >= POSITIVE_SCORE, 1), else_=0)),
        )
        if since is not None:
            query = query.filter(AnalysisRecord.created_at >= since)
        total, mean_score, max_score, min_score, mean_margin, positive = query.one()

        total = total or 0
        positive = int(positive or 0)
        return {
            "total_analyses": total,
            "mean_score": round_half_up(float(mean_score), 2) if mean_score is not None else 0.0,
            "max_score": max_score or 0,
            "min_score": min_score or 0,
            "mean_margin": round_half_up(float(mean_margin), 2) if mean_margin is not None else 0.0,
            "positive_analyses": positive,
            "success_rate": round_half_up(positive / total * 100, 2) if total else 0.0,
        }

    def score_distribution(self, limit: int = 20) -> list[dict[str, int]]:
        """Number of analyses per final score, highest score first."""
        rows = (
            self.session.query(AnalysisRecord.score_final, func.count(AnalysisRecord.id))
            .group_by(AnalysisRecord.score_final)
            .order_by(AnalysisRecord.score_final.desc())
            .limit(limit)
            .all()
        )
        return [{"score_final": score, "count": count} for score, count in rows]
