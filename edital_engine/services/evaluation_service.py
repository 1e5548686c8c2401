"""
Evaluation service: runs the score -> decide -> recommend pipeline for one bid
or a batch of bids, and hands results to the analysis repository.
"""
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence, Union

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from edital_engine.config.settings import BatchSettings, settings
from edital_engine.decision.decision_engine import DecisionEngine
from edital_engine.exceptions import BatchLimitExceededError
from edital_engine.models.bid import BidDescriptor, CompanyProfile
from edital_engine.models.results import StrategicRecommendation
from edital_engine.persistence.database import AnalysisRecord
from edital_engine.persistence.repository import AnalysisRepository
from edital_engine.persistence.sources import BidSource, CompanySource
from edital_engine.recommendation.recommendation_engine import RecommendationComposer
from edital_engine.scoring.score_calculator import ScoreCalculator

logger = logging.getLogger(__name__)

BidRef = Union[BidDescriptor, str]

SUMMARY_COLUMNS = [
    "rank",
    "bid_id",
    "bid_number",
    "success",
    "final_score",
    "decision",
    "confidence",
    "priority",
    "suggested_price",
    "roi_percent",
    "error",
]


@dataclass(frozen=True)
class BatchItemResult:
    """Outcome of one bid in a batch; failed items carry the error instead of a result."""
    bid_id: Optional[str]
    success: bool
    result: Optional[StrategicRecommendation] = None
    error: Optional[str] = None
    bid_number: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "bid_id": self.bid_id,
            "bid_number": self.bid_number,
            "success": self.success,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
        }


class EvaluationService:
    """
    Orchestrates one evaluation end to end.

    The scoring, decision and recommendation steps are pure; sources and the
    repository are optional collaborators used by the id-based and storing
    entry points.
    """

    def __init__(
        self,
        calculator: Optional[ScoreCalculator] = None,
        decision_engine: Optional[DecisionEngine] = None,
        composer: Optional[RecommendationComposer] = None,
        bid_source: Optional[BidSource] = None,
        company_source: Optional[CompanySource] = None,
        repository: Optional[AnalysisRepository] = None,
        batch_settings: Optional[BatchSettings] = None,
    ):
        self.calculator = calculator or ScoreCalculator()
        self.decision_engine = decision_engine or DecisionEngine()
        self.composer = composer or RecommendationComposer()
        self.bid_source = bid_source
        self.company_source = company_source
        self.repository = repository
        self.batch_settings = batch_settings or settings.batch

    def evaluate(
        self,
        bid: BidDescriptor,
        profile: Optional[CompanyProfile] = None,
        reference_date: Optional[date] = None,
    ) -> StrategicRecommendation:
        """
        Evaluate one bid against a company profile.

        Args:
            bid: Bid descriptor to evaluate
            profile: Company profile; the default profile is used when omitted
            reference_date: "Today" for all date arithmetic; captured once when omitted

        Returns:
            StrategicRecommendation with scores, decision and recommendation
        """
        profile = profile or CompanyProfile()
        reference_date = reference_date or date.today()
        label = bid.bid_number or bid.bid_id or "unidentified bid"

        logger.info(f"Evaluating bid: {label}")
        start_time = time.time()

        scores = self.calculator.calculate(bid, profile, reference_date)
        decision = self.decision_engine.decide(scores)
        result = self.composer.compose(bid, profile, scores, decision, reference_date)

        elapsed = time.time() - start_time
        logger.info(
            f"Evaluation of {label} completed in {elapsed:.3f} seconds: "
            f"score {scores.final}, {decision.outcome.value.upper()}"
        )
        return result

    def _resolve_bid(self, bid: BidRef) -> BidDescriptor:
        if isinstance(bid, BidDescriptor):
            return bid
        if self.bid_source is None:
            raise ValueError("A bid source is required to evaluate bids by id")
        return self.bid_source.fetch_bid(bid)

    def _resolve_company(self, company_id: Optional[str]) -> CompanyProfile:
        if company_id is None:
            return CompanyProfile()
        if self.company_source is None:
            raise ValueError("A company source is required to look up company profiles")
        return self.company_source.fetch_company(company_id)

    def evaluate_by_id(
        self,
        bid_id: str,
        company_id: Optional[str] = None,
        reference_date: Optional[date] = None,
    ) -> StrategicRecommendation:
        bid = self._resolve_bid(bid_id)
        profile = self._resolve_company(company_id)
        return self.evaluate(bid, profile, reference_date)

    def evaluate_and_store(
        self,
        bid: BidDescriptor,
        profile: Optional[CompanyProfile] = None,
        reference_date: Optional[date] = None,
        analysis_id: Optional[str] = None,
        user_id: Optional[str] = None,
        narrative: Optional[dict[str, Any]] = None,
    ) -> tuple[StrategicRecommendation, AnalysisRecord]:
        """Evaluate a bid and persist the result; storage errors roll back and propagate."""
        if self.repository is None:
            raise ValueError("An analysis repository is required to store evaluations")

        result = self.evaluate(bid, profile, reference_date)
        analysis_id = analysis_id or str(uuid.uuid4())
        bid_id = bid.bid_id or bid.bid_number or analysis_id

        try:
            record = self.repository.store(
                analysis_id, bid_id, result, narrative=narrative, user_id=user_id
            )
        except SQLAlchemyError as e:
            self.repository.session.rollback()
            logger.error(f"Failed to store analysis {analysis_id} for bid {bid_id}: {e}")
            raise

        logger.info(f"Stored analysis {analysis_id} for bid {bid_id}")
        return result, record

    def _evaluate_item(
        self,
        bid: BidRef,
        profile: CompanyProfile,
        reference_date: date,
    ) -> BatchItemResult:
        bid_id = bid.bid_id if isinstance(bid, BidDescriptor) else bid
        try:
            descriptor = self._resolve_bid(bid)
            result = self.evaluate(descriptor, profile, reference_date)
        except Exception as e:
            logger.warning(f"Batch evaluation failed for bid {bid_id}: {e}")
            return BatchItemResult(bid_id=bid_id, success=False, error=str(e))
        return BatchItemResult(
            bid_id=descriptor.bid_id or bid_id,
            success=True,
            result=result,
            bid_number=descriptor.bid_number,
        )

    def evaluate_batch(
        self,
        bids: Sequence[BidRef],
        profile: Optional[CompanyProfile] = None,
        reference_date: Optional[date] = None,
    ) -> list[BatchItemResult]:
        """
        Evaluate several bids concurrently against one company profile.

        Items are returned in input order. A failing item is reported as a
        failed BatchItemResult and does not abort the rest of the batch.

        Raises:
            BatchLimitExceededError: if more bids than the configured limit are given
        """
        limit = self.batch_settings.max_items
        if len(bids) > limit:
            raise BatchLimitExceededError(len(bids), limit)
        if not bids:
            return []

        profile = profile or CompanyProfile()
        reference_date = reference_date or date.today()

        logger.info(f"Evaluating batch of {len(bids)} bids")
        workers = min(self.batch_settings.max_workers, len(bids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._evaluate_item, bid, profile, reference_date)
                for bid in bids
            ]
            results = [future.result() for future in futures]

        failed = sum(1 for item in results if not item.success)
        logger.info(f"Batch evaluation completed: {len(results) - failed} succeeded, {failed} failed")
        return results


def batch_summary(results: Sequence[BatchItemResult]) -> pd.DataFrame:
    """Tabulate batch results ranked by final score; failed items go last without a rank."""
    rows = []
    for item in results:
        row = {
            "bid_id": item.bid_id,
            "bid_number": item.bid_number,
            "success": item.success,
            "final_score": None,
            "decision": None,
            "confidence": None,
            "priority": None,
            "suggested_price": None,
            "roi_percent": None,
            "error": item.error,
        }
        if item.result is not None:
            row.update({
                "final_score": item.result.scores.final,
                "decision": item.result.decision.outcome.value,
                "confidence": item.result.decision.confidence,
                "priority": item.result.priority.value,
                "suggested_price": item.result.pricing.suggested_price,
                "roi_percent": item.result.roi.roi_percent,
            })
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    df = pd.DataFrame(rows)
    df = df.sort_values("final_score", ascending=False, na_position="last", kind="stable")
    df = df.reset_index(drop=True)
    df.insert(0, "rank", pd.Series(range(1, len(df) + 1), dtype="Int64"))
    df.loc[~df["success"], "rank"] = pd.NA
    return df[SUMMARY_COLUMNS]
