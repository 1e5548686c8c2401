"""
Strategic recommendation composer.
Turns scores and a participation decision into a strategy, an action plan,
pricing and partnership guidance, a preparation timeline, a ROI estimate and
an overall priority.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from edital_engine.config.settings import RecommendationSettings, settings
from edital_engine.models.bid import BidDescriptor, CompanyProfile
from edital_engine.models.results import (
    ActionPlan,
    Decision,
    DecisionOutcome,
    Milestone,
    PartnershipRecommendation,
    PricingRecommendation,
    PricingStrategyType,
    Priority,
    ROIEstimate,
    ScoreSet,
    StrategicRecommendation,
)
from edital_engine.recommendation.strategy import select_strategy
from edital_engine.utils.terms import round_half_up
from edital_engine.utils.text import contains_any
from edital_engine.version import ENGINE_VERSION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MilestoneTemplate:
    """Share of the days until opening given to one preparation activity."""
    activity: str
    share: float
    min_days: int


MILESTONES = (
    MilestoneTemplate("Complete analysis of the bid notice", 0.1, 1),
    MilestoneTemplate("Preparation of qualification documents", 0.3, 2),
    MilestoneTemplate("Technical proposal drafting", 0.4, 3),
    MilestoneTemplate("Financial proposal calculation", 0.1, 1),
    MilestoneTemplate("Final review and validation", 0.1, 1),
)

REGIONAL_KEYWORDS = ("nacional", "multiplas localidades")


class RecommendationComposer:
    """
    Builds the StrategicRecommendation for one evaluated bid.

    Every part is a pure function of the bid, the profile, the scores, the
    decision and the reference date.
    """

    def __init__(self, recommendation_settings: Optional[RecommendationSettings] = None):
        self.config = recommendation_settings or settings.recommendation

    def _contract_value(self, bid: BidDescriptor) -> float:
        return bid.estimated_value if bid.estimated_value and bid.estimated_value > 0 else 0.0

    def competitive_advantages(
        self, bid: BidDescriptor, profile: CompanyProfile, scores: ScoreSet
    ) -> tuple[str, ...]:
        advantages = []
        if scores.technical > 70:
            advantages.append("Strong technical capacity for execution")
        if scores.financial > 70:
            advantages.append("Financially competitive proposal")
        if scores.documentary > 80:
            advantages.append("Straightforward documentary qualification")
        if bid.small_business_benefit and profile.qualifies_as_small_business:
            advantages.append("Small business (ME/EPP) benefits apply")
        return tuple(advantages)

    def action_plan(
        self,
        bid: BidDescriptor,
        scores: ScoreSet,
        decision: Decision,
        reference_date: date,
    ) -> ActionPlan:
        outcome = decision.outcome
        immediate = []
        preparation = []
        post_decision = []

        if outcome != DecisionOutcome.DECLINE:
            immediate.extend([
                "Download and analyse the complete bid notice in detail",
                "Check technical team availability for the period",
                "Review the documentation required for qualification",
            ])
            days_to_opening = bid.days_until_opening(reference_date)
            if days_to_opening is not None and days_to_opening <= self.config.urgent_opening_days:
                immediate.append("URGENT: start preparing the documentation immediately")

        if outcome == DecisionOutcome.PARTICIPATE:
            preparation.extend([
                "Draft a detailed technical proposal",
                "Calculate a competitive price proposal",
                "Gather and organise qualification documents",
                "Validate the proposal with the technical and legal teams",
            ])
            if scores.technical < 70:
                preparation.append("Seek technical partnerships to strengthen the proposal")
            if scores.financial < 60:
                preparation.append("Review the cost structure to improve competitiveness")

            post_decision.extend([
                "Submit the proposal within the established deadline",
                "Follow the bidding process and possible appeals",
                "Prepare the team for a possible project start",
            ])
        elif outcome == DecisionOutcome.ANALYZE_FURTHER:
            post_decision.extend([
                "Gather additional information about the bid",
                "Consult other market participants",
                "Reassess the decision based on new information",
            ])

        return ActionPlan(
            immediate=tuple(immediate),
            preparation=tuple(preparation),
            post_decision=tuple(post_decision),
        )

    def pricing(self, bid: BidDescriptor, scores: ScoreSet) -> PricingRecommendation:
        cfg = self.config
        value = self._contract_value(bid)
        factors = []

        if scores.competition > 70:
            strategy = PricingStrategyType.COMPETITIVE
            margin = cfg.competitive_margin
            factors.append("Low competition allows an optimised margin")
        elif scores.competition < 50:
            strategy = PricingStrategyType.AGGRESSIVE
            margin = cfg.aggressive_margin
            factors.append("High competition requires a more aggressive price")
        else:
            strategy = PricingStrategyType.BALANCED
            margin = cfg.balanced_margin
            factors.append("Moderate competition allows a balanced margin")

        if scores.technical > 80:
            margin += cfg.technical_margin_bonus
            factors.append("High technical capacity justifies an additional margin")

        if value > cfg.large_contract_value:
            margin -= cfg.large_contract_margin_cut
            factors.append("High contract value calls for a more conservative margin")

        suggested_price = 0
        if value > 0:
            suggested_price = round_half_up(value * cfg.cost_ratio * (1 + margin / 100))

        return PricingRecommendation(
            strategy=strategy,
            margin_percent=margin,
            suggested_price=suggested_price,
            factors=tuple(factors),
        )

    def partnership(self, bid: BidDescriptor, scores: ScoreSet) -> PartnershipRecommendation:
        required = False
        types = []
        criteria = []

        if scores.technical < 60:
            required = True
            types.append("Technical partnership")
            criteria.append("Look for a company with specific expertise in the bid object")

        if scores.financial < 50 and self._contract_value(bid) > self.config.financial_partner_value:
            required = True
            types.append("Financial partnership")
            criteria.append("Look for a partner with financial capacity for the project")

        if scores.documentary < 60:
            types.append("Legal consultancy")
            criteria.append("Hire consultancy specialised in public procurement")

        if contains_any(bid.object_description, REGIONAL_KEYWORDS):
            types.append("Regional partnership")
            criteria.append("Look for a partner with national or regional presence")

        if bid.allows_consortium:
            types.append("Consortium")
            criteria.append("Form a consortium with a complementary company")

        return PartnershipRecommendation(required=required, types=tuple(types), criteria=tuple(criteria))

    def timeline(
        self, bid: BidDescriptor, decision: Decision, reference_date: date
    ) -> tuple[Milestone, ...]:
        """Sequential preparation milestones from the reference date; only when participating."""
        if decision.outcome != DecisionOutcome.PARTICIPATE:
            return ()

        days_to_opening = bid.days_until_opening(reference_date) or 0
        milestones = []
        start = reference_date
        for template in MILESTONES:
            duration = max(template.min_days, math.ceil(days_to_opening * template.share))
            end = start + timedelta(days=duration)
            milestones.append(Milestone(
                activity=template.activity,
                start_date=start,
                end_date=end,
                duration_days=duration,
            ))
            start = end
        return tuple(milestones)

    def roi(self, bid: BidDescriptor, scores: ScoreSet) -> ROIEstimate:
        cfg = self.config
        value = self._contract_value(bid)

        cost = value * cfg.cost_ratio
        if scores.technical < 60:
            cost *= 1 + cfg.technical_cost_inflation
        if scores.timeline < 60:
            cost *= 1 + cfg.timeline_cost_inflation

        margin = value - cost
        roi_percent = round_half_up(margin / cost * 100, 2) if value > 0 else 0.0
        payback_months = max(1, math.ceil((bid.execution_days or 0) / 30))

        if scores.risk < 60:
            financial_risk = "high"
        elif scores.risk > 80:
            financial_risk = "low"
        else:
            financial_risk = "medium"

        return ROIEstimate(
            roi_percent=roi_percent,
            absolute_return=round_half_up(margin),
            payback_months=payback_months,
            breakdown={
                "contract_value": value,
                "estimated_cost": round_half_up(cost),
                "estimated_margin": round_half_up(margin),
                "financial_risk": financial_risk,
            },
        )

    def priority(self, scores: ScoreSet, decision: Decision, roi: ROIEstimate) -> Priority:
        cfg = self.config
        value = scores.final
        if roi.roi_percent > cfg.roi_high:
            value += 10
        elif roi.roi_percent < cfg.roi_low:
            value -= 10
        if decision.outcome == DecisionOutcome.PARTICIPATE and decision.confidence > 80:
            value += 5

        if value >= cfg.priority_high:
            return Priority.HIGH
        if value >= cfg.priority_medium:
            return Priority.MEDIUM
        return Priority.LOW

    def compose(
        self,
        bid: BidDescriptor,
        profile: CompanyProfile,
        scores: ScoreSet,
        decision: Decision,
        reference_date: date,
    ) -> StrategicRecommendation:
        strategy, alternatives = select_strategy(scores)
        roi = self.roi(bid, scores)

        recommendation = StrategicRecommendation(
            decision=decision,
            scores=scores,
            strategy=strategy,
            alternative_strategies=alternatives,
            competitive_advantages=self.competitive_advantages(bid, profile, scores),
            action_plan=self.action_plan(bid, scores, decision, reference_date),
            pricing=self.pricing(bid, scores),
            partnership=self.partnership(bid, scores),
            timeline=self.timeline(bid, decision, reference_date),
            roi=roi,
            priority=self.priority(scores, decision, roi),
            reference_date=reference_date,
            engine_version=ENGINE_VERSION,
        )
        logger.debug(
            f"Recommendation for bid {bid.bid_number or bid.bid_id}: "
            f"{strategy.strategy.value}, priority {recommendation.priority.value}"
        )
        return recommendation
