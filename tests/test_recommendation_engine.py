import json
from datetime import timedelta

import pytest

from edital_engine.models import (
    BidDescriptor,
    CompanyProfile,
    Decision,
    DecisionOutcome,
    PricingStrategyType,
    Priority,
    ROIEstimate,
    StrategyType,
)
from edital_engine.recommendation import (
    MILESTONES,
    STRATEGIES,
    RecommendationComposer,
    dominant_factors,
    select_strategy,
)
from edital_engine.utils import round_half_up


def make_decision(outcome: DecisionOutcome, confidence: int = 70) -> Decision:
    return Decision(outcome=outcome, confidence=confidence, justification="test")


class TestStrategySelection:

    def test_every_strategy_has_a_descriptor(self):
        assert set(STRATEGIES) == set(StrategyType)

    def test_ties_keep_field_order(self, make_scores):
        assert dominant_factors(make_scores()) == ["financial", "technical"]

    def test_top_factor_selects_strategy(self, make_scores):
        strategy, alternatives = select_strategy(make_scores(technical=95, competition=90))
        assert strategy.strategy == StrategyType.TECHNICAL_DIFFERENTIATION
        assert alternatives == (
            STRATEGIES[StrategyType.TECHNICAL_DIFFERENTIATION].alternative,
            STRATEGIES[StrategyType.UNIQUE_POSITIONING].alternative,
        )

    def test_risk_maps_to_balanced(self, make_scores):
        strategy, alternatives = select_strategy(make_scores(risk=95, timeline=90))
        assert strategy.strategy == StrategyType.BALANCED
        assert alternatives == (STRATEGIES[StrategyType.DELIVERY_AGILITY].alternative,)


class TestRecommendationComposer:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.composer = RecommendationComposer()

    def test_competitive_advantages(self, sample_bid, sample_profile, make_scores):
        advantages = self.composer.competitive_advantages(
            sample_bid, sample_profile, make_scores(technical=75, financial=75, documentary=85)
        )
        assert len(advantages) == 4

        large = CompanyProfile(size="grande")
        assert self.composer.competitive_advantages(sample_bid, large, make_scores()) == ()

    def test_action_plan_decline_is_empty(self, sample_bid, make_scores, reference_date):
        plan = self.composer.action_plan(
            sample_bid, make_scores(), make_decision(DecisionOutcome.DECLINE), reference_date
        )
        assert plan.immediate == ()
        assert plan.preparation == ()
        assert plan.post_decision == ()

    def test_action_plan_analyze_further(self, sample_bid, make_scores, reference_date):
        plan = self.composer.action_plan(
            sample_bid, make_scores(), make_decision(DecisionOutcome.ANALYZE_FURTHER), reference_date
        )
        assert len(plan.immediate) == 3
        assert plan.preparation == ()
        assert len(plan.post_decision) == 3

    def test_action_plan_participate_with_weak_scores(self, risky_bid, make_scores, reference_date):
        plan = self.composer.action_plan(
            risky_bid,
            make_scores(technical=60, financial=50),
            make_decision(DecisionOutcome.PARTICIPATE),
            reference_date,
        )
        assert len(plan.immediate) == 4
        assert plan.immediate[-1].startswith("URGENT")
        assert len(plan.preparation) == 6
        assert len(plan.post_decision) == 3

    def test_competitive_pricing(self, make_scores):
        bid = BidDescriptor(estimated_value=600_000)
        pricing = self.composer.pricing(bid, make_scores(competition=80, technical=85))
        assert pricing.strategy == PricingStrategyType.COMPETITIVE
        # 10 + 3 (technical) - 2 (large contract)
        assert pricing.margin_percent == pytest.approx(11)
        assert pricing.suggested_price == 499500
        assert len(pricing.factors) == 3

    def test_aggressive_pricing(self, make_scores):
        bid = BidDescriptor(estimated_value=100_000)
        pricing = self.composer.pricing(bid, make_scores(competition=40))
        assert pricing.strategy == PricingStrategyType.AGGRESSIVE
        assert pricing.margin_percent == pytest.approx(8)
        assert pricing.suggested_price == 81000

    def test_balanced_pricing_without_value(self, make_scores):
        pricing = self.composer.pricing(BidDescriptor(), make_scores(competition=60))
        assert pricing.strategy == PricingStrategyType.BALANCED
        assert pricing.margin_percent == pytest.approx(12)
        assert pricing.suggested_price == 0

    @pytest.mark.parametrize("value", [12_345, 250_000, 777_777, 3_000_000])
    def test_suggested_price_identity(self, make_scores, value):
        pricing = self.composer.pricing(BidDescriptor(estimated_value=value), make_scores(competition=55))
        expected = round_half_up(0.75 * value * (1 + pricing.margin_percent / 100))
        assert pricing.suggested_price == expected

    def test_partnership_requirements(self, make_scores):
        bid = BidDescriptor(
            object_description="Atendimento em âmbito nacional",
            estimated_value=400_000,
            allows_consortium=True,
        )
        partnership = self.composer.partnership(
            bid, make_scores(technical=50, financial=40, documentary=50)
        )
        assert partnership.required
        assert partnership.types == (
            "Technical partnership",
            "Financial partnership",
            "Legal consultancy",
            "Regional partnership",
            "Consortium",
        )
        assert len(partnership.criteria) == len(partnership.types)

    def test_legal_consultancy_alone_is_not_required(self, make_scores):
        partnership = self.composer.partnership(BidDescriptor(), make_scores(documentary=50))
        assert not partnership.required
        assert partnership.types == ("Legal consultancy",)

    def test_financial_partner_needs_large_value(self, make_scores):
        bid = BidDescriptor(estimated_value=200_000)
        partnership = self.composer.partnership(bid, make_scores(financial=40))
        assert not partnership.required

    def test_timeline_for_participation(self, sample_bid, reference_date):
        milestones = self.composer.timeline(
            sample_bid, make_decision(DecisionOutcome.PARTICIPATE), reference_date
        )
        assert [m.activity for m in milestones] == [t.activity for t in MILESTONES]
        # 15 days to opening: ceil of 10%, 30%, 40%, 10%, 10%
        assert [m.duration_days for m in milestones] == [2, 5, 6, 2, 2]
        assert milestones[0].start_date == reference_date
        for previous, current in zip(milestones, milestones[1:]):
            assert current.start_date == previous.end_date
        for milestone in milestones:
            assert milestone.end_date == milestone.start_date + timedelta(days=milestone.duration_days)

    def test_timeline_uses_minimum_durations(self, reference_date):
        milestones = self.composer.timeline(
            BidDescriptor(), make_decision(DecisionOutcome.PARTICIPATE), reference_date
        )
        assert [m.duration_days for m in milestones] == [1, 2, 3, 1, 1]

    @pytest.mark.parametrize("outcome", [DecisionOutcome.ANALYZE_FURTHER, DecisionOutcome.DECLINE])
    def test_no_timeline_without_participation(self, sample_bid, reference_date, outcome):
        assert self.composer.timeline(sample_bid, make_decision(outcome), reference_date) == ()

    def test_roi(self, make_scores):
        bid = BidDescriptor(estimated_value=200_000, execution_term="90 dias")
        roi = self.composer.roi(bid, make_scores(risk=70))
        assert roi.roi_percent == pytest.approx(33.33)
        assert roi.absolute_return == 50000
        assert roi.payback_months == 3
        assert roi.breakdown == {
            "contract_value": 200_000,
            "estimated_cost": 150000,
            "estimated_margin": 50000,
            "financial_risk": "medium",
        }

    def test_roi_cost_inflation(self, make_scores):
        bid = BidDescriptor(estimated_value=100_000, execution_term=100)
        roi = self.composer.roi(bid, make_scores(technical=50, timeline=50, risk=50))
        # cost = 75000 * 1.10 * 1.05 = 86625
        assert roi.breakdown["estimated_cost"] == 86625
        assert roi.absolute_return == 13375
        assert roi.roi_percent == pytest.approx(15.44)
        assert roi.payback_months == 4
        assert roi.breakdown["financial_risk"] == "high"

    def test_roi_without_value(self, make_scores):
        roi = self.composer.roi(BidDescriptor(), make_scores(risk=90))
        assert roi.roi_percent == 0
        assert roi.absolute_return == 0
        assert roi.payback_months == 1
        assert roi.breakdown["financial_risk"] == "low"

    @pytest.mark.parametrize("final, roi_percent, outcome, confidence, priority", [
        (70, 33.0, DecisionOutcome.ANALYZE_FURTHER, 50, Priority.HIGH),
        (70, 5.0, DecisionOutcome.ANALYZE_FURTHER, 50, Priority.MEDIUM),
        (55, 15.0, DecisionOutcome.DECLINE, 65, Priority.LOW),
        (76, 15.0, DecisionOutcome.PARTICIPATE, 85, Priority.HIGH),
        (76, 15.0, DecisionOutcome.PARTICIPATE, 61, Priority.MEDIUM),
    ])
    def test_priority(self, make_scores, final, roi_percent, outcome, confidence, priority):
        roi = ROIEstimate(roi_percent=roi_percent, absolute_return=0, payback_months=1)
        result = self.composer.priority(make_scores(final=final), make_decision(outcome, confidence), roi)
        assert result == priority

    def test_compose_favourable_bid(self, sample_bid, sample_profile, reference_date, make_scores):
        scores = make_scores(
            financial=100, technical=100, documentary=80, timeline=90, risk=90, competition=80, final=92
        )
        decision = make_decision(DecisionOutcome.PARTICIPATE, 77)
        result = self.composer.compose(sample_bid, sample_profile, scores, decision, reference_date)

        assert result.strategy.strategy == StrategyType.PRICE_COMPETITIVENESS
        assert len(result.alternative_strategies) == 2
        assert result.pricing.suggested_price == 211875
        assert result.roi.roi_percent == pytest.approx(33.33)
        assert result.priority == Priority.HIGH
        assert len(result.timeline) == len(MILESTONES)
        assert result.reference_date == reference_date

        data = result.to_dict()
        assert json.loads(json.dumps(data)) == data
        assert data["decision"]["outcome"] == "participate"
        assert data["timeline"][0]["start_date"] == reference_date.isoformat()
