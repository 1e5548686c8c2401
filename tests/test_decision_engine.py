import pytest

from edital_engine.config import DecisionSettings
from edital_engine.decision import DecisionEngine, describe_factor
from edital_engine.models import DecisionOutcome, FactorPolarity, ScoreSet


class TestDecisionEngine:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.engine = DecisionEngine()

    @pytest.mark.parametrize("final, outcome", [
        (100, DecisionOutcome.PARTICIPATE),
        (75, DecisionOutcome.PARTICIPATE),
        (74, DecisionOutcome.ANALYZE_FURTHER),
        (60, DecisionOutcome.ANALYZE_FURTHER),
        (59, DecisionOutcome.DECLINE),
        (0, DecisionOutcome.DECLINE),
    ])
    def test_thresholds(self, make_scores, final, outcome):
        decision = self.engine.decide(make_scores(final=final))
        assert decision.outcome == outcome

    @pytest.mark.parametrize("final, confidence", [
        (75, 60),
        (90, 75),
        (100, 85),
        (74, 54),
        (60, 40),
        (59, 61),
        (30, 90),
        (0, 100),
    ])
    def test_confidence(self, make_scores, final, confidence):
        assert self.engine.decide(make_scores(final=final)).confidence == confidence

    def test_participate_confidence_capped(self):
        engine = DecisionEngine(DecisionSettings(participate_base_confidence=90))
        scores = ScoreSet(70, 70, 70, 70, 70, 70, 100)
        assert engine.decide(scores).confidence == 95

    def test_decisive_factors(self, make_scores):
        scores = make_scores(financial=85, technical=80, documentary=60, timeline=40, risk=41, competition=10)
        factors = self.engine.extract_decisive_factors(scores)
        assert [(f.name, f.polarity) for f in factors] == [
            ("financial", FactorPolarity.POSITIVE),
            ("technical", FactorPolarity.POSITIVE),
            ("timeline", FactorPolarity.NEGATIVE),
            ("competition", FactorPolarity.NEGATIVE),
        ]
        assert factors[0].description == describe_factor("financial", FactorPolarity.POSITIVE)

    def test_many_negative_factors_reduce_confidence(self, make_scores):
        scores = make_scores(financial=30, technical=20, documentary=40, timeline=90, risk=90, competition=90, final=50)
        decision = self.engine.decide(scores)
        assert decision.outcome == DecisionOutcome.DECLINE
        assert len(decision.negative_factors) == 3
        # 60 + (60 - 50) = 70, minus 20
        assert decision.confidence == 50

    def test_negative_penalty_has_floor(self, make_scores):
        scores = make_scores(financial=10, technical=10, documentary=10, timeline=10, risk=10, competition=10, final=70)
        decision = self.engine.decide(scores)
        assert decision.outcome == DecisionOutcome.ANALYZE_FURTHER
        # 40 + 10 = 50, minus 20 = 30
        assert decision.confidence == 30

        scores = make_scores(financial=10, technical=10, documentary=10, timeline=10, risk=10, competition=10, final=62)
        assert self.engine.decide(scores).confidence == 30

    def test_two_negative_factors_keep_confidence(self, make_scores):
        scores = make_scores(financial=20, technical=20, final=65)
        assert self.engine.decide(scores).confidence == 45

    @pytest.mark.parametrize("final", range(0, 101, 5))
    def test_confidence_bounds(self, make_scores, final):
        worst = make_scores(financial=0, technical=0, documentary=0, timeline=0, risk=0, competition=0, final=final)
        best = make_scores(financial=100, technical=100, documentary=100, timeline=100, risk=100, competition=100, final=final)
        for scores in (worst, best):
            assert 0 <= self.engine.decide(scores).confidence <= 100

    def test_justification_per_outcome(self, make_scores):
        justifications = {
            self.engine.decide(make_scores(final=final)).justification for final in (90, 65, 20)
        }
        assert len(justifications) == 3

    def test_unknown_factor_description(self):
        assert describe_factor("unknown", FactorPolarity.POSITIVE) == "Relevant factor for the decision"
