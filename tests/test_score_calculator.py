from datetime import timedelta

import pytest

from edital_engine.models import BidDescriptor, CompanyProfile
from edital_engine.scoring import (
    ScoreCalculator,
    classify_documents,
    competition_score,
    documentary_score,
    financial_score,
    required_technologies,
    risk_score,
    technical_score,
    timeline_score,
)
from edital_engine.scoring.score_calculator import fail_open


class TestSubScores:

    def test_favourable_bid(self, sample_bid, sample_profile, reference_date):
        assert financial_score(sample_bid, sample_profile, reference_date) == 100
        assert technical_score(sample_bid, sample_profile, reference_date) == 100
        assert documentary_score(sample_bid, sample_profile, reference_date) == 80
        assert timeline_score(sample_bid, sample_profile, reference_date) == 90
        assert risk_score(sample_bid, sample_profile, reference_date) == 90
        assert competition_score(sample_bid, sample_profile, reference_date) == 80

    def test_risky_bid_is_penalised(self, risky_bid, sample_profile, reference_date):
        # municipal -5, value > 1M -15, consortium -10, execution < 30 days -20
        assert risk_score(risky_bid, sample_profile, reference_date) == 30
        # opening < 5 days -20, execution < 30 days -15, validity 12 months +10
        assert timeline_score(risky_bid, sample_profile, reference_date) == 25
        assert financial_score(risky_bid, sample_profile, reference_date) == 65
        assert technical_score(risky_bid, sample_profile, reference_date) == 50
        assert documentary_score(risky_bid, sample_profile, reference_date) == 70
        assert competition_score(risky_bid, sample_profile, reference_date) == 60

    def test_financial_band_follows_revenue(self, reference_date):
        profile = CompanyProfile(annual_revenue=1_000_000)
        bid = BidDescriptor(estimated_value=400_000, payment_term_days=30)
        # band is 50K-300K; 400K is within twice the band maximum
        assert financial_score(bid, profile, reference_date) == 85

    def test_financial_slow_payment(self, reference_date):
        bid = BidDescriptor(estimated_value=100_000, payment_term_days=90)
        assert financial_score(bid, CompanyProfile(), reference_date) == 70

    def test_partial_technology_match(self, reference_date):
        bid = BidDescriptor(
            object_description="Sistema de gestão",
            technical_specifications=["Backend em Python", "Banco PostgreSQL", "Frontend React"],
        )
        assert required_technologies(bid) == ["python", "react", "postgresql"]
        # +25 expertise, +15 no complexity, round(1/3 * 20) = 7
        assert technical_score(bid, CompanyProfile(), reference_date) == 97

    def test_complexity_does_not_match_inside_words(self, reference_date):
        bid = BidDescriptor(object_description="Consultoria em tecnologia da informação")
        assert technical_score(bid, CompanyProfile(), reference_date) == 95

    def test_heavy_documentation(self, reference_date):
        bid = BidDescriptor(
            required_documents=[f"Atestado capacidade técnica {i}" for i in range(4)],
            qualification={"technical": [f"Requisito {i}" for i in range(6)]},
        )
        assert documentary_score(bid, CompanyProfile(size="grande"), reference_date) == 35

    def test_classify_documents(self):
        counts = classify_documents([
            "CNPJ", "Certidão municipal", "Atestado capacidade técnica", "Balanço patrimonial",
            "Capital social", "Patrimônio líquido", "Declaração diversa",
        ])
        assert counts == {"basic": 2, "technical": 1, "financial": 3}

    def test_absent_fields_make_no_adjustment(self, reference_date):
        bid = BidDescriptor()
        profile = CompanyProfile()
        assert timeline_score(bid, profile, reference_date) == 50
        assert risk_score(bid, profile, reference_date) == 80
        # absent value counts as zero for competition
        assert competition_score(bid, profile, reference_date) == 75

    @pytest.mark.parametrize("modality", [
        "registro_preco", "Registro de Preço", "Sistema de Registro de Preços",
    ])
    def test_price_registry_adds_risk(self, reference_date, modality):
        bid = BidDescriptor(modality=modality)
        assert risk_score(bid, CompanyProfile(), reference_date) == 70

    @pytest.mark.parametrize("modality", ["tomada_preco", "Tomada de Preço", "Tomada de Preços"])
    def test_limited_tender_reduces_competition(self, reference_date, modality):
        bid = BidDescriptor(modality=modality)
        assert competition_score(bid, CompanyProfile(), reference_date) == 85

    def test_scores_are_clamped_at_zero(self, reference_date):
        bid = BidDescriptor(
            modality="emergencia",
            object_description=(
                "Missão crítica de segurança nacional com dados sensíveis, "
                "alta disponibilidade 24x7 e SLA rigoroso"
            ),
            estimated_value=5_000_000,
            allows_consortium=True,
            execution_term=10,
        )
        assert risk_score(bid, CompanyProfile(), reference_date) == 0

    def test_short_notice_reduces_competition(self, reference_date):
        soon = BidDescriptor(estimated_value=500_000, opening_date=reference_date + timedelta(days=6))
        later = BidDescriptor(estimated_value=500_000, opening_date=reference_date + timedelta(days=20))
        profile = CompanyProfile()
        assert competition_score(soon, profile, reference_date) == competition_score(later, profile, reference_date) + 10


class TestFailOpen:

    def test_error_returns_baseline(self, sample_bid, sample_profile, reference_date):
        @fail_open(42)
        def broken(bid, profile, reference_date):
            raise TypeError("unexpected")

        assert broken(sample_bid, sample_profile, reference_date) == 42

    def test_unexpected_error_types_propagate(self, sample_bid, sample_profile, reference_date):
        @fail_open(42)
        def broken(bid, profile, reference_date):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            broken(sample_bid, sample_profile, reference_date)


class TestScoreCalculator:

    def test_calculate_favourable_bid(self, sample_bid, sample_profile, reference_date):
        scores = ScoreCalculator().calculate(sample_bid, sample_profile, reference_date)
        assert scores.final == 92

    def test_calculate_risky_bid(self, risky_bid, sample_profile, reference_date):
        scores = ScoreCalculator().calculate(risky_bid, sample_profile, reference_date)
        assert scores.final == 51

    def test_all_scores_within_bounds(self, risky_bid, sample_bid, reference_date):
        calculator = ScoreCalculator()
        for bid in (sample_bid, risky_bid, BidDescriptor()):
            scores = calculator.calculate(bid, CompanyProfile(), reference_date)
            for value in scores.to_dict().values():
                assert 0 <= value <= 100

    def test_deterministic(self, sample_bid, sample_profile, reference_date):
        calculator = ScoreCalculator()
        first = calculator.calculate(sample_bid, sample_profile, reference_date)
        second = calculator.calculate(sample_bid, sample_profile, reference_date)
        assert first == second

    def test_defaults_profile_and_date(self, sample_bid):
        scores = ScoreCalculator().calculate(sample_bid)
        assert 0 <= scores.final <= 100
