"""
Viability sub-score rules for a bid (edital) against a company profile.

Each rule starts from a baseline, applies additive adjustments and clamps the
result to [0, 100]. Rules are fail-open: an absent field contributes no
adjustment, and an unexpected error inside one rule yields that rule's
baseline instead of aborting the whole evaluation.
"""
import functools
import logging
from datetime import date
from typing import Callable, Optional

from edital_engine.config.settings import settings
from edital_engine.models.bid import BidDescriptor, CompanyProfile
from edital_engine.models.results import ScoreSet
from edital_engine.scoring import keywords as kw
from edital_engine.scoring.aggregator import ScoreAggregator
from edital_engine.utils.terms import clamp
from edital_engine.utils.text import contains_any, find_keywords, normalize_text

logger = logging.getLogger(__name__)

ScoreRule = Callable[[BidDescriptor, CompanyProfile, date], int]

FINANCIAL_BASE = 50
TECHNICAL_BASE = 50
DOCUMENTARY_BASE = 70
TIMELINE_BASE = 50
RISK_BASE = 80
COMPETITION_BASE = 50


def fail_open(baseline: int) -> Callable[[ScoreRule], ScoreRule]:
    """Return the rule's baseline when the rule trips over unexpected data."""
    def decorator(rule: ScoreRule) -> ScoreRule:
        @functools.wraps(rule)
        def wrapper(bid: BidDescriptor, profile: CompanyProfile, reference_date: date) -> int:
            try:
                return rule(bid, profile, reference_date)
            except (TypeError, ValueError, AttributeError, KeyError) as e:
                logger.warning(f"{rule.__name__} fell back to baseline {baseline}: {e}")
                return clamp(baseline)
        return wrapper
    return decorator


def _value(bid: BidDescriptor) -> float:
    return bid.estimated_value if bid.estimated_value and bid.estimated_value > 0 else 0.0


def _ideal_band(profile: CompanyProfile) -> tuple[float, float]:
    cfg = settings.scoring
    revenue = profile.annual_revenue
    if revenue and revenue > 0:
        return revenue * cfg.ideal_band_min_ratio, revenue * cfg.ideal_band_max_ratio
    return cfg.default_band_min, cfg.default_band_max


def required_technologies(bid: BidDescriptor) -> list[str]:
    """Technologies named in the object or the technical specifications."""
    text = " ".join([bid.object_description, *bid.technical_specifications])
    return find_keywords(text, kw.TECHNOLOGY_KEYWORDS)


@fail_open(FINANCIAL_BASE)
def financial_score(bid: BidDescriptor, profile: CompanyProfile, reference_date: date) -> int:
    cfg = settings.scoring
    score = FINANCIAL_BASE

    value = _value(bid)
    if value > 0:
        band_min, band_max = _ideal_band(profile)
        if band_min <= value <= band_max:
            score += 30
        elif value < band_min:
            score += 15
        elif value <= band_max * 2:
            score += 20
        else:
            score += 5

    if kw.AUCTION_MODALITY in bid.modality:
        score += 10
    elif kw.OPEN_COMPETITION_MODALITY in bid.modality:
        score -= 5

    if bid.payment_term_days <= cfg.payment_term_fast:
        score += 15
    elif bid.payment_term_days <= cfg.payment_term_acceptable:
        score += 5
    else:
        score -= 10

    return clamp(score)


@fail_open(TECHNICAL_BASE)
def technical_score(bid: BidDescriptor, profile: CompanyProfile, reference_date: date) -> int:
    score = TECHNICAL_BASE
    description = bid.object_description

    if contains_any(description, profile.expertise_areas) or contains_any(
        description, kw.GENERIC_TECH_KEYWORDS
    ):
        score += 25
    else:
        score -= 15

    complexity = find_keywords(
        " ".join([description, *bid.technical_specifications]), kw.COMPLEXITY_KEYWORDS
    )
    if not complexity:
        score += 15
    elif len(complexity) <= 2:
        score += 10
    elif len(complexity) <= 4:
        score += 5
    else:
        score -= 10

    required = required_technologies(bid)
    if not required:
        score += 5
    else:
        known = [normalize_text(tech) for tech in profile.known_technologies]
        matched = [tech for tech in required if any(tech in k for k in known)]
        # JS-style half-up rounding of the match ratio
        score += int(len(matched) / len(required) * 20 + 0.5)

    return clamp(score)


def classify_documents(documents: list[str]) -> dict[str, int]:
    """Count required documents per bucket; each document lands in its first matching bucket."""
    counts = {"basic": 0, "technical": 0, "financial": 0}
    for document in documents:
        text = normalize_text(document)
        if any(key in text for key in kw.BASIC_DOCUMENTS):
            counts["basic"] += 1
        elif any(key in text for key in kw.TECHNICAL_DOCUMENTS):
            counts["technical"] += 1
        elif any(key in text for key in kw.FINANCIAL_DOCUMENTS):
            counts["financial"] += 1
    return counts


@fail_open(DOCUMENTARY_BASE)
def documentary_score(bid: BidDescriptor, profile: CompanyProfile, reference_date: date) -> int:
    score = DOCUMENTARY_BASE
    counts = classify_documents(bid.required_documents)

    if counts["technical"] > 3:
        score -= 20
    elif counts["technical"] > 1:
        score -= 10

    if counts["financial"] > 2:
        score -= 15
    elif counts["financial"] > 0:
        score -= 5

    if bid.small_business_benefit and profile.qualifies_as_small_business:
        score += 15

    technical_requirements = len(bid.qualification.technical)
    if technical_requirements > 5:
        score -= 15
    elif technical_requirements > 2:
        score -= 8

    return clamp(score)


@fail_open(TIMELINE_BASE)
def timeline_score(bid: BidDescriptor, profile: CompanyProfile, reference_date: date) -> int:
    score = TIMELINE_BASE

    days_to_opening = bid.days_until_opening(reference_date)
    if days_to_opening is not None:
        if days_to_opening >= 15:
            score += 20
        elif days_to_opening >= 10:
            score += 10
        elif days_to_opening < 5:
            score -= 20

    execution_days = bid.execution_days
    if execution_days:
        if execution_days >= 180:
            score += 15
        elif execution_days >= 90:
            score += 10
        elif execution_days >= 30:
            score += 5
        else:
            score -= 15

    validity_months = bid.validity_months
    if validity_months:
        if validity_months >= 12:
            score += 10
        elif validity_months >= 6:
            score += 5

    return clamp(score)


@fail_open(RISK_BASE)
def risk_score(bid: BidDescriptor, profile: CompanyProfile, reference_date: date) -> int:
    score = RISK_BASE

    agency = bid.agency_name
    if contains_any(agency, kw.FEDERAL_AGENCY_KEYWORDS):
        score += 10
    elif contains_any(agency, kw.MUNICIPAL_AGENCY_KEYWORDS):
        score -= 5

    if kw.EMERGENCY_MODALITY in bid.modality:
        score -= 20
    elif kw.PRICE_REGISTRY_MODALITY in bid.modality:
        score -= 10

    value = _value(bid)
    if value > 1_000_000:
        score -= 15
    elif value > 500_000:
        score -= 10
    elif 0 < value < 50_000:
        score -= 5

    if bid.allows_subcontracting:
        score += 5
    if bid.allows_consortium:
        score -= 10

    execution_days = bid.execution_days
    if execution_days and execution_days < 30:
        score -= 20

    score -= 10 * len(find_keywords(bid.object_description, kw.HIGH_RISK_KEYWORDS))

    return clamp(score)


@fail_open(COMPETITION_BASE)
def competition_score(bid: BidDescriptor, profile: CompanyProfile, reference_date: date) -> int:
    score = COMPETITION_BASE

    value = _value(bid)
    if value < 100_000:
        score += 25
    elif value < 300_000:
        score += 15
    elif value < 1_000_000:
        score += 5
    else:
        score -= 15

    score += 8 * len(find_keywords(bid.object_description, kw.SPECIALIZATION_KEYWORDS))

    if bid.agency_state:
        if bid.agency_state == profile.state:
            score += 10
        elif bid.agency_state not in kw.MAJOR_MARKET_STATES:
            score += 15

    if kw.INVITATION_MODALITY in bid.modality:
        score += 30
    elif kw.LIMITED_TENDER_MODALITY in bid.modality:
        score += 10
    elif kw.AUCTION_MODALITY in bid.modality:
        score -= 10

    if bid.small_business_benefit and profile.qualifies_as_small_business:
        score += 15

    days_to_opening = bid.days_until_opening(reference_date)
    if days_to_opening is not None and days_to_opening < 7:
        # Short notice keeps some competitors out
        score += 10

    return clamp(score)


class ScoreCalculator:
    """
    Computes the six viability sub-scores and the weighted final score.

    Stateless apart from its aggregator; safe to share across threads.
    """

    def __init__(self, aggregator: Optional[ScoreAggregator] = None):
        self.aggregator = aggregator or ScoreAggregator()

    def calculate(
        self,
        bid: BidDescriptor,
        profile: Optional[CompanyProfile] = None,
        reference_date: Optional[date] = None,
    ) -> ScoreSet:
        profile = profile or CompanyProfile()
        reference_date = reference_date or date.today()

        scores = self.aggregator.build(
            financial=financial_score(bid, profile, reference_date),
            technical=technical_score(bid, profile, reference_date),
            documentary=documentary_score(bid, profile, reference_date),
            timeline=timeline_score(bid, profile, reference_date),
            risk=risk_score(bid, profile, reference_date),
            competition=competition_score(bid, profile, reference_date),
        )
        logger.debug(f"Scores for bid {bid.bid_number or bid.bid_id}: {scores}")
        return scores
