"""
Exception hierarchy for the edital engine.
"""


class EditalEngineError(Exception):
    """Base class for engine errors."""


class WeightConfigurationError(EditalEngineError, ValueError):
    """Raised when a score weight vector is malformed (negative or not summing to 1.0)."""


class BidNotFoundError(EditalEngineError, LookupError):
    """Raised when a bid id is unknown to the bid source."""

    def __init__(self, bid_id: str):
        super().__init__(f"Bid not found: {bid_id}")
        self.bid_id = bid_id


class CompanyNotFoundError(EditalEngineError, LookupError):
    """Raised when a company id is unknown to the company source."""

    def __init__(self, company_id: str):
        super().__init__(f"Company profile not found: {company_id}")
        self.company_id = company_id


class BatchLimitExceededError(EditalEngineError, ValueError):
    """Raised when a batch evaluation request exceeds the configured item limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Batch of {size} bids exceeds the limit of {limit}")
        self.size = size
        self.limit = limit
