"""
Read-only sources for bids and company profiles.
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, Union

from edital_engine.exceptions import BidNotFoundError, CompanyNotFoundError
from edital_engine.models.bid import BidDescriptor, CompanyProfile


class BidSource(ABC):
    """Looks up bid descriptors by id."""

    @abstractmethod
    def fetch_bid(self, bid_id: str) -> BidDescriptor:
        """Return the bid or raise BidNotFoundError."""


class CompanySource(ABC):
    """Looks up company profiles by id."""

    @abstractmethod
    def fetch_company(self, company_id: str) -> CompanyProfile:
        """Return the profile or raise CompanyNotFoundError."""


class InMemoryBidSource(BidSource):
    def __init__(self, bids: Iterable[Union[BidDescriptor, dict[str, Any]]] = ()):
        self._bids: dict[str, BidDescriptor] = {}
        for bid in bids:
            self.add(bid)

    def add(self, bid: Union[BidDescriptor, dict[str, Any]]) -> BidDescriptor:
        if isinstance(bid, dict):
            bid = BidDescriptor.from_dict(bid)
        if not bid.bid_id:
            raise ValueError("Bid must have an id to be registered")
        self._bids[bid.bid_id] = bid
        return bid

    def fetch_bid(self, bid_id: str) -> BidDescriptor:
        try:
            return self._bids[bid_id]
        except KeyError:
            raise BidNotFoundError(bid_id) from None


class InMemoryCompanySource(CompanySource):
    def __init__(self, companies: Iterable[Union[CompanyProfile, dict[str, Any]]] = ()):
        self._companies: dict[str, CompanyProfile] = {}
        for company in companies:
            self.add(company)

    def add(self, company: Union[CompanyProfile, dict[str, Any]]) -> CompanyProfile:
        if isinstance(company, dict):
            company = CompanyProfile.from_dict(company)
        if not company.company_id:
            raise ValueError("Company must have an id to be registered")
        self._companies[company.company_id] = company
        return company

    def fetch_company(self, company_id: str) -> CompanyProfile:
        try:
            return self._companies[company_id]
        except KeyError:
            raise CompanyNotFoundError(company_id) from None
