"""
Persistence: analysis records, repository and read-only sources.
"""
from .database import AnalysisRecord, AnalysisType, Base, StoredRecommendation
from .repository import AnalysisRepository
from .session import SessionLocal, create_db_engine, get_db, init_db
from .sources import BidSource, CompanySource, InMemoryBidSource, InMemoryCompanySource

__all__ = [
    "AnalysisRecord",
    "AnalysisRepository",
    "AnalysisType",
    "Base",
    "BidSource",
    "CompanySource",
    "InMemoryBidSource",
    "InMemoryCompanySource",
    "SessionLocal",
    "StoredRecommendation",
    "create_db_engine",
    "get_db",
    "init_db",
]
