"""
Pytest configuration and shared fixtures for edital engine tests.

Provides:
- Fixed reference date so date arithmetic is reproducible
- Sample bid and company profile factories
- Database fixtures with test isolation
"""
from datetime import date, timedelta
from typing import Any, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from edital_engine.config.logging_config import reset_logging
from edital_engine.models import BidDescriptor, CompanyProfile, ScoreSet
from edital_engine.persistence import AnalysisRepository, Base

REFERENCE_DATE = date(2024, 3, 1)


# =============================================================================
# Sample Data Factories
# =============================================================================

@pytest.fixture
def reference_date() -> date:
    return REFERENCE_DATE


@pytest.fixture
def sample_bid_data() -> dict[str, Any]:
    """Favourable federal auction: mid-size value, small-business benefit, 15 days to opening."""
    return {
        "id": "ED-2024-001",
        "numero_edital": "PE-001/2024",
        "modalidade": "Pregão Eletrônico",
        "orgao_nome": "Ministério da Educação",
        "orgao_estado": "SP",
        "objeto": "Desenvolvimento de sistema web para gestão escolar",
        "especificacoes_tecnicas": ["Aplicação em React", "Banco de dados MySQL"],
        "valor_estimado": "R$ 250.000,00",
        "data_abertura": (REFERENCE_DATE + timedelta(days=15)).isoformat(),
        "prazo_execucao": "90 dias",
        "prazo_vigencia": "12 meses",
        "prazo_pagamento": 30,
        "permite_me_epp": True,
        "documentos_exigidos": ["CNPJ", "Atestado capacidade técnica", "Balanço patrimonial"],
    }


@pytest.fixture
def sample_bid(sample_bid_data) -> BidDescriptor:
    return BidDescriptor.from_dict(sample_bid_data)


@pytest.fixture
def risky_bid() -> BidDescriptor:
    """Large municipal competition with consortium, short execution and opening in 3 days."""
    return BidDescriptor(
        bid_id="ED-2024-002",
        bid_number="CC-014/2024",
        modality="concorrencia",
        agency_name="Prefeitura Municipal de Recife",
        agency_state="PE",
        object_description="Implantação de plataforma de gestão com integração e cloud",
        estimated_value=2_000_000,
        opening_date=REFERENCE_DATE + timedelta(days=3),
        execution_term="20 dias",
        validity_term="12 meses",
        allows_consortium=True,
    )


@pytest.fixture
def sample_profile() -> CompanyProfile:
    return CompanyProfile(
        company_id="EMP-001",
        name="Tech Soluções Ltda",
        size="pequena",
        state="SP",
        expertise_areas=["tecnologia", "consultoria"],
        known_technologies=["javascript", "node.js", "react", "mysql"],
    )


@pytest.fixture
def make_scores():
    """Factory for ScoreSet values; final defaults to the plain mean."""
    def _make(
        financial: int = 70,
        technical: int = 70,
        documentary: int = 70,
        timeline: int = 70,
        risk: int = 70,
        competition: int = 70,
        final: int | None = None,
    ) -> ScoreSet:
        values = [financial, technical, documentary, timeline, risk, competition]
        return ScoreSet(
            financial=financial,
            technical=technical,
            documentary=documentary,
            timeline=timeline,
            risk=risk,
            competition=competition,
            final=final if final is not None else round(sum(values) / len(values)),
        )
    return _make


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def test_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session with automatic rollback."""
    TestingSessionLocal = sessionmaker(autoflush=False, bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def repository(db_session) -> AnalysisRepository:
    return AnalysisRepository(db_session)


# =============================================================================
# Logging
# =============================================================================

@pytest.fixture
def clean_logging():
    reset_logging()
    yield
    reset_logging()
