"""Pydantic input records: the bid under evaluation and the bidding company."""
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edital_engine.utils.terms import days_between, parse_execution_days, parse_validity_months
from edital_engine.utils.text import clean_amount, normalize_code, normalize_text


class CompanySize(str, Enum):
    """Company size tier (porte da empresa)."""

    MEI = "mei"
    MICRO = "micro"
    SMALL = "pequena"
    MEDIUM = "media"
    LARGE = "grande"


class TaxRegime(str, Enum):
    """Brazilian tax regime."""

    SIMPLES_NACIONAL = "simples_nacional"
    LUCRO_PRESUMIDO = "lucro_presumido"
    LUCRO_REAL = "lucro_real"
    MEI = "mei"


SMALL_BUSINESS_SIZES = frozenset({CompanySize.MEI, CompanySize.MICRO, CompanySize.SMALL})


def _lenient_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if item is not None and str(item).strip()]
    return []


def _lenient_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return datetime.strptime(text, "%d/%m/%Y").date()
        except ValueError:
            return None
    return None


def _optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def _lenient_bool(value: Any) -> bool:
    if isinstance(value, str):
        return normalize_text(value) in {"true", "1", "sim", "s", "yes"}
    return bool(value)


class QualificationRequirements(BaseModel):
    """Qualification requirements (requisitos de habilitação) grouped by kind."""

    model_config = ConfigDict(frozen=True)

    technical: list[str] = Field(default_factory=list)
    economic: list[str] = Field(default_factory=list)
    legal: list[str] = Field(default_factory=list)

    @field_validator("technical", "economic", "legal", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        return _lenient_list(value)


class BidDescriptor(BaseModel):
    """
    A public-procurement bid (edital) as supplied by the bid repository.

    Every field has an explicit default. Malformed values are coerced to
    "absent" instead of raising, so one bad field never blocks an evaluation.
    """

    model_config = ConfigDict(frozen=True)

    bid_id: str | None = None
    bid_number: str = ""
    process_number: str | None = None
    modality: str = ""
    judging_criterion: str | None = None

    agency_name: str = ""
    agency_state: str | None = None
    agency_cnpj: str | None = None

    object_description: str = ""
    technical_specifications: list[str] = Field(default_factory=list)
    estimated_value: float | None = None

    opening_date: date | None = None
    question_deadline: date | None = None
    challenge_deadline: date | None = None

    execution_term: Union[int, str, None] = None
    validity_term: Union[int, str, None] = None
    payment_term_days: int = 30

    allows_subcontracting: bool = False
    allows_consortium: bool = False
    small_business_benefit: bool = False

    required_documents: list[str] = Field(default_factory=list)
    qualification: QualificationRequirements = Field(default_factory=QualificationRequirements)

    @field_validator("modality", mode="before")
    @classmethod
    def _normalize_modality(cls, value: Any) -> str:
        return normalize_code(value)

    @field_validator("bid_number", "agency_name", "object_description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("bid_id", "process_number", "judging_criterion", "agency_cnpj", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("agency_state", mode="before")
    @classmethod
    def _normalize_state(cls, value: Any) -> str | None:
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip().upper()

    @field_validator("estimated_value", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float | None:
        return clean_amount(value)

    @field_validator("opening_date", "question_deadline", "challenge_deadline", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> date | None:
        return _lenient_date(value)

    @field_validator("execution_term", "validity_term", mode="before")
    @classmethod
    def _coerce_term(cls, value: Any) -> Union[int, str, None]:
        if isinstance(value, bool):
            return None
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        if isinstance(value, (int, str)):
            return value
        return None

    @field_validator("payment_term_days", mode="before")
    @classmethod
    def _coerce_payment_term(cls, value: Any) -> int:
        amount = clean_amount(value)
        return int(amount) if amount is not None and amount >= 0 else 30

    @field_validator("allows_subcontracting", "allows_consortium", "small_business_benefit", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return _lenient_bool(value)

    @field_validator("technical_specifications", "required_documents", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        return _lenient_list(value)

    @field_validator("qualification", mode="before")
    @classmethod
    def _coerce_qualification(cls, value: Any) -> Any:
        if isinstance(value, QualificationRequirements):
            return value
        if not isinstance(value, dict):
            return {}
        return {
            "technical": value.get("technical", value.get("qualificacao_tecnica")),
            "economic": value.get("economic", value.get("qualificacao_economica")),
            "legal": value.get("legal", value.get("habilitacao_juridica")),
        }

    @property
    def execution_days(self) -> int | None:
        return parse_execution_days(self.execution_term)

    @property
    def validity_months(self) -> int | None:
        return parse_validity_months(self.validity_term)

    def days_until_opening(self, reference_date: date) -> int | None:
        """Days from reference_date to the opening session, None when unknown."""
        return days_between(reference_date, self.opening_date)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BidDescriptor":
        """Build from a collaborator payload, accepting the Portuguese field names."""
        mapped = {_BID_ALIASES.get(key, key): value for key, value in data.items()}
        known = {k: v for k, v in mapped.items() if k in cls.model_fields}
        return cls(**known)


_BID_ALIASES = {
    "id": "bid_id",
    "numero_edital": "bid_number",
    "numero_processo": "process_number",
    "modalidade": "modality",
    "criterio_julgamento": "judging_criterion",
    "orgao_nome": "agency_name",
    "orgao_estado": "agency_state",
    "orgao_cnpj": "agency_cnpj",
    "objeto": "object_description",
    "especificacoes_tecnicas": "technical_specifications",
    "valor_estimado": "estimated_value",
    "data_abertura": "opening_date",
    "data_questionamento": "question_deadline",
    "data_impugnacao": "challenge_deadline",
    "prazo_execucao": "execution_term",
    "prazo_vigencia": "validity_term",
    "prazo_pagamento": "payment_term_days",
    "permite_subcontratacao": "allows_subcontracting",
    "participacao_consorcio": "allows_consortium",
    "permite_me_epp": "small_business_benefit",
    "documentos_exigidos": "required_documents",
    "requisitos_habilitacao": "qualification",
}


class CompanyProfile(BaseModel):
    """The bidding company, as supplied by the company-profile collaborator."""

    model_config = ConfigDict(frozen=True)

    company_id: str | None = None
    name: str = ""
    size: CompanySize = CompanySize.SMALL
    tax_regime: TaxRegime | None = None
    annual_revenue: float | None = None
    state: str = "SP"
    expertise_areas: list[str] = Field(default_factory=lambda: ["tecnologia", "consultoria"])
    known_technologies: list[str] = Field(
        default_factory=lambda: ["javascript", "node.js", "react", "mysql"]
    )
    concurrent_capacity: int = 3

    @field_validator("company_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("size", mode="before")
    @classmethod
    def _coerce_size(cls, value: Any) -> CompanySize:
        try:
            return CompanySize(normalize_code(value) if isinstance(value, str) else value)
        except ValueError:
            return CompanySize.SMALL

    @field_validator("tax_regime", mode="before")
    @classmethod
    def _coerce_regime(cls, value: Any) -> TaxRegime | None:
        try:
            return TaxRegime(normalize_code(value) if isinstance(value, str) else value)
        except ValueError:
            return None

    @field_validator("annual_revenue", mode="before")
    @classmethod
    def _coerce_revenue(cls, value: Any) -> float | None:
        return clean_amount(value)

    @field_validator("state", mode="before")
    @classmethod
    def _coerce_state(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            return "SP"
        return value.strip().upper()

    @field_validator("expertise_areas", "known_technologies", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        return _lenient_list(value)

    @field_validator("concurrent_capacity", mode="before")
    @classmethod
    def _coerce_capacity(cls, value: Any) -> int:
        amount = clean_amount(value)
        return int(amount) if amount is not None and amount > 0 else 3

    @property
    def qualifies_as_small_business(self) -> bool:
        """ME/EPP companies get procedural benefits in public bids."""
        return self.size in SMALL_BUSINESS_SIZES

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompanyProfile":
        """Build from a collaborator payload, accepting the Portuguese field names."""
        mapped = {_COMPANY_ALIASES.get(key, key): value for key, value in data.items()}
        known = {k: v for k, v in mapped.items() if k in cls.model_fields}
        return cls(**known)


_COMPANY_ALIASES = {
    "id": "company_id",
    "razao_social": "name",
    "porte_empresa": "size",
    "regime_tributario": "tax_regime",
    "faturamento_anual": "annual_revenue",
    "estado": "state",
    "areas_atuacao": "expertise_areas",
    "tecnologias_dominadas": "known_technologies",
    "capacidade_simultanea": "concurrent_capacity",
}
