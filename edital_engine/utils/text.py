"""
Text processing utilities for edital data.
"""
import math
import re
import unicodedata
from typing import Iterable, Union


def normalize_text(text: object) -> str:
    """
    Normalize free text for keyword matching.

    Lower-cases, strips accents and collapses whitespace, so that
    "Integração  Complexa" and "integracao complexa" compare equal.

    Examples:
        >>> normalize_text("Pregão Eletrônico")
        'pregao eletronico'
        >>> normalize_text(None)
        ''
    """
    if not isinstance(text, str):
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.lower().split())


# Connector words dropped from codes so "Tomada de Preços" matches "tomada_preco"
CODE_CONNECTORS = frozenset({"de", "da", "do", "das", "dos", "e"})


def normalize_code(value: object) -> str:
    """
    Normalize an enumerated label such as a procurement modality.

    Examples:
        >>> normalize_code("Registro de Preço")
        'registro_preco'
        >>> normalize_code("tomada-preco")
        'tomada_preco'
    """
    words = re.split(r"[\s\-_]+", normalize_text(value))
    return "_".join(word for word in words if word and word not in CODE_CONNECTORS)


def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(normalize_text(keyword)) + r"(?![a-z0-9])")


def find_keywords(text: str, keywords: Iterable[str]) -> list[str]:
    """
    Return the keywords that occur in text on word boundaries.

    Both sides are normalized first. The result keeps the order of keywords.

    Examples:
        >>> find_keywords("Sistema em Kubernetes na AWS", ["aws", "kubernetes", "ia"])
        ['aws', 'kubernetes']
    """
    normalized = normalize_text(text)
    if not normalized:
        return []
    return [kw for kw in keywords if _keyword_pattern(kw).search(normalized)]


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """True if any keyword occurs in text on word boundaries."""
    return bool(find_keywords(text, keywords))


def clean_amount(value: Union[str, int, float, None]) -> float | None:
    """
    Clean and convert monetary values to float.

    Accepts Brazilian ("R$ 1.234,56") and plain ("1234.56") notations.

    Args:
        value: Raw amount value

    Returns:
        Cleaned float value, or None if the value is absent or malformed

    Examples:
        >>> clean_amount("R$ 1.234.567,89")
        1234567.89
        >>> clean_amount(50000)
        50000.0
        >>> clean_amount("n/a") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None

    if not isinstance(value, str):
        return None

    cleaned = value.replace("R$", "").replace("$", "").replace(" ", "").strip()
    if not cleaned:
        return None

    if "," in cleaned and "." in cleaned:
        # Whichever separator comes last is the decimal one
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if re.search(r",\d{1,2}$", cleaned):
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif cleaned.count(".") > 1 or re.fullmatch(r"\d{1,3}\.\d{3}", cleaned):
        cleaned = cleaned.replace(".", "")

    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None
