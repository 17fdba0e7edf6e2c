"""
MexKYC Address Comparator

Normalizes Mexican addresses and scores how likely two of them are the
same place.

Normalization:
- State spellings collapse to canonical tokens (every Mexico City
  variant -> CDMX, every State of Mexico variant -> EDOMEX)
- Street-type prefixes are stripped (CALLE, AV., PRIVADA, ...)
- Manzana / lote tokens are pulled out of exterior / interior numbers

Scoring (weights sum to 1.0):
    postal code 0.30, colonia 0.25, municipality 0.20,
    state 0.10, street 0.10, number 0.05

Two addresses are equivalent when the confidence reaches 0.75.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from ..models import Address
from .text import fold, token_overlap


# =============================================================================
# Dictionaries
# =============================================================================

STATE_MAP: dict[str, str] = {
    "CIUDAD DE MEXICO": "CDMX",
    "CDMX": "CDMX",
    "CD MX": "CDMX",
    "CD DE MEXICO": "CDMX",
    "D F": "CDMX",
    "DF": "CDMX",
    "DISTRITO FEDERAL": "CDMX",
    "MEXICO D F": "CDMX",
    "MEXICO DF": "CDMX",
    "ESTADO DE MEXICO": "EDOMEX",
    "EDO DE MEXICO": "EDOMEX",
    "EDO MEXICO": "EDOMEX",
    "EDO MEX": "EDOMEX",
    "EDOMEX": "EDOMEX",
    "EDO MEX MEXICO": "EDOMEX",
    "MEX": "EDOMEX",
    "MEXICO": "EDOMEX",
    "NL": "NUEVO LEON",
    "N L": "NUEVO LEON",
    "JAL": "JALISCO",
    "QRO": "QUERETARO",
    "GTO": "GUANAJUATO",
    "PUE": "PUEBLA",
}

STREET_TYPE_PREFIXES: tuple[str, ...] = (
    "CALLE", "C", "CLL",
    "AVENIDA", "AV", "AVE", "AVDA",
    "PRIVADA", "PRIV",
    "CERRADA", "CDA",
    "CALZADA", "CALZ",
    "BOULEVARD", "BLVD", "BLV",
    "PROLONGACION", "PROL",
    "ANDADOR", "CIRCUITO", "RETORNO", "CARRETERA", "PASEO",
)

COLONIA_PREFIXES: tuple[str, ...] = ("COLONIA", "COL", "FRACCIONAMIENTO", "FRACC", "BARRIO")
MUNICIPIO_PREFIXES: tuple[str, ...] = ("ALCALDIA", "DELEGACION", "MUNICIPIO DE", "MUNICIPIO", "MPIO")

_MANZANA_RE = re.compile(r"\b(?:MZA|MZ|MANZANA)\s*(\w+)")
_LOTE_RE = re.compile(r"\b(?:LTE|LT|LOTE)\s*(\w+)")
_NUMBER_NOISE_RE = re.compile(r"\b(?:NUMERO|NUM|NO|EXT|INT)\b|#")


# =============================================================================
# Weights
# =============================================================================

WEIGHT_CP = 0.30
WEIGHT_COLONIA = 0.25
WEIGHT_MUNICIPIO = 0.20
WEIGHT_STATE = 0.10
WEIGHT_STREET = 0.10
WEIGHT_NUMBER = 0.05

EQUIVALENCE_THRESHOLD = 0.75


# =============================================================================
# Normalization
# =============================================================================

def normalize_state(value: Optional[str]) -> str:
    """Collapse state spellings; unknown states are just folded."""
    folded = fold(value)
    return STATE_MAP.get(folded, folded)


def _strip_prefix(value: str, prefixes: tuple[str, ...]) -> str:
    for prefix in prefixes:
        if value.startswith(prefix + " "):
            return value[len(prefix) + 1:].strip()
    return value


def strip_street_type(value: Optional[str]) -> str:
    """'AV. PASEO DE LA REFORMA' -> 'PASEO DE LA REFORMA' (one prefix only)."""
    return _strip_prefix(fold(value), STREET_TYPE_PREFIXES)


def normalize_colonia(value: Optional[str]) -> str:
    return _strip_prefix(fold(value), COLONIA_PREFIXES)


def normalize_municipio(value: Optional[str]) -> str:
    return _strip_prefix(fold(value), MUNICIPIO_PREFIXES)


def normalize_cp(value: Optional[str]) -> str:
    """First five digits of the postal code, '' when absent."""
    digits = re.sub(r"\D", "", value or "")
    return digits[:5]


def extract_block_lot(*values: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """Pull manzana and lote tokens out of number fields."""
    manzana: Optional[str] = None
    lote: Optional[str] = None
    for value in values:
        text = fold(value)
        if not text:
            continue
        if manzana is None:
            match = _MANZANA_RE.search(text)
            if match:
                manzana = match.group(1)
        if lote is None:
            match = _LOTE_RE.search(text)
            if match:
                lote = match.group(1)
    return manzana, lote


def normalize_number(value: Optional[str]) -> str:
    text = _NUMBER_NOISE_RE.sub(" ", fold(value))
    return re.sub(r"\s+", "", text)


@dataclass(frozen=True)
class NormalizedAddress:
    """Comparison-ready view of an Address."""
    street: str
    number: str
    manzana: Optional[str]
    lote: Optional[str]
    colonia: str
    municipio: str
    state: str
    cp: str


def normalize_address(address: Address) -> NormalizedAddress:
    manzana, lote = extract_block_lot(address.ext_number, address.int_number, address.street)
    return NormalizedAddress(
        street=strip_street_type(address.street),
        number=normalize_number(address.ext_number),
        manzana=manzana,
        lote=lote,
        colonia=normalize_colonia(address.colonia),
        municipio=normalize_municipio(address.municipio),
        state=normalize_state(address.estado),
        cp=normalize_cp(address.cp),
    )


# =============================================================================
# Comparison
# =============================================================================

@dataclass
class AddressComparison:
    """Result of comparing two addresses."""
    confidence: float
    equivalent: bool
    matched_components: list[str] = field(default_factory=list)


def _streets_match(a: str, b: str) -> bool:
    if not a or not b:
        return False
    if a == b or a in b or b in a:
        return True
    return token_overlap(a, b) > 0.7


def _numbers_match(a: NormalizedAddress, b: NormalizedAddress) -> bool:
    if a.manzana and b.manzana:
        return a.manzana == b.manzana and a.lote == b.lote
    return bool(a.number) and a.number == b.number


def compare_addresses(
    a: Optional[Address],
    b: Optional[Address],
    threshold: float = EQUIVALENCE_THRESHOLD,
) -> AddressComparison:
    """
    Weighted confidence that two addresses denote the same place.

    Symmetric in its arguments. A missing address compares at 0.0.
    """
    if a is None or b is None:
        return AddressComparison(confidence=0.0, equivalent=False)

    na = normalize_address(a)
    nb = normalize_address(b)
    score = 0.0
    matched: list[str] = []

    if na.cp and na.cp == nb.cp:
        score += WEIGHT_CP
        matched.append("cp")
    if na.colonia and na.colonia == nb.colonia:
        score += WEIGHT_COLONIA
        matched.append("colonia")
    if na.municipio and nb.municipio and (
        na.municipio == nb.municipio
        or na.municipio in nb.municipio
        or nb.municipio in na.municipio
    ):
        score += WEIGHT_MUNICIPIO
        matched.append("municipio")
    if na.state and na.state == nb.state:
        score += WEIGHT_STATE
        matched.append("estado")
    if _streets_match(na.street, nb.street):
        score += WEIGHT_STREET
        matched.append("street")
    if _numbers_match(na, nb):
        score += WEIGHT_NUMBER
        matched.append("number")

    confidence = round(score, 4)
    return AddressComparison(
        confidence=confidence,
        equivalent=confidence >= threshold,
        matched_components=matched,
    )


def addresses_equivalent(
    a: Optional[Address],
    b: Optional[Address],
    threshold: float = EQUIVALENCE_THRESHOLD,
) -> bool:
    return compare_addresses(a, b, threshold).equivalent
