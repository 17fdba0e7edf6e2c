"""
MexKYC Text Canonicalization

Normalization helpers for Mexican names, entities and tax IDs:
- Accent folding (ELOÍSA -> ELOISA)
- Punctuation and whitespace collapsing
- Legal suffix canonicalization (S.A. de C.V. -> SA DE CV)
- Order-independent token overlap
- RFC shape detection (3-letter corporate vs 4-letter personal)
- Surname units for the family heuristic (DE LA CRUZ stays one unit)
"""
from __future__ import annotations

import re
import unicodedata
from typing import Optional


# =============================================================================
# Dictionaries
# =============================================================================

NICKNAME_MAP: dict[str, tuple[str, ...]] = {
    "JOSE": ("PEPE", "CHEPE", "PEPITO"),
    "MARIA": ("MA", "MARI", "MARY"),
    "FRANCISCO": ("PACO", "PANCHO", "FRANK", "CISCO"),
    "MANUEL": ("MANOLO", "MANNY", "MANUELITO"),
    "GUADALUPE": ("LUPE", "LUPITA"),
    "JESUS": ("CHUCHO", "CHUY", "JESSE"),
    "ANTONIO": ("TONO", "TONY"),
    "MIGUEL": ("MIKE", "MICKY"),
    "FERNANDO": ("NANDO", "FERNIE"),
    "ROBERTO": ("BETO", "BOB", "BOBBY"),
    "RICARDO": ("RICKY", "RICK"),
    "EDUARDO": ("EDDIE", "LALO", "EDU"),
    "RAFAEL": ("RAFA", "RALPH"),
    "CARLOS": ("CHARLIE", "CARLITOS"),
    "LUIS": ("LUCHO", "LOUIE"),
    "ENRIQUE": ("QUIQUE", "HENRY", "KIKE"),
    "JORGE": ("GEORGE", "COQUE"),
    "TERESA": ("TERE", "TERESITA"),
    "PATRICIA": ("PATY", "PATTY"),
    "ALEJANDRO": ("ALEX", "JANDRO"),
    "GUILLERMO": ("MEMO", "WILLY"),
}

_NICKNAME_LOOKUP: dict[str, str] = {
    nickname: canonical
    for canonical, nicknames in NICKNAME_MAP.items()
    for nickname in nicknames
}

# Longest patterns first; applied to text with dots and commas removed.
LEGAL_SUFFIX_PATTERNS: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(pattern), replacement)
    for pattern, replacement in (
        (r"\bSOCIEDAD ANONIMA PROMOTORA DE INVERSION DE CAPITAL VARIABLE\b", "SAPI DE CV"),
        (r"\bSOCIEDAD ANONIMA DE CAPITAL VARIABLE\b", "SA DE CV"),
        (r"\bSOCIEDAD DE RESPONSABILIDAD LIMITADA DE CAPITAL VARIABLE\b", "S DE RL DE CV"),
        (r"\bS ?A ?P ?I ?DE ?C ?V\b", "SAPI DE CV"),
        (r"\bS ?DE ?R ?L ?DE ?C ?V\b", "S DE RL DE CV"),
        (r"\bS ?A ?DE ?C ?V\b", "SA DE CV"),
        (r"\bS ?DE ?R ?L\b", "S DE RL"),
        (r"\bSOCIEDAD ANONIMA\b", "SA"),
        (r"\bSOCIEDAD CIVIL\b", "SC"),
        (r"\bSOCIEDAD DE RESPONSABILIDAD LIMITADA\b", "S DE RL"),
        (r"\bS ?A ?P ?I\b", "SAPI"),
        (r"\bS ?A ?S\b", "SAS"),
        (r"\bS ?A\b", "SA"),
        (r"\bS ?C\b", "SC"),
        (r"\bINCORPORATED\b", "INC"),
        (r"\bCORPORATION\b", "CORP"),
        (r"\bLIMITED\b", "LTD"),
        (r"\bL ?L ?C\b", "LLC"),
    )
)

# Suffixes of sociedades mercantiles (SC is a civil society, not mercantile)
MERCANTILE_SUFFIXES = ("SAPI DE CV", "S DE RL DE CV", "SA DE CV", "S DE RL", "SAPI", "SAS", "SA")

RFC_MORAL_RE = re.compile(r"^[A-Z&Ñ]{3}\d{6}[A-Z0-9]{3}$")
RFC_FISICA_RE = re.compile(r"^[A-Z&Ñ]{4}\d{6}[A-Z0-9]{3}$")

SURNAME_PARTICLES = frozenset({"DE", "DEL", "LA", "LAS", "LOS", "Y", "VAN", "VON", "DA", "DI"})

COMMON_GIVEN_NAMES = frozenset({
    "JOSE", "JUAN", "MARIA", "LUIS", "CARLOS", "JORGE", "MIGUEL", "ANTONIO",
    "FRANCISCO", "JESUS", "MANUEL", "ALEJANDRO", "FERNANDO", "RICARDO",
    "ROBERTO", "EDUARDO", "RAFAEL", "ENRIQUE", "GUADALUPE", "ANA", "ROSA",
    "LAURA", "PATRICIA", "TERESA", "ELENA", "CARMEN", "SOFIA", "DANIEL",
    "DAVID", "PEDRO", "PABLO", "ANDRES", "ARTURO", "SERGIO", "ALBERTO",
})


# =============================================================================
# Core Normalization
# =============================================================================

def remove_diacritics(value: str) -> str:
    """Strip combining marks: MARTÍNEZ -> MARTINEZ, PEÑA -> PENA."""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_whitespace(value: str) -> str:
    """Replace punctuation with spaces and collapse runs of whitespace."""
    value = re.sub(r"[.,\-_()\"'/]", " ", value)
    return re.sub(r"\s+", " ", value).strip()


def fold(value: Optional[str]) -> str:
    """Upper-case, accent-fold and collapse whitespace. None becomes ''."""
    if not value:
        return ""
    return normalize_whitespace(remove_diacritics(value.upper()))


def tokenize(value: Optional[str]) -> list[str]:
    """Sorted tokens longer than one character."""
    return sorted(t for t in fold(value).split(" ") if len(t) > 1)


def token_overlap(a: Optional[str], b: Optional[str]) -> float:
    """
    Shared-token ratio between two strings.

    matches / size of the smaller token set; 0.0 when either side has
    no tokens. Symmetric.
    """
    tokens_a = set(tokenize(a))
    tokens_b = set(tokenize(b))
    if not tokens_a or not tokens_b:
        return 0.0
    matches = len(tokens_a & tokens_b)
    return matches / min(len(tokens_a), len(tokens_b))


# =============================================================================
# Entity and Person Names
# =============================================================================

def canonicalize_entity_name(value: Optional[str]) -> str:
    """
    Canonical form of a legal entity name.

    "Grupo Pounj, S.A. de C.V." -> "GRUPO POUNJ SA DE CV"
    """
    if not value:
        return ""
    text = remove_diacritics(value.upper())
    text = text.replace(".", "").replace(",", "")
    text = re.sub(r"\s+", " ", text).strip()
    for pattern, replacement in LEGAL_SUFFIX_PATTERNS:
        if pattern.search(text):
            text = pattern.sub(replacement, text)
            break
    return normalize_whitespace(text)


def legal_suffix(value: Optional[str]) -> Optional[str]:
    """Canonical legal suffix of an entity name, if any."""
    canonical = canonicalize_entity_name(value)
    for _, replacement in LEGAL_SUFFIX_PATTERNS:
        if canonical == replacement or canonical.endswith(" " + replacement):
            return replacement
    return None


def is_sociedad_mercantil(value: Optional[str]) -> bool:
    """True for SA / SA DE CV / SAPI / S DE RL / SAS names; False for SC."""
    suffix = legal_suffix(value)
    return suffix in MERCANTILE_SUFFIXES


def resolve_nickname(token: str) -> str:
    return _NICKNAME_LOOKUP.get(token, token)


def canonicalize_person_name(value: Optional[str]) -> str:
    """Order-independent canonical form with nicknames resolved."""
    tokens = [resolve_nickname(t) for t in tokenize(value)]
    return " ".join(sorted(tokens))


def names_match(a: Optional[str], b: Optional[str], threshold: float = 0.7) -> bool:
    """
    True when two names refer to the same party.

    Exact after entity canonicalization (or person canonicalization),
    or token overlap strictly above ``threshold``.
    """
    if not a or not b:
        return False
    if canonicalize_entity_name(a) == canonicalize_entity_name(b):
        return True
    if canonicalize_person_name(a) == canonicalize_person_name(b):
        return True
    return token_overlap(a, b) > threshold


def name_units(value: Optional[str]) -> list[str]:
    """
    Split a person name into units, keeping particles attached.

    "MARIA DE LA CRUZ PEREZ" -> ["MARIA", "DE LA CRUZ", "PEREZ"]
    """
    units: list[str] = []
    pending: list[str] = []
    for token in fold(value).split(" "):
        if not token:
            continue
        if token in SURNAME_PARTICLES:
            pending.append(token)
            continue
        units.append(" ".join(pending + [token]))
        pending = []
    if pending and units:
        units[-1] = units[-1] + " " + " ".join(pending)
    return units


def surname_units(value: Optional[str]) -> set[str]:
    """Name units that can plausibly be surnames (common given names excluded)."""
    return {
        unit for unit in name_units(value)
        if unit not in COMMON_GIVEN_NAMES and len(unit) > 2
    }


# =============================================================================
# RFC
# =============================================================================

def normalize_rfc(value: Optional[str]) -> str:
    """Upper-case an RFC and drop separators; accents kept for Ñ."""
    if not value:
        return ""
    return re.sub(r"[\s\-]", "", value.upper())


def rfc_kind(value: Optional[str]) -> Optional[str]:
    """'moral' for 3-letter RFCs, 'fisica' for 4-letter RFCs, else None."""
    rfc = normalize_rfc(value)
    if RFC_MORAL_RE.match(rfc):
        return "moral"
    if RFC_FISICA_RE.match(rfc):
        return "fisica"
    return None
