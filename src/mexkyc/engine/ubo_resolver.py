"""
MexKYC UBO Resolver

Identifies ultimate beneficial owners (beneficiarios controladores)
from the deed's capital table.

Voting eligibility precedence:
1. Explicit has_voting_rights flag
2. Share type keyword: PREFERENTE -> no vote, ORDINARIA / COMUN -> vote
3. Share series: Serie B / II -> no vote, Serie A / I -> vote
4. Default -> vote (bias toward flagging potential controllers)

A holder is a UBO when their voting percentage exceeds the threshold
(25% by default) or the deed marks them as beneficial owner.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from ..models import Shareholder
from .text import fold


_SERIES_RE = re.compile(r"\b(?:SERIES?|CLASE)\s*(A|B|I|II)\b")
NON_VOTING_SERIES = frozenset({"B", "II"})
VOTING_SERIES = frozenset({"A", "I"})


# =============================================================================
# Voting Rights
# =============================================================================

def _series_tokens(text: str) -> list[str]:
    if not text:
        return []
    if text in NON_VOTING_SERIES or text in VOTING_SERIES:
        return [text]
    return _SERIES_RE.findall(text)


def infer_voting_rights(shareholder: Shareholder) -> bool:
    """Resolve voting eligibility by the fixed precedence."""
    if shareholder.has_voting_rights is not None:
        return shareholder.has_voting_rights

    share_type = fold(shareholder.share_type)
    if "PREFERENTE" in share_type:
        return False
    if "ORDINARIA" in share_type or "COMUN" in share_type:
        return True

    series = _series_tokens(fold(shareholder.share_series)) or _series_tokens(share_type)
    if any(s in NON_VOTING_SERIES for s in series):
        return False
    if any(s in VOTING_SERIES for s in series):
        return True

    return True


# =============================================================================
# Resolution
# =============================================================================

@dataclass
class UboInfo:
    """Ownership and voting position of one shareholder."""
    name: str
    shares: Optional[float]
    ownership_pct: float
    voting_pct: float
    has_voting_rights: bool
    is_ubo: bool
    is_foreign: bool = False


@dataclass
class UboResolution:
    """All shareholders with their computed positions."""
    holders: list[UboInfo] = field(default_factory=list)
    total_shares: float = 0.0
    total_voting_shares: float = 0.0
    threshold_pct: float = 25.0

    @property
    def ubos(self) -> list[UboInfo]:
        return [h for h in self.holders if h.is_ubo]


def _weights(shareholders: list[Shareholder]) -> list[float]:
    """Share counts, or stated percentages when no counts were extracted."""
    if any(s.shares for s in shareholders):
        return [float(s.shares or 0) for s in shareholders]
    return [float(s.percentage or 0) for s in shareholders]


def resolve_ubos(
    shareholders: list[Shareholder],
    threshold_pct: float = 25.0,
) -> UboResolution:
    """
    Compute ownership and voting percentages and flag UBOs.

    Pure: the same shareholders always yield the same resolution.
    """
    weights = _weights(shareholders)
    voting = [infer_voting_rights(s) for s in shareholders]
    total = sum(weights)
    total_voting = sum(w for w, v in zip(weights, voting) if v)

    holders: list[UboInfo] = []
    for shareholder, weight, has_vote in zip(shareholders, weights, voting):
        if shareholder.percentage is not None:
            ownership = float(shareholder.percentage)
        else:
            ownership = weight / total * 100 if total > 0 else 0.0
        voting_pct = weight / total_voting * 100 if has_vote and total_voting > 0 else 0.0
        holders.append(UboInfo(
            name=shareholder.name,
            shares=shareholder.shares,
            ownership_pct=round(ownership, 4),
            voting_pct=round(voting_pct, 4),
            has_voting_rights=has_vote,
            is_ubo=voting_pct > threshold_pct or shareholder.is_beneficial_owner is True,
            is_foreign=shareholder.is_foreign,
        ))

    return UboResolution(
        holders=holders,
        total_shares=total,
        total_voting_shares=total_voting,
        threshold_pct=threshold_pct,
    )


# =============================================================================
# Equity Consistency
# =============================================================================

@dataclass
class EquityCheck:
    """Sum of ownership percentages and its distance from 100."""
    sum_of_percentages: float
    deviation_from_100: float


def check_equity_consistency(shareholders: list[Shareholder]) -> Optional[EquityCheck]:
    """None when there are no shareholders to check."""
    if not shareholders:
        return None
    resolution = resolve_ubos(shareholders)
    total = round(sum(h.ownership_pct for h in resolution.holders), 4)
    return EquityCheck(
        sum_of_percentages=total,
        deviation_from_100=round(abs(100.0 - total), 4),
    )
