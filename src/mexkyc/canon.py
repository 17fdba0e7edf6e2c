"""
Canonical JSON for KYC Decisions

Validation results, traces and citations are hashed from one stable JSON
form: keys sorted, compact separators, UTF-8 text kept as is. Dates are
ISO 8601, timestamps carry milliseconds (``Z`` when timezone aware), enums
serialize by value and amounts given as Decimal keep their exact digits.

``result_digest`` drops ``generated_at`` so two runs over the same profile
and reference date hash identically.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ValidationResult


_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


def _timestamp(value: datetime) -> str:
    text = value.strftime(_TIMESTAMP_FORMAT)[:-3]
    return text + "Z" if value.tzinfo is not None else text


def _encode(obj: Any) -> Any:
    """Fallback encoder for the values that appear in KYC payloads."""
    if isinstance(obj, datetime):
        return _timestamp(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    raise TypeError(f"Cannot canonicalize value of type {type(obj).__name__}")


def canonical_json(obj: Any) -> str:
    """
    Render ``obj`` as canonical JSON.

    Example:
        >>> canonical_json({"score": 0.9, "customer_id": "C1"})
        '{"customer_id":"C1","score":0.9}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_encode,
    )


def content_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical JSON form of ``obj``."""
    return text_hash(canonical_json(obj))


def text_hash(text: str) -> str:
    """SHA-256 hex digest of a plain string, such as a quoted legal text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def result_digest(result: "ValidationResult") -> str:
    """Hash a validation result without its generation timestamp."""
    payload = result.to_dict()
    payload.pop("generated_at", None)
    return content_hash(payload)
