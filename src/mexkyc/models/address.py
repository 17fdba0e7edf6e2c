"""
MexKYC Address Model

A Mexican postal address as extracted from deeds, tax certificates,
utility bills and bank documents. Every field is optional: the
extractor reports what it found and the comparator treats anything
missing as non-matching.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Address:
    """
    Structured Mexican address.

    Attributes:
        street: Street name, possibly with a type prefix ("AV. REFORMA")
        ext_number: Exterior number, may hold "MZ 4 LT 12" style tokens
        int_number: Interior / unit number
        colonia: Neighbourhood
        municipio: Municipality or alcaldía
        estado: State, any spelling
        cp: Postal code (código postal)
        cross_streets: "Entre calles" text when present
        country: ISO country code
    """
    street: Optional[str] = None
    ext_number: Optional[str] = None
    int_number: Optional[str] = None
    colonia: Optional[str] = None
    municipio: Optional[str] = None
    estado: Optional[str] = None
    cp: Optional[str] = None
    cross_streets: Optional[str] = None
    country: str = "MX"

    def is_empty(self) -> bool:
        """True when no locating field is populated."""
        return not any(
            (self.street, self.ext_number, self.colonia, self.municipio, self.estado, self.cp)
        )

    def one_line(self) -> str:
        """Human-readable single-line rendering for messages and traces."""
        parts = []
        street = " ".join(p for p in (self.street, self.ext_number) if p)
        if self.int_number:
            street = f"{street} INT {self.int_number}".strip()
        for part in (street, self.colonia, self.municipio, self.estado):
            if part:
                parts.append(part)
        if self.cp:
            parts.append(f"CP {self.cp}")
        return ", ".join(parts) if parts else "N/A"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, omitting absent fields."""
        result: dict[str, Any] = {"country": self.country}
        for name in (
            "street", "ext_number", "int_number", "colonia",
            "municipio", "estado", "cp", "cross_streets",
        ):
            value = getattr(self, name)
            if value:
                result[name] = value
        return result
