"""
MexKYC Legal Citations

Legal grounds for individual decisions. Citations are attached only to
flags whose outcome they justify; a result with no cited flags gets no
citations.

Key features:
- LegalCitation: law, article, official URL, quoted text, verification date
- content_hash over the quoted text, so a changed excerpt is detectable
- CitationRegistry: lookup by id, raising CitationNotFoundError on misses
- FLAG_CITATIONS: flag code -> (citation, decision, document, reason)

Usage:
    from mexkyc.citations import cite_result

    for decision in cite_result(result):
        print(decision.decision.value, decision.document, decision.citation.article)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional

from .canon import text_hash
from .exceptions import CitationNotFoundError
from .models import ValidationResult


# =============================================================================
# Citation Types
# =============================================================================

class CitationDecision(str, Enum):
    """Decision a citation justifies."""
    APPROVED = "APROBADO"
    REVIEW_REQUIRED = "REQUIERE REVISIÓN"
    WARNING = "ADVERTENCIA"


@dataclass(frozen=True)
class LegalCitation:
    """
    A verified excerpt from Mexican law or regulation.

    Attributes:
        id: Stable identifier ("lfpiorpi_ubo")
        law: Law or regulation name
        article: Article and fraction, when the excerpt has one
        url: Official publication URL (diputados.gob.mx)
        quoted_text: Verbatim excerpt
        verified_on: Date the excerpt was last checked against the source
    """
    id: str
    law: str
    url: str
    quoted_text: str
    verified_on: date
    article: Optional[str] = None

    @property
    def content_hash(self) -> str:
        return text_hash(self.quoted_text)

    @property
    def page(self) -> Optional[int]:
        """PDF page from a '#page=N' anchor, if the URL has one."""
        _, sep, anchor = self.url.partition("#page=")
        return int(anchor) if sep and anchor.isdigit() else None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "law": self.law,
            "url": self.url,
            "quoted_text": self.quoted_text,
            "verified_on": self.verified_on.isoformat(),
            "content_hash": self.content_hash,
        }
        if self.article:
            result["article"] = self.article
        return result


@dataclass(frozen=True)
class FlagCitation:
    """How a flag code maps onto a citation."""
    citation_id: str
    decision: CitationDecision
    document: str
    reason: str


@dataclass(frozen=True)
class DecisionCitation:
    """A cited decision for one flag of a validation result."""
    flag_code: str
    decision: CitationDecision
    document: str
    reason: str
    citation: LegalCitation

    def to_dict(self) -> dict[str, Any]:
        return {
            "flag_code": self.flag_code,
            "decision": self.decision.value,
            "document": self.document,
            "reason": self.reason,
            "citation": self.citation.to_dict(),
        }


# =============================================================================
# Citation Database
# =============================================================================

_VERIFIED = date(2024, 11, 25)
_LFPIORPI = "https://www.diputados.gob.mx/LeyesBiblio/pdf/LFPIORPI.pdf"
_CFF = "https://www.diputados.gob.mx/LeyesBiblio/pdf/CFF.pdf"
_LMIGRA = "https://www.diputados.gob.mx/LeyesBiblio/pdf/LMigra.pdf"

LEGAL_CITATIONS: tuple[LegalCitation, ...] = (
    LegalCitation(
        id="sat_comprobante_valido",
        law="LFPIORPI - Comprobante de Domicilio",
        article="Artículo 18, Fracción II",
        url=f"{_LFPIORPI}#page=8",
        quoted_text=(
            "Recibo de pago de servicios como luz, gas, teléfono, agua, televisión o "
            "internet, con antigüedad no mayor a tres meses."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="sat_comprobante_tercero",
        law="LFPIORPI - Comprobante Tercero (Persona Física)",
        article="Artículo 18",
        url=f"{_LFPIORPI}#page=8",
        quoted_text=(
            "Las personas físicas podrán presentar comprobante a nombre de tercero "
            "cuando acrediten vínculo familiar o arrendamiento."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="lfpiorpi_poa_pm",
        law="LFPIORPI - Persona Moral",
        article="Artículo 18, Fracción II",
        url=f"{_LFPIORPI}#page=8",
        quoted_text=(
            "Tratándose de personas morales, el comprobante de domicilio deberá estar "
            "a nombre de la persona moral."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="cff_rfc",
        law="Código Fiscal de la Federación",
        article="Artículo 27",
        url=f"{_CFF}#page=45",
        quoted_text=(
            "Las personas morales y físicas que deban presentar declaraciones periódicas "
            "deberán solicitar su inscripción en el RFC."
        ),
        verified_on=_VERIFIED,
    ),
    # Article 27 covers RFC registration; the "sin obligaciones" restriction is SAT's reading of it.
    LegalCitation(
        id="sat_sin_obligaciones",
        law="Código Fiscal de la Federación",
        article="Artículo 27",
        url=_CFF,
        quoted_text=(
            "Las personas morales y físicas que deban presentar declaraciones periódicas "
            "deberán solicitar su inscripción en el RFC."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="ley_migracion_permanente",
        law="Ley de Migración",
        article="Artículo 54",
        url=f"{_LMIGRA}#page=16",
        quoted_text=(
            "Residente Permanente: Se autoriza al extranjero para permanecer en el "
            "territorio nacional de manera indefinida, con permiso para trabajar."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="inm_vigencia_indefinida",
        law="Reglamento de la Ley de Migración",
        article="Artículo 137",
        url="https://www.diputados.gob.mx/LeyesBiblio/regley/Reg_LMigra.pdf#page=35",
        quoted_text=(
            "La tarjeta de residente permanente para personas mayores de 18 años tiene "
            "vigencia indefinida. Para menores de 18 años, la tarjeta tiene vigencia de "
            "3 años y debe renovarse."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="inm_residente_temporal",
        law="Ley de Migración",
        article="Artículo 52",
        url=f"{_LMIGRA}#page=15",
        quoted_text=(
            "Residente Temporal: Autorización para permanecer en el país por un periodo "
            "de 1 a 4 años, con posibilidad de renovación."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="inm_fm_obsoleto",
        law="Ley de Migración - Transitorios",
        url=f"{_LMIGRA}#page=45",
        quoted_text=(
            "Los documentos FM2 y FM3 expedidos con anterioridad conservarán su vigencia "
            "hasta su vencimiento. Los nuevos documentos serán Tarjetas de Residente."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="lgsm_inscripcion",
        law="Ley General de Sociedades Mercantiles",
        article="Artículo 19",
        url="https://www.diputados.gob.mx/LeyesBiblio/pdf/LGSM.pdf#page=4",
        quoted_text="La inscripción en el Registro Público de Comercio surtirá efectos contra terceros.",
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="ccom_fme",
        law="Código de Comercio",
        article="Artículo 21",
        url="https://www.diputados.gob.mx/LeyesBiblio/pdf/CCom.pdf#page=5",
        quoted_text="Existirá un folio electrónico por cada comerciante o sociedad.",
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="lfpiorpi_ubo",
        law="LFPIORPI",
        article="Artículo 17",
        url=f"{_LFPIORPI}#page=7",
        quoted_text=(
            "Beneficiario Controlador: persona física con titularidad de acciones que "
            "representen más del 25% del capital."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="sat_ine_valido",
        law="LFPIORPI - Identificación Oficial",
        article="Artículo 18, Fracción I",
        url=f"{_LFPIORPI}#page=7",
        quoted_text=(
            "Credencial para votar vigente expedida por el Instituto Nacional Electoral "
            "(INE), pasaporte vigente, o cédula profesional."
        ),
        verified_on=_VERIFIED,
    ),
    LegalCitation(
        id="sat_estado_cuenta",
        law="LFPIORPI - Estado de Cuenta",
        article="Artículo 18, Fracción II",
        url=f"{_LFPIORPI}#page=8",
        quoted_text=(
            "Estado de cuenta bancario a nombre del cliente, con antigüedad no mayor a "
            "tres meses, que acredite el domicilio."
        ),
        verified_on=_VERIFIED,
    ),
)


_APPROVED = CitationDecision.APPROVED
_REVIEW = CitationDecision.REVIEW_REQUIRED
_WARNING = CitationDecision.WARNING

FLAG_CITATIONS: dict[str, FlagCitation] = {
    # Proof of address
    "POA_VALID": FlagCitation(
        "sat_comprobante_valido", _APPROVED, "Comprobante de Domicilio",
        "Comprobante válido conforme a requisitos SAT",
    ),
    "POA_ADDRESS_VERIFIED": FlagCitation(
        "sat_comprobante_valido", _APPROVED, "Comprobante de Domicilio",
        "Comprobante válido conforme a requisitos SAT",
    ),
    "POA_NAME_MISMATCH": FlagCitation(
        "lfpiorpi_poa_pm", _REVIEW, "Comprobante de Domicilio",
        "Comprobante no está a nombre de la empresa (Persona Moral)",
    ),
    "POA_THIRD_PARTY_FAMILY": FlagCitation(
        "sat_comprobante_tercero", _WARNING, "Comprobante de Domicilio",
        "Comprobante a nombre de tercero - requiere acreditar parentesco",
    ),
    "POA_THIRD_PARTY_LANDLORD": FlagCitation(
        "sat_comprobante_tercero", _WARNING, "Comprobante de Domicilio",
        "Comprobante a nombre de arrendador - requiere contrato de arrendamiento",
    ),
    "POA_STALE": FlagCitation(
        "sat_comprobante_valido", _REVIEW, "Comprobante de Domicilio",
        "Comprobante con antigüedad mayor a tres meses",
    ),
    # Bank statement
    "BANK_STATEMENT_VALID": FlagCitation(
        "sat_estado_cuenta", _APPROVED, "Estado de Cuenta Bancario",
        "Estado de cuenta válido como comprobante de domicilio",
    ),
    "BANK_STATEMENT_STALE": FlagCitation(
        "sat_estado_cuenta", _WARNING, "Estado de Cuenta Bancario",
        "Estado de cuenta con antigüedad mayor a tres meses",
    ),
    # Tax certificate
    "SAT_CONSTANCIA_VALID": FlagCitation(
        "cff_rfc", _APPROVED, "Constancia de Situación Fiscal",
        "Constancia SAT válida con RFC activo",
    ),
    "MISSING_CONSTANCIA": FlagCitation(
        "cff_rfc", _REVIEW, "Constancia de Situación Fiscal",
        "Falta Constancia de Situación Fiscal (obligatoria)",
    ),
    "TAX_REGIME_NO_COMMERCE": FlagCitation(
        "sat_sin_obligaciones", _WARNING, "Constancia de Situación Fiscal",
        'Régimen "Sin obligaciones" no permite actividad empresarial',
    ),
    # Immigration
    "IMMIGRATION_DOC_VALID": FlagCitation(
        "ley_migracion_permanente", _APPROVED, "Documento Migratorio",
        "Documento migratorio vigente y válido",
    ),
    "IMMIGRATION_DOC_VALID_PERMANENT": FlagCitation(
        "inm_vigencia_indefinida", _APPROVED, "Tarjeta de Residente Permanente",
        "Tarjeta de Residente Permanente con vigencia indefinida (adulto 18+)",
    ),
    "IMMIGRATION_DOC_EXPIRED": FlagCitation(
        "ley_migracion_permanente", _REVIEW, "Documento Migratorio",
        "Documento migratorio vencido",
    ),
    "IMMIGRATION_DOC_EXPIRING": FlagCitation(
        "inm_residente_temporal", _WARNING, "Tarjeta de Residente Temporal",
        "Tarjeta de Residente Temporal próxima a vencer",
    ),
    "IMMIGRATION_CARD_OLD": FlagCitation(
        "inm_fm_obsoleto", _WARNING, "FM2/FM3",
        "Documento FM obsoleto - debe canjear por Tarjeta de Residente",
    ),
    # Corporate
    "MISSING_FME": FlagCitation(
        "ccom_fme", _WARNING, "Acta Constitutiva",
        "Falta Folio Mercantil Electrónico para acreditar inscripción",
    ),
    "UBO_MISSING": FlagCitation(
        "lfpiorpi_ubo", _REVIEW, "Acta Constitutiva",
        "No se identificaron beneficiarios controladores (>25%)",
    ),
    "UBO_IDENTIFIED": FlagCitation(
        "lfpiorpi_ubo", _APPROVED, "Acta Constitutiva",
        "Beneficiarios controladores identificados correctamente",
    ),
    # Identity
    "INE_VALID": FlagCitation(
        "sat_ine_valido", _APPROVED, "INE",
        "Credencial INE vigente y válida",
    ),
    "PASSPORT_VALID": FlagCitation(
        "sat_ine_valido", _APPROVED, "Pasaporte",
        "Pasaporte vigente",
    ),
    "IDENTITY_DOC_EXPIRED": FlagCitation(
        "sat_ine_valido", _REVIEW, "Identificación",
        "Documento de identidad vencido",
    ),
    "PASSPORT_EXPIRED": FlagCitation(
        "sat_ine_valido", _REVIEW, "Pasaporte",
        "Pasaporte vencido",
    ),
}


# =============================================================================
# Registry
# =============================================================================

@dataclass
class CitationRegistry:
    """
    Lookup of legal citations by id.

    Usage:
        registry = CitationRegistry.default()
        citation = registry.get("lfpiorpi_ubo")
    """
    _citations: dict[str, LegalCitation] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "CitationRegistry":
        registry = cls()
        registry.register_all(LEGAL_CITATIONS)
        return registry

    def register(self, citation: LegalCitation) -> None:
        self._citations[citation.id] = citation

    def register_all(self, citations: Iterable[LegalCitation]) -> None:
        for citation in citations:
            self.register(citation)

    def get(self, citation_id: str) -> LegalCitation:
        """
        Get a citation by id.

        Raises:
            CitationNotFoundError: If no citation has that id
        """
        try:
            return self._citations[citation_id]
        except KeyError:
            raise CitationNotFoundError(
                message=f"Legal citation not found: {citation_id}",
                details={"citation_id": citation_id},
            )

    def __contains__(self, citation_id: object) -> bool:
        return citation_id in self._citations

    def __len__(self) -> int:
        return len(self._citations)

    def all(self) -> list[LegalCitation]:
        return list(self._citations.values())


DEFAULT_REGISTRY = CitationRegistry.default()


# =============================================================================
# Citing Results
# =============================================================================

def citations_for_flag(
    flag_code: str,
    registry: Optional[CitationRegistry] = None,
) -> list[LegalCitation]:
    """Citations backing a flag code; empty when the flag is not cited."""
    mapping = FLAG_CITATIONS.get(flag_code)
    if mapping is None:
        return []
    registry = registry if registry is not None else DEFAULT_REGISTRY
    return [registry.get(mapping.citation_id)]


def cite_result(
    result: ValidationResult,
    registry: Optional[CitationRegistry] = None,
) -> list[DecisionCitation]:
    """
    One DecisionCitation per cited flag, in flag order.

    The flag's own message is used as the reason when it has one.

    Raises:
        CitationNotFoundError: If a mapped citation is missing from the registry
    """
    registry = registry if registry is not None else DEFAULT_REGISTRY
    decisions: list[DecisionCitation] = []
    for flag in result.flags:
        mapping = FLAG_CITATIONS.get(flag.code)
        if mapping is None:
            continue
        decisions.append(
            DecisionCitation(
                flag_code=flag.code,
                decision=mapping.decision,
                document=mapping.document,
                reason=flag.message or mapping.reason,
                citation=registry.get(mapping.citation_id),
            )
        )
    return decisions
