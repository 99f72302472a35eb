"""Document and lot numbering.

Identifier formats (kept bit-exact with documents already issued):

=====================  ==========================  ======================
Kind                   Format                      Scope of the sequence
=====================  ==========================  ======================
Invoice (export)       ``INV-###``                 company + subtype
Invoice (general)      ``VAR-###``                 company + subtype
Waybill (porte)        ``CP-YYYY-###``             company + calendar year
Weight certificate     ``WT-{D|P}##-001``          company + kind
Quality certificate    ``QC-{D|P}##-001``          company + kind
Packing list           ``PL-{D|P}##-001``          company + kind
Payment instruction    no number                   —
Lot display number     ``{prefix}{lot number}``    —
=====================  ==========================  ======================

The trailing ``-001`` of certificates is a constant, not a sub-sequence.

``generate`` derives the next number by counting the documents of the scope
in a snapshot. Services do not rely on it directly: they keep a persisted
counter per ``sequence_scope_key`` and only use ``next_sequence`` to seed
that counter the first time a scope is seen.
"""

from __future__ import annotations

import datetime
from typing import Any, Iterable

from exportacion_cafe.engine.errores import MissingScope
from exportacion_cafe.utils.constants import (
    CODIGO_CERTIFICADO,
    LETRA_EMPRESA,
    PREFIJO_PARTIDA,
)

_FACTURA_DEFAULT = "EXPORTACION"


def _check_empresa(empresa: str | None) -> str:
    if not empresa or empresa not in LETRA_EMPRESA:
        raise MissingScope("empresa")
    return empresa


def _tipo_factura(value: str | None) -> str:
    return value or _FACTURA_DEFAULT


def _issue_year(documento: Any) -> int | None:
    fecha = getattr(documento, "fecha_emision", None)
    if fecha is None:
        return None
    if isinstance(fecha, str):
        return int(fecha[:4]) if fecha[:4].isdigit() else None
    return fecha.year


def sequence_scope_key(
    tipo: str,
    empresa: str | None,
    scope_year: int | None = None,
    tipo_factura: str | None = None,
) -> str | None:
    """Key identifying the counter a new document of *tipo* draws from.

    Returns ``None`` for kinds that are not numbered.

    Raises:
        MissingScope: If the company is absent, or the year for a waybill.
    """
    empresa = _check_empresa(empresa)
    if tipo == "FACTURA":
        return f"FACTURA:{empresa}:{_tipo_factura(tipo_factura)}"
    if tipo == "PORTE":
        if scope_year is None:
            raise MissingScope("anio")
        return f"PORTE:{empresa}:{scope_year}"
    if tipo in CODIGO_CERTIFICADO:
        return f"{tipo}:{empresa}"
    return None


def count_in_scope(
    tipo: str,
    empresa: str,
    documentos: Iterable[Any],
    scope_year: int | None = None,
    tipo_factura: str | None = None,
) -> int:
    """Count the documents of a snapshot that share the scope of a new one."""
    count = 0
    for doc in documentos:
        if doc.tipo != tipo or doc.empresa != empresa:
            continue
        if tipo == "FACTURA" and _tipo_factura(doc.tipo_factura) != _tipo_factura(tipo_factura):
            continue
        if tipo == "PORTE" and _issue_year(doc) != scope_year:
            continue
        count += 1
    return count


def next_sequence(
    tipo: str,
    empresa: str | None,
    documentos: Iterable[Any],
    scope_year: int | None = None,
    tipo_factura: str | None = None,
) -> int:
    """Count-based next sequence number (``count + 1``) for a scope."""
    empresa = _check_empresa(empresa)
    if tipo == "PORTE" and scope_year is None:
        raise MissingScope("anio")
    return count_in_scope(tipo, empresa, documentos, scope_year, tipo_factura) + 1


def format_numero(
    tipo: str,
    empresa: str | None,
    secuencia: int,
    scope_year: int | None = None,
    tipo_factura: str | None = None,
) -> str | None:
    """Render *secuencia* in the identifier format of *tipo*."""
    empresa = _check_empresa(empresa)
    if tipo == "FACTURA":
        prefix = "INV-" if _tipo_factura(tipo_factura) == _FACTURA_DEFAULT else "VAR-"
        return f"{prefix}{secuencia:03d}"
    if tipo == "PORTE":
        if scope_year is None:
            raise MissingScope("anio")
        return f"CP-{scope_year}-{secuencia:03d}"
    if tipo in CODIGO_CERTIFICADO:
        return f"{CODIGO_CERTIFICADO[tipo]}-{LETRA_EMPRESA[empresa]}{secuencia:02d}-001"
    return None


def generate(
    tipo: str,
    empresa: str | None,
    documentos: Iterable[Any],
    scope_year: int | None = None,
    tipo_factura: str | None = None,
) -> str | None:
    """Next identifier for a document of *tipo* given a snapshot of documents.

    Deterministic: the same snapshot always yields the same identifier.
    """
    if sequence_scope_key(tipo, empresa, scope_year, tipo_factura) is None:
        return None
    seq = next_sequence(tipo, empresa, documentos, scope_year, tipo_factura)
    return format_numero(tipo, empresa, seq, scope_year, tipo_factura)


def scope_year_for(tipo: str, fecha_emision: datetime.date | None) -> int | None:
    """Calendar year that scopes a waybill sequence; ``None`` for other kinds."""
    if tipo != "PORTE":
        return None
    return (fecha_emision or datetime.date.today()).year


def partida_display_number(empresa: str, numero: str | None) -> str:
    """Lot number as printed on documents, e.g. ``11/988/12``."""
    return f"{PREFIJO_PARTIDA.get(empresa, '')}{(numero or '').strip()}"
