"""Derived fields recomputed on every save.

- ``peso_qq`` follows ``peso_kg`` while the lot is edited in linked mode.
- ``precio_final`` is always ``diferencial + fijacion``; a stored value is
  never trusted.
- ``isf_enviado`` cannot be true while ``isf_requerido`` is false.
- Invoice and certificate totals are derived from their line items.

All money and weight arithmetic uses ``Decimal`` with half-up rounding so
results match what the operators see on the printed documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from exportacion_cafe.engine.errores import InconsistentToggle
from exportacion_cafe.utils.constants import KG_POR_QUINTAL

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce numbers, numeric strings, ``None`` and ``""`` to ``Decimal``."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------------
# Weight
# ---------------------------------------------------------------------------


def quintales_from_kg(peso_kg: Any) -> Decimal:
    """Convert kilograms to 46 kg quintales rounded to two decimals."""
    return round2(to_decimal(peso_kg) / KG_POR_QUINTAL)


def apply_weight_mode(partida: Any, vinculado: bool = True) -> Any:
    """Recompute ``peso_qq`` from ``peso_kg`` when the edit runs in linked mode.

    In unlinked mode the caller-supplied ``peso_qq`` is left untouched. The
    mode itself belongs to the edit request and is never stored on the lot.
    """
    if vinculado:
        partida.peso_qq = quintales_from_kg(partida.peso_kg)
    return partida


# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------


def final_price(diferencial: Any, fijacion: Any) -> Decimal:
    """Settlement price of a lot: contract differential plus lot fixing."""
    return to_decimal(diferencial) + to_decimal(fijacion)


# ---------------------------------------------------------------------------
# ISF toggles
# ---------------------------------------------------------------------------


def check_isf(partida: Any) -> None:
    """Raise ``InconsistentToggle`` when ISF is marked sent but not required."""
    if partida.isf_enviado and not partida.isf_requerido:
        raise InconsistentToggle(
            f"partida {getattr(partida, 'numero', None)}: isf_enviado sin isf_requerido"
        )


def coerce_isf(partida: Any) -> Any:
    """Force ``isf_enviado`` off when ISF is not required for the lot."""
    try:
        check_isf(partida)
    except InconsistentToggle as exc:
        logger.warning("coerce_isf: %s; se corrige a False", exc)
        partida.isf_enviado = False
    if partida.isf_requerido is None:
        partida.isf_requerido = False
    if partida.isf_enviado is None:
        partida.isf_enviado = False
    return partida


# ---------------------------------------------------------------------------
# Document totals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TotalesFactura:
    """Computed totals of an invoice.

    Attributes:
        subtotal: Sum of quantity x unit value over all lines.
        total_ajustes: Sum of adjustment amounts (deducted).
        total_anticipos: Sum of advance payments (deducted).
        total: ``subtotal - total_ajustes - total_anticipos``.
    """

    subtotal: Decimal
    total_ajustes: Decimal
    total_anticipos: Decimal
    total: Decimal


def _sum_amounts(items: Iterable[dict[str, Any]] | None) -> Decimal:
    return sum((to_decimal(i.get("monto")) for i in (items or [])), Decimal("0"))


def invoice_totals(
    lineas: Iterable[dict[str, Any]] | None,
    ajustes: Iterable[dict[str, Any]] | None = None,
    anticipos: Iterable[dict[str, Any]] | None = None,
) -> TotalesFactura:
    subtotal = sum(
        (
            to_decimal(linea.get("cantidad")) * to_decimal(linea.get("valor_unitario"))
            for linea in (lineas or [])
        ),
        Decimal("0"),
    )
    total_ajustes = _sum_amounts(ajustes)
    total_anticipos = _sum_amounts(anticipos)
    return TotalesFactura(
        subtotal=round2(subtotal),
        total_ajustes=round2(total_ajustes),
        total_anticipos=round2(total_anticipos),
        total=round2(subtotal - total_ajustes - total_anticipos),
    )


def certificate_weights(lineas: Iterable[dict[str, Any]] | None) -> tuple[Decimal, Decimal]:
    """Return ``(net, gross)`` kilograms of a weight/packing/waybill document."""
    neto = Decimal("0")
    bruto = Decimal("0")
    for linea in lineas or []:
        cantidad = to_decimal(linea.get("cantidad"))
        neto += cantidad * to_decimal(linea.get("peso_unitario"))
        bruto += cantidad * to_decimal(linea.get("peso_bruto_unitario"))
    return round2(neto), round2(bruto)
