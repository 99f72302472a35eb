"""Harvest-year (cosecha) resolution.

A harvest year is a twelve-month label spanning two calendar years that
starts on October 1st: any date from October to December 2024 and from
January to September 2025 belongs to ``"2024-2025"``.

The same resolver is used by the lot-number uniqueness check and by every
harvest-scoped listing so both always agree on the scope of a contract.
"""

from __future__ import annotations

import datetime
from typing import Any

from exportacion_cafe.utils.constants import MES_INICIO_COSECHA


def resolve_harvest_year(fecha: datetime.date | None) -> str | None:
    """Return the harvest-year label for *fecha*, or ``None`` without a date."""
    if fecha is None:
        return None
    if isinstance(fecha, datetime.datetime):
        fecha = fecha.date()
    if fecha.month >= MES_INICIO_COSECHA:
        return f"{fecha.year}-{fecha.year + 1}"
    return f"{fecha.year - 1}-{fecha.year}"


def contract_harvest_year(contrato: Any) -> str | None:
    """Resolve the harvest year of a contract on read.

    An explicitly stored ``cosecha`` wins; otherwise the label is derived
    from ``fecha_venta`` and, for contracts saved without a sale date, from
    ``fecha_creacion``.
    """
    explicit = (getattr(contrato, "cosecha", None) or "").strip()
    if explicit:
        return explicit
    fecha = getattr(contrato, "fecha_venta", None) or getattr(contrato, "fecha_creacion", None)
    return resolve_harvest_year(fecha)


def harvest_year_options(today: datetime.date) -> list[str]:
    """Selectable harvest labels: two previous, the current one and three ahead."""
    current = resolve_harvest_year(today)
    base = int(current.split("-")[0])
    return [f"{base + i}-{base + i + 1}" for i in range(-2, 4)]
