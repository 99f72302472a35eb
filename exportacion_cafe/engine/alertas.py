"""Time-sensitive operational alerts for active lots.

Alert rules (per lot of every non-terminated contract of the company)
--------------------------------------------------------------------
CUTOFF    — port cut-off in 5 days or less, overdue included.
EMBALAJE  — cut-off within the next 0-7 days and packaging material missing.
MARCAS    — cut-off within the next 0-7 days and marks not confirmed.
ETD       — estimated departure in 5 days or less, overdue included.

``dias_restantes`` is ``ceil((fecha - today) / 1 day)``; with calendar
dates that is the plain day difference. The result list is sorted by
``dias_restantes`` ascending with a stable sort, so alerts with the same
urgency keep contract, lot and rule order.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from exportacion_cafe.engine.embalaje import reconcile
from exportacion_cafe.engine.numeracion import partida_display_number
from exportacion_cafe.utils.constants import (
    DIAS_ALERTA_CUTOFF,
    DIAS_ALERTA_ETD,
    DIAS_VENTANA_PREPARACION,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alerta:
    contrato_id: Any
    contrato_numero: str | None
    partida_id: Any
    partida_numero: str
    tipo: str
    fecha: datetime.date | None
    dias_restantes: int
    mensaje: str | None = None


def _as_date(value: Any) -> datetime.date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


def days_until(fecha: datetime.date, today: datetime.date) -> int:
    return (fecha - today).days


def _plazo(dias: int) -> str:
    if dias < 0:
        return f"vencido hace {-dias} día(s)"
    if dias == 0:
        return "vence hoy"
    return f"en {dias} día(s)"


def _alerts_for_partida(contrato: Any, partida: Any, today: datetime.date) -> list[Alerta]:
    alerts: list[Alerta] = []
    base = {
        "contrato_id": contrato.id,
        "contrato_numero": contrato.numero_contrato,
        "partida_id": partida.id,
        "partida_numero": partida_display_number(contrato.empresa, partida.numero),
    }

    cutoff = _as_date(partida.fecha_cutoff)
    if cutoff is not None:
        dias = days_until(cutoff, today)
        if dias <= DIAS_ALERTA_CUTOFF:
            alerts.append(
                Alerta(**base, tipo="CUTOFF", fecha=cutoff, dias_restantes=dias,
                       mensaje=f"Cut-off de puerto {_plazo(dias)}")
            )
        if 0 <= dias <= DIAS_VENTANA_PREPARACION:
            faltantes = [linea for linea in reconcile(partida) if linea.faltante > 0]
            if faltantes:
                detalle = ", ".join(f"{f.faltante} {f.material}" for f in faltantes)
                alerts.append(
                    Alerta(**base, tipo="EMBALAJE", fecha=cutoff, dias_restantes=dias,
                           mensaje=f"Faltan materiales de empaque: {detalle}")
                )
            if partida.estado_marcas != "CONFIRMADA":
                alerts.append(
                    Alerta(**base, tipo="MARCAS", fecha=cutoff, dias_restantes=dias,
                           mensaje=f"Marcas sin confirmar ({partida.estado_marcas or 'PENDIENTE'})")
                )

    etd = _as_date(partida.etd)
    if etd is not None:
        dias = days_until(etd, today)
        if dias <= DIAS_ALERTA_ETD:
            alerts.append(
                Alerta(**base, tipo="ETD", fecha=etd, dias_restantes=dias,
                       mensaje=f"Zarpe estimado {_plazo(dias)}")
            )
    return alerts


def compute_alerts(
    contratos: Iterable[Any],
    today: datetime.date,
    empresa: str,
) -> list[Alerta]:
    """Scan the active lots of *empresa* and return alerts, most urgent first."""
    alerts: list[Alerta] = []
    for contrato in contratos:
        if contrato is None or contrato.terminado or contrato.empresa != empresa:
            continue
        for partida in contrato.partidas or []:
            alerts.extend(_alerts_for_partida(contrato, partida, today))

    alerts.sort(key=lambda a: a.dias_restantes)
    logger.debug("compute_alerts: empresa=%s hoy=%s total=%d", empresa, today, len(alerts))
    return alerts
