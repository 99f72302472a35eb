"""
Alertas and packaging overview service layer.

Nothing here is stored: alerts and the packaging summary are recomputed
on each request from one snapshot of the company's active contracts,
read with their lots and packaging records.

Alert rules
-----------
CUTOFF    — port cut-off in 5 days or less (overdue included).
EMBALAJE  — cut-off within 0-7 days and packaging material missing.
MARCAS    — cut-off within 0-7 days and shipping marks not confirmed.
ETD       — estimated departure in 5 days or less (overdue included).
"""

from __future__ import annotations

import datetime
import logging
from collections import Counter

from sqlalchemy.orm import Session, selectinload

from exportacion_cafe.engine import compute_alerts, summarize
from exportacion_cafe.engine.alertas import Alerta
from exportacion_cafe.models.contrato import Contrato
from exportacion_cafe.models.partida import Partida
from exportacion_cafe.schemas.alerta import AlertaResponse, AlertaResumenResponse
from exportacion_cafe.schemas.embalaje import (
    CategoriaEmbalaje,
    LineaEmbalajeResponse,
    PartidaIncompletaResponse,
    ResumenEmbalajeResponse,
)

logger = logging.getLogger(__name__)


def _active_contracts(db: Session, empresa: str) -> list[Contrato]:
    contratos = (
        db.query(Contrato)
        .options(selectinload(Contrato.partidas).selectinload(Partida.registros_embalaje))
        .filter(Contrato.empresa == empresa, Contrato.terminado.is_(False))
        .order_by(Contrato.id)
        .all()
    )
    logger.debug("_active_contracts: empresa=%s -> %d", empresa, len(contratos))
    return contratos


def _alerts(db: Session, empresa: str, today: datetime.date | None) -> list[Alerta]:
    return compute_alerts(_active_contracts(db, empresa), today or datetime.date.today(), empresa)


def get_alertas(
    db: Session,
    empresa: str,
    tipo: str | None = None,
    today: datetime.date | None = None,
) -> list[AlertaResponse]:
    """Alerts of the company sorted by days remaining, most urgent first."""
    alertas = _alerts(db, empresa, today)
    if tipo is not None:
        alertas = [a for a in alertas if a.tipo == tipo]
    return [AlertaResponse.model_validate(a) for a in alertas]


def get_resumen(
    db: Session,
    empresa: str,
    today: datetime.date | None = None,
) -> AlertaResumenResponse:
    alertas = _alerts(db, empresa, today)
    return AlertaResumenResponse(
        total=len(alertas),
        vencidas=sum(1 for a in alertas if a.dias_restantes < 0),
        by_tipo=dict(Counter(a.tipo for a in alertas)),
    )


def get_resumen_embalaje(db: Session, empresa: str) -> ResumenEmbalajeResponse:
    """Required vs. purchased packaging across the company's active lots."""
    resumen = summarize(_active_contracts(db, empresa), empresa)
    return ResumenEmbalajeResponse(
        por_categoria={
            categoria: CategoriaEmbalaje(**valores)
            for categoria, valores in resumen.por_categoria.items()
        },
        total_faltante=resumen.total_faltante,
        partidas_incompletas=[
            PartidaIncompletaResponse(
                contrato_id=p.contrato_id,
                contrato_numero=p.contrato_numero,
                partida_id=p.partida_id,
                partida_numero=p.partida_numero,
                items=[LineaEmbalajeResponse.model_validate(i) for i in p.items],
            )
            for p in resumen.partidas_incompletas
        ],
        contratos_con_faltante=sorted(resumen.contratos_con_faltante),
    )
