"""
Alertas router.

Mounts under ``/api/alertas`` (prefix set in ``main.py``).

Alerts are recomputed on every call from the cut-off and ETD dates of the
company's active lots; there is nothing to mark as read or resolve.

Endpoints
---------
GET /          — Alerts sorted by days remaining, most urgent first.
GET /resumen   — Counters for the notification badge.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from exportacion_cafe.config import get_settings
from exportacion_cafe.database import get_db
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.alerta import AlertaResponse, AlertaResumenResponse
from exportacion_cafe.services import alerta_service
from exportacion_cafe.services.auth_service import require_permission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Alertas"])


@router.get(
    "/",
    response_model=list[AlertaResponse],
    summary="Alertas operativas",
    responses={
        200: {"description": "Alertas ordenadas por días restantes."},
        401: {"description": "Token JWT ausente o inválido."},
    },
)
def get_alertas(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("DASHBOARD", "VER"))],
    empresa: Annotated[str | None, Query(description="Empresa activa.")] = None,
    tipo: Annotated[str | None, Query(pattern="^(CUTOFF|ETD|EMBALAJE|MARCAS)$")] = None,
) -> list[AlertaResponse]:
    return alerta_service.get_alertas(db, empresa or get_settings().DEFAULT_COMPANY, tipo)


@router.get("/resumen", response_model=AlertaResumenResponse, summary="Resumen de alertas")
def get_resumen(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("DASHBOARD", "VER"))],
    empresa: Annotated[str | None, Query(description="Empresa activa.")] = None,
) -> AlertaResumenResponse:
    return alerta_service.get_resumen(db, empresa or get_settings().DEFAULT_COMPANY)
