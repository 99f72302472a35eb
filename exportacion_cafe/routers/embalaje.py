"""
Packaging overview router.

Mounts under ``/api/embalaje`` (prefix set in ``main.py``).

Endpoints
---------
GET /resumen   — Required vs. purchased packaging across active lots.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from exportacion_cafe.config import get_settings
from exportacion_cafe.database import get_db
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.embalaje import ResumenEmbalajeResponse
from exportacion_cafe.services import alerta_service
from exportacion_cafe.services.auth_service import require_permission

router = APIRouter(tags=["Embalaje"])


@router.get(
    "/resumen",
    response_model=ResumenEmbalajeResponse,
    summary="Resumen de materiales de empaque",
    description=(
        "Totales de sacos, GrainPro, big bags y jumbos requeridos y comprados, "
        "con las partidas y contratos que tienen faltantes."
    ),
)
def get_resumen_embalaje(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("DASHBOARD", "VER"))],
    empresa: Annotated[str | None, Query(description="Empresa activa.")] = None,
) -> ResumenEmbalajeResponse:
    return alerta_service.get_resumen_embalaje(db, empresa or get_settings().DEFAULT_COMPANY)
