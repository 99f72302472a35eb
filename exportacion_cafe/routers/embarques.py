"""
Shipments router.

Mounts under ``/api/embarques`` (prefix set in ``main.py``).

Endpoints
---------
GET    /                           — Shipments of the active company.
GET    /{id}                       — Shipment detail with its checklist.
POST   /                           — Create shipment with the 11-task checklist.
PUT    /{id}                       — Partial update (status, carrier data, lots).
DELETE /{id}                       — Delete shipment.
PUT    /{id}/tareas/{tarea_id}     — Set status / priority of one task.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from exportacion_cafe.config import get_settings
from exportacion_cafe.database import get_db
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.common import MessageResponse
from exportacion_cafe.schemas.embarque import (
    EmbarqueCreate,
    EmbarqueResponse,
    EmbarqueUpdate,
    TareaEmbarqueResponse,
    TareaEmbarqueUpdate,
)
from exportacion_cafe.services import embarque_service
from exportacion_cafe.services.auth_service import require_permission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Embarques"])


@router.get("/", response_model=list[EmbarqueResponse], summary="Listar embarques")
def list_embarques(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("EMBARQUES", "VER"))],
    empresa: Annotated[str | None, Query(description="Empresa activa.")] = None,
    estado: Annotated[
        str | None, Query(pattern="^(PLANIFICACION|EN_TRANSITO|ESPERANDO_PAGO|COMPLETADO)$")
    ] = None,
) -> list[EmbarqueResponse]:
    rows = embarque_service.list_embarques(db, empresa or get_settings().DEFAULT_COMPANY, estado)
    return [embarque_service.build_response(e) for e in rows]


@router.get(
    "/{embarque_id}",
    response_model=EmbarqueResponse,
    summary="Detalle de embarque",
    responses={404: {"description": "Embarque no encontrado."}},
)
def get_embarque(
    embarque_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("EMBARQUES", "VER"))],
) -> EmbarqueResponse:
    return embarque_service.build_response(embarque_service.get_embarque(db, embarque_id))


@router.post(
    "/",
    response_model=EmbarqueResponse,
    status_code=201,
    summary="Crear embarque",
    description="Crea el embarque con la lista fija de 11 tareas en estado PENDIENTE.",
    responses={
        404: {"description": "Contrato no encontrado."},
        422: {"description": "Partidas ajenas al contrato."},
    },
)
def create_embarque(
    data: EmbarqueCreate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("EMBARQUES", "CREAR"))],
) -> EmbarqueResponse:
    logger.info(
        "POST /embarques/ contrato_id=%d partidas=%s user=%s",
        data.contrato_id, data.partida_ids, _current_user.username,
    )
    return embarque_service.build_response(embarque_service.create_embarque(db, data))


@router.put("/{embarque_id}", response_model=EmbarqueResponse, summary="Actualizar embarque")
def update_embarque(
    embarque_id: int,
    data: EmbarqueUpdate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("EMBARQUES", "EDITAR"))],
) -> EmbarqueResponse:
    return embarque_service.build_response(embarque_service.update_embarque(db, embarque_id, data))


@router.delete("/{embarque_id}", response_model=MessageResponse, summary="Eliminar embarque")
def delete_embarque(
    embarque_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("EMBARQUES", "ELIMINAR"))],
) -> MessageResponse:
    embarque_service.delete_embarque(db, embarque_id)
    return MessageResponse(message=f"Embarque {embarque_id} eliminado.")


@router.put(
    "/{embarque_id}/tareas/{tarea_id}",
    response_model=TareaEmbarqueResponse,
    summary="Actualizar tarea de embarque",
    description=(
        "Cambia el estado y/o la prioridad de una tarea. Cualquier estado "
        "puede seguir a cualquier otro; no hay dependencias entre tareas."
    ),
    responses={404: {"description": "Tarea no encontrada en el embarque."}},
)
def update_tarea(
    embarque_id: int,
    tarea_id: int,
    data: TareaEmbarqueUpdate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("EMBARQUES", "EDITAR"))],
) -> TareaEmbarqueResponse:
    tarea = embarque_service.update_tarea(db, embarque_id, tarea_id, data)
    return TareaEmbarqueResponse.model_validate(tarea)
