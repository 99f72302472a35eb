"""
Role administration router.

Mounts under ``/api/roles`` (prefix set in ``main.py``). Every endpoint
requires the matching action on the ``ADMIN`` resource.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exportacion_cafe.database import get_db
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.common import MessageResponse
from exportacion_cafe.schemas.rol import RolCreate, RolResponse, RolUpdate
from exportacion_cafe.services import rol_service
from exportacion_cafe.services.auth_service import require_permission

router = APIRouter(tags=["Roles"])


@router.get("/", response_model=list[RolResponse], summary="Listar roles")
def list_roles(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "VER"))],
) -> list[RolResponse]:
    return [RolResponse.model_validate(r) for r in rol_service.list_roles(db)]


@router.post(
    "/",
    response_model=RolResponse,
    status_code=201,
    summary="Crear rol",
    responses={409: {"description": "Nombre de rol ya existente."}},
)
def create_rol(
    data: RolCreate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "CREAR"))],
) -> RolResponse:
    return RolResponse.model_validate(rol_service.create_rol(db, data))


@router.put("/{rol_id}", response_model=RolResponse, summary="Actualizar rol")
def update_rol(
    rol_id: int,
    data: RolUpdate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "EDITAR"))],
) -> RolResponse:
    return RolResponse.model_validate(rol_service.update_rol(db, rol_id, data))


@router.delete(
    "/{rol_id}",
    response_model=MessageResponse,
    summary="Eliminar rol",
    responses={409: {"description": "El rol está asignado a usuarios."}},
)
def delete_rol(
    rol_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "ELIMINAR"))],
) -> MessageResponse:
    rol_service.delete_rol(db, rol_id)
    return MessageResponse(message=f"Rol {rol_id} eliminado.")
