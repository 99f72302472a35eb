"""
User administration router.

Mounts under ``/api/usuarios`` (prefix set in ``main.py``). Every endpoint
requires the matching action on the ``ADMIN`` resource. Responses never
include the password hash.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exportacion_cafe.database import get_db
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.common import MessageResponse
from exportacion_cafe.schemas.usuario import UsuarioCreate, UsuarioResponse, UsuarioUpdate
from exportacion_cafe.services import usuario_service
from exportacion_cafe.services.auth_service import build_user_response, require_permission

router = APIRouter(tags=["Usuarios"])


@router.get("/", response_model=list[UsuarioResponse], summary="Listar usuarios")
def list_usuarios(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "VER"))],
) -> list[UsuarioResponse]:
    return [build_user_response(u) for u in usuario_service.list_usuarios(db)]


@router.post(
    "/",
    response_model=UsuarioResponse,
    status_code=201,
    summary="Crear usuario",
    responses={
        409: {"description": "Username o email ya registrado."},
        422: {"description": "Rol inexistente."},
    },
)
def create_usuario(
    data: UsuarioCreate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "CREAR"))],
) -> UsuarioResponse:
    return build_user_response(usuario_service.create_usuario(db, data))


@router.put(
    "/{usuario_id}",
    response_model=UsuarioResponse,
    summary="Actualizar usuario",
    description="Cambia rol, estado, email o contraseña. El último administrador no puede perder el acceso.",
    responses={409: {"description": "Email duplicado o último administrador."}},
)
def update_usuario(
    usuario_id: int,
    data: UsuarioUpdate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "EDITAR"))],
) -> UsuarioResponse:
    return build_user_response(usuario_service.update_usuario(db, usuario_id, data))


@router.delete(
    "/{usuario_id}",
    response_model=MessageResponse,
    summary="Eliminar usuario",
    responses={409: {"description": "Es el último administrador."}},
)
def delete_usuario(
    usuario_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("ADMIN", "ELIMINAR"))],
) -> MessageResponse:
    usuario_service.delete_usuario(db, usuario_id)
    return MessageResponse(message=f"Usuario {usuario_id} eliminado.")
