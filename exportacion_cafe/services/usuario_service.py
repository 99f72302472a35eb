"""
User administration service layer (``/api/usuarios``).

Users receive all of their rights from the assigned role. An administrator
is any active user whose role grants ``EDITAR`` on ``ADMIN``; the system
always keeps at least one, so deleting, suspending or re-roling the last
one is refused.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from exportacion_cafe.engine import has_permission
from exportacion_cafe.models.rol import Rol
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.usuario import UsuarioCreate, UsuarioUpdate
from exportacion_cafe.services.repositorio import Repositorio
from exportacion_cafe.utils.security import hash_password

logger = logging.getLogger(__name__)


def _es_admin(rol: Rol | None, activo: bool) -> bool:
    return bool(activo) and has_permission(rol, "ADMIN", "EDITAR")


def _check_unico(db: Session, campo: str, valor: str, usuario_id: int | None = None) -> None:
    query = db.query(Usuario).filter(getattr(Usuario, campo) == valor)
    if usuario_id is not None:
        query = query.filter(Usuario.id != usuario_id)
    if query.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe un usuario con {campo} '{valor}'.",
        )


def _get_rol(db: Session, rol_id: int) -> Rol:
    rol = db.get(Rol, rol_id)
    if rol is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Rol con ID {rol_id} no existe.",
        )
    return rol


def _check_quedan_admins(db: Session, usuario: Usuario) -> None:
    """Raise 409 when *usuario* is the only active administrator left."""
    otros = (
        db.query(Usuario)
        .filter(Usuario.id != usuario.id, Usuario.activo.is_(True))
        .all()
    )
    if not any(_es_admin(u.rol, u.activo) for u in otros):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No se puede eliminar ni degradar al último administrador.",
        )


def list_usuarios(db: Session) -> list[Usuario]:
    return Repositorio(db, Usuario, "Usuario").get_all(order_by=Usuario.username)


def get_usuario(db: Session, usuario_id: int) -> Usuario:
    return Repositorio(db, Usuario, "Usuario").get(usuario_id)


def create_usuario(db: Session, data: UsuarioCreate) -> Usuario:
    """Create a user with a bcrypt-hashed password.

    Raises:
        HTTPException 409: Username or email already in use.
        HTTPException 422: Unknown role.
    """
    _check_unico(db, "username", data.username)
    _check_unico(db, "email", data.email)
    _get_rol(db, data.rol_id)

    usuario = Repositorio(db, Usuario, "Usuario").create(
        {
            "username": data.username,
            "email": data.email,
            "password_hash": hash_password(data.password),
            "nombre_completo": data.nombre_completo,
            "rol_id": data.rol_id,
            "activo": data.activo,
        }
    )
    logger.info("create_usuario: %s rol_id=%d (id=%d)", usuario.username, usuario.rol_id, usuario.id)
    return usuario


def update_usuario(db: Session, usuario_id: int, data: UsuarioUpdate) -> Usuario:
    """Apply a partial update; explicit nulls leave required fields unchanged.

    Raises:
        HTTPException 404: User not found.
        HTTPException 409: Email in use, or the change would leave no administrator.
        HTTPException 422: Unknown role.
    """
    repo = Repositorio(db, Usuario, "Usuario")
    usuario = repo.get(usuario_id)
    update_data = {
        campo: valor
        for campo, valor in data.model_dump(exclude_unset=True).items()
        if valor is not None or campo in ("nombre_completo", "rol_id")
    }

    if "email" in update_data:
        _check_unico(db, "email", update_data["email"], usuario_id)
    nuevo_rol = usuario.rol
    if "rol_id" in update_data:
        nuevo_rol = _get_rol(db, update_data["rol_id"]) if update_data["rol_id"] is not None else None
    if _es_admin(usuario.rol, usuario.activo) and not _es_admin(
        nuevo_rol, update_data.get("activo", usuario.activo)
    ):
        _check_quedan_admins(db, usuario)

    password = update_data.pop("password", None)
    if password is not None:
        update_data["password_hash"] = hash_password(password)

    usuario = repo.update(usuario_id, update_data)
    logger.info(
        "update_usuario: id=%d fields=%s",
        usuario_id, ["password" if c == "password_hash" else c for c in update_data],
    )
    return usuario


def delete_usuario(db: Session, usuario_id: int) -> None:
    """Delete a user; the last active administrator cannot be deleted.

    Raises:
        HTTPException 404: User not found.
        HTTPException 409: User is the last administrator.
    """
    usuario = get_usuario(db, usuario_id)
    if _es_admin(usuario.rol, usuario.activo):
        _check_quedan_admins(db, usuario)
    Repositorio(db, Usuario, "Usuario").delete(usuario_id)
