"""
Roles service layer (``/api/roles``).

Roles are flat: a role is a name plus one ``PermisoRol`` row per resource.
Updating the permission list replaces it as a whole.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from exportacion_cafe.models.rol import PermisoRol, Rol
from exportacion_cafe.schemas.rol import PermisoSchema, RolCreate, RolUpdate
from exportacion_cafe.services.repositorio import Repositorio

logger = logging.getLogger(__name__)


def _check_nombre_libre(db: Session, nombre: str, rol_id: int | None = None) -> None:
    query = db.query(Rol).filter(Rol.nombre == nombre)
    if rol_id is not None:
        query = query.filter(Rol.id != rol_id)
    if query.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe un rol con el nombre '{nombre}'.",
        )


def _permisos(permisos: list[PermisoSchema]) -> list[PermisoRol]:
    # Later entries for the same resource merge into the first one
    por_recurso: dict[str, list[str]] = {}
    for permiso in permisos:
        acciones = por_recurso.setdefault(permiso.recurso, [])
        acciones.extend(a for a in permiso.acciones if a not in acciones)
    return [PermisoRol(recurso=r, acciones=a) for r, a in por_recurso.items()]


def list_roles(db: Session) -> list[Rol]:
    return Repositorio(db, Rol, "Rol").get_all(order_by=Rol.id)


def create_rol(db: Session, data: RolCreate) -> Rol:
    _check_nombre_libre(db, data.nombre)
    rol = Rol(nombre=data.nombre, descripcion=data.descripcion)
    rol.permisos.extend(_permisos(data.permisos))
    rol = Repositorio(db, Rol, "Rol").create(rol)
    logger.info("create_rol: %s recursos=%s", rol.nombre, [p.recurso for p in rol.permisos])
    return rol


def update_rol(db: Session, rol_id: int, data: RolUpdate) -> Rol:
    rol = Repositorio(db, Rol, "Rol").get(rol_id)
    if data.nombre is not None:
        _check_nombre_libre(db, data.nombre, rol_id)
        rol.nombre = data.nombre
    if "descripcion" in data.model_fields_set:
        rol.descripcion = data.descripcion
    if data.permisos is not None:
        rol.permisos.clear()
        db.flush()
        rol.permisos.extend(_permisos(data.permisos))

    db.commit()
    db.refresh(rol)
    logger.info("update_rol: id=%d fields=%s", rol_id, sorted(data.model_fields_set))
    return rol


def delete_rol(db: Session, rol_id: int) -> None:
    """Delete a role; it must not be assigned to any user."""
    rol = Repositorio(db, Rol, "Rol").get(rol_id)
    if rol.usuarios:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"El rol '{rol.nombre}' está asignado a {len(rol.usuarios)} usuario(s).",
        )
    Repositorio(db, Rol, "Rol").delete(rol_id)
