"""
Authentication and authorization for the export backend.

Provides:
- ``authenticate_user`` — credential verification against the DB.
- ``get_current_user`` — FastAPI dependency that extracts and validates
  the Bearer JWT from the ``Authorization`` header.
- ``require_permission`` — dependency factory that checks the caller's
  role against a ``(recurso, accion)`` pair through the permission engine.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from exportacion_cafe.database import get_db
from exportacion_cafe.engine import InvalidPermission, ensure_permission
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.auth import PermisoResumen, UserResponse
from exportacion_cafe.utils.security import verify_password, verify_token

logger = logging.getLogger(__name__)

# The ``tokenUrl`` must match the login endpoint path.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def authenticate_user(db: Session, username: str, password: str) -> Usuario | None:
    """Verify username/password credentials against the database.

    Returns ``None`` instead of raising so that callers control the HTTP
    error response. Unknown users, inactive accounts and wrong passwords
    are indistinguishable to the caller.
    """
    user: Usuario | None = (
        db.query(Usuario)
        .filter(Usuario.username == username, Usuario.activo.is_(True))
        .first()
    )

    if user is None:
        logger.debug("authenticate_user: unknown or inactive user '%s'", username)
        return None

    if not verify_password(password, user.password_hash):
        logger.debug("authenticate_user: wrong password for user '%s'", username)
        return None

    # Last-access timestamp is informative only
    try:
        user.ultimo_acceso = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:  # pragma: no cover
        db.rollback()
        logger.warning("Could not update ultimo_acceso for user '%s'", username)

    return user


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> Usuario:
    """FastAPI dependency that resolves the caller's identity from a JWT.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired, or
                           the referenced user no longer exists or is inactive.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudo validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = verify_token(token)
    except ValueError:
        raise credentials_exception

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise credentials_exception

    user: Usuario | None = (
        db.query(Usuario)
        .filter(Usuario.id == user_id, Usuario.activo.is_(True))
        .first()
    )
    if user is None:
        raise credentials_exception
    return user


def check_permission(user: Usuario, recurso: str, accion: str) -> None:
    """Raise HTTP 403 unless the role of *user* grants *accion* on *recurso*.

    Used directly by endpoints whose resource depends on the payload, e.g.
    documents, where each kind is guarded by its own resource.
    """
    try:
        ensure_permission(user.rol, recurso, accion)
    except InvalidPermission as exc:
        logger.info(
            "Permiso denegado: user=%s recurso=%s accion=%s", user.username, recurso, accion
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))


def require_permission(recurso: str, accion: str):
    """Return a FastAPI dependency that requires *accion* on *recurso*.

    .. code-block:: python

        @router.post("/")
        def create(
            current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "CREAR"))],
        ):
            ...

    Raises:
        HTTPException 403: If the user's role does not grant the action.
    """

    def _check_permission(
        current_user: Annotated[Usuario, Depends(get_current_user)],
    ) -> Usuario:
        check_permission(current_user, recurso, accion)
        return current_user

    return _check_permission


def build_user_response(user: Usuario) -> UserResponse:
    rol = user.rol
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        nombre_completo=user.nombre_completo,
        rol_id=user.rol_id,
        rol_nombre=rol.nombre if rol is not None else None,
        permisos=[PermisoResumen.model_validate(p) for p in (rol.permisos if rol else [])],
        activo=user.activo,
    )
