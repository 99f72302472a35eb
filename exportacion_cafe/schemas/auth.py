"""
Pydantic v2 schemas for the authentication endpoints.

Covers the login request payload, the JWT token response, and the
public user representation returned by ``GET /api/auth/me``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Payload accepted by ``POST /api/auth/login``.

    Attributes:
        username: The user's unique login name.
        password: Plain-text password (transmitted over HTTPS only).
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=100,
        description="Nombre de usuario único del sistema",
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Contraseña en texto plano (solo sobre HTTPS)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "admin",
                "password": "secret1234",
            }
        }
    )


class TokenResponse(BaseModel):
    """Response body returned after a successful authentication."""

    access_token: str = Field(..., description="JWT de acceso firmado con HS256")
    token_type: str = Field(default="bearer", description="Tipo de token OAuth2")


class PermisoResumen(BaseModel):
    recurso: str
    acciones: list[str]

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Public representation of an authenticated user.

    Sensitive fields (``password_hash``) are deliberately excluded. The
    role's permissions are embedded so the client can hide what it may not do.

    Attributes:
        id: Database primary key.
        username: Unique login name.
        email: Email address on record.
        nombre_completo: Full display name.
        rol_id: Assigned role, or ``None``.
        rol_nombre: Name of the assigned role.
        permisos: Flat permission list of the role.
        activo: Whether the account is currently active.
    """

    id: int
    username: str
    email: str
    nombre_completo: str | None
    rol_id: int | None
    rol_nombre: str | None = None
    permisos: list[PermisoResumen] = Field(default_factory=list)
    activo: bool
