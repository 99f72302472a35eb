"""
Pydantic v2 schemas for the user administration endpoints (``/api/usuarios``).

Write schemas (``UsuarioCreate``, ``UsuarioUpdate``) are kept apart from
the read schema so a password or its hash never leaves the API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Re-export the canonical read schema so callers can import from one place.
from exportacion_cafe.schemas.auth import UserResponse as UsuarioResponse  # noqa: F401


class UsuarioCreate(BaseModel):
    """Payload for creating a user account (``POST /api/usuarios``).

    Attributes:
        username: Unique login identifier (alphanumeric, ``_`` and ``.``).
        email: Unique email address.
        password: Plain-text password, stored as a bcrypt hash.
        nombre_completo: Display name.
        rol_id: Role whose permissions the user receives.
        activo: Whether the account can log in.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=100,
        pattern=r"^[a-zA-Z0-9_.]+$",
        description="Identificador único de inicio de sesión",
    )
    email: EmailStr = Field(..., description="Correo electrónico único")
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Contraseña en texto plano; se almacena hasheada con bcrypt",
    )
    nombre_completo: str | None = Field(None, max_length=300, description="Nombre completo")
    rol_id: int = Field(..., description="ID del rol asignado")
    activo: bool = Field(True, description="False para crear la cuenta suspendida")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "mlopez",
                "email": "m.lopez@cafelasregiones.gt",
                "password": "Bodega2024!",
                "nombre_completo": "María López",
                "rol_id": 2,
            }
        }
    )


class UsuarioUpdate(BaseModel):
    """Partial update of a user (``PUT /api/usuarios/{id}``).

    Omitting ``password`` keeps the stored hash. ``activo=False`` suspends
    the account without deleting it.
    """

    email: EmailStr | None = Field(None, description="Nuevo correo electrónico")
    password: str | None = Field(None, min_length=8, max_length=128, description="Nueva contraseña")
    nombre_completo: str | None = Field(None, max_length=300)
    rol_id: int | None = Field(None, description="Nuevo rol")
    activo: bool | None = Field(None, description="False para suspender la cuenta")

    model_config = ConfigDict(json_schema_extra={"example": {"rol_id": 3, "activo": False}})
