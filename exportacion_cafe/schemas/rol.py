"""
Pydantic v2 schemas for role administration (``/api/roles``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from exportacion_cafe.utils.constants import ACCIONES, RECURSOS


class PermisoSchema(BaseModel):
    """Actions granted on one resource.

    Attributes:
        recurso: One of ``constants.RECURSOS``.
        acciones: Subset of ``constants.ACCIONES``.
    """

    recurso: str = Field(..., description="Recurso protegido, ej. 'CONTRATOS'.")
    acciones: list[str] = Field(
        default_factory=list,
        description="Acciones permitidas: VER, CREAR, EDITAR, ELIMINAR.",
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("recurso")
    @classmethod
    def _recurso_valido(cls, value: str) -> str:
        if value not in RECURSOS:
            raise ValueError(f"Recurso inválido: {value}")
        return value

    @field_validator("acciones")
    @classmethod
    def _acciones_validas(cls, value: list[str]) -> list[str]:
        invalidas = [a for a in value if a not in ACCIONES]
        if invalidas:
            raise ValueError(f"Acciones inválidas: {invalidas}")
        # Keep order stable and drop repeats
        return list(dict.fromkeys(value))


class RolCreate(BaseModel):
    nombre: str = Field(..., min_length=2, max_length=100, description="Nombre único del rol.")
    descripcion: str | None = Field(None, max_length=300)
    permisos: list[PermisoSchema] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nombre": "Logística",
                "descripcion": "Gestión de contratos y embarques",
                "permisos": [
                    {"recurso": "CONTRATOS", "acciones": ["VER", "CREAR", "EDITAR"]},
                    {"recurso": "EMBARQUES", "acciones": ["VER", "CREAR", "EDITAR"]},
                ],
            }
        }
    )


class RolUpdate(BaseModel):
    """Partial update; when ``permisos`` is sent it replaces the whole set."""

    nombre: str | None = Field(None, min_length=2, max_length=100)
    descripcion: str | None = Field(None, max_length=300)
    permisos: list[PermisoSchema] | None = None


class RolResponse(BaseModel):
    id: int
    nombre: str
    descripcion: str | None
    permisos: list[PermisoSchema]

    model_config = ConfigDict(from_attributes=True)
