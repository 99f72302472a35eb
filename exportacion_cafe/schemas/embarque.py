"""
Pydantic v2 schemas for shipments and their task checklist (``/api/embarques``).
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class TareaEmbarqueResponse(BaseModel):
    id: int
    clave: str
    etiqueta: str
    categoria: str
    prioridad: str
    estado: str
    orden: int
    fecha_limite: date | None
    fecha_completado: date | None
    notas: str | None

    model_config = ConfigDict(from_attributes=True)


class TareaEmbarqueUpdate(BaseModel):
    """Partial update of a task; any status or priority is allowed at any time."""

    estado: str | None = Field(
        None, pattern="^(PENDIENTE|EN_PROGRESO|COMPLETADO|OMITIDO|EN_ESPERA)$"
    )
    prioridad: str | None = Field(None, pattern="^(BAJA|MEDIA|ALTA)$")
    fecha_limite: date | None = None
    notas: str | None = None


class EmbarqueBase(BaseModel):
    destino: str | None = Field(None, max_length=200)
    booking: str | None = Field(None, max_length=100)
    naviera: str | None = Field(None, max_length=100)
    buque: str | None = Field(None, max_length=100)
    fecha_zarpe: date | None = None
    notas: str | None = None


class EmbarqueCreate(EmbarqueBase):
    """Payload accepted by ``POST /api/embarques``.

    Attributes:
        contrato_id: Contract being shipped.
        partida_ids: Lots of that contract travelling in this shipment.
    """

    contrato_id: int = Field(..., ge=1)
    partida_ids: list[int] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "contrato_id": 4,
                "partida_ids": [12, 13],
                "destino": "Hamburgo",
                "naviera": "Hapag-Lloyd",
                "fecha_zarpe": "2024-11-09",
            }
        }
    )


class EmbarqueUpdate(EmbarqueBase):
    estado: str | None = Field(
        None, pattern="^(PLANIFICACION|EN_TRANSITO|ESPERANDO_PAGO|COMPLETADO)$"
    )
    partida_ids: list[int] | None = None


class EmbarqueResponse(BaseModel):
    id: int
    empresa: str
    contrato_id: int
    contrato_numero: str | None
    estado: str
    destino: str | None
    booking: str | None
    naviera: str | None
    buque: str | None
    fecha_creacion: date
    fecha_zarpe: date | None
    notas: str | None
    partida_ids: list[int] = Field(default_factory=list)
    tareas: list[TareaEmbarqueResponse] = Field(default_factory=list)
    progreso: float = Field(0.0, description="Porcentaje de tareas completadas u omitidas.")
