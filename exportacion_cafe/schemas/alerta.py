"""
Pydantic v2 schemas for the Alertas module.

Alerts are never stored: they are recomputed on every request by the
alert engine (``engine.alertas.compute_alerts``) from the current cut-off
and ETD dates of the active lots.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class AlertaResponse(BaseModel):
    """One time-sensitive alert on a lot.

    Attributes:
        contrato_id: Owning contract.
        contrato_numero: Contract number for display.
        partida_id: Lot primary key.
        partida_numero: Lot display number (company prefix + lot number).
        tipo: "CUTOFF", "ETD", "EMBALAJE" or "MARCAS".
        fecha: The date the alert counts down to.
        dias_restantes: Days left; negative when overdue.
        mensaje: Human-readable description.
    """

    contrato_id: int = Field(..., description="ID del contrato.")
    contrato_numero: str | None = Field(None, description="Número del contrato.")
    partida_id: int = Field(..., description="ID de la partida.")
    partida_numero: str = Field(..., description="Número de partida con prefijo de empresa.")
    tipo: str = Field(..., description="Tipo de alerta: CUTOFF, ETD, EMBALAJE, MARCAS.")
    fecha: date | None = Field(None, description="Fecha de referencia de la alerta.")
    dias_restantes: int = Field(..., description="Días restantes (negativo = vencido).")
    mensaje: str | None = Field(None, description="Descripción de la alerta.")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "contrato_id": 4,
                "contrato_numero": "C-2024-118",
                "partida_id": 12,
                "partida_numero": "11/988/12",
                "tipo": "CUTOFF",
                "fecha": "2024-11-05",
                "dias_restantes": 2,
                "mensaje": "Cut-off de puerto en 2 día(s)",
            }
        },
    )


class AlertaResumenResponse(BaseModel):
    """Alert counts for the dashboard notification badge.

    Attributes:
        total: Number of alerts for the company.
        vencidas: Alerts whose date has already passed.
        by_tipo: Map of alert type to count.
    """

    total: int = Field(..., ge=0, description="Total de alertas.")
    vencidas: int = Field(..., ge=0, description="Alertas con fecha vencida.")
    by_tipo: dict[str, int] = Field(
        default_factory=dict,
        description="Conteo de alertas por tipo.",
    )
