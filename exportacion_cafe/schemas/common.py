"""
Shared Pydantic v2 schemas reused across multiple modules.

Provides the company-scope filter and the generic message response so
that each domain module can compose them without duplicating field
definitions.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FilterParams(BaseModel):
    """Query-level filters shared by the contract, document and shipment lists.

    Attributes:
        empresa: Active company; every list is scoped to exactly one.
        cosecha: Harvest-year label, e.g. "2024-2025". None = all harvests.
    """

    empresa: str = Field(
        ...,
        description="Empresa activa: 'dizano' o 'proben'.",
    )
    cosecha: str | None = Field(
        default=None,
        pattern=r"^\d{4}-\d{4}$",
        description="Cosecha, ej. '2024-2025'. None = todas las cosechas.",
    )


class MessageResponse(BaseModel):
    """Generic message envelope for operations that do not return a resource.

    Attributes:
        message: Short human-readable result summary.
        detail: Optional extended information.
    """

    message: str = Field(..., description="Resumen del resultado de la operación.")
    detail: str | None = Field(
        default=None,
        description="Información adicional (contexto de error, sugerencia, etc.).",
    )
