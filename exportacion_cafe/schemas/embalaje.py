"""
Pydantic v2 schemas for the packaging procurement overview.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LineaEmbalajeResponse(BaseModel):
    material: str
    requerido: int
    comprado: int
    faltante: int

    model_config = ConfigDict(from_attributes=True)


class PartidaIncompletaResponse(BaseModel):
    contrato_id: int
    contrato_numero: str | None
    partida_id: int
    partida_numero: str
    items: list[LineaEmbalajeResponse]

    model_config = ConfigDict(from_attributes=True)


class CategoriaEmbalaje(BaseModel):
    requerido: int = 0
    comprado: int = 0


class ResumenEmbalajeResponse(BaseModel):
    """Packaging material totals across the active lots of a company.

    Attributes:
        por_categoria: Required/purchased per bucket (sacos, grainpro, big_bag, jumbo).
        total_faltante: Total missing units.
        partidas_incompletas: Lots with at least one missing material.
        contratos_con_faltante: Ids of contracts flagged with a shortfall.
    """

    por_categoria: dict[str, CategoriaEmbalaje] = Field(default_factory=dict)
    total_faltante: int = Field(0, ge=0)
    partidas_incompletas: list[PartidaIncompletaResponse] = Field(default_factory=list)
    contratos_con_faltante: list[int] = Field(default_factory=list)
