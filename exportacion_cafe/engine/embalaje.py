"""Packaging-material reconciliation (required vs. purchased).

Resolution order for a lot's requirements
-----------------------------------------
1. Explicit ``registros_embalaje`` stored on the lot are used as-is.
2. A tagged ``clase_empaque`` selects a row of ``PLANTILLAS_EMPAQUE``.
3. Legacy rows without a tag fall back to a substring match on the free
   ``tipo_empaque`` label. This is best-effort only: free or localized labels
   can be misread, so every fallback is logged as a data-quality warning.

Inferred requirements ask for one unit of each material per bag
(``requerido = num_bultos``) with nothing purchased yet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from exportacion_cafe.engine.numeracion import partida_display_number

logger = logging.getLogger(__name__)

MATERIAL_SACO = "Sacos de Yute"
MATERIAL_GRAINPRO = "Bolsas GrainPro"
MATERIAL_BIG_BAG = "Big Bag"
MATERIAL_JUMBO = "Jumbo"

# Materials needed per bag for each tagged package kind
PLANTILLAS_EMPAQUE: dict[str, tuple[str, ...]] = {
    "SACO_YUTE": (MATERIAL_SACO,),
    "SACO_YUTE_GRAINPRO": (MATERIAL_SACO, MATERIAL_GRAINPRO),
    "BIG_BAG": (MATERIAL_BIG_BAG,),
    "JUMBO": (MATERIAL_JUMBO,),
    "CAJA": (),
    "OTRO": (),
}

# Summary buckets, matched against the lower-cased material name in order
CATEGORIAS_MATERIAL: tuple[tuple[str, str], ...] = (
    ("saco", "sacos"),
    ("grainpro", "grainpro"),
    ("big", "big_bag"),
    ("jumbo", "jumbo"),
)


@dataclass(frozen=True)
class LineaEmbalaje:
    material: str
    requerido: int
    comprado: int
    faltante: int


def _linea(material: str, requerido: Any, comprado: Any) -> LineaEmbalaje:
    req = int(requerido or 0)
    com = int(comprado or 0)
    return LineaEmbalaje(material=material, requerido=req, comprado=com, faltante=max(0, req - com))


def infer_from_label(tipo_empaque: str | None) -> tuple[str, ...]:
    """Guess the materials of a legacy package label."""
    label = (tipo_empaque or "").lower()
    if "saco" in label and "grainpro" in label:
        return (MATERIAL_SACO, MATERIAL_GRAINPRO)
    if "saco" in label:
        return (MATERIAL_SACO,)
    if "big bag" in label:
        return (MATERIAL_BIG_BAG,)
    if "jumbo" in label:
        return (MATERIAL_JUMBO,)
    return ()


def required_materials(partida: Any) -> tuple[str, ...]:
    clase = getattr(partida, "clase_empaque", None)
    if clase in PLANTILLAS_EMPAQUE:
        return PLANTILLAS_EMPAQUE[clase]
    materiales = infer_from_label(getattr(partida, "tipo_empaque", None))
    logger.warning(
        "required_materials: partida %s sin clase_empaque; inferido %s desde la etiqueta %r",
        getattr(partida, "numero", None), list(materiales), getattr(partida, "tipo_empaque", None),
    )
    return materiales


def reconcile(partida: Any) -> list[LineaEmbalaje]:
    """Required vs. purchased packaging material for one lot."""
    registros = getattr(partida, "registros_embalaje", None) or []
    if registros:
        return [_linea(r.material, r.requerido, r.comprado) for r in registros]

    bultos = int(getattr(partida, "num_bultos", None) or 0)
    if bultos <= 0:
        return []
    return [_linea(m, bultos, 0) for m in required_materials(partida)]


def material_category(material: str) -> str | None:
    nombre = (material or "").lower()
    for needle, categoria in CATEGORIAS_MATERIAL:
        if needle in nombre:
            return categoria
    return None


# ---------------------------------------------------------------------------
# Aggregation across lots
# ---------------------------------------------------------------------------


@dataclass
class PartidaIncompleta:
    contrato_id: Any
    contrato_numero: str | None
    partida_id: Any
    partida_numero: str
    items: list[LineaEmbalaje] = field(default_factory=list)


@dataclass
class ResumenEmbalaje:
    """Packaging procurement overview across all active lots of a company.

    Attributes:
        por_categoria: ``{categoria: {"requerido": n, "comprado": n}}``.
        total_faltante: Total missing units over every material.
        partidas_incompletas: Lots with at least one missing material.
        contratos_con_faltante: Ids of contracts with an outstanding shortfall.
    """

    por_categoria: dict[str, dict[str, int]] = field(
        default_factory=lambda: {
            categoria: {"requerido": 0, "comprado": 0} for _, categoria in CATEGORIAS_MATERIAL
        }
    )
    total_faltante: int = 0
    partidas_incompletas: list[PartidaIncompleta] = field(default_factory=list)
    contratos_con_faltante: set = field(default_factory=set)


def summarize(contratos: Iterable[Any], empresa: str) -> ResumenEmbalaje:
    """Aggregate reconciliation over the non-terminated contracts of *empresa*."""
    resumen = ResumenEmbalaje()
    for contrato in contratos:
        if contrato.empresa != empresa or contrato.terminado:
            continue
        for partida in contrato.partidas or []:
            lineas = reconcile(partida)
            faltantes: list[LineaEmbalaje] = []
            for linea in lineas:
                categoria = material_category(linea.material)
                if categoria is not None:
                    resumen.por_categoria[categoria]["requerido"] += linea.requerido
                    resumen.por_categoria[categoria]["comprado"] += linea.comprado
                if linea.faltante > 0:
                    resumen.total_faltante += linea.faltante
                    faltantes.append(linea)
            if faltantes:
                resumen.contratos_con_faltante.add(contrato.id)
                resumen.partidas_incompletas.append(
                    PartidaIncompleta(
                        contrato_id=contrato.id,
                        contrato_numero=contrato.numero_contrato,
                        partida_id=partida.id,
                        partida_numero=partida_display_number(empresa, partida.numero),
                        items=faltantes,
                    )
                )
    logger.debug(
        "summarize embalaje: empresa=%s faltante=%d partidas_incompletas=%d",
        empresa, resumen.total_faltante, len(resumen.partidas_incompletas),
    )
    return resumen
