"""
Contracts and lots service layer.

All database access for the ``/api/contratos`` endpoints lives here.
Functions receive a SQLAlchemy ``Session`` and return ORM objects or
schema instances ready for serialisation by FastAPI.

Design notes
------------
- Every lot save reads one snapshot of the company's contracts with their
  lots, runs the engine over it and writes the result back. The contract
  rows of the company are locked (``SELECT ... FOR UPDATE``) for the whole
  read-check-write so two concurrent saves cannot both pass the lot-number
  uniqueness check. SQLite ignores the lock clause; PostgreSQL honours it.
- ``peso_qq`` (linked mode) and ``precio_final`` are recomputed on every
  save, whatever the client sent.
- The harvest year of a contract is resolved on read; changing the sale
  date or the explicit harvest label re-validates all of its lots against
  the new scope.
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from exportacion_cafe.engine import (
    DuplicateLotNumber,
    apply_weight_mode,
    coerce_isf,
    contract_harvest_year,
    default_deductions,
    final_price,
    harvest_year_options,
    partida_display_number,
    resolve_harvest_year,
    settle,
    validate_partida_numero,
)
from exportacion_cafe.engine.derivaciones import to_decimal
from exportacion_cafe.models.contrato import Contrato
from exportacion_cafe.models.liquidacion import PagoLicencia
from exportacion_cafe.models.partida import Partida
from exportacion_cafe.models.registro_embalaje import RegistroEmbalaje
from exportacion_cafe.schemas.common import FilterParams
from exportacion_cafe.schemas.contrato import (
    ContratoCreate,
    ContratoResponse,
    ContratoUpdate,
    CosechasResponse,
    DeduccionResponse,
    LiquidacionResponse,
    PagoCreate,
    PagoResponse,
    PartidaCreate,
    PartidaResponse,
    PartidaUpdate,
    RegistroEmbalajeSchema,
)
from exportacion_cafe.services.repositorio import Repositorio
from exportacion_cafe.utils.constants import CLASES_EMPAQUE, EMPRESAS

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS: frozenset[str] = frozenset({"peso_kg", "peso_qq", "fijacion", "diferencial"})
# Contract columns declared NOT NULL; an explicit null in a patch leaves them as they are
_NOT_NULL_FIELDS: frozenset[str] = frozenset({
    "numero_contrato", "terminado", "alquiler_licencia",
    "cert_rainforest", "cert_organico", "cert_fairtrade", "cert_eudr",
})
# Request-only keys never written to the lot row
_PARTIDA_REQUEST_ONLY: frozenset[str] = frozenset({"peso_vinculado", "registros_embalaje"})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _as_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def _check_empresa(empresa: str) -> None:
    if empresa not in EMPRESAS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Empresa inválida: {empresa}. Valores permitidos: {list(EMPRESAS)}.",
        )


def _check_clase_empaque(clase: str | None) -> None:
    if clase is not None and clase not in CLASES_EMPAQUE:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Clase de empaque inválida: {clase}.",
        )


def _lock_company_contracts(db: Session, empresa: str) -> list[Contrato]:
    """Snapshot of the company's contracts, row-locked until commit."""
    contratos = (
        db.query(Contrato)
        .filter(Contrato.empresa == empresa)
        .order_by(Contrato.id)
        .with_for_update()
        .all()
    )
    logger.debug("_lock_company_contracts: empresa=%s contratos=%d", empresa, len(contratos))
    return contratos


def _validate_numero(
    numero: str | None,
    contrato: Contrato,
    snapshot: list[Contrato],
    exclude_partida_id: int | None = None,
) -> None:
    """Run the uniqueness check and translate a collision to HTTP 409."""
    contratos = snapshot if contrato in snapshot else [*snapshot, contrato]
    try:
        validate_partida_numero(
            numero,
            contrato.empresa,
            contract_harvest_year(contrato),
            contratos,
            exclude_partida_id=exclude_partida_id,
        )
    except DuplicateLotNumber as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


def _assign_partida_fields(partida: Partida, values: dict[str, Any]) -> None:
    for field, value in values.items():
        if field in _PARTIDA_REQUEST_ONLY:
            continue
        if field in _NUMERIC_FIELDS and value is not None:
            value = to_decimal(value)
        if field == "numero" and value is not None:
            value = value.strip()
        setattr(partida, field, value)


def _replace_registros(partida: Partida, registros: list[RegistroEmbalajeSchema] | list[dict]) -> None:
    partida.registros_embalaje.clear()
    for registro in registros:
        data = registro if isinstance(registro, dict) else registro.model_dump()
        partida.registros_embalaje.append(RegistroEmbalaje(**data))


def _derive(partida: Partida, contrato: Contrato, vinculado: bool) -> None:
    """Recompute the derived fields of a lot before it is written."""
    if partida.estado_marcas is None:
        partida.estado_marcas = "PENDIENTE"
    apply_weight_mode(partida, vinculado)
    partida.precio_final = final_price(contrato.diferencial, partida.fijacion)
    coerce_isf(partida)


def build_partida_response(partida: Partida, empresa: str) -> PartidaResponse:
    return PartidaResponse(
        id=partida.id,
        contrato_id=partida.contrato_id,
        numero=partida.numero,
        numero_display=partida_display_number(empresa, partida.numero),
        num_bultos=partida.num_bultos,
        peso_kg=_as_float(partida.peso_kg),
        peso_qq=_as_float(partida.peso_qq),
        tipo_empaque=partida.tipo_empaque,
        clase_empaque=partida.clase_empaque,
        marcas=partida.marcas,
        estado_marcas=partida.estado_marcas,
        fijacion=_as_float(partida.fijacion),
        fecha_fijacion=partida.fecha_fijacion,
        precio_final=_as_float(partida.precio_final),
        tipo_transporte=partida.tipo_transporte,
        destino=partida.destino,
        isf_requerido=bool(partida.isf_requerido),
        isf_enviado=bool(partida.isf_enviado),
        booking=partida.booking,
        naviera=partida.naviera,
        contenedor=partida.contenedor,
        marchamo=partida.marchamo,
        bl_numero=partida.bl_numero,
        fecha_cutoff=partida.fecha_cutoff,
        etd=partida.etd,
        factura_numero=partida.factura_numero,
        duca_simplificada=partida.duca_simplificada,
        duca_complementaria=partida.duca_complementaria,
        registros_embalaje=[
            RegistroEmbalajeSchema.model_validate(r) for r in partida.registros_embalaje
        ],
    )


def build_response(contrato: Contrato) -> ContratoResponse:
    """Construct a ``ContratoResponse`` with the resolved harvest year."""
    partidas = list(contrato.partidas or [])
    total_qq = sum((to_decimal(p.peso_qq) for p in partidas), Decimal("0"))
    return ContratoResponse(
        id=contrato.id,
        empresa=contrato.empresa,
        numero_contrato=contrato.numero_contrato,
        comprador=contrato.comprador,
        fecha_venta=contrato.fecha_venta,
        cosecha=contract_harvest_year(contrato),
        tipo_cafe=contrato.tipo_cafe,
        mes_mercado=contrato.mes_mercado,
        mes_embarque=contrato.mes_embarque,
        diferencial=_as_float(contrato.diferencial),
        cert_rainforest=contrato.cert_rainforest,
        cert_organico=contrato.cert_organico,
        cert_fairtrade=contrato.cert_fairtrade,
        cert_eudr=contrato.cert_eudr,
        terminado=contrato.terminado,
        alquiler_licencia=contrato.alquiler_licencia,
        fecha_creacion=contrato.fecha_creacion,
        total_qq=float(total_qq),
        created_at=contrato.created_at,
        updated_at=contrato.updated_at,
        partidas=[build_partida_response(p, contrato.empresa) for p in partidas],
    )


def _get_partida(db: Session, contrato_id: int, partida_id: int) -> Partida:
    partida: Partida | None = (
        db.query(Partida)
        .filter(Partida.id == partida_id, Partida.contrato_id == contrato_id)
        .first()
    )
    if partida is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Partida {partida_id} no encontrada en el contrato {contrato_id}.",
        )
    return partida


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


def list_contratos(db: Session, filters: FilterParams) -> list[ContratoResponse]:
    """Contracts of the active company, optionally restricted to one harvest.

    The harvest filter uses the same resolver as the uniqueness check, so
    a contract without explicit label is listed under the harvest of its
    sale date.
    """
    _check_empresa(filters.empresa)
    rows = (
        db.query(Contrato)
        .filter(Contrato.empresa == filters.empresa)
        .order_by(Contrato.fecha_venta.desc(), Contrato.id.desc())
        .all()
    )
    if filters.cosecha is not None:
        rows = [c for c in rows if contract_harvest_year(c) == filters.cosecha]
    logger.debug(
        "list_contratos: empresa=%s cosecha=%s -> %d", filters.empresa, filters.cosecha, len(rows)
    )
    return [build_response(c) for c in rows]


def get_contrato(db: Session, contrato_id: int, for_update: bool = False) -> Contrato:
    return Repositorio(db, Contrato, "Contrato").get(contrato_id, for_update=for_update)


def create_contrato(db: Session, data: ContratoCreate) -> Contrato:
    """Create a contract, optionally with its first lots.

    Raises:
        HTTPException 409: If an inline lot number already exists in the
                           company and harvest year (or twice in the payload).
        HTTPException 422: Unknown company or package kind.
    """
    _check_empresa(data.empresa)
    snapshot = _lock_company_contracts(db, data.empresa)

    values = data.model_dump(exclude={"partidas"}, exclude_none=True)
    if "diferencial" in values:
        values["diferencial"] = to_decimal(values["diferencial"])
    if values.get("cosecha"):
        values["cosecha"] = values["cosecha"].strip()
    contrato = Contrato(fecha_creacion=datetime.date.today(), **values)

    for partida_data in data.partidas:
        _check_clase_empaque(partida_data.clase_empaque)
        _validate_numero(partida_data.numero, contrato, snapshot)
        partida = Partida()
        contrato.partidas.append(partida)
        _assign_partida_fields(partida, partida_data.model_dump(exclude_none=True))
        if partida_data.registros_embalaje:
            _replace_registros(partida, partida_data.registros_embalaje)
        _derive(partida, contrato, partida_data.peso_vinculado)

    db.add(contrato)
    db.commit()
    db.refresh(contrato)

    logger.info(
        "create_contrato: %s empresa=%s cosecha=%s partidas=%d (id=%d)",
        contrato.numero_contrato, contrato.empresa, contract_harvest_year(contrato),
        len(contrato.partidas), contrato.id,
    )
    return contrato


def update_contrato(db: Session, contrato_id: int, data: ContratoUpdate) -> Contrato:
    """Apply a partial update to a contract.

    Final prices of all lots follow a new differential. When the harvest
    scope changes every lot number is checked again in the new scope.

    Raises:
        HTTPException 404: Contract not found.
        HTTPException 409: A lot collides in the new harvest year.
    """
    contrato = get_contrato(db, contrato_id, for_update=True)
    snapshot = _lock_company_contracts(db, contrato.empresa)

    cosecha_anterior = contract_harvest_year(contrato)
    update_data = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in _NOT_NULL_FIELDS
    }
    for field, value in update_data.items():
        if field in _NUMERIC_FIELDS and value is not None:
            value = to_decimal(value)
        setattr(contrato, field, value)

    if contract_harvest_year(contrato) != cosecha_anterior:
        for partida in contrato.partidas:
            _validate_numero(partida.numero, contrato, snapshot, exclude_partida_id=partida.id)

    for partida in contrato.partidas:
        partida.precio_final = final_price(contrato.diferencial, partida.fijacion)

    db.commit()
    db.refresh(contrato)

    logger.info("update_contrato: id=%d fields=%s", contrato_id, list(update_data.keys()))
    return contrato


def delete_contrato(db: Session, contrato_id: int) -> None:
    """Delete a contract together with its lots, settlement and shipments."""
    Repositorio(db, Contrato, "Contrato").delete(contrato_id)


def get_cosechas(today: datetime.date | None = None) -> CosechasResponse:
    today = today or datetime.date.today()
    return CosechasResponse(actual=resolve_harvest_year(today), opciones=harvest_year_options(today))


# ---------------------------------------------------------------------------
# Lots
# ---------------------------------------------------------------------------


def add_partida(db: Session, contrato_id: int, data: PartidaCreate) -> Partida:
    """Add a lot to a contract after the uniqueness check.

    Raises:
        HTTPException 404: Contract not found.
        HTTPException 409: Lot number already used in the company + harvest.
    """
    contrato = get_contrato(db, contrato_id, for_update=True)
    _check_clase_empaque(data.clase_empaque)
    snapshot = _lock_company_contracts(db, contrato.empresa)
    _validate_numero(data.numero, contrato, snapshot)

    partida = Partida()
    contrato.partidas.append(partida)
    _assign_partida_fields(partida, data.model_dump(exclude_none=True))
    if data.registros_embalaje:
        _replace_registros(partida, data.registros_embalaje)
    _derive(partida, contrato, data.peso_vinculado)

    db.commit()
    db.refresh(partida)

    logger.info(
        "add_partida: contrato_id=%d numero=%s peso_qq=%s precio_final=%s (id=%d)",
        contrato_id, partida.numero, partida.peso_qq, partida.precio_final, partida.id,
    )
    return partida


def update_partida(
    db: Session,
    contrato_id: int,
    partida_id: int,
    data: PartidaUpdate,
) -> Partida:
    """Apply a partial update to a lot and recompute its derived fields.

    The lot itself is excluded from the uniqueness scan so re-saving it
    with its own number is accepted.

    Raises:
        HTTPException 404: Lot not found in the contract.
        HTTPException 409: New lot number already used in the company + harvest.
    """
    contrato = get_contrato(db, contrato_id)
    partida = _get_partida(db, contrato_id, partida_id)
    _check_clase_empaque(data.clase_empaque)
    update_data = data.model_dump(exclude_unset=True)

    if "numero" in update_data:
        snapshot = _lock_company_contracts(db, contrato.empresa)
        _validate_numero(data.numero, contrato, snapshot, exclude_partida_id=partida.id)

    _assign_partida_fields(partida, update_data)
    if data.registros_embalaje is not None:
        _replace_registros(partida, data.registros_embalaje)
    _derive(partida, contrato, data.peso_vinculado)

    db.commit()
    db.refresh(partida)

    logger.info(
        "update_partida: id=%d contrato_id=%d fields=%s", partida_id, contrato_id, list(update_data)
    )
    return partida


def delete_partida(db: Session, contrato_id: int, partida_id: int) -> None:
    partida = _get_partida(db, contrato_id, partida_id)
    db.delete(partida)
    db.commit()
    logger.info("delete_partida: id=%d contrato_id=%d", partida_id, contrato_id)


# ---------------------------------------------------------------------------
# License settlement
# ---------------------------------------------------------------------------


def get_liquidacion(db: Session, contrato_id: int) -> LiquidacionResponse:
    """Settlement of a license-rental contract.

    Stored deductions are used when present; otherwise the default set
    (2.5% tax, per-quintal license fee, fixed phytosanitary cost) is
    computed from the lots.
    """
    contrato = get_contrato(db, contrato_id)
    partidas = list(contrato.partidas)
    deducciones = list(contrato.deducciones) or default_deductions(partidas)
    pagos = list(contrato.pagos)
    resultado = settle(partidas, deducciones, pagos)

    return LiquidacionResponse(
        contrato_id=contrato.id,
        contrato_numero=contrato.numero_contrato,
        total_quintales=float(resultado.total_quintales),
        valor_total=float(resultado.valor_total),
        deducciones=[DeduccionResponse(concepto=d.concepto, monto=float(d.monto)) for d in deducciones],
        total_deducciones=float(resultado.total_deducciones),
        pagos=[
            PagoResponse(id=p.id, fecha=p.fecha, monto=float(p.monto), referencia=p.referencia)
            for p in pagos
        ],
        total_pagado=float(resultado.total_pagado),
        saldo=float(resultado.saldo),
    )


def add_pago(db: Session, contrato_id: int, data: PagoCreate) -> PagoLicencia:
    contrato = get_contrato(db, contrato_id)
    if not contrato.alquiler_licencia:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"El contrato {contrato.numero_contrato} no es de alquiler de licencia.",
        )
    pago = PagoLicencia(
        contrato_id=contrato.id,
        fecha=data.fecha,
        monto=to_decimal(data.monto),
        referencia=data.referencia,
    )
    db.add(pago)
    db.commit()
    db.refresh(pago)
    logger.info("add_pago: contrato_id=%d monto=%s (id=%d)", contrato_id, pago.monto, pago.id)
    return pago
