"""
Trade documents service layer.

All database access for the ``/api/documentos`` endpoints lives here.

Numbering
---------
Each numbering scope (see ``engine.numeracion.sequence_scope_key``) owns a
persisted ``SecuenciaDocumento`` row. A new document locks that row,
increments it and formats the result; the number is written once and is
never touched again, so deleting a document leaves a gap instead of
handing its number to the next one. The first time a scope is seen the
counter is seeded from a count of the documents already stored in it.

Two writers may race to create the same counter row; the loser hits the
unique constraint on ``clave``, rolls back and retries the whole creation
once, this time finding the row and waiting on its lock.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exportacion_cafe.engine import (
    MissingScope,
    certificate_weights,
    format_numero,
    invoice_totals,
    next_sequence,
    sequence_scope_key,
)
from exportacion_cafe.engine.numeracion import scope_year_for
from exportacion_cafe.models.contrato import Contrato
from exportacion_cafe.models.documento import Documento
from exportacion_cafe.models.secuencia_documento import SecuenciaDocumento
from exportacion_cafe.schemas.documento import (
    DocumentoBase,
    DocumentoCreate,
    DocumentoLoteCreate,
    DocumentoResponse,
    DocumentoUpdate,
    SiguienteNumeroResponse,
)
from exportacion_cafe.services.repositorio import Repositorio
from exportacion_cafe.utils.constants import EMPRESAS, TIPOS_DOCUMENTO_LOTE

logger = logging.getLogger(__name__)

# Kinds whose lines carry per-unit weights
_TIPOS_CON_PESO: frozenset[str] = frozenset({"PESO", "CALIDAD", "EMPAQUE", "PORTE"})
_MAX_INTENTOS = 2


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _as_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def _check_empresa(empresa: str) -> None:
    if empresa not in EMPRESAS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Empresa inválida: {empresa}.",
        )


def _missing_scope(exc: MissingScope) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


def _documents_in_scope(db: Session, tipo: str, empresa: str) -> list[Documento]:
    return (
        db.query(Documento)
        .filter(Documento.tipo == tipo, Documento.empresa == empresa)
        .all()
    )


def _reserve_numero(
    db: Session,
    tipo: str,
    empresa: str,
    scope_year: int | None,
    tipo_factura: str | None,
) -> str | None:
    """Increment the scope counter and return the formatted identifier.

    Must run inside the transaction that inserts the document; the counter
    row stays locked until that transaction commits.
    """
    try:
        clave = sequence_scope_key(tipo, empresa, scope_year, tipo_factura)
    except MissingScope as exc:
        raise _missing_scope(exc)
    if clave is None:
        return None

    secuencia: SecuenciaDocumento | None = (
        db.query(SecuenciaDocumento)
        .filter(SecuenciaDocumento.clave == clave)
        .with_for_update()
        .first()
    )
    if secuencia is None:
        existentes = _documents_in_scope(db, tipo, empresa)
        semilla = next_sequence(tipo, empresa, existentes, scope_year, tipo_factura) - 1
        secuencia = SecuenciaDocumento(clave=clave, ultimo=semilla)
        db.add(secuencia)
        # Surfaces a concurrent insert of the same clave as IntegrityError
        db.flush()
        logger.info("Contador %s inicializado en %d", clave, semilla)

    secuencia.ultimo += 1
    return format_numero(tipo, empresa, secuencia.ultimo, scope_year, tipo_factura)


def _dump_items(items: list[Any] | None) -> list[dict[str, Any]] | None:
    if items is None:
        return None
    return [item.model_dump(exclude_none=True) for item in items]


def _compute_totals(documento: Documento) -> None:
    """Recompute the stored totals of a document from its lines."""
    if documento.tipo == "FACTURA":
        totales = invoice_totals(documento.lineas, documento.ajustes, documento.anticipos)
        documento.subtotal = totales.subtotal
        documento.total_monto = totales.total
    elif documento.tipo in _TIPOS_CON_PESO:
        neto, bruto = certificate_weights(documento.lineas)
        documento.total_peso_neto = neto
        documento.total_peso_bruto = bruto


def _check_contrato(db: Session, contrato_id: int | None, empresa: str) -> None:
    if contrato_id is None:
        return
    contrato: Contrato | None = db.query(Contrato).filter(Contrato.id == contrato_id).first()
    if contrato is None or contrato.empresa != empresa:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Contrato con ID {contrato_id} no existe para la empresa {empresa}.",
        )


def _new_documento(
    db: Session,
    tipo: str,
    empresa: str,
    data: DocumentoBase,
    tipo_factura: str | None = None,
) -> Documento:
    fecha_emision = data.fecha_emision or datetime.date.today()
    if tipo == "FACTURA":
        tipo_factura = tipo_factura or "EXPORTACION"
    else:
        tipo_factura = None

    numero = _reserve_numero(db, tipo, empresa, scope_year_for(tipo, fecha_emision), tipo_factura)
    documento = Documento(
        empresa=empresa,
        tipo=tipo,
        numero=numero,
        tipo_factura=tipo_factura,
        fecha_emision=fecha_emision,
        contrato_id=data.contrato_id,
        cliente=data.cliente,
        consignatario=data.consignatario,
        destino=data.destino,
        producto=data.producto,
        lineas=_dump_items(data.lineas),
        ajustes=_dump_items(data.ajustes),
        anticipos=_dump_items(data.anticipos),
        observaciones=data.observaciones,
        detalle=data.detalle,
    )
    _compute_totals(documento)
    db.add(documento)
    return documento


def _with_retry(db: Session, operacion, descripcion: str):
    """Run *operacion* and commit, retrying once on a counter-row race."""
    for intento in range(1, _MAX_INTENTOS + 1):
        try:
            resultado = operacion()
            db.commit()
            return resultado
        except IntegrityError:
            db.rollback()
            if intento == _MAX_INTENTOS:
                logger.warning("%s: conflicto de numeración persistente", descripcion)
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Conflicto al asignar el número del documento. Intente de nuevo.",
                )
            logger.warning("%s: conflicto de numeración, reintentando", descripcion)


def build_response(documento: Documento) -> DocumentoResponse:
    return DocumentoResponse(
        id=documento.id,
        empresa=documento.empresa,
        tipo=documento.tipo,
        numero=documento.numero,
        tipo_factura=documento.tipo_factura,
        fecha_emision=documento.fecha_emision,
        contrato_id=documento.contrato_id,
        cliente=documento.cliente,
        consignatario=documento.consignatario,
        destino=documento.destino,
        producto=documento.producto,
        lineas=documento.lineas,
        ajustes=documento.ajustes,
        anticipos=documento.anticipos,
        subtotal=_as_float(documento.subtotal),
        total_monto=_as_float(documento.total_monto),
        total_peso_neto=_as_float(documento.total_peso_neto),
        total_peso_bruto=_as_float(documento.total_peso_bruto),
        observaciones=documento.observaciones,
        detalle=documento.detalle,
        created_at=documento.created_at,
        updated_at=documento.updated_at,
    )


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------


def list_documentos(
    db: Session,
    empresa: str,
    tipo: str | None = None,
    contrato_id: int | None = None,
) -> list[Documento]:
    _check_empresa(empresa)
    query = db.query(Documento).filter(Documento.empresa == empresa)
    if tipo is not None:
        query = query.filter(Documento.tipo == tipo)
    if contrato_id is not None:
        query = query.filter(Documento.contrato_id == contrato_id)
    rows = query.order_by(Documento.fecha_emision.desc(), Documento.id.desc()).all()
    logger.debug("list_documentos: empresa=%s tipo=%s -> %d", empresa, tipo, len(rows))
    return rows


def get_documento(db: Session, documento_id: int) -> Documento:
    return Repositorio(db, Documento, "Documento").get(documento_id)


def create_documento(db: Session, data: DocumentoCreate) -> Documento:
    """Create a document and assign its number from the scope counter.

    Raises:
        HTTPException 409: Counter conflict persisted after one retry.
        HTTPException 422: Unknown company or contract of another company.
    """
    _check_empresa(data.empresa)
    _check_contrato(db, data.contrato_id, data.empresa)

    documento = _with_retry(
        db,
        lambda: _new_documento(db, data.tipo, data.empresa, data, data.tipo_factura),
        f"create_documento {data.tipo}/{data.empresa}",
    )
    db.refresh(documento)
    logger.info(
        "create_documento: %s %s empresa=%s (id=%d)",
        documento.tipo, documento.numero, documento.empresa, documento.id,
    )
    return documento


def create_lote(db: Session, data: DocumentoLoteCreate) -> list[Documento]:
    """Create one certificate per requested kind in a single transaction.

    Each kind draws the next value of its own counter, e.g. a first bulk
    run for dizano yields ``WT-D01-001``, ``QC-D01-001`` and ``PL-D01-001``.
    """
    _check_empresa(data.empresa)
    invalidos = [t for t in data.tipos if t not in TIPOS_DOCUMENTO_LOTE]
    if invalidos:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Tipos no permitidos en lote: {invalidos}.",
        )
    _check_contrato(db, data.contrato_id, data.empresa)
    tipos = list(dict.fromkeys(data.tipos))

    documentos = _with_retry(
        db,
        lambda: [_new_documento(db, tipo, data.empresa, data) for tipo in tipos],
        f"create_lote {tipos}/{data.empresa}",
    )
    for documento in documentos:
        db.refresh(documento)
    logger.info(
        "create_lote: empresa=%s numeros=%s", data.empresa, [d.numero for d in documentos]
    )
    return documentos


def update_documento(db: Session, documento_id: int, data: DocumentoUpdate) -> Documento:
    """Apply a partial update and recompute totals; the number never changes.

    A waybill number carries the year of its issue date, so moving a
    numbered waybill to another calendar year is refused.

    Raises:
        HTTPException 404: Document or linked contract not found.
        HTTPException 422: Waybill issue date moved to a different year.
    """
    documento = get_documento(db, documento_id)
    update_data = data.model_dump(exclude_unset=True)

    nueva_fecha = update_data.get("fecha_emision")
    if documento.numero and nueva_fecha is not None:
        anterior = scope_year_for(documento.tipo, documento.fecha_emision)
        if anterior is not None and scope_year_for(documento.tipo, nueva_fecha) != anterior:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=(
                    f"La carta de porte {documento.numero} pertenece al año {anterior}; "
                    f"la fecha de emisión debe quedar en ese año."
                ),
            )

    if "contrato_id" in update_data:
        _check_contrato(db, update_data["contrato_id"], documento.empresa)
    for field in ("lineas", "ajustes", "anticipos"):
        if field in update_data:
            update_data[field] = _dump_items(getattr(data, field))
    if update_data.get("fecha_emision") is None:
        update_data.pop("fecha_emision", None)

    for field, value in update_data.items():
        setattr(documento, field, value)
    _compute_totals(documento)

    db.commit()
    db.refresh(documento)
    logger.info("update_documento: id=%d fields=%s", documento_id, list(update_data.keys()))
    return documento


def delete_documento(db: Session, documento_id: int) -> None:
    """Delete a document; its number is not returned to the counter."""
    documento = get_documento(db, documento_id)
    numero = documento.numero
    db.delete(documento)
    db.commit()
    logger.info("delete_documento: id=%d numero=%s", documento_id, numero)


def preview_numero(
    db: Session,
    tipo: str,
    empresa: str,
    tipo_factura: str | None = None,
    fecha_emision: datetime.date | None = None,
) -> SiguienteNumeroResponse:
    """Identifier the next document of the scope would receive, without reserving it."""
    _check_empresa(empresa)
    if tipo == "FACTURA":
        tipo_factura = tipo_factura or "EXPORTACION"
    scope_year = scope_year_for(tipo, fecha_emision or datetime.date.today())
    try:
        clave = sequence_scope_key(tipo, empresa, scope_year, tipo_factura)
        if clave is None:
            return SiguienteNumeroResponse(tipo=tipo, empresa=empresa, numero=None)
        secuencia = (
            db.query(SecuenciaDocumento).filter(SecuenciaDocumento.clave == clave).first()
        )
        if secuencia is not None:
            siguiente = secuencia.ultimo + 1
        else:
            siguiente = next_sequence(
                tipo, empresa, _documents_in_scope(db, tipo, empresa), scope_year, tipo_factura
            )
        numero = format_numero(tipo, empresa, siguiente, scope_year, tipo_factura)
    except MissingScope as exc:
        raise _missing_scope(exc)
    return SiguienteNumeroResponse(tipo=tipo, empresa=empresa, numero=numero)
