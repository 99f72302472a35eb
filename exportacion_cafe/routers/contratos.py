"""
Contracts router.

Mounts under ``/api/contratos`` (prefix set in ``main.py``).

All endpoints require a valid JWT. Each one additionally checks the
caller's role for the matching action on the ``CONTRATOS`` resource
(``LIQUIDACIONES`` for settlement endpoints).

Endpoints
---------
GET    /                              — Contracts of the active company (optional harvest filter).
GET    /cosechas                      — Current harvest year and selectable options.
GET    /{id}                          — Contract detail with its lots.
POST   /                              — Create contract (optionally with lots).
PUT    /{id}                          — Partial update of a contract.
DELETE /{id}                          — Delete contract and everything it owns.
POST   /{id}/partidas                 — Add a lot.
PUT    /{id}/partidas/{partida_id}    — Update a lot.
DELETE /{id}/partidas/{partida_id}    — Delete a lot.
GET    /{id}/liquidacion              — License-rental settlement.
POST   /{id}/pagos                    — Register a license payment.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from exportacion_cafe.config import get_settings
from exportacion_cafe.database import get_db
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.common import FilterParams, MessageResponse
from exportacion_cafe.schemas.contrato import (
    ContratoCreate,
    ContratoResponse,
    ContratoUpdate,
    CosechasResponse,
    LiquidacionResponse,
    PagoCreate,
    PagoResponse,
    PartidaCreate,
    PartidaResponse,
    PartidaUpdate,
)
from exportacion_cafe.services import contrato_service
from exportacion_cafe.services.auth_service import get_current_user, require_permission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contratos"])


def _filter_params(
    empresa: Annotated[
        str | None,
        Query(description="Empresa activa. Omitir para usar la empresa por defecto."),
    ] = None,
    cosecha: Annotated[
        str | None,
        Query(description="Cosecha, ej. '2024-2025'. Omitir para todas.", pattern=r"^\d{4}-\d{4}$"),
    ] = None,
) -> FilterParams:
    """Assemble ``FilterParams`` from URL query strings."""
    return FilterParams(empresa=empresa or get_settings().DEFAULT_COMPANY, cosecha=cosecha)


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


@router.get(
    "/",
    response_model=list[ContratoResponse],
    summary="Listar contratos",
    responses={
        200: {"description": "Contratos de la empresa."},
        401: {"description": "Token JWT ausente o inválido."},
        403: {"description": "Sin permiso VER sobre CONTRATOS."},
    },
)
def list_contratos(
    filters: Annotated[FilterParams, Depends(_filter_params)],
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "VER"))],
) -> list[ContratoResponse]:
    return contrato_service.list_contratos(db, filters)


@router.get(
    "/cosechas",
    response_model=CosechasResponse,
    summary="Cosechas disponibles",
    description="Cosecha en curso (inicia el 1 de octubre) y opciones seleccionables.",
)
def get_cosechas(
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> CosechasResponse:
    return contrato_service.get_cosechas()


@router.get(
    "/{contrato_id}",
    response_model=ContratoResponse,
    summary="Detalle de contrato",
    responses={404: {"description": "Contrato no encontrado."}},
)
def get_contrato(
    contrato_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "VER"))],
) -> ContratoResponse:
    return contrato_service.build_response(contrato_service.get_contrato(db, contrato_id))


@router.post(
    "/",
    response_model=ContratoResponse,
    status_code=201,
    summary="Crear contrato",
    description=(
        "Registra un contrato de venta. Si no se indica la cosecha se deriva "
        "de la fecha de venta. Las partidas incluidas se validan por número "
        "único dentro de la empresa y cosecha."
    ),
    responses={
        201: {"description": "Contrato creado exitosamente."},
        403: {"description": "Sin permiso CREAR sobre CONTRATOS."},
        409: {"description": "Número de partida duplicado en la cosecha."},
        422: {"description": "Datos de entrada inválidos."},
    },
)
def create_contrato(
    data: ContratoCreate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "CREAR"))],
) -> ContratoResponse:
    logger.info(
        "POST /contratos/ empresa=%s numero=%s user=%s",
        data.empresa, data.numero_contrato, _current_user.username,
    )
    contrato = contrato_service.create_contrato(db, data)
    return contrato_service.build_response(contrato)


@router.put(
    "/{contrato_id}",
    response_model=ContratoResponse,
    summary="Actualizar contrato",
    responses={
        404: {"description": "Contrato no encontrado."},
        409: {"description": "Una partida queda duplicada en la nueva cosecha."},
    },
)
def update_contrato(
    contrato_id: int,
    data: ContratoUpdate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "EDITAR"))],
) -> ContratoResponse:
    contrato = contrato_service.update_contrato(db, contrato_id, data)
    return contrato_service.build_response(contrato)


@router.delete(
    "/{contrato_id}",
    response_model=MessageResponse,
    summary="Eliminar contrato",
    responses={404: {"description": "Contrato no encontrado."}},
)
def delete_contrato(
    contrato_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "ELIMINAR"))],
) -> MessageResponse:
    contrato_service.delete_contrato(db, contrato_id)
    return MessageResponse(message=f"Contrato {contrato_id} eliminado.")


# ---------------------------------------------------------------------------
# Lots
# ---------------------------------------------------------------------------


@router.post(
    "/{contrato_id}/partidas",
    response_model=PartidaResponse,
    status_code=201,
    summary="Agregar partida",
    description=(
        "Agrega una partida al contrato. Con ``peso_vinculado=true`` los "
        "quintales se calculan desde los kilogramos; el precio final siempre "
        "es diferencial + fijación."
    ),
    responses={
        404: {"description": "Contrato no encontrado."},
        409: {"description": "Número de partida duplicado en la cosecha."},
    },
)
def add_partida(
    contrato_id: int,
    data: PartidaCreate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "EDITAR"))],
) -> PartidaResponse:
    partida = contrato_service.add_partida(db, contrato_id, data)
    return contrato_service.build_partida_response(partida, partida.contrato.empresa)


@router.put(
    "/{contrato_id}/partidas/{partida_id}",
    response_model=PartidaResponse,
    summary="Actualizar partida",
    responses={
        404: {"description": "Partida no encontrada en el contrato."},
        409: {"description": "Número de partida duplicado en la cosecha."},
    },
)
def update_partida(
    contrato_id: int,
    partida_id: int,
    data: PartidaUpdate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "EDITAR"))],
) -> PartidaResponse:
    partida = contrato_service.update_partida(db, contrato_id, partida_id, data)
    return contrato_service.build_partida_response(partida, partida.contrato.empresa)


@router.delete(
    "/{contrato_id}/partidas/{partida_id}",
    response_model=MessageResponse,
    summary="Eliminar partida",
)
def delete_partida(
    contrato_id: int,
    partida_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("CONTRATOS", "EDITAR"))],
) -> MessageResponse:
    contrato_service.delete_partida(db, contrato_id, partida_id)
    return MessageResponse(message=f"Partida {partida_id} eliminada.")


# ---------------------------------------------------------------------------
# License settlement
# ---------------------------------------------------------------------------


@router.get(
    "/{contrato_id}/liquidacion",
    response_model=LiquidacionResponse,
    summary="Liquidación de alquiler de licencia",
)
def get_liquidacion(
    contrato_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("LIQUIDACIONES", "VER"))],
) -> LiquidacionResponse:
    return contrato_service.get_liquidacion(db, contrato_id)


@router.post(
    "/{contrato_id}/pagos",
    response_model=PagoResponse,
    status_code=201,
    summary="Registrar pago de licencia",
    responses={422: {"description": "El contrato no es de alquiler de licencia."}},
)
def add_pago(
    contrato_id: int,
    data: PagoCreate,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(require_permission("LIQUIDACIONES", "CREAR"))],
) -> PagoResponse:
    pago = contrato_service.add_pago(db, contrato_id, data)
    return PagoResponse(id=pago.id, fecha=pago.fecha, monto=float(pago.monto), referencia=pago.referencia)
