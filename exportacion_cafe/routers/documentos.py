"""
Trade documents router.

Mounts under ``/api/documentos`` (prefix set in ``main.py``).

Each document kind is guarded by its own resource (see
``constants.RECURSO_DOCUMENTO``), so the permission check runs inside the
endpoint once the kind is known rather than as a fixed dependency.

Endpoints
---------
GET    /                     — Documents of the active company.
GET    /siguiente-numero     — Preview the next identifier of a scope.
GET    /{id}                 — Document detail.
POST   /                     — Create a document; its number is assigned here.
POST   /lote                 — Create weight, quality and packing certificates at once.
PUT    /{id}                 — Partial update (number never changes).
DELETE /{id}                 — Delete (number is not reused).
"""

from __future__ import annotations

import datetime
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from exportacion_cafe.config import get_settings
from exportacion_cafe.database import get_db
from exportacion_cafe.engine import has_permission
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.schemas.common import MessageResponse
from exportacion_cafe.schemas.documento import (
    DocumentoCreate,
    DocumentoLoteCreate,
    DocumentoResponse,
    DocumentoUpdate,
    SiguienteNumeroResponse,
)
from exportacion_cafe.services import documento_service
from exportacion_cafe.services.auth_service import check_permission, get_current_user
from exportacion_cafe.utils.constants import RECURSO_DOCUMENTO

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documentos"])

_TIPO_PATTERN = "^(PESO|CALIDAD|EMPAQUE|PORTE|FACTURA|INSTRUCCION_PAGO)$"


def _empresa(
    empresa: Annotated[
        str | None,
        Query(description="Empresa activa. Omitir para usar la empresa por defecto."),
    ] = None,
) -> str:
    return empresa or get_settings().DEFAULT_COMPANY


@router.get(
    "/",
    response_model=list[DocumentoResponse],
    summary="Listar documentos",
    description="Solo se incluyen los tipos de documento que el rol del usuario puede ver.",
)
def list_documentos(
    empresa: Annotated[str, Depends(_empresa)],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
    tipo: Annotated[str | None, Query(pattern=_TIPO_PATTERN)] = None,
    contrato_id: Annotated[int | None, Query(ge=1)] = None,
) -> list[DocumentoResponse]:
    if tipo is not None:
        check_permission(current_user, RECURSO_DOCUMENTO[tipo], "VER")
    rows = documento_service.list_documentos(db, empresa, tipo, contrato_id)
    return [
        documento_service.build_response(d)
        for d in rows
        if has_permission(current_user.rol, RECURSO_DOCUMENTO[d.tipo], "VER")
    ]


@router.get(
    "/siguiente-numero",
    response_model=SiguienteNumeroResponse,
    summary="Vista previa del siguiente número",
    description="Calcula el número que recibiría el próximo documento sin reservarlo.",
)
def get_siguiente_numero(
    empresa: Annotated[str, Depends(_empresa)],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
    tipo: Annotated[str, Query(pattern=_TIPO_PATTERN)],
    tipo_factura: Annotated[str | None, Query(pattern="^(EXPORTACION|GENERAL)$")] = None,
    fecha_emision: datetime.date | None = None,
) -> SiguienteNumeroResponse:
    check_permission(current_user, RECURSO_DOCUMENTO[tipo], "VER")
    return documento_service.preview_numero(db, tipo, empresa, tipo_factura, fecha_emision)


@router.get(
    "/{documento_id}",
    response_model=DocumentoResponse,
    summary="Detalle de documento",
    responses={404: {"description": "Documento no encontrado."}},
)
def get_documento(
    documento_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> DocumentoResponse:
    documento = documento_service.get_documento(db, documento_id)
    check_permission(current_user, RECURSO_DOCUMENTO[documento.tipo], "VER")
    return documento_service.build_response(documento)


@router.post(
    "/",
    response_model=DocumentoResponse,
    status_code=201,
    summary="Crear documento",
    description=(
        "Crea el documento y le asigna el siguiente número de su secuencia: "
        "INV-### / VAR-### para facturas, CP-AAAA-### para cartas de porte y "
        "WT/QC/PL-{D|P}##-001 para certificados."
    ),
    responses={
        201: {"description": "Documento creado con número asignado."},
        403: {"description": "Sin permiso CREAR sobre el tipo de documento."},
        409: {"description": "Conflicto persistente al asignar el número."},
    },
)
def create_documento(
    data: DocumentoCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> DocumentoResponse:
    check_permission(current_user, RECURSO_DOCUMENTO[data.tipo], "CREAR")
    logger.info(
        "POST /documentos/ tipo=%s empresa=%s user=%s", data.tipo, data.empresa, current_user.username
    )
    return documento_service.build_response(documento_service.create_documento(db, data))


@router.post(
    "/lote",
    response_model=list[DocumentoResponse],
    status_code=201,
    summary="Crear certificados en lote",
)
def create_lote(
    data: DocumentoLoteCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> list[DocumentoResponse]:
    for tipo in data.tipos:
        if tipo in RECURSO_DOCUMENTO:
            check_permission(current_user, RECURSO_DOCUMENTO[tipo], "CREAR")
    documentos = documento_service.create_lote(db, data)
    return [documento_service.build_response(d) for d in documentos]


@router.put(
    "/{documento_id}",
    response_model=DocumentoResponse,
    summary="Actualizar documento",
    description="Actualiza campos y recalcula totales. El número asignado no cambia.",
)
def update_documento(
    documento_id: int,
    data: DocumentoUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> DocumentoResponse:
    documento = documento_service.get_documento(db, documento_id)
    check_permission(current_user, RECURSO_DOCUMENTO[documento.tipo], "EDITAR")
    documento = documento_service.update_documento(db, documento_id, data)
    return documento_service.build_response(documento)


@router.delete(
    "/{documento_id}",
    response_model=MessageResponse,
    summary="Eliminar documento",
)
def delete_documento(
    documento_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> MessageResponse:
    documento = documento_service.get_documento(db, documento_id)
    check_permission(current_user, RECURSO_DOCUMENTO[documento.tipo], "ELIMINAR")
    documento_service.delete_documento(db, documento_id)
    return MessageResponse(message=f"Documento {documento_id} eliminado.")
