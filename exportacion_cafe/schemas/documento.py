"""
Pydantic v2 schemas for trade documents (``/api/documentos``).

The document number is never part of a create or update payload: it is
assigned by the service from the persisted counter of the document's
scope and stays fixed afterwards.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from exportacion_cafe.utils.constants import TIPOS_DOCUMENTO_LOTE

_TIPOS = "^(PESO|CALIDAD|EMPAQUE|PORTE|FACTURA|INSTRUCCION_PAGO)$"


class MontoItem(BaseModel):
    concepto: str = Field(..., max_length=200)
    monto: float = Field(..., description="Monto en USD.")


class LineaDocumento(BaseModel):
    """One line of a document.

    Invoices use ``cantidad`` x ``valor_unitario``; certificates and waybills
    use ``cantidad`` x ``peso_unitario`` / ``peso_bruto_unitario``.
    """

    descripcion: str | None = Field(None, max_length=300)
    partida_id: int | None = None
    partida_numero: str | None = None
    marcas: str | None = None
    cantidad: float = Field(0, ge=0)
    unidad: str | None = Field(None, max_length=30)
    valor_unitario: float | None = None
    peso_unitario: float | None = None
    peso_bruto_unitario: float | None = None


class DocumentoBase(BaseModel):
    fecha_emision: date | None = None
    contrato_id: int | None = None
    cliente: str | None = Field(None, max_length=300)
    consignatario: str | None = Field(None, max_length=300)
    destino: str | None = Field(None, max_length=200)
    producto: str | None = Field(None, max_length=300)
    lineas: list[LineaDocumento] | None = None
    ajustes: list[MontoItem] | None = None
    anticipos: list[MontoItem] | None = None
    observaciones: str | None = None
    detalle: dict[str, Any] | None = None


class DocumentoCreate(DocumentoBase):
    empresa: str = Field(..., description="Empresa emisora.")
    tipo: str = Field(..., pattern=_TIPOS, description="Tipo de documento.")
    tipo_factura: str | None = Field(
        None, pattern="^(EXPORTACION|GENERAL)$", description="Solo facturas; por defecto EXPORTACION."
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "empresa": "dizano",
                "tipo": "FACTURA",
                "tipo_factura": "EXPORTACION",
                "fecha_emision": "2024-11-12",
                "contrato_id": 4,
                "cliente": "Volcafe Ltd.",
                "lineas": [
                    {"descripcion": "Café oro SHB EP", "cantidad": 412.5, "valor_unitario": 280.30}
                ],
                "anticipos": [{"concepto": "Anticipo 1", "monto": 20000}],
            }
        }
    )


class DocumentoUpdate(DocumentoBase):
    """Partial update; ``numero``, ``tipo`` and ``empresa`` cannot change."""


class DocumentoLoteCreate(DocumentoBase):
    """Create several certificate kinds for the same shipment at once."""

    empresa: str = Field(..., description="Empresa emisora.")
    tipos: list[str] = Field(
        default_factory=lambda: list(TIPOS_DOCUMENTO_LOTE),
        min_length=1,
        description="Tipos de certificado a generar: PESO, CALIDAD, EMPAQUE.",
    )


class DocumentoResponse(BaseModel):
    id: int
    empresa: str
    tipo: str
    numero: str | None
    tipo_factura: str | None
    fecha_emision: date
    contrato_id: int | None
    cliente: str | None
    consignatario: str | None
    destino: str | None
    producto: str | None
    lineas: list[dict[str, Any]] | None
    ajustes: list[dict[str, Any]] | None
    anticipos: list[dict[str, Any]] | None
    subtotal: float | None
    total_monto: float | None
    total_peso_neto: float | None
    total_peso_bruto: float | None
    observaciones: str | None
    detalle: dict[str, Any] | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SiguienteNumeroResponse(BaseModel):
    """Preview of the identifier the next document of a scope would get.

    The preview does not reserve the number.
    """

    tipo: str
    empresa: str
    numero: str | None
