"""
Pydantic v2 schemas for contracts, their lots and license settlement.

These models define the JSON shapes for all endpoints under
``/api/contratos``. Derived lot fields (``peso_qq`` in linked mode and
``precio_final``) are accepted on input only to be recomputed by the
service; the stored value is never trusted.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from exportacion_cafe.utils.constants import CLASES_EMPAQUE


# ---------------------------------------------------------------------------
# Packaging records
# ---------------------------------------------------------------------------


class RegistroEmbalajeSchema(BaseModel):
    material: str = Field(..., max_length=100, description="Material, ej. 'Sacos de Yute'.")
    requerido: int = Field(0, ge=0, description="Unidades requeridas.")
    comprado: int = Field(0, ge=0, description="Unidades compradas.")

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Partida (lot)
# ---------------------------------------------------------------------------


class PartidaBase(BaseModel):
    numero: str | None = Field(None, max_length=50, description="Número de partida.")
    num_bultos: int | None = Field(None, ge=0, description="Cantidad de bultos.")
    peso_kg: float | None = Field(None, ge=0, description="Peso neto en kilogramos.")
    peso_qq: float | None = Field(
        None, ge=0, description="Peso en quintales (solo se respeta con peso_vinculado=false)."
    )
    tipo_empaque: str | None = Field(None, max_length=100, description="Etiqueta libre del empaque.")
    clase_empaque: str | None = Field(
        None,
        description=f"Clase de empaque: {', '.join(CLASES_EMPAQUE)}.",
    )
    marcas: str | None = Field(None, max_length=500)
    estado_marcas: str | None = Field(None, pattern="^(PENDIENTE|ENVIADA|CONFIRMADA)$")
    fijacion: float | None = Field(None, description="Precio de fijación de la partida.")
    fecha_fijacion: date | None = None
    tipo_transporte: str | None = Field(None, max_length=20)
    destino: str | None = Field(None, max_length=200)
    isf_requerido: bool | None = None
    isf_enviado: bool | None = None
    booking: str | None = Field(None, max_length=100)
    naviera: str | None = Field(None, max_length=100)
    contenedor: str | None = Field(None, max_length=50)
    marchamo: str | None = Field(None, max_length=50)
    bl_numero: str | None = Field(None, max_length=50)
    fecha_cutoff: date | None = None
    etd: date | None = None
    factura_numero: str | None = Field(None, max_length=30)
    duca_simplificada: str | None = Field(None, max_length=50)
    duca_complementaria: str | None = Field(None, max_length=50)
    registros_embalaje: list[RegistroEmbalajeSchema] | None = None


class PartidaCreate(PartidaBase):
    """Payload to add a lot to a contract.

    ``peso_vinculado`` is the edit-session weight mode: when true (default)
    ``peso_qq`` is recomputed from ``peso_kg``; when false the supplied
    ``peso_qq`` is kept as typed. It is never stored.
    """

    peso_vinculado: bool = Field(True, description="Recalcular quintales a partir de kg.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "numero": "12",
                "num_bultos": 275,
                "peso_kg": 18975,
                "clase_empaque": "SACO_YUTE_GRAINPRO",
                "tipo_empaque": "Sacos de yute con GrainPro",
                "fijacion": 245.30,
                "fecha_cutoff": "2024-11-05",
                "etd": "2024-11-09",
                "peso_vinculado": True,
            }
        }
    )


class PartidaUpdate(PartidaBase):
    peso_vinculado: bool = Field(True, description="Recalcular quintales a partir de kg.")


class PartidaResponse(BaseModel):
    id: int
    contrato_id: int
    numero: str | None
    numero_display: str = Field(..., description="Número con prefijo de empresa, ej. '11/988/12'.")
    num_bultos: int | None
    peso_kg: float | None
    peso_qq: float | None
    tipo_empaque: str | None
    clase_empaque: str | None
    marcas: str | None
    estado_marcas: str
    fijacion: float | None
    fecha_fijacion: date | None
    precio_final: float | None
    tipo_transporte: str | None
    destino: str | None
    isf_requerido: bool
    isf_enviado: bool
    booking: str | None
    naviera: str | None
    contenedor: str | None
    marchamo: str | None
    bl_numero: str | None
    fecha_cutoff: date | None
    etd: date | None
    factura_numero: str | None
    duca_simplificada: str | None
    duca_complementaria: str | None
    registros_embalaje: list[RegistroEmbalajeSchema] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Contrato
# ---------------------------------------------------------------------------


class ContratoBase(BaseModel):
    numero_contrato: str | None = Field(None, min_length=1, max_length=50)
    comprador: str | None = Field(None, max_length=200)
    fecha_venta: date | None = None
    cosecha: str | None = Field(
        None,
        pattern=r"^\d{4}-\d{4}$",
        description="Cosecha explícita; si se omite se deriva de fecha_venta.",
    )
    tipo_cafe: str | None = Field(None, max_length=200)
    mes_mercado: str | None = Field(None, max_length=20)
    mes_embarque: str | None = Field(None, max_length=20)
    diferencial: float | None = Field(None, description="Diferencial del contrato (USD/qq).")
    cert_rainforest: bool | None = None
    cert_organico: bool | None = None
    cert_fairtrade: bool | None = None
    cert_eudr: bool | None = None
    terminado: bool | None = None
    alquiler_licencia: bool | None = None


class ContratoCreate(ContratoBase):
    """Payload accepted by ``POST /api/contratos``.

    Lots may be created inline; each one is validated for number uniqueness
    against the company and harvest year of the new contract.
    """

    empresa: str = Field(..., description="Empresa: 'dizano' o 'proben'.")
    numero_contrato: str = Field(..., min_length=1, max_length=50)
    partidas: list[PartidaCreate] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "empresa": "dizano",
                "numero_contrato": "C-2024-118",
                "comprador": "Volcafe",
                "fecha_venta": "2024-10-15",
                "tipo_cafe": "SHB EP",
                "mes_mercado": "MAR",
                "diferencial": 35.00,
                "partidas": [],
            }
        }
    )


class ContratoUpdate(ContratoBase):
    pass


class ContratoResponse(BaseModel):
    """Contract with its resolved harvest year and lots.

    ``cosecha`` is the explicit label when stored, otherwise the one
    derived from ``fecha_venta`` (or ``fecha_creacion``).
    """

    id: int
    empresa: str
    numero_contrato: str
    comprador: str | None
    fecha_venta: date | None
    cosecha: str | None
    tipo_cafe: str | None
    mes_mercado: str | None
    mes_embarque: str | None
    diferencial: float | None
    cert_rainforest: bool
    cert_organico: bool
    cert_fairtrade: bool
    cert_eudr: bool
    terminado: bool
    alquiler_licencia: bool
    fecha_creacion: date
    total_qq: float = Field(0.0, description="Suma de quintales de las partidas.")
    created_at: datetime | None = None
    updated_at: datetime | None = None
    partidas: list[PartidaResponse] = Field(default_factory=list)


class CosechasResponse(BaseModel):
    """Harvest-year choices for the contract form and list filter."""

    actual: str = Field(..., description="Cosecha en curso.")
    opciones: list[str] = Field(..., description="Cosechas seleccionables.")


# ---------------------------------------------------------------------------
# License settlement
# ---------------------------------------------------------------------------


class DeduccionResponse(BaseModel):
    concepto: str
    monto: float


class PagoCreate(BaseModel):
    fecha: date = Field(..., description="Fecha del pago.")
    monto: float = Field(..., gt=0, description="Monto recibido (USD).")
    referencia: str | None = Field(None, max_length=100)


class PagoResponse(BaseModel):
    id: int
    fecha: date
    monto: float
    referencia: str | None


class LiquidacionResponse(BaseModel):
    """License-rental settlement of a contract.

    Attributes:
        total_quintales: Sum of lot weights in quintales.
        valor_total: Sum of quintales x final price.
        deducciones: Stored deductions, or the default set when none are stored.
        total_deducciones / total_pagado: Aggregates.
        saldo: ``valor_total - total_deducciones - total_pagado``.
    """

    contrato_id: int
    contrato_numero: str
    total_quintales: float
    valor_total: float
    deducciones: list[DeduccionResponse]
    total_deducciones: float
    pagos: list[PagoResponse]
    total_pagado: float
    saldo: float
