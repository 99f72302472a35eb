"""
Application-wide constants for the coffee export system.

Defines domain enumerations, business rule thresholds, and
lookup tables used across the engine, services, and routers.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Companies (tenants)
# ---------------------------------------------------------------------------

EMPRESAS: Final[list[str]] = [
    "dizano",
    "proben",
]

# Letter used inside bulk-created certificate numbers (WT-D01-001)
LETRA_EMPRESA: Final[dict[str, str]] = {
    "dizano": "D",
    "proben": "P",
}

# Prefix shown in front of the user-entered lot number (11/988/12)
PREFIJO_PARTIDA: Final[dict[str, str]] = {
    "dizano": "11/988/",
    "proben": "11/44360/",
}

# ---------------------------------------------------------------------------
# Harvest year
# ---------------------------------------------------------------------------

MES_INICIO_COSECHA: Final[int] = 10  # October opens a new harvest year

# ---------------------------------------------------------------------------
# Weight conversion
# ---------------------------------------------------------------------------

KG_POR_QUINTAL: Final[int] = 46

# ---------------------------------------------------------------------------
# Lot (partida) enumerations
# ---------------------------------------------------------------------------

ESTADOS_MARCAS: Final[list[str]] = [
    "PENDIENTE",
    "ENVIADA",
    "CONFIRMADA",
]

CLASES_EMPAQUE: Final[list[str]] = [
    "SACO_YUTE",
    "SACO_YUTE_GRAINPRO",
    "CAJA",
    "BIG_BAG",
    "JUMBO",
    "OTRO",
]

# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

TIPOS_DOCUMENTO: Final[list[str]] = [
    "PESO",
    "CALIDAD",
    "EMPAQUE",
    "PORTE",
    "FACTURA",
    "INSTRUCCION_PAGO",
]

TIPOS_FACTURA: Final[list[str]] = [
    "EXPORTACION",
    "GENERAL",
]

# Certificates that can be created together from one shipment form
TIPOS_DOCUMENTO_LOTE: Final[list[str]] = [
    "PESO",
    "CALIDAD",
    "EMPAQUE",
]

# Type code used in bulk-created certificate numbers
CODIGO_CERTIFICADO: Final[dict[str, str]] = {
    "PESO": "WT",
    "CALIDAD": "QC",
    "EMPAQUE": "PL",
}

# ---------------------------------------------------------------------------
# Shipments
# ---------------------------------------------------------------------------

ESTADOS_EMBARQUE: Final[list[str]] = [
    "PLANIFICACION",
    "EN_TRANSITO",
    "ESPERANDO_PAGO",
    "COMPLETADO",
]

ESTADOS_TAREA: Final[list[str]] = [
    "PENDIENTE",
    "EN_PROGRESO",
    "COMPLETADO",
    "OMITIDO",
    "EN_ESPERA",
]

PRIORIDADES_TAREA: Final[list[str]] = [
    "BAJA",
    "MEDIA",
    "ALTA",
]

CATEGORIAS_TAREA: Final[list[str]] = [
    "DOCUMENTACION",
    "LOGISTICA",
    "FINANCIERO",
    "ADUANAS",
]

# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------

RECURSOS: Final[list[str]] = [
    "DASHBOARD",
    "CONTRATOS",
    "EMBARQUES",
    "ADMIN",
    "LIQUIDACIONES",
    "DOCUMENTOS_PESO",
    "DOCUMENTOS_CALIDAD",
    "DOCUMENTOS_EMPAQUE",
    "DOCUMENTOS_PORTE",
    "DOCUMENTOS_FACTURA",
    "DOCUMENTOS_PAGO",
]

ACCIONES: Final[list[str]] = [
    "VER",
    "CREAR",
    "EDITAR",
    "ELIMINAR",
]

# Permission resource guarding each document kind
RECURSO_DOCUMENTO: Final[dict[str, str]] = {
    "PESO": "DOCUMENTOS_PESO",
    "CALIDAD": "DOCUMENTOS_CALIDAD",
    "EMPAQUE": "DOCUMENTOS_EMPAQUE",
    "PORTE": "DOCUMENTOS_PORTE",
    "FACTURA": "DOCUMENTOS_FACTURA",
    "INSTRUCCION_PAGO": "DOCUMENTOS_PAGO",
}

# ---------------------------------------------------------------------------
# Alert kinds and thresholds (days)
# ---------------------------------------------------------------------------

TIPOS_ALERTA: Final[list[str]] = [
    "CUTOFF",
    "ETD",
    "EMBALAJE",
    "MARCAS",
]

DIAS_ALERTA_CUTOFF: Final[int] = 5
DIAS_ALERTA_ETD: Final[int] = 5
DIAS_VENTANA_PREPARACION: Final[int] = 7  # packaging / marks checks before cutoff

# ---------------------------------------------------------------------------
# License-rental settlement defaults
# ---------------------------------------------------------------------------

TASA_IMPUESTO_LICENCIA: Final[str] = "0.025"   # 2.5 % of contract value
HONORARIO_LICENCIA_QQ: Final[str] = "1.00"     # USD per quintal
COSTO_FITOSANITARIO: Final[str] = "45.45"      # fixed, USD
