"""SQLAlchemy models package for Exportación Café.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` runs. The import order
follows the foreign-key dependency graph so that parent tables are always
registered before their children.

Usage from other modules:
    from exportacion_cafe.models import Contrato, Partida
"""

# Access control
from exportacion_cafe.models.rol import PermisoRol, Rol  # noqa: F401
from exportacion_cafe.models.usuario import Usuario  # noqa: F401

# Contracts and their lots
from exportacion_cafe.models.contrato import Contrato  # noqa: F401
from exportacion_cafe.models.partida import Partida  # noqa: F401
from exportacion_cafe.models.registro_embalaje import RegistroEmbalaje  # noqa: F401
from exportacion_cafe.models.liquidacion import DeduccionLiquidacion, PagoLicencia  # noqa: F401

# Documents and their numbering counters
from exportacion_cafe.models.documento import Documento  # noqa: F401
from exportacion_cafe.models.secuencia_documento import SecuenciaDocumento  # noqa: F401

# Shipments
from exportacion_cafe.models.embarque import Embarque, TareaEmbarque, embarque_partida  # noqa: F401

__all__ = [
    "Rol",
    "PermisoRol",
    "Usuario",
    "Contrato",
    "Partida",
    "RegistroEmbalaje",
    "DeduccionLiquidacion",
    "PagoLicencia",
    "Documento",
    "SecuenciaDocumento",
    "Embarque",
    "TareaEmbarque",
    "embarque_partida",
]
