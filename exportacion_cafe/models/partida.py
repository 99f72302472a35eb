"""Partida model — one shippable lot of coffee within a contract."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exportacion_cafe.database import Base


class Partida(Base):
    """Lot of a contract, the unit that is packed, documented and shipped.

    ``peso_qq`` and ``precio_final`` are derived on every save by the
    contract service; the linked/unlinked weight mode used while editing is
    part of the request, not of this row.

    Attributes:
        id: Primary key.
        contrato_id: FK to Contrato (lot is deleted with its contract).
        numero: Lot number typed by the operator (unique per company + harvest).
        num_bultos: Bag / unit count.
        peso_kg: Net weight in kilograms.
        peso_qq: Weight in 46 kg quintales.
        tipo_empaque: Free package label shown on documents.
        clase_empaque: Tagged package kind (see ``CLASES_EMPAQUE``); NULL on legacy rows.
        fijacion: Fixing price for this lot.
        precio_final: ``contrato.diferencial + fijacion``.
        estado_marcas: "PENDIENTE", "ENVIADA" or "CONFIRMADA".
        isf_requerido / isf_enviado: US Importer Security Filing flags.
        fecha_cutoff: Port cut-off date.
        etd: Estimated time of departure.
    """

    __tablename__ = "partida"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contrato_id = Column(
        Integer, ForeignKey("contrato.id", ondelete="CASCADE"), nullable=False, index=True
    )
    numero = Column(String(50), nullable=True)
    num_bultos = Column(Integer, nullable=True)
    peso_kg = Column(Numeric(12, 2), nullable=True)
    peso_qq = Column(Numeric(12, 2), nullable=True)
    tipo_empaque = Column(String(100), nullable=True)
    clase_empaque = Column(String(30), nullable=True)
    marcas = Column(String(500), nullable=True)
    estado_marcas = Column(String(20), default="PENDIENTE", nullable=False)
    fijacion = Column(Numeric(12, 2), nullable=True)
    fecha_fijacion = Column(Date, nullable=True)
    precio_final = Column(Numeric(12, 2), nullable=True)

    # Logistics
    tipo_transporte = Column(String(20), nullable=True)  # "MARITIMO", "AEREO"
    destino = Column(String(200), nullable=True)
    isf_requerido = Column(Boolean, default=False, nullable=False)
    isf_enviado = Column(Boolean, default=False, nullable=False)
    booking = Column(String(100), nullable=True)
    naviera = Column(String(100), nullable=True)
    contenedor = Column(String(50), nullable=True)
    marchamo = Column(String(50), nullable=True)
    bl_numero = Column(String(50), nullable=True)
    fecha_cutoff = Column(Date, nullable=True)
    etd = Column(Date, nullable=True)

    # Fiscal
    factura_numero = Column(String(30), nullable=True)
    duca_simplificada = Column(String(50), nullable=True)
    duca_complementaria = Column(String(50), nullable=True)

    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    contrato = relationship("Contrato", back_populates="partidas", lazy="select")
    registros_embalaje = relationship(
        "RegistroEmbalaje",
        back_populates="partida",
        order_by="RegistroEmbalaje.id",
        lazy="select",
        cascade="all, delete-orphan",
    )
