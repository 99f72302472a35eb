"""Contrato model — coffee sale agreement owning its lots (partidas)."""

from datetime import date

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exportacion_cafe.database import Base


class Contrato(Base):
    """Export sale contract of one of the two operating companies.

    The harvest year is not trusted from storage unless it was set
    explicitly: when ``cosecha`` is empty it is derived from ``fecha_venta``
    on every read (see ``engine.cosecha.contract_harvest_year``).

    Attributes:
        id: Primary key.
        empresa: Owning company, "dizano" or "proben".
        numero_contrato: Contract number agreed with the buyer.
        comprador: Buyer reference (name).
        fecha_venta: Sale date.
        cosecha: Explicit harvest-year label, e.g. "2024-2025" (optional).
        tipo_cafe: Coffee type / quality description.
        mes_mercado: Futures market month the price is fixed against.
        mes_embarque: Agreed shipment month.
        diferencial: Contract differential added to each lot's fixing.
        cert_*: Certification flags.
        terminado: Closed contracts are excluded from alerts and summaries.
        alquiler_licencia: Shipped under a rented export license.
        fecha_creacion: Creation date.
    """

    __tablename__ = "contrato"

    id = Column(Integer, primary_key=True, autoincrement=True)
    empresa = Column(String(20), nullable=False, index=True)
    numero_contrato = Column(String(50), nullable=False)
    comprador = Column(String(200), nullable=True)
    fecha_venta = Column(Date, nullable=True)
    cosecha = Column(String(9), nullable=True)  # "2024-2025"
    tipo_cafe = Column(String(200), nullable=True)
    mes_mercado = Column(String(20), nullable=True)
    mes_embarque = Column(String(20), nullable=True)
    diferencial = Column(Numeric(12, 2), nullable=True)
    cert_rainforest = Column(Boolean, default=False, nullable=False)
    cert_organico = Column(Boolean, default=False, nullable=False)
    cert_fairtrade = Column(Boolean, default=False, nullable=False)
    cert_eudr = Column(Boolean, default=False, nullable=False)
    terminado = Column(Boolean, default=False, nullable=False)
    alquiler_licencia = Column(Boolean, default=False, nullable=False)
    fecha_creacion = Column(Date, default=date.today, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    partidas = relationship(
        "Partida",
        back_populates="contrato",
        order_by="Partida.id",
        lazy="select",
        cascade="all, delete-orphan",
    )
    deducciones = relationship(
        "DeduccionLiquidacion",
        back_populates="contrato",
        order_by="DeduccionLiquidacion.id",
        lazy="select",
        cascade="all, delete-orphan",
    )
    pagos = relationship(
        "PagoLicencia",
        back_populates="contrato",
        order_by="PagoLicencia.fecha",
        lazy="select",
        cascade="all, delete-orphan",
    )
    embarques = relationship(
        "Embarque",
        back_populates="contrato",
        lazy="select",
        cascade="all, delete-orphan",
    )
