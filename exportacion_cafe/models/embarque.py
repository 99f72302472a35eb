"""Embarque and TareaEmbarque models — shipment tracking with its checklist."""

from datetime import date

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exportacion_cafe.database import Base

# Lots travelling in a shipment
embarque_partida = Table(
    "embarque_partida",
    Base.metadata,
    Column("embarque_id", Integer, ForeignKey("embarque.id", ondelete="CASCADE"), primary_key=True),
    Column("partida_id", Integer, ForeignKey("partida.id", ondelete="CASCADE"), primary_key=True),
)


class Embarque(Base):
    """Shipment of one or more lots of a contract.

    Every shipment is created with the fixed 11-step task checklist (see
    ``engine.tareas.TAREAS_EMBARQUE``).

    Attributes:
        id: Primary key.
        empresa: Shipping company.
        contrato_id: FK to Contrato.
        estado: "PLANIFICACION", "EN_TRANSITO", "ESPERANDO_PAGO" or "COMPLETADO".
        destino: Destination port.
        booking / naviera / buque: Carrier references.
        fecha_creacion: Creation date.
        fecha_zarpe: Planned or actual sailing date.
        notas: Free notes.
    """

    __tablename__ = "embarque"

    id = Column(Integer, primary_key=True, autoincrement=True)
    empresa = Column(String(20), nullable=False, index=True)
    contrato_id = Column(
        Integer, ForeignKey("contrato.id", ondelete="CASCADE"), nullable=False, index=True
    )
    estado = Column(String(20), default="PLANIFICACION", nullable=False)
    destino = Column(String(200), nullable=True)
    booking = Column(String(100), nullable=True)
    naviera = Column(String(100), nullable=True)
    buque = Column(String(100), nullable=True)
    fecha_creacion = Column(Date, default=date.today, nullable=False)
    fecha_zarpe = Column(Date, nullable=True)
    notas = Column(Text, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    contrato = relationship("Contrato", back_populates="embarques", lazy="select")
    partidas = relationship("Partida", secondary=embarque_partida, lazy="select")
    tareas = relationship(
        "TareaEmbarque",
        back_populates="embarque",
        order_by="TareaEmbarque.orden",
        lazy="select",
        cascade="all, delete-orphan",
    )


class TareaEmbarque(Base):
    """One checklist step of a shipment.

    Attributes:
        id: Primary key.
        embarque_id: FK to Embarque.
        clave: Stable task key, e.g. "booking", "isf".
        etiqueta: Display label.
        categoria: Task category (see ``CATEGORIAS_TAREA``).
        prioridad: "BAJA", "MEDIA" or "ALTA".
        estado: See ``ESTADOS_TAREA``.
        orden: 1-based position within the checklist.
        fecha_limite: Due date.
        fecha_completado: Date the task reached "COMPLETADO".
    """

    __tablename__ = "tarea_embarque"

    id = Column(Integer, primary_key=True, autoincrement=True)
    embarque_id = Column(
        Integer, ForeignKey("embarque.id", ondelete="CASCADE"), nullable=False, index=True
    )
    clave = Column(String(50), nullable=False)
    etiqueta = Column(String(200), nullable=False)
    categoria = Column(String(30), nullable=False)
    prioridad = Column(String(10), default="MEDIA", nullable=False)
    estado = Column(String(20), default="PENDIENTE", nullable=False)
    orden = Column(Integer, nullable=False)
    fecha_limite = Column(Date, nullable=True)
    fecha_completado = Column(Date, nullable=True)
    notas = Column(Text, nullable=True)

    embarque = relationship("Embarque", back_populates="tareas", lazy="select")
