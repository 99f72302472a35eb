"""Documento model — certificates, waybills, invoices and payment instructions."""

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exportacion_cafe.database import Base


class Documento(Base):
    """Trade document issued by one of the companies.

    ``numero`` is assigned once at creation from the persisted counter of
    its scope (see ``SecuenciaDocumento``) and is never rewritten by later
    edits, nor reused after the document is deleted.

    Attributes:
        id: Primary key.
        empresa: Issuing company.
        tipo: "PESO", "CALIDAD", "EMPAQUE", "PORTE", "FACTURA", "INSTRUCCION_PAGO".
        numero: Assigned identifier, e.g. "INV-003", "CP-2024-012", "WT-D04-001".
        tipo_factura: "EXPORTACION" or "GENERAL" (invoices only).
        fecha_emision: Issue date.
        contrato_id: Optional FK to the contract the document belongs to.
        lineas: Line items (JSON list of dicts).
        ajustes / anticipos: Invoice deductions (JSON list of ``{concepto, monto}``).
        subtotal / total_monto: Computed invoice totals.
        total_peso_neto / total_peso_bruto: Computed certificate weights (kg).
        detalle: Free document fields that are only rendered (JSON dict).
    """

    __tablename__ = "documento"

    id = Column(Integer, primary_key=True, autoincrement=True)
    empresa = Column(String(20), nullable=False, index=True)
    tipo = Column(String(20), nullable=False, index=True)
    numero = Column(String(30), nullable=True)
    tipo_factura = Column(String(20), nullable=True)
    fecha_emision = Column(Date, nullable=False)
    contrato_id = Column(
        Integer, ForeignKey("contrato.id", ondelete="SET NULL"), nullable=True
    )
    cliente = Column(String(300), nullable=True)
    consignatario = Column(String(300), nullable=True)
    destino = Column(String(200), nullable=True)
    producto = Column(String(300), nullable=True)
    lineas = Column(JSON, nullable=True)
    ajustes = Column(JSON, nullable=True)
    anticipos = Column(JSON, nullable=True)
    subtotal = Column(Numeric(14, 2), nullable=True)
    total_monto = Column(Numeric(14, 2), nullable=True)
    total_peso_neto = Column(Numeric(14, 2), nullable=True)
    total_peso_bruto = Column(Numeric(14, 2), nullable=True)
    observaciones = Column(Text, nullable=True)
    detalle = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    contrato = relationship("Contrato", lazy="select")
