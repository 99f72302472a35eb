"""Settlement models — deductions and license payments of a contract."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exportacion_cafe.database import Base


class DeduccionLiquidacion(Base):
    """Deduction applied to a contract settlement (tax, license fee, phyto...).

    Attributes:
        id: Primary key.
        contrato_id: FK to Contrato.
        concepto: Deduction label.
        monto: Amount in USD.
    """

    __tablename__ = "deduccion_liquidacion"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contrato_id = Column(
        Integer, ForeignKey("contrato.id", ondelete="CASCADE"), nullable=False, index=True
    )
    concepto = Column(String(200), nullable=False)
    monto = Column(Numeric(14, 2), nullable=False)

    contrato = relationship("Contrato", back_populates="deducciones", lazy="select")


class PagoLicencia(Base):
    """Payment received against a contract shipped under a rented license.

    Attributes:
        id: Primary key.
        contrato_id: FK to Contrato.
        fecha: Payment date.
        monto: Amount in USD.
        referencia: Bank reference.
    """

    __tablename__ = "pago_licencia"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contrato_id = Column(
        Integer, ForeignKey("contrato.id", ondelete="CASCADE"), nullable=False, index=True
    )
    fecha = Column(Date, nullable=False)
    monto = Column(Numeric(14, 2), nullable=False)
    referencia = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    contrato = relationship("Contrato", back_populates="pagos", lazy="select")
