"""SecuenciaDocumento model — persisted monotonic counter per numbering scope."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from exportacion_cafe.database import Base


class SecuenciaDocumento(Base):
    """Last sequence number handed out for a numbering scope.

    The counter only moves forward: deleting a document never frees its
    number. Rows are created lazily the first time a scope is used, seeded
    from a count of the documents already stored in that scope.

    Attributes:
        id: Primary key.
        clave: Scope key, e.g. "FACTURA:dizano:EXPORTACION", "PORTE:proben:2024".
        ultimo: Last sequence number assigned in the scope.
    """

    __tablename__ = "secuencia_documento"

    id = Column(Integer, primary_key=True, autoincrement=True)
    clave = Column(String(60), unique=True, nullable=False)
    ultimo = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
