"""RegistroEmbalaje model — packaging material required/purchased for a lot."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from exportacion_cafe.database import Base


class RegistroEmbalaje(Base):
    __tablename__ = "registro_embalaje"

    id = Column(Integer, primary_key=True, autoincrement=True)
    partida_id = Column(
        Integer, ForeignKey("partida.id", ondelete="CASCADE"), nullable=False, index=True
    )
    material = Column(String(100), nullable=False)  # "Sacos de Yute", "Bolsas GrainPro", ...
    requerido = Column(Integer, default=0, nullable=False)
    comprado = Column(Integer, default=0, nullable=False)

    partida = relationship("Partida", back_populates="registros_embalaje", lazy="select")
