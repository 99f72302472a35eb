"""Rol and PermisoRol models — configurable role-based access control."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exportacion_cafe.database import Base


class Rol(Base):
    """Named set of permissions assigned to users.

    Attributes:
        id: Primary key.
        nombre: Unique role name, e.g. "Administrador", "Logística".
        descripcion: Free description.
        permisos: One PermisoRol row per resource the role may touch.
    """

    __tablename__ = "rol"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(100), unique=True, nullable=False)
    descripcion = Column(String(300), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    permisos = relationship(
        "PermisoRol",
        back_populates="rol",
        order_by="PermisoRol.id",
        lazy="select",
        cascade="all, delete-orphan",
    )
    usuarios = relationship("Usuario", back_populates="rol", lazy="select")


class PermisoRol(Base):
    """Actions a role may perform on one resource.

    Attributes:
        id: Primary key.
        rol_id: FK to Rol.
        recurso: Resource name, see ``RECURSOS``.
        acciones: JSON list drawn from "VER", "CREAR", "EDITAR", "ELIMINAR".
    """

    __tablename__ = "permiso_rol"
    __table_args__ = (UniqueConstraint("rol_id", "recurso", name="uq_permiso_rol_recurso"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    rol_id = Column(Integer, ForeignKey("rol.id", ondelete="CASCADE"), nullable=False, index=True)
    recurso = Column(String(50), nullable=False)
    acciones = Column(JSON, nullable=False, default=list)

    rol = relationship("Rol", back_populates="permisos", lazy="select")
