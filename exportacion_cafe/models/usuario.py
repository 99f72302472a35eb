"""Usuario model — application user bound to a configurable role."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exportacion_cafe.database import Base


class Usuario(Base):
    """System user whose access is decided by the permissions of its role.

    There is no implicit super-user: an administrator is simply a user whose
    role grants every action on every resource.

    Attributes:
        id: Primary key.
        username: Unique login username.
        email: Unique email address.
        password_hash: Bcrypt-hashed password (never store plain text).
        nombre_completo: Full display name.
        rol_id: FK to Rol; a user without role is denied everything.
        activo: Whether the account is active.
        ultimo_acceso: Timestamp of the last successful login.
    """

    __tablename__ = "usuario"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(200), unique=True, nullable=False)
    password_hash = Column(String(200), nullable=False)
    nombre_completo = Column(String(300), nullable=True)
    rol_id = Column(Integer, ForeignKey("rol.id", ondelete="SET NULL"), nullable=True)
    activo = Column(Boolean, default=True, nullable=False)
    ultimo_acceso = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    rol = relationship("Rol", back_populates="usuarios", lazy="select")
