"""
Generic persistence collaborator shared by the service modules.

``Repositorio`` wraps the query/add/commit boilerplate for one ORM model.
Services keep the business rules; the repository only knows how to find,
insert, patch and delete rows, and raises HTTP 404 for unknown ids the
same way every service does.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repositorio(Generic[ModelT]):
    """CRUD access to the rows of *model*.

    Args:
        db: Active SQLAlchemy session.
        model: ORM class, e.g. ``Documento``.
        nombre: Human-readable entity name used in 404 messages.
    """

    def __init__(self, db: Session, model: type[ModelT], nombre: str | None = None) -> None:
        self.db = db
        self.model = model
        self.nombre = nombre or model.__name__

    def get_all(self, order_by: Any = None, **filters: Any) -> list[ModelT]:
        """Rows whose columns equal every keyword filter; ``None`` filters are skipped."""
        query = self.db.query(self.model)
        for campo, valor in filters.items():
            if valor is not None:
                query = query.filter(getattr(self.model, campo) == valor)
        if order_by is not None:
            query = query.order_by(order_by)
        rows = query.all()
        logger.debug("%s.get_all filters=%s -> %d", self.nombre, filters, len(rows))
        return rows

    def get(self, id_: int, for_update: bool = False) -> ModelT:
        """Row with primary key *id_*, locked with ``FOR UPDATE`` when *for_update* is set."""
        query = self.db.query(self.model).filter(self.model.id == id_)
        if for_update:
            query = query.with_for_update()
        row = query.first()
        if row is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.nombre} con ID {id_} no encontrado.",
            )
        return row

    def create(self, record: ModelT | dict[str, Any]) -> ModelT:
        row = self.model(**record) if isinstance(record, dict) else record
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("%s creado id=%s", self.nombre, row.id)
        return row

    def update(self, id_: int, patch: dict[str, Any]) -> ModelT:
        row = self.get(id_)
        for campo, valor in patch.items():
            setattr(row, campo, valor)
        self.db.commit()
        self.db.refresh(row)
        logger.info("%s actualizado id=%s campos=%s", self.nombre, id_, list(patch))
        return row

    def delete(self, id_: int) -> None:
        row = self.get(id_)
        self.db.delete(row)
        self.db.commit()
        logger.info("%s eliminado id=%s", self.nombre, id_)
