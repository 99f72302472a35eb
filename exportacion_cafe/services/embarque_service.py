"""
Shipments service layer.

A shipment groups lots of one contract and carries the fixed checklist
built by ``engine.tareas.build_task_template``. Task status and priority
are free: any value can follow any other and no task waits for another.
"""

from __future__ import annotations

import datetime
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from exportacion_cafe.engine import build_task_template, set_task_priority, set_task_status
from exportacion_cafe.models.contrato import Contrato
from exportacion_cafe.models.embarque import Embarque, TareaEmbarque
from exportacion_cafe.models.partida import Partida
from exportacion_cafe.schemas.embarque import (
    EmbarqueCreate,
    EmbarqueResponse,
    EmbarqueUpdate,
    TareaEmbarqueResponse,
    TareaEmbarqueUpdate,
)
from exportacion_cafe.services.repositorio import Repositorio

logger = logging.getLogger(__name__)

# Task states that count as done for the progress bar
_ESTADOS_CERRADOS: frozenset[str] = frozenset({"COMPLETADO", "OMITIDO"})


def _progreso(tareas: list[TareaEmbarque]) -> float:
    if not tareas:
        return 0.0
    cerradas = sum(1 for t in tareas if t.estado in _ESTADOS_CERRADOS)
    return round(cerradas / len(tareas) * 100, 2)


def build_response(embarque: Embarque) -> EmbarqueResponse:
    tareas = list(embarque.tareas)
    return EmbarqueResponse(
        id=embarque.id,
        empresa=embarque.empresa,
        contrato_id=embarque.contrato_id,
        contrato_numero=embarque.contrato.numero_contrato if embarque.contrato else None,
        estado=embarque.estado,
        destino=embarque.destino,
        booking=embarque.booking,
        naviera=embarque.naviera,
        buque=embarque.buque,
        fecha_creacion=embarque.fecha_creacion,
        fecha_zarpe=embarque.fecha_zarpe,
        notas=embarque.notas,
        partida_ids=[p.id for p in embarque.partidas],
        tareas=[TareaEmbarqueResponse.model_validate(t) for t in tareas],
        progreso=_progreso(tareas),
    )


def _partidas_del_contrato(db: Session, contrato_id: int, partida_ids: list[int]) -> list[Partida]:
    if not partida_ids:
        return []
    partidas = (
        db.query(Partida)
        .filter(Partida.contrato_id == contrato_id, Partida.id.in_(partida_ids))
        .all()
    )
    faltantes = set(partida_ids) - {p.id for p in partidas}
    if faltantes:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Partidas {sorted(faltantes)} no pertenecen al contrato {contrato_id}.",
        )
    return partidas


def list_embarques(db: Session, empresa: str, estado: str | None = None) -> list[Embarque]:
    return Repositorio(db, Embarque, "Embarque").get_all(
        order_by=Embarque.id.desc(), empresa=empresa, estado=estado
    )


def get_embarque(db: Session, embarque_id: int) -> Embarque:
    return Repositorio(db, Embarque, "Embarque").get(embarque_id)


def create_embarque(db: Session, data: EmbarqueCreate) -> Embarque:
    """Create a shipment for a contract with the full task checklist.

    Raises:
        HTTPException 404: Contract not found.
        HTTPException 422: A lot does not belong to the contract.
    """
    contrato = Repositorio(db, Contrato, "Contrato").get(data.contrato_id)
    partidas = _partidas_del_contrato(db, contrato.id, data.partida_ids)

    embarque = Embarque(
        empresa=contrato.empresa,
        contrato_id=contrato.id,
        estado="PLANIFICACION",
        destino=data.destino,
        booking=data.booking,
        naviera=data.naviera,
        buque=data.buque,
        fecha_creacion=datetime.date.today(),
        fecha_zarpe=data.fecha_zarpe,
        notas=data.notas,
    )
    embarque.partidas.extend(partidas)
    for plantilla in build_task_template():
        embarque.tareas.append(TareaEmbarque(**plantilla))

    db.add(embarque)
    db.commit()
    db.refresh(embarque)

    logger.info(
        "create_embarque: contrato=%s partidas=%d tareas=%d (id=%d)",
        contrato.numero_contrato, len(partidas), len(embarque.tareas), embarque.id,
    )
    return embarque


def update_embarque(db: Session, embarque_id: int, data: EmbarqueUpdate) -> Embarque:
    repo = Repositorio(db, Embarque, "Embarque")
    embarque = repo.get(embarque_id)
    update_data = data.model_dump(exclude_unset=True)

    partida_ids = update_data.pop("partida_ids", None)
    if partida_ids is not None:
        embarque.partidas = _partidas_del_contrato(db, embarque.contrato_id, partida_ids)
    if update_data.get("estado") is None:
        update_data.pop("estado", None)

    return repo.update(embarque_id, update_data)


def delete_embarque(db: Session, embarque_id: int) -> None:
    Repositorio(db, Embarque, "Embarque").delete(embarque_id)


def update_tarea(
    db: Session,
    embarque_id: int,
    tarea_id: int,
    data: TareaEmbarqueUpdate,
) -> TareaEmbarque:
    """Set status and/or priority of one task.

    Raises:
        HTTPException 404: Task not found in the shipment.
        HTTPException 422: Unknown status or priority.
    """
    tarea: TareaEmbarque | None = (
        db.query(TareaEmbarque)
        .filter(TareaEmbarque.id == tarea_id, TareaEmbarque.embarque_id == embarque_id)
        .first()
    )
    if tarea is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tarea {tarea_id} no encontrada en el embarque {embarque_id}.",
        )

    try:
        if data.estado is not None:
            set_task_status(tarea, data.estado)
            tarea.fecha_completado = (
                datetime.date.today() if data.estado == "COMPLETADO" else None
            )
        if data.prioridad is not None:
            set_task_priority(tarea, data.prioridad)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    if "fecha_limite" in data.model_fields_set:
        tarea.fecha_limite = data.fecha_limite
    if "notas" in data.model_fields_set:
        tarea.notas = data.notas

    db.commit()
    db.refresh(tarea)
    logger.info(
        "update_tarea: embarque_id=%d tarea=%s estado=%s prioridad=%s",
        embarque_id, tarea.clave, tarea.estado, tarea.prioridad,
    )
    return tarea
