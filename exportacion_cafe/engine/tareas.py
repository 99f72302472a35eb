"""Shipment checklist.

Every shipment starts with the same ordered list of tasks. Status and
priority can be set to any allowed value at any time; no ordering or
prerequisite between tasks is enforced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from exportacion_cafe.utils.constants import ESTADOS_TAREA, PRIORIDADES_TAREA


@dataclass(frozen=True)
class PlantillaTarea:
    clave: str
    etiqueta: str
    prioridad: str
    categoria: str


TAREAS_EMBARQUE: tuple[PlantillaTarea, ...] = (
    PlantillaTarea("contrato", "Contrato e Instrucciones Recibidas", "ALTA", "DOCUMENTACION"),
    PlantillaTarea("booking", "Booking con Naviera Confirmado", "ALTA", "LOGISTICA"),
    PlantillaTarea("anacafe", "Permiso de Anacafé", "ALTA", "DOCUMENTACION"),
    PlantillaTarea("bl_aprobacion", "Borrador de BL Aprobado", "ALTA", "DOCUMENTACION"),
    PlantillaTarea("fitosanitario", "Certificado Fitosanitario", "MEDIA", "DOCUMENTACION"),
    PlantillaTarea("isf", "ISF Enviado (si aplica)", "MEDIA", "ADUANAS"),
    PlantillaTarea("carta_porte", "Carta de Porte Generada", "MEDIA", "LOGISTICA"),
    PlantillaTarea("zarpe", "Zarpe Confirmado por Naviera", "ALTA", "LOGISTICA"),
    PlantillaTarea("documentos_finales", "Documentos Finales Generados", "ALTA", "DOCUMENTACION"),
    PlantillaTarea("cobro", "Cobro Enviado", "ALTA", "FINANCIERO"),
    PlantillaTarea("pago", "Pago Recibido", "ALTA", "FINANCIERO"),
)


def build_task_template() -> list[dict[str, Any]]:
    """Fresh task records for a new shipment, all ``PENDIENTE``."""
    return [
        {
            "clave": t.clave,
            "etiqueta": t.etiqueta,
            "categoria": t.categoria,
            "prioridad": t.prioridad,
            "estado": "PENDIENTE",
            "orden": orden,
        }
        for orden, t in enumerate(TAREAS_EMBARQUE, start=1)
    ]


def set_task_status(tarea: Any, estado: str) -> Any:
    if estado not in ESTADOS_TAREA:
        raise ValueError(f"Estado de tarea inválido: {estado}")
    tarea.estado = estado
    return tarea


def set_task_priority(tarea: Any, prioridad: str) -> Any:
    if prioridad not in PRIORIDADES_TAREA:
        raise ValueError(f"Prioridad de tarea inválida: {prioridad}")
    tarea.prioridad = prioridad
    return tarea
