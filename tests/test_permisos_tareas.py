from types import SimpleNamespace

import pytest

from exportacion_cafe.engine import (
    InvalidPermission,
    build_task_template,
    ensure_permission,
    has_permission,
    set_task_priority,
    set_task_status,
)


def _rol(*permisos):
    return SimpleNamespace(
        permisos=[SimpleNamespace(recurso=r, acciones=list(a)) for r, a in permisos]
    )


def test_permission_is_set_membership():
    rol = _rol(("CONTRATOS", ["VER", "EDITAR"]), ("EMBARQUES", ["VER"]))
    assert has_permission(rol, "CONTRATOS", "EDITAR")
    assert not has_permission(rol, "CONTRATOS", "ELIMINAR")
    assert not has_permission(rol, "ADMIN", "VER")


def test_removing_the_entry_revokes_access():
    rol = _rol(("CONTRATOS", ["VER"]))
    assert has_permission(rol, "CONTRATOS", "VER")
    rol.permisos.pop()
    assert not has_permission(rol, "CONTRATOS", "VER")


def test_missing_role_is_denied():
    assert not has_permission(None, "DASHBOARD", "VER")
    with pytest.raises(InvalidPermission):
        ensure_permission(None, "DASHBOARD", "VER")


def test_task_template():
    tareas = build_task_template()
    assert len(tareas) == 11
    assert [t["orden"] for t in tareas] == list(range(1, 12))
    assert tareas[0]["clave"] == "contrato"
    assert tareas[-1]["clave"] == "pago"
    assert {t["estado"] for t in tareas} == {"PENDIENTE"}
    assert next(t for t in tareas if t["clave"] == "isf")["categoria"] == "ADUANAS"


def test_template_is_a_fresh_copy():
    primera = build_task_template()
    primera[0]["estado"] = "COMPLETADO"
    assert build_task_template()[0]["estado"] == "PENDIENTE"


def test_any_status_can_follow_any_other():
    tarea = SimpleNamespace(estado="COMPLETADO", prioridad="ALTA")
    set_task_status(tarea, "PENDIENTE")
    set_task_status(tarea, "OMITIDO")
    set_task_status(tarea, "EN_ESPERA")
    set_task_priority(tarea, "BAJA")
    assert (tarea.estado, tarea.prioridad) == ("EN_ESPERA", "BAJA")


def test_unknown_status_or_priority_rejected():
    tarea = SimpleNamespace(estado="PENDIENTE", prioridad="MEDIA")
    with pytest.raises(ValueError):
        set_task_status(tarea, "HECHO")
    with pytest.raises(ValueError):
        set_task_priority(tarea, "URGENTE")
    assert (tarea.estado, tarea.prioridad) == ("PENDIENTE", "MEDIA")
