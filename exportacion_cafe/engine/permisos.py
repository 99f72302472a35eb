"""Role-based permission evaluation.

A role owns a flat set of ``{recurso, acciones}`` records. There is no
hierarchy and no inheritance between roles: a check is plain set
membership, and a missing role (unknown user) is denied everything.
"""

from __future__ import annotations

from typing import Any

from exportacion_cafe.engine.errores import InvalidPermission


def has_permission(rol: Any, recurso: str, accion: str) -> bool:
    if rol is None:
        return False
    for permiso in getattr(rol, "permisos", None) or []:
        if permiso.recurso == recurso and accion in (permiso.acciones or []):
            return True
    return False


def ensure_permission(rol: Any, recurso: str, accion: str) -> None:
    """Raise ``InvalidPermission`` unless ``has_permission`` allows the action."""
    if not has_permission(rol, recurso, accion):
        raise InvalidPermission(recurso, accion)
