"""Exceptions raised by the export lifecycle engine.

The engine never talks HTTP; services catch these and translate them to
``HTTPException`` with the right status code.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for every rule violation reported by the engine."""


class DuplicateLotNumber(EngineError):
    """A lot number is already used in the same company and harvest year.

    Attributes:
        numero: The (trimmed) lot number that collided.
        contrato_numero: Number of the contract that already owns the lot.
        cosecha: Harvest-year label in which the collision happened.
    """

    def __init__(self, numero: str, contrato_numero: str | None, cosecha: str | None) -> None:
        self.numero = numero
        self.contrato_numero = contrato_numero
        self.cosecha = cosecha
        super().__init__(
            f"El número de partida {numero} ya existe en la cosecha {cosecha} "
            f"(Contrato {contrato_numero})."
        )


class InvalidPermission(EngineError):
    """The caller's role lacks ``accion`` on ``recurso``."""

    def __init__(self, recurso: str, accion: str) -> None:
        self.recurso = recurso
        self.accion = accion
        super().__init__(f"Permiso denegado: {accion} sobre {recurso}.")


class InconsistentToggle(EngineError):
    """``isf_enviado`` was set while ``isf_requerido`` is off.

    Never propagated to callers: ``derivaciones.coerce_isf`` corrects the
    lot and only logs the event.
    """


class MissingScope(EngineError):
    """A date or company needed to scope a derivation is absent."""

    def __init__(self, campo: str) -> None:
        self.campo = campo
        super().__init__(f"Falta el dato requerido para la derivación: {campo}.")
