"""Lot-number uniqueness inside a company and harvest year.

Lot numbers are free text typed by the operator and are only unique within
the same company and harvest year; the same number is legitimately reused
every new harvest and by the other company.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from exportacion_cafe.engine.cosecha import contract_harvest_year
from exportacion_cafe.engine.errores import DuplicateLotNumber

logger = logging.getLogger(__name__)


def validate_partida_numero(
    candidato: str | None,
    empresa: str,
    cosecha: str | None,
    contratos: Iterable[Any],
    exclude_partida_id: Any = None,
) -> None:
    """Check *candidato* against every lot of the company in the harvest year.

    Args:
        candidato: Lot number being saved; compared after trimming.
        empresa: Company scope.
        cosecha: Harvest-year scope (already resolved for the owning contract).
        contratos: Snapshot of contracts with their ``partidas`` loaded.
        exclude_partida_id: Id of the lot being edited, ignored in the scan.

    Raises:
        DuplicateLotNumber: With the number of the contract holding the
            conflicting lot.
    """
    numero = (candidato or "").strip()
    if not numero:
        return

    for contrato in contratos:
        if contrato.empresa != empresa:
            continue
        if contract_harvest_year(contrato) != cosecha:
            continue
        for partida in contrato.partidas or []:
            if exclude_partida_id is not None and partida.id == exclude_partida_id:
                continue
            if (partida.numero or "").strip() == numero:
                logger.info(
                    "validate_partida_numero: %s duplicado en contrato %s (%s)",
                    numero, contrato.numero_contrato, cosecha,
                )
                raise DuplicateLotNumber(numero, contrato.numero_contrato, cosecha)
