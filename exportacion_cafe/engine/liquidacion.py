"""Settlement of license-rental contracts.

When a contract is shipped under a rented export license, the licensee
receives the contract value minus the license deductions and minus every
payment already made.

Default deductions
------------------
- Tax: 2.5 % of the contract value.
- License fee: USD 1.00 per quintal shipped.
- Phytosanitary certificate: fixed cost.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from exportacion_cafe.engine.derivaciones import round2, to_decimal
from exportacion_cafe.utils.constants import (
    COSTO_FITOSANITARIO,
    HONORARIO_LICENCIA_QQ,
    KG_POR_QUINTAL,
    TASA_IMPUESTO_LICENCIA,
)


@dataclass(frozen=True)
class Deduccion:
    concepto: str
    monto: Decimal


@dataclass(frozen=True)
class ResultadoLiquidacion:
    total_quintales: Decimal
    valor_total: Decimal
    total_deducciones: Decimal
    total_pagado: Decimal
    saldo: Decimal


def _quintales(partida: Any) -> Decimal:
    return to_decimal(partida.peso_kg) / KG_POR_QUINTAL


def contract_value(partidas: Iterable[Any]) -> Decimal:
    """Sum of quintales x final price over the lots (unrounded quintales)."""
    return sum(
        (_quintales(p) * to_decimal(p.precio_final) for p in partidas if p is not None),
        Decimal("0"),
    )


def default_deductions(partidas: Iterable[Any]) -> list[Deduccion]:
    partidas = [p for p in partidas if p is not None]
    valor = contract_value(partidas)
    quintales = sum((_quintales(p) for p in partidas), Decimal("0"))
    return [
        Deduccion("Impuestos (2.5% Alquiler Licencia)", round2(valor * Decimal(TASA_IMPUESTO_LICENCIA))),
        Deduccion("Honorarios Licencia ($1.00/qq)", round2(quintales * Decimal(HONORARIO_LICENCIA_QQ))),
        Deduccion("Costo Fitosanitario (Fijo)", Decimal(COSTO_FITOSANITARIO)),
    ]


def settle(
    partidas: Iterable[Any],
    deducciones: Iterable[Any],
    pagos: Iterable[Any],
) -> ResultadoLiquidacion:
    partidas = [p for p in partidas if p is not None]
    valor = contract_value(partidas)
    total_deducciones = sum((to_decimal(d.monto) for d in deducciones), Decimal("0"))
    total_pagado = sum((to_decimal(p.monto) for p in pagos), Decimal("0"))
    return ResultadoLiquidacion(
        total_quintales=round2(sum((_quintales(p) for p in partidas), Decimal("0"))),
        valor_total=round2(valor),
        total_deducciones=round2(total_deducciones),
        total_pagado=round2(total_pagado),
        saldo=round2(valor - total_deducciones - total_pagado),
    )
