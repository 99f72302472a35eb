from decimal import Decimal
from types import SimpleNamespace

from exportacion_cafe.engine import default_deductions, settle


def _partida(peso_kg, precio_final):
    return SimpleNamespace(peso_kg=Decimal(peso_kg), precio_final=Decimal(precio_final))


def test_default_deductions():
    # 4600 kg = 100 qq at 200.00 -> value 20000.00
    deducciones = default_deductions([_partida("4600", "200.00")])
    assert [d.monto for d in deducciones] == [Decimal("500.00"), Decimal("100.00"), Decimal("45.45")]


def test_settlement_balance():
    partidas = [_partida("4600", "200.00"), _partida("2300", "210.00")]
    deducciones = default_deductions(partidas)
    pagos = [SimpleNamespace(monto=Decimal("10000"))]

    resultado = settle(partidas, deducciones, pagos)

    assert resultado.total_quintales == Decimal("150.00")
    assert resultado.valor_total == Decimal("30500.00")
    assert resultado.total_deducciones == Decimal("957.95")
    assert resultado.total_pagado == Decimal("10000.00")
    assert resultado.saldo == Decimal("19542.05")
