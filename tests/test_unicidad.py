import datetime

import pytest

from exportacion_cafe.engine import DuplicateLotNumber, validate_partida_numero


def test_duplicate_in_same_company_and_harvest(make_contrato, make_partida):
    x = make_contrato(numero_contrato="X", partidas=[make_partida(numero="1")])
    y = make_contrato(numero_contrato="Y")

    with pytest.raises(DuplicateLotNumber) as excinfo:
        validate_partida_numero("1", "dizano", "2024-2025", [x, y])

    assert excinfo.value.contrato_numero == "X"
    assert excinfo.value.cosecha == "2024-2025"
    assert "Contrato X" in str(excinfo.value)


def test_numbers_are_compared_after_trimming(make_contrato, make_partida):
    x = make_contrato(partidas=[make_partida(numero=" 7 ")])
    with pytest.raises(DuplicateLotNumber):
        validate_partida_numero("7  ", "dizano", "2024-2025", [x])


def test_same_number_allowed_in_other_harvest(make_contrato, make_partida):
    anterior = make_contrato(
        fecha_venta=datetime.date(2024, 3, 1), partidas=[make_partida(numero="1")]
    )
    validate_partida_numero("1", "dizano", "2024-2025", [anterior])


def test_same_number_allowed_in_other_company(make_contrato, make_partida):
    proben = make_contrato(empresa="proben", partidas=[make_partida(numero="1")])
    validate_partida_numero("1", "dizano", "2024-2025", [proben])


def test_explicit_harvest_label_defines_scope(make_contrato, make_partida):
    # Sale date says 2024-2025 but the contract was filed under the previous harvest
    x = make_contrato(cosecha="2023-2024", partidas=[make_partida(numero="1")])
    validate_partida_numero("1", "dizano", "2024-2025", [x])
    with pytest.raises(DuplicateLotNumber):
        validate_partida_numero("1", "dizano", "2023-2024", [x])


def test_editing_a_lot_excludes_itself(make_contrato, make_partida):
    partida = make_partida(numero="3")
    x = make_contrato(partidas=[partida])
    validate_partida_numero("3", "dizano", "2024-2025", [x], exclude_partida_id=partida.id)


def test_blank_numbers_are_not_checked(make_contrato, make_partida):
    x = make_contrato(partidas=[make_partida(numero="")])
    validate_partida_numero("  ", "dizano", "2024-2025", [x])
