import datetime
from types import SimpleNamespace

import pytest

from exportacion_cafe.engine import contract_harvest_year, harvest_year_options, resolve_harvest_year


@pytest.mark.parametrize(
    "fecha, esperado",
    [
        (datetime.date(2024, 10, 1), "2024-2025"),
        (datetime.date(2024, 12, 31), "2024-2025"),
        (datetime.date(2025, 1, 1), "2024-2025"),
        (datetime.date(2025, 9, 30), "2024-2025"),
        (datetime.date(2025, 10, 1), "2025-2026"),
    ],
)
def test_resolve_harvest_year_starts_in_october(fecha, esperado):
    assert resolve_harvest_year(fecha) == esperado


def test_resolve_harvest_year_accepts_datetime():
    assert resolve_harvest_year(datetime.datetime(2024, 9, 30, 23, 59)) == "2023-2024"


def test_resolve_harvest_year_without_date():
    assert resolve_harvest_year(None) is None


def test_explicit_cosecha_wins_over_sale_date():
    contrato = SimpleNamespace(
        cosecha=" 2023-2024 ", fecha_venta=datetime.date(2024, 11, 1), fecha_creacion=None
    )
    assert contract_harvest_year(contrato) == "2023-2024"


def test_harvest_falls_back_to_creation_date():
    contrato = SimpleNamespace(
        cosecha="", fecha_venta=None, fecha_creacion=datetime.date(2025, 2, 10)
    )
    assert contract_harvest_year(contrato) == "2024-2025"


def test_harvest_year_options_window():
    opciones = harvest_year_options(datetime.date(2024, 11, 1))
    assert opciones[0] == "2022-2023"
    assert "2024-2025" in opciones
    assert opciones[-1] == "2027-2028"
    assert len(opciones) == 6
