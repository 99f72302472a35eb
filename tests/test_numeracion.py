import datetime
from types import SimpleNamespace

import pytest

from exportacion_cafe.engine import (
    MissingScope,
    format_numero,
    generate,
    partida_display_number,
    sequence_scope_key,
)


def _doc(tipo, empresa="dizano", tipo_factura=None, fecha=datetime.date(2024, 5, 1)):
    return SimpleNamespace(tipo=tipo, empresa=empresa, tipo_factura=tipo_factura, fecha_emision=fecha)


def test_third_export_invoice_is_inv_003():
    docs = [_doc("FACTURA", tipo_factura="EXPORTACION"), _doc("FACTURA")]
    assert generate("FACTURA", "dizano", docs, tipo_factura="EXPORTACION") == "INV-003"


def test_invoice_subtypes_have_separate_sequences():
    docs = [_doc("FACTURA", tipo_factura="EXPORTACION"), _doc("FACTURA", tipo_factura="GENERAL")]
    assert generate("FACTURA", "dizano", docs, tipo_factura="GENERAL") == "VAR-002"
    assert generate("FACTURA", "dizano", docs) == "INV-002"


def test_invoices_of_the_other_company_are_ignored():
    docs = [_doc("FACTURA", empresa="proben"), _doc("FACTURA", empresa="proben")]
    assert generate("FACTURA", "dizano", docs) == "INV-001"


def test_generate_is_deterministic_and_advances_after_persisting():
    docs = [_doc("FACTURA")]
    first = generate("FACTURA", "dizano", docs)
    assert first == generate("FACTURA", "dizano", docs) == "INV-002"
    docs.append(_doc("FACTURA"))
    assert generate("FACTURA", "dizano", docs) == "INV-003"


def test_waybill_sequence_restarts_each_year():
    docs = [
        _doc("PORTE", fecha=datetime.date(2023, 12, 30)),
        _doc("PORTE", fecha=datetime.date(2024, 1, 2)),
    ]
    assert generate("PORTE", "dizano", docs, scope_year=2024) == "CP-2024-002"
    assert generate("PORTE", "dizano", docs, scope_year=2025) == "CP-2025-001"


def test_waybill_requires_year():
    with pytest.raises(MissingScope):
        generate("PORTE", "dizano", [])


@pytest.mark.parametrize(
    "tipo, empresa, existentes, esperado",
    [
        ("PESO", "dizano", 0, "WT-D01-001"),
        ("CALIDAD", "dizano", 3, "QC-D04-001"),
        ("EMPAQUE", "proben", 9, "PL-P10-001"),
    ],
)
def test_certificate_numbers(tipo, empresa, existentes, esperado):
    docs = [_doc(tipo, empresa=empresa) for _ in range(existentes)]
    assert generate(tipo, empresa, docs) == esperado


def test_payment_instruction_is_not_numbered():
    assert generate("INSTRUCCION_PAGO", "dizano", []) is None
    assert sequence_scope_key("INSTRUCCION_PAGO", "dizano") is None


def test_missing_company_raises():
    with pytest.raises(MissingScope):
        generate("FACTURA", None, [])


def test_scope_keys():
    assert sequence_scope_key("FACTURA", "dizano") == "FACTURA:dizano:EXPORTACION"
    assert sequence_scope_key("PORTE", "proben", 2024) == "PORTE:proben:2024"
    assert sequence_scope_key("PESO", "proben") == "PESO:proben"


def test_format_numero_pads_sequence():
    assert format_numero("FACTURA", "dizano", 12, tipo_factura="GENERAL") == "VAR-012"
    assert format_numero("PORTE", "dizano", 7, scope_year=2024) == "CP-2024-007"


def test_partida_display_number():
    assert partida_display_number("dizano", " 12 ") == "11/988/12"
    assert partida_display_number("proben", "5") == "11/44360/5"
