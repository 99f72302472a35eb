import datetime
from types import SimpleNamespace

from exportacion_cafe.engine import compute_alerts, reconcile, summarize

HOY = datetime.date(2024, 11, 1)


def _registro(material, requerido, comprado):
    return SimpleNamespace(material=material, requerido=requerido, comprado=comprado)


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


def test_explicit_records_are_used_as_is(make_partida):
    partida = make_partida(
        num_bultos=300,
        clase_empaque="JUMBO",
        registros_embalaje=[_registro("Sacos de Yute", 275, 300)],
    )
    [linea] = reconcile(partida)
    assert (linea.material, linea.requerido, linea.comprado, linea.faltante) == (
        "Sacos de Yute", 275, 300, 0,
    )


def test_tagged_kind_uses_template(make_partida):
    lineas = reconcile(make_partida(num_bultos=50, clase_empaque="SACO_YUTE_GRAINPRO"))
    assert [(l.material, l.requerido, l.faltante) for l in lineas] == [
        ("Sacos de Yute", 50, 50),
        ("Bolsas GrainPro", 50, 50),
    ]


def test_boxes_need_no_bags(make_partida):
    assert reconcile(make_partida(num_bultos=50, clase_empaque="CAJA")) == []


def test_legacy_label_is_inferred_with_warning(make_partida, caplog):
    lineas = reconcile(make_partida(num_bultos=10, tipo_empaque="Big Bag 1000kg"))
    assert [l.material for l in lineas] == ["Big Bag"]
    assert "sin clase_empaque" in caplog.text


def test_no_units_no_requirement(make_partida):
    assert reconcile(make_partida(num_bultos=0, clase_empaque="SACO_YUTE")) == []


def test_summary_aggregates_active_contracts(make_contrato, make_partida):
    activo = make_contrato(
        partidas=[
            make_partida(numero="1", num_bultos=100, clase_empaque="SACO_YUTE_GRAINPRO"),
            make_partida(
                numero="2",
                num_bultos=20,
                registros_embalaje=[_registro("Jumbo", 20, 20)],
            ),
        ]
    )
    terminado = make_contrato(
        terminado=True, partidas=[make_partida(num_bultos=999, clase_empaque="SACO_YUTE")]
    )
    otra_empresa = make_contrato(
        empresa="proben", partidas=[make_partida(num_bultos=999, clase_empaque="SACO_YUTE")]
    )

    resumen = summarize([activo, terminado, otra_empresa], "dizano")

    assert resumen.por_categoria["sacos"] == {"requerido": 100, "comprado": 0}
    assert resumen.por_categoria["grainpro"] == {"requerido": 100, "comprado": 0}
    assert resumen.por_categoria["jumbo"] == {"requerido": 20, "comprado": 20}
    assert resumen.total_faltante == 200
    assert [p.partida_numero for p in resumen.partidas_incompletas] == ["11/988/1"]
    assert resumen.contratos_con_faltante == {activo.id}


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


def test_cutoff_in_two_days_with_missing_sacks(make_contrato, make_partida):
    partida = make_partida(
        numero="12",
        fecha_cutoff=datetime.date(2024, 11, 3),
        tipo_empaque="Saco",
        num_bultos=100,
        estado_marcas="PENDIENTE",
    )
    alertas = compute_alerts([make_contrato(partidas=[partida])], HOY, "dizano")

    assert [(a.tipo, a.dias_restantes) for a in alertas] == [
        ("CUTOFF", 2),
        ("EMBALAJE", 2),
        ("MARCAS", 2),
    ]
    assert "100 Sacos de Yute" in alertas[1].mensaje
    assert alertas[0].partida_numero == "11/988/12"


def test_confirmed_marks_and_full_packaging_only_cutoff(make_contrato, make_partida):
    partida = make_partida(
        fecha_cutoff=datetime.date(2024, 11, 3),
        num_bultos=100,
        clase_empaque="SACO_YUTE",
        registros_embalaje=[_registro("Sacos de Yute", 100, 100)],
        estado_marcas="CONFIRMADA",
    )
    alertas = compute_alerts([make_contrato(partidas=[partida])], HOY, "dizano")
    assert [a.tipo for a in alertas] == ["CUTOFF"]


def test_preparation_window_is_seven_days(make_contrato, make_partida):
    partida = make_partida(fecha_cutoff=datetime.date(2024, 11, 8), estado_marcas="ENVIADA")
    alertas = compute_alerts([make_contrato(partidas=[partida])], HOY, "dizano")
    assert [(a.tipo, a.dias_restantes) for a in alertas] == [("MARCAS", 7)]

    lejos = make_partida(fecha_cutoff=datetime.date(2024, 11, 9))
    assert compute_alerts([make_contrato(partidas=[lejos])], HOY, "dizano") == []


def test_overdue_cutoff_keeps_alerting_without_preparation_checks(make_contrato, make_partida):
    partida = make_partida(fecha_cutoff=datetime.date(2024, 10, 30), num_bultos=10, clase_empaque="SACO_YUTE")
    alertas = compute_alerts([make_contrato(partidas=[partida])], HOY, "dizano")
    assert [(a.tipo, a.dias_restantes) for a in alertas] == [("CUTOFF", -2)]


def test_alerts_sorted_by_days_remaining(make_contrato, make_partida):
    contrato = make_contrato(
        partidas=[
            make_partida(numero="a", etd=datetime.date(2024, 11, 5), estado_marcas="CONFIRMADA"),
            make_partida(numero="b", etd=datetime.date(2024, 10, 31)),
            make_partida(numero="c", fecha_cutoff=datetime.date(2024, 11, 2), estado_marcas="CONFIRMADA"),
        ]
    )
    alertas = compute_alerts([contrato], HOY, "dizano")
    dias = [a.dias_restantes for a in alertas]
    assert dias == sorted(dias)
    assert [(a.tipo, a.partida_numero) for a in alertas] == [
        ("ETD", "11/988/b"),
        ("CUTOFF", "11/988/c"),
        ("ETD", "11/988/a"),
    ]


def test_terminated_and_other_company_contracts_are_skipped(make_contrato, make_partida):
    cerca = datetime.date(2024, 11, 2)
    contratos = [
        make_contrato(terminado=True, partidas=[make_partida(fecha_cutoff=cerca)]),
        make_contrato(empresa="proben", partidas=[make_partida(fecha_cutoff=cerca)]),
    ]
    assert compute_alerts(contratos, HOY, "dizano") == []
