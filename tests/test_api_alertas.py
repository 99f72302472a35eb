import datetime


def _crear(client, headers, numero_contrato, partidas, **extra):
    response = client.post(
        "/api/contratos/",
        json={
            "empresa": "dizano",
            "numero_contrato": numero_contrato,
            "fecha_venta": datetime.date.today().isoformat(),
            "partidas": partidas,
            **extra,
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_cutoff_alerts_for_unprepared_lot(client, admin_headers):
    cutoff = (datetime.date.today() + datetime.timedelta(days=2)).isoformat()
    _crear(
        client,
        admin_headers,
        "C-ALR",
        [{"numero": "12", "fecha_cutoff": cutoff, "tipo_empaque": "Saco", "num_bultos": 100}],
    )

    alertas = client.get("/api/alertas/", headers=admin_headers).json()
    assert [(a["tipo"], a["dias_restantes"]) for a in alertas] == [
        ("CUTOFF", 2),
        ("EMBALAJE", 2),
        ("MARCAS", 2),
    ]
    assert alertas[0]["partida_numero"] == "11/988/12"

    solo_cutoff = client.get("/api/alertas/", params={"tipo": "CUTOFF"}, headers=admin_headers).json()
    assert len(solo_cutoff) == 1

    resumen = client.get("/api/alertas/resumen", headers=admin_headers).json()
    assert resumen["total"] == 3
    assert resumen["vencidas"] == 0
    assert resumen["by_tipo"] == {"CUTOFF": 1, "EMBALAJE": 1, "MARCAS": 1}


def test_terminated_contracts_do_not_alert(client, admin_headers):
    cutoff = datetime.date.today().isoformat()
    _crear(client, admin_headers, "C-FIN", [{"numero": "1", "fecha_cutoff": cutoff}], terminado=True)
    assert client.get("/api/alertas/", headers=admin_headers).json() == []


def test_packaging_summary(client, admin_headers):
    _crear(
        client,
        admin_headers,
        "C-EMP",
        [
            {"numero": "1", "num_bultos": 100, "clase_empaque": "SACO_YUTE_GRAINPRO"},
            {
                "numero": "2",
                "num_bultos": 20,
                "clase_empaque": "JUMBO",
                "registros_embalaje": [{"material": "Jumbo", "requerido": 20, "comprado": 20}],
            },
        ],
    )

    resumen = client.get("/api/embalaje/resumen", headers=admin_headers).json()
    assert resumen["por_categoria"]["sacos"] == {"requerido": 100, "comprado": 0}
    assert resumen["por_categoria"]["grainpro"] == {"requerido": 100, "comprado": 0}
    assert resumen["por_categoria"]["jumbo"] == {"requerido": 20, "comprado": 20}
    assert resumen["total_faltante"] == 200
    assert [p["partida_numero"] for p in resumen["partidas_incompletas"]] == ["11/988/1"]
    assert len(resumen["contratos_con_faltante"]) == 1
