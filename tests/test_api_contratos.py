import pytest

URL = "/api/contratos/"


def _contrato(numero_contrato, fecha_venta="2024-11-15", partidas=None, **extra):
    return {
        "empresa": "dizano",
        "numero_contrato": numero_contrato,
        "fecha_venta": fecha_venta,
        "partidas": partidas or [],
        **extra,
    }


@pytest.fixture
def contrato_x(client, admin_headers):
    response = client.post(
        URL,
        json=_contrato(
            "X",
            diferencial=10,
            partidas=[{"numero": "1", "peso_kg": 2300, "fijacion": -15, "num_bultos": 33}],
        ),
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_contract_derives_harvest_and_lot_fields(contrato_x):
    assert contrato_x["cosecha"] == "2024-2025"
    [partida] = contrato_x["partidas"]
    assert partida["numero_display"] == "11/988/1"
    assert partida["peso_qq"] == 50.0
    assert partida["precio_final"] == -5.0
    assert partida["estado_marcas"] == "PENDIENTE"
    assert contrato_x["total_qq"] == 50.0


def test_duplicate_lot_in_same_harvest_is_rejected(client, admin_headers, contrato_x):
    response = client.post(
        URL, json=_contrato("Y", partidas=[{"numero": " 1 "}]), headers=admin_headers
    )
    assert response.status_code == 409
    assert "Contrato X" in response.json()["detail"]
    assert "2024-2025" in response.json()["detail"]


def test_same_lot_number_in_next_harvest_is_accepted(client, admin_headers, contrato_x):
    response = client.post(
        URL,
        json=_contrato("Z", fecha_venta="2025-10-02", partidas=[{"numero": "1"}]),
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["cosecha"] == "2025-2026"


def test_duplicate_inside_one_payload(client, admin_headers):
    response = client.post(
        URL,
        json=_contrato("W", partidas=[{"numero": "8"}, {"numero": "8"}]),
        headers=admin_headers,
    )
    assert response.status_code == 409


def test_add_and_edit_lot(client, admin_headers, contrato_x):
    contrato_id = contrato_x["id"]
    dup = client.post(f"{URL}{contrato_id}/partidas", json={"numero": "1"}, headers=admin_headers)
    assert dup.status_code == 409

    nueva = client.post(
        f"{URL}{contrato_id}/partidas",
        json={"numero": "2", "peso_kg": 4600, "fijacion": 200, "isf_enviado": True},
        headers=admin_headers,
    )
    assert nueva.status_code == 201
    body = nueva.json()
    assert body["peso_qq"] == 100.0
    assert body["precio_final"] == 210.0
    assert body["isf_enviado"] is False

    # Re-saving a lot with its own number is not a collision
    partida_id = body["id"]
    same = client.put(
        f"{URL}{contrato_id}/partidas/{partida_id}",
        json={"numero": "2", "peso_qq": 99.5, "peso_kg": 4600, "peso_vinculado": False},
        headers=admin_headers,
    )
    assert same.status_code == 200
    assert same.json()["peso_qq"] == 99.5

    clash = client.put(
        f"{URL}{contrato_id}/partidas/{partida_id}", json={"numero": "1"}, headers=admin_headers
    )
    assert clash.status_code == 409


def test_unknown_package_kind(client, admin_headers, contrato_x):
    response = client.post(
        f"{URL}{contrato_x['id']}/partidas",
        json={"numero": "3", "clase_empaque": "BARRIL"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_new_differential_updates_final_prices(client, admin_headers, contrato_x):
    response = client.put(f"{URL}{contrato_x['id']}", json={"diferencial": 30}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["partidas"][0]["precio_final"] == 15.0


def test_explicit_null_keeps_required_contract_fields(client, admin_headers, contrato_x):
    response = client.put(
        f"{URL}{contrato_x['id']}",
        json={"terminado": None, "cert_organico": None, "numero_contrato": None, "comprador": None},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["terminado"] is False
    assert body["cert_organico"] is False
    assert body["numero_contrato"] == "X"
    assert body["comprador"] is None


def test_moving_contract_to_a_harvest_with_the_same_lot(client, admin_headers, contrato_x):
    otro = client.post(
        URL,
        json=_contrato("Q", fecha_venta="2024-03-01", partidas=[{"numero": "1"}]),
        headers=admin_headers,
    ).json()
    assert otro["cosecha"] == "2023-2024"

    response = client.put(f"{URL}{otro['id']}", json={"cosecha": "2024-2025"}, headers=admin_headers)
    assert response.status_code == 409


def test_list_filters_by_harvest(client, admin_headers, contrato_x):
    client.post(URL, json=_contrato("Old", fecha_venta="2023-12-01"), headers=admin_headers)

    todos = client.get(URL, headers=admin_headers).json()
    assert {c["numero_contrato"] for c in todos} == {"X", "Old"}

    filtrados = client.get(URL, params={"cosecha": "2024-2025"}, headers=admin_headers).json()
    assert [c["numero_contrato"] for c in filtrados] == ["X"]

    proben = client.get(URL, params={"empresa": "proben"}, headers=admin_headers).json()
    assert proben == []


def test_cosechas(client, admin_headers):
    body = client.get(f"{URL}cosechas", headers=admin_headers).json()
    assert body["actual"] in body["opciones"]
    assert len(body["opciones"]) == 6


def test_delete_contract(client, admin_headers, contrato_x):
    assert client.delete(f"{URL}{contrato_x['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"{URL}{contrato_x['id']}", headers=admin_headers).status_code == 404


def test_license_settlement(client, admin_headers):
    contrato = client.post(
        URL,
        json=_contrato(
            "LIC-1",
            alquiler_licencia=True,
            partidas=[{"numero": "40", "peso_kg": 4600, "fijacion": 200}],
        ),
        headers=admin_headers,
    ).json()

    pago = client.post(
        f"{URL}{contrato['id']}/pagos",
        json={"fecha": "2024-12-01", "monto": 10000, "referencia": "TRF-1"},
        headers=admin_headers,
    )
    assert pago.status_code == 201

    liquidacion = client.get(f"{URL}{contrato['id']}/liquidacion", headers=admin_headers).json()
    assert liquidacion["valor_total"] == 20000.0
    assert [d["monto"] for d in liquidacion["deducciones"]] == [500.0, 100.0, 45.45]
    assert liquidacion["total_pagado"] == 10000.0
    assert liquidacion["saldo"] == 9354.55


def test_payment_on_regular_contract_rejected(client, admin_headers, contrato_x):
    response = client.post(
        f"{URL}{contrato_x['id']}/pagos",
        json={"fecha": "2024-12-01", "monto": 10},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_logistics_role_cannot_delete_contracts(client, admin_headers, logistica_headers, contrato_x):
    assert client.get(URL, headers=logistica_headers).status_code == 200
    response = client.delete(f"{URL}{contrato_x['id']}", headers=logistica_headers)
    assert response.status_code == 403
    assert client.get(f"{URL}{contrato_x['id']}/liquidacion", headers=logistica_headers).status_code == 403
