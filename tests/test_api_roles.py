URL = "/api/roles/"


def test_admin_lists_default_roles(client, admin_headers):
    response = client.get(URL, headers=admin_headers)
    assert response.status_code == 200
    assert {r["nombre"] for r in response.json()} == {"Administrador", "Logística", "Facturación"}


def test_logistics_cannot_manage_roles(client, logistica_headers):
    assert client.get(URL, headers=logistica_headers).status_code == 403
    response = client.post(URL, json={"nombre": "Auditor"}, headers=logistica_headers)
    assert response.status_code == 403


def test_create_update_and_delete_role(client, admin_headers):
    creado = client.post(
        URL,
        json={
            "nombre": "Auditor",
            "permisos": [{"recurso": "CONTRATOS", "acciones": ["VER", "VER"]}],
        },
        headers=admin_headers,
    )
    assert creado.status_code == 201
    rol = creado.json()
    assert rol["permisos"] == [{"recurso": "CONTRATOS", "acciones": ["VER"]}]

    assert client.post(URL, json={"nombre": "Auditor"}, headers=admin_headers).status_code == 409

    actualizado = client.put(
        f"{URL}{rol['id']}",
        json={"permisos": [{"recurso": "DASHBOARD", "acciones": ["VER"]}]},
        headers=admin_headers,
    ).json()
    assert actualizado["permisos"] == [{"recurso": "DASHBOARD", "acciones": ["VER"]}]

    assert client.delete(f"{URL}{rol['id']}", headers=admin_headers).status_code == 200


def test_invalid_resource_rejected(client, admin_headers):
    response = client.post(
        URL,
        json={"nombre": "Raro", "permisos": [{"recurso": "NAVES", "acciones": ["VER"]}]},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_role_in_use_cannot_be_deleted(client, admin_headers, logistica_headers):
    roles = client.get(URL, headers=admin_headers).json()
    logistica = next(r for r in roles if r["nombre"] == "Logística")
    assert client.delete(f"{URL}{logistica['id']}", headers=admin_headers).status_code == 409


def test_revoking_a_permission_takes_effect(client, admin_headers, logistica_headers):
    assert client.get("/api/embarques/", headers=logistica_headers).status_code == 200

    roles = client.get(URL, headers=admin_headers).json()
    logistica = next(r for r in roles if r["nombre"] == "Logística")
    permisos = [p for p in logistica["permisos"] if p["recurso"] != "EMBARQUES"]
    client.put(f"{URL}{logistica['id']}", json={"permisos": permisos}, headers=admin_headers)

    assert client.get("/api/embarques/", headers=logistica_headers).status_code == 403
