import pytest

URL = "/api/usuarios/"


def _rol_id(client, headers, nombre):
    roles = client.get("/api/roles/", headers=headers).json()
    return next(r["id"] for r in roles if r["nombre"] == nombre)


def _login(client, username, password):
    return client.post("/api/auth/login", data={"username": username, "password": password})


@pytest.fixture
def bodega(client, admin_headers):
    response = client.post(
        URL,
        json={
            "username": "bodega",
            "email": "bodega@cafelasregiones.gt",
            "password": "Bodega2024!",
            "nombre_completo": "Encargado de bodega",
            "rol_id": _rol_id(client, admin_headers, "Logística"),
        },
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_created_user_logs_in_with_role_permissions(client, bodega):
    assert bodega["rol_nombre"] == "Logística"
    assert "password" not in bodega and "password_hash" not in bodega

    login = _login(client, "bodega", "Bodega2024!")
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    assert client.get("/api/embarques/", headers=headers).status_code == 200
    assert client.get("/api/roles/", headers=headers).status_code == 403


def test_list_users(client, admin_headers, bodega):
    response = client.get(URL, headers=admin_headers)
    assert response.status_code == 200
    assert [u["username"] for u in response.json()] == ["admin", "bodega"]


def test_duplicate_username_or_email(client, admin_headers, bodega):
    base = {
        "username": "bodega",
        "email": "otro@cafelasregiones.gt",
        "password": "Bodega2024!",
        "rol_id": bodega["rol_id"],
    }
    assert client.post(URL, json=base, headers=admin_headers).status_code == 409

    mismo_email = {**base, "username": "bodega2", "email": "bodega@cafelasregiones.gt"}
    assert client.post(URL, json=mismo_email, headers=admin_headers).status_code == 409


def test_unknown_role_rejected(client, admin_headers):
    response = client.post(
        URL,
        json={
            "username": "nadie",
            "email": "nadie@cafelasregiones.gt",
            "password": "Bodega2024!",
            "rol_id": 999,
        },
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_change_role_and_suspend(client, admin_headers, bodega):
    facturacion = _rol_id(client, admin_headers, "Facturación")
    response = client.put(
        f"{URL}{bodega['id']}", json={"rol_id": facturacion}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["rol_nombre"] == "Facturación"

    suspendido = client.put(
        f"{URL}{bodega['id']}", json={"activo": False}, headers=admin_headers
    ).json()
    assert suspendido["activo"] is False
    assert _login(client, "bodega", "Bodega2024!").status_code == 401


def test_password_change(client, admin_headers, bodega):
    client.put(f"{URL}{bodega['id']}", json={"password": "Nueva2025!"}, headers=admin_headers)
    assert _login(client, "bodega", "Bodega2024!").status_code == 401
    assert _login(client, "bodega", "Nueva2025!").status_code == 200


def test_last_admin_cannot_be_deleted_or_demoted(client, admin_headers):
    admin = next(u for u in client.get(URL, headers=admin_headers).json() if u["username"] == "admin")

    assert client.delete(f"{URL}{admin['id']}", headers=admin_headers).status_code == 409
    assert (
        client.put(f"{URL}{admin['id']}", json={"activo": False}, headers=admin_headers).status_code
        == 409
    )
    logistica = _rol_id(client, admin_headers, "Logística")
    assert (
        client.put(f"{URL}{admin['id']}", json={"rol_id": logistica}, headers=admin_headers).status_code
        == 409
    )


def test_admin_can_be_deleted_when_another_remains(client, admin_headers):
    segundo = client.post(
        URL,
        json={
            "username": "gerencia",
            "email": "gerencia@cafelasregiones.gt",
            "password": "Gerencia2024!",
            "rol_id": _rol_id(client, admin_headers, "Administrador"),
        },
        headers=admin_headers,
    ).json()

    assert client.delete(f"{URL}{segundo['id']}", headers=admin_headers).status_code == 200
    assert [u["username"] for u in client.get(URL, headers=admin_headers).json()] == ["admin"]


def test_logistics_cannot_manage_users(client, logistica_headers):
    assert client.get(URL, headers=logistica_headers).status_code == 403
    assert client.delete(f"{URL}1", headers=logistica_headers).status_code == 403
