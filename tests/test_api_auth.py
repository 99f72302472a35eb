def test_login_and_profile(client):
    response = client.post(
        "/api/auth/login", data={"username": "admin", "password": "Admin123!"}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    body = me.json()
    assert body["username"] == "admin"
    assert body["rol_nombre"] == "Administrador"
    assert {"recurso": "ADMIN", "acciones": ["VER", "CREAR", "EDITAR", "ELIMINAR"]} in body["permisos"]


def test_login_wrong_password(client):
    response = client.post("/api/auth/login", data={"username": "admin", "password": "nope"})
    assert response.status_code == 401


def test_profile_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    bad = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


def test_health(client):
    assert client.get("/api/health").json()["status"] == "ok"
