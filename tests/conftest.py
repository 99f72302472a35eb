import os

# Settings are cached on first import; point them at SQLite before that happens.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from exportacion_cafe import models  # noqa: F401
from exportacion_cafe.database import Base, get_db
from exportacion_cafe.main import app, seed_defaults
from exportacion_cafe.models.rol import Rol
from exportacion_cafe.models.usuario import Usuario
from exportacion_cafe.utils.security import create_access_token, hash_password


# ---------------------------------------------------------------------------
# Engine snapshots
# ---------------------------------------------------------------------------


@pytest.fixture
def make_partida():
    counter = iter(range(1, 10_000))

    def _make(**kwargs):
        defaults = {
            "id": next(counter),
            "numero": None,
            "num_bultos": None,
            "peso_kg": None,
            "peso_qq": None,
            "tipo_empaque": None,
            "clase_empaque": None,
            "registros_embalaje": [],
            "fecha_cutoff": None,
            "etd": None,
            "estado_marcas": "PENDIENTE",
            "fijacion": None,
            "precio_final": None,
            "isf_requerido": False,
            "isf_enviado": False,
        }
        defaults.update(kwargs)
        return SimpleNamespace(**defaults)

    return _make


@pytest.fixture
def make_contrato():
    counter = iter(range(1, 10_000))

    def _make(**kwargs):
        defaults = {
            "id": next(counter),
            "empresa": "dizano",
            "numero_contrato": "C-1",
            "cosecha": None,
            "fecha_venta": datetime.date(2024, 11, 15),
            "fecha_creacion": datetime.date(2024, 11, 15),
            "diferencial": None,
            "terminado": False,
            "partidas": [],
        }
        defaults.update(kwargs)
        return SimpleNamespace(**defaults)

    return _make


# ---------------------------------------------------------------------------
# Database + API client
# ---------------------------------------------------------------------------


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    seed_defaults(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _token_for(user: Usuario) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def admin_headers(db_session):
    admin = db_session.query(Usuario).filter(Usuario.username == "admin").one()
    return _token_for(admin)


@pytest.fixture
def logistica_headers(db_session):
    rol = db_session.query(Rol).filter(Rol.nombre == "Logística").one()
    user = Usuario(
        username="logistica",
        email="logistica@example.com",
        password_hash=hash_password("logistica123"),
        rol_id=rol.id,
        activo=True,
    )
    db_session.add(user)
    db_session.commit()
    return _token_for(user)
