from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from exportacion_cafe.database import Base

ROOT = Path(__file__).resolve().parent.parent


def _config(url):
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def test_initial_revision_matches_models(tmp_path):
    url = f"sqlite:///{tmp_path / 'migraciones.db'}"
    cfg = _config(url)
    command.upgrade(cfg, "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert set(inspector.get_table_names()) == set(Base.metadata.tables) | {"alembic_version"}
        for nombre, tabla in Base.metadata.tables.items():
            columnas = {c["name"]: c["nullable"] for c in inspector.get_columns(nombre)}
            assert columnas == {c.name: c.nullable for c in tabla.columns}, nombre
    finally:
        engine.dispose()

    command.downgrade(cfg, "base")
    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) == {"alembic_version"}
    finally:
        engine.dispose()
