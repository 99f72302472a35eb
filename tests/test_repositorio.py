import datetime

import pytest
from fastapi import HTTPException

from exportacion_cafe.models.contrato import Contrato
from exportacion_cafe.services.repositorio import Repositorio


@pytest.fixture
def repo(db_session):
    return Repositorio(db_session, Contrato, "Contrato")


def _nuevo(numero, empresa="dizano"):
    return {
        "empresa": empresa,
        "numero_contrato": numero,
        "fecha_creacion": datetime.date(2024, 11, 1),
    }


def test_create_get_update_delete(repo):
    creado = repo.create(_nuevo("R-1"))
    assert creado.id is not None
    assert repo.get(creado.id).numero_contrato == "R-1"

    actualizado = repo.update(creado.id, {"comprador": "Volcafe"})
    assert actualizado.comprador == "Volcafe"

    repo.delete(creado.id)
    with pytest.raises(HTTPException) as excinfo:
        repo.get(creado.id)
    assert excinfo.value.status_code == 404


def test_get_all_skips_none_filters(repo):
    repo.create(_nuevo("R-1"))
    repo.create(_nuevo("R-2", empresa="proben"))

    assert len(repo.get_all(empresa=None)) == 2
    assert [c.numero_contrato for c in repo.get_all(empresa="proben")] == ["R-2"]
    ordenados = repo.get_all(order_by=Contrato.numero_contrato.desc())
    assert [c.numero_contrato for c in ordenados] == ["R-2", "R-1"]


def test_get_for_update_returns_row_or_404(repo):
    creado = repo.create(_nuevo("R-1"))
    assert repo.get(creado.id, for_update=True) is creado

    with pytest.raises(HTTPException) as excinfo:
        repo.get(creado.id + 1, for_update=True)
    assert excinfo.value.status_code == 404
