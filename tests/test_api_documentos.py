URL = "/api/documentos/"


def _factura(**extra):
    return {"empresa": "dizano", "tipo": "FACTURA", "fecha_emision": "2024-11-12", **extra}


def test_deleted_invoice_number_is_not_reused(client, admin_headers):
    primera = client.post(URL, json=_factura(), headers=admin_headers)
    segunda = client.post(URL, json=_factura(), headers=admin_headers)
    assert primera.status_code == segunda.status_code == 201
    assert primera.json()["numero"] == "INV-001"
    assert segunda.json()["numero"] == "INV-002"

    assert client.delete(f"{URL}{segunda.json()['id']}", headers=admin_headers).status_code == 200

    tercera = client.post(URL, json=_factura(), headers=admin_headers)
    assert tercera.json()["numero"] == "INV-003"


def test_general_invoices_have_their_own_sequence(client, admin_headers):
    client.post(URL, json=_factura(), headers=admin_headers)
    general = client.post(URL, json=_factura(tipo_factura="GENERAL"), headers=admin_headers)
    assert general.json()["numero"] == "VAR-001"
    assert general.json()["tipo_factura"] == "GENERAL"


def test_preview_does_not_reserve(client, admin_headers):
    params = {"tipo": "FACTURA", "empresa": "dizano"}
    for _ in range(2):
        preview = client.get(f"{URL}siguiente-numero", params=params, headers=admin_headers)
        assert preview.json()["numero"] == "INV-001"

    creada = client.post(URL, json=_factura(), headers=admin_headers).json()
    assert creada["numero"] == "INV-001"
    preview = client.get(f"{URL}siguiente-numero", params=params, headers=admin_headers)
    assert preview.json()["numero"] == "INV-002"


def test_payment_instruction_has_no_number(client, admin_headers):
    response = client.post(
        URL, json={"empresa": "dizano", "tipo": "INSTRUCCION_PAGO"}, headers=admin_headers
    )
    assert response.status_code == 201
    assert response.json()["numero"] is None


def test_invoice_totals_are_computed(client, admin_headers):
    body = client.post(
        URL,
        json=_factura(
            lineas=[{"descripcion": "SHB EP", "cantidad": 100, "valor_unitario": 250.1}],
            ajustes=[{"concepto": "Calidad", "monto": 100}],
            anticipos=[{"concepto": "Anticipo", "monto": 5000}],
        ),
        headers=admin_headers,
    ).json()
    assert body["subtotal"] == 25010.0
    assert body["total_monto"] == 19910.0

    actualizado = client.put(
        f"{URL}{body['id']}", json={"anticipos": []}, headers=admin_headers
    ).json()
    assert actualizado["total_monto"] == 24910.0
    assert actualizado["numero"] == body["numero"]


def test_waybill_number_uses_issue_year(client, admin_headers):
    payload = {
        "empresa": "dizano",
        "tipo": "PORTE",
        "fecha_emision": "2024-03-10",
        "lineas": [{"cantidad": 275, "peso_unitario": 69, "peso_bruto_unitario": 69.7}],
    }
    first = client.post(URL, json=payload, headers=admin_headers).json()
    assert first["numero"] == "CP-2024-001"
    assert first["total_peso_neto"] == 18975.0
    assert first["total_peso_bruto"] == 19167.5

    nuevo_anio = client.post(URL, json={**payload, "fecha_emision": "2025-01-03"}, headers=admin_headers)
    assert nuevo_anio.json()["numero"] == "CP-2025-001"


def test_waybill_issue_date_stays_in_its_numbering_year(client, admin_headers):
    payload = {"empresa": "dizano", "tipo": "PORTE", "fecha_emision": "2024-03-10"}
    porte = client.post(URL, json=payload, headers=admin_headers).json()
    assert porte["numero"] == "CP-2024-001"

    otro_anio = client.put(
        f"{URL}{porte['id']}", json={"fecha_emision": "2025-01-02"}, headers=admin_headers
    )
    assert otro_anio.status_code == 422
    assert "CP-2024-001" in otro_anio.json()["detail"]

    mismo_anio = client.put(
        f"{URL}{porte['id']}", json={"fecha_emision": "2024-12-31"}, headers=admin_headers
    )
    assert mismo_anio.status_code == 200
    assert mismo_anio.json()["fecha_emision"] == "2024-12-31"
    assert mismo_anio.json()["numero"] == "CP-2024-001"


def test_bulk_certificates(client, admin_headers):
    lote = client.post(f"{URL}lote", json={"empresa": "dizano"}, headers=admin_headers)
    assert lote.status_code == 201
    assert [d["numero"] for d in lote.json()] == ["WT-D01-001", "QC-D01-001", "PL-D01-001"]

    segundo = client.post(
        f"{URL}lote", json={"empresa": "dizano", "tipos": ["PESO", "EMPAQUE"]}, headers=admin_headers
    )
    assert [d["numero"] for d in segundo.json()] == ["WT-D02-001", "PL-D02-001"]

    proben = client.post(f"{URL}lote", json={"empresa": "proben", "tipos": ["CALIDAD"]}, headers=admin_headers)
    assert [d["numero"] for d in proben.json()] == ["QC-P01-001"]


def test_bulk_rejects_non_certificate_kinds(client, admin_headers):
    response = client.post(
        f"{URL}lote", json={"empresa": "dizano", "tipos": ["PESO", "FACTURA"]}, headers=admin_headers
    )
    assert response.status_code == 422


def test_unknown_company(client, admin_headers):
    response = client.post(URL, json={"empresa": "acme", "tipo": "FACTURA"}, headers=admin_headers)
    assert response.status_code == 422


def test_contract_of_another_company_rejected(client, admin_headers):
    contrato = client.post(
        "/api/contratos/",
        json={"empresa": "proben", "numero_contrato": "P-1", "fecha_venta": "2024-11-01"},
        headers=admin_headers,
    ).json()
    response = client.post(URL, json=_factura(contrato_id=contrato["id"]), headers=admin_headers)
    assert response.status_code == 422


def test_permissions_are_per_document_kind(client, admin_headers, logistica_headers):
    factura = client.post(URL, json=_factura(), headers=logistica_headers)
    assert factura.status_code == 403

    peso = client.post(URL, json={"empresa": "dizano", "tipo": "PESO"}, headers=logistica_headers)
    assert peso.status_code == 201

    factura_admin = client.post(URL, json=_factura(), headers=admin_headers).json()
    assert client.get(f"{URL}{factura_admin['id']}", headers=logistica_headers).status_code == 403

    visibles = client.get(URL, headers=logistica_headers).json()
    assert [d["tipo"] for d in visibles] == ["PESO"]
    assert len(client.get(URL, headers=admin_headers).json()) == 2

    # Logistics may edit but not delete certificates
    assert client.delete(f"{URL}{peso.json()['id']}", headers=logistica_headers).status_code == 403
