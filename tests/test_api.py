"""HTTP adapter tests against the SQL store."""
import pytest


@pytest.fixture
def tenant(client):
    resp = client.post(
        "/api/register",
        json={
            "company_name": "Acme Corp",
            "admin_name": "Ada",
            "admin_email": "ada@acme.test",
            "password": "correct-horse-battery",
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    return {
        "headers": {"X-User-Id": str(body["admin"]["id"])},
        "department_id": body["departments"][0]["id"],
        "body": body,
    }


@pytest.fixture
def rival(client):
    resp = client.post(
        "/api/register",
        json={
            "company_name": "Globex",
            "admin_name": "Hank",
            "admin_email": "hank@globex.test",
            "password": "correct-horse-battery",
        },
    )
    body = resp.json()
    return {"headers": {"X-User-Id": str(body["admin"]["id"])}, "department_id": body["departments"][0]["id"]}


def test_healthz(client):
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_register_response_hides_password(tenant):
    admin = tenant["body"]["admin"]

    assert admin["role"] == "admin"
    assert "password" not in admin and "hashed_password" not in admin
    assert tenant["body"]["company"]["asset_id_pattern"] == "A-####"


def test_missing_identity_is_unauthorized(client):
    assert client.get("/api/inventory").status_code == 401
    assert client.get("/api/inventory", headers={"X-User-Id": "999"}).status_code == 401


def test_item_lifecycle(client, tenant):
    headers = tenant["headers"]

    created = client.post(
        "/api/inventory",
        json={"department_id": tenant["department_id"], "name": "Laptop", "quantity": 2},
        headers=headers,
    )
    assert created.status_code == 201
    item = created.json()
    assert item["asset_id"] == "A-0001"

    patched = client.patch(f"/api/inventory/{item['id']}", json={"status": "low"}, headers=headers)
    assert patched.status_code == 200
    assert patched.json()["status"] == "low"

    listed = client.get("/api/inventory", headers=headers).json()
    assert [i["id"] for i in listed] == [item["id"]]

    assert client.delete(f"/api/inventory/{item['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/inventory/{item['id']}", headers=headers).status_code == 404

    feed = client.get("/api/activity", headers=headers).json()
    assert [e["action"] for e in feed] == ["removed", "updated", "added"]


def test_departments_and_dashboard(client, tenant):
    headers = tenant["headers"]
    lab = client.post("/api/departments", json={"name": "Lab"}, headers=headers).json()
    client.post("/api/inventory", json={"department_id": lab["id"], "name": "Scope"}, headers=headers)

    departments = client.get("/api/departments", headers=headers).json()
    dashboard = client.get("/api/dashboard", headers=headers).json()

    assert [d["name"] for d in departments] == ["General", "Lab"]
    assert dashboard["total_items"] == 1
    assert dashboard["department_count"] == 2
    assert {s["name"]: s["capacity_used"] for s in dashboard["department_stats"]} == {"General": 0, "Lab": 10}


def test_cross_tenant_is_404_with_error_envelope(client, tenant, rival):
    item = client.post(
        "/api/inventory",
        json={"department_id": rival["department_id"], "name": "Secret"},
        headers=rival["headers"],
    ).json()

    resp = client.get(f"/api/inventory/{item['id']}", headers=tenant["headers"])

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NF001"
    assert resp.json()["error"]["message"] == "Item not found"


def test_employee_permissions(client, tenant):
    headers = tenant["headers"]
    employee = client.post(
        "/api/users",
        json={
            "name": "Eli",
            "email": "eli@acme.test",
            "password": "long-enough-pw",
            "department_ids": [tenant["department_id"]],
        },
        headers=headers,
    ).json()
    employee_headers = {"X-User-Id": str(employee["id"])}

    created = client.post(
        "/api/inventory",
        json={"department_id": tenant["department_id"], "name": "Mouse"},
        headers=employee_headers,
    )
    assert created.status_code == 201

    denied = client.delete(f"/api/inventory/{created.json()['id']}", headers=employee_headers)
    assert denied.status_code == 403
    assert denied.json()["error"] == {"message": "Forbidden: admin required", "code": "AUTH001", "details": {}}

    assert client.post("/api/departments", json={"name": "X"}, headers=employee_headers).status_code == 403


def test_company_settings(client, tenant):
    headers = tenant["headers"]

    resp = client.patch("/api/company", json={"asset_id_pattern": "AC-###"}, headers=headers)
    assert resp.status_code == 200

    item = client.post(
        "/api/inventory",
        json={"department_id": tenant["department_id"], "name": "Desk"},
        headers=headers,
    ).json()
    assert item["asset_id"] == "AC-001"

    bad = client.patch("/api/company", json={"asset_id_pattern": "AC"}, headers=headers)
    assert bad.status_code == 422
    assert bad.json()["error"]["code"] == "VAL001"


def test_delete_department_unavailable(client, tenant):
    resp = client.delete(f"/api/departments/{tenant['department_id']}", headers=tenant["headers"])

    assert resp.status_code == 501
    assert resp.json()["error"]["code"] == "SYS501"


def test_request_validation(client, tenant):
    resp = client.post(
        "/api/inventory",
        json={"department_id": tenant["department_id"], "name": "Q", "quantity": 0},
        headers=tenant["headers"],
    )

    assert resp.status_code == 422


def test_item_patch_does_not_accept_author(client, tenant):
    headers = tenant["headers"]
    item = client.post(
        "/api/inventory",
        json={"department_id": tenant["department_id"], "name": "Chair"},
        headers=headers,
    ).json()

    resp = client.patch(f"/api/inventory/{item['id']}", json={"updated_by": 999}, headers=headers)
    assert resp.status_code == 422

    patch_schema = client.get("/openapi.json").json()["components"]["schemas"]["InventoryItemPatch"]
    assert "updated_by" not in patch_schema["properties"]


def test_rename_department_validation(client, tenant):
    url = f"/api/departments/{tenant['department_id']}"

    assert client.patch(url, json={"name": ""}, headers=tenant["headers"]).status_code == 422
    assert client.patch(url, json={"name": None}, headers=tenant["headers"]).status_code == 422
    assert client.get(url, headers=tenant["headers"]).json()["name"] == "General"
