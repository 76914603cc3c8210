"""Software licenses with add-ons."""

from techasset.models import ActivityLog, SoftwareAddIn, SoftwareLicense


OFFICE365 = {
    "name": "Office365",
    "vendor": "Microsoft",
    "licenseType": "Subscription",
    "totalLicenses": "50",
    "usedLicenses": 12,
    "purchaseDate": "2024-01-15",
    "expiryDate": "2025-01-15",
    "cost": "1,250.50",
    "licenseKey": "XXXX-YYYY-ZZZZ",
    "assignedUsers": ["alice", "bob"],
    "addIns": [
        {"name": "Teams Premium", "cost": 100, "totalLicenses": 10},
        {"name": "Copilot", "cost": "300.00", "totalLicenses": 5, "usedLicenses": 2},
    ],
}


def test_create_office365_with_two_addins(client, db_session, standard_headers):
    resp = client.post("/api/licenses", json=OFFICE365, headers=standard_headers)
    assert resp.status_code == 201
    license_id = resp.json["id"]

    assert db_session.query(SoftwareLicense).count() == 1
    assert db_session.query(SoftwareAddIn).filter_by(license_id=license_id).count() == 2
    assert db_session.query(ActivityLog).filter_by(action="add_entry", target_id=license_id).count() == 1


def test_get_shapes_types(client, db_session, standard_headers):
    license_id = client.post("/api/licenses", json=OFFICE365, headers=standard_headers).json["id"]

    resp = client.get(f"/api/licenses/{license_id}", headers=standard_headers)
    assert resp.status_code == 200
    body = resp.json
    assert body["totalLicenses"] == 50
    assert body["cost"] == 1250.5
    assert body["purchaseDate"] == "2024-01-15"
    assert body["assignedUsers"] == ["alice", "bob"]
    assert body["status"] == "active"
    assert [a["name"] for a in body["addIns"]] == ["Teams Premium", "Copilot"]


def test_defaults_and_omitted_optionals(client, db_session, standard_headers):
    resp = client.post(
        "/api/licenses",
        json={"name": "Zip Tool", "licenseKey": "K-1", "vendor": ""},
        headers=standard_headers,
    )
    assert resp.status_code == 201

    lic = db_session.get(SoftwareLicense, resp.json["id"])
    assert lic.vendor is None
    assert lic.used_licenses == 0
    assert lic.status == "active"
    assert lic.cost is None


def test_required_fields(client, db_session, standard_headers):
    resp = client.post("/api/licenses", json={"name": "No key"}, headers=standard_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "Name and license key are required"
    assert db_session.query(SoftwareLicense).count() == 0


def test_update_replaces_addins(client, db_session, standard_headers):
    license_id = client.post("/api/licenses", json=OFFICE365, headers=standard_headers).json["id"]

    payload = dict(OFFICE365, addIns=[{"name": "Visio"}])
    resp = client.put(f"/api/licenses/{license_id}", json=payload, headers=standard_headers)
    assert resp.status_code == 200

    names = [a.name for a in db_session.query(SoftwareAddIn).filter_by(license_id=license_id)]
    assert names == ["Visio"]


def test_get_unknown_is_404(client, db_session, standard_headers):
    resp = client.get("/api/licenses/lic-missing", headers=standard_headers)
    assert resp.status_code == 404
    assert resp.json["error"] == "License not found"


def test_delete_requires_global_admin(client, db_session, standard_headers, global_admin_headers):
    license_id = client.post("/api/licenses", json=OFFICE365, headers=standard_headers).json["id"]

    assert client.delete(f"/api/licenses/{license_id}", headers=standard_headers).status_code == 403
    assert client.delete(f"/api/licenses/{license_id}", headers=global_admin_headers).status_code == 200
    assert db_session.query(SoftwareAddIn).count() == 0


def test_string_body_is_rejected(client, db_session, standard_headers):
    resp = client.post("/api/licenses", json="Office365", headers=standard_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "Request body must be a JSON object"
    assert db_session.query(SoftwareLicense).count() == 0


def test_license_count_out_of_range(client, db_session, standard_headers):
    resp = client.post(
        "/api/licenses", json={**OFFICE365, "totalLicenses": 10 ** 20}, headers=standard_headers,
    )
    assert resp.status_code == 400
    assert resp.json["error"] == "totalLicenses is out of range"
    assert db_session.query(SoftwareLicense).count() == 0
