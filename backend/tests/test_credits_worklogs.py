"""Credit ledger, the two work logs and their spreadsheet export."""

import io

from openpyxl import load_workbook

from techasset.models import ActivityLog, ConsultancyLogEntry, InternalLogEntry
from techasset.services import export_service
from techasset.services.worklog_service import CONSULTANCY, INTERNAL


def _log(**overrides):
    body = {
        "idCode": "CG-001",
        "clientName": "Acme",
        "subjectIssue": "VPN drops",
        "category": "Network",
        "dateStarted": "2024-05-01",
        "timeStarted": "09:00",
        "dateFinished": "2024-05-01",
        "timeFinished": "10:30",
        "technicianName": "Sam",
        "resolutionDetails": "Replaced router firmware",
        "status": "Done",
        "timeConsumedMinutes": 90,
        "totalTimeChargeMinutes": "90",
        "creditConsumed": "1.5",
        "totalCreditConsumed": "1.5",
    }
    body.update(overrides)
    return body


# =============================================================================
# CREDITS
# =============================================================================


def test_credit_blocks_and_summary(client, db_session, global_admin_headers, standard_headers):
    resp = client.post(
        "/api/credits",
        json={"blockNumber": 1, "totalCredits": "10", "purchaseDate": "2024-01-01", "isActive": False},
        headers=global_admin_headers,
    )
    assert resp.status_code == 201
    assert resp.json["message"] == "Credit block created successfully"
    client.post("/api/credits", json={"blockNumber": 2, "totalCredits": 5}, headers=global_admin_headers)

    blocks = client.get("/api/credits", headers=standard_headers).json
    assert [b["blockNumber"] for b in blocks] == [2, 1]

    active = client.get("/api/credits/active", headers=standard_headers).json
    assert active["blockNumber"] == 2

    client.post("/api/chapmancg", json=_log(creditConsumed="4.25"), headers=standard_headers)
    client.post("/api/chapmancg", json=_log(idCode="CG-002", creditConsumed=12), headers=standard_headers)

    summary = client.get("/api/credits/summary", headers=standard_headers).json
    assert summary["totalPurchased"] == 15.0
    assert summary["totalConsumed"] == 16.25
    assert summary["remaining"] == -1.25
    assert summary["overdrawn"] is True


def test_no_active_block_is_null(client, db_session, standard_headers):
    resp = client.get("/api/credits/active", headers=standard_headers)
    assert resp.status_code == 200
    assert resp.json is None


def test_credit_block_validation(client, db_session, global_admin_headers):
    resp = client.post("/api/credits", json={"blockNumber": 3}, headers=global_admin_headers)
    assert resp.status_code == 400
    resp = client.post("/api/credits", json={"blockNumber": 3, "totalCredits": -1}, headers=global_admin_headers)
    assert resp.status_code == 400


def test_credit_block_update_and_delete(client, db_session, global_admin_headers):
    block_id = client.post(
        "/api/credits", json={"blockNumber": 1, "totalCredits": 10}, headers=global_admin_headers,
    ).json["id"]

    resp = client.put(
        f"/api/credits/{block_id}",
        json={"blockNumber": 1, "totalCredits": 20, "isActive": False},
        headers=global_admin_headers,
    )
    assert resp.status_code == 200
    assert client.get("/api/credits", headers=global_admin_headers).json[0]["totalCredits"] == 20.0

    assert client.delete(f"/api/credits/{block_id}", headers=global_admin_headers).status_code == 200
    assert client.delete(f"/api/credits/{block_id}", headers=global_admin_headers).status_code == 404


# =============================================================================
# WORK LOGS
# =============================================================================


def test_consultancy_log_crud(client, db_session, standard_headers, global_admin_headers):
    resp = client.post("/api/chapmancg", json=_log(), headers=standard_headers)
    assert resp.status_code == 201
    assert resp.json["message"] == "ChapmanCG log entry created successfully"
    entry_id = resp.json["id"]

    [entry] = client.get("/api/chapmancg", headers=standard_headers).json
    assert entry["creditConsumed"] == 1.5
    assert entry["totalTimeChargeMinutes"] == 90
    assert entry["addedBy"] == "Standard User"

    resp = client.put(f"/api/chapmancg/{entry_id}", json=_log(status="Reopened"), headers=standard_headers)
    assert resp.status_code == 200
    assert db_session.get(ConsultancyLogEntry, entry_id).status == "Reopened"

    assert client.delete(f"/api/chapmancg/{entry_id}", headers=standard_headers).status_code == 403
    assert client.delete(f"/api/chapmancg/{entry_id}", headers=global_admin_headers).status_code == 200
    assert db_session.query(ActivityLog).filter_by(target_id=entry_id).count() == 3


def test_internal_log_has_no_credit_fields(client, db_session, standard_headers):
    resp = client.post("/api/internallog", json=_log(idCode="INT-1"), headers=standard_headers)
    assert resp.status_code == 201

    [entry] = client.get("/api/internallog", headers=standard_headers).json
    assert "creditConsumed" not in entry
    assert db_session.query(InternalLogEntry).count() == 1
    assert db_session.query(ConsultancyLogEntry).count() == 0


def test_worklog_required_fields(client, db_session, standard_headers):
    resp = client.post("/api/internallog", json={"idCode": "X"}, headers=standard_headers)
    assert resp.status_code == 400
    assert resp.json["error"] == "ID code and client name are required"


def test_worklog_list_filters(client, db_session, standard_headers):
    client.post("/api/internallog", json=_log(idCode="A", clientName="Acme"), headers=standard_headers)
    client.post("/api/internallog", json=_log(idCode="B", clientName="Globex"), headers=standard_headers)

    resp = client.get("/api/internallog?client=Globex", headers=standard_headers)
    assert [e["idCode"] for e in resp.json] == ["B"]


def test_update_unknown_worklog_is_404(client, db_session, standard_headers):
    resp = client.put("/api/internallog/int-missing", json=_log(), headers=standard_headers)
    assert resp.status_code == 404


# =============================================================================
# EXPORT
# =============================================================================


def test_consultancy_export(client, db_session, standard_headers):
    client.post("/api/chapmancg", json=_log(), headers=standard_headers)
    client.post("/api/chapmancg", json=_log(idCode="CG-002", clientName="Globex"), headers=standard_headers)

    resp = client.get("/api/chapmancg/export?client=Acme", headers=standard_headers)
    assert resp.status_code == 200
    assert resp.mimetype == export_service.XLSX_MIMETYPE
    assert "ChapmanCG_Log_" in resp.headers["Content-Disposition"]
    assert "Client-Acme" in resp.headers["Content-Disposition"]

    sheet = load_workbook(io.BytesIO(resp.data)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert sheet.title == "ChapmanCG Log"
    assert rows[0][:3] == ("ID Code", "Client Name", "Subject Issue")
    assert "Credit Consumed" in rows[0]
    assert len(rows) == 2
    assert rows[1][0] == "CG-001"
    assert rows[1][rows[0].index("Remarks")] == "No remarks"
    assert rows[1][rows[0].index("Added By")] == "Standard User"


def test_internal_export_has_no_credit_columns(client, db_session, standard_headers):
    client.post("/api/internallog", json=_log(idCode="INT-1"), headers=standard_headers)

    resp = client.get("/api/internallog/export", headers=standard_headers)
    assert resp.status_code == 200

    header = next(load_workbook(io.BytesIO(resp.data)).active.iter_rows(values_only=True))
    assert "Credit Consumed" not in header
    assert header[-1] == "Entry Created"


def test_columns_for_kinds():
    consultancy = [h for h, _, _ in export_service.columns_for(CONSULTANCY)]
    internal = [h for h, _, _ in export_service.columns_for(INTERNAL)]
    assert len(consultancy) == len(internal) + 2
    assert "Total Credit Consumed" in consultancy
