import io

import pytest
from openpyxl import Workbook

from entyre_cms.services.excel import analyze_workbook, classify_filename


def workbook_bytes():
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Flows"
    sheet.append(["Tyre flows 2030"])
    sheet.append([])
    sheet.append(["Source"])
    sheet.append(["Region", "Tonnes", 2030])
    sheet.append(["North", 5, 6])
    sheet.append(["Weight factor", 0.5, 0.5])
    workbook.create_sheet("Notes")

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize("filename, expected", [
    ("Scenario3_national.xlsx", ("S3", "alternative", "national")),
    ("sc-12 Optimistic regional.xlsx", ("S12", "optimistic", "regional")),
    ("S4 baseline.xlsx", ("S4", "baseline", None)),
    ("Pathway_Pessimistic.xlsx", (None, "pessimistic", "pathway")),
    ("disc5.xlsx", (None, None, None)),
    ("summary.xlsx", (None, None, None)),
    ("International_S2.xlsx", ("S2", "alternative", None)),
    ("Subnational-baselines.xlsx", (None, None, None)),
    ("national2030_baseline.xlsx", (None, "baseline", "national")),
])
def test_classify_filename(filename, expected):
    result = classify_filename(filename)
    assert (result["scenarioId"], result["scenarioType"], result["scopeType"]) == expected


def test_classify_without_filename():
    assert classify_filename(None) == {"scenarioId": None, "scenarioType": None, "scopeType": None}


def test_analyze_workbook():
    metadata = analyze_workbook(io.BytesIO(workbook_bytes()))

    assert metadata["sheetNames"] == ["Flows", "Notes"]
    assert metadata["columnInfo"] == {"Flows": ["Region", "Tonnes", 2030]}
    assert metadata["rowCount"] == 5
    assert metadata["hasWeights"] is True
    assert "error" not in metadata


def test_analyze_unreadable_workbook():
    metadata = analyze_workbook(io.BytesIO(b"definitely not a zip"))
    assert metadata["sheetNames"] == []
    assert metadata["rowCount"] == 0
    assert metadata["error"]


def upload(client, headers, name="Scenario2_Baseline_National.xlsx", **fields):
    data = {"title": "Scenario two", **fields, "file": (io.BytesIO(workbook_bytes()), name)}
    return client.post("/api/v1/excel-files", data=data, headers=headers, content_type="multipart/form-data")


def test_upload_classifies_and_analyzes(client, editor_headers, media_store):
    resp = upload(client, editor_headers, tags="tyres, 2030,", category="comparison")
    assert resp.status_code == 201

    body = resp.get_json()
    assert body["scenarioId"] == "S2"
    assert body["scenarioType"] == "baseline"
    assert body["scopeType"] == "national"
    assert body["category"] == "comparison"
    assert body["tags"] == ["tyres", "2030"]
    assert body["isActive"] is True
    assert body["metadata"]["rowCount"] == 5
    assert body["originalName"] == "Scenario2_Baseline_National.xlsx"
    assert body["fileSize"] > 0
    assert media_store.objects[body["filePublicId"]].startswith(b"PK")

    content = client.get(f"/api/v1/excel-files/{body['id']}/content").get_json()
    assert content["metadata"]["sheetNames"] == ["Flows", "Notes"]
    assert content["scenarioId"] == "S2"


def test_upload_rejections(client, editor_headers):
    no_file = client.post("/api/v1/excel-files", data={"title": "x"}, headers=editor_headers,
                          content_type="multipart/form-data")
    assert no_file.status_code == 400
    assert no_file.get_json()["details"] == ["Please provide an Excel file"]

    assert upload(client, editor_headers, name="report.csv").status_code == 400
    assert upload(client, editor_headers, category="misc").status_code == 400


def test_toggle_filters_and_scenarios(client, editor_headers):
    first = upload(client, editor_headers).get_json()
    upload(client, editor_headers, name="overview.xlsx", category="other")

    toggled = client.post(f"/api/v1/excel-files/{first['id']}/toggle-active", headers=editor_headers)
    assert toggled.status_code == 200
    assert toggled.get_json() == {"message": "File deactivated successfully", "isActive": False}

    assert [f["originalName"] for f in client.get("/api/v1/excel-files?active=true").get_json()] == [
        "overview.xlsx"
    ]
    assert client.get("/api/v1/excel-files/meta/scenarios").get_json() == []
    assert client.get("/api/v1/excel-files/meta/categories").get_json() == ["analysis", "other"]

    client.post(f"/api/v1/excel-files/{first['id']}/toggle-active", headers=editor_headers)
    scenarios = client.get("/api/v1/excel-files/meta/scenarios").get_json()
    assert scenarios == [{
        "id": "S2",
        "fileId": first["id"],
        "scenarioType": "baseline",
        "scopeType": "national",
        "title": "Scenario two",
        "originalName": "Scenario2_Baseline_National.xlsx",
    }]


def test_replace_and_delete_release_files(client, editor_headers, media_store):
    excel_file = upload(client, editor_headers).get_json()

    replaced = client.put(
        f"/api/v1/excel-files/{excel_file['id']}",
        data={"file": (io.BytesIO(workbook_bytes()), "S7 pessimistic.xlsx")},
        headers=editor_headers,
        content_type="multipart/form-data",
    )
    assert replaced.status_code == 200
    assert replaced.get_json()["scenarioId"] == "S7"
    assert replaced.get_json()["title"] == "Scenario two"
    assert media_store.destroyed == [excel_file["filePublicId"]]

    deleted = client.delete(f"/api/v1/excel-files/{excel_file['id']}", headers=editor_headers)
    assert deleted.status_code == 200
    assert deleted.get_json()["message"] == "Excel file deleted successfully"
    assert media_store.destroyed[-1] == replaced.get_json()["filePublicId"]
