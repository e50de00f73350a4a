"""
Tests for file ingestion and the HTTP upload -> preview -> chart flow.
"""

import io
import json

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from core.ingest import IngestError, load_dataset, read_dataset
from core.storage import clear_sessions
from core.utils import to_number
from main import app

CSV = b"region,sales\nEast,120\nWest,80\n"


@pytest.fixture(autouse=True)
def fresh_sessions():
    clear_sessions()
    yield
    clear_sessions()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def headers():
    return {"X-Session-Id": "test-session"}


def _upload(client, headers, content=CSV, filename="sales.csv"):
    return client.post("/upload", headers=headers, files={"file": (filename, content)})


class TestIngestion:
    """Tests for per-format decoding and the row cap."""

    def test_csv_cells_are_strings(self):
        records = load_dataset(CSV, "sales.csv")
        assert records == [{"region": "East", "sales": "120"}, {"region": "West", "sales": "80"}]

    def test_csv_blank_cells_stay_empty_strings(self):
        records = load_dataset(b"a,b\nx,\n,2\n", "t.csv")
        assert records == [{"a": "x", "b": ""}, {"a": "", "b": "2"}]

    def test_empty_csv(self):
        assert load_dataset(b"", "t.csv") == []

    def test_row_cap(self):
        body = "n\n" + "\n".join(str(i) for i in range(150)) + "\n"
        records = load_dataset(body.encode(), "big.csv")
        assert len(records) == 100
        assert records[-1] == {"n": "99"}

    @pytest.mark.parametrize("rows,truncated", [(150, True), (101, True), (100, False), (3, False)])
    def test_truncation_reports_dropped_rows(self, rows, truncated):
        body = "n\n" + "\n".join(str(i) for i in range(rows)) + "\n"
        records, flag = read_dataset(body.encode(), "big.csv")
        assert len(records) == min(rows, 100)
        assert flag is truncated

    def test_row_cap_override(self):
        body = "n\n1\n2\n3\n"
        assert len(load_dataset(body.encode(), "t.csv", max_rows=2)) == 2

    def test_json_array_and_single_object(self):
        rows = [{"a": 1}, {"a": 2}]
        assert load_dataset(json.dumps(rows).encode(), "t.json") == rows
        assert load_dataset(b'{"a": 1}', "t.json") == [{"a": 1}]

    @pytest.mark.parametrize("content", [b"{not json", b"[1, 2, 3]"])
    def test_bad_json(self, content):
        with pytest.raises(IngestError):
            load_dataset(content, "t.json")

    def test_xml_rows(self):
        content = (
            b"<rows>"
            b"<row><region>East</region><sales>120</sales></row>"
            b"<row><region>West</region><sales>80</sales></row>"
            b"</rows>"
        )
        records = load_dataset(content, "t.xml")
        assert [r["region"] for r in records] == ["East", "West"]
        assert to_number(records[0]["sales"]) == 120

    def test_excel_drops_blank_cells(self):
        buf = io.BytesIO()
        pd.DataFrame({"a": ["x", None], "b": [1, 2]}).to_excel(buf, index=False)
        records = load_dataset(buf.getvalue(), "t.xlsx")
        assert records[0]["a"] == "x"
        assert "a" not in records[1]
        assert to_number(records[1]["b"]) == 2

    def test_unsupported_extension(self):
        with pytest.raises(IngestError, match="Please upload a CSV"):
            load_dataset(b"hello", "notes.txt")


class TestApi:
    """Tests for the upload -> preview -> chart endpoints."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_missing_session_header(self, client):
        resp = client.post("/upload", files={"file": ("sales.csv", CSV)})
        assert resp.status_code == 400

    def test_upload_returns_profile(self, client, headers):
        resp = _upload(client, headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["table"] == "sales"
        assert body["rows"] == 2
        assert body["columns"] == ["region", "sales"]
        types = {c["name"]: c["type"] for c in body["profile"]["columns"]}
        assert types == {"region": "text", "sales": "numeric"}

    def test_duplicate_upload(self, client, headers):
        _upload(client, headers)
        resp = _upload(client, headers)
        assert resp.status_code == 409
        assert resp.json()["table"] == "sales"

    def test_same_name_gets_suffix(self, client, headers):
        _upload(client, headers)
        resp = _upload(client, headers, content=b"region,sales\nNorth,5\n")
        assert resp.json()["table"] == "sales_2"

    def test_bad_file_is_400(self, client, headers):
        resp = _upload(client, headers, content=b"{oops", filename="bad.json")
        assert resp.status_code == 400
        assert "Invalid JSON" in resp.json()["detail"]

    def test_tables_and_preview(self, client, headers):
        _upload(client, headers)
        tables = client.get("/tables", headers=headers).json()["tables"]
        assert [t["name"] for t in tables] == ["sales"]
        assert tables[0]["file_name"] == "sales.csv"

        preview = client.get("/table/sales/preview", headers=headers).json()
        assert preview["row_count"] == 2
        assert preview["preview_rows"][1] == {"region": "West", "sales": "80"}

    def test_preview_unknown_table(self, client, headers):
        resp = client.get("/table/missing/preview", headers=headers)
        assert resp.status_code == 404

    def test_pie_chart(self, client, headers):
        _upload(client, headers)
        resp = client.post("/api/charts", headers=headers, json={"kind": "pie"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["table"] == "sales"
        assert body["axes"] == {"x": "region", "y": "sales"}
        assert body["series"] == [{"name": "East", "value": 120.0}, {"name": "West", "value": 80.0}]
        assert body["insights"] == ["East accounts for 60.0% of the total"]
        assert body["title"] == "sales.csv - Pie Chart"

    def test_bar_chart_with_explicit_axes(self, client, headers):
        _upload(client, headers)
        resp = client.post(
            "/api/charts",
            headers=headers,
            json={"table": "sales", "kind": "bar", "x": "region", "y": "sales"},
        )
        body = resp.json()
        assert body["series"][0] == {"category": "East", "value": 120.0}
        assert body["subtitle"] == "region vs sales"

    def test_chart_without_uploads(self, client, headers):
        resp = client.post("/api/charts", headers=headers, json={"kind": "bar"})
        assert resp.status_code == 400

    def test_chart_unknown_table(self, client, headers):
        _upload(client, headers)
        resp = client.post("/api/charts", headers=headers, json={"table": "nope"})
        assert resp.status_code == 404

    def test_chart_invalid_kind(self, client, headers):
        _upload(client, headers)
        resp = client.post("/api/charts", headers=headers, json={"kind": "scatter"})
        assert resp.status_code == 422

    @pytest.mark.parametrize("rows,truncated", [(150, True), (100, False)])
    def test_truncated_flag_survives_preview(self, client, headers, rows, truncated):
        body = "n\n" + "\n".join(str(i) for i in range(rows)) + "\n"
        resp = _upload(client, headers, content=body.encode(), filename="big.csv")
        assert resp.json()["profile"]["truncated"] is truncated

        preview = client.get("/table/big/preview", headers=headers).json()
        assert preview["row_count"] == min(rows, 100)
        assert preview["truncated"] is truncated

    def test_infinity_cells_chart_as_zero(self, client, headers):
        content = b"k,v\na,1\nb,Infinity\nc,2\n"
        resp = _upload(client, headers, content=content, filename="metrics.csv")
        types = {c["name"]: c["type"] for c in resp.json()["profile"]["columns"]}
        assert types["v"] == "text"

        resp = client.post("/api/charts", headers=headers, json={"kind": "bar", "x": "k", "y": "v"})
        assert resp.status_code == 200
        assert [p["value"] for p in resp.json()["series"]] == [1.0, 0.0, 2.0]

        resp = client.post("/api/charts", headers=headers, json={"kind": "pie", "x": "k", "y": "v"})
        assert resp.status_code == 200
        assert resp.json()["insights"] == ["c accounts for 66.7% of the total"]
