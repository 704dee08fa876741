from __future__ import annotations

import io

import pytest
from openpyxl import Workbook, load_workbook

from src.rollcall.rollcall.calls.service import CallService
from src.rollcall.rollcall.container import Container
from src.rollcall.rollcall.main import create_app
from src.rollcall.rollcall.settings.service import SettingsService
from src.rollcall.rollcall.stats.service import StatsService
from src.rollcall.rollcall.students.service import StudentService
from tests.fakes import FakeCallRepo, FakeSettingsRepo, FakeStatsRepo, FakeStudentRepo, FixedRandom


@pytest.fixture
def rng():
    return FixedRandom(0.99)


@pytest.fixture
def client(store, rng):
    students = FakeStudentRepo(store)
    container = Container(
        student_service=StudentService(students),
        call_service=CallService(FakeCallRepo(store), students, rng=rng),
        settings_service=SettingsService(FakeSettingsRepo(store)),
        stats_service=StatsService(FakeStatsRepo(store)),
    )
    app = create_app(container=container)
    return app.test_client()


def test_submit_without_bonus(client, store):
    store.settings["random_event_probability"] = "0"
    store.add_student("S1", score="10.00")

    res = client.post("/api/call/submit", json={"student_id": "S1", "action": "arrive", "score_change": 1})

    assert res.status_code == 200
    body = res.get_json()
    assert body["newScore"] == "11.00"
    assert body["randomEvent"] is False
    assert body["eventMsg"] == ""


def test_submit_with_bonus(client, store):
    store.settings["random_event_probability"] = "1"
    store.add_student("S1", score="10.00")

    body = client.post(
        "/api/call/submit", json={"student_id": "S1", "action": "answer-excellent", "score_change": 3}
    ).get_json()

    assert body["newScore"] == "16.00"
    assert body["randomEvent"] is True
    assert "6.00" in body["eventMsg"]


def test_submit_unknown_student_is_404(client):
    res = client.post("/api/call/submit", json={"student_id": "nope", "action": "arrive", "score_change": 1})
    assert res.status_code == 404


def test_submit_bad_action_is_400(client, store):
    store.add_student("S1")
    res = client.post("/api/call/submit", json={"student_id": "S1", "action": "nap", "score_change": 1})
    assert res.status_code == 400
    assert "action" in res.get_json()["error"]


def test_start_with_no_students(client):
    res = client.get("/api/call/start?mode=random")
    assert res.status_code == 400


def test_start_returns_student(client, store):
    store.add_student("S1", name="Ann", score="3.50")

    body = client.get("/api/call/start?mode=queue").get_json()

    assert body["data"]["student_id"] == "S1"
    assert body["data"]["current_score"] == "3.50"


def test_records_after_submit(client, store):
    store.add_student("S1", name="Ann")
    client.post("/api/call/submit", json={"student_id": "S1", "action": "absent", "score_change": -1})

    records = client.get("/api/call/records").get_json()

    assert records[0]["name"] == "Ann"
    assert records[0]["score_change"] == "-1.00"


def test_student_crud(client, store):
    assert client.post("/api/students", json={"student_id": "S1", "name": "Ann", "major": "Math"}).status_code == 200
    assert client.post("/api/students", json={"student_id": "S1", "name": "Bo", "major": "Art"}).status_code == 409
    assert client.post("/api/students", json={"student_id": "S2"}).status_code == 400

    listed = client.get("/api/students?major=Math").get_json()
    assert [s["student_id"] for s in listed] == ["S1"]
    sid = listed[0]["id"]

    assert client.put(f"/api/students/{sid}", json={"student_id": "S9", "name": "Ann", "major": "Math"}).status_code == 200
    assert "S9" in store.students
    assert client.delete(f"/api/students/{sid}").status_code == 200
    assert client.delete(f"/api/students/{sid}").status_code == 404


def test_import_and_export(client, store):
    store.add_student("S3")
    wb = Workbook()
    ws = wb.active
    ws.append(["Student ID", "Name", "Major"])
    for i in range(1, 6):
        ws.append([f"S{i}", f"Name {i}", "Math"])
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)

    res = client.post(
        "/api/students/import",
        data={"file": (buf, "students.xlsx")},
        content_type="multipart/form-data",
    )

    assert res.status_code == 200
    stats = res.get_json()["stats"]
    assert (stats["success"], stats["fail"]) == (4, 1)
    assert stats["failReasons"] == ["Row 4: student ID S3 already exists"]

    exported = client.get("/api/students/export")
    assert exported.status_code == 200
    sheet = load_workbook(io.BytesIO(exported.data))["Students"]
    assert sheet.max_row == 6


def test_import_requires_xlsx(client):
    res = client.post(
        "/api/students/import",
        data={"file": (io.BytesIO(b"a,b"), "students.csv")},
        content_type="multipart/form-data",
    )
    assert res.status_code == 400


def test_export_empty_is_400(client):
    assert client.get("/api/students/export").status_code == 400


def test_stats_endpoints(client, store):
    store.add_student("1", name="Ann", major="Math", score="4.00")
    store.add_student("2", name="Ben", major="Art", score="2.00")

    total = client.get("/api/stats/total").get_json()
    assert total == {"studentCount": 2, "callCount": 0, "avgScore": "3.00", "majorCount": 2}
    assert client.get("/api/stats/score-rank").get_json()[0] == {"name": "Ann", "current_score": "4.00"}
    assert client.get("/api/stats/major-dist").get_json() == [
        {"major": "Art", "count": 1},
        {"major": "Math", "count": 1},
    ]


def test_settings_roundtrip(client):
    res = client.put("/api/settings", json={"score_rules": {"arrive": 2}, "random_event_probability": 0.5})
    assert res.status_code == 200

    body = client.get("/api/settings").get_json()
    assert body["score_rules"] == {"arrive": 2}
    assert body["random_event_probability"] == 0.5

    assert client.put("/api/settings", json={"random_event_probability": 2}).status_code == 400


def test_unexpected_errors_become_500(client, store, monkeypatch):
    def boom(**_kwargs):
        raise RuntimeError("disk on fire")

    app_students = client.application.extensions["rollcall.container"].student_service
    monkeypatch.setattr(app_students, "list_students", boom)

    res = client.get("/api/students")

    assert res.status_code == 500
    assert res.get_json()["error"] == "Failed to list students"


def test_cors_headers_on_api(client):
    res = client.get("/api/stats/total", headers={"Origin": "http://example.com"})
    assert res.headers.get("Access-Control-Allow-Origin") == "*"


def test_submit_out_of_range_score_is_400(client, store):
    store.add_student("S1")

    res = client.post("/api/call/submit", json={"student_id": "S1", "action": "arrive", "score_change": 1e30})

    assert res.status_code == 400
    assert store.records == []
