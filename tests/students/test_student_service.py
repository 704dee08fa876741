from __future__ import annotations

from decimal import Decimal

import pytest

from src.rollcall.rollcall.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.rollcall.rollcall.students.model import ImportRow
from src.rollcall.rollcall.students.service import StudentService
from tests.fakes import FakeStudentRepo, InMemoryStore


@pytest.fixture
def svc(store):
    return StudentService(FakeStudentRepo(store))


def test_create_student_starts_at_zero(svc, store):
    svc.create_student(student_id=" 2021001 ", name="Ann", major="Physics")

    s = store.students["2021001"]
    assert s.name == "Ann"
    assert s.current_score == Decimal("0.00")


@pytest.mark.parametrize("missing", ["student_id", "name", "major"])
def test_create_requires_all_fields(svc, missing):
    data = {"student_id": "1", "name": "Ann", "major": "Physics"}
    data[missing] = "  "

    with pytest.raises(ValidationError):
        svc.create_student(**data)


def test_create_duplicate_is_conflict(svc, store):
    store.add_student("2021001")

    with pytest.raises(ConflictError):
        svc.create_student(student_id="2021001", name="Ben", major="Math")


def test_update_rejects_id_used_by_another_student(svc, store):
    store.add_student("A")
    b = store.add_student("B")

    with pytest.raises(ConflictError):
        svc.update_student(b.id, student_id="A", name="Bee", major="Art")


def test_update_keeps_own_id(svc, store):
    a = store.add_student("A", name="Old")

    svc.update_student(a.id, student_id="A", name="New", major="Art")

    assert store.students["A"].name == "New"


def test_update_unknown_student(svc):
    with pytest.raises(NotFoundError):
        svc.update_student(999, student_id="A", name="N", major="M")


def test_delete_removes_student_and_records(svc, store):
    a = store.add_student("A")
    store.add_student("B")
    store.records.append({"student_id": "A", "action": "arrive", "score_change": Decimal("1")})
    store.records.append({"student_id": "B", "action": "arrive", "score_change": Decimal("1")})

    svc.delete_student(a.id)

    assert "A" not in store.students
    assert [r["student_id"] for r in store.records] == ["B"]


def test_delete_unknown_student(svc):
    with pytest.raises(NotFoundError):
        svc.delete_student(42)


def test_list_filters_by_search_and_major(svc, store):
    store.add_student("1001", name="Ann", major="Physics")
    store.add_student("1002", name="Ben", major="Math")
    store.add_student("2001", name="Cara", major="Math")

    assert [s.student_id for s in svc.list_students(search="100")] == ["1002", "1001"]
    assert {s.student_id for s in svc.list_students(major="Math")} == {"1002", "2001"}


def test_import_collects_duplicate_and_keeps_going(svc, store):
    store.add_student("S3")
    rows = [
        ImportRow(row_number=i + 2, student_id=f"S{i + 1}", name=f"N{i + 1}", major="Math")
        for i in range(5)
    ]

    report = svc.import_rows(rows)

    assert (report.success, report.fail) == (4, 1)
    assert report.fail_reasons == ["Row 4: student ID S3 already exists"]
    assert set(store.students) == {"S1", "S2", "S3", "S4", "S5"}


def test_import_skips_incomplete_rows(svc, store):
    rows = [
        ImportRow(row_number=2, student_id="S1", name="Ann", major="Math"),
        ImportRow(row_number=3, student_id="S2", name=None, major="Math"),
    ]

    report = svc.import_rows(rows)

    assert (report.success, report.fail) == (1, 0)
    assert "S2" not in store.students


def test_import_without_valid_rows_is_rejected(svc):
    with pytest.raises(ValidationError):
        svc.import_rows([ImportRow(row_number=2, student_id="S1", name="", major="Math")])


def test_import_rejects_duplicates_within_the_same_batch(svc):
    rows = [
        ImportRow(row_number=2, student_id="S1", name="Ann", major="Math"),
        ImportRow(row_number=3, student_id="S1", name="Ann again", major="Math"),
    ]

    report = svc.import_rows(rows)

    assert (report.success, report.fail) == (1, 1)
    assert report.fail_reasons[0].startswith("Row 3:")


def test_export_with_no_students_is_rejected(svc):
    with pytest.raises(ValidationError):
        svc.export_workbook()
