from __future__ import annotations

import threading
from decimal import Decimal

import pytest

from src.rollcall.rollcall.calls.service import CallService
from src.rollcall.rollcall.core.exceptions import NotFoundError, ValidationError
from tests.fakes import FakeCallRepo, FakeStudentRepo, FixedRandom, InMemoryStore


def _service(store, *, sample=0.99, fail_on_apply=False):
    return CallService(
        FakeCallRepo(store, fail_on_apply=fail_on_apply),
        FakeStudentRepo(store),
        rng=FixedRandom(sample),
    )


def test_arrive_without_bonus_adds_base_score():
    store = InMemoryStore(settings={"random_event_probability": "0"})
    store.add_student("S1", score="10.00")

    result = _service(store, sample=0.0).submit(student_id="S1", action="arrive", score_change=1)

    assert result.bonus_triggered is False
    assert result.applied_delta == Decimal("1")
    assert result.display_score == "11.00"
    assert store.students["S1"].current_score == Decimal("11.00")


def test_bonus_doubles_delta_and_ledger_records_applied_value():
    store = InMemoryStore(settings={"random_event_probability": "1"})
    store.add_student("S1", score="10.00")

    result = _service(store, sample=0.99).submit(student_id="S1", action="answer-excellent", score_change=3)

    assert result.bonus_triggered is True
    assert result.applied_delta == Decimal("6")
    assert result.display_score == "16.00"
    assert store.records[-1]["score_change"] == Decimal("6")


def test_new_score_is_prior_plus_ledger_delta():
    store = InMemoryStore(settings={"random_event_probability": "0.5"})
    store.add_student("S1", score="2.50")
    svc = _service(store, sample=0.1)

    prior = store.students["S1"].current_score
    result = svc.submit(student_id="S1", action="repeat-wrong", score_change="-1")

    assert result.new_score == prior + result.applied_delta
    assert store.records[-1]["score_change"] == result.applied_delta
    assert result.applied_delta == Decimal("-2")


def test_arrive_increments_only_total_and_arrived():
    store = InMemoryStore()
    store.add_student("S1")

    _service(store).submit(student_id="S1", action="arrive", score_change=1)

    s = store.students["S1"]
    assert (s.total_calls, s.arrived_calls, s.correct_answers, s.transfer_rights) == (1, 1, 0, 0)


@pytest.mark.parametrize(
    "action",
    ["repeat-correct", "answer-excellent", "answer-good", "answer-average", "answer-poor"],
)
def test_correct_answer_actions_increment_correct_answers(action):
    store = InMemoryStore()
    store.add_student("S1")

    _service(store).submit(student_id="S1", action=action, score_change=1)

    s = store.students["S1"]
    assert (s.total_calls, s.arrived_calls, s.correct_answers) == (1, 0, 1)


@pytest.mark.parametrize("action", ["absent", "repeat-wrong"])
def test_absent_and_wrong_only_count_the_call(action):
    store = InMemoryStore()
    store.add_student("S1")

    _service(store).submit(student_id="S1", action=action, score_change=-1)

    s = store.students["S1"]
    assert (s.total_calls, s.arrived_calls, s.correct_answers, s.transfer_rights) == (1, 0, 0, 0)


def test_zero_change_keeps_score_but_counts_and_logs():
    store = InMemoryStore(settings={"random_event_probability": "0"})
    store.add_student("S1", score="7.25")

    result = _service(store).submit(student_id="S1", action="absent", score_change=0)

    assert result.display_score == "7.25"
    assert store.students["S1"].total_calls == 1
    assert len(store.records) == 1
    assert store.records[0]["score_change"] == Decimal("0")


def test_missing_probability_defaults_to_point_two():
    store = InMemoryStore(settings={})
    store.add_student("S1")

    assert _service(store, sample=0.19).submit(student_id="S1", action="arrive", score_change=1).bonus_triggered
    assert not _service(store, sample=0.2).submit(student_id="S1", action="arrive", score_change=1).bonus_triggered


def test_unparsable_probability_defaults_to_point_two():
    store = InMemoryStore(settings={"random_event_probability": "often"})
    store.add_student("S1")

    assert _service(store, sample=0.1).submit(student_id="S1", action="arrive", score_change=1).bonus_triggered


def test_unknown_student_raises_not_found_and_writes_nothing():
    store = InMemoryStore()

    with pytest.raises(NotFoundError):
        _service(store).submit(student_id="missing", action="arrive", score_change=1)
    assert store.records == []


@pytest.mark.parametrize(
    "payload",
    [
        {"student_id": "", "action": "arrive", "score_change": 1},
        {"student_id": "S1", "action": "sleeping", "score_change": 1},
        {"student_id": "S1", "action": "arrive", "score_change": "lots"},
        {"student_id": "S1", "action": "arrive", "score_change": None},
        {"student_id": "S1", "action": "arrive", "score_change": "1e30"},
        {"student_id": "S1", "action": "arrive", "score_change": 100000000},
    ],
)
def test_invalid_input_is_rejected_before_touching_the_store(payload):
    store = InMemoryStore()
    store.add_student("S1")

    with pytest.raises(ValidationError):
        _service(store).submit(**payload)
    assert store.students["S1"].total_calls == 0


def test_score_leaving_column_range_is_rejected_and_rolled_back():
    store = InMemoryStore(settings={"random_event_probability": "1"})
    store.add_student("S1", score="99999990.00")

    with pytest.raises(ValidationError):
        _service(store).submit(student_id="S1", action="arrive", score_change=5)
    assert store.students["S1"].current_score == Decimal("99999990.00")
    assert store.records == []


def test_failure_inside_transaction_leaves_no_partial_state():
    store = InMemoryStore()
    store.add_student("S1", score="5.00")

    with pytest.raises(RuntimeError):
        _service(store, fail_on_apply=True).submit(student_id="S1", action="arrive", score_change=1)

    s = store.students["S1"]
    assert s.current_score == Decimal("5.00")
    assert s.total_calls == 0
    assert store.records == []


def test_concurrent_submissions_for_one_student_serialize():
    store = InMemoryStore(settings={"random_event_probability": "0"}, delay=0.02)
    store.add_student("S1", score="10.00")
    svc = _service(store)

    barrier = threading.Barrier(2)
    results = []

    def worker(delta):
        barrier.wait()
        results.append(svc.submit(student_id="S1", action="answer-good", score_change=delta))

    threads = [threading.Thread(target=worker, args=(d,)) for d in (2, 3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.students["S1"].current_score == Decimal("15.00")
    assert store.students["S1"].total_calls == 2
    assert sorted(r.new_score for r in results) in ([Decimal("12.00"), Decimal("15.00")], [Decimal("13.00"), Decimal("15.00")])


def test_applied_delta_is_rounded_to_cents():
    store = InMemoryStore(settings={"random_event_probability": "1"})
    store.add_student("S1", score="0.00")

    result = _service(store).submit(student_id="S1", action="answer-poor", score_change="0.125")

    assert result.applied_delta == Decimal("0.25")
    assert store.records[-1]["score_change"] == result.applied_delta
