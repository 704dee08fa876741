from __future__ import annotations

import os

import pytest

os.environ.setdefault("APP_ENV", "testing")

from tests.fakes import (  # noqa: E402
    FakeCallRepo,
    FakeSettingsRepo,
    FakeStatsRepo,
    FakeStudentRepo,
    FixedRandom,
    InMemoryStore,
)


@pytest.fixture
def store():
    return InMemoryStore(settings={"random_event_probability": "0.2"})


@pytest.fixture
def no_bonus():
    # 0.99 is never below a probability under 0.99.
    return FixedRandom(0.99)


@pytest.fixture
def fake_repos(store):
    return {
        "students": FakeStudentRepo(store),
        "calls": FakeCallRepo(store),
        "settings": FakeSettingsRepo(store),
        "stats": FakeStatsRepo(store),
    }
