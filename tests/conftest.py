from __future__ import annotations

import os
from datetime import date

import pytest

# Settings are read at import time; point the app at a throwaway in-memory DB first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "true")


class FrozenToday:
    def __init__(self, value: date) -> None:
        self.value = value

    def __call__(self) -> date:
        return self.value


@pytest.fixture
def today() -> FrozenToday:
    return FrozenToday(date(2024, 3, 15))


@pytest.fixture
def client(today):
    from fastapi.testclient import TestClient

    from api.deps import get_today
    from core.db import ENGINE
    from main import app
    from models.base import Base

    Base.metadata.drop_all(bind=ENGINE)
    app.dependency_overrides[get_today] = today
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture
def seed(client):
    """One batch, one faculty member, two subjects and two time slots."""

    batch = client.post("/api/batches/", json={"name": "BDes UX Sem 5", "semester": 5}).json()
    faculty = client.post("/api/faculty/", json={"name": "Prof. Rao", "email": "rao@example.edu"}).json()
    other_faculty = client.post("/api/faculty/", json={"name": "Prof. Sen", "email": "sen@example.edu"}).json()
    design = client.post(
        "/api/subjects/",
        json={"batch_id": batch["id"], "code": "DES101", "name": "Design", "credits": 4},
    ).json()
    typography = client.post(
        "/api/subjects/",
        json={"batch_id": batch["id"], "code": "TYP201", "name": "Typography", "credits": 3},
    ).json()
    morning = client.post("/api/time-slots/", json={"name": "10:00-11:30", "sort_order": 1}).json()
    afternoon = client.post("/api/time-slots/", json={"name": "14:15-15:05", "sort_order": 2}).json()
    return {
        "batch": batch,
        "faculty": faculty,
        "other_faculty": other_faculty,
        "design": design,
        "typography": typography,
        "morning": morning,
        "afternoon": afternoon,
    }
