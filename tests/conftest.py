import json
import os

import fakeredis
import pytest

# Settings are read at import time
os.environ.setdefault("AI_GATEWAY_API_KEY", "test-key")
os.environ.setdefault("PLAN_MODEL", "google/gemini-2.5-flash")

from fitplan.services.plan_generator import PlanGenerationService  # noqa: E402
from fitplan.services.plan_store import PlanStore  # noqa: E402

MEAL_SLOTS = [
    ("Breakfast", "07:00", 400),
    ("Mid-Morning Snack", "10:00", 150),
    ("Lunch", "13:00", 550),
    ("Afternoon Snack", "16:00", 200),
    ("Dinner", "19:00", 500),
]

EXERCISE_TIMES = ["06:00", "06:15", "06:30", "06:45", "07:00"]


def diet_items(per_day=5):
    items = []
    for day in range(1, 8):
        for name, time, kcal in MEAL_SLOTS[:per_day]:
            items.append({
                "day_of_week": day,
                "meal_name": name,
                "meal_time": time,
                "description": f"{name} for day {day}",
                "calories": kcal,
            })
    return items


def workout_items(per_day=5):
    items = []
    for day in range(1, 8):
        rest_day = day in (4, 7)
        for n, time in enumerate(EXERCISE_TIMES[:per_day]):
            items.append({
                "day_of_week": day,
                "exercise_name": f"Stretch {n}" if rest_day else f"Exercise {n}",
                "exercise_time": time,
                "sets": None if rest_day else 3,
                "reps": None if rest_day else 12,
                "duration_minutes": 10 if rest_day else None,
                "description": "Slow and controlled",
            })
    return items


class StubModelClient:
    """Returns scripted responses in order; exceptions in the script are raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def complete(self, system_prompt, user_prompt, model):
        self.calls.append({"system": system_prompt, "user": user_prompt, "model": model})
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class RecordingPlanStore(PlanStore):
    """PlanStore that remembers every write it was asked to do."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes = []

    def replace_plans(self, owner_id, diet_rows, workout_rows):
        self.writes.append(("replace_plans", owner_id))
        return super().replace_plans(owner_id, diet_rows, workout_rows)

    def delete_diet_plans(self, owner_id):
        self.writes.append(("delete_diet_plans", owner_id))
        return super().delete_diet_plans(owner_id)

    def delete_workout_plans(self, owner_id):
        self.writes.append(("delete_workout_plans", owner_id))
        return super().delete_workout_plans(owner_id)

    def insert_diet_plans(self, rows):
        self.writes.append(("insert_diet_plans", len(rows)))
        return super().insert_diet_plans(rows)

    def insert_workout_plans(self, rows):
        self.writes.append(("insert_workout_plans", len(rows)))
        return super().insert_workout_plans(rows)


@pytest.fixture()
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture()
def fake_redis(redis_server):
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture()
def store(fake_redis):
    return RecordingPlanStore(fake_redis, lock_timeout=30)


@pytest.fixture()
def diet_json():
    return json.dumps(diet_items())


@pytest.fixture()
def workout_json():
    return json.dumps(workout_items())


@pytest.fixture()
def make_service(store):
    def _mk(*responses):
        client = StubModelClient(*responses)
        return PlanGenerationService(client, store, model="google/gemini-2.5-flash"), client
    return _mk


@pytest.fixture()
def api(store):
    from fastapi.testclient import TestClient

    from fitplan.dependencies import get_model_client, get_plan_store
    from main import app

    stub = StubModelClient()
    app.dependency_overrides[get_plan_store] = lambda: store
    app.dependency_overrides[get_model_client] = lambda: stub
    with TestClient(app) as client:
        client.model_stub = stub
        yield client
    app.dependency_overrides.clear()
