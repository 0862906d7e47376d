# fitplan/services/plan_store.py
import os
import json
import uuid
import logging
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

import redis
from dotenv import load_dotenv

from fitplan.errors import PersistenceError
from fitplan.models.plans import FitnessGoal

load_dotenv()

logger = logging.getLogger(__name__)

DIET_TABLE = "generated_diet_plans"
WORKOUT_TABLE = "generated_workout_plans"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_row(owner_id: str, goal: FitnessGoal, item: Dict[str, Any]) -> Dict[str, Any]:
    """Tag a validated plan item with its owner, goal, id and creation time."""
    row = dict(item)
    row.update({
        "id": uuid.uuid4().hex,
        "owner_id": str(owner_id),
        "goal": FitnessGoal(goal).value,
        "created_at": _now(),
    })
    return row


class PlanStore:
    """
    Redis-backed storage for generated plans, member goals and daily progress.

    Plan rows are JSON documents held in one list per owner and table:
      generated_diet_plans:<owner_id>
      generated_workout_plans:<owner_id>
    """

    def __init__(self, redis_client: redis.Redis, lock_timeout: Optional[float] = None):
        self.redis = redis_client
        self.lock_timeout = lock_timeout or float(os.getenv("PLAN_LOCK_TIMEOUT_SECONDS", 180))

    # ---------- keys ----------

    @staticmethod
    def diet_key(owner_id: str) -> str:
        return f"{DIET_TABLE}:{owner_id}"

    @staticmethod
    def workout_key(owner_id: str) -> str:
        return f"{WORKOUT_TABLE}:{owner_id}"

    @staticmethod
    def goal_key(owner_id: str) -> str:
        return f"member_goals:{owner_id}"

    @staticmethod
    def progress_key(owner_id: str, day: str) -> str:
        return f"daily_progress:{owner_id}:{day}"

    # ---------- generated plans ----------

    def delete_diet_plans(self, owner_id: str) -> None:
        self._run("delete diet plans", self.redis.delete, self.diet_key(owner_id))

    def delete_workout_plans(self, owner_id: str) -> None:
        self._run("delete workout plans", self.redis.delete, self.workout_key(owner_id))

    def insert_diet_plans(self, rows: List[Dict[str, Any]]) -> None:
        for owner_id, owned in _group_by_owner(rows).items():
            self._run("save diet plans", self.redis.rpush, self.diet_key(owner_id), *owned)

    def insert_workout_plans(self, rows: List[Dict[str, Any]]) -> None:
        for owner_id, owned in _group_by_owner(rows).items():
            self._run("save workout plans", self.redis.rpush, self.workout_key(owner_id), *owned)

    def replace_plans(
        self,
        owner_id: str,
        diet_rows: List[Dict[str, Any]],
        workout_rows: List[Dict[str, Any]],
    ) -> None:
        """Swap both of an owner's plans for new rows in a single MULTI/EXEC."""
        diet_key = self.diet_key(owner_id)
        workout_key = self.workout_key(owner_id)
        try:
            with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(diet_key, workout_key)
                if diet_rows:
                    pipe.rpush(diet_key, *[json.dumps(r) for r in diet_rows])
                if workout_rows:
                    pipe.rpush(workout_key, *[json.dumps(r) for r in workout_rows])
                pipe.execute()
        except redis.RedisError as e:
            logger.exception("Plan replacement failed for owner %s", owner_id)
            raise PersistenceError("Failed to save generated plans") from e

        logger.info(
            "Stored %d diet rows and %d workout rows for owner %s",
            len(diet_rows), len(workout_rows), owner_id,
        )

    def list_diet_plans(self, owner_id: str) -> List[Dict[str, Any]]:
        rows = self._load(self.diet_key(owner_id))
        rows.sort(key=lambda r: (r["day_of_week"], r["meal_time"]))
        return rows

    def list_workout_plans(self, owner_id: str) -> List[Dict[str, Any]]:
        rows = self._load(self.workout_key(owner_id))
        rows.sort(key=lambda r: (r["day_of_week"], r["exercise_time"]))
        return rows

    def owner_lock(self, owner_id: str):
        """Redis lock guarding one owner's plan generation."""
        return self.redis.lock(f"lock:plans:{owner_id}", timeout=self.lock_timeout)

    # ---------- goals ----------

    def get_goal(self, owner_id: str) -> Optional[FitnessGoal]:
        raw = self._run("read goal", self.redis.get, self.goal_key(owner_id))
        if not raw:
            return None
        return FitnessGoal(json.loads(raw)["goal"])

    def set_goal(self, owner_id: str, goal: FitnessGoal) -> Dict[str, Any]:
        record = {"owner_id": str(owner_id), "goal": FitnessGoal(goal).value, "updated_at": _now()}
        self._run("save goal", self.redis.set, self.goal_key(owner_id), json.dumps(record))
        return record

    # ---------- daily progress ----------

    def get_progress(self, owner_id: str, day: str) -> List[Dict[str, Any]]:
        raw = self._run("read progress", self.redis.hgetall, self.progress_key(owner_id, day))
        return [json.loads(v) for v in raw.values()]

    def put_progress(self, record: Dict[str, Any]) -> None:
        key = self.progress_key(record["owner_id"], record["date"])
        self._run("save progress", self.redis.hset, key, record["item_id"], json.dumps(record))

    # ---------- helpers ----------

    def _load(self, key: str) -> List[Dict[str, Any]]:
        return [json.loads(r) for r in self._run("read plans", self.redis.lrange, key, 0, -1)]

    @staticmethod
    def _run(action: str, fn, *args):
        try:
            return fn(*args)
        except redis.RedisError as e:
            logger.exception("Redis call failed: %s", action)
            raise PersistenceError(f"Failed to {action}") from e


def _group_by_owner(rows: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for r in rows:
        grouped.setdefault(str(r["owner_id"]), []).append(json.dumps(r))
    return grouped
