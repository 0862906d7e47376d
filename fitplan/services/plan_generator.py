# fitplan/services/plan_generator.py
import os
import re
import json
import logging
from typing import Dict, Any, List, Type

import redis
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from fitplan.errors import (
    GenerationInProgress,
    InvalidGoal,
    MalformedResponse,
    PersistenceError,
)
from fitplan.models.plans import DietPlanItem, FitnessGoal, WorkoutPlanItem
from fitplan.services.plan_store import PlanStore, new_row

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "google/gemini-2.5-flash"
ALL_DAYS = set(range(1, 8))

GOAL_DESCRIPTIONS = {
    FitnessGoal.LOSE_WEIGHT: "weight loss with calorie deficit, high protein, and cardio-focused exercises",
    FitnessGoal.GAIN_WEIGHT: "muscle gain with calorie surplus, high protein, and strength training",
    FitnessGoal.BUILD_MUSCLE: "muscle building with balanced macros and progressive overload training",
}

DIET_SYSTEM_PROMPT = "You are a certified nutritionist. Return only valid JSON arrays without markdown formatting."
WORKOUT_SYSTEM_PROMPT = "You are a certified fitness trainer. Return only valid JSON arrays without markdown formatting."

_FENCE_OPEN = re.compile(r"```json\n?")
_FENCE_CLOSE = re.compile(r"```\n?")


# ---------- prompts ----------

def to_goal(goal) -> FitnessGoal:
    try:
        return FitnessGoal(goal)
    except ValueError:
        raise InvalidGoal(f"Unknown fitness goal: {goal!r}") from None


def goal_description(goal: FitnessGoal) -> str:
    return GOAL_DESCRIPTIONS[to_goal(goal)]


def build_diet_prompt(goal_desc: str) -> str:
    return f"""Generate a 7-day diet plan for {goal_desc}.
For each day (1-7), provide exactly 5 meals with these details:
- meal_name: name of the meal (e.g., "Breakfast", "Mid-Morning Snack", "Lunch", "Afternoon Snack", "Dinner")
- meal_time: time in 24-hour format HH:MM (e.g., "07:00", "10:00", "13:00", "16:00", "19:00")
- description: what to eat with portion sizes
- calories: estimated calories (number)

Return ONLY a valid JSON array with this exact structure, no prose and no markdown:
[{{"day_of_week": 1, "meal_name": "Breakfast", "meal_time": "07:00", "description": "...", "calories": 400}}, ...]"""


def build_workout_prompt(goal_desc: str) -> str:
    return f"""Generate a 7-day workout plan for {goal_desc}.
For each day (1-7), provide 4-6 exercises with these details:
- exercise_name: name of the exercise
- exercise_time: time in 24-hour format HH:MM when to do it (e.g., "06:00", "06:15", etc.)
- sets: number of sets (number or null for cardio)
- reps: number of reps (number or null for cardio)
- duration_minutes: duration in minutes (number or null for strength exercises)
- description: brief description of how to perform

Include rest days (day 4 and 7) with light stretching exercises.
Return ONLY a valid JSON array with this exact structure, no prose and no markdown:
[{{"day_of_week": 1, "exercise_name": "Push-ups", "exercise_time": "06:00", "sets": 3, "reps": 12, "duration_minutes": null, "description": "..."}}, ...]"""


# ---------- parsing ----------

def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` fences the model wraps around its JSON."""
    text = _FENCE_OPEN.sub("", text or "")
    return _FENCE_CLOSE.sub("", text).strip()


def parse_plan_items(raw: str, item_model: Type[BaseModel], label: str) -> List[Dict[str, Any]]:
    """
    Turn raw model output into validated plan items.

    The cleaned text must be a JSON array, every element must match item_model
    and the batch must cover days 1-7. Anything else is a MalformedResponse.
    """
    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("%s response is not JSON (%s). Raw content: %r", label, e, raw[:500])
        raise MalformedResponse(f"The {label} plan response was not valid JSON") from e

    if not isinstance(data, list) or not data:
        logger.error("%s response is not a non-empty JSON array. Raw content: %r", label, raw[:500])
        raise MalformedResponse(f"The {label} plan response was not a JSON array")

    try:
        items = [item_model.model_validate(d).model_dump() for d in data]
    except ValidationError as e:
        logger.error("%s response failed validation: %s. Raw content: %r", label, e, raw[:500])
        raise MalformedResponse(f"The {label} plan response did not match the expected shape") from e

    missing = sorted(ALL_DAYS - {i["day_of_week"] for i in items})
    if missing:
        logger.error("%s response is missing days %s. Raw content: %r", label, missing, raw[:500])
        raise MalformedResponse(f"The {label} plan response is missing days {missing}")

    return items


# ---------- service ----------

class PlanGenerationService:
    """
    Generates a 7-day diet and workout plan for one owner and replaces
    whatever generated plans they had before.

    Storage is only touched after both model responses have been parsed,
    and the replacement itself is a single transaction.
    """

    def __init__(self, model_client, store: PlanStore, model: str = None):
        self.model_client = model_client
        self.store = store
        self.model = model or os.getenv("PLAN_MODEL", DEFAULT_MODEL)

    def generate(self, goal, owner_id: str) -> Dict[str, Any]:
        goal = to_goal(goal)

        lock = self.store.owner_lock(owner_id)
        try:
            acquired = lock.acquire(blocking=False)
        except redis.RedisError as e:
            logger.exception("Could not take generation lock for owner %s", owner_id)
            raise PersistenceError("Plan storage is unavailable") from e
        if not acquired:
            raise GenerationInProgress("Plans are already being generated for this user")

        try:
            return self._generate(goal, owner_id)
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                logger.warning("Generation lock for owner %s expired before release", owner_id)
            except redis.RedisError as e:
                # the lock times out on its own; the outcome above stands
                logger.warning("Could not release generation lock for owner %s: %s", owner_id, e)

    def _generate(self, goal: FitnessGoal, owner_id: str) -> Dict[str, Any]:
        goal_desc = goal_description(goal)
        logger.info("Generating %s plans for owner %s with %s", goal.value, owner_id, self.model)

        diet_raw = self.model_client.complete(DIET_SYSTEM_PROMPT, build_diet_prompt(goal_desc), self.model)
        diet_items = parse_plan_items(diet_raw, DietPlanItem, "diet")

        workout_raw = self.model_client.complete(WORKOUT_SYSTEM_PROMPT, build_workout_prompt(goal_desc), self.model)
        workout_items = parse_plan_items(workout_raw, WorkoutPlanItem, "workout")

        diet_rows = [new_row(owner_id, goal, i) for i in diet_items]
        workout_rows = [new_row(owner_id, goal, i) for i in workout_items]
        self.store.replace_plans(owner_id, diet_rows, workout_rows)

        return {"success": True}
