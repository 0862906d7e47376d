from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator

# 24-hour wall clock, zero padded, no seconds
HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class FitnessGoal(str, Enum):
    LOSE_WEIGHT = "lose_weight"
    GAIN_WEIGHT = "gain_weight"
    BUILD_MUSCLE = "build_muscle"


# ---------- items as returned by the model ----------

class DietPlanItem(BaseModel):
    """One meal slot as the model is asked to return it. Unknown keys are dropped, types are not coerced."""
    model_config = ConfigDict(extra="ignore")

    day_of_week: StrictInt = Field(ge=1, le=7)
    meal_name: StrictStr = Field(min_length=1)
    meal_time: StrictStr = Field(pattern=HHMM_PATTERN)
    description: StrictStr
    calories: Optional[StrictInt] = Field(None, ge=0)


class WorkoutPlanItem(BaseModel):
    """One exercise slot. Strength work sets sets/reps, cardio sets a duration, rest days may set neither."""
    model_config = ConfigDict(extra="ignore")

    day_of_week: StrictInt = Field(ge=1, le=7)
    exercise_name: StrictStr = Field(min_length=1)
    exercise_time: StrictStr = Field(pattern=HHMM_PATTERN)
    sets: Optional[StrictInt] = Field(None, ge=1)
    reps: Optional[StrictInt] = Field(None, ge=1)
    duration_minutes: Optional[StrictInt] = Field(None, ge=1)
    description: Optional[StrictStr] = None

    @model_validator(mode="after")
    def sets_and_reps_come_together(self):
        if (self.sets is None) != (self.reps is None):
            raise ValueError("sets and reps must both be set or both be null")
        return self


# ---------- stored rows ----------

class GeneratedDietPlanEntry(DietPlanItem):
    id: str
    owner_id: str
    goal: FitnessGoal
    created_at: str


class GeneratedWorkoutPlanEntry(WorkoutPlanItem):
    id: str
    owner_id: str
    goal: FitnessGoal
    created_at: str


class MemberGoal(BaseModel):
    owner_id: str
    goal: FitnessGoal
    updated_at: str


class DailyProgress(BaseModel):
    owner_id: str
    date: str
    item_type: Literal["diet", "workout"]
    item_id: str
    completed: bool


# ---------- request bodies ----------

class GeneratePlansRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    goal: FitnessGoal
    user_id: str = Field(alias="userId", min_length=1)


class GoalSelectionRequest(BaseModel):
    goal: FitnessGoal


class ProgressToggleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_type: Literal["diet", "workout"] = Field(alias="itemType")
    item_id: str = Field(alias="itemId", min_length=1)
    completed: bool
