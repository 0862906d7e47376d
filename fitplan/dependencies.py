from functools import lru_cache

from fastapi import Depends

from fitplan.database import redis_client
from fitplan.services.model_client import ModelClient
from fitplan.services.plan_generator import PlanGenerationService
from fitplan.services.plan_store import PlanStore
from fitplan.services.progress_tracker import ProgressTracker


def get_plan_store() -> PlanStore:
    return PlanStore(redis_client)


@lru_cache()
def get_model_client() -> ModelClient:
    return ModelClient()


def get_plan_service(
    store: PlanStore = Depends(get_plan_store),
    model_client: ModelClient = Depends(get_model_client),
) -> PlanGenerationService:
    return PlanGenerationService(model_client, store)


def get_progress_tracker(store: PlanStore = Depends(get_plan_store)) -> ProgressTracker:
    return ProgressTracker(store)
