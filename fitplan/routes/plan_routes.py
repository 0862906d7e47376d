# fitplan/routes/plan_routes.py
from typing import List

from fastapi import APIRouter, Depends
from fitplan.controllers.plan_controller import PlanController
from fitplan.dependencies import get_plan_service, get_plan_store
from fitplan.models.plans import GeneratePlansRequest, GeneratedDietPlanEntry, GeneratedWorkoutPlanEntry

router = APIRouter()

@router.post("/generate")
def generate_plans(request: GeneratePlansRequest, service=Depends(get_plan_service)):
    """ Generate personalized diet and workout plans for a goal """
    return PlanController.generate_plans(request, service)

@router.get("/{user_id}/diet", response_model=List[GeneratedDietPlanEntry])
def get_diet_plans(user_id: str, store=Depends(get_plan_store)):
    return PlanController.get_diet_plans(user_id, store)

@router.get("/{user_id}/workout", response_model=List[GeneratedWorkoutPlanEntry])
def get_workout_plans(user_id: str, store=Depends(get_plan_store)):
    return PlanController.get_workout_plans(user_id, store)
