from fastapi import APIRouter, Depends
from fitplan.controllers.goal_controller import GoalController
from fitplan.dependencies import get_plan_service, get_plan_store
from fitplan.models.plans import GoalSelectionRequest

router = APIRouter()

@router.put("/{user_id}")
def select_goal(user_id: str, request: GoalSelectionRequest, store=Depends(get_plan_store), service=Depends(get_plan_service)):
    """ Onboarding: save the goal and generate plans for it """
    return GoalController.select_goal(user_id, request, store, service)

@router.get("/{user_id}")
def get_goal(user_id: str, store=Depends(get_plan_store)):
    return GoalController.get_goal(user_id, store)
