from fastapi import HTTPException
from fitplan.models.plans import GoalSelectionRequest
from fitplan.services.plan_generator import PlanGenerationService
from fitplan.services.plan_store import PlanStore


class GoalController:

    @staticmethod
    def select_goal(user_id: str, request: GoalSelectionRequest, store: PlanStore, service: PlanGenerationService):
        """ Save the member's goal, then build their plans for it """
        store.set_goal(user_id, request.goal)
        return service.generate(request.goal, user_id)

    @staticmethod
    def get_goal(user_id: str, store: PlanStore):
        goal = store.get_goal(user_id)
        if goal is None:
            raise HTTPException(status_code=404, detail="No goal selected")
        return {"goal": goal.value}
