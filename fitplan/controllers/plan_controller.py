from fitplan.models.plans import GeneratePlansRequest
from fitplan.services.plan_generator import PlanGenerationService
from fitplan.services.plan_store import PlanStore


class PlanController:
    @staticmethod
    def generate_plans(request: GeneratePlansRequest, service: PlanGenerationService):
        """Generate and store a fresh 7-day diet and workout plan."""
        return service.generate(request.goal, request.user_id)

    @staticmethod
    def get_diet_plans(user_id: str, store: PlanStore):
        return store.list_diet_plans(user_id)

    @staticmethod
    def get_workout_plans(user_id: str, store: PlanStore):
        return store.list_workout_plans(user_id)
