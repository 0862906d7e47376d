from fitplan.models.plans import ProgressToggleRequest
from fitplan.services.progress_tracker import ProgressTracker


class ProgressController:

    @staticmethod
    def toggle(user_id: str, request: ProgressToggleRequest, tracker: ProgressTracker):
        return tracker.toggle_progress(user_id, request.item_type, request.item_id, request.completed)

    @staticmethod
    def today(user_id: str, tracker: ProgressTracker):
        """ Today's plan items with completion counts """
        return tracker.today_summary(user_id)
