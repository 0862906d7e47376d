# fitplan/services/progress_tracker.py
from datetime import date
from typing import Dict, Any, List, Optional

from fitplan.errors import PlanItemNotFound
from fitplan.services.plan_store import PlanStore


class ProgressTracker:
    """Per-day completion marks for generated diet and workout items."""

    def __init__(self, store: PlanStore):
        self.store = store

    def _items(self, owner_id: str, item_type: str) -> List[Dict[str, Any]]:
        if item_type == "diet":
            return self.store.list_diet_plans(owner_id)
        return self.store.list_workout_plans(owner_id)

    def toggle_progress(
        self,
        owner_id: str,
        item_type: str,
        item_id: str,
        completed: bool,
        day: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Mark a plan item done (or not done) for a day. One record per item and day."""
        day = day or date.today()

        if not any(i["id"] == item_id for i in self._items(owner_id, item_type)):
            raise PlanItemNotFound(f"No {item_type} plan item {item_id} for this user")

        record = {
            "owner_id": str(owner_id),
            "date": day.isoformat(),
            "item_type": item_type,
            "item_id": item_id,
            "completed": bool(completed),
        }
        self.store.put_progress(record)
        return record

    def today_summary(self, owner_id: str, day: Optional[date] = None) -> Dict[str, Any]:
        day = day or date.today()
        weekday = day.isoweekday()  # Monday=1 ... Sunday=7

        diet_items = [i for i in self.store.list_diet_plans(owner_id) if i["day_of_week"] == weekday]
        workout_items = [i for i in self.store.list_workout_plans(owner_id) if i["day_of_week"] == weekday]

        progress = self.store.get_progress(owner_id, day.isoformat())
        done = {p["item_id"] for p in progress if p["completed"]}

        return {
            "date": day.isoformat(),
            "day_of_week": weekday,
            "diet_items": diet_items,
            "workout_items": workout_items,
            "progress": progress,
            "completed_diet": sum(1 for i in diet_items if i["id"] in done),
            "completed_workout": sum(1 for i in workout_items if i["id"] in done),
            "total_diet": len(diet_items),
            "total_workout": len(workout_items),
        }
