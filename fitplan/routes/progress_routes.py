from fastapi import APIRouter, Depends
from fitplan.controllers.progress_controller import ProgressController
from fitplan.dependencies import get_progress_tracker
from fitplan.models.plans import DailyProgress, ProgressToggleRequest

router = APIRouter()

@router.post("/{user_id}/toggle", response_model=DailyProgress)
def toggle_progress(user_id: str, request: ProgressToggleRequest, tracker=Depends(get_progress_tracker)):
    """ Mark a plan item complete or incomplete for today """
    return ProgressController.toggle(user_id, request, tracker)

@router.get("/{user_id}/today")
def today_progress(user_id: str, tracker=Depends(get_progress_tracker)):
    return ProgressController.today(user_id, tracker)
