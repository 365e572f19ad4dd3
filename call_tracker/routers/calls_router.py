from fastapi import APIRouter, BackgroundTasks, Depends, Query
from typing import List, Optional
from call_tracker.models.schemas import CallCreate, CallRecord
from call_tracker.routers.dependencies import get_controller
from call_tracker.services.call_service import CallController

router = APIRouter(prefix="/api/calls", tags=["Calls"])

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


@router.post("", status_code=201, response_model=CallRecord)
async def submit_call(
    data: CallCreate,
    background_tasks: BackgroundTasks,
    controller: CallController = Depends(get_controller),
):
    record = controller.submit_call(data.status, data.rejection_reason)
    # Fire and forget, the response does not wait on the webhook
    background_tasks.add_task(controller.notify_call, record)
    return record


@router.get("", response_model=List[CallRecord])
async def list_calls(
    date: Optional[str] = Query(None, pattern=DATE_PATTERN),
    controller: CallController = Depends(get_controller),
):
    return controller.list_calls(date)


@router.delete("")
async def clear_calls(controller: CallController = Depends(get_controller)):
    controller.clear_history()
    return {"status": "cleared"}
