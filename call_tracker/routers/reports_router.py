from fastapi import APIRouter, Depends, Query
from typing import Optional
from call_tracker.models.schemas import DashboardResponse
from call_tracker.routers.calls_router import DATE_PATTERN
from call_tracker.routers.dependencies import get_controller
from call_tracker.services.call_service import CallController

router = APIRouter(prefix="/api", tags=["Reports"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    date: Optional[str] = Query(None, pattern=DATE_PATTERN),
    controller: CallController = Depends(get_controller),
):
    return controller.dashboard(date)


@router.post("/reports/daily")
async def send_daily_report(controller: CallController = Depends(get_controller)):
    return await controller.send_manual_report()
