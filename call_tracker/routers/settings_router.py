from fastapi import APIRouter, Depends
from typing import Optional
from call_tracker.models.schemas import AppSettings
from call_tracker.routers.dependencies import get_controller
from call_tracker.services.call_service import CallController

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("", response_model=AppSettings)
async def get_settings(controller: CallController = Depends(get_controller)):
    return controller.get_settings()


@router.put("", response_model=AppSettings)
async def save_settings(data: AppSettings, controller: CallController = Depends(get_controller)):
    return controller.save_settings(data)


@router.post("/test")
async def test_connection(
    data: Optional[AppSettings] = None,
    controller: CallController = Depends(get_controller),
):
    """Ping the webhook with the given settings, or the saved ones when no body is sent."""
    return await controller.test_connection(data)


@router.post("/factory-reset")
async def factory_reset(controller: CallController = Depends(get_controller)):
    controller.factory_reset()
    return {"status": "reset"}
