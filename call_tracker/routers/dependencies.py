from fastapi import Request
from call_tracker.services.call_service import CallController


def get_controller(request: Request) -> CallController:
    return request.app.state.controller
