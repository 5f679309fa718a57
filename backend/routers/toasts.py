from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List
import logging

from schemas.toasts import Toast
from services.toast_bus import ToastBus

router = APIRouter(prefix="/toasts", tags=["Toasts"])
logger = logging.getLogger("toasts")


def get_toast_bus(request: Request) -> ToastBus:
    """The application-wide bus created in the lifespan handler."""
    return request.app.state.toast_bus


@router.get("/", response_model=List[Toast])
def read_active_toasts(toast_bus: ToastBus = Depends(get_toast_bus)):
    """Toasts that are currently visible; expired ones are dropped on read."""
    return [Toast(id=t.id, message=t.message, type=t.type) for t in toast_bus.active()]


@router.delete("/{toast_id}")
def dismiss_toast(toast_id: str, toast_bus: ToastBus = Depends(get_toast_bus)):
    if not toast_bus.dismiss(toast_id):
        raise HTTPException(status_code=404, detail="Toast not found")
    return {"message": "Toast dismissed"}
