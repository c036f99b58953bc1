# servicemap/api/deps.py
from fastapi import HTTPException, Request

from servicemap.map.controller import ServiceMapController


async def get_controller(request: Request) -> ServiceMapController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None or not controller.state.loaded:
        raise HTTPException(
            status_code=503,
            detail="El mapa de servicios todavía no está listo.",
        )
    return controller
