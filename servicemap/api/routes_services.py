# servicemap/api/routes_services.py

from fastapi import APIRouter, Depends, Query

from servicemap.api.deps import get_controller
from servicemap.map.controller import ServiceMapController
from servicemap.models import ServicesResponse
from servicemap.services.models import LoadOutcome
from servicemap.services.repository import FILTER_ALL, filter_services, search_services

router = APIRouter(tags=["services"])


@router.get("/services", response_model=ServicesResponse)
async def get_services(
    service_type: str = Query(FILTER_ALL, description="all | hospital | hostel | taxi | other"),
    controller: ServiceMapController = Depends(get_controller),
):
    """
    Regresa el dataset actual, opcionalmente filtrado por tipo.
    No modifica lo que muestra el mapa.
    """
    services = filter_services(controller.state.services, service_type)
    return ServicesResponse(
        origin=controller.state.origin,
        count=len(services),
        services=[s.model_dump() for s in services],
    )


@router.get("/services/search", response_model=ServicesResponse)
async def search_services_endpoint(
    q: str = Query("", description="Texto a buscar en nombre o dirección"),
    controller: ServiceMapController = Depends(get_controller),
):
    services = search_services(controller.state.services, q)
    return ServicesResponse(
        origin=controller.state.origin,
        count=len(services),
        services=[s.model_dump() for s in services],
    )


@router.post("/services/reload", response_model=LoadOutcome)
async def reload_services(controller: ServiceMapController = Depends(get_controller)):
    """
    Vuelve a cargar el dataset (con fallback si falla) y re-renderiza el mapa.
    """
    return await controller.load_services()
