# servicemap/api/routes_map.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from servicemap.api.deps import get_controller
from servicemap.map.adapters import Position, ReportedLocationProvider
from servicemap.map.controller import LocateOutcome, ServiceMapController
from servicemap.map.page import render_page
from servicemap.map.view import ServiceMarker
from servicemap.models import (
    FilterRequest,
    LocateRequest,
    MapStateResponse,
    MarkerInfo,
    MarkersResponse,
    SearchRequest,
)

router = APIRouter(tags=["map"])


def _marker_info(marker: ServiceMarker) -> MarkerInfo:
    return MarkerInfo(
        lat=marker.lat,
        lng=marker.lng,
        type=marker.service_type,
        name=marker.service_name,
        icon_class=marker.icon.class_name,
    )


def _markers_response(controller: ServiceMapController) -> MarkersResponse:
    markers: List[MarkerInfo] = [_marker_info(m) for m in controller.visible_markers]
    return MarkersResponse(
        active_filter=controller.ui.active_filter(),
        count=len(markers),
        markers=markers,
    )


@router.get("/map", response_class=HTMLResponse)
async def map_page(
    filter: Optional[str] = Query(None, description="all | hospital | hostel | taxi"),
    q: Optional[str] = Query(None, description="Búsqueda por nombre o dirección"),
    controller: ServiceMapController = Depends(get_controller),
):
    """
    Página del mapa (Leaflet generado con folium).
    - filter: aplica el filtro por tipo.
    - q: aplica la búsqueda; vacío vuelve al filtro activo.
    Las alertas pendientes (geolocalización) se muestran una vez y se descartan.
    """
    if filter is not None:
        controller.apply_filter(filter)
    if q is not None:
        controller.search(q)

    html = render_page(
        controller.map,
        active_filter=controller.ui.active_filter(),
        term=q or "",
        alerts=controller.ui.drain_alerts(),
    )
    return HTMLResponse(content=html)


@router.post("/api/map/filter", response_model=MarkersResponse)
async def map_filter(req: FilterRequest, controller: ServiceMapController = Depends(get_controller)):
    controller.apply_filter(req.filter)
    return _markers_response(controller)


@router.post("/api/map/search", response_model=MarkersResponse)
async def map_search(req: SearchRequest, controller: ServiceMapController = Depends(get_controller)):
    controller.search(req.term)
    return _markers_response(controller)


@router.post("/api/map/locate", response_model=LocateOutcome)
async def map_locate(req: LocateRequest, controller: ServiceMapController = Depends(get_controller)):
    """
    Recibe lo que resolvió navigator.geolocation en el navegador:
      - {lat, lng}  -> marcador "Your Location" y recentrado
      - {error}     -> alerta con el mensaje
      - {}          -> geolocalización no soportada
    """
    provider = None
    if req.error is not None:
        provider = ReportedLocationProvider(error=req.error)
    elif req.lat is not None and req.lng is not None:
        provider = ReportedLocationProvider(
            position=Position(lat=req.lat, lng=req.lng, accuracy=req.accuracy)
        )

    return await controller.locate_user(provider)


@router.get("/api/map/state", response_model=MapStateResponse)
async def map_state(controller: ServiceMapController = Depends(get_controller)):
    view = controller.map
    return MapStateResponse(
        center=view.center,
        zoom=view.zoom,
        active_filter=controller.ui.active_filter(),
        markers=[_marker_info(m) for m in controller.visible_markers],
        user_markers=[_marker_info(m) for m in controller.user_markers],
        alerts=controller.ui.drain_alerts(),
    )
