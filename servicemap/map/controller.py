# servicemap/map/controller.py

import asyncio
import logging
from typing import List, Literal, Optional, Sequence

import httpx
from pydantic import BaseModel

from servicemap.config import (
    LOCATE_ZOOM,
    MAP_CENTER_LAT,
    MAP_CENTER_LNG,
    MAP_ZOOM,
    SERVICES_SOURCE,
    TILE_ATTRIBUTION,
    TILE_URL,
    USER_MARKER_TTL_S,
)
from servicemap.map.adapters import GeolocationError, LocationProvider, UIAdapter
from servicemap.map.icons import USER_ICON, build_popup_html, icon_for
from servicemap.map.view import ClusterLayer, MapView, ServiceMarker, TileLayerSpec
from servicemap.services.fallback import FALLBACK_SERVICES
from servicemap.services.models import LoadOutcome, ServiceRecord
from servicemap.services.repository import (
    FILTER_ALL,
    ServiceState,
    filter_services,
    search_services,
)
from servicemap.services.source_api import fetch_services

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Geolocation is not supported by your browser"
LOCATION_ERROR_PREFIX = "Unable to get your location: "


class LocateOutcome(BaseModel):
    status: Literal["ok", "error", "unsupported"]
    lat: Optional[float] = None
    lng: Optional[float] = None
    zoom: Optional[int] = None
    message: Optional[str] = None


class ServiceMapController:
    """
    Controlador del mapa de servicios.

    Es dueño de la vista (MapView + ClusterLayer) y del dataset (ServiceState).
    La interfaz solo llega a través de `ui` y la geolocalización a través
    de `location_provider`.
    """

    def __init__(
        self,
        ui: UIAdapter,
        location_provider: Optional[LocationProvider] = None,
        source: str = SERVICES_SOURCE,
        http_client: Optional[httpx.AsyncClient] = None,
        user_marker_ttl_s: float = USER_MARKER_TTL_S,
    ):
        self.ui = ui
        self.location_provider = location_provider
        self.source = source
        self.http_client = http_client
        self.user_marker_ttl_s = user_marker_ttl_s

        self.state = ServiceState()
        self.map: Optional[MapView] = None
        self.cluster = ClusterLayer()

    # --------- MAPA ---------

    def initialize_map(self) -> MapView:
        """
        Crea la vista centrada en Jigjiga con una capa de teselas OSM
        y una capa de clusters vacía.
        """
        self.map = MapView(
            center=(MAP_CENTER_LAT, MAP_CENTER_LNG),
            zoom=MAP_ZOOM,
            tiles=TileLayerSpec(url=TILE_URL, attribution=TILE_ATTRIBUTION),
        )
        self.cluster = ClusterLayer()
        return self.map

    def _require_map(self) -> MapView:
        if self.map is None:
            return self.initialize_map()
        return self.map

    # --------- DATOS ---------

    async def load_services(self) -> LoadOutcome:
        """
        Carga el dataset desde `source`. Si falla la red o el JSON viene mal,
        se usa la lista de respaldo. En ambos casos se renderiza una sola vez.
        """
        error: Optional[str] = None

        try:
            services, origin = await fetch_services(self.source, self.http_client)
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.exception("Error loading services data from %s", self.source)
            services, origin = list(FALLBACK_SERVICES), "fallback"
            error = str(e) or e.__class__.__name__

        self.state.replace(services, origin)
        logger.info("Loaded %d services (%s)", len(self.state), origin)

        self.ui.set_active_filter(FILTER_ALL)
        self.render_services(self.state.services)
        return LoadOutcome(origin=origin, count=len(self.state), error=error)

    # --------- RENDER ---------

    def render_services(self, services: Sequence[ServiceRecord]) -> List[ServiceMarker]:
        """
        Limpia la capa de clusters y crea un marcador por servicio.
        Al terminar, lo visible es exactamente `services`.
        """
        view = self._require_map()
        self.cluster.clear_layers()

        for svc in services:
            marker = ServiceMarker(
                lat=svc.lat,
                lng=svc.lng,
                icon=icon_for(svc.type),
                popup_html=build_popup_html(svc),
                service_type=svc.type,
                service_name=svc.name.lower(),
            )
            self.cluster.add_layer(marker)

        view.add_layer(self.cluster)
        return list(self.cluster.markers)

    @property
    def visible_markers(self) -> List[ServiceMarker]:
        return list(self.cluster.markers)

    # --------- CONTROLES ---------

    def apply_filter(self, filter_type: str) -> List[ServiceRecord]:
        self.ui.set_active_filter(filter_type)
        services = filter_services(self.state.services, filter_type)
        self.render_services(services)
        return services

    def search(self, term: str) -> List[ServiceRecord]:
        """
        Búsqueda en nombre o dirección. Con término vacío se vuelve a aplicar
        el filtro que la interfaz tiene activo.
        """
        if not term.strip():
            return self.apply_filter(self.ui.active_filter())

        services = search_services(self.state.services, term)
        self.render_services(services)
        return services

    async def locate_user(
        self,
        provider: Optional[LocationProvider] = None,
    ) -> LocateOutcome:
        provider = provider or self.location_provider
        if provider is None:
            self.ui.alert(UNSUPPORTED_MESSAGE)
            return LocateOutcome(status="unsupported", message=UNSUPPORTED_MESSAGE)

        try:
            position = await provider.get_current_position(high_accuracy=True)
        except GeolocationError as e:
            message = LOCATION_ERROR_PREFIX + e.message
            self.ui.alert(message)
            return LocateOutcome(status="error", message=message)

        view = self._require_map()
        marker = ServiceMarker(
            lat=position.lat,
            lng=position.lng,
            icon=USER_ICON,
            popup_html="Your Location",
        )
        view.add_layer(marker)
        view.set_view((position.lat, position.lng), LOCATE_ZOOM)

        # El timer no se cancela; si el marcador ya no está no pasa nada
        loop = asyncio.get_running_loop()
        loop.call_later(self.user_marker_ttl_s, self.remove_user_marker, marker)

        return LocateOutcome(
            status="ok",
            lat=position.lat,
            lng=position.lng,
            zoom=LOCATE_ZOOM,
        )

    def remove_user_marker(self, marker: ServiceMarker) -> None:
        if self.map is not None:
            self.map.remove_layer(marker)

    @property
    def user_markers(self) -> List[ServiceMarker]:
        if self.map is None:
            return []
        return [layer for layer in self.map.layers if isinstance(layer, ServiceMarker)]
