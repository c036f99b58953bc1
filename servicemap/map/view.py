# servicemap/map/view.py

from typing import List, Optional, Tuple, Union

import folium
from folium.plugins import MarkerCluster
from pydantic import BaseModel, ConfigDict, Field

from servicemap.map.icons import IconSpec


class TileLayerSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    attribution: str
    name: str = "OpenStreetMap"


class ServiceMarker(BaseModel):
    """
    Marcador desechable. MapView lo busca por identidad: dos marcadores con
    los mismos datos siguen siendo capas distintas.
    """
    lat: float
    lng: float
    icon: IconSpec
    popup_html: str
    service_type: Optional[str] = None
    service_name: Optional[str] = None


class ClusterLayer(BaseModel):
    markers: List[ServiceMarker] = Field(default_factory=list)

    def add_layer(self, marker: ServiceMarker) -> None:
        self.markers.append(marker)

    def clear_layers(self) -> None:
        self.markers.clear()

    def __len__(self) -> int:
        return len(self.markers)


Layer = Union[ClusterLayer, ServiceMarker]


class MapView:
    """
    Estado del mapa: centro, zoom, capa de teselas y capas encima.
    La vista de Leaflet se genera con folium en cada render_html().
    """

    def __init__(self, center: Tuple[float, float], zoom: int, tiles: TileLayerSpec):
        self.center = center
        self.zoom = zoom
        self.tiles = tiles
        self.layers: List[Layer] = []

    def set_view(self, center: Tuple[float, float], zoom: int) -> None:
        self.center = center
        self.zoom = zoom

    def has_layer(self, layer: Layer) -> bool:
        return any(existing is layer for existing in self.layers)

    def add_layer(self, layer: Layer) -> None:
        # Agregar una capa que ya está no hace nada
        if not self.has_layer(layer):
            self.layers.append(layer)

    def remove_layer(self, layer: Layer) -> None:
        # Quitar una capa que ya no está tampoco
        self.layers = [existing for existing in self.layers if existing is not layer]

    def to_folium(self) -> folium.Map:
        m = folium.Map(location=list(self.center), zoom_start=self.zoom, tiles=None)
        folium.TileLayer(
            tiles=self.tiles.url,
            attr=self.tiles.attribution,
            name=self.tiles.name,
        ).add_to(m)

        for layer in self.layers:
            if isinstance(layer, ClusterLayer):
                cluster = MarkerCluster().add_to(m)
                for marker in layer.markers:
                    _folium_marker(marker).add_to(cluster)
            else:
                _folium_marker(layer).add_to(m)

        return m

    def render_html(self) -> str:
        return self.to_folium().get_root().render()


def _folium_marker(marker: ServiceMarker) -> folium.Marker:
    icon = folium.DivIcon(
        html=marker.icon.html,
        icon_size=marker.icon.icon_size,
        class_name=marker.icon.class_name,
    )
    return folium.Marker(
        location=[marker.lat, marker.lng],
        icon=icon,
        popup=folium.Popup(marker.popup_html, max_width=300),
    )
