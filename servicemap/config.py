# servicemap/config.py

import os

# Fuente de datos: URL http(s) o ruta relativa al paquete
SERVICES_SOURCE = os.getenv("SERVICES_SOURCE", "data/services.json")
SERVICES_FETCH_TIMEOUT_S = float(os.getenv("SERVICES_FETCH_TIMEOUT_S", "10.0"))

# Vista inicial del mapa (centro de Jigjiga)
MAP_CENTER_LAT = float(os.getenv("MAP_CENTER_LAT", "9.35"))
MAP_CENTER_LNG = float(os.getenv("MAP_CENTER_LNG", "42.8"))
MAP_ZOOM = int(os.getenv("MAP_ZOOM", "14"))

# Geolocalización
LOCATE_ZOOM = int(os.getenv("LOCATE_ZOOM", "15"))
USER_MARKER_TTL_S = float(os.getenv("USER_MARKER_TTL_S", "30"))

TILE_URL = os.getenv("TILE_URL", "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png")
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Usado por fetch_osm_services.py
OSM_ADDRESS = os.getenv("OSM_ADDRESS", "Jigjiga, Ethiopia")
OSM_DIST_METERS = int(os.getenv("OSM_DIST_METERS", "4000"))
