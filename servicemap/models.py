# servicemap/models.py
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Tuple

from servicemap.services.repository import FILTER_ALL


# --------- SERVICES ---------

class ServicesResponse(BaseModel):
    origin: str
    count: int
    services: List[dict]


# --------- MAP ---------

class FilterRequest(BaseModel):
    filter: str = FILTER_ALL


class SearchRequest(BaseModel):
    term: str = ""


class LocateRequest(BaseModel):
    """
    Lo que reporta navigator.geolocation.
    Sin lat/lng ni error significa que el navegador no soporta geolocalización.
    """
    lat: Optional[float] = Field(None, ge=-90.0, le=90.0)
    lng: Optional[float] = Field(None, ge=-180.0, le=180.0)
    accuracy: Optional[float] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _both_coordinates_or_none(self):
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be sent together")
        return self


class MarkerInfo(BaseModel):
    lat: float
    lng: float
    type: Optional[str] = None
    name: Optional[str] = None
    icon_class: str


class MarkersResponse(BaseModel):
    active_filter: str
    count: int
    markers: List[MarkerInfo]


class MapStateResponse(BaseModel):
    center: Tuple[float, float]
    zoom: int
    active_filter: str
    markers: List[MarkerInfo]
    user_markers: List[MarkerInfo]
    alerts: List[str]
