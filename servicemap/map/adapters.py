# servicemap/map/adapters.py

from collections import deque
from typing import Deque, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from servicemap.services.repository import FILTER_ALL

# Las más viejas se descartan si nadie las consume
MAX_PENDING_ALERTS = 20


@runtime_checkable
class UIAdapter(Protocol):
    """
    Lo que necesitan el controlador y las rutas: alertas y el filtro activo.
    """

    def alert(self, message: str) -> None: ...

    def active_filter(self) -> str: ...

    def set_active_filter(self, filter_type: str) -> None: ...

    def drain_alerts(self) -> List[str]: ...


class SessionUI:
    """
    Interfaz en memoria para el servidor: el filtro activo se guarda aquí
    y las alertas se encolan hasta que la página o la API las consume.
    """

    def __init__(self, active_filter: str = FILTER_ALL, max_alerts: int = MAX_PENDING_ALERTS) -> None:
        self._active_filter = active_filter
        self._alerts: Deque[str] = deque(maxlen=max_alerts)

    def alert(self, message: str) -> None:
        self._alerts.append(message)

    def active_filter(self) -> str:
        return self._active_filter

    def set_active_filter(self, filter_type: str) -> None:
        self._active_filter = filter_type

    @property
    def pending_alerts(self) -> List[str]:
        return list(self._alerts)

    def drain_alerts(self) -> List[str]:
        alerts = list(self._alerts)
        self._alerts.clear()
        return alerts


class Position(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    accuracy: Optional[float] = None


class GeolocationError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LocationProvider(Protocol):
    async def get_current_position(self, high_accuracy: bool = True) -> Position: ...


class ReportedLocationProvider:
    """
    Proveedor para posiciones que ya resolvió el navegador
    (navigator.geolocation) y que llegan por la API.
    """

    def __init__(self, position: Optional[Position] = None, error: Optional[str] = None):
        if position is None and error is None:
            raise ValueError("position or error is required")
        self.position = position
        self.error = error

    async def get_current_position(self, high_accuracy: bool = True) -> Position:
        if self.error is not None:
            raise GeolocationError(self.error)
        return self.position
