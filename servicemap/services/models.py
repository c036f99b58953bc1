# servicemap/services/models.py

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


ServiceType = Literal["hospital", "hostel", "taxi", "other"]
KNOWN_TYPES = ("hospital", "hostel", "taxi", "other")

DataOrigin = Literal["remote", "file", "fallback"]


class ServiceRecord(BaseModel):
    """
    Un punto de servicio (hospital, hostal, parada de taxi).
    `type` se deja como str libre: un tipo desconocido no se descarta,
    se pinta con el icono genérico.
    """
    model_config = ConfigDict(frozen=True)

    id: Union[int, str]
    name: str
    type: str = "other"
    phone: str = ""
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    address: Optional[str] = None

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _reject_bool(cls, value):
        # pydantic aceptaría true -> 1.0
        if isinstance(value, bool):
            raise ValueError("coordinate must be a number, not a boolean")
        return value


class LoadOutcome(BaseModel):
    origin: DataOrigin
    count: int
    error: Optional[str] = None
