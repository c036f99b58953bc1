# servicemap/services/source_api.py

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from servicemap.config import SERVICES_FETCH_TIMEOUT_S, SERVICES_SOURCE
from servicemap.services.models import DataOrigin, ServiceRecord

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent


def _is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def parse_services(data: Any) -> List[ServiceRecord]:
    """
    Traduce el JSON crudo a ServiceRecord.

    - Acepta una lista, o un objeto {"services": [...]}.
    - Si el documento no tiene esa forma -> ValueError (se usa el fallback).
    - Registros con coordenadas inválidas se ignoran y se registran en el log.
    """
    if isinstance(data, dict):
        data = data.get("services")

    if not isinstance(data, list):
        raise ValueError("services payload must be a JSON list")

    services: List[ServiceRecord] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning("Skipping service #%d: not an object", idx)
            continue
        try:
            services.append(ServiceRecord.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "Skipping service #%d (id=%r): %s",
                idx,
                item.get("id"),
                e.errors()[0].get("msg"),
            )

    return services


async def fetch_services_from_url(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
) -> List[ServiceRecord]:
    """
    Descarga la lista de servicios por HTTP.
    Errores de red o de estado HTTP se propagan (httpx.HTTPError).
    """
    if client is None:
        async with httpx.AsyncClient(timeout=SERVICES_FETCH_TIMEOUT_S) as own_client:
            return await fetch_services_from_url(url, own_client)

    resp = await client.get(url, timeout=SERVICES_FETCH_TIMEOUT_S)
    resp.raise_for_status()
    return parse_services(resp.json())


def load_services_from_file(path: Path) -> List[ServiceRecord]:
    """
    Lee services.json del disco.
    """
    if not path.exists():
        raise FileNotFoundError(f"Services file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    return parse_services(data)


async def fetch_services(
    source: str = SERVICES_SOURCE,
    client: Optional[httpx.AsyncClient] = None,
) -> Tuple[List[ServiceRecord], DataOrigin]:
    """
    Carga los servicios desde `source` y regresa (servicios, origen).
    Una ruta relativa se resuelve contra el directorio del paquete.
    """
    if _is_remote(source):
        services = await fetch_services_from_url(source, client)
        return services, "remote"

    path = Path(source)
    if not path.is_absolute():
        path = BASE_DIR / path
    return load_services_from_file(path), "file"
