# fetch_osm_services.py
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from servicemap.config import OSM_ADDRESS, OSM_DIST_METERS

OVERPASS_URL = "https://overpass-api.de/api/interpreter"
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT = "ServiceMap/0.1 (Jigjiga services dataset)"


BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "servicemap" / "data"
OUTPUT_PATH = DATA_DIR / "services.json"


def geocode_address(address: str) -> Dict[str, float]:
    """
    Usa Nominatim para geocodificar OSM_ADDRESS y obtener (lat, lng).
    """
    print(f"Geocoding address: {address!r}")
    resp = requests.get(
        NOMINATIM_URL,
        params={
            "q": address,
            "format": "json",
            "limit": 1,
        },
        headers={"User-Agent": USER_AGENT},
        timeout=30,
    )
    resp.raise_for_status()
    data = resp.json()
    if not data:
        raise RuntimeError(f"Nominatim did not return results for address: {address}")

    lat = float(data[0]["lat"])
    lng = float(data[0]["lon"])
    print(f"Geocoded center: lat={lat}, lng={lng}")
    return {"lat": lat, "lng": lng}


def build_overpass_query(lat: float, lng: float, radius_m: int) -> str:
    """
    Construye la consulta Overpass usando 'around' para el radio dado.
    Extrae:
      - amenity=hospital|clinic       -> hospital
      - tourism=hostel|guest_house    -> hostel
      - amenity=taxi                  -> taxi
    """
    around = f"(around:{radius_m},{lat},{lng})"
    query = f"""
[out:json][timeout:90];
(
  // Hospitales y clínicas
  nwr["amenity"="hospital"]{around};
  nwr["amenity"="clinic"]{around};

  // Hostales
  nwr["tourism"="hostel"]{around};
  nwr["tourism"="guest_house"]{around};

  // Paradas de taxi
  nwr["amenity"="taxi"]{around};
);
out center;
"""
    return query.strip()


def infer_service_type(tags: Dict[str, Any]) -> str:
    """
    A partir de los tags de OSM, determina hospital, hostel o taxi.
    Cualquier otra cosa queda como "other".
    """
    amenity = tags.get("amenity")
    tourism = tags.get("tourism")

    if amenity in ("hospital", "clinic"):
        return "hospital"
    if tourism in ("hostel", "guest_house"):
        return "hostel"
    if amenity == "taxi":
        return "taxi"
    return "other"


def _build_address(tags: Dict[str, Any]) -> Optional[str]:
    street = tags.get("addr:street")
    city = tags.get("addr:city")
    parts = [p for p in (street, city) if p]
    if not parts:
        return None
    return ", ".join(parts)


def normalize_element(elem: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convierte un elemento Overpass (node/way/relation) al formato de services.json.
    La geometría se toma del centro:
      - node: lat/lon del nodo
      - way/relation: lat/lon de 'center' (Overpass lo incluye por 'out center;')
    """
    elem_type = elem.get("type")
    tags = elem.get("tags", {}) or {}

    if elem_type == "node":
        lat = float(elem["lat"])
        lng = float(elem["lon"])
    else:
        center = elem.get("center")
        if not center:
            raise ValueError("Element without center in Overpass response")
        lat = float(center["lat"])
        lng = float(center["lon"])

    svc_type = infer_service_type(tags)
    name = tags.get("name:en") or tags.get("name") or "Unnamed service"
    phone = tags.get("phone") or tags.get("contact:phone") or ""

    record: Dict[str, Any] = {
        "id": f"osm_{elem_type}_{elem['id']}",
        "name": name,
        "type": svc_type,
        "phone": phone,
        "lat": lat,
        "lng": lng,
    }
    address = _build_address(tags)
    if address:
        record["address"] = address
    return record


def main():
    # 1) Geocodificar el centro
    center = geocode_address(OSM_ADDRESS)
    radius_m = int(OSM_DIST_METERS)

    # 2) Construir la consulta Overpass
    query = build_overpass_query(center["lat"], center["lng"], radius_m)
    print("Sending Overpass query...")
    resp = requests.post(
        OVERPASS_URL,
        data={"data": query},
        headers={"User-Agent": USER_AGENT},
        timeout=120,
    )
    resp.raise_for_status()
    data = resp.json()

    elements = data.get("elements", [])
    print(f"Received {len(elements)} raw elements from Overpass")

    services: List[Dict[str, Any]] = []
    for elem in elements:
        try:
            services.append(normalize_element(elem))
        except (KeyError, ValueError) as e:
            print(f"Skipping element {elem.get('id')} due to error: {e}")

    print(f"Normalized services count: {len(services)}")

    # 3) Guardar en servicemap/data/services.json
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    with OUTPUT_PATH.open("w", encoding="utf-8") as f:
        json.dump(services, f, ensure_ascii=False, indent=2)

    print(f"Saved {len(services)} services to {OUTPUT_PATH}")


if __name__ == "__main__":
    main()
