# servicemap/map/page.py

import json
from html import escape
from typing import Iterable, List

import folium

from servicemap.map.view import MapView

FILTER_BUTTONS = [
    ("all", "All"),
    ("hospital", "Hospitals"),
    ("hostel", "Hostels"),
    ("taxi", "Taxis"),
]

ICON_CSS = """
<style>
.custom-icon {
  display: flex; align-items: center; justify-content: center;
  border-radius: 50%; color: #fff; background-color: #7f8c8d;
  border: 2px solid #fff; box-shadow: 0 1px 4px rgba(0,0,0,.4);
}
.hospital-icon { background-color: #e74c3c; }
.hostel-icon { background-color: #27ae60; }
.taxi-icon { background-color: #f1c40f; color: #333; }
.user-icon { background-color: #3498db; }
.popup-content h3 { margin: 0 0 4px 0; }
.call-button {
  display: inline-block; margin-top: 4px; padding: 4px 8px;
  background: #2ecc71; color: #fff; border-radius: 4px; text-decoration: none;
}
#service-controls {
  position: fixed; top: 10px; left: 50px; z-index: 1000;
  background: #fff; padding: 6px 8px; border-radius: 6px;
  box-shadow: 0 1px 5px rgba(0,0,0,.3); font-family: sans-serif;
}
.filter-btn.active { background: #3498db; color: #fff; }
</style>
"""

# navigator.geolocation se resuelve en el navegador y el resultado se reporta al servidor
LOCATE_JS = """
<script>
function reportLocation(body) {
  fetch("/api/map/locate", {
    method: "POST",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify(body)
  }).then(function () { window.location.reload(); });
}
document.getElementById("locate-btn").addEventListener("click", function () {
  if (!navigator.geolocation) {
    reportLocation({});
    return;
  }
  navigator.geolocation.getCurrentPosition(
    function (pos) {
      reportLocation({lat: pos.coords.latitude, lng: pos.coords.longitude,
                      accuracy: pos.coords.accuracy});
    },
    function (err) { reportLocation({error: err.message}); },
    {enableHighAccuracy: true}
  );
});
</script>
"""


def _controls_html(active_filter: str, term: str) -> str:
    buttons: List[str] = []
    for token, label in FILTER_BUTTONS:
        css = "filter-btn active" if token == active_filter else "filter-btn"
        buttons.append(
            f'<button type="submit" name="filter" value="{token}" class="{css}">{label}</button>'
        )

    return f"""
<div id="service-controls">
  <form method="get" action="/map">
    {''.join(buttons)}
  </form>
  <form method="get" action="/map">
    <input id="search-input" type="text" name="q" value="{escape(term)}"
           placeholder="Search services...">
    <button id="search-btn" type="submit">Search</button>
    <button id="locate-btn" type="button">Locate me</button>
  </form>
</div>
"""


def _alerts_js(alerts: Iterable[str]) -> str:
    calls = "".join(f"alert({json.dumps(msg)});" for msg in alerts)
    if not calls:
        return ""
    return f"<script>window.addEventListener('load', function () {{ {calls} }});</script>"


def render_page(
    view: MapView,
    active_filter: str,
    term: str = "",
    alerts: Iterable[str] = (),
) -> str:
    """
    Página completa: el mapa de folium más el panel de filtros/búsqueda,
    el botón de ubicación y las alertas pendientes.
    """
    m: folium.Map = view.to_folium()
    root = m.get_root()
    root.header.add_child(folium.Element(ICON_CSS))
    root.html.add_child(folium.Element(_controls_html(active_filter, term)))
    root.html.add_child(folium.Element(LOCATE_JS))

    alerts_js = _alerts_js(alerts)
    if alerts_js:
        root.html.add_child(folium.Element(alerts_js))

    return root.render()
