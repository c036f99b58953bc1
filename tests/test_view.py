"""Tests for icons, popups, the map view and the rendered page."""

import pytest
from pydantic import ValidationError

from servicemap.map.controller import ServiceMapController
from servicemap.map.icons import (
    DEFAULT_ICON,
    SERVICE_ICONS,
    build_popup_html,
    escape_text,
    icon_for,
    type_label,
)
from servicemap.map.page import render_page
from servicemap.map.view import ClusterLayer, MapView, ServiceMarker, TileLayerSpec
from servicemap.services.fallback import FALLBACK_SERVICES
from servicemap.services.models import ServiceRecord

TILES = TileLayerSpec(url="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png", attribution="OSM contributors")


def _view():
    return MapView(center=(9.35, 42.8), zoom=14, tiles=TILES)


def _marker(name="Peace Hostel"):
    return ServiceMarker(
        lat=9.3512,
        lng=42.8032,
        icon=SERVICE_ICONS["hostel"],
        popup_html=f"<h3>{name}</h3>",
        service_type="hostel",
        service_name=name.lower(),
    )


class TestIcons:
    def test_known_types(self):
        assert icon_for("hospital").html == '<i class="fas fa-hospital"></i>'
        assert icon_for("hostel").class_name == "custom-icon hostel-icon"
        assert icon_for("taxi").icon_size == (30, 30)

    def test_other_and_unknown_use_default(self):
        assert icon_for("other") is DEFAULT_ICON
        assert icon_for("pharmacy") is DEFAULT_ICON
        assert icon_for("Hospital") is DEFAULT_ICON

    def test_type_label(self):
        assert type_label("hospital") == "Hospital"
        assert type_label("") == ""


class TestPopup:
    def test_contains_fields(self):
        html = build_popup_html(FALLBACK_SERVICES[0])
        assert "<h3>Jigjiga General Hospital</h3>" in html
        assert "<strong>Type:</strong> Hospital" in html
        assert "<strong>Address:</strong> Main Road, Jigjiga" in html
        assert 'href="tel:+251900000001"' in html

    def test_without_address(self):
        svc = ServiceRecord(id=1, name="Stand", type="taxi", phone="123", lat=9.3, lng=42.8)
        assert "Address" not in build_popup_html(svc)

    def test_escapes_text(self):
        svc = ServiceRecord(
            id=1, name="<script>x</script>", type="taxi", phone="1", lat=9.3, lng=42.8
        )
        assert "<script>" not in build_popup_html(svc)

    def test_escape_text_breaks_template_interpolation(self):
        assert escape_text("a`${b}`\\c") == "a&#96;&#36;&#123;b&#125;&#96;&#92;c"
        assert escape_text("Café & Bar") == "Café &amp; Bar"


class TestMapView:
    def test_add_layer_is_idempotent(self):
        view = _view()
        cluster = ClusterLayer()
        view.add_layer(cluster)
        view.add_layer(cluster)
        assert view.layers == [cluster]

    def test_remove_missing_layer_is_noop(self):
        view = _view()
        marker = _marker()
        view.remove_layer(marker)
        view.add_layer(marker)
        view.remove_layer(marker)
        view.remove_layer(marker)
        assert view.layers == []

    def test_markers_compared_by_identity(self):
        view = _view()
        first, second = _marker(), _marker()
        view.add_layer(first)
        view.add_layer(second)
        view.remove_layer(first)
        assert view.layers == [second]

    def test_set_view(self):
        view = _view()
        view.set_view((9.4, 42.9), 15)
        assert view.center == (9.4, 42.9)
        assert view.zoom == 15

    def test_render_html(self):
        view = _view()
        cluster = ClusterLayer()
        cluster.add_layer(_marker())
        view.add_layer(cluster)

        html = view.render_html()

        assert "markerClusterGroup" in html
        assert "fa-bed" in html
        assert "OSM contributors" in html


class TestRenderPage:
    def test_controls_and_alerts(self):
        html = render_page(_view(), active_filter="taxi", term="mark", alerts=["Unable to get your location: denied"])

        assert 'value="taxi" class="filter-btn active"' in html
        assert 'value="hospital" class="filter-btn"' in html
        assert 'value="mark"' in html
        assert 'id="locate-btn"' in html
        assert 'alert("Unable to get your location: denied")' in html

    def test_no_alerts(self):
        html = render_page(_view(), active_filter="all")
        assert "window.addEventListener('load'" not in html

    def test_service_names_cannot_inject_script(self, ui):
        hostile = [
            ServiceRecord(id=1, name="x${alert(1)}", type="taxi", phone="1", lat=9.35, lng=42.8),
            ServiceRecord(
                id=2, name="<img src=x onerror=alert(2)>", type="hostel", phone="`2`", lat=9.36, lng=42.8
            ),
        ]
        controller = ServiceMapController(ui=ui)
        controller.render_services(hostile)

        html = render_page(controller.map, active_filter="all")

        assert "${alert(1)}" not in html
        assert "x&#36;&#123;alert(1)&#125;" in html
        assert "<img src=x" not in html
        assert "&lt;img src=x onerror=alert(2)&gt;" in html
        assert "`2`" not in html
        assert "bindTooltip" not in html


class TestValueModels:
    def test_specs_are_frozen_models(self):
        with pytest.raises(ValidationError):
            TILES.url = "https://tiles.test/{z}/{x}/{y}.png"
        with pytest.raises(ValidationError):
            DEFAULT_ICON.html = "<b>x</b>"

    def test_marker_validates_coordinates(self):
        with pytest.raises(ValidationError):
            ServiceMarker(lat="north", lng=42.8, icon=DEFAULT_ICON, popup_html="")
