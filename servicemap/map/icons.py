# servicemap/map/icons.py

from html import escape
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict

from servicemap.services.models import ServiceRecord


class IconSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    class_name: str
    html: str
    icon_size: Tuple[int, int] = (30, 30)


SERVICE_ICONS: Dict[str, IconSpec] = {
    "hospital": IconSpec(class_name="custom-icon hospital-icon", html='<i class="fas fa-hospital"></i>'),
    "hostel": IconSpec(class_name="custom-icon hostel-icon", html='<i class="fas fa-bed"></i>'),
    "taxi": IconSpec(class_name="custom-icon taxi-icon", html='<i class="fas fa-taxi"></i>'),
}

DEFAULT_ICON = IconSpec(class_name="custom-icon", html='<i class="fas fa-map-marker-alt"></i>')

USER_ICON = IconSpec(class_name="custom-icon user-icon", html='<i class="fas fa-user"></i>')

# folium mete el popup en un template literal de JS: `...${...}...`
_TEMPLATE_LITERAL_CHARS = str.maketrans(
    {"`": "&#96;", "$": "&#36;", "{": "&#123;", "}": "&#125;", "\\": "&#92;"}
)


def escape_text(text: str) -> str:
    """
    Escapa HTML y además los caracteres que abren interpolación
    dentro de un template literal (`, $, {, }, \\).
    """
    return escape(text).translate(_TEMPLATE_LITERAL_CHARS)


def icon_for(service_type: str) -> IconSpec:
    return SERVICE_ICONS.get(service_type, DEFAULT_ICON)


def type_label(service_type: str) -> str:
    # "hospital" -> "Hospital"
    if not service_type:
        return ""
    return service_type[:1].upper() + service_type[1:]


def build_popup_html(svc: ServiceRecord) -> str:
    """
    HTML del popup: nombre, tipo, dirección (si hay) y botón de llamada.
    """
    lines = [
        '<div class="popup-content">',
        f"<h3>{escape_text(svc.name)}</h3>",
        f"<p><strong>Type:</strong> {escape_text(type_label(svc.type))}</p>",
    ]
    if svc.address:
        lines.append(f"<p><strong>Address:</strong> {escape_text(svc.address)}</p>")

    phone = escape_text(svc.phone)
    lines.append(
        f'<a href="tel:{phone}" class="call-button">'
        f'<i class="fas fa-phone"></i> Call: {phone}</a>'
    )
    lines.append("</div>")
    return "\n".join(lines)
