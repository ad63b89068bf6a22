"""Internal constants shared across the package."""

DEFAULT_PORT = 5002
DEFAULT_API_URL = f"http://localhost:{DEFAULT_PORT}"
ROUTING_BASE_URL = "https://apis.mapmyindia.com"
ROUTING_DIRECTIONS_PATH = "/directions/v1"

#: Seconds between simulator ticks and between client vehicle polls.
DEFAULT_TICK_INTERVAL = 3.0
#: Largest per-axis perturbation (degrees) applied to a vehicle on one tick.
DEFAULT_MAX_OFFSET = 0.00005

ROUTE_REQUIRED_MESSAGE = "Start and end points are required."
ROUTE_COORDINATES_MESSAGE = "Start and end points must have numeric lat and lng."
ROUTE_NOT_FOUND_MESSAGE = "Route not found."
ROUTE_UPSTREAM_MESSAGE = "Failed to fetch route from routing provider."

# ------------------------------------------------------------------
# Client rendering
# ------------------------------------------------------------------

VEHICLE_ICON_HTML = '<div class="vehicle-marker">\U0001f69a</div>'
ROUTE_POLYLINE_STYLE: dict[str, object] = {
    "strokeColor": "#007cbf",
    "strokeOpacity": 1.0,
    "strokeWeight": 5,
}


def carbon_marker_html(carbon_score: int) -> str:
    """Building marker whose red intensity is ``carbon_score / 100``."""
    return f'<div class="building-marker" style="background-color: rgba(255, 0, 0, {carbon_score / 100})"></div>'


def building_popup_html(name: str, carbon_score: int) -> str:
    return f"<h6>{name}</h6><p>Carbon Score: {carbon_score}</p>"
