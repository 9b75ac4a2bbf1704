"""Map renderer — draw the route polyline and matched service stations on an
OpenStreetMap static image, save it to Django media storage, and return the
relative path.

Uses the ``staticmap`` library which fetches OSM tiles and composites
them locally.  No API key required.
"""

import io
import logging
import uuid

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from staticmap import StaticMap, Line, CircleMarker

from .types import MatchedStation

logger = logging.getLogger(__name__)

# Map dimensions (pixels)
MAP_WIDTH = 800
MAP_HEIGHT = 500

# Sub-directory inside MEDIA_ROOT
MAP_UPLOAD_DIR = "route_maps"

TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


def build_route_map(
    coordinates: list[tuple[float, float]],
    stations: list[MatchedStation] | None = None,
) -> StaticMap:
    """Compose the map layers without rendering tiles."""
    m = StaticMap(MAP_WIDTH, MAP_HEIGHT, url_template=TILE_URL)

    # staticmap takes (lng, lat), same as the route geometry
    route_coords = [tuple(c) for c in coordinates]
    if len(route_coords) >= 2:
        m.add_line(Line(route_coords, color="blue", width=3))

    if route_coords:
        m.add_marker(CircleMarker(route_coords[0], color="green", width=12))
        m.add_marker(CircleMarker(route_coords[-1], color="red", width=12))

    for match in stations or []:
        m.add_marker(CircleMarker(match.location.to_lng_lat(), color="orange", width=8))

    return m


def render_route_map(
    coordinates: list[tuple[float, float]],
    stations: list[MatchedStation] | None = None,
) -> str:
    """
    Render the route (and optional station markers) onto a static OSM
    map, save it to media storage, and return the relative file path
    (e.g. ``route_maps/abc123.png``).

    Parameters
    ----------
    coordinates :
        Route geometry as [(lng, lat), …].
    stations :
        Optional matched stations to mark along the route.

    Returns
    -------
    str
        Relative path inside MEDIA_ROOT.
    """
    if not coordinates:
        raise ValueError("Cannot render a map for an empty route")

    image = build_route_map(coordinates, stations).render()

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    buf.seek(0)

    filename = f"{MAP_UPLOAD_DIR}/{uuid.uuid4().hex}.png"
    saved_path = default_storage.save(filename, ContentFile(buf.read()))

    logger.debug("Saved route map: %s", saved_path)
    return saved_path
