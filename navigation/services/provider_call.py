import logging

import polyline as polyline_codec
import requests
from django.conf import settings

from .types import RouteData

logger = logging.getLogger(__name__)

USER_AGENT = "Service Station Mapper"


def parse_route_geometry(geometry) -> tuple[list[tuple[float, float]], str | None]:
    """
    Normalise an OSRM route geometry to ``[(lng, lat), …]``.

    OSRM answers with a GeoJSON LineString for ``geometries=geojson`` and
    with a Google-encoded polyline string otherwise.  Returns the
    coordinates and the encoded polyline (``None`` for GeoJSON input).
    """
    if isinstance(geometry, str):
        points = polyline_codec.decode(geometry)
        return [(lng, lat) for lat, lng in points], geometry

    if isinstance(geometry, dict):
        coordinates = geometry.get("coordinates")
        if geometry.get("type") == "LineString" and isinstance(coordinates, list):
            return [(float(c[0]), float(c[1])) for c in coordinates], None
        raise ValueError("Invalid GeoJSON geometry format")

    raise ValueError("Invalid route geometry format")


def get_route(
    start_lng: float,
    start_lat: float,
    end_lng: float,
    end_lat: float,
) -> RouteData:
    """
    Fetch the driving route between two points from OSRM.

    Raises
    ------
    requests.RequestException
        On transport errors or a non-2xx response.
    ValueError
        If OSRM finds no route or returns an unusable geometry.
    """
    config = settings.SERVICE_STATIONS
    base_url = config["OSRM_BASE_URL"]
    url = f"{base_url}/{start_lng},{start_lat};{end_lng},{end_lat}"
    params = {
        "overview": "full",
        "geometries": "geojson",
    }
    logger.debug("Calling OSRM API: %s", url)
    response = requests.get(
        url,
        params=params,
        headers={"User-Agent": USER_AGENT},
        timeout=config.get("OSRM_TIMEOUT", 60),
    )
    response.raise_for_status()
    data = response.json()

    if data.get("code") != "Ok" or not data.get("routes"):
        logger.warning("OSRM returned code %s", data.get("code", "unknown"))
        raise ValueError("No route found")

    route = data["routes"][0]
    coordinates, encoded = parse_route_geometry(route.get("geometry"))
    logger.info(
        "Route: %d points, %.0f m, %.0f s",
        len(coordinates), route["distance"], route["duration"],
    )
    return RouteData(
        coordinates=coordinates,
        distance=route["distance"],
        duration=route["duration"],
        encoded_polyline=encoded,
    )
