import json
import logging
import math
from pathlib import Path

from django.conf import settings

from .corridor import filter_stations_along_route
from .types import GeoPoint, MatchedStation, ServiceStation

logger = logging.getLogger(__name__)


def load_feature_collection(path: str | Path | None = None) -> dict:
    """
    Read the service-station GeoJSON FeatureCollection from disk.

    Raises
    ------
    RuntimeError
        If the file is missing, unreadable or not a FeatureCollection.
    """
    if path is None:
        path = settings.SERVICE_STATIONS["DATA_FILE"]
    path = Path(path)

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Error loading service stations from %s: %s", path, e)
        raise RuntimeError("Failed to load service stations") from e

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        logger.error("%s is not a GeoJSON FeatureCollection", path)
        raise RuntimeError("Failed to load service stations")

    logger.debug("Loaded %d features from %s", len(data.get("features", [])), path)
    return data


def parse_stations(collection: dict) -> list[ServiceStation]:
    """
    Turn GeoJSON ``Point`` features into :class:`ServiceStation` values.

    Features with any other geometry, or whose position is not a finite
    in-range ``[lng, lat]``, are skipped with a warning.
    """
    stations: list[ServiceStation] = []
    for index, feature in enumerate(collection.get("features", [])):
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates")
        if geometry.get("type") != "Point" or not coords or len(coords) < 2:
            logger.warning("Skipping feature %d: not a Point geometry", index)
            continue
        location = _parse_position(coords[:2])
        if location is None:
            logger.warning("Skipping feature %d: invalid coordinates %r", index, coords)
            continue
        stations.append(
            ServiceStation(
                location=location,
                properties=dict(feature.get("properties") or {}),
            )
        )
    return stations


def _parse_position(pair) -> GeoPoint | None:
    try:
        location = GeoPoint.from_lng_lat(pair)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(location.lat) and math.isfinite(location.lng)):
        return None
    if not (-90 <= location.lat <= 90 and -180 <= location.lng <= 180):
        return None
    return location


def load_stations(path: str | Path | None = None) -> list[ServiceStation]:
    """Load every station in the configured data file."""
    stations = parse_stations(load_feature_collection(path))
    logger.info("Service stations loaded: %d", len(stations))
    return stations


def get_stations_along_route(
    route_coordinates: list[tuple[float, float]],
    max_station_distance: float | None = None,
    stations: list[ServiceStation] | None = None,
) -> list[MatchedStation]:
    """
    Match the station catalogue against a route.

    Parameters
    ----------
    route_coordinates :
        Route geometry as [(lng, lat), …] straight from the routing provider.
    max_station_distance :
        Corridor half-width in miles.  Default from settings.
    stations :
        Candidate stations; the configured catalogue when omitted.

    Returns
    -------
    list[MatchedStation]
        Ordered by distance from the route's first point.
    """
    config = settings.SERVICE_STATIONS
    if max_station_distance is None:
        max_station_distance = config["MAX_DISTANCE_FROM_ROUTE_MILES"]
    if stations is None:
        stations = load_stations()

    return filter_stations_along_route(
        stations,
        route_coordinates,
        max_distance=max_station_distance,
        prefilter=config.get("PREFILTER_BOUNDING_BOX", False),
    )
