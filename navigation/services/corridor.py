"""
Corridor filter — keep the service stations that lie within a fixed
distance of a driven route and order them for display.

Everything here is a pure function of its arguments: no I/O, no settings
lookups, no state shared between calls or between stations.
"""

import logging
import math
from typing import Iterable, Sequence

from .geometry import EARTH_RADIUS_MILES, distance_to_segment, haversine
from .types import GeoPoint, MatchedStation, ServiceStation

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_MILES = 5

# Slack (miles) added to the bounding box reach to absorb sampling error.
BBOX_SLACK_MILES = 1.0


def _as_points(route: Sequence) -> list[GeoPoint]:
    """Accept GeoPoints or ``(lng, lat)`` pairs."""
    return [p if isinstance(p, GeoPoint) else GeoPoint.from_lng_lat(p) for p in route]


def min_distance_to_route(
    location: GeoPoint,
    route_points: Sequence[GeoPoint],
    max_distance: float,
) -> float:
    """
    Scan the route segments in order and return the smallest distance
    (miles) seen, stopping at the first segment that brings it within
    ``max_distance``.

    The early exit means the value returned for an admitted station is
    not necessarily its global minimum: a later segment may be closer.
    The admission decision is unaffected.
    """
    best = math.inf
    for i in range(len(route_points) - 1):
        d = distance_to_segment(location, route_points[i], route_points[i + 1])
        if d < best:
            best = d
        if best <= max_distance:
            break
    return best


def route_bounding_box(
    route_points: Sequence[GeoPoint],
    max_distance: float,
) -> tuple[float, float, float | None, float | None]:
    """
    Return a padded ``(min_lat, max_lat, min_lng, max_lng)`` box holding
    every point within ``max_distance`` of the route.

    Any point on a segment is within half the segment's length of one of
    its endpoints, so the box pads the route's vertices by the threshold
    plus half the longest segment.  ``min_lng``/``max_lng`` are ``None``
    when the padded box reaches a pole and no longitude bound is safe.
    """
    longest = max(
        haversine(route_points[i], route_points[i + 1])
        for i in range(len(route_points) - 1)
    )
    reach = max_distance + longest / 2 + BBOX_SLACK_MILES
    reach_rad = reach / EARTH_RADIUS_MILES
    lat_pad = math.degrees(reach_rad)

    lats = [p.lat for p in route_points]
    lngs = [p.lng for p in route_points]
    min_lat, max_lat = min(lats) - lat_pad, max(lats) + lat_pad

    phi_max = math.radians(max(abs(min_lat), abs(max_lat)))
    if reach_rad >= math.pi or phi_max >= math.pi / 2:
        return min_lat, max_lat, None, None

    ratio = math.sin(reach_rad / 2) / math.cos(phi_max)
    if ratio >= 1:
        return min_lat, max_lat, None, None

    lng_pad = math.degrees(2 * math.asin(ratio))
    return min_lat, max_lat, min(lngs) - lng_pad, max(lngs) + lng_pad


def _in_box(location: GeoPoint, box) -> bool:
    min_lat, max_lat, min_lng, max_lng = box
    if not min_lat <= location.lat <= max_lat:
        return False
    if min_lng is None:
        return True
    # Padded box may run past ±180; test the wrapped copies as well.
    return any(
        min_lng <= location.lng + shift <= max_lng for shift in (0, 360, -360)
    )


def filter_stations_along_route(
    stations: Iterable[ServiceStation],
    route: Sequence,
    max_distance: float = DEFAULT_MAX_DISTANCE_MILES,
    prefilter: bool = False,
) -> list[MatchedStation]:
    """
    Find the stations within ``max_distance`` miles of the route.

    Algorithm:
      1. A route with fewer than two points has no segments → ``[]``.
      2. For each station, scan the segments in order, tracking the
         smallest distance; stop at the first segment within range.
      3. Keep stations whose distance is ≤ ``max_distance``.
      4. Sort the survivors by straight-line distance from the route's
         first point (stable, so ties keep input order).

    Parameters
    ----------
    stations :
        Candidate stations.  Their properties are carried through untouched.
    route :
        Ordered route as GeoPoints or ``(lng, lat)`` pairs.
    max_distance :
        Corridor half-width in miles.
    prefilter :
        Skip stations outside a padded bounding box of the route before
        the segment scan.  Never changes the result, only the cost.

    Returns
    -------
    list[MatchedStation]
        Admitted stations with ``distance_from_route`` attached.
    """
    route_points = _as_points(route)
    if len(route_points) < 2:
        logger.debug("Route has %d point(s); no segments to match", len(route_points))
        return []

    box = None
    if prefilter and math.isfinite(max_distance):
        box = route_bounding_box(route_points, max_distance)
        logger.debug("Bounding box prefilter: %s", box)

    matched: list[MatchedStation] = []
    scanned = 0

    for station in stations:
        if box is not None and not _in_box(station.location, box):
            continue
        scanned += 1

        distance = min_distance_to_route(station.location, route_points, max_distance)
        if distance <= max_distance:
            matched.append(MatchedStation(station=station, distance_from_route=distance))

    route_start = route_points[0]
    matched.sort(key=lambda m: haversine(route_start, m.location))

    logger.info(
        "Stations within %.1f mi of route: %d (scanned %d, %d segments)",
        max_distance,
        len(matched),
        scanned,
        len(route_points) - 1,
    )
    return matched
