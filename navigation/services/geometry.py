import math

from .types import GeoPoint

# Mean Earth radius in miles.  Every corridor threshold is measured against it.
EARTH_RADIUS_MILES = 3959

# Segments shorter than this (miles) are measured to their endpoints only.
DEGENERATE_SEGMENT_MILES = 0.01

# Angular separation (radians) below which SLERP falls back to lerp.
SLERP_MIN_ANGLE = 0.0001

MIN_SEGMENT_SAMPLES = 10
SAMPLES_PER_MILE = 2


def haversine(p: GeoPoint, q: GeoPoint) -> float:
    """Return the great-circle distance **in miles** between two points."""
    phi1, phi2 = math.radians(p.lat), math.radians(q.lat)
    dphi = math.radians(q.lat - p.lat)
    dlambda = math.radians(q.lng - p.lng)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    # Rounding can push a just past 1; NaN must pass through untouched.
    if a > 1.0:
        a = 1.0
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def interpolate_point(start: GeoPoint, end: GeoPoint, t: float) -> GeoPoint:
    """
    Return the point at fraction ``t`` along the great-circle arc
    ``start`` → ``end`` (spherical linear interpolation).

    ``t`` is clamped to [0, 1]; 0 and 1 give back the endpoints exactly.
    Nearly coincident endpoints are interpolated linearly in lat/lng to
    avoid dividing by ``sin(δ) ≈ 0``.
    """
    t = max(0.0, min(1.0, t))
    if t == 0.0:
        return start
    if t == 1.0:
        return end

    lat1, lng1 = math.radians(start.lat), math.radians(start.lng)
    lat2, lng2 = math.radians(end.lat), math.radians(end.lng)

    cos_delta = (
        math.sin(lat1) * math.sin(lat2)
        + math.cos(lat1) * math.cos(lat2) * math.cos(lng2 - lng1)
    )
    delta = math.acos(max(-1.0, min(1.0, cos_delta)))

    if delta < SLERP_MIN_ANGLE:
        return GeoPoint(
            lat=start.lat + (end.lat - start.lat) * t,
            lng=start.lng + (end.lng - start.lng) * t,
        )

    sin_delta = math.sin(delta)
    a = math.sin((1 - t) * delta) / sin_delta
    b = math.sin(t * delta) / sin_delta

    x = a * math.cos(lat1) * math.cos(lng1) + b * math.cos(lat2) * math.cos(lng2)
    y = a * math.cos(lat1) * math.sin(lng1) + b * math.cos(lat2) * math.sin(lng2)
    z = a * math.sin(lat1) + b * math.sin(lat2)

    lat = math.atan2(z, math.sqrt(x * x + y * y))
    lng = math.atan2(y, x)
    return GeoPoint(lat=math.degrees(lat), lng=math.degrees(lng))


def segment_sample_count(segment_length: float) -> int:
    """Roughly one sample per half mile, never fewer than 10."""
    return max(MIN_SEGMENT_SAMPLES, math.ceil(segment_length * SAMPLES_PER_MILE))


def distance_to_segment(point: GeoPoint, start: GeoPoint, end: GeoPoint) -> float:
    """
    Estimate the minimum distance (miles) from ``point`` to the
    great-circle segment ``start`` → ``end``.

    The segment is sampled at ``segment_sample_count`` + 1 evenly spaced
    fractions (both endpoints included) and the closest sample wins, so
    the result never exceeds the distance to either endpoint.
    """
    segment_length = haversine(start, end)

    if segment_length < DEGENERATE_SEGMENT_MILES:
        return min(haversine(point, start), haversine(point, end))

    n = segment_sample_count(segment_length)
    best = math.inf
    for i in range(n + 1):
        sample = interpolate_point(start, end, i / n)
        d = haversine(point, sample)
        if d < best:
            best = d
    return best
