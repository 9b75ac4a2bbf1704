import logging
import time

from django.conf import settings
from geopy.exc import GeocoderServiceError
from geopy.geocoders import Nominatim

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_DELAY = 2


def get_geolocator() -> Nominatim:
    return Nominatim(
        user_agent=settings.SERVICE_STATIONS["NOMINATIM_USER_AGENT"],
        timeout=10,
    )


def _to_result(location) -> dict:
    raw = location.raw or {}
    return {
        "display_name": raw.get("display_name", location.address),
        "lat": str(raw.get("lat", location.latitude)),
        "lon": str(raw.get("lon", location.longitude)),
        "place_id": raw.get("place_id"),
    }


def geocode(
    query: str,
    limit: int | None = None,
    countrycodes: str | None = None,
) -> list[dict]:
    """
    Look up a free-text address with Nominatim (geopy) and return up to
    ``limit`` candidate results, best match first.

    Retries up to MAX_RETRIES times with exponential backoff
    when Nominatim rate-limits or errors.
    """
    if not query or not query.strip():
        raise ValueError("Query parameter is required")
    if limit is None:
        limit = settings.SERVICE_STATIONS["GEOCODE_RESULT_LIMIT"]

    logger.debug("Geocoding: %s (limit=%d, countrycodes=%s)", query, limit, countrycodes)
    geolocator = get_geolocator()

    last_error = None
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            locations = geolocator.geocode(
                query,
                exactly_one=False,
                limit=limit,
                addressdetails=True,
                country_codes=countrycodes,
            )
            results = [_to_result(loc) for loc in locations or []]
            logger.debug("Geocoded '%s' -> %d result(s)", query, len(results))
            return results
        except GeocoderServiceError as e:
            last_error = e
            delay = RETRY_DELAY * (2 ** (attempt - 1))
            logger.warning(
                "Nominatim error (attempt %d/%d): %s - retrying in %ds",
                attempt, MAX_RETRIES, e, delay,
            )
            time.sleep(delay)

    raise RuntimeError(
        f"Nominatim still failing after {MAX_RETRIES} retries: {last_error}"
    )


def geocode_first(query: str, countrycodes: str | None = None) -> tuple[float, float]:
    """Return ``(lng, lat)`` of the best match for ``query``."""
    results = geocode(query, limit=1, countrycodes=countrycodes)
    if not results:
        raise ValueError(f"Could not geocode location: '{query}'")
    best = results[0]
    return float(best["lon"]), float(best["lat"])
