"""Value types shared by the station-matching services.

Route coordinates and GeoJSON positions arrive as ``(lng, lat)`` pairs; inside
the services everything is a :class:`GeoPoint` so the order can't be mixed up.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GeoPoint:
    """A (latitude, longitude) position in decimal degrees."""

    lat: float
    lng: float

    @classmethod
    def from_lng_lat(cls, pair) -> "GeoPoint":
        """Build from a ``[lng, lat]`` pair (OSRM / GeoJSON order)."""
        lng, lat = pair
        return cls(lat=float(lat), lng=float(lng))

    def to_lng_lat(self) -> tuple[float, float]:
        return self.lng, self.lat


@dataclass(frozen=True)
class ServiceStation:
    """
    A candidate point of interest.

    ``properties`` holds the display attributes from the data source
    (name, postcode, URL, ...).  The matching code never reads them.
    """

    location: GeoPoint
    properties: dict = field(default_factory=dict, hash=False)

    @property
    def name(self) -> str:
        return self.properties.get("name", "")

    def to_feature(self) -> dict:
        """Serialise back to a GeoJSON ``Feature``."""
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": {
                "type": "Point",
                "coordinates": list(self.location.to_lng_lat()),
            },
        }


@dataclass(frozen=True)
class MatchedStation:
    """
    A station admitted to the route corridor.

    ``distance_from_route`` is the smallest segment distance (miles) found
    before the scan stopped, see ``corridor.filter_stations_along_route``.
    """

    station: ServiceStation
    distance_from_route: float

    @property
    def location(self) -> GeoPoint:
        return self.station.location

    @property
    def properties(self) -> dict:
        return self.station.properties


@dataclass(frozen=True)
class RouteData:
    """Route geometry and totals as returned by the routing provider."""

    coordinates: list[tuple[float, float]]
    distance: float  # meters
    duration: float  # seconds
    encoded_polyline: str | None = None

    @property
    def points(self) -> list[GeoPoint]:
        return [GeoPoint.from_lng_lat(c) for c in self.coordinates]
