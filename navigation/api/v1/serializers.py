import math

from rest_framework import serializers

from navigation.services import converter


class CoordinateField(serializers.ListField):
    """A ``[lng, lat]`` pair with finite, in-range values."""

    child = serializers.FloatField()

    def to_internal_value(self, data):
        values = super().to_internal_value(data)
        if len(values) != 2:
            raise serializers.ValidationError("Expected a [longitude, latitude] pair.")
        lng, lat = values
        if not (math.isfinite(lng) and math.isfinite(lat)):
            raise serializers.ValidationError("Coordinates must be finite numbers.")
        if not -180 <= lng <= 180:
            raise serializers.ValidationError("Longitude must be between -180 and 180.")
        if not -90 <= lat <= 90:
            raise serializers.ValidationError("Latitude must be between -90 and 90.")
        return lng, lat


class GeocodeInputSerializer(serializers.Serializer):
    q = serializers.CharField()
    limit = serializers.IntegerField(required=False, min_value=1, max_value=50)
    countrycodes = serializers.CharField(required=False, allow_blank=True)


class GeocodeResultSerializer(serializers.Serializer):
    display_name = serializers.CharField()
    lat = serializers.CharField()
    lon = serializers.CharField()
    place_id = serializers.IntegerField(allow_null=True)


class RouteInputSerializer(serializers.Serializer):
    start = CoordinateField()
    end = CoordinateField()


class RouteOutputSerializer(serializers.Serializer):
    coordinates = serializers.ListField(child=serializers.ListField(child=serializers.FloatField()))
    distance = serializers.FloatField()
    duration = serializers.FloatField()
    distance_miles = serializers.SerializerMethodField()
    duration_minutes = serializers.SerializerMethodField()

    def get_distance_miles(self, route):
        return round(converter.meters_to_miles(route.distance), 1)

    def get_duration_minutes(self, route):
        return round(converter.seconds_to_minutes(route.duration), 1)


class AlongRouteInputSerializer(serializers.Serializer):
    coordinates = serializers.ListField(child=CoordinateField())
    max_distance_miles = serializers.FloatField(required=False, min_value=0)


class MatchedStationSerializer(serializers.Serializer):
    name = serializers.SerializerMethodField()
    postcode = serializers.SerializerMethodField()
    url = serializers.SerializerMethodField()
    lat = serializers.FloatField(source="location.lat")
    lng = serializers.FloatField(source="location.lng")
    distance_from_route = serializers.SerializerMethodField()
    distance_from_route_display = serializers.SerializerMethodField()

    def get_name(self, match):
        return match.properties.get("name", "")

    def get_postcode(self, match):
        return match.properties.get("postcode", "")

    def get_url(self, match):
        return match.properties.get("URL", "")

    def get_distance_from_route(self, match):
        return round(match.distance_from_route, 2)

    def get_distance_from_route_display(self, match):
        return f"{converter.format_miles(match.distance_from_route)} from route"


class AlongRouteOutputSerializer(serializers.Serializer):
    count = serializers.SerializerMethodField()
    stations = MatchedStationSerializer(many=True)

    def get_count(self, result):
        return len(result["stations"])


class JourneyInputSerializer(serializers.Serializer):
    start = serializers.CharField()
    end = serializers.CharField()
    countrycodes = serializers.CharField(required=False, allow_blank=True)
    max_distance_miles = serializers.FloatField(required=False, min_value=0)
    render_map = serializers.BooleanField(default=False)


class JourneyOutputSerializer(serializers.Serializer):
    start = serializers.ListField(child=serializers.FloatField())
    end = serializers.ListField(child=serializers.FloatField())
    route = RouteOutputSerializer()
    distance_display = serializers.CharField()
    duration_display = serializers.CharField()
    stations = MatchedStationSerializer(many=True)
    route_map = serializers.CharField(allow_null=True)
