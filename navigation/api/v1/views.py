import logging

import requests
from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView

from navigation.services import converter, geocoding, map_renderer, provider_call, stations
from .serializers import (
    AlongRouteInputSerializer,
    AlongRouteOutputSerializer,
    GeocodeInputSerializer,
    GeocodeResultSerializer,
    JourneyInputSerializer,
    JourneyOutputSerializer,
    RouteInputSerializer,
    RouteOutputSerializer,
)

logger = logging.getLogger(__name__)


class ServiceAPIView(APIView):
    """Maps service-layer exceptions to JSON error responses."""

    def handle_exception(self, exc):
        if isinstance(exc, (APIException, Http404, PermissionDenied)):
            return super().handle_exception(exc)
        if isinstance(exc, (RuntimeError, requests.RequestException)):
            logger.error("Service unavailable: %s", exc)
            return Response({"error": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        if isinstance(exc, ValueError):
            logger.warning("Validation error: %s", exc)
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        logger.exception("Unhandled error in %s", type(self).__name__)
        return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class GeocodeView(ServiceAPIView):
    def get(self, request):
        serializer = GeocodeInputSerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        results = geocoding.geocode(
            data["q"],
            limit=data.get("limit"),
            countrycodes=data.get("countrycodes") or None,
        )
        return Response(GeocodeResultSerializer(results, many=True).data)


class RouteView(ServiceAPIView):
    def post(self, request):
        logger.debug("Received route request with data: %s", request.data)
        serializer = RouteInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        start_lng, start_lat = data["start"]
        end_lng, end_lat = data["end"]
        route = provider_call.get_route(
            start_lng=start_lng,
            start_lat=start_lat,
            end_lng=end_lng,
            end_lat=end_lat,
        )
        return Response(RouteOutputSerializer(route).data, status=status.HTTP_200_OK)


class StationListView(ServiceAPIView):
    def get(self, request):
        return Response(stations.load_feature_collection())


class StationsAlongRouteView(ServiceAPIView):
    def post(self, request):
        serializer = AlongRouteInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        matched = stations.get_stations_along_route(
            route_coordinates=data["coordinates"],
            max_station_distance=data.get("max_distance_miles"),
        )
        output = AlongRouteOutputSerializer({"stations": matched})
        return Response(output.data, status=status.HTTP_200_OK)


class JourneyView(ServiceAPIView):
    """
    Address-to-address endpoint.

    Flow
    ----
    1. Geocode start / end addresses.
    2. OSRM call for the driving route.
    3. Match the station catalogue against the route corridor.
    4. Optionally render a static map of route + stations.
    """

    def post(self, request):
        logger.debug("Received journey request: %s", request.data)
        serializer = JourneyInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        countrycodes = data.get("countrycodes") or None
        start = geocoding.geocode_first(data["start"], countrycodes=countrycodes)
        end = geocoding.geocode_first(data["end"], countrycodes=countrycodes)

        route = provider_call.get_route(
            start_lng=start[0],
            start_lat=start[1],
            end_lng=end[0],
            end_lat=end[1],
        )

        matched = stations.get_stations_along_route(
            route_coordinates=route.coordinates,
            max_station_distance=data.get("max_distance_miles"),
        )

        route_map = None
        if data["render_map"]:
            route_map = map_renderer.render_route_map(route.coordinates, matched)

        result = {
            "start": start,
            "end": end,
            "route": route,
            "distance_display": converter.format_miles(
                converter.meters_to_miles(route.distance)
            ),
            "duration_display": converter.format_duration(route.duration),
            "stations": matched,
            "route_map": route_map,
        }
        output = JourneyOutputSerializer(result)
        return Response(output.data, status=status.HTTP_200_OK)
