"""
Unit tests for the OSRM routing client.

``requests.get`` is mocked; no network.
"""

from unittest import mock

import polyline as polyline_codec
import requests
from django.test import SimpleTestCase, override_settings

from navigation.services.provider_call import get_route, parse_route_geometry
from navigation.services.types import GeoPoint, RouteData

from .test_stations import STATION_SETTINGS

GEOJSON_ROUTE = {
    "code": "Ok",
    "routes": [
        {
            "distance": 84320.5,
            "duration": 3605.2,
            "geometry": {
                "type": "LineString",
                "coordinates": [[-0.2283, 51.6914], [-0.5063, 51.9486], [-1.1223, 52.3068]],
            },
        }
    ],
    "waypoints": [{"location": [-0.2283, 51.6914]}, {"location": [-1.1223, 52.3068]}],
}


def osrm_response(payload, status_code=200):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


@override_settings(SERVICE_STATIONS=STATION_SETTINGS)
class GetRouteTests(SimpleTestCase):

    @mock.patch("navigation.services.provider_call.requests.get")
    def test_geojson_route(self, mock_get):
        mock_get.return_value = osrm_response(GEOJSON_ROUTE)

        route = get_route(-0.2283, 51.6914, -1.1223, 52.3068)

        self.assertIsInstance(route, RouteData)
        self.assertEqual(route.coordinates[0], (-0.2283, 51.6914))
        self.assertEqual(len(route.coordinates), 3)
        self.assertEqual(route.distance, 84320.5)
        self.assertEqual(route.duration, 3605.2)
        self.assertIsNone(route.encoded_polyline)
        self.assertEqual(route.points[0], GeoPoint(lat=51.6914, lng=-0.2283))

    @mock.patch("navigation.services.provider_call.requests.get")
    def test_request_shape(self, mock_get):
        mock_get.return_value = osrm_response(GEOJSON_ROUTE)

        get_route(-0.2283, 51.6914, -1.1223, 52.3068)

        args, kwargs = mock_get.call_args
        self.assertEqual(
            args[0],
            "http://router.project-osrm.org/route/v1/driving/-0.2283,51.6914;-1.1223,52.3068",
        )
        self.assertEqual(kwargs["params"], {"overview": "full", "geometries": "geojson"})
        self.assertIn("User-Agent", kwargs["headers"])
        self.assertEqual(kwargs["timeout"], 60)

    @mock.patch("navigation.services.provider_call.requests.get")
    def test_encoded_polyline_route(self, mock_get):
        encoded = polyline_codec.encode([(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)])
        payload = {
            "code": "Ok",
            "routes": [{"distance": 1000.0, "duration": 60.0, "geometry": encoded}],
        }
        mock_get.return_value = osrm_response(payload)

        route = get_route(-120.2, 38.5, -126.453, 43.252)

        self.assertEqual(route.encoded_polyline, encoded)
        expected = [(-120.2, 38.5), (-120.95, 40.7), (-126.453, 43.252)]
        self.assertEqual(len(route.coordinates), len(expected))
        for (lng, lat), (exp_lng, exp_lat) in zip(route.coordinates, expected):
            self.assertAlmostEqual(lng, exp_lng, places=5)
            self.assertAlmostEqual(lat, exp_lat, places=5)

    @mock.patch("navigation.services.provider_call.requests.get")
    def test_no_route(self, mock_get):
        mock_get.return_value = osrm_response({"code": "NoRoute", "routes": []})
        with self.assertRaisesMessage(ValueError, "No route found"):
            get_route(0, 0, 1, 1)

    @mock.patch("navigation.services.provider_call.requests.get")
    def test_empty_routes(self, mock_get):
        mock_get.return_value = osrm_response({"code": "Ok", "routes": []})
        with self.assertRaises(ValueError):
            get_route(0, 0, 1, 1)

    @mock.patch("navigation.services.provider_call.requests.get")
    def test_http_error_propagates(self, mock_get):
        mock_get.return_value = osrm_response({}, status_code=502)
        with self.assertRaises(requests.HTTPError):
            get_route(0, 0, 1, 1)


class ParseRouteGeometryTests(SimpleTestCase):

    def test_linestring(self):
        coords, encoded = parse_route_geometry(
            {"type": "LineString", "coordinates": [[1, 2], [3, 4]]}
        )
        self.assertEqual(coords, [(1.0, 2.0), (3.0, 4.0)])
        self.assertIsNone(encoded)

    def test_invalid_geojson(self):
        with self.assertRaisesMessage(ValueError, "Invalid GeoJSON geometry format"):
            parse_route_geometry({"type": "Point", "coordinates": [1, 2]})

    def test_invalid_geometry(self):
        with self.assertRaisesMessage(ValueError, "Invalid route geometry format"):
            parse_route_geometry(None)
