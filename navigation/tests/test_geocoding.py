"""
Unit tests for the Nominatim geocoding wrapper.

The geopy geolocator is mocked; no network.
"""

from unittest import mock

from django.test import SimpleTestCase, override_settings
from geopy.exc import GeocoderServiceError

from navigation.services import geocoding

from .test_stations import STATION_SETTINGS


def make_location(display_name, lat, lon, place_id):
    location = mock.Mock()
    location.address = display_name
    location.latitude = lat
    location.longitude = lon
    location.raw = {
        "display_name": display_name,
        "lat": str(lat),
        "lon": str(lon),
        "place_id": place_id,
    }
    return location


MILTON_KEYNES = make_location("Milton Keynes, England, United Kingdom", 52.0406, -0.7594, 1001)
LUTON = make_location("Luton, England, United Kingdom", 51.8787, -0.4200, 1002)


@override_settings(SERVICE_STATIONS=STATION_SETTINGS)
@mock.patch("navigation.services.geocoding.time.sleep")
@mock.patch("navigation.services.geocoding.get_geolocator")
class GeocodeTests(SimpleTestCase):

    def test_returns_results(self, mock_geolocator, mock_sleep):
        mock_geolocator.return_value.geocode.return_value = [MILTON_KEYNES, LUTON]

        results = geocoding.geocode("Milton Keynes")

        self.assertEqual(len(results), 2)
        self.assertEqual(
            results[0],
            {
                "display_name": "Milton Keynes, England, United Kingdom",
                "lat": "52.0406",
                "lon": "-0.7594",
                "place_id": 1001,
            },
        )
        mock_sleep.assert_not_called()

    def test_passes_options(self, mock_geolocator, mock_sleep):
        mock_geolocator.return_value.geocode.return_value = []

        geocoding.geocode("Luton", limit=3, countrycodes="gb")

        mock_geolocator.return_value.geocode.assert_called_once_with(
            "Luton",
            exactly_one=False,
            limit=3,
            addressdetails=True,
            country_codes="gb",
        )

    def test_default_limit_from_settings(self, mock_geolocator, mock_sleep):
        mock_geolocator.return_value.geocode.return_value = None

        self.assertEqual(geocoding.geocode("Nowhere at all"), [])
        _, kwargs = mock_geolocator.return_value.geocode.call_args
        self.assertEqual(kwargs["limit"], 5)

    def test_blank_query(self, mock_geolocator, mock_sleep):
        with self.assertRaises(ValueError):
            geocoding.geocode("   ")
        mock_geolocator.assert_not_called()

    def test_retries_then_succeeds(self, mock_geolocator, mock_sleep):
        mock_geolocator.return_value.geocode.side_effect = [
            GeocoderServiceError("429 Too Many Requests"),
            [LUTON],
        ]

        results = geocoding.geocode("Luton")

        self.assertEqual(results[0]["place_id"], 1002)
        mock_sleep.assert_called_once_with(geocoding.RETRY_DELAY)

    def test_gives_up_after_retries(self, mock_geolocator, mock_sleep):
        mock_geolocator.return_value.geocode.side_effect = GeocoderServiceError("down")

        with self.assertRaises(RuntimeError):
            geocoding.geocode("Luton")

        self.assertEqual(mock_geolocator.return_value.geocode.call_count, geocoding.MAX_RETRIES)
        self.assertEqual(
            [c.args[0] for c in mock_sleep.call_args_list],
            [2, 4, 8],
        )

    def test_geocode_first_returns_lng_lat(self, mock_geolocator, mock_sleep):
        mock_geolocator.return_value.geocode.return_value = [LUTON]

        self.assertEqual(geocoding.geocode_first("Luton"), (-0.42, 51.8787))

    def test_geocode_first_not_found(self, mock_geolocator, mock_sleep):
        mock_geolocator.return_value.geocode.return_value = []

        with self.assertRaisesMessage(ValueError, "Could not geocode location"):
            geocoding.geocode_first("Atlantis")
