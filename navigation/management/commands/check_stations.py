from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from navigation.services.stations import load_feature_collection, parse_stations


class Command(BaseCommand):
    help = "Validate the service-station GeoJSON file and report its contents"

    def add_arguments(self, parser):
        parser.add_argument(
            "--file",
            help="GeoJSON file to check (default: SERVICE_STATIONS['DATA_FILE'])",
        )

    def handle(self, *args, **options):
        path = options.get("file") or settings.SERVICE_STATIONS["DATA_FILE"]

        try:
            collection = load_feature_collection(path)
        except RuntimeError as e:
            raise CommandError(f"{e}: {path}") from e

        features = collection.get("features", [])
        stations = parse_stations(collection)
        skipped = len(features) - len(stations)

        for station in stations:
            self.stdout.write(
                f"{station.name or '(unnamed)'}: "
                f"{station.location.lat:.4f}, {station.location.lng:.4f}"
            )

        if skipped:
            self.stderr.write(f"Skipped {skipped} feature(s) without a Point geometry")

        self.stdout.write(
            self.style.SUCCESS(f"Loaded {len(stations)} service stations from {path}")
        )
