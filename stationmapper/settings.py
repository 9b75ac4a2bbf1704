import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.staticfiles",
    "rest_framework",
    "navigation",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "stationmapper.urls"
WSGI_APPLICATION = "stationmapper.wsgi.application"

# Nothing is persisted; the station catalogue is a GeoJSON file.
DATABASES = {}

STATIC_URL = "static/"
MEDIA_URL = "media/"
MEDIA_ROOT = BASE_DIR / "media"

USE_TZ = True

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

SERVICE_STATIONS = {
    "MAX_DISTANCE_FROM_ROUTE_MILES": float(os.getenv("MAX_DISTANCE_FROM_ROUTE_MILES", "5")),
    "OSRM_BASE_URL": os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org/route/v1/driving"),
    "OSRM_TIMEOUT": int(os.getenv("OSRM_TIMEOUT", "60")),
    "NOMINATIM_USER_AGENT": os.getenv("NOMINATIM_USER_AGENT", "Service Station Mapper"),
    "GEOCODE_RESULT_LIMIT": int(os.getenv("GEOCODE_RESULT_LIMIT", "5")),
    "DATA_FILE": os.getenv(
        "SERVICE_STATIONS_DATA_FILE",
        str(BASE_DIR / "navigation" / "data" / "service-stations.json"),
    ),
    "PREFILTER_BOUNDING_BOX": os.getenv("PREFILTER_BOUNDING_BOX", "0") == "1",
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "navigation": {
            "handlers": ["console"],
            "level": os.getenv("NAVIGATION_LOG_LEVEL", "INFO"),
        },
    },
}
