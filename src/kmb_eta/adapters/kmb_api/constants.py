"""Constants for the KMB open-data API adapter.

API Documentation: https://data.etabus.gov.hk/

Read-only JSON over HTTPS, no authentication. Every payload wraps its result
in a top-level ``data`` field.
"""

KMB_BASE_URL = "https://data.etabus.gov.hk/v1/transport/kmb"

# Path templates, relative to the base URL
ROUTE_PATH = "/route"  # GET /route
ROUTE_STOP_PATH = "/route-stop/{route}/{bound}/{direction}"  # GET /route-stop/1A/outbound/1
STOP_PATH = "/stop/{stop_id}"  # GET /stop/:id
ETA_PATH = "/eta/{stop_id}/{route}/{service_type}"  # GET /eta/:stop/:route/:service_type

DEFAULT_SERVICE_TYPE = "1"
DEFAULT_ALTERNATE_SERVICE_TYPES = ("2", "3", "4")

# HTTP headers
DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# Localized field suffixes supported by the API
LANGUAGES = ("tc", "sc", "en")
