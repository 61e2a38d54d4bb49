"""KMB API adapters."""

from kmb_eta.adapters.kmb_api.eta_repository import KmbEtaRepository
from kmb_eta.adapters.kmb_api.http_client import FetchError, RetryingFetcher, RetryPolicy
from kmb_eta.adapters.kmb_api.route_catalog import KmbRouteCatalog
from kmb_eta.adapters.kmb_api.stop_name_resolver import KmbStopNameResolver
from kmb_eta.adapters.kmb_api.stop_sequence_resolver import KmbStopSequenceResolver

__all__ = [
    "FetchError",
    "KmbEtaRepository",
    "KmbRouteCatalog",
    "KmbStopNameResolver",
    "KmbStopSequenceResolver",
    "RetryPolicy",
    "RetryingFetcher",
]
