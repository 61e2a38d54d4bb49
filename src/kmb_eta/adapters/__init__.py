"""Adapters layer - external system integrations."""

from kmb_eta.adapters.config import AppConfig
from kmb_eta.adapters.kmb_api import (
    KmbEtaRepository,
    KmbRouteCatalog,
    KmbStopNameResolver,
    KmbStopSequenceResolver,
    RetryingFetcher,
)

__all__ = [
    "AppConfig",
    "KmbEtaRepository",
    "KmbRouteCatalog",
    "KmbStopNameResolver",
    "KmbStopSequenceResolver",
    "RetryingFetcher",
]
