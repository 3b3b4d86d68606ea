"""Pacote exporter: modelo de métricas, encoder de exposição e servidor de scrape.

Re-exports para que o bootstrap e os coletores importem tudo de um lugar.
"""

from .descriptor import MetricDescriptor, MetricType
from .encoder import CONTENT_TYPE, encode
from .errors import InvalidIdentifier, InvalidMetricType, InvalidValue, LabelCountMismatch, ValidationError
from .registry import Collector, CollectorRegistry, Diagnostic
from .sample import MetricSample
from .server import ScrapeServer, ServerState

__all__ = [
    "CONTENT_TYPE",
    "Collector",
    "CollectorRegistry",
    "Diagnostic",
    "InvalidIdentifier",
    "InvalidMetricType",
    "InvalidValue",
    "LabelCountMismatch",
    "MetricDescriptor",
    "MetricSample",
    "MetricType",
    "ScrapeServer",
    "ServerState",
    "ValidationError",
    "encode",
]
