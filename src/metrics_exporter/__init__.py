"""metrics_exporter: servidor de exposição de métricas no formato texto do Prometheus.

Uso típico (bootstrap)::

    from metrics_exporter import CollectorRegistry, MetricDescriptor, MetricSample, ScrapeServer

    UP = MetricDescriptor("dummy_metric", "gauge", "A dummy metric", ["source"])
    registry = CollectorRegistry()
    registry.register(lambda: [MetricSample(UP, 1, ["test"])])
    ScrapeServer(registry, port=9700).serve_forever()
"""

from .exporter import (
    CollectorRegistry,
    Diagnostic,
    MetricDescriptor,
    MetricSample,
    MetricType,
    ScrapeServer,
    ValidationError,
    encode,
)
from .system.logs import LogSink

__version__ = "0.1.0"

__all__ = [
    "CollectorRegistry",
    "Diagnostic",
    "LogSink",
    "MetricDescriptor",
    "MetricSample",
    "MetricType",
    "ScrapeServer",
    "ValidationError",
    "encode",
]
