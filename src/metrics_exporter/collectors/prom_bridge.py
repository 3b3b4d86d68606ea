"""Ponte para ``prometheus_client``: re-expõe um registry existente.

Útil quando parte da aplicação já instrumenta com ``Gauge``/``Counter`` do
``prometheus_client``. Famílias counter, gauge e untyped viram amostras;
histogram, summary e demais tipos não são suportados (não há cálculo de
buckets aqui) e geram um ``Diagnostic``.
"""

from prometheus_client import REGISTRY

from ..exporter import Diagnostic, MetricDescriptor, MetricSample, MetricType
from ..exporter.descriptor import IDENTIFIER_RE

_TYPE_MAP = {
    "counter": MetricType.COUNTER,
    "gauge": MetricType.GAUGE,
    "untyped": MetricType.GAUGE,
    "unknown": MetricType.GAUGE,
}


class PrometheusClientCollector:
    """Coletor que lê ``registry.collect()`` a cada scrape."""

    name = "prometheus_client"

    def __init__(self, registry=REGISTRY):
        self.registry = registry

    def collect(self):
        descriptors: dict = {}
        for family in self.registry.collect():
            metric_type = _TYPE_MAP.get(family.type)
            if metric_type is None:
                yield Diagnostic(f"família {family.name} do tipo {family.type} não suportada")
                continue
            for s in family.samples:
                if s.name.endswith("_created"):
                    continue
                label_names = tuple(s.labels)
                if not IDENTIFIER_RE.match(s.name) or not all(IDENTIFIER_RE.match(k) for k in label_names):
                    yield Diagnostic(f"amostra {s.name} com nome fora do padrão ignorada")
                    continue
                key = (s.name, label_names)
                descriptor = descriptors.get(key)
                if descriptor is None:
                    descriptor = MetricDescriptor(s.name, metric_type, family.documentation, label_names)
                    descriptors[key] = descriptor
                yield MetricSample(descriptor, s.value, [s.labels[k] for k in label_names])
