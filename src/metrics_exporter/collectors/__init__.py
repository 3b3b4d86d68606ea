"""Pacote collectors: coletores embutidos registráveis por nome.

Nomes aceitos em ``EXPORTER_COLLECTORS`` / ``--collectors``:
``process``, ``system`` e ``prometheus_client``.
"""

from .process import collect_process_metrics
from .prom_bridge import PrometheusClientCollector
from .system import collect_system_metrics

BUILTIN_COLLECTORS = {
    "process": lambda: collect_process_metrics,
    "system": lambda: collect_system_metrics,
    "prometheus_client": PrometheusClientCollector,
}


def get_collector(name: str):
    """Instancia o coletor embutido ``name``; levanta ``KeyError`` se desconhecido."""
    try:
        factory = BUILTIN_COLLECTORS[name.strip().lower()]
    except KeyError:
        raise KeyError(f"coletor desconhecido: {name!r}") from None
    return factory()


__all__ = [
    "BUILTIN_COLLECTORS",
    "PrometheusClientCollector",
    "collect_process_metrics",
    "collect_system_metrics",
    "get_collector",
]
