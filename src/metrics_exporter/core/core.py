"""Orquestração do exporter: monta o registry e mantém o servidor no ar."""

import logging

from ..collectors import get_collector
from ..exporter import CollectorRegistry, ScrapeServer
from ..exporter.server import DEFAULT_ADDR, DEFAULT_PORT
from ..system.logs import LogSink

logger = logging.getLogger(__name__)


def build_registry(collector_names=(), sink: LogSink | None = None) -> CollectorRegistry:
    """Cria o registry com os coletores embutidos na ordem pedida.

    Nomes desconhecidos são registrados em warning e ignorados.
    """
    registry = CollectorRegistry(sink=sink)
    for name in collector_names:
        try:
            registry.register(get_collector(name))
        except KeyError as exc:
            logger.warning("Coletor ignorado: %s", exc)
    return registry


def run_server(
    port: int = DEFAULT_PORT,
    addr: str = DEFAULT_ADDR,
    collector_names=(),
    threaded: bool = False,
    sink: LogSink | None = None,
    registry: CollectorRegistry | None = None,
) -> ScrapeServer:
    """Inicia o servidor e atende scrapes até ``KeyboardInterrupt``.

    Erros de bind propagam para o chamador. Retorna o servidor já parado.
    """
    if registry is None:
        registry = build_registry(collector_names, sink)
    server = ScrapeServer(registry, port=port, addr=addr, sink=sink, threaded=threaded)
    server.start()
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Recebido KeyboardInterrupt, saindo...")
    finally:
        server.stop()
    return server
