"""Ponto de entrada do exporter.

Realiza a inicialização: parsing de argumentos CLI, configuração de
logging e início do servidor de scrape. A lógica de runtime fica em
``core`` para facilitar testes e reutilização.
"""

import logging as _logging
import sys

from .core.args import get_log_config, parse_args
from .core.core import run_server
from .system.logs import HTTP_TAG, LogSink, configure_logging


def main(argv: list[str] | None = None) -> int:
    """Inicializa a aplicação e atende scrapes até ser interrompida.

    Args:
        argv: Lista de argumentos (usada em testes). Quando ``None`` usa os
            argumentos de linha de comando do processo.

    Returns:
        Código de saída do processo (0 em encerramento normal, 1 se o bind falhar).
    """
    args = parse_args(argv)
    log_conf = get_log_config(args)
    configure_logging(
        log_conf["level"],
        log_root=log_conf["root"],
        loki_url=args.loki_url,
        loki_labels=args.loki_labels,
    )
    _install_excepthook()

    sink = LogSink()
    try:
        run_server(
            port=args.port,
            addr=args.addr,
            collector_names=args.collectors,
            threaded=args.threaded,
            sink=sink,
        )
    except OSError as exc:
        sink.error(f"Falha ao abrir porta {args.addr}:{args.port}: {exc}", tag=HTTP_TAG)
        return 1
    return 0


def _install_excepthook() -> None:
    """Envia exceções não tratadas para o logger root."""
    root = _logging.getLogger()

    def _exc_hook(exc_type, exc_value, exc_tb):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        root.error("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

    sys.excepthook = _exc_hook


if __name__ == "__main__":
    sys.exit(main())
