"""Subsistema de logs: sink de diagnóstico e configuração de handlers.

O ``LogSink`` é a capacidade de log injetada no registry e no servidor;
``configure_logging`` é chamada uma vez pelo bootstrap e define para onde
as linhas vão (console, ficheiros diários e, opcionalmente, Loki).
"""

import logging
import os
from pathlib import Path

from .log_helpers import (
    LINE_FORMAT,
    JSONFormatter,
    LockedFileHandler,
    ensure_dir_writable,
    format_date_for_log,
    sanitize_log_name,
)
from .loki import LokiHandler

DEFAULT_LOGGER_NAME = "metrics_exporter"
LOG_FILE_BASENAME = "exporter"

COLLECTOR_TAG = "[Collector]"
COLLECTOR_ERROR_TAG = "[ERR][Collector]"
HTTP_TAG = "[HTTP]"


class LogSink:
    """Escreve mensagens de diagnóstico em linha única, com prefixo de tag.

    Envolve um ``logging.Logger``; timestamp, formato e destino ficam a cargo
    dos handlers configurados pelo bootstrap.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    def write(self, message, tag: str | None = None, level: int = logging.INFO, exc_info=None) -> None:
        text = str(message).replace("\r", " ").replace("\n", " ")
        if tag:
            text = f"{tag} {text}"
        self.logger.log(level, "%s", text, exc_info=exc_info)

    def error(self, message, tag: str | None = None, exc_info=None) -> None:
        self.write(message, tag=tag, level=logging.ERROR, exc_info=exc_info)

    def access(self, remote: str, method: str, path: str, status: int) -> None:
        """Linha de acesso: ``<remote> "<method> <path>" <status>``."""
        self.write(f'{remote} "{method} {path}" {status}')


def get_log_file_path(log_root: str | Path, suffix: str = ".log", name: str = LOG_FILE_BASENAME) -> Path:
    """Retorna o caminho do ficheiro de log do dia sob ``log_root``.

    Cria o diretório quando necessário.
    """
    root = Path(log_root)
    ensure_dir_writable(root)
    return root / f"{sanitize_log_name(name)}-{format_date_for_log()}{suffix}"


def configure_logging(
    level: str | int = "INFO",
    log_root: str | Path | None = None,
    loki_url: str | None = None,
    loki_labels=None,
) -> logging.Logger:
    """Configura o logger raiz do processo.

    - console: ``logging.basicConfig`` com linhas timestamped
    - ``log_root``: ficheiros ``exporter-<data>.log`` (humano) e ``.jsonl``
    - ``loki_url``: encaminha também para o Loki

    Pode ser chamada mais de uma vez: handlers de ficheiro para os mesmos
    caminhos não são duplicados.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LINE_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)

    if log_root:
        text_path = get_log_file_path(log_root, ".log")
        json_path = get_log_file_path(log_root, ".jsonl")
        existing = {getattr(h, "baseFilename", None) for h in root.handlers}
        if os.path.abspath(text_path) not in existing:
            fh = LockedFileHandler(text_path)
            fh.setFormatter(logging.Formatter(LINE_FORMAT))
            root.addHandler(fh)
        if os.path.abspath(json_path) not in existing:
            jfh = LockedFileHandler(json_path)
            jfh.setFormatter(JSONFormatter())
            root.addHandler(jfh)

    if loki_url and not any(isinstance(h, LokiHandler) for h in root.handlers):
        lh = LokiHandler(loki_url, loki_labels)
        lh.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(lh)

    return root
