"""Helpers de baixo nível para o subsistema de logging.

Fornece o formatter JSONL, um FileHandler com lock exclusivo via
``portalocker`` e utilitários de nomes e diretórios de log.
"""

from pathlib import Path
from datetime import date
import json as _json
import logging
import os
import re
import traceback

import portalocker

logger = logging.getLogger(__name__)

LINE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def sanitize_log_name(raw_name: str, fallback: str = "exporter") -> str:
    """Sanitize o nome base de um ficheiro de log para uso seguro no filesystem.

    Remove caracteres potencialmente perigosos e limita o comprimento.
    """
    rn = Path(raw_name or fallback).name.lstrip(".")
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", rn)
    if not name:
        name = fallback
    if len(name) > 200:
        name = name[:200]
    return name


def format_date_for_log(d: date | None = None) -> str:
    """Data no formato ISO usada como sufixo diário dos ficheiros."""
    return (d or date.today()).isoformat()


def ensure_dir_writable(path: Path) -> bool:
    """Cria o diretório se necessário e verifica permissão de escrita."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Falha ao criar diretório de logs %s: %s", path, exc)
        return False
    return os.access(path, os.W_OK)


class JSONFormatter(logging.Formatter):
    """Uma linha JSON por registro: ``ts``, ``level``, ``name``, ``msg`` e ``exc``."""

    def format(self, record):
        obj = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            obj["exc"] = "".join(traceback.format_exception(*record.exc_info))
        return _json.dumps(obj, ensure_ascii=False, default=str)


class LockedFileHandler(logging.FileHandler):
    """FileHandler que segura um lock exclusivo durante cada escrita.

    Permite que vários processos do exporter partilhem o mesmo ficheiro
    sem intercalar linhas. Falhas na escrita são encaminhadas para
    ``handleError`` e nunca se propagam para quem chamou o logger.
    """

    def __init__(self, filename, encoding: str = "utf-8"):
        super().__init__(str(filename), mode="a", encoding=encoding, delay=True)

    def emit(self, record):
        try:
            if self.stream is None:
                self.stream = self._open()
            portalocker.lock(self.stream, portalocker.LOCK_EX)
            try:
                logging.StreamHandler.emit(self, record)
            finally:
                portalocker.unlock(self.stream)
        except Exception:
            self.handleError(record)
