"""Pacote system: sink de diagnóstico, handlers de ficheiro e encaminhamento ao Loki."""

from .logs import LogSink, configure_logging

__all__ = ["LogSink", "configure_logging"]
