"""Pacote core: parsing de argumentos e orquestração do servidor."""

from .core import build_registry, run_server

__all__ = ["build_registry", "run_server"]
