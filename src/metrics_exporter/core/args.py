"""Parser de argumentos do exporter.

Este módulo fornece um parser simples que expõe:
- porta e endereço de bind (-p / --port, -a / --addr)
- verbosidade (-v) e opções de logging (nível e diretório de ficheiros)
- modo multi-thread (--threaded) e coletores embutidos (--collectors)

Prioridade dos valores: CLI > variáveis de ambiente / .env > default.
"""

import argparse
from typing import Sequence

from ..config.settings import LOG_LEVELS, load_settings, parse_collector_list

# ========================
# 0. Configuração do parser
# ========================


def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para o exporter."""
    parser = argparse.ArgumentParser(
        prog="metrics-exporter",
        description="Servidor de exposição de métricas no formato texto do Prometheus",
    )
    # defaults None: permite distinguir valor vindo da CLI de valor vindo do ambiente
    parser.add_argument("-p", "--port", type=int, default=None, help="Porta TCP do endpoint HTTP (padrão: 9700)")
    parser.add_argument(
        "-a",
        "--addr",
        type=str,
        default=None,
        help="Endereço de bind (padrão: 0.0.0.0 - todas as interfaces)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade (-v, -vv)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v",
    )
    parser.add_argument(
        "--log-root",
        dest="log_root",
        type=str,
        default=None,
        help="Diretório para ficheiros de log (substitui EXPORTER_LOG_ROOT)",
    )
    parser.add_argument(
        "--threaded",
        action="store_true",
        default=None,
        help="Atende cada conexão numa thread própria",
    )
    parser.add_argument(
        "--collectors",
        type=str,
        default=None,
        help="Coletores embutidos separados por vírgula (process,system,prometheus_client)",
    )
    return parser


# ========================
# 1. Análise e validação
# ========================


def parse_args(argv: Sequence[str] | None = None, settings: dict | None = None) -> argparse.Namespace:
    """Analisa argv e retorna Namespace validado para uso no programa."""
    parser = configure_argparser()
    ns = parser.parse_args(argv)
    if settings is None:
        settings = load_settings()

    # argumento ausente na CLI -> valor do ambiente/.env (ou default)
    for key in ("port", "addr", "log_root", "threaded", "collectors"):
        if getattr(ns, key, None) is None:
            setattr(ns, key, settings.get(key))
    if ns.log_level is None and not ns.verbose:
        ns.log_level = settings.get("log_level")
    ns.loki_url = settings.get("loki_url")
    ns.loki_labels = settings.get("loki_labels")
    ns.collectors = parse_collector_list(ns.collectors or ())
    ns.threaded = bool(ns.threaded)
    validate_args(ns)
    return ns


def validate_args(args: argparse.Namespace) -> None:
    """Valida e normaliza argumentos do exporter."""
    try:
        args.port = int(args.port)
    except (TypeError, ValueError) as exc:
        raise ValueError("porta deve ser um inteiro") from exc
    if not 0 <= args.port <= 65535:
        raise ValueError("porta deve estar entre 0 e 65535")

    level = getattr(args, "log_level", None)
    if level and str(level).upper() not in LOG_LEVELS:
        raise ValueError(f"nível de log desconhecido: {level}")


# ========================
# 2. Configuração de logging
# ========================


def get_log_config(args: argparse.Namespace) -> dict:
    """Retorna dict com configuração de logging ('level' e 'root')."""
    if getattr(args, "log_level", None):
        level = str(args.log_level).upper()
    else:
        v = getattr(args, "verbose", 0) or 0
        if v >= 2:
            level = "DEBUG"
        elif v == 1:
            level = "INFO"
        else:
            level = "WARNING"

    return {"level": level, "root": getattr(args, "log_root", None)}
