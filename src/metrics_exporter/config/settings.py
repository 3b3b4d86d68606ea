"""Configurações do exporter.

Carrega valores a partir de ``DEFAULT_SETTINGS`` e permite overrides via
arquivo ``.env`` ou variáveis de ambiente (prefixo ``EXPORTER_*`` e
``LOKI_*``). As funções públicas principais são:

- ``load_settings()`` -> dicionário com as chaves de ``DEFAULT_SETTINGS``.
- ``validate_settings()`` -> normaliza e valida um dicionário de settings.

As variáveis do processo sobrescrevem o arquivo ``.env``.
"""

import logging
import os
from pathlib import Path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_SETTINGS = {
    "port": 9700,
    "addr": "0.0.0.0",  # nosec B104
    "log_level": "INFO",
    "log_root": None,
    "threaded": False,
    "collectors": ("process",),
    "loki_url": None,
    "loki_labels": "job=metrics_exporter",
}

# chave do .env/ambiente -> chave em settings
ENV_KEYS = {
    "EXPORTER_PORT": "port",
    "EXPORTER_ADDR": "addr",
    "EXPORTER_LOG_LEVEL": "log_level",
    "EXPORTER_LOG_ROOT": "log_root",
    "EXPORTER_THREADED": "threaded",
    "EXPORTER_COLLECTORS": "collectors",
    "LOKI_URL": "loki_url",
    "LOKI_LABELS": "loki_labels",
}

_TRUE_VALUES = ("1", "true", "yes", "on")

logger = logging.getLogger(__name__)


# ========================
# 1. Carregamento das configurações
# ========================


def load_settings(env_file: str | Path | None = None) -> dict:
    """Carrega configurações combinando DEFAULTS + .env + ambiente.

    Valores inválidos geram warning e mantêm o default.
    """
    settings = dict(DEFAULT_SETTINGS)

    if env_file is None:
        project_root = Path(__file__).resolve().parents[3]
        env_file = os.getenv("EXPORTER_ENV_FILE", project_root / ".env")
    env_items = _merge_env_items(Path(env_file))

    for env_key, key in ENV_KEYS.items():
        raw = env_items.get(env_key)
        if raw is None or raw == "":
            continue
        try:
            settings[key] = _convert(key, raw)
        except (TypeError, ValueError) as exc:
            logger.warning("%s inválido ('%s'): %s. Usando valor padrão.", env_key, raw, exc)
    return settings


def _convert(key: str, raw: str):
    if key == "port":
        port = int(raw)
        _check_port(port)
        return port
    if key == "threaded":
        return str(raw).strip().lower() in _TRUE_VALUES
    if key == "collectors":
        return parse_collector_list(raw)
    if key == "log_level":
        level = str(raw).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"nível de log desconhecido: {raw}")
        return level
    return str(raw).strip()


def parse_collector_list(raw) -> tuple:
    """Converte ``"process, system"`` em ``("process", "system")``."""
    if isinstance(raw, (list, tuple)):
        items = raw
    else:
        items = str(raw).split(",")
    return tuple(item.strip().lower() for item in items if str(item).strip())


def _check_port(port: int) -> None:
    if not 0 <= port <= 65535:
        raise ValueError(f"porta fora do intervalo 0-65535: {port}")


# ========================
# 2. Funções auxiliares para ambiente
# ========================


def _read_env_file(path: Path | str) -> dict:
    """Lê um arquivo `.env` e devolve um dicionário chave->valor.

    Linhas vazias e comentários (começando com '#') são ignorados.
    """
    result: dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return result
    try:
        with p.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, val = line.split("=", 1)
                key = key.strip()
                val = val.strip().strip('"').strip("'")
                result[key] = val
    except OSError as exc:
        logger.debug("Falha ao ler .env em %s: %s", p, exc)
        return {}
    return result


def _merge_env_items(env_path: Path) -> dict:
    """Retorna um mapeamento combinado de `.env` e env vars do processo."""
    env_items = _read_env_file(env_path)
    env_items.update(os.environ)
    return env_items


# ========================
# 3. Validação
# ========================


def validate_settings(settings: dict) -> dict:
    """Normaliza e valida o dicionário de configurações.

    Chaves ausentes recebem o default; tipos errados levantam ValueError.
    """
    if not isinstance(settings, dict):
        raise TypeError("settings deve ser um dict")
    for key, default in DEFAULT_SETTINGS.items():
        settings.setdefault(key, default)

    try:
        settings["port"] = int(settings["port"])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"porta deve ser um inteiro: {settings['port']!r}") from exc
    _check_port(settings["port"])

    level = str(settings["log_level"]).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"nível de log desconhecido: {settings['log_level']!r}")
    settings["log_level"] = level

    settings["collectors"] = parse_collector_list(settings["collectors"])
    settings["threaded"] = bool(settings["threaded"])
    logger.debug("Configurações validadas e normalizadas")
    return settings
