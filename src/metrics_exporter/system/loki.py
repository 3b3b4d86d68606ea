"""Encaminhamento de logs para o Loki via HTTP.

Funções principais:
- send_log_to_loki: envia uma linha de log para o endpoint ``/loki/api/v1/push``
- LokiHandler: ``logging.Handler`` que usa send_log_to_loki para cada registro

Ativado apenas quando ``LOKI_URL`` estiver configurada.
"""

import logging
import os
import time

import requests  # type: ignore[import-untyped]

DEFAULT_LOKI_LABELS = "job=metrics_exporter"

logger = logging.getLogger(__name__)


def _parse_labels(labels):
    """Converta rótulos em formato string 'k=v,k2=v2' ou dict para dict com valores string.

    Aceita também strings já no formato '{k="v"}'; retorna um dict {k: v}.
    """
    if labels is None:
        return {}
    if isinstance(labels, dict):
        return {str(k): str(v) for k, v in labels.items()}
    s = str(labels).strip()
    if s.startswith("{") and s.endswith("}"):
        s = s[1:-1].strip()
    parts = [p.strip() for p in s.split(",") if p.strip()]
    out = {}
    for p in parts:
        if "=" in p:
            k, v = p.split("=", 1)
            v = v.strip()
            if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
                v = v[1:-1]
            out[k.strip()] = v
    return out


def send_log_to_loki(message, labels=None, timestamp=None, url=None) -> bool:
    """Envia uma mensagem de log para o Loki.

    Payload aceito pelo endpoint ``/loki/api/v1/push``::

        {"streams": [{"stream": {"k": "v"}, "values": [["<unix_nano>", "linha"]]}]}

    Retorna True em caso de sucesso; falhas de rede são registradas como
    warning e resultam em False.
    """
    url = url or os.getenv("LOKI_URL")
    if not url:
        return False

    if timestamp is None:
        timestamp = str(time.time_ns())
    else:
        timestamp = str(timestamp)

    stream = _parse_labels(labels if labels is not None else os.getenv("LOKI_LABELS", DEFAULT_LOKI_LABELS))
    payload = {"streams": [{"stream": stream, "values": [[timestamp, str(message)]]}]}

    try:
        resp = requests.post(url, json=payload, headers={"Content-Type": "application/json"}, timeout=5)
        resp.raise_for_status()
        return True
    except requests.RequestException as exc:
        logger.warning("Falha ao enviar log para Loki: %s", exc)
        return False


class LokiHandler(logging.Handler):
    """Handler de logging que encaminha cada registro formatado ao Loki."""

    def __init__(self, url: str, labels=None, level=logging.NOTSET):
        super().__init__(level)
        self.url = url
        self.labels = _parse_labels(labels if labels is not None else DEFAULT_LOKI_LABELS)

    def emit(self, record):
        # registros do próprio módulo não são reenviados (evita recursão em falhas)
        if record.name == __name__:
            return
        try:
            ts = str(int(record.created * 1e9))
            send_log_to_loki(self.format(record), labels=self.labels, timestamp=ts, url=self.url)
        except Exception:
            self.handleError(record)
