"""Coletor de métricas do próprio processo do exporter (via psutil)."""

import logging
import time

import psutil

from ..exporter import MetricDescriptor, MetricSample, MetricType

logger = logging.getLogger(__name__)

CPU_PERCENT = MetricDescriptor("process_cpu_percent", MetricType.GAUGE, "CPU usada pelo processo (%)")
MEMORY_PERCENT = MetricDescriptor("process_memory_percent", MetricType.GAUGE, "Memória usada pelo processo (%)")
MEMORY_RSS = MetricDescriptor(
    "process_memory_rss_bytes", MetricType.GAUGE, "Memória residente (RSS) do processo em bytes"
)
UPTIME = MetricDescriptor("process_uptime_seconds", MetricType.GAUGE, "Tempo desde o início do processo em segundos")
NUM_THREADS = MetricDescriptor("process_num_threads", MetricType.GAUGE, "Número de threads do processo")
NUM_FDS = MetricDescriptor("process_num_fds", MetricType.GAUGE, "Descritores de ficheiro abertos")


def collect_process_metrics(proc: psutil.Process | None = None) -> list:
    """Coleta métricas do processo em tempo real.

    ``process_num_fds`` só é emitida em plataformas que expõem ``num_fds``.
    """
    proc = proc or psutil.Process()
    samples = [
        MetricSample(CPU_PERCENT, proc.cpu_percent(interval=0.0)),
        MetricSample(MEMORY_PERCENT, proc.memory_percent()),
        MetricSample(MEMORY_RSS, getattr(proc.memory_info(), "rss", 0)),
        MetricSample(UPTIME, max(0.0, time.time() - proc.create_time())),
        MetricSample(NUM_THREADS, proc.num_threads()),
    ]
    num_fds_fn = getattr(proc, "num_fds", None)
    if callable(num_fds_fn):
        try:
            samples.append(MetricSample(NUM_FDS, num_fds_fn()))
        except (psutil.Error, OSError) as exc:
            logger.debug("Falha ao obter número de descritores de ficheiros: %s", exc, exc_info=True)
    return samples
