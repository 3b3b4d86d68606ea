"""Coletor de métricas do host: CPU, memória, disco e load average."""

import logging
import os

import psutil

from ..exporter import Diagnostic, MetricDescriptor, MetricSample, MetricType

logger = logging.getLogger(__name__)

CPU_PERCENT = MetricDescriptor("host_cpu_percent", MetricType.GAUGE, "Uso de CPU do host (%)")
MEMORY_PERCENT = MetricDescriptor("host_memory_percent", MetricType.GAUGE, "Uso de memória do host (%)")
DISK_PERCENT = MetricDescriptor(
    "host_disk_percent", MetricType.GAUGE, "Uso de disco por ponto de montagem (%)", ["mountpoint"]
)
LOAD_AVERAGE = MetricDescriptor("host_load_average", MetricType.GAUGE, "Load average do sistema", ["period"])

_LOAD_PERIODS = ("1m", "5m", "15m")


def collect_system_metrics(mountpoints=None):
    """Gera amostras do host.

    Load average só aparece quando ``os.getloadavg`` existe (não há no
    Windows). Pontos de montagem ilegíveis viram ``Diagnostic`` em vez de
    derrubar o coletor inteiro.
    """
    yield MetricSample(CPU_PERCENT, psutil.cpu_percent(interval=None))
    yield MetricSample(MEMORY_PERCENT, psutil.virtual_memory().percent)

    for mountpoint in mountpoints or (os.path.abspath(os.sep),):
        try:
            usage = psutil.disk_usage(mountpoint)
        except (psutil.Error, OSError) as exc:
            yield Diagnostic(f"disk_usage({mountpoint}) indisponível: {exc}")
            continue
        yield MetricSample(DISK_PERCENT, usage.percent, [mountpoint])

    if hasattr(os, "getloadavg"):
        try:
            loads = os.getloadavg()
        except OSError as exc:
            logger.debug("Falha ao obter load averages: %s", exc)
            return
        for period, value in zip(_LOAD_PERIODS, loads):
            yield MetricSample(LOAD_AVERAGE, value, [period])
