"""Registry de coletores e política de invocação por scrape.

Cada coletor é invocado uma vez por scrape, na ordem de registro. Falhas
ficam isoladas no coletor que falhou: ele contribui com zero amostras e
os demais seguem normalmente.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Protocol, Union, runtime_checkable

from .encoder import encode
from .sample import MetricSample
from ..system.logs import COLLECTOR_ERROR_TAG, COLLECTOR_TAG, LogSink


@dataclass(frozen=True)
class Diagnostic:
    """Saída não-métrica de um coletor, encaminhada ao log com a tag ``[Collector]``."""

    message: str

    def __str__(self) -> str:
        return str(self.message)


MetricOutput = Union[MetricSample, Diagnostic]


@runtime_checkable
class Collector(Protocol):
    """Objeto com ``collect()`` sem argumentos que produz ``MetricOutput``."""

    def collect(self) -> Iterable[MetricOutput]: ...


CollectorLike = Union[Collector, Callable[[], Any]]


def collector_name(collector) -> str:
    """Nome legível de um coletor para mensagens de log."""
    for attr in ("name", "__qualname__", "__name__"):
        value = getattr(collector, attr, None)
        if isinstance(value, str) and value:
            return value
    return type(collector).__name__


def _invoke(collector) -> list:
    """Invoca o coletor e materializa a saída (geradores são consumidos aqui)."""
    if isinstance(collector, Collector):
        produced = collector.collect()
    else:
        produced = collector()
    if produced is None:
        return []
    if isinstance(produced, (MetricSample, Diagnostic, str, bytes)):
        return [produced]
    return list(produced)


class CollectorRegistry:
    """Lista ordenada de coletores registrados."""

    def __init__(self, sink: LogSink | None = None):
        self.sink = sink or LogSink()
        self._collectors: list = []
        self._lock = threading.Lock()

    def register(self, collector: CollectorLike) -> CollectorLike:
        """Acrescenta um coletor ao fim da lista; retorna o próprio coletor.

        Não deduplica nem limita. O retorno permite uso como decorator.
        """
        if not callable(collector) and not isinstance(collector, Collector):
            raise TypeError(f"coletor deve ser chamável ou ter collect(): {collector!r}")
        with self._lock:
            self._collectors.append(collector)
        return collector

    @property
    def collectors(self) -> tuple:
        with self._lock:
            return tuple(self._collectors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._collectors)

    def collect(self) -> list[MetricSample]:
        """Invoca todos os coletores e devolve as amostras na ordem produzida.

        Ordem: ordem de registro, depois ordem de emissão de cada coletor.
        Itens que não são ``MetricSample`` vão para o log como diagnóstico.
        """
        samples: list[MetricSample] = []
        for collector in self.collectors:
            try:
                outputs = _invoke(collector)
            except Exception as exc:
                self.sink.error(
                    f"{collector_name(collector)}: {type(exc).__name__}: {exc}",
                    tag=COLLECTOR_ERROR_TAG,
                    exc_info=exc,
                )
                continue
            for item in outputs:
                if isinstance(item, MetricSample):
                    samples.append(item)
                else:
                    self.sink.write(item, tag=COLLECTOR_TAG, level=logging.INFO)
        return samples

    def collect_all(self) -> str:
        """Executa um ciclo completo de coleta e devolve o documento de exposição."""
        return encode(self.collect())
