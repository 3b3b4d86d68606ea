"""Encoder do formato de exposição em texto (Prometheus 0.0.4).

O agrupamento é por adjacência e por identidade do descritor: não ordena,
não remove duplicatas e não valida. Se amostras do mesmo descritor não
estiverem contíguas, o bloco HELP/TYPE se repete na saída.
"""

from typing import Iterable

from .sample import MetricSample

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def encode(samples: Iterable[MetricSample]) -> str:
    """Renderiza as amostras na ordem recebida, unidas por ``\\n``."""
    lines: list[str] = []
    previous = None
    for sample in samples:
        descriptor = sample.descriptor
        if descriptor is not previous:
            lines.append(descriptor.help_line())
            lines.append(descriptor.type_line())
            previous = descriptor
        lines.append(sample.render())
    return "\n".join(lines)
