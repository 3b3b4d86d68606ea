"""Amostras de métricas e sua renderização em linha de exposição."""

import math
from dataclasses import dataclass, field
from typing import Sequence

from .descriptor import MetricDescriptor
from .errors import InvalidValue, LabelCountMismatch

# Acima disso floats inteiros passam a usar notação científica do repr
_INT_RENDER_LIMIT = 1e15


def escape_label_value(value: str) -> str:
    """Escapa barra invertida, aspas duplas e quebra de linha."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_value(value: float) -> str:
    """Converte um float para um literal numérico aceito pelo Prometheus.

    Inteiros finitos saem sem parte fracionária (``1``, ``-3``); os demais
    usam o ``repr`` mais curto que faz round-trip (``0.5``, ``1e+20``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < _INT_RENDER_LIMIT:
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class MetricSample:
    """Uma observação: valor + valores de label de um descritor.

    Criada a cada invocação de coletor e descartada após o encoding.
    """

    descriptor: MetricDescriptor
    value: float
    label_values: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self):
        label_values = tuple(str(v) for v in (self.label_values or ()))
        expected = len(self.descriptor.label_names)
        if len(label_values) != expected:
            raise LabelCountMismatch(self.descriptor.name, expected, len(label_values))
        if isinstance(self.value, bool):
            value = 1.0 if self.value else 0.0
        else:
            try:
                value = float(self.value)
            except (TypeError, ValueError) as exc:
                raise InvalidValue(self.descriptor.name, self.value) from exc
        object.__setattr__(self, "label_values", label_values)
        object.__setattr__(self, "value", value)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def labels(self) -> dict:
        """Mapeamento nome -> valor das labels (conveniência para testes e debug)."""
        return dict(zip(self.descriptor.label_names, self.label_values))

    def render(self) -> str:
        """Renderiza ``name{l1="v1",l2="v2"} value``; sem chaves quando não há labels."""
        if self.label_values:
            pairs = ",".join(
                f'{k}="{escape_label_value(v)}"' for k, v in zip(self.descriptor.label_names, self.label_values)
            )
            return f"{self.descriptor.name}{{{pairs}}} {format_value(self.value)}"
        return f"{self.descriptor.name} {format_value(self.value)}"
