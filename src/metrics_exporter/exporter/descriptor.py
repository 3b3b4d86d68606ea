"""Descritores de métricas: identidade e validação de uma família.

Um ``MetricDescriptor`` é criado uma vez (pelo bootstrap ou por um coletor),
validado na construção e tratado como imutável a partir daí. Amostras de
vários scrapes podem compartilhar o mesmo descritor.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from .errors import InvalidIdentifier, InvalidMetricType

IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_NEWLINES_RE = re.compile(r"[\r\n]+")


class MetricType(str, Enum):
    """Tipos aceitos na linha ``# TYPE``."""

    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    SUMMARY = "summary"

    def __str__(self) -> str:
        return self.value


def validate_identifier(value) -> str:
    """Retorna ``value`` se for um identificador válido; senão levanta ``InvalidIdentifier``."""
    if not isinstance(value, str) or not IDENTIFIER_RE.match(value):
        raise InvalidIdentifier(value)
    return value


def normalize_help(text) -> str:
    """Colapsa cada sequência de ``\\r``/``\\n`` em um único espaço."""
    if text is None:
        return ""
    return _NEWLINES_RE.sub(" ", str(text))


def _coerce_type(value) -> MetricType:
    if isinstance(value, MetricType):
        return value
    try:
        return MetricType(str(value).lower())
    except ValueError as exc:
        raise InvalidMetricType(value) from exc


# eq=False: duas instâncias com os mesmos campos continuam sendo famílias distintas
@dataclass(frozen=True, eq=False)
class MetricDescriptor:
    """Identidade e metadados de uma família de métricas.

    Atributos:
        name: nome da métrica (validado).
        type: ``MetricType``; aceita também a string correspondente.
        help: texto de ajuda em linha única.
        label_names: nomes de labels, em ordem (tupla, pode ser vazia).

    A comparação é por identidade: o encoder agrupa amostras adjacentes
    que apontam para o *mesmo objeto* descritor.
    """

    name: str
    type: MetricType
    help: str = ""
    label_names: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self):
        validate_identifier(self.name)
        label_names = tuple(self.label_names or ())
        for label in label_names:
            validate_identifier(label)
        # frozen: ajustes normalizados passam por object.__setattr__
        object.__setattr__(self, "label_names", label_names)
        object.__setattr__(self, "type", _coerce_type(self.type))
        object.__setattr__(self, "help", normalize_help(self.help))

    def help_line(self) -> str:
        return f"# HELP {self.name} {self.help}"

    def type_line(self) -> str:
        return f"# TYPE {self.name} {self.type.value}"
