"""Erros de validação do modelo de métricas.

Todos derivam de ``ValidationError`` (que por sua vez é um ``ValueError``),
para que chamadores possam capturar qualquer falha de construção de
descritores ou amostras com um único ``except``.
"""


class ValidationError(ValueError):
    """Falha de validação em tempo de construção."""


class InvalidIdentifier(ValidationError):
    """Nome de métrica ou de label fora do padrão ``[a-zA-Z_][a-zA-Z0-9_]*``."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"identificador inválido: {identifier!r}")


class LabelCountMismatch(ValidationError):
    """Quantidade de valores de label difere da quantidade de nomes do descritor."""

    def __init__(self, name: str, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{name}: esperados {expected} valores de label, recebidos {actual}")


class InvalidMetricType(ValidationError):
    """Tipo de métrica desconhecido."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"tipo de métrica inválido: {value!r}")


class InvalidValue(ValidationError):
    """Valor de amostra não conversível para float."""

    def __init__(self, name: str, value):
        self.value = value
        super().__init__(f"{name}: valor não numérico {value!r}")
