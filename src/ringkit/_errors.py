"""ringkit._errors
==================
Иерархия исключений ringkit.

Каждое исключение одновременно наследует `RingkitError` и ближайший
встроенный класс, поэтому обычные обработчики (`except ZeroDivisionError`,
`except TypeError`, ...) продолжают работать.
"""

__all__ = [
    "RingkitError",
    "DivisionByZeroError",
    "CompatibilityError",
    "IncompatibleParentsError",
    "IncompatibleModuliError",
    "NonInvertibleError",
    "NotExactDivisionError",
    "NotASquareError",
    "DomainError",
]


class RingkitError(Exception):
    """Базовый класс для всех ошибок ringkit."""


class DivisionByZeroError(RingkitError, ZeroDivisionError):
    """Нулевой модуль или деление на точный ноль."""


class CompatibilityError(RingkitError, TypeError):
    """Значение не принадлежит ожидаемому кольцу."""


class IncompatibleParentsError(CompatibilityError):
    """Операнды бинарной операции принадлежат разным родителям."""


class IncompatibleModuliError(IncompatibleParentsError):
    """Операнды из колец вычетов с разными модулями."""


class NonInvertibleError(RingkitError, ArithmeticError):
    """Элемент не является обратимым."""


class NotExactDivisionError(RingkitError, ArithmeticError):
    """Деление не является точным."""


class NotASquareError(RingkitError, ArithmeticError):
    """Квадратный корень не существует на данной точности."""


class DomainError(RingkitError, ValueError):
    """Аргумент вне области определения (отрицательный сдвиг, точность, степень)."""

    def __init__(self, value, message: str):
        super().__init__(f"{message}: {value!r}")
        self.value = value
