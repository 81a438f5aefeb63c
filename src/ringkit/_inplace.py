"""ringkit._inplace
===================
Низкоуровневый API мутации «на месте».

Функции пишут результат в уже существующий элемент `z` вместо создания
нового. Правила точности и длины те же, что у чистых операторов.

ВАЖНО: вызывающий код обязан гарантировать эксклюзивный доступ к `z`:
`z` не должен совпадать с операндом, представляющим другое значение, и
не должен быть виден другим наблюдателям до конца вызова. Внутренней
блокировки нет. Используйте только для приватных временных объектов
(например, накопление в цикле возведения в степень).

Реализации регистрируются модулями колец через
`@mul_into.register(ElementType)` и т.п.
"""

from __future__ import annotations

from functools import singledispatch

__all__ = ["zero_out", "mul_into", "add_into", "add_assign", "set_coeff"]


def _unsupported(name, z):
    return TypeError(f"{name} is not supported for {type(z).__name__}")


@singledispatch
def zero_out(z):
    """Обнуляет `z` на месте и возвращает его."""
    raise _unsupported("zero_out", z)


@singledispatch
def mul_into(z, a, b):
    """Записывает `a*b` в `z` и возвращает `z`."""
    raise _unsupported("mul_into", z)


@singledispatch
def add_into(z, a, b):
    """Записывает `a+b` в `z` и возвращает `z`."""
    raise _unsupported("add_into", z)


@singledispatch
def add_assign(a, b):
    """`a += b` на месте; возвращает `a`."""
    raise _unsupported("add_assign", a)


@singledispatch
def set_coeff(z, n, c):
    """Записывает коэффициент `c` при степени `n` в ряд `z`."""
    raise _unsupported("set_coeff", z)
