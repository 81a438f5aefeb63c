"""ringkit._series
==================
Кольца усечённых степенных рядов с моделью точности «capped absolute».

Элемент хранит плотный массив коэффициентов (`numpy.ndarray`, dtype=object),
длину `length` (индекс после последнего ненулевого коэффициента) и
абсолютную точность `prec`: коэффициенты начиная со степени `prec`
неизвестны (а не равны нулю). Всегда `length <= prec <= max_precision`.

Каждая операция выводит точность результата по фиксированной формуле:

* сложение/вычитание:  min(a.prec, b.prec)
* умножение:           min(a.prec + val(b), b.prec + val(a), max_precision)
* степень a**e:        a.prec + (e-1)*val(a), не больше max_precision
* деление, обращение, корень: см. соответствующие функции
"""

from __future__ import annotations

import copy
import warnings
from fractions import Fraction
from typing import Optional, Sequence, Tuple

import numpy as np
from mpmath.libmp import int_types

from . import _inplace
from . import _truncated as trunc
from ._config import get_option
from ._errors import (
    CompatibilityError,
    DivisionByZeroError,
    DomainError,
    IncompatibleParentsError,
    NonInvertibleError,
    NotASquareError,
    NotExactDivisionError,
)
from ._integers import parent_of
from ._registry import PARENTS
from ._ring import Parent, RingElement, coerces

__all__ = [
    "AbsPowerSeriesRing",
    "AbsSeries",
    "make_power_series_ring",
    "PowerSeriesRing",
    "AbsSeriesRing",
    "abs_series",
    "O",
]

_MODELS = ("capped_relative", "capped_absolute")


class AbsPowerSeriesRing(Parent):
    """
    Кольцо рядов `base_ring[[var]]` с ограничением точности `max_precision`.

    Прямой вызов конструктора создаёт некешированного родителя; для
    кешированного используйте `make_power_series_ring`.
    """

    def __init__(self, base_ring: Parent, max_precision: int, var: str = "x"):
        if max_precision < 0:
            raise DomainError(max_precision, "Precision must be non-negative")
        self.base_ring = base_ring
        self.max_precision = int(max_precision)
        self.var = str(var)
        self._set_key((base_ring, self.max_precision, self.var))

    def __repr__(self):
        return f"Univariate power series ring in {self.var} over {self.base_ring!r}"

    # -------- конструирование элементов --------
    def _element(self, coeffs: np.ndarray, length: int, prec: int) -> "AbsSeries":
        """Оборачивает массив, нормализуя длину. Массив не копируется."""
        return AbsSeries(self, coeffs, trunc.normalise(coeffs, length, self.base_ring), prec)

    def _constant(self, c, prec: int) -> "AbsSeries":
        return self._element(np.array([c], dtype=object), 1, prec)

    def _construct(self, coeffs: Sequence, length: int, prec: int) -> "AbsSeries":
        """Элемент из списка коэффициентов: `R(coeffs, length, prec)`."""
        if prec < length:
            raise ValueError("Precision too small for given data")
        if prec > self.max_precision:
            raise DomainError(prec, f"Precision exceeds the ring maximum {self.max_precision}")
        if length > len(coeffs):
            raise ValueError("Length exceeds the number of coefficients")
        arr = trunc.from_values(list(coeffs)[:length], self.base_ring)
        return self._element(arr, length, prec)

    @coerces(*int_types)
    def _from_int(self, value):
        return self._constant(self.base_ring(value), self.max_precision)

    @coerces(RingElement, Fraction)
    def _from_base(self, value):
        if parent_of(value) != self.base_ring:
            raise CompatibilityError("Unable to coerce power series")
        return self._constant(value, self.max_precision)

    def zero(self) -> "AbsSeries":
        return AbsSeries(self, trunc.zeros(0, self.base_ring), 0, self.max_precision)

    def one(self) -> "AbsSeries":
        return self._constant(self.base_ring.one(), self.max_precision)

    def gen(self) -> "AbsSeries":
        """Образующая `x`; при max_precision < 2 усечена до своей точности."""
        R = self.base_ring
        n = min(2, self.max_precision)
        coeffs = np.array([R.zero(), R.one()], dtype=object)[:n]
        return self._element(coeffs, n, self.max_precision)

    def characteristic(self) -> int:
        return self.base_ring.characteristic()

    # -------- протокол кольца коэффициентов (ряды над рядами) --------
    def is_zero(self, a: "AbsSeries") -> bool:
        return a.is_zero()

    def is_one(self, a: "AbsSeries") -> bool:
        return a.is_one()

    def is_unit(self, a: "AbsSeries") -> bool:
        return a.is_unit()

    def inv(self, a: "AbsSeries") -> "AbsSeries":
        return a.inv()


class AbsSeries(RingElement):
    """Усечённый степенной ряд с абсолютной точностью."""

    __slots__ = ("coeffs", "length", "prec")

    # Ряды неизвестны за пределами точности, поэтому `==` не транзитивно
    # и согласованного хеша нет
    __hash__ = None

    def __init__(self, parent: AbsPowerSeriesRing, coeffs: np.ndarray, length: int, prec: int):
        self.parent = parent
        self.coeffs = coeffs
        self.length = length
        self.prec = prec

    def _check_parent(self, other: "AbsSeries") -> None:
        if self.parent is not other.parent:
            raise IncompatibleParentsError("Incompatible power series rings in series operation")

    def _is_scalar(self, other) -> bool:
        if isinstance(other, RingElement):
            return other.parent == self.base_ring
        try:
            return parent_of(other) == self.base_ring or isinstance(other, int_types)
        except TypeError:
            return False

    # -------- базовые свойства --------
    @property
    def max_precision(self) -> int:
        return self.parent.max_precision

    def precision(self) -> int:
        return self.prec

    def coeff(self, n: int):
        """Коэффициент при `x**n` (ноль вне диапазона `[0, length)`)."""
        if n < 0 or n >= self.length:
            return self.base_ring.zero()
        return self.coeffs[n]

    def coefficients(self) -> list:
        return list(self.coeffs[:self.length])

    def valuation(self) -> int:
        """Индекс первого ненулевого коэффициента, либо `prec`, если все известные нулевые."""
        R = self.base_ring
        for i in range(self.length):
            if not R.is_zero(self.coeffs[i]):
                return i
        return self.prec

    def is_zero(self) -> bool:
        return self.length == 0

    def is_one(self) -> bool:
        return self.prec == 0 or (self.length == 1 and self.base_ring.is_one(self.coeffs[0]))

    def is_gen(self) -> bool:
        R = self.base_ring
        return self.prec == 0 or (
            self.length == 2 and R.is_zero(self.coeffs[0]) and R.is_one(self.coeffs[1])
        )

    def is_unit(self) -> bool:
        return self.valuation() == 0 and self.base_ring.is_unit(self.coeff(0))

    def set_precision(self, prec: int) -> "AbsSeries":
        """Копия с точностью ровно `prec` (коэффициенты усекаются при необходимости)."""
        if prec < 0:
            raise DomainError(prec, "Precision must be non-negative")
        if prec > self.max_precision:
            raise DomainError(prec, f"Precision exceeds the ring maximum {self.max_precision}")
        length = min(self.length, prec)
        return self.parent._element(self.coeffs[:length].copy(), length, prec)

    def __deepcopy__(self, memo):
        coeffs = np.array([copy.deepcopy(c, memo) for c in self.coeffs[:self.length]], dtype=object)
        return AbsSeries(self.parent, coeffs, self.length, self.prec)

    def __repr__(self):
        terms = []
        for i in range(self.length):
            c = self.coeffs[i]
            if self.base_ring.is_zero(c):
                continue
            if i == 0:
                terms.append(f"{c}")
            elif i == 1:
                terms.append(f"({c})*{self.parent.var}")
            else:
                terms.append(f"({c})*{self.parent.var}^{i}")
        terms.append(f"O({self.parent.var}^{self.prec})")
        return " + ".join(terms)

    # -------- унарные операции --------
    def __neg__(self):
        return self.parent._element(-self.coeffs[:self.length], self.length, self.prec)

    def __pos__(self):
        return self

    # -------- сложение и вычитание --------
    def __add__(self, other):
        b = self._operand(other)
        if b is NotImplemented:
            return self._reflected(other, "__radd__")
        other = b
        prec = min(self.prec, other.prec)
        lena = min(self.length, prec)
        lenb = min(other.length, prec)
        lenz = max(lena, lenb)
        coeffs = trunc.add(self.coeffs, lena, other.coeffs, lenb, lenz, self.base_ring)
        return self.parent._element(coeffs, lenz, prec)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        b = self._operand(other)
        if b is NotImplemented:
            return self._reflected(other, "__rsub__")
        other = b
        prec = min(self.prec, other.prec)
        lena = min(self.length, prec)
        lenb = min(other.length, prec)
        lenz = max(lena, lenb)
        coeffs = trunc.sub(self.coeffs, lena, other.coeffs, lenb, lenz, self.base_ring)
        return self.parent._element(coeffs, lenz, prec)

    def __rsub__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return other.__sub__(self)

    # -------- умножение --------
    def __mul__(self, other):
        if self._is_scalar(other):
            return self._scalar_mul(self.base_ring(other))
        b = self._operand(other)
        if b is NotImplemented:
            return self._reflected(other, "__rmul__")
        return _mul(self, b)

    def __rmul__(self, other):
        return self.__mul__(other)

    def _scalar_mul(self, c) -> "AbsSeries":
        """Умножение на скаляр базового кольца; точность не меняется."""
        coeffs = self.coeffs[:self.length] * c
        return self.parent._element(coeffs, self.length, self.prec)

    # -------- степень --------
    def __pow__(self, b: int):
        if not isinstance(b, int_types):
            return NotImplemented
        if b < 0:
            raise DomainError(b, "Exponent must be non-negative")
        parent = self.parent
        if self.prec > 0 and self.is_gen() and b > 0:
            return shift_left(self, b - 1)
        if self.length == 1:
            return parent._constant(self.coeffs[0] ** b, self.prec)
        if b == 0:
            return parent.one().set_precision(self.prec)
        prec = min(self.prec + (b - 1) * self.valuation(), self.max_precision)
        return truncate(_pow_by_squaring(self, b), prec)

    # -------- сравнение --------
    def __eq__(self, other):
        if self._is_scalar(other):
            return self._equals_scalar(self.base_ring(other))
        try:
            other = self._operand(other)
        except CompatibilityError:
            if isinstance(other, RingElement):
                raise
            return NotImplemented
        if other is NotImplemented:
            return other
        prec = min(self.prec, other.prec)
        n = min(max(self.length, other.length), prec)
        a = trunc.padded(self.coeffs, self.length, n, self.base_ring)
        b = trunc.padded(other.coeffs, other.length, n, self.base_ring)
        return bool(np.all(a == b))

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def _equals_scalar(self, c) -> bool:
        if self.length > 1:
            return False
        if self.length == 1:
            return self.coeffs[0] == c
        return self.prec == 0 or self.base_ring.is_zero(c)

    # -------- деление --------
    def __truediv__(self, other):
        if self._is_scalar(other):
            return divexact_scalar(self, self.base_ring(other))
        b = self._operand(other)
        if b is NotImplemented:
            return self._reflected(other, "__rtruediv__")
        return divexact(self, b)

    def __rtruediv__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return divexact(other, self)

    def inv(self) -> "AbsSeries":
        """Обратный ряд на собственной точности ряда."""
        if self.is_zero():
            raise DivisionByZeroError("cannot invert the zero series")
        if not self.is_unit():
            raise NonInvertibleError("Unable to invert power series")
        coeffs = trunc.inv_series(self.coeffs, self.length, self.prec, self.base_ring)
        return self.parent._element(coeffs, self.prec, self.prec)

    def sqrt(self, check: Optional[bool] = None) -> "AbsSeries":
        """
        Квадратный корень на точности `prec - val//2`.

        При `check=False` отсутствие корня НЕ приводит к ошибке: возвращается
        частичный (неопределённый) результат и выдаётся RuntimeWarning.
        Для гарантированно корректного результата используйте проверку.
        """
        if check is None:
            check = get_option("check_sqrt")
        R = self.base_ring
        v = self.valuation()
        prec = self.prec - v // 2
        if self.is_zero():
            return AbsSeries(self.parent, trunc.zeros(0, R), 0, prec)
        if v % 2 == 1:
            ok, coeffs, n = False, trunc.zeros(0, R), 0
        else:
            n = self.prec - v
            ok, coeffs = trunc.sqrt_series(self.coeffs[v:], self.length - v, n, R)
        if not ok:
            if check:
                raise NotASquareError("Not a square")
            warnings.warn("sqrt: series is not a square at this precision, result is undefined",
                          RuntimeWarning, stacklevel=2)
        half = v // 2
        full = np.concatenate([trunc.zeros(half, R), coeffs])[:prec]
        return self.parent._element(full, min(half + n, prec), prec)


# -----------------------------------------------------------------------------
# Операции над рядами
# -----------------------------------------------------------------------------

def _mul_prec(a: AbsSeries, b: AbsSeries, cap: int) -> int:
    return min(a.prec + b.valuation(), b.prec + a.valuation(), cap)


def _mul(a: AbsSeries, b: AbsSeries) -> AbsSeries:
    prec = _mul_prec(a, b, a.max_precision)
    lena = min(a.length, prec)
    lenb = min(b.length, prec)
    if lena == 0 or lenb == 0:
        return AbsSeries(a.parent, trunc.zeros(0, a.base_ring), 0, prec)
    lenz = min(lena + lenb - 1, prec)
    coeffs = trunc.mullow(a.coeffs, lena, b.coeffs, lenb, lenz, a.base_ring)
    return a.parent._element(coeffs, lenz, prec)


def _pow_by_squaring(a: AbsSeries, b: int) -> AbsSeries:
    """
    Возведение в степень `b >= 1` повторным возведением в квадрат.

    Накопление идёт через in-place API на приватных временных рядах;
    `dst` никогда не совпадает с операндами `mul_into`.
    """
    parent = a.parent
    result = parent.one().set_precision(a.prec)
    base = AbsSeries(parent, a.coeffs[:a.length].copy(), a.length, a.prec)
    tmp = parent()
    while True:
        if b & 1:
            _inplace.mul_into(tmp, result, base)
            result, tmp = tmp, result
        b >>= 1
        if not b:
            return result
        _inplace.mul_into(tmp, base, base)
        base, tmp = tmp, base


def shift_left(a: AbsSeries, n: int) -> AbsSeries:
    """Умножение на `x**n`; точность растёт на `n` (не выше max_precision)."""
    if n < 0:
        raise DomainError(n, "Shift must be non-negative")
    R = a.base_ring
    prec = min(a.prec + n, a.max_precision)
    zlen = min(prec, a.length + n)
    coeffs = np.concatenate([trunc.zeros(n, R), a.coeffs[:a.length]])[:zlen]
    return a.parent._element(coeffs, zlen, prec)


def shift_right(a: AbsSeries, n: int) -> AbsSeries:
    """Деление на `x**n` с отбрасыванием младших коэффициентов; точность падает на `n`."""
    if n < 0:
        raise DomainError(n, "Shift must be non-negative")
    if n >= a.length:
        return AbsSeries(a.parent, trunc.zeros(0, a.base_ring), 0, max(0, a.prec - n))
    return a.parent._element(a.coeffs[n:a.length].copy(), a.length - n, a.prec - n)


def truncate(a: AbsSeries, prec: int) -> AbsSeries:
    """Усечение до точности `prec`; при `prec >= a.prec` возвращает сам `a`."""
    if prec < 0:
        raise DomainError(prec, "Index must be non-negative")
    if a.prec <= prec:
        return a
    length = min(a.length, prec)
    return a.parent._element(a.coeffs[:length].copy(), length, prec)


def valuation(a: AbsSeries) -> int:
    return a.valuation()


def isequal(a: AbsSeries, b: AbsSeries) -> bool:
    """Точное структурное равенство: родитель, точность, длина и все коэффициенты."""
    if a.parent != b.parent:
        return False
    if a.prec != b.prec or a.length != b.length:
        return False
    return bool(np.all(a.coeffs[:a.length] == b.coeffs[:b.length]))


def _unchecked(what: str) -> None:
    warnings.warn(f"{what}: division is not exact, result is undefined", RuntimeWarning, stacklevel=3)


def divexact(a: AbsSeries, b: AbsSeries, check: Optional[bool] = None) -> AbsSeries:
    """
    Точное деление рядов `a / b`.

    Если `val(b) = v > 0`, оба ряда сдвигаются вправо на `v`; при проверке
    (`check=True`) требуется `val(a) >= v`. Точность результата:
    `min(a'.prec, b'.prec - v + val(a))` для сдвинутых `a'`, `b'`.

    `check=False` подавляет NotExactDivisionError: результат тогда
    не определён (выдаётся RuntimeWarning).
    """
    if check is None:
        check = get_option("check_exact")
    a._check_parent(b)
    if b.is_zero():
        raise DivisionByZeroError("division by the zero series")
    v2 = b.valuation()
    v1 = a.valuation()
    if v2 != 0:
        if check and v1 < v2:
            raise NotExactDivisionError("Not an exact division")
        a = shift_right(a, v2)
        b = shift_right(b, v2)
    prec = max(0, min(a.prec, b.prec - v2 + v1))
    ok, coeffs = trunc.div_series(a.coeffs, min(a.length, prec), b.coeffs, b.length, prec, a.base_ring)
    if not ok:
        if check:
            raise NotExactDivisionError("Not an exact division")
        _unchecked("divexact")
    return a.parent._element(coeffs, prec, prec)


def divexact_scalar(a: AbsSeries, c, check: Optional[bool] = None) -> AbsSeries:
    """Покоэффициентное точное деление на скаляр базового кольца."""
    if check is None:
        check = get_option("check_exact")
    R = a.base_ring
    if R.is_zero(c):
        raise DivisionByZeroError("division by zero")
    coeffs = trunc.zeros(a.length, R)
    exact = True
    for i in range(a.length):
        ok, q = R.divides(a.coeffs[i], c)
        exact = exact and ok
        coeffs[i] = q
    if not exact:
        if check:
            raise NotExactDivisionError("Not an exact division")
        _unchecked("divexact")
    return a.parent._element(coeffs, a.length, a.prec)


def O(a: AbsSeries) -> AbsSeries:
    """Член «O-большое»: нулевой ряд с точностью `length(a) - 1`."""
    if a.is_zero():
        return copy.deepcopy(a)
    prec = a.length - 1
    if prec < 0:
        raise DomainError(prec, "Precision must be non-negative")
    return AbsSeries(a.parent, trunc.zeros(0, a.base_ring), 0, prec)


# -----------------------------------------------------------------------------
# Конструкторы колец
# -----------------------------------------------------------------------------

def make_power_series_ring(
    base_ring: Parent,
    max_precision: int,
    var: str = "x",
    model: Optional[str] = None,
    cached: Optional[bool] = None,
) -> Tuple[AbsPowerSeriesRing, AbsSeries]:
    """
    Возвращает `(кольцо, образующая)`.

    Поддерживается только модель `capped_absolute`. Модель
    `capped_relative` хранит относительную точность (число известных
    членов после валюации) вместо абсолютной и здесь не реализована.
    """
    if model is None:
        model = get_option("series_model")
    if model not in _MODELS:
        raise ValueError(f"Unknown model: {model!r}")
    if model == "capped_relative":
        raise NotImplementedError(
            "capped_relative series track precision relative to the valuation; "
            "only the capped_absolute model is implemented"
        )
    if cached is None:
        cached = get_option("cache_parents")
    if max_precision < 0:
        raise DomainError(max_precision, "Precision must be non-negative")
    key = ("abs_series", base_ring, int(max_precision), str(var))
    parent = PARENTS.get_or_create(
        key, lambda: AbsPowerSeriesRing(base_ring, max_precision, var), cached=cached
    )
    return parent, parent.gen()


PowerSeriesRing = make_power_series_ring


def AbsSeriesRing(base_ring: Parent, prec: int) -> AbsPowerSeriesRing:
    """Некешированное кольцо рядов от переменной `x`."""
    return AbsPowerSeriesRing(base_ring, prec, "x")


def abs_series(
    base_ring: Parent,
    coeffs: Sequence,
    length: int,
    prec: int,
    var: str = "x",
    max_precision: Optional[int] = None,
    cached: Optional[bool] = None,
) -> AbsSeries:
    """Строит кольцо (через реестр) и элемент с данными коэффициентами."""
    if prec < length:
        raise ValueError("Precision too small for given data")
    if max_precision is None:
        max_precision = prec
    parent, _ = make_power_series_ring(base_ring, max_precision, var, cached=cached)
    return parent(coeffs, length, prec)


# -----------------------------------------------------------------------------
# Небезопасные in-place операции (см. ringkit._inplace)
# -----------------------------------------------------------------------------

@_inplace.zero_out.register(AbsSeries)
def _series_zero_out(z: AbsSeries) -> AbsSeries:
    z.coeffs = trunc.zeros(0, z.base_ring)
    z.length = 0
    z.prec = z.max_precision
    return z


@_inplace.mul_into.register(AbsSeries)
def _series_mul_into(z: AbsSeries, a: AbsSeries, b: AbsSeries) -> AbsSeries:
    a._check_parent(b)
    prec = _mul_prec(a, b, z.max_precision)
    lena = min(a.length, prec)
    lenb = min(b.length, prec)
    lenz = max(0, min(lena + lenb - 1, prec))
    R = z.base_ring
    z.coeffs = trunc.mullow(a.coeffs, lena, b.coeffs, lenb, lenz, R)
    z.length = trunc.normalise(z.coeffs, lenz, R)
    z.prec = prec
    return z


@_inplace.add_into.register(AbsSeries)
def _series_add_into(z: AbsSeries, a: AbsSeries, b: AbsSeries) -> AbsSeries:
    a._check_parent(b)
    prec = min(a.prec, b.prec)
    lena = min(a.length, prec)
    lenb = min(b.length, prec)
    lenz = max(lena, lenb)
    R = z.base_ring
    z.coeffs = trunc.add(a.coeffs, lena, b.coeffs, lenb, lenz, R)
    z.length = trunc.normalise(z.coeffs, lenz, R)
    z.prec = prec
    return z


@_inplace.add_assign.register(AbsSeries)
def _series_add_assign(a: AbsSeries, b: AbsSeries) -> AbsSeries:
    return _series_add_into(a, a, b)


@_inplace.set_coeff.register(AbsSeries)
def _series_set_coeff(z: AbsSeries, n: int, c) -> AbsSeries:
    if n < 0:
        raise DomainError(n, "Index must be non-negative")
    if n >= z.prec:
        raise DomainError(n, f"Index beyond the series precision {z.prec}")
    R = z.base_ring
    c = R(c)
    if n >= len(z.coeffs):
        grown = trunc.zeros(n + 1, R)
        grown[:z.length] = z.coeffs[:z.length]
        z.coeffs = grown
    z.coeffs[n] = c
    z.length = trunc.normalise(z.coeffs, max(z.length, n + 1), R)
    return z
