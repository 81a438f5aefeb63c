"""ringkit._residue
===================
Кольца вычетов R/(m) по главному идеалу.

Элемент хранит каноничный представитель `data`, приведённый по модулю
сразу после каждой операции (никакой ленивой редукции).
"""

from __future__ import annotations

import copy
from fractions import Fraction
from typing import Optional, Tuple

from mpmath.libmp import int_types

from . import _inplace
from ._config import get_option
from ._errors import (
    CompatibilityError,
    DivisionByZeroError,
    DomainError,
    IncompatibleModuliError,
    NonInvertibleError,
    NotASquareError,
)
from ._integers import parent_of
from ._registry import PARENTS
from ._ring import Parent, RingElement, coerces

__all__ = ["ResidueRing", "Residue", "make_residue_ring"]

# Операции, которые базовое кольцо должно предоставлять
_REQUIRED_BASE_OPS = ("reduce", "gcd", "gcdinv", "powmod", "divides", "sqrtmod")


class ResidueRing(Parent):
    """
    Кольцо вычетов `base_ring / (modulus)`.

    Прямой вызов конструктора создаёт некешированного родителя; для
    получения кешированного экземпляра используйте `make_residue_ring`.
    """

    def __init__(self, base_ring: Parent, modulus):
        modulus = self.check_modulus(base_ring, modulus)
        self.base_ring = base_ring
        self.modulus = modulus
        self._set_key((base_ring, modulus))

    @staticmethod
    def check_modulus(base_ring: Parent, modulus):
        """Проверяет базовое кольцо и модуль, возвращает модуль как элемент `base_ring`."""
        missing = [op for op in _REQUIRED_BASE_OPS if not hasattr(base_ring, op)]
        if missing:
            raise CompatibilityError(f"{base_ring!r} does not support residue arithmetic (missing {missing})")
        try:
            owner = parent_of(modulus)
        except TypeError:
            raise CompatibilityError("Modulus is not an element of the specified ring") from None
        if owner != base_ring:
            raise CompatibilityError("Modulus is not an element of the specified ring")
        modulus = base_ring(modulus)
        if base_ring.is_zero(modulus):
            raise DivisionByZeroError("residue ring modulus must be nonzero")
        return modulus

    def __repr__(self):
        return f"Residue ring of {self.base_ring!r} modulo {self.modulus}"

    # -------- конструирование элементов --------
    def _element(self, data) -> "Residue":
        return Residue(self, self.base_ring.reduce(data, self.modulus))

    @coerces(*int_types)
    def _from_int(self, value):
        return self._element(self.base_ring(value))

    @coerces(RingElement, Fraction)
    def _from_base(self, value):
        if isinstance(value, Residue) and value.parent == self:
            # равный, но другой экземпляр родителя: перепривязываем данные
            return Residue(self, value.data)
        if parent_of(value) != self.base_ring:
            raise CompatibilityError("Operation on incompatible objects")
        return self._element(value)

    def zero(self) -> "Residue":
        return Residue(self, self.base_ring.zero())

    def one(self) -> "Residue":
        return self._element(self.base_ring.one())

    def characteristic(self) -> int:
        return int(abs(self.modulus))

    # -------- протокол кольца коэффициентов (для рядов над R/(m)) --------
    def is_zero(self, a: "Residue") -> bool:
        return a.is_zero()

    def is_one(self, a: "Residue") -> bool:
        return a.is_one()

    def is_unit(self, a: "Residue") -> bool:
        return a.is_unit()

    def inv(self, a: "Residue") -> "Residue":
        return a.inv()

    def divides(self, a: "Residue", b: "Residue") -> Tuple[bool, "Residue"]:
        """
        Ищет `q` с `a == b*q`.

        Решение существует, если `g = gcd(b, m)` делит `a`; тогда
        `q = (a/g) * inv(b/g)` по модулю `m/g`.
        """
        if b.is_unit():
            return True, a * b.inv()
        R = self.base_ring
        m = abs(self.modulus)
        g = R.gcd(b.data, m)
        ok, a1 = R.divides(a.data, g)
        if not ok:
            return False, self.zero()
        _, b1 = R.divides(b.data, g)
        _, m1 = R.divides(m, g)
        _, s = R.gcdinv(b1, m1)
        return True, self._element(a1 * s)

    def sqrt(self, a: "Residue") -> Tuple[bool, "Residue"]:
        """Квадратный корень по модулю: `(найден, корень)`."""
        ok, r = self.base_ring.sqrtmod(a.data, self.modulus)
        return ok, self._element(r)


class Residue(RingElement):
    """Элемент кольца вычетов."""

    __slots__ = ("data",)

    def __init__(self, parent: ResidueRing, data):
        self.parent = parent
        self.data = data

    @property
    def modulus(self):
        return self.parent.modulus

    def _check_parent(self, other: "Residue") -> None:
        a, b = self.parent, other.parent
        if a is not b and (a._hash != b._hash or a != b):
            raise IncompatibleModuliError("Incompatible moduli in residue operation")

    def __repr__(self):
        return f"{self.data} (mod {self.parent.modulus})"

    def __hash__(self):
        return hash((self.data, self.parent.modulus))

    def __deepcopy__(self, memo):
        return Residue(self.parent, copy.deepcopy(self.data, memo))

    # -------- предикаты --------
    def is_zero(self) -> bool:
        return self.base_ring.is_zero(self.data)

    def is_one(self) -> bool:
        return self.base_ring.is_one(self.data)

    def is_unit(self) -> bool:
        g, _ = self.base_ring.gcdinv(self.data, self.modulus)
        return g == 1

    def canonical_unit(self) -> "Residue":
        return self

    # -------- арифметика --------
    def __neg__(self):
        return self.parent._element(-self.data)

    def __add__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return self.parent._element(self.data + other.data)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return self.parent._element(self.data - other.data)

    def __rsub__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return self.parent._element(other.data - self.data)

    def __mul__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return self.parent._element(self.data * other.data)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __pow__(self, exponent: int):
        if not isinstance(exponent, int_types):
            return NotImplemented
        if exponent < 0:
            raise DomainError(exponent, "Exponent must be non-negative")
        data = self.base_ring.powmod(self.data, exponent, self.modulus)
        return self.parent._element(data)

    def __truediv__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return divexact(self, other)

    def __rtruediv__(self, other):
        other = self._operand(other)
        if other is NotImplemented:
            return other
        return divexact(other, self)

    # -------- сравнение --------
    def __eq__(self, other):
        try:
            other = self._operand(other)
        except CompatibilityError:
            if isinstance(other, RingElement):
                raise
            return NotImplemented
        if other is NotImplemented:
            return other
        return self.data == other.data

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    # -------- обращение, деление, НОД --------
    def inv(self) -> "Residue":
        g, ainv = self.base_ring.gcdinv(self.data, self.modulus)
        if g != 1:
            raise NonInvertibleError("Impossible inverse in inv")
        return self.parent._element(ainv)

    def sqrt(self) -> "Residue":
        ok, root = self.parent.sqrt(self)
        if not ok:
            raise NotASquareError(f"{self!r} is not a square")
        return root


def divexact(a: Residue, b: Residue) -> Residue:
    """Точное деление `a / b` = `a * inv(b)`; `b` обязан быть обратимым."""
    a._check_parent(b)
    g, binv = b.base_ring.gcdinv(b.data, b.modulus)
    if g != 1:
        raise NonInvertibleError("Impossible inverse in divexact")
    return a.parent._element(a.data * binv)


def gcd(a: Residue, b: Residue) -> Residue:
    """
    НОД в принятой здесь конвенции: вычет `gcd(gcd(data(a), m), data(b))`.

    Это НЕ стандартный НОД в кольце вычетов; формула воспроизводится
    буквально, на неё опирается вызывающий код.
    """
    a._check_parent(b)
    R = a.base_ring
    return a.parent._element(R.gcd(R.gcd(a.data, a.modulus), b.data))


def make_residue_ring(base_ring: Parent, modulus, cached: Optional[bool] = None) -> ResidueRing:
    """
    Возвращает кольцо вычетов `base_ring / (modulus)`.

    При `cached=True` (по умолчанию, см. `cache_parents`) структурно
    одинаковые запросы возвращают один и тот же экземпляр.
    """
    if cached is None:
        cached = get_option("cache_parents")
    modulus = ResidueRing.check_modulus(base_ring, modulus)
    key = ("residue", base_ring, modulus)
    return PARENTS.get_or_create(key, lambda: ResidueRing(base_ring, modulus), cached=cached)


# -----------------------------------------------------------------------------
# Небезопасные in-place операции (см. ringkit._inplace)
# -----------------------------------------------------------------------------

@_inplace.zero_out.register(Residue)
def _residue_zero_out(z: Residue) -> Residue:
    z.data = z.base_ring.zero()
    return z


@_inplace.mul_into.register(Residue)
def _residue_mul_into(z: Residue, a: Residue, b: Residue) -> Residue:
    a._check_parent(b)
    z.data = a.base_ring.reduce(a.data * b.data, a.modulus)
    return z


@_inplace.add_into.register(Residue)
def _residue_add_into(z: Residue, a: Residue, b: Residue) -> Residue:
    a._check_parent(b)
    z.data = a.base_ring.reduce(a.data + b.data, a.modulus)
    return z


@_inplace.add_assign.register(Residue)
def _residue_add_assign(a: Residue, b: Residue) -> Residue:
    a._check_parent(b)
    a.data = a.base_ring.reduce(a.data + b.data, a.modulus)
    return a
