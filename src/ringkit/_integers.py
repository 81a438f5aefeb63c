"""ringkit._integers
====================
Адаптеры скалярного бэкенда: кольцо целых ZZ и поле рациональных QQ.

Элементы этих колец являются «сырыми» числами бэкенда, а не RingElement:

* ZZ: `mpmath.libmp.MPZ` (gmpy2.mpz, если gmpy2 установлен, иначе int);
* QQ: `fractions.Fraction`.

Здесь же живёт `parent_of`, который по значению определяет его кольцо.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Any, Tuple

from mpmath.libmp import BACKEND, MPZ, MPZ_ONE, MPZ_ZERO, int_types, sqrtrem
from mpmath.libmp import gcd as _mp_gcd
from mpmath.libmp.backend import gmpy as _gmpy
from sympy.ntheory import sqrt_mod

from ._errors import NonInvertibleError
from ._ring import Parent, RingElement, coerces

__all__ = ["ZZ", "QQ", "IntegerRing", "RationalField", "parent_of"]

logger = logging.getLogger(__name__)
logger.debug("ringkit integer backend: %s", BACKEND)


class IntegerRing(Parent):
    """Кольцо целых чисел поверх MPZ."""

    def __init__(self):
        self._set_key("ZZ")

    def __repr__(self):
        return "Integer Ring"

    def __reduce__(self):
        return (_integer_ring, ())

    @coerces(*int_types)
    def _from_int(self, value):
        return MPZ(value)

    def zero(self):
        return MPZ_ZERO

    def one(self):
        return MPZ_ONE

    def characteristic(self) -> int:
        return 0

    # -------- элементарные предикаты --------
    def is_zero(self, a) -> bool:
        return a == 0

    def is_one(self, a) -> bool:
        return a == 1

    def is_unit(self, a) -> bool:
        return a == 1 or a == -1

    def inv(self, a):
        if not self.is_unit(a):
            raise NonInvertibleError(f"{a} is not a unit in {self!r}")
        return a

    def divides(self, a, b) -> Tuple[bool, Any]:
        """
        Пытается найти `q` с `a == b*q`.

        Возвращает `(True, q)` при успехе и `(False, a // b)` иначе
        (частное с округлением вниз как «лучшее приближение»).
        """
        if b == 0:
            return a == 0, MPZ_ZERO
        q, r = divmod(a, b)
        return r == 0, q

    def sqrt(self, a) -> Tuple[bool, Any]:
        """Точный корень: `(True, s)` если `a == s*s`, иначе `(False, floor(sqrt(|a|)))`."""
        if a < 0:
            return False, MPZ(sqrtrem(-a)[0])
        s, rem = sqrtrem(a)
        return rem == 0, MPZ(s)

    # -------- операции для колец вычетов --------
    def reduce(self, a, m):
        """Каноничный представитель `a` по модулю `m`, лежит в [0, |m|)."""
        return MPZ(a) % abs(m)

    def gcd(self, a, b):
        return MPZ(abs(_mp_gcd(a, b)))

    def gcdinv(self, a, m):
        """
        Расширенный алгоритм Евклида.

        Возвращает `(g, s)`, где `g = gcd(a, m) >= 0` и `s*a == g (mod m)`,
        `s` приведён по модулю `|m|`.
        """
        m = abs(MPZ(m))
        if m == 1:
            return MPZ_ONE, MPZ_ZERO
        if BACKEND == "gmpy":
            g, s, _ = _gmpy.gcdext(MPZ(a) % m, m)
            return MPZ(g), MPZ(s % m)
        r0, r1 = MPZ(a) % m, m
        s0, s1 = MPZ_ONE, MPZ_ZERO
        while r1:
            q = r0 // r1
            r0, r1 = r1, r0 - q * r1
            s0, s1 = s1, s0 - q * s1
        return r0, s0 % m

    def powmod(self, a, e: int, m):
        return MPZ(pow(MPZ(a), e, abs(MPZ(m))))

    def sqrtmod(self, a, m) -> Tuple[bool, Any]:
        """
        Квадратный корень по модулю `m`: `(True, r)` с `r*r == a (mod m)`,
        иначе `(False, 0)`. Для составных `m` используется разложение модуля.
        """
        n = int(abs(m))
        if n == 1:
            return True, MPZ_ZERO
        r = sqrt_mod(int(a) % n, n)
        if r is None:
            return False, MPZ_ZERO
        return True, MPZ(r)


class RationalField(Parent):
    """Поле рациональных чисел поверх fractions.Fraction."""

    def __init__(self):
        self._set_key("QQ")

    def __repr__(self):
        return "Rational Field"

    def __reduce__(self):
        return (_rational_field, ())

    @coerces(*int_types)
    def _from_int(self, value):
        return Fraction(int(value))

    @coerces(Fraction)
    def _from_fraction(self, value):
        return value

    def zero(self):
        return Fraction(0)

    def one(self):
        return Fraction(1)

    def characteristic(self) -> int:
        return 0

    def is_zero(self, a) -> bool:
        return a == 0

    def is_one(self, a) -> bool:
        return a == 1

    def is_unit(self, a) -> bool:
        return a != 0

    def inv(self, a):
        if a == 0:
            raise NonInvertibleError(f"0 is not a unit in {self!r}")
        return 1 / a

    def divides(self, a, b) -> Tuple[bool, Any]:
        if b == 0:
            return a == 0, Fraction(0)
        return True, a / b

    def sqrt(self, a) -> Tuple[bool, Any]:
        if a < 0:
            return False, Fraction(0)
        sn, rn = sqrtrem(MPZ(a.numerator))
        sd, rd = sqrtrem(MPZ(a.denominator))
        return rn == 0 and rd == 0, Fraction(int(sn), int(sd))


ZZ = IntegerRing()
QQ = RationalField()


def _integer_ring():
    return ZZ


def _rational_field():
    return QQ


def parent_of(value) -> Parent:
    """Кольцо, которому принадлежит `value`."""
    if isinstance(value, RingElement):
        return value.parent
    if isinstance(value, int_types):
        return ZZ
    if isinstance(value, Fraction):
        return QQ
    raise TypeError(f"{type(value).__name__} is not a ring element")
