"""ringkit._generic
===================
Общие функции `inv`, `divexact`, `gcd`, диспетчеризуемые по типу
первого аргумента.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Optional

from . import _residue, _series
from ._residue import Residue
from ._series import AbsSeries

__all__ = ["inv", "divexact", "gcd"]


@singledispatch
def inv(a):
    """Мультипликативный обратный элемент."""
    raise TypeError(f"inv is not defined for {type(a).__name__}")


@inv.register(Residue)
@inv.register(AbsSeries)
def _inv_element(a):
    return a.inv()


@singledispatch
def divexact(a, b, check: Optional[bool] = None):
    """Точное деление `a / b`."""
    raise TypeError(f"divexact is not defined for {type(a).__name__}")


@divexact.register(Residue)
def _divexact_residue(a: Residue, b, check: Optional[bool] = None):
    b = a._operand(b)
    if b is NotImplemented:
        raise TypeError("divexact: incompatible operands")
    return _residue.divexact(a, b)


@divexact.register(AbsSeries)
def _divexact_series(a: AbsSeries, b, check: Optional[bool] = None):
    if a._is_scalar(b):
        return _series.divexact_scalar(a, a.base_ring(b), check=check)
    b = a._operand(b)
    if b is NotImplemented:
        raise TypeError("divexact: incompatible operands")
    return _series.divexact(a, b, check=check)


@singledispatch
def gcd(a, b):
    """НОД (для вычетов в конвенции `gcd(gcd(data(a), m), data(b))`)."""
    raise TypeError(f"gcd is not defined for {type(a).__name__}")


@gcd.register(Residue)
def _gcd_residue(a: Residue, b):
    b = a._operand(b)
    if b is NotImplemented:
        raise TypeError("gcd: incompatible operands")
    return _residue.gcd(a, b)
