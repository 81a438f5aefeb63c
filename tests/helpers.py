from fractions import Fraction
from typing import List

import hypothesis.strategies as st
from mpmath import mp

from ringkit import AbsPowerSeriesRing, AbsSeries, ResidueRing

mp.dps = 50  # точность эталонных вычислений


def series(S: AbsPowerSeriesRing, coeffs, prec=None) -> AbsSeries:
    """Ряд из списка коэффициентов; по умолчанию на максимальной точности кольца."""
    if prec is None:
        prec = S.max_precision
    return S(coeffs, len(coeffs), prec)


def coeffs_of(f: AbsSeries, n=None) -> List:
    """Первые `n` коэффициентов ряда (по умолчанию до его длины)."""
    if n is None:
        n = f.length
    return [f.coeff(i) for i in range(n)]


def naive_mullow(a: List, b: List, n: int) -> List:
    """Эталонное усечённое произведение списков коэффициентов."""
    out = [0] * n
    for i, x in enumerate(a):
        for j, y in enumerate(b):
            if i + j < n:
                out[i + j] += x * y
    return out


def to_mp(c) -> mp.mpf:
    """Fraction / целое -> mpmath."""
    c = Fraction(c)
    return mp.mpf(c.numerator) / c.denominator


def residues(R: ResidueRing):
    return st.integers(-10**6, 10**6).map(R)


def series_elements(S: AbsPowerSeriesRing, bound: int = 20):
    """Стратегия hypothesis: ряды над ZZ с произвольной точностью <= max_precision."""
    return st.integers(0, S.max_precision).flatmap(
        lambda prec: st.lists(st.integers(-bound, bound), max_size=prec).map(
            lambda cs: S(cs, len(cs), prec)
        )
    )
