"""Тесты для колец усечённых степенных рядов (capped absolute)."""

import copy
from fractions import Fraction

import pytest
import hypothesis.strategies as st
from hypothesis import given, settings
from mpmath import mp

from ringkit import (
    QQ,
    ZZ,
    AbsPowerSeriesRing,
    AbsSeriesRing,
    CompatibilityError,
    DivisionByZeroError,
    DomainError,
    IncompatibleParentsError,
    NonInvertibleError,
    NotASquareError,
    NotExactDivisionError,
    O,
    PowerSeriesRing,
    abs_series,
    divexact,
    inv,
    isequal,
    make_power_series_ring,
    make_residue_ring,
    shift_left,
    shift_right,
    truncate,
    valuation,
)
from tests.helpers import coeffs_of, naive_mullow, series, series_elements, to_mp

S, x = PowerSeriesRing(ZZ, 5, "x")
SQ, xq = PowerSeriesRing(QQ, 10, "x")
S8, t = PowerSeriesRing(ZZ, 8, "t")


# --- Конструирование ---

def test_ring_basics():
    assert S.max_precision == 5
    assert S.base_ring is ZZ
    assert S.characteristic() == 0
    assert repr(S) == "Univariate power series ring in x over Integer Ring"
    assert x.is_gen()
    assert x.coefficients() == [0, 1]
    assert x.prec == 5


def test_zero_and_one():
    z = S()
    assert z.is_zero()
    assert z.length == 0
    assert z.prec == 5
    assert S.one().is_one()
    assert S(1) == 1


def test_construct_from_coefficients():
    f = S([1, 2, 3, 0], 4, 4)
    assert f.length == 3  # хвостовой ноль отброшен
    assert f.prec == 4
    assert f.coefficients() == [1, 2, 3]
    assert f.coeff(7) == 0
    assert f.coeff(-1) == 0


@pytest.mark.parametrize(
    "coeffs, length, prec, exc",
    [
        ([1, 2, 3], 3, 2, ValueError),
        ([1], 1, 9, DomainError),
        ([1], 3, 5, ValueError),
    ],
    ids=["prec-below-length", "prec-above-max", "length-above-data"],
)
def test_construct_invalid(coeffs, length, prec, exc):
    with pytest.raises(exc):
        S(coeffs, length, prec)


def test_negative_max_precision():
    with pytest.raises(DomainError):
        AbsPowerSeriesRing(ZZ, -1)
    with pytest.raises(ValueError):
        make_power_series_ring(ZZ, -1, "x")


def test_gen_with_tiny_precision():
    R0, g0 = PowerSeriesRing(ZZ, 0, "z")
    assert g0.prec == 0
    assert g0.length == 0
    R1, g1 = PowerSeriesRing(ZZ, 1, "z")
    assert g1.prec == 1
    assert g1.is_zero()


def test_abs_series_helper():
    f = abs_series(ZZ, [1, 2, 3], 3, 5)
    assert f.parent is S
    assert f == 1 + 2 * x + 3 * x ** 2
    with pytest.raises(ValueError):
        abs_series(ZZ, [1, 2, 3], 3, 2)


def test_repr():
    assert repr(1 + 2 * x) == "1 + (2)*x + O(x^5)"
    assert repr(S()) == "O(x^5)"
    assert repr(x ** 3) == "(1)*x^3 + O(x^5)"


# --- Примеры из описания модели точности ---

def test_cube_of_one_plus_x():
    f = (1 + x) ** 3
    assert f == 1 + 3 * x + 3 * x ** 2 + x ** 3
    assert f.prec == 5
    assert f.coefficients() == [1, 3, 3, 1]


def test_geometric_series():
    f = 1 / (1 - x)
    assert f.coefficients() == [1, 1, 1, 1, 1]
    assert f.prec == 5


def test_multiplication_precision_law():
    a = series(S, [1, 2], 3)
    b = series(S, [0, 0, 1], 4)
    assert valuation(b) == 2
    p = a * b
    assert p.prec == min(3 + 2, 4 + 0, 5)
    assert p.coefficients() == [0, 0, 1, 2]
    # ограничение сверху max_precision
    assert (series(S, [1, 1]) * x ** 2).prec == 5


def test_addition_precision_law():
    a = series(S, [1, 2, 3], 3)
    b = series(S, [1, 1, 1, 1], 5)
    s = a + b
    assert s.prec == 3
    assert s.coefficients() == [2, 3, 4]
    d = a - b
    assert d.prec == 3
    assert d.coefficients() == [0, 1, 2]


def test_big_o():
    f = 1 + x + x ** 2
    big = O(f)
    assert big.is_zero()
    assert big.prec == 2
    g = 1 + x + O(x ** 3)
    assert g.prec == 3
    assert g.coefficients() == [1, 1]
    assert O(S()).prec == 5


# --- Сдвиги и усечение ---

def test_shift_left_discards_beyond_cap():
    f = series(S, [1, 1, 1, 1], 5)
    g = shift_left(f, 3)
    assert g.prec == 5
    assert g.coefficients() == [0, 0, 0, 1, 1]


@pytest.mark.parametrize(
    "n, prec, coeffs",
    [(1, 4, [1, 1]), (3, 2, []), (5, 0, []), (9, 0, [])],
)
def test_shift_right(n, prec, coeffs):
    f = 1 + x + x ** 2
    g = shift_right(f, n)
    assert g.prec == prec
    assert g.coefficients() == coeffs


def test_negative_shift():
    with pytest.raises(DomainError):
        shift_left(x, -1)
    with pytest.raises(DomainError):
        shift_right(x, -1)


def test_truncate():
    f = 1 + x + x ** 2
    assert truncate(f, 7) is f
    g = truncate(f, 2)
    assert g.prec == 2
    assert g.coefficients() == [1, 1]
    with pytest.raises(DomainError):
        truncate(f, -1)


def test_set_precision():
    f = 1 + x + x ** 2
    g = f.set_precision(2)
    assert g.prec == 2 and g.coefficients() == [1, 1]
    assert f.set_precision(5).prec == 5
    with pytest.raises(DomainError):
        f.set_precision(6)
    with pytest.raises(DomainError):
        f.set_precision(-1)


# --- Сравнение ---

def test_equality_up_to_common_precision():
    a = series(S, [1, 2, 3], 3)
    b = series(S, [1, 2, 3, 4], 5)
    assert a == b
    assert not isequal(a, b)
    c = series(S, [1, 3], 5)
    assert series(S, [1, 2], 2) != c


def test_scalar_equality():
    assert S(7) == 7
    assert 7 == S(7)
    assert x != 0
    assert series(S, [], 0) == 5
    assert S() == 0
    assert S() != 1


def test_isequal_is_structural():
    assert isequal(1 + x, 1 + x)
    assert not isequal(series(S, [1], 3), series(S, [1], 5))
    other = AbsSeriesRing(ZZ, 5)
    assert not isequal(series(other, [1]), series(S8, [1], 5))


def test_series_are_unhashable():
    with pytest.raises(TypeError):
        hash(x)


def test_deepcopy():
    f = 1 + 2 * x
    g = copy.deepcopy(f)
    assert isequal(f, g)
    assert g.coeffs is not f.coeffs


# --- Родители и приведение ---

def test_cached_parent():
    S2, x2 = PowerSeriesRing(ZZ, 5, "x")
    assert S2 is S
    assert isequal(x2, x)
    assert (x + x2).prec == 5


def test_distinct_parents_are_incompatible():
    T, y = PowerSeriesRing(ZZ, 5, "y")
    with pytest.raises(IncompatibleParentsError):
        x + y
    with pytest.raises(IncompatibleParentsError):
        x == y
    uncached = AbsSeriesRing(ZZ, 5)
    assert uncached == S
    assert uncached is not S
    with pytest.raises(IncompatibleParentsError):
        x * uncached.gen()


def test_coercion():
    f = 1 + x
    assert S(f) is f
    assert S(3).coefficients() == [3]
    with pytest.raises(CompatibilityError):
        S(Fraction(1, 2))
    with pytest.raises(CompatibilityError):
        x + Fraction(1, 2)
    assert (xq + Fraction(1, 2)).coefficients() == [Fraction(1, 2), 1]
    with pytest.raises(CompatibilityError):
        S(xq)


def test_unknown_model():
    with pytest.raises(ValueError):
        make_power_series_ring(ZZ, 5, "x", model="bogus")
    with pytest.raises(NotImplementedError):
        make_power_series_ring(ZZ, 5, "x", model="capped_relative")


# --- Степень ---

def test_power_of_gen():
    p = x ** 3
    assert p.coefficients() == [0, 0, 0, 1]
    assert p.prec == 5
    q = x ** 7
    assert q.is_zero()
    assert q.prec == 5


def test_power_of_constant_and_zero_exponent():
    assert S(3) ** 4 == 81
    c = series(S, [2], 3) ** 3
    assert c == 8 and c.prec == 3
    one = series(S, [1, 1], 3) ** 0
    assert one.is_one() and one.prec == 3


def test_power_precision():
    a = series(S, [0, 1, 1], 3)
    p = a ** 2
    assert p.prec == min(3 + 1, 5)
    assert p.coefficients() == [0, 0, 1, 2]
    q = (x + x ** 2) ** 2
    assert q.prec == 5
    assert q.coefficients() == [0, 0, 1, 2, 1]


def test_power_does_not_mutate_operand():
    a = 1 + 2 * x
    before = copy.deepcopy(a)
    _ = a ** 5
    assert isequal(a, before)


def test_negative_power():
    with pytest.raises(DomainError):
        (1 + x) ** -1


# --- Деление, обращение, корень ---

def test_divexact_by_x():
    f = x + x ** 2
    q = f / x
    assert q == 1 + x
    assert q.prec == 4


def test_divexact_roundtrip():
    f = 1 + 2 * x + 3 * x ** 2
    g = 1 - x
    q = divexact(f * g, g)
    assert isequal(q, f)


def test_divexact_valuation_check():
    with pytest.raises(NotExactDivisionError):
        x / x ** 2
    q = divexact(x, x ** 2, check=False)
    assert q.is_zero()
    assert q.prec == 2


def test_divexact_by_zero():
    with pytest.raises(DivisionByZeroError):
        x / S()
    with pytest.raises(ZeroDivisionError):
        x / 0


def test_divexact_not_exact_coefficients():
    with pytest.raises(NotExactDivisionError):
        1 / (2 + x)
    with pytest.warns(RuntimeWarning):
        divexact(S(1), 2 + x, check=False)


def test_divexact_over_rationals():
    q = 1 / (2 + xq)
    expected = [Fraction((-1) ** k, 2 ** (k + 1)) for k in range(10)]
    assert coeffs_of(q, 10) == expected


def test_scalar_division():
    assert (4 + 2 * x) / 2 == 2 + x
    with pytest.raises(NotExactDivisionError):
        (1 + x) / 2
    with pytest.raises(DivisionByZeroError):
        (1 + x) / 0


def test_inverse():
    f = inv(1 - x)
    assert f.coefficients() == [1, 1, 1, 1, 1]
    assert (1 - x) * f == 1
    with pytest.raises(NonInvertibleError):
        x.inv()
    with pytest.raises(NonInvertibleError):
        (2 + x).inv()
    with pytest.raises(DivisionByZeroError):
        S().inv()


def test_inverse_matches_mpmath_taylor():
    """Ряд 1/(1 - x - x^2) даёт числа Фибоначчи; сверяем с mp.taylor."""
    f = (1 - xq - xq ** 2).inv()
    ref = mp.taylor(lambda z: 1 / (1 - z - z ** 2), 0, 9)
    for k in range(10):
        assert mp.almosteq(to_mp(f.coeff(k)), ref[k], abs_eps=mp.mpf(10) ** -20)


def test_sqrt_over_rationals_matches_binomial():
    f = (1 + xq).sqrt()
    assert f.prec == 10
    for k in range(10):
        assert mp.almosteq(to_mp(f.coeff(k)), mp.binomial(mp.mpf(1) / 2, k), abs_eps=mp.mpf(10) ** -40)
    assert f * f == 1 + xq


def test_sqrt_of_square_over_integers():
    f = (1 + x) ** 2
    r = f.sqrt()
    assert r == 1 + x
    assert r.prec == 5


def test_sqrt_with_valuation():
    f = x ** 2 * (1 + x) ** 2
    r = f.sqrt()
    assert r.prec == 4
    assert r.coefficients() == [0, 1, 1]


def test_sqrt_failures():
    with pytest.raises(NotASquareError):
        (1 + x).sqrt()
    with pytest.raises(NotASquareError):
        x.sqrt()
    with pytest.raises(NotASquareError):
        S(2).sqrt()
    with pytest.warns(RuntimeWarning):
        (1 + x).sqrt(check=False)


def test_sqrt_of_zero():
    r = S().sqrt()
    assert r.is_zero()
    assert r.prec == 3


# --- Ряды над кольцом вычетов ---

def test_series_over_residue_ring():
    R7 = make_residue_ring(ZZ, 7)
    S7, y = PowerSeriesRing(R7, 5, "y")
    assert S7.characteristic() == 7
    assert (1 + y) ** 7 == 1  # биномиальные коэффициенты делятся на 7
    assert R7(3) * y == 3 * y
    assert (y * R7(3)).coefficients() == [0, 3]
    f = (3 + y) ** 2
    assert f.sqrt() == 3 + y
    assert (1 / (1 - y)).coefficients() == [1, 1, 1, 1, 1]
    assert R7(2) + y == 9 + y


def test_series_over_series_ring():
    T, y = PowerSeriesRing(S, 3, "y")
    assert T.base_ring is S
    p = (x + y) ** 2
    assert p.prec == 3
    assert p.coeff(0) == x ** 2
    assert p.coeff(1) == 2 * x
    assert p.coeff(2) == 1
    assert (y * x).coefficients()[1] == x


def test_series_over_series_both_operand_orders():
    """Ряд базового кольца слева и справа от ряда над ним."""
    T, y = PowerSeriesRing(S, 3, "y")
    for f in (x + y, y + x):
        assert f.parent is T
        assert f.coefficients() == [x, 1]
    assert (x - y).coefficients() == [x, -1]
    assert (y - x).coefficients() == [-x, 1]
    for f in (x * y, y * x):
        assert f.parent is T
        assert f.coefficients() == [0, x]
    assert (x * y).prec == 3


def test_coerce_series_from_equal_parent():
    """Ряды равного, но другого родителя не приводятся."""
    uncached = AbsSeriesRing(ZZ, 5)
    with pytest.raises(CompatibilityError):
        S(uncached.gen())


@pytest.mark.parametrize("modulus", [10**9 + 7, 2**61 - 1])
def test_sqrt_over_large_prime_modulus(modulus):
    R = make_residue_ring(ZZ, modulus)
    T, y = PowerSeriesRing(R, 5, "y")
    r = ((1 + y) ** 2).sqrt()
    assert r == 1 + y or r == -(1 + y)
    r = ((5 + 2 * y) ** 2).sqrt()
    assert r * r == (5 + 2 * y) ** 2


def test_division_over_large_composite_modulus():
    R = make_residue_ring(ZZ, 2 * 10**6)
    T, y = PowerSeriesRing(R, 5, "y")
    with pytest.raises(NotExactDivisionError):
        T(1) / (2 + y)
    q = (4 + 2 * y) / (2 + y)
    assert q * (2 + y) == 4 + 2 * y


# --- Свойства ---

@given(a=series_elements(S8), b=series_elements(S8))
@settings(max_examples=100)
def test_mul_precision_and_coefficients(a, b):
    p = a * b
    assert p.prec == min(a.prec + b.valuation(), b.prec + a.valuation(), 8)
    assert coeffs_of(p, p.prec) == naive_mullow(a.coefficients(), b.coefficients(), p.prec)


@given(a=series_elements(S8), b=series_elements(S8))
@settings(max_examples=100)
def test_add_is_pointwise(a, b):
    s = a + b
    p = min(a.prec, b.prec)
    assert s.prec == p
    assert coeffs_of(s, p) == [a.coeff(i) + b.coeff(i) for i in range(p)]
    assert s.length <= s.prec


@given(a=series_elements(S8), n=st.integers(0, 8))
@settings(max_examples=100)
def test_shift_roundtrip(a, n):
    n = min(n, a.valuation())
    assert isequal(shift_left(shift_right(a, n), n), a)
    if a.prec + n <= 8:
        assert isequal(shift_right(shift_left(a, n), n), a)


@given(a=series_elements(S8), p=st.integers(0, 10))
@settings(max_examples=100)
def test_truncate_idempotent(a, p):
    once = truncate(a, p)
    assert isequal(truncate(once, p), once)
    assert once.prec == min(a.prec, p)


@given(
    c0=st.integers(1, 9).map(lambda v: v if v % 2 else -v),
    rest=st.lists(st.integers(-9, 9), max_size=9),
)
@settings(max_examples=50)
def test_inverse_property_over_rationals(c0, rest):
    a = series(SQ, [c0] + rest)
    assert a * a.inv() == 1
