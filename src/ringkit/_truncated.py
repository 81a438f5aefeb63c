"""ringkit._truncated
=====================
Примитивы над усечёнными массивами коэффициентов.

Все функции принимают одномерные `numpy.ndarray` с `dtype=object`
(индекс = степень), кольцо коэффициентов `R` и длину результата `n`.
Коэффициенты за пределами `n` никогда не вычисляются. Функции не
нормализуют результат: это делает вызывающий код.

* add / sub: покомпонентно, с дополнением нулями
* mullow: младшие `n` коэффициентов произведения
* inv_series: обратный ряд по рекуррентной формуле
* div_series: частное рядов (точное деление коэффициентов)
* sqrt_series: квадратный корень, возвращает флаг успеха
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

__all__ = [
    "zeros",
    "from_values",
    "normalise",
    "padded",
    "add",
    "sub",
    "mullow",
    "inv_series",
    "div_series",
    "sqrt_series",
]


def zeros(n: int, R) -> np.ndarray:
    """Массив из `n` нулей кольца `R`."""
    return np.full(n, R.zero(), dtype=object)


def from_values(values, R) -> np.ndarray:
    """Массив коэффициентов из произвольной последовательности, каждое значение приводится в `R`."""
    out = np.empty(len(values), dtype=object)
    for i, v in enumerate(values):
        out[i] = R(v)
    return out


def normalise(coeffs: np.ndarray, length: int, R) -> int:
    """Длина без хвостовых нулей (индекс после последнего ненулевого коэффициента)."""
    while length > 0 and R.is_zero(coeffs[length - 1]):
        length -= 1
    return length


def padded(coeffs: np.ndarray, length: int, n: int, R) -> np.ndarray:
    """Первые `n` коэффициентов, хвост за `length` заполняется нулями."""
    length = min(length, n)
    if length == n:
        return coeffs[:n].copy()
    out = zeros(n, R)
    out[:length] = coeffs[:length]
    return out


def add(a: np.ndarray, lena: int, b: np.ndarray, lenb: int, n: int, R) -> np.ndarray:
    return padded(a, lena, n, R) + padded(b, lenb, n, R)


def sub(a: np.ndarray, lena: int, b: np.ndarray, lenb: int, n: int, R) -> np.ndarray:
    return padded(a, lena, n, R) - padded(b, lenb, n, R)


def mullow(a: np.ndarray, lena: int, b: np.ndarray, lenb: int, n: int, R) -> np.ndarray:
    """Младшие `n` коэффициентов произведения `a*b` (школьное умножение)."""
    out = zeros(n, R)
    if lena == 0 or lenb == 0:
        return out
    for k in range(n):
        lo = max(0, k - lenb + 1)
        hi = min(k, lena - 1)
        acc = R.zero()
        for i in range(lo, hi + 1):
            acc = acc + a[i] * b[k - i]
        out[k] = acc
    return out


def inv_series(a: np.ndarray, lena: int, n: int, R) -> np.ndarray:
    """
    Первые `n` коэффициентов `1/a`. Свободный член `a[0]` обязан быть
    обратимым в `R` (проверяет вызывающий код).

    q_0 = a_0^{-1},  q_k = -a_0^{-1} * sum_{i=1..k} a_i q_{k-i}
    """
    out = zeros(n, R)
    if n == 0:
        return out
    c = R.inv(a[0])
    out[0] = c
    for k in range(1, n):
        acc = R.zero()
        for i in range(1, min(k, lena - 1) + 1):
            acc = acc + a[i] * out[k - i]
        out[k] = -(c * acc)
    return out


def div_series(a: np.ndarray, lena: int, b: np.ndarray, lenb: int, n: int, R) -> Tuple[bool, np.ndarray]:
    """
    Первые `n` коэффициентов `a/b` при ненулевом `b[0]`.

    Каждый коэффициент требует точного деления на `b[0]` в `R`. Если
    хотя бы одно деление не точное, возвращается флаг False и
    «наилучшее приближение» от `R.divides`.
    """
    out = zeros(n, R)
    exact = True
    b0 = b[0]
    for k in range(n):
        acc = a[k] if k < lena else R.zero()
        for i in range(1, min(k, lenb - 1) + 1):
            acc = acc - b[i] * out[k - i]
        ok, q = R.divides(acc, b0)
        exact = exact and ok
        out[k] = q
    return exact, out


def sqrt_series(a: np.ndarray, lena: int, n: int, R) -> Tuple[bool, np.ndarray]:
    """
    Первые `n` коэффициентов квадратного корня ряда с ненулевым свободным
    членом.

    s_0 = sqrt(a_0),  s_k = (a_k - sum_{i=1..k-1} s_i s_{k-i}) / (2 s_0)

    Флаг False, если свободный член не квадрат или какое-то деление на
    `2 s_0` не точное; коэффициенты при этом не определены.
    """
    out = zeros(n, R)
    if n == 0:
        return True, out
    exact, s0 = R.sqrt(a[0])
    out[0] = s0
    two_s0 = s0 + s0
    for k in range(1, n):
        acc = a[k] if k < lena else R.zero()
        for i in range(1, k):
            acc = acc - out[i] * out[k - i]
        ok, q = R.divides(acc, two_s0)
        exact = exact and ok
        out[k] = q
    return exact, out
