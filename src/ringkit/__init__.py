"""ringkit: обобщённое арифметическое ядро для колец.

Экспортируются:

* скалярные кольца ZZ и QQ (бэкенд: mpmath.libmp / fractions);
* кольца вычетов (`make_residue_ring`);
* кольца усечённых степенных рядов с абсолютной точностью
  (`PowerSeriesRing` / `make_power_series_ring`);
* реестр родителей, иерархия ошибок и настройки по умолчанию.

Низкоуровневые in-place операции вынесены в `ringkit.inplace` и требуют
эксклюзивного доступа к изменяемому элементу.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from ._config import DEFAULT_CONFIG, configure, get_option, load_config, reset_config  # noqa: E402
from ._errors import (  # noqa: E402
    CompatibilityError,
    DivisionByZeroError,
    DomainError,
    IncompatibleModuliError,
    IncompatibleParentsError,
    NonInvertibleError,
    NotASquareError,
    NotExactDivisionError,
    RingkitError,
)
from ._integers import QQ, ZZ, IntegerRing, RationalField, parent_of  # noqa: E402
from ._logging import setup_basic_logger  # noqa: E402
from ._registry import PARENTS, ParentRegistry  # noqa: E402
from ._residue import Residue, ResidueRing, make_residue_ring  # noqa: E402
from ._series import (  # noqa: E402
    AbsPowerSeriesRing,
    AbsSeries,
    AbsSeriesRing,
    O,
    PowerSeriesRing,
    abs_series,
    isequal,
    make_power_series_ring,
    shift_left,
    shift_right,
    truncate,
    valuation,
)
from ._generic import divexact, gcd, inv  # noqa: E402

# Низкоуровневый API мутации; регистрации выполнены при импорте _residue/_series
from . import _inplace as inplace  # noqa: E402,F401

__all__ = [
    "ZZ",
    "QQ",
    "IntegerRing",
    "RationalField",
    "parent_of",
    "ResidueRing",
    "Residue",
    "make_residue_ring",
    "AbsPowerSeriesRing",
    "AbsSeries",
    "PowerSeriesRing",
    "make_power_series_ring",
    "AbsSeriesRing",
    "abs_series",
    "O",
    "inv",
    "divexact",
    "gcd",
    "valuation",
    "shift_left",
    "shift_right",
    "truncate",
    "isequal",
    "ParentRegistry",
    "PARENTS",
    "RingkitError",
    "DivisionByZeroError",
    "CompatibilityError",
    "IncompatibleParentsError",
    "IncompatibleModuliError",
    "NonInvertibleError",
    "NotExactDivisionError",
    "NotASquareError",
    "DomainError",
    "DEFAULT_CONFIG",
    "configure",
    "get_option",
    "reset_config",
    "load_config",
    "setup_basic_logger",
    "inplace",
]
