"""ringkit._ring
================
Общий каркас «родитель / элемент» для всех конструкций колец.

* Parent: объект кольца. Равенство и хеш определяются структурным
  ключом (базовое кольцо + определяющий параметр).
* RingElement: элемент кольца с обратной (невладеющей) ссылкой на
  родителя.
* coerces: декоратор, регистрирующий правило приведения значения
  заданного Python-типа в кольцо. Таблица правил собирается один раз
  на класс в `__init_subclass__` и после этого не меняется.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Hashable, Optional

from ._errors import CompatibilityError

__all__ = ["Parent", "RingElement", "coerces", "is_over"]


def coerces(*types: type) -> Callable:
    """Декоратор для регистрации метода приведения значений типов `types`."""
    def decorator(func):
        func._coerces_from = types
        return func
    return decorator


class Parent:
    """
    Базовый класс для колец.

    Подклассы задают `key` через `_set_key` в конструкторе и объявляют
    методы-приведения с декоратором `@coerces(...)`.
    """

    _coercions = MappingProxyType({})

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        table = {}
        # Проходим MRO от базового класса к подклассу, чтобы подкласс
        # мог переопределить правило родителя
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                for t in getattr(attr, "_coerces_from", ()):
                    table[t] = name
        cls._coercions = MappingProxyType(table)

    base_ring: Optional["Parent"] = None

    def _set_key(self, key: Hashable) -> None:
        self._key = key
        self._hash = hash((type(self).__name__, key))

    @property
    def key(self) -> Hashable:
        return self._key

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self._hash == other._hash and self._key == other._key

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return self._hash

    # -------- приведение --------
    def __call__(self, *args):
        if not args:
            return self.zero()
        if len(args) == 1:
            return self.coerce(args[0])
        return self._construct(*args)

    def _construct(self, *args):
        raise TypeError(f"{type(self).__name__} takes at most one argument ({len(args)} given)")

    def coerce(self, value: Any):
        """Приводит `value` к элементу кольца по таблице правил класса."""
        if isinstance(value, RingElement) and value.parent is self:
            return value
        for klass in type(value).__mro__:
            name = self._coercions.get(klass)
            if name is not None:
                return getattr(self, name)(value)
        raise CompatibilityError(f"cannot coerce {type(value).__name__} into {self!r}")

    def zero(self):
        raise NotImplementedError

    def one(self):
        raise NotImplementedError


def is_over(ring: Optional[Parent], base: Parent) -> bool:
    """True, если `base` встречается в цепочке базовых колец `ring`."""
    while ring is not None:
        if ring == base:
            return True
        ring = ring.base_ring
    return False


class RingElement:
    """Базовый класс элементов. Хранит только ссылку на родителя."""

    __slots__ = ("parent",)

    @property
    def base_ring(self) -> Parent:
        return self.parent.base_ring

    def _check_parent(self, other: "RingElement") -> None:
        raise NotImplementedError

    def _operand(self, other):
        """
        Приводит второй операнд бинарной операции к элементу `self.parent`.

        Возвращает NotImplemented, если `other` является элементом более «богатого»
        кольца, построенного над нашим; тогда Python вызовет отражённый
        оператор другой стороны.
        """
        if not isinstance(other, RingElement):
            return self.parent.coerce(other)
        if other.parent is self.parent:
            return other
        if is_over(self.parent.base_ring, other.parent):
            return self.parent.coerce(other)
        if is_over(other.parent.base_ring, self.parent):
            return NotImplemented
        if isinstance(other, type(self)):
            self._check_parent(other)
            return other
        raise CompatibilityError(f"cannot combine {self.parent!r} with {other.parent!r}")

    def _reflected(self, other, name: str):
        """
        Вызывает отражённый оператор `name` у `other` вручную.

        Для операндов одного Python-класса (ряд и ряд над рядами) интерпретатор
        отражённый оператор не вызывает.
        """
        if type(other) is type(self):
            return getattr(other, name)(self)
        return NotImplemented
