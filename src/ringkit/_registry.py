"""ringkit._registry
====================
Реестр родителей: по структурному ключу возвращает единственный
экземпляр кольца, пока он не удалён из реестра явно.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Hashable, Iterator, TypeVar

__all__ = ["ParentRegistry", "PARENTS"]

logger = logging.getLogger(__name__)

P = TypeVar("P")


class ParentRegistry:
    """
    Кеш родителей с явным жизненным циклом (insert / evict / clear).

    Вставка нового родителя выполняется под блокировкой, поэтому сам
    реестр можно разделять между потоками. Арифметика элементов при этом
    остаётся однопоточной.
    """

    def __init__(self):
        self._parents: Dict[Hashable, object] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: Hashable, factory: Callable[[], P], cached: bool = True) -> P:
        """
        Возвращает родителя для `key`, создавая его через `factory()` при промахе.

        При `cached=False` всегда строится новый экземпляр, который
        в реестр не попадает.
        """
        if not cached:
            parent = factory()
            logger.debug("created uncached parent %r", parent)
            return parent
        with self._lock:
            parent = self._parents.get(key)
            if parent is None:
                parent = factory()
                self._parents[key] = parent
                logger.debug("registered parent %r", parent)
            else:
                logger.debug("parent cache hit for %r", parent)
        return parent

    def evict(self, key: Hashable) -> bool:
        """Удаляет родителя из реестра. Уже созданные элементы его не теряют."""
        with self._lock:
            parent = self._parents.pop(key, None)
        if parent is not None:
            logger.debug("evicted parent %r", parent)
        return parent is not None

    def clear(self) -> None:
        with self._lock:
            n = len(self._parents)
            self._parents.clear()
        logger.debug("parent registry cleared (%d entries)", n)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._parents

    def __len__(self) -> int:
        return len(self._parents)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._parents))


# Реестр по умолчанию, используется публичными конструкторами колец
PARENTS = ParentRegistry()
