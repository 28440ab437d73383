"""Minimal reactive cells recognised by the default classifier.

* ``Ref``      - mutable single slot; ``.value`` read/write, ``subscribe``.
* ``Computed`` - read-only derived cell, recomputed lazily once any cell it
  read during its last evaluation has changed.

Both carry ``__is_ref__``; a ``Computed`` additionally exposes ``effect``.
Those two attributes are the capability checks used by ``is_ref`` /
``is_computed`` - any host object providing them is treated the same way.
"""
from __future__ import annotations

from typing import Any, Callable, List, Set

_SCALARS = (str, bytes, int, float, complex, bool, type(None))

# effect currently evaluating (innermost last)
_ACTIVE: List["_Effect"] = []


def _has_changed(old: Any, new: Any) -> bool:
    if old is new:
        return False
    if type(old) is type(new) and isinstance(old, _SCALARS):
        return old != new
    return True


class _Effect:
    def __init__(self, fn: Callable[[], Any], scheduler: Callable[[], None]):
        self.fn = fn
        self.scheduler = scheduler
        self.sources: Set[Any] = set()

    def run(self) -> Any:
        self._cleanup()
        _ACTIVE.append(self)
        try:
            return self.fn()
        finally:
            _ACTIVE.pop()

    def _cleanup(self) -> None:
        for src in self.sources:
            src._dependents.discard(self)
        self.sources.clear()


class _Cell:
    __is_ref__ = True

    def __init__(self) -> None:
        self._dependents: Set[_Effect] = set()
        self._subscribers: List[Callable[[Any], None]] = []

    def _track(self) -> None:
        if _ACTIVE:
            eff = _ACTIVE[-1]
            self._dependents.add(eff)
            eff.sources.add(self)

    def _trigger(self, new_value: Any) -> None:
        for eff in list(self._dependents):
            eff.scheduler()
        for cb in list(self._subscribers):
            cb(new_value)

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Call *callback(new_value)* on every change; returns an unsubscribe fn."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe


class Ref(_Cell):
    def __init__(self, value: Any = None):
        super().__init__()
        self._value = value

    @property
    def value(self) -> Any:
        self._track()
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if not _has_changed(self._value, new_value):
            return
        self._value = new_value
        self._trigger(new_value)

    def __repr__(self) -> str:
        return f"Ref({self._value!r})"


class Computed(_Cell):
    def __init__(self, getter: Callable[[], Any]):
        super().__init__()
        self._value: Any = None
        self._dirty = True
        self.effect = _Effect(getter, self._invalidate)

    def _invalidate(self) -> None:
        if self._dirty:
            return
        self._dirty = True
        if self._subscribers:
            self._trigger(self.value)
        else:
            for eff in list(self._dependents):
                eff.scheduler()

    @property
    def value(self) -> Any:
        self._track()
        if self._dirty:
            self._value = self.effect.run()
            self._dirty = False
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        raise AttributeError("Computed value is read-only")

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else repr(self._value)
        return f"Computed({state})"


def ref(value: Any = None) -> Ref:
    return Ref(value)


def computed(getter: Callable[[], Any]) -> Computed:
    return Computed(getter)


def is_ref(value: Any) -> bool:
    return getattr(type(value), "__is_ref__", False) is True


def is_computed(value: Any) -> bool:
    return is_ref(value) and getattr(value, "effect", None) is not None