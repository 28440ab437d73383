"""In-place revive: ``Snapshot`` → existing live state.

For each container entry the reviver first *locates* a compatible live value
in the destination by replaying the entry's recorded paths; it is reused if
found, otherwise a fresh one is allocated. Shared references and cycles
resolve through a side table (entry index → live value) that is filled
before any child is visited, so the snapshot itself is never mutated.

Paths are relative: a dict value's path starts at its enclosing dict, a list
element's path starts where the list's own path does, and a cell's contents
share the cell's path. Because revive visits entries in the order they were
encoded, the enclosing live dict (the *anchor*) is known when an entry is
first reached; paths are tried against the anchor, then against the
destination root.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import (
    Any, Callable, Dict, Generator, Iterator, List, MutableMapping, Optional, Sequence, Tuple, Union,
)

from .classifier import DEFAULT_CLASSIFIER, Classifier
from .config import REVIVE_CONFIG
from .models import (
    MISSING, ArrayEntry, BaseEntry, CellEntry, KeepEntry, KeyStep,
    ObjectEntry, Path, RootEntry, Snapshot, SnapshotFormatError, Step, ValueEntry,
)

LOGGER = logging.getLogger("revive_core.decoder")
LOGGER.addHandler(logging.NullHandler())

Condition = Callable[[Any], bool]
Unwrap = Callable[[Any], Any]
# a container filler: yields (child pointer, anchor), is sent the child's live value
_Filler = Generator[Tuple[int, Any], Any, Any]


class ReviveError(RuntimeError):
    """Raised when a snapshot cannot be replayed onto a destination."""
    pass


# ---------------------------------------------------------------------------
# Path search
# ---------------------------------------------------------------------------
def _lookup(container: Any, key: Any) -> Any:
    if isinstance(container, Mapping):
        return container.get(key, MISSING)
    if isinstance(container, (list, tuple)):
        if isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(container):
            return container[key]
    return MISSING


def walk(base: Any, path: Path, unwrap: Optional[Unwrap] = None) -> Any:
    """Value reached by following *path* from *base*, or ``MISSING``.

    *unwrap* maps a mutable cell to its contents; cells add no path segment,
    so they are stepped through transparently. Nested steps are expanded on
    an explicit stack, so path length is not limited by recursion depth.
    """
    current = base
    stack: List[Iterator[Step]] = [iter(path)]
    while stack:
        step = next(stack[-1], None)
        if step is None:
            stack.pop()
            continue
        if unwrap is not None:
            current = unwrap(current)
        if isinstance(step, KeyStep):
            current = _lookup(current, step.key)
            if current is MISSING:
                return MISSING
        else:
            stack.append(iter(step.path))
    return current


def locate(
    base: Any,
    paths: Sequence[Path],
    condition: Condition,
    unwrap: Optional[Unwrap] = None,
) -> Any:
    """First value reachable by one of *paths* (in recorded order) that satisfies *condition*."""
    for path in paths:
        if not path:
            continue
        result = walk(base, path, unwrap)
        if result is MISSING:
            continue
        if condition(result):
            return result
        if unwrap is not None:
            inner = unwrap(result)
            if inner is not result and condition(inner):
                return inner
    return MISSING


def _is_defined(value: Any) -> bool:
    return value is not MISSING


# ---------------------------------------------------------------------------
class SnapshotReviver:
    def __init__(
        self,
        classifier: Optional[Classifier] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.classifier = classifier or DEFAULT_CLASSIFIER
        self.config = {**REVIVE_CONFIG, **(config or {})}

    def revive(self, base: MutableMapping, snapshot: Union[Snapshot, List[Any]]) -> None:
        try:
            snap = Snapshot.coerce(snapshot)
            root = snap.root
        except SnapshotFormatError as e:
            raise ReviveError(f"invalid snapshot: {e}") from e

        run = _ReviveRun(base, snap.entries, self.classifier, self.config)
        try:
            run.apply(root)
        except ReviveError:
            raise
        except Exception as e:
            raise ReviveError(f"revive failed: {e}") from e
        LOGGER.debug("revived %d root keys: %d reused, %d allocated, deleted %r",
                     len(root.keys), run.reused, run.allocated, run.deleted)


class _ReviveRun:
    """State for a single revive call."""

    def __init__(self, base, entries, classifier, config):
        self.base = base
        self.entries: List[BaseEntry] = entries
        self.classifier: Classifier = classifier
        self.config = config
        self.resolved: Dict[int, Any] = {0: base}
        # ids of live values already bound to an entry; never handed out twice
        self.claimed = {id(base)}
        self.reused = 0
        self.allocated = 0
        self.deleted: List[Any] = []

    def apply(self, root: RootEntry) -> None:
        values = {key: self.resolve(pointer, self.base) for key, pointer in root.keys.items()}

        for key, value in values.items():
            if value is not MISSING:
                self.base[key] = value

        if self.config["prune_root_keys"]:
            for key in list(self.base):
                if values.get(key, MISSING) is MISSING:
                    del self.base[key]
                    self.deleted.append(key)

    # ------------------------------------------------------------------
    def resolve(self, pointer: int, anchor: Any) -> Any:
        """Live value for entry *pointer*.

        Container entries are filled by generators that yield
        ``(child_pointer, anchor)`` and receive the child's live value back;
        they are driven from an explicit stack, so nesting depth is not
        limited by recursion.
        """
        done, result = self._open(pointer, anchor)
        if done:
            return result

        stack: List[_Filler] = [result]
        sent: Any = None
        while stack:
            try:
                pointer, anchor = stack[-1].send(sent)
            except StopIteration as stop:
                stack.pop()
                sent = stop.value
                continue
            done, result = self._open(pointer, anchor)
            if done:
                sent = result
            else:
                stack.append(result)
                sent = None
        return sent

    def _open(self, pointer: int, anchor: Any) -> Tuple[bool, Any]:
        """``(True, value)`` when *pointer* resolves at once, else ``(False, filler)``."""
        if pointer in self.resolved:
            return True, self.resolved[pointer]
        if not 0 <= pointer < len(self.entries):
            raise ReviveError(f"entry {pointer} not found ({len(self.entries)} entries)")

        entry = self.entries[pointer]
        if isinstance(entry, ValueEntry):
            return True, entry.value
        if isinstance(entry, ArrayEntry):
            return False, self._revive_array(entry, pointer, anchor)
        if isinstance(entry, ObjectEntry):
            return False, self._revive_object(entry, pointer, anchor)
        if isinstance(entry, CellEntry):
            return False, self._revive_cell(entry, pointer, anchor)
        if isinstance(entry, KeepEntry):
            return True, self._revive_keep(entry, pointer, anchor)
        raise ReviveError(f"cannot revive entry {pointer} with tag {entry.tag!r}")

    def _unwrap(self, value: Any) -> Any:
        return value.value if self.classifier.is_cell(value) else value

    def _bind(self, pointer: int, value: Any) -> None:
        self.resolved[pointer] = value
        self.claimed.add(id(value))

    def _locate(self, paths, condition, anchor, exclusive: bool = True) -> Any:
        def usable(v: Any) -> bool:
            if exclusive and id(v) in self.claimed:
                return False
            return condition(v)

        value = locate(anchor, paths, usable, self._unwrap)
        if value is MISSING and anchor is not self.base:
            value = locate(self.base, paths, usable, self._unwrap)
        return value

    def _find_or_make(self, paths, condition, factory, anchor) -> Any:
        value = self._locate(paths, condition, anchor)
        if value is MISSING:
            self.allocated += 1
            return factory()
        self.reused += 1
        return value

    # Fillers bind their live value before the first child is requested, so a
    # child pointing back at its parent resolves from the side table.
    def _revive_array(self, entry: ArrayEntry, pointer: int, anchor: Any) -> _Filler:
        value = self._find_or_make(entry.paths, self.classifier.is_array, list, anchor)
        self._bind(pointer, value)

        for index, next_pointer in enumerate(entry.items):
            item = yield next_pointer, anchor
            if item is MISSING:
                item = None
            if index < len(value):
                value[index] = item
            else:
                value.append(item)

        if self.config["truncate_arrays"] and len(value) > len(entry.items):
            del value[len(entry.items):]
        return value

    def _revive_object(self, entry: ObjectEntry, pointer: int, anchor: Any) -> _Filler:
        value = self._find_or_make(entry.paths, self.classifier.is_object, dict, anchor)
        self._bind(pointer, value)

        for key, next_pointer in entry.fields.items():
            item = yield next_pointer, value
            if item is MISSING:
                value.pop(key, None)
            else:
                value[key] = item
        return value

    def _revive_cell(self, entry: CellEntry, pointer: int, anchor: Any) -> _Filler:
        value = self._find_or_make(entry.paths, self.classifier.is_cell,
                                   self.classifier.make_cell, anchor)
        self._bind(pointer, value)

        content = yield entry.child, anchor
        value.value = None if content is MISSING else content
        return value

    def _revive_keep(self, entry: KeepEntry, pointer: int, anchor: Any) -> Any:
        # never rebuilt; only recovered from what the destination already holds
        value = self._locate(entry.paths, _is_defined, anchor, exclusive=False)
        self.resolved[pointer] = value
        return value


def revive(
    base: MutableMapping,
    snapshot: Union[Snapshot, List[Any]],
    classifier: Optional[Classifier] = None,
) -> None:
    SnapshotReviver(classifier).revive(base, snapshot)
