"""Graph flattening: live state → ``Snapshot``.

Every distinct reference (by identity) gets exactly one entry; each further
occurrence only appends the path it was reached by. Paths are provenance the
reviver uses to find an existing live value to reuse.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .classifier import DEFAULT_CLASSIFIER, Classifier, Kind
from .models import (
    ArrayEntry, BaseEntry, CellEntry, IndexStep, KeepEntry, KeyStep,
    ObjectEntry, Path, PathEntry, RootEntry, Snapshot, ValueEntry,
)

LOGGER = logging.getLogger("revive_core.encoder")
LOGGER.addHandler(logging.NullHandler())


class SnapshotEncoder:
    def __init__(self, classifier: Optional[Classifier] = None):
        self.classifier = classifier or DEFAULT_CLASSIFIER

    def encode(self, data: Mapping[str, Any]) -> Snapshot:
        if not isinstance(data, Mapping):
            raise TypeError(f"state root must be a mapping, got {type(data).__name__}")

        entries: List[BaseEntry] = []
        # id -> (object, index); the object is held so its id stays unique for the whole walk
        seen: Dict[int, Tuple[Any, int]] = {}
        pending: List[_Task] = []

        # the root is walked as an object, then retagged
        root = ObjectEntry(paths=[()])
        seen[id(data)] = (data, 0)
        entries.append(root)
        _push_fields(pending, data, root.fields)

        # explicit stack: depth-first, children in order, no recursion
        while pending:
            obj, path, sink, slot = pending.pop()
            index = self._visit(obj, path, entries, seen, pending)
            if isinstance(sink, CellEntry):
                sink.child = index
            else:
                sink[slot] = index

        entries[0] = RootEntry(keys=dict(root.fields))

        snap = Snapshot(entries=entries)
        LOGGER.debug("encoded %d root keys into %d entries %s",
                     len(root.fields), len(entries), snap.count_by_tag())
        return snap

    # ------------------------------------------------------------------
    def _visit(
        self,
        obj: Any,
        path: Path,
        entries: List[BaseEntry],
        seen: Dict[int, Tuple[Any, int]],
        pending: List[_Task],
    ) -> int:
        """Emit the entry for *obj* (or extend a known one) and queue its children."""
        hit = seen.get(id(obj))
        if hit is not None:
            existing = entries[hit[1]]
            if isinstance(existing, PathEntry):
                existing.paths.append(path)
            return hit[1]

        index = len(entries)
        kind = self.classifier.classify(obj)

        if kind in (Kind.OPAQUE, Kind.DERIVED):
            # never replayed; a derived cell recomputes from its revived sources
            seen[id(obj)] = (obj, index)
            entries.append(KeepEntry(paths=[path]))
        elif kind is Kind.CELL:
            seen[id(obj)] = (obj, index)
            cell = CellEntry(paths=[path])
            entries.append(cell)
            # cells are transparent: contents share the cell's path
            pending.append((obj.value, path, cell, None))
        elif kind is Kind.ARRAY:
            seen[id(obj)] = (obj, index)
            arr = ArrayEntry(paths=[path], items=[0] * len(obj))
            entries.append(arr)
            children = [(item, path + (IndexStep(i),), arr.items, i) for i, item in enumerate(obj)]
            pending.extend(reversed(children))
        elif kind is Kind.OBJECT:
            seen[id(obj)] = (obj, index)
            o = ObjectEntry(paths=[path])
            entries.append(o)
            _push_fields(pending, obj, o.fields)
        else:
            entries.append(ValueEntry(value=obj))
        return index


# (value, path, where the index goes, slot in it)
_Task = Tuple[Any, Path, Any, Any]


def _push_fields(pending: List[_Task], obj: Mapping[Any, Any], fields: Dict[Any, int]) -> None:
    children = []
    for key, value in obj.items():
        fields[key] = 0  # placeholder, keeps key order
        children.append((value, (KeyStep(key),), fields, key))
    pending.extend(reversed(children))


def serialize(data: Mapping[str, Any], classifier: Optional[Classifier] = None) -> Snapshot:
    return SnapshotEncoder(classifier).encode(data)
