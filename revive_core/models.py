from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union

import xxhash

from .json_util import dumps, loads

# wire tags
TAG_ROOT   = "_"
TAG_VALUE  = "v"
TAG_ARRAY  = "a"
TAG_OBJECT = "o"
TAG_CELL   = "r"
TAG_KEEP   = "k"


class SnapshotFormatError(ValueError):
    """Raised when a wire structure is not a valid snapshot."""
    pass


class _Missing:
    """Absence marker; ``None`` is a real value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()

# ──────────────────────────────────────────────────────────────
# 1. Structural paths
# ──────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class KeyStep:
    key: Any

    def to_wire(self) -> Any:
        return self.key


@dataclass(frozen=True)
class IndexStep:
    """List position. Walked as a nested path holding a single key."""
    index: int

    @property
    def path(self) -> Path:
        return (KeyStep(self.index),)

    def to_wire(self) -> Any:
        return [self.index]


@dataclass(frozen=True)
class NestedStep:
    path: Path

    def to_wire(self) -> Any:
        return path_to_wire(self.path)


Step = Union[KeyStep, IndexStep, NestedStep]
Path = Tuple[Step, ...]


def path_to_wire(path: Path) -> List[Any]:
    return [step.to_wire() for step in path]


def path_from_wire(raw: Any) -> Path:
    if not isinstance(raw, (list, tuple)):
        raise SnapshotFormatError(f"path must be a list, got {type(raw).__name__}")
    steps: List[Step] = []
    for item in raw:
        if isinstance(item, (list, tuple)):
            if len(item) == 1 and isinstance(item[0], int) and not isinstance(item[0], bool):
                steps.append(IndexStep(item[0]))
            else:
                steps.append(NestedStep(path_from_wire(item)))
        else:
            steps.append(KeyStep(item))
    return tuple(steps)


def _paths_from_wire(raw: Any) -> List[Path]:
    if not isinstance(raw, (list, tuple)):
        raise SnapshotFormatError("paths must be a list of paths")
    return [path_from_wire(p) for p in raw]


# ──────────────────────────────────────────────────────────────
# 2. Entries
# ──────────────────────────────────────────────────────────────
@dataclass
class BaseEntry:
    tag: str

    def to_wire(self) -> List[Any]:
        raise NotImplementedError


@dataclass
class RootEntry(BaseEntry):
    keys: Dict[str, int] = field(default_factory=dict)
    tag: str = field(default=TAG_ROOT, init=False)

    def to_wire(self) -> List[Any]:
        return [self.tag, dict(self.keys)]


@dataclass
class ValueEntry(BaseEntry):
    value: Any = None
    tag: str = field(default=TAG_VALUE, init=False)

    def to_wire(self) -> List[Any]:
        return [self.tag, self.value]


@dataclass
class PathEntry(BaseEntry):
    """Entry kind that records every path it was reached by."""
    paths: List[Path] = field(default_factory=list)

    def _wire_paths(self) -> List[Any]:
        return [path_to_wire(p) for p in self.paths]


@dataclass
class ArrayEntry(PathEntry):
    items: List[int] = field(default_factory=list)
    tag: str = field(default=TAG_ARRAY, init=False)

    def to_wire(self) -> List[Any]:
        return [self.tag, list(self.items), self._wire_paths()]


@dataclass
class ObjectEntry(PathEntry):
    fields: Dict[Any, int] = field(default_factory=dict)
    tag: str = field(default=TAG_OBJECT, init=False)

    def to_wire(self) -> List[Any]:
        return [self.tag, dict(self.fields), self._wire_paths()]


@dataclass
class CellEntry(PathEntry):
    child: int = 0
    tag: str = field(default=TAG_CELL, init=False)

    def to_wire(self) -> List[Any]:
        return [self.tag, self.child, self._wire_paths()]


@dataclass
class KeepEntry(PathEntry):
    tag: str = field(default=TAG_KEEP, init=False)

    def to_wire(self) -> List[Any]:
        return [self.tag, self._wire_paths()]


def entry_from_wire(raw: Any) -> BaseEntry:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise SnapshotFormatError(f"entry must be a non-empty list, got {raw!r}")
    tag = raw[0]
    try:
        if tag == TAG_ROOT:
            return RootEntry(keys=dict(raw[1]))
        if tag == TAG_VALUE:
            return ValueEntry(value=raw[1])
        if tag == TAG_ARRAY:
            return ArrayEntry(items=list(raw[1]), paths=_paths_from_wire(raw[2]))
        if tag == TAG_OBJECT:
            return ObjectEntry(fields=dict(raw[1]), paths=_paths_from_wire(raw[2]))
        if tag == TAG_CELL:
            return CellEntry(child=int(raw[1]), paths=_paths_from_wire(raw[2]))
        if tag == TAG_KEEP:
            return KeepEntry(paths=_paths_from_wire(raw[1]))
    except (IndexError, TypeError) as e:
        raise SnapshotFormatError(f"malformed '{tag}' entry: {raw!r}") from e
    raise SnapshotFormatError(f"unknown entry tag {tag!r}")


# ──────────────────────────────────────────────────────────────
# 3. Snapshot (the flat entry sequence)
# ──────────────────────────────────────────────────────────────
@dataclass
class Snapshot:
    entries: List[BaseEntry] = field(default_factory=list)

    @property
    def root(self) -> RootEntry:
        if not self.entries or not isinstance(self.entries[0], RootEntry):
            raise SnapshotFormatError("entry 0 must be the root entry")
        return self.entries[0]

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> BaseEntry:
        return self.entries[index]

    def __iter__(self) -> Iterator[BaseEntry]:
        return iter(self.entries)

    def count_by_tag(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for e in self.entries:
            counts[e.tag] = counts.get(e.tag, 0) + 1
        return counts

    # ── wire form ──────────────────────────────────────────
    def to_wire(self) -> List[List[Any]]:
        return [e.to_wire() for e in self.entries]

    @classmethod
    def from_wire(cls, data: Any) -> Snapshot:
        if not isinstance(data, (list, tuple)):
            raise SnapshotFormatError("snapshot must be a list of entries")
        snap = cls(entries=[entry_from_wire(raw) for raw in data])
        snap.root  # validates entry 0
        return snap

    @classmethod
    def coerce(cls, data: Union[Snapshot, List[Any]]) -> Snapshot:
        if isinstance(data, Snapshot):
            return data
        return cls.from_wire(data)

    def dumps(self) -> bytes:
        """JSON bytes of the wire form. Stored values must be JSON-representable.

        JSON object keys are always strings, so a root or dict key of any other
        type would come back changed; such snapshots are rejected.
        """
        for index, entry in enumerate(self.entries):
            if isinstance(entry, RootEntry):
                keys = entry.keys
            elif isinstance(entry, ObjectEntry):
                keys = entry.fields
            else:
                continue
            for key in keys:
                if not isinstance(key, str):
                    raise SnapshotFormatError(
                        f"entry {index}: key {key!r} is not a string and would not survive JSON"
                    )
        return dumps(self.to_wire())

    @classmethod
    def loads(cls, blob: Union[bytes, str]) -> Snapshot:
        try:
            data = loads(blob)
        except ValueError as e:
            raise SnapshotFormatError(f"snapshot JSON parsing failed: {e}") from e
        return cls.from_wire(data)

    def digest(self) -> str:
        """16-hex-char xxh3 digest of the wire form (non-str keys hashed by their text)."""
        return xxhash.xxh3_64(dumps(self.to_wire())).hexdigest()
