"""revive-core - identity-preserving state snapshots for live reload."""

__version__ = "0.1.0"

from .models import (
    MISSING,
    ArrayEntry,
    BaseEntry,
    CellEntry,
    IndexStep,
    KeepEntry,
    KeyStep,
    NestedStep,
    ObjectEntry,
    RootEntry,
    Snapshot,
    SnapshotFormatError,
    ValueEntry,
)
from .classifier import Classifier, Kind
from .encoder import SnapshotEncoder, serialize
from .decoder import ReviveError, SnapshotReviver, locate, revive
from .reactivity import Computed, Ref, computed, is_computed, is_ref, ref
from .hot_reload import ReloadBridge

__all__ = [
    "MISSING",
    "ArrayEntry",
    "BaseEntry",
    "CellEntry",
    "IndexStep",
    "KeepEntry",
    "KeyStep",
    "NestedStep",
    "ObjectEntry",
    "RootEntry",
    "Snapshot",
    "SnapshotFormatError",
    "ValueEntry",
    "Classifier",
    "Kind",
    "SnapshotEncoder",
    "serialize",
    "ReviveError",
    "SnapshotReviver",
    "locate",
    "revive",
    "Computed",
    "Ref",
    "computed",
    "is_computed",
    "is_ref",
    "ref",
    "ReloadBridge",
]
