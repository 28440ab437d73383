"""Carry state across a module reload.

Typical flow::

    bridge = ReloadBridge()

    # before tearing the old module down
    bridge.stash("counter", old_module.state)

    # after the new module has built its fresh state
    bridge.restore("counter", new_module.state)

``restore`` reuses every cell, list and dict the new state already has at a
matching position, so anything subscribed to them stays connected.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, MutableMapping, Mapping, Optional

from .classifier import Classifier
from .decoder import SnapshotReviver
from .encoder import SnapshotEncoder
from .models import Snapshot

logger = logging.getLogger("revive_core.hot_reload")
logger.addHandler(logging.NullHandler())


class ReloadBridge:
    """In-memory holder for snapshots taken before a reload, keyed by name."""

    def __init__(self, classifier: Optional[Classifier] = None, config: Optional[Dict[str, Any]] = None):
        self._encoder = SnapshotEncoder(classifier)
        self._reviver = SnapshotReviver(classifier, config)
        self._snapshots: Dict[str, Snapshot] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._snapshots

    def stash(self, name: str, state: Mapping[str, Any]) -> Snapshot:
        snap = self._encoder.encode(state)
        self._snapshots[name] = snap
        logger.info("Stashed %r: %d entries", name, len(snap))
        return snap

    def restore(self, name: str, state: MutableMapping[str, Any]) -> bool:
        """Revive the snapshot stashed under *name* onto *state*.

        Returns False when nothing was stashed. The snapshot is consumed
        either way; a failed revive is logged and re-raised.
        """
        snap = self._snapshots.pop(name, None)
        if snap is None:
            logger.info("No snapshot for %r, keeping fresh state", name)
            return False
        try:
            self._reviver.revive(state, snap)
        except Exception:
            logger.exception("Failed to restore %r", name)
            raise
        logger.info("Restored %r onto %d keys", name, len(state))
        return True

    def discard(self, name: str) -> None:
        self._snapshots.pop(name, None)
