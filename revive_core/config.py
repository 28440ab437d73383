"""revive_core default behaviour switches"""
import os

REVIVE_CONFIG = {
    "truncate_arrays": True,   # revived lists mirror the snapshot's length
    "prune_root_keys": True,   # drop destination keys absent from the snapshot
}

PROFILE_ENV = "REVIVE_PROFILE"


def profiling_enabled() -> bool:
    return bool(int(os.getenv(PROFILE_ENV, "0") or "0"))
