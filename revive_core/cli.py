"""Command‑line interface: **revive-core inspect / bench**"""
from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from random import randint

from tqdm import tqdm

from .decoder import revive
from .encoder import serialize
from .json_util import loads
from .models import Snapshot
from .reactivity import computed, ref
from .utils_profile import profile_section, timing_summary

TAG_NAMES = {
    "_": "root",
    "v": "value",
    "a": "array",
    "o": "object",
    "r": "cell",
    "k": "keep",
}

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _load_state(path: Path):
    data = loads(path.read_bytes())
    if not isinstance(data, dict):
        sys.exit(f"❌ {path}: top-level JSON value must be an object")
    return data


def _summary(snap: Snapshot) -> str:
    counts = snap.count_by_tag()
    parts = [f"{TAG_NAMES.get(t, t)}={n}" for t, n in sorted(counts.items())]
    return f"{len(snap)} entries ({', '.join(parts)}) digest={snap.digest()}"


def _synthetic_state(n: int):
    """Fresh graph shaped like a small app store: cells, shared refs, a derived cell."""
    rows = [ref({"x": randint(0, 9), "y": [randint(0, 9) for _ in range(5)]}) for _ in range(n)]
    selected = ref(None)
    state = {
        "rows": rows,
        "selected": selected,
        "pinned": rows[: max(n // 10, 1)],
        "count": computed(lambda: len(rows)),
        "on_select": lambda row: setattr(selected, "value", row),
    }
    selected.value = rows[0] if rows else None
    return state


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_inspect(ns):
    state = _load_state(ns.input)
    snap = serialize(state)
    print(f"✓ {ns.input}: {_summary(snap)}")
    if ns.wire:
        sys.stdout.write(snap.dumps().decode() + "\n")


def cmd_bench(ns):
    """Benchmark serialize → revive on a fresh destination each round."""
    if ns.rounds < 1:
        sys.exit("❌ --rounds must be at least 1")
    ser_ms = rev_ms = 0.0
    for _ in tqdm(range(ns.rounds), desc="Benchmark", disable=not ns.progress):
        source = _synthetic_state(ns.n)
        destination = _synthetic_state(ns.n)

        t0 = time.perf_counter()
        with profile_section("serialize"):
            snap = serialize(source)
        ser_ms += (time.perf_counter() - t0) * 1000

        t0 = time.perf_counter()
        with profile_section("revive"):
            revive(destination, snap)
        rev_ms += (time.perf_counter() - t0) * 1000

    print(
        f"n={ns.n:,} | entries {len(snap):,} | serialize {ser_ms / ns.rounds:.2f} ms"
        f" | revive {rev_ms / ns.rounds:.2f} ms"
    )
    summary = timing_summary()
    if summary:
        print(summary, file=sys.stderr)


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="revive-core", description="state snapshot / revive toolkit")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # inspect --------------------------------------------------------
    sp = sub.add_parser("inspect", help="JSON state → snapshot summary")
    sp.add_argument("--input", "-i", type=Path, required=True)
    sp.add_argument("--wire", action="store_true", help="also print the wire form")
    sp.set_defaults(func=cmd_inspect)

    # bench ----------------------------------------------------------
    sp = sub.add_parser("bench", help="quick serialize/revive benchmark")
    sp.add_argument("--n", type=int, default=10000, help="synthetic row count")
    sp.add_argument("--rounds", type=int, default=1)
    sp.add_argument("--progress", action="store_true", help="show progress bar with tqdm")
    sp.set_defaults(func=cmd_bench)
    return ap


def main(argv=None):
    ns = build_parser().parse_args(argv)
    ns.func(ns)


if __name__ == "__main__":
    main()
