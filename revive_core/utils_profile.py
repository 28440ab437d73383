"""cProfile sections for the benchmark command.

    with profile_section("revive"):
        revive(state, snap)

Off unless ``REVIVE_PROFILE=1`` (or ``utils_profile.PROFILING_ENABLED = True``);
when off a section costs one flag check. Each profiled run writes a pstats
report and appends its wall-clock time to ``TIMINGS``.
"""
import cProfile
import pstats
import sys
from contextlib import contextmanager
from io import StringIO
from time import perf_counter
from typing import Dict, Iterator, List, Optional, TextIO

from .config import profiling_enabled

PROFILING_ENABLED: bool = profiling_enabled()

# section name -> elapsed ms of every profiled run
TIMINGS: Dict[str, List[float]] = {}


def _report(profiler: cProfile.Profile, name: str, elapsed_ms: float, top: int, sort: str) -> str:
    buf = StringIO()
    pstats.Stats(profiler, stream=buf).sort_stats(sort).print_stats(top)
    return f"\n=== [{name}] {elapsed_ms:.1f} ms  Profile ===\n{buf.getvalue()}"


@contextmanager
def profile_section(
    name: str,
    top: int = 20,
    sort: str = "cumulative",
    stream: Optional[TextIO] = None,
) -> Iterator[None]:
    if not PROFILING_ENABLED:
        yield
        return

    profiler = cProfile.Profile()
    start = perf_counter()
    profiler.enable()
    try:
        yield
    finally:
        profiler.disable()
        elapsed_ms = (perf_counter() - start) * 1000
        TIMINGS.setdefault(name, []).append(elapsed_ms)
        (stream or sys.stderr).write(_report(profiler, name, elapsed_ms, top, sort))


def timing_summary() -> str:
    """One line per profiled section; empty when nothing was profiled."""
    return "\n".join(
        f"{name:<12} runs={len(runs)} mean={sum(runs) / len(runs):.2f} ms"
        for name, runs in TIMINGS.items()
    )
