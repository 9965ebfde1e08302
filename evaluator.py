"""
EtherMom Bot - Threshold evaluation.
Pure functions: given the configured thresholds and the stats fetched from the
pool, work out which conditions are worth reporting. Nothing here does I/O or
touches the persisted alert state.
"""

from errors import ConfigError, NoWorkersError
from models import (
    GLOBAL_KEY,
    OFFLINE,
    Mode,
    ProblemSet,
    StatsSnapshot,
    ThresholdSet,
    WorkerSnapshot,
)


def convert_to_mhs(hashrate: float) -> float:
    """Convert a raw H/s value to MH/s, rounded for display."""
    return round(hashrate / 1_000_000, 2)


def _global_expected(thresholds: ThresholdSet) -> float:
    expected = thresholds.expected_hash_for(None)
    if expected <= 0:
        raise ConfigError(
            "Invalid expected hashrate. Please set 'EXPECTED_HASH' in config.py"
        )
    return expected


def global_below(stats: StatsSnapshot, thresholds: ThresholdSet) -> bool:
    """True if the wallet-wide reported hashrate is below expectation."""
    return stats.reported_hashrate < _global_expected(thresholds)


def check_global(stats: StatsSnapshot, thresholds: ThresholdSet) -> ProblemSet:
    problems: ProblemSet = {}
    if global_below(stats, thresholds):
        problems[GLOBAL_KEY] = stats.reported_hashrate
    return problems


def check_workers(
    workers: list[WorkerSnapshot] | None, thresholds: ThresholdSet
) -> ProblemSet:
    """Collect workers that are offline or below their expected hashrate.

    Workers at or above their threshold are left out. The result keeps the
    order in which the pool listed the workers.
    """
    if not workers:
        raise NoWorkersError("No active workers")

    problems: ProblemSet = {}
    for w in workers:
        expected = thresholds.expected_hash_for(w.worker)
        if expected <= 0:
            raise ConfigError(
                f"Invalid expected hashrate for worker {w.worker!r}. "
                "Please set 'EXPECTED_HASH' or 'WORKER_EXPECTED_HASH' in config.py"
            )

        if w.reported_hashrate is None:
            problems[w.worker] = OFFLINE
            continue

        if w.reported_hashrate < expected:
            problems[w.worker] = w.reported_hashrate
    return problems


def check_stale(stats: StatsSnapshot, thresholds: ThresholdSet) -> str | None:
    """Return the stale share alert text, or None if shares are healthy."""
    tolerance = thresholds.stale_tolerance
    if stats.stale_shares > stats.valid_shares * tolerance / 100:
        return (
            f"Stale shares are too high @ {stats.stale_shares}/{stats.valid_shares}. "
            f"Check your workers.\n\n"
            f"Stale Tolerance is set to {tolerance:g}%"
        )
    return None


def evaluate(
    mode: Mode,
    stats: StatsSnapshot | None,
    workers: list[WorkerSnapshot] | None,
    thresholds: ThresholdSet,
) -> tuple[ProblemSet, str | None]:
    """
    Evaluate one monitoring cycle.

    Returns the problem set to hand to the report manager and, when the stale
    share check is enabled and tripped, a stale share message that is sent
    every cycle regardless of the alert state.

    ``stats`` is required for TOTAL and MIX and whenever the stale check is
    on. ``workers`` is required for INDIVIDUAL, and for MIX only when the
    wallet-wide hashrate is below expectation; otherwise it is ignored.
    """
    if stats is None and (mode is not Mode.INDIVIDUAL or thresholds.stale_check):
        raise ValueError(f"{mode.name} evaluation needs the current stats")

    if mode is Mode.TOTAL:
        problems = check_global(stats, thresholds)
    elif mode is Mode.INDIVIDUAL:
        problems = check_workers(workers, thresholds)
    elif mode is Mode.MIX:
        problems = check_global(stats, thresholds)
        if problems:
            # Narrow the alert down to the workers at fault, if any are
            worker_problems = check_workers(workers, thresholds)
            if worker_problems:
                problems = worker_problems
    else:
        raise ConfigError(f"Unsupported mode: {mode!r}")

    stale_message = None
    if thresholds.stale_check:
        stale_message = check_stale(stats, thresholds)

    return problems, stale_message
