"""
EtherMom Bot - Data model.
Typed records exchanged between the pool API client, the evaluator and the
report manager.
"""

from dataclasses import dataclass, field
from enum import Enum

from errors import ConfigError

# ProblemSet key used for the wallet-wide (pool reported) hashrate
GLOBAL_KEY = "GLOBAL"

# ProblemSet severity of a worker that reported no hashrate at all
OFFLINE = -1.0

# Ordered mapping of worker id (or GLOBAL_KEY) -> severity. Plain dicts keep
# insertion order, which is the order entries are listed in the alert.
ProblemSet = dict[str, float]


class Mode(Enum):
    TOTAL = "total"
    INDIVIDUAL = "individual"
    MIX = "mix"

    @classmethod
    def parse(cls, value: "str | Mode") -> "Mode":
        """Parse a mode name from config, case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ConfigError(
                f"Invalid mode {value!r}. Please set MODE to one of: {valid}"
            ) from None


@dataclass(frozen=True)
class StatsSnapshot:
    """Wallet-wide statistics from the currentStats endpoint."""

    reported_hashrate: float
    stale_shares: int
    valid_shares: int


@dataclass(frozen=True)
class WorkerSnapshot:
    """One worker from the workers endpoint.

    ``reported_hashrate`` is None when the worker reported nothing, which is
    treated as offline rather than as a zero hashrate.
    """

    worker: str
    reported_hashrate: float | None


@dataclass(frozen=True)
class ThresholdSet:
    mode: Mode
    expected_hash: float = 0.0
    worker_expected_hash: dict[str, float] = field(default_factory=dict)
    stale_check: bool = False
    stale_tolerance: float = 10.0
    continuous_report: bool = False

    def expected_hash_for(self, worker_id: str | None = None) -> float:
        """Expected hashrate for a worker, falling back to the global value.

        ``None`` asks for the wallet-wide expectation.
        """
        if worker_id is not None and worker_id in self.worker_expected_hash:
            return float(self.worker_expected_hash[worker_id])
        return float(self.expected_hash)
