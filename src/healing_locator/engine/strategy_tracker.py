"""
Strategy Tracker - Learn which candidate queries work best per target.

Tracks a success rate and last-used time for every (identifier, candidate)
pair and ranks candidates by them. Records live on one tracker instance,
owned by one AdaptiveSelector; nothing here is process-global.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING
import logging
import time

if TYPE_CHECKING:
    from healing_locator.engine.queries import CandidateQuery

logger = logging.getLogger(__name__)


@dataclass
class StrategyRecord:
    """Statistics for one candidate query of one target."""
    name: str
    priority: int
    success_rate: float = 0.5
    last_used: Optional[float] = None
    attempts: int = 0
    successes: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StrategyRecord":
        return cls(
            name=str(data["name"]),
            priority=int(data.get("priority", 0)),
            success_rate=float(data.get("success_rate", 0.5)),
            last_used=data.get("last_used"),
            attempts=int(data.get("attempts", 0)),
            successes=int(data.get("successes", 0)),
        )


class StrategyTracker:
    """
    Track and learn which candidates resolve each target.

    Usage:
        tracker = StrategyTracker()

        # Record outcome
        tracker.record("LoginButton", "role: button with text: Login", 0, success=True)

        # Rank candidates
        ordered = tracker.rank("LoginButton", candidates)
    """

    def __init__(
        self,
        success_increment: float = 0.1,
        failure_decrement: float = 0.05,
        default_rate: float = 0.5,
        clock: Callable[[], float] = time.time,
    ):
        self.success_increment = success_increment
        self.failure_decrement = failure_decrement
        self.default_rate = default_rate
        self._clock = clock
        self._records: Dict[str, Dict[str, StrategyRecord]] = {}

    def get(self, identifier: str, name: str) -> Optional[StrategyRecord]:
        """Return the record for a candidate, or None if never attempted."""
        return self._records.get(identifier, {}).get(name)

    def records(self, identifier: str) -> List[StrategyRecord]:
        """All records for a target, in first-attempt order."""
        return list(self._records.get(identifier, {}).values())

    @property
    def identifiers(self) -> List[str]:
        return list(self._records)

    def record(self, identifier: str, name: str, priority: int, success: bool) -> StrategyRecord:
        """
        Record the outcome of one candidate attempt.

        Success raises the rate by success_increment (capped at 1.0) and stamps
        last_used; failure lowers it by failure_decrement (floored at 0.0).

        Args:
            identifier: Target identifier
            name: Candidate description
            priority: A-priori index of the candidate
            success: Whether the candidate produced a visible element
        """
        by_name = self._records.setdefault(identifier, {})
        stats = by_name.get(name)
        if stats is None:
            stats = StrategyRecord(name=name, priority=priority, success_rate=self.default_rate)
            by_name[name] = stats

        stats.attempts += 1
        if success:
            stats.successes += 1
            stats.success_rate = min(1.0, stats.success_rate + self.success_increment)
            stats.last_used = self._clock()
        else:
            stats.success_rate = max(0.0, stats.success_rate - self.failure_decrement)

        logger.debug(
            f"{identifier} / {name}: {'success' if success else 'failure'}, "
            f"rate={stats.success_rate:.2f}"
        )
        return stats

    def rank(self, identifier: str, candidates: List["CandidateQuery"]) -> List["CandidateQuery"]:
        """
        Order candidates by effectiveness for this target.

        Sort key: success rate (desc), last used (desc, never-used last),
        a-priori position (asc). Untried candidates use default_rate.
        """
        def key(item):
            index, candidate = item
            stats = self.get(identifier, candidate.describe())
            rate = stats.success_rate if stats else self.default_rate
            last_used = stats.last_used if stats and stats.last_used is not None else float("-inf")
            return (-rate, -last_used, index)

        return [candidate for _, candidate in sorted(enumerate(candidates), key=key)]

    def get_stats(self, identifier: str) -> Dict[str, dict]:
        """Get human-readable stats for a target."""
        return {
            name: {
                "success_rate": f"{stats.success_rate:.1%}",
                "attempts": stats.attempts,
                "successes": stats.successes,
            }
            for name, stats in self._records.get(identifier, {}).items()
        }

    def to_dict(self) -> Dict[str, List[dict]]:
        return {
            identifier: [asdict(stats) for stats in by_name.values()]
            for identifier, by_name in self._records.items()
        }

    def load_dict(self, data: Dict[str, List[dict]]) -> None:
        """Replace all records with previously exported ones."""
        records: Dict[str, Dict[str, StrategyRecord]] = {}
        for identifier, entries in data.items():
            by_name: Dict[str, StrategyRecord] = {}
            for entry in entries:
                stats = StrategyRecord.from_dict(entry)
                by_name[stats.name] = stats
            records[identifier] = by_name
        self._records = records

    def clear(self, identifier: Optional[str] = None) -> None:
        """Clear statistics for one target or all targets."""
        if identifier:
            self._records.pop(identifier, None)
        else:
            self._records.clear()
