"""
Strategy Resolver - Ordered candidate resolution with fallback.

Tries each candidate query of a target in list order and returns the first
element that becomes visible within the per-candidate timeout. A candidate
that times out or errors is logged and skipped; only exhausting the whole
list is fatal.

Worst-case latency is len(candidates) x timeout, since each candidate gets
its own wall-clock timeout.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING
import logging
import time

from healing_locator.exceptions import ResolutionFailure

if TYPE_CHECKING:
    from healing_locator.interfaces.page import IPageAccess
    from healing_locator.engine.queries import CandidateQuery, TargetDescription

logger = logging.getLogger(__name__)


DEFAULT_CANDIDATE_TIMEOUT_MS = 5000


@dataclass
class AttemptResult:
    """
    Outcome of trying one candidate.

    Attributes:
        identifier: Target identifier
        query: The candidate that was tried
        position: Index of the candidate in the list that was resolved
        element: Visible element, when the attempt succeeded
        error: Failure reason, when it did not
        elapsed_ms: Time spent on the attempt
    """
    identifier: str
    query: "CandidateQuery"
    position: int
    element: Any = None
    error: Optional[str] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


AttemptCallback = Callable[[AttemptResult], None]


class StrategyResolver:
    """
    Deterministic resolution of an ordered candidate list.

    The resolver holds no statistics; per call it walks the list once.
    Callers that want per-attempt outcomes pass an on_attempt callback.

    Example:
        >>> resolver = StrategyResolver(PlaywrightPageAccess(page))
        >>> target = TargetDescription("LoginButton", (
        ...     RoleQuery("button", "Login"),
        ...     StructuralQuery('button[type="submit"]'),
        ... ))
        >>> button = await resolver.resolve(target)
    """

    def __init__(
        self,
        page: "IPageAccess",
        candidate_timeout_ms: int = DEFAULT_CANDIDATE_TIMEOUT_MS,
    ):
        self.page = page
        self.candidate_timeout_ms = candidate_timeout_ms
        self._healing_history: Dict[str, List[str]] = {}

    async def attempt(
        self,
        identifier: str,
        query: "CandidateQuery",
        position: int = 0,
        timeout_ms: Optional[int] = None,
    ) -> AttemptResult:
        """
        Try a single candidate and report the outcome without raising.

        Compiling the query happens outside the error handling, so a
        malformed candidate propagates instead of counting as a miss.
        """
        timeout = timeout_ms if timeout_ms is not None else self.candidate_timeout_ms
        start = time.monotonic()

        compiled = query.compile(self.page)
        try:
            element = await self.page.wait_until_visible(compiled, timeout)
        except Exception as e:
            return AttemptResult(
                identifier=identifier,
                query=query,
                position=position,
                error=str(e) or type(e).__name__,
                elapsed_ms=(time.monotonic() - start) * 1000,
            )

        return AttemptResult(
            identifier=identifier,
            query=query,
            position=position,
            element=element,
            elapsed_ms=(time.monotonic() - start) * 1000,
        )

    async def resolve(
        self,
        target: "TargetDescription",
        on_attempt: Optional[AttemptCallback] = None,
    ) -> Any:
        """
        Resolve a target to its first visible candidate.

        Args:
            target: Identifier plus ordered candidate queries
            on_attempt: Called with every AttemptResult, success or failure

        Returns:
            The visible element

        Raises:
            ResolutionFailure: Every candidate timed out or errored
        """
        attempted: List[str] = []

        for position, query in enumerate(target.candidates):
            result = await self.attempt(target.identifier, query, position)
            attempted.append(query.describe())

            if on_attempt:
                on_attempt(result)

            if result.ok:
                if position > 0:
                    logger.info(f"Self-healed {target.identifier} using: {query.describe()}")
                    self._healing_history.setdefault(target.identifier, []).append(query.describe())
                else:
                    logger.debug(f"Resolved {target.identifier} using: {query.describe()}")
                return result.element

            logger.warning(
                f"Candidate failed for {target.identifier}: {query.describe()} ({result.error})"
            )

        raise ResolutionFailure(target.identifier, "all candidates exhausted", attempted)

    def get_healing_history(self) -> Dict[str, List[str]]:
        """Candidates that resolved a target after an earlier candidate failed."""
        return {identifier: list(names) for identifier, names in self._healing_history.items()}
