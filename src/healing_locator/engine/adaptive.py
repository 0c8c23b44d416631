"""
Adaptive Selector - Learned candidate ordering with fingerprint recovery.

Wraps the StrategyResolver with two per-instance stores:
- a StrategyTracker holding success rate and recency per candidate
- a fingerprint map holding one ElementFingerprint per target identifier

Each resolve_adaptive call reorders the candidates by the tracker, lets the
resolver walk them while every single attempt feeds back into the tracker,
captures a fingerprint on success and falls back to similarity recovery
when the list is exhausted.

One selector belongs to one page. Selectors are never shared between
concurrently driven pages.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union, TYPE_CHECKING
import json
import logging
import time

from healing_locator.engine.fingerprint import ElementFingerprint, capture_fingerprint, learned_selector
from healing_locator.engine.queries import StructuralQuery
from healing_locator.engine.recovery import SimilarityRecovery
from healing_locator.engine.resolver import AttemptResult, StrategyResolver
from healing_locator.engine.strategy_tracker import StrategyTracker
from healing_locator.exceptions import LearningDataError, ResolutionFailure

if TYPE_CHECKING:
    from healing_locator.config.settings import LocatorSettings
    from healing_locator.engine.queries import TargetDescription
    from healing_locator.interfaces.page import IPageAccess

logger = logging.getLogger(__name__)


LEARNING_DATA_VERSION = 1


class AdaptiveSelector:
    """
    Self-healing selector that learns from every attempt.

    Example:
        >>> selector = AdaptiveSelector(PlaywrightPageAccess(page))
        >>> element = await selector.resolve_adaptive(target)
        >>> blob = selector.export_learning_data()
    """

    def __init__(
        self,
        page: "IPageAccess",
        settings: Optional["LocatorSettings"] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the selector.

        Args:
            page: Page access for this session
            settings: Timeouts, tuning constants and feature switches
            clock: Source of last-used timestamps
        """
        if settings is None:
            from healing_locator.config.settings import LocatorSettings
            settings = LocatorSettings()

        self.page = page
        self.settings = settings
        self.resolver = StrategyResolver(page, candidate_timeout_ms=settings.candidate_timeout_ms)
        self.tracker = StrategyTracker(
            success_increment=settings.success_increment,
            failure_decrement=settings.failure_decrement,
            default_rate=settings.default_rate,
            clock=clock,
        )
        self.recovery = SimilarityRecovery(
            page,
            timeout_ms=settings.recovery_timeout_ms,
            position_tolerance_px=settings.position_tolerance_px,
            similarity_tolerance_px=settings.similarity_tolerance_px,
        )
        self._fingerprints: Dict[str, ElementFingerprint] = {}

    @property
    def capture_enabled(self) -> bool:
        return self.settings.capture_fingerprints

    def get_fingerprint(self, identifier: str) -> Optional[ElementFingerprint]:
        return self._fingerprints.get(identifier)

    @property
    def fingerprints(self) -> Dict[str, ElementFingerprint]:
        return dict(self._fingerprints)

    async def resolve(self, target: "TargetDescription") -> Any:
        """Plain ordered resolution; no statistics, no fingerprints."""
        return await self.resolver.resolve(target)

    async def resolve_adaptive(self, target: "TargetDescription") -> Any:
        """
        Resolve a target using learned ordering, then similarity recovery.

        Args:
            target: Identifier plus candidates in a-priori order

        Returns:
            The visible element

        Raises:
            ResolutionFailure: Ranked candidates and recovery both exhausted
        """
        priorities = target.priority_of()
        ranked = target.with_candidates(self.tracker.rank(target.identifier, list(target.candidates)))
        logger.debug(f"Ranked candidates for {target.identifier}: {ranked.describe()}")

        def on_attempt(result: AttemptResult) -> None:
            name = result.query.describe()
            self.tracker.record(target.identifier, name, priorities.get(name, result.position), result.ok)

        try:
            element = await self.resolver.resolve(ranked, on_attempt=on_attempt)
        except ResolutionFailure as failure:
            element = await self._recover(target.identifier)
            if element is None:
                raise ResolutionFailure(
                    target.identifier,
                    "adaptive and recovery both exhausted",
                    failure.attempted,
                ) from failure
            return element

        if self.capture_enabled:
            await self.learn(target.identifier, element)
        return element

    async def try_learned_pattern(self, identifier: str) -> Optional[Any]:
        """
        Try the selector rebuilt from a stored fingerprint (tag#id or tag.class).

        Returns the element, or None when there is no usable fingerprint or
        the selector does not produce a visible element in time.
        """
        if not self.settings.use_learned_patterns:
            return None
        fingerprint = self._fingerprints.get(identifier)
        if fingerprint is None:
            return None
        selector = learned_selector(fingerprint)
        if selector is None:
            return None

        # No .first: a selector matching several elements must miss, not guess
        result = await self.resolver.attempt(
            identifier,
            StructuralQuery(selector),
            timeout_ms=self.settings.recovery_timeout_ms,
        )
        if result.ok:
            logger.info(f"Used learned pattern for {identifier}: {selector}")
            return result.element
        logger.debug(f"Learned pattern {selector} missed for {identifier}: {result.error}")
        return None

    async def learn(self, identifier: str, element: Any) -> None:
        """Capture and store the fingerprint of a resolved element."""
        try:
            self._fingerprints[identifier] = await capture_fingerprint(self.page, element)
        except Exception as e:
            logger.debug(f"Fingerprint capture failed for {identifier}: {e}")

    async def _recover(self, identifier: str) -> Optional[Any]:
        if not self.capture_enabled:
            return None
        fingerprint = self._fingerprints.get(identifier)
        if fingerprint is None:
            return None
        return await self.recovery.recover(identifier, fingerprint)

    # Persistence

    def export_learning_data(self) -> str:
        """Serialize statistics and fingerprints to a JSON blob."""
        return json.dumps({
            "version": LEARNING_DATA_VERSION,
            "strategies": self.tracker.to_dict(),
            "fingerprints": {
                identifier: fingerprint.to_dict()
                for identifier, fingerprint in self._fingerprints.items()
            },
        })

    def import_learning_data(self, data: str) -> None:
        """
        Replace statistics and fingerprints with an exported blob.

        Raises:
            LearningDataError: The blob is not valid learning data
        """
        _, self._fingerprints = parse_learning_data(data, self.tracker)
        logger.debug(
            f"Imported learning data for {len(self.tracker.identifiers)} targets, "
            f"{len(self._fingerprints)} fingerprints"
        )

    def save_learning_data(self, path: Union[str, Path]) -> None:
        """Write exported learning data to a file."""
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_learning_data())
        logger.debug(f"Saved learning data to {path}")

    def load_learning_data(self, path: Union[str, Path]) -> None:
        """
        Import learning data from a file.

        Raises:
            LearningDataError: The file is missing or does not hold learning data
        """
        self.import_learning_data(read_learning_file(path))


def parse_learning_data(
    data: str,
    tracker: Optional[StrategyTracker] = None,
) -> Tuple[StrategyTracker, Dict[str, ElementFingerprint]]:
    """
    Parse an exported blob into a tracker and a fingerprint map.

    When a tracker is given its records are replaced, but only once the
    whole blob has parsed.

    Raises:
        LearningDataError: The blob is not valid learning data
    """
    if tracker is None:
        tracker = StrategyTracker()
    try:
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise ValueError("top level must be an object")
        # A blob without a version is read as the current format
        version = parsed.get("version", LEARNING_DATA_VERSION)
        if version != LEARNING_DATA_VERSION:
            raise ValueError(f"unsupported version {version!r}")
        fingerprints = {
            identifier: ElementFingerprint.from_dict(entry)
            for identifier, entry in (parsed.get("fingerprints") or {}).items()
        }
        tracker.load_dict(parsed.get("strategies") or {})
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise LearningDataError(f"Invalid learning data: {e}")
    return tracker, fingerprints


def read_learning_file(path: Union[str, Path]) -> str:
    """Read a learning data file, raising LearningDataError if unreadable."""
    path = Path(path).expanduser()
    try:
        return path.read_text()
    except OSError as e:
        raise LearningDataError(f"Cannot read learning data from {path}: {e}")
