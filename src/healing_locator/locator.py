"""
SelfHealingLocator - One object per page for resilient element lookup.

Bundles the adaptive selector and the specialized finders behind a single
facade, and optionally keeps learning data in a file between runs.

Example:
    >>> from healing_locator import SelfHealingLocator
    >>> locator = SelfHealingLocator.for_playwright(page)
    >>> saudi_id = await locator.find_input(
    ...     "SaudiIdInput", type="text", name="id", placeholder="Saudi ID", label="Saudi ID",
    ... )
    >>> await saudi_id.fill("1111111111")
    >>> locator.persist()
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union, TYPE_CHECKING
import logging

from healing_locator.engine.adaptive import AdaptiveSelector
from healing_locator.engine.finders import ElementFinder

if TYPE_CHECKING:
    from healing_locator.config.settings import LocatorSettings
    from healing_locator.engine.fingerprint import ElementFingerprint
    from healing_locator.engine.queries import TargetDescription
    from healing_locator.engine.strategy_tracker import StrategyRecord
    from healing_locator.interfaces.page import IPageAccess, TextMatch

logger = logging.getLogger(__name__)


class SelfHealingLocator:
    """
    Facade over AdaptiveSelector and ElementFinder for one page.

    Statistics and fingerprints belong to this instance. Create one per
    page; use export/import (or a learning file) to carry them across runs.
    """

    def __init__(
        self,
        page: "IPageAccess",
        settings: Optional["LocatorSettings"] = None,
    ):
        """
        Initialize the locator.

        Args:
            page: Page access for this session
            settings: Locator settings (defaults from configuration if None)
        """
        if settings is None:
            from healing_locator.config import get_settings
            settings = get_settings().locator

        self.settings = settings
        self.selector = AdaptiveSelector(page, settings)
        self.finder = ElementFinder(self.selector)

        if settings.learning_file and Path(settings.learning_file).expanduser().exists():
            self.selector.load_learning_data(settings.learning_file)
            logger.info(f"Loaded learning data from {settings.learning_file}")

    @classmethod
    def for_playwright(cls, page: Any, settings: Optional["LocatorSettings"] = None) -> "SelfHealingLocator":
        """Build a locator for an async Playwright page."""
        from healing_locator.browsers.playwright_page import PlaywrightPageAccess
        return cls(PlaywrightPageAccess(page), settings)

    @property
    def page(self) -> "IPageAccess":
        return self.selector.page

    # Resolution

    async def resolve(self, target: "TargetDescription") -> Any:
        """Try candidates in a-priori order; raise ResolutionFailure when exhausted."""
        return await self.selector.resolve(target)

    async def resolve_adaptive(self, target: "TargetDescription") -> Any:
        """Try candidates in learned order, then similarity recovery."""
        return await self.selector.resolve_adaptive(target)

    async def find_input(self, identifier: str, **fields: Any) -> Any:
        """See ElementFinder.find_input."""
        return await self.finder.find_input(identifier, **fields)

    async def find_button(self, identifier: str, **fields: Any) -> Any:
        """See ElementFinder.find_button."""
        return await self.finder.find_button(identifier, **fields)

    async def find_by_text(
        self,
        identifier: str,
        primary: "TextMatch",
        *fallbacks: "TextMatch",
        adaptive: bool = True,
    ) -> Any:
        """See ElementFinder.find_by_text."""
        return await self.finder.find_by_text(identifier, primary, *fallbacks, adaptive=adaptive)

    async def find_element(
        self,
        identifier: str,
        primary_selector: str,
        fallback_selectors: Sequence[str] = (),
        adaptive: bool = False,
    ) -> Any:
        """See ElementFinder.find_element."""
        return await self.finder.find_element(
            identifier, primary_selector, fallback_selectors, adaptive=adaptive,
        )

    async def smart_locate(self, identifier: str, **options: Any) -> Any:
        """See ElementFinder.smart_locate."""
        return await self.finder.smart_locate(identifier, **options)

    # Introspection

    def get_healing_history(self) -> Dict[str, List[str]]:
        """Candidates that healed each target, in the order they did."""
        return self.selector.resolver.get_healing_history()

    def get_strategy_records(self, identifier: str) -> List["StrategyRecord"]:
        return self.selector.tracker.records(identifier)

    def get_fingerprint(self, identifier: str) -> Optional["ElementFingerprint"]:
        return self.selector.get_fingerprint(identifier)

    # Persistence

    def export_learning_data(self) -> str:
        return self.selector.export_learning_data()

    def import_learning_data(self, data: str) -> None:
        self.selector.import_learning_data(data)

    def save_learning_data(self, path: Union[str, Path]) -> None:
        self.selector.save_learning_data(path)

    def load_learning_data(self, path: Union[str, Path]) -> None:
        self.selector.load_learning_data(path)

    def persist(self) -> None:
        """Save learning data to the configured learning file, if any."""
        if self.settings.learning_file:
            self.save_learning_data(self.settings.learning_file)
