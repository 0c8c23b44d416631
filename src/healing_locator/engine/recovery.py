"""
Similarity Recovery - Last-resort search for an element resembling a fingerprint.

Runs after every candidate query of a target has failed. Three techniques,
always in this order, first visible match wins:

1. Attribute similarity - tag + first class, tag + type, tag + partial name
2. Positional context  - an element of the same tag near the recorded origin
3. General similarity  - shared key attributes, equal text, or close position
"""

from typing import Any, List, Optional, TYPE_CHECKING
import logging

from healing_locator.engine.fingerprint import (
    attribute_variations,
    capture_fingerprint,
    is_similar,
    within_tolerance,
)

if TYPE_CHECKING:
    from healing_locator.interfaces.page import IPageAccess
    from healing_locator.engine.fingerprint import ElementFingerprint

logger = logging.getLogger(__name__)


class SimilarityRecovery:
    """
    Fingerprint-driven element recovery.

    Args:
        page: Page access to search
        timeout_ms: Visibility wait per probe, shorter than the candidate timeout
        position_tolerance_px: Max offset per axis for positional context
        similarity_tolerance_px: Max offset per axis for general similarity
    """

    def __init__(
        self,
        page: "IPageAccess",
        timeout_ms: int = 1000,
        position_tolerance_px: float = 100,
        similarity_tolerance_px: float = 50,
    ):
        self.page = page
        self.timeout_ms = timeout_ms
        self.position_tolerance_px = position_tolerance_px
        self.similarity_tolerance_px = similarity_tolerance_px

    async def recover(self, identifier: str, fingerprint: "ElementFingerprint") -> Optional[Any]:
        """Try every technique in order; return the first visible match or None."""
        techniques = [
            ("attribute similarity", self.find_by_attribute_similarity),
            ("positional context", self.find_by_positional_context),
            ("general similarity", self.find_by_general_similarity),
        ]
        for label, technique in techniques:
            element = await technique(fingerprint)
            if element is not None:
                logger.info(f"Recovered {identifier} by {label}")
                return element
            logger.debug(f"{label} found nothing for {identifier}")
        return None

    async def find_by_attribute_similarity(self, fingerprint: "ElementFingerprint") -> Optional[Any]:
        for selector in attribute_variations(fingerprint):
            query = self.page.query_by_structural_selector(selector, first=True)
            try:
                return await self.page.wait_until_visible(query, self.timeout_ms)
            except Exception as e:
                logger.debug(f"Attribute variation {selector} missed: {e}")
        return None

    async def find_by_positional_context(self, fingerprint: "ElementFingerprint") -> Optional[Any]:
        if fingerprint.position is None:
            return None

        for element in await self._enumerate(fingerprint.tag):
            try:
                box = await self.page.get_bounding_box(element)
                if box is None:
                    continue
                if within_tolerance((box.x, box.y), fingerprint.position, self.position_tolerance_px):
                    return await self.page.wait_until_visible(element, self.timeout_ms)
            except Exception as e:
                logger.debug(f"Skipping positional candidate: {e}")
        return None

    async def find_by_general_similarity(self, fingerprint: "ElementFingerprint") -> Optional[Any]:
        for element in await self._enumerate("*"):
            try:
                if await self.page.get_tag_name(element) != fingerprint.tag:
                    continue
                candidate = await capture_fingerprint(self.page, element)
                if is_similar(fingerprint, candidate, self.similarity_tolerance_px):
                    return await self.page.wait_until_visible(element, self.timeout_ms)
            except Exception as e:
                logger.debug(f"Skipping similarity candidate: {e}")
        return None

    async def _enumerate(self, selector: str) -> List[Any]:
        query = self.page.query_by_structural_selector(selector)
        try:
            return await self.page.all_elements(query)
        except Exception as e:
            logger.debug(f"Could not enumerate {selector}: {e}")
            return []
