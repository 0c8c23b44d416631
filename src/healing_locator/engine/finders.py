"""
Specialized Finders - Default candidate lists for common element shapes.

Input, button and text finders turn a handful of optional fields into a
TargetDescription with a domain-appropriate order, then hand it to the
adaptive selector (or the plain resolver). Omitted fields contribute no
candidate; supplying no usable field at all is caller misuse and raises
InvalidTargetError before the page is touched.
"""

from typing import Any, List, Optional, Sequence, TYPE_CHECKING

from healing_locator.engine.queries import (
    CandidateQuery,
    LabelQuery,
    PlaceholderQuery,
    RoleQuery,
    StructuralQuery,
    TargetDescription,
    TestIdQuery,
    TextQuery,
    rank_by_stability,
)
from healing_locator.engine.fingerprint import quote_attribute
from healing_locator.exceptions import InvalidTargetError
from healing_locator.interfaces.page import TextMatch

if TYPE_CHECKING:
    from healing_locator.engine.adaptive import AdaptiveSelector


def _target(identifier: str, candidates: List[CandidateQuery]) -> TargetDescription:
    if not candidates:
        raise InvalidTargetError(
            f"No candidate queries derivable for '{identifier}'",
            identifier=identifier,
        )
    return TargetDescription(identifier, tuple(candidates))


def input_candidates(
    identifier: str,
    type: Optional[str] = None,
    name: Optional[str] = None,
    id: Optional[str] = None,
    placeholder: Optional[str] = None,
    label: Optional[str] = None,
    aria_label: Optional[str] = None,
) -> TargetDescription:
    """
    Candidates for a text input.

    Semantic lookups (placeholder, label) come first; structural selectors
    follow: type+name, id substring, name substring, aria-label, type only.
    """
    candidates: List[CandidateQuery] = []

    if placeholder:
        candidates.append(PlaceholderQuery(placeholder))
    if label:
        candidates.append(LabelQuery(label))

    if type and name:
        candidates.append(StructuralQuery(f'input[type="{quote_attribute(type)}"][name*="{quote_attribute(name)}"]', first=True))
    if id:
        candidates.append(StructuralQuery(f'input[id*="{quote_attribute(id)}"]', first=True))
    if name:
        candidates.append(StructuralQuery(f'input[name*="{quote_attribute(name)}"]', first=True))
    if aria_label:
        candidates.append(StructuralQuery(f'input[aria-label="{quote_attribute(aria_label)}"]', first=True))
    if type:
        candidates.append(StructuralQuery(f'input[type="{quote_attribute(type)}"]', first=True))

    return _target(identifier, candidates)


def button_candidates(
    identifier: str,
    text: Optional[TextMatch] = None,
    test_id: Optional[str] = None,
    type: Optional[str] = None,
) -> TargetDescription:
    """
    Candidates for a button: role + name, test id, text content, button[type].

    text may be a compiled pattern, e.g. re.compile("login", re.I).
    """
    candidates: List[CandidateQuery] = []

    if text:
        candidates.append(RoleQuery("button", text))
    if test_id:
        candidates.append(TestIdQuery(test_id))
    if text:
        candidates.append(TextQuery(text))
    if type:
        candidates.append(StructuralQuery(f'button[type="{quote_attribute(type)}"]'))

    return _target(identifier, candidates)


def text_candidates(
    identifier: str,
    primary: Optional[TextMatch],
    fallbacks: Sequence[TextMatch] = (),
) -> TargetDescription:
    """Candidates for a text lookup: the primary text, then each fallback."""
    texts = [t for t in [primary, *fallbacks] if t]
    return _target(identifier, [TextQuery(t) for t in texts])


def selector_candidates(
    identifier: str,
    primary: Optional[str],
    fallbacks: Sequence[str] = (),
) -> TargetDescription:
    """Candidates from raw selectors: the primary selector, then each fallback."""
    selectors = [s for s in [primary, *fallbacks] if s]
    return _target(identifier, [StructuralQuery(s) for s in selectors])


def option_candidates(
    identifier: str,
    role: Optional[str] = None,
    text: Optional[TextMatch] = None,
    name: Optional[TextMatch] = None,
    test_id: Optional[str] = None,
    label: Optional[str] = None,
    placeholder: Optional[str] = None,
    css: Optional[str] = None,
    xpath: Optional[str] = None,
) -> TargetDescription:
    """
    Candidates from any mix of locator options, in stability order.

    role needs an accessible name: name, or text when name is omitted.
    """
    candidates: List[CandidateQuery] = []

    role_name = name or text
    if role and role_name:
        candidates.append(RoleQuery(role, role_name))
    if test_id:
        candidates.append(TestIdQuery(test_id))
    if label:
        candidates.append(LabelQuery(label))
    if placeholder:
        candidates.append(PlaceholderQuery(placeholder))
    if text:
        candidates.append(TextQuery(text))
    if css:
        candidates.append(StructuralQuery(css))
    if xpath:
        candidates.append(StructuralQuery(xpath))

    return _target(identifier, rank_by_stability(candidates))


class ElementFinder:
    """
    Convenience entry points over an AdaptiveSelector.

    Every method takes adaptive=True (learned ordering, statistics,
    fingerprints, recovery) or adaptive=False (plain ordered resolution).
    """

    def __init__(self, selector: "AdaptiveSelector"):
        self.selector = selector

    async def _run(self, target: TargetDescription, adaptive: bool) -> Any:
        if adaptive:
            return await self.selector.resolve_adaptive(target)
        return await self.selector.resolve(target)

    async def find_input(
        self,
        identifier: str,
        *,
        type: Optional[str] = None,
        name: Optional[str] = None,
        id: Optional[str] = None,
        placeholder: Optional[str] = None,
        label: Optional[str] = None,
        aria_label: Optional[str] = None,
        adaptive: bool = True,
    ) -> Any:
        """
        Find an input field.

        In adaptive mode a selector learned from an earlier fingerprint is
        tried first, with the short recovery timeout.
        """
        target = input_candidates(
            identifier,
            type=type,
            name=name,
            id=id,
            placeholder=placeholder,
            label=label,
            aria_label=aria_label,
        )
        if adaptive:
            learned = await self.selector.try_learned_pattern(identifier)
            if learned is not None:
                return learned
        return await self._run(target, adaptive)

    async def find_button(
        self,
        identifier: str,
        *,
        text: Optional[TextMatch] = None,
        test_id: Optional[str] = None,
        type: Optional[str] = None,
        adaptive: bool = True,
    ) -> Any:
        """Find a button by role/name, test id, text or type."""
        target = button_candidates(identifier, text=text, test_id=test_id, type=type)
        return await self._run(target, adaptive)

    async def find_by_text(
        self,
        identifier: str,
        primary: TextMatch,
        *fallbacks: TextMatch,
        adaptive: bool = True,
    ) -> Any:
        """Find an element by its text, trying fallback texts in order."""
        target = text_candidates(identifier, primary, fallbacks)
        return await self._run(target, adaptive)

    async def find_element(
        self,
        identifier: str,
        primary_selector: str,
        fallback_selectors: Sequence[str] = (),
        *,
        adaptive: bool = False,
    ) -> Any:
        """Find an element by a primary selector with fallback selectors."""
        target = selector_candidates(identifier, primary_selector, fallback_selectors)
        return await self._run(target, adaptive)

    async def smart_locate(
        self,
        identifier: str,
        *,
        role: Optional[str] = None,
        text: Optional[TextMatch] = None,
        name: Optional[TextMatch] = None,
        test_id: Optional[str] = None,
        label: Optional[str] = None,
        placeholder: Optional[str] = None,
        css: Optional[str] = None,
        xpath: Optional[str] = None,
        adaptive: bool = True,
    ) -> Any:
        """Find an element from any mix of locator options."""
        target = option_candidates(
            identifier,
            role=role,
            text=text,
            name=name,
            test_id=test_id,
            label=label,
            placeholder=placeholder,
            css=css,
            xpath=xpath,
        )
        return await self._run(target, adaptive)
