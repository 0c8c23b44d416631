"""
Pytest configuration and fixtures.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from healing_locator.exceptions import ElementTimeoutError, PageAccessError
from healing_locator.interfaces.page import BoundingBox, IPageAccess


class FakeElement:
    """In-memory element with fixed tag, attributes, text and box."""

    def __init__(
        self,
        tag: str = "div",
        attributes: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
        box: Optional[Tuple[float, float, float, float]] = None,
        visible: bool = True,
    ):
        self.tag = tag
        self.attributes = attributes or {}
        self.text = text
        self.box = BoundingBox(*box) if box else None
        self.visible = visible

    def __repr__(self) -> str:
        return f"<FakeElement {self.tag} {self.attributes}>"


class FakePageAccess(IPageAccess):
    """
    IPageAccess double that records every boundary call.

    Queries compile to tuples. A query resolves only when an element was
    registered for it with show(); everything else times out immediately.
    A structural selector registered with show_matching() for several
    elements fails like Playwright strict mode unless it was built with first.
    """

    def __init__(self):
        self.visible: Dict[Any, FakeElement] = {}
        self.ambiguous: Dict[Any, List[FakeElement]] = {}
        self.elements: List[FakeElement] = []
        self.calls: List[Tuple[str, Any]] = []
        self.waits: List[Tuple[Any, int]] = []

    # Test helpers

    def show(self, candidate: Any, element: FakeElement) -> FakeElement:
        """Make a candidate resolve to element; resets the call log."""
        self.visible[candidate.compile(self)] = element
        if element not in self.elements:
            self.elements.append(element)
        self.calls.clear()
        return element

    def show_matching(self, selector: str, *elements: FakeElement) -> None:
        """Make a structural selector match every element, in document order."""
        self.ambiguous[self.query_by_structural_selector(selector)] = list(elements)
        self.visible[self.query_by_structural_selector(selector, first=True)] = elements[0]
        for element in elements:
            if element not in self.elements:
                self.elements.append(element)
        self.calls.clear()

    def add(self, element: FakeElement) -> FakeElement:
        """Put an element on the page without any query resolving to it."""
        self.elements.append(element)
        return element

    def hide_all(self) -> None:
        self.visible.clear()
        self.ambiguous.clear()

    @property
    def waited_queries(self) -> List[Any]:
        return [query for query, _ in self.waits]

    # IPageAccess

    def query_by_role(self, role, name=None):
        self.calls.append(("query_by_role", (role, name)))
        return ("role", role, name)

    def query_by_test_id(self, test_id):
        self.calls.append(("query_by_test_id", test_id))
        return ("test_id", test_id)

    def query_by_label(self, label):
        self.calls.append(("query_by_label", label))
        return ("label", label)

    def query_by_placeholder(self, text):
        self.calls.append(("query_by_placeholder", text))
        return ("placeholder", text)

    def query_by_text(self, text, exact=False):
        self.calls.append(("query_by_text", (text, exact)))
        return ("text", text, exact)

    def query_by_structural_selector(self, selector, first=False):
        self.calls.append(("query_by_structural_selector", (selector, first)))
        return ("selector", selector, first)

    async def wait_until_visible(self, query, timeout_ms):
        self.calls.append(("wait_until_visible", query))
        self.waits.append((query, timeout_ms))
        if isinstance(query, FakeElement):
            element = query
        else:
            matches = self.ambiguous.get(query, [])
            if len(matches) > 1:
                raise PageAccessError(f"strict mode violation: {query} resolved to {len(matches)} elements")
            element = self.visible.get(query)
        if element is None or not element.visible:
            raise ElementTimeoutError(f"Timeout {timeout_ms}ms exceeded", str(query), timeout_ms)
        return element

    async def all_elements(self, query):
        self.calls.append(("all_elements", query))
        selector = query[1]
        if selector == "*":
            return list(self.elements)
        return [element for element in self.elements if element.tag == selector]

    async def get_attributes(self, element):
        return dict(element.attributes)

    async def get_text(self, element):
        return element.text.strip() if element.text else None

    async def get_tag_name(self, element):
        return element.tag

    async def get_bounding_box(self, element):
        return element.box


@pytest.fixture
def page():
    """Provide an empty fake page."""
    return FakePageAccess()


@pytest.fixture
def make_element():
    """Factory for fake elements."""
    return FakeElement


@pytest.fixture
def locator_settings():
    """Locator settings with short timeouts and no learning file."""
    from healing_locator.config import LocatorSettings

    return LocatorSettings(candidate_timeout_ms=200, recovery_timeout_ms=100)


@pytest.fixture
def fixed_clock():
    """Monotonically increasing fake clock, one second per call."""
    ticks = iter(range(1_000, 1_000_000))
    return lambda: float(next(ticks))


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Reset the global settings singleton and isolate from the environment."""
    from healing_locator.config import reset_settings

    for name in ("BASE_URL", "SAUDI_ID", "EXPECTED_NAME"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
