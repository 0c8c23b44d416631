"""
Page Access Interface - Abstract boundary between the resolver and a browser engine.

The self-healing core never talks to a browser directly. It compiles candidate
queries into calls on this interface, waits for visibility through it, and
reads element attributes, text and geometry through it.

Queries and elements are opaque to the core: an implementation may return
whatever objects its engine uses (Playwright returns Locators for both).

Example:
    >>> from healing_locator.browsers import PlaywrightPageAccess
    >>> access = PlaywrightPageAccess(page)
    >>> query = access.query_by_placeholder("Saudi ID")
    >>> element = await access.wait_until_visible(query, timeout_ms=5000)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Union

TextMatch = Union[str, Pattern[str]]


@dataclass(frozen=True)
class BoundingBox:
    """
    Element position and size in CSS pixels, relative to the viewport.

    Attributes:
        x: Left edge
        y: Top edge
        width: Box width
        height: Box height
    """
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, float]]) -> Optional["BoundingBox"]:
        """Build from a Playwright-style {x, y, width, height} dict."""
        if not data:
            return None
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


class IPageAccess(ABC):
    """
    Abstract interface for locating and inspecting elements on one page.

    The query_by_* methods are synchronous and lazy: they describe a query
    without touching the page. Only wait_until_visible, all_elements and the
    get_* readers interact with the browser.
    """

    # Query construction
    @abstractmethod
    def query_by_role(self, role: str, name: Optional[TextMatch] = None) -> Any:
        """
        Query elements by ARIA role and accessible name.

        Args:
            role: ARIA role (e.g., 'button', 'heading', 'textbox')
            name: Accessible name, literal or pattern
        """
        ...

    @abstractmethod
    def query_by_test_id(self, test_id: str) -> Any:
        """Query elements by test identifier attribute."""
        ...

    @abstractmethod
    def query_by_label(self, label: str) -> Any:
        """Query form controls by associated label text."""
        ...

    @abstractmethod
    def query_by_placeholder(self, text: str) -> Any:
        """Query inputs by placeholder text."""
        ...

    @abstractmethod
    def query_by_text(self, text: TextMatch, exact: bool = False) -> Any:
        """
        Query elements by text content.

        Args:
            text: Literal text or compiled pattern
            exact: Require a full, case-sensitive match for literal text
        """
        ...

    @abstractmethod
    def query_by_structural_selector(self, selector: str, first: bool = False) -> Any:
        """
        Query elements by CSS or XPath selector.

        Args:
            selector: CSS selector, or XPath prefixed with '//' or 'xpath='
            first: Narrow the query to its first match
        """
        ...

    # Waiting and enumeration
    @abstractmethod
    async def wait_until_visible(self, query: Any, timeout_ms: int) -> Any:
        """
        Wait for a query to resolve to a single visible element.

        Args:
            query: A query returned by one of the query_by_* methods
            timeout_ms: Maximum wait in milliseconds

        Returns:
            The visible element

        Raises:
            ElementTimeoutError: No visible element within the timeout
            PageAccessError: The query could not be evaluated
        """
        ...

    @abstractmethod
    async def all_elements(self, query: Any) -> List[Any]:
        """
        Return every element currently matching a query, without waiting.

        Args:
            query: A query returned by one of the query_by_* methods
        """
        ...

    # Element inspection
    @abstractmethod
    async def get_attributes(self, element: Any) -> Dict[str, str]:
        """Return all attributes of an element."""
        ...

    @abstractmethod
    async def get_text(self, element: Any) -> Optional[str]:
        """Return the element's trimmed text content, or None when empty."""
        ...

    @abstractmethod
    async def get_tag_name(self, element: Any) -> str:
        """Return the element's lowercase tag name."""
        ...

    @abstractmethod
    async def get_bounding_box(self, element: Any) -> Optional[BoundingBox]:
        """Return the element's bounding box, or None when not rendered."""
        ...
