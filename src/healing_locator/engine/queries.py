"""
Candidate Queries - Declarative ways to locate one element.

Each variant carries only the fields it needs and knows how to compile
itself into exactly one IPageAccess query. The describe() string is stable
across runs and doubles as the statistics key for adaptive ranking.

Stability order (most stable first):
    role > test id > label > placeholder > text > structural
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union, TYPE_CHECKING
import re

from healing_locator.exceptions import InvalidQueryError, InvalidTargetError
from healing_locator.interfaces.page import TextMatch

if TYPE_CHECKING:
    from healing_locator.interfaces.page import IPageAccess


def describe_text(value: TextMatch) -> str:
    """Render a literal or pattern the way it appears in log lines."""
    if isinstance(value, re.Pattern):
        flags = "i" if value.flags & re.IGNORECASE else ""
        return f"/{value.pattern}/{flags}"
    return value


def _require(value: Any, field_name: str, kind: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidQueryError(f"{kind} query requires a non-empty '{field_name}'")


@dataclass(frozen=True)
class RoleQuery:
    """ARIA role plus accessible name."""
    role: str
    name: Optional[TextMatch] = None

    def __post_init__(self):
        _require(self.role, "role", "Role")

    def describe(self) -> str:
        if self.name is None:
            return f"role: {self.role}"
        return f"role: {self.role} with text: {describe_text(self.name)}"

    def compile(self, page: "IPageAccess") -> Any:
        return page.query_by_role(self.role, self.name)


@dataclass(frozen=True)
class TestIdQuery:
    """Explicit test identifier (data-testid)."""
    __test__ = False  # not a pytest class

    test_id: str

    def __post_init__(self):
        _require(self.test_id, "test_id", "Test id")

    def describe(self) -> str:
        return f"testId: {self.test_id}"

    def compile(self, page: "IPageAccess") -> Any:
        return page.query_by_test_id(self.test_id)


@dataclass(frozen=True)
class LabelQuery:
    """Form control associated with a label."""
    label: str

    def __post_init__(self):
        _require(self.label, "label", "Label")

    def describe(self) -> str:
        return f"label: {self.label}"

    def compile(self, page: "IPageAccess") -> Any:
        return page.query_by_label(self.label)


@dataclass(frozen=True)
class PlaceholderQuery:
    """Input with a given placeholder."""
    placeholder: str

    def __post_init__(self):
        _require(self.placeholder, "placeholder", "Placeholder")

    def describe(self) -> str:
        return f"placeholder: {self.placeholder}"

    def compile(self, page: "IPageAccess") -> Any:
        return page.query_by_placeholder(self.placeholder)


@dataclass(frozen=True)
class TextQuery:
    """Element by text content, literal or pattern."""
    text: TextMatch
    exact: bool = False

    def __post_init__(self):
        if not isinstance(self.text, re.Pattern):
            _require(self.text, "text", "Text")

    def describe(self) -> str:
        return f"text: {describe_text(self.text)}"

    def compile(self, page: "IPageAccess") -> Any:
        return page.query_by_text(self.text, exact=self.exact)


@dataclass(frozen=True)
class StructuralQuery:
    """CSS or XPath selector."""
    selector: str
    first: bool = False

    def __post_init__(self):
        _require(self.selector, "selector", "Structural")

    @property
    def is_xpath(self) -> bool:
        return self.selector.startswith(("//", "xpath=", "(//"))

    def describe(self) -> str:
        kind = "xpath" if self.is_xpath else "css"
        return f"{kind}: {self.selector}"

    def compile(self, page: "IPageAccess") -> Any:
        return page.query_by_structural_selector(self.selector, first=self.first)


CandidateQuery = Union[RoleQuery, TestIdQuery, LabelQuery, PlaceholderQuery, TextQuery, StructuralQuery]


@dataclass(frozen=True)
class TargetDescription:
    """
    An identifier plus its candidate queries in a-priori stability order.

    Attributes:
        identifier: Name used in logs, statistics and fingerprints
        candidates: Candidate queries, most stable first
    """
    identifier: str
    candidates: Tuple[CandidateQuery, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.identifier or not self.identifier.strip():
            raise InvalidTargetError("Target identifier must be non-empty")
        object.__setattr__(self, "candidates", tuple(self.candidates))
        if not self.candidates:
            raise InvalidTargetError(
                f"No candidate queries derivable for '{self.identifier}'",
                identifier=self.identifier,
            )

    def with_candidates(self, candidates: List[CandidateQuery]) -> "TargetDescription":
        """Same identifier, different candidate order."""
        return TargetDescription(self.identifier, tuple(candidates))

    def priority_of(self) -> Dict[str, int]:
        """Map candidate description to its a-priori index."""
        priorities: Dict[str, int] = {}
        for index, candidate in enumerate(self.candidates):
            priorities.setdefault(candidate.describe(), index)
        return priorities

    def describe(self) -> List[str]:
        return [candidate.describe() for candidate in self.candidates]


# A-priori stability rank per query type
STABILITY_RANK: Dict[type, int] = {
    RoleQuery: 0,
    TestIdQuery: 1,
    LabelQuery: 2,
    PlaceholderQuery: 3,
    TextQuery: 4,
    StructuralQuery: 5,
}


def rank_by_stability(candidates: List[CandidateQuery]) -> List[CandidateQuery]:
    """
    Order candidates by query type stability, keeping input order within a type.

    XPath selectors sort after CSS selectors.
    """
    def key(item: Tuple[int, CandidateQuery]) -> Tuple[int, int, int]:
        index, candidate = item
        xpath_last = 1 if isinstance(candidate, StructuralQuery) and candidate.is_xpath else 0
        return (STABILITY_RANK[type(candidate)], xpath_last, index)

    return [candidate for _, candidate in sorted(enumerate(candidates), key=key)]
