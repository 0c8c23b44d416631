"""
Element Fingerprinting - Snapshots of resolved elements for later recovery.

A fingerprint records an element's tag, attributes, text and geometry the
moment a candidate query resolves it. When every candidate later fails,
the fingerprint drives similarity recovery:
- attribute variations (tag + class / type / name)
- position near the recorded origin
- general similarity (shared key attributes, equal text or close position)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING
import re

if TYPE_CHECKING:
    from healing_locator.interfaces.page import IPageAccess


# Attributes compared by general similarity
KEY_ATTRIBUTES = ("id", "class", "name", "type", "role", "data-testid")

# Classes that indicate dynamic generation (should not anchor a selector)
DYNAMIC_CLASS_PATTERNS = [
    r'^css-[a-zA-Z0-9]+$',        # Emotion/styled-components
    r'^sc-[a-zA-Z]+$',            # Styled-components
    r'^_[a-zA-Z0-9]{5,}$',        # CSS Modules hashes
    r'^jsx-\d+$',                 # Next.js styled-jsx
    r'^svelte-[a-z0-9]+$',        # Svelte
    r'^ng-[a-z-]+$',              # Angular state classes
]


def _is_dynamic_class(class_name: str) -> bool:
    """Check if a class name appears to be dynamically generated."""
    return any(re.match(pattern, class_name) for pattern in DYNAMIC_CLASS_PATTERNS)


def quote_attribute(value: str) -> str:
    return value.replace('\\', '\\\\').replace('"', '\\"')


def _css_ident(value: str) -> str:
    return re.sub(r'([^a-zA-Z0-9_-])', r'\\\1', value)


@dataclass
class ElementFingerprint:
    """
    Snapshot of a resolved element.

    Attributes:
        tag: Lowercase tag name
        attributes: All attributes at capture time
        text: Trimmed text content
        position: (x, y) of the bounding box origin
        dimensions: (width, height) of the bounding box
    """
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    position: Optional[Tuple[float, float]] = None
    dimensions: Optional[Tuple[float, float]] = None

    @property
    def first_class(self) -> Optional[str]:
        classes = (self.attributes.get("class") or "").split()
        return classes[0] if classes else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "attributes": dict(self.attributes),
            "text": self.text,
            "position": list(self.position) if self.position else None,
            "dimensions": list(self.dimensions) if self.dimensions else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElementFingerprint":
        position = data.get("position")
        dimensions = data.get("dimensions")
        return cls(
            tag=str(data["tag"]),
            attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
            text=data.get("text"),
            position=(float(position[0]), float(position[1])) if position else None,
            dimensions=(float(dimensions[0]), float(dimensions[1])) if dimensions else None,
        )


async def capture_fingerprint(page: "IPageAccess", element: Any) -> ElementFingerprint:
    """
    Read tag, attributes, text and bounding box of an element.

    Args:
        page: Page access used to inspect the element
        element: Element returned by wait_until_visible
    """
    tag = await page.get_tag_name(element)
    attributes = await page.get_attributes(element)
    text = await page.get_text(element)
    box = await page.get_bounding_box(element)

    return ElementFingerprint(
        tag=tag,
        attributes=dict(attributes or {}),
        text=text or None,
        position=(box.x, box.y) if box else None,
        dimensions=(box.width, box.height) if box else None,
    )


def within_tolerance(
    a: Optional[Tuple[float, float]],
    b: Optional[Tuple[float, float]],
    tolerance: float,
) -> bool:
    """True when both positions exist and differ by less than tolerance on each axis."""
    if a is None or b is None:
        return False
    return abs(a[0] - b[0]) < tolerance and abs(a[1] - b[1]) < tolerance


def is_similar(
    reference: ElementFingerprint,
    candidate: ElementFingerprint,
    tolerance_px: float = 50,
) -> bool:
    """
    Judge whether a candidate element resembles a stored fingerprint.

    Tags must match. Then any one of these is enough:
    - at least two key attributes present on both and equal
    - equal non-empty text
    - position within tolerance_px on both axes
    """
    if reference.tag != candidate.tag:
        return False

    attribute_matches = sum(
        1
        for attr in KEY_ATTRIBUTES
        if reference.attributes.get(attr)
        and candidate.attributes.get(attr)
        and reference.attributes[attr] == candidate.attributes[attr]
    )
    if attribute_matches >= 2:
        return True

    if reference.text and reference.text == candidate.text:
        return True

    return within_tolerance(reference.position, candidate.position, tolerance_px)


def attribute_variations(fingerprint: ElementFingerprint) -> List[str]:
    """
    Structural selectors derived from the fingerprint's attributes.

    Order: tag + first class, tag + type, tag + partial name. Variants whose
    source attribute is missing or empty are skipped.
    """
    tag = fingerprint.tag
    variations = []

    first_class = fingerprint.first_class
    if first_class:
        variations.append(f'{tag}[class*="{quote_attribute(first_class)}"]')

    element_type = fingerprint.attributes.get("type")
    if element_type:
        variations.append(f'{tag}[type="{quote_attribute(element_type)}"]')

    name = fingerprint.attributes.get("name")
    if name:
        variations.append(f'{tag}[name*="{quote_attribute(name)}"]')

    return variations


def learned_selector(fingerprint: ElementFingerprint) -> Optional[str]:
    """
    Single selector rebuilt from a fingerprint: tag#id, else tag.class.

    The class is the first one that does not look generated. Returns None
    when neither an id nor a usable class was recorded.
    """
    element_id = fingerprint.attributes.get("id")
    if element_id:
        return f"{fingerprint.tag}#{_css_ident(element_id)}"

    for class_name in (fingerprint.attributes.get("class") or "").split():
        if not _is_dynamic_class(class_name):
            return f"{fingerprint.tag}.{_css_ident(class_name)}"

    return None
