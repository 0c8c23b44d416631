"""
Interfaces module - Abstract contracts the core depends on.
"""

from healing_locator.interfaces.page import IPageAccess, BoundingBox, TextMatch

__all__ = [
    "IPageAccess",
    "BoundingBox",
    "TextMatch",
]
