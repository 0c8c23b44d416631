"""
Engine module - Self-healing element resolution.

Components:
- queries: candidate query variants and target descriptions
- resolver: ordered resolution with per-candidate fallback
- strategy_tracker: success-rate and recency statistics
- fingerprint: element snapshots and similarity rules
- recovery: fingerprint-driven similarity recovery
- adaptive: learned ordering, fingerprint capture and recovery
- finders: input / button / text candidate builders
"""

from healing_locator.engine.queries import (
    CandidateQuery,
    RoleQuery,
    TestIdQuery,
    LabelQuery,
    PlaceholderQuery,
    TextQuery,
    StructuralQuery,
    TargetDescription,
    rank_by_stability,
)
from healing_locator.engine.resolver import StrategyResolver, AttemptResult
from healing_locator.engine.strategy_tracker import StrategyTracker, StrategyRecord
from healing_locator.engine.fingerprint import ElementFingerprint, capture_fingerprint, is_similar
from healing_locator.engine.recovery import SimilarityRecovery
from healing_locator.engine.adaptive import AdaptiveSelector
from healing_locator.engine.finders import (
    ElementFinder,
    input_candidates,
    button_candidates,
    text_candidates,
    selector_candidates,
    option_candidates,
)

__all__ = [
    # Queries
    "CandidateQuery",
    "RoleQuery",
    "TestIdQuery",
    "LabelQuery",
    "PlaceholderQuery",
    "TextQuery",
    "StructuralQuery",
    "TargetDescription",
    "rank_by_stability",
    # Resolution
    "StrategyResolver",
    "AttemptResult",
    "AdaptiveSelector",
    "SimilarityRecovery",
    # Learning
    "StrategyTracker",
    "StrategyRecord",
    "ElementFingerprint",
    "capture_fingerprint",
    "is_similar",
    # Finders
    "ElementFinder",
    "input_candidates",
    "button_candidates",
    "text_candidates",
    "selector_candidates",
    "option_candidates",
]
