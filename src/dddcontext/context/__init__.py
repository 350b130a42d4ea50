"""Budgeted, tiered context selection.

Selects DDD-classified artifacts for one user story within a cost budget and
serializes them into an ordered bundle.

Usage:
    from dddcontext.context import ContextAssembler, ContextSelector, SelectionRequest

    selector = ContextSelector(catalog)
    result = selector.select(SelectionRequest(
        target_bounded_context="Ordering", user_story_id="US-1", budget=4000,
    ))
    print(ContextAssembler().assemble(result))
"""

from dddcontext.context.assembler import ContextAssembler
from dddcontext.context.cost import estimate_cost
from dddcontext.context.models import (
    InclusionLevel,
    SelectedArtifact,
    SelectionRequest,
    SelectionResult,
)
from dddcontext.context.policy import InclusionPolicy
from dddcontext.context.selector import ContextSelector

__all__ = [
    "ContextAssembler",
    "ContextSelector",
    "InclusionLevel",
    "InclusionPolicy",
    "SelectedArtifact",
    "SelectionRequest",
    "SelectionResult",
    "estimate_cost",
]
