"""dddcontext - budgeted, DDD-aware context selection for LLM prompts."""

__version__ = "0.1.0"

from dddcontext.catalog import Artifact, ArtifactCatalog, ArtifactKind
from dddcontext.context import (
    ContextAssembler,
    ContextSelector,
    InclusionLevel,
    InclusionPolicy,
    SelectionRequest,
    SelectionResult,
)

__all__ = [
    "Artifact",
    "ArtifactCatalog",
    "ArtifactKind",
    "ContextAssembler",
    "ContextSelector",
    "InclusionLevel",
    "InclusionPolicy",
    "SelectionRequest",
    "SelectionResult",
]
