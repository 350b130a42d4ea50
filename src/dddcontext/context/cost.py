"""Cost estimation for candidate inclusions."""

from __future__ import annotations

from dddcontext.catalog.models import Artifact
from dddcontext.context.models import InclusionLevel


def estimate_cost(artifact: Artifact, level: InclusionLevel) -> int:
    """Cost units an artifact consumes at a given inclusion level.

    A signature request on an artifact without a signature view costs the
    full size; the artifact's size invariant already guarantees
    ``size_signature == size_full`` in that case.
    """
    if level == InclusionLevel.SKIP:
        return 0
    if level == InclusionLevel.SIGNATURE:
        return artifact.size_signature
    return artifact.size_full
