"""Budgeted context selection.

Algorithm (deterministic greedy with priority tiers):
  1. Include the driving user story in full. It is never dropped or
     truncated; if it alone exceeds the budget the run fails.
  2. Partition the target bounded context's artifacts into tiers by kind,
     following the configured precedence.
  3. Within a tier, order by semantic weight (descending), then id.
  4. Walk candidates in order. Skip-policy kinds are omitted outright.
     Anything else is included if its cost fits the remaining budget,
     otherwise it is counted as dropped and the walk continues, so one large
     artifact never blocks smaller ones behind it.
  5. With budget left over, repeat 3-4 for the requested enhancer kinds.
     Once the budget is spent every remaining eligible candidate is
     counted as dropped.

Greedy-by-tier gives monotonic precedence: a lower tier can only receive
budget that no same-or-cheaper higher-tier candidate could use.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from dddcontext.catalog.catalog import ArtifactCatalog
from dddcontext.catalog.models import Artifact, ArtifactKind, kind_name
from dddcontext.context.cost import estimate_cost
from dddcontext.context.models import (
    InclusionLevel,
    SelectedArtifact,
    SelectionRequest,
    SelectionResult,
)
from dddcontext.context.policy import (
    DEFAULT_ENHANCER_ORDER,
    DEFAULT_TIERS,
    InclusionPolicy,
    normalize_tiers,
)
from dddcontext.exceptions import BudgetExceededError

logger = logging.getLogger("dddcontext.selector")


@dataclass
class _Tier:
    index: int
    kinds: list[str]
    candidates: list[Artifact] = field(default_factory=list)


@dataclass
class _RunState:
    remaining: int
    items: list[SelectedArtifact] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _rank_key(artifact: Artifact) -> tuple[float, str]:
    return (-artifact.semantic_weight, artifact.id)


class ContextSelector:
    """Chooses which artifacts enter a bundle and at what level.

    The selector holds no per-run state, so one instance can serve
    concurrent requests against the same frozen catalog.

    Usage:
        selector = ContextSelector(catalog)
        result = selector.select(SelectionRequest(
            target_bounded_context="Ordering",
            user_story_id="US-1",
            budget=4000,
        ))
    """

    def __init__(
        self,
        catalog: ArtifactCatalog,
        policy: InclusionPolicy | None = None,
        tiers: Sequence[Iterable[ArtifactKind | str]] | None = None,
        enhancer_order: Iterable[ArtifactKind | str] | None = None,
    ) -> None:
        self.catalog = catalog
        self.policy = policy or InclusionPolicy()
        self.tiers, self.enhancer_order = normalize_tiers(
            DEFAULT_TIERS if tiers is None else tiers,
            DEFAULT_ENHANCER_ORDER if enhancer_order is None else enhancer_order,
        )
        self._tier_of: dict[str, int] = {
            kind: i for i, kinds in enumerate(self.tiers) for kind in kinds
        }

    @classmethod
    def from_config(cls, catalog: ArtifactCatalog, config) -> ContextSelector:
        """Build a selector from a ``SelectionConfig``."""
        return cls(
            catalog,
            policy=InclusionPolicy(config.policy),
            tiers=config.tiers,
            enhancer_order=config.enhancer_order,
        )

    # -------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------

    def select(self, request: SelectionRequest) -> SelectionResult:
        """Run one selection.

        Raises:
            NotFoundError: the user story or bounded context is unknown.
            BudgetExceededError: the user story alone exceeds the budget.
        """
        start_time = time.time()

        story = self.catalog.get(request.user_story_id)
        pool = self.catalog.lookup(request.target_bounded_context)

        if story.kind != ArtifactKind.USER_STORY.value:
            logger.warning(
                "Driving artifact '%s' is a %s, not a UserStory", story.id, story.kind
            )

        story_cost = estimate_cost(story, InclusionLevel.FULL)
        if story_cost > request.budget:
            raise BudgetExceededError(story.id, story_cost, request.budget)

        state = _RunState(remaining=request.budget - story_cost)
        state.items.append(
            SelectedArtifact(artifact=story, level=InclusionLevel.FULL, cost=story_cost)
        )

        mandatory, enhancers = self._partition(
            [a for a in pool if a.id != story.id], request.enhancers
        )

        for tier in mandatory + enhancers:
            self._fill(tier, state)

        used = request.budget - state.remaining
        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(
            "Selected %d artifacts for '%s' in %s: %d/%d units, %d dropped",
            len(state.items), story.id, request.target_bounded_context,
            used, request.budget, len(state.dropped),
        )

        return SelectionResult(
            target_bounded_context=request.target_bounded_context,
            user_story_id=story.id,
            budget=request.budget,
            items=state.items,
            used_budget=used,
            dropped_count=len(state.dropped),
            dropped_ids=state.dropped,
            skipped_ids=state.skipped,
            selection_time_ms=round(elapsed_ms, 3),
        )

    # -------------------------------------------------------------------
    # Tier partitioning
    # -------------------------------------------------------------------

    def _enhancer_plan(self, requested: frozenset[str]) -> list[str]:
        """Requested enhancer kinds in precedence order.

        Kinds missing from the configured order follow it alphabetically.
        Kinds that already belong to a mandatory tier are ignored.
        """
        ordered = [k for k in self.enhancer_order if k in requested]
        extra = sorted(
            k for k in requested
            if k not in self.enhancer_order and k not in self._tier_of
        )
        return ordered + extra

    def _partition(
        self, pool: list[Artifact], requested: frozenset[str]
    ) -> tuple[list[_Tier], list[_Tier]]:
        mandatory = [_Tier(index=i, kinds=kinds) for i, kinds in enumerate(self.tiers)]
        enhancers = [
            _Tier(index=len(self.tiers) + i, kinds=[kind])
            for i, kind in enumerate(self._enhancer_plan(requested))
        ]
        enhancer_of = {tier.kinds[0]: tier for tier in enhancers}

        warned: set[str] = set()
        for artifact in pool:
            kind = kind_name(artifact.kind)
            if not self.policy.is_known(kind) and kind not in warned:
                logger.warning(
                    "Artifact kind '%s' has no inclusion rule; treating as skip", kind
                )
                warned.add(kind)

            if kind in self._tier_of:
                mandatory[self._tier_of[kind]].candidates.append(artifact)
            elif kind in enhancer_of:
                enhancer_of[kind].candidates.append(artifact)

        for tier in mandatory + enhancers:
            tier.candidates.sort(key=_rank_key)
        return mandatory, enhancers

    # -------------------------------------------------------------------
    # Greedy fill
    # -------------------------------------------------------------------

    def _fill(self, tier: _Tier, state: _RunState) -> None:
        for artifact in tier.candidates:
            level = self.policy.resolve(artifact.kind)
            if level == InclusionLevel.SKIP:
                state.skipped.append(artifact.id)
                continue

            if level == InclusionLevel.SIGNATURE and not artifact.has_signature:
                logger.warning(
                    "Artifact '%s' has no signature view; using full content", artifact.id
                )

            cost = estimate_cost(artifact, level)
            # An exhausted budget admits nothing, not even zero-cost artifacts
            if state.remaining > 0 and cost <= state.remaining:
                state.items.append(
                    SelectedArtifact(artifact=artifact, level=level, cost=cost, tier=tier.index)
                )
                state.remaining -= cost
            else:
                state.dropped.append(artifact.id)

