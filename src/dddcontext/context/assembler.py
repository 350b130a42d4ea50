"""Serialize a selection into one ordered bundle for LLM consumption."""

from __future__ import annotations

import json

from dddcontext.context.models import InclusionLevel, SelectionResult


class ContextAssembler:
    """Renders a ``SelectionResult`` in selection order.

    The user story always comes first, followed by the tiers in precedence
    order. No I/O happens here; delivering the bundle is the caller's job.
    """

    def __init__(self, include_metadata: bool = True) -> None:
        self.include_metadata = include_metadata

    def assemble(self, result: SelectionResult) -> str:
        sections: list[str] = []

        if self.include_metadata:
            sections.append(f"# Context for user story: {result.user_story_id}")
            sections.append(
                f"# Bounded context: {result.target_bounded_context} | "
                f"{len(result.items)} artifacts "
                f"({result.used_budget:,} / {result.budget:,} units, "
                f"{result.budget_used_pct:.0f}% of budget)"
            )
            sections.append("")

        for item in result.items:
            artifact = item.artifact
            if self.include_metadata:
                view = "full" if item.level == InclusionLevel.FULL else "signature"
                sections.append(f"## [{artifact.kind}] {artifact.display_name} ({view})")
            sections.append(item.content)
            sections.append("")

        return "\n".join(sections)

    def assemble_json(self, result: SelectionResult) -> str:
        """The same ordered bundle as a JSON document."""
        payload = {
            "user_story_id": result.user_story_id,
            "bounded_context": result.target_bounded_context,
            "budget": result.budget,
            "used_budget": result.used_budget,
            "dropped_count": result.dropped_count,
            "dropped_ids": result.dropped_ids,
            "artifacts": [
                {
                    "id": item.artifact.id,
                    "kind": item.artifact.kind,
                    "level": item.level.value,
                    "cost": item.cost,
                    "content": item.content,
                }
                for item in result.items
            ],
        }
        return json.dumps(payload, indent=2)
