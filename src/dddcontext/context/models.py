"""Data models for budgeted context selection."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dddcontext.catalog.models import Artifact, kind_name


class InclusionLevel(str, Enum):
    """How much of an artifact enters the bundle."""

    SKIP = "skip"
    SIGNATURE = "signature"  # Condensed view only
    FULL = "full"


class SelectionRequest(BaseModel):
    """Input to one selection run. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    target_bounded_context: str
    user_story_id: str
    budget: int = Field(ge=0)
    enhancers: frozenset[str] = frozenset()

    @field_validator("enhancers", mode="before")
    @classmethod
    def _normalize_enhancers(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (str, Enum)):
            value = [value]
        return frozenset(kind_name(k) for k in value)


class SelectedArtifact(BaseModel):
    """An artifact together with the level it was included at."""

    model_config = ConfigDict(frozen=True)

    artifact: Artifact
    level: InclusionLevel
    cost: int
    tier: int = -1  # -1 for the user story

    @property
    def content(self) -> str:
        """The text this inclusion contributes to the bundle."""
        if self.level == InclusionLevel.SIGNATURE and self.artifact.signature_view is not None:
            return self.artifact.signature_view
        return self.artifact.full_content


class SelectionResult(BaseModel):
    """Ordered outcome of a selection run."""

    target_bounded_context: str
    user_story_id: str
    budget: int
    items: list[SelectedArtifact] = Field(default_factory=list)
    used_budget: int = 0
    dropped_count: int = 0
    dropped_ids: list[str] = Field(default_factory=list)  # Qualified but did not fit
    skipped_ids: list[str] = Field(default_factory=list)  # Policy resolved to skip
    selection_time_ms: float = 0.0

    @property
    def remaining_budget(self) -> int:
        return self.budget - self.used_budget

    @property
    def budget_used_pct(self) -> float:
        return round(self.used_budget / max(self.budget, 1) * 100, 1)

    @property
    def artifact_ids(self) -> list[str]:
        return [item.artifact.id for item in self.items]

    def summary(self) -> str:
        """Human-readable summary of what was selected."""
        lines = [
            f"Context selection for story: {self.user_story_id}",
            f"Bounded context: {self.target_bounded_context}",
            f"Budget: {self.used_budget:,} / {self.budget:,} ({self.budget_used_pct:.0f}%)",
            f"Artifacts: {len(self.items)} included, {self.dropped_count} dropped, "
            f"{len(self.skipped_ids)} skipped by policy",
            f"Selection time: {self.selection_time_ms:.1f}ms",
            "",
            "Included artifacts:",
        ]
        for item in self.items:
            marker = ">" if item.tier < 0 else f"{item.tier}"
            lines.append(
                f"  {marker} {item.artifact.id} ({item.artifact.kind}) "
                f"[{item.level.value}] weight={item.artifact.semantic_weight:.2f} "
                f"cost={item.cost}"
            )
        if self.dropped_ids:
            lines.append("")
            lines.append("Dropped for budget: " + ", ".join(self.dropped_ids))
        return "\n".join(lines)
