"""Data models for classified artifacts."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ArtifactKind(str, Enum):
    """Classification kinds assigned to artifacts during ingestion."""

    ENTITY = "Entity"
    VALUE_OBJECT = "ValueObject"
    AGGREGATE = "Aggregate"
    DOMAIN_SERVICE = "DomainService"
    DOMAIN_EVENT = "DomainEvent"
    REPOSITORY_INTERFACE = "RepositoryInterface"
    APPLICATION_SERVICE = "ApplicationService"
    COMMAND_DTO = "CommandDTO"
    ERROR_MODEL = "ErrorModel"
    USER_STORY = "UserStory"
    TEST = "Test"
    VALIDATION_RULE = "ValidationRule"


def kind_name(kind: ArtifactKind | str) -> str:
    """Normalize a kind to its plain string name.

    Kinds are open-ended: records may carry kinds that ArtifactKind does not
    list, so tables are always keyed by the plain string.
    """
    if isinstance(kind, Enum):
        return str(kind.value)
    return str(kind)


class TokenEstimator:
    """Estimate cost units for text."""

    # Rough heuristic: 1 token ≈ 4 characters
    CHARS_PER_TOKEN = 4.0

    @classmethod
    def estimate(cls, text: str) -> int:
        """Estimate token count for a string. Empty text costs nothing."""
        if not text:
            return 0
        return max(1, int(len(text) / cls.CHARS_PER_TOKEN))


class Artifact(BaseModel):
    """One unit of candidate context.

    Sizes may be omitted by the ingestion layer, in which case they are
    derived from the text. Instances are frozen once built.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    kind: str
    bounded_context: str
    full_content: str = ""
    signature_view: str | None = None
    size_full: int = Field(ge=0)
    size_signature: int = Field(ge=0)
    semantic_weight: float = 0.0
    title: str = ""
    tags: tuple[str, ...] = ()

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return kind_name(value)
        return value

    @model_validator(mode="before")
    @classmethod
    def _derive_sizes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("size_full") is None:
            data["size_full"] = TokenEstimator.estimate(data.get("full_content") or "")
        if data.get("size_signature") is None:
            signature = data.get("signature_view")
            if signature is None:
                data["size_signature"] = data["size_full"]
            else:
                estimate = TokenEstimator.estimate(signature)
                size_full = data["size_full"]
                if isinstance(size_full, int):
                    estimate = min(estimate, size_full)
                data["size_signature"] = estimate
        return data

    @model_validator(mode="after")
    def _check_sizes(self) -> Artifact:
        if self.size_signature > self.size_full:
            raise ValueError(
                f"artifact '{self.id}': size_signature ({self.size_signature}) "
                f"exceeds size_full ({self.size_full})"
            )
        if self.signature_view is None and self.size_signature != self.size_full:
            raise ValueError(
                f"artifact '{self.id}' has no signature view, so size_signature "
                f"must equal size_full"
            )
        return self

    @property
    def has_signature(self) -> bool:
        return self.signature_view is not None

    @property
    def display_name(self) -> str:
        return self.title or self.id
