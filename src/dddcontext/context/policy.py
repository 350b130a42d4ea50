"""Inclusion policy and tier precedence tables.

Both are plain data: a new artifact kind is supported by adding a row to the
policy table and, if it should compete for budget, placing it in a tier.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from dddcontext.catalog.models import ArtifactKind, kind_name
from dddcontext.context.models import InclusionLevel
from dddcontext.exceptions import ConfigError

K = ArtifactKind
L = InclusionLevel

# Default inclusion level per kind. Kinds that carry business rules go in
# full; plumbing kinds contribute their signatures only.
DEFAULT_POLICY: dict[str, InclusionLevel] = {
    K.AGGREGATE.value: L.FULL,
    K.ENTITY.value: L.FULL,
    K.VALUE_OBJECT.value: L.FULL,
    K.DOMAIN_SERVICE.value: L.SIGNATURE,
    K.DOMAIN_EVENT.value: L.FULL,
    K.REPOSITORY_INTERFACE.value: L.SIGNATURE,
    K.APPLICATION_SERVICE.value: L.SIGNATURE,
    K.COMMAND_DTO.value: L.SIGNATURE,
    K.ERROR_MODEL.value: L.SIGNATURE,
    K.USER_STORY.value: L.FULL,
    K.TEST.value: L.SIGNATURE,
    K.VALIDATION_RULE.value: L.FULL,
}

# Mandatory tiers, highest precedence first.
DEFAULT_TIERS: list[list[str]] = [
    [K.AGGREGATE.value, K.ENTITY.value],
    [K.DOMAIN_SERVICE.value],
    [K.VALUE_OBJECT.value],
    [K.REPOSITORY_INTERFACE.value],
    [K.APPLICATION_SERVICE.value],
    [K.COMMAND_DTO.value],
]

# Optional categories, considered only when requested and budget remains.
DEFAULT_ENHANCER_ORDER: list[str] = [
    K.DOMAIN_EVENT.value,
    K.VALIDATION_RULE.value,
    K.ERROR_MODEL.value,
    K.TEST.value,
]


class InclusionPolicy:
    """Maps artifact kinds to inclusion levels.

    ``resolve`` is total: a kind without a row resolves to SKIP. Callers use
    ``is_known`` to report such kinds.
    """

    def __init__(self, rules: Mapping[str, InclusionLevel | str] | None = None) -> None:
        source = DEFAULT_POLICY if rules is None else rules
        table: dict[str, InclusionLevel] = {}
        for kind, level in source.items():
            try:
                table[kind_name(kind)] = InclusionLevel(level)
            except ValueError:
                valid = ", ".join(lvl.value for lvl in InclusionLevel)
                raise ConfigError(
                    f"Invalid inclusion level '{level}' for kind '{kind_name(kind)}' "
                    f"(expected one of: {valid})"
                ) from None
        self._rules = table

    def resolve(self, kind: ArtifactKind | str) -> InclusionLevel:
        return self._rules.get(kind_name(kind), InclusionLevel.SKIP)

    def is_known(self, kind: ArtifactKind | str) -> bool:
        return kind_name(kind) in self._rules

    def as_dict(self) -> dict[str, str]:
        return {kind: level.value for kind, level in self._rules.items()}

    def __len__(self) -> int:
        return len(self._rules)


def normalize_tiers(
    tiers: Iterable[Iterable[ArtifactKind | str]],
    enhancer_order: Iterable[ArtifactKind | str],
) -> tuple[list[list[str]], list[str]]:
    """Validate tier precedence configuration.

    A kind may appear in at most one place across the mandatory tiers and the
    enhancer order.
    """
    seen: set[str] = set()
    norm_tiers: list[list[str]] = []
    for i, tier in enumerate(tiers):
        kinds = [kind_name(k) for k in tier]
        if not kinds:
            raise ConfigError(f"Tier {i} is empty")
        for kind in kinds:
            if kind in seen:
                raise ConfigError(f"Kind '{kind}' appears in more than one tier")
            seen.add(kind)
        norm_tiers.append(kinds)

    norm_enhancers: list[str] = []
    for k in enhancer_order:
        kind = kind_name(k)
        if kind in seen:
            raise ConfigError(
                f"Kind '{kind}' is both a mandatory tier kind and an enhancer"
            )
        seen.add(kind)
        norm_enhancers.append(kind)

    return norm_tiers, norm_enhancers
