"""Portfolio discovery: group properties whose owners look like one entity.

Grouping is a single forward pass, not a transitive closure. Each
unassigned property starts a group and pulls in every *later* unassigned
property whose owner matches it with confidence >= 80. Two properties
whose only link runs through a property that appears earlier in the
input can end up in different groups.

Cost is O(n^2) name comparisons; callers batching thousands of
properties should partition the input first (by borough, zip, ...).
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..logging import get_context_logger, log_resolution_event
from .matcher import is_same_entity
from .names import normalize_name

logger = get_context_logger(__name__)

GROUP_MIN_CONFIDENCE = 80
LARGE_BATCH_WARNING = 1000


class OwnerCandidate(BaseModel):
    """A property identifier with the owner name on record."""

    id: str = Field(validation_alias=AliasChoices("id", "bbl"))
    owner_name: str = Field(
        default="",
        validation_alias=AliasChoices("owner_name", "ownerName", "owner"),
    )

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)


def _coerce(item: OwnerCandidate | Mapping[str, Any]) -> OwnerCandidate:
    if isinstance(item, OwnerCandidate):
        return item
    return OwnerCandidate.model_validate(item)


def group_by_owner(
    properties: Iterable[OwnerCandidate | Mapping[str, Any]],
) -> dict[str, list[str]]:
    """Group property ids by owner.

    Args:
        properties: Rows with an ``id`` and an ``owner_name``

    Returns:
        Mapping of canonical owner label (the normalized name of the
        group's first owner, or the raw name when that normalizes to
        nothing) to the property ids in the group, in input order

    Examples:
        >>> group_by_owner([
        ...     {"id": "A", "owner_name": "Smith LLC"},
        ...     {"id": "B", "owner_name": "SMITH LLC"},
        ...     {"id": "C", "owner_name": "Jones LLC"},
        ... ])
        {'SMITH': ['A', 'B'], 'JONES': ['C']}
    """
    items = [_coerce(item) for item in properties]
    if len(items) > LARGE_BATCH_WARNING:
        logger.warning(
            f"Grouping {len(items)} properties by owner is quadratic; "
            f"consider partitioning the batch",
            extra={"property_count": len(items)},
        )

    groups: dict[str, list[str]] = {}
    assigned: set[str] = set()

    for i, anchor in enumerate(items):
        if anchor.id in assigned:
            continue
        group = [anchor.id]
        assigned.add(anchor.id)

        for other in items[i + 1:]:
            if other.id in assigned:
                continue
            verdict = is_same_entity(anchor.owner_name, other.owner_name)
            if verdict.match and verdict.confidence >= GROUP_MIN_CONFIDENCE:
                group.append(other.id)
                assigned.add(other.id)

        label = normalize_name(anchor.owner_name) or anchor.owner_name
        if label in groups:
            # Only owners that normalize to nothing can collide here;
            # the later group replaces the earlier one.
            logger.warning(
                f"Owner label {label!r} already used; replacing group of "
                f"{len(groups[label])} properties",
                extra={"label": label, "replaced_ids": groups[label]},
            )
        groups[label] = group

        log_resolution_event(
            operation="group_by_owner",
            subject=anchor.owner_name,
            result=label,
            confidence=GROUP_MIN_CONFIDENCE if len(group) > 1 else 0,
            is_match=len(group) > 1,
        )

    return groups
