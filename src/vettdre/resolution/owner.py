"""Owner resolution across public-record sources.

Each source names the owner of a property in its own way: the housing
registration roll lists the registered owner, corporate and individual
owners and a managing agent; deed filings list grantees; the assessment
and tax rolls carry one owner string each. ``resolve_owner`` reconciles
them into one identity, and tries to name the person behind an LLC.

Resolution flow:
1. Flatten every name into (name, source label, priority) entries,
   most authoritative source first
2. Greedily cluster entries against each cluster's canonical name
3. Pick the largest cluster, breaking ties on the best priority in it
4. Display the highest-priority member; confidence grows with the
   number of distinct sources that agree

Clustering is single-pass: a cluster's canonical name is fixed when the
cluster is created and clusters are never merged or re-evaluated.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..logging import get_context_logger, log_resolution_event
from .matcher import is_same_entity
from .names import is_entity_name, is_person_name, normalize_name

logger = get_context_logger(__name__)


# =========================
# Source tiers
# =========================

REGISTRATION_PRIORITY = 1
DEED_PRIORITY = 2
ASSESSMENT_PRIORITY = 3
TAX_PRIORITY = 4

REGISTRATION_OWNER_LABEL = "HPD"
REGISTRATION_CORP_LABEL = "HPD Corp"
REGISTRATION_INDIVIDUAL_LABEL = "HPD Individual"
DEED_LABEL = "ACRIS"
ASSESSMENT_LABEL = "PLUTO"
TAX_LABEL = "DOF"

DEED_OWNER_ROLES = frozenset({"GRANTEE", "BUYER"})

BASE_CONFIDENCE = 40
CONFIDENCE_PER_SOURCE = 20


# =========================
# Data Models
# =========================


class RawNameEntry(BaseModel):
    """One candidate owner name as reported by one source."""

    name: str
    source: str
    priority: int = Field(description="Lower is more authoritative")

    model_config = ConfigDict(frozen=True)


class RegistrationRecord(BaseModel):
    """Housing registration roll contacts for a building."""

    owner: str = ""
    agent: str = ""
    agent_phone: str = ""
    agent_address: str = ""
    individual_owners: list[str] = Field(default_factory=list)
    corp_owners: list[str] = Field(default_factory=list)


class DeedParty(BaseModel):
    """A party to a recorded deed."""

    name: str
    role: str
    doc_date: str | None = None

    @property
    def is_owner_side(self) -> bool:
        """Grantees/buyers take title; grantors give it up."""
        return self.role.strip().upper() in DEED_OWNER_ROLES


class OwnershipSources(BaseModel):
    """Everything the public records say about who owns a property."""

    registration: RegistrationRecord | None = None
    deed_parties: list[DeedParty] = Field(default_factory=list)
    assessment_owner: str | None = None
    tax_owner: str | None = None


class ResolvedEntity(BaseModel):
    """The reconciled owner of a property."""

    entity_name: str = ""
    likely_person: str = ""
    llc_name: str = ""
    phone: str = ""
    email: str = ""
    mailing_address: str = ""
    confidence: int = Field(default=0, ge=0, le=100)
    sources: list[str] = Field(default_factory=list)
    alternate_names: list[str] = Field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return bool(self.entity_name)

    @property
    def is_llc(self) -> bool:
        """Whether the display name is a company rather than a person."""
        return bool(self.llc_name) and self.llc_name == self.entity_name


@dataclass
class NameCluster:
    """Entries believed to name the same real-world owner."""

    canonical: str
    members: list[RawNameEntry] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def best_priority(self) -> int:
        return min(m.priority for m in self.members)


# =========================
# Resolution
# =========================


def flatten_sources(sources: OwnershipSources) -> list[RawNameEntry]:
    """Collect every owner name in source-priority order.

    Blank names are skipped. Only owner-side deed parties (grantee or
    buyer) are collected.
    """
    entries: list[RawNameEntry] = []

    def add(name: str | None, source: str, priority: int) -> None:
        if name and name.strip():
            entries.append(RawNameEntry(name=name, source=source, priority=priority))

    registration = sources.registration
    if registration is not None:
        add(registration.owner, REGISTRATION_OWNER_LABEL, REGISTRATION_PRIORITY)
        for name in registration.corp_owners:
            add(name, REGISTRATION_CORP_LABEL, REGISTRATION_PRIORITY)
        for name in registration.individual_owners:
            add(name, REGISTRATION_INDIVIDUAL_LABEL, REGISTRATION_PRIORITY)

    for party in sources.deed_parties:
        if party.is_owner_side:
            add(party.name, DEED_LABEL, DEED_PRIORITY)

    add(sources.assessment_owner, ASSESSMENT_LABEL, ASSESSMENT_PRIORITY)
    add(sources.tax_owner, TAX_LABEL, TAX_PRIORITY)

    return entries


def cluster_names(entries: Iterable[RawNameEntry]) -> list[NameCluster]:
    """Greedily cluster entries in the order given.

    Each entry joins the first existing cluster whose canonical name it
    matches, otherwise it starts a new cluster and its normalized name
    becomes that cluster's canonical name.
    """
    clusters: list[NameCluster] = []
    for entry in entries:
        for cluster in clusters:
            if is_same_entity(entry.name, cluster.canonical).match:
                cluster.members.append(entry)
                break
        else:
            clusters.append(
                NameCluster(
                    canonical=normalize_name(entry.name) or entry.name,
                    members=[entry],
                )
            )
    return clusters


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def resolve_owner_from_entries(
    entries: Iterable[RawNameEntry | Mapping[str, Any]],
    *,
    agent: str = "",
    agent_phone: str = "",
    agent_address: str = "",
) -> ResolvedEntity:
    """Resolve an owner from already-flattened name entries.

    Args:
        entries: Candidate names with source label and priority, in the
            order they should be clustered
        agent: Managing agent name, used as the likely person behind an
            LLC when no individual is named
        agent_phone: Agent phone, copied to the result
        agent_address: Agent business address, copied to the result

    Returns:
        The resolved entity, or an empty ResolvedEntity with confidence 0
        when no names were supplied
    """
    all_names = [
        entry if isinstance(entry, RawNameEntry) else RawNameEntry.model_validate(entry)
        for entry in entries
    ]
    all_names = [entry for entry in all_names if entry.name.strip()]

    if not all_names:
        return ResolvedEntity()

    clusters = cluster_names(all_names)

    # min() keeps the earliest cluster on a full tie
    best = min(clusters, key=lambda c: (-c.size, c.best_priority))
    ranked = sorted(best.members, key=lambda m: m.priority)
    display_name = ranked[0].name
    display_normalized = normalize_name(display_name)

    sources = _unique(m.source for m in ranked)
    result = ResolvedEntity(
        entity_name=display_name,
        confidence=min(100, BASE_CONFIDENCE + CONFIDENCE_PER_SOURCE * len(sources)),
        sources=sources,
        alternate_names=_unique(
            e.name for e in all_names if normalize_name(e.name) != display_normalized
        ),
        phone=agent_phone,
        mailing_address=agent_address,
    )

    if is_entity_name(display_name):
        result.llc_name = display_name
        individuals = sorted(
            (e for e in all_names if is_person_name(e.name)),
            key=lambda e: e.priority,
        )
        if individuals:
            result.likely_person = individuals[0].name
        elif agent:
            result.likely_person = agent
    else:
        result.likely_person = display_name
        entity = next((e for e in all_names if is_entity_name(e.name)), None)
        if entity is not None:
            result.llc_name = entity.name

    logger.debug(
        f"Clustered {len(all_names)} names into {len(clusters)} clusters",
        extra={
            "name_count": len(all_names),
            "cluster_count": len(clusters),
            "winning_cluster_size": best.size,
        },
    )
    log_resolution_event(
        operation="resolve_owner",
        subject=best.canonical,
        result=result.entity_name,
        confidence=result.confidence,
        is_match=True,
    )

    return result


def resolve_owner(sources: OwnershipSources | Mapping[str, Any]) -> ResolvedEntity:
    """Resolve the most likely owner of a property from its public records.

    Args:
        sources: Registration roll, deed parties, assessment-roll owner
            and tax-roll owner for one property

    Returns:
        ResolvedEntity with display name, likely person behind an LLC,
        LLC name, agent contact details, confidence and provenance
    """
    if not isinstance(sources, OwnershipSources):
        sources = OwnershipSources.model_validate(sources)

    registration = sources.registration or RegistrationRecord()
    return resolve_owner_from_entries(
        flatten_sources(sources),
        agent=registration.agent,
        agent_phone=registration.agent_phone,
        agent_address=registration.agent_address,
    )
