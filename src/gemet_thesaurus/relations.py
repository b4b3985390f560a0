"""
Relation kinds, entry kinds and search modes of the GEMET catalog.

The catalog does not model its hierarchy consistently: supergroups and
concepts point to their children with ``skos:narrower``, groups with
``gemet:groupMember``, and some concepts only reach their parent through a
``gemet:group`` edge instead of ``skos:broader``. The lookups here decide,
from an entry's id alone, which relation kinds to follow.
"""

from __future__ import annotations

from enum import Enum
from urllib.parse import urlparse

from .terms import RelationType, TermType

GEMET_BASE = "http://www.eionet.europa.eu/gemet/"
SKOS_NS = "http://www.w3.org/2004/02/skos/core#"
GEMET_SCHEMA_NS = "http://www.eionet.europa.eu/gemet/2004/06/gemet-schema.rdf#"


class ConceptRelation(Enum):
    """Relation kinds, valued with the URI used in GEMET's ``relation_uri``."""

    NARROWER = SKOS_NS + "narrower"
    BROADER = SKOS_NS + "broader"
    RELATED = SKOS_NS + "related"
    GROUP = GEMET_SCHEMA_NS + "group"
    GROUP_MEMBER = GEMET_SCHEMA_NS + "groupMember"


class ConceptType(Enum):
    """Catalog thesauri, valued with the URI used in GEMET's ``thesaurus_uri``."""

    CONCEPT = GEMET_BASE + "concept/"
    GROUP = GEMET_BASE + "group/"
    SUPERGROUP = GEMET_BASE + "supergroup/"


class MatchingMode(Enum):
    """Keyword search modes, valued with GEMET's ``search_mode`` number."""

    EXACT = 0
    BEGINS_WITH = 1
    ENDS_WITH = 2
    CONTAINS = 3
    CHECK_ALL = 4


class EntryKind(Enum):
    CONCEPT = "concept"
    GROUP = "group"
    SUPERGROUP = "supergroup"


RELATION_TYPES: dict[ConceptRelation, RelationType] = {
    ConceptRelation.NARROWER: RelationType.CHILD,
    ConceptRelation.BROADER: RelationType.PARENT,
    ConceptRelation.RELATED: RelationType.RELATIVE,
    ConceptRelation.GROUP: RelationType.PARENT,
    ConceptRelation.GROUP_MEMBER: RelationType.CHILD,
}

CHILD_RELATIONS: dict[EntryKind, ConceptRelation] = {
    EntryKind.CONCEPT: ConceptRelation.NARROWER,
    EntryKind.GROUP: ConceptRelation.GROUP_MEMBER,
    EntryKind.SUPERGROUP: ConceptRelation.NARROWER,
}

# Queried in order, the second only when the first yields nothing
PARENT_RELATIONS: tuple[ConceptRelation, ...] = (ConceptRelation.BROADER, ConceptRelation.GROUP)

_KIND_SEGMENTS = {kind.value: kind for kind in EntryKind}


def _path_segments(entry_id: str) -> list[str]:
    return [segment for segment in urlparse(entry_id).path.split("/") if segment]


def entry_kind(entry_id: str) -> EntryKind:
    """Classify an entry by the kind segment of its id.

    Example:
        >>> entry_kind("http://www.eionet.europa.eu/gemet/group/14980")
        <EntryKind.GROUP: 'group'>
    """
    for segment in reversed(_path_segments(entry_id)):
        kind = _KIND_SEGMENTS.get(segment)
        if kind is not None:
            return kind
    return EntryKind.CONCEPT


def is_group(entry_id: str) -> bool:
    return entry_kind(entry_id) is EntryKind.GROUP


def is_concept(entry_id: str) -> bool:
    return "concept" in _path_segments(entry_id)


def term_type_for(entry_id: str) -> TermType:
    """Descriptor for ids with a ``concept`` segment, node label otherwise."""
    return TermType.DESCRIPTOR if is_concept(entry_id) else TermType.NODE_LABEL


def classify(relation: ConceptRelation) -> RelationType:
    return RELATION_TYPES[relation]


def child_relation_for(entry_id: str) -> ConceptRelation:
    return CHILD_RELATIONS[entry_kind(entry_id)]


def parent_relation_order() -> tuple[ConceptRelation, ...]:
    return PARENT_RELATIONS
