"""
Normalization of raw catalog records into Terms.

Two record shapes come back from the catalog:
- JSON objects from the GEMET API, e.g.
  {"uri": ".../concept/9242", "preferredLabel": {"string": "Wasser", "language": "de"},
   "thesaurus": ".../concept/"}
  The API already scoped the label to the requested language.
- RdfRecord instances parsed from the RDF/XML representation, which carry
  labels in every language.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from .rdf import GEONAMES, SKOS, SKOSXL, RdfRecord
from .relations import ConceptRelation, classify, term_type_for
from .terms import RelatedTerm, Term, TreeTerm

logger = logging.getLogger(__name__)

RawRecord = dict[str, Any] | RdfRecord

# Tried in order, first literal in the requested language wins
NAME_PREDICATES = (
    SKOS + "prefLabel",
    SKOSXL + "prefLabel",
    SKOS + "officialName",
    GEONAMES + "officialName",
    SKOS + "altLabel",
)


def record_id(record: RawRecord) -> str | None:
    """Return the catalog URI of a raw record."""
    if isinstance(record, RdfRecord):
        return record.uri
    return record.get("uri")


def rdf_name(record: RdfRecord, lang: str) -> str | None:
    """Return the name of an RDF record in ``lang``, or None if untranslated."""
    for predicate in NAME_PREDICATES:
        values = record.literals(predicate, lang)
        if values:
            return values[0]
    return None


def json_name(record: dict[str, Any]) -> str | None:
    label = record.get("preferredLabel")
    if isinstance(label, dict):
        return label.get("string")
    return None


def normalize(record: RawRecord, lang: str | None = None) -> Term:
    """Map one raw catalog record to a Term.

    Args:
        record: JSON object or RdfRecord.
        lang: Language of the name. Required for RDF records; JSON records are
            already scoped to a language by the request that returned them.

    Returns:
        Term whose name is None if the record has no label in ``lang``.

    Raises:
        ValueError: If the record has no URI.
    """
    entry_id = record_id(record)
    if not entry_id:
        raise ValueError(f"Catalog record without uri: {record!r}")

    if isinstance(record, RdfRecord):
        name = rdf_name(record, lang) if lang else None
    else:
        name = json_name(record)

    if name is None:
        logger.debug("No name for %s in language %s", entry_id, lang)

    return Term(
        id=entry_id,
        name=name,
        type=term_type_for(entry_id),
        # Same id, so the entry is recognized as a catalog term by consumers
        alternate_id=entry_id,
    )


def normalize_all(records: Iterable[RawRecord], lang: str | None = None) -> list[Term]:
    """Map records to Terms, skipping records without a URI."""
    terms = []
    for record in records:
        try:
            terms.append(normalize(record, lang))
        except ValueError as e:
            logger.warning("Skipping catalog record: %s", e)
    return terms


def with_alternate_name(term: Term, record: RawRecord | None, alternate_lang: str) -> Term:
    """Return a copy of ``term`` with the name of ``record`` in ``alternate_lang``."""
    if record is None:
        return term
    if isinstance(record, RdfRecord):
        alternate_name = rdf_name(record, alternate_lang)
    else:
        alternate_name = json_name(record)
    return replace(term, alternate_name=alternate_name)


def to_related_terms(records: Iterable[RawRecord], relation: ConceptRelation, lang: str | None = None) -> list[RelatedTerm]:
    relation_type = classify(relation)
    return [RelatedTerm.from_term(term, relation_type) for term in normalize_all(records, lang)]


def to_tree_term(record: RawRecord, lang: str | None = None) -> TreeTerm:
    return TreeTerm.from_term(normalize(record, lang))
