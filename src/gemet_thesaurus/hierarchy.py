"""
Hierarchy views over the GEMET relation graph.

The catalog's relations do not form a tree: concepts can have several
broader concepts, a concept may sit below a group through ``groupMember``
while its "real" parent is another concept, and ``broader`` chains can loop.
HierarchyBuilder turns this graph into per-request TreeTerm structures that
are acyclic by construction:

    supergroup ──narrower──> group ──groupMember──> concept ──narrower──> concept

Every TreeTerm returned is freshly built, nothing is shared between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .client import CatalogTransport, edge_target
from .normalize import record_id, to_related_terms, to_tree_term
from .relations import (
    ConceptRelation,
    ConceptType,
    child_relation_for,
    parent_relation_order,
)
from .terms import RelatedTerm, TermType, TreeTerm

logger = logging.getLogger(__name__)


class HierarchyBuilder:
    """Builds top level, next level and path-to-top views of the catalog."""

    def __init__(self, transport: CatalogTransport):
        self.transport = transport

    # -------------------------------------------------------------------------
    # Fetch helpers
    # -------------------------------------------------------------------------

    def _tree_terms(self, records: Iterable[dict[str, Any]], lang: str) -> list[TreeTerm]:
        nodes = []
        for record in records:
            if not record_id(record):
                logger.warning("Skipping catalog record without uri: %r", record)
                continue
            nodes.append(to_tree_term(record, lang))
        return nodes

    def fetch_children(self, entry_id: str, lang: str) -> list[dict[str, Any]]:
        """Fetch the full records of an entry's children.

        Groups list their members through ``groupMember``; a member that also
        has a ``broader`` concept belongs below that concept, so only members
        whose sole parent is the group are returned. Children whose record
        cannot be fetched are skipped.
        """
        relation = child_relation_for(entry_id)
        children = []
        for edge in self.transport.fetch_edges(entry_id, relation, lang):
            child_id = edge_target(edge)
            if not child_id:
                logger.warning("Skipping %s edge of %s without target: %r", relation.name, entry_id, edge)
                continue

            if relation is ConceptRelation.GROUP_MEMBER:
                if self.transport.fetch_edges(child_id, ConceptRelation.BROADER, lang):
                    logger.debug("Skipping group member %s of %s, it has a broader concept", child_id, entry_id)
                    continue

            child = self.transport.fetch_record(child_id, lang)
            if child is None:
                logger.warning("Problems fetching child %s of %s, skipping it", child_id, entry_id)
                continue
            children.append(child)

        return children

    def fetch_first_parent(self, entry_id: str, lang: str) -> dict[str, Any] | None:
        """Fetch the first parent of an entry.

        ``broader`` is asked first; only entries without a broader concept fall
        back to their ``group``.
        """
        for relation in parent_relation_order():
            parents = [p for p in self.transport.fetch_related(entry_id, relation, lang) if record_id(p)]
            if parents:
                return parents[0]
        return None

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def get_top_level(self, lang: str) -> list[TreeTerm]:
        """Return the topmost supergroups.

        Roots have no parents computed and are flagged NOT_EXPANDED; their
        children are only fetched by a following get_next_level call.
        """
        roots = self._tree_terms(self.transport.fetch_topmost(ConceptType.SUPERGROUP, lang), lang)
        for root in roots:
            root.mark_not_expanded()
        return roots

    def get_next_level(self, entry_id: str | None, lang: str) -> list[TreeTerm]:
        """Return the children of an entry, each linked to the entry as parent.

        Args:
            entry_id: Catalog URI of the entry to expand. None returns the top level.
            lang: Language of the names.

        Returns:
            Child TreeTerms. Group and supergroup children are flagged
            NOT_EXPANDED; concept children come with their own children
            already attached. Empty if the entry does not exist.
        """
        if entry_id is None:
            return self.get_top_level(lang)

        if not entry_id.strip():
            logger.warning("No entry id passed (%r), returning empty result", entry_id)
            return []

        entry = self.transport.fetch_record(entry_id, lang)
        if entry is None:
            logger.error("Problems fetching %s, returning empty children list", entry_id)
            return []

        result = []
        for child in self._tree_terms(self.fetch_children(entry_id, lang), lang):
            child.add_parent(to_tree_term(entry, lang))

            if child.type is TermType.NODE_LABEL:
                child.mark_not_expanded()
            else:
                child.children = []
                for grandchild in self._tree_terms(self.fetch_children(child.id, lang), lang):
                    child.add_child(grandchild)

            result.append(child)

        return result

    def get_path_to_top(self, entry_id: str, lang: str) -> TreeTerm | None:
        """Return the entry with one chain of parents up to a top node.

        At every level only the first parent found is followed. A parent that
        is already on the path ends the walk, so cyclic ``broader`` chains
        terminate. The last node of the chain has ``parents == []``.

        Returns:
            The entry as TreeTerm, or None if it does not exist.
        """
        if not entry_id or not entry_id.strip():
            logger.warning("No entry id passed (%r), returning no path", entry_id)
            return None

        entry = self.transport.fetch_record(entry_id, lang)
        if entry is None:
            logger.error("Problems fetching %s, returning no path", entry_id)
            return None

        start = to_tree_term(entry, lang)
        visited = {start.id}
        pending = [start]

        while pending:
            current = pending.pop()
            if current.parents is not None:
                continue

            parent_record = self.fetch_first_parent(current.id, lang)
            if parent_record is None:
                current.mark_no_parents()
                continue

            parent_id = record_id(parent_record)
            if parent_id in visited:
                logger.warning(
                    "Cyclic relation: %s is already on the path of %s, stopping at %s",
                    parent_id, entry_id, current.id,
                )
                current.mark_no_parents()
                continue

            parent = to_tree_term(parent_record, lang)
            current.add_parent(parent)
            visited.add(parent.id)
            pending.append(parent)

        return start

    def get_related_terms(self, entry_id: str, lang: str) -> list[RelatedTerm]:
        """Return every entry related to ``entry_id``, tagged by relation.

        All relation kinds are queried and nothing is filtered: an entry
        reachable through two relation kinds appears twice.
        """
        if not entry_id or not entry_id.strip():
            logger.warning("No entry id passed (%r), returning empty result", entry_id)
            return []

        result: list[RelatedTerm] = []
        for relation in ConceptRelation:
            records = self.transport.fetch_related(entry_id, relation, lang)
            result.extend(to_related_terms(records, relation, lang))
        return result
