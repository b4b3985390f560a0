"""
Vocabulary entries returned by the thesaurus service.

Three shapes are produced:
- Term: a normalized catalog entry (id, localized name, entry type)
- RelatedTerm: a Term tagged with how it relates to a queried entry
- TreeTerm: a Term with parent/child links for hierarchy display

TreeTerm links are always created in matched pairs, so walking a tree
downwards from a parent reaches the same node that points back up to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class TermType(Enum):
    """Kind of catalog entry."""

    DESCRIPTOR = "descriptor"  # ordinary concept
    NODE_LABEL = "node_label"  # group or supergroup, only structures the hierarchy


class RelationType(Enum):
    """How a related entry relates to the queried one."""

    PARENT = "parent"
    CHILD = "child"
    RELATIVE = "relative"


class Expansion(Enum):
    """Child state of a TreeTerm that has children which were not fetched."""

    NOT_EXPANDED = "not_expanded"

    def __repr__(self) -> str:
        return "NOT_EXPANDED"


NOT_EXPANDED = Expansion.NOT_EXPANDED


@dataclass(frozen=True)
class Term:
    """A normalized catalog entry."""

    id: str  # Catalog URI, e.g. "http://www.eionet.europa.eu/gemet/concept/9242"
    name: str | None  # Localized name, None if untranslated in the requested language
    type: TermType
    alternate_id: str | None = None
    alternate_name: str | None = None  # Name in the configured alternate language

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
        }
        if self.alternate_id:
            result["alternateId"] = self.alternate_id
        if self.alternate_name:
            result["alternateName"] = self.alternate_name
        return result


@dataclass(frozen=True)
class RelatedTerm(Term):
    """A term plus the relation it has to the entry it was fetched for."""

    relation_type: RelationType = RelationType.RELATIVE

    @classmethod
    def from_term(cls, term: Term, relation_type: RelationType) -> RelatedTerm:
        return cls(
            id=term.id,
            name=term.name,
            type=term.type,
            alternate_id=term.alternate_id,
            alternate_name=term.alternate_name,
            relation_type=relation_type,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["relationType"] = self.relation_type.value
        return result


@dataclass(eq=False)
class TreeTerm:
    """A term with lazily populated hierarchy links.

    ``parents`` is None until parents have been computed; an empty list means
    they were computed and there are none.

    ``children`` is None until children have been computed, NOT_EXPANDED when
    the entry is known to have children that were not fetched, and a list once
    expanded.

    Instances compare by identity: the same catalog id may appear as separate
    nodes in separate requests.
    """

    id: str
    name: str | None
    type: TermType
    alternate_id: str | None = None
    alternate_name: str | None = None
    parents: list[TreeTerm] | None = None
    children: list[TreeTerm] | Expansion | None = field(default=None)

    @classmethod
    def from_term(cls, term: Term) -> TreeTerm:
        return cls(
            id=term.id,
            name=term.name,
            type=term.type,
            alternate_id=term.alternate_id,
            alternate_name=term.alternate_name,
        )

    def to_term(self) -> Term:
        return Term(
            id=self.id,
            name=self.name,
            type=self.type,
            alternate_id=self.alternate_id,
            alternate_name=self.alternate_name,
        )

    @property
    def has_unexpanded_children(self) -> bool:
        return self.children is NOT_EXPANDED

    def mark_not_expanded(self) -> None:
        """Flag this node as having children that can be fetched on demand."""
        self.children = NOT_EXPANDED

    def mark_no_parents(self) -> None:
        """Record that parents were computed and there are none."""
        if self.parents is None:
            self.parents = []

    def add_parent(self, parent: TreeTerm) -> None:
        """Link ``parent`` above this node, in both directions."""
        self._append_parent(parent)
        parent._append_child(self)

    def add_child(self, child: TreeTerm) -> None:
        """Link ``child`` below this node, in both directions."""
        self._append_child(child)
        child._append_parent(self)

    def _append_parent(self, parent: TreeTerm) -> None:
        if self.parents is None:
            self.parents = []
        self.parents.append(parent)

    def _append_child(self, child: TreeTerm) -> None:
        if not isinstance(self.children, list):
            self.children = []
        self.children.append(child)

    def to_dict(self, include_parents: bool = True, include_children: bool = True) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Parents are serialized upwards only and children downwards only, so the
        two link directions never recurse into each other.
        """
        result = self.to_term().to_dict()
        if include_parents:
            result["parents"] = (
                None
                if self.parents is None
                else [p.to_dict(include_parents=True, include_children=False) for p in self.parents]
            )
        if include_children:
            if self.children is NOT_EXPANDED:
                result["children"] = None
                result["hasChildren"] = True
            elif self.children is None:
                result["children"] = None
            else:
                result["children"] = [
                    c.to_dict(include_parents=False, include_children=True) for c in self.children
                ]
                result["hasChildren"] = bool(self.children)
        return result

    def __repr__(self) -> str:
        names = [f.name for f in fields(self) if f.name not in ("parents", "children")]
        attrs = ", ".join(f"{n}={getattr(self, n)!r}" for n in names)
        parents = None if self.parents is None else [p.id for p in self.parents]
        if isinstance(self.children, list):
            children: Any = [c.id for c in self.children]
        else:
            children = self.children
        return f"TreeTerm({attrs}, parents={parents!r}, children={children!r})"
