"""
gemet-thesaurus - Normalized access to the GEMET environmental thesaurus

Features:
- Uniform Term values for concepts, groups and supergroups
- Keyword search with intersective name filtering
- Hierarchy views (top level, next level, path to top) that stay acyclic
  even where the catalog's relation graph is not
- Related terms over all relation kinds
- CLI for searches and hierarchy browsing
"""

from ._version import __version__
from .client import CatalogTransport, GemetClient
from .config import Config, ServiceSettings
from .hierarchy import HierarchyBuilder
from .matching import match_all, process_keywords
from .normalize import normalize
from .relations import ConceptRelation, ConceptType, MatchingMode
from .service import ThesaurusService
from .terms import NOT_EXPANDED, RelatedTerm, RelationType, Term, TermType, TreeTerm

__all__ = [
    "__version__",
    "CatalogTransport",
    "GemetClient",
    "Config",
    "ServiceSettings",
    "HierarchyBuilder",
    "ThesaurusService",
    "match_all",
    "process_keywords",
    "normalize",
    "ConceptRelation",
    "ConceptType",
    "MatchingMode",
    "NOT_EXPANDED",
    "Term",
    "TermType",
    "RelatedTerm",
    "RelationType",
    "TreeTerm",
]
