"""
RDF representation of catalog entries.

GEMET serves every concept URI as RDF/XML when asked with
``Accept: application/rdf+xml``. The document is loaded into an in-memory
Oxigraph store (pyoxigraph) and the statements about the requested subject
are kept as an RdfRecord, which the normalizer reads labels from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SKOS = "http://www.w3.org/2004/02/skos/core#"
SKOSXL = "http://www.w3.org/2008/05/skos-xl#"
GEONAMES = "http://www.geonames.org/ontology#"


@dataclass(frozen=True)
class RdfStatement:
    """One (predicate, object) pair of a subject."""

    predicate: str
    value: str
    language: str | None = None  # Language tag, only for literals
    is_literal: bool = True


@dataclass
class RdfRecord:
    """Statements about one subject URI."""

    uri: str
    statements: list[RdfStatement] = field(default_factory=list)

    def literals(self, predicate: str, lang: str) -> list[str]:
        """Return literal values of ``predicate`` tagged with language ``lang``."""
        return [
            s.value
            for s in self.statements
            if s.predicate == predicate and s.is_literal and s.language == lang
        ]


def parse_rdf_record(data: bytes | str, uri: str) -> RdfRecord | None:
    """Parse an RDF/XML document and extract the statements about ``uri``.

    Args:
        data: The RDF/XML document.
        uri: Subject to extract.

    Returns:
        RdfRecord for the subject, or None if the document has no statement
        about it.

    Raises:
        ImportError: If pyoxigraph is not installed.
        SyntaxError: If the document cannot be parsed.
    """
    try:
        import pyoxigraph
    except ImportError as e:
        raise ImportError(
            "pyoxigraph required for RDF records. "
            "Install with: pip install gemet-thesaurus[rdf]"
        ) from e

    if isinstance(data, str):
        data = data.encode("utf-8")

    store = pyoxigraph.Store()
    store.load(data, pyoxigraph.RdfFormat.RDF_XML, base_iri=uri)

    statements = []
    for quad in store.quads_for_pattern(pyoxigraph.NamedNode(uri), None, None):
        obj = quad.object
        if isinstance(obj, pyoxigraph.Literal):
            statements.append(
                RdfStatement(
                    predicate=quad.predicate.value,
                    value=obj.value,
                    language=obj.language,
                )
            )
        elif isinstance(obj, pyoxigraph.NamedNode):
            statements.append(
                RdfStatement(predicate=quad.predicate.value, value=obj.value, is_literal=False)
            )

    if not statements:
        logger.debug("No statements about %s in RDF document", uri)
        return None
    logger.debug("Loaded %d statements about %s", len(statements), uri)
    return RdfRecord(uri=uri, statements=statements)
