"""
Thesaurus service: search, term lookup and hierarchy views for callers.

ThesaurusService ties a catalog transport to the keyword matcher and the
hierarchy builder. Its settings are an immutable ServiceSettings value; use
with_settings() to get a service with different settings.

Example:
    >>> from gemet_thesaurus import GemetClient, ThesaurusService, MatchingMode
    >>> service = ThesaurusService(GemetClient())
    >>> service.find_terms_from_query_term("Wasser", MatchingMode.EXACT)
    [Term(id='http://www.eionet.europa.eu/gemet/concept/9242', name='Wasser', ...)]
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from .client import CatalogTransport, GemetClient
from .config import Config, ServiceSettings
from .hierarchy import HierarchyBuilder
from .matching import match_all, process_keywords
from .normalize import normalize, with_alternate_name
from .relations import MatchingMode
from .terms import RelatedTerm, Term, TreeTerm

logger = logging.getLogger(__name__)


class ThesaurusService:
    """Search and hierarchy operations over one catalog."""

    def __init__(self, transport: CatalogTransport, settings: ServiceSettings | None = None):
        self.transport = transport
        self.settings = settings or ServiceSettings()
        self.hierarchy = HierarchyBuilder(transport)

    @classmethod
    def from_config(cls, config: Config) -> ThesaurusService:
        """Build a service talking to the GEMET API configured in ``config``."""
        client = GemetClient(service_url=config.service_url, timeout=config.timeout)
        return cls(client, config.service_settings())

    def with_settings(self, **changes: Any) -> ThesaurusService:
        """Return a new service sharing the transport, with some settings changed.

        Example:
            >>> english = service.with_settings(default_language="en")
        """
        return ThesaurusService(self.transport, replace(self.settings, **changes))

    def language_for(self, language: str | None) -> str:
        """Return the catalog language code for ``language``.

        None or blank gives the configured default; locale strings like
        ``de_DE`` or ``en-GB`` are reduced to their language part.
        """
        if not language or not language.strip():
            return self.settings.default_language
        return language.strip().replace("_", "-").split("-")[0].lower()

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search_batches(self, keywords: Sequence[str], lang: str, mode: MatchingMode) -> list[list[dict[str, Any]]]:
        """Search the catalog once per keyword, one result batch per keyword."""
        keywords = [k for k in keywords if k and k.strip()]
        if not keywords:
            logger.warning("No keywords passed, returning no results")
            return []
        return [self.transport.search_by_keyword(keyword, lang, mode) for keyword in keywords]

    def _with_alternate(self, term: Term, lang: str) -> Term:
        alternate = self.settings.alternate_language
        if not alternate:
            return term
        if alternate == lang:
            return replace(term, alternate_name=term.name)
        return with_alternate_name(term, self.transport.fetch_record(term.id, alternate), alternate)

    def find_terms_from_query_term(
        self,
        query: str,
        matching: MatchingMode = MatchingMode.CONTAINS,
        language: str | None = None,
    ) -> list[Term]:
        """Find concepts matching a user query.

        The whole query is searched first; a query of several words is also
        searched word by word. Only terms whose name contains every word of
        the query are returned.

        Args:
            query: Free text query, e.g. "Wasser Schutz".
            matching: Catalog search mode. Replaced by CONTAINS when
                ``ignore_passed_matching_type`` is set.
            language: Language of query and names, None for the default.

        Returns:
            Matching terms, unique by name.
        """
        if not query or not query.strip():
            logger.warning("Empty query (%r), returning no terms", query)
            return []

        lang = self.language_for(language)
        if self.settings.ignore_passed_matching_type:
            matching = MatchingMode.CONTAINS

        keywords = process_keywords(query, self.settings.analyze_max_words)
        search_terms = [query.strip()]
        if len(keywords) > 1:
            search_terms.extend(keywords)

        terms = match_all(self.search_batches(search_terms, lang, matching), keywords, lang)
        if matching is MatchingMode.EXACT:
            terms = [self._with_alternate(term, lang) for term in terms]
        logger.info("Query %r (%s, %s) found %d terms", query, matching.name, lang, len(terms))
        return terms

    def get_similar_terms_from_names(self, names: Sequence[str], language: str | None = None) -> list[Term]:
        """Find concepts whose name contains all of the given names."""
        keywords = process_keywords(names, self.settings.analyze_max_words)
        if not keywords:
            logger.warning("No names passed (%r), returning no terms", names)
            return []
        lang = self.language_for(language)
        return match_all(self.search_batches(keywords, lang, MatchingMode.CONTAINS), keywords, lang)

    def get_terms_from_text(
        self,
        text: str,
        analyze_max_words: int | None = None,
        language: str | None = None,
    ) -> list[Term]:
        """Find the concepts named by single words of a text.

        Every word (up to the word cap) is searched exactly; results are not
        filtered, so each recognized word contributes its concept. A single
        word is enough.

        With ``alternate_language`` configured, every found term costs one
        more request for its alternate-language record.
        """
        max_words = self.settings.analyze_max_words
        if analyze_max_words is not None:
            max_words = min(analyze_max_words, max_words)

        keywords = process_keywords(text or "", max_words)
        if not keywords:
            logger.warning("No words to analyze in %r, returning no terms", text)
            return []

        lang = self.language_for(language)
        terms = match_all(self.search_batches(keywords, lang, MatchingMode.EXACT), None, lang)
        return [self._with_alternate(term, lang) for term in terms]

    # -------------------------------------------------------------------------
    # Single terms
    # -------------------------------------------------------------------------

    def get_term(self, term_id: str, language: str | None = None) -> Term | None:
        """Return one catalog entry, or None if it cannot be fetched.

        With ``request_rdf`` set the entry is read as RDF, which carries the
        alternate name in the same document. Without pyoxigraph installed the
        JSON API is used instead.
        """
        if not term_id or not term_id.strip():
            logger.warning("No term id passed (%r), returning no term", term_id)
            return None

        lang = self.language_for(language)
        if self.settings.request_rdf:
            try:
                return self._get_term_rdf(term_id, lang)
            except ImportError as e:
                logger.warning("Reading %s from the JSON API: %s", term_id, e)

        record = self.transport.fetch_record(term_id, lang)
        if record is None:
            logger.error("Problems fetching %s, returning no term", term_id)
            return None
        return self._with_alternate(normalize(record, lang), lang)

    def _get_term_rdf(self, term_id: str, lang: str) -> Term | None:
        record = self.transport.fetch_rdf(term_id)
        if record is None:
            logger.error("Problems fetching %s as RDF, returning no term", term_id)
            return None
        term = normalize(record, lang)
        alternate = self.settings.alternate_language
        return with_alternate_name(term, record, alternate) if alternate else term

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def get_top_level(self, language: str | None = None) -> list[TreeTerm]:
        return self.hierarchy.get_top_level(self.language_for(language))

    def get_hierarchy_next_level(self, entry_id: str | None = None, language: str | None = None) -> list[TreeTerm]:
        return self.hierarchy.get_next_level(entry_id, self.language_for(language))

    def get_hierarchy_path_to_top(self, entry_id: str, language: str | None = None) -> TreeTerm | None:
        return self.hierarchy.get_path_to_top(entry_id, self.language_for(language))

    def get_related_terms(self, entry_id: str, language: str | None = None) -> list[RelatedTerm]:
        return self.hierarchy.get_related_terms(entry_id, self.language_for(language))
