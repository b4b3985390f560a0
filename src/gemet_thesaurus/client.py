"""
HTTP client for the GEMET thesaurus API.

Wraps the JSON web service (https://www.eionet.europa.eu/gemet/webservices)
and the RDF/XML representation of concept URIs. Every request failure is
logged and reported as "no data" (None or an empty list), so callers that
expand a hierarchy keep going with the remaining entries.

Example:
    >>> from gemet_thesaurus.client import GemetClient
    >>> client = GemetClient()
    >>> client.fetch_record("http://www.eionet.europa.eu/gemet/concept/9242", "de")
    {'uri': 'http://www.eionet.europa.eu/gemet/concept/9242', 'preferredLabel': {...}, ...}
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from ._version import __version__
from .rdf import RdfRecord, parse_rdf_record
from .relations import ConceptRelation, ConceptType, MatchingMode

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = "https://www.eionet.europa.eu/gemet/"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = f"gemet-thesaurus/{__version__}"


class CatalogTransport(Protocol):
    """What the hierarchy builder and the service need from the catalog."""

    def fetch_record(self, entry_id: str, lang: str) -> dict[str, Any] | None: ...

    def fetch_rdf(self, entry_id: str) -> RdfRecord | None: ...

    def fetch_edges(self, entry_id: str, relation: ConceptRelation, lang: str) -> list[dict[str, Any]]: ...

    def fetch_related(self, entry_id: str, relation: ConceptRelation, lang: str) -> list[dict[str, Any]]: ...

    def fetch_topmost(self, concept_type: ConceptType, lang: str) -> list[dict[str, Any]]: ...

    def search_by_keyword(self, keyword: str, lang: str, mode: MatchingMode) -> list[dict[str, Any]]: ...


def prepare_url(url: str) -> str:
    """Make sure a base URL ends with a slash."""
    return url if url.endswith("/") else url + "/"


def edge_target(edge: dict[str, Any]) -> str | None:
    """Return the target URI of a ``{source, relation, target}`` edge."""
    return edge.get("target")


class GemetClient:
    """Client for the GEMET JSON and RDF API."""

    def __init__(
        self,
        service_url: str = DEFAULT_SERVICE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """Initialize GEMET client.

        Args:
            service_url: Base URL of the GEMET web service.
            timeout: Request timeout in seconds.
            session: Optional requests session (e.g. with proxies configured).
        """
        self.service_url = prepare_url(service_url)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def _request_json(self, method: str, params: dict[str, Any]) -> Any | None:
        """Call an API method and return the decoded JSON, or None on failure."""
        url = self.service_url + method
        logger.debug("Fetching %s %s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            logger.warning("GEMET request timed out for %s %s: %s", method, params, e)
            return None
        except requests.RequestException as e:
            logger.warning("GEMET request failed for %s %s: %s", method, params, e)
            return None
        except ValueError as e:
            # Invalid JSON, the service answers unknown URIs with an HTML page
            logger.warning("GEMET returned invalid JSON for %s %s: %s", method, params, e)
            return None

    def _request_list(self, method: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        data = self._request_json(method, params)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Expected a list from %s %s, got %s", method, params, type(data).__name__)
            return []
        return data

    def fetch_record(self, entry_id: str, lang: str) -> dict[str, Any] | None:
        """Get a concept, group or supergroup as JSON.

        Args:
            entry_id: Catalog URI, e.g. http://www.eionet.europa.eu/gemet/concept/6740
            lang: Language of the returned label.

        Returns:
            JSON object, or None if the entry does not exist or the request failed.
        """
        if not entry_id or not entry_id.strip():
            logger.warning("No concept uri passed (%r), returning no record", entry_id)
            return None
        data = self._request_json("getConcept", {"concept_uri": entry_id, "language": lang})
        if not isinstance(data, dict) or not data.get("uri"):
            if data is not None:
                logger.warning("GEMET has no concept %s", entry_id)
            return None
        return data

    def fetch_rdf(self, entry_id: str) -> RdfRecord | None:
        """Get a concept as RDF with labels in all languages.

        Returns:
            RdfRecord, or None if the entry does not exist or could not be parsed.
        """
        if not entry_id or not entry_id.strip():
            logger.warning("No concept uri passed (%r), returning no record", entry_id)
            return None
        logger.debug("Fetching RDF for %s", entry_id)
        try:
            response = self.session.get(
                entry_id, headers={"Accept": "application/rdf+xml"}, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("RDF request failed for %s: %s", entry_id, e)
            return None

        try:
            return parse_rdf_record(response.content, entry_id)
        except SyntaxError as e:
            logger.warning("Could not parse RDF for %s: %s", entry_id, e)
            return None

    def fetch_edges(self, entry_id: str, relation: ConceptRelation, lang: str) -> list[dict[str, Any]]:
        """Get the ``{source, relation, target}`` edges of an entry (getAllConceptRelatives)."""
        if not entry_id or not entry_id.strip():
            logger.warning("No concept uri passed (%r), returning no edges", entry_id)
            return []
        return self._request_list(
            "getAllConceptRelatives",
            {"concept_uri": entry_id, "relation_uri": relation.value, "language": lang},
        )

    def fetch_related(self, entry_id: str, relation: ConceptRelation, lang: str) -> list[dict[str, Any]]:
        """Get the full records related to an entry (getRelatedConcepts)."""
        if not entry_id or not entry_id.strip():
            logger.warning("No concept uri passed (%r), returning no concepts", entry_id)
            return []
        return self._request_list(
            "getRelatedConcepts",
            {"concept_uri": entry_id, "relation_uri": relation.value, "language": lang},
        )

    def fetch_topmost(self, concept_type: ConceptType, lang: str) -> list[dict[str, Any]]:
        return self._request_list(
            "getTopmostConcepts", {"thesaurus_uri": concept_type.value, "language": lang}
        )

    def search_by_keyword(self, keyword: str, lang: str, mode: MatchingMode) -> list[dict[str, Any]]:
        """Get concepts matching a keyword.

        Only the concept thesaurus is searched, groups and supergroups never
        match.
        """
        if not keyword or not keyword.strip():
            logger.warning("Empty keyword (%r) passed, returning no concepts", keyword)
            return []
        return self._request_list(
            "getConceptsMatchingKeyword",
            {
                "keyword": keyword,
                "search_mode": mode.value,
                "thesaurus_uri": ConceptType.CONCEPT.value,
                "language": lang,
            },
        )

