"""
Keyword matching over catalog search results.

The catalog is searched once per keyword (plus once for the whole query).
Every batch of results is normalized, filtered so that only terms whose name
contains all keywords survive, and deduplicated by name.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Sequence

from .normalize import RawRecord, normalize_all
from .terms import Term

logger = logging.getLogger(__name__)

# Languages where Unicode default case mapping gives the wrong lower case for I
_DOTLESS_I_LANGUAGES = {"tr", "az"}


def lower(text: str, lang: str | None = None) -> str:
    """Lower-case ``text`` following the rules of language ``lang``."""
    if lang and lang.split("-")[0].split("_")[0].lower() in _DOTLESS_I_LANGUAGES:
        text = text.replace("I", "ı").replace("İ", "i")
    return text.lower()


def strip_punctuation(token: str) -> str:
    """Remove every Unicode punctuation character (categories P*)."""
    return "".join(c for c in token if not unicodedata.category(c).startswith("P"))


def process_keywords(keywords: str | Sequence[str], max_keywords: int) -> list[str]:
    """Prepare keywords for catalog requests.

    Free text is split on whitespace. A sequence of names is taken as is, each
    name one keyword, so "Wasser Schutz" stays a phrase. The result is capped
    at ``max_keywords`` keywords, punctuation removed from every keyword and
    empty keywords dropped.

    Example:
        >>> process_keywords("Wasser, Schutz!", 10)
        ['Wasser', 'Schutz']
        >>> process_keywords(["Wasser Schutz", "Luft."], 10)
        ['Wasser Schutz', 'Luft']
    """
    if isinstance(keywords, str):
        words = keywords.split()
    else:
        words = [keyword for keyword in keywords if keyword and keyword.strip()]

    words = words[: max(max_keywords, 0)]
    tokens = (" ".join(strip_punctuation(w).split()) for w in words)
    return [token for token in tokens if token]


def contains_all(name: str | None, keywords: Sequence[str], lang: str | None = None) -> bool:
    """Check whether ``name`` contains every keyword, ignoring case.

    An untranslated term (name None) contains nothing.
    """
    if name is None:
        return False
    name_lower = lower(name, lang)
    return all(lower(keyword.strip(), lang) in name_lower for keyword in keywords)


def dedupe_by_name(terms: Iterable[Term]) -> list[Term]:
    """Keep the first term for every name, preserving order.

    Untranslated terms are keyed by id instead, so they never collapse into
    each other.
    """
    seen: set[tuple[str, str]] = set()
    unique = []
    for term in terms:
        key = ("name", term.name) if term.name is not None else ("id", term.id)
        if key not in seen:
            seen.add(key)
            unique.append(term)
    return unique


def match_all(
    batches: Iterable[Iterable[RawRecord]] | None,
    keyword_filter: Sequence[str] | None = None,
    lang: str | None = None,
) -> list[Term]:
    """Normalize per-keyword result batches into one filtered term list.

    Args:
        batches: One batch of raw records per searched keyword.
        keyword_filter: Keep only terms whose name contains all of these.
            None or empty keeps everything.
        lang: Language used for case folding and for naming RDF records.

    Returns:
        Terms in first-seen order, unique by name.
    """
    if not batches:
        return []

    terms: list[Term] = []
    for batch in batches:
        if batch:
            terms.extend(normalize_all(batch, lang))

    if keyword_filter:
        matched = [t for t in terms if contains_all(t.name, keyword_filter, lang)]
        logger.debug(
            "Keyword filter %s kept %d of %d terms", list(keyword_filter), len(matched), len(terms)
        )
        terms = matched

    return dedupe_by_name(terms)
