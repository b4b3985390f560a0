"""Shared fixtures: an in-memory catalog shaped like GEMET."""

from __future__ import annotations

import pytest

from gemet_thesaurus.config import ServiceSettings
from gemet_thesaurus.hierarchy import HierarchyBuilder
from gemet_thesaurus.rdf import SKOS, RdfRecord, RdfStatement
from gemet_thesaurus.relations import ConceptRelation, ConceptType, MatchingMode
from gemet_thesaurus.service import ThesaurusService

G = "http://www.eionet.europa.eu/gemet/"

SG_ENVIRONMENT = G + "supergroup/4044"
SG_SOCIAL = G + "supergroup/5499"
SG_ACTIVITIES = G + "supergroup/2894"
SG_PRODUCTS = G + "supergroup/5306"
GR_WATER = G + "group/14980"
C_WATER = G + "concept/9242"
C_SEA = G + "concept/7495"
C_WATER_PROTECTION = G + "concept/9261"
C_WATER_POLLUTION = G + "concept/9271"
C_GROUNDWATER_AREA = G + "concept/3800"
C_NATURE_PROTECTION = G + "concept/5469"
C_BROKEN = G + "concept/666"
C_CYCLE_A = G + "concept/100"
C_CYCLE_B = G + "concept/101"
C_LONELY = G + "concept/555"
C_UNTRANSLATED = G + "concept/777"


class FakeCatalog:
    """CatalogTransport over a fixed relation graph, recording every call."""

    def __init__(self):
        self.names: dict[str, dict[str, str]] = {}
        self.edges: list[tuple[str, ConceptRelation, str]] = []
        self.broken: set[str] = set()
        self.calls: list[tuple] = []

    def add(self, entry_id: str, **names: str) -> None:
        self.names[entry_id] = names

    def link(self, parent: str, child: str, down: ConceptRelation, up: ConceptRelation) -> None:
        self.edges.append((parent, down, child))
        self.edges.append((child, up, parent))

    def relate(self, a: str, b: str) -> None:
        self.edges.append((a, ConceptRelation.RELATED, b))
        self.edges.append((b, ConceptRelation.RELATED, a))

    def targets(self, entry_id: str, relation: ConceptRelation) -> list[str]:
        return [t for s, r, t in self.edges if s == entry_id and r is relation]

    # CatalogTransport

    def _record(self, entry_id, lang):
        if entry_id not in self.names or entry_id in self.broken:
            return None
        record = {"uri": entry_id, "thesaurus": entry_id.rsplit("/", 1)[0] + "/"}
        name = self.names[entry_id].get(lang)
        if name is not None:
            record["preferredLabel"] = {"string": name, "language": lang}
        return record

    def fetch_record(self, entry_id, lang):
        self.calls.append(("fetch_record", entry_id, lang))
        return self._record(entry_id, lang)

    def fetch_rdf(self, entry_id):
        self.calls.append(("fetch_rdf", entry_id))
        if entry_id not in self.names or entry_id in self.broken:
            return None
        statements = [
            RdfStatement(predicate=SKOS + "prefLabel", value=name, language=lang)
            for lang, name in self.names[entry_id].items()
        ]
        return RdfRecord(uri=entry_id, statements=statements)

    def fetch_edges(self, entry_id, relation, lang):
        self.calls.append(("fetch_edges", entry_id, relation, lang))
        return [
            {"source": entry_id, "relation": relation.value, "target": t}
            for t in self.targets(entry_id, relation)
        ]

    def fetch_related(self, entry_id, relation, lang):
        self.calls.append(("fetch_related", entry_id, relation, lang))
        records = (self._record(t, lang) for t in self.targets(entry_id, relation))
        return [r for r in records if r is not None]

    def fetch_topmost(self, concept_type, lang):
        self.calls.append(("fetch_topmost", concept_type, lang))
        return [self._record(i, lang) for i in self.names if i.startswith(concept_type.value)]

    def search_by_keyword(self, keyword, lang, mode):
        self.calls.append(("search_by_keyword", keyword, lang, mode))
        needle = keyword.lower()
        checks = {
            MatchingMode.EXACT: lambda name: name == needle,
            MatchingMode.BEGINS_WITH: lambda name: name.startswith(needle),
            MatchingMode.ENDS_WITH: lambda name: name.endswith(needle),
            MatchingMode.CONTAINS: lambda name: needle in name,
            MatchingMode.CHECK_ALL: lambda name: needle in name,
        }
        found = []
        for entry_id, names in self.names.items():
            if not entry_id.startswith(ConceptType.CONCEPT.value) or entry_id in self.broken:
                continue
            name = names.get(lang)
            if name is not None and checks[mode](name.lower()):
                found.append(self._record(entry_id, lang))
        return found

    def searched_keywords(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "search_by_keyword"]


def build_catalog() -> FakeCatalog:
    catalog = FakeCatalog()
    catalog.add(SG_ENVIRONMENT, de="NATÜRLICHE UND ANTHROPOGENE UMWELT", en="NATURAL AND MAN-MADE ENVIRONMENT")
    catalog.add(SG_SOCIAL, de="SOZIALE ASPEKTE, UMWELTPOLITIK", en="SOCIAL ASPECTS, ENVIRONMENTAL POLICY MEASURES")
    catalog.add(SG_ACTIVITIES, de="MENSCHLICHE AKTIVITÄTEN UND PRODUKTE", en="HUMAN ACTIVITIES AND PRODUCTS")
    catalog.add(SG_PRODUCTS, de="AUSWIRKUNGEN AUF DIE UMWELT", en="EFFECTS AND FACTORS")
    catalog.add(GR_WATER, de="WASSER", en="WATER")
    catalog.add(C_WATER, de="Wasser", en="water")
    catalog.add(C_SEA, de="Meer", en="sea")
    catalog.add(C_WATER_PROTECTION, de="Wasserschutz", en="water protection")
    catalog.add(C_WATER_POLLUTION, de="Wasserverschmutzung", en="water pollution")
    catalog.add(C_GROUNDWATER_AREA, de="Grundwasserschutzgebiet", en="groundwater protection area")
    catalog.add(C_NATURE_PROTECTION, de="Naturschutz", en="nature protection")
    catalog.add(C_BROKEN, de="Kaputt", en="broken")
    catalog.add(C_CYCLE_A, de="Zyklus A", en="cycle A")
    catalog.add(C_CYCLE_B, de="Zyklus B", en="cycle B")
    catalog.add(C_LONELY, de="Einsam", en="lonely")
    catalog.add(C_UNTRANSLATED, en="untranslated")
    catalog.broken.add(C_BROKEN)

    narrower = (ConceptRelation.NARROWER, ConceptRelation.BROADER)
    member = (ConceptRelation.GROUP_MEMBER, ConceptRelation.GROUP)

    catalog.link(SG_ENVIRONMENT, GR_WATER, *narrower)
    # All three are members of the group, only Wasser has no broader concept
    catalog.link(GR_WATER, C_WATER, *member)
    catalog.link(GR_WATER, C_SEA, *member)
    catalog.link(GR_WATER, C_WATER_PROTECTION, *member)
    catalog.link(C_WATER, C_SEA, *narrower)
    catalog.link(C_WATER, C_WATER_PROTECTION, *narrower)
    catalog.link(C_WATER, C_BROKEN, *narrower)
    catalog.link(C_WATER_PROTECTION, C_GROUNDWATER_AREA, *narrower)
    catalog.relate(C_WATER, C_WATER_POLLUTION)
    catalog.relate(C_WATER, C_SEA)
    # broader loop
    catalog.link(C_CYCLE_B, C_CYCLE_A, *narrower)
    catalog.link(C_CYCLE_A, C_CYCLE_B, *narrower)
    return catalog


@pytest.fixture
def catalog() -> FakeCatalog:
    return build_catalog()


@pytest.fixture
def builder(catalog) -> HierarchyBuilder:
    return HierarchyBuilder(catalog)


@pytest.fixture
def service(catalog) -> ThesaurusService:
    return ThesaurusService(catalog, ServiceSettings())
