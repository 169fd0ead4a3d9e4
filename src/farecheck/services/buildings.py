"""Keyword-based building type classification.

Addresses returned by OneMap carry a building name, a search value and a
formatted address. None of them states what kind of building it is, so the
type is inferred from keywords. Rules are evaluated in order and the first
match wins; HDB sits first because block numbers are the strongest signal
and estates often borrow condo-style names ("BLK 123 ALJUNIED CONDO").
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from ..models.domain import BuildingType

BLOCK_NUMBER_PATTERN = re.compile(r"BLK\s*\d+")


@dataclass(frozen=True, slots=True)
class ClassificationRule:
    """One entry of the ordered rule table."""

    building_type: BuildingType
    keywords: tuple[str, ...]
    pattern: re.Pattern[str] | None = None
    match_block_hint: bool = False
    # Landed-only guard: skip when the text looks like a unit or a named building.
    requires_plain_address: bool = False


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        BuildingType.HDB,
        ("HDB", "BLK", "BLOCK"),
        pattern=BLOCK_NUMBER_PATTERN,
        match_block_hint=True,
    ),
    ClassificationRule(
        BuildingType.CONDO,
        (
            "CONDO",
            "CONDOMINIUM",
            "RESIDENCE",
            "RESIDENCES",
            "APARTMENT",
            "SUITES",
            "LODGE",
            "MANSIONS",
            "HEIGHTS",
            "GARDENS",
            "VILLA",
            "VILLAS",
            "COURT",
        ),
    ),
    ClassificationRule(
        BuildingType.OFFICE,
        (
            "TOWER",
            "TOWERS",
            "BUILDING",
            "CENTRE",
            "CENTER",
            "PLAZA",
            "COMPLEX",
            "HOUSE",
            "PLACE",
            "SQUARE",
            "OFFICE",
            "CORPORATE",
            "BUSINESS",
        ),
    ),
    ClassificationRule(
        BuildingType.MALL,
        ("MALL", "SHOPPING", "RETAIL", "CITY", "JUNCTION", "POINT", "MARKET", "MART"),
    ),
    ClassificationRule(
        BuildingType.INDUSTRIAL,
        (
            "INDUSTRIAL",
            "FACTORY",
            "WAREHOUSE",
            "LOGISTICS",
            "TECHPARK",
            "TECH PARK",
            "BIZPARK",
            "BIZ HUB",
            "IND PARK",
        ),
    ),
    ClassificationRule(
        BuildingType.LANDED,
        ("TERRACE", "DRIVE", "AVENUE", "ROAD", "STREET", "LANE", "CLOSE", "CRESCENT", "WALK"),
        requires_plain_address=True,
    ),
)


def _clean(value: object) -> str:
    text = str(value or "").strip().upper()
    return "" if text == "NIL" else text


@dataclass(frozen=True)
class BuildingClassifier:
    """Maps free text to a :class:`BuildingType` using an ordered rule table."""

    rules: Sequence[ClassificationRule] = field(default=DEFAULT_RULES)

    def classify(
        self,
        text: str,
        *,
        has_block_number: bool = False,
        has_building_name: bool = True,
    ) -> BuildingType:
        upper = (text or "").upper()
        for rule in self.rules:
            if rule.requires_plain_address and (
                "BLK" in upper or "#" in upper or has_building_name
            ):
                continue
            if rule.match_block_hint and has_block_number:
                return rule.building_type
            if rule.pattern is not None and rule.pattern.search(upper):
                return rule.building_type
            if any(keyword in upper for keyword in rule.keywords):
                return rule.building_type
        return BuildingType.UNKNOWN

    def classify_search_result(self, result: Mapping[str, object]) -> BuildingType:
        """Classify a OneMap search hit from its building, search value and address."""
        building = _clean(result.get("BUILDING"))
        search_value = _clean(result.get("SEARCHVAL"))
        address = _clean(result.get("ADDRESS"))
        combined = f"{building} {search_value} {address}"
        return self.classify(
            combined,
            has_block_number=bool(BLOCK_NUMBER_PATTERN.search(combined)),
            has_building_name=len(building) >= 3,
        )

    def classify_reverse_result(self, result: Mapping[str, object]) -> BuildingType:
        """Classify a OneMap reverse-geocode hit from its building name and road."""
        building = _clean(result.get("BUILDINGNAME"))
        road = _clean(result.get("ROAD"))
        return self.classify(
            f"{building} {road}",
            has_block_number=bool(_clean(result.get("BLOCK"))),
            has_building_name=len(building) > 2,
        )


default_classifier = BuildingClassifier()


def classify(text: str, *, has_block_number: bool = False, has_building_name: bool = True) -> BuildingType:
    """Classify ``text`` with the default rule table."""
    return default_classifier.classify(
        text,
        has_block_number=has_block_number,
        has_building_name=has_building_name,
    )
