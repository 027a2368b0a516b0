"""
Family risk aggregation: cross-reference detected allergens with each
member's declared allergies, escalate severities, and flag mixed diets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ingred.config import settings
from ingred.logging import get_logger
from ingred.schemas.household import FamilyMemberProfile, HouseholdProfile, Severity, max_severity
from ingred.schemas.recipe import DetectedAllergen
from ingred.services.safety.detector import build_warning_text
from ingred.services.safety.lexicon import normalize_allergen_name, resolve_allergen_id

logger = get_logger(__name__)

_PLANT_BASED_MARKERS = ("vegetarian", "vegan")


@dataclass
class AggregationResult:
    """
    detected holds the detector's records with member-driven escalation applied.
    per_member_matches and disliked_matches are keyed by member id,
    affected_members by allergen id; all follow detection / household order.
    """

    detected: list[DetectedAllergen] = field(default_factory=list)
    members: list[FamilyMemberProfile] = field(default_factory=list)
    per_member_matches: dict[str, list[DetectedAllergen]] = field(default_factory=dict)
    affected_members: dict[str, list[FamilyMemberProfile]] = field(default_factory=dict)
    dietary_conflicts: list[str] = field(default_factory=list)
    disliked_matches: dict[str, list[str]] = field(default_factory=dict)


def allergy_matches(declared: str, allergen_id: str) -> bool:
    """
    Loose match between a member's declared allergy and a detected allergen id:
    substring in either direction ("nuts" matches "tree_nuts"), also trying
    the declared name's canonical alias ("dairy" matches "milk").
    """
    target = (allergen_id or "").lower()
    if not target:
        return False
    for name in {normalize_allergen_name(declared), resolve_allergen_id(declared)}:
        if name and (name in target or target in name):
            return True
    return False


def _is_plant_based(member: FamilyMemberProfile) -> bool:
    return any(
        marker in restriction.lower()
        for restriction in member.dietary_restrictions
        for marker in _PLANT_BASED_MARKERS
    )


def find_dietary_conflicts(members: list[FamilyMemberProfile]) -> list[str]:
    """One note when the household mixes vegetarian/vegan and non-vegetarian members."""
    plant_based = [m for m in members if _is_plant_based(m)]
    others = [m for m in members if not _is_plant_based(m)]
    if not plant_based or not others:
        return []
    return [
        "Mixed household diets: vegetarian/vegan ({veg}) and non-vegetarian ({non_veg}). "
        "Choose flexible recipes where protein can be added or left out per plate.".format(
            veg=", ".join(m.name or m.id for m in plant_based),
            non_veg=", ".join(m.name or m.id for m in others),
        )
    ]


def find_disliked_matches(
    members: list[FamilyMemberProfile], ingredients: Iterable[str]
) -> dict[str, list[str]]:
    lines = [i for i in ingredients if isinstance(i, str) and i.strip()]
    matches: dict[str, list[str]] = {}
    for member in members:
        dislikes = [d.lower() for d in member.dislikes]
        hits = [line for line in lines if any(d in line.lower() for d in dislikes)]
        if hits:
            matches[member.id] = hits
    return matches


def aggregate(
    detected: list[DetectedAllergen],
    household: HouseholdProfile,
    ingredients: Iterable[str] = (),
) -> AggregationResult:
    members = household.effective_members(settings.primary_member_name)
    severities: dict[str, Severity] = {d.allergen_id: d.severity for d in detected}
    matched_ids: dict[str, set[str]] = {}

    for member in members:
        hits: set[str] = set()
        for allergy in member.allergies:
            for record in detected:
                if not allergy_matches(allergy.allergen, record.allergen_id):
                    continue
                hits.add(record.allergen_id)
                # Severity only ever escalates; mild/moderate declarations never lower it.
                if allergy.severity.is_critical:
                    severities[record.allergen_id] = max_severity(
                        severities[record.allergen_id], allergy.severity
                    )
        if hits:
            matched_ids[member.id] = hits

    final: list[DetectedAllergen] = []
    for record in detected:
        severity = severities[record.allergen_id]
        if severity != record.severity:
            logger.info(
                "aggregator.escalate allergen=%s from=%s to=%s",
                record.allergen_id,
                record.severity.value,
                severity.value,
            )
            record = record.model_copy(
                update={
                    "severity": severity,
                    "warning_text": build_warning_text(record.display_name, severity),
                }
            )
        final.append(record)

    per_member: dict[str, list[DetectedAllergen]] = {}
    affected: dict[str, list[FamilyMemberProfile]] = {}
    for member in members:
        hits = matched_ids.get(member.id)
        if not hits:
            continue
        per_member[member.id] = [d for d in final if d.allergen_id in hits]
    for record in final:
        owners = [m for m in members if record.allergen_id in matched_ids.get(m.id, ())]
        if owners:
            affected[record.allergen_id] = owners

    return AggregationResult(
        detected=final,
        members=members,
        per_member_matches=per_member,
        affected_members=affected,
        dietary_conflicts=find_dietary_conflicts(members),
        disliked_matches=find_disliked_matches(members, ingredients),
    )
