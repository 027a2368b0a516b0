"""
Safety score and warning list.

Score: start at 100, subtract 30 per distinct critical allergen (severe or
life_threatening), 10 per distinct other allergen, 5 once if the recipe
carries unresolved warnings; clamp to 0..100. Stored recipes were scored
with these exact penalties.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from ingred.schemas.household import FamilyMemberProfile, Severity, max_severity
from ingred.schemas.recipe import DetectedAllergen

CRITICAL_PENALTY = 30
GENERAL_PENALTY = 10
UNRESOLVED_WARNING_PENALTY = 5

AI_DISCLAIMER = "AI-generated recipe — verify all ingredients for allergies and dietary restrictions."
# Disclaimer wording written by earlier versions of the generator.
_KNOWN_DISCLAIMERS = {
    AI_DISCLAIMER.casefold(),
    "this recipe was generated by ai. always verify ingredients for allergies and dietary restrictions.",
}


def _distinct_severities(detected: Iterable[DetectedAllergen]) -> dict[str, Severity]:
    severities: dict[str, Severity] = {}
    for record in detected:
        current = severities.get(record.allergen_id)
        severities[record.allergen_id] = (
            record.severity if current is None else max_severity(current, record.severity)
        )
    return severities


def score(detected: Iterable[DetectedAllergen], has_unresolved_warnings: bool = False) -> int:
    severities = _distinct_severities(detected).values()
    critical = sum(1 for s in severities if s.is_critical)
    general = sum(1 for s in severities if not s.is_critical)
    value = 100 - critical * CRITICAL_PENALTY - general * GENERAL_PENALTY
    if has_unresolved_warnings:
        value -= UNRESOLVED_WARNING_PENALTY
    return max(0, min(100, value))


def unresolved_warnings(generator_warnings: Iterable[str]) -> list[str]:
    """Generator-supplied warnings other than the standard AI disclaimer, deduplicated."""
    seen: list[str] = []
    for warning in generator_warnings or ():
        if not isinstance(warning, str):
            continue
        text = warning.strip()
        if not text or text.casefold() in _KNOWN_DISCLAIMERS or text in seen:
            continue
        seen.append(text)
    return seen


def _names(records: Sequence[DetectedAllergen]) -> str:
    return ", ".join(r.display_name for r in records)


def generate_warnings(
    detected: Sequence[DetectedAllergen],
    per_member_matches: Mapping[str, Sequence[DetectedAllergen]],
    members: Sequence[FamilyMemberProfile] = (),
    extra_warnings: Sequence[str] = (),
) -> list[str]:
    """
    Warnings in display order: critical allergens, other allergens, one line per
    affected member, unresolved generator warnings, then the AI disclaimer.
    """
    warnings: list[str] = []

    critical = [d for d in detected if d.severity.is_critical]
    if critical:
        warnings.append(
            "CRITICAL ALLERGEN WARNING: This recipe contains allergens that are dangerous "
            f"for your household: {_names(critical)}."
        )

    general = [d for d in detected if not d.severity.is_critical]
    if general:
        listed = ", ".join(f"{d.icon} {d.display_name}".strip() for d in general)
        warnings.append(f"This recipe may contain: {listed}. Please verify ingredients for safety.")

    names = {m.id: (m.name or m.id) for m in members}
    ordered_ids = [m.id for m in members if m.id in per_member_matches]
    ordered_ids += [mid for mid in per_member_matches if mid not in names]
    for member_id in ordered_ids:
        matches = per_member_matches[member_id]
        if matches:
            warnings.append(
                f"Allergen alert for {names.get(member_id, member_id)}: "
                f"this recipe contains {_names(matches)}."
            )

    warnings.extend(extra_warnings)
    warnings.append(AI_DISCLAIMER)
    return warnings
