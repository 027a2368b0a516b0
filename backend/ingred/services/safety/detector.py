"""Keyword allergen detection over a candidate recipe's ingredient lines."""

from __future__ import annotations

from typing import Iterable

from ingred.logging import get_logger
from ingred.schemas.household import Severity
from ingred.schemas.recipe import DetectedAllergen
from ingred.services.safety.lexicon import find_matches, resolve_allergen_id

logger = get_logger(__name__)

# Keyword hits always report full confidence.
DETECTION_CONFIDENCE = 1.0

CRITICAL_WARNING_TEMPLATE = (
    "CRITICAL: This recipe contains {name}, a declared allergen in your household. "
    "Do not serve it without a safe substitution."
)
ADVISORY_WARNING_TEMPLATE = "This recipe may contain {name}. Please verify ingredients carefully."


def build_warning_text(display_name: str, severity: Severity) -> str:
    template = CRITICAL_WARNING_TEMPLATE if severity.is_critical else ADVISORY_WARNING_TEMPLATE
    return template.format(name=display_name.lower())


def detect(
    ingredients: Iterable[str] | None,
    known_user_allergens: Iterable[str] | None = None,
    word_boundaries: bool | None = None,
) -> list[DetectedAllergen]:
    """
    Scan ingredient lines against the lexicon.
    Allergens the household declared are life_threatening, everything else moderate.
    One record per allergen: the first ingredient that mentions it wins.
    """
    known = {resolve_allergen_id(a) for a in (known_user_allergens or ()) if isinstance(a, str)}
    detected: dict[str, DetectedAllergen] = {}
    for ingredient in ingredients or ():
        if not isinstance(ingredient, str) or not ingredient.strip():
            continue
        for definition, synonym in find_matches(ingredient, word_boundaries):
            if definition.id in detected:
                continue
            severity = Severity.LIFE_THREATENING if definition.id in known else Severity.MODERATE
            detected[definition.id] = DetectedAllergen(
                allergen_id=definition.id,
                display_name=definition.display_name,
                icon=definition.display_icon,
                matched_synonym=synonym,
                source_ingredient=ingredient,
                confidence=DETECTION_CONFIDENCE,
                severity=severity,
                warning_text=build_warning_text(definition.display_name, severity),
            )
            logger.debug(
                "detector.match allergen=%s synonym=%s severity=%s ingredient=%s",
                definition.id,
                synonym,
                severity.value,
                ingredient,
            )
    return list(detected.values())
