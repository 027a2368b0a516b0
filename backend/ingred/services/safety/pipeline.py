"""
Recipe safety pipeline: detector -> family aggregator -> scorer.

assess() is pure and synchronous. It never raises for malformed-but-present
input: a missing ingredient list is assessed as empty, and a missing
household is assessed as a single member with no declared allergies.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from ingred.config import settings
from ingred.logging import get_logger
from ingred.schemas.household import HouseholdProfile
from ingred.schemas.recipe import CandidateRecipe, SafetyAssessment
from ingred.services.safety.aggregator import aggregate
from ingred.services.safety.detector import detect
from ingred.services.safety.scorer import generate_warnings, score, unresolved_warnings
from ingred.utils.timing import time_span

logger = get_logger(__name__)


def _as_candidate(candidate: CandidateRecipe | dict | None) -> CandidateRecipe:
    if isinstance(candidate, CandidateRecipe):
        return candidate
    return CandidateRecipe.model_validate(candidate if isinstance(candidate, dict) else {})


def _as_household(household: HouseholdProfile | dict | None) -> HouseholdProfile:
    if isinstance(household, HouseholdProfile):
        return household
    return HouseholdProfile.model_validate(household if isinstance(household, dict) else {})


def assess(candidate: CandidateRecipe | dict | None, household: HouseholdProfile | dict | None) -> SafetyAssessment:
    recipe = _as_candidate(candidate)
    profile = _as_household(household)

    detected = detect(recipe.ingredients, profile.declared_allergens())
    result = aggregate(detected, profile, recipe.ingredients)
    extra = unresolved_warnings(recipe.safety_warnings)

    assessment = SafetyAssessment(
        detected_allergens=result.detected,
        warnings=generate_warnings(result.detected, result.per_member_matches, result.members, extra),
        safety_score=score(result.detected, has_unresolved_warnings=bool(extra)),
        affected_members=result.affected_members,
        per_member_matches=result.per_member_matches,
        dietary_conflicts=result.dietary_conflicts,
        disliked_matches=result.disliked_matches,
    )
    logger.info(
        "safety.assess.end title=%s ingredients=%s detected=%s affected_members=%s score=%s",
        recipe.title,
        len(recipe.ingredients),
        len(assessment.detected_allergens),
        sum(len(v) for v in assessment.affected_members.values()),
        assessment.safety_score,
    )
    return assessment


def assess_many(
    candidates: Sequence[CandidateRecipe | dict | None],
    household: HouseholdProfile | dict | None,
    max_workers: int | None = None,
) -> list[SafetyAssessment]:
    """Assess a batch (e.g. a generated week) in parallel; output keeps input order."""
    if not candidates:
        return []
    profile = _as_household(household)
    workers = min(max_workers or settings.batch_max_workers, len(candidates))
    with time_span("safety.assess.batch", candidates=len(candidates), workers=workers):
        # Invocations share nothing but the read-only lexicon and profile.
        with ThreadPoolExecutor(max_workers=max(1, workers)) as ex:
            return list(ex.map(lambda c: assess(c, profile), candidates))
