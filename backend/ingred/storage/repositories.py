from typing import Optional

from sqlmodel import Session, select

from ingred.logging import get_logger
from ingred.schemas.household import HouseholdProfile
from ingred.schemas.recipe import CandidateRecipe, SafetyAssessment
from ingred.services.safety.scorer import AI_DISCLAIMER
from ingred.storage.models import FamilyMember, GeneratedRecipe, UserPreferences, utcnow

logger = get_logger(__name__)

_PREFERENCE_FIELDS = (
    "household_size",
    "cooking_skill",
    "budget_level",
    "cooking_time_minutes",
    "meals_per_week",
    "dietary_restrictions",
    "allergies",
    "disliked_ingredients",
)


def get_user_preferences(session: Session, user_id: str) -> UserPreferences | None:
    return session.exec(select(UserPreferences).where(UserPreferences.user_id == user_id)).first()


def upsert_user_preferences(session: Session, user_id: str, **fields: object) -> UserPreferences:
    """Create or update the household-wide preference row. Unknown keys are ignored."""
    prefs = get_user_preferences(session, user_id) or UserPreferences(user_id=user_id)
    for key in _PREFERENCE_FIELDS:
        if key in fields:
            setattr(prefs, key, fields[key])
    prefs.updated_at = utcnow()
    session.add(prefs)
    session.commit()
    session.refresh(prefs)
    logger.info("preferences.upserted user_id=%s household_size=%s", user_id, prefs.household_size)
    return prefs


def add_family_member(
    session: Session,
    user_id: str,
    name: str,
    age_group: str = "adult",
    dietary_restrictions: Optional[list[str]] = None,
    allergies: Optional[list[str]] = None,
    allergy_severity: Optional[list[str]] = None,
    dislikes: Optional[list[str]] = None,
) -> FamilyMember:
    member = FamilyMember(
        user_id=user_id,
        name=name,
        age_group=age_group,
        dietary_restrictions=dietary_restrictions or [],
        allergies=allergies or [],
        allergy_severity=allergy_severity or [],
        dislikes=dislikes or [],
    )
    session.add(member)
    session.commit()
    session.refresh(member)
    if len(member.allergies or []) != len(member.allergy_severity or []):
        logger.warning(
            "family_member.severity_mismatch id=%s allergies=%s severities=%s",
            member.id,
            len(member.allergies or []),
            len(member.allergy_severity or []),
        )
    logger.info("family_member.created id=%s user_id=%s name=%s", member.id, user_id, name)
    return member


def get_family_members(session: Session, user_id: str) -> list[FamilyMember]:
    return list(
        session.exec(
            select(FamilyMember).where(FamilyMember.user_id == user_id).order_by(FamilyMember.id)
        )
    )


def get_household_profile(session: Session, user_id: str) -> HouseholdProfile | None:
    """Load preferences + family rows as a typed profile; None if the user has neither."""
    prefs = get_user_preferences(session, user_id)
    members = get_family_members(session, user_id)
    if prefs is None and not members:
        return None
    data: dict = {}
    if prefs is not None:
        data = {key: getattr(prefs, key) for key in _PREFERENCE_FIELDS}
    data["family_members"] = [
        {
            "id": m.id,
            "name": m.name,
            "age_group": m.age_group,
            "dietary_restrictions": m.dietary_restrictions,
            "allergies": m.allergies,
            "allergy_severity": m.allergy_severity,
            "dislikes": m.dislikes,
        }
        for m in members
    ]
    return HouseholdProfile.model_validate(data)


def create_generated_recipe(
    session: Session, user_id: str, candidate: CandidateRecipe, assessment: SafetyAssessment
) -> GeneratedRecipe:
    record = assessment.to_record()
    recipe = GeneratedRecipe(
        user_id=user_id,
        title=candidate.title,
        description=candidate.description,
        ingredients=list(candidate.ingredients),
        instructions=list(candidate.instructions),
        prep_time=candidate.prep_time,
        cook_time=candidate.cook_time,
        total_time=candidate.total_time,
        servings=candidate.servings,
        difficulty=candidate.difficulty,
        detected_allergens=record["detected_allergens"],
        safety_warnings=record["safety_warnings"],
        ai_disclaimers=[AI_DISCLAIMER],
        safety_score=record["safety_score"],
    )
    session.add(recipe)
    session.commit()
    session.refresh(recipe)
    logger.info(
        "generated_recipe.created id=%s user_id=%s title=%s safety_score=%s allergens=%s",
        recipe.id,
        user_id,
        recipe.title,
        recipe.safety_score,
        len(recipe.detected_allergens or []),
    )
    return recipe


def list_generated_recipes(session: Session, user_id: str) -> list[GeneratedRecipe]:
    return list(
        session.exec(
            select(GeneratedRecipe)
            .where(GeneratedRecipe.user_id == user_id)
            .order_by(GeneratedRecipe.id)
        )
    )
