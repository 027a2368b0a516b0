"""
Generated-recipe persistence: assess a candidate against the user's stored
household profile and save it with its safety columns.
"""

from fastapi import APIRouter, HTTPException

from ingred.logging import get_logger
from ingred.schemas.recipe import CandidateRecipe, tier_for_score
from ingred.services.safety.pipeline import assess
from ingred.storage.db import get_session
from ingred.storage.models import GeneratedRecipe
from ingred.storage.repositories import create_generated_recipe, get_household_profile, list_generated_recipes

router = APIRouter()
logger = get_logger(__name__)


def _recipe_payload(recipe: GeneratedRecipe) -> dict:
    return {
        "id": recipe.id,
        "user_id": recipe.user_id,
        "title": recipe.title,
        "description": recipe.description,
        "ingredients": recipe.ingredients or [],
        "instructions": recipe.instructions or [],
        "prep_time": recipe.prep_time,
        "cook_time": recipe.cook_time,
        "total_time": recipe.total_time,
        "servings": recipe.servings,
        "difficulty": recipe.difficulty,
        "ai_generated": recipe.ai_generated,
        "detected_allergens": recipe.detected_allergens or [],
        "safety_warnings": recipe.safety_warnings or [],
        "ai_disclaimers": recipe.ai_disclaimers or [],
        "safety_score": recipe.safety_score,
        "safety_tier": tier_for_score(recipe.safety_score),
    }


@router.post("/users/{user_id}/recipes")
def save_generated_recipe(user_id: str, candidate: CandidateRecipe) -> dict:
    """Assess a generated candidate for this user's household and store it."""
    with get_session() as session:
        household = get_household_profile(session, user_id)
        if household is None:
            raise HTTPException(status_code=404, detail=f"No household profile for user {user_id}")
        assessment = assess(candidate, household)
        recipe = create_generated_recipe(session, user_id, candidate, assessment)
        payload = _recipe_payload(recipe)
    payload["dietary_conflicts"] = assessment.dietary_conflicts
    payload["affected_members"] = {
        allergen: [m.name or m.id for m in members]
        for allergen, members in assessment.affected_members.items()
    }
    return payload


@router.get("/users/{user_id}/recipes")
def get_generated_recipes(user_id: str) -> list[dict]:
    with get_session() as session:
        return [_recipe_payload(r) for r in list_generated_recipes(session, user_id)]
