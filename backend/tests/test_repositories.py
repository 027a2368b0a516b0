"""Tests for the preferences / generated-recipe store."""

from ingred.schemas.household import Severity
from ingred.schemas.recipe import CandidateRecipe
from ingred.services.safety.pipeline import assess
from ingred.services.safety.scorer import AI_DISCLAIMER
from ingred.storage.models import FamilyMember, GeneratedRecipe, UserPreferences
from ingred.storage.repositories import (
    add_family_member,
    create_generated_recipe,
    get_household_profile,
    list_generated_recipes,
    upsert_user_preferences,
)


def test_household_profile_missing(session):
    assert get_household_profile(session, "nobody") is None


def test_upsert_preferences_updates_in_place(session):
    first = upsert_user_preferences(session, "u1", household_size=3, allergies=["milk"])
    second = upsert_user_preferences(session, "u1", cooking_skill="advanced", not_a_field=True)
    assert first.id == second.id
    assert second.household_size == 3
    assert second.cooking_skill == "advanced"


def test_household_profile_pairs_stored_severities(session):
    upsert_user_preferences(session, "u1", household_size=2, dietary_restrictions=["Low-Sodium"])
    add_family_member(
        session, "u1", "Maya", age_group="child",
        allergies=["peanuts", "sesame"], allergy_severity=["life_threatening"],
    )
    add_family_member(session, "u1", "Sam", dietary_restrictions=["Vegetarian"])
    add_family_member(session, "u2", "Other", allergies=["fish"], allergy_severity=["severe"])

    household = get_household_profile(session, "u1")
    assert household.household_size == 2
    assert [m.name for m in household.family_members] == ["Maya", "Sam"]
    maya = household.family_members[0]
    assert [(a.allergen, a.severity) for a in maya.allergies] == [
        ("peanuts", Severity.LIFE_THREATENING),
        ("sesame", Severity.MILD),
    ]


def test_household_profile_members_only(session):
    add_family_member(session, "u3", "Solo", allergies=["eggs"], allergy_severity=["severe"])
    household = get_household_profile(session, "u3")
    assert household.allergies == []
    assert household.declared_allergens() == ["eggs"]


def test_create_generated_recipe_persists_safety_columns(session):
    upsert_user_preferences(session, "u1", allergies=["milk"])
    candidate = CandidateRecipe(
        title="Pancakes",
        ingredients=["2 cups whole milk", "1 cup flour"],
        instructions=["Mix", "Fry"],
        prep_time=5,
        cook_time=10,
    )
    assessment = assess(candidate, get_household_profile(session, "u1"))
    stored = create_generated_recipe(session, "u1", candidate, assessment)

    assert stored.id is not None
    assert stored.created_at is not None
    assert stored.safety_score == 60
    assert stored.total_time == 15
    assert [d["name"] for d in stored.detected_allergens] == ["milk", "wheat"]
    assert stored.detected_allergens[0]["severity"] == "life_threatening"
    assert stored.safety_warnings == assessment.warnings
    assert stored.safety_warnings[-1] == AI_DISCLAIMER
    assert stored.ai_disclaimers == [AI_DISCLAIMER]

    listed = list_generated_recipes(session, "u1")
    assert [r.title for r in listed] == ["Pancakes"]
    assert list_generated_recipes(session, "u2") == []


def test_timestamps_are_timezone_aware():
    assert UserPreferences(user_id="u1").updated_at.tzinfo is not None
    assert FamilyMember(user_id="u1", name="Ana").created_at.tzinfo is not None
    assert GeneratedRecipe(user_id="u1", title="Soup").created_at.tzinfo is not None
