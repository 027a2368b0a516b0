"""Tests for keyword allergen detection."""

from ingred.schemas.household import Severity
from ingred.services.safety.detector import build_warning_text, detect


def test_detect_empty_ingredients():
    assert detect([], set()) == []
    assert detect(None, None) == []


def test_detect_unknown_ingredients_silently_skipped():
    assert detect(["2 carrots", "a pinch of salt", 42, None, ""], {"milk"}) == []


def test_detect_generic_allergens_are_moderate():
    result = detect(["2 cups whole milk", "1 cup flour"], set())
    assert [d.allergen_id for d in result] == ["milk", "wheat"]
    assert all(d.severity == Severity.MODERATE for d in result)
    assert result[0].matched_synonym == "milk"
    assert result[0].source_ingredient == "2 cups whole milk"
    assert result[1].matched_synonym == "flour"


def test_detect_known_allergen_is_life_threatening():
    result = detect(["2 cups whole milk", "1 cup flour"], {"milk"})
    by_id = {d.allergen_id: d for d in result}
    assert by_id["milk"].severity == Severity.LIFE_THREATENING
    assert by_id["wheat"].severity == Severity.MODERATE


def test_detect_known_allergen_via_alias():
    result = detect(["grated parmesan"], {"Dairy"})
    assert result[0].allergen_id == "milk"
    assert result[0].severity == Severity.LIFE_THREATENING


def test_detect_deduplicates_by_allergen():
    result = detect(["1 cup milk", "2 tbsp butter", "100g cheddar cheese"], set())
    assert len(result) == 1
    assert result[0].allergen_id == "milk"
    # First matching ingredient wins
    assert result[0].source_ingredient == "1 cup milk"


def test_detect_confidence_is_fixed():
    result = detect(["salmon fillet"], set())
    assert result[0].confidence == 1.0


def test_warning_text_by_severity():
    critical = detect(["peanut butter"], {"peanuts"})[0]
    advisory = detect(["peanut butter"], set())[0]
    assert critical.warning_text.startswith("CRITICAL")
    assert "peanuts" in critical.warning_text
    assert not advisory.warning_text.startswith("CRITICAL")
    assert "verify ingredients" in advisory.warning_text


def test_build_warning_text_severe_is_critical():
    assert build_warning_text("Sesame", Severity.SEVERE).startswith("CRITICAL")
    assert build_warning_text("Sesame", Severity.MILD).startswith("This recipe may contain sesame")


def test_detect_onboarding_nuts_key_is_tree_nuts():
    result = detect(["toasted almonds", "crushed peanuts"], {"nuts"})
    by_id = {d.allergen_id: d.severity for d in result}
    assert by_id == {"tree_nuts": Severity.LIFE_THREATENING, "peanuts": Severity.MODERATE}
