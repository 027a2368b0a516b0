"""Tests for safety scoring and warning generation."""

from ingred.schemas.household import FamilyMemberProfile, Severity
from ingred.schemas.recipe import DetectedAllergen
from ingred.services.safety.detector import build_warning_text
from ingred.services.safety.scorer import AI_DISCLAIMER, generate_warnings, score, unresolved_warnings


def _record(allergen_id: str, severity: Severity) -> DetectedAllergen:
    return DetectedAllergen(
        allergen_id=allergen_id,
        display_name=allergen_id.replace("_", " ").title(),
        icon="",
        matched_synonym=allergen_id,
        severity=severity,
        warning_text=build_warning_text(allergen_id, severity),
    )


def test_score_no_detections():
    assert score([]) == 100


def test_score_two_tier_penalties():
    moderate = [_record("milk", Severity.MODERATE), _record("wheat", Severity.MODERATE)]
    assert score(moderate) == 80
    assert score([_record("milk", Severity.LIFE_THREATENING), _record("wheat", Severity.MODERATE)]) == 60
    # severe costs the same as life_threatening
    assert score([_record("milk", Severity.SEVERE)]) == 70
    assert score([_record("milk", Severity.MILD)]) == 90


def test_score_unresolved_warning_penalty():
    assert score([], has_unresolved_warnings=True) == 95
    assert score([_record("soy", Severity.MODERATE)], has_unresolved_warnings=True) == 85


def test_score_counts_distinct_allergens_at_max_severity():
    records = [_record("milk", Severity.MODERATE), _record("milk", Severity.LIFE_THREATENING)]
    assert score(records) == 70


def test_score_clamps_at_zero():
    records = [_record(f"allergen_{i}", Severity.LIFE_THREATENING) for i in range(50)]
    assert score(records, has_unresolved_warnings=True) == 0


def test_unresolved_warnings_ignore_disclaimers():
    assert unresolved_warnings([AI_DISCLAIMER]) == []
    assert unresolved_warnings(
        ["This recipe was generated by AI. Always verify ingredients for allergies and dietary restrictions."]
    ) == []
    assert unresolved_warnings(["Garnish may contain nuts", "Garnish may contain nuts", " ", None]) == [
        "Garnish may contain nuts"
    ]


def test_generate_warnings_only_disclaimer():
    assert generate_warnings([], {}) == [AI_DISCLAIMER]


def test_generate_warnings_order():
    critical = _record("peanuts", Severity.LIFE_THREATENING)
    general = _record("wheat", Severity.MODERATE)
    members = [FamilyMemberProfile(id="m1", name="Maya"), FamilyMemberProfile(id="m2", name="Sam")]
    warnings = generate_warnings(
        [general, critical],
        {"m1": [critical]},
        members,
        extra_warnings=["Serve sauce on the side"],
    )
    assert len(warnings) == 5
    assert warnings[0].startswith("CRITICAL ALLERGEN WARNING")
    assert "Peanuts" in warnings[0]
    assert "Wheat" in warnings[1] and "Peanuts" not in warnings[1]
    assert warnings[2] == "Allergen alert for Maya: this recipe contains Peanuts."
    assert warnings[3] == "Serve sauce on the side"
    assert warnings[4] == AI_DISCLAIMER
    assert not any("Sam" in w for w in warnings)


def test_generate_warnings_member_order_follows_household():
    shared = _record("eggs", Severity.MODERATE)
    members = [FamilyMemberProfile(id="b", name="Ben"), FamilyMemberProfile(id="a", name="Ana")]
    warnings = generate_warnings([shared], {"a": [shared], "b": [shared]}, members)
    assert warnings[1].startswith("Allergen alert for Ben")
    assert warnings[2].startswith("Allergen alert for Ana")
