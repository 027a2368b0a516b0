from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, computed_field, field_validator, model_validator

from ingred.config import settings
from ingred.schemas.household import (
    FamilyMemberProfile,
    HouseholdProfile,
    Severity,
    _drop_none,
    _string_list,
    _text_or_default,
)


def _safe_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


class CandidateRecipe(BaseModel):
    """A generated recipe awaiting its safety assessment. Only ingredients feed the safety logic."""

    model_config = ConfigDict(frozen=True)

    title: str = "Generated Recipe"
    description: str = ""
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    prep_time: int = 0
    cook_time: int = 0
    total_time: int = 0
    servings: int = 4
    difficulty: str = "medium"
    # Warnings the generator attached to its own output (free text).
    safety_warnings: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _repair(cls, data: Any) -> Any:
        data = _drop_none(data)
        if not isinstance(data, dict):
            return data
        data = dict(data)
        prep = _safe_int(data.get("prep_time"), 0)
        cook = _safe_int(data.get("cook_time"), 0)
        data["prep_time"] = prep
        data["cook_time"] = cook
        data["total_time"] = _safe_int(data.get("total_time"), 0) or prep + cook
        data["servings"] = _safe_int(data.get("servings"), 4) or 4
        return data

    @field_validator("title", "description", "difficulty", mode="before")
    @classmethod
    def _text_fields(cls, v: Any, info: ValidationInfo) -> str:
        return _text_or_default(v, cls.model_fields[info.field_name].default)

    @field_validator("ingredients", "instructions", "safety_warnings", mode="before")
    @classmethod
    def _clean_lists(cls, v: Any) -> list[str]:
        return _string_list(v)


class DetectedAllergen(BaseModel):
    model_config = ConfigDict(frozen=True)

    allergen_id: str
    display_name: str
    icon: str = ""
    matched_synonym: str
    source_ingredient: str = ""
    # Reserved; keyword matching always reports full confidence.
    confidence: float = 1.0
    severity: Severity
    warning_text: str

    def to_record(self) -> dict[str, Any]:
        """Shape stored in generated_recipe.detected_allergens."""
        return {
            "name": self.allergen_id,
            "confidence": self.confidence,
            "severity": self.severity.value,
            "icon": self.icon,
            "warning_text": self.warning_text,
        }


def tier_for_score(score: int) -> str:
    if score >= settings.score_good_threshold:
        return "good"
    if score >= settings.score_caution_threshold:
        return "caution"
    return "poor"


class SafetyAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    detected_allergens: list[DetectedAllergen] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    safety_score: int = Field(default=100, ge=0, le=100)
    affected_members: dict[str, list[FamilyMemberProfile]] = Field(default_factory=dict)
    per_member_matches: dict[str, list[DetectedAllergen]] = Field(default_factory=dict)
    dietary_conflicts: list[str] = Field(default_factory=list)
    disliked_matches: dict[str, list[str]] = Field(default_factory=dict)

    @computed_field
    @property
    def safety_tier(self) -> str:
        return tier_for_score(self.safety_score)

    def to_record(self) -> dict[str, Any]:
        """Flatten to the three columns persisted alongside a generated recipe."""
        return {
            "detected_allergens": [d.to_record() for d in self.detected_allergens],
            "safety_warnings": list(self.warnings),
            "safety_score": max(0, min(100, int(self.safety_score))),
        }


class AssessRequest(BaseModel):
    candidate: CandidateRecipe = Field(default_factory=CandidateRecipe)
    household: HouseholdProfile = Field(default_factory=HouseholdProfile)


class BatchAssessRequest(BaseModel):
    candidates: list[CandidateRecipe] = Field(default_factory=list)
    household: HouseholdProfile = Field(default_factory=HouseholdProfile)


class BatchAssessResponse(BaseModel):
    assessments: list[SafetyAssessment]
