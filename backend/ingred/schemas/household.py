"""
Household and family-member dietary profiles.

Rows come from the preferences store, which keeps a member's allergies and
their severities as two parallel arrays. Profiles pair them up on load so
the safety services only ever see (allergen, severity) records.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class Severity(str, Enum):
    """Reaction tiers, declared in ascending order of risk."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    LIFE_THREATENING = "life_threatening"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)

    @property
    def is_critical(self) -> bool:
        return self.rank >= Severity.SEVERE.rank

    @classmethod
    def coerce(cls, value: Any) -> "Severity":
        """Parse a stored severity; missing or unrecognised values are mild."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_").replace(" ", "_")
            try:
                return cls(key)
            except ValueError:
                pass
        return cls.MILD


def max_severity(*levels: Severity) -> Severity:
    return max(levels, key=lambda s: s.rank)


def _string_list(value: Any) -> list[str]:
    """Normalise a free-text list field: None -> [], str -> [str], drop blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _drop_none(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if v is not None}
    return data


def _text_or_default(value: Any, default: str) -> str:
    """Strings pass through stripped, numbers are stringified, anything else takes the default."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


class MemberAllergy(BaseModel):
    model_config = ConfigDict(frozen=True)

    allergen: str
    severity: Severity = Severity.MILD

    @field_validator("allergen", mode="before")
    @classmethod
    def _clean_allergen(cls, v: Any) -> str:
        return v.strip() if isinstance(v, str) else str(v)

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, v: Any) -> Severity:
        return Severity.coerce(v)


def pair_allergies(allergies: Any, severities: Any = None) -> list[MemberAllergy]:
    """
    Pair a member's allergy list with its severity list.
    A severity missing at index i (short or absent list) is treated as mild.
    Entries already given as dicts or MemberAllergy are passed through.
    """
    if isinstance(allergies, (str, dict, MemberAllergy)):
        allergies = [allergies]
    if not isinstance(allergies, (list, tuple)):
        return []
    severity_list = severities if isinstance(severities, (list, tuple)) else []
    paired: list[MemberAllergy] = []
    for index, entry in enumerate(allergies):
        if isinstance(entry, MemberAllergy):
            paired.append(entry)
        elif isinstance(entry, dict):
            allergen = entry.get("allergen")
            if isinstance(allergen, str) and allergen.strip():
                paired.append(MemberAllergy.model_validate(entry))
        elif isinstance(entry, str) and entry.strip():
            severity = severity_list[index] if index < len(severity_list) else None
            paired.append(MemberAllergy(allergen=entry, severity=Severity.coerce(severity)))
    return paired


class FamilyMemberProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str = ""
    age_group: str = "adult"  # child | teen | adult | senior; display only
    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[MemberAllergy] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _from_stored_row(cls, data: Any) -> Any:
        data = _drop_none(data)
        if not isinstance(data, dict):
            return data
        data = dict(data)
        severities = data.pop("allergy_severity", None)
        data["allergies"] = pair_allergies(data.get("allergies"), severities)
        return data

    @field_validator("id", "name", "age_group", mode="before")
    @classmethod
    def _text_fields(cls, v: Any, info: ValidationInfo) -> str:
        return _text_or_default(v, cls.model_fields[info.field_name].default)

    @field_validator("dietary_restrictions", "dislikes", mode="before")
    @classmethod
    def _clean_lists(cls, v: Any) -> list[str]:
        return _string_list(v)

    @property
    def allergen_names(self) -> list[str]:
        return [a.allergen for a in self.allergies]


class HouseholdProfile(BaseModel):
    """
    Everything a meal plan has to satisfy. When family_members is empty the
    top-level dietary_restrictions / allergies describe the primary user.
    """

    model_config = ConfigDict(frozen=True)

    household_size: int = 1
    cooking_skill: str = "beginner"
    budget_level: str = "moderate"
    cooking_time_minutes: int = 30
    meals_per_week: int = 7
    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    disliked_ingredients: list[str] = Field(default_factory=list)
    family_members: list[FamilyMemberProfile] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        data = _drop_none(data)
        if not isinstance(data, dict):
            return data
        data = dict(data)
        members = data.get("family_members")
        if isinstance(members, (list, tuple)):
            filled = []
            for index, member in enumerate(members):
                if isinstance(member, dict) and not _text_or_default(member.get("id"), ""):
                    member = {**member, "id": f"member-{index + 1}"}
                if isinstance(member, (dict, FamilyMemberProfile)):
                    filled.append(member)
            data["family_members"] = filled
        else:
            data.pop("family_members", None)
        return data

    @field_validator("cooking_skill", "budget_level", mode="before")
    @classmethod
    def _text_fields(cls, v: Any, info: ValidationInfo) -> str:
        return _text_or_default(v, cls.model_fields[info.field_name].default)

    @field_validator("household_size", "cooking_time_minutes", "meals_per_week", mode="before")
    @classmethod
    def _int_or_default(cls, v: Any, info: ValidationInfo) -> Any:
        try:
            return int(v)
        except (TypeError, ValueError, OverflowError):
            return cls.model_fields[info.field_name].default

    @field_validator("dietary_restrictions", "allergies", "disliked_ingredients", mode="before")
    @classmethod
    def _clean_lists(cls, v: Any) -> list[str]:
        return _string_list(v)

    def effective_members(self, primary_name: str = "Primary user") -> list[FamilyMemberProfile]:
        """Family members, or a single implicit member built from the top-level fields."""
        if self.family_members:
            return list(self.family_members)
        return [
            FamilyMemberProfile(
                id="primary",
                name=primary_name,
                dietary_restrictions=self.dietary_restrictions,
                allergies=pair_allergies(self.allergies),
                dislikes=self.disliked_ingredients,
            )
        ]

    def declared_allergens(self) -> list[str]:
        """Top-level allergies plus every member's, first occurrence kept."""
        names = list(self.allergies)
        for member in self.family_members:
            names.extend(member.allergen_names)
        return list(dict.fromkeys(names))
