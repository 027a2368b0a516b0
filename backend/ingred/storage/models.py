from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserPreferences(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    household_size: int = 1
    cooking_skill: str = "beginner"  # beginner | intermediate | advanced
    budget_level: str = "moderate"  # budget | moderate | premium
    cooking_time_minutes: int = 30
    meals_per_week: int = 7
    dietary_restrictions: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    allergies: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    disliked_ingredients: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    updated_at: datetime = Field(default_factory=utcnow)


class FamilyMember(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    name: str
    age_group: str = "adult"  # child | teen | adult | senior
    dietary_restrictions: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    # Parallel arrays: allergy_severity[i] belongs to allergies[i]
    allergies: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    allergy_severity: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    dislikes: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    created_at: datetime = Field(default_factory=utcnow)


class GeneratedRecipe(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    title: str
    description: str = ""
    ingredients: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    instructions: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    prep_time: int = 0
    cook_time: int = 0
    total_time: int = 0
    servings: int = 4
    difficulty: str = "medium"  # easy | medium | hard
    ai_generated: bool = True
    detected_allergens: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    safety_warnings: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    ai_disclaimers: Optional[list] = Field(default=None, sa_column=Column(JSON, default=None))
    safety_score: int = 100
    created_at: datetime = Field(default_factory=utcnow)
