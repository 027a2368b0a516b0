"""
Allergen lexicon: canonical allergen ids, display metadata and the ingredient
synonyms used to find them in free-text ingredient lines.

Covers the nine major regulated allergens plus a secondary tier (sulfites,
mustard, celery, lupin, mollusks). Matching is a case-insensitive substring
search by default, so "soy" finds "soybean oil". exclude_phrases are cut out
of the text before an allergen's synonyms are searched ("peanut butter" is
not milk, "eggplant" is not egg).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ingred.config import settings


@dataclass(frozen=True)
class AllergenDefinition:
    id: str
    display_name: str
    display_icon: str
    synonyms: tuple[str, ...]
    regulatory_category: str  # "major" | "other"
    exclude_phrases: tuple[str, ...] = ()


_PLANT_MILKS = (
    "coconut milk", "coconut cream", "almond milk", "soy milk", "soya milk",
    "oat milk", "rice milk", "cashew milk", "hemp milk",
)
_NUT_BUTTERS = (
    "peanut butter", "almond butter", "cashew butter", "nut butter",
    "cocoa butter", "shea butter", "apple butter", "butternut", "butter bean",
)

ALLERGEN_LEXICON: dict[str, AllergenDefinition] = {
    d.id: d
    for d in (
        AllergenDefinition(
            id="milk",
            display_name="Milk",
            display_icon="🥛",
            synonyms=(
                "milk", "dairy", "cream", "butter", "cheese", "whey", "casein",
                "lactose", "yogurt", "yoghurt", "ghee", "paneer", "curd",
                "parmesan", "mozzarella", "ricotta",
            ),
            regulatory_category="major",
            exclude_phrases=_PLANT_MILKS + _NUT_BUTTERS + ("cream of tartar",),
        ),
        AllergenDefinition(
            id="eggs",
            display_name="Eggs",
            display_icon="🥚",
            synonyms=("egg", "albumin", "mayonnaise", "meringue", "aioli"),
            regulatory_category="major",
            exclude_phrases=("eggplant", "veggie", "reggiano"),
        ),
        AllergenDefinition(
            id="fish",
            display_name="Fish",
            display_icon="🐟",
            synonyms=(
                "fish", "anchovy", "anchovies", "salmon", "tuna", "cod", "tilapia", "sardine",
                "halibut", "trout", "mackerel", "haddock", "worcestershire",
            ),
            regulatory_category="major",
            exclude_phrases=("shellfish", "crayfish", "cuttlefish", "starfish"),
        ),
        AllergenDefinition(
            id="shellfish",
            display_name="Shellfish",
            display_icon="🦐",
            synonyms=(
                "shellfish", "shrimp", "prawn", "crab", "lobster", "crayfish",
                "crawfish", "langostino", "krill",
            ),
            regulatory_category="major",
            exclude_phrases=("crab apple",),
        ),
        AllergenDefinition(
            id="tree_nuts",
            display_name="Tree Nuts",
            display_icon="🌰",
            synonyms=(
                "almond", "walnut", "cashew", "pecan", "pistachio", "macadamia",
                "hazelnut", "brazil nut", "pine nut", "chestnut", "praline",
                "marzipan", "tree nut",
            ),
            regulatory_category="major",
            exclude_phrases=("water chestnut", "nutmeg"),
        ),
        AllergenDefinition(
            id="peanuts",
            display_name="Peanuts",
            display_icon="🥜",
            synonyms=("peanut", "groundnut", "monkey nut", "arachis"),
            regulatory_category="major",
        ),
        AllergenDefinition(
            id="wheat",
            display_name="Wheat",
            display_icon="🌾",
            synonyms=(
                "wheat", "flour", "bread", "pasta", "gluten", "barley", "rye",
                "semolina", "couscous", "bulgur", "spelt", "farro", "malt", "seitan",
            ),
            regulatory_category="major",
            # Compound phrases come before their prefixes so the head noun is cut too.
            exclude_phrases=(
                "buckwheat flour", "buckwheat",
                "gluten-free flour", "gluten free flour", "gluten-free pasta", "gluten free pasta",
                "gluten-free bread", "gluten free bread", "gluten-free", "gluten free",
                "rice flour", "almond flour", "coconut flour", "chickpea flour", "corn flour", "cornflour",
            ),
        ),
        AllergenDefinition(
            id="soy",
            display_name="Soy",
            display_icon="🫘",
            synonyms=("soy", "soya", "tofu", "tempeh", "edamame", "miso", "tamari", "lecithin"),
            regulatory_category="major",
        ),
        AllergenDefinition(
            id="sesame",
            display_name="Sesame",
            display_icon="⚪",
            synonyms=("sesame", "tahini", "hummus", "gomasio", "benne seed"),
            regulatory_category="major",
        ),
        AllergenDefinition(
            id="sulfites",
            display_name="Sulfites",
            display_icon="🍷",
            synonyms=("sulfite", "sulphite", "sulfur dioxide", "sulphur dioxide", "wine"),
            regulatory_category="other",
        ),
        AllergenDefinition(
            id="mustard",
            display_name="Mustard",
            display_icon="🟡",
            synonyms=("mustard",),
            regulatory_category="other",
        ),
        AllergenDefinition(
            id="celery",
            display_name="Celery",
            display_icon="🥬",
            synonyms=("celery", "celeriac"),
            regulatory_category="other",
        ),
        AllergenDefinition(
            id="lupin",
            display_name="Lupin",
            display_icon="🌼",
            synonyms=("lupin",),
            regulatory_category="other",
        ),
        AllergenDefinition(
            id="mollusks",
            display_name="Mollusks",
            display_icon="🦪",
            synonyms=(
                "clam", "mussel", "oyster", "scallop", "squid", "octopus",
                "calamari", "snail", "escargot", "cuttlefish", "abalone", "whelk",
            ),
            regulatory_category="other",
            exclude_phrases=("oyster mushroom",),
        ),
    )
}

# User-entered names that mean a canonical id (onboarding forms used these keys).
ALLERGEN_ALIASES: dict[str, str] = {
    "dairy": "milk",
    "lactose": "milk",
    "egg": "eggs",
    "peanut": "peanuts",
    "nuts": "tree_nuts",
    "groundnuts": "peanuts",
    "tree_nut": "tree_nuts",
    "gluten": "wheat",
    "crustaceans": "shellfish",
    "soya": "soy",
    "sesame_seeds": "sesame",
    "sulphites": "sulfites",
    "sulfite": "sulfites",
    "mollusc": "mollusks",
    "molluscs": "mollusks",
    "mollusk": "mollusks",
}


def normalize_allergen_name(name: str) -> str:
    return re.sub(r"[\s\-]+", "_", (name or "").strip().lower())


def resolve_allergen_id(name: str) -> str:
    """Map a declared allergy to its canonical id; unknown names come back normalised."""
    key = normalize_allergen_name(name)
    if key in ALLERGEN_LEXICON:
        return key
    return ALLERGEN_ALIASES.get(key, key)


def get_definition(allergen_id: str) -> AllergenDefinition | None:
    return ALLERGEN_LEXICON.get(resolve_allergen_id(allergen_id))


def get_all_allergen_codes() -> list[str]:
    """Return all allergen codes for UI filtering."""
    return list(ALLERGEN_LEXICON.keys())


def _strip_excludes(text: str, excludes: tuple[str, ...]) -> str:
    for phrase in excludes:
        text = text.replace(phrase, " ")
    return text


def _synonym_found(synonym: str, text: str, word_boundaries: bool) -> bool:
    if not word_boundaries:
        return synonym in text
    # Allow simple plurals ("almonds", "tomatoes") at the trailing edge.
    return re.search(rf"\b{re.escape(synonym)}(?:e?s)?\b", text) is not None


def find_matches(
    ingredient_text: str, word_boundaries: bool | None = None
) -> list[tuple[AllergenDefinition, str]]:
    """
    Return (definition, matched synonym) for every allergen found in the text,
    in lexicon order. The matched synonym is the first one listed that hits.
    """
    if not ingredient_text or not isinstance(ingredient_text, str):
        return []
    if word_boundaries is None:
        word_boundaries = settings.lexicon_word_boundaries
    text = ingredient_text.lower()
    found: list[tuple[AllergenDefinition, str]] = []
    for definition in ALLERGEN_LEXICON.values():
        searchable = _strip_excludes(text, definition.exclude_phrases)
        for synonym in definition.synonyms:
            if _synonym_found(synonym, searchable, word_boundaries):
                found.append((definition, synonym))
                break
    return found


def lookup(ingredient_text: str, word_boundaries: bool | None = None) -> list[AllergenDefinition]:
    """Every allergen whose synonyms appear in ingredient_text (case-insensitive)."""
    return [definition for definition, _ in find_matches(ingredient_text, word_boundaries)]
