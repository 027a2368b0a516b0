"""Recipe safety evaluation: allergen detection, family risk aggregation, scoring."""

from ingred.services.safety.aggregator import AggregationResult, aggregate
from ingred.services.safety.detector import detect
from ingred.services.safety.lexicon import AllergenDefinition, get_all_allergen_codes, lookup
from ingred.services.safety.pipeline import assess, assess_many
from ingred.services.safety.scorer import AI_DISCLAIMER, generate_warnings, score

__all__ = [
    "AI_DISCLAIMER",
    "AggregationResult",
    "AllergenDefinition",
    "aggregate",
    "assess",
    "assess_many",
    "detect",
    "generate_warnings",
    "get_all_allergen_codes",
    "lookup",
    "score",
]
