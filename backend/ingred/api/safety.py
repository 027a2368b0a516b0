"""Stateless safety assessment endpoints: the candidate and household come in the body."""

from fastapi import APIRouter

from ingred.logging import get_logger
from ingred.schemas.recipe import AssessRequest, BatchAssessRequest, BatchAssessResponse, SafetyAssessment
from ingred.services.safety.lexicon import ALLERGEN_LEXICON, get_all_allergen_codes
from ingred.services.safety.pipeline import assess, assess_many

router = APIRouter()
logger = get_logger(__name__)


@router.get("/allergens")
def list_allergens():
    """Return allergen codes plus display metadata for the allergy pickers."""
    return {
        "allergens": get_all_allergen_codes(),
        "definitions": [
            {
                "id": d.id,
                "name": d.display_name,
                "icon": d.display_icon,
                "category": d.regulatory_category,
            }
            for d in ALLERGEN_LEXICON.values()
        ],
    }


@router.post("/safety/assess", response_model=SafetyAssessment)
def post_assess(body: AssessRequest) -> SafetyAssessment:
    return assess(body.candidate, body.household)


@router.post("/safety/assess/batch", response_model=BatchAssessResponse)
def post_assess_batch(body: BatchAssessRequest) -> BatchAssessResponse:
    logger.info("safety.batch.request candidates=%s", len(body.candidates))
    return BatchAssessResponse(assessments=assess_many(body.candidates, body.household))
