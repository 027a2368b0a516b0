from fastapi import APIRouter

from ingred.api.health import router as health_router
from ingred.api.recipes import router as recipes_router
from ingred.api.safety import router as safety_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(safety_router)
router.include_router(recipes_router)
