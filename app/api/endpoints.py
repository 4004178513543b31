from fastapi import APIRouter

from app.api.routes import analysis, health


router = APIRouter()

router.include_router(analysis.router)
router.include_router(health.router)
