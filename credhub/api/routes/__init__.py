"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from credhub.api.routes.auth_routes import router as auth_router
from credhub.api.routes.learner_routes import router as learner_router
from credhub.api.routes.achievement_routes import router as achievement_router
from credhub.api.routes.portfolio_routes import router as portfolio_router
from credhub.api.routes.portfolio_routes import public_router as public_portfolio_router
from credhub.api.routes.credential_routes import router as credential_router
from credhub.api.routes.institution_routes import router as institution_router
from credhub.api.routes.employer_routes import router as employer_router
from credhub.api.routes.admin_routes import router as admin_router
from credhub.api.routes.ai_routes import router as ai_router
from credhub.api.routes.file_routes import router as file_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(learner_router)
api_router.include_router(achievement_router)
api_router.include_router(portfolio_router)
api_router.include_router(public_portfolio_router)
api_router.include_router(credential_router)
api_router.include_router(institution_router)
api_router.include_router(employer_router)
api_router.include_router(admin_router)
api_router.include_router(ai_router)
api_router.include_router(file_router)
