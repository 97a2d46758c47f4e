"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import classification, skill_level, safety, variation

api_router = APIRouter()

api_router.include_router(classification.router)
api_router.include_router(skill_level.router)
api_router.include_router(safety.router)
api_router.include_router(variation.router)
