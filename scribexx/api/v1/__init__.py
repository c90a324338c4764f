"""
API v1 routes.
"""

from fastapi import APIRouter

from scribexx.api.v1 import auth, catalog, challenges, exercises, progress, students, writing

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(progress.router, prefix="/progress", tags=["Progress"])
router.include_router(catalog.router, prefix="/catalog", tags=["Catalog"])
router.include_router(exercises.router, prefix="/exercises", tags=["Exercises"])
router.include_router(writing.router, prefix="/writing", tags=["Writing"])
router.include_router(challenges.router, prefix="/challenges", tags=["Challenges"])
router.include_router(students.router, prefix="/students", tags=["Students"])
