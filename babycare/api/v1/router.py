"""
Router principal de la API v1.
Agrupa todos los sub-routers de la versión 1.
"""

from fastapi import APIRouter

from babycare.api.v1.children import router as children_router
from babycare.api.v1.reminders import router as reminders_router
from babycare.api.v1.vaccines import router as vaccines_router

api_v1_router = APIRouter()

api_v1_router.include_router(
    children_router,
    prefix="/children",
    tags=["Perfiles de bebé"],
)

api_v1_router.include_router(
    vaccines_router,
    prefix="/vaccines",
    tags=["Vacunas"],
)

api_v1_router.include_router(
    reminders_router,
    prefix="/reminders",
    tags=["Recordatorios"],
)
