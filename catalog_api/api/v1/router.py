"""
Router principal de la API v1.
Incluye todos los endpoints de la aplicación.
"""
from fastapi import APIRouter

from catalog_api.api.v1.endpoints import categories

api_router = APIRouter()

# ============================================================================
# CATÁLOGO
# ============================================================================
api_router.include_router(
    categories.router,
    prefix="/categories",
    tags=["Categorías"]
)
