"""
Módulo de modelos ORM.
Importa todos los modelos para que SQLAlchemy los reconozca.
"""
from catalog_api.db.base import Base

# Catálogo
from catalog_api.models.category import Category

__all__ = [
    "Base",
    "Category",
]
