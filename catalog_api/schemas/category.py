"""
Schemas para categorías.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from catalog_api.schemas.common import PageMeta


def _strip_or_none(value):
    """'' o solo espacios -> None; el resto se recorta."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class CategoryBase(BaseModel):
    """Schema base de categoria."""

    name: str = Field(..., min_length=1, max_length=150)
    slug: Optional[str] = Field(None, max_length=180)
    # Se valida en el servicio para responder 400 con un mensaje propio
    parent_id: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    sort_order: int = Field(0, ge=0)
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("slug", "parent_id", "icon", "description", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return _strip_or_none(value)


class CategoryCreate(CategoryBase):
    """Schema para crear categoria."""
    pass


class CategoryUpdate(BaseModel):
    """
    Schema para actualizar categoria.

    parent_id enviado explícitamente como null convierte la categoría en raíz;
    si no se envía, el padre no cambia.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=150)
    slug: Optional[str] = Field(None, max_length=180)
    parent_id: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    sort_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def drop_blank_parent(cls, data):
        # parent_id en blanco equivale a no enviarlo; solo null mueve a raíz
        if isinstance(data, dict):
            parent_id = data.get("parent_id")
            if isinstance(parent_id, str) and not parent_id.strip():
                data = {k: v for k, v in data.items() if k != "parent_id"}
        return data

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("slug", "parent_id", "icon", "description", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return _strip_or_none(value)


class ActorSnapshot(BaseModel):
    """Copia del actor guardada en los campos de auditoría."""

    id: str
    email: Optional[str] = None


class CategoryResponse(BaseModel):
    """Schema de respuesta de categoria."""

    id: UUID
    name: str
    slug: str
    parent_id: Optional[UUID] = None
    ancestors: List[UUID] = []
    depth: int
    sort_order: int
    is_active: bool
    icon: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[ActorSnapshot] = None
    updated_by: Optional[ActorSnapshot] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CategoryTreeResponse(CategoryResponse):
    """Schema de respuesta de categoria con hijos."""

    children: List["CategoryTreeResponse"] = []


class CategoryCreatedResponse(BaseModel):
    """Schema de respuesta al crear una categoria."""

    id: UUID
    slug: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CategoryListResponse(BaseModel):
    """Schema de respuesta paginada de categorias."""

    meta: PageMeta
    result: List[CategoryResponse]

    model_config = {"from_attributes": True}
