"""
Schemas comunes reutilizables.
"""
import math
from pydantic import BaseModel


class PageMeta(BaseModel):
    """Metadatos de una respuesta paginada."""

    current: int
    page_size: int
    pages: int
    total: int

    @classmethod
    def build(cls, current: int, page_size: int, total: int) -> "PageMeta":
        """Calcular la cantidad de páginas a partir del total."""
        return cls(
            current=current,
            page_size=page_size,
            pages=math.ceil(total / page_size) if page_size else 0,
            total=total,
        )


class MessageResponse(BaseModel):
    """Schema de respuesta con mensaje simple."""

    message: str
    success: bool = True

    model_config = {"from_attributes": True}
