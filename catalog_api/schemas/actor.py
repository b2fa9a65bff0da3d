"""
Schema del actor autenticado que ejecuta una operación.
"""
from pydantic import BaseModel
from typing import Optional


class Actor(BaseModel):
    """Identidad del usuario que realiza la acción, extraída del token."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None

    def snapshot(self) -> dict:
        """Copia (id + email) que se guarda en los campos de auditoría."""
        return {"id": self.id, "email": self.email}
