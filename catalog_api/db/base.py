"""
Base declarativa de SQLAlchemy con soporte para auditoría de actores.
Todos los modelos heredan de esta clase base.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base


class ActorAuditMixin:
    """
    Mixin que agrega la copia del actor que creó, actualizó y eliminó el registro.

    Cada actor se guarda como snapshot (id + email) en lugar de una FK,
    porque los usuarios viven en otro servicio.
    """

    created_by_id = Column(String(64), nullable=True)
    created_by_email = Column(String(255), nullable=True)
    updated_by_id = Column(String(64), nullable=True)
    updated_by_email = Column(String(255), nullable=True)
    deleted_by_id = Column(String(64), nullable=True)
    deleted_by_email = Column(String(255), nullable=True)

    def stamp(self, action: str, actor: dict) -> None:
        """
        Registrar el actor de una acción.

        Args:
            action: 'created', 'updated' o 'deleted'
            actor: Snapshot con las claves id y email
        """
        setattr(self, f"{action}_by_id", actor.get("id"))
        setattr(self, f"{action}_by_email", actor.get("email"))

    def _snapshot(self, action: str) -> dict | None:
        actor_id = getattr(self, f"{action}_by_id")
        if actor_id is None:
            return None
        return {"id": actor_id, "email": getattr(self, f"{action}_by_email")}

    @property
    def created_by(self) -> dict | None:
        return self._snapshot("created")

    @property
    def updated_by(self) -> dict | None:
        return self._snapshot("updated")

    @property
    def deleted_by(self) -> dict | None:
        return self._snapshot("deleted")


# Base declarativa de SQLAlchemy
Base = declarative_base()
