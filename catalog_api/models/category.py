"""
Modelo ORM para Categorías con ruta materializada.
"""
import uuid
from typing import List
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Uuid, Index, CheckConstraint
from sqlalchemy.sql import func
from catalog_api.db.base import Base, ActorAuditMixin

PATH_SEPARATOR = "/"


def encode_path(ancestors: List[uuid.UUID]) -> str:
    """
    Serializar la lista de ancestros a la columna path.

    Las raíces tienen path vacío; el resto '/<id>/<id>/', de modo que
    la pertenencia de un id se consulta con '/<id>/' y el prefijo de
    los descendientes de un nodo es su propia ruta completa.
    """
    if not ancestors:
        return ""
    return PATH_SEPARATOR + PATH_SEPARATOR.join(str(a) for a in ancestors) + PATH_SEPARATOR


def decode_path(path: str | None) -> List[uuid.UUID]:
    """Convertir la columna path en la lista ordenada de ancestros."""
    if not path:
        return []
    return [uuid.UUID(part) for part in path.strip(PATH_SEPARATOR).split(PATH_SEPARATOR)]


def path_token(category_id: uuid.UUID) -> str:
    """Fragmento que aparece en el path de todo descendiente de category_id."""
    return f"{PATH_SEPARATOR}{category_id}{PATH_SEPARATOR}"


class Category(Base, ActorAuditMixin):
    """
    Modelo de Categorías organizadas en árbol.

    Cada nodo guarda la lista de sus ancestros (raíz primero) en path
    y su profundidad en depth, con depth == len(ancestors).
    """

    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(150), nullable=False)
    slug = Column(String(180), nullable=False, unique=True, index=True)
    parent_id = Column(Uuid, ForeignKey("categories.id"), nullable=True, index=True)
    path = Column(String(4000), nullable=False, default="", index=True)
    depth = Column(Integer, nullable=False, default=0, index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    icon = Column(String(255))
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('depth >= 0', name='check_category_depth_positive'),
        CheckConstraint('sort_order >= 0', name='check_category_sort_order_positive'),
        Index('ix_categories_parent_sort', 'parent_id', 'sort_order'),
    )

    @property
    def ancestors(self) -> List[uuid.UUID]:
        """Ids de los ancestros, desde la raíz hasta el padre directo."""
        return decode_path(self.path)

    @ancestors.setter
    def ancestors(self, value: List[uuid.UUID]) -> None:
        self.path = encode_path(value)

    @property
    def descendant_prefix(self) -> str:
        """Prefijo de path que comparten todos los descendientes del nodo."""
        return encode_path(self.ancestors + [self.id])

    def __repr__(self):
        return f"<Category {self.slug}>"
