"""
CRUD para categorías.

Todas las consultas de árbol usan la ruta materializada (path) en lugar
de recorrer la cadena de padres.
"""
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session, Query
from sqlalchemy import or_

from catalog_api.crud.base import CRUDBase
from catalog_api.models.category import Category, path_token


class CRUDCategory(CRUDBase[Category, dict, dict]):
    """CRUD específico para categorías."""

    @staticmethod
    def _ordered(query: Query) -> Query:
        """Orden entre hermanos: sort_order y luego nombre."""
        return query.order_by(Category.sort_order, Category.name)

    def get_by_slug(
        self, db: Session, *, slug: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Category]:
        """
        Obtener categoría por slug.

        Args:
            db: Sesión de base de datos
            slug: Slug a buscar
            exclude_id: ID a ignorar (la propia categoría al actualizar)

        Returns:
            Categoría encontrada o None
        """
        query = db.query(Category).filter(Category.slug == slug)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def get_root_categories(self, db: Session) -> List[Category]:
        """Obtener categorías raíz activas."""
        query = db.query(Category).filter(
            Category.parent_id.is_(None), Category.is_active == True
        )
        return self._ordered(query).all()

    def get_subcategories(
        self, db: Session, *, parent_id: UUID, only_active: bool = False
    ) -> List[Category]:
        """
        Obtener hijos directos de una categoría.

        Args:
            db: Sesión de base de datos
            parent_id: ID de la categoría padre
            only_active: Si es True, excluye las inactivas

        Returns:
            Lista de subcategorías ordenadas
        """
        query = db.query(Category).filter(Category.parent_id == parent_id)
        if only_active:
            query = query.filter(Category.is_active == True)
        return self._ordered(query).all()

    def count_subcategories(self, db: Session, *, parent_id: UUID) -> int:
        """Cantidad de hijos directos de una categoría."""
        return db.query(Category).filter(Category.parent_id == parent_id).count()

    def get_descendants(
        self,
        db: Session,
        *,
        ancestor_id: UUID,
        include_self: bool = False,
        only_active: bool = False
    ) -> List[Category]:
        """
        Obtener todos los descendientes de una categoría en una sola consulta.

        Un nodo es descendiente de X cuando X aparece en su lista de
        ancestros, sin importar la profundidad.

        Args:
            db: Sesión de base de datos
            ancestor_id: ID de la categoría raíz del subárbol
            include_self: Si es True, incluye la propia categoría
            only_active: Si es True, excluye las inactivas

        Returns:
            Lista ordenada por profundidad y luego orden entre hermanos
        """
        condition = Category.path.contains(path_token(ancestor_id))
        if include_self:
            condition = or_(condition, Category.id == ancestor_id)

        query = db.query(Category).filter(condition)
        if only_active:
            query = query.filter(Category.is_active == True)
        return query.order_by(Category.depth, Category.sort_order, Category.name).all()

    def get_by_path_prefix(self, db: Session, *, prefix: str) -> List[Category]:
        """Obtener los nodos cuyo path empieza con prefix."""
        return db.query(Category).filter(Category.path.startswith(prefix)).all()

    def get_active_up_to_depth(self, db: Session, *, max_depth: int) -> List[Category]:
        """Categorías activas con depth <= max_depth, en orden entre hermanos."""
        query = db.query(Category).filter(
            Category.is_active == True, Category.depth <= max_depth
        )
        return self._ordered(query).all()

    def get_many_by_depth(self, db: Session, *, ids: List[UUID]) -> List[Category]:
        """Obtener varias categorías por ID, ordenadas por profundidad."""
        if not ids:
            return []
        return (
            db.query(Category)
            .filter(Category.id.in_(ids))
            .order_by(Category.depth)
            .all()
        )

    def search(
        self,
        db: Session,
        *,
        parent_id: Optional[UUID] = None,
        roots_only: bool = False,
        ancestor_id: Optional[UUID] = None,
        query: Optional[str] = None,
        is_active: Optional[bool] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Category], int]:
        """
        Buscar categorías con filtros y paginación.

        Args:
            db: Sesión de base de datos
            parent_id: Solo hijos directos de esta categoría
            roots_only: Solo categorías raíz
            ancestor_id: Solo descendientes (a cualquier nivel) de esta categoría
            query: Término de búsqueda sobre nombre y slug
            is_active: Filtrar por estado
            skip: Registros a saltar
            limit: Límite de registros

        Returns:
            Tupla (categorías de la página, total sin paginar)
        """
        q = db.query(Category)

        if roots_only:
            q = q.filter(Category.parent_id.is_(None))
        elif parent_id is not None:
            q = q.filter(Category.parent_id == parent_id)

        if ancestor_id is not None:
            q = q.filter(Category.path.contains(path_token(ancestor_id)))

        if query:
            # % y _ del usuario se buscan literalmente
            escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            search_term = f"%{escaped}%"
            q = q.filter(
                or_(
                    Category.name.ilike(search_term, escape="\\"),
                    Category.slug.ilike(search_term, escape="\\")
                )
            )

        if is_active is not None:
            q = q.filter(Category.is_active == is_active)

        total = q.count()
        items = self._ordered(q).offset(skip).limit(limit).all()
        return items, total


# Instancia global del CRUD
category = CRUDCategory(Category)
