"""
Consultas de solo lectura sobre el árbol de categorías.

Raíces, hijos, subárbol, breadcrumbs y árbol acotado se resuelven con
la ruta materializada; ninguna consulta recorre la cadena de padres.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Union
from uuid import UUID
from sqlalchemy.orm import Session

from catalog_api.config import get_settings
from catalog_api.core.exceptions import NotFoundException, InvalidArgumentException
from catalog_api.crud.category import category as crud_category
from catalog_api.models.category import Category
from catalog_api.utils.validators import parse_category_id

logger = logging.getLogger(__name__)


def get_roots(db: Session) -> List[Category]:
    """Categorías raíz activas, ordenadas por sort_order y nombre."""
    return crud_category.get_root_categories(db)


def get_children(
    db: Session,
    category_id: Union[str, UUID],
    only_active: bool = False
) -> List[Category]:
    """
    Hijos directos de una categoría.

    Raises:
        InvalidArgumentException: Si el ID no es válido
    """
    parent_id = parse_category_id(category_id)
    return crud_category.get_subcategories(db, parent_id=parent_id, only_active=only_active)


def get_subtree(
    db: Session,
    category_id: Union[str, UUID],
    include_self: bool = False
) -> List[Category]:
    """
    Todos los descendientes de una categoría, a cualquier profundidad.

    Es una sola consulta: X está en la lista de ancestros de cada
    descendiente.

    Args:
        db: Sesión de base de datos
        category_id: ID de la categoría
        include_self: Si es True, incluye la propia categoría

    Returns:
        Lista ordenada por profundidad

    Raises:
        InvalidArgumentException: Si el ID no es válido
    """
    ancestor_id = parse_category_id(category_id)
    return crud_category.get_descendants(db, ancestor_id=ancestor_id, include_self=include_self)


def get_subtree_ids(
    db: Session,
    category_id: Union[str, UUID],
    include_self: bool = True
) -> List[UUID]:
    """
    IDs del subárbol de una categoría.

    Pensado para filtrar productos por "categoría incluyendo subcategorías".
    """
    return [c.id for c in get_subtree(db, category_id, include_self=include_self)]


def get_breadcrumbs(db: Session, category_id: Union[str, UUID]) -> List[Category]:
    """
    Camino desde la raíz hasta la categoría (inclusive).

    Raises:
        InvalidArgumentException: Si el ID no es válido
        NotFoundException: Si la categoría no existe
    """
    node_id = parse_category_id(category_id)
    node = crud_category.get(db, id=node_id)
    if not node:
        raise NotFoundException("Categoría no encontrada")

    ancestors = crud_category.get_many_by_depth(db, ids=node.ancestors)
    return ancestors + [node]


def _tree_node(node: Category, children: List[dict]) -> dict:
    return {
        "id": node.id,
        "name": node.name,
        "slug": node.slug,
        "parent_id": node.parent_id,
        "ancestors": node.ancestors,
        "depth": node.depth,
        "sort_order": node.sort_order,
        "is_active": node.is_active,
        "icon": node.icon,
        "description": node.description,
        "children": children,
    }


def _build_fanout(db: Session, node: Category, level: int, max_depth: int) -> dict:
    # Una consulta por nodo padre en cada nivel
    if level >= max_depth:
        return _tree_node(node, [])
    children = crud_category.get_subcategories(db, parent_id=node.id, only_active=True)
    return _tree_node(
        node,
        [_build_fanout(db, child, level + 1, max_depth) for child in children]
    )


def _build_in_memory(
    node: Category,
    children_by_parent: Dict[UUID, List[Category]],
    level: int,
    max_depth: int
) -> dict:
    if level >= max_depth:
        return _tree_node(node, [])
    return _tree_node(
        node,
        [
            _build_in_memory(child, children_by_parent, level + 1, max_depth)
            for child in children_by_parent.get(node.id, [])
        ]
    )


def _load_children_by_parent(db: Session, max_depth: int) -> Dict[UUID, List[Category]]:
    """Agrupar por padre, en una sola consulta, los nodos activos hasta max_depth."""
    nodes = crud_category.get_active_up_to_depth(db, max_depth=max_depth)
    children_by_parent: Dict[UUID, List[Category]] = defaultdict(list)
    for node in nodes:
        if node.parent_id is not None:
            children_by_parent[node.parent_id].append(node)
    return children_by_parent


def get_tree(db: Session, max_depth: Optional[int] = None) -> List[dict]:
    """
    Árbol anidado desde las raíces activas.

    Se abren max_depth niveles por debajo de las raíces; los nodos del
    último nivel devuelven children vacío aunque tengan hijos reales.
    Hasta TREE_FANOUT_MAX_DEPTH se consulta nivel por nivel; por encima
    se hace una sola consulta y se reagrupa en memoria.

    Args:
        db: Sesión de base de datos
        max_depth: Niveles a abrir (por defecto TREE_DEFAULT_DEPTH)

    Returns:
        Lista de nodos raíz, cada uno con su clave children

    Raises:
        InvalidArgumentException: Si max_depth es negativo
    """
    settings = get_settings()
    if max_depth is None:
        max_depth = settings.TREE_DEFAULT_DEPTH
    if max_depth < 0:
        raise InvalidArgumentException("depth debe ser >= 0")
    max_depth = min(max_depth, settings.TREE_MAX_DEPTH)

    roots = get_roots(db)

    if max_depth <= settings.TREE_FANOUT_MAX_DEPTH:
        return [_build_fanout(db, root, 0, max_depth) for root in roots]

    logger.debug("Árbol con depth=%d armado en memoria", max_depth)
    children_by_parent = _load_children_by_parent(db, max_depth)
    return [_build_in_memory(root, children_by_parent, 0, max_depth) for root in roots]
