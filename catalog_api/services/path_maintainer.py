"""
Mantenimiento de la ruta materializada (ancestros + profundidad).

Toda asignación o cambio de padre pasa por aquí antes del commit:
se lee la ruta ya confirmada del padre, se deriva la del nodo, se
valida que no se forme un ciclo y, si el nodo se movió, se reescribe
la ruta de todos sus descendientes en la misma transacción.

Uso:
    from catalog_api.services import path_maintainer

    path_maintainer.apply_parent(db, node, parent_id)
    db.commit()
"""
import logging
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from catalog_api.config import get_settings
from catalog_api.core.exceptions import NotFoundException, ConflictException, CycleRejectedException
from catalog_api.crud.category import category as crud_category
from catalog_api.models.category import Category

logger = logging.getLogger(__name__)


def compute_path(
    db: Session,
    parent_id: Optional[UUID],
    node_id: Optional[UUID] = None
) -> Tuple[List[UUID], int]:
    """
    Calcular ancestros y profundidad de un nodo colgado de parent_id.

    Args:
        db: Sesión de base de datos
        parent_id: ID del padre deseado, o None para dejarlo como raíz
        node_id: ID del nodo (None al crear, cuando aún no tiene descendientes)

    Returns:
        Tupla (ancestros, profundidad)

    Raises:
        NotFoundException: Si el padre no existe
        CycleRejectedException: Si el padre es el propio nodo o uno de sus descendientes
    """
    if parent_id is None:
        return [], 0

    if node_id is not None and parent_id == node_id:
        logger.warning("Ciclo rechazado: la categoría %s no puede ser su propio padre", node_id)
        raise CycleRejectedException("Una categoría no puede ser su propio padre")

    parent = crud_category.get(db, id=parent_id)
    if not parent:
        raise NotFoundException("Categoría padre no encontrada")

    parent_ancestors = parent.ancestors
    if node_id is not None and node_id in parent_ancestors:
        logger.warning(
            "Ciclo rechazado: %s es descendiente de %s", parent_id, node_id
        )
        raise CycleRejectedException(
            "No se puede asignar como padre una subcategoría de la propia categoría"
        )

    return parent_ancestors + [parent.id], parent.depth + 1


def rewrite_descendants(
    db: Session,
    old_prefix: str,
    new_prefix: str,
    depth_delta: int
) -> int:
    """
    Reescribir la ruta de todos los nodos bajo old_prefix.

    Cada path se actualiza por sustitución de prefijo y cada depth se
    desplaza en depth_delta. No hace commit.

    Returns:
        Cantidad de descendientes reescritos
    """
    descendants = crud_category.get_by_path_prefix(db, prefix=old_prefix)
    for node in descendants:
        node.path = new_prefix + node.path[len(old_prefix):]
        node.depth = node.depth + depth_delta
        db.add(node)
    return len(descendants)


def apply_parent(db: Session, node: Category, parent_id: Optional[UUID]) -> int:
    """
    Asignar parent_id al nodo y dejar consistente la ruta de su subárbol.

    Para un nodo nuevo (pendiente de insertar) solo se calcula su ruta.
    Para un nodo existente se valida el ciclo y, según REPARENT_POLICY,
    se reescriben sus descendientes o se rechaza el movimiento si tiene hijos.
    No hace commit.

    Args:
        db: Sesión de base de datos
        node: Categoría a la que se le asigna el padre
        parent_id: ID del nuevo padre, o None para convertirla en raíz

    Returns:
        Cantidad de descendientes reescritos

    Raises:
        NotFoundException: Si el padre no existe
        CycleRejectedException: Si el movimiento formaría un ciclo
        ConflictException: Si la política es 'reject' y el nodo tiene hijos
    """
    if not inspect(node).persistent:
        ancestors, depth = compute_path(db, parent_id)
        node.parent_id = parent_id
        node.ancestors = ancestors
        node.depth = depth
        return 0

    ancestors, depth = compute_path(db, parent_id, node.id)
    moved = parent_id != node.parent_id

    if moved and get_settings().REPARENT_POLICY == "reject":
        children_count = crud_category.count_subcategories(db, parent_id=node.id)
        if children_count > 0:
            logger.warning(
                "Movimiento rechazado: la categoría %s tiene %d subcategorías",
                node.id, children_count
            )
            raise ConflictException(
                f"No se puede mover: tiene {children_count} subcategorias"
            )

    old_prefix = node.descendant_prefix
    depth_delta = depth - node.depth

    node.parent_id = parent_id
    node.ancestors = ancestors
    node.depth = depth
    db.add(node)

    new_prefix = node.descendant_prefix
    if old_prefix == new_prefix:
        return 0

    rewritten = rewrite_descendants(db, old_prefix, new_prefix, depth_delta)
    logger.info(
        "Categoría %s movida bajo %s; %d descendientes reescritos",
        node.id, parent_id, rewritten
    )
    return rewritten
