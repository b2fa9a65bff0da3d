"""
Servicio de categorías.
Maneja creación, actualización, eliminación y listado paginado.

La ruta materializada (ancestros + profundidad) la calcula siempre
path_maintainer antes del commit.
"""
import logging
import uuid
from typing import Optional, Union
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_api.config import get_settings
from catalog_api.core.exceptions import (
    CatalogException,
    NotFoundException,
    ConflictException,
    InvalidArgumentException,
)
from catalog_api.crud.category import category as crud_category
from catalog_api.models.category import Category
from catalog_api.schemas.actor import Actor
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate
from catalog_api.schemas.common import PageMeta
from catalog_api.services import path_maintainer
from catalog_api.utils.slug import slugify, normalize_slug
from catalog_api.utils.validators import parse_category_id

logger = logging.getLogger(__name__)

# Campos que no aceptan null en una actualización
NON_NULLABLE_FIELDS = ("name", "slug", "sort_order", "is_active")


def _commit(db: Session, slug: str) -> None:
    """
    Confirmar la transacción.

    El índice único de slug es la última barrera ante dos escrituras
    concurrentes que pasaron la verificación previa.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Slug duplicado detectado al confirmar: %s", slug)
        raise ConflictException(f'Ya existe una categoria con el slug "{slug}"')


def _ensure_slug_available(db: Session, slug: str, exclude_id: Optional[UUID] = None) -> None:
    if crud_category.get_by_slug(db, slug=slug, exclude_id=exclude_id):
        logger.warning("Slug en uso: %s", slug)
        raise ConflictException(f'Ya existe una categoria con el slug "{slug}"')


def get_category(db: Session, category_id: Union[str, UUID]) -> Category:
    """
    Obtener una categoría por ID.

    Raises:
        InvalidArgumentException: Si el ID no es válido
        NotFoundException: Si la categoría no existe
    """
    node = crud_category.get(db, id=parse_category_id(category_id))
    if not node:
        raise NotFoundException("Categoría no encontrada")
    return node


def create_category(db: Session, category_in: CategoryCreate, actor: Actor) -> Category:
    """
    Crear una categoría.

    Args:
        db: Sesión de base de datos
        category_in: Datos de la categoría
        actor: Usuario que crea la categoría

    Returns:
        Categoría creada, con ancestros y profundidad ya calculados

    Raises:
        InvalidArgumentException: Si el slug queda vacío o parent_id no es válido
        ConflictException: Si el slug ya existe
        NotFoundException: Si la categoría padre no existe
    """
    # Generar slug si no se envió
    slug = normalize_slug(category_in.slug) if category_in.slug else slugify(category_in.name)
    if not slug:
        raise InvalidArgumentException("No se pudo generar un slug válido")

    # Slug único en todo el catálogo
    _ensure_slug_available(db, slug)

    parent_id = None
    if category_in.parent_id is not None:
        parent_id = parse_category_id(category_in.parent_id, field="parent_id")

    node = crud_category.create(
        db,
        obj_in={
            "id": uuid.uuid4(),
            "name": category_in.name,
            "slug": slug,
            "icon": category_in.icon,
            "description": category_in.description,
            "sort_order": category_in.sort_order,
            "is_active": category_in.is_active,
        },
        commit=False,
    )
    try:
        path_maintainer.apply_parent(db, node, parent_id)
    except CatalogException:
        # Descartar el nodo pendiente
        db.rollback()
        raise
    node.stamp("created", actor.snapshot())

    _commit(db, slug)
    db.refresh(node)

    logger.info(
        "Categoría creada: %s (%s) depth=%d por %s",
        node.id, node.slug, node.depth, actor.id
    )
    return node


def update_category(
    db: Session,
    category_id: Union[str, UUID],
    category_in: CategoryUpdate,
    actor: Actor
) -> Category:
    """
    Actualizar una categoría.

    Un cambio de padre se valida contra ciclos y arrastra la ruta de todo
    el subárbol; un cambio de slug se valida contra el resto del catálogo.
    Los demás campos se copian tal cual.

    Raises:
        InvalidArgumentException: Si algún ID no es válido
        NotFoundException: Si la categoría o el nuevo padre no existen
        ConflictException: Si el slug ya existe
        CycleRejectedException: Si el nuevo padre es la propia categoría o una subcategoría suya
    """
    node = get_category(db, category_id)

    update_data = category_in.model_dump(exclude_unset=True)
    for field in NON_NULLABLE_FIELDS:
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    if "slug" in update_data:
        update_data["slug"] = normalize_slug(update_data["slug"])
        if not update_data["slug"]:
            raise InvalidArgumentException("slug no puede estar vacío")
        _ensure_slug_available(db, update_data["slug"], exclude_id=node.id)

    if "parent_id" in update_data:
        raw_parent = update_data.pop("parent_id")
        parent_id = None if raw_parent is None else parse_category_id(raw_parent, field="parent_id")
        path_maintainer.apply_parent(db, node, parent_id)

    crud_category.update(db, db_obj=node, obj_in=update_data, commit=False)
    node.stamp("updated", actor.snapshot())

    _commit(db, node.slug)
    db.refresh(node)

    logger.info("Categoría actualizada: %s por %s", node.id, actor.id)
    return node


def remove_category(db: Session, category_id: Union[str, UUID], actor: Actor) -> UUID:
    """
    Eliminar definitivamente una categoría.

    Primero se registra quién la elimina y luego se borra el registro.
    Una categoría con subcategorías no se elimina: se dejarían hijos
    apuntando a un padre inexistente.

    Raises:
        InvalidArgumentException: Si el ID no es válido
        NotFoundException: Si la categoría no existe
        ConflictException: Si la categoría tiene subcategorías
    """
    node = get_category(db, category_id)

    children_count = crud_category.count_subcategories(db, parent_id=node.id)
    if children_count > 0:
        logger.warning(
            "Eliminación rechazada: la categoría %s tiene %d subcategorías",
            node.id, children_count
        )
        raise ConflictException(
            f"No se puede eliminar: tiene {children_count} subcategorias. "
            "Desactivela o elimine las subcategorias primero."
        )

    removed_id, removed_slug = node.id, node.slug
    node.stamp("deleted", actor.snapshot())
    db.commit()

    crud_category.remove(db, id=removed_id)
    logger.info("Categoría eliminada: %s (%s) por %s", removed_id, removed_slug, actor.id)
    return removed_id


def list_categories(
    db: Session,
    *,
    parent: Optional[str] = None,
    ancestor: Optional[str] = None,
    q: Optional[str] = None,
    is_active: Optional[bool] = None,
    page: int = 1,
    page_size: Optional[int] = None
) -> dict:
    """
    Listado paginado de categorías.

    Args:
        db: Sesión de base de datos
        parent: 'null' para raíces, un ID para sus hijos directos
        ancestor: ID cuyo subárbol completo se quiere listar
        q: Búsqueda por nombre o slug (sin distinguir mayúsculas)
        is_active: Filtrar por estado
        page: Página (desde 1)
        page_size: Tamaño de página

    Returns:
        Dict con meta (current, page_size, pages, total) y result

    Raises:
        InvalidArgumentException: Si parent o ancestor no son válidos
    """
    settings = get_settings()

    roots_only = False
    parent_id = None
    if parent is not None:
        if parent.strip().lower() == "null":
            roots_only = True
        else:
            parent_id = parse_category_id(parent, field="parent")

    ancestor_id = parse_category_id(ancestor, field="ancestor") if ancestor else None

    page = page if page and page > 0 else 1
    page_size = page_size if page_size and page_size > 0 else settings.DEFAULT_PAGE_SIZE
    page_size = min(page_size, settings.MAX_PAGE_SIZE)

    items, total = crud_category.search(
        db,
        parent_id=parent_id,
        roots_only=roots_only,
        ancestor_id=ancestor_id,
        query=q.strip() if q else None,
        is_active=is_active,
        skip=(page - 1) * page_size,
        limit=page_size,
    )

    return {
        "meta": PageMeta.build(current=page, page_size=page_size, total=total),
        "result": items,
    }
