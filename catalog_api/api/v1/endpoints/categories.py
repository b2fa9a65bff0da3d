"""
Endpoints de categorias (arbol del catalogo).
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from catalog_api.core.deps import get_db, get_current_admin_actor
from catalog_api.schemas.actor import Actor
from catalog_api.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryTreeResponse,
    CategoryCreatedResponse,
    CategoryListResponse,
)
from catalog_api.schemas.common import MessageResponse
from catalog_api.services import category_service, traversal_service

router = APIRouter()


# ================================================================
# ENDPOINTS PUBLICOS
# ================================================================

@router.get("", response_model=CategoryListResponse)
def get_categories(
    current: int = Query(1, ge=1, description="Pagina actual"),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, description="Tamano de pagina"),
    parent: Optional[str] = Query(None, description="'null' para raices o ID del padre"),
    ancestor: Optional[str] = Query(None, description="ID: todas las subcategorias a cualquier nivel"),
    q: Optional[str] = Query(None, description="Busqueda por nombre o slug"),
    is_active: Optional[bool] = Query(None, alias="isActive", description="Filtrar por estado"),
    db: Session = Depends(get_db)
):
    """
    Obtener lista paginada de categorias.
    Ordenada por sort_order y nombre.
    No requiere autenticacion.
    """
    return category_service.list_categories(
        db,
        parent=parent,
        ancestor=ancestor,
        q=q,
        is_active=is_active,
        page=current,
        page_size=page_size,
    )


@router.get("/roots", response_model=List[CategoryResponse])
def get_root_categories(db: Session = Depends(get_db)):
    """
    Obtener categorias raiz activas.
    No requiere autenticacion.
    """
    return traversal_service.get_roots(db)


@router.get("/tree", response_model=List[CategoryTreeResponse])
def get_category_tree(
    depth: Optional[int] = Query(None, description="Niveles a abrir bajo las raices"),
    db: Session = Depends(get_db)
):
    """
    Obtener arbol de categorias activas hasta la profundidad indicada.
    No requiere autenticacion.
    """
    return traversal_service.get_tree(db, max_depth=depth)


@router.get("/{category_id}/children", response_model=List[CategoryResponse])
def get_category_children(
    category_id: str,
    db: Session = Depends(get_db)
):
    """
    Obtener subcategorias directas de una categoria.
    No requiere autenticacion.
    """
    return traversal_service.get_children(db, category_id)


@router.get("/{category_id}/subtree", response_model=List[CategoryResponse])
def get_category_subtree(
    category_id: str,
    include_self: bool = Query(False, description="Incluir la propia categoria"),
    db: Session = Depends(get_db)
):
    """
    Obtener todas las subcategorias de una categoria, a cualquier nivel.
    No requiere autenticacion.
    """
    return traversal_service.get_subtree(db, category_id, include_self=include_self)


@router.get("/{category_id}/breadcrumbs", response_model=List[CategoryResponse])
def get_category_breadcrumbs(
    category_id: str,
    db: Session = Depends(get_db)
):
    """
    Obtener el camino desde la raiz hasta la categoria.
    No requiere autenticacion.
    """
    return traversal_service.get_breadcrumbs(db, category_id)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: str,
    db: Session = Depends(get_db)
):
    """
    Obtener una categoria por ID.
    No requiere autenticacion.
    """
    return category_service.get_category(db, category_id)


# ================================================================
# ENDPOINTS ADMIN
# ================================================================

@router.post("", response_model=CategoryCreatedResponse, status_code=201)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_admin_actor)
):
    """
    Crear una nueva categoria.
    Si no se envia slug se genera a partir del nombre.
    Requiere rol de administrador.
    """
    return category_service.create_category(db, category_in, current_actor)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    category_in: CategoryUpdate,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_admin_actor)
):
    """
    Actualizar una categoria.
    Enviar parent_id en null la convierte en raiz.
    Requiere rol de administrador.
    """
    return category_service.update_category(db, category_id, category_in, current_actor)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_admin_actor)
):
    """
    Eliminar una categoria.
    Requiere rol de administrador.
    Nota: Se recomienda desactivar en lugar de eliminar.
    """
    category_service.remove_category(db, category_id, current_actor)
    return MessageResponse(message="Categoria eliminada exitosamente")
