"""
Dependencias comunes de FastAPI.
"""
from typing import Generator, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from catalog_api.config import settings
from catalog_api.db.session import SessionLocal
from catalog_api.core.security import decode_token
from catalog_api.core.exceptions import UnauthorizedException, ForbiddenException
from catalog_api.schemas.actor import Actor

security = HTTPBearer()


def get_db() -> Generator:
    """
    Dependencia que proporciona una sesión de base de datos.

    Yields:
        Session: Sesión de SQLAlchemy
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Actor:
    """
    Obtener el actor actual desde el JWT.

    Args:
        credentials: Credenciales HTTP Bearer

    Returns:
        Actor con id, email y rol

    Raises:
        UnauthorizedException: Si el token es inválido
    """
    credentials_exception = UnauthorizedException("No se pudieron validar las credenciales")

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

    user_id: Optional[str] = payload.get("sub")
    token_type: Optional[str] = payload.get("type")

    if user_id is None or token_type != "access":
        raise credentials_exception

    return Actor(id=user_id, email=payload.get("email"), role=payload.get("role"))


async def get_current_admin_actor(
    actor: Actor = Depends(get_current_actor)
) -> Actor:
    """
    Verificar que el actor actual sea administrador.

    Args:
        actor: Actor actual

    Returns:
        Actor administrador

    Raises:
        ForbiddenException: Si el actor no es administrador
    """
    if actor.role != settings.ADMIN_ROLE:
        raise ForbiddenException("No tiene permisos de administrador")

    return actor
