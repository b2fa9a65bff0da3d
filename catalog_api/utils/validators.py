"""
Validaciones de identificadores recibidos como texto.
"""
from typing import Union
from uuid import UUID

from catalog_api.core.exceptions import InvalidArgumentException


def parse_category_id(value: Union[str, UUID], field: str = "id") -> UUID:
    """
    Convertir un identificador a UUID.

    Args:
        value: Identificador recibido (texto o UUID)
        field: Nombre del campo, para el mensaje de error

    Returns:
        UUID válido

    Raises:
        InvalidArgumentException: Si el valor no es un UUID bien formado
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (ValueError, AttributeError, TypeError):
        raise InvalidArgumentException(f"{field} inválido: {value}")
