"""
Excepciones personalizadas para Catalog API.
"""


class CatalogException(Exception):
    """Excepción base para todas las excepciones del catálogo."""

    def __init__(self, message: str = "Error en la aplicación"):
        self.message = message
        super().__init__(self.message)


class NotFoundException(CatalogException):
    """Excepción cuando un recurso no se encuentra."""

    def __init__(self, message: str = "Recurso no encontrado"):
        super().__init__(message)


class UnauthorizedException(CatalogException):
    """Excepción cuando el usuario no está autenticado."""

    def __init__(self, message: str = "No autorizado"):
        super().__init__(message)


class ForbiddenException(CatalogException):
    """Excepción cuando el usuario no tiene permisos."""

    def __init__(self, message: str = "Acceso prohibido"):
        super().__init__(message)


class InvalidArgumentException(CatalogException):
    """Excepción cuando un identificador o campo es inválido."""

    def __init__(self, message: str = "Argumento inválido"):
        super().__init__(message)


class ConflictException(CatalogException):
    """Excepción cuando hay un conflicto con el estado actual."""

    def __init__(self, message: str = "Conflicto con el recurso"):
        super().__init__(message)


class CycleRejectedException(CatalogException):
    """Excepción cuando un cambio de padre formaría un ciclo en el árbol."""

    def __init__(self, message: str = "El cambio de padre formaría un ciclo"):
        super().__init__(message)
