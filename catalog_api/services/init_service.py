"""
Servicio de inicialización de la aplicación.
Prepara la base de datos al arrancar.
"""
import logging
import time
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from catalog_api.config import get_settings
from catalog_api.db.session import SessionLocal, get_db_connection
from catalog_api.models import Base

logger = logging.getLogger(__name__)


def wait_for_db(max_retries: int = 10, delay: int = 2) -> bool:
    """
    Esperar a que la base de datos esté lista.

    Args:
        max_retries: Número máximo de reintentos
        delay: Segundos entre reintentos

    Returns:
        True si la BD está lista, False si falló
    """
    for attempt in range(max_retries):
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            return True
        except OperationalError as e:
            if attempt < max_retries - 1:
                logger.info("Esperando base de datos... intento %d/%d", attempt + 1, max_retries)
                time.sleep(delay)
            else:
                logger.error("Base de datos no disponible después de %d intentos: %s", max_retries, e)
        finally:
            db.close()
    return False


def create_tables() -> None:
    """Crear las tablas que aún no existan."""
    Base.metadata.create_all(bind=get_db_connection().engine)
    logger.info("Tablas verificadas: %s", ", ".join(sorted(Base.metadata.tables)))


def run_initialization() -> bool:
    """
    Ejecutar todas las tareas de inicialización.
    Llamar desde el evento startup de FastAPI.

    Returns:
        True si la base de datos quedó lista
    """
    logger.info("Ejecutando inicialización...")

    if not wait_for_db():
        return False

    if get_settings().CREATE_TABLES_ON_STARTUP:
        create_tables()

    logger.info("Inicialización completada")
    return True
