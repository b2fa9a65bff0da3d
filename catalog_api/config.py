"""
Configuración de la aplicación Catalog API.
Maneja variables de entorno y settings globales.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    """Configuración de la aplicación usando Pydantic Settings v2."""

    # Database
    DATABASE_URL: str = "sqlite:///./catalog.db"
    CREATE_TABLES_ON_STARTUP: bool = True

    # Security (REQUERIDO - debe estar en .env)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    ADMIN_ROLE: str = "admin"

    # Application
    APP_NAME: str = "Catalog API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Árbol de categorías
    TREE_DEFAULT_DEPTH: int = 2
    TREE_MAX_DEPTH: int = 10
    # Hasta esta profundidad el árbol se arma con una consulta por nodo padre;
    # por encima se usa una sola consulta y se reagrupa en memoria
    TREE_FANOUT_MAX_DEPTH: int = 2
    # rewrite: al mover un nodo se reescriben las rutas de sus descendientes
    # reject: no se permite mover un nodo que tenga hijos
    REPARENT_POLICY: Literal["rewrite", "reject"] = "rewrite"

    # Paginación
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Computed properties
    @property
    def allowed_origins_list(self) -> List[str]:
        """Convierte ALLOWED_ORIGINS string a lista."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_sqlite(self) -> bool:
        """Indica si la base de datos configurada es SQLite."""
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Instancia Singleton de settings
_settings_instance = None


def get_settings() -> Settings:
    """
    Obtener instancia Singleton de configuración.
    Se carga una sola vez y se reutiliza.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


# Instancia global de settings (Singleton)
settings = get_settings()
