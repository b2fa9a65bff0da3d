"""
Aplicación FastAPI principal de Catalog API.
"""
import json
import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from catalog_api.config import settings
from catalog_api.api.v1.router import api_router
from catalog_api.db.session import get_db_connection
from catalog_api.services.init_service import run_initialization
from catalog_api.core.exceptions import (
    NotFoundException,
    UnauthorizedException,
    ForbiddenException,
    InvalidArgumentException,
    ConflictException,
    CycleRejectedException,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Catalog API - Árbol de categorías

    API RESTful para el catálogo jerárquico de categorías.

    ### Características principales:

    * **Árbol materializado** - Cada categoría guarda sus ancestros y su profundidad
    * **Consultas de árbol** - Raíces, hijos, subárbol, breadcrumbs y árbol acotado
    * **Slugs únicos** - Generados a partir del nombre si no se envían
    * **Auditoría** - Quién creó, actualizó y eliminó cada categoría

    ### Documentación:

    - **Swagger UI**: /docs
    - **ReDoc**: /redoc
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception Handlers
@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    """Handler para recursos no encontrados."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)}
    )


@app.exception_handler(UnauthorizedException)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedException):
    """Handler para errores de autenticación."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"}
    )


@app.exception_handler(ForbiddenException)
async def forbidden_exception_handler(request: Request, exc: ForbiddenException):
    """Handler para errores de autorización."""
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc)}
    )


@app.exception_handler(InvalidArgumentException)
async def invalid_argument_exception_handler(request: Request, exc: InvalidArgumentException):
    """Handler para identificadores o campos inválidos."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)}
    )


@app.exception_handler(ConflictException)
async def conflict_exception_handler(request: Request, exc: ConflictException):
    """Handler para conflictos."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc)}
    )


@app.exception_handler(CycleRejectedException)
async def cycle_rejected_exception_handler(request: Request, exc: CycleRejectedException):
    """Handler para cambios de padre que formarían un ciclo."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler para errores de validación de Pydantic."""
    # Convertir errores a formato serializable
    errors = []
    for error in exc.errors():
        err = {
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
        }
        # Incluir input solo si es serializable
        if "input" in error:
            try:
                json.dumps(error["input"])
                err["input"] = error["input"]
            except (TypeError, ValueError):
                err["input"] = str(error["input"])
        errors.append(err)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors}
    )


# Incluir routers de la API
app.include_router(api_router, prefix="/api/v1")


# Endpoint raíz
@app.get("/", tags=["Health"])
async def root():
    """
    Endpoint raíz para verificar que la API está funcionando.
    """
    return {
        "message": "Catalog API - Árbol de categorías",
        "version": settings.APP_VERSION,
        "status": "online",
        "docs": "/docs",
        "redoc": "/redoc"
    }


# Health check
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Endpoint de health check para monitoreo.
    """
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


# Startup event
@app.on_event("startup")
async def startup_event():
    """
    Evento ejecutado al iniciar la aplicación.
    """
    logger.info("%s v%s iniciada", settings.APP_NAME, settings.APP_VERSION)
    logger.info("Modo debug: %s", settings.DEBUG)

    if not run_initialization():
        logger.error("La base de datos no está disponible; la API responderá con errores")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """
    Evento ejecutado al apagar la aplicación.
    """
    get_db_connection().close()
    logger.info("%s detenida", settings.APP_NAME)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "catalog_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
