"""
Main entrypoint for the Usuarios API.

This module assembles the FastAPI application, sets up logging, wires
the user service to its repository and includes versioned routers.
The ``create_app`` function builds and configures the app, which is
then instantiated at module import time as ``app``::

    uvicorn usuarios_api.app.main:app --reload

Title, version and contact for the OpenAPI document come from
``Settings`` in ``core.config``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .repositories.usuario_repository import (
    InMemoryUsuarioRepository,
    SQLiteUsuarioRepository,
    UsuarioRepository,
)
from .services.usuario_service import UsuarioService

logger = logging.getLogger(__name__)

# Spanish wording for the pydantic/FastAPI error types a client can
# trigger; anything else keeps pydantic's own message.
MENSAJES_VALIDACION = {
    "missing": "no debe estar vacío",
    "string_type": "debe ser una cadena de texto",
    "int_parsing": "debe ser un número entero",
    "int_type": "debe ser un número entero",
    "less_than_equal": "está fuera de rango",
    "greater_than_equal": "está fuera de rango",
    "out_of_range": "está fuera de rango",
    "json_invalid": "contiene un JSON inválido",
    "model_attributes_type": "debe ser un objeto JSON",
    "dict_type": "debe ser un objeto JSON",
}

TAGS_METADATA = [
    {"name": "Usuarios", "description": "API para gestionar los usuarios"},
]


def errores_por_campo(errors) -> dict:
    """Collapse pydantic errors into ``{campo: "El campo <campo> <mensaje>"}``.

    The field is the last name in the error location (``body`` when the
    whole body is at fault).  Only the first error of each field is
    kept.
    """
    errores = {}
    for error in errors:
        names = [part for part in error.get("loc", ()) if isinstance(part, str)]
        campo = names[-1] if names else "body"
        if campo in errores:
            continue
        mensaje = MENSAJES_VALIDACION.get(error.get("type"), error.get("msg", ""))
        errores[campo] = f"El campo {campo} {mensaje}"
    return errores


def build_repository() -> UsuarioRepository:
    """Instantiate the repository selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return InMemoryUsuarioRepository()
    if settings.storage_backend != "sqlite":
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
    return SQLiteUsuarioRepository(settings.database_url)


def create_app(repository: Optional[UsuarioRepository] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    repository : Optional[UsuarioRepository]
        Storage for users.  When omitted, one is built from settings.
        A SQLite repository gets its migrations applied at startup.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    if repository is None:
        repository = build_repository()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if isinstance(repository, SQLiteUsuarioRepository):
            init_db(repository.database_url)
        logger.info("Usuarios API started with %s", type(repository).__name__)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        description=settings.description,
        contact={"name": settings.contact_name, "email": settings.contact_email},
        openapi_tags=TAGS_METADATA,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.state.usuario_service = UsuarioService(repository)

    app.include_router(v1_router, prefix="/api/v1")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errores = errores_por_campo(exc.errors())
        logger.info("Validation failed for %s %s: %s", request.method, request.url.path, errores)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errores)

    return app


app = create_app()
