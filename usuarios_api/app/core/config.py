"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; override them via the
environment in a real deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Documentación de la API de Usuarios")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    description: str = os.getenv(
        "API_DESCRIPTION", "API RESTFUL para gestionar los usuarios del sistema"
    )
    contact_name: str = os.getenv("CONTACT_NAME", "Desarrollador Ángel Gabriel Meneses González")
    contact_email: str = os.getenv("CONTACT_EMAIL", "angelin09ozoz@gmail.com")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "usuarios.db")

    # Which ``UsuarioRepository`` implementation backs the service:
    # ``sqlite`` (durable) or ``memory`` (process-local, lost on restart).
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8001"))


# Environment variables must be set before this module is imported.
settings = Settings()
