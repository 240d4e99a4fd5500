"""
Persistence layer.

Repositories hide the storage engine from the services and hold no
business logic.
"""

from .usuario_repository import (
    InMemoryUsuarioRepository,
    SQLiteUsuarioRepository,
    UsuarioRepository,
)

__all__ = [
    "InMemoryUsuarioRepository",
    "SQLiteUsuarioRepository",
    "UsuarioRepository",
]
