"""
FastAPI dependencies shared by the endpoint modules.

The service instance is created once by ``create_app`` and kept on
``app.state``; handlers receive it through ``Depends`` so tests can
build an app around any repository.
"""

from fastapi import Request

from ..services.usuario_service import UsuarioService


def get_usuario_service(request: Request) -> UsuarioService:
    return request.app.state.usuario_service
