"""
Business logic for users.

``UsuarioService`` is the only consumer of a ``UsuarioRepository``.
It owns the email uniqueness rules for creation and update; field
validation has already happened in ``UsuarioIn`` by the time a payload
reaches it.

Emails are compared case-insensitively everywhere, with full Unicode
folding: ``Ana@x.com``, ``ana@x.com`` and ``ANA@X.COM`` are the same
address, and so are ``Ángel@x.com`` and ``ángel@x.com``.

The duplicate check and the write are two separate repository calls,
so concurrent requests can race past the check; the repository's own
uniqueness guard then raises the same ``EmailDuplicadoError``.
"""

import logging
from typing import Iterable, List, Optional

from ..core.exceptions import EmailDuplicadoError, UsuarioNoEncontradoError
from ..repositories.usuario_repository import UsuarioRepository
from ..schemas.usuario import Usuario, UsuarioIn, normalizar_email

logger = logging.getLogger(__name__)


class UsuarioService:
    """Сервис для работы с пользователями поверх внедрённого репозитория."""

    def __init__(self, repository: UsuarioRepository) -> None:
        self.repository = repository

    async def listar(self) -> List[Usuario]:
        return self.repository.list_all()

    async def obtener_por_id(self, usuario_id: int) -> Optional[Usuario]:
        return self.repository.find_by_id(usuario_id)

    async def obtener_por_email(self, email: str) -> Optional[Usuario]:
        return self.repository.find_by_email(email, ignore_case=True)

    async def existe_por_email(self, email: str) -> bool:
        return await self.obtener_por_email(email) is not None

    async def listar_por_ids(self, ids: Iterable[int]) -> List[Usuario]:
        """Return the users with the given ids; unknown ids are simply absent."""
        return self.repository.find_by_ids(set(ids))

    async def guardar(self, usuario: Usuario) -> Usuario:
        return self.repository.save(usuario)

    async def eliminar(self, usuario_id: int) -> None:
        """Delete a user.  Deleting an unknown id is a no-op."""
        self.repository.delete_by_id(usuario_id)
        logger.info("Deleted user %s", usuario_id)

    async def crear(self, datos: UsuarioIn) -> Usuario:
        """Register a new user.

        Raises ``EmailDuplicadoError`` if the email is already in use,
        in which case nothing is stored.
        """
        if datos.email and await self.existe_por_email(datos.email):
            logger.warning("Rejected registration: email %s already registered", datos.email)
            raise EmailDuplicadoError(datos.email)
        usuario = await self.guardar(
            Usuario(nombre=datos.nombre, email=datos.email, password=datos.password)
        )
        logger.info("Registered user %s (%s)", usuario.id, usuario.email)
        return usuario

    async def actualizar(self, usuario_id: int, datos: UsuarioIn) -> Usuario:
        """Overwrite name, email and password of an existing user.

        Raises ``UsuarioNoEncontradoError`` for an unknown id and
        ``EmailDuplicadoError`` when the new email belongs to someone
        else.  Keeping one's own email (in any letter case) is allowed.
        """
        usuario_db = await self.obtener_por_id(usuario_id)
        if usuario_db is None:
            raise UsuarioNoEncontradoError(usuario_id)

        if datos.email and normalizar_email(datos.email) != normalizar_email(usuario_db.email):
            otro = await self.obtener_por_email(datos.email)
            if otro is not None and otro.id != usuario_id:
                logger.warning(
                    "Rejected update of user %s: email %s belongs to user %s",
                    usuario_id, datos.email, otro.id,
                )
                raise EmailDuplicadoError(datos.email)

        usuario_db.nombre = datos.nombre
        usuario_db.email = datos.email
        usuario_db.password = datos.password
        usuario = await self.guardar(usuario_db)
        logger.info("Updated user %s", usuario_id)
        return usuario
