"""
Persistence for users.

``UsuarioRepository`` is the storage contract the service depends on.
It has no business rules beyond keeping identifiers and emails unique:

* ``SQLiteUsuarioRepository`` stores rows in the ``usuarios`` table
  created by ``core.db.init_db``.
* ``InMemoryUsuarioRepository`` keeps records in a dict for tests and
  throwaway deployments.

Both raise ``EmailDuplicadoError`` when a write would give two users
the same email (compared after ``normalizar_email``, i.e. Unicode
case folding).
"""

import logging
import sqlite3
import threading
from typing import Dict, Iterable, List, Optional

from ..core.db import get_connection
from ..core.exceptions import EmailDuplicadoError
from ..schemas.usuario import Usuario, normalizar_email

logger = logging.getLogger(__name__)


class UsuarioRepository:
    """Storage contract for ``Usuario`` records."""

    def list_all(self) -> List[Usuario]:
        raise NotImplementedError

    def find_by_id(self, usuario_id: int) -> Optional[Usuario]:
        raise NotImplementedError

    def find_by_email(self, email: str, ignore_case: bool = False) -> Optional[Usuario]:
        """Look up a user by email; exact match unless ``ignore_case``."""
        raise NotImplementedError

    def find_by_ids(self, ids: Iterable[int]) -> List[Usuario]:
        """Return the users whose id is in ``ids``; unknown ids are skipped."""
        raise NotImplementedError

    def save(self, usuario: Usuario) -> Usuario:
        """Insert ``usuario`` when it has no id, otherwise overwrite the row with that id."""
        raise NotImplementedError

    def delete_by_id(self, usuario_id: int) -> None:
        raise NotImplementedError


class SQLiteUsuarioRepository(UsuarioRepository):
    """Repository backed by the SQLite ``usuarios`` table.

    A new connection is opened per operation, so one instance can be
    shared by concurrent request handlers.
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        self.database_url = database_url

    @staticmethod
    def _to_usuario(row: sqlite3.Row) -> Usuario:
        return Usuario(id=row["id"], nombre=row["nombre"], email=row["email"], password=row["password"])

    def list_all(self) -> List[Usuario]:
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute(
                "SELECT id, nombre, email, password FROM usuarios ORDER BY id"
            ).fetchall()
            return [self._to_usuario(row) for row in rows]
        finally:
            conn.close()

    def find_by_id(self, usuario_id: int) -> Optional[Usuario]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                "SELECT id, nombre, email, password FROM usuarios WHERE id = ?",
                (usuario_id,),
            ).fetchone()
            return self._to_usuario(row) if row else None
        finally:
            conn.close()

    def find_by_email(self, email: str, ignore_case: bool = False) -> Optional[Usuario]:
        if ignore_case:
            column, value = "email_normalizado", normalizar_email(email)
        else:
            column, value = "email", email
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                f"SELECT id, nombre, email, password FROM usuarios WHERE {column} = ?",
                (value,),
            ).fetchone()
            return self._to_usuario(row) if row else None
        finally:
            conn.close()

    def find_by_ids(self, ids: Iterable[int]) -> List[Usuario]:
        ids = sorted(set(ids))
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute(
                f"SELECT id, nombre, email, password FROM usuarios WHERE id IN ({placeholders}) ORDER BY id",
                tuple(ids),
            ).fetchall()
            return [self._to_usuario(row) for row in rows]
        finally:
            conn.close()

    def save(self, usuario: Usuario) -> Usuario:
        normalizado = normalizar_email(usuario.email)
        conn = get_connection(self.database_url)
        try:
            cursor = conn.cursor()
            if usuario.id is None:
                cursor.execute(
                    "INSERT INTO usuarios (nombre, email, email_normalizado, password) VALUES (?, ?, ?, ?)",
                    (usuario.nombre, usuario.email, normalizado, usuario.password),
                )
                saved = usuario.model_copy(update={"id": cursor.lastrowid})
            else:
                cursor.execute(
                    "UPDATE usuarios SET nombre = ?, email = ?, email_normalizado = ?, password = ? WHERE id = ?",
                    (usuario.nombre, usuario.email, normalizado, usuario.password, usuario.id),
                )
                if cursor.rowcount == 0:
                    cursor.execute(
                        "INSERT INTO usuarios (id, nombre, email, email_normalizado, password) VALUES (?, ?, ?, ?, ?)",
                        (usuario.id, usuario.nombre, usuario.email, normalizado, usuario.password),
                    )
                saved = usuario.model_copy()
            conn.commit()
            return saved
        except sqlite3.IntegrityError as e:
            conn.rollback()
            logger.warning("Rejected write for email %s: %s", usuario.email, e)
            raise EmailDuplicadoError(usuario.email) from e
        finally:
            conn.close()

    def delete_by_id(self, usuario_id: int) -> None:
        conn = get_connection(self.database_url)
        try:
            conn.execute("DELETE FROM usuarios WHERE id = ?", (usuario_id,))
            conn.commit()
        finally:
            conn.close()


class InMemoryUsuarioRepository(UsuarioRepository):
    """Process-local repository; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._usuarios: Dict[int, Usuario] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def list_all(self) -> List[Usuario]:
        with self._lock:
            return [u.model_copy() for u in self._usuarios.values()]

    def find_by_id(self, usuario_id: int) -> Optional[Usuario]:
        with self._lock:
            usuario = self._usuarios.get(usuario_id)
            return usuario.model_copy() if usuario else None

    def find_by_email(self, email: str, ignore_case: bool = False) -> Optional[Usuario]:
        with self._lock:
            return self._find_by_email(email, ignore_case)

    def _find_by_email(self, email: str, ignore_case: bool) -> Optional[Usuario]:
        for usuario in self._usuarios.values():
            if usuario.email == email or (ignore_case and normalizar_email(usuario.email) == normalizar_email(email)):
                return usuario.model_copy()
        return None

    def find_by_ids(self, ids: Iterable[int]) -> List[Usuario]:
        wanted = set(ids)
        with self._lock:
            return [u.model_copy() for u in self._usuarios.values() if u.id in wanted]

    def save(self, usuario: Usuario) -> Usuario:
        with self._lock:
            existing = self._find_by_email(usuario.email, ignore_case=True)
            if existing is not None and existing.id != usuario.id:
                raise EmailDuplicadoError(usuario.email)
            if usuario.id is None:
                usuario = usuario.model_copy(update={"id": self._next_id})
            self._next_id = max(self._next_id, usuario.id + 1)
            self._usuarios[usuario.id] = usuario.model_copy()
            return usuario.model_copy()

    def delete_by_id(self, usuario_id: int) -> None:
        with self._lock:
            self._usuarios.pop(usuario_id, None)
