"""
Domain errors raised by the service and repository layers.

Both derive from ``ValueError`` so callers that only care about "the
request could not be applied" can catch them together; endpoints
translate each one to its own HTTP status.
"""

MENSAJE_EMAIL_DUPLICADO = "El email ya está registrado con ese correo electrónico"
MENSAJE_USUARIO_NO_ENCONTRADO = "Usuario no encontrado"


class UsuarioNoEncontradoError(ValueError):
    """No user exists with the requested identifier."""

    def __init__(self, usuario_id: int) -> None:
        super().__init__(f"Usuario {usuario_id} no encontrado")
        self.usuario_id = usuario_id


class EmailDuplicadoError(ValueError):
    """The email already belongs to a different user."""

    def __init__(self, email: str) -> None:
        super().__init__(MENSAJE_EMAIL_DUPLICADO)
        self.email = email
