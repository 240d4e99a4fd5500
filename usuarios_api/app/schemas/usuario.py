"""
Pydantic models for user data.

``UsuarioIn`` is the request body for creating and updating a user and
carries all field validation: every field is required and non-blank,
and ``email`` must be a syntactically valid address.  Pydantic reports
every invalid field at once, so the API can answer with one message per
field instead of stopping at the first problem.

``Usuario`` is the stored record, returned by the API as is.  The
password travels in plain text both ways; hash it at the storage
boundary before using this service in production.
"""

from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

MENSAJE_NO_VACIO = "no debe estar vacío"
MENSAJE_EMAIL_INVALIDO = "debe ser una dirección de correo electrónico con formato correcto"

# Identifiers are signed 64-bit integers, the widest SQLite INTEGER.
ID_MIN = -(2 ** 63)
ID_MAX = 2 ** 63 - 1


def normalizar_email(email: str) -> str:
    """Key under which emails are compared: full Unicode case folding."""
    return email.casefold()


class UsuarioIn(BaseModel):
    """Schema for creating or replacing a user.

    Missing fields are validated like blank ones so that an omitted
    ``email`` yields the same message as ``"email": ""``.  The legacy
    key ``name`` is accepted in place of ``nombre``.
    """

    model_config = {"validate_default": True}

    nombre: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("nombre", "name"),
        json_schema_extra={"example": "Angel"},
    )
    email: Optional[str] = Field(None, json_schema_extra={"example": "juan.perez@example.com"})
    password: Optional[str] = Field(None, json_schema_extra={"example": "123456"})

    @field_validator("nombre", "email", "password")
    @classmethod
    def no_vacio(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise PydanticCustomError("not_blank", MENSAJE_NO_VACIO)
        return value

    @field_validator("email")
    @classmethod
    def formato_email(cls, value: str) -> str:
        # Only the syntax is checked; the address is stored exactly as sent.
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email", MENSAJE_EMAIL_INVALIDO)
        return value


class Usuario(BaseModel):
    """A stored user.  ``id`` is ``None`` until the repository saves it."""

    id: Optional[int] = Field(None, description="Identificador único del usuario", examples=[1])
    nombre: str = Field(..., description="Nombre completo del usuario", examples=["Angel"])
    email: str = Field(..., description="Correo electrónico del usuario", examples=["juan.perez@example.com"])
    password: str = Field(..., description="Contraseña del usuario", examples=["123456"])

    model_config = {
        "from_attributes": True,
    }
