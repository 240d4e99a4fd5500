"""
User endpoints for API v1.

CRUD over users plus a bulk lookup by ids used by the courses service
(``/usuarios-por-curso``).  Field validation errors and duplicate
emails answer 400, unknown ids answer 404.  ``PUT`` answers 201 rather
than 200; clients already depend on that status.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from usuarios_api.app.api.deps import get_usuario_service
from usuarios_api.app.core.exceptions import (
    MENSAJE_USUARIO_NO_ENCONTRADO,
    EmailDuplicadoError,
    UsuarioNoEncontradoError,
)
from usuarios_api.app.schemas.usuario import ID_MAX, ID_MIN, Usuario, UsuarioIn
from usuarios_api.app.services.usuario_service import UsuarioService


router = APIRouter()


EJEMPLO_USUARIO_OBTENIDO = {
    "id": 1,
    "nombre": "Angel",
    "email": "juan.perez@example.com",
    "password": "123456",
}
EJEMPLO_USUARIO_NO_ENCONTRADO = {"detail": MENSAJE_USUARIO_NO_ENCONTRADO}
EJEMPLO_VALIDACION = {"email": "El campo email no debe estar vacío"}
EJEMPLO_EMAIL_DUPLICADO = {"mensaje": "El email ya está registrado con ese correo electrónico"}

RESPUESTA_400 = {
    "description": "Solicitud inválida",
    "content": {
        "application/json": {
            "examples": {
                "validacion": {"summary": "Campos inválidos", "value": EJEMPLO_VALIDACION},
                "email_duplicado": {"summary": "Email ya registrado", "value": EJEMPLO_EMAIL_DUPLICADO},
            }
        }
    },
}
RESPUESTA_404 = {
    "description": "Usuario no encontrado",
    "content": {"application/json": {"example": EJEMPLO_USUARIO_NO_ENCONTRADO}},
}

# Ids outside the signed 64-bit range cannot exist in storage.
UsuarioId = Annotated[int, Path(ge=ID_MIN, le=ID_MAX, description="Identificador del usuario")]


def _email_duplicado(error: EmailDuplicadoError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"mensaje": str(error)})


def _parse_ids(raw: List[str]) -> List[int]:
    """Accept ``ids=1,2,3`` as well as ``ids=1&ids=2``."""
    ids = []
    for chunk in raw:
        for part in chunk.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                value = int(part)
            except ValueError:
                raise RequestValidationError(
                    [{"loc": ("query", "ids"), "msg": "debe ser un número entero", "type": "int_parsing", "input": part}]
                )
            if not ID_MIN <= value <= ID_MAX:
                raise RequestValidationError(
                    [{"loc": ("query", "ids"), "msg": "está fuera de rango", "type": "out_of_range", "input": part}]
                )
            ids.append(value)
    return ids


@router.get(
    "",
    response_model=List[Usuario],
    summary="Obtener todos los usuarios",
    description="Devuelve una lista con todos los usuarios registrados",
)
async def listar(service: UsuarioService = Depends(get_usuario_service)) -> List[Usuario]:
    return await service.listar()


@router.get(
    "/usuarios-por-curso",
    response_model=List[Usuario],
    summary="Obtener todos los usuarios por curso",
    description="Devuelve una lista de usuarios por curso",
)
async def obtener_usuarios_por_curso(
    ids: List[str] = Query(..., description="Identificadores separados por comas"),
    service: UsuarioService = Depends(get_usuario_service),
) -> List[Usuario]:
    """Return the users with the given ids.  Unknown ids are left out."""
    return await service.listar_por_ids(_parse_ids(ids))


@router.get(
    "/{usuario_id}",
    response_model=Usuario,
    summary="Obtener un usuario por su ID",
    description="Devuelve un usuario por su ID",
    responses={
        200: {
            "description": "Usuario obtenido correctamente",
            "content": {"application/json": {"example": EJEMPLO_USUARIO_OBTENIDO}},
        },
        404: RESPUESTA_404,
    },
)
async def detalle(usuario_id: UsuarioId, service: UsuarioService = Depends(get_usuario_service)) -> Usuario:
    usuario = await service.obtener_por_id(usuario_id)
    if usuario is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=MENSAJE_USUARIO_NO_ENCONTRADO)
    return usuario


@router.post(
    "",
    response_model=Usuario,
    status_code=status.HTTP_201_CREATED,
    summary="Crear un nuevo usuario",
    description="Crea un nuevo usuario en la base de datos",
    responses={400: RESPUESTA_400},
)
async def crear(datos: UsuarioIn, service: UsuarioService = Depends(get_usuario_service)):
    try:
        return await service.crear(datos)
    except EmailDuplicadoError as e:
        return _email_duplicado(e)


@router.put(
    "/{usuario_id}",
    response_model=Usuario,
    status_code=status.HTTP_201_CREATED,
    summary="Actualizar usuario",
    description="Permite actualizar los datos de un usuario existente por su ID",
    responses={400: RESPUESTA_400, 404: RESPUESTA_404},
)
async def editar(
    usuario_id: UsuarioId,
    datos: UsuarioIn,
    service: UsuarioService = Depends(get_usuario_service),
):
    try:
        return await service.actualizar(usuario_id, datos)
    except UsuarioNoEncontradoError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=MENSAJE_USUARIO_NO_ENCONTRADO)
    except EmailDuplicadoError as e:
        return _email_duplicado(e)


@router.delete(
    "/{usuario_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar un usuario",
    description="Elimina un usuario por su ID",
    responses={404: RESPUESTA_404},
)
async def eliminar(usuario_id: UsuarioId, service: UsuarioService = Depends(get_usuario_service)) -> None:
    if await service.obtener_por_id(usuario_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=MENSAJE_USUARIO_NO_ENCONTRADO)
    await service.eliminar(usuario_id)
    return None
