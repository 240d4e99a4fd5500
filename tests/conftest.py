import pytest
from fastapi.testclient import TestClient

from usuarios_api.app.core.db import init_db
from usuarios_api.app.main import create_app
from usuarios_api.app.repositories.usuario_repository import (
    InMemoryUsuarioRepository,
    SQLiteUsuarioRepository,
)
from usuarios_api.app.schemas.usuario import UsuarioIn
from usuarios_api.app.services.usuario_service import UsuarioService


@pytest.fixture
def memory_repository():
    """Пустой репозиторий в памяти"""
    return InMemoryUsuarioRepository()


@pytest.fixture
def sqlite_repository(tmp_path):
    """Репозиторий на временном файле SQLite с применёнными миграциями"""
    database_url = str(tmp_path / "usuarios_test.db")
    init_db(database_url)
    return SQLiteUsuarioRepository(database_url)


@pytest.fixture(params=["memory", "sqlite"])
def repository(request):
    """Каждый тест с этой фикстурой выполняется на обеих реализациях хранилища"""
    return request.getfixturevalue(f"{request.param}_repository")


@pytest.fixture
def service(repository):
    return UsuarioService(repository)


@pytest.fixture(params=["memory", "sqlite"])
def client(request, memory_repository, tmp_path):
    """Тестовый клиент FastAPI на обеих реализациях хранилища.

    Для SQLite таблицы не создаются заранее: миграции применяет
    lifespan приложения при входе в TestClient.
    """
    if request.param == "memory":
        repository = memory_repository
    else:
        repository = SQLiteUsuarioRepository(str(tmp_path / "usuarios_api.db"))
    app = create_app(repository)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_usuario_data():
    return {"nombre": "Angel", "email": "angel@example.com", "password": "123456"}


@pytest.fixture
def sample_usuario_in(sample_usuario_data):
    return UsuarioIn(**sample_usuario_data)
