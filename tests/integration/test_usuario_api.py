import pytest
from fastapi.testclient import TestClient

from usuarios_api.app.main import create_app
from usuarios_api.app.repositories.usuario_repository import SQLiteUsuarioRepository

URL = "/api/v1/usuarios"


def _crear(client, nombre="Angel", email="angel@example.com", password="123456"):
    response = client.post(URL, json={"nombre": nombre, "email": email, "password": password})
    assert response.status_code == 201
    return response.json()


class TestUsuarioAPI:
    """Интеграционные тесты API пользователей"""

    def test_full_lifecycle(self, client, sample_usuario_data):
        """Создание, дубликат, чтение, обновление, удаление"""
        response = client.post(URL, json=sample_usuario_data)
        assert response.status_code == 201
        creado = response.json()
        assert isinstance(creado["id"], int)

        response = client.post(URL, json={**sample_usuario_data, "nombre": "Otro"})
        assert response.status_code == 400
        assert response.json() == {"mensaje": "El email ya está registrado con ese correo electrónico"}

        response = client.get(f"{URL}/{creado['id']}")
        assert response.status_code == 200
        assert response.json() == {**sample_usuario_data, "id": creado["id"]}

        response = client.put(f"{URL}/{creado['id']}", json={**sample_usuario_data, "nombre": "Angel Gabriel"})
        assert response.status_code == 201
        assert response.json()["nombre"] == "Angel Gabriel"
        assert response.json()["email"] == sample_usuario_data["email"]

        response = client.delete(f"{URL}/{creado['id']}")
        assert response.status_code == 204

        response = client.get(f"{URL}/{creado['id']}")
        assert response.status_code == 404

    def test_listar(self, client):
        assert client.get(URL).json() == []

        a = _crear(client, email="a@example.com")
        b = _crear(client, email="b@example.com")

        response = client.get(URL)
        assert response.status_code == 200
        assert response.json() == [a, b]

    def test_crear_accepts_name_alias(self, client):
        response = client.post(URL, json={"name": "Angel", "email": "angel@example.com", "password": "123456"})

        assert response.status_code == 201
        assert response.json()["nombre"] == "Angel"

    def test_crear_duplicate_email_other_case(self, client):
        _crear(client)

        response = client.post(URL, json={"nombre": "Otro", "email": "ANGEL@example.com", "password": "x"})

        assert response.status_code == 400
        assert "mensaje" in response.json()
        assert len(client.get(URL).json()) == 1

    def test_crear_empty_email(self, client):
        response = client.post(URL, json={"nombre": "Angel", "email": "", "password": "123456"})

        assert response.status_code == 400
        assert response.json() == {"email": "El campo email no debe estar vacío"}

    def test_crear_invalid_fields_aggregated(self, client):
        response = client.post(URL, json={"nombre": "", "email": "no-es-un-email"})

        assert response.status_code == 400
        assert response.json() == {
            "nombre": "El campo nombre no debe estar vacío",
            "email": "El campo email debe ser una dirección de correo electrónico con formato correcto",
            "password": "El campo password no debe estar vacío",
        }
        assert client.get(URL).json() == []

    def test_crear_without_body(self, client):
        response = client.post(URL)

        assert response.status_code == 400
        assert "body" in response.json()

    def test_detalle_not_found(self, client):
        response = client.get(f"{URL}/999")

        assert response.status_code == 404

    def test_detalle_invalid_id(self, client):
        response = client.get(f"{URL}/abc")

        assert response.status_code == 400
        assert response.json() == {"usuario_id": "El campo usuario_id debe ser un número entero"}

    def test_editar_not_found(self, client, sample_usuario_data):
        response = client.put(f"{URL}/999", json=sample_usuario_data)

        assert response.status_code == 404
        assert client.get(URL).json() == []

    def test_editar_validation_before_lookup(self, client):
        response = client.put(f"{URL}/999", json={"nombre": "Angel", "email": "", "password": "1"})

        assert response.status_code == 400
        assert response.json() == {"email": "El campo email no debe estar vacío"}

    def test_editar_email_of_other_user(self, client):
        _crear(client, nombre="Ana", email="ana@example.com")
        angel = _crear(client)

        response = client.put(f"{URL}/{angel['id']}", json={"nombre": "Angel", "email": "ana@example.com", "password": "1"})

        assert response.status_code == 400
        assert response.json() == {"mensaje": "El email ya está registrado con ese correo electrónico"}
        assert client.get(f"{URL}/{angel['id']}").json() == angel

    def test_editar_own_email_different_case(self, client):
        angel = _crear(client)

        response = client.put(f"{URL}/{angel['id']}", json={"nombre": "Angel", "email": "ANGEL@example.com", "password": "nuevo"})

        assert response.status_code == 201
        assert response.json() == {"id": angel["id"], "nombre": "Angel", "email": "ANGEL@example.com", "password": "nuevo"}

    def test_eliminar_not_found(self, client):
        response = client.delete(f"{URL}/999")

        assert response.status_code == 404

    @pytest.mark.parametrize("query", ["ids=1,3,99", "ids=1&ids=3&ids=99", "ids=1, 3 ,99"])
    def test_usuarios_por_curso(self, client, query):
        a = _crear(client, email="a@example.com")
        _crear(client, email="b@example.com")
        c = _crear(client, email="c@example.com")
        assert (a["id"], c["id"]) == (1, 3)

        response = client.get(f"{URL}/usuarios-por-curso?{query}")

        assert response.status_code == 200
        assert sorted(u["id"] for u in response.json()) == [1, 3]

    def test_usuarios_por_curso_invalid_id(self, client):
        response = client.get(f"{URL}/usuarios-por-curso?ids=1,x")

        assert response.status_code == 400
        assert response.json() == {"ids": "El campo ids debe ser un número entero"}

    def test_usuarios_por_curso_without_ids(self, client):
        response = client.get(f"{URL}/usuarios-por-curso")

        assert response.status_code == 400
        assert "ids" in response.json()

    def test_openapi_metadata(self, client):
        schema = client.get("/openapi.json").json()

        assert schema["info"]["title"] == "Documentación de la API de Usuarios"
        assert schema["info"]["contact"]["email"] == "angelin09ozoz@gmail.com"
        assert "/api/v1/usuarios/{usuario_id}" in schema["paths"]

    def test_crear_duplicate_email_non_ascii_case(self, client):
        _crear(client, email="Ángel@example.com")

        response = client.post(URL, json={"nombre": "Otro", "email": "ángel@example.com", "password": "x"})

        assert response.status_code == 400
        assert response.json() == {"mensaje": "El email ya está registrado con ese correo electrónico"}
        assert len(client.get(URL).json()) == 1

    def test_editar_email_of_other_user_non_ascii_case(self, client):
        _crear(client, nombre="Ñandú", email="ÑANDÚ@example.com")
        angel = _crear(client)

        response = client.put(f"{URL}/{angel['id']}", json={"nombre": "Angel", "email": "ñandú@example.com", "password": "1"})

        assert response.status_code == 400
        assert client.get(f"{URL}/{angel['id']}").json() == angel

    @pytest.mark.parametrize("usuario_id", ["99999999999999999999", "9223372036854775808", "-9223372036854775809"])
    def test_path_id_out_of_range(self, client, sample_usuario_data, usuario_id):
        esperado = {"usuario_id": "El campo usuario_id está fuera de rango"}

        response = client.get(f"{URL}/{usuario_id}")
        assert response.status_code == 400
        assert response.json() == esperado

        response = client.put(f"{URL}/{usuario_id}", json=sample_usuario_data)
        assert response.status_code == 400
        assert response.json() == esperado

        response = client.delete(f"{URL}/{usuario_id}")
        assert response.status_code == 400
        assert response.json() == esperado

    def test_path_id_largest_value_is_not_found(self, client):
        response = client.get(f"{URL}/9223372036854775807")

        assert response.status_code == 404

    def test_usuarios_por_curso_id_out_of_range(self, client):
        _crear(client)

        response = client.get(f"{URL}/usuarios-por-curso?ids=1,99999999999999999999")

        assert response.status_code == 400
        assert response.json() == {"ids": "El campo ids está fuera de rango"}


class TestStartup:
    """Тесты запуска приложения"""

    def test_sqlite_migrations_applied_on_startup(self, tmp_path):
        repository = SQLiteUsuarioRepository(str(tmp_path / "arranque.db"))
        app = create_app(repository)

        with TestClient(app) as client:
            assert client.get(URL).json() == []

        assert repository.list_all() == []
