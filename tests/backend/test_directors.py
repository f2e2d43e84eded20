from datetime import datetime

import pytest

from core.models import Director
from core.security import verify_password

NEW_DIRECTOR = {
    "name": "Сергей",
    "login": "sergey",
    "password": "secret-1",
    "cities": ["Москва", "Тула"],
}


class TestListDirectors:
    @pytest.mark.asyncio
    async def test_newest_first(self, api_client, make_director):
        older = make_director(login="old", created_at=datetime(2024, 1, 1))
        newer = make_director(login="new", created_at=datetime(2024, 2, 1))

        response = await api_client.get("/api/admin/directors")

        assert [d["id"] for d in response.json()["directors"]] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_password_hash_not_exposed(self, api_client, make_director):
        director = make_director()

        listed = await api_client.get("/api/admin/directors")
        single = await api_client.get(f"/api/admin/directors/{director.id}")

        assert "password_hash" not in listed.json()["directors"][0]
        assert "password_hash" not in single.json()
        assert "password" not in single.json()

    @pytest.mark.asyncio
    async def test_missing_is_404(self, api_client):
        response = await api_client.get("/api/admin/directors/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Director not found"


class TestCreateDirector:
    @pytest.mark.asyncio
    async def test_create_hashes_password(self, api_client, test_session):
        response = await api_client.post("/api/admin/directors", json=NEW_DIRECTOR)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Director created"
        assert body["director"]["login"] == "sergey"
        assert body["director"]["cities"] == ["Москва", "Тула"]

        stored = test_session.get(Director, body["director"]["id"])
        assert stored.password_hash != "secret-1"
        assert verify_password("secret-1", stored.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_login_rejected(self, api_client, make_director):
        make_director(login="sergey")

        response = await api_client.post("/api/admin/directors", json=NEW_DIRECTOR)

        assert response.status_code == 400
        assert response.json()["detail"] == "Director with this login already exists"

    @pytest.mark.asyncio
    async def test_city_required(self, api_client):
        response = await api_client.post(
            "/api/admin/directors", json={**NEW_DIRECTOR, "cities": []}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "At least one city is required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "login", "password"])
    async def test_required_fields(self, api_client, missing):
        payload = {k: v for k, v in NEW_DIRECTOR.items() if k != missing}

        response = await api_client.post("/api/admin/directors", json=payload)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_password_longer_than_hash_input_rejected(self, api_client):
        response = await api_client.post(
            "/api/admin/directors", json={**NEW_DIRECTOR, "password": "п" * 40}
        )

        assert response.status_code == 422


class TestUpdateDirector:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, api_client, make_director):
        director = make_director(note="старая заметка", tg_id="42")

        response = await api_client.put(
            f"/api/admin/directors/{director.id}", json={"name": "Сергей Иванович"}
        )

        body = response.json()["director"]
        assert body["name"] == "Сергей Иванович"
        assert body["cities"] == ["Москва"]
        assert body["note"] == "старая заметка"
        assert body["tg_id"] == "42"

    @pytest.mark.asyncio
    async def test_explicit_null_clears_note(self, api_client, make_director):
        director = make_director(note="старая заметка")

        response = await api_client.put(f"/api/admin/directors/{director.id}", json={"note": None})

        assert response.json()["director"]["note"] is None

    @pytest.mark.asyncio
    async def test_password_change(self, api_client, make_director, test_session):
        director = make_director()

        await api_client.put(f"/api/admin/directors/{director.id}", json={"password": "new-pass"})

        test_session.expire_all()
        assert verify_password("new-pass", test_session.get(Director, director.id).password_hash)

    @pytest.mark.asyncio
    async def test_empty_cities_rejected(self, api_client, make_director):
        director = make_director()

        response = await api_client.put(f"/api/admin/directors/{director.id}", json={"cities": []})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_is_404(self, api_client):
        response = await api_client.put("/api/admin/directors/999", json={"name": "X"})

        assert response.status_code == 404


class TestDeleteDirector:
    @pytest.mark.asyncio
    async def test_delete(self, api_client, make_director):
        director = make_director()

        response = await api_client.delete(f"/api/admin/directors/{director.id}")

        assert response.json() == {"message": "Director deleted"}
        assert (await api_client.get(f"/api/admin/directors/{director.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_missing_is_404(self, api_client):
        response = await api_client.delete("/api/admin/directors/999")

        assert response.status_code == 404


class TestDirectorCaching:
    @pytest.mark.asyncio
    async def test_create_then_list_sees_new_director(self, api_client, warm):
        before = await warm(api_client, "/api/admin/directors")
        assert before.json()["directors"] == []

        await api_client.post("/api/admin/directors", json=NEW_DIRECTOR)

        after = await api_client.get("/api/admin/directors")
        assert [d["login"] for d in after.json()["directors"]] == ["sergey"]

    @pytest.mark.asyncio
    async def test_director_write_keeps_order_cache(self, api_client, warm, fake_redis):
        await warm(api_client, "/api/orders")

        await api_client.post("/api/admin/directors", json=NEW_DIRECTOR)

        assert "cache:/api/orders:{}" in fake_redis.data
