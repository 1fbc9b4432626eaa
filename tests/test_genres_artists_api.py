"""Tests for genre reference data and artist profiles."""

import pytest


def _genre_payload(name, description=None):
    return {"data": {"type": "genre", "attributes": {"name": name, "description": description}}}


def _artist_payload(name="Lumen", email="lumen@example.com"):
    return {"data": {"type": "artist", "attributes": {"name": name, "email": email}}}


class TestGenres:
    @pytest.mark.asyncio
    async def test_list_genres(self, client, genres):
        response = await client.get("/api/v1/genres")

        body = response.json()
        assert body["meta"]["total"] == len(genres)
        assert body["data"][0]["attributes"]["name"] == "Pop"

    @pytest.mark.asyncio
    async def test_create_genre(self, client, auth_headers):
        response = await client.post(
            "/api/v1/genres", json=_genre_payload("Shoegaze", "Wall of guitars"), headers=auth_headers
        )

        assert response.status_code == 201
        assert response.json()["data"]["attributes"]["name"] == "Shoegaze"

    @pytest.mark.asyncio
    async def test_duplicate_name_ignores_case(self, client, auth_headers, genres):
        response = await client.post("/api/v1/genres", json=_genre_payload("pop"), headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "GENRE_EXISTS"

    @pytest.mark.asyncio
    async def test_delete_unused_genre(self, client, auth_headers, genres):
        response = await client.delete(f"/api/v1/genres/{genres['Folk'].id}", headers=auth_headers)

        assert response.status_code == 204
        listing = (await client.get("/api/v1/genres")).json()
        assert "Folk" not in [g["attributes"]["name"] for g in listing["data"]]

    @pytest.mark.asyncio
    async def test_genre_in_use_cannot_be_deleted(self, client, auth_headers, single_payload, genres):
        await client.post("/api/v1/singles", json=single_payload(), headers=auth_headers)

        response = await client.delete(f"/api/v1/genres/{genres['Pop'].id}", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "GENRE_IN_USE"

    @pytest.mark.asyncio
    async def test_delete_missing_genre(self, client, auth_headers):
        response = await client.delete("/api/v1/genres/999", headers=auth_headers)

        assert response.status_code == 404


class TestArtists:
    @pytest.mark.asyncio
    async def test_create_artist_without_token(self, client):
        response = await client.post("/api/v1/artists", json=_artist_payload())

        assert response.status_code == 201
        attributes = response.json()["data"]["attributes"]
        assert attributes["name"] == "Lumen"
        assert attributes["genres"] == []
        assert attributes["popularity"] == 0

    @pytest.mark.asyncio
    async def test_email_must_be_unique(self, client, artist):
        response = await client.post("/api/v1/artists", json=_artist_payload(email=artist.email))

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "EMAIL_TAKEN"

    @pytest.mark.asyncio
    async def test_invalid_email(self, client):
        response = await client.post("/api/v1/artists", json=_artist_payload(email="not-an-email"))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_artist(self, client):
        response = await client.get("/api/v1/artists/999")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "ARTIST_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_artist_stats_total_owned_singles(self, client, auth_headers, single_payload, artist):
        created = await client.post("/api/v1/singles", json=single_payload(), headers=auth_headers)
        stat_id = created.json()["data"]["attributes"]["stat"]["id"]
        await client.patch(
            f"/api/v1/stats/{stat_id}",
            json={"data": {"type": "stat", "attributes": {"listens_count": 1000}}},
            headers=auth_headers,
        )

        response = await client.get(f"/api/v1/artists/{artist.id}/stats")

        attributes = response.json()["data"]["attributes"]
        assert attributes["artist_id"] == artist.id
        assert attributes["total_listens"] == 1000
        assert attributes["total_revenue"] == pytest.approx(3.0)
