"""Tests for artist profile updates, listing and comparison."""

import pytest
import pytest_asyncio


def _profile_payload(**attributes):
    return {"data": {"type": "artist", "attributes": attributes}}


@pytest_asyncio.fixture
async def ranked_artists(db_session, genres, artist, featured_artist, other_artist):
    """Three artists with derived genres, popularity and locations."""
    artist.genres = [genres["Pop"].id, genres["Rock"].id]
    artist.popularity = 500
    artist.location = {"country": "France", "city": "Paris"}
    featured_artist.genres = [genres["Rock"].id]
    featured_artist.popularity = 9000
    featured_artist.location = {"country": "Canada", "city": "Montreal"}
    other_artist.popularity = 100
    await db_session.commit()
    return artist, featured_artist, other_artist


def _names(response):
    return [item["attributes"]["name"] for item in response.json()["data"]]


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_update_own_profile(self, client, auth_headers, artist):
        response = await client.patch(
            "/api/v1/artists/me",
            json=_profile_payload(
                biography="Synth pop from the coast",
                social_links={"instagram": "https://instagram.com/nova"},
                location={"country": "France", "city": "Saint-Malo"},
            ),
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["id"] == str(artist.id)
        attributes = body["data"]["attributes"]
        assert attributes["biography"] == "Synth pop from the coast"
        assert attributes["social_links"] == {"instagram": "https://instagram.com/nova"}
        assert attributes["location"] == {"country": "France", "city": "Saint-Malo"}
        assert "warnings" not in body["meta"]

    @pytest.mark.asyncio
    async def test_derived_fields_become_warnings(self, client, auth_headers, genres):
        response = await client.patch(
            "/api/v1/artists/me",
            json=_profile_payload(
                biography="New bio",
                genres=[genres["Jazz"].id],
                popularity=1000000,
            ),
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["attributes"]["biography"] == "New bio"
        assert body["data"]["attributes"]["genres"] == []
        assert body["data"]["attributes"]["popularity"] == 0
        warnings = body["meta"]["warnings"]
        assert [w["field"] for w in warnings] == ["genres", "popularity"]
        assert all(w["code"] == "FIELD_NOT_MODIFIABLE" for w in warnings)

    @pytest.mark.asyncio
    async def test_omitted_fields_are_kept(self, client, auth_headers, artist):
        await client.patch(
            "/api/v1/artists/me", json=_profile_payload(biography="First"), headers=auth_headers
        )

        response = await client.patch(
            "/api/v1/artists/me",
            json=_profile_payload(location={"country": "Japan", "city": "Osaka"}),
            headers=auth_headers,
        )

        attributes = response.json()["data"]["attributes"]
        assert attributes["biography"] == "First"
        assert attributes["location"]["city"] == "Osaka"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("attributes", [
        {"biography": "x" * 1001},
        {"social_links": {"site": "not a url"}},
        {"location": {"country": "F", "city": "Paris"}},
        {"location": {"country": "France", "city": "Paris 11"}},
        {"location": {"country": "Fr4nce", "city": "Paris"}},
    ])
    async def test_invalid_profile_is_rejected(self, client, auth_headers, artist, attributes):
        response = await client.patch(
            "/api/v1/artists/me", json=_profile_payload(**attributes), headers=auth_headers
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_requires_token(self, client, artist):
        response = await client.patch("/api/v1/artists/me", json=_profile_payload(biography="Anon"))

        assert response.status_code == 401


class TestListArtists:
    @pytest.mark.asyncio
    async def test_newest_first_by_default(self, client, ranked_artists):
        response = await client.get("/api/v1/artists")

        assert response.status_code == 200
        assert _names(response) == ["Rue", "Kai", "Nova"]
        assert response.json()["meta"]["pagination"]["total_items"] == 3

    @pytest.mark.asyncio
    async def test_filter_by_genre(self, client, ranked_artists, genres):
        response = await client.get(f"/api/v1/artists?genre_id={genres['Rock'].id}&sort_by=name")

        assert _names(response) == ["Kai", "Nova"]

    @pytest.mark.asyncio
    async def test_filter_by_genre_without_match(self, client, ranked_artists, genres):
        response = await client.get(f"/api/v1/artists?genre_id={genres['Jazz'].id}")

        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_filter_by_partial_name(self, client, ranked_artists):
        response = await client.get("/api/v1/artists?name=OV")

        assert _names(response) == ["Nova"]

    @pytest.mark.asyncio
    async def test_filter_by_location(self, client, ranked_artists):
        by_country = await client.get("/api/v1/artists?country=can")
        by_city = await client.get("/api/v1/artists?city=paris")

        assert _names(by_country) == ["Kai"]
        assert _names(by_city) == ["Nova"]

    @pytest.mark.asyncio
    async def test_sort_by_popularity(self, client, ranked_artists):
        response = await client.get("/api/v1/artists?sort_by=popularity&sort_order=desc")

        assert _names(response) == ["Kai", "Nova", "Rue"]

    @pytest.mark.asyncio
    async def test_sort_by_name(self, client, ranked_artists):
        response = await client.get("/api/v1/artists?sort_by=name")

        assert _names(response) == ["Kai", "Nova", "Rue"]

    @pytest.mark.asyncio
    async def test_pagination(self, client, ranked_artists):
        response = await client.get("/api/v1/artists?sort_by=name&page=2&per_page=2")

        body = response.json()
        assert _names(response) == ["Rue"]
        pagination = body["meta"]["pagination"]
        assert pagination["total_items"] == 3
        assert pagination["total_pages"] == 2
        assert pagination["has_prev"] is True
        assert pagination["has_next"] is False

    @pytest.mark.asyncio
    async def test_genre_names_follow_rank(self, client, ranked_artists):
        response = await client.get("/api/v1/artists?name=nova")

        assert response.json()["data"][0]["attributes"]["genre_names"] == ["Pop", "Rock"]


class TestCompareArtists:
    @pytest.mark.asyncio
    async def test_compare_in_requested_order(self, client, ranked_artists):
        artist, featured_artist, _ = ranked_artists

        response = await client.get(f"/api/v1/artists/compare?ids={featured_artist.id},{artist.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [item["id"] for item in data] == [str(featured_artist.id), str(artist.id)]
        assert data[0]["attributes"] == {
            "name": "Kai",
            "genres": [ranked_artists[1].genres[0]],
            "genre_names": ["Rock"],
            "popularity": 9000,
        }
        assert data[1]["attributes"]["genre_names"] == ["Pop", "Rock"]

    @pytest.mark.asyncio
    async def test_missing_artist_fails_the_comparison(self, client, ranked_artists):
        artist, _, _ = ranked_artists

        response = await client.get(f"/api/v1/artists/compare?ids={artist.id},999,998")

        assert response.status_code == 404
        error = response.json()["errors"][0]
        assert error["code"] == "ARTISTS_NOT_FOUND"
        assert error["meta"]["missing_artist_ids"] == [998, 999]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ids", ["1,a", "1,,2", ""])
    async def test_ids_must_be_comma_separated_numbers(self, client, ids):
        response = await client.get(f"/api/v1/artists/compare?ids={ids}")

        assert response.status_code == 422
