"""
ShareBite Backend — API Route Tests
=====================================

What:  End-to-end HTTP tests through the FastAPI app with in-memory stores
       and a token-table identity verifier.
How:   HTTPX AsyncClient over ASGITransport (see conftest.test_client).

What we test:
    ✅ Liveness and health (200 / 503)
    ✅ 401 (no / non-Bearer credential) vs 403 (bad token, not owner)
    ✅ Listing lifecycle: create → browse → update → delete
    ✅ Malformed ids and bodies → 400, absent ids → 404
    ✅ Owner lists scoped to the token, never to query parameters
    ✅ Food requests: requester from token, donor inbox
    ✅ Store failure → 500 with a generic message
    ✅ X-Request-ID correlation header, also on unexpected 500s
    ✅ Production app builds without touching the database
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import bearer
from sharebite.exceptions import StoreError
from sharebite.main import create_app
from sharebite.stores.sql import SQLListingStore, SQLRequestStore


ALICE_AUTH = bearer("token-alice")
BOB_AUTH = bearer("token-bob")


_SOME_ID = str(uuid.uuid4())

PROTECTED_ROUTES = [
    ("GET", f"/food-details/{_SOME_ID}"),
    ("GET", "/my-listings"),
    ("POST", "/all-food-data"),
    ("PUT", f"/update-food/{_SOME_ID}"),
    ("DELETE", f"/delete-food-data/{_SOME_ID}"),
    ("POST", "/food-requests"),
    ("GET", "/food-requests"),
]


def bread_listing(**extra):
    listing = {
        "foodName": "Bread",
        "foodImage": "https://img.example/bread.jpg",
        "expiryDate": "2026-11-01",
        "donor": {"email": "a@x.com", "name": "Alice"},
    }
    listing.update(extra)
    return listing


async def create_listing(client, listing=None, headers=ALICE_AUTH) -> str:
    response = await client.post("/all-food-data", json=listing or bread_listing(), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["insertedId"]


class TestLivenessAndHealth:

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "ShareBite Server is Running!"
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_health_ok(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_database_down(self, test_client, listing_store):
        listing_store.ping = AsyncMock(return_value=False)

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, test_client):
        response = await test_client.get("/my-listings")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_401(self, test_client):
        response = await test_client.get(
            "/my-listings", headers={"Authorization": "Basic YWxpY2U6c2VjcmV0"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_is_403(self, test_client):
        response = await test_client.get("/my-listings", headers=bearer("forged"))
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, path", PROTECTED_ROUTES)
    async def test_every_protected_route_separates_401_from_403(self, test_client, method, path):
        """No credential → 401 (sign in); a credential the verifier rejects → 403."""
        json_body = {} if method in ("POST", "PUT") else None

        response = await test_client.request(method, path, json=json_body)
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

        response = await test_client.request(method, path, json=json_body, headers=bearer("forged"))
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_public_routes_never_call_verifier(self, test_client, identity_verifier):
        await test_client.get("/all-food-data", headers=ALICE_AUTH)
        await test_client.get("/popular-food-data")
        await test_client.get(f"/donar-profile/{uuid.uuid4()}")
        assert identity_verifier.calls == []

    @pytest.mark.asyncio
    async def test_protected_route_verifies_every_call(self, test_client, identity_verifier):
        await test_client.get("/my-listings", headers=ALICE_AUTH)
        await test_client.get("/my-listings", headers=ALICE_AUTH)
        assert identity_verifier.calls == ["token-alice", "token-alice"]


class TestListingLifecycle:

    @pytest.mark.asyncio
    async def test_create_update_by_owner_only(self, test_client):
        """Alice lists Bread; Bob cannot rename it, Alice can, Bob sees the result."""
        listing_id = await create_listing(test_client)

        everything = (await test_client.get("/all-food-data")).json()
        assert [item["_id"] for item in everything] == [listing_id]

        response = await test_client.put(
            f"/update-food/{listing_id}", json={"foodName": "Rye"}, headers=BOB_AUTH
        )
        assert response.status_code == 403

        response = await test_client.put(
            f"/update-food/{listing_id}", json={"foodName": "Rye"}, headers=ALICE_AUTH
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Food updated"}

        response = await test_client.get(f"/food-details/{listing_id}", headers=BOB_AUTH)
        assert response.status_code == 200
        assert response.json()["foodName"] == "Rye"
        assert response.json()["donor"]["email"] == "a@x.com"

    @pytest.mark.asyncio
    async def test_create_returns_insert_ack(self, test_client):
        response = await test_client.post("/all-food-data", json=bread_listing(), headers=ALICE_AUTH)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        uuid.UUID(body["insertedId"])

    @pytest.mark.asyncio
    async def test_create_requires_token(self, test_client, listing_store):
        response = await test_client.post("/all-food-data", json=bread_listing())
        assert response.status_code == 401
        assert listing_store.listings == {}

    @pytest.mark.asyncio
    async def test_create_missing_food_name(self, test_client):
        response = await test_client.post(
            "/all-food-data", json={"donor": {"email": "a@x.com"}}, headers=ALICE_AUTH
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Food name and donor email required"

    @pytest.mark.asyncio
    async def test_create_non_string_donor_email(self, test_client, listing_store):
        response = await test_client.post(
            "/all-food-data", json=bread_listing(donor={"email": 42}), headers=ALICE_AUTH
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "donor.email"
        assert listing_store.listings == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [b'["Bread"]', b"{not json", b'"Bread"'])
    async def test_create_body_not_object(self, test_client, content):
        response = await test_client.post(
            "/all-food-data",
            content=content,
            headers={**ALICE_AUTH, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_update_cannot_transfer_ownership(self, test_client):
        listing_id = await create_listing(test_client)

        await test_client.put(
            f"/update-food/{listing_id}",
            json={"donor": {"email": "b@x.com"}, "donor.email": "b@x.com"},
            headers=ALICE_AUTH,
        )

        response = await test_client.put(
            f"/update-food/{listing_id}", json={"foodName": "Mine now"}, headers=BOB_AUTH
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_update_absent_is_404(self, test_client):
        response = await test_client.put(
            f"/update-food/{uuid.uuid4()}", json={"foodName": "Rye"}, headers=BOB_AUTH
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_update_malformed_id_is_400(self, test_client):
        response = await test_client.put(
            "/update-food/not-an-id", json={"foodName": "Rye"}, headers=ALICE_AUTH
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete(self, test_client):
        listing_id = await create_listing(test_client)

        response = await test_client.delete(f"/delete-food-data/{listing_id}", headers=BOB_AUTH)
        assert response.status_code == 403

        response = await test_client.delete(f"/delete-food-data/{listing_id}", headers=ALICE_AUTH)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Food deleted"}

        response = await test_client.get(f"/food-details/{listing_id}", headers=ALICE_AUTH)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_absent_is_404_not_403(self, test_client):
        response = await test_client.delete(f"/delete-food-data/{uuid.uuid4()}", headers=BOB_AUTH)
        assert response.status_code == 404


class TestListingReads:

    @pytest.mark.asyncio
    async def test_popular_capped_at_six(self, test_client):
        for i in range(8):
            await create_listing(test_client, bread_listing(foodName=f"Food {i}"))

        popular = (await test_client.get("/popular-food-data")).json()
        everything = (await test_client.get("/all-food-data")).json()

        assert len(popular) == 6
        assert len(everything) == 8
        assert {item["_id"] for item in popular} <= {item["_id"] for item in everything}

    @pytest.mark.asyncio
    async def test_empty_store(self, test_client):
        assert (await test_client.get("/all-food-data")).json() == []
        assert (await test_client.get("/popular-food-data")).json() == []

    @pytest.mark.asyncio
    async def test_donor_profile(self, test_client):
        listing_id = await create_listing(test_client)

        response = await test_client.get(f"/donar-profile/{listing_id}")

        assert response.status_code == 200
        assert response.json() == {"donor": {"email": "a@x.com", "name": "Alice"}}

    @pytest.mark.asyncio
    async def test_donor_profile_absent_is_null(self, test_client):
        response = await test_client.get(f"/donar-profile/{uuid.uuid4()}")
        assert response.status_code == 200
        assert response.json() == {"donor": None}

    @pytest.mark.asyncio
    async def test_donor_profile_malformed_id(self, test_client):
        response = await test_client.get("/donar-profile/12345")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_food_details_requires_token(self, test_client):
        listing_id = await create_listing(test_client)
        response = await test_client.get(f"/food-details/{listing_id}")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_food_details_errors(self, test_client):
        response = await test_client.get("/food-details/xyz", headers=ALICE_AUTH)
        assert response.status_code == 400

        response = await test_client.get(f"/food-details/{uuid.uuid4()}", headers=ALICE_AUTH)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_my_listings_ignores_email_query(self, test_client):
        await create_listing(test_client)
        await create_listing(
            test_client,
            bread_listing(foodName="Rice", donor={"email": "b@x.com", "name": "Bob"}),
            headers=BOB_AUTH,
        )

        response = await test_client.get("/my-listings?email=b@x.com", headers=ALICE_AUTH)

        assert response.status_code == 200
        assert [item["foodName"] for item in response.json()] == ["Bread"]


class TestFoodRequests:

    @pytest.mark.asyncio
    async def test_request_flow(self, test_client):
        """Bob requests Alice's bread; only Alice sees it, and it names Bob."""
        listing_id = await create_listing(test_client)

        response = await test_client.post(
            "/food-requests",
            json={
                "foodId": listing_id,
                "foodName": "Bread",
                "donorEmail": "a@x.com",
                "donorName": "Alice",
                "requesterEmail": "mallory@x.com",
                "status": "accepted",
            },
            headers=BOB_AUTH,
        )
        assert response.status_code == 201
        request_id = response.json()["insertedId"]

        inbox = (await test_client.get("/food-requests", headers=ALICE_AUTH)).json()
        assert len(inbox) == 1
        [entry] = inbox
        assert entry["_id"] == request_id
        assert entry["foodId"] == listing_id
        assert entry["requesterEmail"] == "b@x.com"
        assert entry["requesterName"] == "Bob"
        assert entry["status"] == "pending"
        assert "requestDate" in entry

        assert (await test_client.get("/food-requests", headers=BOB_AUTH)).json() == []

    @pytest.mark.asyncio
    async def test_numeric_expiry_rejected_and_inbox_stays_readable(self, test_client):
        """An epoch-millis expiryDate copied from a listing is a 400, not a poisoned inbox."""
        listing_id = await create_listing(test_client, bread_listing(expiryDate=1735689600000))

        response = await test_client.post(
            "/food-requests",
            json={"foodId": listing_id, "donorEmail": "a@x.com", "expiryDate": 1735689600000},
            headers=BOB_AUTH,
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "expiryDate"

        response = await test_client.post(
            "/food-requests",
            json={"foodId": listing_id, "donorEmail": "a@x.com", "expiryDate": "2026-11-01"},
            headers=BOB_AUTH,
        )
        assert response.status_code == 201

        response = await test_client.get("/food-requests", headers=ALICE_AUTH)
        assert response.status_code == 200
        assert [entry["expiryDate"] for entry in response.json()] == ["2026-11-01"]

    @pytest.mark.asyncio
    async def test_request_requires_token(self, test_client):
        response = await test_client.post(
            "/food-requests", json={"foodId": str(uuid.uuid4()), "donorEmail": "a@x.com"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_request_missing_donor_email(self, test_client):
        response = await test_client.post(
            "/food-requests", json={"foodId": str(uuid.uuid4())}, headers=BOB_AUTH
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Food ID and donor email required"

    @pytest.mark.asyncio
    async def test_request_malformed_food_id(self, test_client):
        response = await test_client.post(
            "/food-requests", json={"foodId": "bogus", "donorEmail": "a@x.com"}, headers=BOB_AUTH
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "foodId"


class TestErrorsAndCorrelation:

    @pytest.mark.asyncio
    async def test_store_failure_is_generic_500(self, test_client, listing_store):
        listing_store.find_all = AsyncMock(
            side_effect=StoreError(context={"operation": "listing.find_all"})
        )

        response = await test_client.get("/all-food-data")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "listing.find_all" not in response.text

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get(
            "/my-listings", headers={"X-Request-ID": "trace-456"}
        )
        assert response.json()["request_id"] == "trace-456"

    @pytest.mark.asyncio
    async def test_unexpected_error_body_carries_request_id(self, test_app, listing_store):
        """The catch-all 500 is rendered outside the request-id middleware."""
        listing_store.find_all = AsyncMock(side_effect=RuntimeError("boom"))
        transport = ASGITransport(app=test_app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/all-food-data", headers={"X-Request-ID": "trace-789"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "trace-789"
        assert "boom" not in response.text


class TestAppFactory:

    def test_default_stores_do_not_build_engine(self):
        """Building the production app needs no database until a store is used."""
        with patch("sharebite.database.get_engine") as mock_get_engine:
            app = create_app()

        assert isinstance(app.state.listing_store, SQLListingStore)
        assert isinstance(app.state.request_store, SQLRequestStore)
        mock_get_engine.assert_not_called()

    def test_default_stores_open_sessions_from_shared_factory(self):
        app = create_app()

        with patch("sharebite.main.get_session_factory") as mock_factory:
            session = app.state.listing_store._session_factory()

        mock_factory.assert_called_once_with()
        assert session is mock_factory.return_value.return_value
