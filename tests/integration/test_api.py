"""
Integration tests for the API layer.

Repositories are replaced through dependency_overrides, so the tests need
neither a database nor a message broker. Principals are resolved from the
X-Account-Id header against the mocked account repository.
"""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import (
    get_account_repo,
    get_event_publisher,
    get_inquiry_repo,
    get_listing_repo,
    get_session,
)
from src.api.main import app
from src.application.interfaces.listing_repository import ListingSummary
from src.domain.entities.account import Account
from src.domain.entities.inquiry import Inquiry
from src.domain.entities.listing import Listing
from src.domain.enums.inquiry_status import InquiryStatus
from src.domain.enums.role import Role
from src.infrastructure.messaging.noop_publisher import NoOpEventPublisher
from tests.factories import make_account, make_listing


def _headers(account: Account) -> dict[str, str]:
    return {"X-Account-Id": str(account.id)}


def _account_repo(*accounts: Account) -> MagicMock:
    by_id = {a.id: a for a in accounts}
    admins = [a for a in accounts if a.role is Role.ADMIN and a.active]
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=lambda account_id: by_id.get(account_id))
    repo.set_favorites = AsyncMock(return_value=True)
    repo.find_first_admin = AsyncMock(return_value=admins[0] if admins else None)
    return repo


def _listing_repo(listing: Listing | None = None) -> MagicMock:
    repo = MagicMock()
    repo.add = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=listing)
    repo.get_many = AsyncMock(return_value=[listing] if listing else [])
    repo.find = AsyncMock(return_value=([listing] if listing else [], 1 if listing else 0))
    repo.update = AsyncMock(return_value=True)
    repo.delete = AsyncMock(return_value=True)
    repo.summarize = AsyncMock(return_value=ListingSummary())
    return repo


def _inquiry_repo(inquiry: Inquiry | None = None) -> MagicMock:
    repo = MagicMock()
    repo.add = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=inquiry)
    repo.list_for_listing = AsyncMock(return_value=[inquiry] if inquiry else [])
    repo.list_for_requester = AsyncMock(return_value=[inquiry] if inquiry else [])
    repo.update = AsyncMock(return_value=True)
    repo.delete = AsyncMock(return_value=inquiry is not None)
    return repo


@pytest.fixture()
def client():
    app.dependency_overrides[get_event_publisher] = NoOpEventPublisher
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def admin() -> Account:
    return make_account(Role.ADMIN)


@pytest.fixture()
def agent() -> Account:
    return make_account(Role.AGENT)


@pytest.fixture()
def buyer() -> Account:
    return make_account(Role.USER)


def _use(
    accounts: MagicMock,
    listings: MagicMock | None = None,
    inquiries: MagicMock | None = None,
) -> None:
    app.dependency_overrides[get_account_repo] = lambda: accounts
    app.dependency_overrides[get_listing_repo] = lambda: listings or _listing_repo()
    app.dependency_overrides[get_inquiry_repo] = lambda: inquiries or _inquiry_repo()


def _create_body(**overrides) -> dict:  # type: ignore[no-untyped-def, type-arg]
    body = {
        "title": "Sunny bungalow",
        "description": "Two bedrooms close to the park.",
        "address": {"street": "12 Oak St", "city": "Austin", "state": "TX", "zip_code": "78701"},
        "property_type": "house",
        "price": 250000,
        "size": 1200,
        "bedrooms": 2,
        "bathrooms": 1.5,
        "images": [{"url": "front.jpg"}],
    }
    body.update(overrides)
    return body


class TestHealth:
    def test_reports_connected_database(self, client: TestClient) -> None:
        session = MagicMock()
        session.execute = AsyncMock()

        async def _session():  # type: ignore[no-untyped-def]
            yield session

        app.dependency_overrides[get_session] = _session

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}


class TestAuthentication:
    def test_missing_header(self, client: TestClient) -> None:
        _use(_account_repo())

        response = client.post("/listings", json=_create_body())

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.json()["error"] == "authentication_error"

    def test_malformed_header(self, client: TestClient) -> None:
        _use(_account_repo())

        response = client.get("/favorites", headers={"X-Account-Id": "not-a-uuid"})

        assert response.status_code == 401

    def test_unknown_account(self, client: TestClient, agent: Account) -> None:
        _use(_account_repo())

        response = client.get("/favorites", headers=_headers(agent))

        assert response.status_code == 401

    def test_inactive_account(self, client: TestClient) -> None:
        retired = make_account(Role.AGENT, active=False)
        _use(_account_repo(retired))

        response = client.post("/listings", json=_create_body(), headers=_headers(retired))

        assert response.status_code == 401


class TestListingReads:
    def test_anonymous_list_is_published_only(self, client: TestClient, admin: Account) -> None:
        listing = make_listing(admin.to_principal())
        listings = _listing_repo(listing)
        _use(_account_repo(admin), listings)

        response = client.get("/listings", params={"city": "austin", "min_price": "100000"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["listings"][0]["id"] == str(listing.id)
        assert (body["has_next"], body["has_prev"]) == (False, False)
        [query] = listings.find.await_args.args
        assert query.published is True
        assert query.city == "austin"
        assert query.min_price == Decimal("100000")

    def test_invalid_page_is_validation_error(self, client: TestClient) -> None:
        _use(_account_repo())

        response = client.get("/listings", params={"page": 0})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_unknown_sort_field(self, client: TestClient) -> None:
        _use(_account_repo())

        response = client.get("/listings", params={"sort": "-secret"})

        assert response.status_code == 422

    def test_detail_of_published_listing(self, client: TestClient, admin: Account) -> None:
        listing = make_listing(admin.to_principal(), images=[{"url": "porch.jpg"}])
        listings = _listing_repo(listing)
        _use(_account_repo(admin), listings)

        response = client.get(f"/listings/{listing.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["views"] == 1
        assert body["publication_state"] == "published"
        assert body["images"][0]["url"].endswith("/uploads/porch.jpg")
        assert body["images"][0]["url"].startswith("http")
        listings.update.assert_awaited_once_with(listing.id, {"views": 1})

    def test_detail_of_unpublished_listing_is_forbidden(
        self, client: TestClient, agent: Account, buyer: Account
    ) -> None:
        listing = make_listing(agent.to_principal())
        _use(_account_repo(agent, buyer), _listing_repo(listing))

        anonymous = client.get(f"/listings/{listing.id}")
        as_buyer = client.get(f"/listings/{listing.id}", headers=_headers(buyer))
        as_owner = client.get(f"/listings/{listing.id}", headers=_headers(agent))

        assert anonymous.status_code == 403
        assert anonymous.json()["error"] == "authorization_error"
        assert as_buyer.status_code == 403
        assert as_owner.status_code == 200

    def test_missing_listing(self, client: TestClient) -> None:
        _use(_account_repo(), _listing_repo(None))

        response = client.get(f"/listings/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_featured(self, client: TestClient, admin: Account) -> None:
        listings = _listing_repo(make_listing(admin.to_principal(), featured=True))
        _use(_account_repo(admin), listings)

        response = client.get("/listings/featured")

        assert response.status_code == 200
        assert len(response.json()) == 1
        [query] = listings.find.await_args.args
        assert (query.featured, query.published, query.limit) == (True, True, 6)

    def test_pending_queue_needs_admin(
        self, client: TestClient, admin: Account, agent: Account
    ) -> None:
        _use(_account_repo(admin, agent))

        assert client.get("/listings/pending", headers=_headers(agent)).status_code == 403
        assert client.get("/listings/pending", headers=_headers(admin)).status_code == 200

    def test_stats_for_agent_are_scoped(self, client: TestClient, agent: Account) -> None:
        listings = _listing_repo()
        listings.summarize = AsyncMock(
            return_value=ListingSummary(total=2, published=1, pending=1, rejected=0)
        )
        _use(_account_repo(agent), listings)

        response = client.get("/listings/stats", headers=_headers(agent))

        assert response.status_code == 200
        assert response.json()["total"] == 2
        listings.summarize.assert_awaited_once_with(owner_id=agent.id)


class TestListingWrites:
    def test_agent_creates_pending_listing(self, client: TestClient, agent: Account) -> None:
        listings = _listing_repo()
        _use(_account_repo(agent), listings)

        response = client.post("/listings", json=_create_body(), headers=_headers(agent))

        assert response.status_code == 201
        body = response.json()
        assert body["published"] is False
        assert body["approved"] is False
        assert body["owner_id"] == str(agent.id)
        assert Decimal(body["price"]) == Decimal("250000")
        assert body["images"][0]["public_id"].startswith("temp_")
        listings.add.assert_awaited_once()

    def test_user_cannot_create(self, client: TestClient, buyer: Account) -> None:
        _use(_account_repo(buyer))

        response = client.post("/listings", json=_create_body(), headers=_headers(buyer))

        assert response.status_code == 403

    def test_create_rejects_unknown_fields(self, client: TestClient, agent: Account) -> None:
        _use(_account_repo(agent))

        response = client.post(
            "/listings", json=_create_body(approved=True), headers=_headers(agent)
        )

        assert response.status_code == 422

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": "123456789012345"},
            {"price": "100.125"},
            {"bathrooms": "1000"},
            {"bathrooms": "1.25"},
            {"bedrooms": 2**31},
            {"address": {"street": "x" * 257, "city": "Austin", "state": "TX", "zip_code": "1"}},
            {"address": {"street": "1 Elm", "city": "Austin", "state": "TX", "zip_code": "9" * 33}},
        ],
    )
    def test_create_rejects_values_beyond_column_bounds(
        self, client: TestClient, agent: Account, overrides: dict  # type: ignore[type-arg]
    ) -> None:
        listings = _listing_repo()
        _use(_account_repo(agent), listings)

        response = client.post(
            "/listings", json=_create_body(**overrides), headers=_headers(agent)
        )

        assert response.status_code == 422
        listings.add.assert_not_awaited()

    def test_update_rejects_oversized_city(self, client: TestClient, agent: Account) -> None:
        listing = make_listing(agent.to_principal())
        listings = _listing_repo(listing)
        _use(_account_repo(agent), listings)

        response = client.put(
            f"/listings/{listing.id}",
            json={"address": {"city": "c" * 129}},
            headers=_headers(agent),
        )

        assert response.status_code == 422
        listings.update.assert_not_awaited()

    def test_create_domain_validation_uses_error_envelope(
        self, client: TestClient, agent: Account
    ) -> None:
        _use(_account_repo(agent))

        response = client.post("/listings", json=_create_body(title=""), headers=_headers(agent))

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_agent_update_unpublishes(self, client: TestClient, agent: Account) -> None:
        listing = make_listing(agent.to_principal())
        listing.published = listing.approved = True
        listings = _listing_repo(listing)
        _use(_account_repo(agent), listings)

        response = client.put(
            f"/listings/{listing.id}",
            json={"price": 260000, "published": True},
            headers=_headers(agent),
        )

        assert response.status_code == 200
        assert response.json()["published"] is False
        assert response.json()["approved"] is True
        _, patch = listings.update.await_args.args
        assert set(patch) >= {"price", "published", "updated_at"}
        assert "title" not in patch

    def test_update_rejects_protected_fields(self, client: TestClient, agent: Account) -> None:
        listing = make_listing(agent.to_principal())
        _use(_account_repo(agent), _listing_repo(listing))

        response = client.put(
            f"/listings/{listing.id}", json={"approved": True}, headers=_headers(agent)
        )

        assert response.status_code == 422

    def test_approve_requires_admin(
        self, client: TestClient, admin: Account, agent: Account
    ) -> None:
        listing = make_listing(agent.to_principal())
        _use(_account_repo(admin, agent), _listing_repo(listing))

        as_owner = client.put(f"/listings/{listing.id}/approve", headers=_headers(agent))
        as_admin = client.put(f"/listings/{listing.id}/approve", headers=_headers(admin))

        assert as_owner.status_code == 403
        assert as_admin.status_code == 200
        assert as_admin.json()["published"] is True
        assert as_admin.json()["rejection_reason"] is None

    def test_reject_with_and_without_reason(
        self, client: TestClient, admin: Account, agent: Account
    ) -> None:
        listing = make_listing(agent.to_principal())
        _use(_account_repo(admin, agent), _listing_repo(listing))

        with_reason = client.put(
            f"/listings/{listing.id}/reject",
            json={"reason": "Missing floor plan"},
            headers=_headers(admin),
        )
        assert with_reason.status_code == 200
        assert with_reason.json()["rejection_reason"] == "Missing floor plan"
        assert with_reason.json()["publication_state"] == "rejected"

        without_reason = client.put(f"/listings/{listing.id}/reject", headers=_headers(admin))
        assert without_reason.status_code == 200
        assert without_reason.json()["rejection_reason"] is None
        assert without_reason.json()["approved"] is False

    def test_review_needs_decision(self, client: TestClient, admin: Account) -> None:
        listing = make_listing()
        _use(_account_repo(admin), _listing_repo(listing))

        response = client.put(f"/listings/{listing.id}/review", json={}, headers=_headers(admin))

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_delete_by_stranger_and_owner(
        self, client: TestClient, agent: Account
    ) -> None:
        stranger = make_account(Role.AGENT)
        listing = make_listing(agent.to_principal())
        listings = _listing_repo(listing)
        _use(_account_repo(agent, stranger), listings)

        assert client.delete(f"/listings/{listing.id}", headers=_headers(stranger)).status_code == 403
        listings.delete.assert_not_awaited()

        response = client.delete(f"/listings/{listing.id}", headers=_headers(agent))
        assert response.status_code == 200
        assert response.json()["success"] is True
        listings.delete.assert_awaited_once_with(listing.id)


class TestFavorites:
    def test_add_conflict_and_remove(self, client: TestClient, buyer: Account) -> None:
        listing = make_listing()
        _use(_account_repo(buyer), _listing_repo(listing))

        added = client.post(f"/favorites/{listing.id}", headers=_headers(buyer))
        again = client.post(f"/favorites/{listing.id}", headers=_headers(buyer))
        removed = client.delete(f"/favorites/{listing.id}", headers=_headers(buyer))
        removed_again = client.delete(f"/favorites/{listing.id}", headers=_headers(buyer))

        assert added.status_code == 200
        assert added.json()["favorites"] == [str(listing.id)]
        assert again.status_code == 409
        assert again.json()["error"] == "conflict"
        assert removed.json()["favorites"] == []
        assert removed_again.status_code == 409

    def test_add_missing_listing(self, client: TestClient, buyer: Account) -> None:
        _use(_account_repo(buyer), _listing_repo(None))

        response = client.post(f"/favorites/{uuid4()}", headers=_headers(buyer))

        assert response.status_code == 404

    def test_toggle(self, client: TestClient, buyer: Account) -> None:
        listing_id = uuid4()
        _use(_account_repo(buyer))

        on = client.put(f"/favorites/{listing_id}/toggle", headers=_headers(buyer))
        off = client.put(f"/favorites/{listing_id}/toggle", headers=_headers(buyer))

        assert on.json()["is_favorite"] is True
        assert off.json()["is_favorite"] is False
        assert off.json()["favorites"] == []

    def test_list_resolves_live_listings(
        self, client: TestClient, admin: Account, buyer: Account
    ) -> None:
        live = make_listing(admin.to_principal())
        dangling = uuid4()
        buyer.favorites = [dangling, live.id]
        _use(_account_repo(buyer), _listing_repo(live))

        response = client.get("/favorites", headers=_headers(buyer))

        assert response.status_code == 200
        assert response.json()["favorites"] == [str(dangling), str(live.id)]
        assert [l["id"] for l in response.json()["listings"]] == [str(live.id)]


class TestInquiries:
    def test_create_routes_to_admin(
        self, client: TestClient, admin: Account, agent: Account, buyer: Account
    ) -> None:
        listing = make_listing(agent.to_principal())
        inquiries = _inquiry_repo()
        _use(_account_repo(admin, agent, buyer), _listing_repo(listing), inquiries)

        response = client.post(
            "/inquiries",
            json={"listing_id": str(listing.id), "message": "Can I visit?"},
            headers=_headers(buyer),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["handler"]["id"] == str(admin.id)
        assert body["original_owner_id"] == str(agent.id)
        assert body["phone"] == buyer.phone
        inquiries.add.assert_awaited_once()

    def test_create_without_admin_is_503(
        self, client: TestClient, agent: Account, buyer: Account
    ) -> None:
        listing = make_listing(agent.to_principal())
        _use(_account_repo(agent, buyer), _listing_repo(listing))

        response = client.post(
            "/inquiries",
            json={"listing_id": str(listing.id), "message": "Can I visit?"},
            headers=_headers(buyer),
        )

        assert response.status_code == 503
        assert response.json()["error"] == "dependency_unavailable"

    def test_blank_message_without_admin_is_validation_error(
        self, client: TestClient, agent: Account, buyer: Account
    ) -> None:
        listing = make_listing(agent.to_principal())
        accounts = _account_repo(agent, buyer)
        _use(accounts, _listing_repo(listing))

        response = client.post(
            "/inquiries",
            json={"listing_id": str(listing.id), "message": "   "},
            headers=_headers(buyer),
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        accounts.find_first_admin.assert_not_awaited()

    def test_phone_longer_than_column(
        self, client: TestClient, admin: Account, buyer: Account
    ) -> None:
        listing = make_listing()
        inquiries = _inquiry_repo()
        _use(_account_repo(admin, buyer), _listing_repo(listing), inquiries)

        response = client.post(
            "/inquiries",
            json={"listing_id": str(listing.id), "message": "Hi", "phone": "5" * 65},
            headers=_headers(buyer),
        )

        assert response.status_code == 422
        inquiries.add.assert_not_awaited()

    def test_message_too_long(self, client: TestClient, admin: Account, buyer: Account) -> None:
        listing = make_listing()
        _use(_account_repo(admin, buyer), _listing_repo(listing))

        response = client.post(
            "/inquiries",
            json={"listing_id": str(listing.id), "message": "x" * 501},
            headers=_headers(buyer),
        )

        assert response.status_code == 422

    def test_status_changes(self, client: TestClient, admin: Account, buyer: Account) -> None:
        inquiry = Inquiry.create(listing=make_listing(), requester_id=buyer.id, message="Hi")
        _use(_account_repo(admin, buyer), inquiries=_inquiry_repo(inquiry))

        bad_value = client.put(
            f"/inquiries/{inquiry.id}/status", json={"status": "archived"}, headers=_headers(admin)
        )
        closed = client.put(
            f"/inquiries/{inquiry.id}/status", json={"status": "closed"}, headers=_headers(admin)
        )
        reopened = client.put(
            f"/inquiries/{inquiry.id}/status", json={"status": "pending"}, headers=_headers(admin)
        )

        assert bad_value.status_code == 422
        assert closed.status_code == 200
        assert closed.json()["status"] == "closed"
        assert reopened.status_code == 409

    def test_respond_is_admin_only(
        self, client: TestClient, admin: Account, buyer: Account
    ) -> None:
        inquiry = Inquiry.create(listing=make_listing(), requester_id=buyer.id, message="Hi")
        _use(_account_repo(admin, buyer), inquiries=_inquiry_repo(inquiry))

        as_buyer = client.put(
            f"/inquiries/{inquiry.id}/respond", json={"message": "Me?"}, headers=_headers(buyer)
        )
        as_admin = client.put(
            f"/inquiries/{inquiry.id}/respond", json={"message": "Sure"}, headers=_headers(admin)
        )

        assert as_buyer.status_code == 403
        assert as_admin.status_code == 200
        assert as_admin.json()["status"] == InquiryStatus.RESPONDED.value
        assert as_admin.json()["response"] == "Sure"
        assert as_admin.json()["responded_at"] is not None

    def test_list_mine(self, client: TestClient, admin: Account, buyer: Account) -> None:
        inquiry = Inquiry.create(listing=make_listing(), requester_id=buyer.id, message="Hi")
        inquiries = _inquiry_repo(inquiry)
        _use(_account_repo(admin, buyer), inquiries=inquiries)

        response = client.get("/inquiries/mine", headers=_headers(buyer))

        assert response.status_code == 200
        assert response.json()["count"] == 1
        inquiries.list_for_requester.assert_awaited_once_with(buyer.id)

    def test_list_for_listing(self, client: TestClient, admin: Account, buyer: Account) -> None:
        listing = make_listing()
        inquiry = Inquiry.create(listing=listing, requester_id=buyer.id, message="Hi")
        _use(_account_repo(admin, buyer), _listing_repo(listing), _inquiry_repo(inquiry))

        as_buyer = client.get(f"/inquiries/listing/{listing.id}", headers=_headers(buyer))
        as_admin = client.get(f"/inquiries/listing/{listing.id}", headers=_headers(admin))

        assert as_buyer.status_code == 403
        assert as_admin.status_code == 200
        assert as_admin.json()["inquiries"][0]["handler"]["id"] == str(admin.id)

    def test_delete_missing(self, client: TestClient, admin: Account) -> None:
        _use(_account_repo(admin), inquiries=_inquiry_repo(None))

        response = client.delete(f"/inquiries/{uuid4()}", headers=_headers(admin))

        assert response.status_code == 404
