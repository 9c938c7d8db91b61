"""
Admin moderation endpoints over HTTP.
"""

from uuid import uuid4

import pytest

from src.adapters.sqlite.repos import SQLiteListingRepo, SQLitePostRepo
from src.api import deps
from src.domain.entities import BlogPost, BusinessListing


@pytest.fixture
def listing_repo(data_dir, client):
    return SQLiteListingRepo(str(data_dir / "site.db"), deps.get_change_feed())


@pytest.fixture
def pending(listing_repo, member_user):
    return listing_repo.insert(
        BusinessListing(
            user_id=member_user.id,
            category="restaurants",
            title="Kolachi",
            slug="kolachi",
            description="Seafood restaurant on the Do Darya waterfront in Karachi.",
            address="Do Darya, Phase 8",
            city="Karachi",
            phone="+92 300 1234567",
            is_published=True,
            views_count=4,
        )
    )


def url(listing, action=""):
    return f"/api/admin/listings/{listing.id}{'/' + action if action else ''}"


class TestAccess:
    def test_members_are_forbidden(self, client, member_headers, pending):
        assert client.get("/api/admin/listings", headers=member_headers).status_code == 403
        assert client.post(url(pending, "approve"), headers=member_headers).status_code == 403
        assert client.get("/api/admin/blog", headers=member_headers).status_code == 403

    def test_anonymous_is_unauthorized(self, client, pending):
        assert client.get("/api/admin/listings").status_code == 401


class TestModeration:
    def test_reject_requires_reason(self, client, admin_headers, pending, listing_repo):
        response = client.post(url(pending, "reject"), json={"reason": "  "}, headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "validation_error"
        assert listing_repo.get_by_id(pending.id).approval_status == "pending"

    def test_reject_then_approve(self, client, admin_headers, admin_user, pending):
        rejected = client.post(
            url(pending, "reject"), json={"reason": "Blurry photos"}, headers=admin_headers
        ).json()
        assert rejected["approval_status"] == "rejected"
        assert rejected["rejection_reason"] == "Blurry photos"
        assert rejected["approved_by"] == str(admin_user.id)

        # Rejecting again is not a valid transition
        again = client.post(url(pending, "reject"), json={"reason": "x"}, headers=admin_headers)
        assert again.status_code == 409

        approved = client.post(url(pending, "approve"), headers=admin_headers).json()
        assert approved["approval_status"] == "approved"
        assert approved["rejection_reason"] is None

    def test_approval_updates_cached_public_list(self, client, admin_headers, pending):
        assert client.get("/api/listings").json()["total"] == 0
        client.post(url(pending, "approve"), headers=admin_headers)
        assert client.get("/api/listings").json()["total"] == 1

    def test_feature_and_publish(self, client, admin_headers, pending):
        assert client.post(url(pending, "feature"), headers=admin_headers).json()["is_featured"]
        assert not client.post(url(pending, "feature"), headers=admin_headers).json()["is_featured"]

        hidden = client.post(
            url(pending, "publish"), json={"published": False}, headers=admin_headers
        )
        assert hidden.json()["is_published"] is False

    def test_publishing_a_taken_slug(self, client, admin_headers, pending, listing_repo):
        twin = listing_repo.insert(
            pending.model_copy(update={"id": uuid4(), "is_published": False})
        )

        response = client.post(
            url(twin, "publish"), json={"published": True}, headers=admin_headers
        )
        assert response.status_code == 422
        assert response.json()["detail"]["violations"][0]["field"] == "slug"

        edited = client.patch(url(twin), json={"is_published": True}, headers=admin_headers)
        assert edited.status_code == 422
        assert listing_repo.get_by_id(twin.id).is_published is False

    def test_edit(self, client, admin_headers, pending):
        edited = client.patch(
            url(pending),
            json={"title": "Kolachi Waterfront", "website": ""},
            headers=admin_headers,
        )
        assert edited.status_code == 200
        assert edited.json()["title"] == "Kolachi Waterfront"
        assert edited.json()["website"] is None

        invalid = client.patch(url(pending), json={"category": "spaceships"}, headers=admin_headers)
        assert invalid.status_code == 422
        assert invalid.json()["detail"]["violations"][0]["field"] == "category"

    def test_delete(self, client, admin_headers, pending, listing_repo):
        assert client.delete(url(pending), headers=admin_headers).json()["success"] is True
        assert listing_repo.get_by_id(pending.id) is None
        assert client.delete(url(pending), headers=admin_headers).status_code == 404

    def test_unknown_listing(self, client, admin_headers, listing_repo, member_user):
        missing = BusinessListing(
            user_id=member_user.id, category="services", title="Gone", slug="gone", description="x"
        )
        assert client.post(url(missing, "approve"), headers=admin_headers).status_code == 404


class TestAdminQueries:
    def test_filters_stats_and_categories(self, client, admin_headers, pending, listing_repo):
        listing_repo.insert(
            pending.model_copy(
                update={
                    "id": uuid4(),
                    "slug": "clinic",
                    "title": "City Clinic",
                    "category": "doctors-clinics",
                    "approval_status": "approved",
                    "views_count": 6,
                }
            )
        )

        pending_only = client.get(
            "/api/admin/listings", params={"approval": "pending"}, headers=admin_headers
        ).json()
        assert [x["slug"] for x in pending_only["listings"]] == ["kolachi"]

        search = client.get(
            "/api/admin/listings", params={"search": "clinic"}, headers=admin_headers
        ).json()
        assert search["total"] == 1

        stats = client.get("/api/admin/listings/stats", headers=admin_headers).json()
        assert stats == {"total": 2, "pending": 1, "published": 1, "total_views": 10}

        categories = client.get("/api/admin/listings/categories", headers=admin_headers).json()
        assert categories == ["doctors-clinics", "restaurants"]


class TestAdminBlog:
    def test_live_list_and_delete(self, client, admin_headers, admin_user, data_dir):
        repo = SQLitePostRepo(str(data_dir / "site.db"), deps.get_change_feed())
        assert client.get("/api/admin/blog", headers=admin_headers).json()["total"] == 0

        post = repo.insert(
            BlogPost(
                author_id=admin_user.id,
                title="Citations 101",
                slug="citations-101",
                category="Citation Building",
                content="Body",
            )
        )
        # The list refreshes from the change feed, published or not
        assert client.get("/api/admin/blog", headers=admin_headers).json()["total"] == 1

        deleted = client.delete(f"/api/admin/blog/{post.id}", headers=admin_headers)
        assert deleted.json()["success"] is True
        assert client.get("/api/admin/blog", headers=admin_headers).json()["total"] == 0
