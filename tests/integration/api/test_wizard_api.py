"""
Listing and post wizards driven over HTTP, from first step to submit.
"""

import json

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def start(client, headers, kind="listing", entity_id=None):
    response = client.post(f"/api/wizard/{kind}", json={"entity_id": entity_id}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def fill_and_advance(client, headers, key, fields):
    response = client.patch(f"/api/wizard/{key}/fields", json={"fields": fields}, headers=headers)
    assert response.status_code == 200, response.text
    for _ in range(3):
        nav = client.post(f"/api/wizard/{key}/next", headers=headers).json()
        assert nav["success"], nav
    return nav


class TestAccess:
    def test_requires_login(self, client):
        assert client.post("/api/wizard/listing", json={}).status_code == 401

    def test_members_cannot_write_posts(self, client, member_headers):
        assert client.post("/api/wizard/post", json={}, headers=member_headers).status_code == 403

    def test_unknown_wizard(self, client, member_headers):
        response = client.get("/api/wizard/listing-draft-new", headers=member_headers)
        assert response.status_code == 404


class TestListingWizard:
    def test_create_listing_end_to_end(self, client, member_headers, admin_headers, listing_fields):
        wizard = start(client, member_headers)
        key = wizard["key"]
        assert key == "listing-draft-new"
        assert wizard["current_step"] == 1
        assert wizard["last_step"] == 4

        nav = fill_and_advance(client, member_headers, key, listing_fields)
        assert nav["wizard"]["current_step"] == 4
        assert nav["wizard"]["draft"]["slug"] == "kolachi-restaurant"

        result = client.post(f"/api/wizard/{key}/submit", headers=member_headers)
        assert result.status_code == 200, result.text
        body = result.json()
        assert body["created"] is True
        assert body["record"]["approval_status"] == "pending"
        assert body["record"]["meta_title"].startswith("Kolachi Restaurant")

        # Submitted wizards are closed
        assert client.get(f"/api/wizard/{key}", headers=member_headers).status_code == 404

        # Pending listings stay out of the public directory until approved
        assert client.get("/api/listings").json()["total"] == 0
        listing_id = body["record"]["id"]
        approved = client.post(f"/api/admin/listings/{listing_id}/approve", headers=admin_headers)
        assert approved.status_code == 200
        client.post(
            f"/api/admin/listings/{listing_id}/publish",
            json={"published": True},
            headers=admin_headers,
        )
        assert client.get("/api/listings").json()["total"] == 1

    def test_step_validation_blocks_next(self, client, member_headers):
        key = start(client, member_headers)["key"]
        client.patch(
            f"/api/wizard/{key}/fields", json={"fields": {"title": "Kol"}}, headers=member_headers
        )

        nav = client.post(f"/api/wizard/{key}/next", headers=member_headers).json()

        assert nav["success"] is False
        assert nav["wizard"]["current_step"] == 1
        assert {v["field"] for v in nav["violations"]} >= {"category", "title"}
        assert nav["notification"]

    def test_unknown_field_is_rejected(self, client, member_headers):
        key = start(client, member_headers)["key"]
        response = client.patch(
            f"/api/wizard/{key}/fields", json={"fields": {"owner": "me"}}, headers=member_headers
        )
        assert response.status_code == 400

    def test_jumping_only_to_visited_steps(self, client, member_headers, listing_fields):
        key = start(client, member_headers)["key"]
        fill_and_advance(client, member_headers, key, listing_fields)

        back = client.post(f"/api/wizard/{key}/steps/2", headers=member_headers).json()
        assert back["success"] is True
        assert back["wizard"]["current_step"] == 2
        assert back["wizard"]["reachable_steps"] == [1, 2, 3]

        previous = client.post(f"/api/wizard/{key}/back", headers=member_headers).json()
        assert previous["wizard"]["current_step"] == 1

    def test_draft_is_saved_and_resumed(self, client, member_headers, data_dir):
        key = start(client, member_headers)["key"]
        client.patch(
            f"/api/wizard/{key}/fields",
            json={"fields": {"title": "Sea Breeze Cafe"}},
            headers=member_headers,
        )
        client.post(f"/api/wizard/{key}/next", headers=member_headers)

        saved = list((data_dir / "drafts").glob("*/listing-draft-new.json"))
        assert len(saved) == 1
        assert json.loads(saved[0].read_text())["draft"]["title"] == "Sea Breeze Cafe"

    def test_discard_resets_the_draft(self, client, member_headers, data_dir):
        key = start(client, member_headers)["key"]
        client.patch(
            f"/api/wizard/{key}/fields", json={"fields": {"title": "Temp"}}, headers=member_headers
        )
        client.post(f"/api/wizard/{key}/next", headers=member_headers)

        wizard = client.delete(f"/api/wizard/{key}", headers=member_headers).json()

        assert wizard["draft"]["title"] == ""
        assert wizard["current_step"] == 1
        assert list((data_dir / "drafts").glob("*/*.json")) == []

    def test_discard_closes_the_wizard(self, client, member_headers):
        key = start(client, member_headers)["key"]
        client.patch(
            f"/api/wizard/{key}/fields", json={"fields": {"title": "Temp"}}, headers=member_headers
        )
        client.delete(f"/api/wizard/{key}", headers=member_headers)

        assert client.get(f"/api/wizard/{key}", headers=member_headers).status_code == 404
        assert start(client, member_headers)["draft"]["title"] == ""

    def test_submit_with_image(self, client, member_headers, listing_fields):
        key = start(client, member_headers)["key"]
        picked = client.post(
            f"/api/wizard/{key}/asset",
            files={"file": ("Front.PNG", PNG, "image/png")},
            headers=member_headers,
        ).json()
        assert picked["pending_asset"] == "Front.PNG"

        fill_and_advance(
            client, member_headers, key, {**listing_fields, "featured_image_alt": "Storefront"}
        )
        record = client.post(f"/api/wizard/{key}/submit", headers=member_headers).json()["record"]

        url = record["featured_image_url"]
        assert url.startswith("/storage/listing-images/")
        assert url.endswith(".png")
        image = client.get(url)
        assert image.status_code == 200
        assert image.content == PNG
        assert image.headers["content-type"] == "image/png"

    def test_rejected_image_type(self, client, member_headers):
        key = start(client, member_headers)["key"]
        response = client.post(
            f"/api/wizard/{key}/asset",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=member_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "asset_upload_failed"
        wizard = client.get(f"/api/wizard/{key}", headers=member_headers).json()
        assert wizard["pending_asset"] is None

    def test_oversized_image_is_refused_on_select(self, client, member_headers):
        key = start(client, member_headers)["key"]
        too_big = PNG + b"\x00" * (5 * 1024 * 1024)
        response = client.post(
            f"/api/wizard/{key}/asset",
            files={"file": ("huge.png", too_big, "image/png")},
            headers=member_headers,
        )

        assert response.status_code == 400
        assert "5MB" in response.json()["detail"]["message"]
        wizard = client.get(f"/api/wizard/{key}", headers=member_headers).json()
        assert wizard["pending_asset"] is None

    def test_edit_own_listing_only(self, client, member_headers, listing_fields):
        key = start(client, member_headers)["key"]
        fill_and_advance(client, member_headers, key, listing_fields)
        listing_id = client.post(f"/api/wizard/{key}/submit", headers=member_headers).json()[
            "record"
        ]["id"]

        edit = start(client, member_headers, entity_id=listing_id)
        assert edit["key"] == f"listing-draft-{listing_id}"
        assert edit["draft"]["title"] == "Kolachi Restaurant"
        assert edit["draft"]["auto_derived"] == []

        client.patch(
            f"/api/wizard/{edit['key']}/fields",
            json={"fields": {"title": "Kolachi Waterfront"}},
            headers=member_headers,
        )
        # Editing the title of a saved listing keeps its slug
        for _ in range(3):
            client.post(f"/api/wizard/{edit['key']}/next", headers=member_headers)
        updated = client.post(f"/api/wizard/{edit['key']}/submit", headers=member_headers).json()
        assert updated["created"] is False
        assert updated["record"]["slug"] == "kolachi-restaurant"
        assert updated["record"]["title"] == "Kolachi Waterfront"

    def test_other_members_cannot_edit(
        self, client, member_headers, other_member_headers, listing_fields
    ):
        key = start(client, member_headers)["key"]
        fill_and_advance(client, member_headers, key, listing_fields)
        listing_id = client.post(f"/api/wizard/{key}/submit", headers=member_headers).json()[
            "record"
        ]["id"]

        response = client.post(
            "/api/wizard/listing", json={"entity_id": listing_id}, headers=other_member_headers
        )
        assert response.status_code == 403

    def test_missing_entity(self, client, member_headers):
        response = client.post(
            "/api/wizard/listing",
            json={"entity_id": "00000000-0000-0000-0000-000000000000"},
            headers=member_headers,
        )
        assert response.status_code == 404


class TestPostWizard:
    def test_admin_writes_post(self, client, admin_headers):
        key = start(client, admin_headers, kind="post")["key"]
        assert key == "blog-draft-new"

        client.patch(
            f"/api/wizard/{key}/fields",
            json={
                "fields": {
                    "title": "Ranking on Google Maps",
                    "category": "Local SEO",
                    "content": "word " * 450,
                }
            },
            headers=admin_headers,
        )
        client.post(f"/api/wizard/{key}/tags", json={"tag": " maps "}, headers=admin_headers)
        client.post(f"/api/wizard/{key}/tags", json={"tag": "maps"}, headers=admin_headers)
        for _ in range(3):
            assert client.post(f"/api/wizard/{key}/next", headers=admin_headers).json()["success"]

        record = client.post(f"/api/wizard/{key}/submit", headers=admin_headers).json()["record"]

        assert record["slug"] == "ranking-on-google-maps"
        assert record["read_time"] == 3
        assert record["tags"] == ["maps"]
        admin_posts = client.get("/api/admin/blog", headers=admin_headers).json()
        assert [p["slug"] for p in admin_posts["posts"]] == ["ranking-on-google-maps"]

    def test_tags_are_post_only(self, client, member_headers):
        key = start(client, member_headers)["key"]
        response = client.post(f"/api/wizard/{key}/tags", json={"tag": "x"}, headers=member_headers)
        assert response.status_code == 400
