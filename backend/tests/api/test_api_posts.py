"""HTTP tests for post publishing, the feed and deletion."""

from __future__ import annotations

import os

from tests.factories.post import PostFactory
from tests.helpers.assertions import assert_page_meta, assert_problem
from tests.helpers.http import bearer, build_url, png_file

BASE = "/api/v1/posts"


def _create(client, headers, **fields):
    payload = {"title": "T", "content": "C", **fields}
    return client.post(BASE, json=payload, headers=headers)


class TestCreate:
    def test_create_json(self, client, auth_header):
        resp = _create(client, auth_header, plantName="Pothos", tags=["vine", "Vine", "easy"])

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["title"] == "T"
        assert data["plantName"] == "Pothos"
        assert data["tags"] == ["vine", "easy"]
        assert data["likesCount"] == 0
        assert data["commentsCount"] == 0
        assert data["imageUrl"] is None
        assert data["author"]["displayName"] == "Gardener"
        assert "email" not in data["author"]

    def test_create_multipart_with_image_served_back(self, client, app, auth_header):
        resp = client.post(
            BASE,
            data={"title": "Leaf", "content": "New leaf", "tags": "aroid, indoor", "image": png_file()},
            headers=auth_header,
            content_type="multipart/form-data",
        )

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["tags"] == ["aroid", "indoor"]
        assert data["imageUrl"].startswith("/uploads/")

        name = data["imageUrl"].rsplit("/", 1)[-1]
        assert os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], name))
        served = client.get(data["imageUrl"])
        assert served.status_code == 200
        assert served.mimetype == "image/png"

    def test_create_form_urlencoded(self, client, auth_header):
        resp = client.post(
            BASE,
            data={"title": "Cutting", "content": "Rooted in water", "tags": "propagation, pothos"},
            headers=auth_header,
        )

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["title"] == "Cutting"
        assert data["tags"] == ["propagation", "pothos"]
        assert data["imageUrl"] is None

    def test_non_image_upload(self, client, auth_header):
        resp = client.post(
            BASE,
            data={"title": "T", "content": "C", "image": (png_file()[0], "notes.txt", "text/plain")},
            headers=auth_header,
            content_type="multipart/form-data",
        )
        body = assert_problem(resp, 400, "bad_request")
        assert body["details"]["field"] == "image"

    def test_missing_title(self, client, auth_header):
        assert_problem(client.post(BASE, json={"content": "C"}, headers=auth_header), 400)

    def test_requires_auth(self, client):
        assert_problem(client.post(BASE, json={"title": "T", "content": "C"}), 401)


class TestFeed:
    def test_feed_anonymous_and_authenticated(self, client, register):
        tokens = register()
        headers = bearer(tokens["accessToken"])
        post_id = _create(client, headers).get_json()["data"]["id"]
        client.post(f"{BASE}/{post_id}/like", headers=headers)

        anon = client.get(BASE).get_json()
        mine = client.get(BASE, headers=headers).get_json()

        assert_page_meta(anon, total=1)
        assert anon["data"][0]["liked"] is None
        assert mine["data"][0]["liked"] is True
        assert mine["data"][0]["likesCount"] == 1

    def test_feed_author_filter_and_paging(self, client, session):
        first = PostFactory()
        PostFactory.create_batch(2, author=first.author)
        PostFactory()
        session.commit()

        resp = client.get(build_url(BASE, author=first.author_id, limit=2, page=2))

        body = resp.get_json()
        assert resp.status_code == 200
        assert_page_meta(body, total=3, page=2)
        assert len(body["data"]) == 1

    def test_bad_query(self, client):
        assert_problem(client.get(build_url(BASE, page=0)), 400, "validation_error")


class TestSingle:
    def test_get_and_delete(self, client, auth_header):
        post_id = _create(client, auth_header).get_json()["data"]["id"]

        assert client.get(f"{BASE}/{post_id}").status_code == 200

        resp = client.delete(f"{BASE}/{post_id}", headers=auth_header)
        assert resp.status_code == 200
        assert_problem(client.get(f"{BASE}/{post_id}"), 404, "not_found")

    def test_delete_by_other_user_forbidden(self, client, register):
        owner = bearer(register(email="owner@example.com")["accessToken"])
        other = bearer(register(email="other@example.com")["accessToken"])
        post_id = _create(client, owner).get_json()["data"]["id"]

        assert_problem(client.delete(f"{BASE}/{post_id}", headers=other), 403, "forbidden")
        assert client.get(f"{BASE}/{post_id}").status_code == 200

    def test_unknown_post(self, client):
        assert_problem(client.get(f"{BASE}/999999"), 404)
