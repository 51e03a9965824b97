"""HTTP tests for the Flask app."""

import pytest

from .conftest import (
    OTHER_USER_ID,
    PLAN_ID,
    USER_ID,
    VERSE_API,
    make_token,
    passage_payload,
    verse_api_url,
)


@pytest.fixture
def genesis(http):
    http.add(verse_api_url("Genesis", 1), passage_payload("Genesis", 1, 5))


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_unhealthy(self, client, supabase):
        supabase.fail("reading_plans", "select")
        response = client.get("/health")
        assert response.status_code == 500
        assert response.get_json()["status"] == "unhealthy"


class TestAuthRoutes:
    """Login, session and logout."""

    def test_login(self, client, supabase):
        supabase.auth.passwords["reader@example.com"] = "hunter22"
        response = client.post("/api/auth/login", json={"email": "reader@example.com", "password": "hunter22"})
        assert response.status_code == 200
        body = response.get_json()
        assert body["user"] == {"id": USER_ID, "email": "reader@example.com"}
        assert body["refresh_token"] == "refresh-token"

        session = client.get("/api/auth/session", headers={"Authorization": f"Bearer {body['token']}"})
        assert session.get_json()["user"]["id"] == USER_ID

    def test_login_wrong_password(self, client, supabase):
        supabase.auth.passwords["reader@example.com"] = "hunter22"
        response = client.post("/api/auth/login", json={"email": "reader@example.com", "password": "nope"})
        assert response.status_code == 401
        assert response.get_json()["error"] == "Invalid email or password"

    def test_login_missing_fields(self, client):
        assert client.post("/api/auth/login", json={"email": "reader@example.com"}).status_code == 400

    def test_login_body_not_an_object(self, client):
        assert client.post("/api/auth/login", json=["reader@example.com", "hunter22"]).status_code == 400

    def test_logout_revokes_token(self, client, supabase, auth_headers):
        response = client.post("/api/auth/logout", headers=auth_headers)
        assert response.status_code == 200
        assert supabase.auth.admin.signed_out == [auth_headers["Authorization"].split(" ")[1]]

    def test_session_requires_token(self, client):
        assert client.get("/api/auth/session").status_code == 401

    def test_expired_token(self, client):
        headers = {"Authorization": f"Bearer {make_token(expires_in=-60)}"}
        response = client.get("/api/auth/session", headers=headers)
        assert response.status_code == 401
        assert response.get_json()["error"] == "Token has expired"

    def test_malformed_header(self, client):
        response = client.get("/api/auth/session", headers={"Authorization": "Token abc"})
        assert response.status_code == 401


class TestBibleRoutes:
    """Books, chapters and the random verse."""

    def test_books(self, client):
        response = client.get("/api/bible/books")
        books = response.get_json()
        assert len(books) == 66
        assert books[0] == {"name": "Genesis", "abbreviation": "GEN", "chapters": 50}

    def test_chapter_anonymous(self, client, genesis):
        response = client.get("/api/bible/chapters/Genesis/1")
        assert response.status_code == 200
        page = response.get_json()
        assert [v["verse_key"] for v in page["verses"]][:2] == ["Genesis.1.1", "Genesis.1.2"]
        assert page["palette"] == ["yellow", "green", "blue", "pink"]
        assert page["next"] == {"book": "Genesis", "chapter": 2}

    def test_chapter_translation_param(self, client, http, genesis):
        client.get("/api/bible/chapters/Genesis/1?translation=web")
        assert http.calls[-1][1] == {"translation": "web"}

    def test_chapter_with_marks(self, client, genesis, auth_headers):
        client.put("/api/highlights/Genesis.1.2", json={"color": "blue"}, headers=auth_headers)
        page = client.get("/api/bible/chapters/Genesis/1", headers=auth_headers).get_json()
        assert page["verses"][1]["highlight"] == "blue"

    def test_unknown_book(self, client):
        assert client.get("/api/bible/chapters/Hezekiah/1").status_code == 404

    def test_upstream_down(self, client, http):
        http.add(verse_api_url("Genesis", 1), {}, status=503)
        response = client.get("/api/bible/chapters/Genesis/1")
        assert response.status_code == 502
        assert response.get_json()["error"] == "Could not load Genesis 1."

    def test_toggle_bookmark(self, client, supabase, genesis, auth_headers):
        url = "/api/bible/chapters/Genesis/1/verses/3/bookmark"
        page = client.post(url, headers=auth_headers).get_json()
        assert page["verses"][2]["bookmarked"] is True
        assert page["notices"][-1]["message"] == "Verse bookmarked"

        page = client.post(url, headers=auth_headers).get_json()
        assert page["verses"][2]["bookmarked"] is False
        assert supabase.rows("bookmarks") == []

    def test_toggle_bookmark_requires_login(self, client, genesis):
        assert client.post("/api/bible/chapters/Genesis/1/verses/3/bookmark").status_code == 401

    def test_toggle_bookmark_backend_failure(self, client, supabase, genesis, auth_headers):
        supabase.fail("bookmarks", "insert")
        response = client.post("/api/bible/chapters/Genesis/1/verses/3/bookmark", headers=auth_headers)
        assert response.status_code == 502
        body = response.get_json()
        assert body["error"] == "Failed to update bookmark."
        assert body["page"]["verses"][2]["bookmarked"] is False

    def test_verse_highlight(self, client, genesis, auth_headers):
        url = "/api/bible/chapters/Genesis/1/verses/4/highlight"
        page = client.put(url, json={"color": "pink"}, headers=auth_headers).get_json()
        assert page["verses"][3]["highlight"] == "pink"

        page = client.put(url, json={"color": None}, headers=auth_headers).get_json()
        assert page["verses"][3]["highlight"] is None

    def test_verse_highlight_bad_body(self, client, genesis, auth_headers):
        url = "/api/bible/chapters/Genesis/1/verses/4/highlight"
        assert client.put(url, json={"color": 5}, headers=auth_headers).status_code == 400

    def test_verse_not_on_page(self, client, genesis, auth_headers):
        response = client.post("/api/bible/chapters/Genesis/1/verses/40/bookmark", headers=auth_headers)
        assert response.status_code == 404

    def test_random_verse(self, client, http, auth_headers):
        http.add(f"{VERSE_API}/random", {
            "book_name": "John", "chapter": 11, "verse": 35, "text": "Jesus wept.", "reference": "John 11:35",
        })
        client.put("/api/bookmarks/John.11.35", headers=auth_headers)
        body = client.get("/api/bible/random", headers=auth_headers).get_json()
        assert body["verse_key"] == "John.11.35"
        assert body["bookmarked"] is True

    def test_random_verse_upstream_down(self, client):
        assert client.get("/api/bible/random").status_code == 502


class TestBookmarkRoutes:
    """Bookmark CRUD and the bookmarks list."""

    def test_create_and_get(self, client, auth_headers):
        created = client.post("/api/bookmarks/", json={"verse_key": "John.3.16"}, headers=auth_headers)
        assert created.status_code == 200
        assert created.get_json()["verse_key"] == "John.3.16"

        fetched = client.get("/api/bookmarks/John.3.16", headers=auth_headers)
        assert fetched.get_json()["id"] == created.get_json()["id"]

    def test_put_is_idempotent(self, client, supabase, auth_headers):
        first = client.put("/api/bookmarks/John.3.16", headers=auth_headers).get_json()
        second = client.put("/api/bookmarks/John.3.16", headers=auth_headers).get_json()
        assert first["id"] == second["id"]
        assert len(supabase.rows("bookmarks")) == 1

    def test_delete(self, client, auth_headers):
        client.put("/api/bookmarks/John.3.16", headers=auth_headers)
        assert client.delete("/api/bookmarks/John.3.16", headers=auth_headers).status_code == 200
        assert client.get("/api/bookmarks/John.3.16", headers=auth_headers).status_code == 404

    def test_malformed_key(self, client, auth_headers):
        assert client.put("/api/bookmarks/John.03.16", headers=auth_headers).status_code == 400
        assert client.post("/api/bookmarks/", json={"verse_key": "John 3:16"}, headers=auth_headers).status_code == 400

    def test_missing_verse_key(self, client, auth_headers):
        assert client.post("/api/bookmarks/", json={}, headers=auth_headers).status_code == 400

    def test_body_not_an_object(self, client, auth_headers):
        response = client.post("/api/bookmarks/", json=["Genesis.1.1"], headers=auth_headers)
        assert response.status_code == 400

    def test_requires_login(self, client):
        assert client.get("/api/bookmarks/").status_code == 401
        assert client.put("/api/bookmarks/John.3.16").status_code == 401

    def test_list_with_text(self, client, http, auth_headers):
        http.add(verse_api_url("John", 3), passage_payload("John", 3, 20))
        http.add(verse_api_url("Genesis", 1), passage_payload("Genesis", 1, 5))
        for key in ("John.3.16", "Genesis.1.1"):
            client.put(f"/api/bookmarks/{key}", headers=auth_headers)

        body = client.get("/api/bookmarks/", headers=auth_headers).get_json()
        assert [b["verse_key"] for b in body["bookmarks"]] == ["Genesis.1.1", "John.3.16"]
        assert body["bookmarks"][1]["reference"] == "John 3:16"
        assert body["loading"] is False

    def test_list_is_per_user(self, client, auth_headers):
        client.put("/api/bookmarks/John.3.16", headers=auth_headers)
        other = {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}
        assert client.get("/api/bookmarks/", headers=other).get_json()["bookmarks"] == []

    def test_list_backend_down(self, client, supabase, auth_headers):
        supabase.fail("bookmarks", "select")
        response = client.get("/api/bookmarks/", headers=auth_headers)
        assert response.status_code == 502


class TestHighlightRoutes:
    def test_colors(self, client):
        assert client.get("/api/highlights/colors").get_json() == ["yellow", "green", "blue", "pink"]

    def test_set_get_clear(self, client, auth_headers):
        client.put("/api/highlights/Genesis.1.3", json={"color": "yellow"}, headers=auth_headers)
        assert client.get("/api/highlights/Genesis.1.3", headers=auth_headers).get_json()["color"] == "yellow"

        client.put("/api/highlights/Genesis.1.3", json={"color": None}, headers=auth_headers)
        assert client.get("/api/highlights/Genesis.1.3", headers=auth_headers).get_json()["color"] is None

    def test_invalid_payload(self, client, auth_headers):
        response = client.put("/api/highlights/Genesis.1.3", data="nope",
                              content_type="application/json", headers=auth_headers)
        assert response.status_code == 400

    def test_color_is_required(self, client, supabase, auth_headers):
        response = client.put("/api/highlights/Genesis.1.3", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert supabase.rows("highlights") == []

    def test_blank_color_clears(self, client, supabase, auth_headers):
        client.put("/api/highlights/Genesis.1.3", json={"color": "yellow"}, headers=auth_headers)
        response = client.put("/api/highlights/Genesis.1.3", json={"color": ""}, headers=auth_headers)
        assert response.get_json()["color"] is None
        assert supabase.rows("highlights")[0]["color"] is None

    def test_backend_failure(self, client, supabase, auth_headers):
        supabase.fail("highlights", "upsert")
        response = client.put("/api/highlights/Genesis.1.3", json={"color": "green"}, headers=auth_headers)
        assert response.status_code == 502


class TestReadingPlanRoutes:
    @pytest.fixture(autouse=True)
    def plan(self, supabase):
        supabase.rows("reading_plans").append({
            "id": PLAN_ID, "name": "Gospels in 30 days", "description": "Matthew to John",
            "duration_days": 30, "is_public": True,
        })

    def test_list(self, client):
        plans = client.get("/api/reading-plans/").get_json()
        assert [p["id"] for p in plans] == [PLAN_ID]

    def test_start_and_progress(self, client, auth_headers):
        started = client.post(f"/api/reading-plans/{PLAN_ID}/start", headers=auth_headers)
        assert started.get_json()["day_completed"] == 0

        updated = client.post(f"/api/reading-plans/{PLAN_ID}/progress", json={"day": 3}, headers=auth_headers)
        assert updated.get_json()["day_completed"] == 3

        progress = client.get("/api/reading-plans/progress", headers=auth_headers).get_json()
        assert progress == [{"user_id": USER_ID, "plan_id": PLAN_ID, "day_completed": 3}]

    def test_unknown_plan(self, client, auth_headers):
        assert client.post("/api/reading-plans/missing/start", headers=auth_headers).status_code == 404
        assert client.post("/api/reading-plans/missing/progress", json={"day": 1},
                           headers=auth_headers).status_code == 404

    def test_bad_day(self, client, auth_headers):
        response = client.post(f"/api/reading-plans/{PLAN_ID}/progress", json={"day": -1}, headers=auth_headers)
        assert response.status_code == 400
