"""End-to-end tests of the HTTP surface."""

import uuid

from conftest import PASSWORD

POST_BODY = {
    "title": "Hello, World!",
    "content": "This is the body of my very first post.",
    "tags": ["intro", "meta"],
    "category": "General",
}


def create_post(client, headers, **overrides):
    body = dict(POST_BODY, **overrides)
    response = client.post("/api/blogs", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestMeta:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["success"] is True
        assert "timestamp" in body
        assert "uptime" in body

    def test_api_index(self, client):
        endpoints = client.get("/api").json()["endpoints"]
        assert endpoints["blogs"]["like"] == "POST /api/blogs/:id/like"

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not found - /api/nothing-here"}


class TestAuthEndpoints:
    def test_register_returns_user_without_password(self, register_via_api):
        user, _ = register_via_api(first_name="Grace", last_name="Hopper")

        assert user["firstName"] == "Grace"
        assert user["lastName"] == "Hopper"
        assert user["role"] == "user"
        assert user["isActive"] is True
        assert "passwordHash" not in user
        assert "password" not in user

    def test_duplicate_registration(self, client, register_via_api):
        register_via_api(email="dup@example.com")

        response = client.post("/api/auth/register", json={
            "firstName": "Again",
            "lastName": "Person",
            "email": "dup@example.com",
            "password": PASSWORD,
        })

        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_weak_password_is_rejected(self, client):
        response = client.post("/api/auth/register", json={
            "firstName": "Weak",
            "lastName": "Password",
            "email": "weak@example.com",
            "password": "alllowercase",
        })

        body = response.json()
        assert response.status_code == 400
        assert body["message"] == "Validation errors"
        assert body["errors"][0]["field"] == "password"

    def test_login(self, client, register_via_api):
        register_via_api(email="login@example.com")

        ok = client.post("/api/auth/login", json={"email": "login@example.com", "password": PASSWORD})
        wrong = client.post("/api/auth/login", json={"email": "login@example.com", "password": "Wrong999"})
        unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})

        assert ok.status_code == 200
        assert ok.json()["data"]["token"]
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"success": False, "message": "Invalid email or password"}

    def test_profile_requires_token(self, client):
        response = client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json()["message"] == "Access denied. No token provided."
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_profile_rejects_bad_token(self, client):
        response = client.get("/api/auth/profile", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401

    def test_get_and_update_profile(self, client, register_via_api):
        user, headers = register_via_api()

        profile = client.get("/api/auth/profile", headers=headers).json()["data"]
        assert profile["id"] == user["id"]

        response = client.put("/api/auth/profile", headers=headers, json={
            "bio": "Compiler pioneer",
            "profileImage": "https://example.com/grace.png",
        })
        updated = response.json()["data"]

        assert response.status_code == 200
        assert updated["bio"] == "Compiler pioneer"
        assert updated["profileImage"] == "https://example.com/grace.png"

    def test_profile_image_kept_verbatim(self, client, register_via_api):
        _, headers = register_via_api()

        response = client.put("/api/auth/profile", headers=headers, json={"profileImage": "https://example.com"})
        rejected = client.put("/api/auth/profile", headers=headers, json={"profileImage": "not a url"})

        assert response.json()["data"]["profileImage"] == "https://example.com"
        assert rejected.status_code == 400
        assert rejected.json()["errors"][0]["field"] == "profileImage"

    def test_logout(self, client, register_via_api):
        _, headers = register_via_api()
        response = client.post("/api/auth/logout", headers=headers)
        assert response.json() == {"success": True, "message": "Logout successful"}


class TestBlogEndpoints:
    def test_create_post(self, client, register_via_api):
        user, headers = register_via_api()

        post = create_post(client, headers)

        assert post["slug"].startswith("hello-world-")
        assert post["status"] == "draft"
        assert post["isPublished"] is False
        assert post["readTime"] == 1
        assert post["authorId"] == user["id"]
        assert post["author"]["email"] == user["email"]
        assert "bio" not in post["author"]
        assert sorted(post["tags"]) == ["intro", "meta"]

    def test_create_requires_auth(self, client):
        response = client.post("/api/blogs", json=POST_BODY)
        assert response.status_code == 401

    def test_create_validates_input(self, client, register_via_api):
        _, headers = register_via_api()

        response = client.post("/api/blogs", headers=headers, json={"title": "Hi", "content": "short"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"title", "content"} <= fields

    def test_get_by_id_and_slug_count_views(self, client, register_via_api):
        _, headers = register_via_api()
        post = create_post(client, headers)

        by_id = client.get(f"/api/blogs/{post['id']}").json()["data"]
        by_slug = client.get(f"/api/blogs/slug/{post['slug']}").json()["data"]

        assert by_id["views"] == 1
        assert by_slug["views"] == 2
        assert "bio" in by_slug["author"]

    def test_optional_auth_ignores_bad_token(self, client, register_via_api):
        _, headers = register_via_api()
        post = create_post(client, headers)

        response = client.get(f"/api/blogs/{post['id']}", headers={"Authorization": "Bearer junk"})

        assert response.status_code == 200

    def test_invalid_id_format(self, client):
        assert client.get("/api/blogs/not-a-uuid").status_code == 400

    def test_missing_post(self, client):
        response = client.get(f"/api/blogs/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Blog post not found"}

    def test_update_and_publish(self, client, register_via_api):
        _, headers = register_via_api()
        post = create_post(client, headers)

        response = client.put(f"/api/blogs/{post['id']}", headers=headers, json={"status": "published"})
        published = response.json()["data"]

        assert response.status_code == 200
        assert published["isPublished"] is True
        assert published["publishedAt"] is not None
        assert published["publishedAt"].endswith("Z")
        assert published["createdAt"].endswith("Z")

        retitled = client.put(
            f"/api/blogs/{post['id']}", headers=headers, json={"title": "A better title"}
        ).json()["data"]

        assert retitled["publishedAt"] == published["publishedAt"]
        assert retitled["slug"].startswith("a-better-title-")

    def test_update_cannot_clear_title(self, client, register_via_api):
        _, headers = register_via_api()
        post = create_post(client, headers)

        response = client.put(f"/api/blogs/{post['id']}", headers=headers, json={"title": None})

        assert response.status_code == 400

    def test_only_author_may_modify(self, client, register_via_api):
        _, owner = register_via_api()
        _, intruder = register_via_api()
        post = create_post(client, owner)

        update = client.put(f"/api/blogs/{post['id']}", headers=intruder, json={"title": "Taken over"})
        delete = client.delete(f"/api/blogs/{post['id']}", headers=intruder)

        assert update.status_code == 403
        assert delete.status_code == 403

        assert client.delete(f"/api/blogs/{post['id']}", headers=owner).status_code == 200
        assert client.get(f"/api/blogs/{post['id']}").status_code == 404

    def test_like(self, client, register_via_api):
        _, headers = register_via_api()
        post = create_post(client, headers)

        likes = [client.post(f"/api/blogs/{post['id']}/like").json()["likes"] for _ in range(3)]

        assert likes == [1, 2, 3]

    def test_list_with_pagination_and_filters(self, client, register_via_api):
        _, headers = register_via_api()
        for i in range(12):
            create_post(client, headers, title=f"Numbered post {i}", status="published")
        create_post(client, headers, title="Tagged draft", tags=["special"])

        page = client.get("/api/blogs", params={"page": 2, "limit": 5, "status": "published"}).json()
        tagged = client.get("/api/blogs", params={"tags": "special,unused"}).json()

        assert page["pagination"] == {
            "currentPage": 2,
            "totalPages": 3,
            "totalItems": 12,
            "itemsPerPage": 5,
        }
        assert len(page["data"]) == 5
        assert [post["title"] for post in tagged["data"]] == ["Tagged draft"]

    def test_list_rejects_bad_query(self, client):
        assert client.get("/api/blogs", params={"limit": 500}).status_code == 400
        assert client.get("/api/blogs", params={"sortBy": "author"}).status_code == 400
        assert client.get("/api/blogs", params={"sortOrder": "sideways"}).status_code == 400

    def test_my_posts_and_author_posts(self, client, register_via_api):
        user, headers = register_via_api()
        create_post(client, headers, status="published")
        create_post(client, headers)

        mine = client.get("/api/blogs/my", headers=headers).json()
        public = client.get(f"/api/blogs/author/{user['id']}").json()

        assert mine["pagination"]["totalItems"] == 2
        assert public["pagination"]["totalItems"] == 1

    def test_stats(self, client, register_via_api):
        _, headers = register_via_api()
        _, other = register_via_api()
        create_post(client, headers, status="published")
        create_post(client, other)

        everyone = client.get("/api/blogs/stats").json()["data"]
        mine = client.get("/api/blogs/my/stats", headers=headers).json()["data"]
        mine_by_flag = client.get("/api/blogs/stats", params={"my": "true"}, headers=headers).json()["data"]

        assert everyone == {
            "totalBlogs": 2,
            "publishedBlogs": 1,
            "draftBlogs": 1,
            "totalViews": 0,
            "totalLikes": 0,
        }
        assert mine["totalBlogs"] == mine_by_flag["totalBlogs"] == 1
