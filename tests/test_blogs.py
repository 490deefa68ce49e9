import unittest

import blog_service
from errors import Forbidden, NotFound
from guard import Identity
from models import db, Blog, Comment, Favourite, Like, User
from tests.base import ApiTestCase


class CreateBlogTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.register_user("alice")

    def test_create_blog(self):
        blog = self.create_blog(self.alice["token"], title="Hello", content="World", image="/img.png")
        self.assertEqual(blog["title"], "Hello")
        self.assertEqual(blog["content"], "World")
        self.assertEqual(blog["image"], "/img.png")
        self.assertEqual(blog["author"], {"id": self.alice["id"], "username": "alice"})
        self.assertEqual(blog["views"], 0)
        self.assertEqual(blog["likes"], [])
        self.assertEqual(blog["comments"], [])

    def test_image_defaults_to_empty(self):
        response = self.client.post(
            "/api/blogs/create",
            json={"title": "Hello", "content": "World"},
            headers=self.auth_headers(self.alice["token"]),
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["image"], "")

    def test_missing_title(self):
        response = self.client.post(
            "/api/blogs/create",
            json={"content": "World"},
            headers=self.auth_headers(self.alice["token"]),
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Blog.query.count(), 0)


class UpdateBlogTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.register_user("alice")
        self.bob = self.register_user("bob")
        self.blog = self.create_blog(self.alice["token"], title="Old", content="Body", image="/old.png")

    def put(self, token, body, blog_id=None):
        return self.client.put(
            f"/api/blogs/{blog_id or self.blog['id']}",
            json=body,
            headers=self.auth_headers(token),
        )

    def test_partial_update_keeps_omitted_fields(self):
        response = self.put(self.alice["token"], {"title": "New"})
        self.assertEqual(response.status_code, 200)
        blog = response.get_json()
        self.assertEqual(blog["title"], "New")
        self.assertEqual(blog["content"], "Body")
        self.assertEqual(blog["image"], "/old.png")

    def test_empty_image_clears_it(self):
        blog = self.put(self.alice["token"], {"image": ""}).get_json()
        self.assertEqual(blog["image"], "")
        self.assertEqual(blog["title"], "Old")

    def test_blank_title_is_rejected(self):
        response = self.put(self.alice["token"], {"title": "   "})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(db.session.get(Blog, self.blog["id"]).title, "Old")

    def test_non_author_is_forbidden_for_any_fields(self):
        for body in ({}, {"title": "x"}, {"content": "y"}, {"image": ""},
                     {"title": "x", "content": "y", "image": "/z.png"}):
            response = self.put(self.bob["token"], body)
            self.assertEqual(response.status_code, 403, body)

        blog = db.session.get(Blog, self.blog["id"])
        self.assertEqual((blog.title, blog.content, blog.image), ("Old", "Body", "/old.png"))

    def test_missing_blog(self):
        response = self.put(self.alice["token"], {"title": "x"}, blog_id=9999)
        self.assertEqual(response.status_code, 404)

    def test_service_checks_existence_before_ownership(self):
        with self.assertRaises(NotFound):
            blog_service.update_blog(9999, self.bob["id"], {"title": "x"})
        with self.assertRaises(Forbidden):
            blog_service.update_blog(self.blog["id"], self.bob["id"], {"title": "x"})


class DeleteBlogTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.register_user("alice")
        self.bob = self.register_user("bob")
        self.blog = self.create_blog(self.alice["token"])

    def test_non_author_cannot_delete(self):
        response = self.client.delete(f"/api/blogs/{self.blog['id']}",
                                      headers=self.auth_headers(self.bob["token"]))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(Blog.query.count(), 1)

    def test_author_delete_removes_dependents(self):
        headers = self.auth_headers(self.bob["token"])
        self.client.put(f"/api/blogs/{self.blog['id']}/like", headers=headers)
        self.client.post(f"/api/blogs/{self.blog['id']}/comment", json={"comment": "hi"}, headers=headers)
        self.client.put(f"/api/users/favourite/{self.blog['id']}", headers=headers)

        response = self.client.delete(f"/api/blogs/{self.blog['id']}",
                                      headers=self.auth_headers(self.alice["token"]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Blog.query.count(), 0)
        self.assertEqual(Like.query.count(), 0)
        self.assertEqual(Comment.query.count(), 0)
        self.assertEqual(Favourite.query.count(), 0)

    def test_admin_can_delete(self):
        admin = db.session.get(User, self.bob["id"])
        blog_service.delete_blog(self.blog["id"], Identity(user_id=admin.id, is_admin=True))
        self.assertEqual(Blog.query.count(), 0)


class ReadBlogTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.register_user("alice")
        self.first = self.create_blog(self.alice["token"], title="First")
        self.second = self.create_blog(self.alice["token"], title="Second")

    def test_list_newest_first(self):
        titles = [blog["title"] for blog in self.client.get("/api/blogs").get_json()]
        self.assertEqual(titles, ["Second", "First"])

    def test_latest_respects_limit(self):
        blogs = self.client.get("/api/blogs/latest?limit=1").get_json()
        self.assertEqual([blog["title"] for blog in blogs], ["Second"])

    def test_single_blog_counts_views(self):
        self.client.get(f"/api/blogs/{self.first['id']}")
        response = self.client.get(f"/api/blogs/{self.first['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["views"], 2)

    def test_view_does_not_touch_updated_at(self):
        before = db.session.get(Blog, self.first["id"]).updated_at
        self.client.get(f"/api/blogs/{self.first['id']}")
        db.session.expire_all()
        self.assertEqual(db.session.get(Blog, self.first["id"]).updated_at, before)

    def test_missing_blog(self):
        self.assertEqual(self.client.get("/api/blogs/9999").status_code, 404)

    def test_trending_orders_by_views(self):
        for _ in range(3):
            self.client.get(f"/api/blogs/{self.first['id']}")
        self.client.get(f"/api/blogs/{self.second['id']}")

        titles = [blog["title"] for blog in self.client.get("/api/blogs/trending").get_json()]
        self.assertEqual(titles, ["First", "Second"])

    def test_trending_breaks_ties_with_likes(self):
        self.client.put(f"/api/blogs/{self.first['id']}/like",
                        headers=self.auth_headers(self.alice["token"]))
        titles = [blog["title"] for blog in self.client.get("/api/blogs/trending").get_json()]
        self.assertEqual(titles, ["First", "Second"])


class LikeAndCommentTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = self.register_user("alice")
        self.bob = self.register_user("bob")
        self.blog = self.create_blog(self.alice["token"])

    def test_like_toggles(self):
        url = f"/api/blogs/{self.blog['id']}/like"
        headers = self.auth_headers(self.bob["token"])

        liked = self.client.put(url, headers=headers).get_json()
        self.assertEqual((liked["liked"], liked["likes"]), (True, 1))

        unliked = self.client.put(url, headers=headers).get_json()
        self.assertEqual((unliked["liked"], unliked["likes"]), (False, 0))

    def test_like_missing_blog(self):
        response = self.client.put("/api/blogs/9999/like", headers=self.auth_headers(self.bob["token"]))
        self.assertEqual(response.status_code, 404)

    def test_comments_are_ordered(self):
        url = f"/api/blogs/{self.blog['id']}/comment"
        self.client.post(url, json={"comment": "first"}, headers=self.auth_headers(self.bob["token"]))
        response = self.client.post(url, json={"comment": "second"},
                                    headers=self.auth_headers(self.alice["token"]))
        self.assertEqual(response.status_code, 201)

        comments = response.get_json()
        self.assertEqual([c["comment"] for c in comments], ["first", "second"])
        self.assertEqual(comments[0]["user"], {"id": self.bob["id"], "username": "bob"})

    def test_blank_comment_is_rejected(self):
        response = self.client.post(f"/api/blogs/{self.blog['id']}/comment", json={"comment": " "},
                                    headers=self.auth_headers(self.bob["token"]))
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
