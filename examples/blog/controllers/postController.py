"""Posts, kept in memory on the shared controller instance.

    GET  /post                -> index
    GET  /post/post/:slug     -> get_post
    POST /post/post/:slug     -> post_post
    GET  /post/page/:number   -> get_page
"""

from dataclasses import dataclass, field

PAGE_SIZE = 2


@dataclass(slots=True)
class Post:
    slug: str
    title: str
    likes: int = 0
    tags: list[str] = field(default_factory=list)


class PostController:
    def __init__(self):
        self.posts = {
            "hello": Post("hello", "Hello, world", tags=["intro"]),
            "routing": Post("routing", "Routes without a route table", tags=["warble"]),
            "views": Post("views", "Views by convention"),
        }

    def index(self):
        return self.render({"posts": self._ordered()})

    def get_post(self, slug):
        post = self.posts.get(slug)
        if post is None:
            return self.redirect("/post")
        return self.render({"post": post})

    def post_post(self, slug):
        """Like a post."""
        if slug in self.posts:
            self.posts[slug].likes += 1
        return self.redirect(f"/post/post/{slug}")

    def get_page(self, number: int):
        start = (number - 1) * PAGE_SIZE
        return self.render("index", {"posts": self._ordered()[start:start + PAGE_SIZE], "page": number})

    def _ordered(self):
        return sorted(self.posts.values(), key=lambda p: p.title)


controller = PostController
