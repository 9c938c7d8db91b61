"""
Blog component - Public feed, post detail and the admin post list.
"""

from __future__ import annotations

import logging
from uuid import UUID

from src.domain.entities import BlogPost, SessionContext
from src.domain.errors import AuthRequired, DirectoryError, NotFoundError
from src.domain.events import POSTS_TOPIC, ChangeEvent
from src.domain.query import Eq, OrderBy

from .models import PostListOutput, PostOperationOutput
from .ports import ChangeFeedPort, PostRepoPort

logger = logging.getLogger(__name__)

PUBLIC_ORDER = (OrderBy("is_featured", descending=True), OrderBy("created_at", descending=True))
NEWEST_FIRST = (OrderBy("created_at", descending=True),)


def run_list_public_posts(*, repo: PostRepoPort, limit: int | None = None) -> PostListOutput:
    """Published posts, featured first then newest."""
    posts = repo.select([Eq("published", True)], PUBLIC_ORDER, limit)
    return PostListOutput(posts=posts, total=len(posts))


def run_get_public_post(slug: str, *, repo: PostRepoPort) -> BlogPost:
    post = repo.get_by_slug(slug)
    if post is None or not post.published:
        raise NotFoundError("Post", slug)
    return post


def run_list_admin_posts(*, repo: PostRepoPort) -> PostListOutput:
    posts = repo.select([], NEWEST_FIRST)
    return PostListOutput(posts=posts, total=len(posts))


def run_delete_post(
    post_id: UUID, session: SessionContext | None, *, repo: PostRepoPort
) -> PostOperationOutput:
    try:
        if session is None or not session.is_admin:
            raise AuthRequired("Admin access required")
        post = repo.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        repo.delete(post.id)
    except DirectoryError as e:
        logger.warning("Deleting post %s failed: %s", post_id, e)
        return PostOperationOutput(success=False, notification=str(e), error_code=e.code)

    logger.info("Post %s deleted by %s", post_id, session.user_id)
    return PostOperationOutput(success=True, post=post, notification="Post deleted successfully")


class LivePostList:
    """
    Admin post list kept current by change notifications.

    Any insert, update or delete on the posts topic triggers a reload, so
    edits made in another session show up without a manual refresh.
    """

    def __init__(self, repo: PostRepoPort, feed: ChangeFeedPort) -> None:
        self._repo = repo
        self.posts: list[BlogPost] = run_list_admin_posts(repo=repo).posts
        self.reloads = 0
        self._unsubscribe = feed.subscribe(POSTS_TOPIC, self._on_change)

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug("Post %s changed (%s), reloading admin list", event.record_id, event.kind)
        self.posts = run_list_admin_posts(repo=self._repo).posts
        self.reloads += 1

    def close(self) -> None:
        self._unsubscribe()
