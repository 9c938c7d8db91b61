"""Admin blog post list and deletion."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.adapters.sqlite.repos import SQLitePostRepo
from src.api.deps import get_live_posts, get_post_repo, require_admin
from src.api.errors import raise_for_failure
from src.api.schemas import OperationResponse, PostListResponse
from src.components.blog import LivePostList, run_delete_post
from src.domain.entities import SessionContext

router = APIRouter()


@router.get("", response_model=PostListResponse)
def list_posts(
    _: SessionContext = Depends(require_admin),
    live: LivePostList = Depends(get_live_posts),
) -> PostListResponse:
    """All posts, newest first, as last refreshed by change notifications."""
    return PostListResponse(posts=live.posts, total=len(live.posts))


@router.delete("/{post_id}", response_model=OperationResponse)
def delete_post(
    post_id: UUID,
    session: SessionContext = Depends(require_admin),
    repo: SQLitePostRepo = Depends(get_post_repo),
) -> OperationResponse:
    result = run_delete_post(post_id, session, repo=repo)
    if not result.success:
        raise_for_failure(result.error_code, result.notification)
    return OperationResponse(success=True, notification=result.notification)
