"""Public blog feed."""

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.sqlite.repos import SQLitePostRepo
from src.api.deps import get_post_repo
from src.api.schemas import PostListResponse
from src.components.blog import run_get_public_post, run_list_public_posts
from src.domain.entities import BlogPost
from src.domain.errors import NotFoundError

router = APIRouter()


@router.get("", response_model=PostListResponse)
def list_posts(
    limit: int | None = Query(default=None, ge=1),
    repo: SQLitePostRepo = Depends(get_post_repo),
) -> PostListResponse:
    result = run_list_public_posts(repo=repo, limit=limit)
    return PostListResponse(posts=result.posts, total=result.total)


@router.get("/{slug}", response_model=BlogPost)
def get_post(slug: str, repo: SQLitePostRepo = Depends(get_post_repo)) -> BlogPost:
    try:
        return run_get_public_post(slug, repo=repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Post not found") from e
