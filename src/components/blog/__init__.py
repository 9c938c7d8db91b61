"""
Blog component - Public feed, post detail and live admin list.
"""

from .component import (
    LivePostList,
    run_delete_post,
    run_get_public_post,
    run_list_admin_posts,
    run_list_public_posts,
)
from .models import PostListOutput, PostOperationOutput
from .ports import ChangeFeedPort

__all__ = [
    # Entry points
    "run_list_public_posts",
    "run_get_public_post",
    "run_list_admin_posts",
    "run_delete_post",
    "LivePostList",
    # Models
    "PostListOutput",
    "PostOperationOutput",
    # Ports
    "ChangeFeedPort",
]
