"""
Blog component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities import BlogPost


@dataclass
class PostListOutput:
    posts: list[BlogPost]
    total: int


@dataclass
class PostOperationOutput:
    success: bool
    post: BlogPost | None = None
    notification: str = ""
    error_code: str | None = None
