"""Save payloads handed to the persistence service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .core.model import BlockRecord


@dataclass
class BlogPostPayload:
    title: str
    summary: str
    content: str  # tagged text
    category_id: int
    tags: list[str] = field(default_factory=list)
    game_id: int | None = None
    cover_image_url: str | None = None
    is_published: bool = True

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "categoryId": self.category_id,
        }
        if self.game_id is not None:
            out["gameId"] = self.game_id
        if self.cover_image_url:
            out["coverImageUrl"] = self.cover_image_url
        out["tags"] = list(self.tags)
        out["isPublished"] = self.is_published
        return out


@dataclass
class GuidePayload:
    title: str
    summary: str
    difficulty: str
    thumbnail_url: str
    guide_blocks: list[BlockRecord] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    game_id: int | None = None
    guide_category_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "title": self.title,
            "summary": self.summary,
        }
        if self.game_id is not None:
            out["gameId"] = self.game_id
        if self.guide_category_id is not None:
            out["guideCategoryId"] = self.guide_category_id
        out.update(
            {
                "difficulty": self.difficulty,
                "thumbnailUrl": self.thumbnail_url,
                "tags": list(self.tags),
                "guideBlocks": [r.to_dict() for r in self.guide_blocks],
            }
        )
        return out
