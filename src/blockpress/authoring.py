"""Authoring sessions: one draft document bound to one block collection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .adapters.structured import StructuredBlockCodec
from .adapters.tagged_text import TaggedTextCodec
from .config import TagPolicy, ValidationConfig
from .core.collection import BlockCollection
from .core.model import BlogBlockType, GuideBlockType
from .errors import DecodeError, ValidationError
from .payloads import BlogPostPayload, GuidePayload
from .validation import check_tag, validate_blog_fields, validate_guide_fields

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "Orta"  # "medium", the platform's default guide difficulty


def _parse_tags(raw: Any) -> list[str]:
    """Tags arrive as a list, or as a comma-separated string from older posts."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [t.strip() for t in raw.split(",") if t.strip()]
    if isinstance(raw, (list, tuple)):
        return [str(t).strip() for t in raw if str(t).strip()]
    raise DecodeError(f"Unsupported tags value: {raw!r}")


def _text(raw: Any) -> str:
    """Scalar form field as text; YAML hands back numbers for values like ``2024``."""
    if raw is None:
        return ""
    if isinstance(raw, (dict, list)):
        raise DecodeError(f"Expected a text value, got {type(raw).__name__}")
    return str(raw)


def _optional_int(raw: Any) -> int | None:
    if raw in (None, "", 0):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Expected an integer id, got {raw!r}") from e


class _Session:
    """Shared form state: tags and the one-time load guard."""

    def __init__(self, collection: BlockCollection, tag_policy: TagPolicy):
        self.blocks = collection
        self.tag_policy = tag_policy
        self.title = ""
        self.summary = ""
        self.tags: list[str] = []
        self.game_id: int | None = None
        self.loaded = False

    def add_tag(self, tag: str) -> str | None:
        """Add a tag; returns the reason it was refused, or None."""
        msg = check_tag(tag, self.tags, self.tag_policy)
        if msg is None:
            self.tags.append(tag.strip())
        return msg

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    def _already_loaded(self) -> bool:
        if self.loaded:
            logger.debug("%s already loaded; ignoring refresh", type(self).__name__)
        return self.loaded


class BlogAuthoringSession(_Session):
    def __init__(self, codec: TaggedTextCodec, validation: ValidationConfig):
        super().__init__(BlockCollection(BlogBlockType, codec.idgen), validation.tags)
        self.codec = codec
        self.policy = validation.blog
        self.category_id = 0
        self.cover_image_url = ""
        self.is_published = True

    def load(self, persisted: Mapping[str, Any]) -> bool:
        """Fill the form from a stored post. Only the first call has any effect."""
        if self._already_loaded():
            return False
        # parse everything before touching state so a bad payload can be retried
        title = _text(persisted.get("title"))
        summary = _text(persisted.get("summary") or persisted.get("excerpt"))
        category_id = _optional_int(persisted.get("categoryId")) or 0
        game_id = _optional_int(persisted.get("gameId"))
        cover_image_url = _text(
            persisted.get("coverImageUrl") or persisted.get("thumbnailUrl")
        )
        tags = _parse_tags(persisted.get("tags"))
        blocks = self.codec.decode(_text(persisted.get("content")))

        self.blocks.seed(blocks)
        self.title = title
        self.summary = summary
        self.category_id = category_id
        self.game_id = game_id
        self.cover_image_url = cover_image_url
        self.tags = tags
        if "isPublished" in persisted:
            self.is_published = bool(persisted["isPublished"])
        self.loaded = True
        return True

    def content(self) -> str:
        return self.codec.encode(self.blocks.to_ordered_list())

    def validate(self) -> dict[str, str]:
        return validate_blog_fields(
            title=self.title,
            summary=self.summary,
            content=self.content(),
            category_id=self.category_id,
            cover_image_url=self.cover_image_url,
            tags=self.tags,
            has_content=self.blocks.validate_non_empty(),
            policy=self.policy,
            tag_policy=self.tag_policy,
        )

    def build_payload(self) -> BlogPostPayload:
        errors = self.validate()
        if errors:
            raise ValidationError(errors)
        return BlogPostPayload(
            title=self.title.strip(),
            summary=self.summary.strip(),
            content=self.content(),
            category_id=self.category_id,
            tags=list(self.tags),
            game_id=self.game_id,
            cover_image_url=self.cover_image_url.strip() or None,
            is_published=self.is_published,
        )


class GuideAuthoringSession(_Session):
    def __init__(self, codec: StructuredBlockCodec, validation: ValidationConfig):
        super().__init__(BlockCollection(GuideBlockType, codec.idgen), validation.tags)
        self.codec = codec
        self.policy = validation.guide
        self.guide_category_id: int | None = None
        self.difficulty = DEFAULT_DIFFICULTY
        self.thumbnail_url = ""

    def load(self, persisted: Mapping[str, Any]) -> bool:
        """Fill the form from a stored guide, keeping each block's server id."""
        if self._already_loaded():
            return False
        game = persisted.get("game") or {}
        category = persisted.get("guideCategory") or {}
        if not isinstance(game, Mapping) or not isinstance(category, Mapping):
            raise DecodeError("'game' and 'guideCategory' must be mappings")
        title = _text(persisted.get("title"))
        summary = _text(persisted.get("summary"))
        game_id = _optional_int(persisted.get("gameId") or game.get("id"))
        guide_category_id = _optional_int(
            persisted.get("guideCategoryId") or category.get("id")
        )
        difficulty = _text(persisted.get("difficulty")) or DEFAULT_DIFFICULTY
        thumbnail_url = _text(persisted.get("thumbnailUrl"))
        tags = _parse_tags(persisted.get("tags"))
        blocks = self.codec.decode(persisted.get("guideBlocks") or [])

        self.blocks.seed(blocks)
        self.title = title
        self.summary = summary
        self.game_id = game_id
        self.guide_category_id = guide_category_id
        self.difficulty = difficulty
        self.thumbnail_url = thumbnail_url
        self.tags = tags
        self.loaded = True
        return True

    def validate(self) -> dict[str, str]:
        return validate_guide_fields(
            title=self.title,
            summary=self.summary,
            tags=self.tags,
            has_content=self.blocks.validate_non_empty(),
            policy=self.policy,
            tag_policy=self.tag_policy,
        )

    def build_payload(self) -> GuidePayload:
        errors = self.validate()
        if errors:
            raise ValidationError(errors)
        return GuidePayload(
            title=self.title.strip(),
            summary=self.summary.strip(),
            difficulty=self.difficulty,
            thumbnail_url=self.thumbnail_url.strip(),
            guide_blocks=self.codec.encode(self.blocks.to_ordered_list()),
            tags=list(self.tags),
            game_id=self.game_id,
            guide_category_id=self.guide_category_id,
        )
