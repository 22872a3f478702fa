"""Block type registry: the closed variant sets and the field shape of each type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..errors import UnknownBlockTypeError
from .model import BlockType, BlogBlockType, ContentBlock, GuideBlockType

PrimaryKind = Literal["text", "url", "none"]


@dataclass(frozen=True)
class BlockShape:
    primary: PrimaryKind
    secondary: tuple[str, ...] = ()  # SecondaryFields attributes that apply
    tag: str | None = None  # tagged-text marker, blog media/quote types only


BLOG_SHAPES: dict[BlogBlockType, BlockShape] = {
    BlogBlockType.TEXT: BlockShape("text"),
    BlogBlockType.IMAGE: BlockShape("url", tag="image"),
    BlogBlockType.QUOTE: BlockShape("text", tag="quote"),
    BlogBlockType.VIDEO: BlockShape("url", tag="video"),
}

GUIDE_SHAPES: dict[GuideBlockType, BlockShape] = {
    GuideBlockType.TEXT: BlockShape("text", ("title", "metadata")),
    GuideBlockType.IMAGE: BlockShape("url", ("media_url", "caption", "metadata")),
    GuideBlockType.VIDEO: BlockShape("url", ("media_url", "caption", "metadata")),
    GuideBlockType.LIST: BlockShape("text", ("title", "metadata")),
    GuideBlockType.QUOTE: BlockShape("text", ("title", "metadata")),
    GuideBlockType.DIVIDER: BlockShape("none", ("metadata",)),
}

_TAGS: dict[str, BlogBlockType] = {
    shape.tag: t for t, shape in BLOG_SHAPES.items() if shape.tag is not None
}

VariantSet = type[BlogBlockType] | type[GuideBlockType]


def shape_of(block_type: BlockType) -> BlockShape:
    if isinstance(block_type, BlogBlockType):
        return BLOG_SHAPES[block_type]
    if isinstance(block_type, GuideBlockType):
        return GUIDE_SHAPES[block_type]
    raise UnknownBlockTypeError(block_type)


def variant_set(block_type: BlockType) -> VariantSet:
    if isinstance(block_type, BlogBlockType):
        return BlogBlockType
    if isinstance(block_type, GuideBlockType):
        return GuideBlockType
    raise UnknownBlockTypeError(block_type)


def default_type(variant: VariantSet) -> BlockType:
    return variant.TEXT


def has_secondary_fields(variant: VariantSet) -> bool:
    return variant is GuideBlockType


def applicable_fields(block_type: BlockType) -> tuple[str, ...]:
    return shape_of(block_type).secondary


def has_content(block: ContentBlock) -> bool:
    """
    True when the block carries something worth saving.

    A non-blank ``media_url`` only counts for types whose shape stores one;
    on other types it is dropped on encode and must not keep the block alive.
    """
    if block.content.strip():
        return True
    if block.fields is None or "media_url" not in applicable_fields(block.type):
        return False
    return bool(block.fields.media_url.strip())


def tag_for(block_type: BlogBlockType) -> str | None:
    return BLOG_SHAPES[block_type].tag


def tag_names() -> tuple[str, ...]:
    return tuple(_TAGS)


def blog_type_for_tag(tag: str) -> BlogBlockType | None:
    return _TAGS.get(tag)


def blog_type_from_name(name: str) -> BlogBlockType:
    try:
        return BlogBlockType(name.strip().lower())
    except ValueError:
        raise UnknownBlockTypeError(name) from None


def guide_type_from_code(code: object) -> GuideBlockType:
    """
    Map a stored discriminator to its guide type.

    Accepts the numeric code or the member name ("Image", "divider").
    Codes the platform reserves for other block kinds (4, 8, 9, 10) are rejected.
    """
    if isinstance(code, bool):
        raise UnknownBlockTypeError(code)
    if isinstance(code, str):
        stripped = code.strip()
        if stripped.isdigit():
            code = int(stripped)
        else:
            try:
                return GuideBlockType[stripped.upper()]
            except KeyError:
                raise UnknownBlockTypeError(code) from None
    try:
        return GuideBlockType(code)
    except ValueError:
        raise UnknownBlockTypeError(code) from None
