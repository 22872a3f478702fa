from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Union

ClientId = str


class BlogBlockType(str, Enum):
    """Block variants of a blog post body (tagged-text flow)."""

    TEXT = "text"
    IMAGE = "image"
    QUOTE = "quote"
    VIDEO = "video"


class GuideBlockType(IntEnum):
    """Block variants of a guide (structured flow); values are the stored codes."""

    TEXT = 1
    IMAGE = 2
    VIDEO = 3
    LIST = 5
    QUOTE = 6
    DIVIDER = 7


BlockType = Union[BlogBlockType, GuideBlockType]

SECONDARY_FIELD_NAMES = ("media_url", "caption", "title", "metadata")


@dataclass
class SecondaryFields:
    media_url: str = ""
    caption: str = ""
    title: str = ""
    metadata: str = ""  # free-form, usually JSON written by the editor UI


@dataclass
class ContentBlock:
    client_id: ClientId
    type: BlockType
    content: str = ""  # URL for image/video, ignored for divider
    order: int = 0
    persisted_id: int | None = None  # server record id, structured flow only
    fields: SecondaryFields | None = None  # None in the tagged-text flow

    @property
    def is_new(self) -> bool:
        return self.persisted_id is None


@dataclass
class BlockRecord:
    """One element of a guide's ``guideBlocks`` array."""

    block_type: GuideBlockType
    order: int
    id: int | None = None
    content: str = ""
    media_url: str = ""
    caption: str = ""
    title: str = ""
    metadata: str = ""

    def to_dict(self) -> dict:
        out: dict = {}
        if self.id is not None:
            out["id"] = self.id
        out.update(
            {
                "blockType": int(self.block_type),
                "order": self.order,
                "content": self.content,
                "mediaUrl": self.media_url,
                "caption": self.caption,
                "title": self.title,
                "metadata": self.metadata,
            }
        )
        return out


@dataclass
class MergePlan:
    update: list[BlockRecord] = field(default_factory=list)
    insert: list[BlockRecord] = field(default_factory=list)
    delete: list[int] = field(default_factory=list)
    ignored: list[BlockRecord] = field(default_factory=list)  # ids not on the server
