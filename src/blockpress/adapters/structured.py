"""Structured-block codec for guides: blocks <-> ``guideBlocks`` records."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.model import (
    BlockRecord,
    ContentBlock,
    GuideBlockType,
    SecondaryFields,
)
from ..core.ports import IdGenerator, RecordCodec
from ..core.registry import guide_type_from_code, has_content, shape_of
from ..errors import DecodeError
from .idgen import CounterId

logger = logging.getLogger(__name__)


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def record_from_dict(data: Mapping[str, Any]) -> BlockRecord:
    """Build a record from its wire form (camelCase keys, null-tolerant)."""
    if not isinstance(data, Mapping):
        raise DecodeError(f"Block record must be a mapping, got {type(data).__name__}")
    if "blockType" not in data:
        raise DecodeError("Block record is missing 'blockType'")

    raw_id = data.get("id")
    try:
        record_id = int(raw_id) if raw_id is not None else None
        order = int(data.get("order") or 0)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid block record: {e}") from e

    return BlockRecord(
        block_type=guide_type_from_code(data["blockType"]),
        order=order,
        id=record_id,
        content=_str(data.get("content")),
        media_url=_str(data.get("mediaUrl")),
        caption=_str(data.get("caption")),
        title=_str(data.get("title")),
        metadata=_str(data.get("metadata")),
    )


class StructuredBlockCodec(RecordCodec):
    def __init__(self, idgen: IdGenerator | None = None):
        self.idgen = idgen or CounterId()

    def encode(self, blocks: Iterable[ContentBlock]) -> list[BlockRecord]:
        records: list[BlockRecord] = []
        for block in sorted(blocks, key=lambda b: b.order):
            if not isinstance(block.type, GuideBlockType):
                raise ValueError(f"{block.type!r} is not a guide block type")
            if block.type is not GuideBlockType.DIVIDER and not has_content(block):
                logger.debug("dropping blank %s block %s", block.type.name, block.client_id)
                continue
            records.append(self._record(block, order=len(records) + 1))
        return records

    def decode(
        self, records: Iterable[BlockRecord | Mapping[str, Any]]
    ) -> list[ContentBlock]:
        parsed = [
            r if isinstance(r, BlockRecord) else record_from_dict(r) for r in records
        ]
        parsed.sort(key=lambda r: r.order)
        return [
            ContentBlock(
                client_id=self.idgen.new_id(),
                type=r.block_type,
                content=r.content,
                order=r.order,
                persisted_id=r.id,
                fields=SecondaryFields(
                    media_url=r.media_url,
                    caption=r.caption,
                    title=r.title,
                    metadata=r.metadata,
                ),
            )
            for r in parsed
        ]

    def _record(self, block: ContentBlock, order: int) -> BlockRecord:
        shape = shape_of(block.type)
        fields = block.fields or SecondaryFields()

        def applicable(name: str) -> str:
            return getattr(fields, name) if name in shape.secondary else ""

        return BlockRecord(
            block_type=block.type,
            order=order,
            id=block.persisted_id,
            content=block.content if shape.primary != "none" else "",
            media_url=applicable("media_url"),
            caption=applicable("caption"),
            title=applicable("title"),
            metadata=applicable("metadata"),
        )
