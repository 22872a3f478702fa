"""Ordered block collection for one document being authored."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .model import (
    SECONDARY_FIELD_NAMES,
    BlockType,
    ClientId,
    ContentBlock,
    GuideBlockType,
    SecondaryFields,
)
from .ports import IdGenerator
from .registry import (
    VariantSet,
    applicable_fields,
    default_type,
    has_content,
    has_secondary_fields,
    variant_set,
)

logger = logging.getLogger(__name__)


class BlockCollection:
    """
    Owns the blocks of one document for the lifetime of an authoring session.

    Invariants held after every operation:
    - at least one block is present
    - ``order`` values are exactly 0..n-1 and follow list position
    - ``client_id`` and ``persisted_id`` never change once assigned

    Operations addressing an unknown client id are no-ops.
    """

    def __init__(self, variant: VariantSet, idgen: IdGenerator):
        self.variant = variant
        self.idgen = idgen
        self.seeded = False
        self._blocks: list[ContentBlock] = []
        self.insert(default_type(variant))

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[ContentBlock]:
        return iter(self.to_ordered_list())

    def get(self, client_id: ClientId) -> ContentBlock | None:
        idx = self._index(client_id)
        return self._blocks[idx] if idx is not None else None

    @property
    def can_remove(self) -> bool:
        return len(self._blocks) > 1

    def insert(self, block_type: BlockType, at_end: bool = True) -> ContentBlock:
        if variant_set(block_type) is not self.variant:
            raise ValueError(
                f"{block_type!r} does not belong to {self.variant.__name__}"
            )
        block = ContentBlock(
            client_id=self.idgen.new_id(),
            type=block_type,
            fields=SecondaryFields() if has_secondary_fields(self.variant) else None,
        )
        if at_end:
            block.order = len(self._blocks)
            self._blocks.append(block)
        else:
            self._blocks.insert(0, block)
            self._renumber()
        return block

    def update(self, client_id: ClientId, content: str | None = None, **fields: str) -> None:
        unknown = set(fields) - set(SECONDARY_FIELD_NAMES)
        if unknown:
            raise TypeError(f"Unknown block field(s): {', '.join(sorted(unknown))}")

        block = self.get(client_id)
        if block is None:
            logger.debug("update ignored, no block %s", client_id)
            return
        if content is not None:
            block.content = content
        if fields:
            if block.fields is None:
                logger.debug("block %s carries no secondary fields; patch ignored", client_id)
                return
            applicable = applicable_fields(block.type)
            stray = sorted(set(fields) - set(applicable))
            if stray:
                logger.debug(
                    "%s block %s has no %s; ignored", block.type.name, client_id, ", ".join(stray)
                )
            for name, value in fields.items():
                if name in applicable:
                    setattr(block.fields, name, value)

    def remove(self, client_id: ClientId) -> bool:
        idx = self._index(client_id)
        if idx is None:
            return False
        if not self.can_remove:
            logger.debug("refusing to remove the last block %s", client_id)
            return False
        del self._blocks[idx]
        self._renumber()
        return True

    def move_up(self, client_id: ClientId) -> bool:
        return self._swap(client_id, -1)

    def move_down(self, client_id: ClientId) -> bool:
        return self._swap(client_id, 1)

    def validate_non_empty(self) -> bool:
        """True when some non-divider block carries content."""
        return any(
            has_content(b)
            for b in self._blocks
            if b.type is not GuideBlockType.DIVIDER
        )

    def to_ordered_list(self) -> list[ContentBlock]:
        # sorted() is stable, so equal orders keep insertion sequence
        return sorted(self._blocks, key=lambda b: b.order)

    def seed(self, blocks: Iterable[ContentBlock]) -> bool:
        """
        Replace the contents with decoded blocks, once per collection.

        Later calls return False and leave the collection untouched, so a
        refreshed payload does not clobber edits in progress. An empty input
        keeps a single default text block.
        """
        if self.seeded:
            logger.debug("collection already seeded; ignoring reload")
            return False
        incoming = list(blocks)
        for b in incoming:
            if variant_set(b.type) is not self.variant:
                raise ValueError(f"{b.type!r} does not belong to {self.variant.__name__}")
        self.seeded = True
        if not incoming:
            self._blocks = []
            self.insert(default_type(self.variant))
            return True

        self._blocks = sorted(incoming, key=lambda b: b.order)
        self._renumber()
        return True

    def _index(self, client_id: ClientId) -> int | None:
        for i, b in enumerate(self._blocks):
            if b.client_id == client_id:
                return i
        return None

    def _swap(self, client_id: ClientId, step: int) -> bool:
        idx = self._index(client_id)
        if idx is None:
            return False
        target = idx + step
        if target < 0 or target >= len(self._blocks):
            return False
        self._blocks[idx], self._blocks[target] = self._blocks[target], self._blocks[idx]
        self._renumber()
        return True

    def _renumber(self) -> None:
        for i, b in enumerate(self._blocks):
            b.order = i
