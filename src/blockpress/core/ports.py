from typing import Protocol, Iterable, Any, Mapping
from .model import ClientId, ContentBlock, BlockRecord


class IdGenerator(Protocol):
    """
    Hands out client ids for one editing session. Ids are never reused.
    """

    def new_id(self) -> ClientId:
        pass


class TextCodec(Protocol):
    """
    Blocks <-> one tagged-text string. Identity does not survive the trip.
    """

    def encode(self, blocks: Iterable[ContentBlock]) -> str:
        pass

    def decode(self, text: str) -> list[ContentBlock]:
        pass


class RecordCodec(Protocol):
    """
    Blocks <-> discriminated block records. Persisted ids pass through unchanged.
    """

    def encode(self, blocks: Iterable[ContentBlock]) -> list[BlockRecord]:
        pass

    def decode(self, records: Iterable[BlockRecord | Mapping[str, Any]]) -> list[ContentBlock]:
        pass
