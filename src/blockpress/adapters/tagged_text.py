"""Tagged-text codec for blog post bodies.

A body is a sequence of fragments separated by a blank line. Text blocks are
written bare; image, quote and video blocks are wrapped in bracketed tags:

    Intro text

    [image]https://cdn.example/shot.png[/image]

    [quote]Best boss fight of the year.[/quote]

Untagged text is split on blank lines as well as around tags, so each
paragraph of a stored multi-paragraph post loads as its own Text block.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from ..core.model import BlogBlockType, ContentBlock
from ..core.ports import IdGenerator, TextCodec
from ..core.registry import blog_type_for_tag, tag_for, tag_names
from .idgen import CounterId

logger = logging.getLogger(__name__)

SEPARATOR = "\n\n"

# Non-greedy, same-kind closing tag; no nesting. DOTALL lets a quote span lines.
TAG_RE = re.compile(
    r"\[(?P<tag>%s)\](?P<body>.*?)\[/(?P=tag)\]" % "|".join(tag_names()),
    re.DOTALL,
)
PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")
UNCLOSED_RE = re.compile(r"\[(?:%s)\]" % "|".join(tag_names()))


@dataclass(frozen=True)
class Token:
    kind: str  # "tag" | "text"
    value: str  # inner text for tags, trimmed segment for text
    tag: str | None = None


def tokenize(text: str) -> Iterator[Token]:
    """
    Split-with-capture scanner over a tagged-text body.

    Tagged fragments are emitted whole; the text between them is split on
    blank lines and trimmed. Empty segments are dropped. Anything that does
    not form a complete same-kind tag pair stays text.
    """
    pos = 0
    for m in TAG_RE.finditer(text):
        yield from _text_tokens(text[pos : m.start()])
        yield Token("tag", m.group("body"), m.group("tag"))
        pos = m.end()
    yield from _text_tokens(text[pos:])


def _text_tokens(segment: str) -> Iterator[Token]:
    for part in PARAGRAPH_BREAK_RE.split(segment):
        part = part.strip()
        if not part:
            continue
        if UNCLOSED_RE.search(part):
            logger.debug("unterminated tag kept as text: %.40r", part)
        yield Token("text", part)


class TaggedTextCodec(TextCodec):
    def __init__(self, idgen: IdGenerator | None = None):
        self.idgen = idgen or CounterId()

    def encode(self, blocks: Iterable[ContentBlock]) -> str:
        fragments = []
        for block in sorted(blocks, key=lambda b: b.order):
            if not isinstance(block.type, BlogBlockType):
                raise ValueError(f"{block.type!r} has no tagged-text form")
            tag = tag_for(block.type)
            if tag is None:
                fragments.append(block.content)
            else:
                fragments.append(f"[{tag}]{block.content}[/{tag}]")
        return SEPARATOR.join(fragments)

    def decode(self, text: str) -> list[ContentBlock]:
        blocks: list[ContentBlock] = []
        for token in tokenize(text or ""):
            if token.kind == "tag":
                block_type = blog_type_for_tag(token.tag) or BlogBlockType.TEXT
            else:
                block_type = BlogBlockType.TEXT
            blocks.append(
                ContentBlock(
                    client_id=self.idgen.new_id(),
                    type=block_type,
                    content=token.value,
                    order=len(blocks),
                )
            )
        return blocks
