"""Tests for the tagged-text codec."""

import pytest

from blockpress.adapters.idgen import CounterId
from blockpress.adapters.tagged_text import TaggedTextCodec, tokenize
from blockpress.core.collection import BlockCollection
from blockpress.core.model import BlogBlockType, ContentBlock, GuideBlockType


@pytest.fixture
def codec():
    return TaggedTextCodec(CounterId(prefix="t"))


def pairs(blocks):
    return [(b.type, b.content) for b in blocks]


def test_encode_example():
    """Text bare, media and quotes tagged, joined by a blank line."""
    collection = BlockCollection(BlogBlockType, CounterId())
    first = collection.to_ordered_list()[0]
    collection.update(first.client_id, content="Hello")
    image = collection.insert(BlogBlockType.IMAGE)
    collection.update(image.client_id, content="http://x/y.png")
    quote = collection.insert(BlogBlockType.QUOTE)
    collection.update(quote.client_id, content="Nice")

    text = TaggedTextCodec().encode(collection.to_ordered_list())
    assert text == "Hello\n\n[image]http://x/y.png[/image]\n\n[quote]Nice[/quote]"


def test_encode_follows_order_not_list_position(codec):
    blocks = [
        ContentBlock("b", BlogBlockType.VIDEO, "http://v", order=1),
        ContentBlock("a", BlogBlockType.TEXT, "Intro", order=0),
    ]
    assert codec.encode(blocks) == "Intro\n\n[video]http://v[/video]"


def test_encode_rejects_guide_types(codec):
    with pytest.raises(ValueError):
        codec.encode([ContentBlock("x", GuideBlockType.DIVIDER)])


def test_decode_example(codec):
    blocks = codec.decode("Intro text\n\n[video]http://v[/video]\n\nOutro")

    assert pairs(blocks) == [
        (BlogBlockType.TEXT, "Intro text"),
        (BlogBlockType.VIDEO, "http://v"),
        (BlogBlockType.TEXT, "Outro"),
    ]
    assert [b.order for b in blocks] == [0, 1, 2]
    assert len({b.client_id for b in blocks}) == 3
    assert all(b.persisted_id is None and b.fields is None for b in blocks)


def test_decode_unterminated_tag_is_text(codec):
    """A tag with no closing partner stays literal text."""
    blocks = codec.decode("[image]unterminated")
    assert pairs(blocks) == [(BlogBlockType.TEXT, "[image]unterminated")]


def test_decode_mismatched_closing_tag_is_text(codec):
    blocks = codec.decode("[image]http://x[/quote]")
    assert pairs(blocks) == [(BlogBlockType.TEXT, "[image]http://x[/quote]")]


def test_decode_unknown_tag_is_text(codec):
    blocks = codec.decode("[code]print()[/code]")
    assert pairs(blocks) == [(BlogBlockType.TEXT, "[code]print()[/code]")]


def test_decode_is_non_greedy(codec):
    """Each opening tag closes at the nearest closing tag of its kind."""
    blocks = codec.decode("[quote]a[/quote][quote]b[/quote]")
    assert pairs(blocks) == [
        (BlogBlockType.QUOTE, "a"),
        (BlogBlockType.QUOTE, "b"),
    ]


def test_decode_tags_do_not_nest(codec):
    blocks = codec.decode("[quote]outer [image]x[/image] tail[/quote]")
    assert pairs(blocks) == [(BlogBlockType.QUOTE, "outer [image]x[/image] tail")]


def test_decode_tag_glued_to_text(codec):
    blocks = codec.decode("See this:[image]http://x/y.png[/image]Cool, right?")
    assert pairs(blocks) == [
        (BlogBlockType.TEXT, "See this:"),
        (BlogBlockType.IMAGE, "http://x/y.png"),
        (BlogBlockType.TEXT, "Cool, right?"),
    ]


def test_decode_multiline_quote(codec):
    blocks = codec.decode("[quote]line one\nline two[/quote]")
    assert pairs(blocks) == [(BlogBlockType.QUOTE, "line one\nline two")]


def test_decode_drops_blank_segments(codec):
    blocks = codec.decode("\n\n  \n\nFirst\n\n\n\n   \n\nSecond\n\n")
    assert pairs(blocks) == [
        (BlogBlockType.TEXT, "First"),
        (BlogBlockType.TEXT, "Second"),
    ]


@pytest.mark.parametrize("text", ["", "   ", "\n\n\n"])
def test_decode_empty_yields_no_blocks(codec, text):
    assert codec.decode(text) == []


def test_decode_keeps_single_newlines_in_text(codec):
    blocks = codec.decode("line one\nline two")
    assert pairs(blocks) == [(BlogBlockType.TEXT, "line one\nline two")]


def test_round_trip_preserves_type_and_content(codec):
    """decode(encode(blocks)) keeps the (type, content) sequence; ids change."""
    original = [
        ContentBlock("a", BlogBlockType.TEXT, "Patch 1.2 notes", order=0),
        ContentBlock("b", BlogBlockType.TEXT, "Balance changes below.", order=1),
        ContentBlock("c", BlogBlockType.IMAGE, "https://cdn.example/a.png", order=2),
        ContentBlock("d", BlogBlockType.QUOTE, "Worth it.\nTruly.", order=3),
        ContentBlock("e", BlogBlockType.VIDEO, "https://youtu.be/xyz", order=4),
        ContentBlock("f", BlogBlockType.TEXT, "Line one\nline two", order=5),
    ]
    decoded = codec.decode(codec.encode(original))

    assert pairs(decoded) == pairs(original)
    assert not {b.client_id for b in decoded} & {b.client_id for b in original}


def test_tokenize_kinds():
    tokens = list(tokenize("a\n\n[video]v[/video]"))
    assert [(t.kind, t.tag, t.value) for t in tokens] == [
        ("text", None, "a"),
        ("tag", "video", "v"),
    ]
