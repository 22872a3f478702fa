import re, io
import yaml
from typing import Any
from ..errors import DecodeError

_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


def _load_mapping(text: str, what: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(io.StringIO(text)) or {}
    except yaml.YAMLError as e:
        raise DecodeError(f"Invalid YAML in {what}: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


class YamlFrontmatter:
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _FM.match(text)
        if not m:
            return {}, text
        fm = _load_mapping(m.group(1), "frontmatter")
        body = text[m.end() :]
        return (fm, body)

    def encode(self, meta: dict[str, Any]) -> str:
        if not meta:
            return ""
        buf = io.StringIO()
        yaml.safe_dump(meta, buf, sort_keys=False, allow_unicode=True)
        return f"---\n{buf.getvalue()}---\n"


class BlogDraftCodec:
    """
    Blog draft file: YAML frontmatter with the post fields, tagged-text body.

    The decoded mapping has the same keys as a stored post, with the body
    under ``content``, so it can be handed straight to a session's ``load``.
    """

    def __init__(self, fm: YamlFrontmatter | None = None):
        self.fm = fm or YamlFrontmatter()

    def decode_file(self, text: str) -> dict[str, Any]:
        meta, body = self.fm.decode(text)
        post = dict(meta)
        post["content"] = body.strip("\n")
        return post

    def encode_file(self, post: dict[str, Any]) -> str:
        meta = {k: v for k, v in post.items() if k != "content"}
        body = post.get("content") or ""
        return self.fm.encode(meta) + body + "\n"


class GuideDraftCodec:
    """Guide draft file: one YAML document shaped like a stored guide."""

    def decode_file(self, text: str) -> dict[str, Any]:
        guide = _load_mapping(text, "guide draft")
        blocks = guide.get("guideBlocks")
        if blocks is not None and not isinstance(blocks, list):
            raise DecodeError("guideBlocks must be a list")
        return guide

    def encode_file(self, guide: dict[str, Any]) -> str:
        buf = io.StringIO()
        yaml.safe_dump(guide, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue()
