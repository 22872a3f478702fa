"""CLI for blockpress - block-based blog and guide drafts."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.structured import record_from_dict
from .core.merge import plan_merge
from .core.model import BlogBlockType, ContentBlock
from .core.registry import blog_type_from_name
from .errors import BlockpressError, DecodeError, ValidationError
from .runtime import build_runtime

logger = logging.getLogger(__name__)


def _read(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _dump(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _block_json(block: ContentBlock) -> dict[str, Any]:
    out: dict[str, Any] = {
        "clientId": block.client_id,
        "type": block.type.name.lower(),
        "order": block.order,
        "content": block.content,
    }
    if block.persisted_id is not None:
        out["persistedId"] = block.persisted_id
    if block.fields is not None:
        out["mediaUrl"] = block.fields.media_url
        out["caption"] = block.fields.caption
        out["title"] = block.fields.title
        out["metadata"] = block.fields.metadata
    return out


def _print_errors(errors: dict[str, str]) -> None:
    for field_name, message in sorted(errors.items()):
        print(f"{field_name}: {message}", file=sys.stderr)


def cmd_blog_decode(args: argparse.Namespace, rt: Any) -> int:
    """Split a tagged-text body (or blog draft) into blocks."""
    post = rt.blog_drafts.decode_file(_read(args.path))
    blocks = rt.tagged.decode(post["content"])
    _dump([_block_json(b) for b in blocks])
    return 0


def cmd_blog_encode(args: argparse.Namespace, rt: Any) -> int:
    """Join a JSON list of {type, content} blocks into tagged text."""
    try:
        items = json.loads(_read(args.path))
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e
    if not isinstance(items, list):
        raise DecodeError("Expected a JSON list of blocks")

    blocks = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise DecodeError(f"Block {i} must be an object")
        blocks.append(
            ContentBlock(
                client_id=rt.idgen.new_id(),
                type=blog_type_from_name(str(item.get("type", BlogBlockType.TEXT.value))),
                content=str(item.get("content") or ""),
                order=i,
            )
        )
    print(rt.tagged.encode(blocks))
    return 0


def _blog_session(args: argparse.Namespace, rt: Any) -> Any:
    session = rt.new_blog_session()
    session.load(rt.blog_drafts.decode_file(_read(args.path)))
    return session


def _guide_session(args: argparse.Namespace, rt: Any) -> Any:
    session = rt.new_guide_session()
    session.load(rt.guide_drafts.decode_file(_read(args.path)))
    return session


def cmd_check(args: argparse.Namespace, rt: Any) -> int:
    """Validate a draft without building a payload."""
    if args.kind == "blog":
        session = _blog_session(args, rt)
    else:
        session = _guide_session(args, rt)
    errors = session.validate()
    if errors:
        _print_errors(errors)
        return 1
    if not args.quiet:
        print("OK")
    return 0


def cmd_payload(args: argparse.Namespace, rt: Any) -> int:
    """Print the save payload for a draft."""
    if args.kind == "blog":
        session = _blog_session(args, rt)
    else:
        session = _guide_session(args, rt)
    try:
        payload = session.build_payload()
    except ValidationError as e:
        _print_errors(e.errors)
        return 1
    _dump(payload.to_dict())
    return 0


def cmd_blog_fmt(args: argparse.Namespace, rt: Any) -> int:
    """Rewrite a blog draft's body in canonical tagged-text form."""
    original = _read(args.path)
    post = rt.blog_drafts.decode_file(original)
    post["content"] = rt.tagged.encode(rt.tagged.decode(post["content"]))
    formatted = rt.blog_drafts.encode_file(post)

    if formatted == original:
        if not args.quiet:
            print(f"{args.path}: unchanged")
        return 0
    if args.check:
        print(f"{args.path}: would reformat")
        return 1
    if str(args.path) == "-":
        sys.stdout.write(formatted)
    else:
        args.path.write_text(formatted, encoding="utf-8")
        if not args.quiet:
            print(f"{args.path}: formatted")
    return 0


def cmd_guide_decode(args: argparse.Namespace, rt: Any) -> int:
    """List the blocks of a guide draft, with their server ids."""
    guide = rt.guide_drafts.decode_file(_read(args.path))
    blocks = rt.structured.decode(guide.get("guideBlocks") or [])
    _dump([_block_json(b) for b in blocks])
    return 0


def cmd_guide_merge(args: argparse.Namespace, rt: Any) -> int:
    """Show which stored blocks a guide payload updates, inserts and deletes."""
    stored = rt.guide_drafts.decode_file(_read(args.stored))
    submitted = rt.guide_drafts.decode_file(_read(args.payload))

    existing_ids = []
    for record in stored.get("guideBlocks") or []:
        if not isinstance(record, dict) or record.get("id") is None:
            raise DecodeError("Stored guide blocks must all carry an 'id'")
        try:
            existing_ids.append(int(record["id"]))
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Invalid stored block id: {record['id']!r}") from e

    records = [record_from_dict(r) for r in submitted.get("guideBlocks") or []]
    plan = plan_merge(existing_ids, records)
    _dump(
        {
            "update": [r.id for r in plan.update],
            "insert": [r.order for r in plan.insert],
            "delete": plan.delete,
            "ignored": [r.id for r in plan.ignored],
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockpress", description="Block-based blog and guide drafts"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=(
            f"blockpress {__version__} "
            f"(python {platform.python_version()}, platform {platform.system().lower()})"
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/blockpress.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging to stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # blog commands
    parser_blog = subparsers.add_parser("blog", help="Blog post drafts (tagged text)")
    blog_sub = parser_blog.add_subparsers(dest="blog_cmd", required=True)

    p = blog_sub.add_parser("decode", help="Split tagged text into blocks (JSON)")
    p.add_argument("path", type=Path, help="Tagged-text file or blog draft ('-' for stdin)")

    p = blog_sub.add_parser("encode", help="Join JSON blocks into tagged text")
    p.add_argument("path", type=Path, help="JSON list of {type, content} ('-' for stdin)")

    p = blog_sub.add_parser("check", help="Validate a blog draft")
    p.add_argument("path", type=Path)

    p = blog_sub.add_parser("payload", help="Print the blog save payload")
    p.add_argument("path", type=Path)

    p = blog_sub.add_parser("fmt", help="Canonicalize a blog draft's body")
    p.add_argument("path", type=Path)
    p.add_argument(
        "--check", action="store_true",
        help="Exit 1 if the file would change, without writing"
    )

    # guide commands
    parser_guide = subparsers.add_parser("guide", help="Guide drafts (structured blocks)")
    guide_sub = parser_guide.add_subparsers(dest="guide_cmd", required=True)

    p = guide_sub.add_parser("decode", help="List guide blocks (JSON)")
    p.add_argument("path", type=Path)

    p = guide_sub.add_parser("check", help="Validate a guide draft")
    p.add_argument("path", type=Path)

    p = guide_sub.add_parser("payload", help="Print the guide save payload")
    p.add_argument("path", type=Path)

    p = guide_sub.add_parser("merge", help="Plan a save against stored blocks")
    p.add_argument("stored", type=Path, help="Stored guide (blocks with ids)")
    p.add_argument("payload", type=Path, help="Submitted guide payload")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    blog_handlers = {
        "decode": cmd_blog_decode,
        "encode": cmd_blog_encode,
        "check": cmd_check,
        "payload": cmd_payload,
        "fmt": cmd_blog_fmt,
    }
    guide_handlers = {
        "decode": cmd_guide_decode,
        "check": cmd_check,
        "payload": cmd_payload,
        "merge": cmd_guide_merge,
    }

    if args.cmd == "blog":
        args.kind = "blog"
        sub = args.blog_cmd
        handler = blog_handlers.get(sub)
    else:
        args.kind = "guide"
        sub = args.guide_cmd
        handler = guide_handlers.get(sub)

    try:
        rt = build_runtime(config_path=args.config)
        logger.debug("dispatching %s %s", args.kind, sub)
        exit_code = handler(args, rt)
    except (BlockpressError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
