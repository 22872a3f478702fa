"""Field validation for blog and guide drafts.

Every check returns a message instead of raising so a form can show all
problems at once. Thresholds come from config (see ``BlogPolicy`` and
friends); the defaults mirror the backend's own validators.
"""

from collections.abc import Sequence
from urllib.parse import urlparse

from .config import BlogPolicy, GuidePolicy, TagPolicy


def _length_error(label: str, value: str, lo: int, hi: int | None) -> str | None:
    n = len(value.strip())
    if lo > 0 and n == 0:
        return f"{label} is required"
    if n < lo:
        return f"{label} must be at least {lo} characters"
    if hi is not None and n > hi:
        return f"{label} must be at most {hi} characters"
    return None


def is_absolute_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return bool(parsed.scheme and parsed.netloc)


def check_tag(tag: str, current: Sequence[str], policy: TagPolicy) -> str | None:
    """Rules applied when a single tag is added to a draft."""
    tag = tag.strip()
    if not tag:
        return "Tag cannot be empty"
    if len(tag) < policy.min_length:
        return f"Tag must be at least {policy.min_length} characters"
    if len(tag) > policy.max_length:
        return f"Tag must be at most {policy.max_length} characters"
    if len(current) >= policy.max_count:
        return f"At most {policy.max_count} tags are allowed"
    if tag in current:
        return "Tag already added"
    return None


def check_tags(tags: Sequence[str], policy: TagPolicy) -> str | None:
    if len(tags) < policy.min_count:
        return f"Add at least {policy.min_count} tag(s)"
    if len(tags) > policy.max_count:
        return f"At most {policy.max_count} tags are allowed"
    return None


def validate_blog_fields(
    *,
    title: str,
    summary: str,
    content: str,
    category_id: int,
    cover_image_url: str,
    tags: Sequence[str],
    has_content: bool,
    policy: BlogPolicy,
    tag_policy: TagPolicy,
) -> dict[str, str]:
    """
    Check a blog draft.

    ``content`` is the encoded body; ``has_content`` is the collection's
    non-empty check, which wins over the length rule when false.
    """
    errors: dict[str, str] = {}

    msg = _length_error("Title", title, policy.title_min, policy.title_max)
    if msg:
        errors["title"] = msg
    msg = _length_error("Summary", summary, policy.summary_min, policy.summary_max)
    if msg:
        errors["summary"] = msg

    if not has_content:
        errors["content"] = "Content is required"
    elif len(content.strip()) < policy.content_min:
        errors["content"] = f"Content must be at least {policy.content_min} characters"

    if policy.require_category and category_id <= 0:
        errors["category"] = "Select a category"
    if cover_image_url.strip() and not is_absolute_url(cover_image_url):
        errors["coverImageUrl"] = "Enter a valid image URL"
    msg = check_tags(tags, tag_policy)
    if msg:
        errors["tags"] = msg
    return errors


def validate_guide_fields(
    *,
    title: str,
    summary: str,
    tags: Sequence[str],
    has_content: bool,
    policy: GuidePolicy,
    tag_policy: TagPolicy,
) -> dict[str, str]:
    errors: dict[str, str] = {}

    msg = _length_error("Title", title, policy.title_min, policy.title_max)
    if msg:
        errors["title"] = msg
    msg = _length_error("Summary", summary, 0, policy.summary_max)
    if msg:
        errors["summary"] = msg
    if not has_content:
        errors["blocks"] = "Add at least one content block"
    msg = check_tags(tags, tag_policy)
    if msg:
        errors["tags"] = msg
    return errors
