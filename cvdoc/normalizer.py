"""
Legacy rich-text shapes → canonical markup.

Two historical conventions are still found on disk:

• ``**bold**`` markdown inside plain strings
• bullet arrays – plain strings or ``{"text", "type"}`` objects

Both are decoded into explicit shapes first (``BulletItem``, ``TextShape``)
and only then rendered, so nothing downstream probes raw dicts.
All functions here are pure and never raise.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from cvdoc.schema_cv import CONTACT_FIELDS, MARKUP_TAGS

logger = logging.getLogger(__name__)

BOLD_DELIMITER = "**"

_TAG_RE = re.compile(
    r"</?(%s)\b[^>]*>" % "|".join(sorted(MARKUP_TAGS, key=len, reverse=True)),
    re.I,
)


class BulletType(str, Enum):
    BULLET = "bullet"
    NUMBERED = "numbered"
    PARAGRAPH = "paragraph"
    TITLE = "title"
    SUBTITLE = "subtitle"
    HEADING3 = "heading3"
    QUOTE = "quote"


# old type names still present in saved bullet arrays
TYPE_ALIASES = {
    "subheading": BulletType.TITLE,
    "comment": BulletType.BULLET,
    "code": BulletType.PARAGRAPH,
}

_LIST_TAG = {BulletType.BULLET: "ul", BulletType.NUMBERED: "ol"}

_BLOCK_TEMPLATE = {
    BulletType.TITLE: "<h2>{}</h2>",
    BulletType.SUBTITLE: "<h3>{}</h3>",
    BulletType.HEADING3: "<h4>{}</h4>",
    BulletType.QUOTE: "<blockquote><p>{}</p></blockquote>",
    BulletType.PARAGRAPH: "<p>{}</p>",
}


def normalise_type(raw: Any) -> BulletType:
    """Map a stored type name onto the closed set; unknown names become paragraphs."""
    if raw is None or raw == "":
        return BulletType.BULLET
    name = str(raw).strip().lower()
    if name in TYPE_ALIASES:
        return TYPE_ALIASES[name]
    try:
        return BulletType(name)
    except ValueError:
        logger.debug("unknown bullet type %r treated as paragraph", raw)
        return BulletType.PARAGRAPH


@dataclass(frozen=True)
class BulletItem:
    text: str
    type: BulletType = BulletType.BULLET

    @classmethod
    def decode(cls, raw: Any) -> Optional["BulletItem"]:
        if isinstance(raw, str):
            return cls(raw)
        if isinstance(raw, dict):
            text = raw.get("text")
            text = "" if text is None else str(text)
            return cls(text, normalise_type(raw.get("type")))
        logger.debug("dropping bullet of type %s", type(raw).__name__)
        return None


@dataclass(frozen=True)
class ContactEntry:
    type: str
    value: str

    @classmethod
    def decode(cls, raw: Any) -> Optional["ContactEntry"]:
        if not isinstance(raw, dict):
            return None
        kind, value = raw.get("type"), raw.get("value")
        if kind not in CONTACT_FIELDS or not isinstance(value, str):
            return None
        return cls(kind, value)


class TextShape(str, Enum):
    ABSENT = "absent"
    BULLETS = "bullets"
    MARKDOWN = "markdown"
    MARKUP = "markup"


# ───────────────────────────────────────── helpers ──
def has_markup(text: str) -> bool:
    """True when *text* contains at least one whitelisted tag."""
    return bool(_TAG_RE.search(text))


def classify(value: Any) -> TextShape:
    if isinstance(value, (list, tuple)):
        return TextShape.BULLETS
    if isinstance(value, str):
        if not value:
            return TextShape.ABSENT
        return TextShape.MARKUP if has_markup(value) else TextShape.MARKDOWN
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return TextShape.MARKDOWN
    return TextShape.ABSENT


def decode_contacts(raw: Any) -> List[ContactEntry]:
    if not isinstance(raw, (list, tuple)):
        return []
    return [c for c in map(ContactEntry.decode, raw) if c is not None]


# ───────────────────────────────────────── migrations ──
def migrate_markdown_bold(text):
    """``Hello **world**`` → ``Hello <strong>world</strong>``.

    Segments at odd positions of a split on ``**`` become bold runs.
    Text without the delimiter (canonical markup included) is returned as-is.
    """
    if not isinstance(text, str) or BOLD_DELIMITER not in text:
        return text
    parts = text.split(BOLD_DELIMITER)
    return "".join(
        f"<strong>{part}</strong>" if i % 2 and part else part
        for i, part in enumerate(parts)
    )


def _group(items: Iterable[BulletItem]) -> List[Tuple[BulletType, List[str]]]:
    groups: List[Tuple[BulletType, List[str]]] = []
    for item in items:
        text = migrate_markdown_bold(item.text)
        last = groups[-1] if groups else None
        if item.type in _LIST_TAG and last is not None and last[0] is item.type:
            last[1].append(text)
        else:
            groups.append((item.type, [text]))
    return groups


def migrate_bullets_to_html(items) -> str:
    """Bullet array (or already-canonical string) → canonical markup string.

    Consecutive ``bullet`` / ``numbered`` items share one ``ul`` / ``ol``;
    every other type is a standalone block.
    """
    if isinstance(items, str):
        return items
    if not isinstance(items, (list, tuple)):
        return ""

    out = []
    for kind, texts in _group(filter(None, map(BulletItem.decode, items))):
        if kind in _LIST_TAG:
            tag = _LIST_TAG[kind]
            lis = "".join(f"<li><p>{t}</p></li>" for t in texts)
            out.append(f"<{tag}>{lis}</{tag}>")
        else:
            out.append(_BLOCK_TEMPLATE[kind].format(texts[0]))
    return "".join(out)


def normalise_rich_text(value: Any) -> str:
    """Pick the right migration for a description-like field by its runtime shape."""
    shape = classify(value)
    if shape is TextShape.BULLETS:
        return migrate_bullets_to_html(value)
    if shape is TextShape.MARKDOWN:
        return migrate_markdown_bold(str(value))
    if shape is TextShape.MARKUP:
        return value
    return ""
