"""
Schema migration: any persisted shape → canonical CV document.

``migrate_cv`` is total. Wrong types, missing keys and legacy layouts are
repaired field by field; nothing raises and the input is never mutated.
Running it on its own output is a no-op.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from cvdoc.normalizer import (
    BulletType,
    decode_contacts,
    migrate_markdown_bold,
    normalise_rich_text,
)
from cvdoc.schema_cv import (
    COLLECTIONS,
    CONTACT_FIELDS,
    CV_SCHEMA,
    DEFAULT_SIDEBAR_ORDER,
    DEFAULT_VISIBILITY,
    ENTRY_FIELDS,
    LEGACY_KEYS,
    LEGACY_PERSONAL_KEYS,
)

logger = logging.getLogger(__name__)


# ───────────────────────────────────────── helpers ──
def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first_list(data: Dict[str, Any], key: str) -> List[Any]:
    for name in (key, *LEGACY_KEYS.get(key, ())):
        value = data.get(name)
        if isinstance(value, (list, tuple)) and value:
            return list(value)
    return []


def _first_text(data: Dict[str, Any], key: str, aliases: Sequence[str] = ()) -> str:
    for name in (key, *aliases):
        if value := _text(data.get(name)):
            return value
    return ""


def move_item(items: Sequence[Any], index: int, direction: str) -> List[Any]:
    """Swap ``items[index]`` one slot ``"up"`` or ``"down"``; always returns a new list."""
    out = list(items)
    target = index - 1 if direction == "up" else index + 1
    if not 0 <= index < len(out) or not 0 <= target < len(out):
        return out
    out[index], out[target] = out[target], out[index]
    return out


# ───────────────────────────────────────── sidebar ──
def migrate_sidebar_order(raw: Any) -> List[str]:
    """Keep known ids in their given order, then append the missing ones."""
    if not isinstance(raw, (list, tuple)):
        return list(DEFAULT_SIDEBAR_ORDER)
    order: List[str] = []
    for section in raw:
        if isinstance(section, str) and section in DEFAULT_SIDEBAR_ORDER and section not in order:
            order.append(section)
    order.extend(s for s in DEFAULT_SIDEBAR_ORDER if s not in order)
    return order


# ───────────────────────────────────────── personal info ──
def migrate_contacts(personal: Any) -> Dict[str, str]:
    """Flat contact fields win; legacy ``contacts`` entries only fill the gaps."""
    personal = _dict(personal)
    legacy: Dict[str, str] = {}
    for entry in decode_contacts(personal.get("contacts")):
        legacy.setdefault(entry.type, entry.value)
    return {
        field: _text(personal.get(field)) or legacy.get(field, "")
        for field in CONTACT_FIELDS
    }


def migrate_personal_info(raw: Any) -> Dict[str, str]:
    personal = _dict(raw)
    out = {
        key: _first_text(personal, key, LEGACY_PERSONAL_KEYS.get(key, ()))
        for key in CV_SCHEMA["personalInfo"]
    }
    out.update(migrate_contacts(personal))
    return out


# ───────────────────────────────────────── entries ──
def _experience_description(raw: Dict[str, Any]) -> str:
    description = raw.get("description")
    role = _text(raw.get("roleDescription")).strip()
    if not role:
        return normalise_rich_text(description)
    if isinstance(description, (list, tuple)):
        return normalise_rich_text([{"text": role, "type": BulletType.PARAGRAPH.value}, *description])
    return f"<p>{migrate_markdown_bold(role)}</p>" + normalise_rich_text(description)


def _skill_items(raw: Any) -> List[str]:
    items = []
    for item in raw if isinstance(raw, (list, tuple)) else ():
        if isinstance(item, dict):
            item = item.get("name")
        if text := _text(item):
            items.append(text)
    return items


def migrate_entry(collection: str, raw: Dict[str, Any], index: int) -> Dict[str, Any]:
    prefix, fields = ENTRY_FIELDS[collection]
    entry: Dict[str, Any] = {"id": _text(raw.get("id")) or f"{prefix}-{index + 1}"}
    for field in fields:
        if field != "description":
            entry[field] = _text(raw.get(field))
        elif collection == "experience":
            entry[field] = _experience_description(raw)
        else:
            entry[field] = normalise_rich_text(raw.get(field))
    if collection == "skills":
        entry["items"] = _skill_items(raw.get("items"))
    return entry


def migrate_collection(collection: str, raw: Sequence[Any]) -> List[Dict[str, Any]]:
    entries = []
    for item in raw:
        if not isinstance(item, dict):
            logger.debug("dropping non-object %s entry: %r", collection, item)
            continue
        entries.append(migrate_entry(collection, item, len(entries)))
    return entries


def migrate_visibility(raw: Any) -> Dict[str, bool]:
    overrides = {
        k: v for k, v in _dict(raw).items()
        if k in DEFAULT_VISIBILITY and isinstance(v, bool)
    }
    return {**DEFAULT_VISIBILITY, **overrides}


# ───────────────────────────────────────── document ──
def migrate_cv(raw: Any) -> Dict[str, Any]:
    """Return a fully-populated canonical CV document for *raw*, whatever it is."""
    if not isinstance(raw, dict):
        if raw is not None:
            logger.debug("document of type %s replaced by defaults", type(raw).__name__)
        raw = {}

    doc: Dict[str, Any] = {
        "personalInfo": migrate_personal_info(raw.get("personalInfo")),
        "summary": normalise_rich_text(raw.get("summary")),
    }
    for collection in COLLECTIONS:
        doc[collection] = migrate_collection(collection, _first_list(raw, collection))
    doc["visibility"] = migrate_visibility(raw.get("visibility"))

    sidebar = raw.get("sidebarOrder")
    if sidebar is None:
        sidebar = raw.get("sidebarSections")
    doc["sidebarOrder"] = migrate_sidebar_order(sidebar)
    return doc
