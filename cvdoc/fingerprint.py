"""
Content fingerprint for sync decisions.

The local store and the remote store disagree on ids and on how an unset
field looks (``None`` vs missing vs ``""``). ``stable_stringify`` erases
those differences: ids in ``strip_keys`` go, empty values go, keys are
sorted. List order is kept, it is the display order.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from cvdoc.utils import _sha, is_embedded_image

ABSENT = "null"

# ids are generated independently by each store
STRIP_KEYS = frozenset({"id"})


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _scalar(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (str, int, float, bool)):
        return json.dumps(value, ensure_ascii=False)
    return json.dumps(str(value), ensure_ascii=False)


def stable_stringify(value: Any, strip_keys: Iterable[str] = ()) -> str:
    strip = frozenset(strip_keys)
    if _is_absent(value):
        return ABSENT
    if isinstance(value, Mapping):
        keys = sorted(
            str(k) for k, v in value.items()
            if str(k) not in strip and not _is_absent(v)
        )
        lookup = {str(k): v for k, v in value.items()}
        body = ",".join(
            f"{json.dumps(k, ensure_ascii=False)}:{stable_stringify(lookup[k], strip)}"
            for k in keys
        )
        return "{" + body + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(stable_stringify(v, strip) for v in value) + "]"
    return _scalar(value)


def _without_embedded_photo(doc: Any) -> Any:
    if not isinstance(doc, Mapping):
        return doc
    personal = doc.get("personalInfo")
    if not isinstance(personal, Mapping):
        return doc
    personal = {
        k: v for k, v in personal.items()
        if not (k in ("photo", "photoUrl") and is_embedded_image(v))
    }
    return {**doc, "personalInfo": personal}


def fingerprint(doc: Any, strip_keys: Iterable[str] = STRIP_KEYS) -> str:
    """sha256 over the canonical form of *doc*; embedded ``data:`` photos are ignored."""
    return _sha(stable_stringify(_without_embedded_photo(doc), strip_keys))


def same_content(a: Any, b: Any, strip_keys: Iterable[str] = STRIP_KEYS) -> bool:
    return fingerprint(a, strip_keys) == fingerprint(b, strip_keys)
