"""
Remote document ⇄ canonical CV mapping.

Remote rows nest the summary under ``personalInfo``, carry their own ``_id``
values and encode list order as ``sortOrder`` instead of list position.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from cvdoc.fingerprint import fingerprint
from cvdoc.migrator import migrate_cv
from cvdoc.schema_cv import COLLECTIONS, CONTACT_FIELDS, DEFAULT_VISIBILITY, ENTRY_FIELDS

UNTITLED = "Untitled CV"

# remote collection names that differ from the canonical ones
REMOTE_KEYS = {"experience": "experiences", "skills": "skillCategories"}

DEFAULT_SETTINGS = {
    "colorScheme": "ivory",
    "fontFamily": "inter",
    "fontSizeLevel": 2,
    "theme": "light",
    "locale": "es",
    "pattern": {
        "name": "none",
        "sidebarIntensity": 3,
        "mainIntensity": 2,
        "scope": "sidebar",
    },
}


def _rows(value: Any) -> List[Dict[str, Any]]:
    return [r for r in value if isinstance(r, dict)] if isinstance(value, list) else []


def _order(row: Dict[str, Any]) -> float:
    value = row.get("sortOrder")
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else 0


def sort_by_sort_order(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Stable sort on ``sortOrder`` (missing = 0); the input list is left alone."""
    return sorted(rows, key=_order)


def _row_id(row: Dict[str, Any]) -> str:
    value = row.get("_id", row.get("id"))
    return "" if value is None else str(value)


def to_settings(plain: Dict[str, Any]) -> Dict[str, Any]:
    settings = plain.get("settings") if isinstance(plain, dict) else None
    settings = settings if isinstance(settings, dict) else {}
    pattern = settings.get("pattern") if isinstance(settings.get("pattern"), dict) else {}
    out = {k: settings.get(k, v) for k, v in DEFAULT_SETTINGS.items() if k != "pattern"}
    out["pattern"] = {k: pattern.get(k, v) for k, v in DEFAULT_SETTINGS["pattern"].items()}
    return out


def doc_to_cv(plain: Dict[str, Any]) -> Dict[str, Any]:
    """Remote row → canonical CV document."""
    plain = plain if isinstance(plain, dict) else {}
    personal = plain.get("personalInfo") if isinstance(plain.get("personalInfo"), dict) else {}

    raw: Dict[str, Any] = {
        "personalInfo": {k: v for k, v in personal.items() if k != "summary"},
        "summary": personal.get("summary"),
        "visibility": plain.get("visibility"),
        "sidebarOrder": [
            s.get("sectionId")
            for s in sort_by_sort_order(_rows(plain.get("sidebarSections")))
        ],
    }
    for collection in COLLECTIONS:
        entries = []
        source = plain.get(REMOTE_KEYS.get(collection, collection))
        for row in sort_by_sort_order(_rows(source)):
            entry = {k: v for k, v in row.items() if k not in ("_id", "sortOrder")}
            entry["id"] = _row_id(row)
            if collection == "skills":
                entry["category"] = row.get("name")
                entry["items"] = [i.get("name") for i in sort_by_sort_order(_rows(row.get("items")))]
            entries.append(entry)
        raw[collection] = entries
    return migrate_cv(raw)


def cv_to_doc(cv: Dict[str, Any], settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Canonical CV document → remote row (ids dropped, positions as ``sortOrder``)."""
    cv = migrate_cv(cv)
    info = cv["personalInfo"]
    doc: Dict[str, Any] = {
        "title": info["fullName"] or UNTITLED,
        "personalInfo": {
            "fullName": info["fullName"],
            "jobTitle": info["title"],
            "photoUrl": info["photo"],
            **{f: info[f] for f in CONTACT_FIELDS},
            "summary": cv["summary"],
        },
    }
    if settings is not None:
        doc["settings"] = settings
    doc["visibility"] = {k: cv["visibility"][k] for k in DEFAULT_VISIBILITY}
    doc["sidebarSections"] = [
        {"sectionId": s, "sortOrder": i} for i, s in enumerate(cv["sidebarOrder"])
    ]
    for collection in COLLECTIONS:
        _, fields = ENTRY_FIELDS[collection]
        rows = []
        for i, entry in enumerate(cv[collection]):
            if collection == "skills":
                row = {
                    "name": entry["category"],
                    "items": [{"name": n, "sortOrder": j} for j, n in enumerate(entry["items"])],
                }
            else:
                row = {f: entry[f] for f in fields}
            row["sortOrder"] = i
            rows.append(row)
        doc[REMOTE_KEYS.get(collection, collection)] = rows
    return doc


def needs_write(local: Dict[str, Any], remote: Optional[Dict[str, Any]]) -> bool:
    """True unless the remote row already holds the same content as *local*."""
    if remote is None:
        return True
    return fingerprint(migrate_cv(local)) != fingerprint(doc_to_cv(remote))
