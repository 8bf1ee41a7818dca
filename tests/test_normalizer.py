"""Legacy rich-text migrations: markdown bold and bullet arrays.

Tests:
    - migrate_markdown_bold converts odd segments, leaves other text alone
    - migrate_bullets_to_html groups consecutive list items, maps every type
    - legacy type aliases and unknown types
    - decode / classify helpers never raise on junk
"""

import pytest

from cvdoc.normalizer import (
    BulletItem,
    BulletType,
    ContactEntry,
    TextShape,
    classify,
    has_markup,
    migrate_bullets_to_html,
    migrate_markdown_bold,
    normalise_rich_text,
    normalise_type,
)


# ─── migrate_markdown_bold ──────────────────────────────────────

def test_markdown_bold_wraps_delimited_text():
    assert migrate_markdown_bold("Hello **world**") == "Hello <strong>world</strong>"


def test_markdown_bold_handles_multiple_segments():
    assert migrate_markdown_bold("**a** and **b**") == "<strong>a</strong> and <strong>b</strong>"


def test_markdown_bold_plain_text_unchanged():
    assert migrate_markdown_bold("no bold here") == "no bold here"


def test_markdown_bold_empty_and_absent_unchanged():
    assert migrate_markdown_bold("") == ""
    assert migrate_markdown_bold(None) is None


def test_markdown_bold_leaves_canonical_markup_alone():
    markup = "<p>Already <strong>HTML</strong></p>"
    assert migrate_markdown_bold(markup) == markup


def test_markdown_bold_unpaired_delimiter_bolds_the_tail():
    assert migrate_markdown_bold("a **b") == "a <strong>b</strong>"


def test_markdown_bold_skips_empty_runs():
    assert migrate_markdown_bold("a****b") == "ab"


# ─── migrate_bullets_to_html ────────────────────────────────────

def test_bullets_grouped_into_one_list():
    bullets = [{"text": "Item 1", "type": "bullet"}, {"text": "Item 2", "type": "bullet"}]
    assert migrate_bullets_to_html(bullets) == (
        "<ul><li><p>Item 1</p></li><li><p>Item 2</p></li></ul>"
    )


def test_numbered_items_become_ordered_list():
    assert migrate_bullets_to_html([{"text": "First", "type": "numbered"}]) == (
        "<ol><li><p>First</p></li></ol>"
    )


@pytest.mark.parametrize("kind, expected", [
    ("paragraph", "<p>X</p>"),
    ("title", "<h2>X</h2>"),
    ("subtitle", "<h3>X</h3>"),
    ("heading3", "<h4>X</h4>"),
    ("quote", "<blockquote><p>X</p></blockquote>"),
])
def test_block_types(kind, expected):
    assert migrate_bullets_to_html([{"text": "X", "type": kind}]) == expected


@pytest.mark.parametrize("alias, expected", [
    ("subheading", "<h2>X</h2>"),
    ("comment", "<ul><li><p>X</p></li></ul>"),
    ("code", "<p>X</p>"),
])
def test_legacy_type_aliases(alias, expected):
    assert migrate_bullets_to_html([{"text": "X", "type": alias}]) == expected


def test_plain_strings_are_bullets():
    assert migrate_bullets_to_html(["a", "b"]) == "<ul><li><p>a</p></li><li><p>b</p></li></ul>"


def test_paragraph_splits_bullet_groups():
    bullets = [
        {"text": "Bullet 1", "type": "bullet"},
        {"text": "Bullet 2", "type": "bullet"},
        {"text": "Paragraph", "type": "paragraph"},
        {"text": "Bullet 3", "type": "bullet"},
    ]
    assert migrate_bullets_to_html(bullets) == (
        "<ul><li><p>Bullet 1</p></li><li><p>Bullet 2</p></li></ul>"
        "<p>Paragraph</p>"
        "<ul><li><p>Bullet 3</p></li></ul>"
    )


def test_switching_list_type_starts_new_container():
    bullets = [{"text": "a", "type": "bullet"}, {"text": "b", "type": "numbered"}]
    assert migrate_bullets_to_html(bullets) == (
        "<ul><li><p>a</p></li></ul><ol><li><p>b</p></li></ol>"
    )


def test_repeated_block_types_stay_separate():
    bullets = [{"text": "a", "type": "paragraph"}, {"text": "b", "type": "paragraph"}]
    assert migrate_bullets_to_html(bullets) == "<p>a</p><p>b</p>"


def test_bullet_text_markdown_is_migrated():
    assert migrate_bullets_to_html(["Used **Python**"]) == (
        "<ul><li><p>Used <strong>Python</strong></p></li></ul>"
    )


def test_string_input_passes_through():
    assert migrate_bullets_to_html("<p>already html</p>") == "<p>already html</p>"


@pytest.mark.parametrize("junk", [None, 42, {"text": "x"}, True])
def test_non_array_input_yields_empty_string(junk):
    assert migrate_bullets_to_html(junk) == ""


def test_junk_entries_are_dropped():
    assert migrate_bullets_to_html([None, 3, "ok", {"type": "bullet"}]) == (
        "<ul><li><p>ok</p></li><li><p></p></li></ul>"
    )


def test_empty_array_yields_empty_string():
    assert migrate_bullets_to_html([]) == ""


# ─── decode helpers ─────────────────────────────────────────────

def test_normalise_type():
    assert normalise_type(None) is BulletType.BULLET
    assert normalise_type("Numbered") is BulletType.NUMBERED
    assert normalise_type("subheading") is BulletType.TITLE
    assert normalise_type("mystery") is BulletType.PARAGRAPH


def test_bullet_item_decode():
    assert BulletItem.decode("x") == BulletItem("x", BulletType.BULLET)
    assert BulletItem.decode({"text": 5, "type": "quote"}) == BulletItem("5", BulletType.QUOTE)
    assert BulletItem.decode(["nested"]) is None


def test_contact_entry_decode_rejects_unknown_types():
    assert ContactEntry.decode({"type": "email", "value": "a@b.c"}) == ContactEntry("email", "a@b.c")
    assert ContactEntry.decode({"type": "custom", "value": "x"}) is None
    assert ContactEntry.decode({"type": "phone", "value": 5}) is None
    assert ContactEntry.decode("email") is None


def test_has_markup_only_sees_whitelisted_tags():
    assert has_markup("a <strong>b</strong>")
    assert has_markup("<BR/>")
    assert not has_markup("a <div>b</div>")
    assert not has_markup("1 < 2")


def test_classify():
    assert classify([]) is TextShape.BULLETS
    assert classify("") is TextShape.ABSENT
    assert classify(None) is TextShape.ABSENT
    assert classify({"a": 1}) is TextShape.ABSENT
    assert classify("**x**") is TextShape.MARKDOWN
    assert classify(7) is TextShape.MARKDOWN
    assert classify("<p>x</p>") is TextShape.MARKUP


def test_normalise_rich_text_is_stable_on_its_output():
    for value in (["a", "b"], "x **y**", "<p>z</p>", None, 3):
        once = normalise_rich_text(value)
        assert normalise_rich_text(once) == once
