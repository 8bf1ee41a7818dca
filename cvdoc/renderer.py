"""
Render tree → HTML, and canonical CV → standalone HTML page.

Text is always re-escaped on the way out, so whatever the parser kept as
literal text (unknown tags included) is displayed, never interpreted.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup, escape

from cvdoc.markup import (
    BlockKind,
    BlockNode,
    DocumentResult,
    InlineKind,
    InlineNode,
    InlineResult,
    parse_document,
    parse_inline,
)
from cvdoc.migrator import migrate_cv

_CSS_PATH = Path(__file__).parent / "static" / "style.css"
_LISTS = (BlockKind.BULLET_LIST, BlockKind.ORDERED_LIST)


def _node_html(node: InlineNode) -> str:
    if node.kind is InlineKind.TEXT:
        return str(escape(node.text))
    if node.kind is InlineKind.BREAK:
        return "<br>"
    inner = _inlines_html(node.children)
    attrs = ""
    if node.kind is InlineKind.COLOR and node.color:
        attrs = f' style="color:{escape(node.color)}"'
    elif node.kind is InlineKind.HIGHLIGHT:
        if node.background:
            attrs += f' style="background-color:{escape(node.background)}"'
        if node.color:
            attrs += f' data-color="{escape(node.color)}"'
    tag = node.kind.value
    return f"<{tag}{attrs}>{inner}</{tag}>"


def _inlines_html(nodes) -> str:
    return "".join(_node_html(n) for n in nodes)


def _block_html(block: BlockNode) -> str:
    tag = block.kind.value
    if block.kind in _LISTS:
        items = "".join(f"<li><p>{_inlines_html(item)}</p></li>" for item in block.items)
        return f"<{tag}>{items}</{tag}>"
    if block.kind is BlockKind.BLOCKQUOTE:
        return f"<blockquote><p>{_inlines_html(block.children)}</p></blockquote>"
    return f"<{tag}>{_inlines_html(block.children)}</{tag}>"


def render_inline_html(result: InlineResult) -> str:
    if result is None:
        return ""
    if isinstance(result, str):
        return str(escape(result))
    return _inlines_html(result)


def render_document_html(result: DocumentResult) -> str:
    if result is None:
        return ""
    if isinstance(result, str):
        return f"<p>{escape(result)}</p>"
    return "".join(_block_html(b) for b in result)


# ───────────────────────────────────────── page ──
def rich_text(markup: str) -> Markup:
    return Markup(render_inline_html(parse_inline(markup)))


def rich_document(markup: str) -> Markup:
    return Markup(render_document_html(parse_document(markup)))


env = Environment(loader=FileSystemLoader(Path(__file__).parent / "templates"),
                  autoescape=True)
env.filters["rich_text"] = rich_text
env.filters["rich_document"] = rich_document


def render_cv_html(data: Dict[str, Any], inline_css: bool = False) -> str:
    """Render a CV → HTML.  If inline_css=True, embed CSS in a <style> tag."""
    css_inline = _CSS_PATH.read_text(encoding="utf-8") if inline_css else ""
    return env.get_template("cv.html").render(cv=migrate_cv(data), inline_css=css_inline)
