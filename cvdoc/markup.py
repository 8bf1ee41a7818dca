"""
Canonical markup → typed render tree.

A regex tokenizer feeds a small recursive-descent parser that knows only the
whitelisted tags (``schema_cv.BLOCK_TAGS`` / ``INLINE_TAGS``). Unknown tags,
stray closers and unclosed openers come back as literal text; the parser
never raises.

Results:

• ``None``      – empty input
• ``str``       – input without any ``<``, returned byte-for-byte (entities untouched)
• node list     – ``InlineNode`` items (``parse_inline``) or ``BlockNode`` items
  (``parse_document``)
"""
from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

import cssutils

from cvdoc.schema_cv import BLOCK_TAGS, INLINE_TAGS, MARKUP_TAGS

cssutils.log.setLevel(logging.CRITICAL)  # malformed user styles are expected

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9]*)((?:\s[^<>]*)?)/?>")
_ATTR_RE = re.compile(
    r"""([A-Za-z_:][-A-Za-z0-9_:.]*)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))"""
)
_MAX_DEPTH = 32


# ───────────────────────────────────────── tree ──
class InlineKind(str, Enum):
    TEXT = "text"
    STRONG = "strong"
    EM = "em"
    UNDERLINE = "u"
    STRIKE = "s"
    COLOR = "span"
    HIGHLIGHT = "mark"
    BREAK = "br"


class BlockKind(str, Enum):
    PARAGRAPH = "p"
    HEADING2 = "h2"
    HEADING3 = "h3"
    HEADING4 = "h4"
    BULLET_LIST = "ul"
    ORDERED_LIST = "ol"
    BLOCKQUOTE = "blockquote"


@dataclass(frozen=True)
class InlineNode:
    kind: InlineKind
    text: str = ""
    children: Tuple["InlineNode", ...] = ()
    color: Optional[str] = None
    background: Optional[str] = None


@dataclass(frozen=True)
class BlockNode:
    kind: BlockKind
    children: Tuple[InlineNode, ...] = ()
    items: Tuple[Tuple[InlineNode, ...], ...] = ()


BREAK = InlineNode(InlineKind.BREAK)

InlineResult = Union[None, str, List[InlineNode]]
DocumentResult = Union[None, str, List[BlockNode]]


# ───────────────────────────────────────── tokens ──
class TokenKind(str, Enum):
    TEXT = "text"
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    raw: str
    name: str = ""
    attrs: Tuple[Tuple[str, str], ...] = ()
    literal: bool = False

    @property
    def blank(self) -> bool:
        return self.kind is TokenKind.TEXT and not self.literal and not self.raw.strip()

    def attr(self, name: str) -> str:
        return dict(self.attrs).get(name, "")


def _attrs(source: str) -> Tuple[Tuple[str, str], ...]:
    pairs = []
    for m in _ATTR_RE.finditer(source or ""):
        value = next((v for v in m.groups()[1:] if v is not None), "")
        pairs.append((m.group(1).lower(), html.unescape(value)))
    return tuple(pairs)


def tokenize(markup: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    for m in _TAG_RE.finditer(markup):
        if m.start() > pos:
            tokens.append(Token(TokenKind.TEXT, markup[pos:m.start()]))
        closing, name, attrs = m.groups()
        name = name.lower()
        attrs = attrs.rstrip().rstrip("/")
        if name in MARKUP_TAGS:
            kind = TokenKind.CLOSE if closing else TokenKind.OPEN
            tokens.append(Token(kind, m.group(0), name, _attrs(attrs)))
        else:
            tokens.append(Token(TokenKind.TEXT, m.group(0), literal=True))
        pos = m.end()
    if pos < len(markup):
        tokens.append(Token(TokenKind.TEXT, markup[pos:]))
    return tokens


# ───────────────────────────────────────── helpers ──
def style_value(style: str, prop: str) -> Optional[str]:
    """Read one property from an inline ``style`` attribute; ``None`` if absent or unparsable."""
    if not style:
        return None
    try:
        declaration = cssutils.parseStyle(style)
    except Exception:  # cssutils raises on some garbage, styles are user data
        logger.debug("unparsable style %r", style)
        return None
    return declaration.getPropertyValue(prop) or None


def _literal(raw: str) -> InlineNode:
    return InlineNode(InlineKind.TEXT, raw)


def _merge(nodes: Sequence[InlineNode]) -> List[InlineNode]:
    out: List[InlineNode] = []
    for node in nodes:
        if node.kind is InlineKind.TEXT:
            if not node.text:
                continue
            if out and out[-1].kind is InlineKind.TEXT:
                out[-1] = _literal(out[-1].text + node.text)
                continue
        out.append(node)
    return out


def _inline_node(tok: Token, children: Sequence[InlineNode]) -> InlineNode:
    kind = InlineKind(tok.name)
    kids = tuple(_merge(children))
    if kind is InlineKind.COLOR:
        return InlineNode(kind, children=kids, color=style_value(tok.attr("style"), "color"))
    if kind is InlineKind.HIGHLIGHT:
        return InlineNode(
            kind,
            children=kids,
            color=tok.attr("data-color") or None,
            background=style_value(tok.attr("style"), "background-color"),
        )
    return InlineNode(kind, children=kids)


# ───────────────────────────────────────── parser ──
class _Parser:
    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> Optional[Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    # inline runs stop at: the closer of stack[-1] (closed=True), any closer
    # further down the stack, any block opener, or end of input
    def _inlines(self, stack: Tuple[str, ...]) -> Tuple[List[InlineNode], bool]:
        nodes: List[InlineNode] = []
        while (tok := self._peek()) is not None:
            if tok.kind is TokenKind.TEXT:
                nodes.append(_literal(tok.raw if tok.literal else html.unescape(tok.raw)))
                self._pos += 1
            elif tok.name == "br":
                nodes.append(BREAK)
                self._pos += 1
            elif tok.kind is TokenKind.CLOSE:
                if stack and tok.name == stack[-1]:
                    return nodes, True
                if tok.name in stack:
                    return nodes, False
                nodes.append(_literal(tok.raw))
                self._pos += 1
            elif tok.name in BLOCK_TAGS:
                return nodes, False
            elif tok.name in INLINE_TAGS and len(stack) < _MAX_DEPTH:
                self._pos += 1
                children, closed = self._inlines(stack + (tok.name,))
                if closed:
                    self._pos += 1
                    nodes.append(_inline_node(tok, children))
                else:
                    nodes.append(_literal(tok.raw))
                    nodes.extend(children)
            else:
                nodes.append(_literal(tok.raw))
                self._pos += 1
        return nodes, False

    def _text_block(self, tok: Token) -> BlockNode:
        self._pos += 1
        children, closed = self._inlines((tok.name,))
        if closed:
            self._pos += 1
            return BlockNode(BlockKind(tok.name), tuple(_merge(children)))
        return BlockNode(BlockKind.PARAGRAPH, tuple(_merge([_literal(tok.raw), *children])))

    def _wrapped(self, tok: Token, stack: Tuple[str, ...]) -> Tuple[InlineNode, ...]:
        """Content of ``li`` / ``blockquote``: normally one ``<p>``, bare inlines tolerated."""
        self._pos += 1
        inner = stack + (tok.name,)
        nodes: List[InlineNode] = []
        while (nxt := self._peek()) is not None:
            if nxt.kind is TokenKind.CLOSE and nxt.name == tok.name:
                self._pos += 1
                break
            if nxt.blank:
                self._pos += 1
            elif nxt.kind is TokenKind.CLOSE and nxt.name in stack:
                break
            elif nxt.kind is TokenKind.OPEN and nxt.name == "p":
                self._pos += 1
                children, closed = self._inlines(inner + ("p",))
                if closed:
                    self._pos += 1
                else:
                    children = [_literal(nxt.raw), *children]
                if nodes and children:
                    nodes.append(BREAK)
                nodes.extend(children)
            elif nxt.kind is TokenKind.OPEN and nxt.name in BLOCK_TAGS:
                nodes.append(_literal(nxt.raw))
                self._pos += 1
            else:
                children, _ = self._inlines(inner)
                nodes.extend(children)
        return tuple(_merge(nodes))

    def _list(self, tok: Token) -> BlockNode:
        self._pos += 1
        stack = (tok.name,)
        items = []
        while (nxt := self._peek()) is not None:
            if nxt.blank:
                self._pos += 1
            elif nxt.kind is TokenKind.CLOSE and nxt.name == tok.name:
                self._pos += 1
                break
            elif nxt.kind is TokenKind.OPEN and nxt.name == "li":
                items.append(self._wrapped(nxt, stack))
            else:
                break
        return BlockNode(BlockKind(tok.name), items=tuple(items))

    def _loose(self) -> BlockNode:
        """Inline content outside any block becomes an implicit paragraph."""
        nodes: List[InlineNode] = []
        tok = self._peek()
        if tok is not None and tok.kind is TokenKind.OPEN and tok.name in BLOCK_TAGS:
            nodes.append(_literal(tok.raw))
            self._pos += 1
        children, _ = self._inlines(())
        nodes.extend(children)
        return BlockNode(BlockKind.PARAGRAPH, tuple(_merge(nodes)))

    def blocks(self) -> List[BlockNode]:
        out: List[BlockNode] = []
        while (tok := self._peek()) is not None:
            if tok.blank:
                self._pos += 1
                continue
            if tok.kind is TokenKind.OPEN and tok.name in ("p", "h2", "h3", "h4"):
                block = self._text_block(tok)
            elif tok.kind is TokenKind.OPEN and tok.name in ("ul", "ol"):
                block = self._list(tok)
            elif tok.kind is TokenKind.OPEN and tok.name == "blockquote":
                block = BlockNode(BlockKind.BLOCKQUOTE, self._wrapped(tok, ()))
            else:
                block = self._loose()
                if all(n.kind is InlineKind.TEXT and not n.text.strip() for n in block.children):
                    continue
            out.append(block)
        return out


def _flatten(blocks: Sequence[BlockNode]) -> List[InlineNode]:
    out: List[InlineNode] = []
    for block in blocks:
        for part in block.items or (block.children,):
            if out and part:
                out.append(BREAK)
            out.extend(part)
    return _merge(out)


# ───────────────────────────────────────── API ──
def parse_document(markup: str) -> DocumentResult:
    if not isinstance(markup, str) or not markup:
        return None
    if "<" not in markup:
        return markup
    return _Parser(tokenize(markup)).blocks()


def parse_inline(markup: str) -> InlineResult:
    """Parse a field rendered inline; block wrappers (an outer ``<p>`` above all) are dropped."""
    blocks = parse_document(markup)
    if blocks is None or isinstance(blocks, str):
        return blocks
    return _flatten(blocks)


def _as_dict(node: Union[InlineNode, BlockNode]) -> Dict:
    if isinstance(node, BlockNode):
        out = {"kind": node.kind.value, "children": [_as_dict(c) for c in node.children]}
        if node.items:
            out["items"] = [[_as_dict(c) for c in item] for item in node.items]
        return out
    out = {"kind": node.kind.value}
    if node.kind is InlineKind.TEXT:
        out["text"] = node.text
    if node.children:
        out["children"] = [_as_dict(c) for c in node.children]
    if node.color:
        out["color"] = node.color
    if node.background:
        out["background"] = node.background
    return out


def tree_to_data(result: Union[InlineResult, DocumentResult]):
    """JSON-friendly view of a parse result (used by the CLI and for debugging)."""
    if result is None or isinstance(result, str):
        return result
    return [_as_dict(node) for node in result]
