from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from cvdoc import config
from cvdoc.fingerprint import fingerprint, same_content
from cvdoc.markup import parse_document, parse_inline, tree_to_data
from cvdoc.migrator import migrate_cv
from cvdoc.renderer import render_cv_html


def _load_json(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SystemExit(f"error: cannot read {path}: {exc}")


def _write(text: str, output: Path | None):
    if output is None:
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
    else:
        output.write_text(text, encoding="utf-8")


def cmd_migrate(args) -> int:
    doc = migrate_cv(_load_json(args.input))
    _write(json.dumps(doc, ensure_ascii=False, indent=2), args.output)
    return 0


def cmd_fingerprint(args) -> int:
    for path in args.files:
        print(f"{fingerprint(migrate_cv(_load_json(path)))}  {path}")
    return 0


def cmd_compare(args) -> int:
    a, b = (migrate_cv(_load_json(p)) for p in (args.a, args.b))
    same = same_content(a, b)
    print("same" if same else "different")
    return 0 if same else 1


def cmd_render(args) -> int:
    _write(render_cv_html(_load_json(args.input), inline_css=args.inline_css), args.output)
    return 0


def cmd_parse(args) -> int:
    markup = args.markup if args.markup is not None else sys.stdin.read()
    result = parse_inline(markup) if args.inline else parse_document(markup)
    print(json.dumps(tree_to_data(result), ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cvdoc",
        description="Migrate, fingerprint and render stored CV documents.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("migrate", help="Upgrade a stored CV JSON file to the canonical shape")
    p.add_argument("input", type=Path, help="Input JSON path")
    p.add_argument("-o", "--output", type=Path, help="Output JSON file (default: stdout)")
    p.set_defaults(func=cmd_migrate)

    p = sub.add_parser("fingerprint", help="Print the content fingerprint of CV files")
    p.add_argument("files", type=Path, nargs="+", help="CV JSON files")
    p.set_defaults(func=cmd_fingerprint)

    p = sub.add_parser("compare", help="Exit 0 when two CV files hold the same content")
    p.add_argument("a", type=Path)
    p.add_argument("b", type=Path)
    p.set_defaults(func=cmd_compare)

    p = sub.add_parser("render", help="Render a CV JSON file to HTML")
    p.add_argument("input", type=Path, help="Input JSON path")
    p.add_argument("-o", "--output", type=Path, help="Output HTML file (default: stdout)")
    p.add_argument("--inline-css", action="store_true", help="Embed the stylesheet")
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("parse", help="Dump the render tree of a markup string as JSON")
    p.add_argument("markup", nargs="?", help="Markup string (default: stdin)")
    p.add_argument("--inline", action="store_true", help="Parse as an inline field")
    p.set_defaults(func=cmd_parse)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=config.get_log_level(args.verbose),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
