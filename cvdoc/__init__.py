"""cvdoc – CV document migration, markup rendering and content fingerprints."""

from cvdoc.fingerprint import fingerprint, same_content, stable_stringify
from cvdoc.markup import parse_document, parse_inline
from cvdoc.migrator import migrate_cv, migrate_sidebar_order
from cvdoc.normalizer import migrate_bullets_to_html, migrate_markdown_bold

__version__ = "0.1.0"
