"""
Markdown text transforms: front matter and wikilinks.
"""

from .frontmatter import (
    has_front_matter,
    split_front_matter,
    render_front_matter,
    merge_front_matter,
    split_head,
)
from .wikilinks import (
    WIKILINK_PATTERN,
    extract_wikilinks,
    normalize_phrase,
    add_wikilinks,
)

__all__ = [
    "has_front_matter",
    "split_front_matter",
    "render_front_matter",
    "merge_front_matter",
    "split_head",
    "WIKILINK_PATTERN",
    "extract_wikilinks",
    "normalize_phrase",
    "add_wikilinks",
]
