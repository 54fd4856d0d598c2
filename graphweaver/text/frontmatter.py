"""
YAML front matter helpers for Markdown documents.
"""

from typing import Any, Dict, Mapping, Tuple

import yaml

from config.constants import FRONT_MATTER_DELIMITER
from config.logging_config import get_logger

logger = get_logger(__name__)


def _normalize(text: str) -> str:
    return text.lstrip("\ufeff").replace("\r\n", "\n")


def _find_block(text: str) -> Tuple[int, int]:
    """(yaml_start, yaml_end) offsets of the front matter body, or (-1, -1)."""
    opener = FRONT_MATTER_DELIMITER + "\n"
    if not text.startswith(opener):
        return -1, -1
    start = len(opener)
    if text.startswith(FRONT_MATTER_DELIMITER, start):
        # Empty block: "---\n---"
        return start, start
    end = text.find("\n" + FRONT_MATTER_DELIMITER, start)
    while end != -1:
        after = end + 1 + len(FRONT_MATTER_DELIMITER)
        if after == len(text) or text[after] == "\n":
            return start, end + 1
        end = text.find("\n" + FRONT_MATTER_DELIMITER, after)
    return -1, -1


def has_front_matter(content: str) -> bool:
    """True if the document opens with a closed '---' block."""
    start, _ = _find_block(_normalize(content))
    return start != -1


def split_head(content: str) -> Tuple[str, str]:
    """
    Split a document into (front matter block, body) as raw text.

    Without a closed block the head is empty and the body is content
    unchanged. With one, line endings are normalized to '\\n'.
    """
    text = _normalize(content)
    start, end = _find_block(text)
    if start == -1:
        return "", content
    cut = end + len(FRONT_MATTER_DELIMITER)
    if text.startswith("\n", cut):
        cut += 1
    return text[:cut], text[cut:]


def split_front_matter(content: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a document into (front matter dict, body).

    Documents without a closed block, or whose block is not a YAML
    mapping, return ({}, content) unchanged.
    """
    head, body = split_head(content)
    if not head:
        return {}, content

    yaml_text = head[len(FRONT_MATTER_DELIMITER) + 1:].rstrip("\n")
    yaml_text = yaml_text[:-len(FRONT_MATTER_DELIMITER)]
    try:
        data = yaml.safe_load(yaml_text) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Unparseable front matter: {e}")
        return {}, content
    if not isinstance(data, dict):
        return {}, content
    return data, body


def render_front_matter(data: Mapping[str, Any]) -> str:
    """Render a mapping as a delimited YAML block (keys in insertion order)."""
    dumped = yaml.safe_dump(
        dict(data),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    ).rstrip("\n")
    return f"{FRONT_MATTER_DELIMITER}\n{dumped}\n{FRONT_MATTER_DELIMITER}\n"


def merge_front_matter(content: str, data: Mapping[str, Any]) -> str:
    """
    Put front matter on top of a document.

    An existing block is replaced; otherwise the block is prepended and
    separated from the body by a blank line.
    """
    if not data:
        return content

    head, body = split_head(content)
    if head:
        return render_front_matter(data) + body
    return render_front_matter(data) + "\n" + _normalize(content).lstrip("\n")
