"""
Wikilink extraction and insertion.
"""

import re
from typing import Iterable, List, Optional, Set, Tuple

# [[Target]], [[Target#Heading]], [[Target|Alias]]
WIKILINK_PATTERN = re.compile(r"\[\[([^\]|#]+)(?:#[^\]|]+)?(?:\|[^\]]+)?\]\]")

# Regions never linked into: fenced code, inline code and existing links
PROTECTED_PATTERN = re.compile(r"```.*?```|`[^`\n]+`|\[\[.*?\]\]", re.DOTALL)

MAX_LINK_LENGTH = 100


def extract_wikilinks(text: str) -> List[str]:
    """Link targets in order of first appearance, without duplicates."""
    seen = []
    for match in WIKILINK_PATTERN.finditer(text):
        target = match.group(1).strip()
        if target and target not in seen:
            seen.append(target)
    return seen


def normalize_phrase(phrase: str) -> str:
    """Collapse whitespace and strip brackets from a suggested phrase."""
    return re.sub(r"\s+", " ", phrase.replace("[", "").replace("]", "")).strip()


def _valid(phrase: str) -> bool:
    return bool(phrase) and len(phrase) <= MAX_LINK_LENGTH and "\n" not in phrase


def add_wikilinks(content: str, phrases: Iterable[str]) -> str:
    """
    Link the first plain-text occurrence of each phrase.

    Phrases are tried longest first and matched case-insensitively on
    word boundaries. Text inside code or existing wikilinks is left
    alone, and phrases already linked anywhere in the document are
    skipped. The matched text keeps its original casing.
    """
    linked: Set[str] = {target.lower() for target in extract_wikilinks(content)}
    candidates = []
    seen: Set[str] = set()
    for phrase in phrases:
        phrase = normalize_phrase(phrase)
        if _valid(phrase) and phrase.lower() not in seen:
            seen.add(phrase.lower())
            candidates.append(phrase)
    candidates.sort(key=len, reverse=True)

    for phrase in candidates:
        if phrase.lower() in linked:
            continue
        pattern = re.compile(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)", re.IGNORECASE)
        position = _first_unprotected(content, pattern)
        if position is None:
            continue
        start, end = position
        content = f"{content[:start]}[[{content[start:end]}]]{content[end:]}"
        linked.add(phrase.lower())

    return content


def _first_unprotected(content: str, pattern) -> Optional[Tuple[int, int]]:
    protected = [(m.start(), m.end()) for m in PROTECTED_PATTERN.finditer(content)]
    for match in pattern.finditer(content):
        inside = any(match.start() < e and s < match.end() for s, e in protected)
        if not inside:
            return match.start(), match.end()
    return None
