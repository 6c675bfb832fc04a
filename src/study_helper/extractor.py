"""Lightweight text extraction from note HTML.

Notes come from a simple rich-text editor, so tag patterns are matched with
regular expressions instead of a full HTML parser. Malformed markup degrades
to fewer (or slightly wrong) results; none of these functions raise.
"""
import re

ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}

TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

BOLD_RE = re.compile(r"<(strong|b)(?:\s[^>]*)?>([^<]+)</(?:strong|b)>", re.IGNORECASE)
ITALIC_RE = re.compile(r"<(em|i)(?:\s[^>]*)?>([^<]+)</(?:em|i)>", re.IGNORECASE)
HIGHLIGHT_RE = re.compile(r"<mark(?:\s[^>]*)?>([^<]+)</mark>", re.IGNORECASE)
LIST_ITEM_RE = re.compile(r"<li(?:\s[^>]*)?>([^<]+)</li>", re.IGNORECASE)
HEADING_RE = re.compile(r"<h[1-6](?:\s[^>]*)?>([^<]+)</h[1-6]>", re.IGNORECASE)

MIN_SENTENCE_LENGTH = 20


def strip_html(html: str) -> str:
    """Remove tags, decode the common entities and collapse whitespace."""
    text = TAG_RE.sub(" ", html or "")
    for entity, char in ENTITIES.items():
        text = text.replace(entity, char)
    return WHITESPACE_RE.sub(" ", text).strip()


def extract_sentences(text: str) -> list[str]:
    """Split on runs of . ! ? and drop fragments of 20 characters or fewer."""
    sentences = (s.strip() for s in SENTENCE_SPLIT_RE.split(text or ""))
    return [s for s in sentences if len(s) > MIN_SENTENCE_LENGTH]


def first_sentence(text: str) -> str | None:
    sentences = extract_sentences(text)
    return sentences[0] if sentences else None


def _texts(pattern: re.Pattern, html: str, group: int) -> list[str]:
    return [strip_html(m.group(group)) for m in pattern.finditer(html or "")]


def extract_key_terms(html: str) -> list[str]:
    """Bold, italic and highlighted text, deduplicated in first-seen order."""
    terms = []
    for term in _texts(BOLD_RE, html, 2) + _texts(ITALIC_RE, html, 2):
        if 2 < len(term) < 50:
            terms.append(term)
    # highlighted passages may be longer than emphasised words
    for term in _texts(HIGHLIGHT_RE, html, 1):
        if 2 < len(term) < 100:
            terms.append(term)
    return list(dict.fromkeys(terms))


def extract_list_items(html: str) -> list[str]:
    return [item for item in _texts(LIST_ITEM_RE, html, 1) if 5 < len(item) < 200]


def extract_headings(html: str) -> list[str]:
    return [heading for heading in _texts(HEADING_RE, html, 1) if len(heading) > 3]
