"""Import notes from files in various formats."""
import html
import json
import re
from pathlib import Path

from study_helper.models import Note
from study_helper.notes import create_note


LIST_ITEM_RE = re.compile(r"^(?:[-*]|\d+\.)\s+(.*)$")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"(?<!\*)\*(?!\*)(.+?)\*|(?<!\w)_(.+?)_(?!\w)")


def _paragraphs(text: str) -> str:
    blocks = [b.strip() for b in text.split("\n\n") if b.strip()]
    return "".join(f"<p>{html.escape(b)}</p>" for b in blocks)


def _inline(text: str) -> str:
    text = BOLD_RE.sub(r"<strong>\1</strong>", html.escape(text))
    return ITALIC_RE.sub(lambda m: f"<em>{m.group(1) or m.group(2)}</em>", text)


def markdown_to_html(text: str) -> str:
    """Headings, lists, emphasis and paragraphs; enough for the extractor."""
    parts = []
    paragraph = []
    in_list = False

    def flush():
        if paragraph:
            parts.append(f"<p>{_inline(' '.join(paragraph))}</p>")
            paragraph.clear()

    for raw in text.splitlines():
        line = raw.strip()
        item = LIST_ITEM_RE.match(line)
        if in_list and not item:
            parts.append("</ul>")
            in_list = False
        if not line:
            flush()
        elif line.startswith("#"):
            flush()
            level = min(len(line) - len(line.lstrip("#")), 6)
            parts.append(f"<h{level}>{_inline(line.lstrip('#').strip())}</h{level}>")
        elif item:
            flush()
            if not in_list:
                parts.append("<ul>")
                in_list = True
            parts.append(f"<li>{_inline(item.group(1))}</li>")
        else:
            paragraph.append(line)
    flush()
    if in_list:
        parts.append("</ul>")
    return "".join(parts)


def read_note_file(file_path: str) -> tuple[str, str]:
    """Return (title, html content) for a file."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    title = path.stem

    if suffix in (".txt", ".md"):
        return title, markdown_to_html(path.read_text())
    elif suffix == ".json":
        data = json.loads(path.read_text())
        return str(data.get("title") or title), str(data.get("content", ""))
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text()) or {}
        return str(data.get("title") or title), str(data.get("content", ""))
    elif suffix == ".pdf":
        from PyPDF2 import PdfReader
        reader = PdfReader(file_path)
        return title, _paragraphs("\n\n".join(page.extract_text() or "" for page in reader.pages))
    elif suffix == ".docx":
        from docx import Document
        doc = Document(file_path)
        return title, "".join(f"<p>{html.escape(p.text)}</p>" for p in doc.paragraphs if p.text.strip())
    elif suffix in (".html", ".htm"):
        from bs4 import BeautifulSoup
        soup = BeautifulSoup(path.read_text(), "html.parser")
        if soup.title and soup.title.string:
            title = soup.title.string.strip()
        body = soup.body or soup
        return title, body.decode_contents().strip()
    else:
        # Try reading as plain text
        return title, _paragraphs(path.read_text())


def import_note_file(db_path: str, file_path: str, subject_id: str = "") -> Note:
    title, content = read_note_file(file_path)
    return create_note(db_path, title, content, subject_id=subject_id)
