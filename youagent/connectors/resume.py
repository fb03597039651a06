"""Resume connector: text and heuristic sections from a PDF (pypdf)."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from youagent.errors import ConnectorError
from youagent.models import Document
from youagent.utils.dates import now_iso
from youagent.utils.hashing import sha256

from .base import Connector

logger = logging.getLogger(__name__)

SECTION_HEADERS = (
    "experience",
    "work experience",
    "education",
    "skills",
    "projects",
    "certifications",
    "summary",
    "objective",
)


def extract_sections(text: str) -> dict[str, str]:
    """Split resume text on lines that start with a known section header.

    Text before the first header is dropped; empty sections are omitted.
    """
    sections: dict[str, str] = {}
    current: str | None = None
    lines: list[str] = []

    def _flush() -> None:
        body = "\n".join(lines).strip()
        if current and body:
            sections[current] = body

    for line in text.splitlines():
        stripped = line.strip()
        lowered = stripped.lower()
        if any(lowered.startswith(header) for header in SECTION_HEADERS):
            _flush()
            current = stripped
            lines = []
        elif current:
            lines.append(line)
    _flush()
    return sections


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


class ResumeConnector(Connector):
    source = "document"
    name = "resume"

    def __init__(self, pdf_path: Path) -> None:
        super().__init__()
        self._pdf_path = Path(pdf_path).expanduser()

    def read_text(self) -> tuple[str, int]:
        """Return (text, page count)."""
        try:
            reader = PdfReader(str(self._pdf_path))
            pages = [page.extract_text() or "" for page in reader.pages]
        except (OSError, PdfReadError, ValueError) as exc:
            raise ConnectorError(
                f"Resume parsing failed: {self._pdf_path}", details=str(exc)
            ) from exc
        return "\n".join(pages).strip(), len(pages)

    def fetch(self) -> list[Document]:
        text, pages = self.read_text()
        if not text:
            raise ConnectorError(f"No extractable text in {self._pdf_path}")

        fetched_at = now_iso()
        docs = [
            Document(
                id="resume-full",
                source=self.source,
                source_id="full",
                content_type="fact",
                title="Full Resume",
                content=text,
                fetched_at=fetched_at,
                content_hash=sha256(text),
                metadata={"pages": pages},
            )
        ]
        for name, body in extract_sections(text).items():
            docs.append(
                Document(
                    id=f"resume-section-{_slug(name)}",
                    source=self.source,
                    source_id=name,
                    content_type="fact",
                    title=f"Resume: {name}",
                    content=body,
                    fetched_at=fetched_at,
                    content_hash=sha256(body),
                )
            )
        logger.info("Resume: %d documents from %s", len(docs), self._pdf_path.name)
        return docs
