"""
Document store - read uploaded papers as plain text
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from .models import PaperlensError


logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".md"}


class DocumentReadError(PaperlensError):
    """Raised when a located document cannot be parsed."""


class LocalDocumentStore:
    """Resolve upload paths under a root directory and extract their text"""

    def __init__(self, root: str = ".", upload_dir: str = "uploads/research"):
        """
        Initialize store

        Args:
            root: Project root; no path outside it is ever read
            upload_dir: Default folder for bare file names
        """
        self.root = Path(root).expanduser().resolve()
        self.upload_dir = self.root / upload_dir

    def read_document_text(self, path_or_id: Optional[str]) -> Optional[str]:
        """
        Read a stored document

        Args:
            path_or_id: "/uploads/...", "uploads/...", absolute path or bare name

        Returns:
            Extracted text, or None when missing or unreadable
        """
        if not path_or_id:
            return None

        for candidate in self.resolve_candidates(str(path_or_id)):
            if not candidate.is_file():
                continue
            logger.debug("Reading document %s", candidate)
            try:
                return self.extract_text(candidate)
            except DocumentReadError as exc:
                logger.warning("Unable to read document %s: %s", candidate, exc)
                return None

        logger.info("Document not found: %s", path_or_id)
        return None

    def resolve_candidates(self, path_or_id: str) -> List[Path]:
        normalized = path_or_id.replace("\\", "/").strip()
        if normalized.startswith("/uploads/") or normalized.startswith("uploads/"):
            primary = self.root / normalized.lstrip("/")
            from_upload_root = True
        elif Path(normalized).is_absolute():
            primary = Path(normalized)
            from_upload_root = False
        else:
            primary = self.upload_dir / normalized
            from_upload_root = False

        candidates = [primary.resolve()]
        if not from_upload_root:
            candidates.append((self.upload_dir / Path(normalized).name).resolve())

        safe: List[Path] = []
        for candidate in candidates:
            if not self._is_within_root(candidate):
                logger.warning("Refusing path outside document root: %s", candidate)
                continue
            if candidate not in safe:
                safe.append(candidate)
        return safe

    @staticmethod
    def extract_text(path: Path) -> str:
        """Extract plain text from a PDF or text file"""
        if path.suffix.lower() in TEXT_SUFFIXES:
            return path.read_text(encoding="utf-8", errors="replace")

        try:
            text = _extract_with_pypdf(path)
        except DocumentReadError as exc:
            logger.debug("pypdf failed, trying pdfplumber: %s", exc)
            text = ""
        if not text.strip():
            text = _extract_with_pdfplumber(path)
        if not text.strip():
            raise DocumentReadError(f"No extractable text found in PDF: {path}")
        return text

    def _is_within_root(self, path: Path) -> bool:
        try:
            path.relative_to(self.root)
        except ValueError:
            return False
        return True


def _extract_with_pypdf(path: Path) -> str:
    from pypdf import PdfReader

    try:
        reader = PdfReader(str(path))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as exc:
        raise DocumentReadError(f"Unable to read PDF: {path}") from exc
    return "\n".join(_normalize_page_text(page) for page in pages if page)


def _extract_with_pdfplumber(path: Path) -> str:
    import pdfplumber

    try:
        with pdfplumber.open(str(path)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        raise DocumentReadError(f"pdfplumber could not read: {path}") from exc
    return "\n".join(_normalize_page_text(page) for page in pages if page)


def _normalize_page_text(text: str) -> str:
    normalized = text.replace("\r", "\n")
    normalized = normalized.replace("-\n", "")
    normalized = re.sub(r"[ \t]+\n", "\n", normalized)
    normalized = re.sub(r"[ \t]{2,}", " ", normalized)
    return normalized.strip()
