"""
Local filesystem document store adapter - Implements DocumentStore protocol.

Supporting documents are written under a root directory; the locator is
the sanitized relative path, and URLs are formed against a public base
URL that serves that directory.
"""

import logging
import re
from pathlib import Path
from urllib.parse import quote

from bank_onboarding.domain.exceptions import DocumentUploadFailed

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._@+-]")


class LocalDocumentStore:
    """
    Implements DocumentStore protocol on the local filesystem.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, root: str | Path, base_url: str) -> None:
        """
        Args:
            root: Directory that receives uploaded documents
            base_url: Public URL under which `root` is served
        """
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")

    def upload(self, path_hint: str, data: bytes, content_type: str) -> str:
        """
        Write document bytes below the root directory.

        Path segments are sanitized so a hint can never escape the root.

        Returns:
            Relative path of the stored document

        Raises:
            DocumentUploadFailed: If the file cannot be written
        """
        locator = self._to_locator(path_hint)
        target = self._root / locator
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Document upload failed: {locator} - {e}")
            raise DocumentUploadFailed("Failed to upload supporting document. Please try again.") from e

        logger.info("Stored %s document (%d bytes): %s", content_type, len(data), locator)
        return locator

    def resolve_url(self, locator: str) -> str:
        return f"{self._base_url}/{quote(locator)}"

    def _to_locator(self, path_hint: str) -> str:
        segments = []
        for segment in path_hint.split("/"):
            cleaned = _UNSAFE_CHARS.sub("_", segment)
            if cleaned.strip(".") == "":
                continue
            segments.append(cleaned)
        if not segments:
            raise DocumentUploadFailed("Invalid document name.")
        return "/".join(segments)
