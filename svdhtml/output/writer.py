"""Writes rendered documents into the output directory."""

from __future__ import annotations

import logging
from pathlib import Path, PurePath
from typing import Mapping

from svdhtml.core.exceptions import SvdHtmlError

logger = logging.getLogger(__name__)


class OutputError(SvdHtmlError):
    """Raised when the output directory or a document cannot be written."""


def _target(out_dir: Path, name: str) -> Path:
    rel = PurePath(name)
    if rel.is_absolute() or ".." in rel.parts:
        raise OutputError(
            f"Refusing to write outside the output directory: {name}",
            details={"file": name},
        )
    return out_dir / rel


def write_documents(documents: Mapping[str, str], out_dir: Path) -> list[Path]:
    """Write every document, in order, once all of them are rendered.

    Args:
        documents: File name relative to out_dir -> document text.
        out_dir: Created if missing.

    Returns:
        Paths written, in the order of ``documents``.

    Raises:
        OutputError: on an unsafe file name or any OS error.
    """
    targets = [(_target(out_dir, name), text) for name, text in documents.items()]

    written: list[Path] = []
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        for path, text in targets:
            path.write_text(text, encoding="utf-8")
            logger.debug("Wrote %s (%d bytes)", path, len(text))
            written.append(path)
    except OSError as exc:
        raise OutputError(
            f"Failed to write output: {exc}", details={"out_dir": str(out_dir)}
        ) from exc

    logger.info("Wrote %d files to %s", len(written), out_dir)
    return written
