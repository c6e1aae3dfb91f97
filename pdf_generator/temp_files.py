"""
Temp file handling for rendered PDFs.

Each request gets its own `<uuid4>.pdf` in the platform temp directory,
which is removed once the bytes have been read.
"""

import asyncio
import logging
import tempfile
import uuid
from pathlib import Path
from typing import Optional

from .errors import ArtifactMissing, DeleteFailure

logger = logging.getLogger(__name__)


def new_temp_output_path(directory: Optional[Path] = None) -> Path:
    """Allocate a unique, not yet existing .pdf path."""
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    return base / f"{uuid.uuid4()}.pdf"


def delete_file(path: Path) -> None:
    """
    Remove path if present.

    A file that does not exist counts as deleted.

    Raises:
        DeleteFailure: if the file exists but cannot be removed
    """
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Could not delete file {path}: {e}")
        raise DeleteFailure(Path(path), e) from e


async def read_pdf_from_disk(path: Path) -> bytes:
    """
    Read a rendered PDF off disk without blocking the event loop.

    Raises:
        ArtifactMissing: if no file exists at path
    """
    path = Path(path)
    if not path.is_file():
        raise ArtifactMissing(path)
    return await asyncio.to_thread(path.read_bytes)
