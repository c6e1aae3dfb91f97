"""
Error types for the PDF generator.

Discovery and cleanup errors propagate. Browser-interaction errors are
captured by the renderer and handed back as a RenderResult.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class PDFGeneratorError(Exception):
    """Base class for all PDF generator errors."""


class DiscoveryError(PDFGeneratorError):
    """The discovery endpoint could not be reached or returned an unusable body."""

    def __init__(self, discovery_url: str, reason: str):
        self.discovery_url = discovery_url
        self.reason = reason
        super().__init__(
            f"Could not get WebSocket debugger URL from {discovery_url}: {reason}"
        )


class RenderStage(str, Enum):
    """Steps of a render session, in order."""
    RESOLVE = "resolve"    # Find a live control endpoint
    CONNECT = "connect"    # Attach to the browser over CDP
    NAVIGATE = "navigate"  # Load the target URL
    PRINT = "print"        # Write the PDF to disk


class RenderFailure(PDFGeneratorError):
    """A render session failed at a given stage."""

    def __init__(self, stage: RenderStage, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Render failed during {stage.value}: {cause}")


class ArtifactMissing(PDFGeneratorError):
    """The expected PDF was not on disk after the render attempt."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Rendered PDF not found at {path}")


class DeleteFailure(PDFGeneratorError):
    """A temp file could not be removed."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not delete file {path}: {cause}")


@dataclass
class RenderResult:
    """
    Outcome of a single render session.

    Exactly one of artifact_path / error is set.
    """

    artifact_path: Optional[Path] = None
    error: Optional[RenderFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, artifact_path: Path) -> "RenderResult":
        return cls(artifact_path=artifact_path)

    @classmethod
    def failure(cls, stage: RenderStage, cause: BaseException) -> "RenderResult":
        return cls(error=RenderFailure(stage, cause))
