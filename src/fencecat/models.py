# src/fencecat/models.py
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class CandidatePath:
    """A file found by the collector, not yet filtered."""
    path: Path
    rel_path: str

    @property
    def extension(self) -> str:
        """Lower-cased suffix without the leading dot, or "" when there is none."""
        return Path(self.rel_path).suffix.lstrip(".").lower()


@dataclass
class FileRecord:
    rel_path: str
    size: int
    content: Optional[bytes]
    fence_width: int

    def release(self) -> None:
        """Drops the content buffer once the record has been rendered."""
        self.content = None
