# src/fencecat/core/classifier.py
import logging
import re
from typing import List, Optional

from fencecat.config import BINARY_SNIFF_BYTES, FENCE_CHAR, MIN_FENCE_WIDTH, TEXT_CONTROL_BYTES
from fencecat.errors import ReadError
from fencecat.models import CandidatePath, FileRecord

logger = logging.getLogger(__name__)

_FENCE_RUN = re.compile(re.escape(FENCE_CHAR.encode("utf-8")) + b"+")

_DISALLOWED = re.compile(
    b"[" + re.escape(bytes(b for b in range(0x20) if b not in TEXT_CONTROL_BYTES)) + b"]"
)


def is_binary(data: bytes, window: int = BINARY_SNIFF_BYTES) -> bool:
    """
    Inspects the first `window` bytes. Any NUL or non-whitespace control
    byte marks the file as binary. Bytes >= 0x80 are accepted so UTF-8
    text passes.
    """
    return _DISALLOWED.search(data, 0, window) is not None


def longest_fence_run(data: bytes) -> int:
    """Length of the longest contiguous run of the fence character, newlines included."""
    return max((m.end() - m.start() for m in _FENCE_RUN.finditer(data)), default=0)


def fence_width(data: bytes, minimum: int = MIN_FENCE_WIDTH) -> int:
    return max(minimum, longest_fence_run(data) + 1)


class ContentClassifier:
    """
    Reads candidates and turns text files into FileRecords.
    Unreadable files are recorded in `errors` and skipped.
    """

    def __init__(self):
        self.errors: List[ReadError] = []

    def classify(self, candidate: CandidatePath) -> Optional[FileRecord]:
        try:
            data = candidate.path.read_bytes()
        except OSError as e:
            err = ReadError(candidate.rel_path, e)
            self.errors.append(err)
            logger.warning("%s", err)
            return None

        if not data:
            logger.debug("Skipping empty file: %s", candidate.rel_path)
            return None

        if is_binary(data):
            logger.debug("Skipping binary file: %s", candidate.rel_path)
            return None

        return FileRecord(
            rel_path=candidate.rel_path,
            size=len(data),
            content=data,
            fence_width=fence_width(data),
        )
