# src/fencecat/core/assembler.py
from typing import Iterable

from fencecat.config import FENCE_CHAR
from fencecat.models import FileRecord

# Non-UTF-8 bytes survive as lone surrogates and are re-encoded by the stdout sink.
TEXT_ERRORS = "surrogateescape"


def order(records: Iterable[FileRecord], biggest_first: bool = False) -> Iterable[FileRecord]:
    """
    Default order is production order, which the collector keeps sorted by
    relative path; the iterable is passed through untouched so records can
    stream. Biggest-first sorts by path, then stably by size descending, so
    equal sizes stay in path order.
    """
    if biggest_first:
        by_path = sorted(records, key=lambda r: r.rel_path)
        return sorted(by_path, key=lambda r: r.size, reverse=True)
    return records


def render_fenced(label: str, body: str, width: int) -> str:
    fence = FENCE_CHAR * width
    parts = [fence, label, "\n", body]
    if body and not body.endswith("\n"):
        parts.append("\n")
    parts.extend([fence, "\n\n"])
    return "".join(parts)


def render_block(record: FileRecord) -> str:
    """Renders one record and releases its content buffer."""
    body = record.content.decode("utf-8", TEXT_ERRORS)
    block = render_fenced(record.rel_path, body, record.fence_width)
    record.release()
    return block


def assemble(records: Iterable[FileRecord], biggest_first: bool = False) -> str:
    """
    Renders records in order. With a lazy iterable in default order each
    record is rendered, and its buffer dropped, before the next is pulled.
    """
    return "".join(render_block(r) for r in order(records, biggest_first))
