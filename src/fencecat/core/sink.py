# src/fencecat/core/sink.py
import sys
from typing import Optional, Sequence

from fencecat.core.assembler import TEXT_ERRORS
from fencecat.errors import SinkError
from fencecat.utils.clipboard import ClipboardAdapter, copy_to_clipboard


class StdoutSink:
    """Writes the assembled text to stdout as raw bytes, byte-for-byte."""

    def __init__(self, stream=None):
        self.stream = stream

    def write(self, text: str) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        try:
            buffer = getattr(stream, "buffer", None)
            if buffer is not None:
                stream.flush()
                buffer.write(text.encode("utf-8", TEXT_ERRORS))
                buffer.flush()
            else:
                stream.write(text)
                stream.flush()
        except OSError as e:
            raise SinkError(f"Could not write to stdout: {e}")


class ClipboardSink:
    def __init__(self, adapters: Optional[Sequence[ClipboardAdapter]] = None):
        self.adapters = adapters
        self.used: Optional[str] = None

    def write(self, text: str) -> None:
        self.used = copy_to_clipboard(text, self.adapters)
