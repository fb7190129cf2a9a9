# src/fencecat/errors.py


class FencecatError(Exception):
    """Base exception for fencecat errors."""


class PathError(FencecatError):
    """The traversal root is missing or unreadable. Fatal."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class ReadError(FencecatError):
    """A single file could not be read. The file is skipped."""

    def __init__(self, rel_path: str, cause: Exception):
        self.rel_path = rel_path
        self.cause = cause
        super().__init__(f"skip {rel_path}: read error: {cause}")


class SinkError(FencecatError):
    """Writing to stdout or the clipboard failed."""


class ConfigError(FencecatError):
    """Invalid filter or runtime options."""
