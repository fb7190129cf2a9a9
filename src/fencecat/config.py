# src/fencecat/config.py

__version__ = "0.3.0"

# Marker character repeated to build a fence line.
FENCE_CHAR = "`"
MIN_FENCE_WIDTH = 3

# Only the head of a file is sniffed for control bytes.
BINARY_SNIFF_BYTES = 8192

# Bytes below 0x20 that still count as text.
TEXT_CONTROL_BYTES = frozenset(b"\t\n\v\f\r\b\x1b")

# Per-directory ignore files, evaluated in this order (later files win).
IGNORE_FILES = (".gitignore", ".ignore")

# Repository-local excludes, relative to the traversal root.
GIT_EXCLUDE_FILE = ".git/info/exclude"

STATS_TOP_N = 10
