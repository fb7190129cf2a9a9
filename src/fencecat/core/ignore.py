# src/fencecat/core/ignore.py
import logging
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional

import pathspec

from fencecat.config import GIT_EXCLUDE_FILE, IGNORE_FILES

logger = logging.getLogger(__name__)


def load_ignore_spec(ignore_file: Path) -> Optional[pathspec.PathSpec]:
    """
    Loads rules from an ignore file and compiles them into a PathSpec.
    Returns None when the file is absent or holds no lines.
    An unreadable or unparsable file is reported and treated as empty.
    """
    lines: List[str] = []

    if ignore_file.is_file():
        try:
            with open(ignore_file, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read ignore file %s: %s", ignore_file, e)

    if not lines:
        return None

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except (ValueError, TypeError) as e:
        logger.warning("Error parsing ignore rules in %s: %s", ignore_file, e)
        return None


def _last_match(spec: pathspec.PathSpec, rel_path: str) -> Optional[bool]:
    """
    Gitignore "last match wins": returns True if the last matching pattern
    ignores the path, False if it is a negation, None if nothing matched.
    """
    decision = None
    for pattern in spec.patterns:
        if pattern.include is None:
            continue
        if pattern.match_file(rel_path) is not None:
            decision = pattern.include
    return decision


class IgnoreOracle:
    """
    Answers "is this path ignored?" for paths relative to a traversal root.

    Ignore files are discovered lazily per directory and cached, so the
    oracle can be asked about any path in any order.
    """

    def __init__(self, root: Path):
        self.root = root
        self._cache: Dict[str, List[pathspec.PathSpec]] = {}

    def _specs_for(self, rel_dir: str) -> List[pathspec.PathSpec]:
        if rel_dir not in self._cache:
            abs_dir = self.root / rel_dir if rel_dir else self.root
            candidates = [abs_dir / name for name in IGNORE_FILES]
            if not rel_dir:
                candidates.insert(0, self.root / GIT_EXCLUDE_FILE)

            specs = []
            for ignore_file in candidates:
                spec = load_ignore_spec(ignore_file)
                if spec is not None:
                    logger.debug("Loaded ignore rules from %s", ignore_file)
                    specs.append(spec)
            self._cache[rel_dir] = specs
        return self._cache[rel_dir]

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        parts = PurePosixPath(rel_path).parts
        if not parts:
            return False

        if parts[-1].startswith("."):
            return True

        decision = None
        # Walk from the root down to the parent directory; deeper files win.
        for depth in range(len(parts)):
            base = "/".join(parts[:depth])
            local = "/".join(parts[depth:])
            if is_dir:
                local += "/"
            for spec in self._specs_for(base):
                result = _last_match(spec, local)
                if result is not None:
                    decision = result
        return bool(decision)

    __call__ = is_ignored
