# src/fencecat/core/scanner.py
import logging
import os
from pathlib import Path
from typing import Callable, Iterator, Optional

from fencecat.core.ignore import IgnoreOracle
from fencecat.errors import PathError
from fencecat.models import CandidatePath

logger = logging.getLogger(__name__)

# (rel_path, is_dir) -> ignored?
IgnoreCheck = Callable[..., bool]


def _check_root(root: Path) -> None:
    if not root.exists():
        raise PathError(root, "No such file or directory")
    if root.is_file():
        if not os.access(root, os.R_OK):
            raise PathError(root, "Permission denied")
        return
    if not root.is_dir():
        raise PathError(root, "Not a regular file or directory")
    try:
        os.listdir(root)
    except OSError as e:
        raise PathError(root, f"Cannot read directory ({e.strerror or e})")


class ProjectScanner:
    """
    Produces CandidatePath objects for every file under root, ordered
    lexicographically by relative path.
    """

    def __init__(self, root: Path, respect_ignore_rules: bool = True, oracle: Optional[IgnoreCheck] = None):
        self.root = root
        self.respect_ignore_rules = respect_ignore_rules
        if oracle is None and respect_ignore_rules and root.is_dir():
            oracle = IgnoreOracle(root)
        self.oracle = oracle

    def _ignored(self, rel_path: str, is_directory: bool) -> bool:
        if not self.respect_ignore_rules or self.oracle is None:
            return False
        return self.oracle(rel_path, is_directory)

    def scan(self) -> Iterator[CandidatePath]:
        """
        Validates the root eagerly, then walks lazily. A single-file root
        yields exactly that file, labelled with its name.
        """
        _check_root(self.root)
        return self._walk()

    def _walk(self) -> Iterator[CandidatePath]:
        if self.root.is_file():
            yield CandidatePath(path=self.root, rel_path=self.root.name)
            return
        yield from self._walk_dir(self.root, "")

    def _walk_dir(self, abs_dir: Path, rel_dir: str) -> Iterator[CandidatePath]:
        try:
            with os.scandir(abs_dir) as it:
                entries = list(it)
        except OSError as e:
            logger.warning("walk error: %s", e)
            return

        # A directory sorts as "name/" so that its subtree lands exactly where
        # its paths fall in a plain string sort of the full relative paths.
        keyed = []
        for entry in entries:
            is_dir = entry.is_dir(follow_symlinks=False)
            keyed.append((entry.name + "/" if is_dir else entry.name, is_dir, entry))
        keyed.sort(key=lambda item: item[0])

        for _, is_dir, entry in keyed:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

            if self._ignored(rel_path, is_directory=is_dir):
                if is_dir:
                    logger.debug("Pruning directory: %s", rel_path)
                continue

            if is_dir:
                yield from self._walk_dir(Path(entry.path), rel_path)
            elif entry.is_file():
                yield CandidatePath(path=Path(entry.path), rel_path=rel_path)
            else:
                # dangling symlinks, sockets, fifos
                logger.debug("Skipping non-regular entry: %s", rel_path)


def collect(root: Path, respect_ignore_rules: bool = True, oracle: Optional[IgnoreCheck] = None) -> Iterator[CandidatePath]:
    return ProjectScanner(root, respect_ignore_rules, oracle).scan()
