# src/fencecat/core/pipeline.py
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from fencecat.core.assembler import TEXT_ERRORS, assemble, order
from fencecat.core.classifier import ContentClassifier
from fencecat.core.filters import FilterConfig, filter_candidates
from fencecat.core.scanner import collect
from fencecat.core.tree import fence_preamble, generate_listing, generate_project_tree
from fencecat.errors import ReadError
from fencecat.models import FileRecord
from fencecat.utils.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileStat:
    rel_path: str
    size: int
    token_count: Optional[int] = None


@dataclass
class RunResult:
    output: str
    files: List[FileStat] = field(default_factory=list)
    errors: List[ReadError] = field(default_factory=list)


def _tally(records: Iterable[FileRecord], stats: List[FileStat], count_tokens: bool) -> Iterator[FileRecord]:
    """Records per-file stats while the content is still held."""
    for r in records:
        tokens = Tokenizer.count(r.content.decode("utf-8", TEXT_ERRORS)) if count_tokens else None
        stats.append(FileStat(rel_path=r.rel_path, size=r.size, token_count=tokens))
        yield r


def _root_name(root: Path) -> str:
    base = root.resolve()
    if base.is_file():
        base = base.parent
    return base.name or "project"


def run(
    root: Path,
    config: FilterConfig,
    biggest_first: bool = False,
    jobs: int = 1,
    dir_list: bool = False,
    tree: bool = False,
    count_tokens: bool = False,
) -> RunResult:
    """
    Collect -> filter -> classify -> order -> assemble.

    A bad root raises PathError before any file is read. In default order
    the stages are chained lazily, so each file is read, rendered and
    released before the next one is read. With jobs > 1 the classification
    step runs on a thread pool; Executor.map yields results in submission
    order, so the output is identical to a sequential run.
    """
    candidates = filter_candidates(collect(root, config.respect_ignore_rules), config)
    classifier = ContentClassifier()
    stats: List[FileStat] = []

    def render(classified: Iterable[Optional[FileRecord]]) -> str:
        records = (r for r in classified if r is not None)
        return assemble(_tally(order(records, biggest_first), stats, count_tokens))

    if jobs > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            body = render(pool.map(classifier.classify, candidates))
    else:
        body = render(map(classifier.classify, candidates))

    logger.debug("%d files qualified, %d read errors", len(stats), len(classifier.errors))

    labels = [s.rel_path for s in stats]
    preamble = ""
    if dir_list:
        preamble += fence_preamble(generate_listing(labels))
    if tree:
        preamble += fence_preamble(generate_project_tree(labels, _root_name(root)))

    return RunResult(output=preamble + body, files=stats, errors=list(classifier.errors))
