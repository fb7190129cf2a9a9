# src/fencecat/core/filters.py
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Optional, Tuple

from fencecat.errors import ConfigError
from fencecat.models import CandidatePath


def normalize_extension(ext: str) -> str:
    """' .MD ' -> 'md'. An empty string stays empty and means "no extension"."""
    return ext.strip().lstrip(".").lower()


def parse_extension_list(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    """
    Accepts repeated and/or comma-separated values: ["rs,ts", ".md"].
    Blank entries are dropped; pass "." alone to target extensionless files.
    """
    exts = set()
    for value in values or ():
        for raw in value.split(","):
            if not raw.strip():
                continue
            exts.add(normalize_extension(raw))
    return frozenset(exts)


def compile_patterns(patterns: Optional[Iterable[str]]) -> Tuple[re.Pattern, ...]:
    compiled = []
    for p in patterns or ():
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            raise ConfigError(f"Invalid pattern '{p}': {e}")
    return tuple(compiled)


@dataclass(frozen=True)
class FilterConfig:
    extension_allow: FrozenSet[str] = field(default_factory=frozenset)
    extension_deny: FrozenSet[str] = field(default_factory=frozenset)
    pattern_allow: Tuple[re.Pattern, ...] = ()
    pattern_deny: Tuple[re.Pattern, ...] = ()
    respect_ignore_rules: bool = True

    @classmethod
    def build(cls, ext_allow=None, ext_deny=None, include=None, exclude=None, respect_ignore_rules: bool = True) -> "FilterConfig":
        """Builds a config from raw command-line strings."""
        return cls(
            extension_allow=parse_extension_list(ext_allow),
            extension_deny=parse_extension_list(ext_deny),
            pattern_allow=compile_patterns(include),
            pattern_deny=compile_patterns(exclude),
            respect_ignore_rules=respect_ignore_rules,
        )


def _any_match(patterns: Tuple[re.Pattern, ...], rel_path: str) -> bool:
    return any(p.search(rel_path) for p in patterns)


def accepts(candidate: CandidatePath, config: FilterConfig) -> bool:
    """
    Decides whether a candidate qualifies, using only its path.

    Checks run in a fixed order so deny rules always beat allow rules:
    extension deny, pattern deny, extension allow, pattern allow.
    """
    ext = candidate.extension
    rel = candidate.rel_path

    if ext in config.extension_deny:
        return False
    if _any_match(config.pattern_deny, rel):
        return False
    if config.extension_allow and ext not in config.extension_allow:
        return False
    if config.pattern_allow and not _any_match(config.pattern_allow, rel):
        return False
    return True


def filter_candidates(candidates: Iterable[CandidatePath], config: FilterConfig) -> Iterator[CandidatePath]:
    return (c for c in candidates if accepts(c, config))
