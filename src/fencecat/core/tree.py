# src/fencecat/core/tree.py
from pathlib import PurePosixPath
from typing import Dict, List, Optional

from fencecat.core.assembler import render_fenced
from fencecat.core.classifier import fence_width

# name -> child directory, or None for a file
Node = Dict[str, Optional["Node"]]


def generate_listing(file_paths: List[str]) -> str:
    """One relative path per line, in the order given."""
    return "".join(f"{p}\n" for p in file_paths)


def _build_nodes(file_paths: List[str]) -> Node:
    root: Node = {}
    for path in file_paths:
        *dirs, name = PurePosixPath(path).parts
        node = root
        for d in dirs:
            child = node.get(d)
            if child is None:
                child = node[d] = {}
            node = child
        node.setdefault(name, None)
    return root


def _render_node(node: Node, prefix: str, out: List[str]) -> None:
    # Directories first, each group by name.
    entries = sorted(node.items(), key=lambda kv: (kv[1] is None, kv[0]))
    for i, (name, child) in enumerate(entries):
        last = i == len(entries) - 1
        branch = "└── " if last else "├── "
        if child is None:
            out.append(f"{prefix}{branch}{name}")
        else:
            out.append(f"{prefix}{branch}{name}/")
            _render_node(child, prefix + ("    " if last else "│   "), out)


def generate_project_tree(file_paths: List[str], root_name: str) -> str:
    """
    Draws the emitted files as a box-drawing tree under root_name.
    Directories carry a trailing slash and are listed before files.
    """
    out = [f"{root_name}/"]
    _render_node(_build_nodes(file_paths), "", out)
    return "\n".join(out) + "\n"


def fence_preamble(text: str) -> str:
    """Wraps a listing or tree in an unlabelled fence sized for its content."""
    return render_fenced("", text, fence_width(text.encode("utf-8")))
