"""Helpers for slicing unified diffs per file.

Nothing here parses hunks; files are told apart by their ``diff --git``
headers, and paths are matched against globs and directory prefixes.
"""

from __future__ import annotations

import fnmatch
import re

_DIFF_HEADER = re.compile(r"^diff --git a/(.+?) b/(.+)$")

NON_CODE_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".ico",
    ".webp",
    ".pdf",
    ".woff",
    ".woff2",
    ".ttf",
    ".mp4",
    ".zip",
    ".gz",
}


def is_code_file(file_name: str) -> bool:
    return not any(file_name.lower().endswith(ext) for ext in NON_CODE_EXTENSIONS)


def is_excluded(filename: str, patterns: list[str]) -> bool:
    """Return True if filename matches any pattern.

    Supports:
    - fnmatch globs on the full path or the basename: "*.lock", "src/*.py"
    - Directory names/prefixes: "vendor/", "tests" (matches any file within that tree)
    """
    for pattern in patterns:
        if fnmatch.fnmatch(filename, pattern):
            return True
        if fnmatch.fnmatch(filename.rsplit("/", 1)[-1], pattern):
            return True
        prefix = pattern.rstrip("/") + "/"
        if filename.startswith(prefix) or ("/" + prefix) in filename:
            return True
    return False


def split_diff(diff: str) -> list[tuple[str, str]]:
    """Split a multi-file diff into ``(path, chunk)`` pairs.

    Text before the first ``diff --git`` header (e.g. the commit header of
    ``git show``) is returned under an empty path.
    """
    chunks: list[tuple[str, list[str]]] = []
    for line in diff.splitlines():
        match = _DIFF_HEADER.match(line)
        if match:
            chunks.append((match.group(2), [line]))
        elif chunks:
            chunks[-1][1].append(line)
        else:
            chunks.append(("", [line]))
    return [(path, "\n".join(lines)) for path, lines in chunks]


def filter_diff(diff: str, include: list[str] | None = None, exclude: list[str] | None = None) -> str:
    """Keep only the file chunks matching ``include`` (all when empty) and not ``exclude``."""
    chunks = split_diff(diff)
    if not any(path for path, _ in chunks):
        return diff.strip()

    kept = []
    files_kept = 0
    for path, chunk in chunks:
        if not path:
            kept.append(chunk)
            continue
        if not is_code_file(path):
            continue
        if include and not is_excluded(path, include):
            continue
        if exclude and is_excluded(path, exclude):
            continue
        kept.append(chunk)
        files_kept += 1
    # A commit header with every file filtered out is not a reviewable change.
    if not files_kept:
        return ""
    return "\n".join(kept).strip()


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."
