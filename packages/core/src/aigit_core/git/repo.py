"""Thin wrappers around the system git binary.

Every call goes through run_git so stderr capture and GitCommandError
construction live in one place. Commands are run sequentially in the
current working directory; nothing is cached between calls.
"""

from __future__ import annotations

import logging
import subprocess

from aigit_core.errors import GitCommandError
from aigit_core.models import CommitRecord

logger = logging.getLogger(__name__)

LOG_FORMAT = "--pretty=format:%H|%an|%ad|%s"


def _run(args: list[str]) -> subprocess.CompletedProcess:
    command = ["git", *args]
    logger.debug("Running %s", " ".join(command))
    try:
        return subprocess.run(command, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise GitCommandError(command, "git executable not found") from e


def run_git(*args: str) -> str:
    """Run git and return its stdout; raise GitCommandError on non-zero exit."""
    result = _run(list(args))
    if result.returncode != 0:
        raise GitCommandError(["git", *args], result.stderr, result.returncode)
    return result.stdout


# ------------------------------------------------------------------ #
# Diffs                                                                #
# ------------------------------------------------------------------ #


def get_staged_diff() -> str:
    return run_git("diff", "--cached").strip()


def get_diff() -> str:
    """Unstaged changes in the working tree."""
    return run_git("diff").strip()


def get_commit_diff(commit_hash: str) -> str:
    return run_git("show", commit_hash).strip()


def get_range_diff(commit_range: str) -> str:
    return run_git("diff", commit_range).strip()


def get_branch_diff(branch: str) -> str:
    """Diff of the working tree against ``branch``."""
    return run_git("diff", branch).strip()


# ------------------------------------------------------------------ #
# History                                                              #
# ------------------------------------------------------------------ #


def parse_log(output: str) -> list[CommitRecord]:
    """Parse ``hash|author|date|subject`` lines; the subject may itself contain pipes."""
    commits = []
    for line in output.strip().splitlines():
        if not line:
            continue
        parts = line.split("|", 3)
        if len(parts) == 4:
            commits.append(CommitRecord(hash=parts[0], author=parts[1], date=parts[2], message=parts[3]))
    return commits


def get_commits(number: int = 0, branch: str = "", from_ref: str = "", to_ref: str = "") -> list[CommitRecord]:
    args = ["log", LOG_FORMAT, "--date=short"]
    if number > 0:
        args.append(f"-n{number}")
    if branch:
        args.append(branch)
    if from_ref and to_ref:
        args.append(f"{from_ref}..{to_ref}")
    elif from_ref:
        args.append(f"{from_ref}..HEAD")
    return parse_log(run_git(*args))


def get_current_branch() -> str:
    return run_git("branch", "--show-current").strip()


# ------------------------------------------------------------------ #
# Working tree state and side effects                                  #
# ------------------------------------------------------------------ #


def has_staged_changes() -> bool:
    # `git diff --cached --quiet` exits 1 when something is staged.
    result = _run(["diff", "--cached", "--quiet"])
    if result.returncode == 1:
        return True
    if result.returncode != 0:
        raise GitCommandError(["git", "diff", "--cached", "--quiet"], result.stderr, result.returncode)
    return False


def is_repo_clean() -> bool:
    return run_git("status", "--porcelain") == ""


def stage_all() -> None:
    run_git("add", "--all")


def create_commit(message: str) -> None:
    run_git("commit", "-m", message)


def push() -> None:
    run_git("push")
