"""
Update check for a git-managed skill library.

Independent of discovery and resolution: every failure (no git, not a
repository, no upstream, timeout) is reported as "no update available".
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import re as _re
import subprocess as _subprocess

import skillbook.constants as constants

_logger = _logging.getLogger(__name__)

# "## main...origin/main [behind 2]" or "[ahead 1, behind 2]"
_BEHIND_RE = _re.compile(r"\bbehind \d+")


def _run_git(
    args: list[str],
    repo_dir: _pathlib.Path,
    timeout: float,
) -> _subprocess.CompletedProcess[str] | None:
    try:
        return _subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            cwd=repo_dir,
            timeout=timeout,
        )
    except (_subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        _logger.debug("git %s failed in %s: %s", " ".join(args), repo_dir, e)
        return None


def check_for_updates(
    repo_dir: _pathlib.Path,
    timeout: float = constants.DEFAULT_UPDATE_CHECK_TIMEOUT,
) -> bool:
    """
    Check whether a skill library checkout is behind its upstream.

    Args:
        repo_dir: Directory inside the git checkout.
        timeout: Seconds allowed for each git command.

    Returns:
        True if the current branch is behind its upstream.
    """
    if not repo_dir.is_dir():
        return False

    fetch = _run_git(["fetch", "--quiet"], repo_dir, timeout)
    if fetch is None or fetch.returncode != 0:
        return False

    status = _run_git(["status", "--porcelain=v1", "--branch"], repo_dir, timeout)
    if status is None or status.returncode != 0:
        return False

    for line in status.stdout.splitlines():
        if line.startswith("## ") and _BEHIND_RE.search(line):
            return True
    return False
