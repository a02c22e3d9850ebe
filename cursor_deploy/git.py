"""
Thin wrapper around the git CLI.

Only repository initialization is needed; every invocation goes through
_run_git so failures surface as GitError with git's own stderr.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import GitError

LOG = logging.getLogger(__name__)


def _run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    cmd = ["git", *args]
    LOG.debug("Running git command in %s: %s", cwd, " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=str(cwd),
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        raise GitError(f"failed to execute git: {exc}") from exc

    if completed.returncode != 0:
        LOG.debug("git stderr: %s", completed.stderr)
        detail = completed.stderr.strip()
        message = f"git command failed: {' '.join(cmd)}"
        raise GitError(f"{message}: {detail}" if detail else message)

    return completed


def has_repository(path: Path) -> bool:
    return (path / ".git").exists()


def init_repository(path: Path) -> None:
    """Run ``git init`` inside path."""

    completed = _run_git(["init"], cwd=path)
    LOG.debug("git stdout: %s", completed.stdout.strip())
