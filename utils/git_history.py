#!/usr/bin/env python3
"""Git history source for changelog generation.

Runs ``git log`` over a revision range and parses each commit into a
subject and a body. The two fields are separated by the ASCII unit
separator and every record is terminated by the ASCII record separator,
so blank lines or pipes inside a body never confuse the parser.
"""

import logging
import subprocess
from typing import List, Optional, Protocol, Sequence

from configs.config import Config
from .pr_models import CommitRecord

logger = logging.getLogger(__name__)


FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"
LOG_FORMAT = "%s%x1f%b%x1e"

# Range covering everything reachable from the current position
FULL_HISTORY_RANGE = "HEAD"


class HistoryAccessError(Exception):
    """Raised when the commit history cannot be read."""
    def __init__(self, message: str, code: str = "HISTORY", *, revision_range: str = "", diagnostics: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.revision_range = revision_range
        self.diagnostics = diagnostics


class HistorySource(Protocol):
    def query(self, revision_range: str) -> List[CommitRecord]:
        ...


def revision_range_since(previous_tag: Optional[str]) -> str:
    """Return the range of commits after ``previous_tag`` up to HEAD.

    The tagged commit itself is excluded. Without a previous tag the whole
    history reachable from HEAD is covered.
    """
    if previous_tag is None:
        return FULL_HISTORY_RANGE
    return f"{previous_tag}..HEAD"


def parse_log_output(raw_log: str) -> List[CommitRecord]:
    """Convert output produced with ``LOG_FORMAT`` into commit records."""
    records: List[CommitRecord] = []
    for chunk in raw_log.split(RECORD_SEPARATOR):
        # git separates records with a newline that lands before the next subject
        chunk = chunk.lstrip("\n")
        if not chunk:
            continue
        subject, _, body = chunk.partition(FIELD_SEPARATOR)
        records.append(CommitRecord(subject=subject.strip(), body=body.rstrip("\n")))
    return records


class GitHistorySource:
    """Reads commits from a local git repository."""

    def __init__(self, repo_path: Optional[str] = None, git_binary: Optional[str] = None) -> None:
        self.repo_path = repo_path
        self.git_binary = git_binary or Config.get_git_config()["git_binary"]

    def query(self, revision_range: str) -> List[CommitRecord]:
        """List commits in ``revision_range`` in git's native order (newest first).

        Raises:
            HistoryAccessError: If git is missing or exits with a non-zero status
        """
        args = ["log", revision_range, f"--format={LOG_FORMAT}", "--"]
        output = run_git(self.git_binary, args, cwd=self.repo_path, revision_range=revision_range)
        records = parse_log_output(output)
        logger.debug(f"✓ Read {len(records)} commits for range {revision_range}")
        return records


def run_git(git_binary: str, args: Sequence[str], *, cwd: Optional[str] = None, revision_range: str = "") -> str:
    """Run a git command and return its standard output.

    Raises:
        HistoryAccessError: Carrying the command's combined diagnostic output
    """
    command = [git_binary, *args]
    logger.debug(f"Running: {' '.join(command)}")
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise HistoryAccessError(
            f"Error while executing git command: {' '.join(command)}\n{e}",
            revision_range=revision_range,
            diagnostics=str(e),
        ) from e

    if completed.returncode != 0:
        diagnostics = "\n".join(part for part in (completed.stdout.strip(), completed.stderr.strip()) if part)
        raise HistoryAccessError(
            f"Error while executing git command: {' '.join(command)}\n{diagnostics}",
            revision_range=revision_range,
            diagnostics=diagnostics,
        )
    return completed.stdout
