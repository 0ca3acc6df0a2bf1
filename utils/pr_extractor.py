#!/usr/bin/env python3
"""Merged pull request extraction from commit history.

Pull requests are inferred purely from the shape of merge commit subjects;
ordinary commits are dropped.
"""

import logging
import re
from typing import List, Optional

from .changelog_config import ConfigurationError, ResolvedChangelogConfig
from .git_history import HistorySource, revision_range_since
from .pr_models import CommitRecord, PullRequestRecord, extract_first_line

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


def extract_pull_requests(
    history: HistorySource,
    previous_tag: Optional[str],
    config: ResolvedChangelogConfig,
) -> List[PullRequestRecord]:
    """Collect pull requests merged since ``previous_tag``.

    Args:
        history: Source of commit records
        previous_tag: Tag of the last release, or None before the first release
        config: Resolved formatter configuration

    Returns:
        Pull request records in the order the history source returned them

    Raises:
        ConfigurationError: If the detection pattern is invalid
        HistoryAccessError: If the history query fails
    """
    regex = config.pull_request_regex()
    revision_range = revision_range_since(previous_tag)
    logger.info(f"Collecting merged pull requests in {revision_range}")

    commits = history.query(revision_range)
    pull_requests: List[PullRequestRecord] = []
    for commit in commits:
        match = regex.search(commit.subject)
        if match is None:
            continue
        number = match.group(1)
        if not number or not _DIGITS.fullmatch(number):
            raise ConfigurationError(
                f"Option 'pull-request-detection-pattern' captured {number!r} instead of a "
                f"pull request number in {commit.subject!r}"
            )
        pull_requests.append(PullRequestRecord(number=number, title=_title_for(commit, match, config)))

    logger.info(f"✓ Found {len(pull_requests)} merged pull requests out of {len(commits)} commits")
    return pull_requests


def _title_for(commit: CommitRecord, match: re.Match[str], config: ResolvedChangelogConfig) -> str:
    if config.title_source == "subject":
        start, end = match.span()
        return (commit.subject[:start] + commit.subject[end:]).strip()
    return extract_first_line(commit.body)
