#!/usr/bin/env python3
"""Release marker authority backed by git tags.

A release is identified by a tag named ``<prefix><version>``. The current
release is the highest version-sorted tag reachable from HEAD.
"""

import logging
from typing import Optional, Protocol

from configs.config import Config
from .git_history import run_git

logger = logging.getLogger(__name__)


class ReleaseMarkerAuthority(Protocol):
    def current_release_tag(self) -> Optional[str]:
        ...

    def tag_for_version(self, version: str) -> str:
        ...


class GitTagPersister:
    """Reads release tags from a local git repository."""

    def __init__(self, repo_path: Optional[str] = None, tag_prefix: Optional[str] = None, git_binary: Optional[str] = None) -> None:
        git_config = Config.get_git_config()
        self.repo_path = repo_path
        self.tag_prefix = git_config["tag_prefix"] if tag_prefix is None else tag_prefix
        self.git_binary = git_binary or git_config["git_binary"]

    def current_release_tag(self) -> Optional[str]:
        """Return the most recent release tag, or None before the first release.

        Raises:
            HistoryAccessError: If git cannot list the tags
        """
        output = run_git(
            self.git_binary,
            ["tag", "--list", f"{self.tag_prefix}*", "--merged", "HEAD", "--sort=-v:refname"],
            cwd=self.repo_path,
        )
        tags = [line.strip() for line in output.splitlines() if line.strip()]
        if not tags:
            logger.info("No release tag found; generating the first changelog entry")
            return None
        logger.info(f"Current release tag: {tags[0]}")
        return tags[0]

    def tag_for_version(self, version: str) -> str:
        return f"{self.tag_prefix}{version}"
