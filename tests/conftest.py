from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Optional

import pytest

from configs.config import Config
from utils.pr_models import CommitRecord


class FakeHistory:
    """History source returning canned commits and recording queried ranges."""

    def __init__(self, commits: list[CommitRecord] | None = None) -> None:
        self.commits = commits or []
        self.ranges: list[str] = []

    def query(self, revision_range: str) -> list[CommitRecord]:
        self.ranges.append(revision_range)
        return list(self.commits)


class FakeMarkers:
    def __init__(self, current: Optional[str] = None, prefix: str = "") -> None:
        self.current = current
        self.prefix = prefix

    def current_release_tag(self) -> Optional[str]:
        return self.current

    def tag_for_version(self, version: str) -> str:
        return f"{self.prefix}{version}"


def merge_commit(number: int, title: str, branch: str = "feature/x") -> CommitRecord:
    return CommitRecord(subject=f"Merge pull request #{number} from {branch}", body=title)


@pytest.fixture(autouse=True)
def _isolated_metrics(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Config, "METRICS_ROOT", str(tmp_path / "metrics"))


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True
    ).stdout


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.name", "Test")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")
    return repo
