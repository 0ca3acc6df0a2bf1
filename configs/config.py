import os
from typing import Dict, Any

class Config:
	"""Configuration for the changelog agent."""

	# Changelog document
	CHANGELOG_FILE = os.getenv("CHANGELOG_FILE", "CHANGELOG.md")

	# Formatter options (unset values fall back to repository-derived defaults)
	CHANGELOG_REPO = os.getenv("CHANGELOG_REPO") or os.getenv("GITHUB_REPOSITORY")
	CHANGELOG_PULL_REQUEST_PATTERN = os.getenv("CHANGELOG_PULL_REQUEST_PATTERN")
	CHANGELOG_PULL_REQUEST_URL = os.getenv("CHANGELOG_PULL_REQUEST_URL")
	CHANGELOG_COMPARE_URL = os.getenv("CHANGELOG_COMPARE_URL")
	CHANGELOG_ISSUE_PATTERN = os.getenv("CHANGELOG_ISSUE_PATTERN")
	CHANGELOG_ISSUE_URL = os.getenv("CHANGELOG_ISSUE_URL")
	CHANGELOG_TITLE_SOURCE = os.getenv("CHANGELOG_TITLE_SOURCE")

	# Git
	GIT_BINARY = os.getenv("GIT_BINARY", "git")
	VCS_TAG_PREFIX = os.getenv("VCS_TAG_PREFIX", "")

	# Observability
	METRICS_ROOT = os.getenv("METRICS_ROOT", ".cache/changelog/metrics")
	METRICS_ENABLED = bool(int(os.getenv("METRICS_ENABLED", "1")))

	@classmethod
	def get_changelog_options(cls) -> Dict[str, Any]:
		"""Get formatter options from the environment.

		Returns:
			Mapping of option name to value, only for values that are set.
		"""
		options = {
			"repository-identifier": cls.CHANGELOG_REPO,
			"pull-request-detection-pattern": cls.CHANGELOG_PULL_REQUEST_PATTERN,
			"pull-request-url-template": cls.CHANGELOG_PULL_REQUEST_URL,
			"compare-url-template": cls.CHANGELOG_COMPARE_URL,
			"issue-reference-pattern": cls.CHANGELOG_ISSUE_PATTERN,
			"issue-url-template": cls.CHANGELOG_ISSUE_URL,
			"pull-request-title-source": cls.CHANGELOG_TITLE_SOURCE,
		}
		return {k: v for k, v in options.items() if v}

	@classmethod
	def get_git_config(cls) -> Dict[str, Any]:
		"""Get git binary and tag naming configuration."""
		return {
			"git_binary": cls.GIT_BINARY,
			"tag_prefix": cls.VCS_TAG_PREFIX,
		}

	@classmethod
	def observability(cls) -> Dict[str, Any]:
		return {
			"metrics_root": cls.METRICS_ROOT,
			"metrics_enabled": cls.METRICS_ENABLED,
		}
