#!/usr/bin/env python3
from __future__ import annotations

import re

from utils.changelog_config import ResolvedChangelogConfig, render_template

_DIGITS = re.compile(r"[0-9]+")


def _issue_number(match: re.Match[str]) -> str:
	# Prefer the pattern's own capture; otherwise take the digits of the reference
	if match.re.groups and match.group(1) is not None:
		return match.group(1)
	digits = _DIGITS.search(match.group(0))
	return digits.group(0) if digits else match.group(0)


def link_issues(title: str, config: ResolvedChangelogConfig) -> str:
	"""Turn every issue reference in ``title`` into a Markdown link.

	The visible text is the reference exactly as written. Titles without a
	reference are returned unchanged and do not need an issue URL template.
	"""
	regex = config.issue_regex()
	if not title or regex.search(title) is None:
		return title
	template = config.require_template("issue_url")

	def _link(match: re.Match[str]) -> str:
		issue = _issue_number(match)
		url = render_template(template, "issue_url", issue, issue=issue)
		return f"[{match.group(0)}]({url})"

	return regex.sub(_link, title)
