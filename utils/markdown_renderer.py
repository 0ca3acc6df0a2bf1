#!/usr/bin/env python3
from __future__ import annotations

import datetime as dt
from typing import List, Optional, Sequence

from utils.changelog_config import ResolvedChangelogConfig, render_template
from utils.issue_linker import link_issues
from utils.pr_models import PullRequestRecord
from utils.version_persister import ReleaseMarkerAuthority


HEADER = [
	"# Changelog",
	"All notable changes to this project will be documented in this file.",
	"",
	"The format is based on [Keep a Changelog](http://keepachangelog.com/en/1.0.0/)",
	"and this project adheres to [Semantic Versioning](http://semver.org/spec/v2.0.0.html).",
	"",
]


def pull_request_url(number: str, config: ResolvedChangelogConfig) -> str:
	template = config.require_template("pull_request_url")
	return render_template(template, "pull_request_url", number, number=number)


def render_entry(record: PullRequestRecord, config: ResolvedChangelogConfig) -> str:
	return "- {title} (pull request [#{number}]({url}))".format(
		title=link_issues(record.title, config),
		number=record.number,
		url=pull_request_url(record.number, config),
	)


def render_entries(records: Sequence[PullRequestRecord], config: ResolvedChangelogConfig) -> List[str]:
	return [render_entry(record, config) for record in records or []]


def version_header(version: str, release_date: Optional[dt.date] = None, *, bracketed: bool) -> str:
	"""Heading of a release section.

	The bracketed form pairs with a ``[version]: <url>`` reference line and is
	used only when a compare link is emitted.
	"""
	day = (release_date or dt.date.today()).isoformat()
	if bracketed:
		return f"## [{version}] - {day}"
	return f"## {version} - {day}"


def compare_link_line(
	version: str,
	previous_tag: Optional[str],
	markers: ReleaseMarkerAuthority,
	config: ResolvedChangelogConfig,
) -> Optional[str]:
	"""Reference definition linking ``version`` to a diff against the previous release."""
	if previous_tag is None:
		return None
	template = config.require_template("compare_url")
	current_tag = markers.tag_for_version(version)
	url = render_template(template, "compare_url", previous_tag, current_tag, previous=previous_tag, current=current_tag)
	return f"[{version}]: {url}"
