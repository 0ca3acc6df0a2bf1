#!/usr/bin/env python3
"""Changelog agent for pull-request based changelog entries.

This agent mines git history for merged pull requests since the last
release and writes a new "Keep a Changelog" section on top of the
existing changelog body.
"""

import datetime as dt
import logging
import sys
from typing import Any, List, Mapping, Optional, Sequence

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from configs.config import Config  # noqa: E402
from utils.changelog_config import ConfigurationError, resolve_config  # noqa: E402
from utils.changelog_splicer import existing_body  # noqa: E402
from utils.changelog_store import ChangelogStore, StoreError  # noqa: E402
from utils.git_history import GitHistorySource, HistoryAccessError, HistorySource  # noqa: E402
from utils.markdown_renderer import HEADER, compare_link_line, render_entries, version_header  # noqa: E402
from utils.metrics import GENERATED, GENERATION, PULL_REQUESTS, Timer, incr  # noqa: E402
from utils.pr_extractor import extract_pull_requests  # noqa: E402
from utils.version_persister import GitTagPersister, ReleaseMarkerAuthority  # noqa: E402

# Set up logging
logger = logging.getLogger(__name__)


class PullRequestChangelogFormatter:
	"""Builds a changelog document from merged pull requests."""

	def __init__(self, history: HistorySource, markers: ReleaseMarkerAuthority):
		"""Initialize the formatter.

		Args:
			history: Source of commit records
			markers: Authority for the current release tag and tag naming
		"""
		self._history = history
		self._markers = markers
		# pull requests in the most recent section, for run metrics
		self.pull_request_count = 0

	def update_existing_lines(
		self,
		current: Sequence[str],
		version: str,
		options: Optional[Mapping[str, Any]] = None,
		release_date: Optional[dt.date] = None,
	) -> List[str]:
		"""Return the full changelog with a new section for ``version``.

		Args:
			current: Lines of the previous changelog document (may be empty)
			version: Version string of the new release
			options: Formatter options, see ``utils.changelog_config``
			release_date: Date of the release heading, defaults to today

		Returns:
			Lines of the new document, ending with a blank line

		Raises:
			ConfigurationError: If a required option is missing or invalid
			HistoryAccessError: If git history or tags cannot be read
		"""
		config = resolve_config(options)
		previous_tag = self._markers.current_release_tag()

		pull_requests = extract_pull_requests(self._history, previous_tag, config)
		changes = render_entries(pull_requests, config)
		title = version_header(version, release_date, bracketed=previous_tag is not None)
		reference = compare_link_line(version, previous_tag, self._markers, config)

		output = [*HEADER, title, *changes, "", *existing_body(current)]
		if reference is not None:
			output.append(reference)
		# end the file with a blank line
		output.append("")

		self.pull_request_count = len(pull_requests)
		logger.info(f"✓ Changelog section for {version}: {len(changes)} pull requests"
				   f" (previous release: {previous_tag or 'none'})")
		return output


def main(argv: Optional[Sequence[str]] = None):
	"""CLI entry point for the changelog agent."""
	import argparse

	parser = argparse.ArgumentParser(
		description="Changelog Agent - Add a release section built from merged pull requests",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  python -m agents.changelog_agent --version 1.2.0 --repo owner/project
  python -m agents.changelog_agent --version 1.2.0 --tag-prefix v --dry-run
		"""
	)
	parser.add_argument("--version", required=True, help="Version string of the new release")
	parser.add_argument("--file", default=None, help=f"Changelog file (default: {Config.CHANGELOG_FILE})")
	parser.add_argument("--repo", help="GitHub repository 'owner/name' used to derive URL templates")
	parser.add_argument("--pull-request-pattern", help="Regex recognizing merge commits, one group for the number")
	parser.add_argument("--pull-request-url", help="Pull request URL template, e.g. https://host/pr/{number}")
	parser.add_argument("--compare-url", help="Compare URL template with {previous} and {current}")
	parser.add_argument("--issue-pattern", help="Regex recognizing issue references in titles")
	parser.add_argument("--issue-url", help="Issue URL template with {issue}")
	parser.add_argument("--title-source", choices=["body", "subject"], help="Take titles from the commit body or subject")
	parser.add_argument("--tag-prefix", default=None, help="Prefix of release tags (e.g. 'v')")
	parser.add_argument("--repo-path", default=None, help="Path of the git repository (default: current directory)")
	parser.add_argument("--date", type=dt.date.fromisoformat, default=None, help="Release date YYYY-MM-DD (default: today)")
	parser.add_argument("--dry-run", action="store_true", help="Print the new changelog instead of writing it")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

	args = parser.parse_args(argv)

	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)

	# Suppress verbose logs from libraries unless in debug mode
	if not args.verbose:
		logging.getLogger("utils.git_history").setLevel(logging.WARNING)
		logging.getLogger("utils.version_persister").setLevel(logging.WARNING)

	options = Config.get_changelog_options()
	cli_options = {
		"repository-identifier": args.repo,
		"pull-request-detection-pattern": args.pull_request_pattern,
		"pull-request-url-template": args.pull_request_url,
		"compare-url-template": args.compare_url,
		"issue-reference-pattern": args.issue_pattern,
		"issue-url-template": args.issue_url,
		"pull-request-title-source": args.title_source,
	}
	options.update({k: v for k, v in cli_options.items() if v is not None})

	try:
		store = ChangelogStore(args.file)
		formatter = PullRequestChangelogFormatter(
			GitHistorySource(repo_path=args.repo_path),
			GitTagPersister(repo_path=args.repo_path, tag_prefix=args.tag_prefix),
		)
		current = store.read_lines()
		with Timer(GENERATION, version=args.version):
			lines = formatter.update_existing_lines(current, args.version, options, release_date=args.date)
		incr(PULL_REQUESTS, formatter.pull_request_count, version=args.version)
		if args.dry_run:
			sys.stdout.write("".join(f"{line}\n" for line in lines))
		else:
			store.write_lines(lines)
			incr(GENERATED, version=args.version)
		sys.exit(0)

	except ConfigurationError as e:
		print(f"Error: Invalid configuration: {e}", file=sys.stderr)
		sys.exit(1)

	except HistoryAccessError as e:
		print(f"Error: Could not read git history ({e.revision_range or 'tags'}): {e}", file=sys.stderr)
		if args.verbose:
			logger.exception("Detailed error information:")
		sys.exit(1)

	except StoreError as e:
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)

	except KeyboardInterrupt:
		print("\nOperation cancelled by user", file=sys.stderr)
		sys.exit(1)


if __name__ == "__main__":
	main()
