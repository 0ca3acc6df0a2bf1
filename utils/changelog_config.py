#!/usr/bin/env python3
"""Changelog formatter option resolution.

Turns a loose mapping of named options into an immutable resolved
configuration. Repository-derived GitHub URL templates only fill options
that were not given explicitly. Regular expressions are kept as strings
and compiled when a step first needs them.
"""

import logging
import re
import string
from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .pr_models import TitleSource

logger = logging.getLogger(__name__)


GITHUB_PULL_URL = "https://github.com/{repo}/pull/{number}"
GITHUB_COMPARE_URL = "https://github.com/{repo}/compare/{previous}...{current}"
GITHUB_ISSUE_URL = "https://github.com/{repo}/issues/{issue}"

DEFAULT_PULL_REQUEST_PATTERN = "Merge pull request #([0-9]+) from .*"
DEFAULT_ISSUE_PATTERN = "#([0-9]+)"


class ConfigurationError(Exception):
    """Raised when an option is missing, malformed or unusable."""
    def __init__(self, message: str, code: str = "CONFIG") -> None:
        super().__init__(message)
        self.code = code


class FormatterOptions(BaseModel):
    """Raw formatter options as supplied by the caller."""

    repository_identifier: Optional[str] = Field(
        None, validation_alias=AliasChoices("repository-identifier", "repo")
    )
    pull_request_pattern: Optional[str] = Field(
        None, validation_alias=AliasChoices("pull-request-detection-pattern", "pull-request-pattern")
    )
    pull_request_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("pull-request-url-template", "pull-request-url")
    )
    compare_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("compare-url-template", "compare-url")
    )
    issue_pattern: Optional[str] = Field(
        None, validation_alias=AliasChoices("issue-reference-pattern", "issue-pattern")
    )
    issue_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("issue-url-template", "issue-url")
    )
    title_source: Optional[TitleSource] = Field(
        None, validation_alias=AliasChoices("pull-request-title-source", "title-source")
    )

    model_config = ConfigDict(extra="ignore", frozen=True)


# Option names used in error messages
_OPTION_NAMES = {
    "pull_request_url": "pull-request-url-template",
    "compare_url": "compare-url-template",
    "issue_url": "issue-url-template",
    "pull_request_pattern": "pull-request-detection-pattern",
    "issue_pattern": "issue-reference-pattern",
}


class ResolvedChangelogConfig(BaseModel):
    """Final option values used by every changelog step."""

    pull_request_pattern: str = DEFAULT_PULL_REQUEST_PATTERN
    issue_pattern: str = DEFAULT_ISSUE_PATTERN
    pull_request_url: Optional[str] = None
    compare_url: Optional[str] = None
    issue_url: Optional[str] = None
    title_source: TitleSource = "body"

    model_config = ConfigDict(frozen=True, extra="forbid")

    def require_template(self, field: str) -> str:
        """Return a URL template, failing if it was never resolved.

        Raises:
            ConfigurationError: If neither an explicit value nor a
                repository identifier provided the template
        """
        value = getattr(self, field)
        if value is None:
            option = _OPTION_NAMES.get(field, field)
            raise ConfigurationError(
                f"Option '{option}' is required (set it explicitly or provide 'repository-identifier')"
            )
        return value

    def pull_request_regex(self) -> re.Pattern[str]:
        regex = compile_pattern(self.pull_request_pattern, "pull_request_pattern")
        if regex.groups != 1:
            raise ConfigurationError(
                f"Option 'pull-request-detection-pattern' must contain exactly one capturing group, "
                f"found {regex.groups}: {self.pull_request_pattern!r}"
            )
        return regex

    def issue_regex(self) -> re.Pattern[str]:
        return compile_pattern(self.issue_pattern, "issue_pattern")


def compile_pattern(pattern: str, field: str) -> re.Pattern[str]:
    """Compile a configured regular expression.

    Raises:
        ConfigurationError: If the expression is invalid
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        option = _OPTION_NAMES.get(field, field)
        raise ConfigurationError(f"Option '{option}' is not a valid regular expression: {e}") from e


def render_template(template: str, field: str, *args: str, **kwargs: str) -> str:
    """Substitute positional and named placeholders into a URL template.

    Raises:
        ConfigurationError: If the template has no placeholder or uses one that
            is not provided
    """
    option = _OPTION_NAMES.get(field, field)
    try:
        fields = [name for _, name, _, _ in string.Formatter().parse(template) if name is not None]
    except ValueError as e:
        raise ConfigurationError(f"Option '{option}' is not a valid template ({e}): {template!r}") from e
    if not fields:
        raise ConfigurationError(f"Option '{option}' has no {{}} placeholder: {template!r}")
    try:
        return template.format(*args, **kwargs)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigurationError(f"Option '{option}' has an unusable placeholder ({e}): {template!r}") from e


def resolve_config(options: Optional[Mapping[str, Any]] = None) -> ResolvedChangelogConfig:
    """Resolve formatter options into an immutable configuration.

    Args:
        options: Mapping of option name to value; every option is optional

    Returns:
        Resolved configuration with derived defaults applied

    Raises:
        ConfigurationError: If an option has an invalid value
    """
    try:
        opts = FormatterOptions.model_validate(dict(options or {}))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid changelog options: {e}") from e

    derived = {}
    if opts.repository_identifier:
        repo = opts.repository_identifier
        derived = {
            "pull_request_url": GITHUB_PULL_URL.replace("{repo}", repo),
            "compare_url": GITHUB_COMPARE_URL.replace("{repo}", repo),
            "issue_url": GITHUB_ISSUE_URL.replace("{repo}", repo),
        }
        logger.debug(f"Derived GitHub URL templates for {repo}")

    def pick(field: str, default: Optional[str] = None) -> Optional[str]:
        explicit = getattr(opts, field)
        if explicit is not None:
            return explicit
        return derived.get(field, default)

    return ResolvedChangelogConfig(
        pull_request_pattern=pick("pull_request_pattern", DEFAULT_PULL_REQUEST_PATTERN),
        issue_pattern=pick("issue_pattern", DEFAULT_ISSUE_PATTERN),
        pull_request_url=pick("pull_request_url"),
        compare_url=pick("compare_url"),
        issue_url=pick("issue_url"),
        title_source=opts.title_source or "body",
    )
