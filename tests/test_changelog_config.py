from __future__ import annotations

import pytest
from pydantic import ValidationError

from configs.config import Config
from utils.changelog_config import (
    DEFAULT_ISSUE_PATTERN,
    DEFAULT_PULL_REQUEST_PATTERN,
    ConfigurationError,
    render_template,
    resolve_config,
)


def test_defaults_without_options() -> None:
    config = resolve_config({})
    assert config.pull_request_pattern == DEFAULT_PULL_REQUEST_PATTERN
    assert config.issue_pattern == DEFAULT_ISSUE_PATTERN
    assert config.pull_request_url is None
    assert config.compare_url is None
    assert config.issue_url is None
    assert config.title_source == "body"


def test_repository_identifier_derives_github_templates() -> None:
    config = resolve_config({"repository-identifier": "acme/widgets"})
    assert config.pull_request_url == "https://github.com/acme/widgets/pull/{number}"
    assert config.compare_url == "https://github.com/acme/widgets/compare/{previous}...{current}"
    assert config.issue_url == "https://github.com/acme/widgets/issues/{issue}"


def test_explicit_issue_url_overrides_derived_default() -> None:
    config = resolve_config(
        {
            "repository-identifier": "acme/widgets",
            "issue-url-template": "https://tracker.example.com/browse/{issue}",
        }
    )
    assert config.issue_url == "https://tracker.example.com/browse/{issue}"
    # the other derived templates are still filled in
    assert config.pull_request_url == "https://github.com/acme/widgets/pull/{number}"


def test_legacy_option_names_are_accepted() -> None:
    config = resolve_config(
        {
            "repo": "acme/widgets",
            "pull-request-pattern": r"Merged PR (\d+)",
            "issue-pattern": r"GH-(\d+)",
            "compare-url": "https://example.com/{previous}/{current}",
        }
    )
    assert config.pull_request_pattern == r"Merged PR (\d+)"
    assert config.issue_pattern == r"GH-(\d+)"
    assert config.compare_url == "https://example.com/{previous}/{current}"
    assert config.issue_url == "https://github.com/acme/widgets/issues/{issue}"


def test_unknown_options_are_ignored() -> None:
    config = resolve_config({"colour": "blue"})
    assert config.pull_request_url is None


def test_resolved_config_is_immutable() -> None:
    config = resolve_config({})
    with pytest.raises(ValidationError):
        config.issue_url = "https://example.com/{issue}"  # type: ignore[misc]


def test_invalid_title_source_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        resolve_config({"pull-request-title-source": "footer"})


def test_missing_template_raises_when_required() -> None:
    config = resolve_config({})
    with pytest.raises(ConfigurationError, match="compare-url-template"):
        config.require_template("compare_url")


def test_invalid_regex_is_reported_at_first_use() -> None:
    config = resolve_config({"issue-reference-pattern": "#([0-9]+"})
    with pytest.raises(ConfigurationError, match="issue-reference-pattern"):
        config.issue_regex()


@pytest.mark.parametrize("pattern", [r"Merge pull request #\d+", r"Merge (pull) request #(\d+)"])
def test_detection_pattern_needs_exactly_one_group(pattern: str) -> None:
    config = resolve_config({"pull-request-detection-pattern": pattern})
    with pytest.raises(ConfigurationError, match="exactly one capturing group"):
        config.pull_request_regex()


def test_render_template_accepts_positional_and_named_placeholders() -> None:
    assert render_template("https://x/{}", "pull_request_url", "7", number="7") == "https://x/7"
    assert render_template("https://x/{number}", "pull_request_url", "7", number="7") == "https://x/7"


def test_render_template_rejects_unknown_placeholder() -> None:
    with pytest.raises(ConfigurationError, match="unusable placeholder"):
        render_template("https://x/{id}", "pull_request_url", "7", number="7")


def test_env_options_only_include_set_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Config, "CHANGELOG_REPO", "acme/widgets")
    monkeypatch.setattr(Config, "CHANGELOG_ISSUE_URL", None)
    monkeypatch.setattr(Config, "CHANGELOG_TITLE_SOURCE", "subject")
    options = Config.get_changelog_options()
    assert options["repository-identifier"] == "acme/widgets"
    assert options["pull-request-title-source"] == "subject"
    assert "issue-url-template" not in options


@pytest.mark.parametrize("template", ["https://x/pull/%d", "https://x/issues/$1", "https://x/pull/{{number}}"])
def test_render_template_rejects_template_without_placeholder(template: str) -> None:
    with pytest.raises(ConfigurationError, match="pull-request-url-template' has no"):
        render_template(template, "pull_request_url", "7", number="7")


def test_observability_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Config, "METRICS_ENABLED", False)
    assert Config.observability()["metrics_enabled"] is False
