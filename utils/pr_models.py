#!/usr/bin/env python3
"""Pydantic models for commit and pull request records.

This module defines the records that flow through changelog generation:
raw commits as read from history, and the pull requests inferred from
merge commits.
"""

from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


# Where a pull request title is taken from
TitleSource = Literal["body", "subject"]


class CommitRecord(BaseModel):
    """One commit as returned by a history source."""

    subject: str = Field(..., description="One-line commit subject")
    body: str = Field("", description="Commit body, may span several lines")

    model_config = ConfigDict(frozen=True, extra="ignore")


class PullRequestRecord(BaseModel):
    """A merged pull request inferred from a merge commit."""

    number: str = Field(..., pattern=r"^[0-9]+$", description="Pull request number")
    title: str = Field("", description="Pull request title")

    model_config = ConfigDict(frozen=True, extra="forbid")


def extract_first_line(message: str) -> str:
    """Extract the first line of a commit message.

    Args:
        message: Full commit message

    Returns:
        First line of the message, stripped of whitespace
    """
    if not message:
        return ""

    lines = message.splitlines()
    return lines[0].strip() if lines else ""
