#!/usr/bin/env python3
"""Locate the previously written part of a changelog document.

Everything from the first dated release heading onward is the existing
body and is carried over verbatim. The title and description block at
the top of the file is never part of it.
"""

from __future__ import annotations

import re
from typing import List, Sequence

# "## [1.0.0] - 2023-01-01" or "## 1.0.0 - 2023-01-01"
RELEASE_HEADER_RE = re.compile(r"^## (?:\[[^\]]+\]|[^\s\[]\S*) - [0-9]{4}-[0-9]{2}-[0-9]{2}")


def is_release_header(line: str) -> bool:
    return RELEASE_HEADER_RE.match(line) is not None


def existing_body(lines: Sequence[str]) -> List[str]:
    """Return the lines from the first release heading to the end, or []."""
    for index, line in enumerate(lines):
        if is_release_header(line):
            return list(lines[index:])
    return []
