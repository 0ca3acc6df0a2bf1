#!/usr/bin/env python3
from __future__ import annotations

import logging
import os
import tempfile
from typing import List, Optional, Sequence

from configs.config import Config

logger = logging.getLogger(__name__)


class StoreError(Exception):
	def __init__(self, message: str, code: str = "STORE") -> None:
		super().__init__(message)
		self.code = code


class ChangelogStore:
	"""Reads and writes the changelog file as a list of lines."""

	def __init__(self, path: Optional[str] = None) -> None:
		self.path = path or Config.CHANGELOG_FILE

	def read_lines(self) -> List[str]:
		if not os.path.exists(self.path):
			logger.info(f"No changelog at {self.path}; starting a new one")
			return []
		try:
			with open(self.path, "r", encoding="utf-8", newline="") as f:
				text = f.read()
		except (OSError, UnicodeDecodeError) as e:
			raise StoreError(f"Failed to read changelog {self.path}: {e}") from e
		text = text.replace("\r\n", "\n")
		if not text:
			return []
		lines = text.split("\n")
		# A final newline terminates the last line rather than starting a new one
		if text.endswith("\n"):
			lines.pop()
		return lines

	def write_lines(self, lines: Sequence[str]) -> None:
		content = "".join(f"{line}\n" for line in lines)
		dirname = os.path.dirname(os.path.abspath(self.path))
		# Atomic via temp file and rename
		try:
			os.makedirs(dirname, exist_ok=True)
			tmp_fd, tmp_path = tempfile.mkstemp(dir=dirname, prefix=".tmp_", suffix=".md")
			try:
				with os.fdopen(tmp_fd, "w", encoding="utf-8", newline="\n") as f:
					f.write(content)
					f.flush()
					os.fsync(f.fileno())
				os.replace(tmp_path, self.path)
			except BaseException:
				if os.path.exists(tmp_path):
					os.remove(tmp_path)
				raise
		except OSError as e:
			raise StoreError(f"Failed to write changelog {self.path}: {e}") from e
		logger.info(f"✓ Wrote {len(lines)} lines to {self.path}")
