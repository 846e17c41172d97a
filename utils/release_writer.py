#!/usr/bin/env python3
"""Write rendered release pages and the release notes index to disk.

Writes go through a temp file and os.replace so a crash never leaves a
half-written page behind.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from configs.config import Config

logger = logging.getLogger(__name__)

PAGE_SUFFIX = ".mdx"
INDEX_NAME = "index.mdx"


class ReleaseWriteError(Exception):
    def __init__(self, message: str, code: str = "UNKNOWN"):
        super().__init__(message)
        self.code = code


def atomic_write(path: str, content: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(content)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)


class ReleaseNotesWriter:
    def __init__(self, out_dir: Optional[str] = None):
        self.out_dir = out_dir or Config.RELEASE_NOTES_DIR

    def page_path(self, version: str) -> str:
        return os.path.join(self.out_dir, f"{version}{PAGE_SUFFIX}")

    @property
    def index_path(self) -> str:
        return os.path.join(self.out_dir, INDEX_NAME)

    def exists(self, version: str) -> bool:
        return os.path.exists(self.page_path(version))

    def existing_versions(self) -> List[str]:
        if not os.path.isdir(self.out_dir):
            return []
        return sorted(
            name[: -len(PAGE_SUFFIX)]
            for name in os.listdir(self.out_dir)
            if name.endswith(PAGE_SUFFIX) and name != INDEX_NAME
        )

    def write_release(self, version: str, content: str, *, overwrite: bool = False) -> str:
        """Write a release page and return its path.

        Raises:
            ReleaseWriteError: code EXISTS when the page exists and overwrite is off
        """
        path = self.page_path(version)
        if os.path.exists(path) and not overwrite:
            raise ReleaseWriteError(
                f"Release notes already exist: {path}. Set RELEASE_OVERWRITE=true to regenerate.",
                code="EXISTS",
            )
        atomic_write(path, content)
        logger.info(f"Generated: {path}")
        return path

    def read_index(self) -> str:
        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError as e:
            raise ReleaseWriteError(f"Release notes index not found: {self.index_path}", code="NOT_FOUND") from e

    def write_index(self, content: str) -> str:
        atomic_write(self.index_path, content)
        return self.index_path
