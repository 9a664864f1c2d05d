"""Lock cache for skipping documents that were already transformed.

This module provides a JSON-backed path -> checksum mapping (``io-lock.json``)
so the transformer only re-processes documents whose content changed since
their last successful transform.
"""

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from docbundle.errors import LockFileError

logger = logging.getLogger(__name__)


def compute_checksum(text: str) -> str:
    """MD5 hex digest of the UTF-8 encoded text."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class LockCache:
    """Manages the path -> checksum lock file.

    The whole mapping is rewritten on every ``save()``. Only one pipeline
    process may write the lock file at a time.
    """

    def __init__(self, lock_file: Path):
        """Initialize the lock cache.

        Args:
            lock_file: Path of the JSON lock file
        """
        self.lock_file = Path(lock_file)
        self._entries: Dict[str, str] = {}

    def load(self) -> "LockCache":
        """Read the lock file from disk.

        A missing lock file is an empty mapping.

        Returns:
            self, for chaining

        Raises:
            LockFileError: If the file is not a JSON object of strings
        """
        if not self.lock_file.exists():
            logger.info(f"No lock file at {self.lock_file}, starting empty")
            self._entries = {}
            return self

        try:
            with open(self.lock_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise LockFileError(self.lock_file, f"not valid JSON ({e})") from e

        if not isinstance(data, dict):
            raise LockFileError(self.lock_file, "expected a JSON object")

        bad = [key for key, value in data.items() if not isinstance(value, str)]
        if bad:
            raise LockFileError(self.lock_file, f"non-string checksum for {bad[0]}")

        self._entries = dict(data)
        logger.debug(f"Loaded {len(self._entries)} lock entries from {self.lock_file}")
        return self

    def save(self) -> None:
        """Rewrite the whole lock file.

        The mapping is written to a sibling temporary file first and then
        renamed over the lock file, so a crash never leaves a truncated lock.
        """
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.lock_file.with_name(self.lock_file.name + ".tmp")

        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(self._entries, f, indent=2)
            f.write("\n")

        os.replace(tmp_file, self.lock_file)

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def is_current(self, key: str, checksum: str) -> bool:
        """Check whether the recorded checksum for ``key`` matches."""
        return self._entries.get(key) == checksum

    def update(self, key: str, checksum: str) -> None:
        self._entries[key] = checksum

    def remove(self, key: str) -> bool:
        """Remove one entry.

        Returns:
            True if the entry existed
        """
        return self._entries.pop(key, None) is not None

    def remove_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``.

        Returns:
            Number of entries removed
        """
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def entries(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
