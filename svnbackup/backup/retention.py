"""
Retention policy enforcement for backups.

Keeps the newest N backups of a repository. Backup entries are named by
zero-padded revision tags, so ascending name order is oldest-first.
Directory copies and zip archives are counted and pruned independently.
"""

import logging
from pathlib import Path
from typing import List, Optional

from svnbackup.models import ARCHIVE_EXTENSION
from svnbackup.utils.paths import delete_directory


class RetentionError(Exception):
    """Raised when an old backup cannot be removed."""
    pass


class RetentionManager:
    """
    Manages retention policy enforcement for one repository's backups.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize retention manager."""
        self.logger = logger or logging.getLogger(__name__)

    def prune(self, repository_backup_dir, keep: int) -> int:
        """
        Delete the oldest backups beyond the retention count.

        Args:
            repository_backup_dir: Directory holding one repository's backups
            keep: Number of entries to keep per representation (<= 0 keeps all)

        Returns:
            Number of backups deleted

        Raises:
            RetentionError: If a backup cannot be deleted
        """
        if keep <= 0:
            return 0

        backup_dir = Path(repository_backup_dir)
        if not backup_dir.is_dir():
            return 0

        directories = sorted(
            (item for item in backup_dir.iterdir() if item.is_dir()),
            key=lambda item: item.name
        )
        archives = sorted(
            (item for item in backup_dir.iterdir()
             if item.is_file() and item.name.endswith(ARCHIVE_EXTENSION)),
            key=lambda item: item.name
        )

        deleted_count = 0
        for entry in self._expired(directories, keep):
            self._delete(entry, delete_directory)
            deleted_count += 1

        for entry in self._expired(archives, keep):
            self._delete(entry, Path.unlink)
            deleted_count += 1

        return deleted_count

    def _expired(self, entries: List[Path], keep: int) -> List[Path]:
        if len(entries) <= keep:
            return []
        return entries[:len(entries) - keep]

    def _delete(self, entry: Path, remover):
        try:
            remover(entry)
        except OSError as e:
            raise RetentionError(f"Failed to remove backup '{entry}': {e}") from e
        self.logger.info(f"Removed backup '{entry}'.")
