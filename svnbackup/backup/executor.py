"""
Backup executor - runs the backup pipeline for one repository.

Workflow:
1. Skip repositories named in the skip list
2. Resolve the youngest revision (no revision: not a repository)
3. Skip revisions that are already backed up
4. Verify the repository (if configured)
5. Hot copy into <backup_root>/<repo>/<tag>
6. Compress into <tag>.zip and drop the copy (if configured)
7. Prune old backups
"""

import logging
import time
from datetime import datetime
from typing import Optional

from svnbackup.models import BackupConfiguration, BackupEntry, RepositoryOutcome, RepositoryRef
from svnbackup.utils.paths import delete_directory
from .compression import create_archive, get_archive_size
from .retention import RetentionManager
from .revision import RevisionResolver
from .tools import ToolInvoker


class BackupFailure(Exception):
    """Raised when a repository backup step fails."""

    def __init__(self, repository: str, message: str):
        super().__init__(f"{repository}: {message}")
        self.repository = repository
        self.message = message


class RepositoryBackupExecutor:
    """
    Executes the backup pipeline for a single repository.

    Steps run strictly in sequence. Executors for different repositories
    share no state and may run on separate threads.
    """

    def __init__(
        self,
        config: BackupConfiguration,
        repository: RepositoryRef,
        tool: ToolInvoker,
        logger: Optional[logging.Logger] = None,
        archiver=create_archive,
        retention: Optional[RetentionManager] = None
    ):
        """
        Initialize backup executor.

        Args:
            config: Run configuration
            repository: Repository to back up
            tool: Invoker for svnadmin/svnlook
            logger: Logger to report progress to
            archiver: Callable packing a directory into an archive file
            retention: Retention manager used to prune old backups
        """
        self.config = config
        self.repository = repository
        self.tool = tool
        self.logger = logger or logging.getLogger(__name__)
        self.archiver = archiver
        self.retention = retention or RetentionManager(self.logger)
        self.resolver = RevisionResolver(tool, self.logger)
        self.logs = []

    def execute(self) -> RepositoryOutcome:
        """
        Back up the repository.

        Returns:
            RepositoryOutcome with status success or skipped

        Raises:
            BackupFailure: If verify, hotcopy, compression or pruning fails
        """
        name = self.repository.name
        started = time.monotonic()

        if self.config.should_skip(name):
            self._log(f"Skipping '{name}' because it is in the list of repositories to skip.")
            return self._outcome(RepositoryOutcome.skipped, "in skip list", started)

        tag = self.resolver.resolve(self.repository.path, name)
        if tag is None:
            return self._outcome(RepositoryOutcome.skipped, "not a repository", started)

        entry = BackupEntry(name, tag, self.config.backup_root)
        if entry.exists():
            self._log(f"Skipping '{tag}' from '{name}' because it already exists.")
            return self._outcome(RepositoryOutcome.skipped, "already backed up", started, tag=tag)

        try:
            self._execute_workflow(entry)
        except BackupFailure as e:
            self.logger.exception(e.message)
            raise
        except Exception as e:
            self.logger.exception(f"Backup of '{name}' failed: {e}")
            raise BackupFailure(name, str(e)) from e

        duration = time.monotonic() - started
        self._log(f"Backup of '{name}' complete. Duration: {duration:.2f}s.")
        return RepositoryOutcome.success(name, tag, duration=duration, logs=self.logs)

    def _execute_workflow(self, entry: BackupEntry):
        """Execute the verify, copy, compress and prune steps."""
        # Step 1: Verify
        if self.config.verify:
            self._verify()

        # Step 2: Hot copy
        self._log(f"Backing up '{entry.tag}' from '{self.repository.name}'.")
        entry.repository_dir.mkdir(parents=True, exist_ok=True)
        self._claim(entry)
        self._hotcopy(entry)

        # Step 3: Compress
        if self.config.compress and not entry.archive.exists():
            self._compress(entry)

        # Step 4: Prune
        removed = self.retention.prune(entry.repository_dir, self.config.history)
        if removed:
            self._log(f"Pruned {removed} old backups of '{self.repository.name}'.")

    def _verify(self):
        started = time.monotonic()
        result = self.tool.verify(self.repository.path)

        if not result.succeeded:
            raise BackupFailure(
                self.repository.name,
                f"The repository {self.repository.name} failed verification. "
                f"ExitCode: {result.exit_code}, Error: {result.stderr.strip()}"
            )

        self._log(f"Verify of {self.repository.path} succeeded. "
                  f"Duration: {time.monotonic() - started:.2f}s")

    def _claim(self, entry: BackupEntry):
        """
        Create the empty copy directory, failing if it already exists.

        svnadmin hotcopy accepts an empty destination, so whichever executor
        creates the directory owns it and is the only one allowed to remove it.
        """
        try:
            entry.directory.mkdir()
        except FileExistsError:
            raise BackupFailure(
                self.repository.name,
                f"'{entry.directory}' is already being backed up."
            ) from None

    def _hotcopy(self, entry: BackupEntry):
        try:
            result = self.tool.hotcopy(self.repository.path, entry.directory)
        except Exception:
            self._discard_partial_copy(entry)
            raise

        if result.stderr.strip():
            self._log(result.stderr.strip())

        if not result.succeeded:
            self._discard_partial_copy(entry)
            raise BackupFailure(
                self.repository.name,
                f"Hot copy of {self.repository.name} failed. "
                f"ExitCode: {result.exit_code}, Error: {result.stderr.strip()}"
            )

        self._log(f"Backup of {entry.directory} complete.")

    def _discard_partial_copy(self, entry: BackupEntry):
        # Only called after _claim, so the directory is ours.
        # A leftover directory would mark the revision as backed up
        if entry.directory.exists():
            delete_directory(entry.directory)

    def _compress(self, entry: BackupEntry):
        archive_path = self.archiver(entry.directory, entry.archive)
        delete_directory(entry.directory)

        file_size = get_archive_size(archive_path)
        self._log(f"Zip {archive_path} complete ({file_size / 1024 / 1024:.2f} MB).")

    def _outcome(self, factory, reason, started, **kwargs) -> RepositoryOutcome:
        return factory(
            self.repository.name,
            reason,
            duration=time.monotonic() - started,
            logs=self.logs,
            **kwargs
        )

    def _log(self, message: str):
        """
        Add a log message with timestamp.

        Args:
            message: Log message
        """
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        self.logs.append(f"[{timestamp}] {message}")
        self.logger.info(message)
