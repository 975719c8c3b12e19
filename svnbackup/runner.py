"""
Backup runner - discovers repositories and backs them up in parallel.

A repository root is either a repository itself (backed up alone) or a
parent directory whose immediate subdirectories are candidate repositories.
Candidates run on a bounded thread pool; one repository failing never stops
the others, and all failures are reported together at the end.
"""

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from svnbackup.backup.executor import RepositoryBackupExecutor
from svnbackup.backup.tools import SubversionTool, ToolInvoker
from svnbackup.models import BackupConfiguration, BackupRun, RepositoryOutcome, RepositoryRef
from svnbackup.utils.paths import is_repository


class BackupError(Exception):
    """Base class for run-level backup errors."""
    pass


class RepositoryRootNotFoundError(BackupError):
    """Raised when the repository root directory does not exist."""
    pass


class AggregateBackupError(BackupError):
    """Raised after a run in which one or more repositories failed."""

    def __init__(self, failures: List[RepositoryOutcome], run: Optional[BackupRun] = None):
        self.failures = failures
        self.run = run
        lines = [f"{len(failures)} repositories failed to back up:"]
        lines.extend(f"  {outcome.repository}: {outcome.reason}" for outcome in failures)
        super().__init__('\n'.join(lines))


class BackupRunner:
    """
    Orchestrates a backup run over one or more repositories.
    """

    def __init__(
        self,
        config: BackupConfiguration,
        logger: Optional[logging.Logger] = None,
        tool: Optional[ToolInvoker] = None,
        executor_factory: Optional[Callable[..., RepositoryBackupExecutor]] = None
    ):
        """
        Initialize backup runner.

        Args:
            config: Run configuration
            logger: Logger passed down to every component
            tool: Invoker for svnadmin/svnlook (defaults to SubversionTool)
            executor_factory: Builds the per-repository executor
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.tool = tool or SubversionTool(config.svn_path)
        self.executor_factory = executor_factory or RepositoryBackupExecutor

    def run(self) -> BackupRun:
        """
        Run the backup.

        Returns:
            BackupRun with one outcome per repository

        Raises:
            RepositoryRootNotFoundError: If the repository root is missing
            AggregateBackupError: If any repository failed in multi-repository mode
            BackupFailure: If the repository root is itself a repository and failed
        """
        run = BackupRun()
        self.logger.info("Backup starting.")

        repository_root = self.config.repository_root
        if not repository_root.is_dir():
            raise RepositoryRootNotFoundError(
                f"The repository root directory '{repository_root}' does not exist."
            )

        self.config.backup_root.mkdir(parents=True, exist_ok=True)

        try:
            # First try the root as a repository, then as a parent of repositories
            if is_repository(repository_root):
                run.outcomes.append(self._backup(RepositoryRef.from_path(repository_root)))
            else:
                self._backup_all(self.discover(), run)
        finally:
            run.complete()

        if run.failures:
            self.logger.error(f"Backup failed. Duration: {run.duration}")
            raise AggregateBackupError(run.failures, run)

        self.logger.info(f"Backup complete. Duration: {run.duration}")
        return run

    def discover(self) -> List[RepositoryRef]:
        """List immediate subdirectories of the repository root."""
        return [
            RepositoryRef.from_path(path)
            for path in sorted(self.config.repository_root.iterdir())
            if path.is_dir()
        ]

    def _backup(self, repository: RepositoryRef) -> RepositoryOutcome:
        executor = self.executor_factory(self.config, repository, self.tool, logger=self.logger)
        return executor.execute()

    def _backup_all(self, repositories: List[RepositoryRef], run: BackupRun):
        failures = queue.SimpleQueue()

        def guarded(repository: RepositoryRef) -> Optional[RepositoryOutcome]:
            try:
                return self._backup(repository)
            except Exception as e:
                self.logger.error(f"An exception occurred backing up {repository.name}")
                failures.put(RepositoryOutcome.failed(repository.name, e))
                return None

        with ThreadPoolExecutor(max_workers=self.config.threads,
                                thread_name_prefix='svnbackup') as pool:
            results = list(pool.map(guarded, repositories))

        run.outcomes.extend(outcome for outcome in results if outcome is not None)
        while not failures.empty():
            run.outcomes.append(failures.get())


def run_backup(config: BackupConfiguration, logger: Optional[logging.Logger] = None) -> BackupRun:
    """
    Run a backup with the given configuration.

    Returns:
        BackupRun summary from BackupRunner.run()
    """
    runner = BackupRunner(config, logger=logger)
    return runner.run()
