import enum
from dataclasses import dataclass, field
from datetime import datetime
from functools import total_ordering
from pathlib import Path
from typing import FrozenSet, List, Optional


REVISION_PREFIX = 'v'
REVISION_WIDTH = 7
ARCHIVE_EXTENSION = '.zip'


def parse_skip_list(value: Optional[str]) -> FrozenSet[str]:
    """
    Turn a comma-separated list of repository names into a lookup set.

    Names are lower-cased so that matching is case-insensitive.
    """
    if not value:
        return frozenset()
    return frozenset(name.strip().lower() for name in value.split(',') if name.strip())


@dataclass(frozen=True)
class BackupConfiguration:
    """Run parameters, created once at startup"""

    repository_root: Path
    backup_root: Path
    threads: int = 1
    compress: bool = False
    verify: bool = False
    history: int = 0  # Entries to keep per repository (<= 0 keeps everything)
    skip_repositories: FrozenSet[str] = frozenset()
    svn_path: Optional[Path] = None  # Directory holding svnadmin/svnlook

    def __post_init__(self):
        if self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")

        object.__setattr__(self, 'repository_root', Path(self.repository_root))
        object.__setattr__(self, 'backup_root', Path(self.backup_root))
        object.__setattr__(
            self, 'skip_repositories',
            frozenset(name.lower() for name in self.skip_repositories)
        )
        if self.svn_path is not None:
            object.__setattr__(self, 'svn_path', Path(self.svn_path))

    def should_skip(self, repository_name: str) -> bool:
        return repository_name.lower() in self.skip_repositories


@dataclass(frozen=True)
class RepositoryRef:
    """A directory that is, or may be, a Subversion repository"""

    name: str
    path: Path

    @classmethod
    def from_path(cls, path) -> 'RepositoryRef':
        # Symlinks are not followed: a linked repository keeps the link's name
        path = Path(path).absolute()
        return cls(name=path.name, path=path)


@total_ordering
@dataclass(frozen=True)
class RevisionTag:
    """
    Revision number rendered as a sortable token.

    str(RevisionTag(42)) == 'v0000042'. Zero-padding keeps plain string
    order equal to numeric order for revisions below 10,000,000.
    """

    revision: int

    def __post_init__(self):
        if self.revision < 0:
            raise ValueError(f"Revision must be non-negative, got {self.revision}")

    def __str__(self):
        return f"{REVISION_PREFIX}{self.revision:0{REVISION_WIDTH}d}"

    def __lt__(self, other):
        if not isinstance(other, RevisionTag):
            return NotImplemented
        return self.revision < other.revision


@dataclass(frozen=True)
class BackupEntry:
    """A backup of one repository at one revision, as a directory or a zip"""

    repository_name: str
    tag: RevisionTag
    backup_root: Path

    @property
    def repository_dir(self) -> Path:
        return Path(self.backup_root) / self.repository_name

    @property
    def directory(self) -> Path:
        return self.repository_dir / str(self.tag)

    @property
    def archive(self) -> Path:
        return self.repository_dir / f"{self.tag}{ARCHIVE_EXTENSION}"

    def exists(self) -> bool:
        """Either representation marks the revision as backed up."""
        return self.directory.exists() or self.archive.exists()


class OutcomeStatus(enum.Enum):
    SUCCESS = 'success'
    SKIPPED = 'skipped'
    FAILED = 'failed'


@dataclass
class RepositoryOutcome:
    """Result of backing up one repository"""

    repository: str
    status: OutcomeStatus
    reason: Optional[str] = None
    tag: Optional[RevisionTag] = None
    error: Optional[BaseException] = None
    duration: float = 0.0
    logs: List[str] = field(default_factory=list)

    @classmethod
    def success(cls, repository, tag, **kwargs):
        return cls(repository, OutcomeStatus.SUCCESS, tag=tag, **kwargs)

    @classmethod
    def skipped(cls, repository, reason, **kwargs):
        return cls(repository, OutcomeStatus.SKIPPED, reason=reason, **kwargs)

    @classmethod
    def failed(cls, repository, error, **kwargs):
        reason = getattr(error, 'message', None) or str(error)
        return cls(repository, OutcomeStatus.FAILED, reason=reason, error=error, **kwargs)

    def __repr__(self):
        return f'<RepositoryOutcome {self.repository} status={self.status.value}>'


@dataclass
class BackupRun:
    """Aggregate of one invocation"""

    started_at: datetime = field(default_factory=lambda: datetime.now())
    completed_at: Optional[datetime] = None
    outcomes: List[RepositoryOutcome] = field(default_factory=list)

    def _with_status(self, status):
        return [outcome for outcome in self.outcomes if outcome.status is status]

    @property
    def succeeded(self) -> List[RepositoryOutcome]:
        return self._with_status(OutcomeStatus.SUCCESS)

    @property
    def skipped(self) -> List[RepositoryOutcome]:
        return self._with_status(OutcomeStatus.SKIPPED)

    @property
    def failures(self) -> List[RepositoryOutcome]:
        return self._with_status(OutcomeStatus.FAILED)

    @property
    def duration(self):
        end = self.completed_at or datetime.now()
        return end - self.started_at

    def complete(self):
        self.completed_at = datetime.now()
