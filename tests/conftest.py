"""
Shared pytest fixtures for SvnBackup tests.

This module provides fixtures for:
- Repository and backup root directories
- Fake Subversion repositories on disk
- A fake svnadmin/svnlook invoker
- Backup configuration objects
"""

import threading
import time
from pathlib import Path

import pytest

from svnbackup.backup.tools import ToolResult
from svnbackup.models import BackupConfiguration


def make_repository(root: Path, name: str) -> Path:
    """Create a directory with the on-disk markers of a Subversion repository."""
    repo = root / name
    (repo / 'db' / 'revs' / '0').mkdir(parents=True)
    (repo / 'hooks').mkdir()
    (repo / 'format').write_text('5\n')
    (repo / 'db' / 'current').write_text('0\n')
    (repo / 'db' / 'revs' / '0' / '0').write_text('PLAIN\nEND\n')
    return repo


class FakeSvnTool:
    """
    Stands in for svnadmin/svnlook.

    Repositories are registered with a revision; anything else answers
    'youngest' the way svnlook does for a non-repository.
    """

    def __init__(self):
        self.revisions = {}
        self.verify_failures = set()
        self.hotcopy_failures = set()
        self.calls = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()
        self.hotcopy_sleep = 0

    def add(self, repo_path: Path, revision: int):
        self.revisions[Path(repo_path).resolve()] = revision

    def calls_for(self, command):
        return [call for call in self.calls if call[0] == command]

    def invoke(self, executable, command, *args):
        raise NotImplementedError

    def youngest(self, repository_path):
        self.calls.append(('youngest', Path(repository_path).name))
        revision = self.revisions.get(Path(repository_path).resolve())
        if revision is None:
            return ToolResult(1, '', f"svnlook: E000002: Can't open file '{repository_path}/format'\n")
        return ToolResult(0, f"{revision}\n", '')

    def verify(self, repository_path):
        name = Path(repository_path).name
        self.calls.append(('verify', name))
        if name in self.verify_failures:
            return ToolResult(1, '', 'svnadmin: E160004: Corrupt node-revision\n')
        return ToolResult(0, '* Verified revision 0.\n', '')

    def hotcopy(self, repository_path, backup_path):
        name = Path(repository_path).name
        self.calls.append(('hotcopy', name))

        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.hotcopy_sleep:
                time.sleep(self.hotcopy_sleep)

            backup_path = Path(backup_path)
            backup_path.mkdir(exist_ok=True)
            if any(backup_path.iterdir()):
                return ToolResult(1, '', f"svnadmin: E200011: '{backup_path}' exists and is non-empty\n")
            (backup_path / 'format').write_text('5\n')
            (backup_path / 'db' / 'transactions').mkdir(parents=True)
            (backup_path / 'db' / 'current').write_text('1\n')

            if name in self.hotcopy_failures:
                return ToolResult(1, '', 'svnadmin: E000028: No space left on device\n')
            return ToolResult(0, '', '')
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def repo_root(tmp_path):
    """Directory holding repositories."""
    root = tmp_path / 'repositories'
    root.mkdir()
    return root


@pytest.fixture
def backup_root(tmp_path):
    """Directory receiving backups (not created up front)."""
    return tmp_path / 'backups'


@pytest.fixture
def svn_tool():
    """Fake Subversion tool invoker."""
    return FakeSvnTool()


@pytest.fixture
def make_config(repo_root, backup_root):
    """
    Build a BackupConfiguration pointing at the temporary roots.

    Keyword arguments override the defaults.
    """
    def _make_config(**overrides):
        values = {
            'repository_root': repo_root,
            'backup_root': backup_root,
        }
        values.update(overrides)
        return BackupConfiguration(**values)

    return _make_config


@pytest.fixture
def make_repo(repo_root):
    """Create a fake repository under the repository root."""
    def _make_repo(name):
        return make_repository(repo_root, name)

    return _make_repo


@pytest.fixture
def make_external_repo(tmp_path):
    """Create a fake repository outside the repository root, for linking into it."""
    def _make_external_repo(name):
        return make_repository(tmp_path / 'storage', name)

    return _make_external_repo
