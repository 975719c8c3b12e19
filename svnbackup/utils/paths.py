"""
Filesystem helpers for repository detection and backup removal.
"""

import os
import stat
import shutil
import sys
from pathlib import Path


def is_repository(path) -> bool:
    """
    Check whether a directory has the on-disk layout of a Subversion repository.

    A repository root holds a 'format' file and a 'db' directory.

    Args:
        path: Directory to inspect

    Returns:
        True if the structural markers are present
    """
    path = Path(path)
    return (
        path.is_dir()
        and (path / 'format').is_file()
        and (path / 'db').is_dir()
    )


def _make_writable_and_retry(func, path, exc):
    # onerror passes sys.exc_info(), onexc the exception itself
    if not isinstance(exc, BaseException):
        exc = exc[1]
    if func not in (os.remove, os.unlink, os.rmdir):
        raise exc

    # Subversion marks revision files read-only
    os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
    func(path)


def delete_directory(path):
    """
    Recursively delete a directory, including read-only files.

    Args:
        path: Directory to delete

    Raises:
        OSError: If any entry cannot be removed
    """
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_make_writable_and_retry)
    else:
        shutil.rmtree(path, onerror=_make_writable_and_retry)
