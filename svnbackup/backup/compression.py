"""
Compression of hot copies into zip archives.

Archives are written with Zip64 extensions enabled so repositories larger
than 4 GB (or with more than 65535 files) are packed safely, and non-ASCII
file names are stored as UTF-8.
"""

import os
import zipfile
from pathlib import Path


class CompressionError(Exception):
    """Raised when archive creation fails."""
    pass


def create_archive(source_dir, archive_path) -> str:
    """
    Pack a directory tree into a single zip archive.

    Entries are stored relative to source_dir, so the archive root holds the
    directory's contents. Empty directories are kept because a hot copy
    needs them to be a valid repository.

    Args:
        source_dir: Directory to pack
        archive_path: Full path of the archive to create

    Returns:
        Path to the created archive file

    Raises:
        CompressionError: If archive creation fails
    """
    source = Path(source_dir)
    archive_path = str(archive_path)

    if not source.is_dir():
        raise CompressionError(f"Source directory does not exist: {source_dir}")

    try:
        with zipfile.ZipFile(archive_path, 'w', zipfile.ZIP_DEFLATED, allowZip64=True) as zipf:
            _add_directory_to_zip(zipf, source)
        return archive_path
    except Exception as e:
        # Clean up partial archive on failure
        if os.path.exists(archive_path):
            os.remove(archive_path)
        raise CompressionError(f"Failed to create archive: {e}") from e


def _add_directory_to_zip(zipf: zipfile.ZipFile, directory: Path):
    """
    Recursively add directory contents to zip archive.

    Args:
        zipf: ZipFile object
        directory: Directory whose contents are added
    """
    for item in sorted(directory.rglob('*')):
        relative_path = item.relative_to(directory).as_posix()
        if item.is_dir():
            zipf.write(item, relative_path + '/')
        elif item.is_file():
            zipf.write(item, relative_path)


def get_archive_size(archive_path) -> int:
    """
    Get the size of an archive file in bytes.

    Args:
        archive_path: Path to the archive file

    Returns:
        File size in bytes

    Raises:
        CompressionError: If file doesn't exist or cannot be accessed
    """
    try:
        return os.path.getsize(archive_path)
    except FileNotFoundError:
        raise CompressionError(f"Archive not found: {archive_path}")
    except OSError as e:
        raise CompressionError(f"Failed to get archive size: {e}") from e
