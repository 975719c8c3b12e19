"""
Latest-revision lookup for repositories.

The lookup doubles as a probe: a directory whose revision cannot be read
is reported as "not a repository" rather than as an error.
"""

import logging
import re
from typing import Optional

from svnbackup.models import RevisionTag
from .tools import ToolInvoker


def parse_revision(output: str) -> Optional[int]:
    """
    Parse 'svnlook youngest' output into a revision number.

    Returns:
        The revision, or None if the output is not a non-negative integer
    """
    text = (output or '').strip()
    if not re.fullmatch(r'[0-9]+', text):
        return None
    return int(text)


class RevisionResolver:
    def __init__(self, tool: ToolInvoker, logger: Optional[logging.Logger] = None):
        self.tool = tool
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, repository_path, name: Optional[str] = None) -> Optional[RevisionTag]:
        """
        Read the youngest revision of a repository.

        Args:
            repository_path: Path of the candidate repository
            name: Display name used in log messages

        Returns:
            RevisionTag, or None when the path is not a repository

        Raises:
            ToolError: If svnlook cannot be run at all
        """
        name = name or str(repository_path)
        result = self.tool.youngest(repository_path)

        if result.stderr.strip():
            self.logger.info(result.stderr.strip())

        revision = parse_revision(result.stdout)
        if revision is None:
            self.logger.warning(f"'{name}' is not a repository.")
            if result.stdout.strip():
                self.logger.info(result.stdout.strip())
            return None

        return RevisionTag(revision)
