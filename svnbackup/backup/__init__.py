"""
Backup module for SvnBackup.

This module handles the per-repository backup functionality including:
- Subversion tool invocation (svnlook, svnadmin)
- Revision lookup
- Compression
- Execution of the backup pipeline
- Retention policy enforcement
"""

from .executor import RepositoryBackupExecutor, BackupFailure
from .tools import SubversionTool, ToolResult, ToolError
from .revision import RevisionResolver
from .compression import create_archive, CompressionError
from .retention import RetentionManager, RetentionError

__all__ = [
    'RepositoryBackupExecutor',
    'BackupFailure',
    'SubversionTool',
    'ToolResult',
    'ToolError',
    'RevisionResolver',
    'create_archive',
    'CompressionError',
    'RetentionManager',
    'RetentionError'
]
