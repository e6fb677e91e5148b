"""
IO adapters for filesystem and process operations.

This module provides directory expansion, project root discovery, logging
setup and execution of the external test command.
"""

from .file_discovery import FileDiscoveryError, FileDiscoveryService
from .make_runner import MakeTestRunner
from .project_root import find_project_root

__all__ = [
    "FileDiscoveryError",
    "FileDiscoveryService",
    "MakeTestRunner",
    "find_project_root",
]
