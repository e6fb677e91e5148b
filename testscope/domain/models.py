"""
Domain models for the testscope system.

This module contains the core domain types: the classification of the names
a developer passes on the command line, the cross-reference index that links
packages and files to test scripts, and the exception hierarchy used by every
layer of the tool.
"""

from dataclasses import dataclass, field
from enum import Enum


class TestScopeError(Exception):
    """Base exception for testscope domain errors."""

    pass


class UnresolvedNameError(TestScopeError):
    """Raised when one or more names cannot be mapped to any test script."""

    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        plural = "s" if len(self.names) > 1 else ""
        super().__init__(
            f"No test scripts found for: {', '.join(self.names)}\n"
            f"Try adding '=for test_script ...' to the source{plural} "
            "or 'use ...;' or '=for package ...' to the test scripts"
        )


class NoTestScriptsFoundError(TestScopeError):
    """Raised when the test directory holds no recognizable test scripts."""

    def __init__(self, test_dir: str, suffix: str = ".t") -> None:
        self.test_dir = test_dir
        super().__init__(f"No test scripts ({test_dir}/*{suffix}) found")


class ScanIOError(TestScopeError):
    """Raised when a file or directory cannot be read during scanning."""

    def __init__(self, path: str, cause: OSError | None = None) -> None:
        self.path = path
        self.cause = cause
        reason = (cause.strerror or str(cause)) if cause else "I/O error"
        super().__init__(f"{reason}: {path}")


class ProjectRootError(TestScopeError):
    """Raised when no directory containing the test directory can be found."""

    pass


class InvocationError(TestScopeError):
    """Raised when the external test command cannot be launched."""

    def __init__(self, command: list[str], cause: OSError) -> None:
        self.command = list(command)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"{reason}: {' '.join(self.command)}")


class NameKind(str, Enum):
    """Enumeration of the ways a requested name can be interpreted."""

    TEST_SCRIPT = "test_script"
    SOURCE_FILE = "source_file"
    PACKAGE = "package"
    DIRECTORY = "directory"
    PATH = "path"


def _append_unique(bucket: list[str], items: list[str]) -> None:
    for item in items:
        if item not in bucket:
            bucket.append(item)


@dataclass
class CrossReferenceIndex:
    """
    In-memory mappings between packages, files and test scripts.

    Every mapping value keeps discovery order and holds each entry once.
    The index is filled by the scanner once per resolver and only read
    afterwards.
    """

    package_scripts: dict[str, list[str]] = field(default_factory=dict)
    file_scripts: dict[str, list[str]] = field(default_factory=dict)
    file_packages: dict[str, list[str]] = field(default_factory=dict)
    dir_files: dict[str, list[str]] = field(default_factory=dict)

    def add_package_scripts(self, package: str, scripts: list[str]) -> None:
        _append_unique(self.package_scripts.setdefault(package, []), scripts)

    def add_file_scripts(self, path: str, scripts: list[str]) -> None:
        _append_unique(self.file_scripts.setdefault(path, []), scripts)

    def add_file_package(self, path: str, package: str) -> None:
        _append_unique(self.file_packages.setdefault(path, []), [package])

    def add_dir_file(self, directory: str, path: str) -> None:
        _append_unique(self.dir_files.setdefault(directory, []), [path])

    def scripts_for_package(self, package: str) -> list[str]:
        return list(self.package_scripts.get(package, []))

    def scripts_for_file(self, path: str) -> list[str]:
        return list(self.file_scripts.get(path, []))

    def packages_in_file(self, path: str) -> list[str]:
        return list(self.file_packages.get(path, []))

    def files_in_dir(self, directory: str) -> list[str]:
        return list(self.dir_files.get(directory, []))
