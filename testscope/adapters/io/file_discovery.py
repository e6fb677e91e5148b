"""
File Discovery Service - directory expansion for requested names.

This module turns directories named on the command line (and the project's
library and test directories) into the test scripts and source files found
beneath them. Only files recognized by the classifier's test-script or
source-file predicates are collected, which is narrower than the explicit
name rules: an explicitly named ``foo.txt`` is looked up as a path, while a
``foo.txt`` inside a traversed directory is ignored.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ...domain.models import CrossReferenceIndex, ScanIOError
from ..parsing.name_classifier import NameClassifier

logger = logging.getLogger(__name__)


class FileDiscoveryError(ScanIOError):
    """Exception raised when a directory cannot be traversed."""

    pass


class FileDiscoveryService:
    """
    Service for expanding directories into test scripts and source files.

    Every file found is also recorded against the directory name it was
    found under, so a directory can later be mapped back to its files.
    """

    def __init__(
        self,
        classifier: NameClassifier | None = None,
        index: CrossReferenceIndex | None = None,
    ) -> None:
        """
        Initialize the file discovery service.

        Args:
            classifier: Predicates deciding which files qualify.
            index: Index receiving the directory to files records.
                   If None, a private index is used.
        """
        self.classifier = classifier or NameClassifier()
        self.index = index if index is not None else CrossReferenceIndex()

    def expand(self, name: str) -> list[str]:
        """
        Expand a single name.

        Args:
            name: A directory, file, package or any other name.

        Returns:
            The qualifying files under ``name`` when it is a directory holding
            any, otherwise ``[name]`` unchanged.

        Raises:
            FileDiscoveryError: If the directory cannot be listed.
        """
        if not self.classifier.is_directory(name):
            return [name]

        logger.debug(f"traversing {name}")
        found = self._walk(name)
        for path in found:
            self.index.add_dir_file(name, path)

        if not found:
            logger.debug(f"No test scripts or source files under {name}")
            return [name]
        return found

    def expand_all(self, names: Iterable[str]) -> list[str]:
        """Expand every name in order, flattening the results."""
        expanded: list[str] = []
        for name in names:
            expanded.extend(self.expand(name))
        return expanded

    def discover_test_scripts(self, project_root: str | Path, test_dir: str) -> list[str]:
        """
        Find every test script under the project's test directory.

        Returns:
            Paths relative to ``project_root`` such as ``t/foo.t``.
        """
        root = Path(project_root)
        found = self.expand(str(root / test_dir))
        scripts = [
            os.path.relpath(path, root)
            for path in found
            if os.path.isfile(path) and self.classifier.is_test_script(path)
        ]
        logger.debug(f"Discovered {len(scripts)} test scripts in {root / test_dir}")
        return scripts

    def discover_root_source_files(self, project_root: str | Path) -> list[str]:
        """Source files directly inside the project root (not recursive)."""
        root = Path(project_root)
        try:
            entries = sorted(os.listdir(root))
        except OSError as e:
            logger.error(f"Failed to list {root}: {e}")
            raise FileDiscoveryError(str(root), e) from e

        return [
            str(root / entry)
            for entry in entries
            if (root / entry).is_file() and self.classifier.is_source_file(str(root / entry))
        ]

    def _walk(self, directory: str) -> list[str]:
        results: list[str] = []

        def _raise(error: OSError) -> None:
            raise error

        try:
            for root, dirs, files in os.walk(directory, onerror=_raise):
                dirs.sort()
                for filename in sorted(files):
                    path = os.path.join(root, filename)
                    if not os.path.isfile(path):
                        continue
                    if self.classifier.is_source_file(path) or self.classifier.is_test_script(
                        path
                    ):
                        results.append(path)
        except OSError as e:
            logger.error(f"Filesystem error while traversing {directory}: {e}")
            raise FileDiscoveryError(e.filename or directory, e) from e

        return results
