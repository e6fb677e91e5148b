"""
Resolve Use Case - map requested names to the test scripts that cover them.

Given a mixed list of test scripts, source files, directories and package
names, this use case expands directories, classifies every name, consults the
cross-reference index and returns the sorted, de-duplicated list of test
scripts to run. The index is built on the first resolution or lookup and is
kept for the lifetime of the resolver.
"""

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from ..adapters.io.file_discovery import FileDiscoveryService
from ..adapters.io.make_runner import MakeTestRunner
from ..adapters.io.project_root import find_project_root, validate_project_root
from ..adapters.parsing.annotation_scanner import AnnotationScanner, canonical_path
from ..adapters.parsing.name_classifier import NameClassifier
from ..config.models import TestScopeConfig
from ..domain.models import (
    CrossReferenceIndex,
    NameKind,
    NoTestScriptsFoundError,
    UnresolvedNameError,
)

logger = logging.getLogger(__name__)


def raise_unresolved(names: list[str]) -> None:
    """Default handler for names that map to no test script."""
    raise UnresolvedNameError(names)


class TestScriptResolver:
    """
    Use case for resolving names into test scripts.

    A resolver caches the project root and the cross-reference index, so it
    should be created once per invocation. Separate resolvers never share
    state.
    """

    __test__ = False

    def __init__(
        self,
        config: TestScopeConfig | None = None,
        classifier: NameClassifier | None = None,
        project_root: str | Path | None = None,
        scanner: AnnotationScanner | None = None,
        on_unresolved: Callable[[list[str]], None] | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            config: testscope configuration (defaults apply when None)
            classifier: Name classifier; built from the config when None
            project_root: Explicit project root, overriding config and search
            scanner: Source/test scanner; built from the config when None
            on_unresolved: Called with the names that map to no test script;
                raises UnresolvedNameError when None
        """
        self.config = config or TestScopeConfig()
        self.classifier = classifier or NameClassifier.from_config(
            self.config.naming, self.config.patterns
        )
        self.scanner = scanner or AnnotationScanner(
            self.config.patterns, self.config.naming
        )
        self.on_unresolved = on_unresolved or raise_unresolved
        self.index = CrossReferenceIndex()
        self.file_discovery = FileDiscoveryService(self.classifier, self.index)

        self._project_root: Path | None = None
        explicit_root = project_root or self.config.project_root
        if explicit_root:
            self._project_root = validate_project_root(
                explicit_root, self.config.naming.test_dir
            )

        self._names: list[str] = []
        self._source_files_scanned = False
        self._test_scripts_scanned = False

    @property
    def project_root(self) -> Path:
        """The project root, searched upward from cwd on first use."""
        if self._project_root is None:
            self._project_root = find_project_root(
                test_dir=self.config.naming.test_dir
            )
        return self._project_root

    @project_root.setter
    def project_root(self, value: str | Path | None) -> None:
        self._project_root = (
            validate_project_root(value, self.config.naming.test_dir)
            if value
            else None
        )

    def resolve(self, names: Iterable[str]) -> list[str]:
        """
        Resolve names into test scripts.

        Args:
            names: Test scripts, source files, directories or package names

        Returns:
            Sorted, unique test script paths of the form ``t/foo.t``

        Raises:
            UnresolvedNameError: If any name maps to no test script and no
                other handler was given; every such name is listed
            NoTestScriptsFoundError: If the test directory has no test scripts
            ScanIOError: If a file cannot be read while building the index
        """
        self._names = self.file_discovery.expand_all(names)
        self._ensure_index()

        test_scripts: list[str] = []
        unresolved: list[str] = []

        for name in self._names:
            kind = self.classifier.classify(name)
            if kind is NameKind.TEST_SCRIPT:
                test_scripts.append(self._rebase_test_script(name))
                continue

            if kind is NameKind.PACKAGE:
                found = self.test_scripts_for_package(name)
            elif kind is NameKind.DIRECTORY:
                found = self.test_scripts_for_dir(name)
            else:
                found = self.test_scripts_for_file(name)

            if found:
                test_scripts.extend(found)
            else:
                unresolved.append(name)

        if unresolved:
            self.on_unresolved(unresolved)

        return sorted({self.canonical_test_script(script) for script in test_scripts})

    def test_scripts_for_package(self, package: str) -> list[str]:
        """Test scripts that use, require or annotate ``package``."""
        self._ensure_index()
        return self.index.scripts_for_package(package)

    def test_scripts_for_file(self, name: str) -> list[str]:
        """Test scripts tied to the file itself or to any package it declares."""
        self._ensure_index()
        abs_path = canonical_path(name)

        scripts = self.index.scripts_for_file(abs_path)
        for package in self.index.packages_in_file(abs_path):
            scripts.extend(self.index.scripts_for_package(package))
        return scripts

    def test_scripts_for_dir(self, directory: str) -> list[str]:
        """Test scripts for every file recorded under ``directory``."""
        self._ensure_index()
        scripts: list[str] = []
        for path in self.index.files_in_dir(directory):
            if self.classifier.is_test_script(path):
                scripts.append(self._rebase_test_script(path))
            else:
                scripts.extend(self.test_scripts_for_file(path))
        return scripts

    def _rebase_test_script(self, name: str) -> str:
        # Requested names are relative to cwd; keep them as given when cwd is outside the root.
        path = canonical_path(name)
        root = str(self.project_root)
        if os.path.commonpath([root, path]) == root:
            return path
        return name

    def canonical_test_script(self, script: str) -> str:
        """Express ``script`` relative to the project root, under the test directory."""
        test_dir = self.config.naming.test_dir
        path = os.path.normpath(script)

        if os.path.isabs(path):
            root = str(self.project_root)
            if os.path.commonpath([root, path]) == root:
                path = os.path.relpath(path, root)

        path = path.replace(os.sep, "/")
        if not path.startswith(f"{test_dir}/"):
            path = f"{test_dir}/{path}"
        return path

    def _ensure_index(self) -> None:
        if not self._source_files_scanned:
            self._scan_source_files()
            self._source_files_scanned = True
        if not self._test_scripts_scanned:
            self._scan_test_scripts()
            self._test_scripts_scanned = True

    def _scan_source_files(self) -> None:
        root = self.project_root
        files = [
            name
            for name in self._names
            if not self.classifier.is_package(name)
            and not self.classifier.is_test_script(name)
        ]
        files.extend(self.file_discovery.expand(str(root / self.config.naming.lib_dir)))
        files.extend(self.file_discovery.discover_root_source_files(root))

        logger.debug(f"Scanning {len(files)} source file candidates")
        self.scanner.scan_source_files(files, self.index)

    def _scan_test_scripts(self) -> None:
        root = self.project_root
        test_dir = self.config.naming.test_dir
        test_scripts = self.file_discovery.discover_test_scripts(root, test_dir)
        if not test_scripts:
            raise NoTestScriptsFoundError(
                test_dir, self.config.naming.test_script_suffix
            )

        logger.debug(f"Scanning {len(test_scripts)} test scripts")
        self.scanner.scan_test_scripts(test_scripts, root, self.index)


def test_verbose(
    *names: str,
    config: TestScopeConfig | None = None,
    project_root: str | Path | None = None,
    just_print: bool = False,
) -> int:
    """
    Resolve ``names`` and run (or print) the test command for them.

    Shortcut for building a resolver and a runner by hand.

    Returns:
        The test command's exit status (0 when only printing)
    """
    config = config or TestScopeConfig()
    resolver = TestScriptResolver(config, project_root=project_root)
    test_scripts = resolver.resolve(names)

    runner = MakeTestRunner(config.runner)
    if just_print or config.just_print:
        runner.print_command(test_scripts)
        return 0
    return runner.run(test_scripts, resolver.project_root)


test_verbose.__test__ = False
