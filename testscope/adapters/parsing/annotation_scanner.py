"""
Line-oriented scanner for source files and test scripts.

Source files and test scripts are read line by line and matched against a
handful of regular expressions. This is not a parser and it is easily fooled
by code that only looks like a declaration. The associations it finds are
written to a ``CrossReferenceIndex``.

Source files contribute:

* package declarations (``package Foo::Bar;``), recorded against the file;
* ``=for test_script(s) a.t b.t`` annotations, recorded against both the
  file and the package declared above the annotation.

Test scripts contribute:

* ``=for package(s) Foo Bar`` annotations;
* ``=for file(s) lib/Foo.pm`` annotations, relative to the project root;
* ``use Foo;`` / ``require Foo;`` statements.

Annotation arguments continue on following lines until a blank line.
"""

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from ...config.models import NamingConfig, PatternConfig
from ...domain.models import CrossReferenceIndex, ScanIOError

logger = logging.getLogger(__name__)


def slurp_and_split(first: str, lines: Iterator[str]) -> list[str]:
    """
    Collect whitespace-separated annotation arguments.

    ``first`` is the remainder of the annotation line. Further lines are
    consumed from ``lines`` up to and including the first blank line.
    """
    items = first.split()
    for line in lines:
        if not line.strip():
            break
        items.extend(line.split())
    return items


def canonical_path(path: str | Path, base: str | Path | None = None) -> str:
    """Absolute, normalized form of ``path`` (relative paths joined to ``base`` or cwd)."""
    base = base if base is not None else os.getcwd()
    return os.path.normpath(os.path.join(base, path))


class AnnotationScanner:
    """Scan source files and test scripts into a cross-reference index."""

    def __init__(
        self,
        patterns: PatternConfig | None = None,
        naming: NamingConfig | None = None,
    ) -> None:
        self.patterns = patterns or PatternConfig()
        self.naming = naming or NamingConfig()

        self._package_re = self.patterns.compiled("package_declaration")
        self._import_re = self.patterns.compiled("import_statement")
        self._test_scripts_re = self.patterns.compiled("test_scripts_annotation")
        self._packages_re = self.patterns.compiled("packages_annotation")
        self._files_re = self.patterns.compiled("files_annotation")

    def scan_source_files(
        self, paths: Iterable[str], index: CrossReferenceIndex
    ) -> None:
        """
        Scan source files for package declarations and test script annotations.

        Names that are not existing regular files are skipped; they are
        resolved (or reported) by path later on.

        Raises:
            ScanIOError: If an existing file cannot be read.
        """
        for path in paths:
            if not os.path.isfile(path):
                logger.debug(f"Skipping {path}: not a readable file")
                continue
            self.scan_source_file(path, index)

    def scan_source_file(self, path: str, index: CrossReferenceIndex) -> None:
        logger.debug(f"Scanning code file {path}")
        abs_path = canonical_path(path)
        package = self.naming.default_package

        with self._open(path) as f:
            lines = iter(f)
            try:
                for line in lines:
                    match = self._test_scripts_re.match(line)
                    if match:
                        scripts = slurp_and_split(match.group(1), lines)
                        logger.debug(
                            f"{abs_path}, {package} =for test_scripts {' '.join(scripts)}"
                        )
                        index.add_file_scripts(abs_path, scripts)
                        index.add_package_scripts(package, scripts)
                        continue

                    match = self._package_re.match(line)
                    if match:
                        package = match.group(1)
                        logger.debug(f"{abs_path} contains {package}")
                        index.add_file_package(abs_path, package)
            except OSError as e:
                raise ScanIOError(path, e) from e

    def scan_test_scripts(
        self,
        test_scripts: Iterable[str],
        project_root: str | Path,
        index: CrossReferenceIndex,
    ) -> None:
        """
        Scan test scripts (paths relative to ``project_root``) for associations.

        Raises:
            ScanIOError: If a test script cannot be read.
        """
        for test_script in test_scripts:
            self.scan_test_script(test_script, project_root, index)

    def scan_test_script(
        self, test_script: str, project_root: str | Path, index: CrossReferenceIndex
    ) -> None:
        logger.debug(f"Scanning test script {test_script}")
        root = str(project_root)

        with self._open(os.path.join(root, test_script)) as f:
            lines = iter(f)
            try:
                for line in lines:
                    match = self._packages_re.match(line)
                    if match:
                        packages = slurp_and_split(match.group(1), lines)
                        logger.debug(f"{test_script} =for packages {' '.join(packages)}")
                        for package in packages:
                            index.add_package_scripts(package, [test_script])
                        continue

                    match = self._files_re.match(line)
                    if match:
                        files = [
                            canonical_path(name, root)
                            for name in slurp_and_split(match.group(1), lines)
                        ]
                        logger.debug(f"{test_script} =for files {' '.join(files)}")
                        for file_path in files:
                            index.add_file_scripts(file_path, [test_script])
                        continue

                    match = self._import_re.search(line)
                    if match:
                        module = match.group(match.lastindex or 1)
                        logger.debug(f"{test_script} {match.group(1)}s {module}")
                        index.add_package_scripts(module, [test_script])
            except OSError as e:
                raise ScanIOError(test_script, e) from e

    def _open(self, path: str):
        try:
            # Undecodable bytes are replaced; only OS errors are fatal.
            return open(path, encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error(f"Cannot open {path}: {e}")
            raise ScanIOError(path, e) from e
