"""
Name classification for requested test targets.

Decides whether a name given on the command line denotes a test script, a
source file, a package, a directory or some other path. Classification looks
at the name's shape and at the filesystem as it is right now; nothing is
cached.

Each decision is a plain predicate taking the name and returning a bool.
Callers replace any of them to adapt the heuristics to other naming
conventions:

    classifier = NameClassifier(is_test_script=lambda name: name.endswith("_test.py"))
"""

import logging
import os
import re
from collections.abc import Callable, Sequence

from ...config.models import NamingConfig, PatternConfig
from ...domain.models import NameKind

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


def _file_if_exists(name: str) -> bool:
    # Missing names qualify; existing ones must be regular files.
    return not os.path.exists(name) or os.path.isfile(name)


def make_test_script_predicate(suffix: str = ".t") -> Predicate:
    """Names ending in ``suffix`` that are files or do not exist yet."""

    def is_test_script(name: str) -> bool:
        return name.endswith(suffix) and _file_if_exists(name)

    return is_test_script


def make_source_file_predicate(suffixes: Sequence[str] = (".pm", ".pl")) -> Predicate:
    """Names ending in one of ``suffixes`` that are files or do not exist yet."""
    suffix_tuple = tuple(suffixes)

    def is_source_file(name: str) -> bool:
        return name.endswith(suffix_tuple) and _file_if_exists(name)

    return is_source_file


def make_package_predicate(pattern: str = r"^(\w|::)+$") -> Predicate:
    """Names shaped like a package that do not exist on the filesystem."""
    regex = re.compile(pattern)

    def is_package(name: str) -> bool:
        return regex.fullmatch(name) is not None and not os.path.exists(name)

    return is_package


def path_is_directory(name: str) -> bool:
    return os.path.isdir(name)


class NameClassifier:
    """Classify names into test scripts, source files, packages and directories."""

    def __init__(
        self,
        is_test_script: Predicate | None = None,
        is_source_file: Predicate | None = None,
        is_package: Predicate | None = None,
        is_directory: Predicate | None = None,
    ) -> None:
        """
        Initialize the classifier.

        Args:
            is_test_script: Predicate for test scripts (default: ``.t`` suffix)
            is_source_file: Predicate for traversal source files (default: ``.pm``/``.pl``)
            is_package: Predicate for package names (default: word chars and ``::``)
            is_directory: Predicate for directories (default: ``os.path.isdir``)
        """
        self.is_test_script = is_test_script or make_test_script_predicate()
        self.is_source_file = is_source_file or make_source_file_predicate()
        self.is_package = is_package or make_package_predicate()
        self.is_directory = is_directory or path_is_directory

    @classmethod
    def from_config(
        cls, naming: NamingConfig, patterns: PatternConfig | None = None
    ) -> "NameClassifier":
        """Build a classifier from the configured naming conventions."""
        patterns = patterns or PatternConfig()
        return cls(
            is_test_script=make_test_script_predicate(naming.test_script_suffix),
            is_source_file=make_source_file_predicate(naming.source_suffixes),
            is_package=make_package_predicate(patterns.package_name),
        )

    def classify(self, name: str) -> NameKind:
        """
        Classify a single name.

        Test scripts win over everything else, then package names, then
        directories. Anything left is a source file when it carries a source
        suffix and a plain path otherwise; both are looked up by path.
        """
        if self.is_test_script(name):
            kind = NameKind.TEST_SCRIPT
        elif self.is_package(name):
            kind = NameKind.PACKAGE
        elif self.is_directory(name):
            kind = NameKind.DIRECTORY
        elif self.is_source_file(name):
            kind = NameKind.SOURCE_FILE
        else:
            kind = NameKind.PATH

        logger.debug(f"{name} classified as {kind.value}")
        return kind
