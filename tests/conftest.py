"""Global fixtures for the testscope test suite.

Most tests build a small project on disk: a ``t/`` directory with test
scripts and a ``lib/`` directory with source files, laid out the way the
tool expects to find them.
"""

import os
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep user configuration out of the tests."""
    for key in list(os.environ):
        if key.startswith("TESTSCOPE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("TVDEBUG", raising=False)


@pytest.fixture
def make_project(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Factory fixture writing ``{relative path: content}`` into a project root."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        (root / "t").mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root.resolve()

    return _make


@pytest.fixture
def sample_project(make_project, monkeypatch) -> Path:
    """
    Project where ``lib/Foo.pm`` declares ``Foo`` and annotates ``bat.t``.

    The annotation sits above the package declaration, so it belongs to the
    file and to ``main`` but not to ``Foo``. Three test scripts use or
    require ``Foo``. The working directory is the project root.
    """
    root = make_project(
        {
            "t/foo.t": "use Test::More;\nuse Foo;\nok(1);\n",
            "t/bar.t": "use strict;\nuse Foo;\n",
            "t/baz.t": "require Foo;\n",
            "t/bat.t": "use Test::More;\nok(1);\n",
            "lib/Foo.pm": "=for test_script bat.t\n\npackage Foo;\n\n1;\n",
        }
    )
    monkeypatch.chdir(root)
    return root
