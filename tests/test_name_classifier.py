"""Tests for name classification."""

import pytest

from testscope.adapters.parsing.name_classifier import (
    NameClassifier,
    make_package_predicate,
    make_source_file_predicate,
    make_test_script_predicate,
)
from testscope.config.models import NamingConfig
from testscope.domain.models import NameKind


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory for existence checks."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestPredicates:
    """Test the default classification predicates."""

    def test_test_script_may_not_exist(self, workdir):
        assert make_test_script_predicate()("t/missing.t") is True

    def test_test_script_existing_file(self, workdir):
        (workdir / "real.t").write_text("ok\n")
        assert make_test_script_predicate()("real.t") is True

    def test_test_script_directory_is_rejected(self, workdir):
        (workdir / "dir.t").mkdir()
        assert make_test_script_predicate()("dir.t") is False

    def test_test_script_requires_suffix(self, workdir):
        assert make_test_script_predicate()("foo.pm") is False
        assert make_test_script_predicate()("foo.txt") is False

    def test_source_file_suffixes(self, workdir):
        is_source_file = make_source_file_predicate()
        assert is_source_file("lib/Foo.pm") is True
        assert is_source_file("script.pl") is True
        assert is_source_file("notes.txt") is False

    def test_source_file_directory_is_rejected(self, workdir):
        (workdir / "odd.pm").mkdir()
        assert make_source_file_predicate()("odd.pm") is False

    @pytest.mark.parametrize("name", ["Foo", "Foo::Bar", "Foo::Bar::Baz_2", "main"])
    def test_package_names(self, workdir, name):
        assert make_package_predicate()(name) is True

    @pytest.mark.parametrize("name", ["Foo.pm", "Foo/Bar", "Foo:Bar", "", "Foo\n"])
    def test_not_package_names(self, workdir, name):
        assert make_package_predicate()(name) is False

    def test_existing_name_is_not_a_package(self, workdir):
        (workdir / "Foo").write_text("")
        assert make_package_predicate()("Foo") is False


class TestNameClassifier:
    """Test NameClassifier.classify."""

    @pytest.fixture
    def classifier(self):
        return NameClassifier()

    def test_classify_test_script(self, workdir, classifier):
        assert classifier.classify("t/foo.t") is NameKind.TEST_SCRIPT

    def test_classify_package(self, workdir, classifier):
        assert classifier.classify("Foo::Bar") is NameKind.PACKAGE

    def test_classify_directory(self, workdir, classifier):
        (workdir / "lib").mkdir()
        assert classifier.classify("lib") is NameKind.DIRECTORY

    def test_directory_named_like_test_script(self, workdir, classifier):
        (workdir / "weird.t").mkdir()
        assert classifier.classify("weird.t") is NameKind.DIRECTORY

    def test_classify_source_file(self, workdir, classifier):
        assert classifier.classify("lib/Foo.pm") is NameKind.SOURCE_FILE

    def test_existing_file_overrides_package(self, workdir, classifier):
        (workdir / "Makefile").write_text("all:\n")
        assert classifier.classify("Makefile") is NameKind.PATH

    def test_other_extension_is_plain_path(self, workdir, classifier):
        assert classifier.classify("notes.txt") is NameKind.PATH

    def test_predicates_are_replaceable(self, workdir):
        classifier = NameClassifier(
            is_test_script=lambda name: name.startswith("test_") and name.endswith(".py"),
            is_source_file=lambda name: name.endswith(".py"),
        )

        assert classifier.classify("test_app.py") is NameKind.TEST_SCRIPT
        assert classifier.classify("app.py") is NameKind.SOURCE_FILE
        assert classifier.classify("foo.t") is NameKind.PATH

    def test_from_config(self, workdir):
        naming = NamingConfig(test_script_suffix=".test", source_suffixes=[".rb"])
        classifier = NameClassifier.from_config(naming)

        assert classifier.classify("x.test") is NameKind.TEST_SCRIPT
        assert classifier.classify("x.rb") is NameKind.SOURCE_FILE
        assert classifier.is_test_script("x.t") is False
