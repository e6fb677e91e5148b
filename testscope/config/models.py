"""Pydantic models for testscope configuration."""

import re
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NamingConfig(BaseModel):
    """Naming conventions used to recognize test scripts and source files."""

    test_dir: str = Field(
        default="t",
        description="Name of the test directory that marks the project root",
    )

    lib_dir: str = Field(
        default="lib",
        description="Library subdirectory scanned when resolving package names",
    )

    test_script_suffix: str = Field(
        default=".t", description="Suffix that identifies a test script"
    )

    source_suffixes: list[str] = Field(
        default=[".pm", ".pl"],
        description="Suffixes that identify source files during directory traversal",
    )

    default_package: str = Field(
        default="main",
        description="Package a source file belongs to before any declaration",
    )

    @field_validator("test_dir", "lib_dir", "test_script_suffix")
    @classmethod
    def validate_not_empty(cls, v: Any) -> Any:
        """Ensure names are not empty strings."""
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v

    @field_validator("source_suffixes")
    @classmethod
    def validate_suffixes(cls, v: Any) -> Any:
        """Ensure every suffix is a non-empty string."""
        for suffix in v:
            if not suffix or not suffix.strip():
                raise ValueError("source suffixes cannot be empty")
        return v

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class PatternConfig(BaseModel):
    """Line-oriented regular expressions used by the scanner."""

    package_name: str = Field(
        default=r"^(\w|::)+$",
        description="Shape of a bare package name given on the command line",
    )

    package_declaration: str = Field(
        default=r"^\s*package\s+(\S+);",
        description="Package declaration in a source file (group 1 is the name)",
    )

    import_statement: str = Field(
        default=r"\b(use|require)\s+([\w:]+)",
        description="Import statement anywhere in a test script line (last group is the module)",
    )

    test_scripts_annotation: str = Field(
        default=r"^=for\s+test_scripts?\s+(.*)",
        description="Source-file annotation naming test scripts",
    )

    packages_annotation: str = Field(
        default=r"^=for\s+packages?\s+(.*)",
        description="Test-script annotation naming covered packages",
    )

    files_annotation: str = Field(
        default=r"^=for\s+files?\s+(.*)",
        description="Test-script annotation naming covered files",
    )

    @field_validator("*")
    @classmethod
    def validate_regex(cls, v: Any) -> Any:
        """Ensure every pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression {v!r}: {e}") from e
        return v

    def compiled(self, name: str) -> re.Pattern[str]:
        """Return the compiled form of the pattern called ``name``."""
        return re.compile(getattr(self, name))

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class RunnerConfig(BaseModel):
    """External test command invoked with the resolved test scripts."""

    command: list[str] = Field(
        default=["make", "test", "TEST_VERBOSE=1"],
        description="Command and leading arguments of the test runner",
    )

    files_variable: str = Field(
        default="TEST_FILES",
        description="Variable receiving the space-joined list of test scripts",
    )

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: Any) -> Any:
        """Ensure a command is configured."""
        if not v:
            raise ValueError("runner command cannot be empty")
        return v

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class TestScopeConfig(BaseModel):
    """Main testscope configuration model."""

    __test__: ClassVar[bool] = False

    project_root: Path | None = Field(
        default=None,
        description="Explicit project root; searched upward from cwd when unset",
    )

    just_print: bool = Field(
        default=False,
        description="Print the test command instead of running it",
    )

    naming: NamingConfig = Field(
        default_factory=NamingConfig,
        description="Test script and source file naming conventions",
    )

    patterns: PatternConfig = Field(
        default_factory=PatternConfig,
        description="Scanner regular expressions",
    )

    runner: RunnerConfig = Field(
        default_factory=RunnerConfig,
        description="External test runner configuration",
    )

    model_config = ConfigDict(validate_assignment=True, extra="forbid")
