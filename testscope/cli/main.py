"""Main CLI entry point for testscope."""

import sys
from pathlib import Path

import click

from ..adapters.io.enhanced_logging import setup_enhanced_logging
from ..adapters.io.make_runner import MakeTestRunner
from ..adapters.io.rich_cli import create_console, print_error
from ..application.resolve_usecase import TestScriptResolver
from ..config.loader import ConfigLoader, ConfigurationError
from ..domain.models import TestScopeError


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--dry-run",
    "-n",
    "--just-print",
    "dry_run",
    is_flag=True,
    help="Print the test command instead of running it",
)
@click.option(
    "--list",
    "-l",
    "list_only",
    is_flag=True,
    help="Print the selected test scripts, one per line, and exit",
)
@click.option(
    "--dir",
    "-d",
    "project_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root (default: nearest directory containing t/)",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Trace classification and scanning")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors (overrides TVDEBUG)")
def app(
    names: tuple[str, ...],
    dry_run: bool,
    list_only: bool,
    project_dir: Path | None,
    config: Path | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Run the test scripts relevant to NAMES.

    NAMES may be test scripts, source files, directories or package names.
    Map "tv %" to a key in your editor to test the file being edited.
    """
    console = create_console(stderr=True)
    logger = setup_enhanced_logging(console, verbose=verbose, quiet=quiet)

    cli_overrides: dict = {}
    if project_dir:
        cli_overrides["project_root"] = str(project_dir)
    if dry_run:
        cli_overrides["just_print"] = True

    try:
        settings = ConfigLoader(config, search_dir=project_dir).load_config(
            cli_overrides=cli_overrides
        )
        resolver = TestScriptResolver(settings)
        test_scripts = resolver.resolve(names)
        logger.info(f"Selected {len(test_scripts)} test scripts")

        if list_only:
            for test_script in test_scripts:
                click.echo(test_script)
            return

        runner = MakeTestRunner(settings.runner)
        if settings.just_print:
            runner.print_command(test_scripts)
            return

        exit_code = runner.run(test_scripts, resolver.project_root)
    except (TestScopeError, ConfigurationError) as e:
        print_error(console, str(e))
        sys.exit(1)

    sys.exit(exit_code)


def main() -> None:
    """Console script entry point."""
    app(prog_name="tv")


if __name__ == "__main__":
    main()
