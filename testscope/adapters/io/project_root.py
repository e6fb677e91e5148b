"""
Project root discovery.

The project root is the nearest directory, starting from the current one and
walking up through its parents, that contains the test directory. Editors
often run commands from inside ``lib/`` or ``t/``, so the search has to look
upward rather than assume the working directory is the root.
"""

import logging
from pathlib import Path

from ...domain.models import ProjectRootError

logger = logging.getLogger(__name__)


def find_project_root(start: Path | str | None = None, test_dir: str = "t") -> Path:
    """
    Find the project root by searching upward for ``test_dir``.

    Args:
        start: Starting directory (default: cwd)
        test_dir: Name of the directory that marks the project root

    Returns:
        Absolute path of the first directory containing ``test_dir``

    Raises:
        ProjectRootError: If no ancestor contains ``test_dir``
    """
    start_path = Path(start) if start else Path.cwd()
    current = start_path.resolve()
    logger.debug(f"Searching for project directory from {current}")

    while True:
        if (current / test_dir).is_dir():
            logger.debug(f"...found {current}")
            return current
        if current == current.parent:
            break
        current = current.parent

    raise ProjectRootError(
        f"No '{test_dir}' directory found in {start_path.resolve()} or any parent directory"
    )


def validate_project_root(project_root: Path | str, test_dir: str = "t") -> Path:
    """
    Validate an explicitly supplied project root.

    Returns:
        The absolute project root

    Raises:
        ProjectRootError: If the path is not a directory
    """
    path = Path(project_root).resolve()
    if not path.is_dir():
        raise ProjectRootError(f"Project directory does not exist: {path}")
    if not (path / test_dir).is_dir():
        logger.warning(f"Project directory {path} has no '{test_dir}' directory")
    return path
