"""Allow ``python -m testscope``."""

from .cli.main import main

main()
