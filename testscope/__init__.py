"""testscope - run the test scripts relevant to the files you are editing."""

from .application.resolve_usecase import TestScriptResolver, test_verbose

__version__ = "0.1.0"

__all__ = ["TestScriptResolver", "test_verbose", "__version__"]
