"""
Shared test infrastructure.

Modules:
- file_utils: creating files and directories
- testing_utils: filesystem and console test doubles
- cli_utils: running the CLI in a subprocess
"""

from .file_utils import write, write_template
from .testing_utils import ExistsSpy, StubRunner
from .cli_utils import run_cli, jload

__all__ = ["write", "write_template", "ExistsSpy", "StubRunner", "run_cli", "jload"]
