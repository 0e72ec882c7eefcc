"""
Running the framework console (bin/console) through PHP.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# (argv, cwd) -> stdout, or None when the process could not run or failed
CommandRunner = Callable[[List[str], str], Optional[str]]


def run_command(argv: List[str], cwd: str) -> Optional[str]:
    try:
        return subprocess.check_output(
            argv, cwd=cwd, text=True, encoding="utf-8", errors="ignore",
            stderr=subprocess.DEVNULL,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Command failed: {' '.join(argv)}: {e}")
        return None


class PhpConsole:
    """
    PHP executable bound to a workspace.

    The runner is injectable so that environments can be exercised without PHP.
    """

    def __init__(self, php_executable: str, workspace_dir: str, runner: Optional[CommandRunner] = None):
        self.php_executable = php_executable
        self.workspace_dir = workspace_dir
        self._runner = runner or run_command

    def run(self, script: str, *args: str) -> Optional[str]:
        return self._runner([self.php_executable, script, *args], self.workspace_dir)

    def run_json(self, script: str, *args: str) -> Optional[Dict[str, Any]]:
        """Run a command that prints JSON; None on failure or malformed output."""
        out = self.run(script, *args)
        if out is None:
            return None
        try:
            payload = json.loads(out)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed JSON from {script} {' '.join(args)}: {e}")
            return None
        if not isinstance(payload, dict):
            logger.warning(f"Unexpected JSON from {script} {' '.join(args)}: {type(payload).__name__}")
            return None
        return payload


__all__ = ["CommandRunner", "run_command", "PhpConsole"]
