"""
Utilities for working with the CLI in tests.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    """
    Runs shortcodes.cli with the given arguments in a directory.

    Args:
        root: Working directory for the command
        *args: Command line arguments

    Returns:
        CompletedProcess with captured output
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    env.pop("SHORTCODES_DEBUG", None)
    return subprocess.run(
        [sys.executable, "-m", "shortcodes.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    return json.loads(s)


__all__ = ["run_cli", "jload"]
