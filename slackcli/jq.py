"""Run a ``jq`` filter over command output."""

import json
import shutil
import subprocess

from slackcli.exceptions import FilterError

JQ_INSTALL_HELP = (
    "jq is not installed. Please install jq to use the --jq option.\n"
    "Installation instructions:\n"
    "  macOS:   brew install jq\n"
    "  Ubuntu:  sudo apt-get install jq\n"
    "  Windows: choco install jq\n"
    "Or visit: https://jqlang.github.io/jq/download/"
)


def find_jq():
    return shutil.which("jq")


def run_jq(data, expression):
    """Pipe *data* as JSON into ``jq <expression>`` and return jq's stdout verbatim.

    Raises FilterError when jq is missing or exits non-zero.
    """
    exe = find_jq()
    if not exe:
        raise FilterError(f"[ERROR] {JQ_INSTALL_HELP}")
    try:
        result = subprocess.run(
            [exe, expression],
            input=json.dumps(data, ensure_ascii=False),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise FilterError(f"[ERROR] Failed to run jq: {e}") from e
    if result.returncode != 0:
        detail = (result.stderr or "").strip() or "Unknown jq error"
        raise FilterError(f"[ERROR] jq error: {detail}")
    return result.stdout
