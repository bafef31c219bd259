"""
Where a pasted cURL command can come from: an argument, the OS clipboard,
piped stdin, or an interactive prompt that ends at the first blank line.
"""

import shutil
import subprocess
import sys

from slackcli.exceptions import CliError

# (command, args) tried in order; the first available tool wins.
_CLIPBOARD_COMMANDS = (
    ("pbpaste", []),
    ("wl-paste", ["--no-newline"]),
    ("xclip", ["-selection", "clipboard", "-o"]),
    ("xsel", ["--clipboard", "--output"]),
    ("powershell", ["-NoProfile", "-Command", "Get-Clipboard"]),
)


def read_clipboard():
    """Return the clipboard text using the first clipboard tool found on PATH."""
    for name, args in _CLIPBOARD_COMMANDS:
        exe = shutil.which(name)
        if not exe:
            continue
        try:
            result = subprocess.run(
                [exe, *args], capture_output=True, text=True, timeout=10, check=False
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise CliError(f"[ERROR] Failed to read clipboard with {name}: {e}") from e
        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit code {result.returncode}"
            raise CliError(f"[ERROR] Failed to read clipboard with {name}: {detail}")
        return result.stdout
    raise CliError(
        "[ERROR] No clipboard tool found (tried pbpaste, wl-paste, xclip, xsel, powershell).\n"
        "  Paste interactively instead: slackcli auth parse-curl --login"
    )


def has_piped_input(stream=None):
    stream = stream or sys.stdin
    return not stream.isatty()


def is_interactive_terminal(stream=None):
    stream = stream or sys.stdin
    return stream.isatty()


def read_piped_input(stream=None):
    stream = stream or sys.stdin
    return stream.read()


def read_interactive_input(prompt, hint=None, input_fn=input):
    """Read lines until the first blank line after some content (or EOF)."""
    print(prompt, file=sys.stderr)
    if hint:
        print(f"  {hint}", file=sys.stderr)
    lines = []
    while True:
        try:
            line = input_fn()
        except EOFError:
            break
        if not line.strip():
            if lines:
                break
            continue
        lines.append(line)
    return "\n".join(lines)
