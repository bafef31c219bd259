"""
slackcli shared configuration, constants, and module-level state.
Standalone module — no imports from other project files except exceptions.
"""

import os

from slackcli.exceptions import CliError, ConfigError  # noqa: F401  (re-exported)

# ---------------------------------------------------------------------------
# Config directory and .env helpers
# ---------------------------------------------------------------------------

_ENV_KEYS = (
    "SLACKCLI_CONFIG_DIR",
    "SLACKCLI_API_BASE_URL",
    "SLACKCLI_HTTP_TIMEOUT_SECONDS",
    "SLACKCLI_HTTP_MAX_RESPONSE_BYTES",
    "SLACKCLI_HTTP_LOG",
    "SLACKCLI_HTTP_LOG_SAMPLE_RATE",
    "SLACKCLI_ENRICH_WORKERS",
    "SLACKCLI_MCP_RESPONSE_MODE",
)


def default_config_dir():
    """Return the config directory (``$SLACKCLI_CONFIG_DIR`` or ~/.config/slackcli)."""
    override = os.environ.get("SLACKCLI_CONFIG_DIR")
    if override:
        return os.path.abspath(os.path.expanduser(override))
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, "slackcli")


CONFIG_DIR = default_config_dir()
ENV_PATH = os.path.join(CONFIG_DIR, ".env")
WORKSPACES_PATH = os.path.join(CONFIG_DIR, "workspaces.json")


def load_env():
    """Read KEY=value pairs from the .env file, then let the process environment win."""
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    for key in _ENV_KEYS:
        if key in os.environ:
            env[key] = os.environ[key]
    return env


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"
CONTRACT_SCHEMA_VERSION = "1.0"

VALID_FORMATS = ("json", "pretty", "schema")
VALID_CONVERSATION_TYPES = {"public_channel", "private_channel", "mpim", "im"}
VALID_SEARCH_SORTS = {"score", "timestamp"}
VALID_SORT_DIRS = {"asc", "desc"}

# Browser-session requests imitate the web client; this is a compatibility
# shim for the remote, not an authentication control.
BROWSER_ORIGIN = "https://app.slack.com"
USER_AGENT = f"Mozilla/5.0 (compatible; SlackCLI/{VERSION})"

# ---------------------------------------------------------------------------
# Module-level state (loaded from .env / environment)
# ---------------------------------------------------------------------------

env = load_env()

API_BASE_URL = env.get("SLACKCLI_API_BASE_URL", "https://slack.com/api").rstrip("/")
HTTP_TIMEOUT_SECONDS = _env_int("SLACKCLI_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RESPONSE_BYTES = _env_int("SLACKCLI_HTTP_MAX_RESPONSE_BYTES", 50_000_000)
DOWNLOAD_CHUNK_BYTES = 64 * 1024
HTTP_LOG_ENABLED = _env_bool("SLACKCLI_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("SLACKCLI_HTTP_LOG_SAMPLE_RATE", 1.0)))
ENRICH_MAX_WORKERS = max(1, _env_int("SLACKCLI_ENRICH_WORKERS", 8))
MCP_RESPONSE_MODE = env.get("SLACKCLI_MCP_RESPONSE_MODE", "legacy")
if MCP_RESPONSE_MODE not in ("legacy", "envelope"):
    MCP_RESPONSE_MODE = "legacy"

# ---------------------------------------------------------------------------
# Runtime flags (set by cli.main from global flags)
# ---------------------------------------------------------------------------

RUNTIME_QUIET = False
RUNTIME_VERBOSE = False
