"""Allow ``python -m slackcli.mcp_server``."""

from slackcli.mcp_server import main

main()
