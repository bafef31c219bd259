"""Allow ``python -m slackcli``."""

from slackcli.cli import main

main()
