"""Allow ``python -m kblifecycle``."""

from kblifecycle.cli import main

main()
