"""Allow running referendum with ``python -m referendum``."""

from referendum.cli import main

main()
