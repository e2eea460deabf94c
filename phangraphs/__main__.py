"""Allow running as `python -m phangraphs`."""

from phangraphs.cli import main

main()
