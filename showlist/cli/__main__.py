# =============================================================================
# showlist/cli/__main__.py - Package Entry Point
# =============================================================================
#
# Enables running the CLI package itself as a module:
#     python -m showlist.cli run
#     python -m showlist.cli merge new-listings.txt
# =============================================================================

"""Allow ``python -m showlist.cli`` execution."""

from showlist.cli.etl import main

main()
