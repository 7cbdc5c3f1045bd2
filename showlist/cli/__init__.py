# =============================================================================
# showlist/cli/__init__.py - CLI Module Overview
# =============================================================================
#
# Command-line tools for operators who maintain the listings:
#
#   1. RUN   (etl.py run)
#      Runs the full ETL over the events and venues files and writes the
#      JSON dataset plus manifest.
#
#   2. MERGE (etl.py merge)
#      Appends a new listings drop to the events source file and adds
#      placeholder lines for unknown venues to the venues source file.
#
# Architecture Notes:
#   - argparse, like the rest of the project's tooling (no Click/Typer).
#   - Each command builds its own services; there is no DI container
#     because CLI runs are one-shot.
# =============================================================================

"""CLI tools for the showlist ETL.

- ``python -m showlist.cli run`` -- build the dataset
- ``python -m showlist.cli merge NEW_FILE`` -- append new listings to the sources
"""
