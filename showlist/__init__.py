"""showlist -- batch ETL for hand-written live-music listings.

Turns a free-text events file and a venues file into a deduplicated,
indexed, month-chunked JSON dataset with checksums and a manifest.
"""

__version__ = "0.1.0"
