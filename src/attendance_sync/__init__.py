"""Monthly attendance sync.

Modules:
    months          Target month and its date arithmetic
    workdays        Calendar events -> work-day dates
    sheets_sync     Monthly sheet clone/update/export
    doc_template    Template copy, placeholder fill, export
    google_services Calendar/Sheets/Drive/Docs adapters
    auth            OAuth token cache and consent flow
    config          config.json, constants, logging helpers
    cli             Command line driver
"""

__version__ = "1.0.0"
