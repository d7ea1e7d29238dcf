#!/usr/bin/env python3
"""Console-script wrappers for the trends bot.

After an editable install (``pip install -e .``) the following commands become
available system-wide:

* ``trends-bot`` – run the bot (mention listener + digest scheduler)

The functions below simply forward to ``scripts/run_bot.py`` so there is no
business-logic duplication.
"""
from __future__ import annotations

import sys

from scripts.run_bot import main


def _exec(argv: list[str]) -> None:
    """Run the bot with *argv* and propagate its exit status."""
    sys.exit(main(argv))


# ---------------------------------------------------------------------------
# Entry-points
# ---------------------------------------------------------------------------

def run() -> None:
    """Run the bot, forwarding any command-line flags."""
    _exec(sys.argv[1:])

