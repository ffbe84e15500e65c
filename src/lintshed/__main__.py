# SPDX-License-Identifier: MIT
"""Package entry point — run lintshed via `python -m lintshed`."""

from lintshed.cli import run

if __name__ == "__main__":
    run()
