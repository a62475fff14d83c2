"""Run the ratcalc CLI.

Usage:
    python -m ratcalc eval "12 + 34 * 45"
    python -m ratcalc repl
"""

from ratcalc.cli.main import cli


if __name__ == "__main__":
    cli()
